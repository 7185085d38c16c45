"""Errors surfaced to the caller of an analysis."""

from __future__ import annotations


class AnalysisError(Exception):
    """A top-level analysis failure with a status outcome and a user hint."""

    status = 500
    hint = "Make sure the username exists and try again."

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        if hint is not None:
            self.hint = hint


class UsernameRequiredError(AnalysisError):
    status = 400
    hint = "Pass a GitHub username to analyze."

    def __init__(self) -> None:
        super().__init__("Username is required")


class UserNotFoundError(AnalysisError):
    status = 404
    hint = "Verify the username; it is case sensitive."

    def __init__(self, username: str) -> None:
        super().__init__(f"User not found: {username}")
        self.username = username


class UpstreamError(AnalysisError):
    status = 500

    def __init__(self, message: str, upstream_status: int | None = None) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status
