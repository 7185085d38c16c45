"""Shared fixtures and payload builders."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from commit_habits.config import WaitPolicy

# A Saturday.
NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


def commit_payload(
    date: str,
    message: str = "update",
    login: str | None = "alice",
    email: str | None = "alice@example.com",
) -> dict:
    return {
        "author": {"login": login} if login is not None else None,
        "commit": {"author": {"email": email, "date": date}, "message": message},
    }


def repo_payload(
    name: str,
    *,
    fork: bool = False,
    size: int = 100,
    language: str | None = "Python",
    updated_at: str = "2024-06-01T00:00:00Z",
) -> dict:
    return {
        "name": name,
        "full_name": f"alice/{name}",
        "fork": fork,
        "size": size,
        "language": language,
        "updated_at": updated_at,
    }


class RecordingSleep:
    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def sleeper() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def no_wait(sleeper) -> WaitPolicy:
    return WaitPolicy(page_delay=0.05, repo_delay=0.2, sleep=sleeper)
