"""Decide which fetched commits belong to the analyzed user."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable
from datetime import tzinfo
from typing import Protocol

from .models import AttributedCommit, RawCommit, parse_timestamp

logger = logging.getLogger(__name__)


class AuthorMatcher(Protocol):
    def matches(self, commit: RawCommit) -> bool: ...


@dataclasses.dataclass(frozen=True)
class UsernameMatcher:
    """Login equality, or the username appearing anywhere in the commit email.

    Best effort: a short username can match unrelated emails, and a commit
    made under an unrelated local git identity is missed.
    """

    username: str

    def matches(self, commit: RawCommit) -> bool:
        if commit.login is not None and commit.login == self.username:
            return True
        return bool(commit.email) and self.username in commit.email


def attribute_commits(
    commits: Iterable[RawCommit],
    matcher: AuthorMatcher,
    repo_names: Iterable[str],
    tz: tzinfo | None = None,
) -> list[AttributedCommit]:
    known = set(repo_names)
    attributed: list[AttributedCommit] = []
    for commit in commits:
        if not matcher.matches(commit):
            continue
        if commit.repo_name not in known:
            logger.debug("Dropping commit from unknown repository %s", commit.repo_name)
            continue
        try:
            ts = parse_timestamp(commit.date)
        except ValueError:
            logger.debug("Dropping commit with unparseable date %r", commit.date)
            continue
        if tz is not None:
            ts = ts.astimezone(tz)
        attributed.append(AttributedCommit(commit.repo_name, ts, commit.message))
    return attributed
