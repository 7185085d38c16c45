"""Flag repositories that have gone stale."""

from __future__ import annotations

import calendar
from collections.abc import Iterable
from datetime import datetime

from .models import AttributedCommit, RawRepository, parse_timestamp

STALE_UPDATE_MONTHS = 6
STALE_COMMIT_MONTHS = 3


def months_before(moment: datetime, months: int) -> datetime:
    """Shift ``moment`` back by calendar months, clamping the day of month."""
    index = moment.year * 12 + moment.month - 1 - months
    year, month = divmod(index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def is_abandoned(
    repo: RawRepository,
    last_commit: datetime | None,
    now: datetime,
) -> bool:
    """Non-empty, not updated in six months, no own commit in three."""
    if repo.size <= 0 or not repo.updated_at:
        return False
    if parse_timestamp(repo.updated_at) >= months_before(now, STALE_UPDATE_MONTHS):
        return False
    return last_commit is None or last_commit <= months_before(now, STALE_COMMIT_MONTHS)


def find_abandoned(
    repos: Iterable[RawRepository],
    commits: Iterable[AttributedCommit],
    now: datetime,
) -> list[str]:
    latest: dict[str, datetime] = {}
    for commit in commits:
        seen = latest.get(commit.repo_name)
        if seen is None or commit.timestamp > seen:
            latest[commit.repo_name] = commit.timestamp
    return [repo.name for repo in repos if is_abandoned(repo, latest.get(repo.name), now)]


def count_active(repos: Iterable[RawRepository], now: datetime) -> int:
    """Repositories whose metadata changed within the last three months."""
    cutoff = months_before(now, STALE_COMMIT_MONTHS)
    return sum(
        1 for repo in repos if repo.updated_at and parse_timestamp(repo.updated_at) > cutoff
    )
