"""Consecutive-day streaks and the steadiness of daily commit volume."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date

from .percentages import percent

LIVE_STREAK_DAYS = 2
MIN_DAYS_FOR_VARIANCE = 5
CONSISTENCY_TOLERANCE = 0.5
FALLBACK_WINDOW_DAYS = 30


@dataclass(frozen=True)
class StreakStats:
    longest: int = 0
    current: int = 0
    last_active: date | None = None
    consistency: int = 0


def longest_streak(days: Iterable[date]) -> int:
    ordered = sorted(set(days))
    if not ordered:
        return 0
    best = 0
    run = 1
    for prev, curr in zip(ordered, ordered[1:]):
        if (curr - prev).days == 1:
            run += 1
        else:
            best = max(best, run)
            run = 1
    return max(best, run)


def consistency_score(daily_counts: Iterable[int]) -> int:
    counts = list(daily_counts)
    if not counts:
        return 0
    if len(counts) <= MIN_DAYS_FOR_VARIANCE:
        return percent(len(counts), FALLBACK_WINDOW_DAYS)
    mean = sum(counts) / len(counts)
    steady = sum(1 for c in counts if abs(c - mean) <= mean * CONSISTENCY_TOLERANCE)
    return percent(steady, len(counts))


def compute_streaks(daily_counts: Mapping[str, int], today: date) -> StreakStats:
    """Streaks from a ``{"YYYY-MM-DD": commits}`` map, judged against ``today``.

    The current streak is the longest streak while the last active day is at
    most two days old, and 0 once it is older.
    """
    days = sorted(date.fromisoformat(day) for day in daily_counts)
    if not days:
        return StreakStats()
    longest = longest_streak(days)
    last_active = days[-1]
    live = (today - last_active).days <= LIVE_STREAK_DAYS
    return StreakStats(
        longest=longest,
        current=longest if live else 0,
        last_active=last_active,
        consistency=consistency_score(daily_counts.values()),
    )
