"""Bucket commit timestamps by hour, weekday, time slot and calendar day."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from .percentages import apportion

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

# (key, label, first hour, last hour exclusive)
TIME_SLOTS = (
    ("morning", "Morning (6-12)", 6, 12),
    ("afternoon", "Afternoon (12-18)", 12, 18),
    ("evening", "Evening (18-24)", 18, 24),
    ("late_night", "Late Night (0-6)", 0, 6),
)

DEFAULT_PEAK_HOUR = 14
DEFAULT_FAVORITE_DAY = 2
DEFAULT_TIME_SLOT = "afternoon"


def day_index(ts: datetime) -> int:
    """0 = Sunday ... 6 = Saturday."""
    return ts.isoweekday() % 7


def time_slot(hour: int) -> str:
    for key, _label, start, end in TIME_SLOTS:
        if start <= hour < end:
            return key
    raise ValueError(f"hour out of range: {hour}")


def _first_max(counts: list[int], default: int) -> int:
    if not any(counts):
        return default
    return max(range(len(counts)), key=lambda i: (counts[i], -i))


@dataclass
class TemporalProfile:
    total: int = 0
    hour_counts: list[int] = field(default_factory=lambda: [0] * 24)
    day_counts: list[int] = field(default_factory=lambda: [0] * 7)
    slot_counts: dict[str, int] = field(
        default_factory=lambda: {key: 0 for key, *_ in TIME_SLOTS}
    )
    daily_counts: dict[str, int] = field(default_factory=dict)

    @property
    def peak_hour(self) -> int:
        return _first_max(self.hour_counts, DEFAULT_PEAK_HOUR)

    @property
    def favorite_day(self) -> int:
        return _first_max(self.day_counts, DEFAULT_FAVORITE_DAY)

    @property
    def favorite_day_name(self) -> str:
        return DAY_NAMES[self.favorite_day]

    @property
    def most_active_slot(self) -> str:
        if not self.total:
            return DEFAULT_TIME_SLOT
        keys = [key for key, *_ in TIME_SLOTS]
        counts = [self.slot_counts[key] for key in keys]
        return keys[_first_max(counts, 0)]

    def slot_percentages(self) -> dict[str, int]:
        keys = [key for key, *_ in TIME_SLOTS]
        shares = apportion([self.slot_counts[key] for key in keys])
        return dict(zip(keys, shares))

    def day_percentages(self) -> list[int]:
        return apportion(self.day_counts)

    @property
    def weekend_commits(self) -> int:
        return self.day_counts[0] + self.day_counts[6]

    @property
    def weekend_ratio(self) -> float:
        return self.weekend_commits / self.total if self.total else 0.0


def reduce_timestamps(timestamps: Iterable[datetime]) -> TemporalProfile:
    profile = TemporalProfile()
    for ts in timestamps:
        profile.total += 1
        profile.hour_counts[ts.hour] += 1
        profile.day_counts[day_index(ts)] += 1
        profile.slot_counts[time_slot(ts.hour)] += 1
        day = ts.date().isoformat()
        profile.daily_counts[day] = profile.daily_counts.get(day, 0) + 1
    return profile
