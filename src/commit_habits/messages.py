"""Commit message style, commit velocity and recent productivity trend."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta

WIP_MARKERS = ("wip", "work in progress")
FIX_MARKERS = ("fix", "bug")
TYPO_MARKERS = ("typo", "oops")

# (label, markers, share of messages that must be exceeded), highest priority first
MESSAGE_STYLES = (
    ("WIP enthusiast", WIP_MARKERS, 0.2),
    ("Bug squasher", FIX_MARKERS, 0.3),
    ("Typo fixer", TYPO_MARKERS, 0.1),
)
DEFAULT_MESSAGE_STYLE = "Clean committer"

TREND_WINDOW = timedelta(days=30)


def _flagged(messages: Sequence[str], markers: tuple[str, ...]) -> int:
    return sum(1 for msg in messages if any(m in msg for m in markers))


def message_style(messages: Iterable[str]) -> str:
    lowered = [msg.lower() for msg in messages]
    total = len(lowered)
    for label, markers, threshold in MESSAGE_STYLES:
        if _flagged(lowered, markers) > total * threshold:
            return label
    return DEFAULT_MESSAGE_STYLE


def commit_velocity(total_commits: int, message_count: int) -> str:
    ratio = message_count / total_commits if total_commits else 0.0
    if ratio > 3:
        return "Large feature drops"
    if ratio > 1.5:
        return "Moderate changes"
    if total_commits > 50:
        return "Frequent small changes"
    if total_commits > 10:
        return "Occasional commits"
    return "Rare contributor"


def productivity_trend(timestamps: Sequence[datetime], now: datetime) -> str:
    recent = sum(1 for ts in timestamps if now - ts < TREND_WINDOW)
    total = len(timestamps)
    if recent > total * 0.5:
        return "increasing"
    if recent < total * 0.2:
        return "decreasing"
    return "stable"
