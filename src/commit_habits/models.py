"""Data models for commit-habits."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


def parse_timestamp(value: str) -> datetime:
    """Parse a GitHub ISO-8601 timestamp such as ``2024-06-01T10:00:00Z``."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


@dataclass(frozen=True)
class RawCommit:
    repo_name: str
    login: str | None
    email: str | None
    date: str
    message: str

    @classmethod
    def from_api(cls, payload: dict, repo_name: str) -> RawCommit:
        author = payload.get("author") or {}
        commit = payload.get("commit") or {}
        commit_author = commit.get("author") or {}
        return cls(
            repo_name=repo_name,
            login=author.get("login"),
            email=commit_author.get("email"),
            date=commit_author.get("date") or "",
            message=commit.get("message") or "",
        )


@dataclass(frozen=True)
class RawRepository:
    name: str
    full_name: str
    fork: bool = False
    size: int = 0
    language: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_api(cls, payload: dict) -> RawRepository:
        return cls(
            name=payload["name"],
            full_name=payload.get("full_name") or payload["name"],
            fork=bool(payload.get("fork")),
            size=payload.get("size") or 0,
            language=payload.get("language") or None,
            updated_at=payload.get("updated_at"),
        )

    @property
    def is_crawlable(self) -> bool:
        return not self.fork and self.size > 0


@dataclass(frozen=True)
class AttributedCommit:
    repo_name: str
    timestamp: datetime
    message: str


@dataclass
class UserProfile:
    login: str
    public_repos: int = 0
    followers: int = 0
    following: int = 0
    created_at: str | None = None
    bio: str | None = None
    location: str | None = None

    @classmethod
    def from_api(cls, payload: dict, username: str) -> UserProfile:
        return cls(
            login=payload.get("login") or username,
            public_repos=payload.get("public_repos") or 0,
            followers=payload.get("followers") or 0,
            following=payload.get("following") or 0,
            created_at=payload.get("created_at"),
            bio=payload.get("bio"),
            location=payload.get("location"),
        )


@dataclass
class LanguageShare:
    language: str
    percentage: int
    repository_count: int


@dataclass
class TimeSlotShare:
    slot: str
    commits: int
    percentage: int


@dataclass
class HourlyPoint:
    hour: str
    commits: int


@dataclass
class DailyPoint:
    day: str
    commits: int
    percentage: int = 0


@dataclass
class ChartData:
    hourly: list[HourlyPoint] = field(default_factory=list)
    daily: list[DailyPoint] = field(default_factory=list)
    time_slots: list[TimeSlotShare] = field(default_factory=list)
    languages: list[LanguageShare] = field(default_factory=list)


@dataclass
class CodeHabits:
    """Recency, work-life balance and project diversity counters."""

    commits_last_day: int = 0
    commits_last_week: int = 0
    commits_last_month: int = 0
    weekday_commits: int = 0
    weekend_commits: int = 0
    business_hours_commits: int = 0
    after_hours_commits: int = 0
    active_projects: int = 0
    language_diversity: int = 0
    avg_repo_size: float = 0.0


@dataclass
class MetricsBundle:
    username: str
    total_commits: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    weekend_ratio: float = 0.0
    top_repo: str = "No recent activity"
    peak_hour: int = 14
    favorite_day: str = "Tuesday"
    most_active_time_slot: str = "afternoon"
    late_night_percentage: int = 0
    commit_consistency: int = 0
    commit_message_style: str = "Clean committer"
    commit_style: str = "Rare contributor"
    productivity_trend: str = "stable"
    abandoned_projects: int = 0
    abandoned_repos: list[str] = field(default_factory=list)
    top_languages: list[str] = field(default_factory=list)
    language_breakdown: list[LanguageShare] = field(default_factory=list)
    hour_counts: list[int] = field(default_factory=lambda: [0] * 24)
    day_counts: list[int] = field(default_factory=lambda: [0] * 7)
    day_percentages: list[int] = field(default_factory=lambda: [0] * 7)
    repo_commits: dict[str, int] = field(default_factory=dict)
    profile: UserProfile | None = None
    code_habits: CodeHabits = field(default_factory=CodeHabits)
    chart_data: ChartData = field(default_factory=ChartData)
    roast: str = ""
