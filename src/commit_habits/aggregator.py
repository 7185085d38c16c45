"""Assemble a MetricsBundle from a user's repositories and commits."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timedelta, timezone, tzinfo

from .config import Settings, WaitPolicy
from .crawler import crawl_commits
from .errors import UpstreamError, UserNotFoundError, UsernameRequiredError
from .github.client import GitHubAPIError, GitHubClient
from .identity import AuthorMatcher, UsernameMatcher, attribute_commits
from .languages import language_breakdown, language_counts
from .lifecycle import count_active, find_abandoned
from .messages import commit_velocity, message_style, productivity_trend
from .models import (
    AttributedCommit,
    ChartData,
    CodeHabits,
    DailyPoint,
    HourlyPoint,
    MetricsBundle,
    RawCommit,
    RawRepository,
    TimeSlotShare,
    UserProfile,
)
from .streaks import compute_streaks
from .summary import RoastGenerator, generate_roast
from .temporal import TIME_SLOTS, TemporalProfile, day_index, reduce_timestamps

logger = logging.getLogger(__name__)

_SHORT_DAYS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


def _top_repo(commits: Sequence[AttributedCommit]) -> tuple[str, dict[str, int]]:
    per_repo: dict[str, int] = {}
    for commit in commits:
        per_repo[commit.repo_name] = per_repo.get(commit.repo_name, 0) + 1
    if not per_repo:
        return "No recent activity", per_repo
    best = max(per_repo.values())
    return next(name for name, count in per_repo.items() if count == best), per_repo


def _code_habits(
    commits: Sequence[AttributedCommit],
    repos: Sequence[RawRepository],
    now: datetime,
) -> CodeHabits:
    stamps = [c.timestamp for c in commits]

    def within(days: int) -> int:
        return sum(1 for ts in stamps if now - ts < timedelta(days=days))

    return CodeHabits(
        commits_last_day=within(1),
        commits_last_week=within(7),
        commits_last_month=within(30),
        weekday_commits=sum(1 for ts in stamps if 1 <= day_index(ts) <= 5),
        weekend_commits=sum(1 for ts in stamps if day_index(ts) in (0, 6)),
        business_hours_commits=sum(1 for ts in stamps if 9 <= ts.hour <= 17),
        after_hours_commits=sum(1 for ts in stamps if ts.hour < 9 or ts.hour > 17),
        active_projects=count_active(repos, now),
        language_diversity=len(language_counts(repos)),
        avg_repo_size=sum(r.size for r in repos) / len(repos) if repos else 0.0,
    )


def _chart_data(temporal: TemporalProfile, bundle: MetricsBundle) -> ChartData:
    slot_pcts = temporal.slot_percentages()
    day_pcts = temporal.day_percentages()
    return ChartData(
        hourly=[HourlyPoint(f"{h}:00", temporal.hour_counts[h]) for h in range(24)],
        daily=[
            DailyPoint(day, temporal.day_counts[i], day_pcts[i])
            for i, day in enumerate(_SHORT_DAYS)
        ],
        time_slots=[
            TimeSlotShare(label, temporal.slot_counts[key], slot_pcts[key])
            for key, label, *_ in TIME_SLOTS
        ],
        languages=list(bundle.language_breakdown),
    )


def build_metrics(
    username: str,
    repos: Sequence[RawRepository],
    raw_commits: Sequence[RawCommit],
    *,
    now: datetime,
    profile: UserProfile | None = None,
    matcher: AuthorMatcher | None = None,
    tz: tzinfo | None = None,
) -> MetricsBundle:
    """Reduce one run's snapshot of repositories and commits to metrics.

    Pure: the same snapshot and ``now`` always give the same bundle.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    if tz is not None:
        now = now.astimezone(tz)
    matcher = matcher or UsernameMatcher(username)
    commits = attribute_commits(raw_commits, matcher, [r.name for r in repos], tz)
    stamps = [c.timestamp for c in commits]

    temporal = reduce_timestamps(stamps)
    streaks = compute_streaks(temporal.daily_counts, now.date())
    abandoned = find_abandoned(repos, commits, now)
    breakdown = language_breakdown(repos)
    top_repo, per_repo = _top_repo(commits)
    total = len(commits)

    bundle = MetricsBundle(
        username=username,
        total_commits=total,
        current_streak=streaks.current,
        longest_streak=streaks.longest,
        weekend_ratio=temporal.weekend_ratio,
        top_repo=top_repo,
        peak_hour=temporal.peak_hour,
        favorite_day=temporal.favorite_day_name,
        most_active_time_slot=temporal.most_active_slot,
        late_night_percentage=temporal.slot_percentages()["late_night"],
        commit_consistency=streaks.consistency,
        commit_message_style=message_style(c.message for c in commits),
        commit_style=commit_velocity(total, len(commits)),
        productivity_trend=productivity_trend(stamps, now),
        abandoned_projects=len(abandoned),
        abandoned_repos=abandoned,
        top_languages=[share.language for share in breakdown],
        language_breakdown=breakdown,
        hour_counts=list(temporal.hour_counts),
        day_counts=list(temporal.day_counts),
        day_percentages=temporal.day_percentages(),
        repo_commits=per_repo,
        profile=profile,
        code_habits=_code_habits(commits, repos, now),
    )
    bundle.chart_data = _chart_data(temporal, bundle)
    if stamps:
        logger.debug("Commit date range: %s .. %s", min(stamps).date(), max(stamps).date())
    return bundle


async def analyze(
    client: GitHubClient,
    username: str,
    settings: Settings | None = None,
    *,
    roaster: RoastGenerator | None = None,
    matcher: AuthorMatcher | None = None,
    wait: WaitPolicy | None = None,
    now: datetime | None = None,
) -> MetricsBundle:
    """Fetch ``username``'s public history and compute its metrics.

    Raises:
        UsernameRequiredError: ``username`` is empty.
        UserNotFoundError: GitHub has no such user.
        UpstreamError: the profile or repository listing failed.
    """
    if not username:
        raise UsernameRequiredError()
    settings = settings or Settings()

    try:
        user = await client.get_user(username)
    except GitHubAPIError as exc:
        if exc.status_code == 404:
            raise UserNotFoundError(username) from exc
        raise UpstreamError(f"GitHub API error: {exc.status_code}", exc.status_code) from exc
    except Exception as exc:
        raise UpstreamError(f"GitHub API request failed: {exc}") from exc

    try:
        repo_payload = await client.list_repos(username)
    except GitHubAPIError as exc:
        raise UpstreamError(f"GitHub API error: {exc.status_code}", exc.status_code) from exc
    except Exception as exc:
        raise UpstreamError(f"GitHub API request failed: {exc}") from exc

    if not isinstance(repo_payload, list):
        raise UpstreamError("GitHub API returned an unexpected repository listing")
    try:
        repos = [RawRepository.from_api(item) for item in repo_payload]
    except (TypeError, KeyError, AttributeError) as exc:
        raise UpstreamError(f"GitHub API returned a malformed repository: {exc}") from exc
    profile = UserProfile.from_api(user, username)
    logger.info("Fetching commits from %d repositories", len(repos))

    raw_commits = await crawl_commits(
        client,
        repos,
        username,
        page_size=settings.page_size,
        max_pages=settings.max_pages,
        wait=wait or settings.wait_policy,
    )
    bundle = build_metrics(
        username,
        repos,
        raw_commits,
        now=now or datetime.now(timezone.utc),
        profile=profile,
        matcher=matcher,
        tz=settings.time_zone,
    )
    logger.info("Total attributed commits: %d", bundle.total_commits)
    bundle.roast = await generate_roast(bundle, roaster)
    return bundle
