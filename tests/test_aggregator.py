"""Tests for the aggregator module."""

from __future__ import annotations

from unittest.mock import AsyncMock

import httpx
import pytest

from commit_habits.aggregator import analyze, build_metrics
from commit_habits.config import Settings
from commit_habits.errors import UpstreamError, UserNotFoundError, UsernameRequiredError
from commit_habits.github.client import GitHubAPIError, GitHubClient
from commit_habits.models import RawCommit, RawRepository

from .conftest import NOW, commit_payload, repo_payload


@pytest.fixture
def mock_client():
    client = AsyncMock(spec=GitHubClient)
    client.get_user.return_value = {
        "login": "alice",
        "public_repos": 2,
        "followers": 7,
        "following": 3,
        "created_at": "2015-01-01T00:00:00Z",
        "bio": "hi",
        "location": "Earth",
    }
    client.list_repos.return_value = [
        repo_payload("repo1", language="Python"),
        repo_payload("repo2", language="Go"),
    ]

    async def commits_side_effect(full_name, *, author, page, per_page):
        if page > 1:
            return []
        return [
            commit_payload("2024-06-12T10:00:00Z", "add feature"),
            commit_payload("2024-06-13T10:00:00Z", "fix bug"),
        ]

    client.list_commits.side_effect = commits_side_effect
    return client


def _repo(name: str, **kwargs) -> RawRepository:
    return RawRepository.from_api(repo_payload(name, **kwargs))


def _commits(repo: str, *dates: str, message: str = "update") -> list[RawCommit]:
    return [RawCommit.from_api(commit_payload(d, message), repo) for d in dates]


@pytest.mark.asyncio
async def test_analyze(mock_client, no_wait):
    bundle = await analyze(mock_client, "alice", wait=no_wait, now=NOW)

    assert bundle.username == "alice"
    # 2 commits per repo * 2 repos = 4
    assert bundle.total_commits == 4
    assert bundle.profile.followers == 7
    assert bundle.profile.location == "Earth"
    assert bundle.top_repo == "repo1"
    assert bundle.repo_commits == {"repo1": 2, "repo2": 2}
    assert [lang.language for lang in bundle.language_breakdown] == ["Python", "Go"]
    assert bundle.roast == ""


@pytest.mark.asyncio
async def test_analyze_requires_username(mock_client):
    with pytest.raises(UsernameRequiredError):
        await analyze(mock_client, "")
    mock_client.get_user.assert_not_called()


@pytest.mark.asyncio
async def test_analyze_user_not_found(mock_client):
    mock_client.get_user.side_effect = GitHubAPIError(404, "/users/ghost")
    with pytest.raises(UserNotFoundError) as info:
        await analyze(mock_client, "ghost")
    assert info.value.status == 404
    mock_client.list_repos.assert_not_called()


@pytest.mark.asyncio
async def test_analyze_profile_upstream_error(mock_client):
    mock_client.get_user.side_effect = GitHubAPIError(502, "/users/alice")
    with pytest.raises(UpstreamError) as info:
        await analyze(mock_client, "alice")
    assert info.value.upstream_status == 502
    assert info.value.status == 500


@pytest.mark.asyncio
async def test_analyze_listing_transport_error(mock_client):
    mock_client.list_repos.side_effect = httpx.ConnectError("boom")
    with pytest.raises(UpstreamError):
        await analyze(mock_client, "alice")
    mock_client.list_commits.assert_not_called()


@pytest.mark.asyncio
async def test_analyze_absorbs_failed_repository(mock_client, no_wait):
    """A failing repository contributes zero commits and no top-level error."""

    async def commits_side_effect(full_name, *, author, page, per_page):
        if full_name == "alice/repo2":
            raise GitHubAPIError(500, full_name)
        if page > 1:
            return []
        return [commit_payload(f"2024-06-0{i}T10:00:00Z") for i in range(1, 6)]

    mock_client.list_commits.side_effect = commits_side_effect
    bundle = await analyze(mock_client, "alice", wait=no_wait, now=NOW)
    assert bundle.total_commits == 5


@pytest.mark.asyncio
async def test_analyze_absorbs_malformed_commit_body(mock_client, no_wait):
    async def commits_side_effect(full_name, *, author, page, per_page):
        if full_name == "alice/repo2":
            return {"message": "Git Repository is empty."}
        if page > 1:
            return []
        return [commit_payload(f"2024-06-0{i}T10:00:00Z") for i in range(1, 6)]

    mock_client.list_commits.side_effect = commits_side_effect
    bundle = await analyze(mock_client, "alice", wait=no_wait, now=NOW)
    assert bundle.total_commits == 5
    assert bundle.repo_commits == {"repo1": 5}


@pytest.mark.asyncio
async def test_analyze_malformed_listing_is_upstream_error(mock_client):
    mock_client.list_repos.return_value = {"message": "Moved Permanently"}
    with pytest.raises(UpstreamError):
        await analyze(mock_client, "alice")
    mock_client.list_commits.assert_not_called()


@pytest.mark.asyncio
async def test_analyze_malformed_repository_is_upstream_error(mock_client):
    mock_client.list_repos.return_value = [repo_payload("repo1"), {"id": 7}]
    with pytest.raises(UpstreamError):
        await analyze(mock_client, "alice")
    mock_client.list_commits.assert_not_called()


@pytest.mark.asyncio
async def test_analyze_uses_roaster(mock_client, no_wait):
    roaster = AsyncMock()
    roaster.generate.return_value = "You code like a raccoon."
    bundle = await analyze(mock_client, "alice", roaster=roaster, wait=no_wait, now=NOW)
    assert bundle.roast == "You code like a raccoon."
    prompt = roaster.generate.call_args.args[0]
    assert "4 commits" in prompt


@pytest.mark.asyncio
async def test_analyze_survives_roaster_failure(mock_client, no_wait):
    roaster = AsyncMock()
    roaster.generate.side_effect = httpx.ReadTimeout("slow")
    bundle = await analyze(mock_client, "alice", roaster=roaster, wait=no_wait, now=NOW)
    assert bundle.roast == ""
    assert bundle.total_commits == 4


@pytest.mark.asyncio
async def test_analyze_passes_crawl_settings(mock_client, no_wait):
    settings = Settings(page_size=30, max_pages=1)
    await analyze(mock_client, "alice", settings, wait=no_wait, now=NOW)
    for call in mock_client.list_commits.call_args_list:
        assert call.kwargs["per_page"] == 30
        assert call.kwargs["page"] == 1


def test_build_metrics_no_repositories():
    bundle = build_metrics("alice", [], [], now=NOW)
    assert bundle.total_commits == 0
    assert bundle.abandoned_projects == 0
    assert bundle.language_breakdown == []
    assert bundle.top_languages == []
    assert bundle.weekend_ratio == 0.0
    assert bundle.late_night_percentage == 0
    assert bundle.commit_consistency == 0
    assert all(slot.percentage == 0 for slot in bundle.chart_data.time_slots)
    assert bundle.day_percentages == [0] * 7
    assert all(day.percentage == 0 for day in bundle.chart_data.daily)
    assert bundle.peak_hour == 14
    assert bundle.favorite_day == "Tuesday"
    assert bundle.top_repo == "No recent activity"
    assert bundle.code_habits.avg_repo_size == 0.0


def test_build_metrics_three_consecutive_mornings():
    repos = [_repo("solo")]
    commits = _commits(
        "solo", "2024-06-12T10:00:00Z", "2024-06-13T10:00:00Z", "2024-06-14T10:00:00Z"
    )
    bundle = build_metrics("alice", repos, commits, now=NOW)

    assert bundle.total_commits == 3
    assert bundle.longest_streak == 3
    assert bundle.current_streak == 3
    assert bundle.peak_hour == 10
    morning = bundle.chart_data.time_slots[0]
    assert morning.slot.startswith("Morning")
    assert morning.percentage == 100
    assert bundle.most_active_time_slot == "morning"


def test_build_metrics_ignores_other_authors():
    repos = [_repo("solo")]
    commits = [
        RawCommit.from_api(commit_payload("2024-06-12T10:00:00Z"), "solo"),
        RawCommit.from_api(
            commit_payload("2024-06-12T11:00:00Z", login="bob", email="bob@example.com"), "solo"
        ),
    ]
    bundle = build_metrics("alice", repos, commits, now=NOW)
    assert bundle.total_commits == 1


def test_build_metrics_percentages_sum_to_100():
    repos = [_repo("r")]
    commits = _commits(
        "r",
        "2024-06-10T07:00:00Z",
        "2024-06-10T08:00:00Z",
        "2024-06-10T09:00:00Z",
        "2024-06-10T13:00:00Z",
        "2024-06-10T14:00:00Z",
        "2024-06-10T15:00:00Z",
        "2024-06-10T19:00:00Z",
        "2024-06-10T02:00:00Z",
    )
    bundle = build_metrics("alice", repos, commits, now=NOW)
    slots = bundle.chart_data.time_slots
    assert sum(s.percentage for s in slots) == 100
    assert all(0 <= s.percentage <= 100 for s in slots)
    assert bundle.late_night_percentage == slots[3].percentage


def test_build_metrics_weekend_ratio():
    repos = [_repo("r")]
    # Saturday, Sunday, Monday, Tuesday
    commits = _commits(
        "r",
        "2024-06-08T10:00:00Z",
        "2024-06-09T10:00:00Z",
        "2024-06-10T10:00:00Z",
        "2024-06-11T10:00:00Z",
    )
    bundle = build_metrics("alice", repos, commits, now=NOW)
    assert bundle.weekend_ratio == 0.5
    assert bundle.code_habits.weekend_commits == 2
    assert bundle.code_habits.weekday_commits == 2
    assert bundle.day_percentages == [25, 25, 25, 0, 0, 0, 25]
    assert sum(bundle.day_percentages) == 100


def test_build_metrics_abandoned_repository():
    repos = [
        _repo("stale", size=120, updated_at="2023-11-15T00:00:00Z"),
        _repo("fresh", size=120, updated_at="2024-05-15T00:00:00Z"),
        _repo("empty", size=0, updated_at="2020-01-01T00:00:00Z"),
    ]
    bundle = build_metrics("alice", repos, [], now=NOW)
    assert bundle.abandoned_projects == 1
    assert bundle.abandoned_repos == ["stale"]


def test_build_metrics_is_idempotent():
    repos = [_repo("a", language="Rust"), _repo("b", language="Go")]
    commits = _commits("a", "2024-06-01T09:00:00Z", "2024-06-03T22:00:00Z", message="wip")
    commits += _commits("b", "2024-06-03T23:00:00Z", message="fix typo")
    first = build_metrics("alice", repos, commits, now=NOW)
    second = build_metrics("alice", repos, commits, now=NOW)
    assert first == second


def test_build_metrics_chart_projections():
    repos = [_repo("r")]
    commits = _commits("r", "2024-06-10T10:00:00Z")
    bundle = build_metrics("alice", repos, commits, now=NOW)
    assert len(bundle.chart_data.hourly) == 24
    assert bundle.chart_data.hourly[10].hour == "10:00"
    assert bundle.chart_data.hourly[10].commits == 1
    assert [d.day for d in bundle.chart_data.daily] == [
        "Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat",
    ]
    assert bundle.chart_data.daily[1].commits == 1
    assert bundle.chart_data.daily[1].percentage == 100
    assert len(bundle.chart_data.time_slots) == 4
    assert bundle.chart_data.languages == bundle.language_breakdown
