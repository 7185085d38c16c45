"""Async client for the handful of GitHub REST endpoints the engine reads."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .. import __version__
from ..config import Settings
from .rate_limit import RateLimitMonitor

logger = logging.getLogger(__name__)


class GitHubAPIError(Exception):
    """A non-success response from the GitHub API."""

    def __init__(self, status_code: int, url: str) -> None:
        super().__init__(f"GitHub API error {status_code} for {url}")
        self.status_code = status_code
        self.url = url


class GitHubClient:
    """Thin wrapper over :class:`httpx.AsyncClient`.

    Use as an async context manager::

        async with GitHubClient(settings) as client:
            user = await client.get_user("octocat")
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        rate_limit: RateLimitMonitor | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.rate_limit = rate_limit or RateLimitMonitor()
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": f"commit-habits/{__version__}",
        }
        if self.settings.github_token:
            headers["Authorization"] = f"token {self.settings.github_token}"
        self._http = httpx.AsyncClient(
            base_url=self.settings.api_url,
            headers=headers,
            timeout=self.settings.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        await self.rate_limit.wait_if_needed()
        response = await self._http.get(path, params=params)
        self.rate_limit.update(response)
        if not response.is_success:
            raise GitHubAPIError(response.status_code, str(response.url))
        return response.json()

    async def get_user(self, username: str) -> dict:
        return await self._get(f"/users/{username}")

    async def list_repos(self, username: str) -> list[dict]:
        """Return up to ``repo_limit`` owned repositories, newest first."""
        return await self._get(
            f"/users/{username}/repos",
            params={"per_page": self.settings.repo_limit, "sort": "created", "type": "owner"},
        )

    async def list_commits(
        self,
        full_name: str,
        *,
        author: str,
        page: int = 1,
        per_page: int = 100,
    ) -> list[dict]:
        return await self._get(
            f"/repos/{full_name}/commits",
            params={"author": author, "per_page": per_page, "page": page},
        )
