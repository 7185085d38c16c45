"""Sequential, page-capped commit crawl across a user's repositories.

Each repository is walked by a :class:`RepoCrawl` that moves from
``FETCHING`` to either ``EXHAUSTED`` (empty page or page cap) or ``FAILED``
(non-success status, malformed page or any other error). A failed repository keeps the pages
it already fetched and the crawl moves on to the next one.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from .config import WaitPolicy
from .github.client import GitHubAPIError, GitHubClient
from .models import RawCommit, RawRepository

logger = logging.getLogger(__name__)


class CrawlState(enum.Enum):
    FETCHING = "fetching"
    EXHAUSTED = "exhausted"
    FAILED = "failed"


@dataclass
class RepoCrawl:
    repo: RawRepository
    max_pages: int
    page: int = 1
    state: CrawlState = CrawlState.FETCHING
    commits: list[RawCommit] = field(default_factory=list)
    error: str | None = None

    @property
    def done(self) -> bool:
        return self.state is not CrawlState.FETCHING

    def accept_page(self, payload: list[dict]) -> None:
        if not isinstance(payload, list):
            raise ValueError(f"expected a list of commits, got {type(payload).__name__}")
        if not payload:
            self.state = CrawlState.EXHAUSTED
            return
        self.commits.extend([RawCommit.from_api(item, self.repo.name) for item in payload])
        self.page += 1
        if self.page > self.max_pages:
            self.state = CrawlState.EXHAUSTED

    def fail(self, reason: str) -> None:
        self.state = CrawlState.FAILED
        self.error = reason


async def crawl_repository(
    client: GitHubClient,
    repo: RawRepository,
    author: str,
    *,
    page_size: int = 100,
    max_pages: int = 10,
    wait: WaitPolicy | None = None,
) -> RepoCrawl:
    wait = wait or WaitPolicy()
    crawl = RepoCrawl(repo=repo, max_pages=max_pages)
    if max_pages < 1:
        crawl.state = CrawlState.EXHAUSTED
    while not crawl.done:
        try:
            payload = await client.list_commits(
                repo.full_name, author=author, page=crawl.page, per_page=page_size
            )
        except GitHubAPIError as exc:
            logger.warning("Error response for %s: %d", repo.name, exc.status_code)
            crawl.fail(f"HTTP {exc.status_code}")
            break
        except Exception as exc:
            logger.warning("Error fetching commits for %s: %s", repo.name, exc)
            crawl.fail(str(exc) or type(exc).__name__)
            break
        try:
            crawl.accept_page(payload)
        except (ValueError, TypeError, AttributeError) as exc:
            logger.warning("Malformed commit page for %s: %s", repo.name, exc)
            crawl.fail("malformed response")
            break
        if not crawl.done:
            await wait.between_pages()
    return crawl


async def crawl_commits(
    client: GitHubClient,
    repos: Iterable[RawRepository],
    author: str,
    *,
    page_size: int = 100,
    max_pages: int = 10,
    wait: WaitPolicy | None = None,
) -> list[RawCommit]:
    """Fetch commit pages for ``author`` from every crawlable repository.

    Forks and empty repositories are skipped. Repositories are visited one
    at a time; failures are logged and never abort the crawl.
    """
    wait = wait or WaitPolicy()
    targets = [repo for repo in repos if repo.is_crawlable]
    logger.info("Processing %d non-fork repositories", len(targets))

    commits: list[RawCommit] = []
    for index, repo in enumerate(targets):
        crawl = await crawl_repository(
            client, repo, author, page_size=page_size, max_pages=max_pages, wait=wait
        )
        if crawl.commits:
            logger.debug("Fetched %d commits from %s", len(crawl.commits), repo.name)
        commits.extend(crawl.commits)
        if index < len(targets) - 1:
            await wait.between_repos()
    logger.info("Fetched %d commits across %d repositories", len(commits), len(targets))
    return commits
