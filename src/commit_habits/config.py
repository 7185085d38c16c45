"""Process-wide configuration, loaded once and passed into the engine."""

from __future__ import annotations

import asyncio
import os
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field, replace
from datetime import tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_OPENAI_MODEL = "gpt-3.5-turbo"

_ENV_PREFIX = "COMMIT_HABITS_"


def _env_number(environ: Mapping[str, str], name: str, default, cast):
    raw = environ.get(_ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ValueError(f"{_ENV_PREFIX}{name} must be a number, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{_ENV_PREFIX}{name} must not be negative, got {raw!r}")
    return value


def _env_zone(environ: Mapping[str, str]) -> tzinfo | None:
    raw = environ.get(_ENV_PREFIX + "TZ")
    if raw is None or raw.strip() == "":
        return None
    try:
        return ZoneInfo(raw.strip())
    except (ZoneInfoNotFoundError, ValueError, OSError):
        raise ValueError(f"{_ENV_PREFIX}TZ must be an IANA time zone, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    github_token: str | None = None
    openai_api_key: str | None = None
    openai_model: str = DEFAULT_OPENAI_MODEL
    api_url: str = DEFAULT_API_URL
    repo_limit: int = 100
    page_size: int = 100
    max_pages: int = 10
    page_delay: float = 0.05
    repo_delay: float = 0.2
    timeout: float = 30.0
    time_zone: tzinfo | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        return cls(
            github_token=env.get("GITHUB_TOKEN") or None,
            openai_api_key=env.get("OPENAI_API_KEY") or None,
            openai_model=env.get(_ENV_PREFIX + "OPENAI_MODEL") or DEFAULT_OPENAI_MODEL,
            api_url=(env.get(_ENV_PREFIX + "API_URL") or DEFAULT_API_URL).rstrip("/"),
            page_size=_env_number(env, "PAGE_SIZE", 100, int),
            max_pages=_env_number(env, "MAX_PAGES", 10, int),
            page_delay=_env_number(env, "PAGE_DELAY", 0.05, float),
            repo_delay=_env_number(env, "REPO_DELAY", 0.2, float),
            timeout=_env_number(env, "TIMEOUT", 30.0, float),
            time_zone=_env_zone(env),
        )

    def with_overrides(self, **overrides) -> Settings:
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    @property
    def wait_policy(self) -> WaitPolicy:
        return WaitPolicy(page_delay=self.page_delay, repo_delay=self.repo_delay)


@dataclass(frozen=True)
class WaitPolicy:
    """Pauses inserted between commit pages and between repositories."""

    page_delay: float = 0.05
    repo_delay: float = 0.2
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep, compare=False)

    async def between_pages(self) -> None:
        if self.page_delay > 0:
            await self.sleep(self.page_delay)

    async def between_repos(self) -> None:
        if self.repo_delay > 0:
            await self.sleep(self.repo_delay)
