"""Optional free-text "roast" of a metrics bundle.

The generator is a collaborator: when it is not configured or fails, the
analysis still succeeds and callers fall back to :func:`fallback_roast`.
"""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from .models import MetricsBundle

logger = logging.getLogger(__name__)

OPENAI_URL = "https://api.openai.com/v1"

SYSTEM_PROMPT = (
    "You are a sarcastic code reviewer who roasts developers based on their GitHub "
    "activity and coding patterns. Be funny but not too mean-spirited. Keep it at "
    "most 150 words and don't be corny. Talk about their top languages and tease "
    "them a little, especially about their coding patterns."
)


class RoastGenerator(Protocol):
    async def generate(self, prompt: str) -> str: ...


class OpenAIRoastGenerator:
    """Chat-completions client for the roast text."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-3.5-turbo",
        *,
        base_url: str = OPENAI_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def generate(self, prompt: str) -> str:
        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": 200,
            "temperature": 0.8,
        }
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as http:
            response = await http.post(
                f"{self.base_url}/chat/completions",
                json=body,
                headers={"Authorization": f"Bearer {self.api_key}"},
            )
            response.raise_for_status()
            data = response.json()
        choices = data.get("choices") or []
        if not choices:
            return ""
        return ((choices[0].get("message") or {}).get("content") or "").strip()


def build_roast_prompt(bundle: MetricsBundle) -> str:
    profile = bundle.profile
    repos = profile.public_repos if profile else 0
    followers = profile.followers if profile else 0
    return (
        f"Roast this developer: {bundle.total_commits} commits, {repos} repos, "
        f"{followers} followers, {round(bundle.weekend_ratio * 100)}% weekend coding, "
        f"peak coding at {bundle.peak_hour}:00, favorite day is {bundle.favorite_day}, "
        f"{bundle.abandoned_projects} abandoned projects, "
        f"commit style: {bundle.commit_style}, "
        f"top languages: {', '.join(bundle.top_languages)}"
    )


async def generate_roast(bundle: MetricsBundle, generator: RoastGenerator | None) -> str:
    """Ask ``generator`` for a roast; any failure yields an empty string."""
    if generator is None:
        return ""
    try:
        return await generator.generate(build_roast_prompt(bundle))
    except Exception as exc:
        logger.warning("Roast generation failed: %s", exc)
        return ""


def fallback_roast(bundle: MetricsBundle) -> str:
    profile = bundle.profile
    repos = profile.public_repos if profile else 0
    followers = profile.followers if profile else 0
    weekend = round(bundle.weekend_ratio * 100)
    text = (
        f"Well, well, well... {bundle.total_commits} commits across {repos} repos "
        f"with {followers} followers."
    )
    if bundle.weekend_ratio > 0.3:
        text += f" And {weekend}% weekend coding? Someone needs a social life!"
    else:
        text += f" Only {weekend}% weekend work - you might actually touch grass occasionally."
    if bundle.abandoned_projects > 10:
        text += (
            f" Those {bundle.abandoned_projects} abandoned projects though... "
            "commitment issues much?"
        )
    return text
