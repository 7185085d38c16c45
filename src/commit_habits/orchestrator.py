"""Run one analysis: open the client, compute metrics, render the result."""

from __future__ import annotations

import asyncio

from .aggregator import analyze
from .config import Settings
from .github.client import GitHubClient
from .models import MetricsBundle
from .renderer import render_json, render_report
from .summary import OpenAIRoastGenerator


async def run(
    username: str,
    settings: Settings,
    output_format: str = "table",
    output_file: str | None = None,
    deadline: float | None = None,
) -> MetricsBundle:
    roaster = None
    if settings.openai_api_key:
        roaster = OpenAIRoastGenerator(
            settings.openai_api_key, settings.openai_model, timeout=settings.timeout
        )

    async with GitHubClient(settings) as client:
        work = analyze(client, username, settings, roaster=roaster)
        if deadline:
            bundle = await asyncio.wait_for(work, timeout=deadline)
        else:
            bundle = await work

    if output_format == "json":
        render_json(bundle, output_file=output_file)
    else:
        render_report(bundle, output_file=output_file)
    return bundle
