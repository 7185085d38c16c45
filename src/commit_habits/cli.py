"""Command-line entry point for commit-habits."""

from __future__ import annotations

import asyncio
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .config import Settings
from .errors import AnalysisError
from .orchestrator import run


def _configure_logging(verbose: int) -> None:
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.command()
@click.argument("username")
@click.option("--token", envvar="GITHUB_TOKEN", default=None, help="GitHub personal access token.")
@click.option("--openai-key", envvar="OPENAI_API_KEY", default=None, help="OpenAI key for the roast.")
@click.option("--format", "output_format", type=click.Choice(["table", "json"]), default="table",
              show_default=True, help="Output format.")
@click.option("--output", "output_file", default=None, help="Write the report to this file.")
@click.option("--max-pages", type=click.IntRange(min=1), default=None,
              help="Commit pages fetched per repository.")
@click.option("--page-delay", type=click.FloatRange(min=0), default=None,
              help="Seconds to wait between commit pages.")
@click.option("--repo-delay", type=click.FloatRange(min=0), default=None,
              help="Seconds to wait between repositories.")
@click.option("--deadline", type=click.FloatRange(min=0), default=None,
              help="Abort the whole analysis after this many seconds.")
@click.option("-v", "--verbose", count=True, help="Log progress (-vv for debug).")
@click.version_option(version=__version__)
def main(
    username: str,
    token: str | None,
    openai_key: str | None,
    output_format: str,
    output_file: str | None,
    max_pages: int | None,
    page_delay: float | None,
    repo_delay: float | None,
    deadline: float | None,
    verbose: int,
) -> None:
    """Analyze the public commit habits of a GitHub USERNAME."""
    _configure_logging(verbose)
    console = Console(stderr=True)
    try:
        settings = Settings.from_env().with_overrides(
            github_token=token or None,
            openai_api_key=openai_key or None,
            max_pages=max_pages,
            page_delay=page_delay,
            repo_delay=repo_delay,
        )
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc

    try:
        asyncio.run(run(
            username=username.strip(),
            settings=settings,
            output_format=output_format,
            output_file=output_file,
            deadline=deadline,
        ))
    except AnalysisError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        console.print(f"[dim]{exc.hint}[/dim]")
        raise SystemExit(1) from exc
    except asyncio.TimeoutError:
        console.print(f"[bold red]Error:[/bold red] analysis did not finish within {deadline}s")
        raise SystemExit(1) from None


if __name__ == "__main__":
    main()
