"""Rich-based terminal report renderer with JSON support."""

from __future__ import annotations

import io
import json
from dataclasses import asdict

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import MetricsBundle
from .summary import fallback_roast


def _format_number(n: int) -> str:
    return f"{n:,}"


def _make_bar(percentage: float, width: int = 20) -> str:
    filled = round(percentage / 100 * width)
    return "█" * filled + "░" * (width - filled)


def _write_to_file(content: str, output_file: str) -> None:
    """Write content to a file and print confirmation."""
    with open(output_file, "w", encoding="utf-8") as f:
        f.write(content)
    Console().print(f"Saved to {output_file}")


def render_report(bundle: MetricsBundle, output_file: str | None = None) -> None:
    """Render a MetricsBundle to the terminal using rich."""
    if output_file:
        string_io = io.StringIO()
        console = Console(file=string_io, force_terminal=False, width=120)
    else:
        console = Console()

    console.print(Panel(
        Text(f"commit-habits: {bundle.username}", justify="center"),
        style="bold cyan",
    ))
    console.print()

    # Summary
    console.print("[bold]Summary[/bold]")
    summary = Table(show_header=False, box=None, padding=(0, 2))
    summary.add_column("label", style="dim")
    summary.add_column("value", style="bold")
    summary.add_row("Total Commits", _format_number(bundle.total_commits))
    if bundle.profile is not None:
        summary.add_row("Public Repos", _format_number(bundle.profile.public_repos))
        summary.add_row("Followers", _format_number(bundle.profile.followers))
    summary.add_row("Weekend Work", f"{round(bundle.weekend_ratio * 100)}%")
    summary.add_row("Current Streak", f"{bundle.current_streak} days")
    summary.add_row("Longest Streak", f"{bundle.longest_streak} days")
    summary.add_row("Peak Hour", f"{bundle.peak_hour}:00")
    summary.add_row("Favorite Day", bundle.favorite_day)
    summary.add_row("Consistency", f"{bundle.commit_consistency}%")
    summary.add_row("Message Style", bundle.commit_message_style)
    summary.add_row("Commit Style", bundle.commit_style)
    summary.add_row("Trend", bundle.productivity_trend)
    summary.add_row("Top Repo", bundle.top_repo)
    summary.add_row("Abandoned Projects", _format_number(bundle.abandoned_projects))
    console.print(summary)
    console.print()

    # Verdict
    console.print(Panel(
        bundle.roast or fallback_roast(bundle),
        title="The Verdict",
        style="magenta",
    ))
    console.print()

    # Time slots
    if bundle.total_commits:
        console.print("[bold]When You Code[/bold]")
        slot_table = Table(show_header=True, header_style="bold")
        slot_table.add_column("Slot")
        slot_table.add_column("Bar")
        slot_table.add_column("Percentage", justify="right")
        slot_table.add_column("Commits", justify="right")
        for slot in bundle.chart_data.time_slots:
            slot_table.add_row(
                slot.slot,
                _make_bar(slot.percentage),
                f"{slot.percentage}%",
                _format_number(slot.commits),
            )
        console.print(slot_table)
        console.print()

    # Language distribution
    if bundle.language_breakdown:
        console.print("[bold]Language Distribution[/bold]")
        lang_table = Table(show_header=True, header_style="bold")
        lang_table.add_column("Language")
        lang_table.add_column("Bar")
        lang_table.add_column("Percentage", justify="right")
        lang_table.add_column("Repos", justify="right")

        for lang in bundle.language_breakdown:
            lang_table.add_row(
                lang.language,
                _make_bar(lang.percentage),
                f"{lang.percentage}%",
                _format_number(lang.repository_count),
            )
        console.print(lang_table)
        console.print()

    if output_file:
        _write_to_file(string_io.getvalue(), output_file)


def render_json(bundle: MetricsBundle, output_file: str | None = None) -> None:
    """Render a MetricsBundle as JSON."""
    content = json.dumps(asdict(bundle), indent=2, ensure_ascii=False)
    if output_file:
        _write_to_file(content, output_file)
    else:
        print(content)
