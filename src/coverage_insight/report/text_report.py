"""Plain-text coverage report rendered with rich.

Everything is printed to a recording console and exported as text, so
the same renderer serves the terminal, saved report files and the HTTP
report endpoint.
"""

from __future__ import annotations

import io
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..coverage.granularity import GranularityLevel

if TYPE_CHECKING:
    from ..jobs.models import AnalysisResult

REPORT_WIDTH = 110
MAX_UNCOVERED_ROWS = 50


def _coverage_label(rate: float) -> str:
    if rate >= 80:
        return f"[green]{rate:.1f}%[/green]"
    elif rate >= 50:
        return f"[yellow]{rate:.1f}%[/yellow]"
    else:
        return f"[red]{rate:.1f}%[/red]"


_LEVEL_STYLES = {
    GranularityLevel.EXCELLENT: "green bold",
    GranularityLevel.GOOD: "green",
    GranularityLevel.ACCEPTABLE: "yellow",
    GranularityLevel.POOR: "red",
}


def _format_timestamp(ts: float) -> str:
    return datetime.fromtimestamp(ts, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def render_report(result: AnalysisResult, width: int = REPORT_WIDTH) -> str:
    """Render ``result`` as plain text."""
    console = Console(
        file=io.StringIO(),
        record=True,
        width=width,
        force_terminal=False,
        color_system=None,
    )
    print_report(console, result)
    return console.export_text()


def print_report(console: Console, result: AnalysisResult) -> None:
    _print_summary(console, result)
    _print_distribution(console, result)
    _print_files(console, result)
    _print_uncovered(console, result)
    _print_commits(console, result)
    if result.warnings:
        console.print(f"[yellow]{len(result.warnings)} file(s) skipped:[/yellow]")
        for warning in result.warnings:
            console.print(f"  [dim]{warning}[/dim]")


def _print_summary(console: Console, result: AnalysisResult) -> None:
    report = result.coverage_report
    history = result.git_history
    lines = [
        f"[bold]Project:[/bold] {result.project.name} ({result.project.project_type.value})",
        f"[bold]Path:[/bold] {result.project.path}",
        f"[bold]Analyzed:[/bold] {_format_timestamp(result.analyzed_at)}",
        "",
        f"[bold]Method coverage:[/bold] {_coverage_label(report.overall_coverage)} "
        f"({report.covered_methods}/{report.total_methods} methods)",
        f"[bold]Covered classes:[/bold] "
        f"{report.covered_business_classes}/{report.total_business_classes}",
        f"[bold]Test classes:[/bold] {report.total_test_classes} "
        f"({report.total_test_methods} test methods)",
        f"[bold]Average granularity:[/bold] {report.average_granularity_score:.1f}",
    ]
    if history.is_repository:
        lines.append(
            f"[bold]Git:[/bold] {history.total_commits} commits, "
            f"{history.total_developers} developers"
        )
    else:
        lines.append("[bold]Git:[/bold] [dim]not a repository[/dim]")

    console.print(
        Panel(
            "\n".join(lines),
            title="[bold cyan]Coverage Insight Report[/bold cyan]",
            expand=False,
        )
    )
    console.print()


def _print_distribution(console: Console, result: AnalysisResult) -> None:
    distribution = result.coverage_report.granularity_distribution
    total = sum(distribution.values())

    table = Table(title="Test Granularity", title_justify="left")
    table.add_column("Level")
    table.add_column("Min score", justify="right")
    table.add_column("Methods", justify="right")
    table.add_column("Share", justify="right")
    for level in GranularityLevel:
        count = distribution.get(level, 0)
        share = count / total * 100 if total else 0.0
        style = _LEVEL_STYLES[level]
        table.add_row(
            f"[{style}]{level.value}[/{style}]",
            str(level.min_score),
            str(count),
            f"{share:.1f}%",
        )
    console.print(table)
    console.print()


def _print_files(console: Console, result: AnalysisResult) -> None:
    files = result.coverage_report.files
    if not files:
        console.print("[dim]No business classes found.[/dim]")
        console.print()
        return

    table = Table(title="Files", title_justify="left")
    table.add_column("Class")
    table.add_column("Kind")
    table.add_column("Test class")
    table.add_column("Methods", justify="right")
    table.add_column("Covered", justify="right")
    table.add_column("Coverage", justify="right")
    for stats in sorted(files, key=lambda f: (f.coverage_rate, f.fully_qualified_name)):
        table.add_row(
            stats.fully_qualified_name,
            stats.kind.value,
            "yes" if stats.has_test_class else "[red]missing[/red]",
            str(stats.total_methods),
            str(stats.covered_methods),
            _coverage_label(stats.coverage_rate),
        )
    console.print(table)
    console.print()


def _print_uncovered(console: Console, result: AnalysisResult) -> None:
    uncovered = result.coverage_report.uncovered
    if not uncovered:
        console.print("[green]Every public method has at least one test.[/green]")
        console.print()
        return

    table = Table(title=f"Uncovered Methods ({len(uncovered)})", title_justify="left")
    table.add_column("Class")
    table.add_column("Method")
    table.add_column("Lines", justify="right")
    table.add_column("Complexity", justify="right")
    ranked = sorted(uncovered, key=lambda m: (-m.complexity, m.class_name, m.start_line))
    for row in ranked[:MAX_UNCOVERED_ROWS]:
        table.add_row(
            row.class_name,
            row.full_signature,
            f"{row.start_line}-{row.end_line}",
            str(row.complexity),
        )
    console.print(table)
    if len(uncovered) > MAX_UNCOVERED_ROWS:
        console.print(f"[dim]... and {len(uncovered) - MAX_UNCOVERED_ROWS} more[/dim]")
    console.print()


def _print_commits(console: Console, result: AnalysisResult) -> None:
    commits = result.coverage_report.commit_statistics
    if not commits:
        return

    table = Table(title="Commit Coverage", title_justify="left")
    table.add_column("Commit")
    table.add_column("Author")
    table.add_column("Date")
    table.add_column("+/-", justify="right")
    table.add_column("Added", justify="right")
    table.add_column("Modified", justify="right")
    table.add_column("Added cov.", justify="right")
    table.add_column("Message")
    for stats in commits:
        table.add_row(
            stats.short_hash,
            stats.author_name,
            _format_timestamp(stats.timestamp)[:10],
            f"+{stats.lines_added}/-{stats.lines_deleted}",
            f"{stats.added_methods_covered}/{stats.methods_added}",
            f"{stats.modified_methods_covered}/{stats.methods_modified}",
            _coverage_label(stats.added_code_coverage),
            stats.message.splitlines()[0] if stats.message else "",
        )
    console.print(table)
    console.print()
