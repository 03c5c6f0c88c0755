"""``coverage-insight history``: list and delete saved reports."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from ..exceptions import CoverageInsightError
from ..report.history import ReportHistoryDB
from . import history_app
from ._common import console, resolve_config


@history_app.command("list")
def history_list(
    report_dir: Optional[Path] = typer.Option(None, "--report-dir", help="Report directory"),
    json_output: bool = typer.Option(False, "--json", help="Output [[id, summary], ...] as JSON"),
) -> None:
    """
    List saved reports, newest first.

    [bold cyan]Examples:[/bold cyan]

      coverage-insight history list

      coverage-insight history list --json
    """
    settings = resolve_config(report_dir=report_dir)
    try:
        with ReportHistoryDB(settings.report_dir) as db:
            entries = db.list()
    except CoverageInsightError as e:
        console.print(f"[red]Error reading history:[/red] {e}")
        raise typer.Exit(1)

    if json_output:
        print(json.dumps([[e.id, e.summary] for e in entries], indent=2))
        return

    if not entries:
        console.print(
            "[yellow]No saved reports.[/yellow] "
            "Run [bold]coverage-insight analyze PATH --save[/bold] to create one."
        )
        return

    table = Table(title="Saved Reports")
    table.add_column("ID", style="bold")
    table.add_column("Project", style="cyan")
    table.add_column("Saved", style="green")
    table.add_column("Coverage", justify="right")
    table.add_column("File", style="dim")
    for entry in entries:
        table.add_row(
            entry.id,
            entry.project_name,
            entry.created_at.replace("T", " ")[:19],
            f"{entry.overall_coverage:.1f}%",
            entry.report_file,
        )
    console.print(table)


@history_app.command("delete")
def history_delete(
    report_id: str = typer.Argument(..., help="Report id from 'history list'"),
    report_dir: Optional[Path] = typer.Option(None, "--report-dir", help="Report directory"),
) -> None:
    """Delete a saved report and its file."""
    settings = resolve_config(report_dir=report_dir)
    try:
        with ReportHistoryDB(settings.report_dir) as db:
            deleted = db.delete(report_id)
    except CoverageInsightError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if not deleted:
        console.print(f"[yellow]No report with id {report_id}[/yellow]")
        raise typer.Exit(1)
    console.print(f"[green]Deleted[/green] report {report_id}")
