"""``coverage-insight diff``: show one commit's changes."""

from pathlib import Path

import typer

from ..exceptions import CoverageInsightError
from ..jobs.service import AnalysisService
from . import app
from ._common import console, resolve_config


@app.command(name="diff")
def diff(
    path: Path = typer.Argument(..., help="Repository path", file_okay=False, resolve_path=True),
    commit: str = typer.Argument(..., help="Commit hash (full or abbreviated)"),
) -> None:
    """Print the header, changed files and patch of COMMIT."""
    try:
        service = AnalysisService(resolve_config())
        text = service.get_commit_diff(str(path), commit)
    except CoverageInsightError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    # Patch text may contain square brackets; print it verbatim.
    console.print(text, markup=False, highlight=False)
