"""``coverage-insight analyze``: run the full pipeline and print the report."""

from datetime import datetime
from pathlib import Path
from typing import List, Optional

import typer

from ..exceptions import CoverageInsightError
from ..jobs.models import AnalysisRequest, JobStage
from ..jobs.service import AnalysisService
from ..report.text_report import print_report
from . import app
from ._common import console, resolve_config

_DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M:%S"]


@app.command()
def analyze(
    path: Path = typer.Argument(
        Path("."),
        help="Java project to analyze",
        exists=True,
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
    ),
    source_root: Optional[List[str]] = typer.Option(
        None, "--source-root", "-s", help="Business source root (repeatable)"
    ),
    test_root: Optional[List[str]] = typer.Option(
        None, "--test-root", "-t", help="Test source root (repeatable)"
    ),
    since: Optional[datetime] = typer.Option(
        None, "--since", formats=_DATE_FORMATS, help="Only commits after this date"
    ),
    until: Optional[datetime] = typer.Option(
        None, "--until", formats=_DATE_FORMATS, help="Only commits before this date"
    ),
    max_commits: Optional[int] = typer.Option(
        None, "--max-commits", "-n", min=1, help="Newest commits to analyze"
    ),
    save: bool = typer.Option(False, "--save", help="Save the report to report history"),
    config: Optional[Path] = typer.Option(None, "-c", "--config", help="Config file"),
    workers: Optional[int] = typer.Option(None, "-w", "--workers", min=1, help="Worker threads"),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", min=1, help="Fail the analysis after this many seconds"
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logging"),
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Errors only"),
    log_file: Optional[Path] = typer.Option(
        None, "--log-file", help="Append debug logs, tagged by thread, to this file"
    ),
) -> None:
    """
    Analyze method-level test coverage of a Java project.

    [bold cyan]Examples:[/bold cyan]

      coverage-insight analyze ./my-service

      coverage-insight analyze . --since 2024-01-01 --save

      coverage-insight analyze . -s core/src/main/java -t core/src/test/java
    """
    try:
        settings = resolve_config(
            config=config,
            max_commits=max_commits,
            workers=workers,
            timeout=timeout,
            verbose=verbose,
            quiet=quiet,
            log_file=log_file,
        )
        service = AnalysisService(settings)
        request = AnalysisRequest(
            project_path=str(path),
            source_roots=list(source_root or []),
            test_roots=list(test_root or []),
            since=since,
            until=until,
        )

        with console.status("[cyan]Initializing analysis...") as status:

            def on_stage(stage: JobStage, message: str) -> None:
                status.update(f"[cyan]{message}... [dim]({stage.percent}%)[/dim]")

            result = service.run(request, on_stage=on_stage)
    except CoverageInsightError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    print_report(console, result)

    if save:
        try:
            entry = service.save_report(result)
        except CoverageInsightError as e:
            console.print(f"[red]Could not save report:[/red] {e}")
            raise typer.Exit(1)
        console.print(f"[green]Saved[/green] report {entry.id} to {entry.report_file}")
