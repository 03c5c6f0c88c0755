"""``coverage-insight serve``: HTTP API for submitting and polling analyses."""

import logging
from pathlib import Path
from typing import Optional

import typer

from . import app
from ._common import console, resolve_config

logger = logging.getLogger(__name__)


@app.command()
def serve(
    port: int = typer.Option(8080, help="Port to listen on"),
    host: str = typer.Option("127.0.0.1", help="Host to bind to"),
    config: Optional[Path] = typer.Option(None, "-c", "--config", help="Config file"),
    report_dir: Optional[Path] = typer.Option(None, "--report-dir", help="Report directory"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logging"),
    log_file: Optional[Path] = typer.Option(
        None, "--log-file", help="Append debug logs, tagged by thread, to this file"
    ),
) -> None:
    """Start the analysis API server."""
    try:
        from ..server import _check_deps

        _check_deps()
    except ImportError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)

    import uvicorn

    from ..jobs.service import AnalysisService
    from ..server.app import create_app

    settings = resolve_config(
        config=config, report_dir=report_dir, verbose=verbose, log_file=log_file
    )
    asgi_app = create_app(AnalysisService(settings))

    url = f"http://{host}:{port}"
    console.print(f"[bold]Coverage Insight API[/bold] → [link={url}]{url}[/link]")
    console.print(f"[dim]Reports saved to {settings.report_dir}. Press Ctrl+C to stop[/dim]")

    try:
        uvicorn.run(
            asgi_app,
            host=host,
            port=port,
            log_level="info" if verbose else "warning",
        )
    except KeyboardInterrupt:
        pass
    finally:
        console.print("\n[dim]Stopped.[/dim]")
