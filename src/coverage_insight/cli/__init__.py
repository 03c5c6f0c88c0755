"""CLI entry point: registers all subcommands."""

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="coverage-insight",
    help="Coverage Insight - Heuristic Method-Level Test Coverage for Java Projects",
    add_completion=False,
    rich_markup_mode="rich",
)

history_app = typer.Typer(help="Manage saved coverage reports.", rich_markup_mode="rich")
app.add_typer(history_app, name="history")


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"coverage-insight {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Coverage Insight - Heuristic Method-Level Test Coverage for Java Projects"""


# Import subcommands to register them
from .analyze import analyze as _analyze  # noqa: F401, E402
from .diff import diff as _diff  # noqa: F401, E402
from .history import history_delete as _history_delete  # noqa: F401, E402
from .history import history_list as _history_list  # noqa: F401, E402
from .serve import serve as _serve  # noqa: F401, E402
