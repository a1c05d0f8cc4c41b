"""Global options shared by every subcommand."""

from pathlib import Path
from typing import Optional

import typer

from .. import __version__
from ..exceptions import SignalInsightError
from ..logging_config import get_logger, setup_logging
from . import app
from ._common import console, resolve_config

logger = get_logger(__name__)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    cache: Optional[Path] = typer.Option(
        None,
        "--cache",
        help="Signal graph cache file (default: .signal-insight/signal_graph.json)",
        dir_okay=False,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only log errors",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
    ),
):
    """
    Analyze a cached signal graph: unused signals, clusters, naming.

    [bold cyan]Examples:[/bold cyan]

      signal-insight unused

      signal-insight --cache build/graph.json clusters --depth 3

      signal-insight refactor --min-confidence 0.97 --format json
    """
    if version:
        console.print(f"signal-insight {__version__}")
        raise typer.Exit(0)

    setup_logging(verbose=verbose, quiet=quiet)

    try:
        resolved = resolve_config(config=config, cache=cache, verbose=verbose, quiet=quiet)
    except SignalInsightError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    ctx.ensure_object(dict)
    ctx.obj["config"] = resolved

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
