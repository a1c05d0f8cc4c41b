"""Graph cache inspection."""

from datetime import datetime
from pathlib import Path
from typing import Optional

import click
import typer

from ..graph import GraphSerializer
from . import app
from ._common import OUTPUT_FORMATS, console, get_config, print_json


@app.command()
def cache_info(
    ctx: typer.Context,
    since: Optional[float] = typer.Option(
        None,
        "--since",
        help="Report the cache as stale if built before this Unix ms timestamp",
    ),
    output_format: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Output format: rich | json",
        click_type=click.Choice(OUTPUT_FORMATS, case_sensitive=False),
    ),
):
    """Show size, build time and freshness of the signal graph cache."""
    cache_path = Path(get_config(ctx).cache_path)
    serializer = GraphSerializer()
    stats = serializer.get_stats(cache_path)

    if stats is None:
        console.print(f"[yellow]No usable signal graph at {cache_path}.[/yellow]")
        raise typer.Exit(1)

    stale = serializer.is_stale(cache_path, since) if since is not None else None

    if output_format.lower() == "json":
        print_json({"path": str(cache_path), "stats": stats, "stale": stale})
        return

    built = datetime.fromtimestamp(stats.timestamp / 1000).strftime("%Y-%m-%d %H:%M:%S")
    console.print("[bold cyan]Signal Insight Cache Info[/bold cyan]")
    console.print()
    console.print(f"Path: [blue]{cache_path}[/blue]")
    console.print(f"Size: [yellow]{stats.size_bytes} bytes[/yellow]")
    console.print(f"Built: [yellow]{built}[/yellow]")
    if stale is not None:
        console.print(f"Status: {'[red]Stale[/red]' if stale else '[green]Fresh[/green]'}")
