"""Unused signal report."""

import click
import typer
from rich.table import Table

from ..analysis import UnusedDetector
from . import app
from ._common import (
    OUTPUT_FORMATS,
    confidence_style,
    console,
    get_config,
    load_cached_graph,
    print_json,
)


@app.command()
def unused(
    ctx: typer.Context,
    output_format: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Output format: rich | json",
        click_type=click.Choice(OUTPUT_FORMATS, case_sensitive=False),
    ),
):
    """
    List signals that are never emitted, never connected, or both.

    [bold cyan]Examples:[/bold cyan]

      signal-insight unused

      signal-insight unused --format json
    """
    config = get_config(ctx)
    graph = load_cached_graph(ctx)

    detector = UnusedDetector(config.thresholds)
    findings = detector.detect_unused(graph)

    if output_format.lower() == "json":
        print_json({"unused": findings, "stats": detector.last_stats})
        return

    if not findings:
        console.print("[green]No unused signals found.[/green]")
        return

    console.print()
    console.print(f"[bold cyan]UNUSED SIGNALS[/bold cyan] -- {len(findings)} found")
    console.print()

    table = Table(show_header=True, show_lines=False, pad_edge=True)
    table.add_column("Signal", min_width=24)
    table.add_column("Pattern")
    table.add_column("Confidence", justify="right")
    table.add_column("Location")
    table.add_column("Reason", overflow="fold")

    for finding in findings:
        style = confidence_style(finding.confidence)
        location = finding.locations[0] if finding.locations else None
        table.add_row(
            finding.signal_name,
            finding.pattern.value,
            f"[{style}]{finding.confidence:.2f}[/{style}]",
            f"{location.file}:{location.line}" if location else "--",
            finding.reason or "",
        )

    console.print(table)
    stats = detector.last_stats
    console.print(
        f"[dim]{stats.signals_analyzed} signals analyzed: {stats.isolated_found} isolated, "
        f"{stats.orphans_found} orphan, {stats.dead_emitters_found} dead emitter[/dim]"
    )
