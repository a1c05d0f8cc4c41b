"""Refactoring suggestion report."""

from typing import Optional

import click
import typer
from rich.table import Table

from ..refactoring import RefactoringEngine
from . import app
from ._common import OUTPUT_FORMATS, console, get_config, load_cached_graph, print_json


@app.command()
def refactor(
    ctx: typer.Context,
    min_confidence: Optional[float] = typer.Option(
        None,
        "--min-confidence",
        help="Hide suggestions below this confidence (default: 0.98)",
        min=0.0,
        max=1.0,
    ),
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        "-n",
        help="Maximum suggestions to show (default: from config, 50)",
        min=1,
    ),
    output_format: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Output format: rich | json",
        click_type=click.Choice(OUTPUT_FORMATS, case_sensitive=False),
    ),
):
    """
    Suggest merges of near-duplicate signals and snake_case renames.

    [bold cyan]Examples:[/bold cyan]

      signal-insight refactor

      signal-insight refactor --min-confidence 0.97 --limit 10
    """
    config = get_config(ctx)
    graph = load_cached_graph(ctx)

    engine = RefactoringEngine(config.thresholds)
    suggestions = engine.generate_suggestions(
        graph,
        min_confidence=min_confidence,
        max_suggestions=limit if limit is not None else config.max_suggestions,
    )

    if output_format.lower() == "json":
        print_json({"suggestions": suggestions, "stats": engine.last_stats})
        return

    if not suggestions:
        console.print("[green]No refactoring suggestions.[/green]")
        return

    console.print()
    console.print(f"[bold cyan]REFACTORING SUGGESTIONS[/bold cyan] -- {len(suggestions)}")
    console.print()

    table = Table(show_header=True, show_lines=False, pad_edge=True)
    table.add_column("Type")
    table.add_column("Signal", min_width=20)
    table.add_column("Suggested", min_width=20)
    table.add_column("Confidence", justify="right")
    table.add_column("Files", overflow="fold")

    for s in suggestions:
        table.add_row(
            s.type.value,
            s.target,
            s.replacement,
            f"{s.confidence:.2f}",
            ", ".join(s.affected_files) or "--",
        )

    console.print(table)
    sim = engine.last_stats.similarity
    console.print(
        f"[dim]{sim.comparisons_performed} name comparisons, "
        f"{sim.comparisons_skipped} skipped ({sim.skip_ratio:.0%})[/dim]"
    )
