"""Signal cluster report."""

from typing import Optional

import click
import typer
from rich.tree import Tree

from ..clustering import ClusterResult, HierarchicalClusterer
from . import app
from ._common import OUTPUT_FORMATS, console, get_config, load_cached_graph, print_json


def _add_level(parent: Tree, result: ClusterResult) -> None:
    for cluster_id, cluster in result.clusters.items():
        branch = parent.add(
            f"[bold]{cluster.label}[/bold] [dim]({cluster.size} signals)[/dim]"
        )
        nested = result.sub_clusters.get(cluster_id)
        if nested is not None:
            _add_level(branch, nested)
        else:
            for name in cluster.signals:
                branch.add(name)


@app.command()
def clusters(
    ctx: typer.Context,
    depth: Optional[int] = typer.Option(
        None,
        "--depth",
        "-d",
        help="Hierarchy depth (default: from config, 2)",
        min=1,
        max=5,
    ),
    min_size: Optional[int] = typer.Option(
        None,
        "--min-size",
        help="Smallest cluster that is split further (default: 5)",
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
    Group related signals into labeled clusters.

    Signals emitted from the same file or handled by the same method are
    related; clusters are labeled with their most distinctive name terms.

    [bold cyan]Examples:[/bold cyan]

      signal-insight clusters

      signal-insight clusters --depth 1 --format json
    """
    config = get_config(ctx)
    graph = load_cached_graph(ctx)

    clusterer = HierarchicalClusterer(config.thresholds)
    result = clusterer.cluster_hierarchical(
        graph,
        max_depth=depth if depth is not None else config.max_depth,
        min_size_for_subclustering=min_size,
    )

    if output_format.lower() == "json":
        print_json({"result": result, "stats": clusterer.last_stats})
        return

    if not result.clusters:
        console.print("[yellow]No signals to cluster.[/yellow]")
        return

    tree = Tree(
        f"[bold cyan]SIGNAL CLUSTERS[/bold cyan] -- {len(result.clusters)} clusters, "
        f"modularity {result.modularity:.3f}"
    )
    _add_level(tree, result)
    console.print()
    console.print(tree)
