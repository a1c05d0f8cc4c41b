"""Shared CLI helpers."""

import json
from dataclasses import asdict, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console

from ..config import AnalysisConfig, load_config
from ..graph import GraphSerializer, SignalGraph

console = Console()

OUTPUT_FORMATS = ["rich", "json"]


def resolve_config(
    config: Optional[Path] = None,
    cache: Optional[Path] = None,
    verbose: bool = False,
    quiet: bool = False,
) -> AnalysisConfig:
    """Build configuration from CLI options."""
    overrides: dict[str, Any] = {"verbose": verbose, "quiet": quiet}
    if cache is not None:
        overrides["cache_path"] = str(cache)
    return load_config(config_file=config, **overrides)


def get_config(ctx: typer.Context) -> AnalysisConfig:
    obj = ctx.obj or {}
    return obj.get("config") or load_config()


def load_cached_graph(ctx: typer.Context) -> SignalGraph:
    """Load the graph cache named by the configuration or exit with status 1."""
    cache_path = Path(get_config(ctx).cache_path)
    graph = GraphSerializer().load(cache_path)
    if graph is None:
        console.print(
            f"[yellow]No usable signal graph at {cache_path}.[/yellow] "
            "Build the graph and save it with GraphSerializer first."
        )
        raise typer.Exit(1)
    return graph


def to_jsonable(value: Any) -> Any:
    """Dataclasses, enums, tuples and sets as plain JSON values."""
    if is_dataclass(value) and not isinstance(value, type):
        return to_jsonable(asdict(value))
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, (set, frozenset)):
        return sorted(to_jsonable(v) for v in value)
    return value


def print_json(value: Any) -> None:
    print(json.dumps(to_jsonable(value), indent=2))


def confidence_style(confidence: float) -> str:
    if confidence >= 0.9:
        return "red"
    if confidence >= 0.75:
        return "yellow"
    return "dim"
