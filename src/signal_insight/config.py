"""Configuration loading and management for Signal Insight.

Configuration sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.signal-insight.toml)
    3. Project config (./signal-insight.toml)
    4. Explicit config file
    5. Environment variables (SIGNAL_INSIGHT_* prefix)
    6. Keyword overrides (typically CLI flags)

Example:
    >>> config = load_config(max_depth=3)
    >>> config.max_depth
    3
    >>> config.thresholds.min_unused_confidence
    0.65
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import InvalidConfigError, InvalidPathError, SignalInsightError

Verbosity = Literal["quiet", "normal", "verbose"]


@dataclass(frozen=True)
class ThresholdConfig:
    """Heuristic constants for the three analyses.

    Exposed so callers can tune the precision/recall tradeoff without
    editing code.

    Attributes:
        Unused detection:
            isolated_confidence: Fixed confidence for signals with no usage at all
            orphan_base_confidence: Start score for connected-but-never-emitted signals
            dead_emitter_base_confidence: Start score for emitted-but-never-connected signals
            private_penalty: Deducted when the name starts with an underscore
            inheritance_penalty: Deducted when definitions span several files
            event_bus_penalty: Deducted when emitted through a global event bus
            autoload_penalty: Deducted when emitted from an autoload singleton
            min_unused_confidence: Findings below this are dropped
            event_bus_names: Emitter labels treated as global event buses
            autoload_path_markers: Path fragments identifying autoload singletons

        Refactoring:
            merge_max_distance: Largest edit distance still suggested as a merge
            merge_max_length_delta: Pairs differing in length by more are skipped
            min_merge_confidence: Default reporting bar for suggestions

        Clustering:
            cluster_min_gain: Modularity gain a move must exceed
            cluster_max_sweeps: Cap on full sweeps over the nodes
            label_top_terms: Terms joined into a cluster label
            min_size_for_subclustering: Smallest cluster that gets re-clustered
    """

    # === Unused Detection ===
    isolated_confidence: float = 1.0
    orphan_base_confidence: float = 0.95
    dead_emitter_base_confidence: float = 0.90
    private_penalty: float = 0.15
    inheritance_penalty: float = 0.20
    event_bus_penalty: float = 0.10
    autoload_penalty: float = 0.20
    min_unused_confidence: float = 0.65
    event_bus_names: tuple[str, ...] = ("EventBus", "Events", "SignalBus", "GlobalEvents")
    autoload_path_markers: tuple[str, ...] = ("/autoload/", "/autoloads/")

    # === Refactoring ===
    merge_max_distance: int = 2
    merge_max_length_delta: int = 3
    min_merge_confidence: float = 0.98

    # === Clustering (single-level greedy modularity) ===
    cluster_min_gain: float = 1e-6
    cluster_max_sweeps: int = 100
    label_top_terms: int = 3
    min_size_for_subclustering: int = 5

    def __post_init__(self) -> None:
        """Validate threshold configuration."""
        unit_fields = [
            "isolated_confidence",
            "orphan_base_confidence",
            "dead_emitter_base_confidence",
            "private_penalty",
            "inheritance_penalty",
            "event_bus_penalty",
            "autoload_penalty",
            "min_unused_confidence",
            "min_merge_confidence",
        ]
        for field_name in unit_fields:
            value = getattr(self, field_name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{field_name} must be between 0.0 and 1.0")

        if self.merge_max_distance < 1:
            raise ValueError("merge_max_distance must be at least 1")
        if self.merge_max_length_delta < 0:
            raise ValueError("merge_max_length_delta must be non-negative")
        if self.cluster_min_gain < 0:
            raise ValueError("cluster_min_gain must be non-negative")
        if self.cluster_max_sweeps < 1:
            raise ValueError("cluster_max_sweeps must be at least 1")
        if self.label_top_terms < 1:
            raise ValueError("label_top_terms must be at least 1")
        if self.min_size_for_subclustering < 2:
            raise ValueError("min_size_for_subclustering must be at least 2")

        # TOML arrays arrive as lists
        object.__setattr__(self, "event_bus_names", tuple(self.event_bus_names))
        object.__setattr__(self, "autoload_path_markers", tuple(self.autoload_path_markers))


DEFAULT_THRESHOLDS = ThresholdConfig()


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for an analysis run.

    Attributes:
        cache_path: Location of the flat graph cache
        workers: Extraction threads (None = extract serially)
        max_depth: Clustering hierarchy depth
        max_suggestions: Cap on refactoring suggestions returned
        verbosity: Logging verbosity level
        thresholds: Heuristic constants
    """

    cache_path: str = ".signal-insight/signal_graph.json"
    workers: Optional[int] = None
    max_depth: int = 2
    max_suggestions: int = 50
    verbosity: Verbosity = "normal"

    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.workers is not None and self.workers < 1:
            raise ValueError("workers must be at least 1")
        if self.max_depth < 1:
            raise ValueError("max_depth must be at least 1")
        if self.max_suggestions < 1:
            raise ValueError("max_suggestions must be at least 1")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError("verbosity must be one of: quiet, normal, verbose")


def load_config(config_file: Optional[Path] = None, **overrides) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags)

    Returns:
        Validated AnalysisConfig instance

    Raises:
        SignalInsightError: If a config file is invalid or missing
    """
    merged: dict = {}

    global_config = Path.home() / ".signal-insight.toml"
    if global_config.exists():
        try:
            merged.update(_load_toml_file(global_config))
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise SignalInsightError(f"Invalid global config '{global_config}': {e}")

    project_config = Path.cwd() / "signal-insight.toml"
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise SignalInsightError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise InvalidPathError(config_file, "config file not found")
        try:
            merged.update(_load_toml_file(config_file))
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise SignalInsightError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update({k: v for k, v in overrides.items() if v is not None})

    thresholds_dict = merged.pop("thresholds", None)
    if thresholds_dict is not None:
        if isinstance(thresholds_dict, dict):
            try:
                merged["thresholds"] = ThresholdConfig(**thresholds_dict)
            except (TypeError, ValueError) as e:
                raise InvalidConfigError("thresholds", thresholds_dict, str(e))
        elif isinstance(thresholds_dict, ThresholdConfig):
            merged["thresholds"] = thresholds_dict

    try:
        return AnalysisConfig(**merged)
    except (TypeError, ValueError) as e:
        raise SignalInsightError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from SIGNAL_INSIGHT_* environment variables.

    Supported environment variables:
        SIGNAL_INSIGHT_CACHE_PATH: str
        SIGNAL_INSIGHT_WORKERS: int
        SIGNAL_INSIGHT_MAX_DEPTH: int
        SIGNAL_INSIGHT_MAX_SUGGESTIONS: int
        SIGNAL_INSIGHT_VERBOSITY: quiet/normal/verbose
    """
    type_hints = get_type_hints(AnalysisConfig)

    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"SIGNAL_INSIGHT_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type."""
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]

    if type_hint is int:
        return int(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict."""
    with open(path, "rb") as f:
        return tomllib.load(f)
