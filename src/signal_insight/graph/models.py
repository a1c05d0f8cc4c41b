"""Data models for the cross-file signal graph.

Levels:
  Sites: one declaration, emission or connection of a signal in one file
  Indices: signal name -> every site of that kind, across all files
  Graph: the three indices plus build metadata

All sites are immutable. A graph is built once per scan and only read
afterwards, so analyzers may share it without locking.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

SCHEMA_VERSION = "3.0.0"

LAMBDA_HANDLER = "<lambda>"


# ── Sites ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class SignalDefinition:
    """A signal declaration site."""

    name: str
    params: tuple[str, ...] = ()
    file_path: str = ""
    line: int = 1  # 1-indexed
    source: str = ""  # logical owner, usually derived from the file
    param_types: Optional[dict[str, str]] = None


@dataclass(frozen=True)
class EmissionSite:
    """A call site that fires a signal."""

    signal_name: str
    file_path: str
    line: int
    context: str = ""
    emitter: Optional[str] = None  # receiver expression, e.g. 'self' or 'EventBus'
    args: Optional[tuple[str, ...]] = None


@dataclass(frozen=True)
class ConnectionSite:
    """A call site that subscribes a handler to a signal."""

    signal_name: str
    file_path: str
    line: int
    context: str = ""
    target: Optional[str] = None
    handler: str = LAMBDA_HANDLER
    flags: Optional[tuple[str, ...]] = None
    is_lambda: bool = False


# ── Graph ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class GraphMetadata:
    """Versioning and summary counters for a built graph.

    The site counters always equal the summed sequence lengths of the
    matching index; ``signal_count`` is the number of distinct names
    across all indices.
    """

    version: str = SCHEMA_VERSION
    timestamp: int = 0  # build time, Unix milliseconds
    file_count: int = 0
    signal_count: int = 0
    definition_count: int = 0
    emission_count: int = 0
    connection_count: int = 0


@dataclass
class PartialGraph:
    """Definitions and emissions only: the intermediate build stage.

    A key is present in an index only when its sequence is non-empty.
    """

    definitions: dict[str, list[SignalDefinition]] = field(default_factory=dict)
    emissions: dict[str, list[EmissionSite]] = field(default_factory=dict)
    metadata: GraphMetadata = field(default_factory=GraphMetadata)


@dataclass
class SignalGraph(PartialGraph):
    """Complete graph: definitions, emissions and connections."""

    connections: dict[str, list[ConnectionSite]] = field(default_factory=dict)


# ── Builder input and instrumentation ──────────────────────────────


@dataclass(frozen=True)
class FileRecord:
    """One parsed file handed over by the parsing layer.

    The tree handle is opaque here; it is only passed back to the
    extractor.
    """

    tree: Any
    file_path: str
    size_bytes: int = 0
    parse_duration_ms: float = 0.0
    modification_time: float = 0.0


@dataclass(frozen=True)
class GraphBuilderStats:
    """Measurements of a single build call."""

    files_processed: int = 0
    files_failed: int = 0
    signals_discovered: int = 0
    emissions_found: int = 0
    connections_found: int = 0
    duration_ms: float = 0.0
    peak_memory_bytes: int = 0
