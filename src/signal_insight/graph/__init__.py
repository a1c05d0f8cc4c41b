"""Signal graph: data model, builder and cache serializer."""

from .builder import (
    SignalExtractor,
    SignalGraphBuilder,
    find_undefined_signals,
    find_unemitted_signals,
    get_all_signal_names,
    get_connections,
    get_definitions,
    get_emissions,
)
from .models import (
    SCHEMA_VERSION,
    ConnectionSite,
    EmissionSite,
    FileRecord,
    GraphBuilderStats,
    GraphMetadata,
    PartialGraph,
    SignalDefinition,
    SignalGraph,
)
from .serializer import CacheStats, GraphSerializer

__all__ = [
    "SCHEMA_VERSION",
    "CacheStats",
    "ConnectionSite",
    "EmissionSite",
    "FileRecord",
    "GraphBuilderStats",
    "GraphMetadata",
    "GraphSerializer",
    "PartialGraph",
    "SignalDefinition",
    "SignalExtractor",
    "SignalGraph",
    "SignalGraphBuilder",
    "find_undefined_signals",
    "find_unemitted_signals",
    "get_all_signal_names",
    "get_connections",
    "get_definitions",
    "get_emissions",
]
