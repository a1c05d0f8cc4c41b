"""
Signal Insight - Static analysis of event signals

Aggregates every declaration, emission and connection of each signal
across a project into one graph, then finds unused signals, clusters
related ones and suggests merges and renames.
"""

__version__ = "0.1.0"

from .analysis import UnusedDetector, UnusedPattern, UnusedSignal
from .clustering import ClusterResult, HierarchicalClusterer
from .config import AnalysisConfig, ThresholdConfig, load_config
from .graph import (
    ConnectionSite,
    EmissionSite,
    FileRecord,
    GraphSerializer,
    SignalDefinition,
    SignalGraph,
    SignalGraphBuilder,
)
from .refactoring import RefactoringEngine, RefactorSuggestion, RefactorType

__all__ = [
    "SignalGraphBuilder",  # Build the graph from extractor output
    "GraphSerializer",  # Flat-file cache
    "UnusedDetector",
    "HierarchicalClusterer",
    "RefactoringEngine",
    "SignalGraph",
    "SignalDefinition",
    "EmissionSite",
    "ConnectionSite",
    "FileRecord",
    "UnusedSignal",
    "UnusedPattern",
    "ClusterResult",
    "RefactorSuggestion",
    "RefactorType",
    "AnalysisConfig",
    "ThresholdConfig",
    "load_config",
]
