"""Hierarchical community detection over the signal co-occurrence graph."""

from .community import (
    build_cooccurrence_graph,
    compute_modularity,
    detect_communities,
    induced_subgraph,
)
from .hierarchical import HierarchicalClusterer
from .labeler import CorpusStats, TfidfLabeler, tokenize
from .models import Cluster, ClusteringStats, ClusterMetadata, ClusterResult, TermScore

__all__ = [
    "Cluster",
    "ClusterMetadata",
    "ClusterResult",
    "ClusteringStats",
    "CorpusStats",
    "HierarchicalClusterer",
    "TermScore",
    "TfidfLabeler",
    "build_cooccurrence_graph",
    "compute_modularity",
    "detect_communities",
    "induced_subgraph",
    "tokenize",
]
