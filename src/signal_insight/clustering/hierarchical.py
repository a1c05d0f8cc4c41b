"""Hierarchical clustering of signals with TF-IDF labels.

Level 1 partitions the co-occurrence graph of every signal name. With
``max_depth`` >= 2, each cluster holding at least
``min_size_for_subclustering`` signals is partitioned again using only
the edges inside it, down to the requested depth. A nested partition
that leaves the parent in one piece is discarded.
"""

from __future__ import annotations

import time
from typing import Optional

from ..config import DEFAULT_THRESHOLDS, ThresholdConfig
from ..graph.builder import AnyGraph
from ..logging_config import get_logger
from ..validation import validate_signal_names
from .community import Edge, build_cooccurrence_graph, detect_communities, induced_subgraph
from .labeler import TfidfLabeler
from .models import Cluster, ClusteringStats, ClusterMetadata, ClusterResult

logger = get_logger(__name__)


class HierarchicalClusterer:
    """Groups related signals into labeled, optionally nested, clusters.

    Usage:
        clusterer = HierarchicalClusterer()
        result = clusterer.cluster_hierarchical(graph, max_depth=2)
        for cluster in result.clusters.values():
            print(cluster.label, cluster.signals)
    """

    def __init__(self, thresholds: ThresholdConfig = DEFAULT_THRESHOLDS) -> None:
        self.thresholds = thresholds
        self.labeler = TfidfLabeler()
        self.last_stats = ClusteringStats()

    def cluster_hierarchical(
        self,
        graph: AnyGraph,
        max_depth: int = 2,
        min_size_for_subclustering: Optional[int] = None,
    ) -> ClusterResult:
        """Cluster every signal in *graph*.

        Args:
            graph: Partial or full signal graph
            max_depth: Levels of hierarchy (1 = flat)
            min_size_for_subclustering: Smallest cluster that is re-clustered;
                defaults to ``thresholds.min_size_for_subclustering``

        Raises:
            ValueError: If max_depth < 1 or min_size_for_subclustering < 1
        """
        if min_size_for_subclustering is None:
            min_size_for_subclustering = self.thresholds.min_size_for_subclustering
        if max_depth < 1:
            raise ValueError("max_depth must be at least 1")
        if min_size_for_subclustering < 1:
            raise ValueError("min_size_for_subclustering must be at least 1")

        start = time.perf_counter()

        nodes, edges = build_cooccurrence_graph(graph)
        validate_signal_names(nodes)
        self.labeler.build_corpus(nodes)

        logger.debug(
            f"Clustering {len(nodes)} signals ({len(edges)} edges), depth {max_depth}, "
            f"min sub-cluster size {min_size_for_subclustering}"
        )

        result = self._cluster_level(
            nodes, edges, max_depth, min_size_for_subclustering, max_depth
        )

        duration_ms = (time.perf_counter() - start) * 1000
        sizes = [c.size for c in result.clusters.values()]
        self.last_stats = ClusteringStats(
            duration_ms=duration_ms,
            top_level_clusters=len(result.clusters),
            sub_clusters_total=sum(len(sub.clusters) for sub in result.sub_clusters.values()),
            avg_cluster_size=sum(sizes) / len(sizes) if sizes else 0.0,
            max_cluster_size=max(sizes, default=0),
            min_cluster_size=min(sizes, default=0),
            modularity=result.modularity,
        )
        logger.debug(
            f"Clustering done in {duration_ms:.1f}ms: {self.last_stats.top_level_clusters} "
            f"top-level, {self.last_stats.sub_clusters_total} sub-clusters, "
            f"Q={result.modularity:.4f}"
        )
        return result

    def _cluster_level(
        self,
        nodes: list[str],
        edges: set[Edge],
        remaining: int,
        min_size: int,
        max_depth: int,
    ) -> ClusterResult:
        """One level of the hierarchy; *remaining* counts this level."""
        t = self.thresholds
        communities, modularity = detect_communities(
            nodes, edges, min_gain=t.cluster_min_gain, max_sweeps=t.cluster_max_sweeps
        )

        clusters: dict[int, Cluster] = {}
        for cluster_id, members in communities.items():
            ordered = sorted(members)
            label, top_terms = self.labeler.generate_label_with_scores(
                ordered, top_n=t.label_top_terms
            )
            clusters[cluster_id] = Cluster(
                id=cluster_id, label=label, signals=tuple(ordered), top_terms=tuple(top_terms)
            )

        sub_clusters: dict[int, ClusterResult] = {}
        if remaining >= 2:
            for cluster_id, cluster in clusters.items():
                if cluster.size < min_size:
                    continue
                sub_nodes, sub_edges = induced_subgraph(cluster.signals, edges)
                nested = self._cluster_level(
                    sub_nodes, sub_edges, remaining - 1, min_size, max_depth
                )
                if len(nested.clusters) > 1:
                    sub_clusters[cluster_id] = nested

        return ClusterResult(
            clusters=clusters,
            modularity=modularity,
            sub_clusters=sub_clusters,
            metadata=ClusterMetadata(
                depth=max_depth,
                total_signals=len(nodes),
                top_level_count=len(clusters),
                timestamp=int(time.time() * 1000),
            ),
        )
