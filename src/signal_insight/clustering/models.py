"""Result types for hierarchical signal clustering."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TermScore:
    """Relevance of one label term within a cluster."""

    term: str
    tf: float
    idf: float
    tfidf: float


@dataclass(frozen=True)
class Cluster:
    """A community of related signals with its semantic label."""

    id: int
    label: str
    signals: tuple[str, ...]  # sorted member names
    top_terms: tuple[TermScore, ...] = ()

    @property
    def size(self) -> int:
        return len(self.signals)


@dataclass(frozen=True)
class ClusterMetadata:
    depth: int  # requested max_depth, the same at every level
    total_signals: int
    top_level_count: int
    timestamp: int  # Unix milliseconds


@dataclass
class ClusterResult:
    """Partition of a set of signals, optionally with nested partitions.

    ``sub_clusters`` maps a cluster id of this level to the partition of
    that cluster's members. Only clusters that were re-clustered into more
    than one part appear there.
    """

    clusters: dict[int, Cluster] = field(default_factory=dict)
    modularity: float = 0.0
    sub_clusters: dict[int, "ClusterResult"] = field(default_factory=dict)
    metadata: ClusterMetadata = field(
        default_factory=lambda: ClusterMetadata(
            depth=1, total_signals=0, top_level_count=0, timestamp=0
        )
    )

    def cluster_of(self, signal_name: str) -> int | None:
        """Id of the top-level cluster containing *signal_name*."""
        for cluster in self.clusters.values():
            if signal_name in cluster.signals:
                return cluster.id
        return None


@dataclass(frozen=True)
class ClusteringStats:
    """Measurements of a single clustering call."""

    duration_ms: float = 0.0
    top_level_clusters: int = 0
    sub_clusters_total: int = 0
    avg_cluster_size: float = 0.0
    max_cluster_size: int = 0
    min_cluster_size: int = 0
    modularity: float = 0.0
