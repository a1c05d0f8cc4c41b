"""Signal graph construction from per-file extraction results.

The builder never looks inside a syntax tree. For every file record it
asks the extractor for definitions, emissions and (full build only)
connections, then folds the sites into name -> [site] indices.

A file whose extraction raises contributes nothing; the rest of the
build carries on. With ``workers`` set, extraction runs on a thread pool
while folding stays on the calling thread; only the multiset of sites
per signal is guaranteed in that mode, not their order.
"""

from __future__ import annotations

import time
import tracemalloc
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Iterable, Optional, Protocol, Sequence, TypeVar, Union

from ..config import AnalysisConfig
from ..exceptions import ErrorCode, GraphBuildError
from ..logging_config import get_logger, log_signal_error
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

logger = get_logger(__name__)

AnyGraph = Union[PartialGraph, SignalGraph]
_Site = TypeVar("_Site", SignalDefinition, EmissionSite, ConnectionSite)


class SignalExtractor(Protocol):
    """Extraction capability supplied by the parsing layer."""

    def extract_definitions(self, tree: object) -> Sequence[SignalDefinition]: ...

    def extract_emissions(self, tree: object, file_path: str) -> Sequence[EmissionSite]: ...

    def extract_connections(self, tree: object, file_path: str) -> Sequence[ConnectionSite]: ...


@dataclass
class _FileSites:
    """Sites extracted from one file, or nothing if extraction failed."""

    file_path: str
    definitions: list[SignalDefinition] = field(default_factory=list)
    emissions: list[EmissionSite] = field(default_factory=list)
    connections: list[ConnectionSite] = field(default_factory=list)
    failed: bool = False


class SignalGraphBuilder:
    """Builds partial and full signal graphs from file records.

    Usage:
        builder = SignalGraphBuilder(extractor)
        graph = builder.build_full_graph(records)
        builder.stats.files_processed
    """

    def __init__(self, extractor: SignalExtractor, workers: Optional[int] = None) -> None:
        if workers is not None and workers < 1:
            raise ValueError("workers must be at least 1")
        self._extractor = extractor
        self._workers = workers
        self.stats = GraphBuilderStats()

    @classmethod
    def from_config(
        cls, extractor: SignalExtractor, config: AnalysisConfig
    ) -> SignalGraphBuilder:
        """Builder using the configured number of extraction threads."""
        return cls(extractor, workers=config.workers)

    # ── Building ────────────────────────────────────────────────

    def build_partial_graph(self, records: Sequence[FileRecord]) -> PartialGraph:
        """Build definitions + emissions for every record."""
        definitions, emissions, _, stats = self._build(records, with_connections=False)
        metadata = _make_metadata(len(records), definitions, emissions, {})
        self.stats = stats
        return PartialGraph(definitions=definitions, emissions=emissions, metadata=metadata)

    def build_full_graph(self, records: Sequence[FileRecord]) -> SignalGraph:
        """Build definitions, emissions and connections for every record."""
        definitions, emissions, connections, stats = self._build(records, with_connections=True)
        metadata = _make_metadata(len(records), definitions, emissions, connections)
        self.stats = stats
        return SignalGraph(
            definitions=definitions,
            emissions=emissions,
            connections=connections,
            metadata=metadata,
        )

    def _build(
        self, records: Sequence[FileRecord], with_connections: bool
    ) -> tuple[
        dict[str, list[SignalDefinition]],
        dict[str, list[EmissionSite]],
        dict[str, list[ConnectionSite]],
        GraphBuilderStats,
    ]:
        start = time.perf_counter()
        tracing = tracemalloc.is_tracing()
        if tracing:
            tracemalloc.reset_peak()

        definitions: dict[str, list[SignalDefinition]] = {}
        emissions: dict[str, list[EmissionSite]] = {}
        connections: dict[str, list[ConnectionSite]] = {}
        failed = 0

        for sites in self._extract_all(records, with_connections):
            if sites.failed:
                failed += 1
                continue
            _fold(definitions, sites.definitions, lambda d: d.name)
            _fold(emissions, sites.emissions, lambda e: e.signal_name)
            _fold(connections, sites.connections, lambda c: c.signal_name)

        duration_ms = (time.perf_counter() - start) * 1000
        peak = tracemalloc.get_traced_memory()[1] if tracing else 0

        stats = GraphBuilderStats(
            files_processed=len(records),
            files_failed=failed,
            signals_discovered=len(definitions.keys() | emissions.keys() | connections.keys()),
            emissions_found=_count(emissions),
            connections_found=_count(connections),
            duration_ms=duration_ms,
            peak_memory_bytes=peak,
        )
        logger.debug(
            f"Built {'full' if with_connections else 'partial'} graph: "
            f"{stats.files_processed} files ({failed} failed), "
            f"{stats.signals_discovered} signals, {stats.emissions_found} emissions, "
            f"{stats.connections_found} connections in {duration_ms:.1f}ms"
        )
        return definitions, emissions, connections, stats

    def _extract_all(
        self, records: Sequence[FileRecord], with_connections: bool
    ) -> Iterable[_FileSites]:
        if self._workers is None or self._workers == 1 or len(records) < 2:
            for record in records:
                yield self._extract_file(record, with_connections)
            return

        with ThreadPoolExecutor(max_workers=self._workers) as executor:
            futures = [
                executor.submit(self._extract_file, record, with_connections)
                for record in records
            ]
            for future in futures:
                yield future.result()

    def _extract_file(self, record: FileRecord, with_connections: bool) -> _FileSites:
        """Extract every site of one file; any failure discards the whole file."""
        sites = _FileSites(file_path=record.file_path)
        try:
            sites.definitions = list(self._extractor.extract_definitions(record.tree))
            sites.emissions = list(
                self._extractor.extract_emissions(record.tree, record.file_path)
            )
            if with_connections:
                sites.connections = list(
                    self._extractor.extract_connections(record.tree, record.file_path)
                )
        except Exception as e:
            _log_skipped(
                GraphBuildError(
                    message=f"Extraction failed for {record.file_path}: {e}",
                    code=ErrorCode.SI100,
                    context={"file": record.file_path, "error": type(e).__name__},
                )
            )
            return _FileSites(file_path=record.file_path, failed=True)

        malformed = [
            s
            for s in (*sites.definitions, *sites.emissions, *sites.connections)
            if not _site_name(s)
        ]
        if malformed:
            _log_skipped(
                GraphBuildError(
                    message=(
                        f"Extractor returned {len(malformed)} unnamed site(s) "
                        f"for {record.file_path}"
                    ),
                    code=ErrorCode.SI101,
                    context={"file": record.file_path, "malformed": len(malformed)},
                )
            )
            return _FileSites(file_path=record.file_path, failed=True)

        return sites

    # ── Queries ─────────────────────────────────────────────────

    def get_definitions(self, graph: AnyGraph, signal_name: str) -> list[SignalDefinition]:
        return get_definitions(graph, signal_name)

    def get_emissions(self, graph: AnyGraph, signal_name: str) -> list[EmissionSite]:
        return get_emissions(graph, signal_name)

    def get_connections(self, graph: AnyGraph, signal_name: str) -> list[ConnectionSite]:
        return get_connections(graph, signal_name)

    def get_all_signal_names(self, graph: AnyGraph) -> list[str]:
        return get_all_signal_names(graph)

    def find_undefined_signals(self, graph: AnyGraph) -> list[str]:
        return find_undefined_signals(graph)

    def find_unemitted_signals(self, graph: AnyGraph) -> list[str]:
        return find_unemitted_signals(graph)


# ── Module-level queries (shared with the analyzers) ───────────────


def get_definitions(graph: AnyGraph, signal_name: str) -> list[SignalDefinition]:
    """Definition sites for *signal_name*; empty if unknown."""
    return list(graph.definitions.get(signal_name, ()))


def get_emissions(graph: AnyGraph, signal_name: str) -> list[EmissionSite]:
    """Emission sites for *signal_name*; empty if unknown."""
    return list(graph.emissions.get(signal_name, ()))


def get_connections(graph: AnyGraph, signal_name: str) -> list[ConnectionSite]:
    """Connection sites for *signal_name*; empty if unknown or partial graph."""
    return list(_connections_of(graph).get(signal_name, ()))


def get_all_signal_names(graph: AnyGraph) -> list[str]:
    """Sorted, duplicate-free union of the names in all indices."""
    names = set(graph.definitions) | set(graph.emissions) | set(_connections_of(graph))
    return sorted(names)


def find_undefined_signals(graph: AnyGraph) -> list[str]:
    """Names with emission or connection evidence but no definition."""
    used = set(graph.emissions) | set(_connections_of(graph))
    return sorted(name for name in used if name not in graph.definitions)


def find_unemitted_signals(graph: AnyGraph) -> list[str]:
    """Defined names with zero emission sites."""
    return sorted(name for name in graph.definitions if name not in graph.emissions)


# ── Helpers ────────────────────────────────────────────────────────


def _log_skipped(error: GraphBuildError) -> None:
    log_signal_error(logger, error, suffix="; file skipped")


def _connections_of(graph: AnyGraph) -> dict[str, list[ConnectionSite]]:
    return getattr(graph, "connections", None) or {}


def _site_name(site: SignalDefinition | EmissionSite | ConnectionSite) -> str:
    name = site.name if isinstance(site, SignalDefinition) else site.signal_name
    return name if isinstance(name, str) and name.strip() else ""


def _fold(index: dict[str, list[_Site]], sites: Iterable[_Site], key) -> None:
    for site in sites:
        index.setdefault(key(site), []).append(site)


def _count(index: dict[str, list]) -> int:
    return sum(len(sites) for sites in index.values())


def _make_metadata(
    file_count: int,
    definitions: dict[str, list[SignalDefinition]],
    emissions: dict[str, list[EmissionSite]],
    connections: dict[str, list[ConnectionSite]],
) -> GraphMetadata:
    return GraphMetadata(
        version=SCHEMA_VERSION,
        timestamp=int(time.time() * 1000),
        file_count=file_count,
        signal_count=len(definitions.keys() | emissions.keys() | connections.keys()),
        definition_count=_count(definitions),
        emission_count=_count(emissions),
        connection_count=_count(connections),
    )
