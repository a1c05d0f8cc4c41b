"""Flat-file cache for signal graphs.

The cache is a single JSON document:

    {
      "version": "3.0.0",
      "metadata": {...GraphMetadata fields...},
      "definitions": {"signal_name": [{...}, ...], ...},
      "emissions":   {"signal_name": [{...}, ...], ...},
      "connections": {"signal_name": [{...}, ...], ...}
    }

Reads are forgiving: a missing, malformed, inconsistent or
version-mismatched file is reported as "no cache" (``None``) and the
caller rebuilds. Writes go to a
temporary file in the same directory and are swapped in with
``os.replace`` so an interrupted save leaves the previous cache intact.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Optional, Union

from ..exceptions import CacheError, ContractViolationError, ErrorCode, InvalidSignalNameError
from ..logging_config import get_logger, log_signal_error
from ..validation import validate_graph
from .models import (
    SCHEMA_VERSION,
    ConnectionSite,
    EmissionSite,
    GraphMetadata,
    PartialGraph,
    SignalDefinition,
    SignalGraph,
)

logger = get_logger(__name__)

PathLike = Union[str, Path]


@dataclass(frozen=True)
class CacheStats:
    """Size and build time of a cache file."""

    size_bytes: int
    timestamp: int  # build timestamp recorded in the cache, Unix ms
    modified_at: float  # file mtime, Unix seconds


class _MalformedCache(ValueError):
    """Document does not have the expected shape."""


class GraphSerializer:
    """Save and load signal graphs.

    Usage:
        serializer = GraphSerializer()
        serializer.save(graph, ".signal-insight/signal_graph.json")
        cached = serializer.load(".signal-insight/signal_graph.json")
        if cached is None:
            cached = builder.build_full_graph(records)
    """

    def __init__(self, version: str = SCHEMA_VERSION) -> None:
        self.version = version

    def save(self, graph: PartialGraph, path: PathLike) -> None:
        """Write *graph* to *path* atomically.

        Raises:
            CacheError: If the document cannot be written.
        """
        start = time.perf_counter()
        target = Path(path)
        document = graph_to_dict(graph, self.version)

        tmp_name: Optional[str] = None
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=target.parent, prefix=f".{target.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, target)
            tmp_name = None
        except OSError as e:
            raise CacheError(
                message=f"Failed to write graph cache to {target}: {e}",
                code=ErrorCode.SI201,
                context={"path": str(target)},
                recovery_hint="Check that the cache directory is writable",
            ) from e
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.debug(f"Could not remove temporary cache file {tmp_name}")

        logger.debug(f"Saved graph to {target} in {(time.perf_counter() - start) * 1000:.1f}ms")

    def load(self, path: PathLike) -> Optional[SignalGraph]:
        """Read a cached graph, or ``None`` if there is no usable cache."""
        start = time.perf_counter()
        document = self._read_document(Path(path))
        if document is None:
            return None

        try:
            graph = graph_from_dict(document)
        except (_MalformedCache, KeyError, TypeError, ValueError) as e:
            logger.debug(f"Malformed graph cache {path}: {e}")
            return None

        try:
            validate_graph(graph)
        except (ContractViolationError, InvalidSignalNameError) as e:
            logger.debug(f"Inconsistent graph cache {path}: {e}")
            return None

        logger.debug(f"Loaded graph from {path} in {(time.perf_counter() - start) * 1000:.1f}ms")
        return graph

    def is_stale(self, path: PathLike, reference_timestamp: float) -> bool:
        """True if the cache is unusable or older than *reference_timestamp*.

        Args:
            path: Cache file
            reference_timestamp: Most recent known source change, Unix ms.
                Supplied by the caller; the file system is not consulted.
        """
        document = self._read_document(Path(path))
        if document is None:
            return True
        try:
            timestamp = document["metadata"]["timestamp"]
        except (KeyError, TypeError):
            return True
        if not isinstance(timestamp, (int, float)) or isinstance(timestamp, bool):
            return True
        return timestamp < reference_timestamp

    def get_stats(self, path: PathLike) -> Optional[CacheStats]:
        """Byte size and build timestamp of the cache, or ``None``."""
        target = Path(path)
        document = self._read_document(target)
        if document is None:
            return None
        try:
            stat = target.stat()
            timestamp = int(document["metadata"]["timestamp"])
        except (OSError, KeyError, TypeError, ValueError):
            return None
        return CacheStats(size_bytes=stat.st_size, timestamp=timestamp, modified_at=stat.st_mtime)

    def _read_document(self, path: Path) -> Optional[dict[str, Any]]:
        """Parse the document and check its version tag."""
        try:
            with open(path, encoding="utf-8") as f:
                document = json.load(f)
        except FileNotFoundError:
            logger.debug(f"No graph cache at {path}")
            return None
        except (OSError, UnicodeDecodeError, RecursionError, json.JSONDecodeError) as e:
            error = CacheError(
                f"Unreadable graph cache {path}: {e}",
                code=ErrorCode.SI200,
                context={"path": str(path)},
                recovery_hint="Rebuild the graph and save it again",
            )
            log_signal_error(logger, error)
            return None

        if not isinstance(document, dict):
            logger.debug(f"Graph cache {path} is not a JSON object")
            return None

        version = document.get("version")
        if version != self.version:
            error = CacheError(
                f"Cache version mismatch: expected {self.version}, got {version}. Ignoring cache.",
                code=ErrorCode.SI202,
                context={"path": str(path), "version": version},
            )
            log_signal_error(logger, error, logging.WARNING)
            return None

        return document


# ── Document conversion ────────────────────────────────────────────


def graph_to_dict(graph: PartialGraph, version: str = SCHEMA_VERSION) -> dict[str, Any]:
    """Plain-object form of *graph* (indices become key -> array objects)."""
    document: dict[str, Any] = {
        "version": version,
        "metadata": asdict(graph.metadata),
        "definitions": {
            name: [asdict(d) for d in sites] for name, sites in graph.definitions.items()
        },
        "emissions": {
            name: [asdict(e) for e in sites] for name, sites in graph.emissions.items()
        },
        "connections": {
            name: [asdict(c) for c in sites]
            for name, sites in (getattr(graph, "connections", None) or {}).items()
        },
    }
    return document


def graph_from_dict(document: dict[str, Any]) -> SignalGraph:
    """Rebuild a graph from :func:`graph_to_dict` output.

    Raises:
        _MalformedCache, KeyError, TypeError, ValueError: On shape errors.
    """
    metadata_raw = document["metadata"]
    if not isinstance(metadata_raw, dict):
        raise _MalformedCache("metadata must be an object")
    metadata = GraphMetadata(**metadata_raw)

    definitions = _read_index(document["definitions"], _definition_from_dict, lambda d: d.name)
    emissions = _read_index(document["emissions"], _emission_from_dict, lambda e: e.signal_name)
    connections = _read_index(
        document.get("connections") or {}, _connection_from_dict, lambda c: c.signal_name
    )

    return SignalGraph(
        definitions=definitions,
        emissions=emissions,
        connections=connections,
        metadata=metadata,
    )


def _read_index(raw: Any, convert, key) -> dict[str, list]:
    if not isinstance(raw, dict):
        raise _MalformedCache("index must be an object")
    index: dict[str, list] = {}
    for name, sites in raw.items():
        if not isinstance(sites, list):
            raise _MalformedCache(f"sites for {name!r} must be an array")
        if sites:
            index[name] = [convert(site) for site in sites]
            if any(key(site) != name for site in index[name]):
                raise _MalformedCache(f"site stored under {name!r} names another signal")
    return index


def _tuple_or_none(value: Any) -> Optional[tuple[str, ...]]:
    return None if value is None else tuple(value)


def _definition_from_dict(raw: dict[str, Any]) -> SignalDefinition:
    return SignalDefinition(
        name=raw["name"],
        params=tuple(raw.get("params") or ()),
        file_path=raw.get("file_path", ""),
        line=raw.get("line", 1),
        source=raw.get("source", ""),
        param_types=raw.get("param_types"),
    )


def _emission_from_dict(raw: dict[str, Any]) -> EmissionSite:
    return EmissionSite(
        signal_name=raw["signal_name"],
        file_path=raw["file_path"],
        line=raw["line"],
        context=raw.get("context", ""),
        emitter=raw.get("emitter"),
        args=_tuple_or_none(raw.get("args")),
    )


def _connection_from_dict(raw: dict[str, Any]) -> ConnectionSite:
    return ConnectionSite(
        signal_name=raw["signal_name"],
        file_path=raw["file_path"],
        line=raw["line"],
        context=raw.get("context", ""),
        target=raw.get("target"),
        handler=raw["handler"],
        flags=_tuple_or_none(raw.get("flags")),
        is_lambda=bool(raw.get("is_lambda", False)),
    )
