"""Fail-fast contract checks shared by the analyzers.

These guard programming-contract violations (empty names, confidences
outside [0, 1], metadata drifting from the indices). They are not meant
to catch expected runtime conditions such as unparsable files.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from .exceptions import (
    ConfidenceRangeError,
    ContractViolationError,
    ErrorCode,
    InvalidSignalNameError,
)

if TYPE_CHECKING:
    from .graph.models import PartialGraph


def validate_signal_name(name: object) -> str:
    """Return *name* unchanged if it is a usable signal name."""
    if not isinstance(name, str):
        raise InvalidSignalNameError(name, "signal names must be strings")
    if not name.strip():
        raise InvalidSignalNameError(name, "signal names must not be empty")
    return name


def validate_signal_names(names: Iterable[object]) -> list[str]:
    return [validate_signal_name(n) for n in names]


def validate_confidence(value: float, context: str | None = None) -> float:
    """Return *value* unchanged if it lies in [0, 1]."""
    if not 0.0 <= value <= 1.0:
        raise ConfidenceRangeError(value, context)
    return value


def validate_graph(graph: PartialGraph) -> None:
    """Check the index/metadata invariants of a built graph.

    Raises:
        ContractViolationError: If any index stores an empty sequence or a
            metadata counter disagrees with the index it summarizes.
    """
    indices = {"definitions": graph.definitions, "emissions": graph.emissions}
    connections = getattr(graph, "connections", None)
    if connections is not None:
        indices["connections"] = connections

    for index_name, index in indices.items():
        for key, sites in index.items():
            validate_signal_name(key)
            if not sites:
                raise ContractViolationError(
                    message=f"Empty site list stored under {key!r} in {index_name}",
                    code=ErrorCode.SI801,
                    context={"index": index_name, "signal": key},
                    recoverable=False,
                )

    meta = graph.metadata
    expected = {
        "definition_count": sum(len(s) for s in graph.definitions.values()),
        "emission_count": sum(len(s) for s in graph.emissions.values()),
        "connection_count": sum(len(s) for s in (connections or {}).values()),
    }
    for counter, value in expected.items():
        actual = getattr(meta, counter)
        if actual != value:
            raise ContractViolationError(
                message=f"Metadata {counter}={actual} but indices hold {value}",
                code=ErrorCode.SI800,
                context={"counter": counter, "metadata": actual, "indices": value},
                recoverable=False,
            )
