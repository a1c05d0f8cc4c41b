"""Error taxonomy with error codes and recovery hints.

Error Code Convention:
    SI1xx - Graph building errors
    SI2xx - Cache errors
    SI4xx - Clustering errors
    SI8xx - Validation errors
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Structured error codes for observability and debugging."""

    # Graph building errors (SI1xx)
    SI100 = "SI100"  # Per-file extraction failed
    SI101 = "SI101"  # Extractor returned a malformed site

    # Cache errors (SI2xx)
    SI200 = "SI200"  # Cache read failed
    SI201 = "SI201"  # Cache write failed
    SI202 = "SI202"  # Cache version mismatch

    # Clustering errors (SI4xx)
    SI400 = "SI400"  # Sweep cap reached before convergence

    # Validation errors (SI8xx)
    SI800 = "SI800"  # Graph metadata disagrees with indices
    SI801 = "SI801"  # Empty sequence stored under a signal key


@dataclass
class SignalError(Exception):
    """Base exception with structured context for logging.

    Attributes:
        message: Human-readable error description
        code: Structured error code for categorization
        context: Additional context (file path, signal name, etc.)
        recoverable: Whether the error can be recovered from
        recovery_hint: Suggested fix for the user
    """

    message: str
    code: ErrorCode
    context: dict[str, Any] = field(default_factory=dict)
    recoverable: bool = True
    recovery_hint: str | None = None

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def __post_init__(self) -> None:
        super().__init__(str(self))

    def to_json(self) -> dict[str, Any]:
        """Structured logging format."""
        return {
            "error_code": self.code.value,
            "message": self.message,
            "context": self.context,
            "recoverable": self.recoverable,
            "recovery_hint": self.recovery_hint,
        }


class GraphBuildError(SignalError):
    """Errors during signal graph construction (SI1xx)."""

    pass


class CacheError(SignalError):
    """Errors while reading or writing the graph cache (SI2xx)."""

    pass


class ClusteringError(SignalError):
    """Errors during community detection and labeling (SI4xx)."""

    pass


class ContractViolationError(SignalError):
    """Graph or result invariants broken (SI8xx)."""

    pass
