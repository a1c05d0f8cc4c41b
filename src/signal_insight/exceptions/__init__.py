"""Exception hierarchy for Signal Insight."""

from .analysis import (
    AnalysisError,
    ConfidenceRangeError,
    ExtractionError,
    InvalidSignalNameError,
)
from .base import SignalInsightError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
)
from .taxonomy import (
    CacheError,
    ClusteringError,
    ContractViolationError,
    ErrorCode,
    GraphBuildError,
    SignalError,
)

__all__ = [
    "SignalInsightError",
    "AnalysisError",
    "ExtractionError",
    "InvalidSignalNameError",
    "ConfidenceRangeError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
    "ErrorCode",
    "SignalError",
    "GraphBuildError",
    "CacheError",
    "ClusteringError",
    "ContractViolationError",
]
