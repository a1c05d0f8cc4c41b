"""Analysis-related exceptions: extraction failures and contract violations."""

from pathlib import Path
from typing import Optional, Union

from .base import SignalInsightError


class AnalysisError(SignalInsightError):
    """Base class for analysis-related errors."""
    pass


class ExtractionError(AnalysisError):
    """Raised by an extractor when a file cannot yield signal sites."""

    def __init__(self, filepath: Union[str, Path], stage: str, reason: str):
        super().__init__(
            f"Failed to extract {stage} from {filepath}",
            details={"filepath": str(filepath), "stage": stage, "reason": reason},
        )
        self.filepath = filepath
        self.stage = stage
        self.reason = reason


class InvalidSignalNameError(AnalysisError):
    """Raised when an empty or malformed signal name reaches an analyzer."""

    def __init__(self, name: object, reason: str):
        super().__init__(
            f"Invalid signal name: {name!r}",
            details={"name": repr(name), "reason": reason},
        )
        self.name = name
        self.reason = reason


class ConfidenceRangeError(AnalysisError):
    """Raised when a confidence score falls outside [0, 1]."""

    def __init__(self, value: float, context: Optional[str] = None):
        details = {"value": str(value)}
        if context:
            details["context"] = context

        super().__init__(f"Confidence out of range [0, 1]: {value}", details=details)
        self.value = value
        self.context = context
