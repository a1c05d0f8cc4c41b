"""Unused signal detection."""

from .models import (
    ConfidenceFactors,
    UnusedDetectorStats,
    UnusedLocation,
    UnusedPattern,
    UnusedSignal,
)
from .unused_detector import UnusedDetector

__all__ = [
    "ConfidenceFactors",
    "UnusedDetector",
    "UnusedDetectorStats",
    "UnusedLocation",
    "UnusedPattern",
    "UnusedSignal",
]
