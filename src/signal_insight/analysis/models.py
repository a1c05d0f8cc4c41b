"""Result types for unused signal detection."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..validation import validate_confidence, validate_signal_name


class UnusedPattern(Enum):
    """Why a signal is considered unused. Exactly one applies per signal."""

    ORPHAN = "orphan"  # connected, never emitted
    DEAD_EMITTER = "dead_emitter"  # emitted, never connected
    ISOLATED = "isolated"  # neither emitted nor connected


@dataclass(frozen=True)
class UnusedLocation:
    """A source location backing a finding."""

    file: str
    line: int


@dataclass(frozen=True)
class UnusedSignal:
    """One unused-signal finding."""

    signal_name: str
    pattern: UnusedPattern
    confidence: float
    locations: tuple[UnusedLocation, ...] = ()
    reason: Optional[str] = None  # set when a confidence penalty applied
    is_private: bool = False
    has_documentation: Optional[bool] = None

    def __post_init__(self) -> None:
        validate_signal_name(self.signal_name)
        validate_confidence(self.confidence, context=f"unused signal {self.signal_name}")


@dataclass(frozen=True)
class ConfidenceFactors:
    """Breakdown of how a finding's confidence was reached."""

    base_score: float
    private_penalty: float = 0.0
    inheritance_penalty: float = 0.0
    event_bus_penalty: float = 0.0
    autoload_penalty: float = 0.0

    @property
    def total_penalty(self) -> float:
        return (
            self.private_penalty
            + self.inheritance_penalty
            + self.event_bus_penalty
            + self.autoload_penalty
        )

    @property
    def final_score(self) -> float:
        # Rounded so 0.95 - 0.15 compares equal to 0.80
        return round(max(0.0, self.base_score - self.total_penalty), 6)


@dataclass(frozen=True)
class UnusedDetectorStats:
    """Measurements of a single detection call."""

    signals_analyzed: int = 0
    orphans_found: int = 0
    dead_emitters_found: int = 0
    isolated_found: int = 0
    dropped_low_confidence: int = 0
    total_unused: int = 0
    duration_ms: float = 0.0
    avg_confidence: float = 0.0
