"""Unused signal detection with confidence scoring.

Every defined signal is classified by the evidence the graph holds for
it, in priority order:

    ISOLATED      no emissions, no connections    confidence 1.0, no penalties
    ORPHAN        connections, no emissions       base 0.95
    DEAD_EMITTER  emissions, no connections       base 0.90

Penalties (additive) lower the base score where an unused-looking signal
is plausibly used in a way static analysis cannot see:

    private name (leading underscore)         -0.15  orphan, dead emitter
    definitions in more than one file         -0.20  orphan (inheritance hint)
    emitted through a global event bus        -0.10  dead emitter
    emitted from an autoload singleton file   -0.20  dead emitter

Findings whose final score falls below ``min_unused_confidence`` (0.65)
are dropped rather than reported at low confidence. The detector is
heuristic: it makes no claim about reachability.

A single pass over the definition index with dict lookups keeps the cost
linear in the number of signals.
"""

from __future__ import annotations

import time
from pathlib import PurePosixPath
from typing import Optional, Sequence

from ..config import DEFAULT_THRESHOLDS, ThresholdConfig
from ..graph.builder import AnyGraph, get_connections
from ..graph.models import EmissionSite, SignalDefinition
from ..logging_config import get_logger
from ..validation import validate_signal_name
from .models import (
    ConfidenceFactors,
    UnusedDetectorStats,
    UnusedLocation,
    UnusedPattern,
    UnusedSignal,
)

logger = get_logger(__name__)


class UnusedDetector:
    """Detects unused signals in a signal graph.

    Usage:
        detector = UnusedDetector()
        for finding in detector.detect_unused(graph):
            print(finding.signal_name, finding.pattern.value, finding.confidence)
    """

    def __init__(self, thresholds: ThresholdConfig = DEFAULT_THRESHOLDS) -> None:
        self.thresholds = thresholds
        self.last_stats = UnusedDetectorStats()

    def detect_unused(self, graph: AnyGraph) -> list[UnusedSignal]:
        """Classify every defined signal and return findings, most confident first."""
        start = time.perf_counter()
        t = self.thresholds

        findings: list[UnusedSignal] = []
        counts = {pattern: 0 for pattern in UnusedPattern}
        dropped = 0

        for name in sorted(graph.definitions):
            validate_signal_name(name)
            defs = graph.definitions[name]
            emits = graph.emissions.get(name, [])
            has_connections = bool(get_connections(graph, name))

            if not emits and not has_connections:
                finding: Optional[UnusedSignal] = UnusedSignal(
                    signal_name=name,
                    pattern=UnusedPattern.ISOLATED,
                    confidence=t.isolated_confidence,
                    locations=_definition_locations(defs),
                    is_private=_is_private(name),
                    has_documentation=False,
                )
            elif not emits:
                factors = self._orphan_factors(name, defs)
                finding = _scored(name, UnusedPattern.ORPHAN, factors, _definition_locations(defs))
            elif not has_connections:
                factors = self._dead_emitter_factors(name, emits)
                finding = _scored(
                    name, UnusedPattern.DEAD_EMITTER, factors, _emission_locations(emits)
                )
            else:
                continue

            if finding.confidence < t.min_unused_confidence:
                dropped += 1
                logger.debug(
                    f"Dropping {finding.pattern.value} {name}: "
                    f"confidence {finding.confidence:.2f} below {t.min_unused_confidence:.2f}"
                )
                continue

            findings.append(finding)
            counts[finding.pattern] += 1

        findings.sort(key=lambda f: f.confidence, reverse=True)

        duration_ms = (time.perf_counter() - start) * 1000
        self.last_stats = UnusedDetectorStats(
            signals_analyzed=len(graph.definitions),
            orphans_found=counts[UnusedPattern.ORPHAN],
            dead_emitters_found=counts[UnusedPattern.DEAD_EMITTER],
            isolated_found=counts[UnusedPattern.ISOLATED],
            dropped_low_confidence=dropped,
            total_unused=len(findings),
            duration_ms=duration_ms,
            avg_confidence=(
                sum(f.confidence for f in findings) / len(findings) if findings else 0.0
            ),
        )
        logger.debug(
            f"Unused detection: {len(findings)} findings from "
            f"{len(graph.definitions)} signals in {duration_ms:.1f}ms"
        )
        return findings

    def _orphan_factors(self, name: str, defs: Sequence[SignalDefinition]) -> ConfidenceFactors:
        t = self.thresholds
        definition_files = {d.file_path for d in defs}
        return ConfidenceFactors(
            base_score=t.orphan_base_confidence,
            private_penalty=t.private_penalty if _is_private(name) else 0.0,
            inheritance_penalty=t.inheritance_penalty if len(definition_files) > 1 else 0.0,
        )

    def _dead_emitter_factors(
        self, name: str, emits: Sequence[EmissionSite]
    ) -> ConfidenceFactors:
        t = self.thresholds
        return ConfidenceFactors(
            base_score=t.dead_emitter_base_confidence,
            private_penalty=t.private_penalty if _is_private(name) else 0.0,
            event_bus_penalty=(
                t.event_bus_penalty if any(self._is_event_bus(e) for e in emits) else 0.0
            ),
            autoload_penalty=(
                t.autoload_penalty if any(self._is_autoload(e.file_path) for e in emits) else 0.0
            ),
        )

    def _is_event_bus(self, emission: EmissionSite) -> bool:
        bus_names = self.thresholds.event_bus_names
        if emission.emitter in bus_names:
            return True
        # Whole directory names or the file stem only: "event_bus.gd" matches
        # EventBus, "RandomEvents/boss.gd" does not match Events
        parts = PurePosixPath(_posix(emission.file_path)).parts
        if not parts:
            return False
        candidates = {_squash(p) for p in parts[:-1]} | {_squash(PurePosixPath(parts[-1]).stem)}
        return any(_squash(bus) in candidates for bus in bus_names)

    def _is_autoload(self, file_path: str) -> bool:
        path = _posix(file_path).lower()
        return any(marker.lower() in path for marker in self.thresholds.autoload_path_markers)


def _scored(
    name: str,
    pattern: UnusedPattern,
    factors: ConfidenceFactors,
    locations: tuple[UnusedLocation, ...],
) -> UnusedSignal:
    return UnusedSignal(
        signal_name=name,
        pattern=pattern,
        confidence=factors.final_score,
        locations=locations,
        reason=_confidence_reason(factors),
        is_private=_is_private(name),
        has_documentation=False,
    )


def _confidence_reason(factors: ConfidenceFactors) -> Optional[str]:
    reasons: list[str] = []
    if factors.private_penalty > 0:
        reasons.append("private signal (may be placeholder)")
    if factors.inheritance_penalty > 0:
        reasons.append("defined in several files (inheritance hint)")
    if factors.event_bus_penalty > 0:
        reasons.append("emitted through a global event bus")
    if factors.autoload_penalty > 0:
        reasons.append("emitted from an autoload singleton")

    if not reasons:
        return None
    return f"Confidence reduced by: {', '.join(reasons)}"


def _is_private(name: str) -> bool:
    return name.startswith("_")


def _posix(path: str) -> str:
    return path.replace("\\", "/")


def _squash(name: str) -> str:
    return name.replace("_", "").replace("-", "").lower()


def _definition_locations(defs: Sequence[SignalDefinition]) -> tuple[UnusedLocation, ...]:
    return tuple(UnusedLocation(file=d.file_path, line=d.line) for d in defs)


def _emission_locations(emits: Sequence[EmissionSite]) -> tuple[UnusedLocation, ...]:
    return tuple(UnusedLocation(file=e.file_path, line=e.line) for e in emits)
