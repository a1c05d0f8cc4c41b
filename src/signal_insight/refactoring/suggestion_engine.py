"""Refactoring suggestions for signal names.

Two independent passes over the distinct signal names of a graph:

1. Merge: near-duplicate names (edit distance <= 2), likely typos or
   drift between files. Comparing all n(n-1)/2 pairs is avoided by
   grouping names on their first character and skipping pairs whose
   lengths differ by more than 3, which cannot be within distance 2
   anyway. Confidence:

       distance 1: 0.99 if both names are snake_case, else 0.98
       distance 2: 0.98 if both names are snake_case, else 0.97

2. Rename: names breaking the snake_case convention, with a
   deterministic replacement. Confidence 1.0.

Deprecation suggestions are part of the model but not generated.
"""

from __future__ import annotations

import time
from collections import defaultdict
from itertools import combinations
from typing import Optional

from ..config import DEFAULT_THRESHOLDS, ThresholdConfig
from ..graph.builder import AnyGraph, get_all_signal_names
from ..logging_config import get_logger
from ..validation import validate_signal_names
from .levenshtein import levenshtein
from .models import RefactoringStats, RefactorSuggestion, RefactorType, SimilarityStats
from .naming import is_snake_case, validate_naming

logger = get_logger(__name__)


class RefactoringEngine:
    """Generates merge and rename suggestions for a signal graph.

    Usage:
        engine = RefactoringEngine()
        for s in engine.generate_suggestions(graph):
            print(f"{s.type.value}: {s.target} -> {s.replacement} ({s.confidence})")
    """

    def __init__(self, thresholds: ThresholdConfig = DEFAULT_THRESHOLDS) -> None:
        self.thresholds = thresholds
        self.last_stats = RefactoringStats()

    def generate_suggestions(
        self,
        graph: AnyGraph,
        min_confidence: Optional[float] = None,
        max_suggestions: Optional[int] = None,
    ) -> list[RefactorSuggestion]:
        """All suggestions at or above *min_confidence*, most confident first.

        Args:
            graph: Partial or full signal graph
            min_confidence: Reporting bar; defaults to
                ``thresholds.min_merge_confidence`` (0.98)
            max_suggestions: Truncate the sorted list to this many entries
        """
        if min_confidence is None:
            min_confidence = self.thresholds.min_merge_confidence
        if max_suggestions is not None and max_suggestions < 0:
            raise ValueError("max_suggestions must be non-negative")

        start = time.perf_counter()
        names = validate_signal_names(get_all_signal_names(graph))
        files = _files_by_signal(graph)

        merges, similarity = self._merge_suggestions(names, files)
        renames = self._rename_suggestions(names, files)

        suggestions = [s for s in merges + renames if s.confidence >= min_confidence]
        suggestions.sort(key=lambda s: s.confidence, reverse=True)
        if max_suggestions is not None:
            suggestions = suggestions[:max_suggestions]

        duration_ms = (time.perf_counter() - start) * 1000
        by_type = {t: 0 for t in RefactorType}
        for s in suggestions:
            by_type[s.type] += 1
        self.last_stats = RefactoringStats(
            merge_suggestions=by_type[RefactorType.MERGE],
            rename_suggestions=by_type[RefactorType.RENAME],
            deprecate_suggestions=by_type[RefactorType.DEPRECATE],
            total_suggestions=len(suggestions),
            duration_ms=duration_ms,
            avg_confidence=(
                sum(s.confidence for s in suggestions) / len(suggestions) if suggestions else 0.0
            ),
            similarity=similarity,
        )
        logger.debug(
            f"Refactoring: {len(suggestions)} suggestions from {len(names)} signals in "
            f"{duration_ms:.1f}ms ({similarity.comparisons_performed} comparisons, "
            f"{similarity.comparisons_skipped} skipped)"
        )
        return suggestions

    def _merge_suggestions(
        self, names: list[str], files: dict[str, set[str]]
    ) -> tuple[list[RefactorSuggestion], SimilarityStats]:
        t = self.thresholds
        total_pairs = len(names) * (len(names) - 1) // 2

        # Pairs across first-character groups are skipped without being visited
        groups: dict[str, list[str]] = defaultdict(list)
        for name in names:
            groups[name[0]].append(name)

        performed = 0
        suggestions: list[RefactorSuggestion] = []
        for group in groups.values():
            for a, b in combinations(group, 2):
                if abs(len(a) - len(b)) > t.merge_max_length_delta:
                    continue
                performed += 1
                distance = levenshtein(a, b)
                if distance == 0 or distance > t.merge_max_distance:
                    continue
                target, replacement = sorted((a, b))
                suggestions.append(
                    RefactorSuggestion(
                        type=RefactorType.MERGE,
                        target=target,
                        replacement=replacement,
                        confidence=_merge_confidence(a, b, distance),
                        reason=(
                            f"Similar to '{replacement}' (edit distance {distance}); "
                            "possible duplicate or typo"
                        ),
                        affected_files=tuple(sorted(files.get(a, set()) | files.get(b, set()))),
                        distance=distance,
                    )
                )

        stats = SimilarityStats(
            total_pairs=total_pairs,
            comparisons_performed=performed,
            comparisons_skipped=total_pairs - performed,
            similar_pairs_found=len(suggestions),
        )
        return suggestions, stats

    def _rename_suggestions(
        self, names: list[str], files: dict[str, set[str]]
    ) -> list[RefactorSuggestion]:
        suggestions = []
        for name in names:
            violation = validate_naming(name, files.get(name, ()))
            if violation is None:
                continue
            if not violation.suggested_fix or violation.suggested_fix == name:
                logger.debug(f"No snake_case form for {name!r}; skipping rename")
                continue
            suggestions.append(
                RefactorSuggestion(
                    type=RefactorType.RENAME,
                    target=name,
                    replacement=violation.suggested_fix,
                    confidence=1.0,
                    reason=f"Naming convention violation ({violation.violation_type})",
                    affected_files=violation.file_paths,
                )
            )
        return suggestions


def _merge_confidence(a: str, b: str, distance: int) -> float:
    both_compliant = is_snake_case(a) and is_snake_case(b)
    if distance == 1:
        return 0.99 if both_compliant else 0.98
    if distance == 2:
        return 0.98 if both_compliant else 0.97
    return 0.95


def _files_by_signal(graph: AnyGraph) -> dict[str, set[str]]:
    """Distinct file paths of every site, per signal name."""
    files: dict[str, set[str]] = defaultdict(set)
    for name, defs in graph.definitions.items():
        files[name].update(d.file_path for d in defs if d.file_path)
    for name, emits in graph.emissions.items():
        files[name].update(e.file_path for e in emits)
    for name, conns in (getattr(graph, "connections", None) or {}).items():
        files[name].update(c.file_path for c in conns)
    return files
