"""Result types for refactoring suggestions."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..validation import validate_confidence


class RefactorType(Enum):
    MERGE = "merge"  # near-duplicate names
    RENAME = "rename"  # naming convention violation
    DEPRECATE = "deprecate"  # reserved, not produced by current heuristics


@dataclass(frozen=True)
class RefactorSuggestion:
    """A proposed change to a signal name.

    For merges ``target`` is the lexicographically earlier name of the pair
    and ``replacement`` the later one; ``distance`` is their edit distance.
    """

    type: RefactorType
    target: str
    replacement: str
    confidence: float
    reason: str
    affected_files: tuple[str, ...] = ()
    distance: Optional[int] = None

    def __post_init__(self) -> None:
        validate_confidence(
            self.confidence, context=f"{self.type.value} suggestion for {self.target}"
        )


@dataclass(frozen=True)
class SimilarityStats:
    """Pairwise comparison counters of the merge pass."""

    total_pairs: int = 0
    comparisons_performed: int = 0
    comparisons_skipped: int = 0
    similar_pairs_found: int = 0

    @property
    def skip_ratio(self) -> float:
        return self.comparisons_skipped / self.total_pairs if self.total_pairs else 0.0


@dataclass(frozen=True)
class RefactoringStats:
    """Measurements of a single suggestion call."""

    merge_suggestions: int = 0
    rename_suggestions: int = 0
    deprecate_suggestions: int = 0
    total_suggestions: int = 0
    duration_ms: float = 0.0
    avg_confidence: float = 0.0
    similarity: SimilarityStats = field(default_factory=SimilarityStats)
