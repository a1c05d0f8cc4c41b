"""Merge and rename suggestions for signal names."""

from .levenshtein import levenshtein, levenshtein_similarity, normalized_levenshtein
from .models import RefactoringStats, RefactorSuggestion, RefactorType, SimilarityStats
from .naming import (
    NamingViolation,
    extract_prefix,
    extract_suffix,
    has_common_pattern,
    is_snake_case,
    to_snake_case,
    validate_naming,
)
from .suggestion_engine import RefactoringEngine

__all__ = [
    "NamingViolation",
    "RefactorSuggestion",
    "RefactorType",
    "RefactoringEngine",
    "RefactoringStats",
    "SimilarityStats",
    "extract_prefix",
    "extract_suffix",
    "has_common_pattern",
    "is_snake_case",
    "levenshtein",
    "levenshtein_similarity",
    "normalized_levenshtein",
    "to_snake_case",
    "validate_naming",
]
