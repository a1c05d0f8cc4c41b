"""Unit-cost edit distance between signal names."""


def levenshtein(a: str, b: str) -> int:
    """Minimum number of single-character insertions, deletions and substitutions.

    Keeps two rows of the DP table sized to the shorter string, so memory
    is O(min(len(a), len(b))).
    """
    if a == b:
        return 0
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    current = [0] * (len(b) + 1)
    for i, ca in enumerate(a, start=1):
        current[0] = i
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current[j] = min(
                previous[j] + 1,  # deletion
                current[j - 1] + 1,  # insertion
                previous[j - 1] + cost,  # substitution
            )
        previous, current = current, previous
    return previous[len(b)]


def normalized_levenshtein(a: str, b: str) -> float:
    """Distance divided by the longer length, in [0, 1]; 0 for two empty strings."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 0.0
    return levenshtein(a, b) / longest


def levenshtein_similarity(a: str, b: str) -> float:
    return 1.0 - normalized_levenshtein(a, b)
