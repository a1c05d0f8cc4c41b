"""TF-IDF labels for signal clusters.

Member names are split into word tokens; each token is scored by its
frequency inside the cluster weighted against how many signals in the
whole project contain it, and the best terms are joined with ``_``:

    corpus {player_health_changed, player_health_depleted, player_damaged}
    cluster = whole corpus -> "damaged_depleted_health"

"player" occurs in every signal, so its IDF is 0 and it ranks below every
other term.
"""

from __future__ import annotations

import math
import re
from collections import Counter
from dataclasses import dataclass

from .models import TermScore

EMPTY_CLUSTER_LABEL = "empty_cluster"

# Event-name boilerplate that says nothing about what a cluster is about
NOISE_WORDS = frozenset({"on", "changed", "pressed", "released", "signal"})


def tokenize(name: str) -> list[str]:
    """Split a signal name into lowercase word tokens, dropping noise words.

    Handles snake_case, camelCase, PascalCase and embedded spaces.
    """
    tokens: list[str] = []
    for part in re.split(r"[^A-Za-z0-9]+", name):
        if not part:
            continue
        words = re.findall(r"[A-Z]+(?=[A-Z][a-z0-9])|[A-Z]?[a-z0-9]+|[A-Z]+[0-9]*", part)
        tokens.extend(w.lower() for w in words)
    return [t for t in tokens if t not in NOISE_WORDS]


@dataclass(frozen=True)
class CorpusStats:
    total_signals: int
    unique_terms: int
    avg_terms_per_signal: float


class TfidfLabeler:
    """Scores cluster terms against a corpus of all project signal names.

    Call :meth:`build_corpus` once before labeling.
    """

    def __init__(self) -> None:
        self._term_signals: dict[str, set[str]] = {}
        self._total_signals = 0
        self._total_tokens = 0

    def build_corpus(self, signal_names: list[str]) -> None:
        self._term_signals = {}
        distinct = set(signal_names)
        self._total_signals = len(distinct)
        self._total_tokens = 0
        for name in distinct:
            tokens = tokenize(name)
            self._total_tokens += len(tokens)
            for token in tokens:
                self._term_signals.setdefault(token, set()).add(name)

    def idf(self, term: str) -> float:
        """log(N / df); 0 for terms the corpus has never seen."""
        df = len(self._term_signals.get(term, ()))
        if df == 0 or self._total_signals == 0:
            return 0.0
        return math.log(self._total_signals / df)

    def generate_label(self, signal_names: list[str], top_n: int = 3) -> str:
        return self.generate_label_with_scores(signal_names, top_n)[0]

    def generate_label_with_scores(
        self, signal_names: list[str], top_n: int = 3
    ) -> tuple[str, list[TermScore]]:
        """Label plus the scores of the terms it was built from.

        A singleton cluster is labeled with its member's full name. If no
        member yields a usable token the smallest member name is used.
        """
        if not signal_names:
            return EMPTY_CLUSTER_LABEL, []
        if len(signal_names) == 1:
            return signal_names[0], []

        cluster_tokens = [t for name in signal_names for t in tokenize(name)]
        if not cluster_tokens:
            return min(signal_names), []

        total = len(cluster_tokens)
        scores = []
        for term, freq in Counter(cluster_tokens).items():
            tf = freq / total
            idf = self.idf(term)
            scores.append(TermScore(term=term, tf=tf, idf=idf, tfidf=tf * idf))

        scores.sort(key=lambda s: (-s.tfidf, -s.tf, s.term))
        top = scores[:top_n]
        return "_".join(s.term for s in top), top

    def corpus_stats(self) -> CorpusStats:
        return CorpusStats(
            total_signals=self._total_signals,
            unique_terms=len(self._term_signals),
            avg_terms_per_signal=(
                self._total_tokens / self._total_signals if self._total_signals else 0.0
            ),
        )
