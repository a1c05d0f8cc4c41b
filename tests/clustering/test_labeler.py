"""Tests for TF-IDF cluster labels."""

import math

import pytest

from signal_insight.clustering import TfidfLabeler, tokenize


class TestTokenize:
    def test_snake_case(self):
        assert tokenize("player_health_depleted") == ["player", "health", "depleted"]

    def test_camel_and_pascal_case(self):
        assert tokenize("healthChanged") == ["health"]
        assert tokenize("PlayerDied") == ["player", "died"]

    def test_noise_words_removed(self):
        assert tokenize("on_button_pressed") == ["button"]
        assert tokenize("signal_released") == []

    def test_acronyms_and_spaces(self):
        assert tokenize("HTTPRequest sent") == ["http", "request", "sent"]


class TestLabels:
    @pytest.fixture
    def labeler(self):
        labeler = TfidfLabeler()
        labeler.build_corpus(
            ["player_health_changed", "player_health_depleted", "player_damaged"]
        )
        return labeler

    def test_empty_cluster(self, labeler):
        assert labeler.generate_label([]) == "empty_cluster"

    def test_singleton_uses_full_name(self, labeler):
        assert labeler.generate_label(["player_damaged"]) == "player_damaged"

    def test_corpus_wide_terms_rank_last(self, labeler):
        label = labeler.generate_label(
            ["player_health_changed", "player_health_depleted", "player_damaged"]
        )
        assert label == "damaged_depleted_health"

    def test_top_n(self, labeler):
        label = labeler.generate_label(
            ["player_health_changed", "player_health_depleted", "player_damaged"], top_n=1
        )
        assert label == "damaged"

    def test_scores(self, labeler):
        label, scores = labeler.generate_label_with_scores(
            ["player_health_changed", "player_health_depleted"]
        )
        by_term = {s.term: s for s in scores}

        assert label == "depleted_health_player"
        # tokens: player, health, player, health, depleted
        assert by_term["depleted"].tf == pytest.approx(1 / 5)
        assert by_term["depleted"].idf == pytest.approx(math.log(3))
        assert by_term["health"].idf == pytest.approx(math.log(3 / 2))
        assert by_term["player"].tfidf == pytest.approx(0.0)

    def test_all_noise_falls_back_to_member_name(self, labeler):
        assert labeler.generate_label(["on_pressed", "on_released"]) == "on_pressed"

    def test_unknown_terms_score_zero(self, labeler):
        assert labeler.idf("teleported") == 0.0


class TestCorpusStats:
    def test_stats(self):
        labeler = TfidfLabeler()
        labeler.build_corpus(["health_changed", "player_died", "player_died"])
        stats = labeler.corpus_stats()

        assert stats.total_signals == 2
        assert stats.unique_terms == 3  # health, player, died
        assert stats.avg_terms_per_signal == pytest.approx(1.5)

    def test_empty_corpus(self):
        stats = TfidfLabeler().corpus_stats()
        assert stats.total_signals == 0
        assert stats.avg_terms_per_signal == 0.0
