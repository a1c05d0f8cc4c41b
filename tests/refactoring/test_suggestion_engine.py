"""Tests for merge and rename suggestions."""

import string

import pytest

from signal_insight.config import ThresholdConfig
from signal_insight.exceptions import ConfidenceRangeError, InvalidSignalNameError
from signal_insight.graph import SignalDefinition, SignalGraph
from signal_insight.refactoring import RefactoringEngine, RefactorSuggestion, RefactorType


def _defined(build_graph, site, *names):
    return build_graph(*[site.define(n, f"{n}.gd") for n in names])


class TestMergeSuggestions:
    def test_distance_one(self, build_graph, site):
        graph = _defined(build_graph, site, "health_changed", "health_change")
        suggestions = RefactoringEngine().generate_suggestions(graph)

        assert len(suggestions) == 1
        s = suggestions[0]
        assert s.type is RefactorType.MERGE
        assert s.distance == 1
        assert s.confidence >= 0.98
        assert (s.target, s.replacement) == ("health_change", "health_changed")
        assert s.affected_files == ("health_change.gd", "health_changed.gd")

    def test_distance_one_not_both_compliant(self, build_graph, site):
        graph = _defined(build_graph, site, "hpChanged", "hpChange")
        merges = [
            s
            for s in RefactoringEngine().generate_suggestions(graph)
            if s.type is RefactorType.MERGE
        ]
        assert [s.confidence for s in merges] == [0.98]

    def test_distance_two_both_compliant(self, build_graph, site):
        graph = _defined(build_graph, site, "player_died", "player_dead")
        suggestions = RefactoringEngine().generate_suggestions(graph)

        assert len(suggestions) == 1
        assert suggestions[0].distance == 2
        assert suggestions[0].confidence == 0.98

    def test_distance_two_not_both_compliant_is_filtered(self, build_graph, site):
        graph = _defined(build_graph, site, "playerDied", "playerDead")
        engine = RefactoringEngine()

        merges = [
            s for s in engine.generate_suggestions(graph) if s.type is RefactorType.MERGE
        ]
        assert merges == []

        lowered = [
            s
            for s in engine.generate_suggestions(graph, min_confidence=0.97)
            if s.type is RefactorType.MERGE
        ]
        assert len(lowered) == 1
        assert lowered[0].distance == 2
        assert lowered[0].confidence == 0.97

    def test_distance_three_never_suggested(self, build_graph, site):
        graph = _defined(build_graph, site, "level_loaded", "level_load_ok")
        engine = RefactoringEngine()
        assert engine.generate_suggestions(graph, min_confidence=0.0) == []

    def test_different_first_character_skipped(self, build_graph, site):
        graph = _defined(build_graph, site, "xhealth", "yhealth")
        engine = RefactoringEngine()

        assert engine.generate_suggestions(graph, min_confidence=0.0) == []
        assert engine.last_stats.similarity.comparisons_performed == 0
        assert engine.last_stats.similarity.comparisons_skipped == 1

    def test_length_difference_skipped(self, build_graph, site):
        graph = _defined(build_graph, site, "hit", "hit_taken")
        engine = RefactoringEngine()
        engine.generate_suggestions(graph)
        assert engine.last_stats.similarity.comparisons_skipped == 1


class TestRenameSuggestions:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("healthChanged", "health_changed"),
            ("PlayerDied", "player_died"),
            ("item collected", "item_collected"),
        ],
    )
    def test_rename(self, build_graph, site, name, expected):
        graph = _defined(build_graph, site, name)
        suggestions = RefactoringEngine().generate_suggestions(graph)

        assert len(suggestions) == 1
        s = suggestions[0]
        assert s.type is RefactorType.RENAME
        assert s.target == name
        assert s.replacement == expected
        assert s.confidence == 1.0

    @pytest.mark.parametrize("name", ["on_button_pressed", "_private_signal"])
    def test_compliant_names_untouched(self, build_graph, site, name):
        graph = _defined(build_graph, site, name)
        assert RefactoringEngine().generate_suggestions(graph) == []

    def test_affected_files_cover_every_site(self, build_graph, site):
        graph = build_graph(
            site.define("scoreChanged", "hud.gd"),
            site.emit("scoreChanged", "score.gd"),
            site.emit("scoreChanged", "hud.gd"),
            site.connect("scoreChanged", "_on_score", "main.gd"),
        )
        s = RefactoringEngine().generate_suggestions(graph)[0]
        assert s.affected_files == ("hud.gd", "main.gd", "score.gd")

    def test_name_without_words_is_skipped(self, build_graph, site):
        graph = _defined(build_graph, site, "___")
        assert RefactoringEngine().generate_suggestions(graph) == []


class TestCombinedOutput:
    def test_sorted_by_confidence(self, build_graph, site):
        graph = _defined(
            build_graph, site, "health_changed", "health_change", "PlayerDied", "player_dead"
        )
        suggestions = RefactoringEngine().generate_suggestions(graph, min_confidence=0.0)
        confidences = [s.confidence for s in suggestions]

        assert confidences == sorted(confidences, reverse=True)
        assert suggestions[0].type is RefactorType.RENAME
        assert {s.type for s in suggestions} == {RefactorType.RENAME, RefactorType.MERGE}

    def test_max_suggestions(self, build_graph, site):
        graph = _defined(build_graph, site, "aSig", "bSig", "cSig")
        engine = RefactoringEngine()
        suggestions = engine.generate_suggestions(graph, max_suggestions=2)

        assert len(suggestions) == 2
        assert engine.last_stats.total_suggestions == 2

    def test_undefined_names_are_included(self, build_graph, site):
        graph = build_graph(site.emit("coinCollected", "coin.gd"))
        suggestions = RefactoringEngine().generate_suggestions(graph)
        assert [s.replacement for s in suggestions] == ["coin_collected"]

    def test_no_deprecations_generated(self, game_graph):
        engine = RefactoringEngine()
        suggestions = engine.generate_suggestions(game_graph, min_confidence=0.0)

        assert all(s.type is not RefactorType.DEPRECATE for s in suggestions)
        assert engine.last_stats.deprecate_suggestions == 0

    def test_empty_graph(self):
        engine = RefactoringEngine()
        assert engine.generate_suggestions(SignalGraph()) == []
        assert engine.last_stats.similarity.total_pairs == 0

    def test_custom_merge_bar(self, build_graph, site):
        graph = _defined(build_graph, site, "player_died", "player_dead")
        engine = RefactoringEngine(ThresholdConfig(min_merge_confidence=0.99))
        assert engine.generate_suggestions(graph) == []


class TestPruning:
    def test_distinct_leading_characters_skip_majority(self, build_graph, site):
        leads = string.ascii_lowercase + string.ascii_uppercase
        names = [f"{c}_event_fired" for c in leads[:50]]
        graph = _defined(build_graph, site, *names)

        engine = RefactoringEngine()
        engine.generate_suggestions(graph)
        sim = engine.last_stats.similarity

        assert sim.total_pairs == 50 * 49 // 2
        assert sim.comparisons_skipped > sim.total_pairs / 2
        assert sim.comparisons_performed + sim.comparisons_skipped == sim.total_pairs

    def test_shared_prefix_names_still_pruned_by_length(self, build_graph, site):
        names = [f"s{'x' * (i * 4)}" for i in range(40)]
        graph = _defined(build_graph, site, *names)

        engine = RefactoringEngine()
        engine.generate_suggestions(graph)
        sim = engine.last_stats.similarity

        assert sim.comparisons_performed == 0
        assert sim.skip_ratio == 1.0

    @pytest.mark.slow
    def test_large_name_set(self, build_graph, site):
        names = [f"{c}signal_{i}" for c in string.ascii_lowercase for i in range(20)]
        graph = _defined(build_graph, site, *names)

        engine = RefactoringEngine()
        engine.generate_suggestions(graph)
        assert engine.last_stats.similarity.skip_ratio > 0.9


class TestStats:
    def test_counts_by_type(self, build_graph, site):
        graph = _defined(build_graph, site, "health_changed", "health_change", "PlayerDied")
        engine = RefactoringEngine()
        engine.generate_suggestions(graph)
        stats = engine.last_stats

        assert stats.merge_suggestions == 1
        assert stats.rename_suggestions == 1
        assert stats.total_suggestions == 2
        assert stats.similarity.similar_pairs_found == 1
        assert stats.avg_confidence == pytest.approx((1.0 + 0.99) / 2)


class TestContracts:
    def test_empty_name_fails_fast(self):
        graph = SignalGraph(definitions={" ": [SignalDefinition(name=" ", file_path="a.gd")]})
        with pytest.raises(InvalidSignalNameError):
            RefactoringEngine().generate_suggestions(graph)

    def test_suggestion_confidence_validated(self):
        with pytest.raises(ConfidenceRangeError):
            RefactorSuggestion(
                type=RefactorType.RENAME,
                target="a",
                replacement="b",
                confidence=-0.1,
                reason="",
            )
