"""Tests for configuration loading and validation."""

import pytest

from signal_insight.config import AnalysisConfig, ThresholdConfig, load_config
from signal_insight.exceptions import InvalidConfigError, InvalidPathError, SignalInsightError


@pytest.fixture
def clean_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    (tmp_path / "home").mkdir()
    for field_name in AnalysisConfig.__dataclass_fields__:
        monkeypatch.delenv(f"SIGNAL_INSIGHT_{field_name.upper()}", raising=False)
    return tmp_path


class TestThresholdConfig:
    def test_defaults(self):
        t = ThresholdConfig()
        assert t.orphan_base_confidence == 0.95
        assert t.dead_emitter_base_confidence == 0.90
        assert t.min_unused_confidence == 0.65
        assert t.min_merge_confidence == 0.98
        assert "EventBus" in t.event_bus_names

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"private_penalty": 1.5},
            {"min_unused_confidence": -0.1},
            {"merge_max_distance": 0},
            {"cluster_max_sweeps": 0},
            {"label_top_terms": 0},
            {"min_size_for_subclustering": 1},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            ThresholdConfig(**kwargs)

    def test_lists_become_tuples(self):
        t = ThresholdConfig(event_bus_names=["Bus"])
        assert t.event_bus_names == ("Bus",)


class TestAnalysisConfig:
    def test_defaults(self):
        config = AnalysisConfig()
        assert config.cache_path == ".signal-insight/signal_graph.json"
        assert config.workers is None
        assert config.max_depth == 2
        assert config.verbosity == "normal"

    @pytest.mark.parametrize(
        "kwargs",
        [{"workers": 0}, {"max_depth": 0}, {"max_suggestions": 0}, {"verbosity": "loud"}],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            AnalysisConfig(**kwargs)


class TestLoadConfig:
    def test_defaults_without_sources(self, clean_env):
        assert load_config() == AnalysisConfig()

    def test_overrides(self, clean_env):
        config = load_config(max_depth=3, workers=None, verbose=True)
        assert config.max_depth == 3
        assert config.workers is None
        assert config.verbosity == "verbose"

    def test_quiet_flag(self, clean_env):
        assert load_config(quiet=True).verbosity == "quiet"

    def test_project_file_and_thresholds_table(self, clean_env):
        (clean_env / "signal-insight.toml").write_text(
            'max_suggestions = 10\n\n[thresholds]\nmin_unused_confidence = 0.5\n',
            encoding="utf-8",
        )
        config = load_config()

        assert config.max_suggestions == 10
        assert config.thresholds.min_unused_confidence == 0.5

    def test_explicit_file_beats_project_file(self, clean_env):
        (clean_env / "signal-insight.toml").write_text("max_depth = 3\n", encoding="utf-8")
        explicit = clean_env / "explicit.toml"
        explicit.write_text("max_depth = 4\n", encoding="utf-8")

        assert load_config(config_file=explicit).max_depth == 4

    def test_global_file(self, clean_env):
        (clean_env / "home" / ".signal-insight.toml").write_text(
            'cache_path = "global.json"\n', encoding="utf-8"
        )
        assert load_config().cache_path == "global.json"

    def test_env_beats_files(self, clean_env, monkeypatch):
        (clean_env / "signal-insight.toml").write_text("workers = 2\n", encoding="utf-8")
        monkeypatch.setenv("SIGNAL_INSIGHT_WORKERS", "8")
        monkeypatch.setenv("SIGNAL_INSIGHT_VERBOSITY", "quiet")

        config = load_config()
        assert config.workers == 8
        assert config.verbosity == "quiet"

    def test_keyword_beats_env(self, clean_env, monkeypatch):
        monkeypatch.setenv("SIGNAL_INSIGHT_MAX_DEPTH", "4")
        assert load_config(max_depth=1).max_depth == 1

    def test_missing_explicit_file(self, clean_env):
        with pytest.raises(InvalidPathError):
            load_config(config_file=clean_env / "absent.toml")

    def test_unparsable_file(self, clean_env):
        bad = clean_env / "bad.toml"
        bad.write_text("max_depth = = 2\n", encoding="utf-8")
        with pytest.raises(SignalInsightError):
            load_config(config_file=bad)

    def test_bad_thresholds_table(self, clean_env):
        bad = clean_env / "bad.toml"
        bad.write_text("[thresholds]\nprivate_penalty = 3.0\n", encoding="utf-8")
        with pytest.raises(InvalidConfigError) as exc_info:
            load_config(config_file=bad)
        assert exc_info.value.key == "thresholds"

    def test_unknown_thresholds_key(self, clean_env):
        bad = clean_env / "bad.toml"
        bad.write_text("[thresholds]\nno_such_knob = 1\n", encoding="utf-8")
        with pytest.raises(InvalidConfigError):
            load_config(config_file=bad)

    def test_bad_env_value(self, clean_env, monkeypatch):
        monkeypatch.setenv("SIGNAL_INSIGHT_MAX_DEPTH", "deep")
        with pytest.raises(InvalidConfigError) as exc_info:
            load_config()
        assert exc_info.value.key == "SIGNAL_INSIGHT_MAX_DEPTH"

    def test_invalid_merged_value(self, clean_env):
        with pytest.raises(SignalInsightError):
            load_config(max_depth=0)
