"""Shared test fixtures for Signal Insight tests."""

from collections import defaultdict

import pytest

from signal_insight.exceptions import ExtractionError
from signal_insight.graph import (
    ConnectionSite,
    EmissionSite,
    FileRecord,
    SignalDefinition,
    SignalGraphBuilder,
)


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


class FakeExtractor:
    """Extractor over dict 'trees': {"definitions": [...], "emissions": [...], ...}.

    A tree with ``"fail": True`` raises like an unparsable file would.
    """

    def __init__(self):
        self.calls = 0

    def _check(self, tree, stage):
        self.calls += 1
        if tree.get("fail"):
            raise ExtractionError(tree.get("path", "?"), stage, "syntax error")

    def extract_definitions(self, tree):
        self._check(tree, "definitions")
        return tree.get("definitions", [])

    def extract_emissions(self, tree, file_path):
        self._check(tree, "emissions")
        return tree.get("emissions", [])

    def extract_connections(self, tree, file_path):
        self._check(tree, "connections")
        return tree.get("connections", [])


def make_records(*sites, failing=()):
    """Group sites by file into one FileRecord per file, in first-seen order."""
    trees = defaultdict(lambda: {"definitions": [], "emissions": [], "connections": []})
    for site in sites:
        if isinstance(site, SignalDefinition):
            trees[site.file_path]["definitions"].append(site)
        elif isinstance(site, EmissionSite):
            trees[site.file_path]["emissions"].append(site)
        else:
            trees[site.file_path]["connections"].append(site)
    records = [FileRecord(tree=tree, file_path=path) for path, tree in trees.items()]
    for path in failing:
        records.append(FileRecord(tree={"fail": True, "path": path}, file_path=path))
    return records


@pytest.fixture
def extractor():
    return FakeExtractor()


@pytest.fixture
def build_graph():
    """Build a full graph from site objects through the real builder."""

    def _build(*sites):
        return SignalGraphBuilder(FakeExtractor()).build_full_graph(make_records(*sites))

    return _build


# Site shorthands
def define(name, path="player.gd", line=1):
    return SignalDefinition(name=name, file_path=path, line=line, source=path)


def emit(name, path="player.gd", line=10, emitter="self"):
    return EmissionSite(signal_name=name, file_path=path, line=line, emitter=emitter)


def connect(name, handler="_on_event", path="hud.gd", line=5):
    is_lambda = handler == "<lambda>"
    return ConnectionSite(
        signal_name=name, file_path=path, line=line, handler=handler, is_lambda=is_lambda
    )


class _SiteFactory:
    define = staticmethod(define)
    emit = staticmethod(emit)
    connect = staticmethod(connect)
    records = staticmethod(make_records)


@pytest.fixture
def site():
    """Site shorthands: site.define / site.emit / site.connect / site.records."""
    return _SiteFactory


@pytest.fixture
def extractor_cls():
    return FakeExtractor


@pytest.fixture
def game_graph(build_graph):
    """Small game project used by the analyzer and CLI tests.

    health_changed      defined, emitted, connected          used
    player_died         defined, emitted, connected          used
    coin_collected      defined, emitted (never connected)   dead emitter
    level_loaded        defined, connected (never emitted)   orphan
    debug_toggled       defined only                         isolated
    scoreChanged        defined, emitted, connected          mixed case
    """
    return build_graph(
        define("health_changed", "player.gd", 1),
        define("player_died", "player.gd", 2),
        define("coin_collected", "coin.gd", 1),
        define("level_loaded", "level.gd", 1),
        define("debug_toggled", "debug.gd", 1),
        define("scoreChanged", "hud.gd", 1),
        emit("health_changed", "player.gd", 20),
        emit("player_died", "player.gd", 30),
        emit("coin_collected", "coin.gd", 12),
        emit("scoreChanged", "hud.gd", 40),
        connect("health_changed", "_on_player_update", "hud.gd", 8),
        connect("player_died", "_on_player_update", "hud.gd", 9),
        connect("level_loaded", "_on_level_loaded", "main.gd", 3),
        connect("scoreChanged", "_on_score_changed", "hud.gd", 12),
    )
