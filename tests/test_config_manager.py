"""Tests for depgraph.toml loading."""

from pathlib import Path

import pytest

from depgraph_cli.config_manager import (
    AnalysisConfig,
    load_config,
    parse_config,
    save_default_config,
)
from depgraph_cli.errors import ConfigError
from depgraph_cli.validator import ValidationConfig


def test_missing_file_gives_defaults(temp_dir: Path):
    analysis, validation = load_config(temp_dir)

    assert analysis == AnalysisConfig()
    assert validation == ValidationConfig()
    assert [s.label for s in analysis.subtrees] == ["types", "components", "hooks", "store", "lib", "api"]


def test_partial_file_overrides_only_given_keys(temp_dir: Path):
    (temp_dir / "depgraph.toml").write_text(
        '[analysis]\nalias_prefixes = ["@/", "~/"]\n\n[validation]\nunused_threshold = 25\n',
        encoding="utf-8",
    )

    analysis, validation = load_config(temp_dir)

    assert analysis.alias_prefixes == ["@/", "~/"]
    assert analysis.source_root == "src"
    assert validation.unused_threshold == 25
    assert validation.cycles_threshold == 0


def test_env_override_points_at_config(temp_dir: Path, monkeypatch):
    custom = temp_dir / "elsewhere.toml"
    custom.write_text("[validation]\nstale_hours = 2\n", encoding="utf-8")
    monkeypatch.setenv("DEPGRAPH_CONFIG", str(custom))

    _, validation = load_config(temp_dir / "project")

    assert validation.stale_hours == 2.0


def test_custom_subtrees():
    analysis, _ = parse_config({
        "analysis": {
            "subtrees": [{"path": "src/features", "category": "feature", "extensions": [".ts", ".tsx"]}],
        },
    })

    assert len(analysis.subtrees) == 1
    subtree = analysis.subtrees[0]
    assert (subtree.label, subtree.path, subtree.category) == ("features", "src/features", "feature")


@pytest.mark.parametrize(
    "data",
    [
        {"analysis": {"exclude": "node_modules"}},
        {"analysis": {"source_root": ""}},
        {"validation": {"cycles_threshold": -1}},
        {"validation": {"unused_threshold": True}},
        {"validation": {"stale_hours": "soon"}},
        {"analysis": {"subtrees": {"path": "src"}}},
        {"analysis": []},
    ],
)
def test_invalid_values_raise(data):
    with pytest.raises(ConfigError):
        parse_config(data)


def test_unparseable_file_raises(temp_dir: Path):
    (temp_dir / "depgraph.toml").write_text("[analysis\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(temp_dir)


def test_save_default_config_round_trip(temp_dir: Path):
    path = save_default_config(temp_dir)

    assert path == temp_dir / "depgraph.toml"
    analysis, validation = load_config(temp_dir)
    assert analysis == AnalysisConfig()
    assert validation == ValidationConfig()


def test_save_default_config_respects_existing(temp_dir: Path):
    existing = temp_dir / "depgraph.toml"
    existing.write_text("# mine\n", encoding="utf-8")

    assert save_default_config(temp_dir) is None
    assert existing.read_text(encoding="utf-8") == "# mine\n"
    assert save_default_config(temp_dir, overwrite=True) == existing
