from pathlib import Path

import pytest

from task_graph_engine.core.config.engine_config import (
    DEFAULT_CONFIG,
    EngineConfigError,
    load_and_merge,
    load_config_file,
    merged_config,
)

EXAMPLES = Path(__file__).resolve().parent.parent / "examples"


def test_defaults():
    cfg = load_and_merge(None)
    assert cfg.vertex_count == DEFAULT_CONFIG["vertex_count"] == 100
    assert cfg.max_dependencies == 10
    assert cfg.iterative_dfs is True


def test_file_overrides_defaults():
    cfg = load_and_merge(str(EXAMPLES / "engine-config.yaml"))
    assert cfg.vertex_count == 16
    assert cfg.iterative_dfs is False


def test_explicit_override_beats_file():
    cfg = load_and_merge(str(EXAMPLES / "engine-config.yaml"), vertex_count=40)
    assert cfg.vertex_count == 40
    assert cfg.iterative_dfs is False


def test_none_override_ignored():
    assert merged_config({"vertex_count": None}).vertex_count == 100


def test_empty_file(tmp_path: Path):
    p = tmp_path / "empty.yaml"
    p.write_text("", encoding="utf-8")
    assert load_config_file(p) == {}


def test_unknown_key_rejected(tmp_path: Path):
    p = tmp_path / "bad.yaml"
    p.write_text("max_vertices: 5\n", encoding="utf-8")
    with pytest.raises(EngineConfigError):
        load_config_file(p)


@pytest.mark.parametrize("body", ["vertex_count: 0\n", "vertex_count: true\n", "iterative_dfs: 1\n", "- 1\n"])
def test_invalid_values_rejected(tmp_path: Path, body: str):
    p = tmp_path / "bad.yaml"
    p.write_text(body, encoding="utf-8")
    with pytest.raises(EngineConfigError):
        load_and_merge(str(p))


def test_missing_file():
    with pytest.raises(FileNotFoundError):
        load_and_merge(str(EXAMPLES / "nope.yaml"))


def test_malformed_yaml_rejected(tmp_path: Path):
    p = tmp_path / "bad.yaml"
    p.write_text("vertex_count: [1\n", encoding="utf-8")
    with pytest.raises(EngineConfigError):
        load_config_file(p)
