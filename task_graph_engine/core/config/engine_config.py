from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml


DEFAULT_CONFIG: dict[str, Any] = {
    # Upper bound of the vertex universe [0, vertex_count).
    "vertex_count": 100,
    "max_dependencies": 10,
    # Explicit-stack DFS for SCC, lint and dfs traversal; false selects recursion.
    "iterative_dfs": True,
}


class EngineConfigError(ValueError):
    pass


@dataclass(frozen=True)
class EngineConfig:
    vertex_count: int
    max_dependencies: int
    iterative_dfs: bool


def load_config_file(path: str | Path) -> dict[str, Any]:
    """Load engine settings from a YAML file.

    Format:
      vertex_count: 100
      max_dependencies: 10
      iterative_dfs: true

    Unknown keys are rejected. Missing keys fall back to DEFAULT_CONFIG.
    """
    p = Path(path)
    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise EngineConfigError(f"config file is not valid YAML: {e}") from e
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise EngineConfigError("config file must be a mapping of setting -> value")

    out: dict[str, Any] = {}
    for k, v in raw.items():
        if k not in DEFAULT_CONFIG:
            raise EngineConfigError(f"unknown setting '{k}' (choose from: {', '.join(sorted(DEFAULT_CONFIG))})")
        out[k] = v
    _check(out)
    return out


def merged_config(overrides: dict[str, Any] | None = None) -> EngineConfig:
    """Return DEFAULT_CONFIG with overrides applied. None values are ignored."""
    merged = dict(DEFAULT_CONFIG)
    if overrides:
        for k, v in overrides.items():
            if v is not None:
                merged[k] = v
    _check(merged)
    return EngineConfig(
        vertex_count=merged["vertex_count"],
        max_dependencies=merged["max_dependencies"],
        iterative_dfs=merged["iterative_dfs"],
    )


def load_and_merge(config_file: str | None, **overrides: Any) -> EngineConfig:
    settings: dict[str, Any] = {}
    if config_file:
        settings.update(load_config_file(config_file))
    settings.update({k: v for k, v in overrides.items() if v is not None})
    return merged_config(settings)


def _check(settings: dict[str, Any]) -> None:
    for key in ("vertex_count", "max_dependencies"):
        if key in settings:
            v = settings[key]
            if isinstance(v, bool) or not isinstance(v, int) or v < 1:
                raise EngineConfigError(f"{key} must be a positive integer")
    if "iterative_dfs" in settings and not isinstance(settings["iterative_dfs"], bool):
        raise EngineConfigError("iterative_dfs must be true or false")
