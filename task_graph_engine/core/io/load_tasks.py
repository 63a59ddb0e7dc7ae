from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from task_graph_engine.core.errors import TaskLoadError


def _read_document(path: str) -> dict[str, Any]:
    """Parse a task or capacity file into its top-level mapping.

    Shared by both loaders so they report the same E_* load codes.
    """
    p = Path(path)
    if not p.exists():
        raise TaskLoadError(
            code="E_FILE_NOT_FOUND",
            message="file does not exist",
            file=str(p),
        )

    suffix = p.suffix.lower()
    try:
        raw_text = p.read_text(encoding="utf-8")
    except Exception as e:  # pragma: no cover
        raise TaskLoadError(code="E_FILE_READ", message=str(e), file=str(p)) from e

    try:
        if suffix in {".yaml", ".yml"}:
            data = yaml.safe_load(raw_text)
        elif suffix == ".json":
            data = json.loads(raw_text)
        else:
            raise TaskLoadError(
                code="E_UNSUPPORTED_FORMAT",
                message="supported formats are .yaml/.yml and .json",
                file=str(p),
            )
    except TaskLoadError:
        raise
    except Exception as e:
        code = "E_YAML_PARSE" if suffix in {".yaml", ".yml"} else "E_JSON_PARSE"
        raise TaskLoadError(code=code, message=str(e), file=str(p)) from e

    if not isinstance(data, dict):
        raise TaskLoadError(
            code="E_INVALID_TOP_LEVEL",
            message="top-level document must be a mapping/object",
            file=str(p),
        )
    return data


def load_tasks(path: str) -> dict[str, Any]:
    """Load a YAML/JSON task file.

    Returns a dict with keys: tasks, __file__.
    Does not coerce types; validate_tasks owns shape checking.
    """
    data = _read_document(path)
    return {"tasks": data.get("tasks"), "__file__": str(Path(path))}


def load_capacities(path: str) -> dict[str, Any]:
    """Load a YAML/JSON capacity file.

    Returns a dict with keys: vertex_count, edges, __file__.
    """
    data = _read_document(path)
    return {
        "vertex_count": data.get("vertex_count"),
        "edges": data.get("edges"),
        "__file__": str(Path(path)),
    }
