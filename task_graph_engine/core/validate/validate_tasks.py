from __future__ import annotations

from typing import Any, Iterable, Optional, cast

from task_graph_engine.core.errors import TaskValidationError
from task_graph_engine.core.model import CapacityMatrix, TaskRecord


OPTIONAL_STR_FIELDS: tuple[str, ...] = ("name", "description", "category", "deadline")


def _is_int(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def _is_list_of_int(v: Any) -> bool:
    return isinstance(v, list) and all(_is_int(x) for x in v)


def validate_tasks(
    doc: dict[str, Any],
    *,
    vertex_count: int,
    max_dependencies: int = 10,
) -> tuple[Optional[list[TaskRecord]], list[TaskValidationError]]:
    """Validate a loaded task document.

    Returns (records, errors). Records is None when errors exist. Ids and
    dependency ids must fall inside [0, vertex_count).
    """

    file = cast(Optional[str], doc.get("__file__"))
    errors: list[TaskValidationError] = []

    tasks = doc.get("tasks")
    if not isinstance(tasks, list):
        errors.append(
            TaskValidationError(
                code="E_REQUIRED_FIELD",
                message="tasks is required and must be an array",
                file=file,
                path="tasks",
            )
        )
        return None, errors

    if not tasks:
        errors.append(
            TaskValidationError(
                code="E_EMPTY_GRAPH",
                message="tasks must contain at least one task",
                file=file,
                path="tasks",
            )
        )
        return None, errors

    records: list[TaskRecord] = []
    seen_ids: set[int] = set()

    for i, raw in enumerate(tasks):
        task_path = f"tasks[{i}]"
        if not isinstance(raw, dict):
            errors.append(
                TaskValidationError(
                    code="E_INVALID_TYPE",
                    message="task must be an object",
                    file=file,
                    path=task_path,
                )
            )
            continue

        tid = raw.get("id")
        if not _is_int(tid):
            errors.append(
                TaskValidationError(
                    code="E_REQUIRED_FIELD",
                    message="id is required and must be an integer",
                    file=file,
                    path=f"{task_path}.id",
                )
            )
            continue
        tid = cast(int, tid)

        if not 0 <= tid < vertex_count:
            errors.append(
                TaskValidationError(
                    code="E_INVALID_VERTEX",
                    message=f"id {tid} is outside [0, {vertex_count})",
                    file=file,
                    path=f"{task_path}.id",
                )
            )
            continue

        if tid in seen_ids:
            errors.append(
                TaskValidationError(
                    code="E_DUPLICATE_ID",
                    message=f"duplicate task id: {tid}",
                    file=file,
                    path=f"{task_path}.id",
                )
            )
            continue
        seen_ids.add(tid)

        deps = raw.get("depends_on", [])
        if deps is None:
            deps = []
        if not _is_list_of_int(deps):
            errors.append(
                TaskValidationError(
                    code="E_INVALID_TYPE",
                    message="depends_on must be an array of integers",
                    file=file,
                    path=f"{task_path}.depends_on",
                )
            )
            continue
        deps = cast(list[int], deps)

        if len(deps) > max_dependencies:
            errors.append(
                TaskValidationError(
                    code="E_TOO_MANY_DEPENDENCIES",
                    message=f"at most {max_dependencies} dependencies are allowed, got {len(deps)}",
                    file=file,
                    path=f"{task_path}.depends_on",
                )
            )

        for di, dep in enumerate(deps):
            if not 0 <= dep < vertex_count:
                errors.append(
                    TaskValidationError(
                        code="E_INVALID_VERTEX",
                        message=f"dependency {dep} is outside [0, {vertex_count})",
                        file=file,
                        path=f"{task_path}.depends_on[{di}]",
                    )
                )

        for key in OPTIONAL_STR_FIELDS:
            v = raw.get(key)
            if v is not None and not isinstance(v, str):
                errors.append(
                    TaskValidationError(
                        code="E_INVALID_TYPE",
                        message=f"{key} must be a string",
                        file=file,
                        path=f"{task_path}.{key}",
                    )
                )

        importance = raw.get("importance")
        if importance is not None and not _is_int(importance):
            errors.append(
                TaskValidationError(
                    code="E_INVALID_TYPE",
                    message="importance must be an integer",
                    file=file,
                    path=f"{task_path}.importance",
                )
            )

        records.append(
            TaskRecord(
                id=tid,
                dependency_ids=tuple(deps),
                name=cast(Optional[str], raw.get("name")),
                description=cast(Optional[str], raw.get("description")),
                category=cast(Optional[str], raw.get("category")),
                deadline=cast(Optional[str], raw.get("deadline")),
                importance=cast(Optional[int], importance),
            )
        )

    if errors:
        return None, _sorted(errors)
    return records, []


def validate_capacities(doc: dict[str, Any]) -> tuple[Optional[CapacityMatrix], list[TaskValidationError]]:
    """Validate a loaded capacity document into a CapacityMatrix.

    Repeated (from, to) pairs overwrite; the last one wins.
    """

    file = cast(Optional[str], doc.get("__file__"))
    errors: list[TaskValidationError] = []

    n = doc.get("vertex_count")
    if not _is_int(n) or cast(int, n) < 1:
        errors.append(
            TaskValidationError(
                code="E_REQUIRED_FIELD",
                message="vertex_count is required and must be a positive integer",
                file=file,
                path="vertex_count",
            )
        )
        return None, errors
    n = cast(int, n)

    edges = doc.get("edges")
    if edges is None:
        edges = []
    if not isinstance(edges, list):
        errors.append(
            TaskValidationError(
                code="E_INVALID_TYPE",
                message="edges must be an array",
                file=file,
                path="edges",
            )
        )
        return None, errors

    matrix = CapacityMatrix(n)
    for i, raw in enumerate(edges):
        edge_path = f"edges[{i}]"
        if not isinstance(raw, dict):
            errors.append(
                TaskValidationError(
                    code="E_INVALID_TYPE",
                    message="edge must be an object",
                    file=file,
                    path=edge_path,
                )
            )
            continue

        ok = True
        for key in ("from", "to", "capacity"):
            if not _is_int(raw.get(key)):
                errors.append(
                    TaskValidationError(
                        code="E_REQUIRED_FIELD",
                        message=f"{key} is required and must be an integer",
                        file=file,
                        path=f"{edge_path}.{key}",
                    )
                )
                ok = False
        if not ok:
            continue

        u, v, cap = raw["from"], raw["to"], raw["capacity"]
        for key, x in (("from", u), ("to", v)):
            if not 0 <= x < n:
                errors.append(
                    TaskValidationError(
                        code="E_INVALID_VERTEX",
                        message=f"vertex {x} is outside [0, {n})",
                        file=file,
                        path=f"{edge_path}.{key}",
                    )
                )
                ok = False
        if cap < 0:
            errors.append(
                TaskValidationError(
                    code="E_NEGATIVE_CAPACITY",
                    message=f"capacity must be non-negative, got {cap}",
                    file=file,
                    path=f"{edge_path}.capacity",
                )
            )
            ok = False
        if ok:
            matrix.set_capacity(u, v, cap)

    if errors:
        return None, _sorted(errors)
    return matrix, []


def summarize_tasks(records: list[TaskRecord], vertex_count: int) -> str:
    dep_count = sum(len(r.dependency_ids) for r in records)
    return (
        f"OK: {len(records)} tasks, {dep_count} dependencies (vertex_count={vertex_count})\n"
        + "Roots: "
        + ", ".join(str(r.id) for r in records if not r.dependency_ids)
    )


def _sorted(errors: Iterable[TaskValidationError]) -> list[TaskValidationError]:
    return sorted(
        list(errors),
        key=lambda e: (
            e.file or "",
            e.path or "",
            e.code,
        ),
    )
