from __future__ import annotations

from typing import Optional

from task_graph_engine.core.algorithms.components import strongly_connected_components
from task_graph_engine.core.build.build_graph import build_dependency_digraph
from task_graph_engine.core.errors import TaskValidationError
from task_graph_engine.core.model import TaskRecord


# Dependency hygiene rules, run after validate_tasks succeeds:
# - L_SELF_DEPENDENCY: task lists its own id
# - L_DUPLICATE_DEPENDENCY: the same dependency id appears twice
# - L_UNKNOWN_DEPENDENCY: dependency id is a valid vertex but no task has it
# - L_DEPENDENCY_CYCLE: tasks that all depend on each other (an SCC of size > 1)


def lint_tasks(
    records: list[TaskRecord],
    *,
    vertex_count: int,
    file: Optional[str] = None,
    iterative: bool = True,
) -> list[TaskValidationError]:
    errors: list[TaskValidationError] = []
    task_ids = {r.id for r in records}
    index_of = {r.id: i for i, r in enumerate(records)}

    for i, r in enumerate(records):
        seen: set[int] = set()
        for di, dep in enumerate(r.dependency_ids):
            path = f"tasks[{i}].depends_on[{di}]"
            if dep == r.id:
                errors.append(
                    TaskValidationError(
                        code="L_SELF_DEPENDENCY",
                        message=f"task {r.id} depends on itself",
                        file=file,
                        path=path,
                    )
                )
            if dep in seen:
                errors.append(
                    TaskValidationError(
                        code="L_DUPLICATE_DEPENDENCY",
                        message=f"dependency {dep} is listed more than once",
                        file=file,
                        path=path,
                    )
                )
            seen.add(dep)
            if dep not in task_ids:
                errors.append(
                    TaskValidationError(
                        code="L_UNKNOWN_DEPENDENCY",
                        message=f"dependency {dep} is not a known task id",
                        file=file,
                        path=path,
                    )
                )

    if records:
        digraph = build_dependency_digraph(records, vertex_count)
        for comp in strongly_connected_components(digraph, iterative=iterative):
            if len(comp) < 2:
                continue
            members = sorted(comp)
            anchor = min((v for v in members if v in index_of), key=lambda v: index_of[v], default=None)
            errors.append(
                TaskValidationError(
                    code="L_DEPENDENCY_CYCLE",
                    message="dependency cycle between tasks: " + ", ".join(str(v) for v in members),
                    file=file,
                    path=f"tasks[{index_of[anchor]}].depends_on" if anchor is not None else "tasks",
                )
            )

    return _sorted(errors)


def _sorted(errors: list[TaskValidationError]) -> list[TaskValidationError]:
    return sorted(errors, key=lambda e: (e.file or "", e.path or "", e.code))
