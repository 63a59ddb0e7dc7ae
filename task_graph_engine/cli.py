from __future__ import annotations

import json
import logging
from typing import Any, NoReturn, Optional

import typer

from task_graph_engine.core.algorithms.components import strongly_connected_components
from task_graph_engine.core.algorithms.max_flow import max_flow as run_max_flow
from task_graph_engine.core.algorithms.shortest_path import NegativeCycle, bellman_ford, dijkstra
from task_graph_engine.core.algorithms.spanning_tree import kruskal_mst, prim_mst, total_weight
from task_graph_engine.core.algorithms.traversal import traverse
from task_graph_engine.core.build.build_graph import build_dependency_digraph, build_graph
from task_graph_engine.core.config.engine_config import EngineConfig, EngineConfigError, load_and_merge
from task_graph_engine.core.errors import TaskGraphError, TaskLoadError, TaskValidationError
from task_graph_engine.core.io.load_tasks import load_capacities, load_tasks
from task_graph_engine.core.lint.lint_tasks import lint_tasks
from task_graph_engine.core.model import TaskRecord
from task_graph_engine.core.validate.validate_tasks import summarize_tasks, validate_capacities, validate_tasks

app = typer.Typer(add_completion=False, no_args_is_help=True)

FORMATS = ("text", "json")


@app.callback()
def _callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log algorithm steps to stderr"),
) -> None:
    """Task dependency graph queries."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    return


class _Query:
    """Per-invocation state: the command name and output format."""

    def __init__(self, command: str, format: str) -> None:
        self.command = command
        self.format = format
        if format not in FORMATS:
            err = TaskValidationError(
                code="E_UNKNOWN_FORMAT",
                message=f"unknown format: {format} (choose one of: text, json)",
                file=None,
                path="format",
            )
            _print_errors([err])
            raise typer.Exit(code=2)

    def fail(self, errors: list[TaskGraphError], exit_code: int) -> NoReturn:
        if self.format == "json":
            self.emit(False, errors=errors, result=None, exit_code=exit_code)
        _print_errors(errors)
        raise typer.Exit(code=exit_code)

    def emit(
        self,
        ok: bool,
        *,
        errors: list[TaskGraphError],
        result: dict[str, Any] | None,
        exit_code: int = 0,
    ) -> NoReturn:
        payload = {
            "tool": "taskgraph",
            "command": self.command,
            "ok": ok,
            "error_count": len(errors),
            "errors": [_to_item(e) for e in errors],
            "result": result,
        }
        typer.echo(json.dumps(payload, indent=2, sort_keys=True))
        raise typer.Exit(code=exit_code)

    def config(self, config_file: Optional[str], vertex_count: Optional[int]) -> EngineConfig:
        try:
            return load_and_merge(config_file, vertex_count=vertex_count)
        except FileNotFoundError:
            self.fail(
                [
                    TaskLoadError(
                        code="E_CONFIG_FILE_NOT_FOUND",
                        message=f"config file not found: {config_file}",
                        file=None,
                        path="config",
                    )
                ],
                1,
            )
        except EngineConfigError as e:
            self.fail(
                [
                    TaskValidationError(
                        code="E_CONFIG_INVALID",
                        message=str(e),
                        file=config_file,
                        path="config",
                    )
                ],
                2,
            )

    def tasks(self, path: str, cfg: EngineConfig) -> tuple[list[TaskRecord], Optional[str]]:
        try:
            doc = load_tasks(path)
        except TaskLoadError as e:
            self.fail([e], 1)

        records, errors = validate_tasks(
            doc, vertex_count=cfg.vertex_count, max_dependencies=cfg.max_dependencies
        )
        if errors or records is None:
            self.fail(list(errors), 2)
        return records, doc.get("__file__")

    def check_vertex(self, vertex: int, cfg: EngineConfig, option: str) -> None:
        if not 0 <= vertex < cfg.vertex_count:
            self.fail(
                [
                    TaskValidationError(
                        code="E_INVALID_VERTEX",
                        message=f"{option} {vertex} is outside [0, {cfg.vertex_count})",
                        file=None,
                        path=option.lstrip("-"),
                    )
                ],
                2,
            )

    def choice(self, value: str, allowed: tuple[str, ...], option: str) -> None:
        if value not in allowed:
            self.fail(
                [
                    TaskValidationError(
                        code="E_UNKNOWN_ALGORITHM",
                        message=f"unknown {option.lstrip('-')}: {value} (choose one of: {', '.join(allowed)})",
                        file=None,
                        path=option.lstrip("-"),
                    )
                ],
                2,
            )


def _format_option() -> Any:
    return typer.Option("text", "--format", help="Output format: text|json")


def _config_option() -> Any:
    return typer.Option(None, "--config", help="Optional YAML engine config file")


def _vertex_count_option() -> Any:
    return typer.Option(None, "--vertex-count", help="Size of the vertex universe [0, N)")


@app.command("validate")
def validate(
    path: str = typer.Argument(..., help="Path to a task file (.yaml/.yml/.json)"),
    format: str = _format_option(),
    config: Optional[str] = _config_option(),
    vertex_count: Optional[int] = _vertex_count_option(),
) -> None:
    """Validate a task file."""
    q = _Query("validate", format)
    cfg = q.config(config, vertex_count)
    records, _ = q.tasks(path, cfg)

    if format == "text":
        typer.echo(summarize_tasks(records, cfg.vertex_count))
        return

    q.emit(
        True,
        errors=[],
        result={
            "task_count": len(records),
            "dependency_count": sum(len(r.dependency_ids) for r in records),
            "vertex_count": cfg.vertex_count,
            "roots": [r.id for r in records if not r.dependency_ids],
        },
    )


@app.command("lint")
def lint(
    path: str = typer.Argument(..., help="Path to a task file (.yaml/.yml/.json)"),
    format: str = _format_option(),
    config: Optional[str] = _config_option(),
    vertex_count: Optional[int] = _vertex_count_option(),
) -> None:
    """Report self, duplicate, unknown and cyclic dependencies."""
    q = _Query("lint", format)
    cfg = q.config(config, vertex_count)
    records, file = q.tasks(path, cfg)

    errors = lint_tasks(records, vertex_count=cfg.vertex_count, file=file, iterative=cfg.iterative_dfs)
    if errors:
        q.fail(list(errors), 2)
    if format == "json":
        q.emit(True, errors=[], result={"task_count": len(records)})
    typer.echo("OK: lint passed")


@app.command("reach")
def reach(
    path: str = typer.Argument(..., help="Path to a task file (.yaml/.yml/.json)"),
    start: int = typer.Option(..., "--start", help="Start task id"),
    method: str = typer.Option("bfs", "--method", help="Traversal: bfs|dfs"),
    format: str = _format_option(),
    config: Optional[str] = _config_option(),
    vertex_count: Optional[int] = _vertex_count_option(),
) -> None:
    """Count tasks connected to a start task."""
    q = _Query("reach", format)
    q.choice(method, ("bfs", "dfs"), "--method")
    cfg = q.config(config, vertex_count)
    records, _ = q.tasks(path, cfg)
    q.check_vertex(start, cfg, "--start")

    graph = build_graph(records, cfg.vertex_count)
    if method == "dfs" and cfg.iterative_dfs:
        count = traverse(graph, start, "dfs-iterative")
    else:
        count = traverse(graph, start, "bfs" if method == "bfs" else "dfs")

    if format == "json":
        q.emit(True, errors=[], result={"start": start, "method": method, "reachable": count})
    typer.echo(f"Reachable from {start}: {count} ({method})")


@app.command("scc")
def scc(
    path: str = typer.Argument(..., help="Path to a task file (.yaml/.yml/.json)"),
    format: str = _format_option(),
    config: Optional[str] = _config_option(),
    vertex_count: Optional[int] = _vertex_count_option(),
) -> None:
    """Group tasks into strongly connected components (Kosaraju)."""
    q = _Query("scc", format)
    cfg = q.config(config, vertex_count)
    records, _ = q.tasks(path, cfg)

    digraph = build_dependency_digraph(records, cfg.vertex_count)
    task_ids = {r.id for r in records}
    components = [
        c for c in strongly_connected_components(digraph, iterative=cfg.iterative_dfs)
        if any(v in task_ids for v in c)
    ]

    if format == "json":
        q.emit(True, errors=[], result={"components": components})
    typer.echo(f"Components: {len(components)}")
    for c in components:
        typer.echo("- " + ", ".join(str(v) for v in c))


@app.command("mst")
def mst(
    path: str = typer.Argument(..., help="Path to a task file (.yaml/.yml/.json)"),
    algorithm: str = typer.Option("kruskal", "--algorithm", help="prim|kruskal"),
    start: Optional[int] = typer.Option(None, "--start", help="Start task id (prim only)"),
    format: str = _format_option(),
    config: Optional[str] = _config_option(),
    vertex_count: Optional[int] = _vertex_count_option(),
) -> None:
    """Minimum spanning tree over the undirected dependency graph."""
    q = _Query("mst", format)
    q.choice(algorithm, ("prim", "kruskal"), "--algorithm")
    cfg = q.config(config, vertex_count)
    records, _ = q.tasks(path, cfg)

    graph = build_graph(records, cfg.vertex_count)
    if algorithm == "prim":
        root = records[0].id if start is None else start
        q.check_vertex(root, cfg, "--start")
        edges = prim_mst(graph, root)
    else:
        if start is not None:
            q.fail(
                [
                    TaskValidationError(
                        code="E_UNSUPPORTED_OPTION",
                        message="--start applies to --algorithm prim only",
                        file=None,
                        path="start",
                    )
                ],
                2,
            )
        edges = kruskal_mst(graph)

    if format == "json":
        q.emit(
            True,
            errors=[],
            result={
                "algorithm": algorithm,
                "edges": [list(e) for e in edges],
                "total_weight": total_weight(edges),
            },
        )
    for u, v, w in edges:
        typer.echo(f"{u} - {v} ({w})")
    typer.echo(f"Total weight: {total_weight(edges)}")


@app.command("shortest-path")
def shortest_path(
    path: str = typer.Argument(..., help="Path to a task file (.yaml/.yml/.json)"),
    start: int = typer.Option(..., "--start", help="Source task id"),
    algorithm: str = typer.Option("dijkstra", "--algorithm", help="dijkstra|bellman-ford"),
    directed: bool = typer.Option(
        False, "--directed", help="Follow dependency -> dependent arcs only"
    ),
    format: str = _format_option(),
    config: Optional[str] = _config_option(),
    vertex_count: Optional[int] = _vertex_count_option(),
) -> None:
    """Single-source shortest distances. Unreachable tasks are omitted."""
    q = _Query("shortest-path", format)
    q.choice(algorithm, ("dijkstra", "bellman-ford"), "--algorithm")
    cfg = q.config(config, vertex_count)
    records, _ = q.tasks(path, cfg)
    q.check_vertex(start, cfg, "--start")

    if directed:
        graph = build_dependency_digraph(records, cfg.vertex_count)
    else:
        graph = build_graph(records, cfg.vertex_count)

    result = dijkstra(graph, start) if algorithm == "dijkstra" else bellman_ford(graph, start)

    if isinstance(result, NegativeCycle):
        if format == "json":
            q.emit(True, errors=[], result={"source": start, "negative_cycle": True})
        typer.echo(f"Negative cycle detected (reachable from {start})")
        return

    if format == "json":
        q.emit(
            True,
            errors=[],
            result={
                "source": start,
                "negative_cycle": False,
                # JSON object keys are strings.
                "distances": {str(v): d for v, d in sorted(result.distances.items())},
            },
        )
    typer.echo(f"Distances from {start}:")
    for v, d in sorted(result.distances.items()):
        typer.echo(f"{v}: {d}")


@app.command("max-flow")
def max_flow(
    path: str = typer.Argument(..., help="Path to a capacity file (.yaml/.yml/.json)"),
    source: int = typer.Option(..., "--source", help="Source vertex"),
    sink: int = typer.Option(..., "--sink", help="Sink vertex"),
    algorithm: str = typer.Option("edmonds-karp", "--algorithm", help="edmonds-karp|ford-fulkerson"),
    format: str = _format_option(),
) -> None:
    """Maximum flow over a capacity file."""
    q = _Query("max-flow", format)
    q.choice(algorithm, ("edmonds-karp", "ford-fulkerson"), "--algorithm")
    try:
        doc = load_capacities(path)
    except TaskLoadError as e:
        q.fail([e], 1)

    matrix, errors = validate_capacities(doc)
    if errors or matrix is None:
        q.fail(list(errors), 2)

    try:
        result = run_max_flow(matrix, source, sink, algorithm)  # type: ignore[arg-type]
    except TaskGraphError as e:
        q.fail([e], 2)

    if format == "json":
        q.emit(
            True,
            errors=[],
            result={
                "source": source,
                "sink": sink,
                "algorithm": algorithm,
                "max_flow": result.value,
                "augmenting_paths": result.augmentations,
            },
        )
    typer.echo(
        f"Max flow {source} -> {sink}: {result.value} "
        f"({algorithm}, {result.augmentations} augmenting paths)"
    )


def _to_item(e: TaskGraphError) -> dict:
    if isinstance(e, TaskLoadError):
        source = "load"
    elif e.code.startswith("L_"):
        source = "lint"
    else:
        source = "validate"
    return {
        "code": e.code,
        "message": e.message,
        "file": e.file,
        "path": e.path,
        "severity": "error",
        "source": source,
    }


def _print_errors(errors: list[TaskGraphError]) -> None:
    errors_sorted = sorted(errors, key=lambda e: (e.file or "", e.path or "", e.code))
    for e in errors_sorted:
        typer.echo(str(e), err=True)


def main() -> None:
    app(prog_name="taskgraph")


cli = typer.main.get_command(app)

if __name__ == "__main__":
    main()
