from __future__ import annotations

import logging
from typing import Iterable

from task_graph_engine.core.errors import EmptyGraphError, invalid_vertex
from task_graph_engine.core.model import Graph, TaskRecord


logger = logging.getLogger("taskgraph.build")


def dependency_weight(task_id: int, dependency_id: int) -> int:
    # Edge weight is the sum of both task ids.
    return task_id + dependency_id


def build_graph(records: Iterable[TaskRecord], vertex_count: int) -> Graph:
    """Build the undirected weighted dependency graph.

    One edge (task.id, dep) per dependency entry, in record order. Self-loops
    and parallel edges are kept. Dependency ids outside the vertex universe are
    stored too; algorithms bounds-check them.
    """
    graph = Graph(vertex_count=vertex_count, directed=False)
    _populate(graph, records, reverse=False)
    logger.debug("built undirected graph: n=%d edges=%d", vertex_count, graph.edge_count())
    return graph


def build_dependency_digraph(records: Iterable[TaskRecord], vertex_count: int) -> Graph:
    """Build the directed view with arcs dependency -> dependent."""
    graph = Graph(vertex_count=vertex_count, directed=True)
    _populate(graph, records, reverse=True)
    logger.debug("built dependency digraph: n=%d arcs=%d", vertex_count, graph.edge_count())
    return graph


def _populate(graph: Graph, records: Iterable[TaskRecord], *, reverse: bool) -> None:
    seen_any = False
    for i, record in enumerate(records):
        seen_any = True
        if not graph.contains(record.id):
            raise invalid_vertex(record.id, graph.vertex_count, path=f"tasks[{i}].id")
        for dep in record.dependency_ids:
            w = dependency_weight(record.id, dep)
            if reverse:
                graph.add_edge(dep, record.id, w)
            else:
                graph.add_edge(record.id, dep, w)

    if not seen_any:
        raise EmptyGraphError(code="E_EMPTY_GRAPH", message="no task records to build a graph from")
