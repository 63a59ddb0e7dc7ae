from __future__ import annotations

import heapq
import logging
from typing import Iterable, Optional

from task_graph_engine.core.errors import UnsupportedGraphError
from task_graph_engine.core.model import Edge, Graph


logger = logging.getLogger("taskgraph.mst")


def _require_undirected(graph: Graph) -> None:
    if graph.directed:
        raise UnsupportedGraphError(
            code="E_UNSUPPORTED_GRAPH",
            message="minimum spanning trees need an undirected graph",
        )


def prim_mst(graph: Graph, start: int) -> list[Edge]:
    """Prim's algorithm from start, returning (parent, child, weight) in join order.

    The frontier is ordered by (weight, vertex), so equal-weight candidates
    join lowest vertex id first. A vertex's parent is replaced only by a
    strictly cheaper edge; among equal-weight edges the first discovered wins.
    Vertices not reachable from start are left out.
    """
    _require_undirected(graph)
    graph.require_vertex(start, path="start")

    n = graph.vertex_count
    in_tree = [False] * n
    best: list[Optional[int]] = [None] * n
    parent: list[int] = [-1] * n
    best[start] = 0
    heap: list[tuple[int, int]] = [(0, start)]
    out: list[Edge] = []

    while heap:
        key, u = heapq.heappop(heap)
        if in_tree[u] or key != best[u]:
            continue
        in_tree[u] = True
        if u != start:
            out.append(Edge(parent[u], u, key))
        for v, w in graph.valid_neighbors(u):
            if in_tree[v]:
                continue
            cur = best[v]
            if cur is None or w < cur:
                best[v] = w
                parent[v] = u
                heapq.heappush(heap, (w, v))

    logger.debug("prim from %d: %d edges", start, len(out))
    return out


def find(parent: list[int], i: int) -> int:
    while parent[i] != i:
        i = parent[i]
    return i


def union(parent: list[int], x: int, y: int) -> None:
    parent[find(parent, x)] = find(parent, y)


def kruskal_mst(graph: Graph) -> list[Edge]:
    """Kruskal's algorithm over the logical edge list.

    Edges are stable-sorted by weight, so ties keep insertion order. Returns a
    minimum spanning forest when the graph is disconnected.
    """
    _require_undirected(graph)

    candidates = [e for e in graph.edges if graph.contains(e.u) and graph.contains(e.v)]
    candidates.sort(key=lambda e: e.weight)

    parent = list(range(graph.vertex_count))
    out: list[Edge] = []
    for e in candidates:
        ru = find(parent, e.u)
        rv = find(parent, e.v)
        if ru == rv:
            continue
        out.append(e)
        union(parent, e.u, e.v)

    logger.debug("kruskal: %d of %d edges kept", len(out), len(candidates))
    return out


def total_weight(edges: Iterable[Edge]) -> int:
    return sum(e.weight for e in edges)
