from __future__ import annotations

import heapq
import logging
from dataclasses import dataclass, field
from typing import Optional, Union

from task_graph_engine.core.errors import UnsupportedGraphError
from task_graph_engine.core.model import Graph


logger = logging.getLogger("taskgraph.shortest_path")


@dataclass(frozen=True)
class ShortestPaths:
    """Distances from source. Unreachable vertices have no entry."""

    source: int
    distances: dict[int, int]
    predecessors: dict[int, int] = field(default_factory=dict)

    def distance(self, vertex: int) -> Optional[int]:
        return self.distances.get(vertex)

    def is_reachable(self, vertex: int) -> bool:
        return vertex in self.distances

    def path_to(self, vertex: int) -> Optional[list[int]]:
        if vertex not in self.distances:
            return None
        path = [vertex]
        while path[-1] != self.source:
            path.append(self.predecessors[path[-1]])
        path.reverse()
        return path


@dataclass(frozen=True)
class NegativeCycle:
    """Bellman-Ford outcome when an edge still relaxes after |V|-1 rounds."""

    source: int
    vertex: int


ShortestPathResult = Union[ShortestPaths, NegativeCycle]


def dijkstra(graph: Graph, start: int) -> ShortestPaths:
    """Dijkstra over non-negative weights.

    The next vertex settled is the unsettled one with the smallest tentative
    distance, lowest vertex id on ties.
    """
    graph.require_vertex(start, path="start")
    for e in graph.arcs():
        if e.weight < 0:
            raise UnsupportedGraphError(
                code="E_UNSUPPORTED_GRAPH",
                message=f"dijkstra needs non-negative weights, edge {e.u}->{e.v} has {e.weight}",
            )

    dist: dict[int, int] = {start: 0}
    pred: dict[int, int] = {}
    settled = [False] * graph.vertex_count
    heap: list[tuple[int, int]] = [(0, start)]

    while heap:
        d, u = heapq.heappop(heap)
        if settled[u] or d != dist[u]:
            continue
        settled[u] = True
        for v, w in graph.valid_neighbors(u):
            if settled[v]:
                continue
            nd = d + w
            if v not in dist or nd < dist[v]:
                dist[v] = nd
                pred[v] = u
                heapq.heappush(heap, (nd, v))

    logger.debug("dijkstra from %d: %d reachable", start, len(dist))
    return ShortestPaths(source=start, distances=dist, predecessors=pred)


def bellman_ford(graph: Graph, start: int) -> ShortestPathResult:
    """Bellman-Ford with a verification round for negative cycles.

    Runs at most vertex_count - 1 rounds over every adjacency entry, stopping
    early once a round changes nothing.
    """
    graph.require_vertex(start, path="start")
    arcs = list(graph.arcs())

    dist: dict[int, int] = {start: 0}
    pred: dict[int, int] = {}
    for round_idx in range(graph.vertex_count - 1):
        changed = False
        for u, v, w in arcs:
            if u not in dist:
                continue
            nd = dist[u] + w
            if v not in dist or nd < dist[v]:
                dist[v] = nd
                pred[v] = u
                changed = True
        if not changed:
            logger.debug("bellman-ford from %d settled after %d rounds", start, round_idx + 1)
            break

    for u, v, w in arcs:
        if u in dist and (v not in dist or dist[u] + w < dist[v]):
            logger.debug("bellman-ford from %d: negative cycle through %d", start, v)
            return NegativeCycle(source=start, vertex=v)

    return ShortestPaths(source=start, distances=dist, predecessors=pred)
