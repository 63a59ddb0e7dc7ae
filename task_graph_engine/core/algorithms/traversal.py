from __future__ import annotations

import logging
from collections import deque
from typing import Literal

from task_graph_engine.core.model import Graph


logger = logging.getLogger("taskgraph.traversal")

TraversalMethod = Literal["bfs", "dfs", "dfs-iterative"]


def reachable_vertices(graph: Graph, start: int) -> list[int]:
    """Vertices reachable from start (inclusive), in BFS visit order."""
    graph.require_vertex(start, path="start")
    visited = [False] * graph.vertex_count
    visited[start] = True
    order: list[int] = []
    q: deque[int] = deque([start])
    while q:
        cur = q.popleft()
        order.append(cur)
        for nxt, _ in graph.valid_neighbors(cur):
            if not visited[nxt]:
                visited[nxt] = True
                q.append(nxt)
    return order


def bfs_count(graph: Graph, start: int) -> int:
    count = len(reachable_vertices(graph, start))
    logger.debug("bfs from %d reached %d vertices", start, count)
    return count


def dfs_count(graph: Graph, start: int) -> int:
    """Recursive DFS; each call returns the size of the subtree it explored."""
    graph.require_vertex(start, path="start")
    visited = [False] * graph.vertex_count

    def visit(u: int) -> int:
        visited[u] = True
        total = 1
        for v, _ in graph.valid_neighbors(u):
            if not visited[v]:
                total += visit(v)
        return total

    count = visit(start)
    logger.debug("dfs from %d reached %d vertices", start, count)
    return count


def dfs_count_iterative(graph: Graph, start: int) -> int:
    """Explicit-stack DFS with the same visit order as dfs_count."""
    graph.require_vertex(start, path="start")
    visited = [False] * graph.vertex_count
    visited[start] = True
    count = 1
    stack: list[tuple[int, int]] = [(start, 0)]
    while stack:
        u, i = stack[-1]
        nbrs = graph.neighbors(u)
        while i < len(nbrs) and (not graph.contains(nbrs[i][0]) or visited[nbrs[i][0]]):
            i += 1
        if i == len(nbrs):
            stack.pop()
            continue
        stack[-1] = (u, i + 1)
        v = nbrs[i][0]
        visited[v] = True
        count += 1
        stack.append((v, 0))
    return count


def traverse(graph: Graph, start: int, method: TraversalMethod = "bfs") -> int:
    if method == "bfs":
        return bfs_count(graph, start)
    if method == "dfs":
        return dfs_count(graph, start)
    if method == "dfs-iterative":
        return dfs_count_iterative(graph, start)
    raise ValueError(f"unknown traversal method: {method}")
