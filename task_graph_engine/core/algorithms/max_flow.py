"""Maximum flow over a residual copy of a capacity matrix.

Augmenting paths use only strictly positive residual cells. Ford-Fulkerson
searches depth-first, Edmonds-Karp breadth-first; both scan candidate next
vertices in ascending order. Both return the same value on the same input.
"""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, Literal, Optional

from task_graph_engine.core.errors import invalid_vertex
from task_graph_engine.core.model import CapacityMatrix


logger = logging.getLogger("taskgraph.max_flow")

FlowMethod = Literal["ford-fulkerson", "edmonds-karp"]
PathFinder = Callable[[CapacityMatrix, int, int], Optional[list[int]]]


@dataclass(frozen=True)
class MaxFlowResult:
    value: int
    augmentations: int
    method: FlowMethod


def _bfs_path(residual: CapacityMatrix, source: int, sink: int) -> Optional[list[int]]:
    n = residual.size
    parent = [-1] * n
    visited = [False] * n
    visited[source] = True
    q: deque[int] = deque([source])
    while q:
        u = q.popleft()
        for v in range(n):
            if not visited[v] and residual[u, v] > 0:
                visited[v] = True
                parent[v] = u
                if v == sink:
                    return _unwind(parent, source, sink)
                q.append(v)
    return None


def _dfs_path(residual: CapacityMatrix, source: int, sink: int) -> Optional[list[int]]:
    n = residual.size
    parent = [-1] * n
    visited = [False] * n
    visited[source] = True
    stack: list[tuple[int, int]] = [(source, 0)]
    while stack:
        u, i = stack[-1]
        while i < n and (visited[i] or residual[u, i] <= 0):
            i += 1
        if i == n:
            stack.pop()
            continue
        stack[-1] = (u, i + 1)
        visited[i] = True
        parent[i] = u
        if i == sink:
            return _unwind(parent, source, sink)
        stack.append((i, 0))
    return None


def _unwind(parent: list[int], source: int, sink: int) -> list[int]:
    path = [sink]
    while path[-1] != source:
        path.append(parent[path[-1]])
    path.reverse()
    return path


def _augment(capacity: CapacityMatrix, source: int, sink: int, find_path: PathFinder) -> tuple[int, int]:
    for x in (source, sink):
        if not 0 <= x < capacity.size:
            raise invalid_vertex(x, capacity.size)
    if source == sink:
        return 0, 0

    residual = capacity.copy()
    flow = 0
    augmentations = 0
    while True:
        path = find_path(residual, source, sink)
        if path is None:
            break
        hops = list(zip(path, path[1:]))
        bottleneck = min(residual[u, v] for u, v in hops)
        for u, v in hops:
            residual[u, v] -= bottleneck
            residual[v, u] += bottleneck
        flow += bottleneck
        augmentations += 1
        logger.debug("augmented %s by %d (total=%d)", path, bottleneck, flow)
    return flow, augmentations


def ford_fulkerson(capacity: CapacityMatrix, source: int, sink: int) -> int:
    return _augment(capacity, source, sink, _dfs_path)[0]


def edmonds_karp(capacity: CapacityMatrix, source: int, sink: int) -> int:
    return _augment(capacity, source, sink, _bfs_path)[0]


def max_flow(
    capacity: CapacityMatrix, source: int, sink: int, method: FlowMethod = "edmonds-karp"
) -> MaxFlowResult:
    if method == "edmonds-karp":
        finder: PathFinder = _bfs_path
    elif method == "ford-fulkerson":
        finder = _dfs_path
    else:
        raise ValueError(f"unknown max-flow method: {method}")
    value, augmentations = _augment(capacity, source, sink, finder)
    return MaxFlowResult(value=value, augmentations=augmentations, method=method)
