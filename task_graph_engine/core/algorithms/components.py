"""Kosaraju's two-pass strongly connected components.

Pass one records finish order on the original digraph, visiting roots in
ascending vertex order and neighbors in insertion order. Pass two pops that
order and collects one DFS tree per component on the transpose. Components
come out in pop order; vertices inside a component in DFS preorder.
"""
from __future__ import annotations

import logging
from typing import Callable

from task_graph_engine.core.errors import UnsupportedGraphError
from task_graph_engine.core.model import Graph


logger = logging.getLogger("taskgraph.components")

Visitor = Callable[[Graph, int, list[bool], list[int]], None]


def strongly_connected_components(digraph: Graph, *, iterative: bool = False) -> list[list[int]]:
    if not digraph.directed:
        raise UnsupportedGraphError(
            code="E_UNSUPPORTED_GRAPH",
            message="strongly connected components need a directed graph",
        )

    visit_post: Visitor = _postorder_iterative if iterative else _postorder_recursive
    visit_pre: Visitor = _preorder_iterative if iterative else _preorder_recursive

    n = digraph.vertex_count
    visited = [False] * n
    finish: list[int] = []
    for v in digraph.vertices():
        if not visited[v]:
            visit_post(digraph, v, visited, finish)

    transposed = digraph.transpose()
    visited = [False] * n
    components: list[list[int]] = []
    while finish:
        v = finish.pop()
        if visited[v]:
            continue
        component: list[int] = []
        visit_pre(transposed, v, visited, component)
        components.append(component)

    logger.debug("kosaraju: n=%d components=%d", n, len(components))
    return components


def _postorder_recursive(graph: Graph, u: int, visited: list[bool], out: list[int]) -> None:
    visited[u] = True
    for v, _ in graph.valid_neighbors(u):
        if not visited[v]:
            _postorder_recursive(graph, v, visited, out)
    out.append(u)


def _preorder_recursive(graph: Graph, u: int, visited: list[bool], out: list[int]) -> None:
    visited[u] = True
    out.append(u)
    for v, _ in graph.valid_neighbors(u):
        if not visited[v]:
            _preorder_recursive(graph, v, visited, out)


def _walk(graph: Graph, root: int, visited: list[bool], on_enter: Callable[[int], None],
          on_exit: Callable[[int], None]) -> None:
    visited[root] = True
    on_enter(root)
    stack: list[tuple[int, int]] = [(root, 0)]
    while stack:
        u, i = stack[-1]
        nbrs = graph.neighbors(u)
        while i < len(nbrs) and (not graph.contains(nbrs[i][0]) or visited[nbrs[i][0]]):
            i += 1
        if i == len(nbrs):
            stack.pop()
            on_exit(u)
            continue
        stack[-1] = (u, i + 1)
        v = nbrs[i][0]
        visited[v] = True
        on_enter(v)
        stack.append((v, 0))


def _postorder_iterative(graph: Graph, u: int, visited: list[bool], out: list[int]) -> None:
    _walk(graph, u, visited, lambda _: None, out.append)


def _preorder_iterative(graph: Graph, u: int, visited: list[bool], out: list[int]) -> None:
    _walk(graph, u, visited, out.append, lambda _: None)


def component_index(components: list[list[int]]) -> dict[int, int]:
    """vertex -> index of the component holding it."""
    out: dict[int, int] = {}
    for i, comp in enumerate(components):
        for v in comp:
            out[v] = i
    return out
