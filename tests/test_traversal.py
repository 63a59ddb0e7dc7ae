import pytest

from graph_fixtures import basic_records, random_records
from task_graph_engine.core.algorithms.traversal import (
    bfs_count,
    dfs_count,
    dfs_count_iterative,
    reachable_vertices,
    traverse,
)
from task_graph_engine.core.build.build_graph import build_graph
from task_graph_engine.core.errors import InvalidVertexError
from task_graph_engine.core.model import Graph


def test_basic_reachability():
    g = build_graph(basic_records(), 10)
    assert bfs_count(g, 1) == 3
    assert dfs_count(g, 1) == 3
    assert dfs_count_iterative(g, 1) == 3
    assert reachable_vertices(g, 1) == [1, 2, 3]


def test_isolated_vertex_counts_itself():
    g = build_graph(basic_records(), 10)
    assert bfs_count(g, 0) == 1
    assert dfs_count(g, 7) == 1


def test_bfs_visit_order_follows_insertion():
    g = Graph(vertex_count=6)
    g.add_edge(0, 3, 3)
    g.add_edge(0, 1, 1)
    g.add_edge(1, 5, 6)
    g.add_edge(3, 4, 7)
    assert reachable_vertices(g, 0) == [0, 3, 1, 4, 5]


def test_start_out_of_range():
    g = build_graph(basic_records(), 10)
    with pytest.raises(InvalidVertexError):
        bfs_count(g, 10)
    with pytest.raises(InvalidVertexError):
        dfs_count(g, -1)


def test_unknown_method():
    g = build_graph(basic_records(), 10)
    with pytest.raises(ValueError):
        traverse(g, 1, "random-walk")  # type: ignore[arg-type]


@pytest.mark.parametrize("seed", range(8))
def test_bfs_and_dfs_agree(seed):
    g = build_graph(random_records(seed), 12)
    for s in g.vertices():
        expected = traverse(g, s, "bfs")
        assert traverse(g, s, "dfs") == expected
        assert traverse(g, s, "dfs-iterative") == expected


def test_deep_chain_iterative_dfs():
    n = 5000
    g = Graph(vertex_count=n)
    for i in range(1, n):
        g.add_edge(i, i - 1, 2 * i - 1)
    assert dfs_count_iterative(g, 0) == n
    assert bfs_count(g, n - 1) == n
