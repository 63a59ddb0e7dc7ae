import pytest

from task_graph_engine.core.errors import InvalidVertexError
from task_graph_engine.core.model import CapacityMatrix, Graph


def test_graph_requires_positive_vertex_count():
    with pytest.raises(ValueError):
        Graph(vertex_count=0)


def test_require_vertex():
    g = Graph(vertex_count=3)
    g.require_vertex(2)
    with pytest.raises(InvalidVertexError) as exc:
        g.require_vertex(3, path="start")
    assert str(exc.value) == "start: E_INVALID_VERTEX: vertex 3 is outside [0, 3)"


def test_capacity_matrix_bounds_checked():
    m = CapacityMatrix(3)
    m[0, 2] = 5
    assert m[0, 2] == 5
    assert m.rows() == [[0, 0, 5], [0, 0, 0], [0, 0, 0]]
    with pytest.raises(InvalidVertexError):
        m[3, 0]
    with pytest.raises(InvalidVertexError):
        m[0, -1] = 1


def test_capacity_matrix_rejects_negative_capacity():
    m = CapacityMatrix(2)
    with pytest.raises(ValueError):
        m.set_capacity(0, 1, -1)
    with pytest.raises(ValueError):
        CapacityMatrix.from_rows([[0, -2], [0, 0]])


def test_capacity_matrix_from_rows():
    m = CapacityMatrix.from_rows([[0, 3], [1, 0]])
    assert m.size == 2
    assert m[1, 0] == 1
    with pytest.raises(ValueError):
        CapacityMatrix.from_rows([[0, 1, 2], [0, 0]])


def test_copy_is_independent():
    m = CapacityMatrix(2)
    c = m.copy()
    c[0, 1] = 9
    assert m[0, 1] == 0
