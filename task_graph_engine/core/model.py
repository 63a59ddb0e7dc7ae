from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, NamedTuple, Optional

from task_graph_engine.core.errors import invalid_vertex


@dataclass(frozen=True)
class TaskRecord:
    id: int
    dependency_ids: tuple[int, ...] = ()

    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    deadline: Optional[str] = None
    importance: Optional[int] = None


class Edge(NamedTuple):
    u: int
    v: int
    weight: int


@dataclass
class Graph:
    """Adjacency lists over the fixed vertex universe [0, vertex_count).

    Undirected graphs record every edge from both endpoints. Directed graphs
    record it once, from ``u``. Endpoints outside the universe are stored as
    given; algorithms skip them via ``contains``.
    """

    vertex_count: int
    directed: bool = False
    adjacency: dict[int, list[tuple[int, int]]] = field(default_factory=dict)
    edges: list[Edge] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not isinstance(self.vertex_count, int) or self.vertex_count < 1:
            raise ValueError(f"vertex_count must be a positive integer, got {self.vertex_count!r}")

    def contains(self, vertex: int) -> bool:
        return 0 <= vertex < self.vertex_count

    def require_vertex(self, vertex: int, *, path: Optional[str] = None) -> None:
        if not self.contains(vertex):
            raise invalid_vertex(vertex, self.vertex_count, path=path)

    def vertices(self) -> range:
        return range(self.vertex_count)

    def add_edge(self, u: int, v: int, weight: int) -> None:
        self.edges.append(Edge(u, v, weight))
        self.adjacency.setdefault(u, []).append((v, weight))
        if not self.directed:
            self.adjacency.setdefault(v, []).append((u, weight))

    def neighbors(self, vertex: int) -> list[tuple[int, int]]:
        return self.adjacency.get(vertex, [])

    def valid_neighbors(self, vertex: int) -> Iterator[tuple[int, int]]:
        for v, w in self.adjacency.get(vertex, []):
            if self.contains(v):
                yield v, w

    def arcs(self) -> Iterator[Edge]:
        """Every in-universe adjacency entry, vertex-ascending then insertion order."""
        for u in self.vertices():
            for v, w in self.valid_neighbors(u):
                yield Edge(u, v, w)

    def transpose(self) -> Graph:
        """Reverse every arc, scanning sources in ascending order.

        An undirected graph is its own transpose; a copy is returned.
        """
        out = Graph(vertex_count=self.vertex_count, directed=self.directed)
        if not self.directed:
            for e in self.edges:
                out.add_edge(e.u, e.v, e.weight)
            return out
        for u in sorted(self.adjacency):
            for v, w in self.adjacency[u]:
                out.add_edge(v, u, w)
        return out

    def edge_count(self) -> int:
        return len(self.edges)


class CapacityMatrix:
    """Dense N x N non-negative integer capacities in one flat list."""

    def __init__(self, size: int, values: Optional[list[int]] = None) -> None:
        if not isinstance(size, int) or size < 1:
            raise ValueError(f"size must be a positive integer, got {size!r}")
        self.size = size
        if values is None:
            self._cells = [0] * (size * size)
        else:
            if len(values) != size * size:
                raise ValueError(f"expected {size * size} cells, got {len(values)}")
            self._cells = list(values)

    @classmethod
    def from_rows(cls, rows: list[list[int]]) -> CapacityMatrix:
        size = len(rows)
        flat: list[int] = []
        for row in rows:
            if len(row) != size:
                raise ValueError("capacity matrix must be square")
            flat.extend(row)
        matrix = cls(size, flat)
        for cap in flat:
            if cap < 0:
                raise ValueError("capacities must be non-negative")
        return matrix

    def _index(self, key: tuple[int, int]) -> int:
        u, v = key
        for x in (u, v):
            if not 0 <= x < self.size:
                raise invalid_vertex(x, self.size)
        return u * self.size + v

    def __getitem__(self, key: tuple[int, int]) -> int:
        return self._cells[self._index(key)]

    def __setitem__(self, key: tuple[int, int], value: int) -> None:
        self._cells[self._index(key)] = value

    def set_capacity(self, u: int, v: int, capacity: int) -> None:
        if capacity < 0:
            raise ValueError(f"capacity {u}->{v} must be non-negative, got {capacity}")
        self[u, v] = capacity

    def copy(self) -> CapacityMatrix:
        return CapacityMatrix(self.size, self._cells)

    def rows(self) -> list[list[int]]:
        n = self.size
        return [self._cells[i * n : (i + 1) * n] for i in range(n)]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CapacityMatrix):
            return NotImplemented
        return self.size == other.size and self._cells == other._cells
