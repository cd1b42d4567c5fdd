"""Grid state and blockable streets for the taxicab explorer."""

from dataclasses import dataclass
from typing import Iterable, List, Set, Tuple

import numpy as np
from scipy.sparse import coo_matrix
from scipy.sparse.csgraph import connected_components

from .geometry import GridCell, clamp_cell


class InvalidEdgeError(ValueError):
    """Raised when a street is requested between two non-adjacent cells."""


@dataclass(frozen=True)
class Edge:
    """
    Street between two grid-adjacent cells.

    The endpoints are stored lower coordinate first, so Edge(a, b) and
    Edge(b, a) are equal and hash the same.
    """
    a: GridCell
    b: GridCell

    def __post_init__(self):
        a, b = GridCell(*self.a), GridCell(*self.b)
        if abs(a.x - b.x) + abs(a.y - b.y) != 1:
            raise InvalidEdgeError(
                f"Cells {tuple(a)} and {tuple(b)} are not adjacent")
        lo, hi = (a, b) if a <= b else (b, a)
        object.__setattr__(self, 'a', lo)
        object.__setattr__(self, 'b', hi)

    @property
    def is_vertical(self) -> bool:
        return self.a.x == self.b.x

    def __repr__(self) -> str:
        return f"Edge({self.a.x},{self.a.y}-{self.b.x},{self.b.y})"


def canonical_edge(a: Tuple[int, int], b: Tuple[int, int]) -> Edge:
    """Return the direction-independent street key for two adjacent cells."""
    return Edge(GridCell(*a), GridCell(*b))


class GridState:
    """
    Square street grid with two endpoints and a set of blocked streets.

    Coordinate convention: (x, y) for API, [y, x] for array indexing.
    """

    def __init__(self, size: int,
                 start: Tuple[int, int] = (0, 0),
                 end: Tuple[int, int] = (0, 0),
                 blocked: Iterable[Edge] = ()):
        if size < 2:
            raise ValueError(f"Grid size must be at least 2, got {size}")
        self.size = size
        self.start = self._require_in_bounds(start)
        self.end = self._require_in_bounds(end)
        self.blocked: Set[Edge] = set()
        for edge in blocked:
            self.block(edge.a, edge.b)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def _require_in_bounds(self, cell: Tuple[int, int]) -> GridCell:
        cell = GridCell(*cell)
        if not self.in_bounds(*cell):
            raise ValueError(f"Cell {tuple(cell)} outside {self.size}x{self.size} grid")
        return cell

    # Endpoints

    def move_start(self, x: float, y: float) -> GridCell:
        """Move the start point, clamping raw drag coordinates into the grid."""
        self.start = clamp_cell(x, y, self.size)
        return self.start

    def move_end(self, x: float, y: float) -> GridCell:
        """Move the end point, clamping raw drag coordinates into the grid."""
        self.end = clamp_cell(x, y, self.size)
        return self.end

    # Streets

    def street(self, a: Tuple[int, int], b: Tuple[int, int]) -> Edge:
        """Validated street key; raises InvalidEdgeError if not adjacent or off-grid."""
        edge = canonical_edge(a, b)
        if not (self.in_bounds(*edge.a) and self.in_bounds(*edge.b)):
            raise InvalidEdgeError(f"{edge!r} lies outside the grid")
        return edge

    def is_blocked(self, a: Tuple[int, int], b: Tuple[int, int]) -> bool:
        return canonical_edge(a, b) in self.blocked

    def block(self, a: Tuple[int, int], b: Tuple[int, int]) -> Edge:
        edge = self.street(a, b)
        self.blocked.add(edge)
        return edge

    def unblock(self, a: Tuple[int, int], b: Tuple[int, int]) -> Edge:
        edge = self.street(a, b)
        self.blocked.discard(edge)
        return edge

    def toggle_street(self, a: Tuple[int, int], b: Tuple[int, int]) -> bool:
        """Flip the blocked state of a street. Returns True if now blocked."""
        edge = self.street(a, b)
        if edge in self.blocked:
            self.blocked.remove(edge)
            return False
        self.blocked.add(edge)
        return True

    def clear_streets(self) -> None:
        self.blocked.clear()

    def surrounding_edges(self, cell: Tuple[int, int]) -> List[Edge]:
        """All in-bounds streets incident to a cell (2 to 4 of them)."""
        x, y = cell
        edges = []
        for dx, dy in [(-1, 0), (1, 0), (0, -1), (0, 1)]:
            nx, ny = x + dx, y + dy
            if self.in_bounds(nx, ny):
                edges.append(canonical_edge((x, y), (nx, ny)))
        return edges

    def street_masks(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Boolean masks of blocked streets.

        horizontal[y, x] covers (x, y)-(x+1, y), shape (size, size-1).
        vertical[y, x] covers (x, y)-(x, y+1), shape (size-1, size).
        """
        horizontal = np.zeros((self.size, self.size - 1), dtype=bool)
        vertical = np.zeros((self.size - 1, self.size), dtype=bool)
        for edge in self.blocked:
            if edge.is_vertical:
                vertical[edge.a.y, edge.a.x] = True
            else:
                horizontal[edge.a.y, edge.a.x] = True
        return horizontal, vertical

    # Connectivity

    def _component_labels(self) -> np.ndarray:
        """Connected-component label per cell, shape (size, size)."""
        n = self.size
        ids = np.arange(n * n).reshape(n, n)
        horizontal, vertical = self.street_masks()

        h_src = ids[:, :-1][~horizontal]
        h_dst = ids[:, 1:][~horizontal]
        v_src = ids[:-1, :][~vertical]
        v_dst = ids[1:, :][~vertical]

        rows = np.concatenate([h_src, v_src])
        cols = np.concatenate([h_dst, v_dst])
        data = np.ones(len(rows), dtype=np.int8)
        graph = coo_matrix((data, (rows, cols)), shape=(n * n, n * n)).tocsr()

        _, labels = connected_components(graph, directed=False)
        return labels.reshape(n, n)

    def connected_region(self, cell: Tuple[int, int]) -> Set[GridCell]:
        """Cells reachable from `cell` without crossing a blocked street."""
        cell = self._require_in_bounds(cell)
        labels = self._component_labels()
        ys, xs = np.where(labels == labels[cell.y, cell.x])
        return {GridCell(int(x), int(y)) for x, y in zip(xs, ys)}

    def is_reachable(self, a: Tuple[int, int], b: Tuple[int, int]) -> bool:
        a = self._require_in_bounds(a)
        b = self._require_in_bounds(b)
        labels = self._component_labels()
        return bool(labels[a.y, a.x] == labels[b.y, b.x])

    def __repr__(self) -> str:
        return (f"GridState(size={self.size}, start={tuple(self.start)}, "
                f"end={tuple(self.end)}, blocked={len(self.blocked)})")
