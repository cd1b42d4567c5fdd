"""A* street pathfinding over a grid with blockable edges."""

import heapq
import itertools
import logging
from typing import AbstractSet, Dict, List, Optional, Tuple

from .geometry import GridCell, taxicab_distance
from .grid import Edge, canonical_edge

logger = logging.getLogger(__name__)

Path = List[GridCell]


class PathNotFoundError(LookupError):
    """No unblocked street route connects the two points."""

    def __init__(self, start: Tuple[int, int], end: Tuple[int, int]):
        self.start = GridCell(*start)
        self.end = GridCell(*end)
        super().__init__(
            f"No valid street path from {tuple(self.start)} to {tuple(self.end)}: "
            f"the destination is unreachable with the current blocked streets")


class GridPathfinder:
    """
    Shortest street path search.

    Uniform step cost of 1 with the Manhattan distance as heuristic, which
    is admissible and consistent on a 4-connected grid, so the first time
    the end cell is popped its path is optimal.

    Frontier ties are broken by (f, h, insertion order), which keeps the
    returned path stable for a fixed input.
    """

    # Neighbour expansion order
    OFFSETS = [(0, 1), (0, -1), (1, 0), (-1, 0)]

    def __init__(self):
        self.nodes_expanded = 0

    def neighbors(self, cell: GridCell, grid_size: int,
                  blocked: AbstractSet[Edge]) -> List[GridCell]:
        """In-bounds 4-neighbours whose connecting street is open."""
        result = []
        for dx, dy in self.OFFSETS:
            nx, ny = cell.x + dx, cell.y + dy
            if not (0 <= nx < grid_size and 0 <= ny < grid_size):
                continue
            neighbor = GridCell(nx, ny)
            if canonical_edge(cell, neighbor) in blocked:
                continue
            result.append(neighbor)
        return result

    def find_path(self, start: Tuple[int, int], end: Tuple[int, int],
                  grid_size: int, blocked: AbstractSet[Edge]) -> Optional[Path]:
        """
        Return a shortest path from start to end, or None if unreachable.

        The path includes both endpoints; start == end gives [start].
        """
        start = GridCell(*start)
        end = GridCell(*end)
        self.nodes_expanded = 0

        if start == end:
            return [start]

        counter = itertools.count()
        h0 = taxicab_distance(start, end)
        open_heap = [(h0, h0, next(counter), start)]
        came_from: Dict[GridCell, GridCell] = {}
        g_score: Dict[GridCell, int] = {start: 0}
        closed = set()

        while open_heap:
            _, _, _, current = heapq.heappop(open_heap)
            if current in closed:
                continue  # stale heap entry
            if current == end:
                path = self._reconstruct(came_from, current)
                logger.debug("Path %s -> %s: %d steps, %d nodes expanded",
                             tuple(start), tuple(end), len(path) - 1,
                             self.nodes_expanded)
                return path

            closed.add(current)
            self.nodes_expanded += 1

            for neighbor in self.neighbors(current, grid_size, blocked):
                tentative = g_score[current] + 1
                if tentative < g_score.get(neighbor, float('inf')):
                    came_from[neighbor] = current
                    g_score[neighbor] = tentative
                    h = taxicab_distance(neighbor, end)
                    heapq.heappush(open_heap,
                                   (tentative + h, h, next(counter), neighbor))

        logger.debug("No path %s -> %s (%d blocked streets, %d nodes expanded)",
                     tuple(start), tuple(end), len(blocked), self.nodes_expanded)
        return None

    def require_path(self, start: Tuple[int, int], end: Tuple[int, int],
                     grid_size: int, blocked: AbstractSet[Edge]) -> Path:
        """Like find_path, but raises PathNotFoundError instead of returning None."""
        path = self.find_path(start, end, grid_size, blocked)
        if path is None:
            raise PathNotFoundError(start, end)
        return path

    def street_distance(self, start: Tuple[int, int], end: Tuple[int, int],
                        grid_size: int, blocked: AbstractSet[Edge]) -> float:
        """Number of street steps on the shortest path, or inf if unreachable."""
        path = self.find_path(start, end, grid_size, blocked)
        if path is None:
            return float('inf')
        return len(path) - 1

    @staticmethod
    def _reconstruct(came_from: Dict[GridCell, GridCell], current: GridCell) -> Path:
        path = [current]
        while current in came_from:
            current = came_from[current]
            path.append(current)
        path.reverse()
        return path


def find_path(start: Tuple[int, int], end: Tuple[int, int],
              grid_size: int, blocked: AbstractSet[Edge]) -> Optional[Path]:
    """Module-level convenience wrapper around GridPathfinder.find_path."""
    return GridPathfinder().find_path(start, end, grid_size, blocked)
