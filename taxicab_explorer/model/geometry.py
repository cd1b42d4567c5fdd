"""Flight (Euclidean) and street (taxicab) geometry on the grid."""

import math
from typing import Dict, NamedTuple, Tuple


class GridCell(NamedTuple):
    """Integer grid intersection. Equality is by value."""
    x: int
    y: int


class AgentPosition(NamedTuple):
    """Continuous position of an animated agent."""
    x: float
    y: float


def euclidean_distance(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    """Straight-line ("flight") distance."""
    return math.hypot(b[0] - a[0], b[1] - a[1])


def taxicab_distance(a: Tuple[int, int], b: Tuple[int, int]) -> int:
    """Street distance on an unobstructed grid."""
    return abs(b[0] - a[0]) + abs(b[1] - a[1])


def euclidean_breakdown(a: Tuple[int, int], b: Tuple[int, int]) -> Dict[str, float]:
    """Intermediate values of the Pythagorean calculation, for display."""
    dx = b[0] - a[0]
    dy = b[1] - a[1]
    return {
        'dx': dx,
        'dy': dy,
        'squared_dx': dx * dx,
        'squared_dy': dy * dy,
        'distance': math.sqrt(dx * dx + dy * dy),
    }


def taxicab_breakdown(a: Tuple[int, int], b: Tuple[int, int]) -> Dict[str, int]:
    """Intermediate values of the taxicab calculation, for display."""
    dx = abs(b[0] - a[0])
    dy = abs(b[1] - a[1])
    return {'dx': dx, 'dy': dy, 'distance': dx + dy}


def flight_heading(start: Tuple[int, int], end: Tuple[int, int]) -> float:
    """Heading of the flight agent in degrees (atan2 of the start->end vector)."""
    return math.degrees(math.atan2(end[1] - start[1], end[0] - start[0]))


def street_heading(segment_start: Tuple[int, int],
                   segment_end: Tuple[int, int]) -> float:
    """Binary orientation of the street agent: 90 on a vertical leg, else 0."""
    if segment_start[0] == segment_end[0] and segment_start[1] != segment_end[1]:
        return 90.0
    return 0.0


def clamp_cell(x: float, y: float, grid_size: int) -> GridCell:
    """
    Translate raw pointer coordinates into a cell inside the grid.

    Values are floored (as pixel-to-cell mapping does) and clamped to
    [0, grid_size - 1] on both axes.
    """
    cx = min(max(int(math.floor(x)), 0), grid_size - 1)
    cy = min(max(int(math.floor(y)), 0), grid_size - 1)
    return GridCell(cx, cy)
