"""Unit tests for street edges and grid state."""

import pytest

from taxicab_explorer.model.geometry import GridCell
from taxicab_explorer.model.grid import Edge, GridState, InvalidEdgeError, canonical_edge


def _adjacent_pairs(size):
    for x in range(size):
        for y in range(size):
            for dx, dy in [(1, 0), (0, 1)]:
                if x + dx < size and y + dy < size:
                    yield (x, y), (x + dx, y + dy)


def test_edge_key_is_symmetric():
    for a, b in _adjacent_pairs(4):
        assert canonical_edge(a, b) == canonical_edge(b, a)
        assert hash(canonical_edge(a, b)) == hash(canonical_edge(b, a))
        assert Edge(GridCell(*b), GridCell(*a)) == canonical_edge(a, b)


def test_edge_stores_lower_coordinate_first():
    edge = canonical_edge((5, 4), (5, 3))
    assert edge.a == GridCell(5, 3)
    assert edge.b == GridCell(5, 4)
    assert edge.is_vertical
    assert not canonical_edge((2, 2), (1, 2)).is_vertical


@pytest.mark.parametrize("a, b", [((0, 0), (1, 1)), ((0, 0), (0, 2)), ((3, 3), (3, 3))])
def test_non_adjacent_edge_is_rejected(a, b):
    with pytest.raises(InvalidEdgeError):
        canonical_edge(a, b)


def test_toggle_street_flips_membership():
    grid = GridState(5)
    assert grid.toggle_street((1, 1), (1, 2)) is True
    assert grid.is_blocked((1, 2), (1, 1))
    assert grid.toggle_street((1, 2), (1, 1)) is False
    assert not grid.blocked


def test_block_outside_grid_is_rejected():
    grid = GridState(15)
    with pytest.raises(InvalidEdgeError):
        grid.block((14, 0), (15, 0))


def test_points_outside_grid_are_rejected():
    with pytest.raises(ValueError):
        GridState(5, start=(5, 0))
    with pytest.raises(ValueError):
        GridState(1)


def test_surrounding_edges():
    grid = GridState(5)
    assert len(grid.surrounding_edges((0, 0))) == 2
    assert len(grid.surrounding_edges((0, 2))) == 3
    interior = grid.surrounding_edges((2, 2))
    assert len(interior) == 4
    assert canonical_edge((2, 2), (2, 1)) in interior


def test_street_masks():
    grid = GridState(4)
    grid.block((1, 2), (2, 2))
    grid.block((1, 2), (1, 3))
    horizontal, vertical = grid.street_masks()
    assert horizontal.shape == (4, 3)
    assert vertical.shape == (3, 4)
    assert horizontal[2, 1] and horizontal.sum() == 1
    assert vertical[2, 1] and vertical.sum() == 1


def test_connected_region_respects_blocked_streets():
    grid = GridState(4)
    assert len(grid.connected_region((0, 0))) == 16

    grid.block((0, 0), (1, 0))
    grid.block((0, 0), (0, 1))
    assert grid.connected_region((0, 0)) == {GridCell(0, 0)}
    assert not grid.is_reachable((0, 0), (3, 3))
    assert grid.is_reachable((1, 0), (3, 3))


def test_move_points_clamp_drag_input():
    grid = GridState(15, start=(3, 3), end=(11, 11))
    assert grid.move_start(20.7, -3) == GridCell(14, 0)
    assert grid.start == GridCell(14, 0)
    assert grid.move_end(2.5, 6.1) == GridCell(2, 6)
