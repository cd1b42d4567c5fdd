"""Unit tests for flight and street geometry helpers."""

import math

import pytest

from taxicab_explorer.model.geometry import (GridCell, clamp_cell, euclidean_breakdown,
                                             euclidean_distance, flight_heading,
                                             street_heading, taxicab_breakdown,
                                             taxicab_distance)


def test_demo_distances():
    start, end = GridCell(3, 3), GridCell(11, 11)
    assert euclidean_distance(start, end) == pytest.approx(11.3137, abs=1e-4)
    assert taxicab_distance(start, end) == 16


def test_breakdowns_expose_intermediate_values():
    e = euclidean_breakdown((1, 5), (4, 1))
    assert (e['dx'], e['dy']) == (3, -4)
    assert (e['squared_dx'], e['squared_dy']) == (9, 16)
    assert e['distance'] == pytest.approx(5.0)

    t = taxicab_breakdown((1, 5), (4, 1))
    assert t == {'dx': 3, 'dy': 4, 'distance': 7}


def test_flight_heading_uses_atan2():
    assert flight_heading((0, 0), (1, 1)) == pytest.approx(45.0)
    assert flight_heading((0, 0), (0, 2)) == pytest.approx(90.0)
    assert flight_heading((2, 0), (0, 0)) == pytest.approx(180.0)
    assert flight_heading((0, 0), (3, 4)) == pytest.approx(math.degrees(math.atan2(4, 3)))


def test_street_heading_is_binary():
    assert street_heading((2, 3), (2, 4)) == 90.0
    assert street_heading((2, 4), (2, 3)) == 90.0
    assert street_heading((2, 3), (3, 3)) == 0.0
    assert street_heading((2, 3), (2, 3)) == 0.0


def test_clamp_cell_keeps_points_on_grid():
    assert clamp_cell(20.7, -3, 15) == GridCell(14, 0)
    assert clamp_cell(4.9, 7.2, 15) == GridCell(4, 7)
    assert clamp_cell(-0.5, 14.99, 15) == GridCell(0, 14)


def test_grid_cell_value_equality():
    assert GridCell(2, 3) == GridCell(2, 3)
    assert GridCell(2, 3) == (2, 3)
    assert len({GridCell(2, 3), GridCell(2, 3)}) == 1
