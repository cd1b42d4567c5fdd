"""Unit tests for the explorer session."""

import pytest

from taxicab_explorer.config import ExplorerConfig
from taxicab_explorer.model.geometry import AgentPosition, GridCell
from taxicab_explorer.model.grid import InvalidEdgeError, canonical_edge
from taxicab_explorer.model.pathfinder import PathNotFoundError
from taxicab_explorer.model.scheduler import VirtualFrameScheduler
from taxicab_explorer.model.session import ExplorerSession
from taxicab_explorer.model.state import AnimationState, DisplayMode


def _session(**kwargs) -> ExplorerSession:
    kwargs.setdefault('scheduler', VirtualFrameScheduler(frame_interval_ms=10))
    return ExplorerSession(**kwargs)


def _wall_between_rows(session, y):
    """Block every street crossing from row y to row y + 1."""
    for x in range(session.grid.size):
        session.toggle_street((x, y), (x, y + 1))


def test_default_session_matches_demo():
    session = _session()
    assert session.grid.size == 15
    assert session.grid.start == GridCell(3, 3)
    assert session.grid.end == GridCell(11, 11)
    assert session.mode is DisplayMode.BOTH
    assert session.state is AnimationState.IDLE


def test_demo_trip_metrics_and_run():
    session = _session()
    metrics = session.metrics()
    assert metrics['flight_distance'] == pytest.approx(11.3137, abs=1e-4)
    assert metrics['street_distance'] == 16
    assert metrics['taxicab_distance'] == 16
    assert metrics['difference'] == pytest.approx(16 - 11.3137, abs=1e-4)

    session.start()
    assert session.motion.duration_ms == pytest.approx(16 * 300)
    session.scheduler.run_until_idle()
    assert session.state is AnimationState.COMPLETED
    assert session.motion.street_position == AgentPosition(11, 11)


def test_metrics_when_unreachable():
    session = _session()
    _wall_between_rows(session, 6)
    metrics = session.metrics()
    assert metrics['street_distance'] == float('inf')
    assert metrics['difference'] is None
    assert metrics['taxicab_distance'] == 16


def test_metrics_report_reachable_region_size():
    session = _session()
    assert session.metrics()['reachable_cells'] == 15 * 15

    _wall_between_rows(session, 6)
    metrics = session.metrics()
    assert metrics['reachable_cells'] == 15 * 7
    # unreachable end is settled by the region check, not a search
    assert session.pathfinder.nodes_expanded == 0


def test_start_rejected_by_region_check_before_search():
    session = _session()
    _wall_between_rows(session, 6)
    with pytest.raises(PathNotFoundError, match="unreachable"):
        session.start()
    assert session.pathfinder.nodes_expanded == 0
    assert not session.scheduler.has_pending


@pytest.mark.parametrize("mode", [DisplayMode.GRID, DisplayMode.BOTH])
def test_start_rejected_when_regions_are_separated(mode):
    session = _session(mode=mode)
    _wall_between_rows(session, 6)
    blocked_before = set(session.grid.blocked)

    with pytest.raises(PathNotFoundError):
        session.start()

    assert session.state is AnimationState.IDLE
    assert session.motion.flight_position == AgentPosition(3, 3)
    assert session.motion.street_position == AgentPosition(3, 3)
    assert session.grid.blocked == blocked_before
    assert session.grid.start == GridCell(3, 3)
    assert session.grid.end == GridCell(11, 11)


def test_direct_mode_ignores_blocked_streets():
    session = _session(mode=DisplayMode.DIRECT)
    _wall_between_rows(session, 6)
    session.start()
    session.scheduler.run_until_idle()
    assert session.state is AnimationState.COMPLETED
    assert session.motion.flight_position == AgentPosition(11, 11)


def test_mode_locked_during_trip():
    session = _session()
    session.start()
    assert session.set_mode(DisplayMode.DIRECT) is False
    assert session.mode is DisplayMode.BOTH

    session.pause()
    assert session.set_mode(DisplayMode.DIRECT) is False

    session.reset()
    assert session.set_mode(DisplayMode.DIRECT) is True
    assert session.mode is DisplayMode.DIRECT


def test_editing_mid_trip_resets_animation():
    session = _session()
    session.start()
    session.scheduler.advance(1000)
    assert session.motion.progress > 0

    assert session.toggle_street((5, 5), (5, 6)) is True
    assert session.state is AnimationState.IDLE
    assert session.motion.current_path is None
    assert not session.scheduler.has_pending

    session.start()
    session.scheduler.advance(500)
    cell = session.move_start(1.4, 2.9)
    assert cell == GridCell(1, 2)
    assert session.state is AnimationState.IDLE
    assert session.motion.flight_position == AgentPosition(1, 2)
    assert session.motion.street_position == AgentPosition(1, 2)


@pytest.mark.parametrize("a, b", [((5, 5), (6, 6)), ((14, 3), (15, 3))])
def test_invalid_street_toggle_leaves_trip_running(a, b):
    session = _session()
    session.start()
    session.scheduler.advance(1000)
    progress = session.motion.progress

    with pytest.raises(InvalidEdgeError):
        session.toggle_street(a, b)

    assert session.state is AnimationState.RUNNING
    assert session.motion.progress == progress
    assert session.grid.blocked == set()
    session.scheduler.run_until_idle()
    assert session.state is AnimationState.COMPLETED


def test_moving_start_while_idle_moves_agents():
    session = _session()
    session.move_start(0, 0)
    assert session.motion.flight_position == AgentPosition(0, 0)
    session.move_end(99, 99)
    assert session.grid.end == GridCell(14, 14)


def test_reset_returns_agents_to_current_start():
    session = _session()
    session.start()
    session.scheduler.run_until_idle()
    session.reset()
    assert session.state is AnimationState.IDLE
    assert session.motion.street_position == AgentPosition(3, 3)


def test_toggle_pause():
    session = _session()
    session.start()
    assert session.toggle_pause() is True
    assert session.state is AnimationState.PAUSED
    assert session.toggle_pause() is True
    assert session.state is AnimationState.RUNNING


def test_clear_streets_restores_reachability():
    session = _session()
    _wall_between_rows(session, 6)
    session.clear_streets()
    assert not session.grid.blocked
    session.start()
    assert session.state is AnimationState.RUNNING


def test_from_config():
    config = ExplorerConfig()
    config.grid.size = 8
    config.points.start = (1, 1)
    config.points.end = (6, 2)
    config.streets.blocked = [canonical_edge((5, 2), (6, 2)),
                              canonical_edge((6, 1), (6, 2))]
    config.animation.mode = DisplayMode.GRID
    config.animation.fps = 50

    session = ExplorerSession.from_config(config)
    assert session.grid.size == 8
    assert session.grid.is_blocked((6, 2), (5, 2))
    assert session.mode is DisplayMode.GRID
    assert session.scheduler.frame_interval_ms == pytest.approx(20)
    assert session.metrics()['street_distance'] == 8


def test_sessions_are_independent():
    first = _session()
    second = _session()
    first.toggle_street((0, 0), (0, 1))
    first.start()
    assert not second.grid.blocked
    assert second.state is AnimationState.IDLE
