"""Unit tests for the virtual frame scheduler."""

import pytest

from taxicab_explorer.model.scheduler import VirtualFrameScheduler


def test_tick_fires_on_next_frame_with_timestamp():
    scheduler = VirtualFrameScheduler(frame_interval_ms=10)
    seen = []
    scheduler.schedule_tick(seen.append)
    assert seen == []
    assert scheduler.step() == 1
    assert seen == [10]
    assert scheduler.step() == 0


def test_cancelled_tick_never_fires():
    scheduler = VirtualFrameScheduler(frame_interval_ms=10)
    seen = []
    handle = scheduler.schedule_tick(seen.append)
    scheduler.cancel(handle)
    scheduler.cancel(handle)  # unknown handles are ignored
    scheduler.step()
    assert seen == []
    assert not scheduler.has_pending


def test_ticks_scheduled_inside_a_frame_run_next_frame():
    scheduler = VirtualFrameScheduler(frame_interval_ms=10)
    seen = []

    def chain(now):
        seen.append(now)
        if len(seen) < 3:
            scheduler.schedule_tick(chain)

    scheduler.schedule_tick(chain)
    assert scheduler.run_until_idle() == 3
    assert seen == [10, 20, 30]


def test_advance_runs_whole_frames_only():
    scheduler = VirtualFrameScheduler(frame_interval_ms=10)
    assert scheduler.advance(35) == 3
    assert scheduler.now() == pytest.approx(35)
    assert scheduler.frames_run == 3


def test_frame_interval_must_be_positive():
    with pytest.raises(ValueError):
        VirtualFrameScheduler(frame_interval_ms=0)
