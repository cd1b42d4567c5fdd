"""Time-parameterised motion of the flight and street agents."""

import logging
import math
from typing import AbstractSet, Callable, List, Optional, Tuple

from .geometry import (AgentPosition, GridCell, euclidean_distance,
                       flight_heading, street_heading)
from .grid import Edge
from .pathfinder import GridPathfinder, Path, PathNotFoundError
from .scheduler import Scheduler
from .state import AnimationState, DisplayMode, FrameSnapshot

logger = logging.getLogger(__name__)

DEFAULT_MS_PER_UNIT = 300.0


def _lerp(a: Tuple[float, float], b: Tuple[float, float], t: float) -> AgentPosition:
    return AgentPosition(a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)


class MotionController:
    """
    Drives the flight agent and the street agent from wall-clock time.

    Both agents share one normalised progress value per tick. The trip
    duration is set by the longer of the two routes, so they arrive
    together.

    States: IDLE -> RUNNING <-> PAUSED, RUNNING -> COMPLETED, any -> IDLE.

    The pending frame callback is an owned handle: pause, reset and
    completion cancel it, and every callback carries the generation it was
    scheduled under so a late tick from an older run does nothing.
    """

    def __init__(self, scheduler: Scheduler,
                 pathfinder: Optional[GridPathfinder] = None,
                 ms_per_unit: float = DEFAULT_MS_PER_UNIT,
                 origin: Tuple[int, int] = (0, 0)):
        if ms_per_unit <= 0:
            raise ValueError("ms_per_unit must be positive")
        self.scheduler = scheduler
        self.pathfinder = pathfinder or GridPathfinder()
        self.ms_per_unit = ms_per_unit

        self.state = AnimationState.IDLE
        self.mode = DisplayMode.BOTH
        self.start_cell = GridCell(*origin)
        self.end_cell = GridCell(*origin)
        self.current_path: Optional[Path] = None

        self.flight_position = AgentPosition(*self.start_cell)
        self.street_position = AgentPosition(*self.start_cell)
        self.progress = 0.0
        self.duration_ms = 0.0

        # Timestamps (ms); start_wall_clock is shifted forward on resume
        self.start_wall_clock: Optional[float] = None
        self.paused_wall_clock: Optional[float] = None
        self.started_at: Optional[float] = None
        self.completed_at: Optional[float] = None
        self.total_paused_ms = 0.0
        self.pause_count = 0

        self.frame_count = 0
        self._street_heading = 0.0
        self._handle: Optional[int] = None
        self._generation = 0
        self._listeners: List[Callable[[FrameSnapshot], None]] = []

    # Observers

    def add_listener(self, listener: Callable[[FrameSnapshot], None]) -> None:
        """Register a callback receiving a FrameSnapshot for every update."""
        self._listeners.append(listener)

    def remove_listener(self, listener: Callable[[FrameSnapshot], None]) -> None:
        self._listeners.remove(listener)

    @property
    def direct_distance(self) -> float:
        return euclidean_distance(self.start_cell, self.end_cell)

    @property
    def path_length(self) -> int:
        """Number of street steps in the current path (0 without a path)."""
        return len(self.current_path) - 1 if self.current_path else 0

    @property
    def is_active(self) -> bool:
        return self.state in (AnimationState.RUNNING, AnimationState.PAUSED)

    def snapshot(self, now: Optional[float] = None) -> FrameSnapshot:
        heading = 0.0
        if self.start_cell != self.end_cell:
            heading = flight_heading(self.start_cell, self.end_cell)
        return FrameSnapshot(
            frame=self.frame_count,
            time_ms=self.scheduler.now() if now is None else now,
            progress=self.progress,
            state=self.state,
            flight=self.flight_position,
            street=self.street_position,
            flight_heading=heading,
            street_heading=self._street_heading,
        )

    # Lifecycle

    def start(self, start: Tuple[int, int], end: Tuple[int, int],
              grid_size: int, blocked: AbstractSet[Edge],
              mode: DisplayMode = DisplayMode.BOTH) -> None:
        """
        Begin a trip from `start` to `end`.

        Raises PathNotFoundError when the mode needs a street path and none
        exists; in that case nothing about the controller changes.
        """
        start = GridCell(*start)
        end = GridCell(*end)
        mode = DisplayMode(mode)

        path = None
        if mode.uses_street:
            path = self.pathfinder.find_path(start, end, grid_size, blocked)
            if path is None:
                logger.warning("Start rejected: no street path from %s to %s",
                               tuple(start), tuple(end))
                raise PathNotFoundError(start, end)

        self._cancel_pending()

        self.mode = mode
        self.start_cell = start
        self.end_cell = end
        self.current_path = path
        self.flight_position = AgentPosition(*start)
        self.street_position = AgentPosition(*start)
        self.progress = 0.0
        self.frame_count = 0
        self._street_heading = 0.0
        if path and len(path) > 1:
            self._street_heading = street_heading(path[0], path[1])

        self.duration_ms = self._compute_duration()
        now = self.scheduler.now()
        self.start_wall_clock = now
        self.started_at = now
        self.paused_wall_clock = None
        self.completed_at = None
        self.total_paused_ms = 0.0
        self.pause_count = 0
        self.state = AnimationState.RUNNING

        logger.debug("Started %s trip %s -> %s, duration %.1f ms",
                     mode.value, tuple(start), tuple(end), self.duration_ms)

        self._update(now)
        if self.state is AnimationState.RUNNING:
            self._schedule()

    def pause(self) -> bool:
        """Freeze the trip. Returns False (no-op) unless running."""
        if self.state is not AnimationState.RUNNING:
            return False
        self._cancel_pending()
        self.paused_wall_clock = self.scheduler.now()
        self.pause_count += 1
        self.state = AnimationState.PAUSED
        logger.debug("Paused at progress %.3f", self.progress)
        return True

    def resume(self) -> bool:
        """Continue a paused trip. Returns False (no-op) unless paused."""
        if self.state is not AnimationState.PAUSED:
            return False
        now = self.scheduler.now()
        paused_for = now - self.paused_wall_clock
        self.start_wall_clock += paused_for
        self.total_paused_ms += paused_for
        self.paused_wall_clock = None
        self.state = AnimationState.RUNNING
        logger.debug("Resumed after %.1f ms pause", paused_for)
        self._schedule()
        return True

    def toggle_pause(self) -> bool:
        if self.state is AnimationState.PAUSED:
            return self.resume()
        return self.pause()

    def reset(self, origin: Optional[Tuple[int, int]] = None) -> None:
        """
        Return to IDLE from any state.

        Both agents go back to `origin` (default: the last trip's start).
        """
        self._cancel_pending()
        if origin is not None:
            self.start_cell = GridCell(*origin)
        self.state = AnimationState.IDLE
        self.flight_position = AgentPosition(*self.start_cell)
        self.street_position = AgentPosition(*self.start_cell)
        self.current_path = None
        self.progress = 0.0
        self.duration_ms = 0.0
        self.start_wall_clock = None
        self.paused_wall_clock = None
        self.started_at = None
        self.completed_at = None
        self.total_paused_ms = 0.0
        self.pause_count = 0
        self.frame_count = 0
        self._street_heading = 0.0

    # Frame loop

    def _compute_duration(self) -> float:
        direct = self.direct_distance
        if self.mode is DisplayMode.DIRECT:
            return direct * self.ms_per_unit
        return max(direct, self.path_length) * self.ms_per_unit

    def _schedule(self) -> None:
        generation = self._generation
        self._handle = self.scheduler.schedule_tick(
            lambda now: self._tick(now, generation))

    def _cancel_pending(self) -> None:
        if self._handle is not None:
            self.scheduler.cancel(self._handle)
            self._handle = None
        self._generation += 1

    def _tick(self, now: float, generation: int) -> None:
        if generation != self._generation or self.state is not AnimationState.RUNNING:
            return
        self._handle = None
        self._update(now)
        # a listener may have restarted the trip, which already scheduled its own tick
        if generation == self._generation and self.state is AnimationState.RUNNING:
            self._schedule()

    def _update(self, now: float) -> None:
        """Compute both positions from a single timestamp."""
        if self.duration_ms <= 0:
            progress = 1.0
        else:
            elapsed = now - self.start_wall_clock
            progress = min(max(elapsed / self.duration_ms, 0.0), 1.0)
        self.progress = progress

        if progress >= 1.0:
            self._finish(now)
            return

        if self.mode.uses_flight:
            self.flight_position = _lerp(self.start_cell, self.end_cell, progress)
        if self.mode.uses_street and self.path_length > 0:
            self.street_position = self._street_position_at(progress)

        self.frame_count += 1
        self._emit(now)

    def _street_position_at(self, progress: float) -> AgentPosition:
        path = self.current_path
        length = self.path_length
        path_progress = progress * length
        index = min(max(int(math.floor(path_progress)), 0), length - 1)
        sub_progress = path_progress - index
        self._street_heading = street_heading(path[index], path[index + 1])
        return _lerp(path[index], path[index + 1], sub_progress)

    def _finish(self, now: float) -> None:
        self._cancel_pending()
        if self.mode.uses_flight:
            self.flight_position = AgentPosition(*self.end_cell)
        if self.mode.uses_street:
            self.street_position = AgentPosition(*self.end_cell)
        self.state = AnimationState.COMPLETED
        self.completed_at = now
        self.frame_count += 1
        logger.debug("Completed after %.1f ms (%.1f ms paused)",
                     now - self.started_at, self.total_paused_ms)
        self._emit(now)

    def _emit(self, now: float) -> None:
        if not self._listeners:
            return
        snap = self.snapshot(now)
        for listener in list(self._listeners):
            listener(snap)
