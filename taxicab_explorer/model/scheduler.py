"""Cooperative frame scheduling for the motion controller."""

from abc import ABC, abstractmethod
from typing import Callable, Dict

FrameCallback = Callable[[float], None]


class Scheduler(ABC):
    """
    Display-refresh style scheduler.

    A scheduled callback fires once, on the next frame, and receives the
    frame timestamp in milliseconds. Handles are owned by the caller and
    must be cancelled when the caller no longer wants the tick.
    """

    @abstractmethod
    def now(self) -> float:
        """Current time in milliseconds."""

    @abstractmethod
    def schedule_tick(self, callback: FrameCallback) -> int:
        """Register callback for the next frame. Returns a handle."""

    @abstractmethod
    def cancel(self, handle: int) -> None:
        """Drop a pending callback. Unknown or fired handles are ignored."""


class VirtualFrameScheduler(Scheduler):
    """
    Deterministic scheduler driven by a virtual clock.

    Time only moves when step() or advance() is called, so animations can
    be rendered offline or asserted on exactly in tests.
    """

    def __init__(self, frame_interval_ms: float = 1000.0 / 60, start_ms: float = 0.0):
        if frame_interval_ms <= 0:
            raise ValueError("frame_interval_ms must be positive")
        self.frame_interval_ms = frame_interval_ms
        self._time = start_ms
        self._next_handle = 1
        self._pending: Dict[int, FrameCallback] = {}
        self.frames_run = 0

    def now(self) -> float:
        return self._time

    def schedule_tick(self, callback: FrameCallback) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._pending[handle] = callback
        return handle

    def cancel(self, handle: int) -> None:
        self._pending.pop(handle, None)

    @property
    def has_pending(self) -> bool:
        return bool(self._pending)

    def step(self) -> int:
        """
        Advance one frame and fire the callbacks pending at its start.

        Callbacks registered while the frame runs fire on the next frame.
        Returns the number of callbacks fired.
        """
        self._time += self.frame_interval_ms
        self.frames_run += 1
        due = list(self._pending.items())
        self._pending.clear()
        fired = 0
        for handle, callback in due:
            callback(self._time)
            fired += 1
        return fired

    def advance(self, ms: float) -> int:
        """
        Move the clock forward by `ms`, running every whole frame inside
        the span. Returns the number of frames run.
        """
        target = self._time + ms
        frames = 0
        while self._time + self.frame_interval_ms <= target + 1e-9:
            self.step()
            frames += 1
        self._time = max(self._time, target)
        return frames

    def run_until_idle(self, max_frames: int = 100_000) -> int:
        """Run frames until nothing is pending. Returns frames run."""
        frames = 0
        while self._pending and frames < max_frames:
            self.step()
            frames += 1
        return frames
