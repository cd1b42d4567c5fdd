"""Explorer session: grid state plus motion controller, no globals."""

import logging
from typing import Dict, Iterable, Optional, Tuple, TYPE_CHECKING

from .geometry import GridCell, euclidean_distance, taxicab_distance
from .grid import Edge, GridState
from .motion import DEFAULT_MS_PER_UNIT, MotionController
from .pathfinder import GridPathfinder, PathNotFoundError
from .scheduler import Scheduler, VirtualFrameScheduler
from .state import AnimationState, DisplayMode

if TYPE_CHECKING:
    from ..config import ExplorerConfig

logger = logging.getLogger(__name__)


class ExplorerSession:
    """
    One independent explorer instance.

    Owns:
    1. GridState (size, endpoints, blocked streets)
    2. MotionController (trip animation)
    3. The display mode

    Grid edits made while a trip is running or paused reset the trip first,
    since the stored path no longer describes the grid.
    """

    def __init__(self, size: int = 15,
                 start: Tuple[int, int] = (3, 3),
                 end: Tuple[int, int] = (11, 11),
                 blocked: Iterable[Edge] = (),
                 mode: DisplayMode = DisplayMode.BOTH,
                 scheduler: Optional[Scheduler] = None,
                 ms_per_unit: float = DEFAULT_MS_PER_UNIT):
        self.grid = GridState(size, start, end, blocked)
        self.mode = DisplayMode(mode)
        self.scheduler = scheduler or VirtualFrameScheduler()
        self.pathfinder = GridPathfinder()
        self.motion = MotionController(self.scheduler, self.pathfinder,
                                       ms_per_unit, origin=self.grid.start)

    @classmethod
    def from_config(cls, config: "ExplorerConfig",
                    scheduler: Optional[Scheduler] = None) -> "ExplorerSession":
        """Build a session from a loaded ExplorerConfig."""
        if scheduler is None:
            scheduler = VirtualFrameScheduler(1000.0 / config.animation.fps)
        return cls(
            size=config.grid.size,
            start=config.points.start,
            end=config.points.end,
            blocked=config.streets.blocked,
            mode=config.animation.mode,
            scheduler=scheduler,
            ms_per_unit=config.animation.ms_per_unit,
        )

    @property
    def state(self) -> AnimationState:
        return self.motion.state

    # Grid editing

    def _before_edit(self) -> None:
        if self.motion.is_active:
            logger.debug("Grid edited during %s trip; resetting", self.state.value)
            self.motion.reset()

    def _after_edit(self) -> None:
        if not self.motion.is_active:
            self.motion.reset(origin=self.grid.start)

    def move_start(self, x: float, y: float) -> GridCell:
        self._before_edit()
        cell = self.grid.move_start(x, y)
        self._after_edit()
        return cell

    def move_end(self, x: float, y: float) -> GridCell:
        self._before_edit()
        cell = self.grid.move_end(x, y)
        self._after_edit()
        return cell

    def toggle_street(self, a: Tuple[int, int], b: Tuple[int, int]) -> bool:
        self.grid.street(a, b)  # reject bad edges before touching the trip
        self._before_edit()
        blocked = self.grid.toggle_street(a, b)
        self._after_edit()
        return blocked

    def clear_streets(self) -> None:
        self._before_edit()
        self.grid.clear_streets()
        self._after_edit()

    def set_mode(self, mode: DisplayMode) -> bool:
        """Change the display mode. Ignored (returns False) mid-trip."""
        if self.motion.is_active:
            return False
        self.mode = DisplayMode(mode)
        return True

    # Trip lifecycle

    def start(self) -> None:
        """Start a trip. Raises PathNotFoundError when the street agent is stuck."""
        start, end = self.grid.start, self.grid.end
        if self.mode.uses_street and not self.grid.is_reachable(start, end):
            logger.warning("Start rejected: %s and %s lie in separate street regions",
                           tuple(start), tuple(end))
            raise PathNotFoundError(start, end)
        self.motion.start(self.grid.start, self.grid.end, self.grid.size,
                          frozenset(self.grid.blocked), self.mode)

    def pause(self) -> bool:
        return self.motion.pause()

    def resume(self) -> bool:
        return self.motion.resume()

    def toggle_pause(self) -> bool:
        return self.motion.toggle_pause()

    def reset(self) -> None:
        self.motion.reset(origin=self.grid.start)

    # Metrics

    def metrics(self) -> Dict[str, Optional[float]]:
        """Flight vs street distance for the current endpoints."""
        start, end = self.grid.start, self.grid.end
        flight = euclidean_distance(start, end)
        region = self.grid.connected_region(start)
        reachable = end in region
        street = float('inf')
        if reachable:
            street = self.pathfinder.street_distance(
                start, end, self.grid.size, self.grid.blocked)
        return {
            'flight_distance': flight,
            'street_distance': street,
            'taxicab_distance': taxicab_distance(start, end),
            'difference': street - flight if reachable else None,
            'reachable_cells': len(region),
        }
