"""State enums and frame snapshot dataclasses for the taxicab explorer."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict

from .geometry import AgentPosition


class AnimationState(Enum):
    """Lifecycle of a trip animation."""
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


class DisplayMode(Enum):
    """Which agents take part in the trip."""
    DIRECT = "direct"  # flight only
    GRID = "grid"      # street only
    BOTH = "both"

    @property
    def uses_flight(self) -> bool:
        return self is not DisplayMode.GRID

    @property
    def uses_street(self) -> bool:
        return self is not DisplayMode.DIRECT


@dataclass(frozen=True)
class FrameSnapshot:
    """Immutable snapshot of both agents at one animation tick."""
    frame: int
    time_ms: float
    progress: float
    state: AnimationState
    flight: AgentPosition
    street: AgentPosition
    flight_heading: float
    street_heading: float

    def to_csv_row(self) -> Dict:
        """Convert to CSV-compatible format."""
        return {
            "frame": self.frame,
            "time_ms": round(self.time_ms, 3),
            "progress": round(self.progress, 6),
            "state": self.state.value,
            "flight_x": round(self.flight.x, 6),
            "flight_y": round(self.flight.y, 6),
            "street_x": round(self.street.x, 6),
            "street_y": round(self.street.y, 6),
            "flight_heading": round(self.flight_heading, 3),
            "street_heading": self.street_heading,
        }
