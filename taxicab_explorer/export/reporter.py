"""Summary report generation for the taxicab explorer."""

from typing import Dict, Optional, TYPE_CHECKING
from pathlib import Path

from ..model.geometry import euclidean_breakdown, taxicab_breakdown

if TYPE_CHECKING:
    from ..model.session import ExplorerSession
    from ..model.state import FrameSnapshot


class Reporter:
    """Collects per-frame statistics and formats a text report."""

    def __init__(self, config_path: Optional[str]):
        self.config_path = config_path
        self.frames = 0
        self.max_gap = 0.0  # largest separation between the two agents
        self.last_snapshot: Optional["FrameSnapshot"] = None

    def update(self, snapshot: "FrameSnapshot") -> None:
        """Accumulate statistics per frame."""
        self.frames += 1
        gap = ((snapshot.flight.x - snapshot.street.x) ** 2 +
               (snapshot.flight.y - snapshot.street.y) ** 2) ** 0.5
        if gap > self.max_gap:
            self.max_gap = gap
        self.last_snapshot = snapshot

    def generate_summary(self, session: "ExplorerSession",
                         output_dir: Path,
                         csv_enabled: bool,
                         snapshot_enabled: bool,
                         gif_enabled: bool) -> str:
        """Returns formatted text report."""
        grid = session.grid
        motion = session.motion
        metrics: Dict = session.metrics()

        street = metrics['street_distance']
        street_text = '∞ (unreachable)' if street == float('inf') else f"{street:.0f} units"
        difference = metrics['difference']
        diff_text = '-' if difference is None else f"{difference:.2f} units"

        flight_calc = euclidean_breakdown(grid.start, grid.end)
        street_calc = taxicab_breakdown(grid.start, grid.end)

        wall_clock = 0.0
        if motion.started_at is not None and motion.completed_at is not None:
            wall_clock = motion.completed_at - motion.started_at

        lines = [
            "",
            "=" * 80,
            "                    FLIGHT VS STREET DISTANCE REPORT",
            "=" * 80,
            f"Configuration: {self.config_path or '(defaults)'}",
            f"Grid:          {grid.size}x{grid.size}, "
            f"{len(grid.blocked)} blocked street(s)",
            f"Trip:          {tuple(grid.start)} -> {tuple(grid.end)} "
            f"(mode: {session.mode.value})",
            "",
            "DISTANCES",
            "-" * 40,
            f"Flight Calculation:    sqrt({flight_calc['dx']}² + {flight_calc['dy']}²) = "
            f"sqrt({flight_calc['squared_dx']} + {flight_calc['squared_dy']})",
            f"Flight Distance:       {metrics['flight_distance']:.2f} units",
            f"Taxicab Calculation:   |{street_calc['dx']}| + |{street_calc['dy']}| = "
            f"{street_calc['distance']}",
            f"Street Distance:       {street_text}",
            f"Taxicab (no blocks):   {metrics['taxicab_distance']} units",
            f"Difference:            {diff_text}",
            f"Reachable Cells:       {metrics['reachable_cells']} of {grid.size * grid.size}",
            "",
            "ANIMATION",
            "-" * 40,
            f"Final State:           {motion.state.value}",
            f"Trip Duration:         {motion.duration_ms:.1f} ms",
            f"Wall Clock:            {wall_clock:.1f} ms "
            f"({motion.total_paused_ms:.1f} ms paused, {motion.pause_count} pause(s))",
            f"Frames Rendered:       {self.frames}",
            f"Max Agent Separation:  {self.max_gap:.2f} units",
            "",
            "OUTPUT FILES",
            "-" * 40,
        ]

        # Output file paths
        if csv_enabled:
            lines.append(f"CSV Log:    {output_dir / 'frames.csv'}")
        else:
            lines.append("CSV Log:    (disabled)")

        if snapshot_enabled:
            lines.append(f"Snapshot:   {output_dir / 'final_frame.png'}")
        else:
            lines.append("Snapshot:   (disabled)")

        if gif_enabled:
            lines.append(f"Animation:  {output_dir / 'trip.gif'}")
        else:
            lines.append("Animation:  (disabled)")

        lines.append("=" * 80)

        return "\n".join(lines)
