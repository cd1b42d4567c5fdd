"""Visualization and export for the taxicab explorer."""

import numpy as np
import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt
from pathlib import Path
from typing import List, Optional, TYPE_CHECKING
from PIL import Image
import io

if TYPE_CHECKING:
    from ..model.grid import GridState
    from ..model.pathfinder import Path as StreetPath
    from ..model.state import FrameSnapshot


class Visualizer:
    """
    Draws the street grid and both agents using matplotlib.

    Supports:
    - Single PNG snapshots
    - Animated GIF compilation
    """

    # Color scheme
    COLORS = {
        'grid': '#CBD5E1',      # Light slate
        'blocked': '#EF4444',   # Red
        'path': '#F87171',      # Light red
        'flight': '#3B82F6',    # Blue
        'street': '#DC2626',    # Dark red
        'start': '#22C55E',     # Green
        'end': '#A855F7',       # Purple
    }

    def __init__(self, grid: "GridState", show_grid: bool = True):
        self.grid = grid
        self.size = grid.size
        self.show_grid = show_grid
        self.frames: List[Image.Image] = []

    def _create_figure(self, snapshot: "FrameSnapshot",
                       path: Optional["StreetPath"] = None) -> plt.Figure:
        """Create matplotlib figure for one frame."""
        fig, ax = plt.subplots(figsize=(6, 6))
        n = self.size

        if self.show_grid:
            for i in range(n):
                ax.plot([0, n - 1], [i, i], color=self.COLORS['grid'], lw=0.8, zorder=1)
                ax.plot([i, i], [0, n - 1], color=self.COLORS['grid'], lw=0.8, zorder=1)

        # Blocked streets
        horizontal, vertical = self.grid.street_masks()
        for y, x in zip(*np.where(horizontal)):
            ax.plot([x, x + 1], [y, y], color=self.COLORS['blocked'], lw=3, zorder=2)
        for y, x in zip(*np.where(vertical)):
            ax.plot([x, x], [y, y + 1], color=self.COLORS['blocked'], lw=3, zorder=2)

        start, end = self.grid.start, self.grid.end

        # Planned routes
        ax.plot([start.x, end.x], [start.y, end.y], '--',
                color=self.COLORS['flight'], lw=1.2, alpha=0.6, zorder=3)
        if path and len(path) > 1:
            xs = [c.x for c in path]
            ys = [c.y for c in path]
            ax.plot(xs, ys, '-', color=self.COLORS['path'], lw=2, alpha=0.6, zorder=3)
            ax.plot(xs, ys, '.', color=self.COLORS['path'], markersize=4, zorder=3)

        # Endpoints
        ax.plot(start.x, start.y, 'o', color=self.COLORS['start'],
                markersize=11, markeredgecolor='black', markeredgewidth=0.5, zorder=4)
        ax.plot(end.x, end.y, 'o', color=self.COLORS['end'],
                markersize=11, markeredgecolor='black', markeredgewidth=0.5, zorder=4)

        # Agents
        ax.plot(snapshot.flight.x, snapshot.flight.y,
                marker=(3, 0, snapshot.flight_heading - 90), linestyle='None',
                color=self.COLORS['flight'], markersize=10, zorder=5)
        ax.plot(snapshot.street.x, snapshot.street.y, 's',
                color=self.COLORS['street'], markersize=8,
                markeredgecolor='white', markeredgewidth=0.5, zorder=5)

        ax.set_title(f'Frame {snapshot.frame} | {snapshot.state.value} | '
                     f'progress {snapshot.progress:.0%}')
        ax.set_xlim(-0.5, n - 0.5)
        ax.set_ylim(n - 0.5, -0.5)  # screen orientation: y grows downward
        ax.set_aspect('equal')
        ax.set_xlabel('X')
        ax.set_ylabel('Y')

        # Legend
        legend_elements = [
            plt.Line2D([0], [0], marker='^', color='w', label='Flight',
                       markerfacecolor=self.COLORS['flight'], markersize=8),
            plt.Line2D([0], [0], marker='s', color='w', label='Street',
                       markerfacecolor=self.COLORS['street'], markersize=8),
            plt.Line2D([0], [0], color=self.COLORS['blocked'], lw=3,
                       label='Blocked street'),
        ]
        ax.legend(handles=legend_elements, loc='upper right', fontsize=8)

        plt.tight_layout()
        return fig

    def buffer_frame(self, snapshot: "FrameSnapshot",
                     path: Optional["StreetPath"] = None) -> None:
        """Store frame for GIF generation."""
        fig = self._create_figure(snapshot, path)

        # Convert to PIL Image
        buf = io.BytesIO()
        fig.savefig(buf, format='png', dpi=80)
        buf.seek(0)
        img = Image.open(buf).copy()
        self.frames.append(img)
        buf.close()
        plt.close(fig)

    def save_snapshot(self, snapshot: "FrameSnapshot", output_path: Path,
                      path: Optional["StreetPath"] = None) -> None:
        """Save single PNG image of one frame."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig = self._create_figure(snapshot, path)
        fig.savefig(output_path, dpi=150, bbox_inches='tight')
        plt.close(fig)

    def generate_gif(self, output_path: Path, fps: int = 20) -> None:
        """Compile buffered frames into animated GIF."""
        if not self.frames:
            return

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        duration = int(1000 / fps)  # milliseconds per frame

        self.frames[0].save(
            output_path,
            save_all=True,
            append_images=self.frames[1:],
            duration=duration,
            loop=0
        )

    def clear_frames(self) -> None:
        """Clear buffered frames."""
        self.frames.clear()
