"""Configuration dataclasses and YAML loader for the taxicab explorer."""

from dataclasses import dataclass, field
from typing import List, Tuple, Dict, Any, Optional
from pathlib import Path
import yaml

from .model.grid import Edge, canonical_edge
from .model.state import DisplayMode


@dataclass
class GridConfig:
    size: int = 15


@dataclass
class PointsConfig:
    start: Tuple[int, int] = (3, 3)
    end: Tuple[int, int] = (11, 11)


@dataclass
class StreetsConfig:
    blocked: List[Edge] = field(default_factory=list)


@dataclass
class AnimationConfig:
    mode: DisplayMode = DisplayMode.BOTH
    ms_per_unit: float = 300.0  # K: time per unit of distance
    fps: float = 60.0
    pause_at_ms: Optional[float] = None  # scripted pause, offline runs only
    pause_for_ms: float = 0.0


@dataclass
class ExplorerConfig:
    grid: GridConfig = field(default_factory=GridConfig)
    points: PointsConfig = field(default_factory=PointsConfig)
    streets: StreetsConfig = field(default_factory=StreetsConfig)
    animation: AnimationConfig = field(default_factory=AnimationConfig)

    # Export flags (can be overridden by CLI)
    csv_enabled: bool = True
    snapshot_enabled: bool = True
    gif_enabled: bool = False
    quiet: bool = False
    out_dir: Path = field(default_factory=lambda: Path("./output"))

    def validate(self) -> None:
        """Raise ValueError if the configuration cannot describe a trip."""
        size = self.grid.size
        if size < 2:
            raise ValueError(f"grid size must be at least 2, got {size}")
        for name, (x, y) in (('start', self.points.start), ('end', self.points.end)):
            if not (0 <= x < size and 0 <= y < size):
                raise ValueError(f"{name} point ({x}, {y}) outside {size}x{size} grid")
        for edge in self.streets.blocked:
            for x, y in (edge.a, edge.b):
                if not (0 <= x < size and 0 <= y < size):
                    raise ValueError(f"blocked street {edge!r} outside the grid")
        if self.animation.ms_per_unit <= 0:
            raise ValueError("ms_per_unit must be positive")
        if self.animation.fps <= 0:
            raise ValueError("fps must be positive")
        if self.animation.pause_for_ms < 0:
            raise ValueError("pause_for_ms must not be negative")


def _parse_point(raw: Any, name: str) -> Tuple[int, int]:
    """Parse an [x, y] pair."""
    if not isinstance(raw, (list, tuple)) or len(raw) != 2:
        raise ValueError(f"{name} must be an [x, y] pair, got {raw!r}")
    return int(raw[0]), int(raw[1])


def _parse_streets(streets_raw: List[Any]) -> List[Edge]:
    """Parse blocked streets written as [[x1, y1], [x2, y2]]."""
    streets = []
    for s in streets_raw:
        if not isinstance(s, (list, tuple)) or len(s) != 2:
            raise ValueError(f"Street must be [[x1, y1], [x2, y2]], got {s!r}")
        a = _parse_point(s[0], 'street endpoint')
        b = _parse_point(s[1], 'street endpoint')
        streets.append(canonical_edge(a, b))
    return streets


def _parse_mode(raw: str) -> DisplayMode:
    try:
        return DisplayMode(raw)
    except ValueError:
        valid = ', '.join(m.value for m in DisplayMode)
        raise ValueError(f"Unknown mode: {raw!r} (expected one of {valid})") from None


def config_from_dict(raw: Optional[Dict]) -> ExplorerConfig:
    """Build and validate an ExplorerConfig from parsed YAML data."""
    raw = raw or {}

    grid = GridConfig(size=int(raw.get('grid', {}).get('size', 15)))

    points_raw = raw.get('points', {})
    points = PointsConfig(
        start=_parse_point(points_raw.get('start', [3, 3]), 'start'),
        end=_parse_point(points_raw.get('end', [11, 11]), 'end')
    )

    streets = StreetsConfig(
        blocked=_parse_streets(raw.get('streets', {}).get('blocked', []) or [])
    )

    anim_raw = raw.get('animation', {})
    pause_at = anim_raw.get('pause_at_ms')
    animation = AnimationConfig(
        mode=_parse_mode(anim_raw.get('mode', 'both')),
        ms_per_unit=float(anim_raw.get('ms_per_unit', 300.0)),
        fps=float(anim_raw.get('fps', 60.0)),
        pause_at_ms=float(pause_at) if pause_at is not None else None,
        pause_for_ms=float(anim_raw.get('pause_for_ms', 0.0))
    )

    # Parse export config (optional)
    export_raw = raw.get('export', {})

    config = ExplorerConfig(
        grid=grid,
        points=points,
        streets=streets,
        animation=animation,
        csv_enabled=export_raw.get('csv', True),
        snapshot_enabled=export_raw.get('snapshot', True),
        gif_enabled=export_raw.get('gif', False)
    )
    config.validate()
    return config


def load_config(config_path: Path) -> ExplorerConfig:
    """Load and validate YAML configuration file."""
    with open(config_path) as f:
        raw = yaml.safe_load(f)
    return config_from_dict(raw)
