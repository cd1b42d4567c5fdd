"""Model package for the taxicab explorer."""

from .geometry import (AgentPosition, GridCell, clamp_cell, euclidean_breakdown,
                       euclidean_distance, flight_heading, street_heading,
                       taxicab_breakdown, taxicab_distance)
from .grid import Edge, GridState, InvalidEdgeError, canonical_edge
from .pathfinder import GridPathfinder, PathNotFoundError, find_path
from .scheduler import Scheduler, VirtualFrameScheduler
from .state import AnimationState, DisplayMode, FrameSnapshot
from .motion import MotionController
from .session import ExplorerSession

__all__ = [
    'AgentPosition',
    'GridCell',
    'clamp_cell',
    'euclidean_breakdown',
    'euclidean_distance',
    'flight_heading',
    'street_heading',
    'taxicab_breakdown',
    'taxicab_distance',
    'Edge',
    'GridState',
    'InvalidEdgeError',
    'canonical_edge',
    'GridPathfinder',
    'PathNotFoundError',
    'find_path',
    'Scheduler',
    'VirtualFrameScheduler',
    'AnimationState',
    'DisplayMode',
    'FrameSnapshot',
    'MotionController',
    'ExplorerSession',
]
