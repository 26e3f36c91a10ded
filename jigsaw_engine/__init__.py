"""Jigsaw engine - interlocking piece generation and puzzle assembly.

This package provides deterministic generation of interlocking piece outlines
from a grid and a seed, and an assembly engine that tracks dragging, snapping
and joined piece groups under pan and zoom.
"""

from .config import Settings, get_settings
from .edge_grid import (
    JITTER_RANGE,
    TAB_SIZE_RANGE,
    PieceEdges,
    build_boundary,
    check_tab_parameters,
    edge_curves,
    generate_edge_grid,
    get_piece_edges,
    piece_boundary,
)
from .engine import AssemblyEngine, GameStatus, PiecePlacement, RenderFrame, SnapResult
from .errors import InvalidParameterError
from .events import InputEvent, PointerDown, PointerMove, PointerUp, Tick, VisibilityChange, Wheel
from .geometry import BoundaryPath, generate_straight_edge, generate_tab_edge, reverse_curves
from .groups import ConnectivityGroups
from .layout import DIFFICULTY_LEVELS, build_pieces, get_difficulty, source_crop_rect
from .models import BezierCurve, DifficultyLevel, EdgeGrid, EdgeSpec, Piece, PuzzleParams
from .random_source import SeededRandom
from .timer import GameTimer, format_time
from .viewport import Viewport

__all__ = [
    # Models
    "BezierCurve",
    "EdgeSpec",
    "EdgeGrid",
    "Piece",
    "DifficultyLevel",
    "PuzzleParams",
    # Randomness
    "SeededRandom",
    # Geometry
    "BoundaryPath",
    "generate_tab_edge",
    "generate_straight_edge",
    "reverse_curves",
    # Edge grid
    "TAB_SIZE_RANGE",
    "JITTER_RANGE",
    "PieceEdges",
    "check_tab_parameters",
    "generate_edge_grid",
    "get_piece_edges",
    "edge_curves",
    "piece_boundary",
    "build_boundary",
    # Layout
    "DIFFICULTY_LEVELS",
    "get_difficulty",
    "source_crop_rect",
    "build_pieces",
    # Interaction
    "Viewport",
    "ConnectivityGroups",
    "GameTimer",
    "format_time",
    "InputEvent",
    "PointerDown",
    "PointerMove",
    "PointerUp",
    "Wheel",
    "Tick",
    "VisibilityChange",
    "AssemblyEngine",
    "GameStatus",
    "PiecePlacement",
    "RenderFrame",
    "SnapResult",
    # Config and errors
    "Settings",
    "get_settings",
    "InvalidParameterError",
]
