"""Puzzle layout: difficulty levels, source cropping and initial piece placement."""

import logging
from typing import Dict, List, Optional, Tuple

import numpy as np

from .edge_grid import piece_boundary
from .errors import InvalidParameterError
from .models import DifficultyLevel, EdgeGrid, Piece

logger = logging.getLogger(__name__)

DIFFICULTY_LEVELS: Dict[str, DifficultyLevel] = {
    "easy": DifficultyLevel("easy", rows=6, cols=9),
    "medium": DifficultyLevel("medium", rows=8, cols=12),
    "hard": DifficultyLevel("hard", rows=12, cols=18),
    "expert": DifficultyLevel("expert", rows=16, cols=24),
    "master": DifficultyLevel("master", rows=20, cols=30),
}


def get_difficulty(name: str) -> DifficultyLevel:
    """Look up a difficulty level by name.

    Raises:
        InvalidParameterError: If the name is unknown.
    """
    try:
        return DIFFICULTY_LEVELS[name]
    except KeyError:
        raise InvalidParameterError(
            f"Unknown difficulty '{name}', expected one of {', '.join(DIFFICULTY_LEVELS)}"
        ) from None


def source_crop_rect(
    image_width: float,
    image_height: float,
    puzzle_width: float,
    puzzle_height: float,
) -> Tuple[float, float, float, float]:
    """Centered crop of the source image matching the puzzle's aspect ratio.

    Returns:
        (x, y, width, height) of the crop in source pixels.
    """
    image_ratio = image_width / image_height
    puzzle_ratio = puzzle_width / puzzle_height

    if image_ratio > puzzle_ratio:
        # Image is wider than the puzzle: trim left and right
        crop_width = image_height * puzzle_ratio
        return ((image_width - crop_width) / 2, 0.0, crop_width, float(image_height))

    # Image is taller than the puzzle: trim top and bottom
    crop_height = image_width / puzzle_ratio
    return (0.0, (image_height - crop_height) / 2, float(image_width), crop_height)


def build_pieces(
    canvas_width: float,
    canvas_height: float,
    puzzle_width: float,
    puzzle_height: float,
    rows: int,
    cols: int,
    edge_grid: EdgeGrid,
    rng: Optional[np.random.Generator] = None,
) -> List[Piece]:
    """Create every piece of the grid, scattered across the canvas.

    Each piece's top-left display position is drawn uniformly so the cell stays
    inside the canvas, then the list is shuffled. The returned order is the
    initial render order (last element drawn on top).

    Args:
        canvas_width: Canvas width in puzzle-space units.
        canvas_height: Canvas height in puzzle-space units.
        puzzle_width: Source-image extent of the assembled puzzle.
        puzzle_height: Source-image extent of the assembled puzzle.
        rows: Number of piece rows.
        cols: Number of piece columns.
        edge_grid: Shared edges, generated for the same rows and cols.
        rng: Generator used for scattering and shuffling. A fresh unseeded one
            is used when omitted.

    Returns:
        List of rows * cols pieces.
    """
    if (edge_grid.rows, edge_grid.cols) != (rows, cols):
        raise ValueError(f"Edge grid is {edge_grid.rows}x{edge_grid.cols}, expected {rows}x{cols}")
    if rng is None:
        rng = np.random.default_rng()

    cell_width = puzzle_width / cols
    cell_height = puzzle_height / rows
    max_x = max(0.0, canvas_width - cell_width)
    max_y = max(0.0, canvas_height - cell_height)

    pieces: List[Piece] = []
    for row in range(rows):
        for col in range(cols):
            pieces.append(
                Piece(
                    id=row * cols + col,
                    row=row,
                    col=col,
                    origin_x=col * cell_width,
                    origin_y=row * cell_height,
                    width=cell_width,
                    height=cell_height,
                    boundary=piece_boundary(edge_grid, row, col, cell_width, cell_height),
                    display_x=float(rng.uniform(0.0, max_x)),
                    display_y=float(rng.uniform(0.0, max_y)),
                )
            )

    order = rng.permutation(len(pieces))
    logger.info("Built %d pieces (%dx%d, cell %.1fx%.1f)", len(pieces), rows, cols, cell_width, cell_height)
    return [pieces[i] for i in order]
