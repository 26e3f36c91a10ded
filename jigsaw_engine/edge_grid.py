"""Edge grid generation for interlocking puzzle pieces.

This module generates a grid of interlocking puzzle edges. Each interior edge is
generated once and shared between the two pieces it separates: one piece walks
the edge's curve forward and the other walks the very same curve backward, so
the tab of one is the exact complement of the blank of the other.
"""

import logging
from typing import List, NamedTuple, Optional

from .errors import InvalidParameterError
from .geometry import BoundaryPath, generate_straight_edge, generate_tab_edge, reverse_curves
from .models import BezierCurve, EdgeGrid, EdgeSpec, Orientation
from .random_source import SeededRandom

logger = logging.getLogger(__name__)

TAB_SIZE_RANGE = (10.0, 30.0)
JITTER_RANGE = (0.0, 13.0)


class PieceEdges(NamedTuple):
    """The four edges around one cell. None marks a straight border edge."""

    top: Optional[EdgeSpec]
    right: Optional[EdgeSpec]
    bottom: Optional[EdgeSpec]
    left: Optional[EdgeSpec]


def check_tab_parameters(tab_size_percent: float, jitter_percent: float) -> None:
    """Strict validation for callers that want to reject degenerate tab shapes.

    The generator itself accepts any value; this is opt-in.

    Raises:
        InvalidParameterError: If either value is outside its recommended range.
    """
    low, high = TAB_SIZE_RANGE
    if not low <= tab_size_percent <= high:
        raise InvalidParameterError(f"tab_size_percent must be within [{low:g}, {high:g}], got {tab_size_percent}")
    low, high = JITTER_RANGE
    if not low <= jitter_percent <= high:
        raise InvalidParameterError(f"jitter_percent must be within [{low:g}, {high:g}], got {jitter_percent}")


class _TabStream:
    """Draws per-edge jitter from the seeded stream.

    Consecutive edges on the same grid line share their shoulder offset: the exit
    offset ``e`` of one edge becomes the entry offset ``a`` of the next (negated
    when the polarity is unchanged, so the line stays smooth across the corner).
    """

    def __init__(self, rng: SeededRandom, jitter: float):
        self.rng = rng
        self.jitter = jitter
        self.flip = False
        self.a = self.b = self.c = self.d = self.e = 0.0

    def _jitter(self) -> float:
        return self.rng.uniform(-self.jitter, self.jitter)

    def first(self) -> None:
        """Start a new grid line."""
        self.e = self._jitter()
        self.next()

    def next(self) -> None:
        flip_old = self.flip
        self.flip = self.rng.rbool()
        self.a = -self.e if self.flip == flip_old else self.e
        self.b = self._jitter()
        self.c = self._jitter()
        self.d = self._jitter()
        self.e = self._jitter()

    def spec(self, orientation: Orientation, row: int, col: int, tab_size: float) -> EdgeSpec:
        return EdgeSpec(
            orientation=orientation,
            row=row,
            col=col,
            flip=self.flip,
            tab_size=tab_size,
            a=self.a,
            b=self.b,
            c=self.c,
            d=self.d,
            e=self.e,
        )


def generate_edge_grid(
    rows: int,
    cols: int,
    tab_size_percent: float = 20.0,
    jitter_percent: float = 4.0,
    seed: int = 0,
) -> EdgeGrid:
    """Generate all edges for a puzzle grid.

    Horizontal grid lines are generated top to bottom, each left to right, then
    vertical grid lines left to right, each top to bottom. The resulting grid is
    a pure function of the arguments.

    Args:
        rows: Number of piece rows.
        cols: Number of piece columns.
        tab_size_percent: Tab size as a percentage (recommended 10-30).
        jitter_percent: Tab jitter as a percentage (recommended 0-13).
        seed: Seed of the randomness stream.

    Returns:
        An EdgeGrid containing all horizontal and vertical edges.

    Raises:
        ValueError: If rows or cols is not positive.
    """
    if rows < 1 or cols < 1:
        raise ValueError(f"Grid must have at least one row and one column, got {rows}x{cols}")

    tab_size = tab_size_percent / 200.0
    stream = _TabStream(SeededRandom(seed), jitter_percent / 100.0)

    # horizontal_edges[r][c] is the edge at the top of piece (r, c)
    # r=0 is the top border, r=rows is the bottom border
    horizontal_edges: List[List[Optional[EdgeSpec]]] = [[None] * cols]
    for r in range(1, rows):
        stream.first()
        line: List[Optional[EdgeSpec]] = []
        for c in range(cols):
            line.append(stream.spec("horizontal", r, c, tab_size))
            stream.next()
        horizontal_edges.append(line)
    horizontal_edges.append([None] * cols)

    # vertical_edges[r][c] is the edge at the left of piece (r, c)
    # c=0 is the left border, c=cols is the right border
    vertical_edges: List[List[Optional[EdgeSpec]]] = [[None] * (cols + 1) for _ in range(rows)]
    for c in range(1, cols):
        stream.first()
        for r in range(rows):
            vertical_edges[r][c] = stream.spec("vertical", r, c, tab_size)
            stream.next()

    logger.debug(
        "Generated %dx%d edge grid (seed=%d, tab=%s%%, jitter=%s%%)",
        rows,
        cols,
        seed,
        tab_size_percent,
        jitter_percent,
    )
    return EdgeGrid(
        rows=rows,
        cols=cols,
        tab_size_percent=tab_size_percent,
        jitter_percent=jitter_percent,
        seed=seed,
        horizontal_edges=horizontal_edges,
        vertical_edges=vertical_edges,
    )


def get_piece_edges(edge_grid: EdgeGrid, row: int, col: int) -> PieceEdges:
    """Look up the four edges surrounding cell (row, col)."""
    return PieceEdges(
        top=edge_grid.horizontal_edges[row][col],
        right=edge_grid.vertical_edges[row][col + 1],
        bottom=edge_grid.horizontal_edges[row + 1][col],
        left=edge_grid.vertical_edges[row][col],
    )


def edge_curves(
    edge_grid: EdgeGrid,
    orientation: Orientation,
    row: int,
    col: int,
    cell_width: float,
    cell_height: float,
) -> List[BezierCurve]:
    """Curves of one stored edge in source-image space, in its canonical direction.

    Horizontal edges run left to right along grid line ``row``; vertical edges run
    top to bottom along grid line ``col``.
    """
    if orientation == "horizontal":
        spec = edge_grid.horizontal_edges[row][col]
        start = (col * cell_width, row * cell_height)
        end = ((col + 1) * cell_width, row * cell_height)
    else:
        spec = edge_grid.vertical_edges[row][col]
        start = (col * cell_width, row * cell_height)
        end = (col * cell_width, (row + 1) * cell_height)

    if spec is None:
        return generate_straight_edge(start, end)
    return generate_tab_edge(spec, start, end, depth=min(cell_width, cell_height))


def piece_boundary(
    edge_grid: EdgeGrid,
    row: int,
    col: int,
    cell_width: float,
    cell_height: float,
) -> BoundaryPath:
    """Closed boundary of cell (row, col) in source-image space.

    Clockwise (y-down) traversal: top edge left->right, right edge top->bottom,
    bottom edge right->left, left edge bottom->top. The bottom and left sides are
    the reversed curves of the edges the neighbours below and to the left walk
    forward as their top and right sides.
    """
    top = edge_curves(edge_grid, "horizontal", row, col, cell_width, cell_height)
    right = edge_curves(edge_grid, "vertical", row, col + 1, cell_width, cell_height)
    bottom = reverse_curves(edge_curves(edge_grid, "horizontal", row + 1, col, cell_width, cell_height))
    left = reverse_curves(edge_curves(edge_grid, "vertical", row, col, cell_width, cell_height))
    return BoundaryPath((tuple(top), tuple(right), tuple(bottom), tuple(left)))


def build_boundary(
    edge_grid: EdgeGrid,
    row: int,
    col: int,
    cell_width: float,
    cell_height: float,
) -> BoundaryPath:
    """Closed boundary of cell (row, col) in the cell's local frame.

    The local frame has its origin at the cell's top-left corner, so the
    straight parts of the outline span (0, 0) to (cell_width, cell_height).
    """
    return piece_boundary(edge_grid, row, col, cell_width, cell_height).translated(
        -col * cell_width, -row * cell_height
    )
