"""Data models for puzzle geometry and piece state."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Literal, Optional, Tuple

import numpy as np
from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from .geometry import BoundaryPath

Point = Tuple[float, float]
Orientation = Literal["horizontal", "vertical"]


@dataclass(frozen=True)
class BezierCurve:
    """A cubic Bezier curve defined by 4 control points."""

    p0: Point  # Start point
    p1: Point  # Control point 1
    p2: Point  # Control point 2
    p3: Point  # End point

    def evaluate(self, t: float) -> Point:
        """Evaluate the curve at parameter t (0 to 1)."""
        t2 = t * t
        t3 = t2 * t
        mt = 1 - t
        mt2 = mt * mt
        mt3 = mt2 * mt

        x = mt3 * self.p0[0] + 3 * mt2 * t * self.p1[0] + 3 * mt * t2 * self.p2[0] + t3 * self.p3[0]
        y = mt3 * self.p0[1] + 3 * mt2 * t * self.p1[1] + 3 * mt * t2 * self.p2[1] + t3 * self.p3[1]
        return (x, y)

    def get_points(self, num_points: int = 50) -> np.ndarray:
        """Generate points along the curve."""
        t_values = np.linspace(0, 1, num_points)
        points = [self.evaluate(t) for t in t_values]
        return np.array(points)

    def reversed(self) -> "BezierCurve":
        """Return the same curve traversed from p3 back to p0."""
        return BezierCurve(p0=self.p3, p1=self.p2, p2=self.p1, p3=self.p0)

    def translated(self, dx: float, dy: float) -> "BezierCurve":
        """Return the curve shifted by (dx, dy)."""

        def shift(p: Point) -> Point:
            return (p[0] + dx, p[1] + dy)

        return BezierCurve(shift(self.p0), shift(self.p1), shift(self.p2), shift(self.p3))


@dataclass(frozen=True)
class EdgeSpec:
    """Shape parameters of one interior edge, shared by the two cells it separates.

    Attributes:
        orientation: "horizontal" for an edge between a cell and the one below it,
            "vertical" for an edge between a cell and the one to its right.
        row: Grid line index for horizontal edges, cell row for vertical edges.
        col: Cell column for horizontal edges, grid line index for vertical edges.
        flip: Tab polarity. False bulges toward +y (horizontal) or +x (vertical),
            i.e. into the lower/right cell; True bulges the other way.
        tab_size: Tab size as a fraction, ``tab_size_percent / 200``.
        a, b, c, d, e: Jitter offsets drawn from the seeded stream.
    """

    orientation: Orientation
    row: int
    col: int
    flip: bool
    tab_size: float
    a: float
    b: float
    c: float
    d: float
    e: float


@dataclass
class EdgeGrid:
    """Grid of shared edges for a puzzle.

    The grid stores edges in two 2D arrays:
    - horizontal_edges: (rows+1) x cols - edges above each cell, plus the bottom border
    - vertical_edges: rows x (cols+1) - edges left of each cell, plus the right border

    Border entries are None and render as straight lines.
    """

    rows: int
    cols: int
    tab_size_percent: float
    jitter_percent: float
    seed: int
    horizontal_edges: List[List[Optional[EdgeSpec]]]  # [row][col] - (rows+1) x cols
    vertical_edges: List[List[Optional[EdgeSpec]]]  # [row][col] - rows x (cols+1)

    def interior_edges(self) -> List[EdgeSpec]:
        """All non-border edges, horizontal ones first."""
        edges = [e for line in self.horizontal_edges for e in line if e is not None]
        edges.extend(e for line in self.vertical_edges for e in line if e is not None)
        return edges


@dataclass
class Piece:
    """A single puzzle piece.

    ``origin_x``/``origin_y`` is the cell's top-left corner in source-image space
    and ``boundary`` is expressed in that same space. ``display_x``/``display_y``
    is where the cell's top-left corner is currently drawn in puzzle space.
    """

    id: int
    row: int
    col: int
    origin_x: float
    origin_y: float
    width: float
    height: float
    boundary: "BoundaryPath"
    display_x: float = 0.0
    display_y: float = 0.0

    @property
    def offset(self) -> Point:
        """Translation from source-image space to puzzle space."""
        return (self.display_x - self.origin_x, self.display_y - self.origin_y)

    def move_by(self, dx: float, dy: float) -> None:
        self.display_x += dx
        self.display_y += dy

    def is_adjacent(self, other: "Piece") -> bool:
        """Whether the two pieces share a grid edge."""
        same_row = self.row == other.row and abs(self.col - other.col) == 1
        same_col = self.col == other.col and abs(self.row - other.row) == 1
        return same_row or same_col


@dataclass(frozen=True)
class DifficultyLevel:
    """A named grid size."""

    name: str
    rows: int
    cols: int

    @property
    def piece_count(self) -> int:
        return self.rows * self.cols


class PuzzleParams(BaseModel):
    """Parameters that fully determine the piece shapes of a grid."""

    seed: int = Field(default=0, description="Seed of the tab randomness stream")
    tab_size_percent: float = Field(default=20.0, description="Tab size, recommended range 10-30")
    jitter_percent: float = Field(default=4.0, description="Tab jitter, recommended range 0-13")
