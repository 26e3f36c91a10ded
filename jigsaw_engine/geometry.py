"""Geometric logic for generating puzzle piece shapes."""

from dataclasses import dataclass
from functools import cached_property
from typing import List, Sequence, Tuple

import numpy as np
from matplotlib.path import Path

from .models import BezierCurve, EdgeSpec, Point

# Side order of every boundary, clockwise in y-down image coordinates.
SIDES = ("top", "right", "bottom", "left")


def _tab_control_points(spec: EdgeSpec) -> List[Tuple[float, float]]:
    """Return the ten (along, across) control points of a tab edge.

    ``along`` runs from 0 at the edge start to 1 at the edge end. ``across`` is
    relative to the cell's short dimension, before the polarity sign is applied.
    """
    t = spec.tab_size
    a, b, c, d, e = spec.a, spec.b, spec.c, spec.d, spec.e
    return [
        (0.0, 0.0),
        (0.2, a),
        (0.5 + b + d, -t + c),
        (0.5 - t + b, t + c),
        (0.5 - 2.0 * t + b - d, 3.0 * t + c),
        (0.5 + 2.0 * t + b - d, 3.0 * t + c),
        (0.5 + t + b, t + c),
        (0.5 + b + d, -t + c),
        (0.8, e),
        (1.0, 0.0),
    ]


def generate_tab_edge(
    spec: EdgeSpec,
    start: Point,
    end: Point,
    depth: float,
) -> List[BezierCurve]:
    """Generate an interlocking tab edge using 3 cubic Bezier curves.

    The curve shape is the classic neck-and-bulb tab. Control points are laid out
    along the straight line from ``start`` to ``end`` and offset perpendicular to
    it. Horizontal edges offset along +y and vertical edges along +x, negated when
    ``spec.flip`` is set, so a given spec always bulges toward the same cell no
    matter which neighbour asks for it.

    Args:
        spec: The shared edge parameters.
        start: Start point of the edge in source-image space.
        end: End point of the edge in source-image space.
        depth: Length unit for perpendicular offsets (the cell's short dimension).

    Returns:
        List of 3 BezierCurve objects forming the edge from start to end.
    """
    start_vec = np.array(start, dtype=float)
    edge_vec = np.array(end, dtype=float) - start_vec

    if spec.orientation == "horizontal":
        normal = np.array([0.0, 1.0])
    else:
        normal = np.array([1.0, 0.0])
    if spec.flip:
        normal = -normal

    points = [start_vec + edge_vec * along + normal * depth * across for along, across in _tab_control_points(spec)]
    # Pin the endpoints so neighbouring edges meet at exactly the grid corner
    points[0] = start_vec
    points[-1] = np.array(end, dtype=float)

    as_tuples = [(float(p[0]), float(p[1])) for p in points]
    return [
        BezierCurve(as_tuples[0], as_tuples[1], as_tuples[2], as_tuples[3]),
        BezierCurve(as_tuples[3], as_tuples[4], as_tuples[5], as_tuples[6]),
        BezierCurve(as_tuples[6], as_tuples[7], as_tuples[8], as_tuples[9]),
    ]


def generate_straight_edge(start: Point, end: Point) -> List[BezierCurve]:
    """Straight line as a single Bezier curve (control points on the line)."""
    return [BezierCurve(start, start, end, end)]


def reverse_curves(curves: Sequence[BezierCurve]) -> List[BezierCurve]:
    """Reverse a list of Bezier curves for traversal in opposite direction.

    Each curve is reversed by swapping p0<->p3 and p1<->p2.
    The list order is also reversed.
    """
    return [curve.reversed() for curve in reversed(curves)]


@dataclass(frozen=True)
class BoundaryPath:
    """Closed piece outline made of four sides of cubic Bezier curves.

    Sides are stored in the order top, right, bottom, left and each side runs in
    the clockwise direction, so the end of one side is the start of the next.
    """

    sides: Tuple[Tuple[BezierCurve, ...], ...]

    @property
    def curves(self) -> List[BezierCurve]:
        return [curve for side in self.sides for curve in side]

    def side(self, name: str) -> Tuple[BezierCurve, ...]:
        """Return the curves of one side by name ("top", "right", "bottom", "left")."""
        return self.sides[SIDES.index(name)]

    def translated(self, dx: float, dy: float) -> "BoundaryPath":
        return BoundaryPath(tuple(tuple(curve.translated(dx, dy) for curve in side) for side in self.sides))

    def sample(self, points_per_curve: int = 20) -> np.ndarray:
        """Sample the outline as a closed polygon.

        Args:
            points_per_curve: Number of points to sample from each Bezier curve.

        Returns:
            (N, 2) array whose last row repeats the first.
        """
        chunks = [curve.get_points(points_per_curve)[:-1] for curve in self.curves]
        polygon = np.concatenate(chunks)
        return np.vstack([polygon, polygon[:1]])

    @cached_property
    def mpl_path(self) -> Path:
        """The outline as a matplotlib Path with native cubic segments."""
        curves = self.curves
        vertices: List[Point] = [curves[0].p0]
        codes = [Path.MOVETO]
        for curve in curves:
            vertices.extend([curve.p1, curve.p2, curve.p3])
            codes.extend([Path.CURVE4, Path.CURVE4, Path.CURVE4])
        vertices.append(curves[0].p0)
        codes.append(Path.CLOSEPOLY)
        return Path(np.array(vertices), codes)

    def contains(self, x: float, y: float) -> bool:
        """Point-in-closed-curve test, in the same coordinate space as the outline."""
        return bool(self.mpl_path.contains_point((x, y)))

    def bounds(self) -> Tuple[float, float, float, float]:
        """(min_x, min_y, max_x, max_y) of the sampled outline."""
        points = self.sample()
        mins = points.min(axis=0)
        maxs = points.max(axis=0)
        return (float(mins[0]), float(mins[1]), float(maxs[0]), float(maxs[1]))

    def to_svg(self, precision: int = 2) -> str:
        """Path data (``M ... C ... Z``) usable by SVG and Canvas Path2D."""

        def fmt(p: Point) -> str:
            return f"{round(p[0], precision):g} {round(p[1], precision):g}"

        curves = self.curves
        parts = [f"M {fmt(curves[0].p0)}"]
        parts.extend(f"C {fmt(c.p1)} {fmt(c.p2)} {fmt(c.p3)}" for c in curves)
        parts.append("Z")
        return " ".join(parts)
