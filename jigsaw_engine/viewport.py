"""Mapping between canvas (view) coordinates and puzzle space."""

from typing import Tuple

from .models import Point


class Viewport:
    """Zoom state of the canvas.

    Zoom always scales about the canvas center, so a view point ``v`` maps to
    the puzzle point ``(v - center) / zoom_scale + center``.
    """

    def __init__(self, canvas_width: float, canvas_height: float, zoom_step: float = 0.1, zoom_levels: int = 7):
        """Initialize the viewport.

        Args:
            canvas_width: Canvas width in pixels.
            canvas_height: Canvas height in pixels.
            zoom_step: Relative change per zoom step (0.1 = 10%).
            zoom_levels: Number of steps from 1.0 to either zoom bound.
        """
        if canvas_width <= 0 or canvas_height <= 0:
            raise ValueError(f"Canvas size must be positive, got {canvas_width}x{canvas_height}")
        self.canvas_width = canvas_width
        self.canvas_height = canvas_height
        self.zoom_step = zoom_step
        self.max_zoom = (1 + zoom_step) ** zoom_levels
        self.min_zoom = (1 / (1 + zoom_step)) ** zoom_levels
        self.zoom_scale = 1.0
        self.pan_offset: Point = (0.0, 0.0)

    @property
    def center(self) -> Point:
        return (self.canvas_width / 2, self.canvas_height / 2)

    def to_puzzle_space(self, view_point: Point) -> Point:
        cx, cy = self.center
        return ((view_point[0] - cx) / self.zoom_scale + cx, (view_point[1] - cy) / self.zoom_scale + cy)

    def to_view_space(self, puzzle_point: Point) -> Point:
        cx, cy = self.center
        return ((puzzle_point[0] - cx) * self.zoom_scale + cx, (puzzle_point[1] - cy) * self.zoom_scale + cy)

    def zoom(self, zoom_in: bool = True) -> bool:
        """Apply one zoom step.

        Returns:
            False if the scale was already at the bound in that direction.
        """
        if (zoom_in and self.zoom_scale >= self.max_zoom) or (not zoom_in and self.zoom_scale <= self.min_zoom):
            return False

        factor = 1 + self.zoom_step if zoom_in else 1 / (1 + self.zoom_step)
        self.zoom_scale = max(self.min_zoom, min(self.max_zoom, self.zoom_scale * factor))
        return True

    def pan(self, dx: float, dy: float) -> None:
        self.pan_offset = (self.pan_offset[0] + dx, self.pan_offset[1] + dy)

    def visible_bounds(self) -> Tuple[float, float, float, float]:
        """Puzzle-space rectangle (min_x, min_y, max_x, max_y) shown on the canvas."""
        min_x, min_y = self.to_puzzle_space((0.0, 0.0))
        max_x, max_y = self.to_puzzle_space((self.canvas_width, self.canvas_height))
        return (min_x, min_y, max_x, max_y)

    def reset(self) -> None:
        self.zoom_scale = 1.0
        self.pan_offset = (0.0, 0.0)
