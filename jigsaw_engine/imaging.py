"""Pillow reference shell for drawing engine frames.

This module provides functions to crop the source image to the puzzle area,
cut pieces from it using polygon masks generated from the Bezier boundaries,
and rasterise a :class:`~jigsaw_engine.engine.RenderFrame`.
"""

import logging
from typing import List, Tuple

import numpy as np
from PIL import Image, ImageDraw

from .engine import RenderFrame
from .layout import source_crop_rect

logger = logging.getLogger(__name__)

BACKGROUND = (240, 240, 240, 255)
OUTLINE = (0, 0, 0, 46)
OVERLAY = (0, 0, 0, 128)


def prepare_puzzle_image(source: Image.Image, puzzle_width: int, puzzle_height: int) -> Image.Image:
    """Center-crop the source to the puzzle aspect ratio and scale it to the puzzle size."""
    x, y, w, h = source_crop_rect(source.width, source.height, puzzle_width, puzzle_height)
    box = (int(round(x)), int(round(y)), int(round(x + w)), int(round(y + h)))
    cropped = source.crop(box).convert("RGB")
    return cropped.resize((puzzle_width, puzzle_height), Image.Resampling.LANCZOS)


def create_piece_mask(
    polygon: List[Tuple[float, float]],
    width: int,
    height: int,
    offset_x: float = 0.0,
    offset_y: float = 0.0,
    antialias_scale: int = 4,
) -> Image.Image:
    """Create a mask image for a puzzle piece with anti-aliased edges.

    Uses supersampling for anti-aliasing: renders at higher resolution
    then downsamples.

    Args:
        polygon: List of (x, y) points in image coordinates.
        width: Output mask width in pixels.
        height: Output mask height in pixels.
        offset_x: X offset to subtract from polygon coordinates.
        offset_y: Y offset to subtract from polygon coordinates.
        antialias_scale: Supersampling factor (4 = render at 4x, then downsample).

    Returns:
        Grayscale PIL Image where white=inside, black=outside.
    """
    hi_res_mask = Image.new("L", (width * antialias_scale, height * antialias_scale), 0)
    draw = ImageDraw.Draw(hi_res_mask)

    scaled_polygon = [((x - offset_x) * antialias_scale, (y - offset_y) * antialias_scale) for x, y in polygon]
    if len(scaled_polygon) >= 3:
        draw.polygon(scaled_polygon, fill=255)

    return hi_res_mask.resize((width, height), Image.Resampling.LANCZOS)


def cut_piece(
    source_image: Image.Image,
    polygon: List[Tuple[float, float]],
    padding: int = 2,
) -> Tuple[Image.Image, Tuple[int, int]]:
    """Cut a puzzle piece from the puzzle image.

    Args:
        source_image: The puzzle-sized image.
        polygon: Piece boundary in the image's coordinates.
        padding: Extra pixels around the piece bounding box.

    Returns:
        Tuple of:
        - RGBA image of the piece with transparent background
        - (x_offset, y_offset) position of the cut's top-left corner in the image
    """
    xs = [p[0] for p in polygon]
    ys = [p[1] for p in polygon]
    x_min = max(0, int(min(xs)) - padding)
    y_min = max(0, int(min(ys)) - padding)
    x_max = min(source_image.width, int(max(xs)) + padding + 1)
    y_max = min(source_image.height, int(max(ys)) + padding + 1)

    crop_width = x_max - x_min
    crop_height = y_max - y_min
    if crop_width <= 0 or crop_height <= 0:
        return Image.new("RGBA", (1, 1), (0, 0, 0, 0)), (x_min, y_min)

    cropped = source_image.crop((x_min, y_min, x_max, y_max)).convert("RGB")
    mask = create_piece_mask(polygon, crop_width, crop_height, offset_x=x_min, offset_y=y_min)

    result = Image.new("RGBA", (crop_width, crop_height), (0, 0, 0, 0))
    result.paste(cropped, mask=mask)
    return result, (x_min, y_min)


def render_source_overlay(puzzle_image: Image.Image, canvas_size: Tuple[int, int]) -> Image.Image:
    """The uncut image stretched over the canvas under a dark veil (paused or not started)."""
    base = puzzle_image.convert("RGBA").resize(canvas_size, Image.Resampling.LANCZOS)
    veil = Image.new("RGBA", canvas_size, OVERLAY)
    return Image.alpha_composite(base, veil)


def render_frame(
    frame: RenderFrame,
    puzzle_image: Image.Image,
    canvas_size: Tuple[int, int],
    points_per_curve: int = 20,
) -> Image.Image:
    """Rasterise an engine frame.

    Args:
        frame: Frame returned by the engine.
        puzzle_image: The puzzle-sized image pieces are cut from.
        canvas_size: (width, height) of the output.
        points_per_curve: Polygon resolution of each Bezier curve.

    Returns:
        RGBA image of the canvas.
    """
    if frame.mode == "source_image":
        return render_source_overlay(puzzle_image, canvas_size)

    canvas = Image.new("RGBA", canvas_size, BACKGROUND)
    outlines = Image.new("RGBA", canvas_size, (0, 0, 0, 0))
    outline_draw = ImageDraw.Draw(outlines)
    zoom = frame.zoom_scale
    center = np.array(frame.center)

    for placement in frame.placements:
        polygon = placement.path.sample(points_per_curve)
        piece_img, (cut_x, cut_y) = cut_piece(puzzle_image, [(float(x), float(y)) for x, y in polygon])

        # Source space -> puzzle space -> view space
        top_left = (np.array([cut_x, cut_y]) + placement.offset - center) * zoom + center
        if zoom != 1.0:
            size = (max(1, round(piece_img.width * zoom)), max(1, round(piece_img.height * zoom)))
            piece_img = piece_img.resize(size, Image.Resampling.LANCZOS)
        # paste clips at the canvas edges, pieces may hang off any side
        canvas.paste(piece_img, (int(round(top_left[0])), int(round(top_left[1]))), piece_img)

        view_polygon = (polygon + placement.offset - center) * zoom + center
        outline_draw.line([tuple(p) for p in view_polygon.tolist()], fill=OUTLINE, width=1)

    logger.debug("Rendered %d pieces at zoom %.3f", len(frame.placements), zoom)
    return Image.alpha_composite(canvas, outlines)
