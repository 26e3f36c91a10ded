#!/usr/bin/env python
"""Jigsaw renderer.

This utility cuts an image into an interlocking puzzle and writes one frame of
it to a PNG: either the freshly scattered pieces or the assembled puzzle with
its piece outlines.
"""

import argparse
import logging
import sys

from PIL import Image

from .config import get_settings
from .edge_grid import check_tab_parameters
from .engine import AssemblyEngine
from .errors import InvalidParameterError
from .imaging import prepare_puzzle_image, render_frame

logger = logging.getLogger(__name__)


def assemble(engine: AssemblyEngine) -> None:
    """Place every piece at its solved position, centered on the canvas."""
    margin_x = (engine.viewport.canvas_width - engine.puzzle_width) / 2
    margin_y = (engine.viewport.canvas_height - engine.puzzle_height) / 2
    for piece in engine.pieces:
        piece.display_x = piece.origin_x + margin_x
        piece.display_y = piece.origin_y + margin_y


def main():
    """Process command-line arguments and render the puzzle."""
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Cut an image into a jigsaw puzzle and render it")
    parser.add_argument("image", help="Path to the source image")
    parser.add_argument("-o", "--output", default="puzzle.png", help="Output PNG path (default: puzzle.png)")
    parser.add_argument(
        "--difficulty",
        default=settings.DEFAULT_DIFFICULTY,
        help="Difficulty level: easy, medium, hard, expert or master",
    )
    parser.add_argument(
        "--grid",
        type=int,
        nargs=2,
        metavar=("ROWS", "COLS"),
        help="Explicit grid size, overrides --difficulty",
    )
    parser.add_argument("--seed", type=int, default=None, help="Tab seed (random if omitted)")
    parser.add_argument("--tab-size", type=float, default=settings.TAB_SIZE, help="Tab size percent (10-30)")
    parser.add_argument("--jitter", type=float, default=settings.JITTER, help="Tab jitter percent (0-13)")
    parser.add_argument("--strict", action="store_true", help="Reject tab size or jitter outside their ranges")
    parser.add_argument("--solved", action="store_true", help="Render the assembled puzzle instead of the scatter")
    parser.add_argument("--zoom", type=int, default=0, help="Zoom steps to apply (negative zooms out)")
    args = parser.parse_args()

    logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    engine = AssemblyEngine(settings=settings, seed=args.seed)
    try:
        if args.strict:
            check_tab_parameters(args.tab_size, args.jitter)
        engine.configure(engine.params.seed, args.tab_size, args.jitter)
        if args.grid:
            engine.set_difficulty(*args.grid)
        else:
            engine.set_difficulty_level(args.difficulty)
    except (InvalidParameterError, ValueError) as e:
        parser.error(str(e))

    try:
        source = Image.open(args.image)
    except OSError as e:
        logger.error("Could not open %s: %s", args.image, e)
        sys.exit(1)

    engine.set_source_size(source.width, source.height)
    logger.info("Cropping source %dx%d to %s", source.width, source.height, engine.source_crop)
    puzzle_image = prepare_puzzle_image(source, settings.PUZZLE_WIDTH, settings.PUZZLE_HEIGHT)

    with engine.session():
        engine.start_game()
        if args.solved:
            assemble(engine)
        for _ in range(abs(args.zoom)):
            engine.zoom(zoom_in=args.zoom > 0)
        frame = engine.render()

    image = render_frame(
        frame,
        puzzle_image,
        (settings.CANVAS_WIDTH, settings.CANVAS_HEIGHT),
        points_per_curve=settings.POINTS_PER_CURVE,
    )
    image.save(args.output)
    print(f"Rendered {engine.rows}x{engine.cols} puzzle (seed {engine.params.seed}) to {args.output}")


if __name__ == "__main__":
    main()
