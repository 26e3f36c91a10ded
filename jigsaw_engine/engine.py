"""Assembly engine: game state, piece groups, dragging and snapping.

All mutation goes through the engine's methods or the single
:meth:`AssemblyEngine.handle_input` entry point, which returns the frame to draw.
The engine never draws anything itself.
"""

import logging
import math
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Iterator, List, Literal, Optional, Tuple

import numpy as np

from .config import Settings, get_settings
from .edge_grid import generate_edge_grid
from .events import InputEvent, PointerDown, PointerMove, PointerUp, Tick, VisibilityChange, Wheel
from .geometry import BoundaryPath
from .groups import ConnectivityGroups
from .layout import build_pieces, get_difficulty, source_crop_rect
from .models import EdgeGrid, Piece, Point, PuzzleParams
from .timer import GameTimer, format_time
from .viewport import Viewport

logger = logging.getLogger(__name__)


class GameStatus(str, Enum):
    """Lifecycle state of a puzzle."""

    READY = "ready"
    PLAYING = "playing"
    PAUSED = "paused"
    COMPLETED = "completed"


@dataclass(frozen=True)
class PiecePlacement:
    """One piece to draw: clip the source image to ``path`` and shift it by ``offset``."""

    piece_id: int
    path: BoundaryPath
    offset: Point


@dataclass(frozen=True)
class RenderFrame:
    """Everything the shell needs to draw one frame.

    In ``"pieces"`` mode the shell scales the canvas by ``zoom_scale`` about
    ``center`` and draws ``placements`` in order. In ``"source_image"`` mode it
    draws the uncut image with the given overlay instead. ``pan_offset`` is the
    total canvas pan since the last reset. Pans already move the pieces, so the
    shell only needs it for navigation hints.
    """

    mode: Literal["pieces", "source_image"]
    overlay: Optional[Literal["paused", "not_started"]]
    zoom_scale: float
    center: Point
    pan_offset: Point
    placements: Tuple[PiecePlacement, ...]


@dataclass(frozen=True)
class SnapResult:
    """A snap applied on release."""

    moving_id: int
    target_id: int
    distance: float
    offset: Point


class AssemblyEngine:
    """Owns the live pieces, their connectivity groups and the viewport."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        on_complete: Optional[Callable[[str], None]] = None,
        clock: Optional[Callable[[], float]] = None,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
    ):
        """Initialize the engine in the ready state.

        Args:
            settings: Engine settings. Defaults to the cached environment settings.
            on_complete: Called once with the elapsed time (MM:SS) when solved.
            clock: Monotonic clock for the game timer.
            rng: Generator for piece scattering and the default seed.
            seed: Tab seed. A random seed in [0, 10000) is drawn when omitted.
        """
        self.settings = settings or get_settings()
        self.on_complete = on_complete
        self._rng = rng if rng is not None else np.random.default_rng()

        difficulty = get_difficulty(self.settings.DEFAULT_DIFFICULTY)
        self.rows = difficulty.rows
        self.cols = difficulty.cols
        self.params = PuzzleParams(
            seed=seed if seed is not None else int(self._rng.integers(0, 10000)),
            tab_size_percent=self.settings.TAB_SIZE,
            jitter_percent=self.settings.JITTER,
        )

        self.puzzle_width = float(self.settings.PUZZLE_WIDTH)
        self.puzzle_height = float(self.settings.PUZZLE_HEIGHT)
        self.viewport = Viewport(
            self.settings.CANVAS_WIDTH,
            self.settings.CANVAS_HEIGHT,
            zoom_step=self.settings.ZOOM_STEP,
            zoom_levels=self.settings.ZOOM_LEVELS,
        )
        self.timer = GameTimer(clock)
        self.groups = ConnectivityGroups()
        self.status = GameStatus.READY
        self.edge_grid: Optional[EdgeGrid] = None
        self.source_crop: Optional[Tuple[float, float, float, float]] = None

        self._pieces: List[Piece] = []
        self._selected: Optional[Piece] = None
        self._drag_offset: Point = (0.0, 0.0)
        self._panning = False
        self._last_pointer: Point = (0.0, 0.0)
        self._completion_notified = False

    # ------------------------------------------------------------------
    # Read-only views

    @property
    def pieces(self) -> List[Piece]:
        """Pieces in render order (last is topmost)."""
        return list(self._pieces)

    @property
    def selected_piece(self) -> Optional[Piece]:
        return self._selected

    @property
    def is_panning(self) -> bool:
        return self._panning

    @property
    def cell_size(self) -> Tuple[float, float]:
        return (self.puzzle_width / self.cols, self.puzzle_height / self.rows)

    @property
    def elapsed_seconds(self) -> int:
        return self.timer.elapsed_seconds

    @property
    def elapsed_time(self) -> str:
        return format_time(self.timer.elapsed_seconds)

    def piece(self, piece_id: int) -> Piece:
        for piece in self._pieces:
            if piece.id == piece_id:
                return piece
        raise KeyError(piece_id)

    def piece_at(self, row: int, col: int) -> Piece:
        return self.piece(row * self.cols + col)

    # ------------------------------------------------------------------
    # Configuration

    def configure(self, seed: int, tab_size_percent: float, jitter_percent: float) -> None:
        """Set the tab parameters. An active puzzle is regenerated, a finished one discarded."""
        self.params = PuzzleParams(seed=seed, tab_size_percent=tab_size_percent, jitter_percent=jitter_percent)
        self._refresh_board()

    def set_difficulty(self, rows: int, cols: int) -> None:
        """Change the grid size. An active puzzle is regenerated, a finished one discarded."""
        if rows < 1 or cols < 1:
            raise ValueError(f"Grid must have at least one row and one column, got {rows}x{cols}")
        self.rows = rows
        self.cols = cols
        self._refresh_board()

    def set_difficulty_level(self, name: str) -> None:
        level = get_difficulty(name)
        self.set_difficulty(level.rows, level.cols)

    def set_source_size(self, width: float, height: float) -> None:
        """Record the decoded source image size and derive its crop rectangle."""
        self.source_crop = source_crop_rect(width, height, self.puzzle_width, self.puzzle_height)

    def regenerate(self) -> None:
        """Build a fresh, fully disconnected set of pieces."""
        self.edge_grid = generate_edge_grid(
            self.rows,
            self.cols,
            tab_size_percent=self.params.tab_size_percent,
            jitter_percent=self.params.jitter_percent,
            seed=self.params.seed,
        )
        self._pieces = build_pieces(
            self.viewport.canvas_width,
            self.viewport.canvas_height,
            self.puzzle_width,
            self.puzzle_height,
            self.rows,
            self.cols,
            self.edge_grid,
            rng=self._rng,
        )
        self.groups.clear()
        self.viewport.reset()
        self._end_gesture()
        self._completion_notified = False

    def _is_active(self) -> bool:
        return self.status in (GameStatus.PLAYING, GameStatus.PAUSED)

    def _refresh_board(self) -> None:
        """Keep the pieces in step with the grid and tab parameters.

        An active puzzle is rebuilt in place. A solved or stopped board is
        discarded and the engine returns to ready, so the next start builds it.
        """
        if self._is_active():
            self.regenerate()
        elif self._pieces:
            self._reset_to_ready()
            self._discard_board()

    def _discard_board(self) -> None:
        self._pieces = []
        self.edge_grid = None
        self.groups.clear()
        self._completion_notified = False

    # ------------------------------------------------------------------
    # Lifecycle

    def start_game(self) -> None:
        """Start a new puzzle from ready, or continue a paused one.

        A completed puzzle stays completed until :meth:`restart_game`.
        """
        if self.status == GameStatus.COMPLETED:
            logger.debug("Puzzle already completed, ignoring start")
            return
        if self.status == GameStatus.READY:
            self.timer.reset()
            self.regenerate()

        self.status = GameStatus.PLAYING
        self.timer.start()
        logger.info("Game started (%dx%d, seed=%d)", self.rows, self.cols, self.params.seed)

    def pause_game(self) -> None:
        if self.status != GameStatus.PLAYING:
            return
        self.status = GameStatus.PAUSED
        self.timer.stop()
        self._end_gesture()
        logger.info("Game paused at %s", self.elapsed_time)

    def resume_game(self) -> None:
        if self.status != GameStatus.PAUSED:
            return
        self.status = GameStatus.PLAYING
        self.timer.start()
        logger.info("Game resumed")

    def stop_game(self) -> None:
        if not self._is_active():
            return
        self._reset_to_ready()
        logger.info("Game stopped")

    def restart_game(self) -> None:
        self._reset_to_ready()
        self.start_game()

    def _reset_to_ready(self) -> None:
        self.status = GameStatus.READY
        self.timer.reset()
        self.viewport.reset()
        self._end_gesture()

    def zoom(self, zoom_in: bool = True) -> bool:
        """Zoom one step about the canvas center. Only while playing."""
        if self.status != GameStatus.PLAYING:
            return False
        return self.viewport.zoom(zoom_in)

    def tick(self) -> int:
        """Advance the timer from the host's periodic tick."""
        if self.status == GameStatus.PLAYING:
            self.timer.tick()
        return self.timer.elapsed_seconds

    def set_visibility(self, hidden: bool) -> None:
        """Pause when the hosting surface is hidden."""
        if hidden and self.status == GameStatus.PLAYING:
            self.pause_game()

    @contextmanager
    def session(self) -> Iterator["AssemblyEngine"]:
        """Scope in which the shell drives the engine.

        The timer is stopped on every exit path and a running game is paused.
        """
        try:
            yield self
        finally:
            self.pause_game()
            self.timer.stop()

    # ------------------------------------------------------------------
    # Selection, dragging and panning

    def select_at(self, view_x: float, view_y: float) -> Optional[Piece]:
        """Pick the topmost piece under a view point and raise it with its group.

        Returns:
            The hit piece, now the active drag target, or None.
        """
        if self.status != GameStatus.PLAYING:
            return None

        x, y = self.viewport.to_puzzle_space((view_x, view_y))
        for piece in reversed(self._pieces):
            if piece.boundary.contains(x + piece.origin_x - piece.display_x, y + piece.origin_y - piece.display_y):
                self.bring_to_front(self.groups.members(piece.id))
                self._selected = piece
                self._drag_offset = (x - piece.display_x, y - piece.display_y)
                return piece
        return None

    def bring_to_front(self, ids: Iterable[int]) -> None:
        """Move the given pieces to the top of the render order, keeping their relative order."""
        id_set = set(ids)
        rest = [p for p in self._pieces if p.id not in id_set]
        raised = [p for p in self._pieces if p.id in id_set]
        self._pieces = rest + raised

    def drag_to(self, view_x: float, view_y: float) -> None:
        """Move the active drag target (and its group) under the pointer."""
        if self.status != GameStatus.PLAYING or self._selected is None:
            return

        anchor = self._selected
        x, y = self.viewport.to_puzzle_space((view_x, view_y))
        new_x = x - self._drag_offset[0]
        new_y = y - self._drag_offset[1]

        # Keep the anchor piece inside the visible area
        min_x, min_y, max_x, max_y = self.viewport.visible_bounds()
        new_x = max(min_x, min(max_x - anchor.width, new_x))
        new_y = max(min_y, min(max_y - anchor.height, new_y))

        dx = new_x - anchor.display_x
        dy = new_y - anchor.display_y
        members = self.groups.members(anchor.id)
        for piece in self._pieces:
            if piece.id in members:
                piece.move_by(dx, dy)

    def pan_to(self, view_x: float, view_y: float) -> None:
        """Translate every piece by the pointer movement since the last pan event."""
        if self.status != GameStatus.PLAYING or not self._panning:
            return

        dx = view_x - self._last_pointer[0]
        dy = view_y - self._last_pointer[1]
        for piece in self._pieces:
            piece.move_by(dx, dy)
        self.viewport.pan(dx, dy)
        self._last_pointer = (view_x, view_y)

    def release(self) -> Optional[SnapResult]:
        """End the current gesture, evaluating a snap if a piece was dragged."""
        result = None
        if self.status == GameStatus.PLAYING and self._selected is not None:
            members = self.groups.members(self._selected.id)
            result = self.check_snap([p.id for p in self._pieces if p.id in members])
        self._end_gesture()
        return result

    def _end_gesture(self) -> None:
        self._selected = None
        self._panning = False

    # ------------------------------------------------------------------
    # Snapping and merging

    def check_snap(self, moving_ids: Iterable[int]) -> Optional[SnapResult]:
        """Snap the moving pieces onto one adjacent piece, if close enough.

        Moving pieces and candidates are scanned in render order. With the
        ``"first"`` policy the first candidate within the threshold wins; with
        ``"nearest"`` the closest qualifying candidate wins. At most one snap is
        applied.

        Args:
            moving_ids: Ids of the pieces that move together.

        Returns:
            The applied snap, or None.
        """
        ids = set(moving_ids)
        moving = [p for p in self._pieces if p.id in ids]
        if not moving:
            return None

        threshold = self.settings.SNAP_THRESHOLD / self.viewport.zoom_scale
        nearest = self.settings.SNAP_POLICY == "nearest"
        best: Optional[Tuple[float, Piece, Piece, float, float]] = None

        for moving_piece in moving:
            for piece in self._pieces:
                if piece.id in ids or not moving_piece.is_adjacent(piece):
                    continue

                # Where moving_piece would sit if exactly tiled against piece
                ideal_x = piece.display_x + (moving_piece.col - piece.col) * piece.width
                ideal_y = piece.display_y + (moving_piece.row - piece.row) * piece.height
                distance = math.hypot(moving_piece.display_x - ideal_x, moving_piece.display_y - ideal_y)
                if distance >= threshold:
                    continue

                candidate = (distance, moving_piece, piece, ideal_x, ideal_y)
                if not nearest:
                    return self._apply_snap(moving, *candidate)
                if best is None or distance < best[0]:
                    best = candidate

        if best is None:
            return None
        return self._apply_snap(moving, *best)

    def _apply_snap(
        self,
        moving: List[Piece],
        distance: float,
        moving_piece: Piece,
        target: Piece,
        ideal_x: float,
        ideal_y: float,
    ) -> SnapResult:
        dx = ideal_x - moving_piece.display_x
        dy = ideal_y - moving_piece.display_y
        for piece in moving:
            piece.move_by(dx, dy)
        # Land exactly on the ideal position
        moving_piece.display_x = ideal_x
        moving_piece.display_y = ideal_y

        logger.debug("Snapped piece %d onto %d (distance %.2f)", moving_piece.id, target.id, distance)
        self.merge_groups([p.id for p in moving], target.id)
        return SnapResult(moving_id=moving_piece.id, target_id=target.id, distance=distance, offset=(dx, dy))

    def merge_groups(self, moving_ids: Iterable[int], target_id: int) -> None:
        """Join the moving pieces with the target piece's group, then check completion."""
        self.groups.merge(moving_ids, target_id)
        self._check_completion()

    def _check_completion(self) -> None:
        if self._completion_notified:
            return
        all_groups = self.groups.groups()
        if len(all_groups) == 1 and len(all_groups[0]) == self.rows * self.cols:
            self.timer.stop()
            self.status = GameStatus.COMPLETED
            self._completion_notified = True
            elapsed = self.elapsed_time
            logger.info("Puzzle completed in %s", elapsed)
            if self.on_complete is not None:
                self.on_complete(elapsed)

    @property
    def is_solved(self) -> bool:
        all_groups = self.groups.groups()
        return len(all_groups) == 1 and len(all_groups[0]) == self.rows * self.cols

    # ------------------------------------------------------------------
    # Input and rendering

    def pointer_down(self, view_x: float, view_y: float) -> None:
        if self.status != GameStatus.PLAYING:
            logger.debug("Ignoring pointer down in state %s", self.status.value)
            return
        self._end_gesture()
        if self.select_at(view_x, view_y) is None:
            self._panning = True
            self._last_pointer = (view_x, view_y)

    def pointer_move(self, view_x: float, view_y: float) -> None:
        if self._selected is not None:
            self.drag_to(view_x, view_y)
        elif self._panning:
            self.pan_to(view_x, view_y)

    def pointer_up(self, view_x: float = 0.0, view_y: float = 0.0) -> Optional[SnapResult]:
        return self.release()

    def wheel(self, delta_y: float) -> bool:
        return self.zoom(zoom_in=delta_y < 0)

    def handle_input(self, event: InputEvent) -> RenderFrame:
        """Apply one input event and return the frame to draw."""
        if isinstance(event, PointerDown):
            self.pointer_down(event.x, event.y)
        elif isinstance(event, PointerMove):
            self.pointer_move(event.x, event.y)
        elif isinstance(event, PointerUp):
            self.pointer_up(event.x, event.y)
        elif isinstance(event, Wheel):
            self.wheel(event.delta_y)
        elif isinstance(event, Tick):
            self.tick()
        elif isinstance(event, VisibilityChange):
            self.set_visibility(event.hidden)
        else:
            raise TypeError(f"Unsupported input event: {event!r}")
        return self.render()

    def render(self) -> RenderFrame:
        """Describe the current frame. Has no side effects."""
        if self.status in (GameStatus.READY, GameStatus.PAUSED):
            overlay: Optional[Literal["paused", "not_started"]] = (
                "paused" if self.status == GameStatus.PAUSED else "not_started"
            )
            return RenderFrame(
                mode="source_image",
                overlay=overlay,
                zoom_scale=self.viewport.zoom_scale,
                center=self.viewport.center,
            pan_offset=self.viewport.pan_offset,
                placements=(),
            )

        placements = tuple(PiecePlacement(piece.id, piece.boundary, piece.offset) for piece in self._pieces)
        return RenderFrame(
            mode="pieces",
            overlay=None,
            zoom_scale=self.viewport.zoom_scale,
            center=self.viewport.center,
            pan_offset=self.viewport.pan_offset,
            placements=placements,
        )
