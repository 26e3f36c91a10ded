"""Tests for edge grid generation and piece boundaries.

These tests verify that adjacent puzzle pieces share edges correctly,
with tabs fitting exactly into blanks and no gaps between pieces.
"""

import numpy as np
import pytest

from jigsaw_engine import (
    InvalidParameterError,
    build_boundary,
    check_tab_parameters,
    generate_edge_grid,
    get_piece_edges,
    piece_boundary,
    reverse_curves,
)

CELL = (200.0, 150.0)


def boundary_svgs(rows: int, cols: int, seed: int, tab: float = 20.0, jitter: float = 4.0) -> list:
    grid = generate_edge_grid(rows, cols, tab, jitter, seed)
    return [piece_boundary(grid, r, c, *CELL).to_svg(precision=12) for r in range(rows) for c in range(cols)]


def side_points(rows: int, cols: int, seed: int, row: int, col: int, side: str) -> np.ndarray:
    grid = generate_edge_grid(rows, cols, 20.0, 4.0, seed)
    curves = piece_boundary(grid, row, col, *CELL).side(side)
    return np.concatenate([c.get_points(25) for c in curves])


class TestDeterminism:
    """Tests for reproducible generation."""

    @pytest.mark.parametrize("seed", [42, 123, 456, 789, 1000])
    def test_repeated_generation_is_identical(self, seed: int) -> None:
        assert generate_edge_grid(4, 5, 20.0, 4.0, seed) == generate_edge_grid(4, 5, 20.0, 4.0, seed)
        assert boundary_svgs(4, 5, seed) == boundary_svgs(4, 5, seed)

    def test_seed_changes_shapes(self) -> None:
        assert boundary_svgs(3, 3, 1) != boundary_svgs(3, 3, 2)

    @pytest.mark.parametrize("tab,jitter", [(10.0, 0.0), (30.0, 13.0)])
    def test_parameters_change_shapes(self, tab: float, jitter: float) -> None:
        assert boundary_svgs(3, 3, 42, tab, jitter) != boundary_svgs(3, 3, 42)


class TestGridStructure:
    """Tests for the shape of the edge grid."""

    @pytest.mark.parametrize("rows,cols", [(1, 1), (2, 2), (3, 5), (6, 9)])
    def test_dimensions_and_borders(self, rows: int, cols: int) -> None:
        grid = generate_edge_grid(rows, cols, seed=3)

        assert len(grid.horizontal_edges) == rows + 1
        assert all(len(line) == cols for line in grid.horizontal_edges)
        assert len(grid.vertical_edges) == rows
        assert all(len(line) == cols + 1 for line in grid.vertical_edges)

        assert all(e is None for e in grid.horizontal_edges[0])
        assert all(e is None for e in grid.horizontal_edges[rows])
        assert all(line[0] is None and line[cols] is None for line in grid.vertical_edges)

        # Exactly one spec per interior edge
        assert len(grid.interior_edges()) == (rows - 1) * cols + rows * (cols - 1)

    def test_edge_specs_record_their_position(self) -> None:
        grid = generate_edge_grid(3, 4, seed=9)
        for r in range(1, 3):
            for c in range(4):
                spec = grid.horizontal_edges[r][c]
                assert spec is not None
                assert (spec.orientation, spec.row, spec.col) == ("horizontal", r, c)
        for r in range(3):
            for c in range(1, 4):
                spec = grid.vertical_edges[r][c]
                assert spec is not None
                assert (spec.orientation, spec.row, spec.col) == ("vertical", r, c)

    def test_tab_size_and_jitter_bounds(self) -> None:
        grid = generate_edge_grid(5, 5, tab_size_percent=24.0, jitter_percent=10.0, seed=11)
        for spec in grid.interior_edges():
            assert spec.tab_size == pytest.approx(0.12)
            for value in (spec.b, spec.c, spec.d, spec.e):
                assert -0.1 <= value < 0.1

    def test_neighbouring_cells_share_the_same_spec(self) -> None:
        grid = generate_edge_grid(3, 3, seed=5)
        assert get_piece_edges(grid, 1, 1).right is get_piece_edges(grid, 1, 2).left
        assert get_piece_edges(grid, 1, 1).bottom is get_piece_edges(grid, 2, 1).top

    def test_corner_piece_has_straight_border_sides(self) -> None:
        grid = generate_edge_grid(2, 2, seed=42)
        edges = get_piece_edges(grid, 0, 0)
        assert edges.top is None and edges.left is None
        assert edges.right is not None and edges.bottom is not None

        boundary = piece_boundary(grid, 0, 0, *CELL)
        (top,) = boundary.side("top")
        assert [p[1] for p in (top.p0, top.p1, top.p2, top.p3)] == [0.0, 0.0, 0.0, 0.0]
        (left,) = boundary.side("left")
        assert [p[0] for p in (left.p0, left.p1, left.p2, left.p3)] == [0.0, 0.0, 0.0, 0.0]

    def test_rejects_empty_grid(self) -> None:
        with pytest.raises(ValueError):
            generate_edge_grid(0, 3)


class TestInterlock:
    """Tests that each shared edge is a tab on one side and the matching blank on the other."""

    @pytest.mark.parametrize("seed", [42, 123, 456, 789, 1000])
    def test_shared_sides_coincide(self, seed: int) -> None:
        rows, cols = 4, 4
        grid = generate_edge_grid(rows, cols, 20.0, 4.0, seed)
        boundaries = {(r, c): piece_boundary(grid, r, c, *CELL) for r in range(rows) for c in range(cols)}

        for r in range(rows):
            for c in range(cols):
                if c + 1 < cols:
                    right = boundaries[(r, c)].side("right")
                    left = boundaries[(r, c + 1)].side("left")
                    assert tuple(reverse_curves(left)) == right
                if r + 1 < rows:
                    bottom = boundaries[(r, c)].side("bottom")
                    top = boundaries[(r + 1, c)].side("top")
                    assert tuple(reverse_curves(top)) == bottom

    @pytest.mark.parametrize("seed", [42, 123, 456])
    def test_sampled_points_mirror_across_edge(self, seed: int) -> None:
        """The upper piece's outward offset is the lower piece's inward offset at every sample."""
        line_y = CELL[1]
        upper = side_points(2, 1, seed, 0, 0, "bottom")
        lower = side_points(2, 1, seed, 1, 0, "top")[::-1]
        np.testing.assert_allclose(upper, lower, atol=1e-9)

        upper_outward = upper[:, 1] - line_y
        lower_outward = line_y - lower[:, 1]
        np.testing.assert_allclose(upper_outward, -lower_outward, atol=1e-9)
        assert np.abs(upper_outward).max() > 0.15 * min(CELL)

    @pytest.mark.parametrize("seed", [1, 2, 3, 4, 5, 6])
    def test_tab_belongs_to_exactly_one_piece(self, seed: int) -> None:
        """A point just inside the tab's tip is inside one piece and outside the other."""
        grid = generate_edge_grid(1, 2, 20.0, 4.0, seed)
        spec = grid.vertical_edges[0][1]
        assert spec is not None
        left_piece = piece_boundary(grid, 0, 0, *CELL)
        right_piece = piece_boundary(grid, 0, 1, *CELL)

        tip_x, tip_y = left_piece.side("right")[1].evaluate(0.5)
        line_x = CELL[0]
        # Step 2px from the tip back toward the grid line
        inner_x = tip_x - 2.0 if tip_x > line_x else tip_x + 2.0

        bulges_right = tip_x > line_x
        assert bulges_right == (not spec.flip)
        assert left_piece.contains(inner_x, tip_y) == bulges_right
        assert right_piece.contains(inner_x, tip_y) == (not bulges_right)


class TestBuildBoundary:
    """Tests for the piece-local boundary."""

    def test_local_frame_starts_at_origin(self) -> None:
        grid = generate_edge_grid(2, 2, seed=42)
        local = build_boundary(grid, 1, 1, *CELL)
        assert local.curves[0].p0 == (0.0, 0.0)
        assert local.curves[-1].p3 == (0.0, 0.0)

    def test_local_frame_is_translated_source_boundary(self) -> None:
        grid = generate_edge_grid(2, 2, seed=42)
        local = build_boundary(grid, 1, 0, *CELL)
        source = piece_boundary(grid, 1, 0, *CELL)
        np.testing.assert_allclose(local.sample() + np.array([0.0, CELL[1]]), source.sample())

    def test_closed_in_winding_order(self) -> None:
        grid = generate_edge_grid(3, 3, seed=8)
        boundary = build_boundary(grid, 1, 1, *CELL)
        curves = boundary.curves
        for current, following in zip(curves, curves[1:] + curves[:1]):
            assert current.p3 == pytest.approx(following.p0)

        corners = [side[0].p0 for side in boundary.sides]
        expected = [(0.0, 0.0), (CELL[0], 0.0), CELL, (0.0, CELL[1])]
        for corner, want in zip(corners, expected):
            assert corner == pytest.approx(want)

    def test_contains_cell_center(self) -> None:
        grid = generate_edge_grid(3, 3, seed=8)
        for r in range(3):
            for c in range(3):
                boundary = build_boundary(grid, r, c, *CELL)
                assert boundary.contains(CELL[0] / 2, CELL[1] / 2)
                assert not boundary.contains(-CELL[0] / 2, CELL[1] / 2)


class TestCheckTabParameters:
    """Tests for the opt-in parameter check."""

    @pytest.mark.parametrize("tab,jitter", [(10.0, 0.0), (20.0, 4.0), (30.0, 13.0)])
    def test_accepts_recommended_ranges(self, tab: float, jitter: float) -> None:
        check_tab_parameters(tab, jitter)

    @pytest.mark.parametrize("tab,jitter", [(9.9, 4.0), (31.0, 4.0), (20.0, -1.0), (20.0, 13.5)])
    def test_rejects_out_of_range(self, tab: float, jitter: float) -> None:
        with pytest.raises(InvalidParameterError):
            check_tab_parameters(tab, jitter)

    def test_generator_accepts_out_of_range(self) -> None:
        """Degenerate values still generate a closed outline."""
        grid = generate_edge_grid(2, 2, tab_size_percent=60.0, jitter_percent=40.0, seed=1)
        boundary = build_boundary(grid, 0, 0, *CELL)
        assert boundary.curves[-1].p3 == (0.0, 0.0)
