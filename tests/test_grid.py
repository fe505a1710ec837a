"""Tests for random grid initialization and the ASCII grid dialect."""

import numpy as np
import pytest

from caves.grid import (
    floor_count,
    format_ascii_grid,
    initialize_grid,
    parse_ascii_grid,
)


class TestInitializeGrid:
    """Seeding the working grid from a random stream."""

    def test_shape_is_rows_by_columns(self):
        grid = initialize_grid(7, 3, 0.5, np.random.default_rng(1))
        assert grid.shape == (3, 7)
        assert grid.dtype == bool

    def test_same_seed_gives_identical_grid(self):
        first = initialize_grid(30, 20, 0.45, np.random.default_rng(99))
        second = initialize_grid(30, 20, 0.45, np.random.default_rng(99))
        assert np.array_equal(first, second)

    def test_different_seeds_differ(self):
        first = initialize_grid(30, 20, 0.45, np.random.default_rng(1))
        second = initialize_grid(30, 20, 0.45, np.random.default_rng(2))
        assert not np.array_equal(first, second)

    def test_draws_are_consumed_in_row_major_order(self):
        """Cell (r, c) uses draw number r * width + c."""
        width, height = 6, 4
        grid = initialize_grid(width, height, 0.5, np.random.default_rng(5))
        draws = np.random.default_rng(5).random(width * height)
        for row in range(height):
            for col in range(width):
                assert grid[row, col] == (draws[row * width + col] < 0.5)

    def test_probability_one_is_all_wall(self):
        grid = initialize_grid(5, 5, 1.0, np.random.default_rng(1))
        assert grid.all()

    def test_probability_zero_is_all_floor(self):
        grid = initialize_grid(5, 5, 0.0, np.random.default_rng(1))
        assert not grid.any()

    @pytest.mark.parametrize("width,height", [(0, 5), (5, 0), (-1, 3)])
    def test_non_positive_dimensions_are_rejected(self, width, height):
        rng = np.random.default_rng(1)
        state_before = rng.bit_generator.state
        with pytest.raises(ValueError):
            initialize_grid(width, height, 0.5, rng)
        # No randomness is consumed by a rejected request
        assert rng.bit_generator.state == state_before


class TestAsciiGrid:
    """Hand-drawn grids used by tests and debugging tools."""

    def test_parse(self):
        grid = parse_ascii_grid(["#.", ".#"])
        assert grid.tolist() == [[True, False], [False, True]]

    def test_short_rows_are_padded_with_wall(self):
        grid = parse_ascii_grid(["...", "."])
        assert format_ascii_grid(grid) == ["...", ".##"]

    def test_unknown_character_is_rejected(self):
        with pytest.raises(ValueError):
            parse_ascii_grid(["#x#"])

    def test_floor_count(self):
        grid = parse_ascii_grid(["#..", "..#"])
        assert floor_count(grid) == 4
