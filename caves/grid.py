"""
Grid representation and random initialization.

A cave grid is a 2D boolean numpy array indexed [row, column], where
True marks a wall and False marks floor.
"""

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np


@dataclass(frozen=True)
class Position:
    """A position in the cave grid, measured in tiles."""

    row: int
    column: int


# Type Definition
CaveGrid = np.ndarray

# ASCII dialect for hand-drawn grids
WALL_CHAR = "#"
FLOOR_CHAR = "."


def initialize_grid(
    width: int,
    height: int,
    initial_wall_probability: float,
    rng: np.random.Generator,
) -> CaveGrid:
    """
    Seed a fresh grid with independent wall/floor trials.

    One uniform draw is consumed per cell in row-major order, so the same
    generator state and dimensions always give the same grid.

    Args:
        width: Number of columns
        height: Number of rows
        initial_wall_probability: Chance in [0, 1] that a cell starts as wall
        rng: The generator owned by this generation request

    Returns:
        Boolean array of shape (height, width)

    Raises:
        ValueError: If either dimension is not positive
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")

    return rng.random((height, width)) < initial_wall_probability


def parse_ascii_grid(lines: Sequence[str]) -> CaveGrid:
    """
    Build a grid from ASCII art, '#' for wall and '.' for floor.

    Short rows are padded with wall.
    """
    if not lines:
        raise ValueError("Cannot parse an empty grid")

    width = max(len(line) for line in lines)
    grid = np.ones((len(lines), width), dtype=bool)
    for row, line in enumerate(lines):
        for column, char in enumerate(line):
            if char == FLOOR_CHAR:
                grid[row, column] = False
            elif char != WALL_CHAR:
                raise ValueError(f"Unexpected character {char!r} at ({row}, {column})")
    return grid


def format_ascii_grid(grid: CaveGrid) -> List[str]:
    """Inverse of parse_ascii_grid."""
    return [
        "".join(WALL_CHAR if cell else FLOOR_CHAR for cell in row) for row in grid
    ]


def floor_count(grid: CaveGrid) -> int:
    """Number of floor cells in the grid."""
    return int(grid.size - np.count_nonzero(grid))
