"""
Cellular-automaton smoothing.

Every pass reads only the grid as it stood at the start of the pass and
writes a brand new grid, so cells never see a sibling's updated value.
"""

import numpy as np

from .grid import CaveGrid

# Moore neighborhood offsets: (delta_row, delta_col)
MOORE_OFFSETS = [
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1),           (0, 1),
    (1, -1),  (1, 0),  (1, 1),
]


def count_wall_neighbors(grid: CaveGrid, edge_is_wall: bool) -> np.ndarray:
    """
    Count wall cells among the 8 Moore neighbors of every cell.

    Off-grid neighbors count as walls when edge_is_wall is set, and are
    ignored entirely otherwise.

    Returns:
        Integer array with the same shape as grid
    """
    rows, cols = grid.shape
    padded = np.pad(grid, 1, mode="constant", constant_values=edge_is_wall)
    counts = np.zeros((rows, cols), dtype=np.int8)
    for dr, dc in MOORE_OFFSETS:
        counts += padded[1 + dr : 1 + dr + rows, 1 + dc : 1 + dc + cols]
    return counts


def smooth_step(
    grid: CaveGrid,
    birth_threshold: int,
    death_threshold: int,
    edge_is_wall: bool,
) -> CaveGrid:
    """
    Apply one synchronous pass of the birth/death rule.

    A wall survives when at least death_threshold neighbors are walls.
    A floor cell becomes wall when at least birth_threshold neighbors are walls.
    """
    counts = count_wall_neighbors(grid, edge_is_wall)
    return np.where(grid, counts >= death_threshold, counts >= birth_threshold)


def smooth(
    grid: CaveGrid,
    iterations: int,
    birth_threshold: int,
    death_threshold: int,
    edge_is_wall: bool,
) -> CaveGrid:
    """
    Run the automaton for a fixed number of passes.

    The input grid is left untouched; zero iterations returns a copy of it.

    Raises:
        ValueError: If iterations is negative or a threshold is outside [0, 8]
    """
    if iterations < 0:
        raise ValueError(f"iterations must be >= 0, got {iterations}")
    for name, threshold in (("birth", birth_threshold), ("death", death_threshold)):
        if not 0 <= threshold <= len(MOORE_OFFSETS):
            raise ValueError(f"{name} threshold must be within [0, 8], got {threshold}")

    current = grid.copy()
    for _ in range(iterations):
        current = smooth_step(current, birth_threshold, death_threshold, edge_is_wall)
    return current
