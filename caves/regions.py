"""
Connected floor regions: labeling, and pruning of small caves.

Regions are snapshots. Any edit to the grid makes previously computed
regions stale, so callers recompute them rather than patching them.
"""

from dataclasses import dataclass
from typing import FrozenSet, List, Tuple

import numpy as np
from scipy import ndimage

from .grid import CaveGrid, Position

Coord = Tuple[int, int]

# 4-connected labeling: N, S, W and E touch, diagonals do not
ORTHOGONAL_STRUCTURE = np.array(
    [
        [0, 1, 0],
        [1, 1, 1],
        [0, 1, 0],
    ],
    dtype=bool,
)


@dataclass(frozen=True)
class Region:
    """
    One maximal 4-connected component of floor cells.

    Attributes:
        region_id: Discovery index (0 for the first region met in row-major order)
        cells: (row, col) coordinates of every member
        centroid: Mean member coordinate, truncated to whole tiles
        anchor: Member cell nearest the centroid; corridors start and end here
    """

    region_id: int
    cells: FrozenSet[Coord]
    centroid: Position
    anchor: Position

    @property
    def size(self) -> int:
        return len(self.cells)

    def __contains__(self, coord: Coord) -> bool:
        return coord in self.cells


def label_regions(grid: CaveGrid) -> Tuple[np.ndarray, int]:
    """
    Label the 4-connected floor components of a grid.

    Walls get label 0 and regions get 1..count. Labels follow the row-major
    position of each region's first cell, so label - 1 is the discovery index.
    """
    labels, count = ndimage.label(~grid, structure=ORTHOGONAL_STRUCTURE)
    return labels, int(count)


def region_centroids(labels: np.ndarray, count: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Sizes and truncated mean coordinates of every labeled region.

    Returns:
        (sizes, centroids): sizes has shape (count,); centroids has shape
        (count, 2) holding (row, col). Row i describes label i + 1.
    """
    flat = labels.ravel()
    rows, cols = np.divmod(np.arange(flat.size), labels.shape[1])
    sizes = np.bincount(flat, minlength=count + 1)[1:]
    row_sums = np.bincount(flat, weights=rows, minlength=count + 1)[1:]
    col_sums = np.bincount(flat, weights=cols, minlength=count + 1)[1:]
    sums = np.stack([row_sums, col_sums], axis=1).astype(np.int64)
    return sizes, sums // sizes[:, np.newaxis]


def nearest_member(rows: np.ndarray, cols: np.ndarray, centroid: Position) -> Position:
    """
    The member nearest the centroid by squared distance.

    Members must be listed in row-major order; the first minimum then
    breaks ties on the lowest (row, col).
    """
    distances = (rows - centroid.row) ** 2 + (cols - centroid.column) ** 2
    nearest = int(np.argmin(distances))
    return Position(row=int(rows[nearest]), column=int(cols[nearest]))


def region_anchor(labels: np.ndarray, label: int, centroid: Position) -> Position:
    """Anchor cell of one labeled region."""
    rows, cols = np.nonzero(labels == label)
    return nearest_member(rows, cols, centroid)


def find_regions(grid: CaveGrid) -> List[Region]:
    """
    Label the connected floor regions of a grid.

    Diagonal contact does not join regions. The grid itself is never modified.

    Returns:
        Regions in discovery order (row-major scan of their first cell)
    """
    labels, count = label_regions(grid)
    if count == 0:
        return []

    sizes, centroids = region_centroids(labels, count)

    # A stable sort keeps each region's members in row-major order
    order = np.argsort(labels.ravel(), kind="stable")
    member_rows, member_cols = np.divmod(order, grid.shape[1])

    regions: List[Region] = []
    start = grid.size - int(sizes.sum())  # skip the wall cells, label 0
    for index in range(count):
        stop = start + int(sizes[index])
        rows = member_rows[start:stop]
        cols = member_cols[start:stop]
        centroid = Position(row=int(centroids[index, 0]), column=int(centroids[index, 1]))
        regions.append(
            Region(
                region_id=index,
                cells=frozenset(zip(rows.tolist(), cols.tolist())),
                centroid=centroid,
                anchor=nearest_member(rows, cols, centroid),
            )
        )
        start = stop

    return regions


def prune_small_regions(
    grid: CaveGrid, regions: List[Region], min_cave_size: int
) -> List[Region]:
    """
    Fill every region smaller than min_cave_size with wall, in place.

    The regions passed in are stale afterwards; run find_regions again
    before using region data.

    Returns:
        The regions that were filled in
    """
    if min_cave_size < 1:
        raise ValueError(f"min_cave_size must be >= 1, got {min_cave_size}")

    removed = [region for region in regions if region.size < min_cave_size]
    for region in removed:
        for row, col in region.cells:
            grid[row, col] = True
    return removed


def largest_region(regions: List[Region]) -> Region:
    """
    The region with the most cells; earliest discovered wins ties.

    Raises:
        RuntimeError: If there are no regions
    """
    if not regions:
        raise RuntimeError("No cave regions to choose from")
    return max(regions, key=lambda region: (region.size, -region.region_id))
