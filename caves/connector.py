"""
Corridor carving between disjoint cave regions.

Algorithm
=========

1. Label the current floor regions.
2. Stop if one region (or none) remains.
3. Pick the pair of regions whose centroids are closest; ties go to the
   pair with the lowest discovery indices.
4. Carve an L-shaped corridor between the two regions' anchor cells:
   horizontally along the first anchor's row, then vertically along the
   second anchor's column.
5. Go back to 1.

Anchors are member cells, so every corridor touches both regions it joins
and the region count drops on every round.

Distances are squared integer distances between centroids, so ties are
exact. Each region keeps its nearest-neighbor distance between rounds and
only the rows touched by a merge are recomputed.
"""

from typing import List, Sequence, Tuple

import numpy as np

from .grid import CaveGrid, Position
from .regions import Region, label_regions, region_anchor, region_centroids

# A path is a list of tile coordinates (row, col), ordered from start to end
Path = List[Tuple[int, int]]

UNREACHABLE = np.iinfo(np.int64).max


def corridor_path(start: Position, end: Position) -> Path:
    """
    L-shaped path from start to end, both endpoints included.

    Moves along start's row to end's column, then along that column to end's row.
    """
    path: Path = []
    col_step = 1 if end.column >= start.column else -1
    for col in range(start.column, end.column + col_step, col_step):
        path.append((start.row, col))

    row_step = 1 if end.row >= start.row else -1
    for row in range(start.row + row_step, end.row + row_step, row_step):
        path.append((row, end.column))

    return path


def carve_path(grid: CaveGrid, path: Path, corridor_width: int = 1) -> None:
    """
    Turn every cell on the path into floor, in place.

    Wider corridors clear a corridor_width x corridor_width square centred
    on each path cell, clipped to the grid.
    """
    if corridor_width < 1:
        raise ValueError(f"corridor_width must be >= 1, got {corridor_width}")

    rows, cols = grid.shape
    low = -(corridor_width // 2)
    high = corridor_width - corridor_width // 2
    for row, col in path:
        for dr in range(low, high):
            for dc in range(low, high):
                r, c = row + dr, col + dc
                if 0 <= r < rows and 0 <= c < cols:
                    grid[r, c] = False


class CentroidNeighbors:
    """
    Closest-centroid bookkeeping for a shrinking set of regions.

    Every region starts in its own slot. When regions merge, one slot
    carries on for the merged region and the others are retired.

    Attributes:
        centroids: (slots, 2) array of (row, col) centroids
        order: Discovery index of each slot, used to break ties
        alive: Slots still holding a region
        nearest: Squared distance from each slot to its closest live neighbor
        partner: A live slot at that distance
    """

    def __init__(self, centroids: np.ndarray, order: Sequence[int]) -> None:
        self.centroids = np.array(centroids, dtype=np.int64).reshape(-1, 2)
        self.order = np.array(order, dtype=np.int64)
        count = len(self.centroids)
        self.alive = np.ones(count, dtype=bool)
        self.nearest = np.full(count, UNREACHABLE, dtype=np.int64)
        self.partner = np.zeros(count, dtype=np.int64)
        for slot in range(count):
            self._refresh(slot)

    def distances_from(self, slot: int) -> np.ndarray:
        """Squared distances from one slot to every other live slot."""
        offsets = self.centroids - self.centroids[slot]
        distances = (offsets * offsets).sum(axis=1)
        distances[~self.alive] = UNREACHABLE
        distances[slot] = UNREACHABLE
        return distances

    def _refresh(self, slot: int) -> None:
        distances = self.distances_from(slot)
        partner = int(np.argmin(distances))
        self.nearest[slot] = distances[partner]
        self.partner[slot] = partner

    def closest(self) -> Tuple[int, int]:
        """
        The pair of live slots with the closest centroids, lowest order first.

        Every slot in a closest pair has that distance as its nearest, so the
        first slot is the lowest-ordered of those; the second is its
        lowest-ordered partner at the same distance.
        """
        live = np.flatnonzero(self.alive)
        if len(live) < 2:
            raise ValueError("Need at least two regions to pick a pair")

        best = self.nearest[live].min()
        candidates = live[self.nearest[live] == best]
        first = int(candidates[np.argmin(self.order[candidates])])

        partners = np.flatnonzero(self.distances_from(first) == best)
        second = int(partners[np.argmin(self.order[partners])])
        return first, second

    def update(
        self,
        centroids: np.ndarray,
        order: np.ndarray,
        changed: np.ndarray,
        retired: np.ndarray,
    ) -> None:
        """
        Record a merge.

        Parameters:
            centroids: New centroid of every slot
            order: New discovery index of every slot
            changed: Live slots whose region grew
            retired: Slots whose region merged into another slot
        """
        self.alive[retired] = False
        self.nearest[retired] = UNREACHABLE
        self.centroids = np.asarray(centroids, dtype=np.int64)
        self.order = np.asarray(order, dtype=np.int64)

        moved = np.concatenate([changed, retired])
        stale = self.alive & np.isin(self.partner, moved)
        stale[changed] = True
        for slot in np.flatnonzero(stale):
            self._refresh(int(slot))

        for slot in changed:
            distances = self.distances_from(int(slot))
            closer = distances < self.nearest
            self.nearest[closer] = distances[closer]
            self.partner[closer] = slot


def nearest_pair(regions: List[Region]) -> Tuple[Region, Region]:
    """
    The two regions with the closest centroids.

    Regions are compared by their position in the list, so ties resolve to
    the lowest pair of discovery indices.
    """
    if len(regions) < 2:
        raise ValueError("Need at least two regions to pick a pair")

    neighbors = CentroidNeighbors(
        [(region.centroid.row, region.centroid.column) for region in regions],
        order=range(len(regions)),
    )
    first, second = neighbors.closest()
    return regions[first], regions[second]


def connect_regions(grid: CaveGrid, corridor_width: int = 1) -> List[Path]:
    """
    Carve corridors until every floor cell belongs to a single region.

    Grids with zero or one region are left untouched.

    Returns:
        The corridors carved, in order

    Raises:
        RuntimeError: If a carve fails to merge the regions it was meant to join
    """
    corridors: List[Path] = []
    labels, count = label_regions(grid)
    if count < 2:
        return corridors

    sizes, centroids = region_centroids(labels, count)
    slot_labels = np.arange(1, count + 1)
    slot_sizes = sizes.copy()
    # One member cell per slot; carving only adds floor, so it stays a member
    values, first_cells = np.unique(labels.ravel(), return_index=True)
    slot_cells = first_cells[values > 0]
    neighbors = CentroidNeighbors(centroids, order=slot_labels - 1)

    while count > 1:
        first, second = neighbors.closest()
        start = region_anchor(labels, slot_labels[first], _position(neighbors.centroids[first]))
        end = region_anchor(labels, slot_labels[second], _position(neighbors.centroids[second]))
        path = corridor_path(start, end)
        carve_path(grid, path, corridor_width)
        corridors.append(path)

        previous = count
        labels, count = label_regions(grid)
        if count >= previous:
            raise RuntimeError(
                f"Corridor between regions {slot_labels[first] - 1} and "
                f"{slot_labels[second] - 1} did not merge them."
            )

        live = np.flatnonzero(neighbors.alive)
        live_labels = labels.ravel()[slot_cells[live]]
        # Live slots are in ascending order, so the lowest slot of each merged group keeps it
        _, kept_index = np.unique(live_labels, return_index=True)
        kept = np.zeros(len(live), dtype=bool)
        kept[kept_index] = True

        sizes, centroids = region_centroids(labels, count)
        slot_labels[live] = live_labels
        live_sizes = sizes[live_labels - 1]
        changed = live[kept & (live_sizes != slot_sizes[live])]
        slot_sizes[live] = live_sizes

        slot_centroids = neighbors.centroids.copy()
        slot_centroids[live] = centroids[live_labels - 1]
        neighbors.update(slot_centroids, slot_labels - 1, changed, live[~kept])

    return corridors


def _position(centroid: np.ndarray) -> Position:
    return Position(row=int(centroid[0]), column=int(centroid[1]))
