"""Unit tests for corridor carving between cave regions."""

from itertools import combinations

import numpy as np
import pytest

from caves.connector import (
    CentroidNeighbors,
    carve_path,
    connect_regions,
    corridor_path,
    nearest_pair,
)
from caves.grid import Position, format_ascii_grid, parse_ascii_grid
from caves.regions import find_regions


def connect_by_relabeling(grid):
    """Relabel from scratch and compare every pair of regions on each round."""
    corridors = []
    regions = find_regions(grid)
    while len(regions) > 1:
        i, j = min(
            combinations(range(len(regions)), 2),
            key=lambda ij: (
                (regions[ij[0]].centroid.row - regions[ij[1]].centroid.row) ** 2
                + (regions[ij[0]].centroid.column - regions[ij[1]].centroid.column) ** 2,
                ij,
            ),
        )
        path = corridor_path(regions[i].anchor, regions[j].anchor)
        carve_path(grid, path)
        corridors.append(path)
        regions = find_regions(grid)
    return corridors


TWO_ROOMS = [
    "#########",
    "#..###..#",
    "#..###..#",
    "#########",
    "#########",
]


class TestCorridorPath:
    """L-shaped paths: horizontal leg first, then vertical."""

    def test_horizontal_then_vertical(self):
        path = corridor_path(Position(1, 1), Position(3, 4))
        assert path == [(1, 1), (1, 2), (1, 3), (1, 4), (2, 4), (3, 4)]

    def test_reverse_direction(self):
        path = corridor_path(Position(3, 4), Position(1, 1))
        assert path == [(3, 4), (3, 3), (3, 2), (3, 1), (2, 1), (1, 1)]

    def test_same_point(self):
        assert corridor_path(Position(2, 2), Position(2, 2)) == [(2, 2)]

    def test_consecutive_cells_are_orthogonal_neighbors(self):
        path = corridor_path(Position(0, 9), Position(7, 2))
        for (r1, c1), (r2, c2) in zip(path, path[1:]):
            assert abs(r1 - r2) + abs(c1 - c2) == 1


class TestCarvePath:
    def test_single_width_only_touches_path(self):
        grid = parse_ascii_grid(["#####"] * 3)
        carve_path(grid, [(1, 1), (1, 2), (1, 3)])
        assert format_ascii_grid(grid) == ["#####", "#...#", "#####"]

    def test_existing_floor_stays_floor(self):
        grid = parse_ascii_grid(["#.#"])
        carve_path(grid, [(0, 0), (0, 1), (0, 2)])
        assert format_ascii_grid(grid) == ["..."]

    def test_wide_corridor(self):
        grid = parse_ascii_grid(["#####"] * 5)
        carve_path(grid, [(2, 2)], corridor_width=3)
        assert format_ascii_grid(grid) == [
            "#####",
            "#...#",
            "#...#",
            "#...#",
            "#####",
        ]

    def test_wide_corridor_is_clipped_to_grid(self):
        grid = parse_ascii_grid(["###"] * 3)
        carve_path(grid, [(0, 0)], corridor_width=3)
        assert format_ascii_grid(grid) == ["..#", "..#", "###"]

    def test_invalid_width_is_rejected(self):
        with pytest.raises(ValueError):
            carve_path(parse_ascii_grid(["#"]), [(0, 0)], corridor_width=0)


class TestNearestPair:
    def test_ties_go_to_lowest_indices(self):
        """Centroids at columns 1, 5, 9: both neighbouring pairs are 4 apart."""
        grid = parse_ascii_grid(
            [
                "###########",
                "#.###.###.#",
                "###########",
            ]
        )
        first, second = nearest_pair(find_regions(grid))
        assert (first.region_id, second.region_id) == (0, 1)

    def test_closest_pair_wins(self):
        grid = parse_ascii_grid(
            [
                "###########",
                "#.#####.#.#",
                "###########",
            ]
        )
        first, second = nearest_pair(find_regions(grid))
        assert (first.region_id, second.region_id) == (1, 2)

    def test_retired_slots_are_skipped(self):
        neighbors = CentroidNeighbors([(0, 0), (0, 1), (0, 9)], order=[0, 1, 2])
        assert neighbors.closest() == (0, 1)

        # Slot 1 merges into slot 0, whose centroid moves
        neighbors.update(
            np.array([(0, 5), (0, 1), (0, 9)]),
            np.array([0, 0, 1]),
            changed=np.array([0]),
            retired=np.array([1]),
        )
        assert neighbors.closest() == (0, 2)
        assert neighbors.nearest[0] == 16

    def test_needs_two_regions(self):
        with pytest.raises(ValueError):
            nearest_pair(find_regions(parse_ascii_grid(["..."])))


class TestConnectRegions:
    """Iterative merging until a single region remains."""

    def test_two_regions_are_joined_by_the_carved_path(self):
        grid = parse_ascii_grid(TWO_ROOMS)
        left, right = find_regions(grid)

        corridors = connect_regions(grid)

        assert len(corridors) == 1
        path = corridors[0]
        assert all(not grid[row, col] for row, col in path)

        regions = find_regions(grid)
        assert len(regions) == 1
        assert regions[0].cells == left.cells | right.cells | set(path)

    def test_many_regions_end_as_one(self):
        grid = parse_ascii_grid(
            [
                "############",
                "#..#####..##",
                "#..#####..##",
                "############",
                "####..###.##",
                "####..######",
                "############",
            ]
        )
        corridors = connect_regions(grid)
        regions = find_regions(grid)
        assert len(regions) == 1
        assert 1 <= len(corridors) <= 3
        assert regions[0].size == int(np.count_nonzero(~grid))

    def test_crescent_region_still_merges(self):
        """The C shape's centroid sits in its mouth, outside the region."""
        grid = parse_ascii_grid(
            [
                "##########",
                "#....#####",
                "#.########",
                "#.######.#",
                "#.########",
                "#....#####",
                "##########",
            ]
        )
        crescent = find_regions(grid)[0]
        assert crescent.centroid == Position(row=3, column=2)
        assert grid[3, 2]

        connect_regions(grid)
        assert len(find_regions(grid)) == 1

    def test_single_region_is_untouched(self):
        grid = parse_ascii_grid(["#...#", "#...#"])
        before = grid.copy()
        assert connect_regions(grid) == []
        assert np.array_equal(grid, before)

    def test_all_wall_is_untouched(self):
        grid = parse_ascii_grid(["###", "###"])
        assert connect_regions(grid) == []
        assert grid.all()

    def test_random_grids_become_connected(self):
        for seed in range(5):
            grid = np.random.default_rng(seed).random((20, 25)) < 0.6
            connect_regions(grid)
            assert len(find_regions(grid)) <= 1

    @pytest.mark.parametrize("seed", [0, 1, 2, 3])
    def test_matches_full_relabeling(self, seed):
        """Nearest-neighbor bookkeeping picks the same pairs as a fresh comparison each round."""
        grid = np.random.default_rng(seed).random((30, 40)) < 0.6
        expected_grid = grid.copy()

        corridors = connect_regions(grid)
        expected = connect_by_relabeling(expected_grid)

        assert corridors == expected
        assert np.array_equal(grid, expected_grid)
