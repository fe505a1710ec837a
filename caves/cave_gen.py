"""
Cave Generation Pipeline
========================

We grow organic caves from noise and then repair their connectivity.

1. Fill the grid with random walls using the configured probability
2. Smooth it with a cellular automaton for a fixed number of passes
3. Label the 4-connected floor regions
4. Fill in every region smaller than the minimum cave size, then relabel
5. If requested, carve corridors between the nearest regions until one remains
6. Map walls and floors to the caller's tile ids

The only randomness is consumed in step 1, from a generator owned by the
request, so equal configs with equal seeds give identical maps.
"""

import sys
from typing import List, Optional

import numpy as np

from .automaton import smooth
from .config import GenerationConfig
from .connector import Path, connect_regions
from .export import CaveMap, export_grid
from .grid import CaveGrid, floor_count, initialize_grid
from .regions import Region, find_regions, prune_small_regions

SEED_MASK = (1 << 64) - 1


def draw_seed() -> int:
    """A fresh 32-bit seed from OS entropy."""
    return int(np.random.SeedSequence().generate_state(1)[0])


def make_rng(seed: int) -> np.random.Generator:
    """
    The random stream for one request.

    numpy only takes non-negative seeds, so a negative seed is read as its
    64-bit two's-complement value.
    """
    if seed < 0:
        seed &= SEED_MASK
    return np.random.default_rng(seed)


class CaveGenerator:
    """
    Runs the generation pipeline for one config.

    The seed is fixed when the generator is created (drawn if the config has
    none), so calling generate() again reproduces the same map.
    """

    def __init__(self, config: GenerationConfig, wall_is_solid: bool = True) -> None:
        config.validate()
        self.config: GenerationConfig = config
        self.wall_is_solid: bool = wall_is_solid
        self.seed: int = config.seed if config.seed is not None else draw_seed()

        self._grid: Optional[CaveGrid] = None
        self.pruned_regions: List[Region] = []
        self.corridors: List[Path] = []

    @property
    def grid(self) -> Optional[CaveGrid]:
        """Copy of the most recent boolean grid (True = wall), or None before generate()."""
        if self._grid is None:
            return None
        return self._grid.copy()

    def generate(self) -> CaveMap:
        """Run every stage and return the finished map."""
        config = self.config
        rng = make_rng(self.seed)

        grid = initialize_grid(
            config.width, config.height, config.initial_wall_probability, rng
        )
        grid = smooth(
            grid,
            config.iterations,
            config.birth_threshold,
            config.death_threshold,
            config.edge_is_wall,
        )

        regions = find_regions(grid)
        self.pruned_regions = prune_small_regions(grid, regions, config.min_cave_size)
        regions = find_regions(grid)

        self.corridors = []
        if config.connect_caves and len(regions) > 1:
            self.corridors = connect_regions(grid, config.corridor_width)
            regions = find_regions(grid)

        if floor_count(grid) == 0:
            print(
                f"Cave with seed {self.seed} has no floor left after pruning "
                f"(min_cave_size={config.min_cave_size}).",
                file=sys.stderr,
            )

        self._grid = grid
        return export_grid(grid, regions, config, self.seed, self.wall_is_solid)


def generate_cave(config: GenerationConfig, wall_is_solid: bool = True) -> CaveMap:
    """
    Generate a cave map from a config.

    Parameters:
        config: Generation parameters; validated before anything is allocated
        wall_is_solid: Whether the wall tile is marked solid in the tile properties

    Returns:
        The finished CaveMap. Its seed field holds the seed actually used.

    Raises:
        ConfigurationError: If the config is out of range
    """
    return CaveGenerator(config, wall_is_solid=wall_is_solid).generate()
