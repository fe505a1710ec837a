"""Cellular-automaton cave generation module."""

from caves.config import ConfigurationError, GenerationConfig
from caves.grid import (
    CaveGrid,
    Position,
    floor_count,
    initialize_grid,
    parse_ascii_grid,
    format_ascii_grid,
)
from caves.automaton import count_wall_neighbors, smooth, smooth_step
from caves.regions import Region, find_regions, prune_small_regions, largest_region
from caves.connector import Path, connect_regions, corridor_path, carve_path
from caves.export import CaveMap, TileProperties, export_grid
from caves.cave_gen import CaveGenerator, generate_cave, draw_seed
