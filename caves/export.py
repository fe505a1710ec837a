"""
Export of a finished cave grid to tile ids for rendering and collision layers.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

import numpy as np

from .config import GenerationConfig
from .grid import CaveGrid, Position
from .regions import Region, largest_region

COLLISION_SOLID = "solid"
COLLISION_NONE = "none"


@dataclass(frozen=True)
class TileProperties:
    """Collision behaviour attached to a tile id."""

    is_solid: bool
    collision_layer: str = COLLISION_NONE


@dataclass(frozen=True, eq=False)
class CaveMap:
    """
    A generated cave, ready for a tile renderer.

    tiles is a read-only array of shape (height, width) holding the
    caller's wall and floor tile ids. regions lists the surviving floor
    regions in discovery order; it is empty when nothing but wall is left.
    seed is the seed that produced this map, drawn or supplied.

    Maps compare and hash by identity; compare tiles with np.array_equal.
    """

    tiles: np.ndarray
    regions: Tuple[Region, ...]
    seed: int
    wall_tile_id: Any
    floor_tile_id: Any
    tile_width: int = 16
    tile_height: int = 16
    tile_properties: Dict[Any, TileProperties] = field(default_factory=dict)

    @property
    def width(self) -> int:
        return self.tiles.shape[1]

    @property
    def height(self) -> int:
        return self.tiles.shape[0]

    @property
    def width_pixels(self) -> int:
        return self.width * self.tile_width

    @property
    def height_pixels(self) -> int:
        return self.height * self.tile_height

    @property
    def is_empty(self) -> bool:
        """True when no floor survived generation."""
        return not self.regions

    def is_wall(self, row: int, col: int) -> bool:
        """Out-of-bounds tiles count as wall."""
        if 0 <= row < self.height and 0 <= col < self.width:
            return bool(self.tiles[row, col] == self.wall_tile_id)
        return True

    def is_floor(self, row: int, col: int) -> bool:
        return not self.is_wall(row, col)

    def is_solid(self, row: int, col: int) -> bool:
        """Collision lookup through the tile properties."""
        if not (0 <= row < self.height and 0 <= col < self.width):
            return True
        properties = self.tile_properties.get(self.tiles[row, col])
        return properties.is_solid if properties is not None else False

    def largest_region(self) -> Region:
        """
        Raises:
            RuntimeError: If the map has no floor regions
        """
        return largest_region(list(self.regions))

    def spawn_point(self) -> Position:
        """A floor tile near the middle of the largest region."""
        return self.largest_region().anchor


def build_tile_properties(
    wall_tile_id: Any, floor_tile_id: Any, wall_is_solid: bool = True
) -> Dict[Any, TileProperties]:
    """Tile set entries for the wall and floor ids."""
    return {
        floor_tile_id: TileProperties(is_solid=False, collision_layer=COLLISION_NONE),
        wall_tile_id: TileProperties(
            is_solid=wall_is_solid,
            collision_layer=COLLISION_SOLID if wall_is_solid else COLLISION_NONE,
        ),
    }


def export_grid(
    grid: CaveGrid,
    regions: List[Region],
    config: GenerationConfig,
    seed: int,
    wall_is_solid: bool = True,
) -> CaveMap:
    """
    Map wall cells to config.wall_tile_id and floor cells to config.floor_tile_id.

    The working grid is copied, so later edits to it do not leak into the map.
    """
    tiles = np.where(grid, config.wall_tile_id, config.floor_tile_id)
    tiles.setflags(write=False)

    return CaveMap(
        tiles=tiles,
        regions=tuple(regions),
        seed=seed,
        wall_tile_id=config.wall_tile_id,
        floor_tile_id=config.floor_tile_id,
        tile_width=config.tile_width,
        tile_height=config.tile_height,
        tile_properties=build_tile_properties(
            config.wall_tile_id, config.floor_tile_id, wall_is_solid
        ),
    )
