"""
Debug renderers for generated caves: ASCII text and BGR images.
"""

from typing import Optional, Tuple

import cv2
import numpy as np
from PIL import Image as PILImage, ImageDraw, ImageFont

from .export import CaveMap
from .grid import FLOOR_CHAR, WALL_CHAR, Position

# Image Type (BGR, as used by OpenCV)
Image = np.ndarray

SPAWN_CHAR = "@"

WALL_COLOR: Tuple[int, int, int] = (40, 40, 48)
FLOOR_COLOR: Tuple[int, int, int] = (150, 180, 200)
GRID_COLOR: Tuple[int, int, int] = (64, 64, 64)
SPAWN_COLOR: Tuple[int, int, int] = (0, 255, 0)
CAPTION_HEIGHT = 24


def render_cave_ascii(cave_map: CaveMap, spawn: Optional[Position] = None) -> str:
    """Convert a cave map to ASCII: '#' wall, '.' floor, '@' at the spawn tile."""
    lines = []
    for row in range(cave_map.height):
        line = ""
        for col in range(cave_map.width):
            if spawn is not None and (row, col) == (spawn.row, spawn.column):
                line += SPAWN_CHAR
            elif cave_map.is_wall(row, col):
                line += WALL_CHAR
            else:
                line += FLOOR_CHAR
        lines.append(line)
    return "\n".join(lines)


def render_cave_image(
    cave_map: CaveMap,
    scale: int = 8,
    spawn: Optional[Position] = None,
    show_grid: bool = False,
) -> Image:
    """
    Paint each tile as a scale x scale square.

    Args:
        cave_map: The map to draw
        scale: Pixels per tile edge
        spawn: Optional tile to mark with a green dot
        show_grid: Overlay tile boundaries

    Returns:
        BGR image of shape (height * scale, width * scale, 3)
    """
    if scale < 1:
        raise ValueError(f"scale must be >= 1, got {scale}")

    walls = cave_map.tiles == cave_map.wall_tile_id
    small = np.empty((cave_map.height, cave_map.width, 3), dtype=np.uint8)
    small[walls] = WALL_COLOR
    small[~walls] = FLOOR_COLOR
    image = np.repeat(np.repeat(small, scale, axis=0), scale, axis=1)

    height_px, width_px = image.shape[:2]
    if show_grid:
        for col in range(cave_map.width + 1):
            x = col * scale
            cv2.line(image, (x, 0), (x, height_px), GRID_COLOR, 1)
        for row in range(cave_map.height + 1):
            y = row * scale
            cv2.line(image, (0, y), (width_px, y), GRID_COLOR, 1)

    if spawn is not None:
        center = (spawn.column * scale + scale // 2, spawn.row * scale + scale // 2)
        cv2.circle(image, center, max(2, scale // 2), SPAWN_COLOR, -1)

    return image


def add_caption(image: Image, text: str) -> Image:
    """Return a copy of the image with a caption strip added below it."""
    height, width = image.shape[:2]
    rgb_frame = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
    canvas = PILImage.new("RGB", (width, height + CAPTION_HEIGHT), (20, 20, 40))
    canvas.paste(PILImage.fromarray(rgb_frame), (0, 0))

    draw = ImageDraw.Draw(canvas)
    font = ImageFont.load_default()
    draw.text((4, height + 4), text, fill=(230, 230, 230), font=font)

    return cv2.cvtColor(np.array(canvas), cv2.COLOR_RGB2BGR)
