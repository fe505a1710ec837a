#!/usr/bin/env python3
"""
Render a generated cave as ASCII art for debugging.

Usage:
    uv run tools/render_cave_ascii.py [--width N] [--height N] [--seed S]
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path so we can import caves
sys.path.insert(0, str(Path(__file__).parent.parent))

from caves.cave_gen import generate_cave
from caves.config import add_config_arguments, config_from_args
from caves.render import render_cave_ascii


def main():
    parser = argparse.ArgumentParser(description="Render cave as ASCII art")
    add_config_arguments(parser)
    parser.add_argument("--no-spawn", action="store_true", help="Do not mark the spawn point")
    args = parser.parse_args()

    config = config_from_args(args)
    cave_map = generate_cave(config)

    spawn = None
    if not cave_map.is_empty and not args.no_spawn:
        spawn = cave_map.spawn_point()

    print(render_cave_ascii(cave_map, spawn=spawn))

    # Print some debug info
    print(f"\n--- Debug Info ---")
    print(f"Map size: {cave_map.width}x{cave_map.height} tiles")
    print(f"Seed: {cave_map.seed}")
    print(f"Regions: {len(cave_map.regions)}")
    for region in cave_map.regions:
        print(
            f"  Region {region.region_id}: {region.size} tiles, "
            f"centroid ({region.centroid.column}, {region.centroid.row})"
        )
    if spawn is not None:
        print(f"Spawn tile: ({spawn.column}, {spawn.row})")


if __name__ == "__main__":
    main()
