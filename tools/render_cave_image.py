#!/usr/bin/env python3
"""
Render a cave to an image file for visual inspection.

Useful for:
- Tuning automaton thresholds and wall probability
- Comparing presets
- Debugging region pruning and corridor carving

Usage:
    uv run tools/render_cave_image.py                       # Default config, random seed
    uv run tools/render_cave_image.py --preset cave         # Start from a preset
    uv run tools/render_cave_image.py --seed 42             # Reproducible cave
    uv run tools/render_cave_image.py --output my.png       # Custom output path
"""

import argparse
import cv2
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from caves.cave_gen import CaveGenerator
from caves.config import add_config_arguments, config_from_args
from caves.render import add_caption, render_cave_image


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Render a cave to an image file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    add_config_arguments(parser)
    parser.add_argument(
        "--scale",
        type=int,
        default=8,
        help="Pixels per tile (default: 8)",
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        default="cave_render.png",
        help="Output image path (default: cave_render.png)",
    )
    parser.add_argument(
        "--show-grid",
        action="store_true",
        help="Overlay a tile grid on the image",
    )

    args = parser.parse_args()
    config = config_from_args(args)

    generator = CaveGenerator(config)
    print(f"Generating cave {config.width}x{config.height} with seed {generator.seed}...")
    cave_map = generator.generate()
    print(f"Pruned {len(generator.pruned_regions)} small regions, carved {len(generator.corridors)} corridors")

    spawn = None
    if cave_map.is_empty:
        print("No floor survived; try another seed or a lower wall probability.", file=sys.stderr)
    else:
        spawn = cave_map.spawn_point()
        print(f"Spawn tile: ({spawn.column}, {spawn.row})")

    print("Rendering cave...")
    image = render_cave_image(cave_map, scale=args.scale, spawn=spawn, show_grid=args.show_grid)
    image = add_caption(image, f"seed {cave_map.seed}  regions {len(cave_map.regions)}")

    # Save image
    output_path = Path(args.output)
    cv2.imwrite(str(output_path), image)
    print(f"Saved to: {output_path.absolute()}")

    # Print region info
    print(f"\nRegions ({len(cave_map.regions)}):")
    for region in cave_map.regions:
        print(f"  Region {region.region_id}: {region.size} tiles, anchor ({region.anchor.column}, {region.anchor.row})")


if __name__ == "__main__":
    main()
