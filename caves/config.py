"""
Configuration for cellular-automaton cave generation.
"""

import argparse
from dataclasses import dataclass, replace
from typing import Any, Optional


# Ranges used by clamped(); an interactive host clamps before generating.
MAX_DIMENSION = 200
MAX_ITERATIONS = 20
MAX_NEIGHBORS = 8


class ConfigurationError(ValueError):
    """Raised when a GenerationConfig holds values the generator cannot use."""


def _clamp(value, low, high):
    return max(low, min(high, value))


@dataclass(frozen=True)
class GenerationConfig:
    """
    Parameters for one cave generation request.

    Thresholds are counts of wall cells among the 8 Moore neighbors.
    A floor cell turns into a wall when its count reaches birth_threshold;
    a wall cell stays a wall while its count reaches death_threshold.
    """

    width: int = 100
    height: int = 100
    iterations: int = 8
    initial_wall_probability: float = 0.40
    birth_threshold: int = 5
    death_threshold: int = 2
    seed: Optional[int] = None  # None draws a fresh seed once per request
    edge_is_wall: bool = True
    connect_caves: bool = True
    min_cave_size: int = 50
    wall_tile_id: Any = 1
    floor_tile_id: Any = 0
    tile_width: int = 16  # pixels, for renderers
    tile_height: int = 16
    corridor_width: int = 1

    @classmethod
    def cave(cls, **overrides: Any) -> "GenerationConfig":
        """Dense, winding caves."""
        settings = dict(
            width=64,
            height=64,
            iterations=5,
            initial_wall_probability=0.45,
            birth_threshold=4,
            death_threshold=3,
            edge_is_wall=True,
        )
        settings.update(overrides)
        return cls(**settings)

    @classmethod
    def open_area(cls, **overrides: Any) -> "GenerationConfig":
        """Mostly open ground with scattered obstacles."""
        settings = dict(
            width=64,
            height=64,
            iterations=3,
            initial_wall_probability=0.30,
            birth_threshold=5,
            death_threshold=2,
            edge_is_wall=False,
        )
        settings.update(overrides)
        return cls(**settings)

    @classmethod
    def maze(cls, **overrides: Any) -> "GenerationConfig":
        """Tight, maze-like passages."""
        settings = dict(
            width=64,
            height=64,
            iterations=2,
            initial_wall_probability=0.50,
            birth_threshold=4,
            death_threshold=4,
            edge_is_wall=True,
        )
        settings.update(overrides)
        return cls(**settings)

    def validate(self) -> None:
        """
        Check every numeric field against its legal range.

        Raises:
            ConfigurationError: naming the first offending field
        """
        if self.width < 1 or self.height < 1:
            raise ConfigurationError(
                f"Grid dimensions must be positive, got {self.width}x{self.height}"
            )
        if self.iterations < 0:
            raise ConfigurationError(f"iterations must be >= 0, got {self.iterations}")
        if not 0.0 <= self.initial_wall_probability <= 1.0:
            raise ConfigurationError(
                "initial_wall_probability must be within [0, 1], "
                f"got {self.initial_wall_probability}"
            )
        for name in ("birth_threshold", "death_threshold"):
            value = getattr(self, name)
            if not 0 <= value <= MAX_NEIGHBORS:
                raise ConfigurationError(
                    f"{name} must be within [0, {MAX_NEIGHBORS}], got {value}"
                )
        if self.min_cave_size < 1:
            raise ConfigurationError(
                f"min_cave_size must be >= 1, got {self.min_cave_size}"
            )
        if self.tile_width < 1 or self.tile_height < 1:
            raise ConfigurationError(
                f"Tile size must be positive, got {self.tile_width}x{self.tile_height}"
            )
        if self.corridor_width < 1:
            raise ConfigurationError(
                f"corridor_width must be >= 1, got {self.corridor_width}"
            )
        if self.wall_tile_id == self.floor_tile_id:
            raise ConfigurationError(
                f"wall_tile_id and floor_tile_id must differ, both are {self.wall_tile_id!r}"
            )

    def clamped(self) -> "GenerationConfig":
        """Return a copy with every numeric field forced into its legal range."""
        return replace(
            self,
            width=_clamp(self.width, 1, MAX_DIMENSION),
            height=_clamp(self.height, 1, MAX_DIMENSION),
            iterations=_clamp(self.iterations, 0, MAX_ITERATIONS),
            initial_wall_probability=_clamp(self.initial_wall_probability, 0.0, 1.0),
            birth_threshold=_clamp(self.birth_threshold, 0, MAX_NEIGHBORS),
            death_threshold=_clamp(self.death_threshold, 0, MAX_NEIGHBORS),
            min_cave_size=max(1, self.min_cave_size),
            tile_width=max(1, self.tile_width),
            tile_height=max(1, self.tile_height),
            corridor_width=max(1, self.corridor_width),
        )


def add_config_arguments(parser: argparse.ArgumentParser) -> None:
    """Register one command-line flag per GenerationConfig field."""
    defaults = GenerationConfig()
    parser.add_argument("--width", type=int, default=defaults.width, help="Map width in tiles (1-200)")
    parser.add_argument("--height", type=int, default=defaults.height, help="Map height in tiles (1-200)")
    parser.add_argument("--iterations", type=int, default=defaults.iterations, help="Smoothing passes (0-20)")
    parser.add_argument(
        "--wall-probability",
        type=float,
        default=defaults.initial_wall_probability,
        help="Initial chance that a cell is a wall (0.0-1.0)",
    )
    parser.add_argument(
        "--birth", type=int, default=defaults.birth_threshold, help="Wall neighbors for floor to become wall (0-8)"
    )
    parser.add_argument(
        "--death", type=int, default=defaults.death_threshold, help="Wall neighbors for a wall to survive (0-8)"
    )
    parser.add_argument("--seed", "-s", type=int, default=0, help="Random seed (0 for random)")
    parser.add_argument("--open-edges", action="store_true", help="Do not treat map edges as walls")
    parser.add_argument("--no-connect", action="store_true", help="Leave disjoint caves unconnected")
    parser.add_argument(
        "--min-cave-size", type=int, default=defaults.min_cave_size, help="Smaller caves are filled in"
    )
    parser.add_argument(
        "--corridor-width", type=int, default=defaults.corridor_width, help="Width of carved corridors"
    )
    parser.add_argument(
        "--preset",
        choices=["cave", "open_area", "maze"],
        default=None,
        help="Start from a preset; explicit flags still override it",
    )


def config_from_args(args: argparse.Namespace) -> GenerationConfig:
    """
    Build a clamped config from parsed flags.

    Flags left at their defaults do not override a chosen preset.
    """
    defaults = GenerationConfig()
    flag_values = {
        "width": args.width,
        "height": args.height,
        "iterations": args.iterations,
        "initial_wall_probability": args.wall_probability,
        "birth_threshold": args.birth,
        "death_threshold": args.death,
        "min_cave_size": args.min_cave_size,
        "corridor_width": args.corridor_width,
    }
    if args.preset is None:
        base = defaults
        overrides = flag_values
    else:
        base = getattr(GenerationConfig, args.preset)()
        overrides = {
            name: value
            for name, value in flag_values.items()
            if value != getattr(defaults, name)
        }

    if args.open_edges:
        overrides["edge_is_wall"] = False
    if args.no_connect:
        overrides["connect_caves"] = False
    overrides["seed"] = args.seed if args.seed != 0 else None

    return replace(base, **overrides).clamped()
