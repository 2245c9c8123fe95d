"""Entry point for ``python -m formicarium``.

Loads the YAML config (falling back to defaults when the file is
missing), builds the simulation, and either opens a Pygame window to
watch the ants forage or runs headless until all the food is home.
"""

from __future__ import annotations

import argparse
import logging
import pathlib
import sys

from formicarium.simulation.config import SimulationConfig
from formicarium.simulation.engine import Simulation

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)


def build_parser() -> argparse.ArgumentParser:
    """Return the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="formicarium",
        description="Formicarium - ant colony foraging by stigmergy",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Run without a window and print the generation count",
    )
    parser.add_argument(
        "--max-generations",
        type=int,
        default=None,
        help="Give up after this many generations (headless only)",
    )
    parser.add_argument(
        "--cell-size",
        type=int,
        default=25,
        help="Pixel size per grid cell (default: 25)",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=30,
        help="Target frames per second (default: 30)",
    )
    parser.add_argument(
        "--speed",
        type=float,
        default=24.0,
        help="Simulation generations per second (default: 24)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )
    return parser


def load_config(path: pathlib.Path) -> SimulationConfig:
    """Load the config file, or the built-in defaults if it is missing."""
    try:
        return SimulationConfig.from_yaml(path)
    except FileNotFoundError:
        logger.warning("Config %s not found, using default configuration", path)
        return SimulationConfig()


def run_headless(simulation: Simulation, max_generations: int | None) -> int:
    """Run to completion and return a process exit code."""
    generation = simulation.run(max_generations)
    if not simulation.is_simulation_over():
        logger.error("Timeout after %d generations", generation)
        return 1
    print(
        f"Simulation over after {generation} generations "
        f"with {len(simulation.ants)} ants",
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    """Parse CLI args, create the simulation, run it."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    logger.info("Parsing configuration from %s", args.config)
    config = load_config(args.config)

    with Simulation(config=config) as simulation:
        if args.headless:
            return run_headless(simulation, args.max_generations)

        from formicarium.ui.pygame_client import PygameRenderer

        renderer = PygameRenderer(
            simulation=simulation,
            cell_size=args.cell_size,
            generations_per_second=args.speed,
        )
        renderer.run(fps=args.fps)
    return 0


if __name__ == "__main__":
    sys.exit(main())
