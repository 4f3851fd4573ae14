"""
Command line entry point.

Usage:
    python -m simcore                       # short MD run with defaults
    python -m simcore --config run.cfg      # MD run from a config file
    python -m simcore --example heat2d      # built-in demos
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence

from . import simulate
from .engines import Simulation, SimulationParams
from .io import load_config
from .logging_config import setup_logging
from .system import Lattice

logger = logging.getLogger("simcore.cli")

EXAMPLES = ("lattice", "heat", "heat2d", "argon")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="simcore", description="Run molecular dynamics or heat diffusion."
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a key=value MD configuration file.",
    )
    parser.add_argument(
        "--example",
        choices=EXAMPLES,
        default=None,
        help="Run a built-in example instead of an MD run.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging verbosity (default: INFO).",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Optional file to copy log output to.",
    )
    return parser.parse_args(argv)


def run_lattice_example() -> int:
    lattice = Lattice()
    logger.info("Lattice volume (default cubic 1 m): %g m^3", lattice.volume)
    frac = Lattice.min_image_frac([0.7, -0.3, 0.1])
    logger.info("Min-image frac: %g, %g, %g", *frac)
    return 0


def run_heat_example() -> int:
    result = simulate.heat_rod()
    if not result.ok:
        logger.error("Error: %s", result.error_message)
        return 1
    logger.info(
        "Peak temperature %.2f K after %d steps",
        result.temperature_field.max(),
        result.n_steps,
    )
    return 0


def run_heat2d_example() -> int:
    result = simulate.heat_plate(nx=40, ny=40, n_steps=200)
    if not result.ok:
        logger.error("Error: %s", result.error_message)
        return 1
    logger.info(
        "Centre temperature %.1f K at t=%g s",
        result.temperature_field[20, 20],
        result.final_time,
    )
    return 0


def run_argon_example() -> int:
    result = simulate.argon_gas()
    if not result.ok:
        logger.error("Error: %s", result.error_message)
        return 1
    return 0


def run_default(params: SimulationParams) -> int:
    sim = Simulation(params)
    if not sim.is_valid:
        logger.error("Error: %s", sim.error_message)
        return 1
    logger.info(
        "Running simulation: dt=%g s, end_time=%g s, max_steps=%d",
        params.dt,
        params.end_time,
        params.max_steps,
    )
    sim.run()
    if sim.error_message:
        logger.error(
            "Stopped. t=%g s, steps=%d, error: %s",
            sim.time,
            sim.step_count,
            sim.error_message,
        )
        return 1
    logger.info("Done. t=%g s, steps=%d", sim.time, sim.step_count)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """
    Run the command line interface.

    Returns:
        Process exit code (1 on configuration or run errors).
    """
    args = parse_args(argv)
    setup_logging(getattr(logging, args.log_level), args.log_file)

    if args.example == "lattice":
        return run_lattice_example()
    if args.example == "heat":
        return run_heat_example()
    if args.example == "heat2d":
        return run_heat2d_example()
    if args.example == "argon":
        return run_argon_example()

    if args.config is not None:
        result = load_config(args.config)
        if not result.ok:
            logger.error("Config error: %s", result.error)
            return 1
        params = result.params
    else:
        params = SimulationParams()
        params.end_time = 2.0 * params.dt
        params.max_steps = 1000
    return run_default(params)


if __name__ == "__main__":
    raise SystemExit(main())
