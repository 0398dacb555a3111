"""Entry point for the Chaos Pendulums application.

Keys: S spawn one, W spawn ten, R reset, A trails, P pendulums, D damping.
"""

import argparse
import logging
import sys

from runner import SimulationRunner
from simulation import SimulationConfig


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Real-time simulation of independent double pendulums.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for spawn angles and colors (default: random)",
    )
    parser.add_argument(
        "--spawn",
        type=int,
        default=0,
        help="Number of pendulums to spawn at startup (default: 0)",
    )
    parser.add_argument(
        "--dt",
        type=float,
        default=SimulationConfig.dt,
        help="Fixed physics timestep in seconds (default: 1/64)",
    )
    parser.add_argument(
        "--damping",
        action="store_true",
        help="Start with damping enabled",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    return parser.parse_args(argv)


def build_runner(args):
    """Create a SimulationRunner from parsed CLI arguments."""
    config = SimulationConfig(dt=args.dt, damping_enabled=args.damping)
    runner = SimulationRunner(config, seed=args.seed)
    if args.spawn:
        runner.spawn_many(args.spawn)
    return runner


def main():
    args = parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    from PyQt6.QtWidgets import QApplication

    from app_window import AppWindow

    runner = build_runner(args)

    app = QApplication(sys.argv)
    window = AppWindow(runner)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
