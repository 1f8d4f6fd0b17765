from __future__ import annotations

import argparse

from ..synthgen.generate import SimulationConfig


def add_simulation_arguments(parser: argparse.ArgumentParser) -> None:
    defaults = SimulationConfig()
    group = parser.add_argument_group("simulation")
    group.add_argument(
        "--n",
        type=int,
        default=defaults.n,
        help="Number of observations (default: %(default)s).",
    )
    group.add_argument(
        "--x-low",
        type=float,
        default=defaults.x_low,
        help="Lower bound of the explanatory variable (default: %(default)s).",
    )
    group.add_argument(
        "--x-high",
        type=float,
        default=defaults.x_high,
        help="Upper bound of the explanatory variable (default: %(default)s).",
    )
    group.add_argument(
        "--a-true",
        type=float,
        default=defaults.a_true,
        help="True intercept (default: %(default)s).",
    )
    group.add_argument(
        "--b-true",
        type=float,
        default=defaults.b_true,
        help="True slope (default: %(default)s).",
    )
    group.add_argument(
        "--seed",
        type=int,
        default=defaults.seed,
        help="Random seed (default: %(default)s).",
    )


def simulation_config_from_args(args: argparse.Namespace) -> SimulationConfig:
    return SimulationConfig(
        n=int(args.n),
        x_low=float(args.x_low),
        x_high=float(args.x_high),
        a_true=float(args.a_true),
        b_true=float(args.b_true),
        seed=args.seed,
    )
