from __future__ import annotations

import argparse
import sys
from typing import List

from ..io.datasets import write_observations
from ..synthgen.generate import simulate_observations
from ._common import add_simulation_arguments, simulation_config_from_args


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="poisson-glm-mcmc simulate",
        description="Simulate Poisson regression counts and write them to Parquet.",
    )
    add_simulation_arguments(parser)
    parser.add_argument(
        "--out",
        default="observations.parquet",
        help="Output Parquet file (default: %(default)s).",
    )
    return parser


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        obs = simulate_observations(simulation_config_from_args(args))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    path = write_observations(obs, args.out)
    print(f"Simulated {len(obs)} observations written to {path}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
