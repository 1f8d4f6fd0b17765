from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List

from ..io.datasets import read_observations
from ..modeling.config import PriorConfig, SamplerConfig
from ..modeling.pymc_poisson import STRATEGIES, make_strategy
from ..pipeline import PipelineResult, format_report, run_pipeline
from ..reporting.plots import (
    plot_autocorrelation,
    plot_posterior_pairs,
    plot_predictive_intervals,
    plot_rhat,
    plot_traces,
    save_figure,
)
from ._common import add_simulation_arguments, simulation_config_from_args


def build_parser() -> argparse.ArgumentParser:
    defaults = SamplerConfig()
    priors = PriorConfig()
    parser = argparse.ArgumentParser(
        prog="poisson-glm-mcmc fit",
        description="Fit the Bayesian Poisson regression and report posterior summaries.",
    )
    parser.add_argument(
        "--data",
        help="Parquet/CSV file with x and y columns; simulate when omitted.",
    )
    add_simulation_arguments(parser)
    parser.add_argument(
        "--prior-tau",
        type=float,
        default=priors.a_tau,
        help="Normal prior precision for a and b (default: %(default)s).",
    )
    parser.add_argument(
        "--chains",
        type=int,
        default=defaults.chains,
        help="Number of chains (default: %(default)s).",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=defaults.iterations,
        help="Iterations per chain including burn-in (default: %(default)s).",
    )
    parser.add_argument(
        "--burn-in",
        type=int,
        default=defaults.burn_in,
        help="Burn-in iterations per chain (default: %(default)s).",
    )
    parser.add_argument(
        "--thin",
        type=int,
        default=defaults.thin,
        help="Keep every k-th post-burn-in draw (default: %(default)s).",
    )
    parser.add_argument(
        "--cores",
        type=int,
        default=defaults.cores,
        help="Parallel cores for sampling (default: %(default)s).",
    )
    parser.add_argument(
        "--target-accept",
        type=float,
        default=defaults.target_accept,
        help="NUTS target_accept setting (default: %(default)s).",
    )
    parser.add_argument(
        "--sampler",
        choices=sorted(STRATEGIES),
        default="nuts",
        help="Inference backend to use (default: %(default)s).",
    )
    parser.add_argument(
        "--variational-steps",
        type=int,
        default=20000,
        help="Gradient steps for ADVI when using --sampler=advi.",
    )
    parser.add_argument(
        "--keep-first",
        action="store_true",
        help="Keep the first retained draw of every chain when pooling.",
    )
    parser.add_argument(
        "--interval-prob",
        type=float,
        default=0.95,
        help="Credible/predictive interval mass (default: %(default)s).",
    )
    parser.add_argument(
        "--progressbar",
        action="store_true",
        help="Show the sampler progress bar.",
    )
    parser.add_argument(
        "--outdir",
        help="Directory for plots; no plots are written when omitted.",
    )
    parser.add_argument(
        "--plot-format",
        choices=("html", "png"),
        default="html",
        help="Plot file format (default: %(default)s).",
    )
    parser.add_argument(
        "--summary",
        help="Optional path to write a JSON run summary.",
    )
    return parser


def _write_plots(result: PipelineResult, outdir: Path, fmt: str) -> List[Path]:
    figures = {
        "predictive_intervals": plot_predictive_intervals(
            result.predictive_summary, prob=result.interval_prob
        ),
        "traces": plot_traces(result.idata),
        "autocorrelation": plot_autocorrelation(result.idata),
        "posterior_pairs": plot_posterior_pairs(result.draws, truth=result.truth),
        "rhat": plot_rhat(result.rhat),
    }
    return [save_figure(fig, outdir / f"{name}.{fmt}") for name, fig in figures.items()]


def _summary_payload(
    result: PipelineResult, args: argparse.Namespace, plots: List[Path]
) -> Dict[str, Any]:
    return {
        "n_obs": len(result.observations),
        "n_draws": len(result.draws),
        "sampler": args.sampler,
        "posterior": result.posterior.to_dicts(),
        "hdi": {k: list(v) for k, v in result.hdi.items()},
        "rhat": result.rhat,
        "ess": result.ess,
        "correlation": result.correlation.to_dicts(),
        "coverage": float(result.predictive_summary["covered"].mean()),
        "converged": bool(result.converged),
        "truth": result.truth,
        "plots": [str(p.resolve()) for p in plots],
    }


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    sampler_config = SamplerConfig(
        chains=int(args.chains),
        iterations=int(args.iterations),
        burn_in=int(args.burn_in),
        thin=int(args.thin),
        cores=int(args.cores),
        target_accept=float(args.target_accept),
        random_seed=args.seed,
        progressbar=bool(args.progressbar),
        drop_first=not args.keep_first,
    )
    prior_config = PriorConfig(a_tau=float(args.prior_tau), b_tau=float(args.prior_tau))

    strategy_kwargs: Dict[str, Any] = {"default_target_accept": float(args.target_accept)}
    if args.sampler == "advi":
        strategy_kwargs["fit_steps"] = int(args.variational_steps)

    try:
        sim_config = simulation_config_from_args(args)
        observations = read_observations(args.data) if args.data else None
        result = run_pipeline(
            sim_config,
            prior_config,
            sampler_config,
            strategy=make_strategy(args.sampler, **strategy_kwargs),
            observations=observations,
            interval_prob=float(args.interval_prob),
        )
    except (ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(format_report(result))

    plots: List[Path] = []
    if args.outdir:
        plots = _write_plots(result, Path(args.outdir), args.plot_format)

    if args.summary:
        dst = Path(args.summary)
        dst.parent.mkdir(parents=True, exist_ok=True)
        dst.write_text(
            json.dumps(_summary_payload(result, args, plots), indent=2),
            encoding="utf-8",
        )

    print("[fit] completed", json.dumps({"n_draws": len(result.draws)}))
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
