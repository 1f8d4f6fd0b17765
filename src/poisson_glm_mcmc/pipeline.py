"""
End-to-end simulate -> sample -> post-process run.

Each stage consumes the previous stage's complete output; nothing is shared
between runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import numpy as np
import polars as pl

from .diagnostics import (
    compute_ess,
    compute_hdi,
    compute_rhat,
    convergence_ok,
    posterior_correlation,
    posterior_summary,
)
from .logger import get_logger
from .modeling.config import PriorConfig, SamplerConfig
from .modeling.pymc_poisson import PymcNUTSStrategy
from .modeling.strategies import PosteriorSamplerStrategy
from .postprocess.chains import MergedDraws, merge_chains, trim_leading_draws
from .postprocess.predictive import simulate_posterior_predictive, summarize_predictive
from .synthgen.generate import Observations, SimulationConfig, simulate_observations
from .types import Interval

log = get_logger(__name__)

__all__ = ["PipelineResult", "run_pipeline", "format_report"]


@dataclass
class PipelineResult:
    observations: Observations
    idata: Any
    draws: MergedDraws
    predictive: np.ndarray
    predictive_summary: pl.DataFrame
    posterior: pl.DataFrame
    hdi: Dict[str, Interval]
    rhat: Dict[str, float]
    ess: Dict[str, float]
    correlation: pl.DataFrame
    converged: bool
    interval_prob: float = 0.95
    truth: Dict[str, float] = field(default_factory=dict)
    model: Any = None

    def posterior_mean(self, name: str) -> float:
        row = self.posterior.filter(pl.col("param") == name)
        if row.height == 0:
            raise KeyError(name)
        return float(row["mean"][0])


def run_pipeline(
    sim_config: SimulationConfig | None = None,
    prior_config: PriorConfig | None = None,
    sampler_config: SamplerConfig | None = None,
    *,
    strategy: PosteriorSamplerStrategy | None = None,
    observations: Observations | None = None,
    interval_prob: float = 0.95,
    ppc_seed: Optional[int] = None,
    rhat_threshold: float = 1.01,
) -> PipelineResult:
    """
    Run the full Poisson regression workflow.

    Parameters
    ----------
    sim_config
        Settings for the simulated data; ignored when ``observations`` is given.
    prior_config
        Priors on ``a`` and ``b``.
    sampler_config
        Chains, iterations, burn-in, thinning and the first-draw drop.
    strategy
        Inference backend; NUTS when omitted.
    observations
        Pre-built observations (e.g. loaded from disk) to fit instead of simulating.
    interval_prob
        Mass of the credible and predictive intervals.
    ppc_seed
        Seed for the posterior predictive Poisson draws.
    rhat_threshold
        R-hat above which a parameter is reported as not converged.
    """
    sim_config = sim_config or SimulationConfig()
    prior_config = prior_config or PriorConfig()
    sampler_config = sampler_config or SamplerConfig()
    strategy = strategy or PymcNUTSStrategy(
        default_target_accept=sampler_config.target_accept
    )

    prior_config.validate()
    sampler_config.validate()

    if observations is None:
        obs = simulate_observations(sim_config)
        truth = {"a": float(sim_config.a_true), "b": float(sim_config.b_true)}
    else:
        obs = observations
        truth = {}

    model = strategy.build_model(
        y=np.array(obs.y), x_centered=np.array(obs.x_centered), priors=prior_config
    )
    idata = strategy.sample_posterior(model, sampler_config)

    drop = 1 if sampler_config.drop_first else 0
    draws = merge_chains(idata, drop_first=drop)
    kept = trim_leading_draws(idata, drop)

    rhat = compute_rhat(kept, var_names=["a", "b"])
    ess = compute_ess(kept, var_names=["a", "b"])
    converged = convergence_ok(rhat, threshold=rhat_threshold)

    seed = ppc_seed if ppc_seed is not None else sim_config.seed
    matrix = simulate_posterior_predictive(
        draws.a, draws.b, obs.x_centered, rng=np.random.default_rng(seed)
    )
    summary = summarize_predictive(obs, draws, matrix, prob=interval_prob)

    log.info(
        "Pipeline finished: %d pooled draws, predictive coverage %.3f",
        len(draws),
        float(summary["covered"].mean()),
    )
    return PipelineResult(
        observations=obs,
        idata=kept,
        draws=draws,
        predictive=matrix,
        predictive_summary=summary,
        posterior=posterior_summary(draws, prob=interval_prob),
        hdi=compute_hdi(draws, prob=interval_prob),
        rhat=rhat,
        ess=ess,
        correlation=posterior_correlation(draws),
        converged=converged,
        interval_prob=interval_prob,
        truth=truth,
        model=model,
    )


def format_report(result: PipelineResult) -> str:
    """Render the printed numeric summaries of a run."""
    pct = f"{result.interval_prob:.0%}"
    lines = [
        f"Observations: {len(result.observations)}  "
        f"pooled draws: {len(result.draws)} "
        f"({result.draws.n_chains} chains x "
        f"{result.draws.draws_per_chain - result.draws.dropped_per_chain})",
        "",
        f"{'param':<6}{'mean':>10}{'sd':>10}  {pct + ' CI':<22}{pct + ' HDI':<22}"
        f"{'r_hat':>8}{'ess':>9}",
    ]
    for row in result.posterior.iter_rows(named=True):
        name = row["param"]
        ci = f"[{row['lower']:.3f}, {row['upper']:.3f}]"
        hdi = f"[{row['hdi_lower']:.3f}, {row['hdi_upper']:.3f}]"
        lines.append(
            f"{name:<6}{row['mean']:>10.3f}{row['sd']:>10.3f}  {ci:<22}{hdi:<22}"
            f"{result.rhat.get(name, float('nan')):>8.3f}"
            f"{result.ess.get(name, float('nan')):>9.0f}"
        )
    if result.truth:
        truth = ", ".join(f"{k}={v:g}" for k, v in result.truth.items())
        lines.append(f"true values: {truth}")
    lines.append("")
    lines.append("posterior correlation:")
    for row in result.correlation.iter_rows(named=True):
        lines.append(f"  {row['param']:<4}{row['a']:>8.3f}{row['b']:>8.3f}")
    coverage = float(result.predictive_summary["covered"].mean())
    lines.append("")
    lines.append(f"{pct} predictive interval coverage: {coverage:.3f}")
    if not any(np.isfinite(v) for v in result.rhat.values()):
        lines.append("converged: unavailable (R-hat needs at least two chains)")
    else:
        lines.append("converged: " + ("yes" if result.converged else "NO"))
    return "\n".join(lines)
