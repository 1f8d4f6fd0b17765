from __future__ import annotations

from typing import Tuple

import numpy as np
import polars as pl

from ..synthgen.generate import Observations
from ..types import Floats
from ..utils import exp
from ..utils._math import linear_predictor
from .chains import MergedDraws

__all__ = [
    "simulate_posterior_predictive",
    "predictive_intervals",
    "plugin_mean_curve",
    "summarize_predictive",
]


def _as_1d(values: Floats, name: str) -> np.ndarray:
    arr = np.asarray(values, dtype=float)
    if arr.ndim != 1:
        raise ValueError(f"`{name}` must be 1-D.")
    return arr


def simulate_posterior_predictive(
    a: Floats,
    b: Floats,
    x_centered: Floats,
    *,
    rng: np.random.Generator | None = None,
    seed: int | None = None,
) -> np.ndarray:
    """
    Draw one Poisson count per (posterior draw, observation) pair.

    Returns
    -------
    numpy.ndarray
        Integer matrix of shape ``(len(a), len(x_centered))`` where cell
        ``(i, j)`` ~ Poisson(exp(a_i + b_i * x_j)).
    """
    a_arr = _as_1d(a, "a")
    b_arr = _as_1d(b, "b")
    x_arr = _as_1d(x_centered, "x_centered")
    if a_arr.shape != b_arr.shape:
        raise ValueError("`a` and `b` must hold the same number of draws.")
    if a_arr.size == 0:
        raise ValueError("At least one posterior draw is required.")

    generator = rng if rng is not None else np.random.default_rng(seed)
    rate = exp(linear_predictor(a_arr, b_arr, x_arr))
    return generator.poisson(rate).astype(np.int64)


def predictive_intervals(
    matrix: np.ndarray, *, prob: float = 0.95
) -> Tuple[np.ndarray, np.ndarray]:
    """Per-column central interval bounds of a ``(draws, observations)`` matrix.

    Uses the inverted-CDF quantile definition so each bound is an observed
    count; bounds come back as int64 with ``lower <= upper``.
    """
    if not 0.0 < prob < 1.0:
        raise ValueError("`prob` must lie strictly between 0 and 1.")
    arr = np.asarray(matrix)
    if arr.ndim != 2 or arr.shape[0] == 0:
        raise ValueError("`matrix` must be a non-empty 2-D (draws, observations) array.")
    tail = (1.0 - prob) / 2.0
    lower, upper = np.quantile(arr, [tail, 1.0 - tail], axis=0, method="inverted_cdf")
    return lower.astype(np.int64), upper.astype(np.int64)


def plugin_mean_curve(a: Floats, b: Floats, x_centered: Floats) -> np.ndarray:
    """Rate curve at the posterior-mean parameters: ``exp(mean(a) + mean(b) * x)``."""
    a_bar = float(np.mean(_as_1d(a, "a")))
    b_bar = float(np.mean(_as_1d(b, "b")))
    return np.asarray(
        exp(linear_predictor(a_bar, b_bar, _as_1d(x_centered, "x_centered"))),
        dtype=float,
    )


def summarize_predictive(
    obs: Observations,
    draws: MergedDraws,
    matrix: np.ndarray,
    *,
    prob: float = 0.95,
) -> pl.DataFrame:
    """One row per observation with fitted curve and predictive interval.

    Columns: ``x, x_centered, y, mu_true, fitted, lower, upper, covered``.
    """
    if matrix.shape != (len(draws), len(obs)):
        raise ValueError(
            f"Predictive matrix shape {matrix.shape} does not match "
            f"({len(draws)}, {len(obs)})."
        )
    lower, upper = predictive_intervals(matrix, prob=prob)
    fitted = plugin_mean_curve(draws.a, draws.b, obs.x_centered)
    return pl.DataFrame(
        {
            "x": obs.x,
            "x_centered": obs.x_centered,
            "y": obs.y,
            "mu_true": obs.mu_true,
            "fitted": fitted,
            "lower": lower,
            "upper": upper,
        }
    ).with_columns(
        ((pl.col("y") >= pl.col("lower")) & (pl.col("y") <= pl.col("upper"))).alias(
            "covered"
        )
    )
