from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict

import numpy as np
import polars as pl

from ..logger import get_logger
from ..utils import exp
from ..utils._math import linear_predictor

log = get_logger(__name__)

__all__ = [
    "SimulationConfig",
    "Observations",
    "simulate_observations",
    "observations_to_frame",
    "observations_from_frame",
]


@dataclass
class SimulationConfig:
    """Generative settings for the synthetic Poisson regression data."""

    n: int = 100
    x_low: float = 5.0
    x_high: float = 8.0
    a_true: float = 2.5
    b_true: float = -1.1
    seed: int | None = 42

    def validate(self) -> None:
        if int(self.n) < 1:
            raise ValueError("n must be >= 1")
        for name in ("x_low", "x_high", "a_true", "b_true"):
            if not math.isfinite(float(getattr(self, name))):
                raise ValueError(f"{name} must be finite")
        if self.x_low >= self.x_high:
            raise ValueError("x_low must be strictly less than x_high")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Observations:
    x: np.ndarray
    x_centered: np.ndarray
    mu_true: np.ndarray
    y: np.ndarray

    def __len__(self) -> int:
        return int(self.y.shape[0])

    @property
    def x_mean(self) -> float:
        return float(np.mean(self.x))


def _freeze(arr: np.ndarray) -> np.ndarray:
    arr.setflags(write=False)
    return arr


def simulate_observations(
    config: SimulationConfig | None = None, **overrides: Any
) -> Observations:
    """
    Simulate count data from ``y ~ Poisson(exp(a_true + b_true * x_centered))``.

    Parameters
    ----------
    config
        Simulation settings; package defaults when omitted.
    **overrides
        Field overrides applied on top of ``config`` (e.g. ``n=50, seed=1``).

    Returns
    -------
    Observations
        Sorted explanatory values, their centered version, the true rate and the
        simulated counts. Arrays are read-only.

    Notes
    -----
    The explanatory values are sorted before centering so downstream interval
    curves can be drawn directly against ``x_centered``.
    """
    base = asdict(config) if config is not None else {}
    cfg = SimulationConfig(**{**base, **overrides})
    cfg.validate()

    rng = np.random.default_rng(cfg.seed)
    x = np.sort(rng.uniform(cfg.x_low, cfg.x_high, size=int(cfg.n)))
    x_centered = x - x.mean()
    mu_true = exp(linear_predictor(cfg.a_true, cfg.b_true, x_centered))
    y = rng.poisson(mu_true).astype(np.int64)

    log.info(
        "Simulated %d observations (a_true=%.3f, b_true=%.3f, mean count=%.2f)",
        cfg.n,
        cfg.a_true,
        cfg.b_true,
        float(y.mean()),
    )
    return Observations(
        x=_freeze(x),
        x_centered=_freeze(x_centered),
        mu_true=_freeze(np.asarray(mu_true, dtype=float)),
        y=_freeze(y),
    )


def observations_to_frame(obs: Observations) -> pl.DataFrame:
    return pl.DataFrame(
        {
            "x": obs.x,
            "x_centered": obs.x_centered,
            "mu_true": obs.mu_true,
            "y": obs.y,
        }
    )


def observations_from_frame(df: pl.DataFrame | pl.LazyFrame) -> Observations:
    """Rebuild observations from a frame with at least ``x`` and ``y`` columns.

    ``x_centered`` is recomputed from ``x``; ``mu_true`` is NaN when the frame
    does not carry it (e.g. real data).
    """
    data = df.collect() if isinstance(df, pl.LazyFrame) else df
    missing = {"x", "y"} - set(data.columns)
    if missing:
        raise ValueError(f"Observation data missing required columns: {sorted(missing)}")

    data = data.sort("x")
    x = data["x"].cast(pl.Float64).to_numpy().copy()
    y_raw = data["y"].to_numpy()
    if not np.all(np.isfinite(y_raw)) or np.any(y_raw != np.round(y_raw)):
        raise ValueError("`y` must contain integer counts.")
    y = y_raw.astype(np.int64)
    if "mu_true" in data.columns:
        mu_true = data["mu_true"].cast(pl.Float64).to_numpy().copy()
    else:
        mu_true = np.full(x.shape, np.nan)
    return Observations(
        x=_freeze(x),
        x_centered=_freeze(x - x.mean()),
        mu_true=_freeze(mu_true),
        y=_freeze(y),
    )
