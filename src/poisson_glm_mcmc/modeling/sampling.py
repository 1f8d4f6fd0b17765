# poisson_glm_mcmc/modeling/sampling.py
from __future__ import annotations

from typing import Any, Dict

try:
    import pymc as pm
except Exception:  # pragma: no cover
    pm = None  # type: ignore

from ..logger import get_logger

log = get_logger(__name__)

DEFAULT_SAMPLING: Dict[str, Any] = dict(
    draws=20000, tune=5000, chains=3, cores=1, target_accept=0.9, progressbar=False
)


def sample_posterior(model, **overrides):
    """
    Sample the posterior using package defaults, allowing test-time overrides.

    An override set to ``None`` removes that key from the defaults, e.g.
    ``target_accept=None`` for step methods other than NUTS.

    Returns
    -------
    arviz.InferenceData
    """
    if pm is None:
        raise RuntimeError("PyMC is not installed in this environment.")
    kw = {**getattr(model, "default_sampling_kwargs", DEFAULT_SAMPLING), **overrides}
    kw = {k: v for k, v in kw.items() if v is not None}
    log.info(
        "Sampling %s chains x %s draws (tune=%s)",
        kw.get("chains"),
        kw.get("draws"),
        kw.get("tune"),
    )
    with model:
        return pm.sample(**kw)


def sample_prior_predictive(model, samples: int = 200, random_seed: int = 42):
    """
    Draw prior predictive samples (fast smoke tests / quick sanity).

    Returns
    -------
    arviz.InferenceData
    """
    if pm is None:
        raise RuntimeError("PyMC is not installed in this environment.")
    with model:
        return pm.sample_prior_predictive(draws=samples, random_seed=random_seed)


def apply_thinning(idata, thin: int):
    """Keep every ``thin``-th draw of each chain in every group that has a draw dim.

    Draw coordinates keep their original iteration labels.
    """
    thin = int(thin)
    if thin < 1:
        raise ValueError("`thin` must be >= 1.")
    if thin == 1:
        return idata
    return idata.sel(draw=slice(None, None, thin))
