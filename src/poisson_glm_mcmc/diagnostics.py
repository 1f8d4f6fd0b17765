from __future__ import annotations

from typing import Dict, Iterable, Mapping, Optional

import arviz as az
import numpy as np
import polars as pl

from .logger import get_logger
from .postprocess.chains import MergedDraws
from .types import Interval

log = get_logger(__name__)

PARAMS = ("a", "b")


def _collect_scalar(ds, var_names: Iterable[str]) -> Dict[str, float]:
    out: Dict[str, float] = {}
    for name in var_names:
        if name in ds:
            out[name] = float(np.asarray(ds[name].values).max())
    return out


def compute_rhat(
    idata: az.InferenceData, var_names: Optional[Iterable[str]] = None
) -> Dict[str, float]:
    """Compute R-hat (Gelman-Rubin) diagnostics for selected variables.

    Prefers the ArviZ summary (r_hat column) with a fallback to az.rhat.
    Returns a mapping var_name -> r_hat. Vector variables report their worst
    element. Single-chain posteriors yield NaN.
    """
    names = list(var_names) if var_names else list(PARAMS)
    out: Dict[str, float] = {}
    try:
        smry = az.summary(idata, var_names=names, kind="diagnostics")
        if "r_hat" in smry.columns:
            for idx, val in smry["r_hat"].items():
                base = str(idx).split("[")[0]
                if val is not None and np.isfinite(val):
                    out[base] = max(out.get(base, 0.0), float(val))
    except (KeyError, ValueError) as exc:
        log.debug("az.summary failed, falling back to az.rhat: %s", exc)

    missing = [n for n in names if n not in out]
    if missing:
        ds = az.rhat(idata, var_names=missing)
        out.update(_collect_scalar(ds, missing))
    for name in names:
        out.setdefault(name, float("nan"))
    return out


def compute_ess(
    idata: az.InferenceData,
    var_names: Optional[Iterable[str]] = None,
    method: str = "bulk",
) -> Dict[str, float]:
    """Effective sample size per variable (``az.ess``)."""
    names = list(var_names) if var_names else list(PARAMS)
    ds = az.ess(idata, var_names=names, method=method)
    return _collect_scalar(ds, names)


def compute_hdi(draws: MergedDraws, prob: float = 0.95) -> Dict[str, Interval]:
    """Highest-posterior-density interval per parameter via ``az.hdi``."""
    out: Dict[str, Interval] = {}
    for name, values in draws.as_dict().items():
        lo, hi = az.hdi(np.asarray(values), hdi_prob=prob)
        out[name] = (float(lo), float(hi))
    return out


def posterior_summary(draws: MergedDraws, prob: float = 0.95) -> pl.DataFrame:
    """
    Posterior mean, sd and equal-tailed credible interval per parameter.

    Returns
    -------
    polars.DataFrame
        Columns ``param, mean, sd, lower, upper, hdi_lower, hdi_upper``.
    """
    if not 0.0 < prob < 1.0:
        raise ValueError("`prob` must lie strictly between 0 and 1.")
    tail = (1.0 - prob) / 2.0
    hdi = compute_hdi(draws, prob=prob)
    rows = []
    for name, values in draws.as_dict().items():
        lo, hi = np.quantile(values, [tail, 1.0 - tail])
        rows.append(
            {
                "param": name,
                "mean": float(np.mean(values)),
                "sd": float(np.std(values, ddof=1)) if values.size > 1 else 0.0,
                "lower": float(lo),
                "upper": float(hi),
                "hdi_lower": hdi[name][0],
                "hdi_upper": hdi[name][1],
            }
        )
    return pl.DataFrame(rows)


def posterior_correlation(draws: MergedDraws) -> pl.DataFrame:
    """Pairwise correlation matrix of the pooled draws."""
    names = list(draws.as_dict())
    corr = np.corrcoef(np.vstack([draws.a, draws.b]))
    return pl.DataFrame(
        {"param": names, **{n: corr[:, i] for i, n in enumerate(names)}}
    )


def convergence_ok(rhat: Mapping[str, float], threshold: float = 1.01) -> bool:
    """True when every R-hat is finite and below ``threshold``.

    A missing (NaN) R-hat counts as a failure since mixing cannot be checked.
    Parameters that miss the bar are logged; nothing is raised.
    """
    ok = bool(rhat)
    for name, value in rhat.items():
        if not np.isfinite(value):
            log.warning("R-hat for '%s' unavailable (single chain?)", name)
            ok = False
            continue
        if value > threshold:
            log.warning(
                "Chains have not mixed for '%s': r_hat=%.4f > %.3f",
                name,
                value,
                threshold,
            )
            ok = False
    return ok
