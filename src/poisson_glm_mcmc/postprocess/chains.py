from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Sequence

import numpy as np
import polars as pl

from ..logger import get_logger

log = get_logger(__name__)

__all__ = ["MergedDraws", "merge_chains", "trim_leading_draws"]


@dataclass(frozen=True)
class MergedDraws:
    """Flat, exchangeable posterior draws pooled across chains."""

    a: np.ndarray
    b: np.ndarray
    n_chains: int
    draws_per_chain: int
    dropped_per_chain: int

    def __len__(self) -> int:
        return int(self.a.shape[0])

    def as_dict(self) -> Dict[str, np.ndarray]:
        return {"a": self.a, "b": self.b}

    def to_frame(self) -> pl.DataFrame:
        return pl.DataFrame({"a": self.a, "b": self.b})


def _chain_matrix(posterior, name: str) -> np.ndarray:
    if name not in posterior:
        raise ValueError(f"posterior is missing variable '{name}'.")
    da = posterior[name]
    extra = [d for d in da.dims if d not in ("chain", "draw")]
    if extra:
        raise ValueError(f"'{name}' must be scalar per draw; found extra dims {extra}.")
    return np.asarray(da.transpose("chain", "draw").values, dtype=float)


def merge_chains(
    idata,
    *,
    drop_first: int = 1,
    var_names: Sequence[str] = ("a", "b"),
) -> MergedDraws:
    """
    Pool per-chain posterior draws after discarding each chain's leading draws.

    Parameters
    ----------
    idata
        InferenceData (or anything exposing ``.posterior`` with chain/draw dims).
    drop_first
        Number of leading retained draws removed from every chain before
        pooling. The default of one discards the anomalous first draw some
        samplers emit right after burn-in.
    var_names
        Intercept and slope variable names, in that order.

    Returns
    -------
    MergedDraws
        ``len == n_chains * (draws_per_chain - drop_first)``; chain 0 draws come
        first, followed by chain 1 and so on.
    """
    if "posterior" not in idata.groups():
        raise ValueError("InferenceData does not contain a 'posterior' group.")
    drop = int(drop_first)
    if drop < 0:
        raise ValueError("`drop_first` must be >= 0.")

    a_name, b_name = var_names
    posterior = idata.posterior
    a_mat = _chain_matrix(posterior, a_name)
    b_mat = _chain_matrix(posterior, b_name)

    n_chains, n_draws = a_mat.shape
    if n_draws - drop < 1:
        raise ValueError(
            f"Cannot drop {drop} draw(s) from chains holding only {n_draws} draw(s)."
        )

    a = a_mat[:, drop:].reshape(-1)
    b = b_mat[:, drop:].reshape(-1)
    log.info(
        "Merged %d chains x %d draws (dropped %d per chain) -> %d draws",
        n_chains,
        n_draws,
        drop,
        a.shape[0],
    )
    return MergedDraws(
        a=a,
        b=b,
        n_chains=int(n_chains),
        draws_per_chain=int(n_draws),
        dropped_per_chain=drop,
    )


def trim_leading_draws(idata, drop_first: int = 1):
    """Return ``idata`` without the first ``drop_first`` draws of every chain.

    Used so chain-aware diagnostics (R-hat, ESS, traces) see the same draws
    that :func:`merge_chains` pools.
    """
    drop = int(drop_first)
    if drop < 0:
        raise ValueError("`drop_first` must be >= 0.")
    if drop == 0:
        return idata
    return idata.isel(draw=slice(drop, None))
