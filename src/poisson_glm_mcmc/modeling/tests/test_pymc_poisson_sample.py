# slow: runs the real sampler on a small problem
from __future__ import annotations

import numpy as np
import pytest

from poisson_glm_mcmc.modeling.config import SamplerConfig
from poisson_glm_mcmc.modeling.pymc_poisson import (
    PymcMetropolisStrategy,
    PymcNUTSStrategy,
)

pm = pytest.importorskip("pymc")
az = pytest.importorskip("arviz")


pytestmark = pytest.mark.slow


def _data(n=100, seed=0):
    rng = np.random.default_rng(seed)
    x = np.sort(rng.uniform(5, 8, size=n))
    xc = x - x.mean()
    y = rng.poisson(np.exp(2.5 - 1.1 * xc)).astype(np.int64)
    return y, xc


def test_short_nuts_run_recovers_parameters():
    y, xc = _data()
    strategy = PymcNUTSStrategy()
    model = strategy.build_model(y=y, x_centered=xc)
    cfg = SamplerConfig(chains=2, iterations=600, burn_in=300, thin=2, random_seed=123)
    idata = strategy.sample_posterior(model, cfg)

    assert "posterior" in idata.groups()
    assert idata.posterior.sizes["chain"] == 2
    assert idata.posterior.sizes["draw"] == cfg.retained_per_chain

    a_mean = float(idata.posterior["a"].mean())
    b_mean = float(idata.posterior["b"].mean())
    assert abs(a_mean - 2.5) < 0.3
    assert abs(b_mean + 1.1) < 0.3

    if "diverging" in idata.sample_stats:
        assert int(idata.sample_stats["diverging"].sum().values) <= 2


def test_short_metropolis_run_produces_finite_draws():
    y, xc = _data(n=60, seed=4)
    strategy = PymcMetropolisStrategy()
    model = strategy.build_model(y=y, x_centered=xc)
    cfg = SamplerConfig(chains=2, iterations=1500, burn_in=500, thin=5, random_seed=8)
    idata = strategy.sample_posterior(model, cfg)
    assert idata.posterior.sizes["draw"] == 200
    assert np.isfinite(idata.posterior["a"].values).all()
    assert np.isfinite(idata.posterior["b"].values).all()
