from __future__ import annotations

import arviz as az
import numpy as np
import pytest

from poisson_glm_mcmc.modeling import pymc_poisson
from poisson_glm_mcmc.modeling import sampling as sampling_module
from poisson_glm_mcmc.modeling.config import PriorConfig, SamplerConfig
from poisson_glm_mcmc.modeling.pymc_poisson import (
    PymcADVIStrategy,
    PymcMetropolisStrategy,
    PymcNUTSStrategy,
    build_poisson_glm_model,
    make_strategy,
)
from poisson_glm_mcmc.modeling.strategies import PosteriorSamplerStrategy


def _tiny_data(n=30, seed=0):
    rng = np.random.default_rng(seed)
    x = np.sort(rng.uniform(5, 8, size=n))
    xc = x - x.mean()
    y = rng.poisson(np.exp(2.5 - 1.1 * xc)).astype(np.int64)
    return y, xc


def _fake_idata(chains: int, draws: int):
    values = np.linspace(0.0, 1.0, chains * draws).reshape(chains, draws)
    return az.from_dict(posterior={"a": values, "b": values})


def test_model_exposes_named_variables():
    y, xc = _tiny_data()
    model = build_poisson_glm_model(y=y, x_centered=xc)
    free = {rv.name for rv in model.free_RVs}
    assert free == {"a", "b"}
    assert "mu" in model.named_vars
    assert [rv.name for rv in model.observed_RVs] == ["y"]
    assert model.default_sampling_kwargs["target_accept"] == pytest.approx(0.9)
    np.testing.assert_array_equal(model["y_obs"].get_value(), y)


def test_mu_is_exp_of_linear_predictor():
    y, xc = _tiny_data(n=8)
    model = build_poisson_glm_model(y=y, x_centered=xc)
    (mu_value,) = model.replace_rvs_by_values([model["mu"]])
    mu = model.compile_fn(mu_value, inputs=model.value_vars)({"a": 0.5, "b": -0.2})
    np.testing.assert_allclose(mu, np.exp(0.5 - 0.2 * xc))


def test_priors_use_precision():
    y, xc = _tiny_data(n=5)
    model = build_poisson_glm_model(
        y=y, x_centered=xc, priors=PriorConfig(a_tau=0.25, b_tau=4.0)
    )
    logp = model.compile_logp(vars=[model["a"]], sum=True)
    point = {"a": 2.0}
    # Normal(0, sigma=2) evaluated at 2.0
    expected = -0.5 * np.log(2 * np.pi * 4.0) - 0.5 * (2.0**2) / 4.0
    assert float(logp(point)) == pytest.approx(expected)


def test_model_validates_inputs():
    y, xc = _tiny_data(n=6)
    with pytest.raises(ValueError):
        build_poisson_glm_model(y=y.astype(float), x_centered=xc)
    with pytest.raises(ValueError):
        build_poisson_glm_model(y=y, x_centered=xc[:-1])
    with pytest.raises(ValueError):
        build_poisson_glm_model(y=y, x_centered=xc, priors=PriorConfig(a_tau=0.0))


def test_nuts_strategy_translates_config_and_thins(monkeypatch):
    calls = {}

    def fake_sample(model, **kwargs):
        calls.update(kwargs)
        return _fake_idata(kwargs["chains"], kwargs["draws"])

    monkeypatch.setattr(pymc_poisson, "_pymc_sample_posterior", fake_sample)

    y, xc = _tiny_data()
    strategy = PymcNUTSStrategy()
    model = strategy.build_model(y=y, x_centered=xc)
    cfg = SamplerConfig(chains=2, iterations=250, burn_in=50, thin=10, random_seed=3)
    idata = strategy.sample_posterior(model, cfg)

    assert calls["draws"] == 200
    assert calls["tune"] == 50
    assert calls["chains"] == 2
    assert calls["random_seed"] == 3
    assert calls["target_accept"] == pytest.approx(0.9)
    assert idata.posterior.sizes["draw"] == cfg.retained_per_chain == 20


def test_metropolis_strategy_clears_nuts_defaults(monkeypatch):
    pm = pytest.importorskip("pymc")
    calls = {}

    class RecordingPM:
        def sample(self, **kwargs):
            calls.update(kwargs)
            return _fake_idata(kwargs["chains"], kwargs["draws"])

    # patch pm.sample below the defaults merge so the model kwargs are applied
    monkeypatch.setattr(sampling_module, "pm", RecordingPM())

    y, xc = _tiny_data()
    strategy = PymcMetropolisStrategy()
    model = strategy.build_model(y=y, x_centered=xc)
    strategy.sample_posterior(model, SamplerConfig(chains=1, iterations=40, burn_in=20, thin=2))

    assert isinstance(calls["step"], pm.Metropolis)
    assert "target_accept" not in calls
    assert calls["tune"] == 20
    assert calls["draws"] == 20


def test_advi_strategy_draws_retained_count(monkeypatch):
    captured = {}

    class DummyApprox:
        def sample(self, draws, random_seed=None):
            captured["draws"] = draws
            return _fake_idata(1, draws)

    def fake_fit(n, **kwargs):
        captured["n"] = n
        captured["kwargs"] = kwargs
        return DummyApprox()

    monkeypatch.setattr(pymc_poisson.pm, "fit", fake_fit)

    y, xc = _tiny_data()
    strategy = PymcADVIStrategy(fit_steps=123)
    model = strategy.build_model(y=y, x_centered=xc)
    idata = strategy.sample_posterior(
        model, SamplerConfig(chains=3, iterations=300, burn_in=100, thin=20)
    )
    assert captured["n"] == 123
    assert captured["kwargs"]["method"] == "advi"
    assert captured["draws"] == 10
    assert idata.posterior.sizes["chain"] == 1


def test_strategy_registry():
    assert isinstance(make_strategy("nuts"), PymcNUTSStrategy)
    assert isinstance(make_strategy("metropolis"), PymcMetropolisStrategy)
    advi = make_strategy("advi", fit_steps=10)
    assert isinstance(advi, PosteriorSamplerStrategy)
    assert advi.fit_steps == 10
    with pytest.raises(ValueError, match="Unknown sampler"):
        make_strategy("gibbs")


def test_invalid_sampler_config_is_rejected_before_sampling(monkeypatch):
    def boom(*args, **kwargs):  # pragma: no cover - must not be reached
        raise AssertionError("sampler should not run")

    monkeypatch.setattr(pymc_poisson, "_pymc_sample_posterior", boom)
    y, xc = _tiny_data()
    strategy = PymcNUTSStrategy()
    model = strategy.build_model(y=y, x_centered=xc)
    with pytest.raises(ValueError):
        strategy.sample_posterior(model, SamplerConfig(thin=0))
