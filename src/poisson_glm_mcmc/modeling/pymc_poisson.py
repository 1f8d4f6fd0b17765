from __future__ import annotations

from typing import Any, Dict, Optional

import numpy as np
import pymc as pm

from ..logger import get_logger
from ..utils import check_inputs, exp
from .config import PriorConfig, SamplerConfig
from .sampling import DEFAULT_SAMPLING, apply_thinning
from .sampling import sample_posterior as _pymc_sample_posterior
from .strategies import PosteriorSamplerStrategy

log = get_logger(__name__)

__all__ = [
    "build_poisson_glm_model",
    "PymcNUTSStrategy",
    "PymcMetropolisStrategy",
    "PymcADVIStrategy",
    "STRATEGIES",
    "make_strategy",
]


def _construct_pymc_poisson_model(
    *,
    y: np.ndarray,
    x_centered: np.ndarray,
    priors: PriorConfig,
    target_accept: float = 0.9,
):
    """
    Build a PyMC Poisson regression with a log link.

    Parameters
    ----------
    y
        Observed counts (N,) as a non-negative integer array.
    x_centered
        Centered explanatory values (N,).
    priors
        Normal priors on ``a`` and ``b`` in precision form.
    target_accept
        NUTS target_accept to store in `model.default_sampling_kwargs`.

    Returns
    -------
    pm.Model
        Model with named variables:
        - a, b (free)
        - mu (deterministic rate, exp(a + b * x_c))
        - y (Poisson likelihood)
        - pm.Data containers: y_obs, x_c
    """
    check_inputs(y, x_centered)
    priors.validate()

    coords = {"obs": np.arange(y.shape[0])}

    with pm.Model(coords=coords) as model:
        pm.Data("y_obs", y, dims=("obs",))
        x_c = pm.Data("x_c", np.asarray(x_centered, dtype=float), dims=("obs",))

        a = pm.Normal("a", mu=priors.a_mu, tau=priors.a_tau)
        b = pm.Normal("b", mu=priors.b_mu, tau=priors.b_tau)

        mu = pm.Deterministic("mu", exp(a + b * x_c), dims=("obs",))  # type: ignore

        pm.Poisson("y", mu=mu, observed=model["y_obs"], dims=("obs",))

        # Default sampler settings for convenience (tests/CLI can override)
        model.default_sampling_kwargs = dict(
            DEFAULT_SAMPLING, target_accept=float(target_accept)
        )

    return model


class PymcNUTSStrategy(PosteriorSamplerStrategy):
    """Strategy wrapper around PyMC's default NUTS sampler."""

    name = "nuts"

    def __init__(self, *, default_target_accept: float = 0.9) -> None:
        self.default_target_accept = float(default_target_accept)

    def build_model(
        self,
        *,
        y: np.ndarray,
        x_centered: np.ndarray,
        priors: PriorConfig | None = None,
    ) -> Any:
        return _construct_pymc_poisson_model(
            y=y,
            x_centered=x_centered,
            priors=priors or PriorConfig(),
            target_accept=self.default_target_accept,
        )

    def _sampling_overrides(self, config: SamplerConfig) -> Dict[str, Any]:
        overrides: Dict[str, Any] = {
            "draws": config.draws,
            "tune": config.burn_in,
            "chains": config.chains,
            "cores": config.cores,
            "progressbar": config.progressbar,
            "target_accept": float(config.target_accept),
        }
        if config.random_seed is not None:
            overrides["random_seed"] = config.random_seed
        return overrides

    def sample_posterior(self, model: Any, config: SamplerConfig) -> Any:
        config.validate()
        idata = _pymc_sample_posterior(model, **self._sampling_overrides(config))
        return apply_thinning(idata, config.thin)


class PymcMetropolisStrategy(PymcNUTSStrategy):
    """Random-walk Metropolis; burn-in doubles as proposal tuning."""

    name = "metropolis"

    def _sampling_overrides(self, config: SamplerConfig) -> Dict[str, Any]:
        overrides = super()._sampling_overrides(config)
        # target_accept only applies to NUTS; None also clears the model default
        overrides["target_accept"] = None
        overrides["step"] = pm.Metropolis()
        return overrides

    def sample_posterior(self, model: Any, config: SamplerConfig) -> Any:
        config.validate()
        with model:
            overrides = self._sampling_overrides(config)
        idata = _pymc_sample_posterior(model, **overrides)
        return apply_thinning(idata, config.thin)


class PymcADVIStrategy(PymcNUTSStrategy):
    """Variational inference strategy using PyMC's ADVI/fit API.

    Produces a single pseudo-chain holding ``config.retained_per_chain``
    independent draws from the fitted approximation.
    """

    name = "advi"

    def __init__(
        self,
        *,
        default_target_accept: float = 0.9,
        fit_steps: int = 20000,
        fit_kwargs: Optional[Dict[str, Any]] = None,
        method: str = "advi",
    ) -> None:
        super().__init__(default_target_accept=default_target_accept)
        self.fit_steps = int(fit_steps)
        self.fit_kwargs = dict(fit_kwargs or {})
        self.method = method

    def sample_posterior(self, model: Any, config: SamplerConfig) -> Any:
        config.validate()

        fit_kwargs: Dict[str, Any] = dict(self.fit_kwargs)
        fit_kwargs.setdefault("method", self.method)
        fit_kwargs.setdefault("progressbar", config.progressbar)
        if config.random_seed is not None:
            fit_kwargs.setdefault("random_seed", config.random_seed)

        log.info("Fitting %s approximation for %d steps", self.method, self.fit_steps)
        with model:
            approx = pm.fit(n=self.fit_steps, **fit_kwargs)

        # `chains`, `cores`, `burn_in` and `thin` are not used by the approximation.
        return approx.sample(
            draws=config.retained_per_chain, random_seed=config.random_seed
        )


STRATEGIES = {
    PymcNUTSStrategy.name: PymcNUTSStrategy,
    PymcMetropolisStrategy.name: PymcMetropolisStrategy,
    PymcADVIStrategy.name: PymcADVIStrategy,
}


def make_strategy(name: str, **kwargs: Any) -> PosteriorSamplerStrategy:
    try:
        factory = STRATEGIES[name]
    except KeyError:
        choices = ", ".join(sorted(STRATEGIES))
        raise ValueError(f"Unknown sampler '{name}'. Choose one of: {choices}") from None
    return factory(**kwargs)


def build_poisson_glm_model(
    *,
    y: np.ndarray,
    x_centered: np.ndarray,
    priors: PriorConfig | None = None,
    target_accept: float = 0.9,
):
    """Helper returning a PyMC model using the default strategy."""

    strategy = PymcNUTSStrategy(default_target_accept=target_accept)
    return strategy.build_model(y=y, x_centered=x_centered, priors=priors)
