import os
import sys

import numpy as np
import pytest


# Ensure the src/ layout is importable during tests without installation
PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))
SRC_PATH = os.path.join(PROJECT_ROOT, "src")
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)


@pytest.fixture(scope="session")
def rng() -> np.random.Generator:
    return np.random.default_rng(42)


@pytest.fixture(scope="session")
def sim_config():
    from poisson_glm_mcmc.synthgen.generate import SimulationConfig

    return SimulationConfig(n=100, x_low=5.0, x_high=8.0, a_true=2.5, b_true=-1.1, seed=42)


@pytest.fixture(scope="session")
def observations(sim_config):
    from poisson_glm_mcmc.synthgen.generate import simulate_observations

    return simulate_observations(sim_config)


@pytest.fixture(scope="session")
def fast_sampler_config():
    from poisson_glm_mcmc.modeling.config import SamplerConfig

    # 3 chains x 1000 retained draws, same layout as the reference run after thinning
    return SamplerConfig(
        chains=3, iterations=1500, burn_in=500, thin=1, cores=1, random_seed=2024
    )


@pytest.fixture(scope="session")
def pipeline_result(sim_config, fast_sampler_config):
    from poisson_glm_mcmc.pipeline import run_pipeline

    return run_pipeline(sim_config, sampler_config=fast_sampler_config, ppc_seed=7)


@pytest.fixture
def synthetic_idata(rng):
    import arviz as az

    return az.from_dict(
        posterior={
            "a": rng.normal(2.5, 0.04, size=(3, 200)),
            "b": rng.normal(-1.1, 0.04, size=(3, 200)),
        }
    )
