"""
Public API surface for the poisson_glm_mcmc package.

Import from here in notebooks, scripts, and CLI glue; everything else is
considered internal and may change without notice.
"""

from .synthgen.generate import (
    SimulationConfig,
    Observations,
    simulate_observations,
)
from .modeling.config import PriorConfig, SamplerConfig
from .modeling.pymc_poisson import (
    build_poisson_glm_model,
    make_strategy,
    PymcNUTSStrategy,
    PymcMetropolisStrategy,
    PymcADVIStrategy,
)
from .modeling.strategies import PosteriorSamplerStrategy
from .postprocess.chains import MergedDraws, merge_chains
from .postprocess.predictive import (
    simulate_posterior_predictive,
    predictive_intervals,
    plugin_mean_curve,
    summarize_predictive,
)
from .diagnostics import (
    compute_rhat,
    compute_hdi,
    posterior_summary,
    posterior_correlation,
)
from .pipeline import PipelineResult, run_pipeline, format_report

__all__ = [
    # simulation
    "SimulationConfig",
    "Observations",
    "simulate_observations",
    # modeling
    "PriorConfig",
    "SamplerConfig",
    "build_poisson_glm_model",
    "make_strategy",
    "PosteriorSamplerStrategy",
    "PymcNUTSStrategy",
    "PymcMetropolisStrategy",
    "PymcADVIStrategy",
    # post-processing
    "MergedDraws",
    "merge_chains",
    "simulate_posterior_predictive",
    "predictive_intervals",
    "plugin_mean_curve",
    "summarize_predictive",
    # diagnostics
    "compute_rhat",
    "compute_hdi",
    "posterior_summary",
    "posterior_correlation",
    # pipeline
    "PipelineResult",
    "run_pipeline",
    "format_report",
]
