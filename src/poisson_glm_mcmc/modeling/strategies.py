from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import numpy as np

from .config import PriorConfig, SamplerConfig


class PosteriorSamplerStrategy(ABC):
    """Abstract base class for Poisson regression inference backends."""

    name: str = "abstract"

    @abstractmethod
    def build_model(
        self,
        *,
        y: np.ndarray,
        x_centered: np.ndarray,
        priors: PriorConfig | None = None,
    ) -> Any:
        """Construct a probabilistic model for the provided counts."""

    @abstractmethod
    def sample_posterior(self, model: Any, config: SamplerConfig) -> Any:
        """Run inference and return post-burn-in, thinned draws per chain."""
