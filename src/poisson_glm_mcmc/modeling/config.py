from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict

__all__ = ["PriorConfig", "SamplerConfig"]


@dataclass
class PriorConfig:
    """Independent Normal priors on intercept ``a`` and slope ``b`` (precision form)."""

    a_mu: float = 0.0
    a_tau: float = 0.001
    b_mu: float = 0.0
    b_tau: float = 0.001

    def validate(self) -> None:
        for name in ("a_tau", "b_tau"):
            tau = float(getattr(self, name))
            if not math.isfinite(tau) or tau <= 0:
                raise ValueError(f"{name} must be a positive precision; got {tau}")
        for name in ("a_mu", "b_mu"):
            if not math.isfinite(float(getattr(self, name))):
                raise ValueError(f"{name} must be finite")

    @property
    def a_sigma(self) -> float:
        return 1.0 / math.sqrt(self.a_tau)

    @property
    def b_sigma(self) -> float:
        return 1.0 / math.sqrt(self.b_tau)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SamplerConfig:
    """
    Chain layout for the posterior sampler.

    ``iterations`` counts burn-in, so each chain runs ``iterations - burn_in``
    post-burn-in iterations of which every ``thin``-th is retained.
    """

    chains: int = 3
    iterations: int = 25000
    burn_in: int = 5000
    thin: int = 20
    cores: int = 1
    target_accept: float = 0.9
    random_seed: int | None = None
    progressbar: bool = False
    drop_first: bool = True

    def validate(self) -> None:
        if self.chains < 1:
            raise ValueError("chains must be >= 1")
        if self.thin < 1:
            raise ValueError("thin must be >= 1")
        if self.burn_in < 0:
            raise ValueError("burn_in must be >= 0")
        if self.iterations <= self.burn_in:
            raise ValueError("iterations must exceed burn_in")
        if self.cores < 1:
            raise ValueError("cores must be >= 1")
        if not 0.0 < float(self.target_accept) < 1.0:
            raise ValueError("target_accept must lie in (0, 1)")
        if self.drop_first and self.retained_per_chain < 2:
            raise ValueError(
                "at least two retained draws per chain are needed when dropping the first"
            )

    @property
    def draws(self) -> int:
        return int(self.iterations - self.burn_in)

    @property
    def retained_per_chain(self) -> int:
        return -(-self.draws // int(self.thin))

    @property
    def merged_size(self) -> int:
        return self.chains * (self.retained_per_chain - int(bool(self.drop_first)))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
