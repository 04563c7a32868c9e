"""Predictive distributions on the original scale.

Every family produces a Gaussian ``N(mu, sigma^2)`` per horizon step on the
modeling scale. Under a log transform the original-scale distribution is a
shifted log-normal, whose mean is ``exp(mu + sigma^2 / 2) - shift``. Reporting
``exp(mu) - shift`` instead would return the median and bias the point
forecast downward.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from scipy.stats import norm

from tsevalkit.models.transforms import Transform, get_transform


@dataclass(frozen=True)
class PredictiveDistribution:
    """Per-step predictive distribution.

    Attributes:
        mu: Modeling-scale means, one per horizon step
        sigma: Modeling-scale standard deviations (0 = degenerate)
        transform: Name of the response transform
    """

    mu: np.ndarray
    sigma: np.ndarray
    transform: str = "identity"

    def __post_init__(self) -> None:
        mu = np.array(self.mu, dtype=float)
        sigma = np.array(self.sigma, dtype=float)
        if mu.shape != sigma.shape:
            raise ValueError(f"mu and sigma shapes differ: {mu.shape} vs {sigma.shape}")
        if np.any(sigma < 0) or not np.all(np.isfinite(sigma)):
            raise ValueError("sigma must be finite and non-negative")
        mu.setflags(write=False)
        sigma.setflags(write=False)
        object.__setattr__(self, "mu", mu)
        object.__setattr__(self, "sigma", sigma)

    def __len__(self) -> int:
        return len(self.mu)

    @property
    def _transform(self) -> Transform:
        return get_transform(self.transform)

    def mean(self) -> np.ndarray:
        tr = self._transform
        if tr.is_identity:
            return self.mu.copy()
        return np.exp(self.mu + 0.5 * self.sigma**2) - tr.shift

    def median(self) -> np.ndarray:
        return self._transform.inverse(self.mu)

    def quantile(self, q: float) -> np.ndarray:
        if not 0 < q < 1:
            raise ValueError(f"quantile must lie in (0, 1), got {q}")
        return self._transform.inverse(self.mu + self.sigma * norm.ppf(q))

    def interval(self, level: float) -> tuple[np.ndarray, np.ndarray]:
        """Central interval with nominal coverage ``level`` (in percent)."""
        alpha = 1 - level / 100
        return self.quantile(alpha / 2), self.quantile(1 - alpha / 2)

    def crps(self, y: np.ndarray) -> np.ndarray:
        """Closed-form CRPS of each step against realized values ``y``."""
        y = np.asarray(y, dtype=float)
        tr = self._transform
        if tr.is_identity:
            return _crps_normal(y, self.mu, self.sigma)
        return _crps_lognormal(y + tr.shift, self.mu, self.sigma)

    def head(self, n: int) -> PredictiveDistribution:
        return PredictiveDistribution(self.mu[:n], self.sigma[:n], self.transform)

    def take(self, positions: np.ndarray) -> PredictiveDistribution:
        return PredictiveDistribution(self.mu[positions], self.sigma[positions], self.transform)


def _crps_normal(y: np.ndarray, mu: np.ndarray, sigma: np.ndarray) -> np.ndarray:
    degenerate = sigma == 0
    safe_sigma = np.where(degenerate, 1.0, sigma)
    z = (y - mu) / safe_sigma
    score = safe_sigma * (z * (2 * norm.cdf(z) - 1) + 2 * norm.pdf(z) - 1 / np.sqrt(np.pi))
    return np.where(degenerate, np.abs(y - mu), score)


def _crps_lognormal(y: np.ndarray, mu: np.ndarray, sigma: np.ndarray) -> np.ndarray:
    # y is already shifted onto the log-normal support
    degenerate = sigma == 0
    safe_sigma = np.where(degenerate, 1.0, sigma)
    positive = y > 0
    log_y = np.log(np.where(positive, y, 1.0))
    omega = np.where(positive, (log_y - mu) / safe_sigma, -np.inf)
    mean = np.exp(mu + 0.5 * safe_sigma**2)
    score = y * (2 * norm.cdf(omega) - 1) - 2 * mean * (
        norm.cdf(omega - safe_sigma) + norm.cdf(safe_sigma / np.sqrt(2)) - 1
    )
    return np.where(degenerate, np.abs(y - np.exp(mu)), score)


__all__ = ["PredictiveDistribution"]
