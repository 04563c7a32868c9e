"""Tests for predictive distributions and transforms."""

from __future__ import annotations

import numpy as np
import pytest
from scipy.stats import norm

from tsevalkit.core.errors import EFit
from tsevalkit.models.distribution import PredictiveDistribution
from tsevalkit.models.transforms import get_transform


class TestTransforms:
    """Test response transforms."""

    def test_identity(self):
        tr = get_transform("identity")
        y = np.array([-1.0, 0.0, 2.0])
        assert np.array_equal(tr.forward(y), y)
        assert np.array_equal(tr.inverse(y), y)

    def test_log1p_round_trip(self):
        """log1p is invertible on y > -1."""
        tr = get_transform("log1p")
        y = np.array([0.0, 1.0, 10.0])
        assert tr.inverse(tr.forward(y)) == pytest.approx(y)

    def test_log_domain(self):
        """log rejects zeros with EFit."""
        with pytest.raises(EFit, match="log transform"):
            get_transform("log").forward(np.array([0.0, 1.0]))

    def test_unknown(self):
        with pytest.raises(KeyError):
            get_transform("boxcox")


class TestIdentityDistribution:
    """Gaussian predictive distribution on the original scale."""

    def test_mean_and_median(self):
        dist = PredictiveDistribution([1.0, 2.0], [0.5, 1.0])
        assert dist.mean() == pytest.approx([1.0, 2.0])
        assert dist.median() == pytest.approx([1.0, 2.0])

    def test_interval(self):
        """95% interval is mu +- 1.96 sigma."""
        dist = PredictiveDistribution([0.0], [1.0])
        lo, hi = dist.interval(95)
        assert lo[0] == pytest.approx(-norm.ppf(0.975))
        assert hi[0] == pytest.approx(norm.ppf(0.975))

    def test_crps_degenerate(self):
        """CRPS of a point mass is the absolute error."""
        dist = PredictiveDistribution([3.0, 3.0], [0.0, 0.0])
        assert dist.crps(np.array([1.0, 4.0])) == pytest.approx([2.0, 1.0])

    def test_crps_standard_normal_at_mean(self):
        """CRPS(N(0,1), 0) = 2 phi(0) - 1/sqrt(pi)."""
        dist = PredictiveDistribution([0.0], [1.0])
        expected = 2 * norm.pdf(0) - 1 / np.sqrt(np.pi)
        assert dist.crps(np.array([0.0]))[0] == pytest.approx(expected)

    def test_invalid_sigma(self):
        with pytest.raises(ValueError):
            PredictiveDistribution([0.0], [-1.0])

    def test_take(self):
        dist = PredictiveDistribution([1.0, 2.0, 3.0], [0.1, 0.2, 0.3])
        sub = dist.take(np.array([0, 2]))
        assert list(sub.mu) == [1.0, 3.0]
        assert len(dist.head(2)) == 2


class TestLogDistribution:
    """Shifted log-normal back-transform."""

    def test_mean_is_not_median(self):
        """The point forecast is the log-normal mean, above the median."""
        mu, sigma = np.log(11.0), 0.5
        dist = PredictiveDistribution([mu], [sigma], "log1p")
        assert dist.median()[0] == pytest.approx(10.0)
        assert dist.mean()[0] == pytest.approx(np.exp(mu + sigma**2 / 2) - 1)
        assert dist.mean()[0] > dist.median()[0]

    def test_constant_series_round_trip(self):
        """With zero spread the mean returns the original level exactly."""
        dist = PredictiveDistribution([np.log1p(42.0)], [0.0], "log1p")
        assert dist.mean()[0] == pytest.approx(42.0)

    def test_interval_back_transformed(self):
        """Interval bounds are back-transformed quantiles."""
        dist = PredictiveDistribution([0.0], [1.0], "log")
        lo, hi = dist.interval(80)
        assert lo[0] == pytest.approx(np.exp(norm.ppf(0.1)))
        assert hi[0] == pytest.approx(np.exp(norm.ppf(0.9)))

    def test_crps_matches_numerical_integral(self):
        """Closed-form log-normal CRPS agrees with the integral definition."""
        mu, sigma, y = 1.0, 0.4, 2.5
        dist = PredictiveDistribution([mu], [sigma], "log")
        grid = np.linspace(1e-6, 60.0, 400_001)
        cdf = norm.cdf((np.log(grid) - mu) / sigma)
        integrand = (cdf - (grid >= y)) ** 2
        numeric = np.trapezoid(integrand, grid) if hasattr(np, "trapezoid") else np.trapz(integrand, grid)
        assert dist.crps(np.array([y]))[0] == pytest.approx(numeric, rel=1e-3)
