"""Tests for EvalConfig.

Tests configuration validation, presets, and properties.
"""

from __future__ import annotations

import pytest

from tsevalkit import EConfig, EvalConfig


class TestEvalConfigValidation:
    """Test config validation."""

    def test_valid_config(self):
        """Create valid config."""
        config = EvalConfig(h=3, freq="MS")
        assert config.h == 3
        assert config.freq == "MS"

    def test_h_must_be_positive(self):
        """h must be positive."""
        with pytest.raises(EConfig, match="h must be positive"):
            EvalConfig(h=0)

    @pytest.mark.parametrize("fraction", [0.0, 1.0, -0.1, 1.5])
    def test_test_fraction_range(self, fraction):
        """test_fraction lies strictly between 0 and 1."""
        with pytest.raises(EConfig, match="test_fraction"):
            EvalConfig(test_fraction=fraction)

    def test_step_must_be_positive(self):
        """step must be at least 1."""
        with pytest.raises(EConfig, match="step"):
            EvalConfig(step=0)

    def test_initial_size_must_be_positive(self):
        """initial_size must be at least 1 when set."""
        with pytest.raises(EConfig, match="initial_size"):
            EvalConfig(initial_size=0)

    def test_levels_range(self):
        """Interval levels are percentages."""
        with pytest.raises(EConfig, match="levels"):
            EvalConfig(levels=(80, 100))

    def test_unknown_metric(self):
        """Unknown metric names are rejected."""
        with pytest.raises(EConfig, match="Unknown metrics"):
            EvalConfig(metrics=("rmse", "wape"))

    def test_skill_metric_must_be_computed(self):
        """Skill metrics must also be listed in metrics."""
        with pytest.raises(EConfig, match="Skill metrics"):
            EvalConfig(metrics=("rmse",), skill_metrics=("crps",), primary_metric="rmse")

    def test_primary_metric_must_be_computed(self):
        """The ranking metric must be produced by the run."""
        with pytest.raises(EConfig, match="primary_metric"):
            EvalConfig(primary_metric="mase")

    def test_skill_primary_metric_needs_baseline(self):
        """Skill metrics exist only when a baseline is configured."""
        EvalConfig(primary_metric="skill_crps")
        with pytest.raises(EConfig, match="primary_metric"):
            EvalConfig(primary_metric="skill_crps", baseline=None)


class TestEvalConfigPresets:
    """Test preset constructors."""

    def test_holdout(self):
        """Holdout preset sets the test fraction."""
        config = EvalConfig.holdout(0.25)
        assert config.test_fraction == 0.25

    def test_rolling(self):
        """Rolling preset sets horizon, initial size and step."""
        config = EvalConfig.rolling(h=3, initial_size=6, step=3)
        assert (config.h, config.initial_size, config.step) == (3, 6, 3)

    def test_frozen(self):
        """Config is immutable."""
        config = EvalConfig()
        with pytest.raises(AttributeError):
            config.h = 5  # type: ignore[misc]


class TestEvalConfigProperties:
    """Test derived properties."""

    def test_metric_names_include_skill(self):
        """Skill metric names follow the metrics."""
        config = EvalConfig(metrics=("rmse", "crps"), skill_metrics=("crps",))
        assert config.metric_names == ["rmse", "crps", "skill_crps"]

    def test_no_skill_without_baseline(self):
        """No skill metrics when baseline is None."""
        config = EvalConfig(baseline=None)
        assert config.skill_names == []

    def test_directions(self):
        """Error metrics are lower-is-better, skill metrics higher-is-better."""
        config = EvalConfig()
        assert config.higher_is_better("rmse") is False
        assert config.higher_is_better("crps") is False
        assert config.higher_is_better("skill_rmse") is True

    def test_direction_override(self):
        """metric_directions overrides the default direction."""
        config = EvalConfig(metric_directions={"rmse": True})
        assert config.higher_is_better("rmse") is True

    def test_hashable(self):
        """Configs are usable as dict keys, direction overrides included."""
        assert hash(EvalConfig()) == hash(EvalConfig())
        config = EvalConfig(metric_directions={"rmse": True})
        assert {config: "run"}[config] == "run"
        assert config == EvalConfig(metric_directions={"rmse": True})

    def test_directions_read_only(self):
        """The override mapping is copied and cannot be mutated."""
        overrides = {"rmse": True}
        config = EvalConfig(metric_directions=overrides)
        overrides["rmse"] = False
        assert config.higher_is_better("rmse") is True
        with pytest.raises(TypeError):
            config.metric_directions["mae"] = True

    def test_levels_sorted(self):
        """Levels are normalized to a sorted tuple."""
        assert EvalConfig(levels=[95, 80]).levels == (80, 95)

    def test_initial_size_default(self):
        """Default initial size covers two seasons, at least 10 periods."""
        config = EvalConfig()
        assert config.resolve_initial_size(12) == 24
        assert config.resolve_initial_size(1) == 10
        assert EvalConfig(initial_size=6).resolve_initial_size(12) == 6

    def test_season_length_override(self):
        """Explicit season_length wins over the frequency default."""
        assert EvalConfig().resolve_season_length(12) == 12
        assert EvalConfig(season_length=4).resolve_season_length(12) == 4
