"""Tests for the closed-form spring solver.

Tests cover:
- SpringConfig: validation, damping ratio
- spring_value: start, overshoot, monotonic regimes, settling snap
- settle_time: bounded, frame-aligned
"""

import pytest

from src.motion.errors import ConfigurationError
from src.motion.spring import SpringConfig, settle_time, spring_value

FPS = 30

UNDER_DAMPED = SpringConfig(damping=14, stiffness=120, mass=0.8)
CRITICAL = SpringConfig(damping=20, stiffness=100, mass=1)
OVER_DAMPED = SpringConfig(damping=40, stiffness=100, mass=1)


def _frames(config, count=120):
    return [spring_value(f / FPS, FPS, config) for f in range(count)]


# ---------------------------------------------------------------------------
# SpringConfig
# ---------------------------------------------------------------------------

class TestSpringConfig:
    """Test oscillator parameter validation."""

    def test_defaults_are_valid(self):
        config = SpringConfig()
        assert config.damping == 10.0
        assert config.stiffness == 100.0
        assert config.mass == 1.0

    @pytest.mark.parametrize("field", ["damping", "stiffness", "mass"])
    def test_non_positive_raises(self, field):
        with pytest.raises(ConfigurationError, match=field):
            SpringConfig(**{field: 0})

    def test_negative_raises(self):
        with pytest.raises(ConfigurationError):
            SpringConfig(stiffness=-5)

    def test_damping_ratio(self):
        assert CRITICAL.damping_ratio == pytest.approx(1.0)
        assert UNDER_DAMPED.damping_ratio < 1.0
        assert OVER_DAMPED.damping_ratio > 1.0

    def test_natural_frequency(self):
        assert CRITICAL.natural_frequency == pytest.approx(10.0)


# ---------------------------------------------------------------------------
# spring_value
# ---------------------------------------------------------------------------

class TestSpringValue:
    """Test the settling curve in each damping regime."""

    @pytest.mark.parametrize("elapsed", [0, -0.5, -10])
    def test_zero_before_release(self, elapsed):
        assert spring_value(elapsed, FPS, UNDER_DAMPED) == 0.0

    def test_under_damped_overshoots(self):
        assert max(_frames(UNDER_DAMPED)) > 1.0

    def test_under_damped_converges(self):
        settle = settle_time(UNDER_DAMPED, FPS)
        assert spring_value(settle, FPS, UNDER_DAMPED) == 1.0
        assert spring_value(settle + 10, FPS, UNDER_DAMPED) == 1.0

    def test_critical_is_monotone_and_bounded(self):
        values = _frames(CRITICAL)
        assert all(b >= a for a, b in zip(values, values[1:]))
        assert all(v <= 1.0 for v in values)

    def test_over_damped_is_monotone_and_bounded(self):
        values = _frames(OVER_DAMPED, count=300)
        assert all(b >= a for a, b in zip(values, values[1:]))
        assert all(v <= 1.0 for v in values)

    def test_over_damped_is_slower_than_critical(self):
        assert spring_value(0.2, FPS, OVER_DAMPED) < spring_value(0.2, FPS, CRITICAL)

    def test_rises_from_zero(self):
        first = spring_value(1 / FPS, FPS, UNDER_DAMPED)
        assert 0.0 < first < 0.5

    def test_close_to_one_before_snap(self):
        settle = settle_time(UNDER_DAMPED, FPS)
        just_before = settle - 1 / FPS
        assert spring_value(just_before, FPS, UNDER_DAMPED) == pytest.approx(1.0, abs=0.01)

    def test_deterministic(self):
        assert _frames(UNDER_DAMPED) == _frames(UNDER_DAMPED)


# ---------------------------------------------------------------------------
# settle_time
# ---------------------------------------------------------------------------

class TestSettleTime:
    """Test the bounded settle point."""

    @pytest.mark.parametrize("config", [UNDER_DAMPED, CRITICAL, OVER_DAMPED])
    def test_bounded(self, config):
        assert 0 < settle_time(config, FPS) < 10

    @pytest.mark.parametrize("config", [UNDER_DAMPED, CRITICAL, OVER_DAMPED])
    def test_lands_on_frame_boundary(self, config):
        frames = settle_time(config, FPS) * FPS
        assert frames == pytest.approx(round(frames), abs=1e-6)

    def test_stiffer_spring_settles_sooner(self):
        soft = SpringConfig(damping=14, stiffness=60, mass=0.8)
        assert settle_time(UNDER_DAMPED, FPS) < settle_time(soft, FPS)
