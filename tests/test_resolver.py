"""Tests for animation kinds and per-kind channel resolution.

Tests cover:
- AnimationKind parsing and dispatch coverage
- config_for: overrides merged onto kind defaults
- resolve_channels: start values, rest values, opacity modes, overshoot
"""

import pytest

from src.animation.kinds import (
    FOLLOW,
    KIND_DEFAULTS,
    AnimationConfig,
    AnimationKind,
    ChannelRanges,
    EasingDriver,
    OpacityRamp,
    config_for,
)
from src.animation.resolver import RESOLVERS, ElementState, driver_progress, resolve_channels
from src.motion.errors import ConfigurationError
from src.motion.spring import SpringConfig
from src.timeline.models import AnimationSpec

FPS = 30


def _defaults(kind, **overrides):
    spec = AnimationSpec(identifier="w", kind=kind, entry_time=0.0, **overrides)
    return config_for(spec)


# ---------------------------------------------------------------------------
# Kinds
# ---------------------------------------------------------------------------

class TestAnimationKind:
    """Test the closed set of animation kinds."""

    def test_parse_string(self):
        assert AnimationKind.parse("slide") is AnimationKind.SLIDE

    def test_parse_is_case_insensitive(self):
        assert AnimationKind.parse("ZOOM") is AnimationKind.ZOOM

    def test_parse_unknown_raises(self):
        with pytest.raises(ConfigurationError, match="Unknown animation kind"):
            AnimationKind.parse("wiggle")

    def test_every_kind_has_a_resolver(self):
        assert set(RESOLVERS) == set(AnimationKind)

    def test_every_kind_has_defaults(self):
        assert set(KIND_DEFAULTS) == set(AnimationKind)

    def test_plain_kinds_share_one_resolver(self):
        plain = {AnimationKind.POP, AnimationKind.SLIDE, AnimationKind.ZOOM,
                 AnimationKind.ARROW, AnimationKind.CUSTOM}
        assert len({RESOLVERS[kind] for kind in plain}) == 1
        assert RESOLVERS[AnimationKind.SPIN] is not RESOLVERS[AnimationKind.POP]
        assert RESOLVERS[AnimationKind.SCALE] is not RESOLVERS[AnimationKind.POP]


class TestConfigFor:
    """Test merging element overrides onto kind defaults."""

    def test_defaults(self):
        config = _defaults(AnimationKind.SLIDE)
        assert config == KIND_DEFAULTS[AnimationKind.SLIDE]

    def test_driver_override(self):
        spring = SpringConfig(damping=20, stiffness=100, mass=1)
        assert _defaults(AnimationKind.SLIDE, driver=spring).driver == spring

    def test_ranges_override(self):
        ranges = ChannelRanges(translate_x=-100, scale=0.85, blur=10)
        assert _defaults(AnimationKind.SLIDE, ranges=ranges).ranges.translate_x == -100

    def test_final_rotation(self):
        assert _defaults(AnimationKind.ARROW, final_rotation=-5).final_rotation == -5

    def test_bad_easing_duration_raises(self):
        with pytest.raises(ConfigurationError):
            EasingDriver(duration=0)

    @pytest.mark.parametrize("fields", [{"duration": "fast"}, {"tension": "high"}, {"duration": True}])
    def test_non_numeric_easing_raises(self, fields):
        with pytest.raises(ConfigurationError, match="must be a number"):
            EasingDriver(**fields)

    def test_non_numeric_start_channel_raises(self):
        with pytest.raises(ConfigurationError, match="translate_x"):
            ChannelRanges(translate_x="left")

    def test_non_numeric_opacity_ramp_raises(self):
        with pytest.raises(ConfigurationError, match="must be a number"):
            OpacityRamp(duration="quick")

    def test_opacity_ramp_needs_one_window(self):
        with pytest.raises(ConfigurationError):
            OpacityRamp()
        with pytest.raises(ConfigurationError):
            OpacityRamp(duration=0.1, frames=3)

    def test_opacity_ramp_frames_window(self):
        assert OpacityRamp(frames=4).window(FPS) == pytest.approx(4 / 30)


# ---------------------------------------------------------------------------
# resolve_channels
# ---------------------------------------------------------------------------

class TestResolveChannels:
    """Test channel values over an element's local time."""

    @pytest.mark.parametrize("kind", list(AnimationKind))
    def test_every_kind_reaches_rest(self, kind):
        config = _defaults(kind, final_rotation=-5)
        state = resolve_channels(kind, 10.0, FPS, config)
        assert state.opacity == pytest.approx(1.0)
        assert state.translate_x == pytest.approx(0.0)
        assert state.translate_y == pytest.approx(0.0)
        assert state.scale == pytest.approx(1.0)
        assert state.rotation == pytest.approx(-5.0)
        assert state.blur == pytest.approx(0.0)

    def test_pop_at_entry(self):
        state = resolve_channels("pop", 0.0, FPS, _defaults(AnimationKind.POP))
        assert state.opacity == 0.0
        assert state.scale == pytest.approx(0.3)

    def test_pop_opacity_ramp(self):
        state = resolve_channels("pop", 0.04, FPS, _defaults(AnimationKind.POP))
        assert state.opacity == pytest.approx(0.5)

    def test_pop_overshoots_scale(self):
        # back-out with tension 1.4, 70% of the way through 0.2s
        state = resolve_channels("pop", 0.14, FPS, _defaults(AnimationKind.POP))
        assert state.scale > 1.0
        assert state.opacity == 1.0

    def test_slide_starts_offset(self):
        state = resolve_channels("slide", 0.0, FPS, _defaults(AnimationKind.SLIDE))
        assert state == ElementState(opacity=0.0, translate_x=100.0, scale=0.85, blur=10.0)

    def test_slide_opacity_follows_spring(self):
        config = _defaults(AnimationKind.SLIDE)
        progress = driver_progress(config.driver, 0.1, FPS)
        state = resolve_channels("slide", 0.1, FPS, config)
        assert state.opacity == pytest.approx(min(1.0, progress))
        assert state.translate_x == pytest.approx(100 * (1 - progress))

    def test_opacity_never_exceeds_one(self):
        config = _defaults(AnimationKind.SLIDE)
        for f in range(60):
            assert 0.0 <= resolve_channels("slide", f / FPS, FPS, config).opacity <= 1.0

    def test_zoom_opacity_ramps_over_four_frames(self):
        config = _defaults(AnimationKind.ZOOM)
        assert resolve_channels("zoom", 2 / FPS, FPS, config).opacity == pytest.approx(0.5)
        assert resolve_channels("zoom", 4 / FPS, FPS, config).opacity == pytest.approx(1.0)

    def test_ramp_holds_at_zero_before_entry(self):
        config = _defaults(AnimationKind.ZOOM)
        assert resolve_channels("zoom", -0.1, FPS, config).opacity == 0.0

    def test_zoom_starts_large(self):
        state = resolve_channels("zoom", 0.0, FPS, _defaults(AnimationKind.ZOOM))
        assert state.scale == pytest.approx(1.5)
        assert state.translate_y == pytest.approx(25)

    def test_spin_rotates_to_final(self):
        config = _defaults(AnimationKind.SPIN, final_rotation=-5)
        assert resolve_channels("spin", 0.0, FPS, config).rotation == pytest.approx(180)

    def test_spin_without_start_rotation_turns_half(self):
        config = AnimationConfig(
            driver=SpringConfig(damping=14, stiffness=120, mass=0.8),
            ranges=ChannelRanges(scale=0.3),
            final_rotation=10,
        )
        assert resolve_channels("spin", 0.0, FPS, config).rotation == pytest.approx(190)

    def test_arrow_keeps_rotation_throughout(self):
        config = _defaults(AnimationKind.ARROW, final_rotation=-5)
        for f in (0, 3, 9):
            assert resolve_channels("arrow", f / FPS, FPS, config).rotation == -5

    def test_scale_never_negative(self):
        config = _defaults(AnimationKind.SCALE)
        for f in range(60):
            assert resolve_channels("scale", f / FPS, FPS, config).scale >= 0.0

    def test_custom_with_easing_driver(self):
        config = AnimationConfig(
            driver=EasingDriver(curve="linear", duration=1.0),
            ranges=ChannelRanges(translate_y=40),
            opacity=FOLLOW,
        )
        state = resolve_channels("custom", 0.25, FPS, config)
        assert state.translate_y == pytest.approx(30)
        assert state.opacity == pytest.approx(0.25)

    def test_blur_never_negative(self):
        config = _defaults(AnimationKind.ARROW)
        for f in range(90):
            assert resolve_channels("arrow", f / FPS, FPS, config).blur >= 0.0

    def test_unsupported_driver_raises(self):
        with pytest.raises(TypeError):
            driver_progress("bouncy", 0.1, FPS)

    def test_deterministic(self):
        config = _defaults(AnimationKind.SPIN)
        assert resolve_channels("spin", 0.23, FPS, config) == resolve_channels("spin", 0.23, FPS, config)
