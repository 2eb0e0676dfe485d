"""Animation resolver — local time to channel values, one strategy per kind.

Every resolver gets the element's local elapsed time (0 at entry), the
frame rate and a fully merged AnimationConfig, and returns an ElementState.
Channels are lerped from their start value to rest using the driver's
progress. Spring and back-easing overshoot is carried into the channels
(e.g. scale briefly above 1); only opacity is clamped to [0, 1].

Most kinds share the standard strategy and differ only in the defaults
config_for() merges in. Spin and scale each add one adjustment.

resolve_channels() is the single dispatch point. RESOLVERS must cover every
AnimationKind; this is checked when the module is imported.
"""

from dataclasses import dataclass, replace

from src.animation.kinds import (
    AnimationKind,
    EasingDriver,
    OpacityRamp,
)
from src.motion.easing import ease, interpolate, lerp
from src.motion.spring import SpringConfig, spring_value


@dataclass(frozen=True)
class ElementState:
    """Resolved visual channels for one element at one time."""

    opacity: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0
    scale: float = 1.0
    rotation: float = 0.0
    blur: float = 0.0


def _clamp01(value):
    return max(0.0, min(1.0, value))


def driver_progress(driver, local_time, fps):
    """Progress of a spring or easing driver after `local_time` seconds."""
    if isinstance(driver, SpringConfig):
        return spring_value(local_time, fps, driver)
    if isinstance(driver, EasingDriver):
        if local_time <= 0:
            return 0.0
        return ease(driver.curve, local_time / driver.duration, driver.tension)
    raise TypeError(f"Unsupported animation driver: {driver!r}")


def _opacity(mode, progress, local_time, fps):
    if isinstance(mode, OpacityRamp):
        return interpolate(local_time, (0.0, mode.window(fps)), (0.0, 1.0))
    return _clamp01(progress)


def _settle(config, progress, opacity, start_rotation=None):
    """Lerp every channel from its start value to rest."""
    ranges = config.ranges
    final_rotation = config.final_rotation
    if start_rotation is None:
        start_rotation = ranges.rotation
    rotation = final_rotation if start_rotation is None else lerp(start_rotation, final_rotation, progress)
    return ElementState(
        opacity=opacity,
        translate_x=lerp(ranges.translate_x, 0.0, progress),
        translate_y=lerp(ranges.translate_y, 0.0, progress),
        scale=lerp(ranges.scale, 1.0, progress),
        rotation=rotation,
        blur=max(0.0, lerp(ranges.blur, 0.0, progress)),
    )


def _resolve_standard(local_time, fps, config):
    progress = driver_progress(config.driver, local_time, fps)
    return _settle(config, progress, _opacity(config.opacity, progress, local_time, fps))


def _resolve_spin(local_time, fps, config):
    progress = driver_progress(config.driver, local_time, fps)
    start_rotation = config.ranges.rotation
    if start_rotation is None:
        start_rotation = config.final_rotation + 180.0
    return _settle(
        config, progress,
        _opacity(config.opacity, progress, local_time, fps),
        start_rotation=start_rotation,
    )


def _resolve_scale(local_time, fps, config):
    # Scale from nothing can't dip below zero on undershoot
    state = _resolve_standard(local_time, fps, config)
    if state.scale < 0:
        state = replace(state, scale=0.0)
    return state


# pop, slide, zoom, arrow and custom differ only in their merged defaults
RESOLVERS = {
    AnimationKind.POP: _resolve_standard,
    AnimationKind.SLIDE: _resolve_standard,
    AnimationKind.ZOOM: _resolve_standard,
    AnimationKind.SPIN: _resolve_spin,
    AnimationKind.ARROW: _resolve_standard,
    AnimationKind.SCALE: _resolve_scale,
    AnimationKind.CUSTOM: _resolve_standard,
}

_missing = set(AnimationKind) - set(RESOLVERS)
if _missing:
    raise RuntimeError(f"No resolver for animation kinds: {sorted(k.value for k in _missing)}")


def resolve_channels(kind, local_time, fps, config):
    """Channel values for an active element.

    Args:
        kind: AnimationKind (or its string value).
        local_time: Seconds since the element's entry. 0 at entry.
        fps: Session frame rate.
        config: AnimationConfig from src.animation.kinds.config_for().

    Returns:
        ElementState.
    """
    return RESOLVERS[AnimationKind.parse(kind)](local_time, fps, config)
