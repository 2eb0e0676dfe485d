"""Animation kinds and their default parameters.

Each kind is an entrance behavior with its own driver (spring or easing),
starting channel offsets and opacity mode. Every channel ends at rest:
translate 0, scale 1, rotation = the element's final rotation, blur 0.

Kind defaults (start values):
  pop    back-out easing 0.2s   scale 0.3                        opacity ramp 0.08s
  slide  fast spring            x 100, scale 0.85, blur 10        opacity follows
  zoom   heavy spring           y 25, scale 1.5, blur 12          opacity ramp 4 frames
  spin   standard spring        y 50, scale 0.3, rot 180, blur 12 opacity follows
  arrow  slow spring            x 20, y 50, scale 0.6, blur 6     opacity follows
  scale  standard spring        scale 0, blur 15                  opacity follows
  custom standard spring        nothing moves unless configured   opacity follows
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from src.motion.easing import validate_curve
from src.motion.errors import ConfigurationError
from src.motion.spring import SpringConfig


def _check_number(owner, name, value, optional=False):
    if value is None and optional:
        return
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{owner} {name} must be a number, got {value!r}")


class AnimationKind(Enum):
    POP = "pop"
    SLIDE = "slide"
    ZOOM = "zoom"
    SPIN = "spin"
    ARROW = "arrow"
    SCALE = "scale"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ConfigurationError(
                f"Unknown animation kind {value!r}. Use one of: {[k.value for k in cls]}"
            ) from None


@dataclass(frozen=True)
class EasingDriver:
    """Progress = ease(curve, local_time / duration)."""

    curve: str = "cubic-out"
    duration: float = 0.3
    tension: Optional[float] = None

    def __post_init__(self):
        validate_curve(self.curve)
        _check_number("Easing", "duration", self.duration)
        _check_number("Easing", "tension", self.tension, optional=True)
        if self.duration <= 0:
            raise ConfigurationError(f"Easing duration must be positive, got {self.duration}")


@dataclass(frozen=True)
class ChannelRanges:
    """Starting channel values. rotation=None keeps the final rotation throughout."""

    translate_x: float = 0.0
    translate_y: float = 0.0
    scale: float = 1.0
    rotation: Optional[float] = None
    blur: float = 0.0

    def __post_init__(self):
        for name in ("translate_x", "translate_y", "scale", "blur"):
            _check_number("Start", name, getattr(self, name))
        _check_number("Start", "rotation", self.rotation, optional=True)
        if self.blur < 0:
            raise ConfigurationError(f"Blur must be >= 0, got {self.blur}")


@dataclass(frozen=True)
class OpacityRamp:
    """Opacity climbs linearly 0 -> 1 over `duration` seconds, or `frames` frames."""

    duration: Optional[float] = None
    frames: Optional[float] = None

    def __post_init__(self):
        if (self.duration is None) == (self.frames is None):
            raise ConfigurationError("Opacity ramp needs exactly one of 'duration' or 'frames'")
        window = self.duration if self.duration is not None else self.frames
        _check_number("Opacity ramp", "window", window)
        if window <= 0:
            raise ConfigurationError(f"Opacity ramp window must be positive, got {window}")

    def window(self, fps):
        """Ramp length in seconds at `fps`."""
        if self.duration is not None:
            return self.duration
        return self.frames / fps


# Opacity tracks the same progress as the motion
FOLLOW = "follow"


@dataclass(frozen=True)
class AnimationConfig:
    """Fully specified parameters for one resolver call."""

    driver: object
    ranges: ChannelRanges
    final_rotation: float = 0.0
    opacity: object = FOLLOW


STANDARD_SPRING = SpringConfig(damping=14, stiffness=120, mass=0.8)
FAST_SPRING = SpringConfig(damping=12, stiffness=200, mass=0.6)
HEAVY_SPRING = SpringConfig(damping=10, stiffness=80, mass=1.2)
SLOW_SPRING = SpringConfig(damping=16, stiffness=100, mass=1)

KIND_DEFAULTS = {
    AnimationKind.POP: AnimationConfig(
        driver=EasingDriver(curve="back-out", duration=0.2, tension=1.4),
        ranges=ChannelRanges(scale=0.3),
        opacity=OpacityRamp(duration=0.08),
    ),
    AnimationKind.SLIDE: AnimationConfig(
        driver=FAST_SPRING,
        ranges=ChannelRanges(translate_x=100, scale=0.85, blur=10),
    ),
    AnimationKind.ZOOM: AnimationConfig(
        driver=HEAVY_SPRING,
        ranges=ChannelRanges(translate_y=25, scale=1.5, blur=12),
        opacity=OpacityRamp(frames=4),
    ),
    AnimationKind.SPIN: AnimationConfig(
        driver=STANDARD_SPRING,
        ranges=ChannelRanges(translate_y=50, scale=0.3, rotation=180, blur=12),
    ),
    AnimationKind.ARROW: AnimationConfig(
        driver=SLOW_SPRING,
        ranges=ChannelRanges(translate_x=20, translate_y=50, scale=0.6, blur=6),
    ),
    AnimationKind.SCALE: AnimationConfig(
        driver=STANDARD_SPRING,
        ranges=ChannelRanges(scale=0, blur=15),
    ),
    AnimationKind.CUSTOM: AnimationConfig(
        driver=STANDARD_SPRING,
        ranges=ChannelRanges(),
    ),
}


def config_for(spec):
    """Merge an AnimationSpec's overrides onto its kind defaults."""
    kind = AnimationKind.parse(spec.kind)
    base = KIND_DEFAULTS[kind]
    config = replace(base, final_rotation=spec.final_rotation)
    if spec.driver is not None:
        config = replace(config, driver=spec.driver)
    if spec.ranges is not None:
        config = replace(config, ranges=spec.ranges)
    if spec.opacity is not None:
        config = replace(config, opacity=spec.opacity)
    return config
