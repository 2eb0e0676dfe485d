"""Handheld camera shake — deterministic jitter added to the view offset.

The jitter is a sum of out-of-phase sine/cosine components per axis, driven
by time in seconds. No random source, so the same time always shakes the
same way regardless of render order.

Amplitude is divided by the camera zoom. The offset is added after the zoom
is applied, so on screen the jitter stays roughly the same number of pixels
at every zoom level.
"""

import math
from dataclasses import dataclass, field

from src.motion.errors import ConfigurationError

WAVES = {"sin": math.sin, "cos": math.cos}


@dataclass(frozen=True)
class ShakeComponent:
    """One periodic term: weight * wave(frequency * t)."""

    weight: float
    frequency: float  # rad/s
    wave: str = "sin"

    def __post_init__(self):
        if self.wave not in WAVES:
            raise ConfigurationError(f"Shake wave must be 'sin' or 'cos', got {self.wave!r}")

    def at(self, t):
        return self.weight * WAVES[self.wave](self.frequency * t)


# Converted from per-frame phase rates at 30 fps (0.7 rad/frame = 21 rad/s)
DEFAULT_X_COMPONENTS = (
    ShakeComponent(0.5, 21.0, "sin"),
    ShakeComponent(0.3, 39.0, "sin"),
)
DEFAULT_Y_COMPONENTS = (
    ShakeComponent(0.4, 27.0, "cos"),
    ShakeComponent(0.2, 51.0, "cos"),
)


@dataclass(frozen=True)
class ShakeConfig:
    """Shake settings for a scene."""

    base_amplitude: float = 1.2
    x_components: tuple = field(default=DEFAULT_X_COMPONENTS)
    y_components: tuple = field(default=DEFAULT_Y_COMPONENTS)
    enabled: bool = True

    def __post_init__(self):
        if self.base_amplitude < 0:
            raise ConfigurationError(f"Shake base_amplitude must be >= 0, got {self.base_amplitude}")
        if self.enabled and (len(self.x_components) < 2 or len(self.y_components) < 2):
            raise ConfigurationError("Shake needs at least two components per axis")


NO_SHAKE = ShakeConfig(enabled=False)


def shake(time, zoom, config=None):
    """Jitter offset in screen pixels at `time`.

    Args:
        time: Seconds on the global timeline.
        zoom: Current camera zoom (> 0).
        config: ShakeConfig. Defaults to the standard handheld shake.

    Returns:
        (offset_x, offset_y) to add to the view offset after zoom scaling.
    """
    config = config or ShakeConfig()
    if not config.enabled or config.base_amplitude == 0:
        return (0.0, 0.0)

    amplitude = config.base_amplitude / zoom
    offset_x = sum(c.at(time) for c in config.x_components) * amplitude
    offset_y = sum(c.at(time) for c in config.y_components) * amplitude
    return (offset_x, offset_y)
