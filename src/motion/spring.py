"""Spring solver — closed-form settling curve of a damped oscillator.

The value starts at 0 with zero velocity and settles at 1. Nothing is
integrated step by step: the value at any elapsed time comes straight from
the analytic step response, so frames can be evaluated in any order.

Damping ratio picks the shape:
  < 1  under-damped — overshoots 1, oscillates, converges
  = 1  critically damped — fastest monotonic rise
  > 1  over-damped — slower monotonic rise

Past the settle time the value is exactly 1, so the tail of tiny
oscillations never leaks into rendered frames.
"""

import math
from dataclasses import dataclass

from src.motion.errors import ConfigurationError

# Displacement below this is treated as at rest
REST_THRESHOLD = 0.001

# |ratio - 1| below this is handled as critically damped
CRITICAL_TOLERANCE = 1e-6


@dataclass(frozen=True)
class SpringConfig:
    """Virtual oscillator parameters. All three must be positive."""

    damping: float = 10.0
    stiffness: float = 100.0
    mass: float = 1.0

    def __post_init__(self):
        for name in ("damping", "stiffness", "mass"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or value <= 0:
                raise ConfigurationError(f"Spring {name} must be positive, got {value!r}")

    @property
    def natural_frequency(self):
        """Undamped angular frequency in rad/s."""
        return math.sqrt(self.stiffness / self.mass)

    @property
    def damping_ratio(self):
        return self.damping / (2.0 * math.sqrt(self.stiffness * self.mass))


def _displacement(config, t):
    """Distance from rest at time t (1.0 at t=0, 0.0 at rest)."""
    omega = config.natural_frequency
    zeta = config.damping_ratio

    if abs(zeta - 1.0) < CRITICAL_TOLERANCE:
        return (1.0 + omega * t) * math.exp(-omega * t)

    if zeta < 1.0:
        omega_d = omega * math.sqrt(1.0 - zeta * zeta)
        envelope = math.exp(-zeta * omega * t)
        return envelope * (math.cos(omega_d * t) + (zeta * omega / omega_d) * math.sin(omega_d * t))

    root = math.sqrt(zeta * zeta - 1.0)
    r_slow = -omega * (zeta - root)
    r_fast = -omega * (zeta + root)
    return (r_fast * math.exp(r_slow * t) - r_slow * math.exp(r_fast * t)) / (r_fast - r_slow)


def _envelope(config):
    """(amplitude, decay_rate) such that |displacement(t)| <= amplitude * exp(-decay_rate * t)."""
    omega = config.natural_frequency
    zeta = config.damping_ratio

    if abs(zeta - 1.0) < CRITICAL_TOLERANCE:
        # (1 + x) e^-x <= 2 e^-0.5 * e^(-x/2)
        return 2.0 * math.exp(-0.5), omega / 2.0

    if zeta < 1.0:
        return 1.0 / math.sqrt(1.0 - zeta * zeta), zeta * omega

    root = math.sqrt(zeta * zeta - 1.0)
    slow = omega * (zeta - root)
    fast = omega * (zeta + root)
    return (slow + fast) / (fast - slow), slow


def settle_time(config, fps):
    """Elapsed seconds after which spring_value() returns exactly 1.

    The envelope bound drops below REST_THRESHOLD at this time. The result is
    rounded up to the next whole frame at `fps` so the snap to rest always
    lands on a frame boundary.

    Args:
        config: SpringConfig.
        fps: Frame rate of the session.

    Returns:
        Settle time in seconds.
    """
    amplitude, rate = _envelope(config)
    seconds = math.log(max(amplitude, 1.0) / REST_THRESHOLD) / rate
    if fps and fps > 0:
        return math.ceil(seconds * fps - 1e-9) / fps
    return seconds


def spring_value(elapsed, fps, config):
    """Settling value of the spring after `elapsed` seconds.

    Args:
        elapsed: Seconds since the spring was released. <= 0 means not started.
        fps: Frame rate, used to place the settle snap on a frame boundary.
        config: SpringConfig.

    Returns:
        0.0 for elapsed <= 0, exactly 1.0 from the settle time on, the
        analytic step response in between (may exceed 1 when under-damped).
    """
    if elapsed <= 0:
        return 0.0
    if elapsed >= settle_time(config, fps):
        return 1.0
    return 1.0 - _displacement(config, elapsed)
