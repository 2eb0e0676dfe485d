"""Easing curves — remap normalized progress so motion doesn't look linear.

Every curve takes progress in [0, 1]. Input outside that range is clamped
first, so ease() is total. The back curves overshoot past 1.0 (or dip below
0.0) on purpose; that overshoot is never clamped afterwards.

Curve names:
  linear
  quad-in, quad-out, quad-in-out
  cubic-in, cubic-out, cubic-in-out
  back-in, back-out (alias: back) — tension controls the overshoot
"""

from src.motion.errors import ConfigurationError

# Standard back-easing tension (~10% overshoot)
DEFAULT_BACK_TENSION = 1.70158


def _linear(t, tension):
    return t


def _quad_in(t, tension):
    return t * t


def _quad_out(t, tension):
    return 1 - (1 - t) * (1 - t)


def _quad_in_out(t, tension):
    return 2 * t * t if t < 0.5 else 1 - (-2 * t + 2) ** 2 / 2


def _cubic_in(t, tension):
    return t * t * t


def _cubic_out(t, tension):
    return 1 - (1 - t) ** 3


def _cubic_in_out(t, tension):
    return 4 * t * t * t if t < 0.5 else 1 - (-2 * t + 2) ** 3 / 2


def _back_in(t, tension):
    s = DEFAULT_BACK_TENSION if tension is None else tension
    return t * t * ((s + 1) * t - s)


def _back_out(t, tension):
    # Mirror of back-in; exactly 1.0 at t == 1
    return 1 - _back_in(1 - t, tension)


CURVES = {
    "linear": _linear,
    "quad-in": _quad_in,
    "quad-out": _quad_out,
    "quad-in-out": _quad_in_out,
    "cubic-in": _cubic_in,
    "cubic-out": _cubic_out,
    "cubic-in-out": _cubic_in_out,
    "back-in": _back_in,
    "back-out": _back_out,
    "back": _back_out,
}


def validate_curve(curve):
    """Raise ConfigurationError if `curve` is not a known curve name."""
    if curve not in CURVES:
        raise ConfigurationError(
            f"Unknown easing curve {curve!r}. Use one of: {sorted(CURVES)}"
        )
    return curve


def ease(curve, progress, tension=None):
    """Remap progress through a named curve.

    Args:
        curve: One of the CURVES names.
        progress: Normalized progress. Clamped to [0.0, 1.0].
        tension: Overshoot tension for the back curves. Ignored by the others.

    Returns:
        Remapped progress. Back curves may leave [0, 1] between the endpoints.
    """
    fn = CURVES.get(curve)
    if fn is None:
        validate_curve(curve)
    t = max(0.0, min(1.0, float(progress)))
    if t == 0.0:
        return 0.0
    if t == 1.0:
        return 1.0
    return fn(t, tension)


def lerp(start, end, progress):
    """Unclamped linear interpolation. Overshooting progress overshoots the range."""
    return start + (end - start) * progress


def interpolate(value, input_range, output_range, curve="linear", tension=None, clamp=True):
    """Map `value` through piecewise input/output stops.

    Finds the segment of `input_range` that contains `value`, eases the local
    progress through `curve` and lerps the matching output stops. The resolver
    uses it for opacity ramps (0 → 1 across the ramp window).

    Args:
        value: Input value (usually seconds).
        input_range: Strictly increasing input stops (at least 2).
        output_range: Output stops, same length as input_range.
        curve: Easing curve applied within each segment.
        tension: Tension for back curves.
        clamp: When True, values outside the input range return the boundary
            outputs. When False the end segments are extended linearly.

    Returns:
        Interpolated output value.
    """
    if len(input_range) != len(output_range) or len(input_range) < 2:
        raise ConfigurationError(
            "interpolate() needs matching input/output ranges with at least 2 stops"
        )

    if clamp:
        if value <= input_range[0]:
            return output_range[0]
        if value >= input_range[-1]:
            return output_range[-1]

    # Pick the segment; end segments extend when not clamping
    i = 0
    while i < len(input_range) - 2 and value >= input_range[i + 1]:
        i += 1

    x0, x1 = input_range[i], input_range[i + 1]
    y0, y1 = output_range[i], output_range[i + 1]
    if x1 == x0:
        return y1

    progress = (value - x0) / (x1 - x0)
    if 0.0 <= progress <= 1.0:
        progress = ease(curve, progress, tension)
    return lerp(y0, y1, progress)
