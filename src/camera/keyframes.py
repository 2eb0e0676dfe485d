"""Keyframe paths — camera moves and any other N-channel keyframed value.

A path is an ordered list of keyframes. Between two keyframes the local
progress is eased with the path's shared curve (cubic-in-out for the camera)
and every channel is lerped independently. Outside the keyframed range the
boundary keyframe is returned as-is; no extrapolation.

Camera values are world-space: (x, y) is the point the camera centers on,
zoom is the camera scale (2.0 = everything twice as large).
"""

import math
from bisect import bisect_right
from dataclasses import dataclass

from src.motion.easing import ease, validate_curve
from src.motion.errors import ConfigurationError

# Shared easing for every camera segment
CAMERA_CURVE = "cubic-in-out"


@dataclass(frozen=True)
class Camera:
    """Camera state: position in world space + zoom level."""

    x: float = 0.0
    y: float = 0.0
    zoom: float = 1.0


@dataclass(frozen=True)
class CameraKeyframe:
    """Camera anchor at a time (seconds)."""

    time: float
    x: float
    y: float
    zoom: float = 1.0

    @property
    def camera(self):
        return Camera(x=self.x, y=self.y, zoom=self.zoom)


class KeyframeTrack:
    """Ordered (time, values) anchors with a shared easing curve.

    Args:
        times: Keyframe times in seconds, strictly increasing.
        values: One tuple of channel values per keyframe, all the same length.
        curve: Easing curve applied to the local progress of every segment.
    """

    __slots__ = ("times", "values", "curve")

    def __init__(self, times, values, curve="linear"):
        if not times:
            raise ConfigurationError("Keyframe track needs at least one keyframe")
        if len(times) != len(values):
            raise ConfigurationError(
                f"Keyframe track has {len(times)} times but {len(values)} values"
            )
        width = len(values[0])
        for i, row in enumerate(values):
            if len(row) != width:
                raise ConfigurationError(
                    f"Keyframe {i} has {len(row)} channels, expected {width}"
                )
        for i in range(1, len(times)):
            if times[i] <= times[i - 1]:
                raise ConfigurationError(
                    f"Keyframe {i} at t={times[i]} is not after keyframe {i - 1} "
                    f"at t={times[i - 1]}; times must be strictly increasing"
                )
        self.times = tuple(float(t) for t in times)
        self.values = tuple(tuple(float(v) for v in row) for row in values)
        self.curve = validate_curve(curve)

    def __len__(self):
        return len(self.times)

    def sample(self, time):
        """Channel values at `time` (seconds).

        Returns:
            Tuple of channel values. Exactly a keyframe's values when `time`
            is on or beyond a keyframe boundary. NaN reads as the first keyframe.
        """
        times = self.times
        if math.isnan(time) or time <= times[0]:
            return self.values[0]
        if time >= times[-1]:
            return self.values[-1]

        # kf[i].time <= time < kf[i + 1].time
        i = bisect_right(times, time) - 1
        t0, t1 = times[i], times[i + 1]
        if t1 == t0:
            return self.values[i + 1]
        if time == t0:
            return self.values[i]

        progress = ease(self.curve, (time - t0) / (t1 - t0))
        start, end = self.values[i], self.values[i + 1]
        return tuple(a + (b - a) * progress for a, b in zip(start, end))


def validate_keyframes(keyframes):
    """Check a camera keyframe list before it is used.

    Raises:
        ConfigurationError: empty list, times not strictly increasing, or a
            non-positive zoom. The message names the keyframe index.
    """
    if not keyframes:
        raise ConfigurationError("Camera needs at least one keyframe")
    for i, kf in enumerate(keyframes):
        if kf.time < 0:
            raise ConfigurationError(f"Camera keyframe {i} has negative time {kf.time}")
        if kf.zoom <= 0:
            raise ConfigurationError(f"Camera keyframe {i} has non-positive zoom {kf.zoom}")
        if i and kf.time <= keyframes[i - 1].time:
            raise ConfigurationError(
                f"Camera keyframe {i} at t={kf.time} is not after keyframe {i - 1} "
                f"at t={keyframes[i - 1].time}"
            )
    return keyframes


def camera_track(keyframes, curve=CAMERA_CURVE):
    """Build the 3-channel (x, y, zoom) track for a camera keyframe list."""
    validate_keyframes(keyframes)
    return KeyframeTrack(
        [kf.time for kf in keyframes],
        [(kf.x, kf.y, kf.zoom) for kf in keyframes],
        curve=curve,
    )


def query_camera(track, time):
    """Camera state at `time`.

    Args:
        track: KeyframeTrack from camera_track().
        time: Seconds on the global timeline.

    Returns:
        Camera at the interpolated position.
    """
    x, y, zoom = track.sample(time)
    return Camera(x=x, y=y, zoom=zoom)


def static_track(camera=None):
    """Single-keyframe track that always returns `camera` (origin by default)."""
    camera = camera or Camera()
    return camera_track([CameraKeyframe(time=0.0, x=camera.x, y=camera.y, zoom=camera.zoom)])
