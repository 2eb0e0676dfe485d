"""Time points — seconds or (frame index, fps), interchangeable."""

from dataclasses import dataclass

from src.motion.errors import ConfigurationError

# Float error allowed when snapping seconds back to a whole frame
FRAME_SNAP_EPSILON = 1e-9


def validate_fps(fps):
    if not isinstance(fps, (int, float)) or fps <= 0:
        raise ConfigurationError(f"Frame rate must be positive, got {fps!r}")
    return fps


def frame_to_seconds(frame, fps):
    return frame / fps


def seconds_to_frame(seconds, fps):
    """Frame position for `seconds`. Whole frames come back as exact ints."""
    frame = seconds * fps
    nearest = round(frame)
    if abs(frame - nearest) < FRAME_SNAP_EPSILON:
        return int(nearest)
    return frame


@dataclass(frozen=True)
class TimePoint:
    """A point on the global timeline, stored in seconds."""

    seconds: float

    @classmethod
    def from_frame(cls, frame, fps):
        return cls(frame_to_seconds(frame, fps))

    def frame(self, fps):
        """Frame position (int when on a frame boundary, float otherwise)."""
        return seconds_to_frame(self.seconds, fps)

    def frame_index(self, fps):
        """Index of the frame that is showing at this time."""
        position = self.frame(fps)
        return position if isinstance(position, int) else int(position // 1)
