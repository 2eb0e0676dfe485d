"""Frame sampling — evaluate many frames at once, or split a render for workers.

Every frame is independent, so a render can be cut into contiguous ranges
and each range handed to a separate worker with no coordination. The
samplers return numpy arrays so renderers and tests can work on whole
curves at a time.
"""

import numpy as np

from src.scene.session import evaluate
from src.timeline.clock import TimePoint

# Column order of sample_element()
ELEMENT_CHANNELS = ("opacity", "translate_x", "translate_y", "scale", "rotation", "blur")

# Column order of sample_camera()
CAMERA_CHANNELS = ("x", "y", "zoom", "view_x", "view_y", "view_scale")


def split_frame_range(total_frames, workers):
    """Cut [0, total_frames) into at most `workers` contiguous, near-equal ranges.

    Args:
        total_frames: Number of frames in the render.
        workers: Number of workers available (>= 1).

    Returns:
        List of (start, end) frame ranges, end exclusive, in order.
    """
    if total_frames <= 0:
        return []
    workers = max(1, min(int(workers), total_frames))
    bounds = np.linspace(0, total_frames, workers + 1).round().astype(int)
    return [(int(a), int(b)) for a, b in zip(bounds[:-1], bounds[1:]) if b > a]


def frame_times(start_frame, end_frame, fps):
    """Seconds for every frame index in [start_frame, end_frame)."""
    return np.array([TimePoint.from_frame(f, fps).seconds for f in range(start_frame, end_frame)], dtype=float)


def sample_camera(scene, start_frame=0, end_frame=None):
    """Camera state and pose for a frame range.

    Returns:
        Array of shape (n_frames, 6), columns as CAMERA_CHANNELS.
    """
    if end_frame is None:
        end_frame = scene.total_frames()
    rows = []
    for t in frame_times(start_frame, end_frame, scene.fps):
        state = evaluate(scene, float(t))
        rows.append((
            state.camera.x, state.camera.y, state.camera.zoom,
            state.pose.view_x, state.pose.view_y, state.pose.view_scale,
        ))
    return np.array(rows, dtype=float).reshape(-1, len(CAMERA_CHANNELS))


def sample_element(scene, identifier, start_frame=0, end_frame=None):
    """Composed channels of one element for a frame range.

    Frames where the element is omitted (not yet entered, fully transparent
    or retired) are rows of NaN.

    Returns:
        Array of shape (n_frames, 6), columns as ELEMENT_CHANNELS.
    """
    if end_frame is None:
        end_frame = scene.total_frames()
    times = frame_times(start_frame, end_frame, scene.fps)
    out = np.full((len(times), len(ELEMENT_CHANNELS)), np.nan)
    for row, t in enumerate(times):
        transform = evaluate(scene, float(t)).frame.element(identifier)
        if transform is None:
            continue
        out[row] = [getattr(transform.state, name) for name in ELEMENT_CHANNELS]
    return out


def visible_counts(scene, start_frame=0, end_frame=None):
    """Number of composed elements per frame (a cheap render-cost profile)."""
    if end_frame is None:
        end_frame = scene.total_frames()
    return np.array(
        [len(evaluate(scene, float(t)).elements) for t in frame_times(start_frame, end_frame, scene.fps)],
        dtype=int,
    )
