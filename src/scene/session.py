"""Scene evaluation — one call turns a time point into a full frame state.

evaluate() is a pure function of (scene, time). It runs the two halves of
the engine side by side:

  time -> timeline schedule -> per-element channels -> composed transforms
  time -> camera keyframes + shake -> camera pose

and hands both to the composer. Nothing is cached between calls, so frames
can be evaluated in any order, repeatedly, or by separate workers.
"""

import math
from dataclasses import dataclass, field
from typing import Optional

from src.animation.resolver import resolve_channels
from src.camera.keyframes import query_camera
from src.camera.stabilization import shake
from src.composer.transform import ElementChannels, camera_pose, compose
from src.timeline.clock import TimePoint, validate_fps


@dataclass(frozen=True)
class Scene:
    """Immutable, fully resolved scene configuration.

    Args:
        name: Scene name.
        fps: Frame rate of the session.
        viewport: Viewport.
        timeline: Timeline from src.timeline.scheduler.build_timeline().
        camera: Camera KeyframeTrack.
        shake: ShakeConfig.
        configs: Element identifier -> AnimationConfig.
        attributes: Element identifier -> renderer pass-through fields
            (text, font size, color...). Never read by the engine.
        duration: Explicit duration in seconds, or None to derive it.
    """

    name: str
    fps: float
    viewport: object
    timeline: object
    camera: object
    shake: object
    configs: dict
    attributes: dict = field(default_factory=dict)
    duration: Optional[float] = None

    def __post_init__(self):
        validate_fps(self.fps)

    def total_duration(self):
        """Explicit duration, else one frame past the last settle or camera keyframe."""
        if self.duration is not None:
            return self.duration
        return max(self.timeline.duration(), self.camera.times[-1]) + 1 / self.fps

    def total_frames(self):
        return int(math.ceil(self.total_duration() * self.fps - 1e-9))


@dataclass(frozen=True)
class FrameState:
    """Everything the renderer needs for one time point."""

    time: float
    camera: object
    pose: object
    schedule: object
    frame: object

    @property
    def elements(self):
        return self.frame.elements


def element_channels(scene, schedule):
    """ElementChannels for every element, resolving only the active ones."""
    entries = []
    for spec in scene.timeline.specs:
        item = schedule.elements[spec.identifier]
        state = None
        if item.active:
            state = resolve_channels(spec.kind, item.local_time, scene.fps, scene.configs[spec.identifier])
        entries.append(ElementChannels(spec.identifier, spec.anchor, item, state))
    return entries


def evaluate(scene, time):
    """Frame state at `time` seconds.

    Args:
        scene: Scene.
        time: Seconds on the global timeline. Any real number; values outside
            the scene clamp to its boundaries.

    Returns:
        FrameState.
    """
    schedule = scene.timeline.resolve(time)

    camera = query_camera(scene.camera, time)
    offset = shake(time, camera.zoom, scene.shake)
    pose = camera_pose(camera, scene.viewport, offset)

    frame = compose(pose, element_channels(scene, schedule))
    return FrameState(time=time, camera=camera, pose=pose, schedule=schedule, frame=frame)


def evaluate_frame(scene, frame_index):
    """Frame state for a frame index at the scene's frame rate."""
    return evaluate(scene, TimePoint.from_frame(frame_index, scene.fps).seconds)
