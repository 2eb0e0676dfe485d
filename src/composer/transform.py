"""Transform composer — camera pose + element channels -> what the renderer draws.

Camera: the world layer is translated, then scaled from the top-left origin:

    view_x = viewport_width / 2 - camera.x * camera.zoom + shake_x
    view_y = viewport_height / 2 - camera.y * camera.zoom + shake_y

Translate-then-scale keeps the viewport-centering term out of the zoom.
Shake is added here, after zoom, so it is never magnified twice.

Elements: each element is placed at its world anchor and transformed in a
fixed order that must not change (the operations don't commute):

    center on anchor -> animated translate -> scale -> rotate

Elements that are inactive or fully transparent are dropped from the output
entirely, and blur up to BLUR_THRESHOLD is reported as 0 so the renderer
can skip the filter pass.
"""

from dataclasses import dataclass, replace
from typing import Optional, Tuple

import numpy as np

from src.motion.errors import ConfigurationError

# Blur radius (px) at or below which no blur filter is applied
BLUR_THRESHOLD = 0.5

OPERATION_ORDER = ("center", "translate", "scale", "rotate")


@dataclass(frozen=True)
class Viewport:
    width: int = 1080
    height: int = 1080

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError(f"Viewport must be positive, got {self.width}x{self.height}")


@dataclass(frozen=True)
class CameraPose:
    """World-layer transform for one frame: translate(view_x, view_y) then scale(view_scale)."""

    view_x: float
    view_y: float
    view_scale: float

    def to_view(self, x, y):
        """Map a world-space point to viewport pixels."""
        return (x * self.view_scale + self.view_x, y * self.view_scale + self.view_y)

    def matrix(self):
        """3x3 affine matrix (world -> viewport) for numpy-based renderers."""
        s = self.view_scale
        return np.array(
            [
                [s, 0.0, self.view_x],
                [0.0, s, self.view_y],
                [0.0, 0.0, 1.0],
            ]
        )

    def to_css(self):
        return f"translate({self.view_x}px, {self.view_y}px) scale({self.view_scale})"


def camera_pose(camera, viewport, shake_offset=(0.0, 0.0)):
    """View transform for a camera state.

    Args:
        camera: Camera (world x, y, zoom).
        viewport: Viewport.
        shake_offset: (x, y) pixels from src.camera.stabilization.shake().

    Returns:
        CameraPose.
    """
    shake_x, shake_y = shake_offset
    return CameraPose(
        view_x=viewport.width / 2 - camera.x * camera.zoom + shake_x,
        view_y=viewport.height / 2 - camera.y * camera.zoom + shake_y,
        view_scale=camera.zoom,
    )


@dataclass(frozen=True)
class TransformOp:
    name: str
    values: Tuple[float, ...] = ()


@dataclass(frozen=True)
class ElementTransform:
    """Final transform of one visible element."""

    identifier: str
    anchor: Tuple[float, float]
    state: object
    operations: Tuple[TransformOp, ...]

    @property
    def has_blur(self):
        return self.state.blur > 0

    def to_css(self):
        """CSS transform string in the fixed operation order."""
        parts = []
        for op in self.operations:
            if op.name == "center":
                parts.append("translate(-50%, -50%)")
            elif op.name == "translate":
                parts.append(f"translate({op.values[0]}px, {op.values[1]}px)")
            elif op.name == "scale":
                parts.append(f"scale({op.values[0]})")
            elif op.name == "rotate":
                parts.append(f"rotate({op.values[0]}deg)")
        return " ".join(parts)

    def css_filter(self):
        return f"blur({self.state.blur}px)" if self.has_blur else "none"


@dataclass(frozen=True)
class ElementChannels:
    """Composer input for one element: where it sits, its schedule and its channels."""

    identifier: str
    anchor: Tuple[float, float]
    schedule: object
    state: Optional[object] = None


@dataclass(frozen=True)
class ComposedFrame:
    pose: CameraPose
    elements: Tuple[ElementTransform, ...]

    def element(self, identifier):
        for transform in self.elements:
            if transform.identifier == identifier:
                return transform
        return None

    def visible_ids(self):
        return [t.identifier for t in self.elements]


def apply_group_fade(state, schedule):
    """Multiply in the group fade-out opacity and add its blur."""
    if schedule.fade_opacity == 1.0 and schedule.fade_blur == 0.0:
        return state
    return replace(
        state,
        opacity=state.opacity * schedule.fade_opacity,
        blur=state.blur + schedule.fade_blur,
    )


def normalize_blur(state):
    if 0 < state.blur <= BLUR_THRESHOLD:
        return replace(state, blur=0.0)
    return state


def element_transform(identifier, anchor, state):
    """ElementTransform with operations in the fixed order."""
    operations = (
        TransformOp("center", (float(anchor[0]), float(anchor[1]))),
        TransformOp("translate", (state.translate_x, state.translate_y)),
        TransformOp("scale", (state.scale,)),
        TransformOp("rotate", (state.rotation,)),
    )
    return ElementTransform(identifier, tuple(anchor), state, operations)


def compose(pose, entries):
    """Combine the camera pose with every element's channels.

    Args:
        pose: CameraPose for the frame.
        entries: Iterable of ElementChannels, in draw order.

    Returns:
        ComposedFrame containing only the visible elements.
    """
    transforms = []
    for entry in entries:
        if not entry.schedule.active or entry.state is None:
            continue
        state = apply_group_fade(entry.state, entry.schedule)
        if state.opacity <= 0:
            continue
        state = normalize_blur(state)
        transforms.append(element_transform(entry.identifier, entry.anchor, state))
    return ComposedFrame(pose=pose, elements=tuple(transforms))
