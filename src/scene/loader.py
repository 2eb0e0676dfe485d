"""Scene loader — YAML scene files to a validated, immutable Scene.

Scene files live in config/scenes/<name>.yaml under a top-level `scene` key:

  name, fps, viewport {width, height}, duration | duration_frames
  shake: false | {base_amplitude, x: [...], y: [...]}
  events:   [{name, at | at_frame | after, offset}]
  camera:   {curve, keyframes: [{time | frame | event (+offset), x, y, zoom}]}
  groups:   [{id, members, start | start_frame | trigger, stagger, exit}]
  elements: [{id, x, y, animation | kind, enter | enter_frame | trigger, ...overrides}]

Everything is checked here. A bad file raises ConfigurationError naming the
element, group, event or keyframe, and no Scene is returned.
"""

import logging
import os

import yaml

from src.animation.kinds import AnimationKind, config_for
from src.camera.keyframes import CAMERA_CURVE, CameraKeyframe, camera_track
from src.camera.stabilization import NO_SHAKE, ShakeComponent, ShakeConfig
from src.composer.transform import Viewport
from src.motion.errors import ConfigurationError
from src.scene.presets import expand_preset, load_presets, parse_driver, parse_opacity, parse_ranges
from src.scene.session import Scene
from src.scene.settings import default_fps, default_viewport_size, scenes_dir
from src.timeline.clock import frame_to_seconds, validate_fps
from src.timeline.models import AnimationSpec, GroupExit, PhaseGroup, TimelineEvent, Trigger
from src.timeline.scheduler import build_timeline

logger = logging.getLogger(__name__)

# Element keys consumed by the engine; everything else is renderer pass-through
ENGINE_KEYS = {
    "id", "x", "y", "animation", "kind", "enter", "enter_frame", "trigger",
    "spring", "easing", "from", "opacity", "rotation", "pop_duration",
}


def _time_field(data, seconds_key, frame_key, fps):
    """Seconds from either a seconds key or a frame key (not both)."""
    if seconds_key in data and frame_key in data:
        raise ConfigurationError(f"use either '{seconds_key}' or '{frame_key}', not both")
    if seconds_key in data:
        return float(data[seconds_key])
    if frame_key in data:
        return frame_to_seconds(data[frame_key], fps)
    return None


def _parse_trigger(value):
    if value is None:
        return None
    if isinstance(value, str):
        return Trigger(event=value)
    if isinstance(value, dict) and "event" in value:
        return Trigger(event=value["event"], offset=float(value.get("offset", 0.0)))
    raise ConfigurationError("trigger must be an event name or {event, offset}")


def _parse_events(items, fps):
    events = []
    for i, item in enumerate(items or []):
        label = f"event[{i}] {item.get('name')!r}" if isinstance(item, dict) else f"event[{i}]"
        if not isinstance(item, dict) or "name" not in item:
            raise ConfigurationError(f"{label}: needs a name")
        try:
            events.append(TimelineEvent(
                name=item["name"],
                at=_time_field(item, "at", "at_frame", fps),
                after=item.get("after"),
                offset=float(item.get("offset", 0.0)),
            ))
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"{label}: {exc}") from exc
    return events


def _parse_exit(data):
    if data is None:
        return None
    if not isinstance(data, dict):
        raise ConfigurationError(f"exit must be a mapping, got {data!r}")
    unknown = set(data) - {"hold", "fade", "max_blur", "grace"}
    if unknown:
        raise ConfigurationError(f"unknown exit settings {sorted(unknown)}")
    return GroupExit(**{k: float(v) for k, v in data.items()})


def _parse_groups(items, fps):
    groups = []
    for i, item in enumerate(items or []):
        label = f"group[{i}] {item.get('id')!r}" if isinstance(item, dict) else f"group[{i}]"
        if not isinstance(item, dict) or "id" not in item:
            raise ConfigurationError(f"{label}: needs an id")
        try:
            group_exit = _parse_exit(item.get("exit"))
            start = _time_field(item, "start", "start_frame", fps)
            groups.append(PhaseGroup(
                identifier=item["id"],
                members=tuple(item.get("members", [])),
                start=0.0 if start is None else start,
                stagger=float(item.get("stagger", 0.25)),
                exit=group_exit,
                trigger=_parse_trigger(item.get("trigger")),
            ))
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"{label}: {exc}") from exc
    return groups


def _parse_elements(items, groups, presets, fps):
    """Returns (specs, configs, attributes)."""
    if not items:
        raise ConfigurationError("Scene has no elements")

    group_of = {m: g for g in groups for m in g.members}

    specs, configs, attributes = [], {}, {}
    for i, item in enumerate(items):
        label = f"element[{i}] {item.get('id')!r}" if isinstance(item, dict) else f"element[{i}]"
        if not isinstance(item, dict) or "id" not in item:
            raise ConfigurationError(f"{label}: needs an id")
        try:
            fields = expand_preset(item, presets)
            kind = AnimationKind.parse(fields.get("kind", "custom"))
            entry = _time_field(fields, "enter", "enter_frame", fps)
            trigger = _parse_trigger(fields.get("trigger"))
            identifier = fields["id"]
            group = group_of.get(identifier)
            if entry is None and trigger is None and group is None:
                raise ConfigurationError("needs 'enter', 'enter_frame', 'trigger' or a group")

            spec = AnimationSpec(
                identifier=identifier,
                kind=kind,
                entry_time=entry,
                trigger=trigger,
                driver=parse_driver(fields),
                ranges=parse_ranges(fields),
                final_rotation=float(fields.get("rotation", 0.0)),
                opacity=parse_opacity(fields),
                anchor=(float(fields.get("x", 0.0)), float(fields.get("y", 0.0))),
                pop_duration=float(fields.get("pop_duration", 0.2)),
                group=group.identifier if group else None,
            )
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"{label}: {exc}") from exc

        specs.append(spec)
        configs[identifier] = config_for(spec)
        attributes[identifier] = {k: v for k, v in item.items() if k not in ENGINE_KEYS}
    return specs, configs, attributes


def _parse_camera(data, timeline, fps):
    if not data:
        raise ConfigurationError("Scene needs a camera with at least one keyframe")
    items = data.get("keyframes") or []
    if not items:
        raise ConfigurationError("Camera needs at least one keyframe")

    keyframes = []
    for i, item in enumerate(items):
        label = f"camera keyframe {i}"
        if not isinstance(item, dict):
            raise ConfigurationError(f"{label}: expected a mapping, got {item!r}")
        try:
            if "event" in item:
                time = timeline.event_time(item["event"]) + float(item.get("offset", 0.0))
            else:
                time = _time_field(item, "time", "frame", fps)
            if time is None:
                raise ConfigurationError("needs 'time', 'frame' or 'event'")
            keyframes.append(CameraKeyframe(
                time=time,
                x=float(item["x"]),
                y=float(item["y"]),
                zoom=float(item.get("zoom", 1.0)),
            ))
        except KeyError as exc:
            raise ConfigurationError(f"{label}: missing {exc.args[0]!r}") from None
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"{label}: {exc}") from exc
    return camera_track(keyframes, curve=data.get("curve", CAMERA_CURVE))


def _parse_shake(data):
    if data is None or data is True:
        return ShakeConfig()
    if data is False:
        return NO_SHAKE
    if not isinstance(data, dict):
        raise ConfigurationError(f"shake must be true, false or a mapping, got {data!r}")

    def components(key):
        if key not in data:
            return None
        return tuple(
            ShakeComponent(
                weight=float(c["weight"]), frequency=float(c["frequency"]), wave=c.get("wave", "sin"),
            )
            for c in data[key]
        )

    fields = {"base_amplitude": float(data.get("base_amplitude", 1.2))}
    x_components, y_components = components("x"), components("y")
    if x_components is not None:
        fields["x_components"] = x_components
    if y_components is not None:
        fields["y_components"] = y_components
    return ShakeConfig(**fields)


def scene_from_dict(data, presets=None, source="<dict>"):
    """Build a Scene from an already-parsed `scene` mapping.

    Args:
        data: The mapping under the top-level `scene` key.
        presets: Preset library (see src.scene.presets.load_presets()).
            Loaded from config/ when None.
        source: Label used in log and error messages.

    Returns:
        Scene.

    Raises:
        ConfigurationError: for any invalid field.
    """
    if not isinstance(data, dict):
        raise ConfigurationError(f"{source}: expected a 'scene' mapping")
    if presets is None:
        presets = load_presets()

    fps = validate_fps(data.get("fps", default_fps()))
    width, height = default_viewport_size()
    viewport_data = data.get("viewport") or {}
    try:
        viewport = Viewport(
            width=int(viewport_data.get("width", width)),
            height=int(viewport_data.get("height", height)),
        )
    except (AttributeError, TypeError, ValueError) as exc:
        raise ConfigurationError(f"{source}: viewport: {exc}") from exc

    events = _parse_events(data.get("events"), fps)
    groups = _parse_groups(data.get("groups"), fps)
    specs, configs, attributes = _parse_elements(data.get("elements"), groups, presets, fps)
    timeline = build_timeline(specs, groups, events)
    camera = _parse_camera(data.get("camera"), timeline, fps)

    try:
        duration = _time_field(data, "duration", "duration_frames", fps)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{source}: duration: {exc}") from exc
    try:
        shake = _parse_shake(data.get("shake"))
    except KeyError as exc:
        raise ConfigurationError(f"{source}: shake component missing {exc.args[0]!r}") from None
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{source}: shake: {exc}") from exc

    scene = Scene(
        name=data.get("name", source),
        fps=fps,
        viewport=viewport,
        timeline=timeline,
        camera=camera,
        shake=shake,
        configs=configs,
        attributes=attributes,
        duration=duration,
    )
    logger.info(
        "Loaded scene %s: %d elements, %d groups, %d camera keyframes, %d frames at %g fps",
        scene.name, len(specs), len(groups), len(camera), scene.total_frames(), fps,
    )
    return scene


def load_scene(name_or_path, presets=None):
    """Load a scene by name (config/scenes/<name>.yaml) or by file path."""
    path = name_or_path
    if not os.path.exists(path):
        path = os.path.join(scenes_dir(), f"{name_or_path}.yaml")
    if not os.path.exists(path):
        raise ConfigurationError(f"Scene {name_or_path!r} not found (looked in {scenes_dir()})")

    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    return scene_from_dict(data.get("scene"), presets=presets, source=os.path.basename(path))
