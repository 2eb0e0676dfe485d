"""Animation presets — named entrance styles shared by every scene.

Presets live in config/animation_presets.yaml. A scene element refers to one
by name ("animation: slide_from_left") and may override any field.

Preset / element fields:
  kind      pop | slide | zoom | spin | arrow | scale | custom
  spring    {damping, stiffness, mass}
  easing    {curve, duration, tension}
  from      {translate_x, translate_y, scale, rotation, blur}  start values
  opacity   "follow" | {ramp: seconds} | {ramp_frames: frames}
"""

import logging
import os

import yaml

from src.animation.kinds import (
    FOLLOW,
    AnimationKind,
    ChannelRanges,
    EasingDriver,
    OpacityRamp,
)
from src.motion.errors import ConfigurationError
from src.motion.spring import SpringConfig
from src.scene.settings import presets_path

logger = logging.getLogger(__name__)

PRESET_FIELDS = ("kind", "spring", "easing", "from", "opacity", "rotation", "pop_duration")


def _mapping(value, label):
    if not isinstance(value, dict):
        raise ConfigurationError(f"{label} must be a mapping, got {value!r}")
    return value


def parse_driver(data):
    """SpringConfig / EasingDriver from a preset or element dict, or None."""
    if "spring" in data and "easing" in data:
        raise ConfigurationError("Use either 'spring' or 'easing', not both")
    if "spring" in data:
        spring = _mapping(data["spring"], "spring")
        return SpringConfig(
            damping=spring.get("damping", 10.0),
            stiffness=spring.get("stiffness", 100.0),
            mass=spring.get("mass", 1.0),
        )
    if "easing" in data:
        easing = _mapping(data["easing"], "easing")
        return EasingDriver(
            curve=easing.get("curve", "cubic-out"),
            duration=easing.get("duration", 0.3),
            tension=easing.get("tension"),
        )
    return None


def parse_ranges(data):
    if "from" not in data:
        return None
    start = _mapping(data["from"], "from")
    unknown = set(start) - {"translate_x", "translate_y", "scale", "rotation", "blur"}
    if unknown:
        raise ConfigurationError(f"Unknown channels in 'from': {sorted(unknown)}")
    return ChannelRanges(
        translate_x=start.get("translate_x", 0.0),
        translate_y=start.get("translate_y", 0.0),
        scale=start.get("scale", 1.0),
        rotation=start.get("rotation"),
        blur=start.get("blur", 0.0),
    )


def parse_opacity(data):
    if "opacity" not in data:
        return None
    value = data["opacity"]
    if value == FOLLOW:
        return FOLLOW
    if isinstance(value, dict):
        if "ramp" in value:
            return OpacityRamp(duration=value["ramp"])
        if "ramp_frames" in value:
            return OpacityRamp(frames=value["ramp_frames"])
    raise ConfigurationError(
        f"opacity must be 'follow', {{ramp: seconds}} or {{ramp_frames: n}}, got {value!r}"
    )


def load_presets(path=None):
    """Load the preset library.

    Args:
        path: YAML file. Defaults to config/animation_presets.yaml.

    Returns:
        Dict of preset name -> raw field dict (validated).
    """
    path = path or presets_path()
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    presets = _mapping(data.get("animation_presets", {}), "animation_presets")

    for name, fields in presets.items():
        fields = _mapping(fields, f"Preset {name!r}")
        try:
            unknown = set(fields) - set(PRESET_FIELDS)
            if unknown:
                raise ConfigurationError(f"unknown fields {sorted(unknown)}")
            AnimationKind.parse(fields.get("kind", "custom"))
            parse_driver(fields)
            parse_ranges(fields)
            parse_opacity(fields)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Preset {name!r}: {exc}") from exc

    logger.info("Loaded %d animation presets from %s", len(presets), os.path.basename(path))
    return presets


def expand_preset(fields, presets):
    """Element fields with its preset (if any) filled in underneath.

    Element values win over preset values; 'from' is merged channel by channel.
    """
    name = fields.get("animation")
    if name is None:
        return dict(fields)
    if name not in presets:
        raise ConfigurationError(
            f"Unknown animation preset {name!r}. Available: {sorted(presets)}"
        )
    merged = dict(presets[name])
    for key, value in fields.items():
        if key == "from" and isinstance(value, dict) and isinstance(merged.get("from"), dict):
            merged["from"] = {**merged["from"], **value}
        else:
            merged[key] = value
    return merged
