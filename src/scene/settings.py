"""Settings — config location and session defaults, overridable from .env.

  MOTION_CONFIG_DIR        directory holding animation_presets.yaml and scenes/
  MOTION_FPS               default frame rate for scenes that don't set one
  MOTION_VIEWPORT_WIDTH    default viewport width in pixels
  MOTION_VIEWPORT_HEIGHT   default viewport height in pixels
"""

import os

from dotenv import load_dotenv

from src.motion.errors import ConfigurationError

load_dotenv()

DEFAULT_CONFIG_DIR = os.path.join(os.path.dirname(__file__), "..", "..", "config")


def _env_number(name, default, cast=float):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value


def config_dir():
    return os.getenv("MOTION_CONFIG_DIR") or DEFAULT_CONFIG_DIR


def scenes_dir():
    return os.path.join(config_dir(), "scenes")


def presets_path():
    return os.path.join(config_dir(), "animation_presets.yaml")


def default_fps():
    return _env_number("MOTION_FPS", 30.0)


def default_viewport_size():
    """(width, height) in pixels."""
    return (
        _env_number("MOTION_VIEWPORT_WIDTH", 1080, int),
        _env_number("MOTION_VIEWPORT_HEIGHT", 1080, int),
    )
