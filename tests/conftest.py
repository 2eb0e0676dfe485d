"""Shared test fixtures for the motion engine test suite."""

import copy

import pytest
import yaml

from src.scene.presets import load_presets


@pytest.fixture
def presets():
    """The shipped preset library (config/animation_presets.yaml)."""
    return load_presets()


@pytest.fixture
def scene_data():
    """A minimal valid scene mapping: two fixed words, one camera move, no shake."""
    return copy.deepcopy({
        "name": "test_scene",
        "fps": 30,
        "viewport": {"width": 1080, "height": 1080},
        "shake": False,
        "camera": {
            "keyframes": [
                {"time": 0, "x": 540, "y": 540, "zoom": 1.0},
                {"time": 1, "x": 540, "y": 740, "zoom": 2.0},
            ],
        },
        "elements": [
            {"id": "hello", "text": "Hello", "x": 540, "y": 540, "animation": "word_pop", "enter": 0.5},
            {"id": "world", "text": "World", "x": 540, "y": 740, "animation": "slide_from_left", "enter_frame": 30},
        ],
    })


@pytest.fixture
def grouped_scene_data(scene_data):
    """scene_data plus a phase group with an exit and an event-triggered element."""
    data = copy.deepcopy(scene_data)
    data["events"] = [{"name": "zoom_start", "after": "b.entry", "offset": 0.5}]
    data["groups"] = [
        {
            "id": "phase1",
            "members": ["a", "b"],
            "start": 0,
            "stagger": 0.25,
            "exit": {"hold": 0.4, "fade": 0.3, "max_blur": 20, "grace": 0.3},
        },
    ]
    data["elements"] = [
        {"id": "a", "x": 400, "y": 540, "animation": "word_pop"},
        {"id": "b", "x": 680, "y": 540, "animation": "word_pop"},
        {"id": "bubble", "x": 700, "y": 480, "animation": "word_pop", "trigger": {"event": "zoom_start", "offset": 0.25}},
    ]
    return data


@pytest.fixture
def write_yaml(tmp_path):
    """Write a mapping to a YAML file under tmp_path and return the path."""
    def _write(name, data):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.safe_dump(data, f)
        return str(path)
    return _write
