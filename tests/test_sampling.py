"""Tests for batch frame sampling and render splitting."""

import numpy as np
import pytest

from src.sampling.frames import (
    CAMERA_CHANNELS,
    ELEMENT_CHANNELS,
    frame_times,
    sample_camera,
    sample_element,
    split_frame_range,
    visible_counts,
)
from src.scene.loader import load_scene, scene_from_dict


@pytest.fixture
def scene(scene_data, presets):
    return scene_from_dict(scene_data, presets)


class TestSplitFrameRange:
    """Test dividing a render between workers."""

    def test_covers_every_frame_once(self):
        ranges = split_frame_range(390, 4)
        assert len(ranges) == 4
        assert ranges[0][0] == 0
        assert ranges[-1][1] == 390
        for (_, end), (start, _) in zip(ranges, ranges[1:]):
            assert end == start

    def test_near_equal(self):
        sizes = [end - start for start, end in split_frame_range(390, 4)]
        assert max(sizes) - min(sizes) <= 1

    def test_more_workers_than_frames(self):
        assert split_frame_range(3, 8) == [(0, 1), (1, 2), (2, 3)]

    def test_empty(self):
        assert split_frame_range(0, 4) == []

    def test_single_worker(self):
        assert split_frame_range(120, 1) == [(0, 120)]


class TestSampleCamera:
    """Test camera curves as arrays."""

    def test_frame_times(self):
        assert frame_times(0, 3, 30) == pytest.approx([0.0, 1 / 30, 2 / 30])

    def test_shape(self, scene):
        samples = sample_camera(scene, 0, 10)
        assert samples.shape == (10, len(CAMERA_CHANNELS))

    def test_first_and_last(self, scene):
        samples = sample_camera(scene, 0, 31)
        assert tuple(samples[0, :3]) == (540, 540, 1.0)
        assert tuple(samples[30, :3]) == (540, 740, 2.0)

    def test_zoom_monotone_between_keyframes(self, scene):
        zoom = sample_camera(scene, 0, 31)[:, 2]
        assert np.all(np.diff(zoom) >= 0)

    def test_success_quote_pull_back(self, presets):
        scene = load_scene("success_quote", presets)
        samples = sample_camera(scene, 340, 381)
        assert np.allclose(samples[:, 2], 0.52)


class TestSampleElement:
    """Test element channels as arrays."""

    def test_nan_before_entry(self, scene):
        samples = sample_element(scene, "hello", 0, 15)
        assert samples.shape == (15, len(ELEMENT_CHANNELS))
        assert np.isnan(samples).all()

    def test_at_rest_after_settle(self, scene):
        samples = sample_element(scene, "hello", 40, 41)
        assert samples[0] == pytest.approx([1.0, 0.0, 0.0, 1.0, 0.0, 0.0])

    def test_split_render_matches_full_render(self, scene):
        total = scene.total_frames()
        full = sample_element(scene, "world", 0, total)
        parts = [sample_element(scene, "world", start, end) for start, end in split_frame_range(total, 3)]
        assert np.array_equal(full, np.vstack(parts), equal_nan=True)

    def test_visible_counts(self, scene):
        counts = visible_counts(scene, 0, scene.total_frames())
        assert counts[0] == 0
        assert counts[-1] == 2
