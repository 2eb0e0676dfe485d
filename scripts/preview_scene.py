"""Preview a scene's timing without rendering it.

Prints:
1. The resolved timeline: every event name and when it fires
2. Camera samples every N frames (position, zoom, view offset)
3. Visible element count per worker range

Usage:
    python scripts/preview_scene.py success_quote
    python scripts/preview_scene.py config/scenes/hey_everyone.yaml --every 5 --workers 4
"""

import argparse
import logging
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from src.motion.errors import ConfigurationError  # noqa: E402
from src.sampling.frames import sample_camera, split_frame_range, visible_counts  # noqa: E402
from src.scene.loader import load_scene  # noqa: E402


def print_step(step_num, message):
    print(f"\n{'='*60}")
    print(f"  STEP {step_num}: {message}")
    print(f"{'='*60}\n")


def print_timeline(scene):
    print_step(1, "Resolved timeline")
    times = scene.timeline.event_times
    for name in sorted(times, key=lambda n: (times[n], n)):
        frame = times[name] * scene.fps
        print(f"  {times[name]:7.3f}s  (frame {frame:6.1f})  {name}")


def print_camera(scene, every):
    print_step(2, f"Camera every {every} frames")
    samples = sample_camera(scene)
    print(f"  {'frame':>5}  {'x':>8}  {'y':>8}  {'zoom':>6}  {'view_x':>9}  {'view_y':>9}")
    for frame in range(0, len(samples), every):
        x, y, zoom, view_x, view_y, _ = samples[frame]
        print(f"  {frame:5d}  {x:8.1f}  {y:8.1f}  {zoom:6.3f}  {view_x:9.1f}  {view_y:9.1f}")


def print_workers(scene, workers):
    print_step(3, f"Render split across {workers} workers")
    for start, end in split_frame_range(scene.total_frames(), workers):
        counts = visible_counts(scene, start, end)
        print(f"  frames {start:4d}-{end - 1:4d}: {int(counts.sum()):5d} element draws, peak {int(counts.max())}")


def main():
    parser = argparse.ArgumentParser(description="Preview a motion scene")
    parser.add_argument("scene", help="Scene name under config/scenes/ or a YAML path")
    parser.add_argument("--every", type=int, default=10, help="Camera sample interval in frames")
    parser.add_argument("--workers", type=int, default=4, help="Number of render workers to plan for")
    parser.add_argument("--verbose", action="store_true", help="Show DEBUG logs")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print("\n" + "=" * 60)
    print(f"  Scene preview: {args.scene}")
    print("=" * 60)

    try:
        scene = load_scene(args.scene)
    except ConfigurationError as e:
        print(f"  ERROR: {e}")
        sys.exit(1)

    print(f"  {scene.viewport.width}x{scene.viewport.height} @ {scene.fps:g} fps, "
          f"{scene.total_frames()} frames ({scene.total_duration():.2f}s)")

    print_timeline(scene)
    print_camera(scene, max(1, args.every))
    print_workers(scene, max(1, args.workers))


if __name__ == "__main__":
    main()
