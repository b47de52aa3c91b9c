#!/usr/bin/env python3
"""Render an orbit animation around the random spheres scene.

The camera circles the origin at height 2, starting at the classic
(13, 2, 3) viewpoint, and each frame is written as frame_{n}.png (n from 1).
Frames can be assembled into a video with any external tool, e.g.
``ffmpeg -i output/frame_%d.png orbit.mp4``.

Usage:
    python -m examples.render_orbit [options]

Options:
    --width WIDTH       Image width in pixels (default: 1200)
    --height HEIGHT     Image height in pixels (default: 675)
    --samples SAMPLES   Number of samples per pixel (default: 10)
    --frames FRAMES     Number of frames in a full orbit (default: 300)
    --seed SEED         Seed for scene layout and rendering (default: 0)
    --output-dir DIR    Output directory (default: output)
    --quiet             Suppress progress output

Example:
    python -m examples.render_orbit --width 320 --height 180 --frames 60
"""

from __future__ import annotations

import argparse
import math
import sys
import time
from pathlib import Path

import taichi as ti

ORBIT_RADIUS = math.sqrt(178.0)
ORBIT_HEIGHT = 2.0
# Frame 0 sits at (13, 2, 3)
PHASE_OFFSET = math.asin(3.0 / ORBIT_RADIUS)


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render an orbit animation around the random spheres scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=1200,
        help="Image width in pixels (default: 1200)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=675,
        help="Image height in pixels (default: 675)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=10,
        help="Number of samples per pixel (default: 10)",
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=300,
        help="Number of frames in a full orbit (default: 300)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Seed for scene layout and rendering (default: 0)",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default="output",
        help="Output directory (default: output)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args()


def readable_aspect_ratio(width: int, height: int) -> str:
    """Format width / height with up to four decimals, trailing zeros dropped.

    >>> readable_aspect_ratio(1200, 675)
    '1.7778'
    >>> readable_aspect_ratio(800, 400)
    '2'
    """
    return f"{width / height:.4f}".rstrip("0").rstrip(".")


def orbit_position(frame: int, num_frames: int) -> tuple[float, float, float]:
    """Camera position for a frame of the orbit."""
    t = 2.0 * math.pi * frame / num_frames + PHASE_OFFSET
    return (ORBIT_RADIUS * math.cos(t), ORBIT_HEIGHT, ORBIT_RADIUS * math.sin(t))


def render_orbit(
    width: int = 1200,
    height: int = 675,
    num_samples: int = 10,
    num_frames: int = 300,
    seed: int = 0,
    output_dir: str = "output",
    quiet: bool = False,
) -> Path:
    """Render every frame of the orbit.

    Returns:
        The output directory.
    """
    # Lazy imports to allow Taichi initialization first
    from spheretrace.camera import make_camera
    from spheretrace.preview.export import save_png
    from spheretrace.scene import create_random_spheres_scene

    if num_frames < 1:
        raise ValueError(f"frames = {num_frames} must be at least 1")

    if not quiet:
        print(
            f"Resolution = {width}x{height}, "
            f"aspect ratio = {readable_aspect_ratio(width, height)}"
        )

    scene = create_random_spheres_scene(seed=seed)
    out_dir = Path(output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    start_time = time.time()
    for frame in range(num_frames):
        camera = make_camera(
            (width, height),
            look_from=orbit_position(frame, num_frames),
            look_at=(0.0, 0.0, 0.0),
            vertical_fov=20.0,
            defocus_angle=0.6,
            focus_dist=10.0,
            samples_per_pixel=num_samples,
        )
        image = camera.render(scene, seed=seed)
        save_png(image, out_dir / f"frame_{frame + 1}.png")

        if not quiet:
            elapsed = time.time() - start_time
            print(
                f"\r  Frame {frame + 1}/{num_frames} ({elapsed:.1f}s elapsed)",
                end="",
                flush=True,
            )

    if not quiet:
        print()  # Newline after progress
        print(f"Saved to: {out_dir.absolute()}")
        print(f"Total time: {time.time() - start_time:.2f}s")

    return out_dir


def main() -> int:
    """Main entry point."""
    args = parse_args()

    # Use GPU if available, fall back to CPU
    try:
        ti.init(arch=ti.gpu)
        if not args.quiet:
            print("Using GPU backend")
    except Exception:
        ti.init(arch=ti.cpu)
        if not args.quiet:
            print("Using CPU backend")

    try:
        render_orbit(
            width=args.width,
            height=args.height,
            num_samples=args.samples,
            num_frames=args.frames,
            seed=args.seed,
            output_dir=args.output_dir,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
