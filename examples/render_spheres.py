#!/usr/bin/env python3
"""Render the random spheres scene.

This script renders the random spheres showcase scene (or a scene loaded
from a JSON file) through a thin-lens camera and saves the result as a PNG.

Usage:
    python -m examples.render_spheres [options]

Options:
    --width WIDTH           Image width in pixels (default: 400)
    --height HEIGHT         Image height in pixels (default: 225)
    --samples SAMPLES       Number of samples per pixel (default: 10)
    --max-depth DEPTH       Maximum bounces per path (default: 10)
    --seed SEED             Render seed (default: 0)
    --scene-seed SEED       Seed for the random spheres layout (default: 0)
    --scene FILE            Load the scene from a JSON file instead
    --output OUTPUT         Output file path (default: spheres.png)
    --batch-size SIZE       Samples per progress update (default: 2)
    --quiet                 Suppress progress output

Example:
    python -m examples.render_spheres --width 600 --height 338 --samples 50
"""

from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the random spheres scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=400,
        help="Image width in pixels (default: 400)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=225,
        help="Image height in pixels (default: 225)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=10,
        help="Number of samples per pixel (default: 10)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=10,
        help="Maximum bounces per path (default: 10)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Render seed (default: 0)",
    )
    parser.add_argument(
        "--scene-seed",
        type=int,
        default=0,
        help="Seed for the random spheres layout (default: 0)",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="Load the scene from a JSON file instead of generating it",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="spheres.png",
        help="Output file path (default: spheres.png)",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=2,
        help="Samples per progress update (default: 2)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args()


def render_spheres(
    width: int = 400,
    height: int = 225,
    num_samples: int = 10,
    max_depth: int = 10,
    seed: int = 0,
    scene_seed: int = 0,
    scene_path: str | None = None,
    output_path: str = "spheres.png",
    batch_size: int = 2,
    quiet: bool = False,
) -> Path:
    """Render the scene and save to file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        num_samples: Number of samples per pixel.
        max_depth: Maximum bounces per path.
        seed: Seed for the per-pixel generators.
        scene_seed: Seed for the random spheres layout.
        scene_path: Optional JSON scene file (as written by Scene.to_dict).
        output_path: Output file path (PNG).
        batch_size: Number of samples to render between progress updates.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from spheretrace.camera import make_camera
    from spheretrace.preview.export import save_png
    from spheretrace.scene import Scene, create_random_spheres_scene

    if scene_path is not None:
        if not quiet:
            print(f"Loading scene from {scene_path}...")
        with open(scene_path, encoding="utf-8") as f:
            scene = Scene.from_dict(json.load(f))
    else:
        if not quiet:
            print(f"Creating random spheres scene (seed {scene_seed})...")
        scene = create_random_spheres_scene(seed=scene_seed)

    camera = make_camera(
        (width, height),
        look_from=(13.0, 2.0, 3.0),
        look_at=(0.0, 0.0, 0.0),
        vertical_fov=20.0,
        defocus_angle=0.6,
        focus_dist=10.0,
        samples_per_pixel=num_samples,
        max_depth=max_depth,
    )

    if not quiet:
        print(f"Rendering {len(scene)} spheres at {width}x{height}, {num_samples} spp...")

    start_time = time.time()

    def progress_callback(current: int, target: int) -> None:
        if not quiet:
            elapsed = time.time() - start_time
            progress_pct = (current / target) * 100 if target > 0 else 0
            samples_per_sec = current / elapsed if elapsed > 0 else 0
            print(
                f"\r  Progress: {current}/{target} samples "
                f"({progress_pct:.1f}%) - {samples_per_sec:.1f} spp/s",
                end="",
                flush=True,
            )

    image = camera.render(scene, seed=seed, batch_size=batch_size, callback=progress_callback)

    if not quiet:
        print()  # Newline after progress

    output_file = Path(output_path)
    save_png(image, output_file)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return output_file


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
        render_spheres(
            width=args.width,
            height=args.height,
            num_samples=args.samples,
            max_depth=args.max_depth,
            seed=args.seed,
            scene_seed=args.scene_seed,
            scene_path=args.scene,
            output_path=args.output,
            batch_size=args.batch_size,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
