#!/usr/bin/env python3
"""Render the default sphere scene, or a scene loaded from JSON.

This script renders a scene of spheres with progressive accumulation and
saves the result as a PNG. The JSON format is the one produced by
Scene.to_dict():

    {"spheres": [{"center": [x, y, z], "radius": r,
                  "material": {"type": "metal", "albedo": [...], ...}}]}

Usage:
    python -m examples.render_spheres [options]

Options:
    --width WIDTH       Image width in pixels (default: 640)
    --height HEIGHT     Image height in pixels (default: 360)
    --spp SPP           Samples per pixel and frame (default: 4)
    --max-depth DEPTH   Maximum bounce depth (default: 10)
    --frames FRAMES     Number of frames to accumulate (default: 16)
    --no-progressive    Overwrite instead of blending frames
    --scene FILE        JSON scene file (default: built-in scene)
    --output OUTPUT     Output file path (default: spheres.png)
    --cpu               Force the CPU backend
    --quiet             Suppress progress output
    --verbose           Enable debug logging

Example:
    python -m examples.render_spheres --width 320 --height 180 --frames 32
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a scene of spheres with a progressive path tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=640,
        help="Image width in pixels (default: 640)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=360,
        help="Image height in pixels (default: 360)",
    )
    parser.add_argument(
        "--spp",
        type=int,
        default=4,
        help="Samples per pixel and frame (default: 4)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=10,
        help="Maximum bounce depth (default: 10)",
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=16,
        help="Number of frames to accumulate (default: 16)",
    )
    parser.add_argument(
        "--no-progressive",
        action="store_true",
        help="Overwrite the image with each frame instead of blending",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON scene file (default: built-in scene)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="spheres.png",
        help="Output file path (default: spheres.png)",
    )
    parser.add_argument(
        "--cpu",
        action="store_true",
        help="Force the CPU backend",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args()


def render_spheres(
    width: int = 640,
    height: int = 360,
    spp: int = 4,
    max_depth: int = 10,
    frames: int = 16,
    progressive: bool = True,
    scene_path: str | None = None,
    output_path: str = "spheres.png",
    quiet: bool = False,
) -> Path:
    """Render a sphere scene and save it to file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        spp: Samples per pixel and frame.
        max_depth: Maximum bounce depth.
        frames: Number of frames to accumulate.
        progressive: Blend frames together instead of overwriting.
        scene_path: Optional JSON scene file.
        output_path: Output file path (PNG).
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from src.spheretracer.core.progressive import render
    from src.spheretracer.core.settings import RenderSettings
    from src.spheretracer.preview.export import save_png
    from src.spheretracer.scene.model import Scene
    from src.spheretracer.scene.presets import create_default_camera, create_default_scene

    if scene_path is None:
        scene = create_default_scene()
    else:
        scene = Scene.from_dict(json.loads(Path(scene_path).read_text()))

    summary = scene.describe()
    if not quiet:
        print(
            f"Scene: {summary['object_count']} spheres, "
            f"{summary['emitter_count']} emitter(s), materials {summary['material_counts']}"
        )

    settings = RenderSettings(
        width=width,
        height=height,
        samples_per_pixel=spp,
        max_depth=max_depth,
        frame_count=frames,
        progressive=progressive,
    )

    if not quiet:
        print(f"Rendering {width}x{height}, {spp} spp, {frames} frame(s)...")

    start_time = time.time()

    def progress_callback(current: int, target: int) -> None:
        if not quiet:
            elapsed = time.time() - start_time
            progress_pct = (current / target) * 100 if target > 0 else 0
            frames_per_sec = current / elapsed if elapsed > 0 else 0
            print(
                f"\r  Progress: {current}/{target} frames "
                f"({progress_pct:.1f}%) - {frames_per_sec:.2f} frames/s",
                end="",
                flush=True,
            )

    result = render(scene, create_default_camera(), settings, callback=progress_callback)

    if not quiet:
        print()  # Newline after progress

    output_file = Path(output_path)
    save_png(result.image, output_file, gamma=2.2)

    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(
            f"Total: {result.ray_count} rays in {result.elapsed:.2f}s "
            f"({result.rays_per_second / 1.0e6:.2f} Mrays/s)"
        )

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    # Use GPU if available, fall back to CPU
    if args.cpu:
        ti.init(arch=ti.cpu)
    else:
        ti.init(arch=ti.gpu)
    if not args.quiet:
        print(f"Using {ti.lang.impl.current_cfg().arch.name} backend")

    try:
        render_spheres(
            width=args.width,
            height=args.height,
            spp=args.spp,
            max_depth=args.max_depth,
            frames=args.frames,
            progressive=not args.no_progressive,
            scene_path=args.scene,
            output_path=args.output,
            quiet=args.quiet,
        )
        return 0
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
