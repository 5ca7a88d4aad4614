#!/usr/bin/env python3
"""Render the built-in Cornell box on a background worker thread.

Unlike the ``pathtracer`` command, this script builds the scene in code so
the wall colours and the light strength can be tweaked from the command line.

Usage:
    python examples/render_cornell_box.py [options]

Options:
    --size SIZE         Width and height of the image in pixels (default: 300)
    --samples SAMPLES   Samples per pixel (default: 100)
    --max-depth DEPTH   Maximum bounces per path (default: 50)
    --light STRENGTH    Emission of the ceiling light (default: 50)
    --output OUTPUT     Output file path (default: cornell_box.png)
    --quiet             Suppress progress output

Example:
    python examples/render_cornell_box.py --size 200 --samples 64
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the Cornell box scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--size", type=int, default=300, help="Image size in pixels (default: 300)")
    parser.add_argument("--samples", type=int, default=100, help="Samples per pixel (default: 100)")
    parser.add_argument("--max-depth", type=int, default=50, help="Maximum bounces (default: 50)")
    parser.add_argument("--light", type=float, default=50.0, help="Light emission (default: 50)")
    parser.add_argument(
        "--output",
        type=str,
        default="cornell_box.png",
        help="Output file path (default: cornell_box.png)",
    )
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    return parser.parse_args()


def render_cornell_box(
    size: int = 300,
    samples_per_pixel: int = 100,
    max_depth: int = 50,
    light: float = 50.0,
    output_path: str = "cornell_box.png",
    quiet: bool = False,
) -> Path:
    """Render the Cornell box scene and save it to a file.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports so Taichi is initialized first
    from pathtracer.camera.thin_lens import Camera
    from pathtracer.core.worker import start_render
    from pathtracer.preview.export import save_image
    from pathtracer.scene.presets import CornellBoxParams, cornell_box
    from pathtracer.scene.world import World

    params = CornellBoxParams(light_emission=(light, light, light))
    scene = cornell_box(size=size, samples_per_pixel=samples_per_pixel, max_depth=max_depth, params=params)

    if not quiet:
        print(f"Rendering Cornell box ({size}x{size}, {samples_per_pixel} spp)...")

    start_time = time.time()
    job = start_render(World.from_scene(scene), Camera(scene.camera))
    for percent in job.progress():
        if not quiet:
            elapsed = time.time() - start_time
            print(f"\r  Progress: {percent:3d}% - {elapsed:.1f}s", end="", flush=True)
    if not quiet:
        print()

    pixels = job.join()
    output_file = Path(output_path)
    save_image(pixels, output_file)

    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {time.time() - start_time:.2f}s")

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    from pathtracer.config import init_backend

    backend = init_backend()
    if not args.quiet:
        print(f"Using {backend.upper()} backend")

    try:
        render_cornell_box(
            size=args.size,
            samples_per_pixel=args.samples,
            max_depth=args.max_depth,
            light=args.light,
            output_path=args.output,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
