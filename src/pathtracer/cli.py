"""Command-line entry point.

Usage:
    pathtracer SCENE [options]
    pathtracer --preset {cornell-box,three-spheres} [options]

Options:
    -o, --output OUTPUT     Output image path, PNG or .ppm (default: image.png)
    --arch ARCH             Taichi backend: auto, gpu or cpu (default: $PATHTRACER_ARCH or auto)
    --seed N                Seed for Taichi's random number generator
    --parallel              Render across all CPU threads or the GPU (default)
    --no-parallel           Render on a single CPU thread
    --no-light-emission     Render light surfaces as black absorbers
    --show                  Open a Matplotlib preview when the render finishes
    --quiet                 Suppress the progress bar and informational logs
    --verbose               Enable debug logging

Example:
    pathtracer examples/cornell_box.toml -o cornell_box.png
"""

from __future__ import annotations

import argparse
import sys
from typing import TextIO

from pathtracer.config import ARCHES, configure_logging, init_backend

PROGRESS_BAR_WIDTH = 40


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pathtracer",
        description="Render a scene with the Taichi path tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("scene", nargs="?", help="Path to a TOML scene file")
    source.add_argument(
        "--preset",
        choices=("cornell-box", "three-spheres"),
        help="Render a built-in scene instead of a file",
    )
    parser.add_argument(
        "-o",
        "--output",
        default="image.png",
        help="Output image path; .ppm writes plain-text PPM (default: image.png)",
    )
    parser.add_argument(
        "--arch",
        choices=ARCHES,
        default=None,
        help="Taichi backend (default: $PATHTRACER_ARCH or auto)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for the backend")
    threading = parser.add_mutually_exclusive_group()
    threading.add_argument(
        "--parallel",
        dest="parallel",
        action="store_true",
        default=True,
        help="Render in parallel across all threads (default)",
    )
    threading.add_argument(
        "--no-parallel",
        dest="parallel",
        action="store_false",
        help="Render on a single CPU thread",
    )
    parser.add_argument(
        "--no-light-emission",
        action="store_true",
        help="Treat light surfaces as black absorbers",
    )
    parser.add_argument("--show", action="store_true", help="Preview the result with Matplotlib")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--quiet", action="store_true", help="Suppress progress output")
    verbosity.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def format_progress_bar(percent: int, width: int = PROGRESS_BAR_WIDTH) -> str:
    """Render a progress bar such as ``[=====>     ]  12%``."""
    percent = max(0, min(100, percent))
    filled = percent * width // 100
    if filled >= width:
        bar = "=" * width
    else:
        bar = "=" * filled + ">" + " " * (width - filled - 1)
    return f"[{bar}] {percent:3d}%"


def print_progress(percent: int, stream: TextIO | None = None) -> None:
    if stream is None:
        stream = sys.stderr
    stream.write("\r" + format_progress_bar(percent))
    stream.flush()


def load_requested_scene(args: argparse.Namespace):
    """Load the scene named on the command line."""
    from pathtracer.scene.loader import load_scene
    from pathtracer.scene.presets import PRESETS

    if args.preset is not None:
        return PRESETS[args.preset]()
    return load_scene(args.scene)


def run(args: argparse.Namespace) -> int:
    """Render according to parsed arguments and return the exit status."""
    configure_logging(verbose=args.verbose, quiet=args.quiet)

    # Scene parsing does not touch Taichi, so bad files fail before backend start-up
    from pathtracer.errors import RenderError, SceneError

    try:
        scene = load_requested_scene(args)
    except SceneError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        init_backend(args.arch, random_seed=args.seed, parallel=args.parallel)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    from pathtracer.camera.thin_lens import Camera
    from pathtracer.core.worker import start_render
    from pathtracer.preview.export import save_image
    from pathtracer.scene.world import World

    try:
        world = World.from_scene(scene)
        camera = Camera(scene.camera)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    job = start_render(world, camera, light_emission=not args.no_light_emission)
    for percent in job.progress():
        if not args.quiet:
            print_progress(percent)
    if not args.quiet:
        print(file=sys.stderr)

    try:
        pixels = job.join()
    except RenderError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        save_image(pixels, args.output)
    except OSError as exc:
        print(f"Error: cannot write {args.output}: {exc}", file=sys.stderr)
        return 1

    if args.show:
        from pathtracer.preview.display import show_preview

        show_preview(pixels, title=str(args.output))

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
