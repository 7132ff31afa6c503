#!/usr/bin/env python3
"""Render the default sphere scene, or a scene from a JSON render file.

Usage:
    python -m examples.render_spheres [options]

Options:
    --width WIDTH         Image width in pixels (default: 256)
    --height HEIGHT       Image height in pixels (default: 256)
    --samples SAMPLES     Number of samples per pixel (default: 4)
    --max-bounces N       Recursion bound (default: 6)
    --sky                 Use the sky gradient background instead of black
    --seed SEED           Seed for reproducible renders
    --scene FILE          JSON render file (scene, camera, image, settings)
    --backend NAME        "taichi" (parallel, default) or "reference"
    --output OUTPUT       Output file path (default: spheres.png)
    --batch-size SIZE     Samples per progress update (default: 4)
    --preview             Show the result in a Matplotlib window
    --quiet               Suppress progress output
    --verbose             Enable debug logging

With --scene, the file supplies the scene, camera, image and settings. Any of
--width, --height, --samples, --max-bounces, --seed or --sky given on the
command line overrides the value from the file. The defaults above apply to
the built-in scene.

Example:
    python -m examples.render_spheres --width 512 --height 512 --samples 1024
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from dataclasses import replace
from pathlib import Path

import taichi as ti

# Image size for the built-in scene
DEFAULT_WIDTH = 256
DEFAULT_HEIGHT = 256


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a sphere scene with the path tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--width", type=int, default=None, help="Image width in pixels (default: 256)")
    parser.add_argument("--height", type=int, default=None, help="Image height in pixels (default: 256)")
    parser.add_argument("--samples", type=int, default=None, help="Samples per pixel (default: 4)")
    parser.add_argument("--max-bounces", type=int, default=None, help="Recursion bound (default: 6)")
    parser.add_argument("--sky", action="store_true", help="Use the sky gradient background")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible renders")
    parser.add_argument("--scene", type=str, default=None, help="JSON render file")
    parser.add_argument(
        "--backend",
        choices=("taichi", "reference"),
        default="taichi",
        help="Rendering backend (default: taichi)",
    )
    parser.add_argument("--output", type=str, default="spheres.png", help="Output file path")
    parser.add_argument("--batch-size", type=int, default=4, help="Samples per progress update")
    parser.add_argument("--preview", action="store_true", help="Show the result in a window")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def apply_overrides(config, args: argparse.Namespace):
    """Return config with every option given on the command line applied."""
    from src.softpt.config import BackgroundMode

    image_changes = {}
    if args.width is not None:
        image_changes["width"] = args.width
    if args.height is not None:
        image_changes["height"] = args.height

    settings_changes = {}
    if args.samples is not None:
        settings_changes["samples_per_pixel"] = args.samples
    if args.max_bounces is not None:
        settings_changes["max_bounces"] = args.max_bounces
    if args.seed is not None:
        settings_changes["seed"] = args.seed
    if args.sky:
        settings_changes["background_mode"] = BackgroundMode.SKY_GRADIENT

    return replace(
        config,
        image=replace(config.image, **image_changes),
        settings=replace(config.settings, **settings_changes),
    )


def build_config(args: argparse.Namespace):
    """Build a RenderConfig from a JSON file or the built-in scene, then apply overrides."""
    from src.softpt.config import ImageConfig, RenderConfig, load_render_config
    from src.softpt.scene.builder import build_default_scene, default_camera

    if args.scene is not None:
        config = load_render_config(args.scene)
    else:
        config = RenderConfig(
            scene=build_default_scene(),
            camera=default_camera(),
            image=ImageConfig(width=DEFAULT_WIDTH, height=DEFAULT_HEIGHT),
        )
    return apply_overrides(config, args)


def render_spheres(args: argparse.Namespace) -> Path:
    """Render according to args and save to file.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from src.softpt.core.renderer import render_image
    from src.softpt.preview.export import ImageSink

    config = build_config(args)
    width, height = config.image.width, config.image.height
    spp = config.settings.samples_per_pixel

    if not args.quiet:
        print(f"Rendering {width}x{height} at {spp} samples per pixel ({args.backend})...")

    start_time = time.time()

    def progress_callback(current: int, target: int) -> None:
        if not args.quiet:
            elapsed = time.time() - start_time
            progress_pct = (current / target) * 100 if target > 0 else 0
            print(
                f"\r  Progress: {current}/{target} ({progress_pct:.1f}%) - {elapsed:.1f}s",
                end="",
                flush=True,
            )

    if args.backend == "reference":
        sink = render_image(config, callback=progress_callback)
    else:
        from src.softpt.core.progressive import ProgressiveRenderer

        renderer = ProgressiveRenderer.from_config(config)
        renderer.render(batch_size=args.batch_size, callback=progress_callback)
        sink = ImageSink(width, height)
        renderer.present(sink)

    if not args.quiet:
        print()  # Newline after progress

    output_file = Path(args.output)
    sink.save_png(str(output_file))

    if not args.quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {time.time() - start_time:.2f}s")

    if args.preview:
        from src.softpt.preview.display import show_image

        show_image(sink.pixels, title=f"{width}x{height} - {spp} SPP")

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    # Use GPU if available, fall back to CPU
    seed = args.seed if args.seed is not None else 0
    try:
        ti.init(arch=ti.gpu, random_seed=seed)
        if not args.quiet:
            print("Using GPU backend")
    except Exception:
        ti.init(arch=ti.cpu, random_seed=seed)
        if not args.quiet:
            print("Using CPU backend")

    try:
        render_spheres(args)
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
