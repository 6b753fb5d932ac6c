#!/usr/bin/env python3
"""Render the Cornell box scene (or a scene loaded from JSON).

The script builds the scene, sets up the pinhole camera, renders in batches
with a progress line and writes an 8-bit sRGB PNG of the averaged film.

Usage:
    python -m examples.render_cornell_box [options]

Options:
    --width WIDTH       Image width in pixels (default: 800)
    --height HEIGHT     Image height in pixels (default: 600)
    --samples SAMPLES   Number of samples per pixel (default: 2048)
    --output OUTPUT     Output file path (default: cornell_box.png)
    --batch-size SIZE   Samples per progress update (default: 16)
    --seed SEED         Random seed for the sampler (default: 0)
    --arch {cpu,gpu}    Taichi backend (default: gpu, falls back to cpu)
    --scene PATH        JSON scene (SceneManager.to_dict format) to render
    --quiet             Suppress progress output

Example:
    python -m examples.render_cornell_box --width 200 --height 150 --samples 64
"""

from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the Cornell box scene with a Monte Carlo path tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=800,
        help="Image width in pixels (default: 800)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=600,
        help="Image height in pixels (default: 600)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=2048,
        help="Number of samples per pixel (default: 2048)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="cornell_box.png",
        help="Output file path (default: cornell_box.png)",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=16,
        help="Samples per progress update (default: 16)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Random seed for the sampler (default: 0)",
    )
    parser.add_argument(
        "--arch",
        choices=("cpu", "gpu"),
        default="gpu",
        help="Taichi backend; gpu falls back to cpu when unavailable (default: gpu)",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="Path to a JSON scene file to render instead of the Cornell box",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


def backend_name() -> str:
    """Name of the backend Taichi is running on."""
    return ti.lang.impl.current_cfg().arch.name


def init_taichi(arch: str, seed: int, quiet: bool = False) -> None:
    """Initialize Taichi on the requested backend.

    Taichi falls back to the CPU by itself when no GPU is available; the
    printed backend is the one actually selected.
    """
    ti.init(arch=ti.gpu if arch == "gpu" else ti.cpu, random_seed=seed)
    if not quiet:
        print(f"Using {backend_name()} backend")


def render_cornell_box(
    width: int = 800,
    height: int = 600,
    num_samples: int = 2048,
    output_path: str = "cornell_box.png",
    batch_size: int = 16,
    scene_path: str | None = None,
    quiet: bool = False,
) -> Path:
    """Render the scene and save it to a file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        num_samples: Number of samples per pixel.
        output_path: Output file path (PNG).
        batch_size: Number of samples to render between progress updates.
        scene_path: Optional JSON scene; the Cornell box camera is used.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports so Taichi is initialized first
    from src.pathtracer.camera.pinhole import setup_camera
    from src.pathtracer.core.progressive import ProgressiveRenderer
    from src.pathtracer.core.renderer import RenderSettings
    from src.pathtracer.scene.cornell_box import (
        create_cornell_box_camera,
        create_cornell_box_scene,
    )
    from src.pathtracer.scene.manager import SceneManager

    settings = RenderSettings(image_width=width, image_height=height, num_of_samples=num_samples)

    if scene_path is not None:
        if not quiet:
            print(f"Loading scene from {scene_path}...")
        with open(scene_path, encoding="utf-8") as f:
            data = json.load(f)
        scene = SceneManager()
        scene.from_dict(data)
        camera = create_cornell_box_camera(width, height)
    else:
        if not quiet:
            print(f"Creating Cornell box scene ({width}x{height})...")
        scene, camera = create_cornell_box_scene(width=width, height=height)

    if not quiet:
        print(
            f"Scene: {scene.get_entity_count()} entities, "
            f"{scene.get_material_count()} materials"
        )

    setup_camera(camera)
    renderer = ProgressiveRenderer.from_settings(settings)

    if not quiet:
        print(f"Rendering {settings.num_of_samples} samples per pixel...")

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

    renderer.render(
        num_samples=settings.num_of_samples,
        batch_size=batch_size,
        callback=progress_callback,
    )

    if not quiet:
        print()

    output_file = Path(output_path)
    renderer.save_image(str(output_file))

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    init_taichi(args.arch, args.seed, quiet=args.quiet)

    try:
        render_cornell_box(
            width=args.width,
            height=args.height,
            num_samples=args.samples,
            output_path=args.output,
            batch_size=args.batch_size,
            scene_path=args.scene,
            quiet=args.quiet,
        )
        return 0
    except (OSError, ValueError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
