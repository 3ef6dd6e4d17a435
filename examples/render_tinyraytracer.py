#!/usr/bin/env python3
"""Render frames of the ray tracer headlessly and save a PNG.

This script renders the default scene (or a scene loaded from JSON) into an
off-screen canvas through the same draw-command path as the interactive
window, then saves the last frame.

Usage:
    python -m examples.render_tinyraytracer [options]

Options:
    --scale SCALE       Detail scale, a power of two in [1, 16] (default: 1)
    --depth DEPTH       Recursion depth in [1, 4] (default: 4)
    --angle DEGREES     Orbit angle of the ivory sphere (default: none, keep
                        the scene as loaded)
    --frames N          Number of frames to render (default: 1)
    --output OUTPUT     Output file path (default: tinyraytracer.png)
    --scene FILE        Load the scene from a JSON description
    --dump-scene FILE   Write the scene description to JSON and exit
    --show              Show the result in a Matplotlib window
    --quiet             Suppress progress output

Example:
    python -m examples.render_tinyraytracer --scale 2 --frames 10 --output orbit.png
"""

from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING

import taichi as ti

if TYPE_CHECKING:
    from src.tinytrace.scene.manager import Scene


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the ray tracer scene to a PNG file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--scale",
        type=int,
        default=1,
        help="Detail scale, a power of two in [1, 16] (default: 1)",
    )
    parser.add_argument(
        "--depth",
        type=int,
        default=4,
        help="Recursion depth in [1, 4] (default: 4)",
    )
    parser.add_argument(
        "--angle",
        type=int,
        default=None,
        help="Orbit angle of the ivory sphere in degrees",
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=1,
        help="Number of frames to render; the orbit advances each frame (default: 1)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="tinyraytracer.png",
        help="Output file path (default: tinyraytracer.png)",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="Load the scene from a JSON description",
    )
    parser.add_argument(
        "--dump-scene",
        type=str,
        default=None,
        help="Write the scene description to a JSON file and exit",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Show the rendered frame in a Matplotlib window",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args()


def render_tinyraytracer(
    scale: int = 1,
    max_depth: int = 4,
    angle: int | None = None,
    num_frames: int = 1,
    output_path: str = "tinyraytracer.png",
    scene_path: str | None = None,
    show: bool = False,
    quiet: bool = False,
) -> Path:
    """Render frames headlessly and save the last one.

    Args:
        scale: Detail scale.
        max_depth: Recursion depth.
        angle: If given, place the orbiting sphere at this angle and keep it
            there; otherwise the orbit advances every frame.
        num_frames: Number of frames to render.
        output_path: Output file path (PNG).
        scene_path: Optional JSON scene description to render instead of
            the default scene.
        show: Whether to show the result with Matplotlib.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from src.tinytrace.core.config import RenderConfig
    from src.tinytrace.preview.controls import FrameState, run
    from src.tinytrace.preview.display import RasterDisplay, show_preview
    from src.tinytrace.scene.default_scene import ORBITING_SPHERE, orbit_position

    config = RenderConfig(scale=scale, max_depth=max_depth)
    scene = load_scene(scene_path)

    state = FrameState(scale=config.scale, max_depth=config.max_depth)
    if angle is not None and len(scene.spheres) > ORBITING_SPHERE:
        state.angle = angle % 360
        y = scene.spheres[ORBITING_SPHERE].center[1]
        scene.move_sphere(ORBITING_SPHERE, orbit_position(state.angle, y))

    if not quiet:
        grid_width, grid_height = config.grid_size
        print(
            f"Rendering {num_frames} frame(s) at {grid_width}x{grid_height} rays, "
            f"depth {max_depth}..."
        )

    display = RasterDisplay(max_frames=num_frames)
    start_time = time.time()
    frames = run(scene, display, state, orbit=angle is None)
    elapsed = time.time() - start_time

    output_file = Path(output_path)
    display.save_png(str(output_file))

    if not quiet:
        if elapsed > 0:
            print(f"  {frames} frame(s) in {elapsed:.2f}s ({frames / elapsed:.1f} frames/s)")
        print(f"Saved to: {output_file.absolute()}")

    if show:
        show_preview(display.canvas, title=f"scale {scale}, depth {max_depth}")

    return output_file


def load_scene(scene_path: str | None) -> Scene:
    """Load a scene from JSON, or build the default scene.

    Raises:
        ValueError: If the JSON description is invalid.
    """
    from src.tinytrace.camera.pinhole import setup_camera
    from src.tinytrace.scene.default_scene import create_default_scene
    from src.tinytrace.scene.manager import Scene

    if scene_path is None:
        scene, camera = create_default_scene()
        setup_camera(camera)
        return scene

    with open(scene_path, encoding="utf-8") as f:
        return Scene.from_dict(json.load(f))


def dump_scene(scene_path: str | None, output_path: str) -> Path:
    """Write a scene description to a JSON file."""
    scene = load_scene(scene_path)
    output_file = Path(output_path)
    output_file.write_text(json.dumps(scene.to_dict(), indent=2), encoding="utf-8")
    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    # Initialize Taichi
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
        if args.dump_scene is not None:
            output_file = dump_scene(args.scene, args.dump_scene)
            if not args.quiet:
                print(f"Scene written to: {output_file.absolute()}")
            return 0

        render_tinyraytracer(
            scale=args.scale,
            max_depth=args.depth,
            angle=args.angle,
            num_frames=args.frames,
            output_path=args.output,
            scene_path=args.scene,
            show=args.show,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
