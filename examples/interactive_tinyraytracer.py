#!/usr/bin/env python3
"""Interactive ray tracer window with keyboard controls.

This script opens a window that renders the default four-sphere scene every
frame while the ivory sphere orbits the others.

Usage:
    python -m examples.interactive_tinyraytracer [--scale N] [--depth N]

Controls:
    - Left / Right: halve / double the detail scale (1 to 16 pixels per ray)
    - Down / Up: decrease / increase the recursion depth (1 to 4)
    - Escape or closing the window: exit

Each ray covers a scale x scale block of pixels, so lower scales look sharper
and render slower.
"""

from __future__ import annotations

import argparse
import platform
import sys
import time
from pathlib import Path

# Ensure the project root is in the Python path for direct execution
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import taichi as ti  # noqa: E402


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Interactive Whitted-style ray tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--scale",
        type=int,
        default=8,
        help="Initial detail scale, a power of two in [1, 16] (default: 8)",
    )
    parser.add_argument(
        "--depth",
        type=int,
        default=4,
        help="Initial recursion depth in [1, 4] (default: 4)",
    )
    parser.add_argument(
        "--no-orbit",
        action="store_true",
        help="Keep the ivory sphere still",
    )
    return parser.parse_args()


def initialize_taichi() -> str:
    """Initialize Taichi with the best available backend.

    On macOS, prefers Metal. Falls back to CPU if GPU is unavailable.

    Returns:
        Name of the backend being used.
    """
    system = platform.system()

    if system == "Darwin":
        # macOS: prefer Metal
        try:
            ti.init(arch=ti.metal)
            return "Metal (GPU)"
        except Exception:
            pass

    # Try generic GPU (CUDA on Linux/Windows, Vulkan as fallback)
    try:
        ti.init(arch=ti.gpu)
        return "GPU"
    except Exception:
        pass

    # Fall back to CPU
    ti.init(arch=ti.cpu)
    return "CPU"


def main() -> int:
    """Main entry point for the interactive ray tracer.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    args = parse_args()

    # Initialize Taichi first (before importing modules that declare fields)
    backend = initialize_taichi()
    print(f"Taichi backend: {backend}")

    # Import after Taichi initialization
    from src.tinytrace.camera.pinhole import setup_camera
    from src.tinytrace.core.config import RenderConfig
    from src.tinytrace.preview.controls import FrameState, run
    from src.tinytrace.preview.interactive import WindowDisplay
    from src.tinytrace.scene.default_scene import create_default_scene

    if not WindowDisplay.is_display_available():
        print(
            "Error: No display available. Cannot open the interactive window.",
            file=sys.stderr,
        )
        print("Use examples/render_tinyraytracer.py for headless rendering.", file=sys.stderr)
        return 1

    try:
        config = RenderConfig(scale=args.scale, max_depth=args.depth)
        scene, camera = create_default_scene()
        setup_camera(camera)
        state = FrameState(scale=config.scale, max_depth=config.max_depth)

        print("Starting interactive rendering...")
        print("  - Left/Right: detail scale, Down/Up: recursion depth")
        print("  - Escape or close the window to exit")
        print()

        start_time = time.time()
        frames = run(scene, WindowDisplay(), state, orbit=not args.no_orbit)
        elapsed = time.time() - start_time
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if elapsed > 0:
        print(f"Rendered {frames} frames ({frames / elapsed:.1f} frames/s)")
    print(f"Final scale: {state.scale}, depth: {state.max_depth}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
