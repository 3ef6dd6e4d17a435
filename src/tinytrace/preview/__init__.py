"""Preview module for display, input and output.

This module handles presenting frames and driving the application loop:

Components:
    display: Display protocol, Key enum, headless RasterDisplay and a
        Matplotlib frame viewer
    interactive: Taichi GGUI-based WindowDisplay
    controls: FrameState, FrameController and the main loop (run)
    export: PNG export of canvases and framebuffers

Features:
    - Real-time interactive window with arrow-key controls (Taichi GGUI)
    - Headless rendering into a numpy canvas for tests and batch export
    - PNG export via Pillow

Example:
    >>> from src.tinytrace.preview import Key, RasterDisplay
    >>> display = RasterDisplay(key_script=[{Key.SCALE_UP}], max_frames=1)

For the interactive window:
    >>> from src.tinytrace.preview.controls import run
    >>> from src.tinytrace.preview.interactive import WindowDisplay
    >>> run(scene, WindowDisplay())
"""

from src.tinytrace.preview.display import Color, Display, Key, RasterDisplay, show_preview
from src.tinytrace.preview.interactive import WindowDisplay

# Note: controls and export are NOT imported here because they import the
# renderer, which declares Taichi fields that must be created after ti.init().

__all__ = [
    # Display protocol and implementations
    "Display",
    "Key",
    "Color",
    "RasterDisplay",
    "WindowDisplay",
    # Matplotlib viewer
    "show_preview",
]
