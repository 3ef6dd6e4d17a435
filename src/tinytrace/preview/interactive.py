"""Interactive display window using Taichi GGUI.

This module implements the Display protocol on top of ti.ui.Window. Draw
calls rasterize into a numpy RGBA canvas; end_frame uploads the canvas to a
Taichi field, shows it on the window canvas and collects the key presses of
the frame.

Features:
    - Taichi GGUI-based window (GPU-accelerated)
    - Frame pacing through the window fps limit
    - Arrow key edges from ti.ui.PRESS events
    - Escape closes the window

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.gpu)
    >>> from src.tinytrace.preview.controls import FrameState, run
    >>> from src.tinytrace.preview.interactive import WindowDisplay
    >>> from src.tinytrace.scene.default_scene import create_default_scene
    >>>
    >>> scene, _ = create_default_scene()
    >>> run(scene, WindowDisplay(), FrameState())  # Blocks until window closed
"""

from __future__ import annotations

import os

import numpy as np
import taichi as ti

from src.tinytrace.preview.display import Color, Key

# GGUI key names for the polled keys
_KEY_NAMES = {
    Key.SCALE_DOWN: ti.ui.LEFT,
    Key.SCALE_UP: ti.ui.RIGHT,
    Key.DEPTH_DOWN: ti.ui.DOWN,
    Key.DEPTH_UP: ti.ui.UP,
}

# GGUI default fps limit, used when no target fps is set
_UNLIMITED_FPS = 1000


class WindowDisplay:
    """Display backed by a Taichi GGUI window.

    The window itself is created lazily on the first frame so that the fps
    limit set after create_window() still applies.

    Attributes:
        width: Window width in pixels.
        height: Window height in pixels.
        display_image: Taichi field storing the displayed image (RGB float),
            indexed (x, y) with the origin at the bottom-left.
    """

    def __init__(self, *, vsync: bool = False) -> None:
        self.width = 0
        self.height = 0
        self._title = ""
        self._vsync = vsync
        self._fps_limit: int | None = None
        self._window: ti.ui.Window | None = None
        self._canvas: ti.ui.Canvas | None = None
        self._pixels = np.zeros((0, 0, 4), dtype=np.uint8)
        self._pressed: set[str] = set()
        self._closed = False
        self.display_image: ti.MatrixField | None = None

    def create_window(self, width: int, height: int, title: str) -> None:
        self.width = width
        self.height = height
        self._title = title
        self._pixels = np.zeros((height, width, 4), dtype=np.uint8)
        self.display_image = ti.Vector.field(3, dtype=ti.f32, shape=(width, height))
        self._closed = False

    def set_target_fps(self, fps: int) -> None:
        self._fps_limit = fps

    def _initialize_window(self) -> None:
        """Create the GGUI window and canvas on first use."""
        if self._window is not None:
            return

        self._window = ti.ui.Window(
            name=self._title,
            res=(self.width, self.height),
            vsync=self._vsync,
            fps_limit=self._fps_limit if self._fps_limit else _UNLIMITED_FPS,
        )
        self._canvas = self._window.get_canvas()

    def window_should_close(self) -> bool:
        if self._closed:
            return True
        return self._window is not None and not self._window.running

    def close_window(self) -> None:
        """Close the window.

        After calling this, the window cannot be reopened.
        """
        if self._window is not None:
            self._window.running = False
            self._window.destroy()
            self._window = None
        self._closed = True

    def begin_frame(self) -> None:
        self._initialize_window()

    def end_frame(self) -> None:
        """Present the canvas and collect this frame's key presses."""
        assert self._window is not None and self._canvas is not None
        assert self.display_image is not None

        # Taichi fields use (x, y) indexing with the origin at the bottom-left
        rgb = self._pixels[..., :3].astype(np.float32) / 255.0
        self.display_image.from_numpy(
            np.ascontiguousarray(np.transpose(np.flipud(rgb), (1, 0, 2)))
        )
        self._canvas.set_image(self.display_image)
        self._window.show()

        self._pressed.clear()
        while self._window.get_event(ti.ui.PRESS):
            key = self._window.event.key
            if key == ti.ui.ESCAPE:
                self._window.running = False
            self._pressed.add(key)

    def clear(self, color: Color) -> None:
        self._pixels[:, :] = color

    def draw_filled_rect(self, x: int, y: int, width: int, height: int, color: Color) -> None:
        x0, y0 = max(x, 0), max(y, 0)
        x1, y1 = min(x + width, self.width), min(y + height, self.height)
        if x1 > x0 and y1 > y0:
            self._pixels[y0:y1, x0:x1] = color

    def poll_key_pressed(self, key: Key) -> bool:
        return _KEY_NAMES[key] in self._pressed

    @staticmethod
    def is_display_available() -> bool:
        """Check if a display is available for GUI rendering.

        Returns:
            True if a display is available, False for headless environments.
        """
        # Windows generally always has display
        if os.name == "nt":
            return True

        display = os.environ.get("DISPLAY")
        wayland = os.environ.get("WAYLAND_DISPLAY")

        # On macOS, display is always available if not in SSH
        if os.uname().sysname == "Darwin":
            ssh_connection = os.environ.get("SSH_CONNECTION")
            if ssh_connection and not display:
                return False
            return True

        # On Linux, check for X11 or Wayland
        if display or wayland:
            return True

        return False
