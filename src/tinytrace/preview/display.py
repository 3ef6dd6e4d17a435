"""Display collaborators: the drawing/input protocol and a headless canvas.

The renderer never talks to a window directly. It emits filled rectangles
and the application loop polls a handful of keys through the Display
protocol, which has two implementations:

    RasterDisplay  headless numpy canvas with scripted key presses, used by
                   tests and PNG export
    WindowDisplay  Taichi GGUI window (see preview.interactive)

A Matplotlib helper is included for viewing a finished frame.

Example:
    >>> from src.tinytrace.preview.display import Key, RasterDisplay
    >>>
    >>> display = RasterDisplay(key_script=[{Key.SCALE_DOWN}, set(), {Key.DEPTH_UP}])
    >>> display.create_window(1024, 768, "tinytrace")
    >>> display.clear((0, 0, 0, 255))
    >>> display.draw_filled_rect(0, 0, 8, 8, (255, 0, 0, 255))
    >>> display.save_png("frame.png")
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Protocol

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

# RGBA color with 8-bit channels
Color = tuple[int, int, int, int]


class Key(Enum):
    """Keys polled by the application loop."""

    SCALE_DOWN = "left"
    SCALE_UP = "right"
    DEPTH_DOWN = "down"
    DEPTH_UP = "up"


class Display(Protocol):
    """Minimal drawing and input API used by the application loop."""

    def create_window(self, width: int, height: int, title: str) -> None: ...

    def set_target_fps(self, fps: int) -> None: ...

    def window_should_close(self) -> bool: ...

    def close_window(self) -> None: ...

    def begin_frame(self) -> None: ...

    def end_frame(self) -> None: ...

    def clear(self, color: Color) -> None: ...

    def draw_filled_rect(self, x: int, y: int, width: int, height: int, color: Color) -> None: ...

    def poll_key_pressed(self, key: Key) -> bool: ...


class RasterDisplay:
    """Headless display that rasterizes into a numpy RGBA canvas.

    Key presses are scripted per frame: key_script[n] is the set of keys
    reported as pressed during frame n. Frames past the end of the script
    have no key presses.

    Attributes:
        canvas: uint8 array of shape (height, width, 4), row 0 at the top.
        frame_count: Number of completed frames (end_frame calls).
        title: Window title passed to create_window.
        target_fps: Last value passed to set_target_fps.
    """

    def __init__(
        self,
        key_script: Iterable[Iterable[Key]] | None = None,
        *,
        max_frames: int | None = None,
    ) -> None:
        """Initialize the display.

        Args:
            key_script: Keys pressed in each successive frame.
            max_frames: If set, window_should_close() turns true after this
                many frames.
        """
        self._key_script = [frozenset(keys) for keys in (key_script or [])]
        self._max_frames = max_frames
        self._open = False
        self._in_frame = False
        self.canvas: npt.NDArray[np.uint8] = np.zeros((0, 0, 4), dtype=np.uint8)
        self.frame_count = 0
        self.title = ""
        self.target_fps = 0

    @property
    def width(self) -> int:
        return self.canvas.shape[1]

    @property
    def height(self) -> int:
        return self.canvas.shape[0]

    def create_window(self, width: int, height: int, title: str) -> None:
        """Allocate a black canvas of the given size.

        Raises:
            ValueError: If width or height is not positive.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Window size must be positive, got {width}x{height}")
        self.canvas = np.zeros((height, width, 4), dtype=np.uint8)
        self.canvas[..., 3] = 255
        self.title = title
        self._open = True

    def set_target_fps(self, fps: int) -> None:
        self.target_fps = fps

    def window_should_close(self) -> bool:
        if not self._open:
            return True
        return self._max_frames is not None and self.frame_count >= self._max_frames

    def close_window(self) -> None:
        self._open = False

    def begin_frame(self) -> None:
        """Start a frame.

        Raises:
            RuntimeError: If the window has not been created.
        """
        if not self._open:
            raise RuntimeError("Window is not open; call create_window() first")
        self._in_frame = True

    def end_frame(self) -> None:
        self._in_frame = False
        self.frame_count += 1

    def clear(self, color: Color) -> None:
        self.canvas[:, :] = color

    def draw_filled_rect(self, x: int, y: int, width: int, height: int, color: Color) -> None:
        """Fill a rectangle, clipped to the canvas."""
        x0, y0 = max(x, 0), max(y, 0)
        x1, y1 = min(x + width, self.width), min(y + height, self.height)
        if x1 > x0 and y1 > y0:
            self.canvas[y0:y1, x0:x1] = color

    def poll_key_pressed(self, key: Key) -> bool:
        if self.frame_count < len(self._key_script):
            return key in self._key_script[self.frame_count]
        return False

    def to_image(self) -> PILImage.Image:
        """Convert the canvas to an RGBA Pillow image."""
        return PILImage.fromarray(self.canvas)

    def save_png(self, filepath: str) -> None:
        """Save the canvas as an RGBA PNG file."""
        self.to_image().save(filepath)


def show_preview(
    image: npt.NDArray[np.uint8],
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (10.24, 7.68),
    block: bool = True,
) -> None:
    """Display a rendered frame as a Matplotlib figure.

    Args:
        image: uint8 image of shape (H, W, 3) or (H, W, 4).
        title: Figure title.
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until the figure is closed.
    """
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(1, 1, figsize=figsize)

    ax.imshow(image)
    ax.axis("off")
    if title is not None:
        ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
