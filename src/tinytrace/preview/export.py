"""Image export utilities for rendered frames.

A frame can be exported either from a display canvas (what the user saw) or
directly from a reduced-grid framebuffer, which is expanded to screen pixels
with the same color mapping the draw commands use.

Supported formats:
    - PNG (8-bit RGB/RGBA via Pillow)

Example:
    >>> from src.tinytrace.core.renderer import render_framebuffer
    >>> from src.tinytrace.preview.export import save_framebuffer_png
    >>>
    >>> framebuffer = render_framebuffer(scene, config)
    >>> save_framebuffer_png(framebuffer, config.scale, "frame.png")
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from src.tinytrace.core.renderer import colors_to_rgba8


def framebuffer_to_uint8(
    framebuffer: npt.NDArray[np.floating], scale: int
) -> npt.NDArray[np.uint8]:
    """Expand a reduced-grid framebuffer to a screen-sized RGB image.

    Each cell becomes a scale x scale block, mapped to 8 bits exactly like
    the rectangles produced by compact_framebuffer.

    Args:
        framebuffer: Float array of shape (grid_height, grid_width, 3).
        scale: Macro-pixel edge length in screen pixels.

    Returns:
        uint8 array of shape (grid_height * scale, grid_width * scale, 3).

    Raises:
        ValueError: If the framebuffer is not an (H, W, 3) array or scale
            is not positive.
    """
    if framebuffer.ndim != 3 or framebuffer.shape[2] != 3:
        raise ValueError(f"framebuffer must have shape (H, W, 3), got {framebuffer.shape}")
    if scale < 1:
        raise ValueError(f"scale must be positive, got {scale}")

    height, width, _ = framebuffer.shape
    rgb = colors_to_rgba8(framebuffer)[:, :3].reshape(height, width, 3)
    return np.repeat(np.repeat(rgb, scale, axis=0), scale, axis=1)


def save_png_from_array(image: npt.NDArray[np.uint8], filepath: str) -> None:
    """Save a uint8 RGB or RGBA array as a PNG file.

    Raises:
        ValueError: If the array is not (H, W, 3) or (H, W, 4) uint8.
    """
    if image.dtype != np.uint8 or image.ndim != 3 or image.shape[2] not in (3, 4):
        raise ValueError(
            f"image must be a uint8 array of shape (H, W, 3|4), got {image.dtype} {image.shape}"
        )
    PILImage.fromarray(image).save(filepath)


def save_framebuffer_png(
    framebuffer: npt.NDArray[np.floating], scale: int, filepath: str
) -> None:
    """Expand a framebuffer to screen pixels and save it as a PNG file."""
    save_png_from_array(framebuffer_to_uint8(framebuffer, scale), filepath)
