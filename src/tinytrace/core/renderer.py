"""Frame renderer: per-cell shading and draw-command compaction.

A frame is rendered in two steps:

1. render_framebuffer shades one primary ray per cell of the reduced grid
   (SCREEN_WIDTH / scale by SCREEN_HEIGHT / scale) in a parallel Taichi
   kernel. Each cell writes only its own slot, row-major.
2. compact_framebuffer scans every row for runs of identical colors and
   turns each run into one filled rectangle in screen pixels, so large
   uniform areas (the background) cost a single draw call.

The framebuffer field is preallocated for the largest grid (scale 1) so
changing the scale between frames never reallocates or recompiles.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.tinytrace.core.config import RenderConfig
    >>> from src.tinytrace.core.renderer import render
    >>> from src.tinytrace.scene.default_scene import create_default_scene
    >>> scene, _ = create_default_scene()
    >>> commands = render(scene, RenderConfig(scale=8, max_depth=4))
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
import taichi as ti

from src.tinytrace.camera.pinhole import PinholeCamera, get_ray, is_camera_setup, setup_camera
from src.tinytrace.core.config import MAX_GRID_HEIGHT, MAX_GRID_WIDTH, RenderConfig
from src.tinytrace.core.shader import cast_ray

if TYPE_CHECKING:
    from src.tinytrace.preview.display import Display
    from src.tinytrace.scene.manager import Scene


@dataclass(frozen=True)
class RectCommand:
    """A filled rectangle to draw, in screen pixels.

    Attributes:
        x: Left edge.
        y: Top edge.
        width: Width in pixels.
        height: Height in pixels.
        color: RGBA color, each channel in [0, 255].
    """

    x: int
    y: int
    width: int
    height: int
    color: tuple[int, int, int, int]


# =============================================================================
# Framebuffer (preallocated to the largest grid)
# =============================================================================

_framebuffer = ti.Vector.field(3, dtype=ti.f32, shape=MAX_GRID_WIDTH * MAX_GRID_HEIGHT)


@ti.kernel
def _render_kernel(width: ti.i32, height: ti.i32, max_depth: ti.i32):
    """Shade one primary ray per grid cell.

    Args:
        width: Grid width in cells.
        height: Grid height in cells.
        max_depth: Maximum recursion depth.
    """
    for j, i in ti.ndrange(height, width):
        ray = get_ray(i, j, width, height)
        _framebuffer[j * width + i] = cast_ray(ray.origin, ray.direction, 0, max_depth)


@ti.kernel
def _read_cells(cells: ti.types.ndarray(), count: ti.i32):
    """Copy the first count framebuffer cells into an (N, 3) array."""
    for k in range(count):
        for c in ti.static(range(3)):
            cells[k, c] = _framebuffer[k][c]


def render_framebuffer(scene: "Scene", config: RenderConfig) -> npt.NDArray[np.float32]:
    """Render the scene into a reduced-grid color buffer.

    Uploads the scene, sets up the default camera if none has been set up,
    and shades every cell.

    Args:
        scene: The scene to render.
        config: Detail scale and recursion depth of this frame.

    Returns:
        Float array of shape (grid_height, grid_width, 3). Colors are not
        clamped and may exceed 1.
    """
    if not is_camera_setup():
        setup_camera(PinholeCamera())
    scene.upload()

    width, height = config.grid_size
    _render_kernel(width, height, config.max_depth)

    cells = np.empty((width * height, 3), dtype=np.float32)
    _read_cells(cells, width * height)
    return cells.reshape(height, width, 3)


# =============================================================================
# Compaction
# =============================================================================


def colors_to_rgba8(colors: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Map an (N, 3) array of float colors to (N, 4) RGBA8.

    Colors whose largest channel exceeds 1 are divided by it, then every
    channel is clamped to [0, 1] and truncated to int(255 * c).
    """
    colors = np.nan_to_num(np.asarray(colors, dtype=np.float64).reshape(-1, 3))
    peak = colors.max(axis=1, keepdims=True)
    colors = np.where(peak > 1.0, colors / np.maximum(peak, 1.0), colors)
    channels = (255.0 * np.clip(colors, 0.0, 1.0)).astype(np.uint8)
    alpha = np.full((channels.shape[0], 1), 255, dtype=np.uint8)
    return np.concatenate([channels, alpha], axis=1)


def color_to_rgba8(color: tuple[float, float, float]) -> tuple[int, int, int, int]:
    """Map a float color to 8-bit RGBA with alpha 255.

    Example:
        >>> color_to_rgba8((2.0, 1.0, 0.0))
        (255, 127, 0, 255)
    """
    rgba = colors_to_rgba8(np.asarray(color))[0]
    return (int(rgba[0]), int(rgba[1]), int(rgba[2]), int(rgba[3]))


def compact_framebuffer(
    framebuffer: npt.NDArray[np.floating], scale: int
) -> list[RectCommand]:
    """Merge runs of identical colors into rectangle draw commands.

    Each row of the grid is scanned left to right; every maximal run of
    identical colors becomes one rectangle of height scale. The rectangles
    tile the screen exactly, without gaps or overlaps.

    Args:
        framebuffer: Float array of shape (grid_height, grid_width, 3).
        scale: Macro-pixel edge length in screen pixels.

    Returns:
        Draw commands in row order, left to right within a row.

    Raises:
        ValueError: If the framebuffer is not an (H, W, 3) array.
    """
    if framebuffer.ndim != 3 or framebuffer.shape[2] != 3:
        raise ValueError(f"framebuffer must have shape (H, W, 3), got {framebuffer.shape}")

    height, width, _ = framebuffer.shape
    commands: list[RectCommand] = []

    for row in range(height):
        cells = framebuffer[row]
        changed = np.any(cells[1:] != cells[:-1], axis=1)
        starts = np.concatenate(([0], np.flatnonzero(changed) + 1))
        ends = np.append(starts[1:], width)
        rgba = colors_to_rgba8(cells[starts])

        for start, end, color in zip(starts, ends, rgba):
            commands.append(
                RectCommand(
                    x=int(start) * scale,
                    y=row * scale,
                    width=int(end - start) * scale,
                    height=scale,
                    color=(int(color[0]), int(color[1]), int(color[2]), int(color[3])),
                )
            )

    return commands


def render(scene: "Scene", config: RenderConfig) -> list[RectCommand]:
    """Render one frame and compact it into draw commands.

    Args:
        scene: The scene to render.
        config: Detail scale and recursion depth of this frame.

    Returns:
        Rectangle draw commands covering the whole screen.
    """
    framebuffer = render_framebuffer(scene, config)
    return compact_framebuffer(framebuffer, config.scale)


def draw_commands(commands: list[RectCommand], display: "Display") -> None:
    """Issue draw commands through a display."""
    for command in commands:
        display.draw_filled_rect(
            command.x, command.y, command.width, command.height, command.color
        )
