"""Pinhole camera model for perspective projection ray generation.

The camera sits at a fixed origin and looks down -Z with +Y up. Primary rays
are generated per cell of the reduced render grid:

    x =  (2 * (i + 0.5) / width  - 1) * tan(fov / 2) * width / height
    y = -(2 * (j + 0.5) / height - 1) * tan(fov / 2)
    direction = normalize(x, y, -1)

Row j = 0 is the top row of the image, so y is negated.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.tinytrace.camera.pinhole import PinholeCamera, setup_camera, get_ray
    >>>
    >>> setup_camera(PinholeCamera())
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(64, 48, 128, 96)  # Ray through a cell near the center
"""

import math
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from src.tinytrace.core.ray import Ray, make_ray, vec3

# Field of view in radians
DEFAULT_FOV = 1.0


@dataclass
class PinholeCamera:
    """Configuration for a pinhole (perspective) camera.

    Attributes:
        origin: Camera position in world space (x, y, z).
        fov: Field of view in radians, measured across the image height.
    """

    origin: tuple[float, float, float] = (0.0, 0.0, 0.0)
    fov: float = DEFAULT_FOV

    def __post_init__(self) -> None:
        """Validate camera parameters.

        Raises:
            ValueError: If the field of view is not in (0, pi).
        """
        if not 0.0 < self.fov < math.pi:
            raise ValueError(f"fov must be in (0, pi) radians, got {self.fov}")


# =============================================================================
# Taichi Fields for Camera State (GPU-accessible)
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
# tan(fov / 2), the half-height of the image plane at unit distance
_half_height = ti.field(dtype=ti.f32, shape=())

_is_setup = False


def setup_camera(camera: PinholeCamera) -> None:
    """Upload camera state to the Taichi fields.

    Must be called before rendering; the renderer calls it with the default
    camera when nothing has been set up yet.

    Args:
        camera: Camera configuration with position and field of view.
    """
    global _is_setup
    _camera_origin[None] = camera.origin
    _half_height[None] = math.tan(camera.fov / 2.0)
    _is_setup = True


def is_camera_setup() -> bool:
    """Whether setup_camera() has been called."""
    return _is_setup


@ti.func
def get_ray(i: ti.i32, j: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate the primary ray through the center of grid cell (i, j).

    This function is designed to be called from within Taichi kernels.

    Args:
        i: Column of the cell (0 = left).
        j: Row of the cell (0 = top).
        width: Number of columns in the grid.
        height: Number of rows in the grid.

    Returns:
        A Ray from the camera origin with a normalized direction.
    """
    w = ti.cast(width, ti.f32)
    h = ti.cast(height, ti.f32)
    half_height = _half_height[None]
    x = (2.0 * (ti.cast(i, ti.f32) + 0.5) / w - 1.0) * half_height * w / h
    y = -(2.0 * (ti.cast(j, ti.f32) + 0.5) / h - 1.0) * half_height
    direction = tm.normalize(vec3(x, y, -1.0))
    return make_ray(_camera_origin[None], direction)


def get_camera_info() -> dict[str, float | tuple[float, float, float]]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with the origin and the field of view in radians.

    Raises:
        RuntimeError: If the camera has not been set up.
    """
    if not _is_setup:
        raise RuntimeError("Camera has not been set up; call setup_camera() first")
    origin_vec = _camera_origin[None]
    return {
        "origin": (float(origin_vec[0]), float(origin_vec[1]), float(origin_vec[2])),
        "fov": 2.0 * math.atan(float(_half_height[None])),
    }
