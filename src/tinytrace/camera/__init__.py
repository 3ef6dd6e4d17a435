"""Camera module for view and ray generation.

This module provides the camera model for generating primary rays:

Components:
    pinhole: Fixed-origin pinhole (perspective) camera looking down -Z

Camera responsibilities:
    - Map reduced-grid cell coordinates (i, j) to world-space rays
    - Keep the aspect ratio of the grid so cells stay square

Ray generation uses grid coordinates:
    i in [0, width): left to right across the image
    j in [0, height): top to bottom across the image

Camera state lives in Taichi fields so every cell of the render kernel
can generate its primary ray in parallel.
"""

from .pinhole import (
    DEFAULT_FOV,
    PinholeCamera,
    get_camera_info,
    get_ray,
    is_camera_setup,
    setup_camera,
)

__all__ = [
    "PinholeCamera",
    "DEFAULT_FOV",
    "setup_camera",
    "is_camera_setup",
    "get_ray",
    "get_camera_info",
]
