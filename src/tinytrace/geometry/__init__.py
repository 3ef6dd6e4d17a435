"""Geometry module for shape primitives.

This module provides the primitives of the scene and their intersection
algorithms:

Components:
    sphere: Sphere primitive with analytic ray-sphere intersection
    checkerboard: Bounded checkerboard floor plane with per-hit tile color

All intersection routines are Taichi functions (@ti.func) evaluated inside
the per-cell render kernel. They follow the pattern:
    record = hit_shape(ray_origin, ray_direction, ...)
    if record.hit == 1: use record.t
"""

from .checkerboard import (
    PARALLEL_EPSILON,
    PLANE_HALF_WIDTH,
    PLANE_NORMAL,
    PLANE_Y,
    PLANE_Z_FAR,
    PLANE_Z_NEAR,
    checker_color,
    hit_checkerboard,
)
from .sphere import HitRecord, Sphere, hit_sphere, make_sphere, sphere_normal

__all__ = [
    "Sphere",
    "HitRecord",
    "hit_sphere",
    "make_sphere",
    "sphere_normal",
    "hit_checkerboard",
    "checker_color",
    "PLANE_Y",
    "PLANE_HALF_WIDTH",
    "PLANE_Z_NEAR",
    "PLANE_Z_FAR",
    "PLANE_NORMAL",
    "PARALLEL_EPSILON",
]
