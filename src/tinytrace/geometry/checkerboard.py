"""Bounded checkerboard floor plane.

The floor is the plane y = PLANE_Y restricted to a rectangle in x/z. It has no
stored material: the diffuse color is synthesized per hit from the parity of
the 2x2 world-unit tile containing the hit point.

Ray-plane intersection:
    t = -(origin.y - PLANE_Y) / direction.y

Rays nearly parallel to the plane (|direction.y| <= PARALLEL_EPSILON) are
skipped to avoid an unstable division.
"""

import taichi as ti
import taichi.math as tm

from .sphere import HitRecord

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Plane height and bounded extent
PLANE_Y = -4.0
PLANE_HALF_WIDTH = 10.0  # |x| < 10
PLANE_Z_NEAR = -10.0  # z < -10
PLANE_Z_FAR = -30.0  # z > -30

PARALLEL_EPSILON = 1e-3

# Tile colors before dimming
TILE_COLOR_ODD = (1.0, 1.0, 1.0)
TILE_COLOR_EVEN = (1.0, 0.7, 0.3)
TILE_BRIGHTNESS = 0.3

PLANE_NORMAL = (0.0, 1.0, 0.0)


@ti.func
def hit_checkerboard(ray_origin: vec3, ray_direction: vec3) -> HitRecord:
    """Intersect a ray with the bounded checkerboard plane.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction of the ray.

    Returns:
        A HitRecord; hit is 1 only for a positive distance whose hit point
        lies inside the bounded rectangle.
    """
    did_hit = 0
    hit_t = 0.0

    if ti.abs(ray_direction.y) > PARALLEL_EPSILON:
        t = -(ray_origin.y - PLANE_Y) / ray_direction.y
        point = ray_origin + t * ray_direction
        if (
            t > 0.0
            and ti.abs(point.x) < PLANE_HALF_WIDTH
            and point.z < PLANE_Z_NEAR
            and point.z > PLANE_Z_FAR
        ):
            did_hit = 1
            hit_t = t

    return HitRecord(hit=did_hit, t=hit_t)


@ti.func
def checker_color(point: vec3) -> vec3:
    """Diffuse color of the checkerboard tile containing a point.

    Tiles are 2x2 world units; the tile index parity is
    floor(0.5 * x) + floor(0.5 * z).
    """
    tile_x = ti.cast(ti.floor(0.5 * point.x), ti.i32)
    tile_z = ti.cast(ti.floor(0.5 * point.z), ti.i32)
    color = vec3(TILE_COLOR_EVEN[0], TILE_COLOR_EVEN[1], TILE_COLOR_EVEN[2])
    if ((tile_x + tile_z) & 1) == 1:
        color = vec3(TILE_COLOR_ODD[0], TILE_COLOR_ODD[1], TILE_COLOR_ODD[2])
    return color * TILE_BRIGHTNESS
