"""Sphere primitive with analytic ray-sphere intersection.

The intersection projects the sphere center onto the ray and measures the
closest approach, which avoids forming the full quadratic:

    L   = center - origin
    tca = dot(L, direction)          (projection of the center on the ray)
    d2  = dot(L, L) - tca^2          (squared distance of closest approach)
    thc = sqrt(radius^2 - d2)        (half chord length)
    t   = tca -/+ thc

The direction must be normalized for tca to be a distance.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.tinytrace.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, -5), radius=1.0)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class HitRecord:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: Whether the ray intersected the primitive (1 if hit, 0 if miss).
        t: Distance along the ray to the intersection. Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32


@ti.func
def hit_sphere(ray_origin: vec3, ray_direction: vec3, sphere: Sphere) -> HitRecord:
    """Test for ray-sphere intersection.

    Returns the nearer positive root. When the ray origin is inside the
    sphere the nearer root is negative and the farther one is returned
    instead, so an inside origin always reports a hit.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The normalized direction of the ray.
        sphere: The sphere to test intersection against.

    Returns:
        A HitRecord. Check the hit field to determine if intersection occurred.
    """
    to_center = sphere.center - ray_origin
    tca = tm.dot(to_center, ray_direction)
    d2 = tm.dot(to_center, to_center) - tca * tca
    radius2 = sphere.radius * sphere.radius

    did_hit = 0
    hit_t = 0.0

    if d2 <= radius2:
        thc = ti.sqrt(radius2 - d2)
        t0 = tca - thc
        if t0 < 0.0:
            t0 = tca + thc
        if t0 >= 0.0:
            did_hit = 1
            hit_t = t0

    return HitRecord(hit=did_hit, t=hit_t)


@ti.func
def sphere_normal(sphere: Sphere, point: vec3) -> vec3:
    """Outward unit normal of a sphere at a surface point."""
    return tm.normalize(point - sphere.center)


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere from center and radius."""
    return Sphere(center=center, radius=radius)
