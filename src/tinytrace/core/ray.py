"""Ray data structure and vector utilities for the Whitted-style ray tracer.

This module provides the Ray dataclass and the small set of vector operations
the shader needs: dot products, normalization, mirror reflection and Snell
refraction. All operations are Taichi functions so they can run inside the
per-cell render kernel on CPU threads or on the GPU.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti
import taichi.math as tm

# Type aliases for 3D and 4D vectors using Taichi's math module
vec3 = tm.vec3
vec4 = tm.vec4

# Offset applied along the surface normal when spawning secondary rays
SURFACE_EPSILON = 1e-3


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Expected to be
            normalized by every intersection routine in this package.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector."""
    return tm.length(v)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product of two vectors."""
    return tm.dot(a, b)


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the same direction as v. A zero-length vector is
        returned unchanged so that degenerate directions stay zero instead
        of turning into NaN.
    """
    result = v
    len_sq = tm.dot(v, v)
    if len_sq > 0.0:
        result = v / ti.sqrt(len_sq)
    return result


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    The normal should be unit length. Reflecting twice about the same
    normal returns the original vector.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The reflected direction vector.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def refract(incident: vec3, normal: vec3, refractive_index: ti.f32) -> vec3:
    """Refract an incident vector through a surface using Snell's law.

    The normal is the outward surface normal. When the incident direction
    and the normal point the same way the ray is leaving the medium, so the
    indices of refraction are swapped and the normal is flipped.

    Args:
        incident: The incoming direction vector (should be normalized).
        normal: The outward surface normal (should be normalized).
        refractive_index: Index of refraction of the medium behind the
            surface (the outside medium is assumed to be air, index 1).

    Returns:
        The refracted direction vector, or a zero vector on total internal
        reflection.
    """
    cos_i = -tm.max(-1.0, tm.min(1.0, tm.dot(incident, normal)))
    eta_i = 1.0
    eta_t = refractive_index
    n = normal
    if cos_i < 0.0:
        # Inside the medium
        cos_i = -cos_i
        eta_i = refractive_index
        eta_t = 1.0
        n = -normal
    eta = eta_i / eta_t
    k = 1.0 - eta * eta * (1.0 - cos_i * cos_i)
    result = vec3(0.0, 0.0, 0.0)
    if k >= 0.0:
        result = incident * eta + n * (eta * cos_i - ti.sqrt(k))
    return result


@ti.func
def offset_origin(point: vec3, normal: vec3, direction: vec3) -> vec3:
    """Offset a secondary ray origin to avoid self-intersection.

    Pushes the point along the normal toward the side the new ray travels
    into: below the surface for rays entering it, above otherwise.

    Args:
        point: The intersection point.
        normal: The surface normal at the point.
        direction: The direction of the secondary ray.

    Returns:
        The offset origin point.
    """
    offset = SURFACE_EPSILON * normal
    result = point + offset
    if tm.dot(direction, normal) < 0.0:
        result = point - offset
    return result
