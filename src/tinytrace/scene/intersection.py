"""Scene-level primitive intersection testing.

This module provides scene-level ray intersection testing over the spheres
and the checkerboard floor, returning the closest hit together with the
material to shade it with.

Spheres and lights are stored in Taichi fields for GPU-efficient access. Each
sphere carries its material inline (Structure of Arrays, one field per
material component), so a hit record can be returned without a second lookup.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.tinytrace.materials.phong import IVORY
    >>> from src.tinytrace.scene.intersection import (
    ...     add_light, add_sphere, clear_scene, intersect_scene
    ... )
    >>> clear_scene()
    >>> add_sphere((0.0, 0.0, -5.0), 1.0, IVORY)
    >>> add_light((0.0, 0.0, 0.0), 1.0)
    >>> # Use intersect_scene within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from src.tinytrace.core.ray import offset_origin
from src.tinytrace.geometry.checkerboard import (
    PLANE_NORMAL,
    checker_color,
    hit_checkerboard,
)
from src.tinytrace.geometry.sphere import Sphere, hit_sphere, sphere_normal
from src.tinytrace.materials.phong import Material, PhongMaterial, make_default_material

# Type aliases for 3D and 4D vectors using Taichi's math module
vec3 = tm.vec3
vec4 = tm.vec4

# Anything at or beyond this distance is reported as a miss
MISS_DISTANCE = 1000.0

# Initial "nearest" distance before any primitive is tested
FAR_DISTANCE = 3.0e38


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection with material information.

    Attributes:
        hit: Whether the ray intersected any primitive (1 if hit, 0 if miss).
        t: Distance along the ray to the nearest intersection.
            Only valid if hit == 1.
        point: The 3D point where the ray intersected the surface.
            Only valid if hit == 1.
        normal: The outward surface normal at the intersection point (unit
            length). Not flipped toward the ray; the shader relies on the
            outward orientation to detect rays leaving a medium.
            Only valid if hit == 1.
        material: The material of the hit surface. For the checkerboard
            floor this is synthesized from the tile color.
            Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    material: PhongMaterial


# Maximum number of primitives and lights supported in the scene
MAX_SPHERES = 64
MAX_LIGHTS = 16

# Sphere storage: Structure of Arrays layout for GPU efficiency
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_refractive_indices = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_albedos = ti.Vector.field(4, dtype=ti.f32, shape=MAX_SPHERES)
sphere_diffuse_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_specular_exponents = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Point light storage
light_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_intensities = ti.field(dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all spheres and lights from the scene.

    Resets the counts to zero. The actual field data is not cleared but will
    be overwritten when new spheres and lights are added.
    """
    num_spheres[None] = 0
    num_lights[None] = 0


def add_sphere(
    center: tuple[float, float, float],
    radius: float,
    material: Material,
) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (should be positive).
        material: The surface material of the sphere.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = center
    sphere_radii[idx] = radius
    sphere_refractive_indices[idx] = material.refractive_index
    sphere_albedos[idx] = material.albedo
    sphere_diffuse_colors[idx] = material.diffuse_color
    sphere_specular_exponents[idx] = material.specular_exponent
    num_spheres[None] = idx + 1
    return idx


def add_light(position: tuple[float, float, float], intensity: float) -> int:
    """Add a point light to the scene.

    Args:
        position: World-space position of the light.
        intensity: Scalar light intensity (should be positive).

    Returns:
        The index of the added light.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
    """
    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
    light_positions[idx] = position
    light_intensities[idx] = intensity
    num_lights[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


def get_light_count() -> int:
    """Get the number of lights in the scene."""
    return int(num_lights[None])


@ti.func
def _sphere_material(i: ti.i32) -> PhongMaterial:
    """Gather the material of sphere i from the SoA fields."""
    return PhongMaterial(
        refractive_index=sphere_refractive_indices[i],
        albedo=sphere_albedos[i],
        diffuse_color=sphere_diffuse_colors[i],
        specular_exponent=sphere_specular_exponents[i],
    )


@ti.func
def _make_miss_record() -> SceneHitRecord:
    """Create a SceneHitRecord indicating no intersection."""
    return SceneHitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        material=make_default_material(vec3(0.0, 0.0, 0.0)),
    )


@ti.func
def intersect_scene(ray_origin: vec3, ray_direction: vec3) -> SceneHitRecord:
    """Find the nearest intersection of a ray with the scene.

    Tests every sphere and keeps the nearest, then tests the checkerboard
    floor, which wins only when it is strictly closer than every sphere.
    Hits at or beyond MISS_DISTANCE are reported as misses.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The normalized direction of the ray.

    Returns:
        A SceneHitRecord containing the closest intersection, or a miss
        record if no intersection was found.
    """
    nearest_t = FAR_DISTANCE
    result = _make_miss_record()

    # Test all spheres
    for i in range(num_spheres[None]):
        sphere = Sphere(center=sphere_centers[i], radius=sphere_radii[i])
        rec = hit_sphere(ray_origin, ray_direction, sphere)
        if rec.hit == 1 and rec.t < nearest_t:
            nearest_t = rec.t
            point = ray_origin + rec.t * ray_direction
            result = SceneHitRecord(
                hit=1,
                t=rec.t,
                point=point,
                normal=sphere_normal(sphere, point),
                material=_sphere_material(i),
            )

    # Checkerboard floor
    floor = hit_checkerboard(ray_origin, ray_direction)
    if floor.hit == 1 and floor.t < nearest_t:
        nearest_t = floor.t
        point = ray_origin + floor.t * ray_direction
        result = SceneHitRecord(
            hit=1,
            t=floor.t,
            point=point,
            normal=vec3(PLANE_NORMAL[0], PLANE_NORMAL[1], PLANE_NORMAL[2]),
            material=make_default_material(checker_color(point)),
        )

    if nearest_t >= MISS_DISTANCE:
        result = _make_miss_record()

    return result


@ti.func
def is_shadowed(point: vec3, normal: vec3, light_dir: vec3, light_distance: ti.f32) -> ti.i32:
    """Test whether a surface point is occluded from a point light.

    The shadow ray starts at the point offset along the normal toward the
    light side and counts as blocked only when the blocker lies strictly
    closer than the light.

    Args:
        point: The shaded surface point.
        normal: The surface normal at the point.
        light_dir: Unit direction from the point toward the light.
        light_distance: Distance from the point to the light.

    Returns:
        1 if the light is blocked, 0 otherwise.
    """
    shadow_origin = offset_origin(point, normal, light_dir)
    rec = intersect_scene(shadow_origin, light_dir)
    blocked = 0
    if rec.hit == 1 and tm.length(rec.point - shadow_origin) < light_distance:
        blocked = 1
    return blocked
