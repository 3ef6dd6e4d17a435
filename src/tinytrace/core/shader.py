"""Whitted-style recursive shading.

This module implements cast_ray, which evaluates the color seen along a ray:
direct Lambert and Phong illumination from point lights with hard shadows,
plus a mirror-reflected ray and a refracted ray traced up to a maximum depth.

Taichi functions cannot recurse, so the ray tree is walked with an explicit
worklist. The shader follows the reflected ray of each hit directly and parks
the refracted ray in a small per-depth stack. The color of the tree is

    sum over nodes of (product of albedo weights on the path) * (local color)

where a node that misses the scene, or lies deeper than max_depth,
contributes the background color. This equals the recursive definition
exactly. Branches whose albedo weight is zero are never traced.

Pending refracted rays always have distinct depths (each is pushed one level
deeper than everything already pending), so the stack is indexed by depth
and needs only MAX_DEPTH_LIMIT + 1 slots.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.tinytrace.core.shader import trace_ray
    >>> from src.tinytrace.scene.default_scene import create_default_scene
    >>> scene, _ = create_default_scene()
    >>> scene.upload()
    >>> color = trace_ray((0, 0, 0), (0, 0, -1), depth=0, max_depth=4)
"""

import taichi as ti
import taichi.math as tm

from src.tinytrace.core.config import MAX_DEPTH_LIMIT
from src.tinytrace.core.ray import normalize, offset_origin, reflect, refract
from src.tinytrace.materials.phong import lambert_term, phong_term
from src.tinytrace.scene.intersection import (
    SceneHitRecord,
    intersect_scene,
    is_shadowed,
    light_intensities,
    light_positions,
    num_lights,
)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Shading Constants
# =============================================================================

# Color of rays that leave the scene or exceed the recursion depth
BACKGROUND_COLOR = (0.2, 0.7, 0.8)

# One stack slot per depth level 0..MAX_DEPTH_LIMIT
STACK_SIZE = MAX_DEPTH_LIMIT + 1

# Upper bound on the nodes of a ray tree with branching factor 2
MAX_NODES = 2 ** (MAX_DEPTH_LIMIT + 1)


@ti.func
def _background() -> vec3:
    return vec3(BACKGROUND_COLOR[0], BACKGROUND_COLOR[1], BACKGROUND_COLOR[2])


@ti.func
def shade_local(rec: SceneHitRecord, direction: vec3) -> vec3:
    """Direct illumination at a hit point (diffuse and specular terms).

    Lights occluded by a blocker strictly closer than the light are skipped.

    Args:
        rec: The hit record with point, normal and material.
        direction: The direction of the incoming ray.

    Returns:
        diffuse_color * diffuse * albedo[0] + white * specular * albedo[1]
    """
    material = rec.material
    diffuse = 0.0
    specular = 0.0

    for i in range(num_lights[None]):
        to_light = light_positions[i] - rec.point
        light_distance = tm.length(to_light)
        light_dir = normalize(to_light)
        if is_shadowed(rec.point, rec.normal, light_dir, light_distance) == 0:
            intensity = light_intensities[i]
            diffuse += lambert_term(light_dir, rec.normal) * intensity
            specular += (
                phong_term(light_dir, rec.normal, direction, material.specular_exponent)
                * intensity
            )

    return (
        material.diffuse_color * diffuse * material.albedo[0]
        + vec3(1.0, 1.0, 1.0) * specular * material.albedo[1]
    )


@ti.func
def cast_ray(origin: vec3, direction: vec3, depth: ti.i32, max_depth: ti.i32) -> vec3:
    """Compute the color seen along a ray.

    Args:
        origin: The starting point of the ray.
        direction: The normalized direction of the ray.
        depth: Recursion depth of this ray (0 for primary rays).
        max_depth: Deepest level that is still shaded; rays deeper than
            this return the background. Clamped to MAX_DEPTH_LIMIT.

    Returns:
        The accumulated color. Not clamped; the display path normalizes it.
    """
    limit = ti.min(max_depth, MAX_DEPTH_LIMIT)
    color = vec3(0.0, 0.0, 0.0)

    # Current ray being followed
    cur_origin = origin
    cur_direction = direction
    cur_weight = 1.0
    cur_depth = depth
    has_current = 1

    # Active flag for worklist continuation (no break in ti.func loops)
    active = 1

    if depth > limit:
        color = _background()
        has_current = 0
        active = 0

    # Parked refracted rays, indexed by depth: origin (3), direction (3), weight
    pending = ti.Matrix.zero(ti.f32, STACK_SIZE, 7)
    has_pending = ti.Vector.zero(ti.i32, STACK_SIZE)

    for _ in range(MAX_NODES):
        if active == 1:
            if has_current == 0:
                # Pop the deepest parked ray
                popped = -1
                for s in ti.static(range(STACK_SIZE)):
                    if has_pending[s] == 1:
                        popped = s
                        cur_origin = vec3(pending[s, 0], pending[s, 1], pending[s, 2])
                        cur_direction = vec3(pending[s, 3], pending[s, 4], pending[s, 5])
                        cur_weight = pending[s, 6]
                for s in ti.static(range(STACK_SIZE)):
                    if s == popped:
                        has_pending[s] = 0
                if popped < 0:
                    active = 0
                else:
                    cur_depth = popped
                    has_current = 1

        if active == 1:
            has_current = 0
            rec = intersect_scene(cur_origin, cur_direction)
            if rec.hit == 0:
                color += cur_weight * _background()
            else:
                material = rec.material
                color += cur_weight * shade_local(rec, cur_direction)
                child_depth = cur_depth + 1

                # Refraction: park it, or add the background past the limit
                transmit_weight = cur_weight * material.albedo[3]
                if transmit_weight > 0.0:
                    if child_depth > limit:
                        color += transmit_weight * _background()
                    else:
                        refract_dir = normalize(
                            refract(cur_direction, rec.normal, material.refractive_index)
                        )
                        # Total internal reflection yields a zero direction
                        if tm.dot(refract_dir, refract_dir) > 0.0:
                            refract_origin = offset_origin(rec.point, rec.normal, refract_dir)
                            for s in ti.static(range(STACK_SIZE)):
                                if s == child_depth:
                                    pending[s, 0] = refract_origin.x
                                    pending[s, 1] = refract_origin.y
                                    pending[s, 2] = refract_origin.z
                                    pending[s, 3] = refract_dir.x
                                    pending[s, 4] = refract_dir.y
                                    pending[s, 5] = refract_dir.z
                                    pending[s, 6] = transmit_weight
                                    has_pending[s] = 1

                # Reflection: follow it directly
                reflect_weight = cur_weight * material.albedo[2]
                if reflect_weight > 0.0:
                    if child_depth > limit:
                        color += reflect_weight * _background()
                    else:
                        reflect_dir = normalize(reflect(cur_direction, rec.normal))
                        cur_origin = offset_origin(rec.point, rec.normal, reflect_dir)
                        cur_direction = reflect_dir
                        cur_weight = reflect_weight
                        cur_depth = child_depth
                        has_current = 1

    return color


# =============================================================================
# Python-callable wrapper
# =============================================================================


@ti.kernel
def _trace_ray_kernel(origin: vec3, direction: vec3, depth: ti.i32, max_depth: ti.i32) -> vec3:
    return cast_ray(origin, tm.normalize(direction), depth, max_depth)


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    depth: int = 0,
    max_depth: int = MAX_DEPTH_LIMIT,
) -> tuple[float, float, float]:
    """Trace a single ray against the uploaded scene.

    This is a Python-callable function for testing. For production rendering,
    use render() which shades all cells in parallel.

    Args:
        origin: Ray origin.
        direction: Ray direction; normalized before tracing.
        depth: Recursion depth of the ray.
        max_depth: Deepest level that is still shaded.

    Returns:
        Tuple of (R, G, B) color values.
    """
    color = _trace_ray_kernel(vec3(*origin), vec3(*direction), depth, max_depth)
    return (float(color[0]), float(color[1]), float(color[2]))
