"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    ray: Ray data structure and vector utilities (reflect, refract)
    config: Screen constants and the per-frame RenderConfig
    shader: Recursive Whitted-style shading (cast_ray)
    renderer: Per-cell frame rendering and draw-command compaction

The shader evaluates direct illumination with hard shadows from point lights
and follows mirror reflection and refraction up to a small maximum depth.
The renderer runs the shader once per macro-pixel of the reduced grid and
compacts the result into run-length rectangles for display.

All compute-intensive operations use Taichi kernels for parallel execution.
"""

from .config import (
    MAX_DEPTH_LIMIT,
    MAX_SCALE,
    MIN_DEPTH,
    MIN_SCALE,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    RenderConfig,
)
from .ray import (
    SURFACE_EPSILON,
    Ray,
    dot,
    length,
    make_ray,
    normalize,
    offset_origin,
    ray_at,
    reflect,
    refract,
    vec3,
    vec4,
)

# Note: shader and renderer are NOT imported here because they declare Taichi
# fields, which must be created after ti.init(). Import them directly:
#   from src.tinytrace.core.renderer import render

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "vec4",
    "length",
    "dot",
    "normalize",
    "reflect",
    "refract",
    "offset_origin",
    "SURFACE_EPSILON",
    "RenderConfig",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "MIN_SCALE",
    "MAX_SCALE",
    "MIN_DEPTH",
    "MAX_DEPTH_LIMIT",
]
