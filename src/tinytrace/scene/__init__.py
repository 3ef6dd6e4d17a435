"""Scene module for scene description and ray-scene queries.

This module handles scene representation and intersection:

Components:
    manager: Python-side Scene container (spheres, lights, serialization)
    intersection: GPU-resident scene storage and the nearest-hit query
    default_scene: The four-sphere demo scene and its orbit animation

The scene module manages:
    - Sphere and point light storage in GPU-friendly Taichi fields
    - Materials stored inline with each sphere
    - The checkerboard floor, which is part of every scene

Scene data is organized for efficient GPU access:
    - Structure-of-Arrays layout for geometric and material data
    - Fixed capacities, so uploads never reallocate fields
"""

from .default_scene import (
    ORBIT_RADIUS,
    ORBIT_STEP_DEGREES,
    ORBITING_SPHERE,
    create_default_scene,
    orbit_position,
)
from .intersection import (
    MAX_LIGHTS,
    MAX_SPHERES,
    MISS_DISTANCE,
    SceneHitRecord,
    add_light,
    add_sphere,
    clear_scene,
    get_light_count,
    get_sphere_count,
    intersect_scene,
    is_shadowed,
)
from .manager import LightInfo, Scene, SphereInfo

__all__ = [
    # Intersection module
    "SceneHitRecord",
    "add_sphere",
    "add_light",
    "clear_scene",
    "get_sphere_count",
    "get_light_count",
    "intersect_scene",
    "is_shadowed",
    "MAX_SPHERES",
    "MAX_LIGHTS",
    "MISS_DISTANCE",
    # Manager module
    "Scene",
    "SphereInfo",
    "LightInfo",
    # Default scene module
    "create_default_scene",
    "orbit_position",
    "ORBITING_SPHERE",
    "ORBIT_RADIUS",
    "ORBIT_STEP_DEGREES",
]
