"""Materials module for the Phong-style shading model.

This module implements the single material model of the ray tracer:

Components:
    phong: Material description with diffuse, specular, reflection and
        transmission weights, named presets, and the Lambert/Phong terms
        used by the shader

Each material provides:
    - albedo weights for the four contributions of a shaded point
    - a diffuse color and Phong specular exponent
    - an index of refraction for the transmitted ray

The Python-side Material dataclass is validated and immutable; the
PhongMaterial Taichi struct is what the render kernel reads.
"""

from .phong import (
    GLASS,
    IVORY,
    MIRROR,
    PRESETS,
    RED_RUBBER,
    Material,
    PhongMaterial,
    get_preset,
    lambert_term,
    make_default_material,
    phong_term,
)

__all__ = [
    "Material",
    "PhongMaterial",
    "make_default_material",
    "lambert_term",
    "phong_term",
    "get_preset",
    "PRESETS",
    "IVORY",
    "GLASS",
    "RED_RUBBER",
    "MIRROR",
]
