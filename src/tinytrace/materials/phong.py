"""Phong-style material with reflection and transmission weights.

A material combines four contributions at a shaded point, weighted by its
albedo vector:

    albedo[0]  Lambertian diffuse from the point lights
    albedo[1]  Phong specular highlight (white)
    albedo[2]  mirror reflection (traced recursively)
    albedo[3]  refractive transmission (traced recursively)

The weights are not normalized and need not sum to 1; the mirror preset uses a
specular weight of 10 to get a sharp, bright highlight.

Example:
    >>> from src.tinytrace.materials.phong import Material, GLASS
    >>> frosted = Material(
    ...     refractive_index=1.3,
    ...     albedo=(0.1, 0.3, 0.1, 0.6),
    ...     diffuse_color=(0.8, 0.8, 0.9),
    ...     specular_exponent=60.0,
    ... )
"""

from dataclasses import asdict, dataclass
from typing import Any

import taichi as ti
import taichi.math as tm

from src.tinytrace.core.ray import reflect

# Type aliases for 3D and 4D vectors
vec3 = tm.vec3
vec4 = tm.vec4


@dataclass(frozen=True)
class Material:
    """Immutable surface material description (Python side).

    Attributes:
        refractive_index: Index of refraction, >= 1. Only used when the
            transmission weight is non-zero.
        albedo: Weights of (diffuse, specular, reflection, transmission).
            Each weight must be non-negative.
        diffuse_color: Diffuse RGB color, conceptually in [0, 1].
        specular_exponent: Phong exponent; larger values give tighter
            highlights. Must be non-negative.
    """

    refractive_index: float = 1.0
    albedo: tuple[float, float, float, float] = (1.0, 0.0, 0.0, 0.0)
    diffuse_color: tuple[float, float, float] = (0.0, 0.0, 0.0)
    specular_exponent: float = 0.0

    def __post_init__(self) -> None:
        """Validate material parameters.

        Raises:
            ValueError: If refractive_index < 1, any albedo weight is
                negative, the vectors have the wrong length, or
                specular_exponent is negative.
        """
        if self.refractive_index < 1.0:
            raise ValueError(
                f"Index of refraction = {self.refractive_index} is less than 1.0. "
                "IOR must be >= 1.0 for physically meaningful materials."
            )
        if len(self.albedo) != 4:
            raise ValueError(f"albedo must have 4 weights, got {len(self.albedo)}")
        if any(w < 0.0 for w in self.albedo):
            raise ValueError(f"albedo weights must be non-negative, got {self.albedo}")
        if len(self.diffuse_color) != 3:
            raise ValueError(
                f"diffuse_color must have 3 components, got {len(self.diffuse_color)}"
            )
        if self.specular_exponent < 0.0:
            raise ValueError(
                f"specular_exponent must be non-negative, got {self.specular_exponent}"
            )

    def to_dict(self) -> dict[str, Any]:
        """Export the material as a JSON-compatible dictionary."""
        data = asdict(self)
        data["albedo"] = list(self.albedo)
        data["diffuse_color"] = list(self.diffuse_color)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Material":
        """Create a material from a dictionary produced by to_dict().

        Missing keys fall back to the defaults of the default material.
        """
        albedo = data.get("albedo", [1.0, 0.0, 0.0, 0.0])
        diffuse_color = data.get("diffuse_color", [0.0, 0.0, 0.0])
        return cls(
            refractive_index=float(data.get("refractive_index", 1.0)),
            albedo=tuple(float(w) for w in albedo),  # type: ignore[arg-type]
            diffuse_color=tuple(float(c) for c in diffuse_color),  # type: ignore[arg-type]
            specular_exponent=float(data.get("specular_exponent", 0.0)),
        )


# =============================================================================
# Presets
# =============================================================================

IVORY = Material(1.0, (0.6, 0.3, 0.1, 0.0), (0.4, 0.4, 0.3), 50.0)
GLASS = Material(1.5, (0.0, 0.5, 0.1, 0.8), (0.6, 0.7, 0.8), 125.0)
RED_RUBBER = Material(1.0, (0.9, 0.1, 0.0, 0.0), (0.3, 0.1, 0.1), 10.0)
MIRROR = Material(1.0, (0.0, 10.0, 0.8, 0.0), (1.0, 1.0, 1.0), 1425.0)

PRESETS: dict[str, Material] = {
    "ivory": IVORY,
    "glass": GLASS,
    "red_rubber": RED_RUBBER,
    "mirror": MIRROR,
}


def get_preset(name: str) -> Material:
    """Look up a material preset by name.

    Raises:
        ValueError: If no preset has that name.
    """
    try:
        return PRESETS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown material preset: {name!r} (known: {', '.join(sorted(PRESETS))})"
        ) from None


# =============================================================================
# Kernel-side representation
# =============================================================================


@ti.dataclass
class PhongMaterial:
    """Material fields as seen by the shader.

    Attributes:
        refractive_index: Index of refraction.
        albedo: (diffuse, specular, reflection, transmission) weights.
        diffuse_color: Diffuse RGB color.
        specular_exponent: Phong exponent.
    """

    refractive_index: ti.f32
    albedo: vec4
    diffuse_color: vec3
    specular_exponent: ti.f32


@ti.func
def make_default_material(diffuse_color: vec3) -> PhongMaterial:
    """Default material (pure diffuse, index 1) with the given color.

    Used for surfaces that synthesize their material per hit, such as the
    checkerboard floor.
    """
    return PhongMaterial(
        refractive_index=1.0,
        albedo=vec4(1.0, 0.0, 0.0, 0.0),
        diffuse_color=diffuse_color,
        specular_exponent=0.0,
    )


@ti.func
def lambert_term(light_dir: vec3, normal: vec3) -> ti.f32:
    """Cosine falloff of a light, clamped at zero."""
    return tm.max(0.0, tm.dot(light_dir, normal))


@ti.func
def phong_term(light_dir: vec3, normal: vec3, view_dir: vec3, exponent: ti.f32) -> ti.f32:
    """Phong specular factor.

    Reflects the direction toward the light about the normal and compares it
    with the incoming view direction.

    Args:
        light_dir: Unit direction from the surface point toward the light.
        normal: Unit surface normal.
        view_dir: Unit direction of the incoming ray.
        exponent: Specular exponent.

    Returns:
        max(0, dot(-reflect(-light_dir, normal), view_dir)) ** exponent
    """
    return tm.max(0.0, -tm.dot(reflect(-light_dir, normal), view_dir)) ** exponent
