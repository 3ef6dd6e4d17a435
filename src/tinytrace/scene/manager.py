"""Python-side scene container.

This module provides the high-level Scene API: an ordered list of spheres and
an ordered list of point lights, owned by the caller and mutated between
frames. Before each frame the Scene is uploaded into the fixed-capacity
Taichi fields of the intersection module, which the render kernel reads.

The Scene maintains:
- Sphere descriptions with their materials
- Point light descriptions
- Synchronization into GPU-resident storage (upload)
- Scene serialization to and from JSON-compatible dictionaries

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.tinytrace.materials.phong import GLASS
    >>> from src.tinytrace.scene.manager import Scene
    >>> scene = Scene()
    >>> scene.add_sphere(center=(0, 0, -5), radius=1.0, material=GLASS)
    >>> scene.add_light(position=(-20, 20, 20), intensity=1.5)
    >>> scene.upload()
"""

from dataclasses import dataclass, field
from typing import Any

from src.tinytrace.materials.phong import Material, get_preset
from src.tinytrace.scene.intersection import (
    MAX_LIGHTS,
    MAX_SPHERES,
    add_light,
    add_sphere,
    clear_scene,
)


def _as_vec3(value: Any, name: str) -> tuple[float, float, float]:
    """Convert a 3-element sequence to a float tuple.

    Raises:
        ValueError: If the value does not have exactly 3 components.
    """
    try:
        components = [float(c) for c in value]
    except TypeError:
        raise ValueError(f"{name} must be a sequence of 3 numbers, got {value!r}") from None
    if len(components) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(components)}")
    return (components[0], components[1], components[2])


@dataclass
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        center: The center of the sphere.
        radius: The radius of the sphere. Must be positive.
        material: The surface material of the sphere.
    """

    center: tuple[float, float, float]
    radius: float
    material: Material

    def __post_init__(self) -> None:
        """Validate sphere parameters.

        Raises:
            ValueError: If the radius is not positive or the center is not a
                3-vector.
        """
        self.center = _as_vec3(self.center, "center")
        if self.radius <= 0.0:
            raise ValueError(f"radius must be positive, got {self.radius}")


@dataclass
class LightInfo:
    """Information about a point light in the scene.

    Attributes:
        position: World-space position of the light.
        intensity: Scalar intensity. Must be positive.
    """

    position: tuple[float, float, float]
    intensity: float

    def __post_init__(self) -> None:
        """Validate light parameters.

        Raises:
            ValueError: If the intensity is not positive or the position is
                not a 3-vector.
        """
        self.position = _as_vec3(self.position, "position")
        if self.intensity <= 0.0:
            raise ValueError(f"intensity must be positive, got {self.intensity}")


@dataclass
class Scene:
    """Ordered spheres and point lights of a scene.

    The scene is read-only while a frame renders; callers mutate it between
    frames (for example to move the orbiting sphere) and the renderer
    re-uploads it at the start of each frame.

    Attributes:
        spheres: List of SphereInfo for all spheres in the scene.
        lights: List of LightInfo for all lights in the scene.

    Example:
        >>> scene = Scene()
        >>> scene.add_sphere((-3, 0, -16), 2.0, IVORY)
        >>> scene.add_light((30, 50, -25), 1.8)
        >>> len(scene.spheres)
        1
    """

    spheres: list[SphereInfo] = field(default_factory=list)
    lights: list[LightInfo] = field(default_factory=list)

    def clear(self) -> None:
        """Remove all spheres and lights."""
        self.spheres.clear()
        self.lights.clear()

    # =========================================================================
    # Object Management
    # =========================================================================

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material: Material,
    ) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere (must be positive).
            material: The surface material.

        Returns:
            The index of the added sphere.

        Raises:
            RuntimeError: If the maximum number of spheres is exceeded.
            ValueError: If the radius is not positive.
        """
        if len(self.spheres) >= MAX_SPHERES:
            raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
        self.spheres.append(SphereInfo(center=center, radius=radius, material=material))
        return len(self.spheres) - 1

    def add_light(self, position: tuple[float, float, float], intensity: float) -> int:
        """Add a point light to the scene.

        Args:
            position: The light position as (x, y, z).
            intensity: The light intensity (must be positive).

        Returns:
            The index of the added light.

        Raises:
            RuntimeError: If the maximum number of lights is exceeded.
            ValueError: If the intensity is not positive.
        """
        if len(self.lights) >= MAX_LIGHTS:
            raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
        self.lights.append(LightInfo(position=position, intensity=intensity))
        return len(self.lights) - 1

    def move_sphere(self, index: int, center: tuple[float, float, float]) -> None:
        """Move an existing sphere to a new center.

        Raises:
            IndexError: If there is no sphere at that index.
        """
        self.spheres[index].center = _as_vec3(center, "center")

    def upload(self) -> None:
        """Synchronize the scene into the Taichi scene storage.

        Replaces everything previously uploaded.

        Raises:
            RuntimeError: If the scene exceeds the storage capacity.
        """
        clear_scene()
        for sphere in self.spheres:
            add_sphere(sphere.center, sphere.radius, sphere.material)
        for light in self.lights:
            add_light(light.position, light.intensity)

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization).

        Returns:
            A dictionary with 'spheres' and 'lights' lists. Materials are
            written out in full.
        """
        return {
            "spheres": [
                {
                    "center": list(sphere.center),
                    "radius": sphere.radius,
                    "material": sphere.material.to_dict(),
                }
                for sphere in self.spheres
            ],
            "lights": [
                {"position": list(light.position), "intensity": light.intensity}
                for light in self.lights
            ],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Scene":
        """Create a scene from a dictionary.

        A sphere's "material" may be a preset name ("ivory", "glass",
        "red_rubber", "mirror") or a dictionary of material fields.

        Args:
            data: Dictionary with 'spheres' and 'lights' keys.

        Returns:
            The new scene.

        Raises:
            ValueError: If the dictionary contains invalid data.
        """
        scene = cls()
        for sphere_config in data.get("spheres", []):
            material_config = sphere_config.get("material", {})
            if isinstance(material_config, str):
                material = get_preset(material_config)
            elif isinstance(material_config, dict):
                material = Material.from_dict(material_config)
            else:
                raise ValueError(f"Invalid material description: {material_config!r}")
            scene.add_sphere(
                sphere_config.get("center", [0.0, 0.0, 0.0]),
                float(sphere_config.get("radius", 1.0)),
                material,
            )
        for light_config in data.get("lights", []):
            scene.add_light(
                light_config.get("position", [0.0, 0.0, 0.0]),
                float(light_config.get("intensity", 1.0)),
            )
        return scene
