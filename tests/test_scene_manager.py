"""Tests for the Python-side Scene container.

Tests cover:
- Adding and validating spheres and lights
- Uploading into the Taichi scene storage
- Serialization to and from dictionaries
- The default demo scene
"""

import json

import pytest


class TestSceneObjects:
    """Tests for adding scene objects."""

    def test_add_returns_indices(self):
        """Test add_sphere and add_light return insertion indices."""
        from src.tinytrace.materials.phong import GLASS, IVORY
        from src.tinytrace.scene.manager import Scene

        scene = Scene()
        assert scene.add_sphere((0, 0, -5), 1.0, IVORY) == 0
        assert scene.add_sphere((2, 0, -5), 1.0, GLASS) == 1
        assert scene.add_light((0, 10, 0), 1.5) == 0
        assert scene.spheres[1].material is GLASS

    def test_centers_are_stored_as_floats(self):
        """Test integer coordinates are converted to a float tuple."""
        from src.tinytrace.materials.phong import IVORY
        from src.tinytrace.scene.manager import Scene

        scene = Scene()
        scene.add_sphere([1, 2, 3], 1.0, IVORY)
        assert scene.spheres[0].center == (1.0, 2.0, 3.0)

    @pytest.mark.parametrize("radius", [0.0, -1.0])
    def test_invalid_radius(self, radius):
        """Test non-positive radii are rejected."""
        from src.tinytrace.materials.phong import IVORY
        from src.tinytrace.scene.manager import Scene

        with pytest.raises(ValueError, match="radius"):
            Scene().add_sphere((0, 0, -5), radius, IVORY)

    def test_invalid_center(self):
        """Test centers that are not 3-vectors are rejected."""
        from src.tinytrace.materials.phong import IVORY
        from src.tinytrace.scene.manager import Scene

        with pytest.raises(ValueError, match="center"):
            Scene().add_sphere((0, 0), 1.0, IVORY)
        with pytest.raises(ValueError, match="center"):
            Scene().add_sphere(5.0, 1.0, IVORY)

    def test_invalid_light(self):
        """Test non-positive intensities and bad positions are rejected."""
        from src.tinytrace.scene.manager import Scene

        with pytest.raises(ValueError, match="intensity"):
            Scene().add_light((0, 10, 0), 0.0)
        with pytest.raises(ValueError, match="position"):
            Scene().add_light((0, 10), 1.0)

    def test_capacity(self):
        """Test the Python container enforces the storage capacity."""
        from src.tinytrace.materials.phong import IVORY
        from src.tinytrace.scene.intersection import MAX_LIGHTS, MAX_SPHERES
        from src.tinytrace.scene.manager import Scene

        scene = Scene()
        for i in range(MAX_SPHERES):
            scene.add_sphere((float(i), 0, -5), 0.1, IVORY)
        with pytest.raises(RuntimeError):
            scene.add_sphere((0, 0, -5), 0.1, IVORY)

        for i in range(MAX_LIGHTS):
            scene.add_light((float(i), 10, 0), 1.0)
        with pytest.raises(RuntimeError):
            scene.add_light((0, 10, 0), 1.0)

    def test_move_sphere(self):
        """Test move_sphere replaces the center of one sphere."""
        from src.tinytrace.materials.phong import IVORY
        from src.tinytrace.scene.manager import Scene

        scene = Scene()
        scene.add_sphere((0, 0, -5), 1.0, IVORY)
        scene.move_sphere(0, (1, 2, -6))
        assert scene.spheres[0].center == (1.0, 2.0, -6.0)

        with pytest.raises(IndexError):
            scene.move_sphere(3, (0, 0, 0))

    def test_clear(self):
        """Test clear removes spheres and lights."""
        from src.tinytrace.materials.phong import IVORY
        from src.tinytrace.scene.manager import Scene

        scene = Scene()
        scene.add_sphere((0, 0, -5), 1.0, IVORY)
        scene.add_light((0, 10, 0), 1.0)
        scene.clear()
        assert scene.spheres == []
        assert scene.lights == []


class TestSceneUpload:
    """Tests for synchronizing the scene into Taichi fields."""

    def test_upload_counts(self):
        """Test upload writes every sphere and light."""
        from src.tinytrace.scene.default_scene import create_default_scene
        from src.tinytrace.scene.intersection import get_light_count, get_sphere_count

        scene, _ = create_default_scene()
        scene.upload()

        assert get_sphere_count() == 4
        assert get_light_count() == 3

    def test_upload_replaces_previous_scene(self):
        """Test a second upload replaces rather than appends."""
        from src.tinytrace.materials.phong import IVORY
        from src.tinytrace.scene.default_scene import create_default_scene
        from src.tinytrace.scene.intersection import get_light_count, get_sphere_count
        from src.tinytrace.scene.manager import Scene

        scene, _ = create_default_scene()
        scene.upload()

        small = Scene()
        small.add_sphere((0, 0, -5), 1.0, IVORY)
        small.upload()

        assert get_sphere_count() == 1
        assert get_light_count() == 0

    def test_upload_writes_fields(self):
        """Test uploaded sphere data matches the scene description."""
        from src.tinytrace.materials.phong import MIRROR
        from src.tinytrace.scene import intersection
        from src.tinytrace.scene.manager import Scene

        scene = Scene()
        scene.add_sphere((7, 5, -18), 4.0, MIRROR)
        scene.add_light((30, 50, -25), 1.8)
        scene.upload()

        assert tuple(intersection.sphere_centers[0]) == pytest.approx((7.0, 5.0, -18.0))
        assert intersection.sphere_radii[0] == pytest.approx(4.0)
        assert tuple(intersection.sphere_albedos[0]) == pytest.approx(MIRROR.albedo)
        assert intersection.sphere_specular_exponents[0] == pytest.approx(1425.0)
        assert intersection.light_intensities[0] == pytest.approx(1.8)


class TestSceneSerialization:
    """Tests for to_dict and from_dict."""

    def test_round_trip_through_json(self):
        """Test a scene survives a JSON round trip."""
        from src.tinytrace.scene.default_scene import create_default_scene
        from src.tinytrace.scene.manager import Scene

        scene, _ = create_default_scene()
        restored = Scene.from_dict(json.loads(json.dumps(scene.to_dict())))

        assert restored == scene

    def test_preset_names(self):
        """Test materials may be given as preset names."""
        from src.tinytrace.materials.phong import GLASS, RED_RUBBER
        from src.tinytrace.scene.manager import Scene

        scene = Scene.from_dict(
            {
                "spheres": [
                    {"center": [0, 0, -5], "radius": 1, "material": "glass"},
                    {"center": [2, 0, -5], "radius": 1, "material": "Red_Rubber"},
                ],
                "lights": [{"position": [0, 10, 0], "intensity": 1.5}],
            }
        )

        assert scene.spheres[0].material == GLASS
        assert scene.spheres[1].material == RED_RUBBER
        assert scene.lights[0].intensity == 1.5

    def test_material_dict(self):
        """Test materials may be given as dictionaries with defaults."""
        from src.tinytrace.scene.manager import Scene

        scene = Scene.from_dict(
            {"spheres": [{"center": [0, 0, -5], "material": {"diffuse_color": [1, 0, 0]}}]}
        )

        material = scene.spheres[0].material
        assert material.diffuse_color == (1.0, 0.0, 0.0)
        assert material.albedo == (1.0, 0.0, 0.0, 0.0)
        assert scene.spheres[0].radius == 1.0

    def test_unknown_preset(self):
        """Test unknown preset names are rejected."""
        from src.tinytrace.scene.manager import Scene

        with pytest.raises(ValueError, match="Unknown material preset"):
            Scene.from_dict({"spheres": [{"center": [0, 0, -5], "material": "gold"}]})

    def test_invalid_material_type(self):
        """Test material descriptions that are neither names nor dicts are rejected."""
        from src.tinytrace.scene.manager import Scene

        with pytest.raises(ValueError, match="Invalid material"):
            Scene.from_dict({"spheres": [{"center": [0, 0, -5], "material": 3}]})


class TestDefaultScene:
    """Tests for the default demo scene."""

    def test_layout(self):
        """Test the default scene has the four spheres and three lights."""
        from src.tinytrace.materials.phong import GLASS, IVORY, MIRROR, RED_RUBBER
        from src.tinytrace.scene.default_scene import ORBITING_SPHERE, create_default_scene

        scene, camera = create_default_scene()

        assert [(s.center, s.radius, s.material) for s in scene.spheres] == [
            ((-3.0, 0.0, -16.0), 2.0, IVORY),
            ((-1.0, -1.5, -12.0), 2.0, GLASS),
            ((1.5, -0.5, -18.0), 3.0, RED_RUBBER),
            ((7.0, 5.0, -18.0), 4.0, MIRROR),
        ]
        assert [(light.position, light.intensity) for light in scene.lights] == [
            ((-20.0, 20.0, 20.0), 1.5),
            ((30.0, 50.0, -25.0), 1.8),
            ((30.0, 20.0, 30.0), 1.7),
        ]
        assert scene.spheres[ORBITING_SPHERE].material is IVORY
        assert camera.origin == (0.0, 0.0, 0.0)
        assert camera.fov == 1.0

    def test_each_call_builds_a_new_scene(self):
        """Test callers get independent scenes."""
        from src.tinytrace.scene.default_scene import create_default_scene

        first, _ = create_default_scene()
        second, _ = create_default_scene()
        first.move_sphere(0, (0, 0, 0))
        assert second.spheres[0].center == (-3.0, 0.0, -16.0)
