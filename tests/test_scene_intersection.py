"""Unit tests for scene-level intersection.

Tests cover:
- Sphere and light storage (add, clear, capacity)
- Nearest-hit selection across spheres and the checkerboard floor
- The far-distance miss sentinel
- Material data carried by the hit record
- Shadow ray occlusion
"""

import pytest
import taichi as ti


def _intersect(origin, direction):
    """Run intersect_scene in a kernel and return the hit record as a dict."""
    from src.tinytrace.scene.intersection import intersect_scene, vec3

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f32, shape=())
    point = ti.field(dtype=ti.math.vec3, shape=())
    normal = ti.field(dtype=ti.math.vec3, shape=())
    albedo = ti.field(dtype=ti.math.vec4, shape=())
    diffuse = ti.field(dtype=ti.math.vec3, shape=())
    ior = ti.field(dtype=ti.f32, shape=())

    ox, oy, oz = origin
    dx, dy, dz = direction

    @ti.kernel
    def test_kernel():
        rec = intersect_scene(vec3(ox, oy, oz), ti.math.normalize(vec3(dx, dy, dz)))
        hit[None] = rec.hit
        t_val[None] = rec.t
        point[None] = rec.point
        normal[None] = rec.normal
        albedo[None] = rec.material.albedo
        diffuse[None] = rec.material.diffuse_color
        ior[None] = rec.material.refractive_index

    test_kernel()
    return {
        "hit": int(hit[None]),
        "t": float(t_val[None]),
        "point": tuple(float(c) for c in point[None]),
        "normal": tuple(float(c) for c in normal[None]),
        "albedo": tuple(float(c) for c in albedo[None]),
        "diffuse_color": tuple(float(c) for c in diffuse[None]),
        "refractive_index": float(ior[None]),
    }


class TestSceneStorage:
    """Tests for adding and clearing scene data."""

    def test_add_sphere_returns_index(self):
        """Test add_sphere returns sequential indices."""
        from src.tinytrace.materials.phong import GLASS, IVORY
        from src.tinytrace.scene.intersection import add_sphere, get_sphere_count

        assert add_sphere((0.0, 0.0, -5.0), 1.0, IVORY) == 0
        assert add_sphere((2.0, 0.0, -5.0), 1.0, GLASS) == 1
        assert get_sphere_count() == 2

    def test_add_light_returns_index(self):
        """Test add_light returns sequential indices."""
        from src.tinytrace.scene.intersection import add_light, get_light_count

        assert add_light((0.0, 10.0, 0.0), 1.5) == 0
        assert add_light((5.0, 10.0, 0.0), 1.0) == 1
        assert get_light_count() == 2

    def test_clear_scene_resets_counts(self):
        """Test clear_scene removes all spheres and lights."""
        from src.tinytrace.materials.phong import IVORY
        from src.tinytrace.scene.intersection import (
            add_light,
            add_sphere,
            clear_scene,
            get_light_count,
            get_sphere_count,
        )

        add_sphere((0.0, 0.0, -5.0), 1.0, IVORY)
        add_light((0.0, 10.0, 0.0), 1.5)
        clear_scene()
        assert get_sphere_count() == 0
        assert get_light_count() == 0

    def test_sphere_capacity_exceeded(self):
        """Test adding more than MAX_SPHERES raises RuntimeError."""
        from src.tinytrace.materials.phong import IVORY
        from src.tinytrace.scene.intersection import MAX_SPHERES, add_sphere

        for i in range(MAX_SPHERES):
            add_sphere((float(i), 0.0, -5.0), 0.1, IVORY)
        with pytest.raises(RuntimeError, match="Maximum number of spheres"):
            add_sphere((0.0, 0.0, -5.0), 0.1, IVORY)

    def test_light_capacity_exceeded(self):
        """Test adding more than MAX_LIGHTS raises RuntimeError."""
        from src.tinytrace.scene.intersection import MAX_LIGHTS, add_light

        for i in range(MAX_LIGHTS):
            add_light((float(i), 10.0, 0.0), 1.0)
        with pytest.raises(RuntimeError, match="Maximum number of lights"):
            add_light((0.0, 10.0, 0.0), 1.0)


class TestIntersectScene:
    """Tests for nearest-hit selection."""

    def test_empty_scene_misses(self):
        """Test a ray that misses the floor hits nothing in an empty scene."""
        rec = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert rec["hit"] == 0

    def test_nearest_of_two_spheres(self):
        """Test the closer of two spheres on the same ray wins."""
        from src.tinytrace.materials.phong import GLASS, IVORY
        from src.tinytrace.scene.intersection import add_sphere

        # Farther sphere added first so insertion order does not decide
        add_sphere((0.0, 0.0, -10.0), 1.0, IVORY)
        add_sphere((0.0, 0.0, -5.0), 1.0, GLASS)

        rec = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert rec["hit"] == 1
        assert abs(rec["t"] - 4.0) < 1e-5
        assert rec["refractive_index"] == pytest.approx(1.5)

    def test_hit_record_carries_material(self):
        """Test the hit record contains the sphere's material."""
        from src.tinytrace.materials.phong import MIRROR
        from src.tinytrace.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, -5.0), 1.0, MIRROR)

        rec = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert rec["hit"] == 1
        assert rec["albedo"] == pytest.approx(MIRROR.albedo)
        assert rec["diffuse_color"] == pytest.approx(MIRROR.diffuse_color)

    def test_sphere_normal_is_outward(self):
        """Test the recorded normal faces back toward the camera on the front face."""
        from src.tinytrace.materials.phong import IVORY
        from src.tinytrace.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, -5.0), 1.0, IVORY)

        rec = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert rec["normal"] == pytest.approx((0.0, 0.0, 1.0), abs=1e-5)
        assert rec["point"] == pytest.approx((0.0, 0.0, -4.0), abs=1e-5)

    def test_floor_hit_gets_checker_material(self):
        """Test a downward ray onto the floor gets a default checker material."""
        rec = _intersect((0.0, 0.0, -20.0), (0.0, -1.0, 0.0))
        assert rec["hit"] == 1
        assert abs(rec["t"] - 4.0) < 1e-5
        assert rec["normal"] == pytest.approx((0.0, 1.0, 0.0))
        assert rec["albedo"] == pytest.approx((1.0, 0.0, 0.0, 0.0))
        assert rec["refractive_index"] == pytest.approx(1.0)
        # floor(0) + floor(-10) = -10: even tile
        assert rec["diffuse_color"] == pytest.approx((0.3, 0.21, 0.09), abs=1e-6)

    def test_sphere_in_front_of_floor_wins(self):
        """Test a sphere between the ray origin and the floor is hit first."""
        from src.tinytrace.materials.phong import RED_RUBBER
        from src.tinytrace.scene.intersection import add_sphere

        add_sphere((0.0, -2.0, -20.0), 1.0, RED_RUBBER)

        rec = _intersect((0.0, 0.0, -20.0), (0.0, -1.0, 0.0))
        assert rec["hit"] == 1
        assert abs(rec["t"] - 1.0) < 1e-5
        assert rec["diffuse_color"] == pytest.approx(RED_RUBBER.diffuse_color)

    def test_floor_in_front_of_sphere_wins(self):
        """Test the floor wins when it is strictly closer than any sphere."""
        from src.tinytrace.materials.phong import RED_RUBBER
        from src.tinytrace.scene.intersection import add_sphere

        # Sphere below the floor
        add_sphere((0.0, -8.0, -20.0), 1.0, RED_RUBBER)

        rec = _intersect((0.0, 0.0, -20.0), (0.0, -1.0, 0.0))
        assert rec["hit"] == 1
        assert abs(rec["t"] - 4.0) < 1e-5
        assert rec["normal"] == pytest.approx((0.0, 1.0, 0.0))

    def test_ray_pointing_away_misses(self):
        """Test a ray pointing away from every sphere misses."""
        from src.tinytrace.materials.phong import IVORY
        from src.tinytrace.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, -5.0), 1.0, IVORY)

        rec = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))
        assert rec["hit"] == 0

    def test_hits_beyond_miss_distance_are_misses(self):
        """Test a sphere farther than MISS_DISTANCE is reported as a miss."""
        from src.tinytrace.materials.phong import IVORY
        from src.tinytrace.scene.intersection import MISS_DISTANCE, add_sphere

        add_sphere((0.0, 0.0, -2.0 * MISS_DISTANCE), 1.0, IVORY)

        rec = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert rec["hit"] == 0


class TestShadows:
    """Tests for shadow ray occlusion."""

    def _shadowed(self, point, normal, light):
        from src.tinytrace.scene.intersection import is_shadowed, vec3

        result = ti.field(dtype=ti.i32, shape=())

        px, py, pz = point
        nx, ny, nz = normal
        lx, ly, lz = light

        @ti.kernel
        def test_kernel():
            p = vec3(px, py, pz)
            to_light = vec3(lx, ly, lz) - p
            result[None] = is_shadowed(
                p, vec3(nx, ny, nz), ti.math.normalize(to_light), ti.math.length(to_light)
            )

        test_kernel()
        return int(result[None])

    def test_unblocked_light(self):
        """Test a point with a clear line to the light is lit."""
        assert self._shadowed((0.0, 0.0, -20.0), (0.0, 1.0, 0.0), (0.0, 10.0, -20.0)) == 0

    def test_blocker_between_point_and_light(self):
        """Test a sphere between the point and the light casts a shadow."""
        from src.tinytrace.materials.phong import IVORY
        from src.tinytrace.scene.intersection import add_sphere

        add_sphere((0.0, 5.0, -20.0), 1.0, IVORY)

        assert self._shadowed((0.0, 0.0, -20.0), (0.0, 1.0, 0.0), (0.0, 10.0, -20.0)) == 1

    def test_blocker_behind_light_does_not_shadow(self):
        """Test a sphere beyond the light does not occlude it."""
        from src.tinytrace.materials.phong import IVORY
        from src.tinytrace.scene.intersection import add_sphere

        add_sphere((0.0, 20.0, -20.0), 1.0, IVORY)

        assert self._shadowed((0.0, 0.0, -20.0), (0.0, 1.0, 0.0), (0.0, 10.0, -20.0)) == 0

    def test_surface_does_not_shadow_itself(self):
        """Test the offset origin keeps a sphere from shadowing its own lit side."""
        from src.tinytrace.materials.phong import IVORY
        from src.tinytrace.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, -5.0), 1.0, IVORY)

        assert self._shadowed((0.0, 0.0, -4.0), (0.0, 0.0, 1.0), (0.0, 0.0, 0.0)) == 0
