"""Unit tests for the Scene builder.

Tests cover:
- Adding spheres through the typed helpers
- Parameter validation
- Scene serialization (to_dict, from_dict)
- Upload into the Taichi scene storage
"""

import pytest
import taichi as ti


@pytest.fixture
def fresh_scene():
    """Create a fresh Scene for each test."""
    from spheretrace.scene.manager import Scene

    scene = Scene()
    yield scene
    scene.clear()


class TestSceneBuilding:
    """Tests for adding spheres."""

    def test_empty_scene(self, fresh_scene):
        assert len(fresh_scene) == 0
        assert repr(fresh_scene) == "Scene(spheres=0)"

    def test_add_spheres_in_order(self, fresh_scene):
        from spheretrace.materials import MaterialType

        assert fresh_scene.add_lambertian_sphere((0, -100.5, -1), 100.0, (0.8, 0.8, 0.0)) == 0
        assert fresh_scene.add_metal_sphere((1, 0, -1), 0.5, (0.8, 0.6, 0.2), fuzz=0.3) == 1
        assert fresh_scene.add_dielectric_sphere((-1, 0, -1), 0.5, ior=1.5) == 2

        kinds = [sphere.material.material_type for sphere in fresh_scene.spheres]
        assert kinds == [MaterialType.LAMBERTIAN, MaterialType.METAL, MaterialType.DIELECTRIC]
        assert fresh_scene.spheres[0].center == (0.0, -100.5, -1.0)
        assert fresh_scene.spheres[1].material.fuzz == 0.3

    def test_invalid_radius(self, fresh_scene):
        with pytest.raises(ValueError, match="radius"):
            fresh_scene.add_lambertian_sphere((0, 0, 0), -0.5, (0.5, 0.5, 0.5))

    def test_invalid_center(self, fresh_scene):
        from spheretrace.materials import make_lambertian

        with pytest.raises(ValueError, match="center"):
            fresh_scene.add_sphere((0, 0), 0.5, make_lambertian((0.5, 0.5, 0.5)))

    def test_invalid_material_parameters(self, fresh_scene):
        with pytest.raises(ValueError):
            fresh_scene.add_lambertian_sphere((0, 0, 0), 0.5, (1.5, 0.5, 0.5))
        with pytest.raises(ValueError):
            fresh_scene.add_metal_sphere((0, 0, 0), 0.5, (0.5, 0.5, 0.5), fuzz=1.5)
        with pytest.raises(ValueError):
            fresh_scene.add_dielectric_sphere((0, 0, 0), 0.5, ior=0.0)
        assert len(fresh_scene) == 0

    def test_clear(self, fresh_scene):
        fresh_scene.add_dielectric_sphere((0, 0, 0), 1.0)
        fresh_scene.clear()
        assert len(fresh_scene) == 0


class TestSceneSerialization:
    """Tests for to_dict / from_dict."""

    def test_to_dict(self, fresh_scene):
        fresh_scene.add_metal_sphere((1, 2, 3), 0.5, (0.8, 0.6, 0.2), fuzz=0.25)
        data = fresh_scene.to_dict()
        assert data == {
            "spheres": [
                {
                    "center": [1.0, 2.0, 3.0],
                    "radius": 0.5,
                    "material": {"type": "metal", "albedo": [0.8, 0.6, 0.2], "fuzz": 0.25},
                }
            ]
        }

    def test_round_trip(self, fresh_scene):
        from spheretrace.scene.manager import Scene

        fresh_scene.add_lambertian_sphere((0, -1000, 0), 1000.0, (0.5, 0.5, 0.5))
        fresh_scene.add_metal_sphere((4, 1, 0), 1.0, (0.7, 0.6, 0.5))
        fresh_scene.add_dielectric_sphere((0, 1, 0), 1.0, ior=1.5, tint=(0.9, 1.0, 0.9))

        restored = Scene.from_dict(fresh_scene.to_dict())
        assert restored.spheres == fresh_scene.spheres

    def test_from_dict_unknown_material(self):
        from spheretrace.scene.manager import Scene

        data = {"spheres": [{"center": [0, 0, 0], "radius": 1.0, "material": {"type": "plasma"}}]}
        with pytest.raises(ValueError, match="Unknown material type"):
            Scene.from_dict(data)

    def test_from_dict_empty(self):
        from spheretrace.scene.manager import Scene

        assert len(Scene.from_dict({})) == 0


class TestSceneUpload:
    """Tests for copying the scene into the Taichi storage."""

    def test_upload(self, fresh_scene):
        from spheretrace.scene.intersection import (
            get_sphere_count,
            sphere_iors,
            sphere_material_kinds,
            sphere_radii,
        )

        fresh_scene.add_lambertian_sphere((0, 0, -1), 0.5, (0.1, 0.2, 0.3))
        fresh_scene.add_dielectric_sphere((1, 0, -1), 0.25, ior=1.33)
        fresh_scene.upload()

        assert get_sphere_count() == 2
        assert sphere_material_kinds[0] == 0
        assert sphere_material_kinds[1] == 2
        assert abs(sphere_radii[1] - 0.25) < 1e-6
        assert abs(sphere_iors[1] - 1.33) < 1e-6

    def test_upload_replaces_previous_contents(self, fresh_scene):
        from spheretrace.scene.intersection import get_sphere_count

        fresh_scene.add_lambertian_sphere((0, 0, -1), 0.5, (0.1, 0.2, 0.3))
        fresh_scene.add_lambertian_sphere((1, 0, -1), 0.5, (0.1, 0.2, 0.3))
        fresh_scene.upload()
        assert get_sphere_count() == 2

        fresh_scene.clear()
        fresh_scene.add_lambertian_sphere((0, 0, -1), 0.5, (0.1, 0.2, 0.3))
        fresh_scene.upload()
        assert get_sphere_count() == 1

    def test_uploaded_scene_is_queryable(self, fresh_scene):
        from spheretrace.core.interval import make_interval
        from spheretrace.core.ray import make_ray, vec3
        from spheretrace.scene.intersection import nearest_hit

        fresh_scene.add_metal_sphere((0, 0, -2), 0.5, (0.9, 0.9, 0.9))
        fresh_scene.upload()

        t_val = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0))
            t_val[None] = nearest_hit(ray, make_interval(0.001, 1e10)).t

        test_kernel()
        assert abs(t_val[None] - 1.5) < 1e-5
