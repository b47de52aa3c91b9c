"""Unit tests for scene storage and the nearest-hit query.

Tests cover:
- Adding and clearing spheres
- Validation of sphere parameters
- Nearest hit among several spheres
- Material of the struck sphere in the hit record
- Empty scene behavior
"""

import pytest
import taichi as ti


class TestSceneStorage:
    """Tests for add_sphere / clear_scene / get_sphere_count."""

    def test_add_sphere(self):
        from spheretrace.materials import make_lambertian
        from spheretrace.scene.intersection import add_sphere, get_sphere_count

        idx = add_sphere((0.0, 0.0, -1.0), 0.5, make_lambertian((0.5, 0.5, 0.5)))
        assert idx == 0
        assert get_sphere_count() == 1

    def test_clear_scene(self):
        from spheretrace.materials import make_lambertian
        from spheretrace.scene.intersection import add_sphere, clear_scene, get_sphere_count

        add_sphere((0.0, 0.0, -1.0), 0.5, make_lambertian((0.5, 0.5, 0.5)))
        add_sphere((1.0, 0.0, -1.0), 0.5, make_lambertian((0.5, 0.5, 0.5)))
        assert get_sphere_count() == 2

        clear_scene()
        assert get_sphere_count() == 0

    def test_add_sphere_rejects_non_positive_radius(self):
        from spheretrace.materials import make_lambertian
        from spheretrace.scene.intersection import add_sphere

        with pytest.raises(ValueError, match="radius"):
            add_sphere((0.0, 0.0, 0.0), 0.0, make_lambertian((0.5, 0.5, 0.5)))
        with pytest.raises(ValueError, match="radius"):
            add_sphere((0.0, 0.0, 0.0), -1.0, make_lambertian((0.5, 0.5, 0.5)))

    def test_add_sphere_capacity(self):
        from spheretrace.materials import make_lambertian
        from spheretrace.scene.intersection import MAX_SPHERES, add_sphere

        material = make_lambertian((0.5, 0.5, 0.5))
        for i in range(MAX_SPHERES):
            add_sphere((float(i), 0.0, 0.0), 0.1, material)

        with pytest.raises(RuntimeError, match="Maximum number of spheres"):
            add_sphere((0.0, 0.0, 0.0), 0.1, material)


class TestNearestHit:
    """Tests for nearest_hit."""

    def test_empty_scene_misses(self):
        from spheretrace.core.interval import make_interval
        from spheretrace.core.ray import make_ray, vec3
        from spheretrace.scene.intersection import nearest_hit

        hit = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0))
            hit[None] = nearest_hit(ray, make_interval(0.001, 1e10)).hit

        test_kernel()
        assert hit[None] == 0

    def test_hit_single_sphere(self):
        from spheretrace.core.interval import make_interval
        from spheretrace.core.ray import make_ray, vec3
        from spheretrace.materials import make_lambertian
        from spheretrace.scene.intersection import add_sphere, nearest_hit

        add_sphere((0.0, 0.0, -5.0), 1.0, make_lambertian((0.5, 0.5, 0.5)))

        hit = ti.field(dtype=ti.i32, shape=())
        t_val = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0))
            rec = nearest_hit(ray, make_interval(0.001, 1e10))
            hit[None] = rec.hit
            t_val[None] = rec.t

        test_kernel()
        assert hit[None] == 1
        assert abs(t_val[None] - 4.0) < 1e-5

    def test_nearest_of_several_spheres(self):
        """The closest sphere wins regardless of insertion order."""
        from spheretrace.core.interval import make_interval
        from spheretrace.core.ray import make_ray, vec3
        from spheretrace.materials import make_dielectric, make_lambertian, make_metal
        from spheretrace.scene.intersection import add_sphere, nearest_hit

        add_sphere((0.0, 0.0, -10.0), 1.0, make_lambertian((0.5, 0.5, 0.5)))
        add_sphere((0.0, 0.0, -3.0), 1.0, make_metal((0.8, 0.8, 0.8), 0.2))
        add_sphere((0.0, 0.0, -6.0), 1.0, make_dielectric(1.5))

        t_val = ti.field(dtype=ti.f32, shape=())
        kind = ti.field(dtype=ti.i32, shape=())
        fuzz = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0))
            rec = nearest_hit(ray, make_interval(0.001, 1e10))
            t_val[None] = rec.t
            kind[None] = rec.material.kind
            fuzz[None] = rec.material.fuzz

        test_kernel()
        assert abs(t_val[None] - 2.0) < 1e-5
        assert kind[None] == 1
        assert abs(fuzz[None] - 0.2) < 1e-6

    def test_hit_beyond_t_max_is_ignored(self):
        from spheretrace.core.interval import make_interval
        from spheretrace.core.ray import make_ray, vec3
        from spheretrace.materials import make_lambertian
        from spheretrace.scene.intersection import add_sphere, nearest_hit

        add_sphere((0.0, 0.0, -5.0), 1.0, make_lambertian((0.5, 0.5, 0.5)))

        hit = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0))
            hit[None] = nearest_hit(ray, make_interval(0.001, 3.0)).hit

        test_kernel()
        assert hit[None] == 0
