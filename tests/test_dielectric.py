"""Unit tests for the dielectric material module.

Tests cover:
- Index 1 leaves the direction unchanged
- Refraction entering and leaving the material
- Total internal reflection
- Tint as attenuation
- Index of refraction validation and the make_dielectric factory
"""

import math

import pytest
import taichi as ti

SIN_20, COS_20 = math.sin(math.radians(20.0)), math.cos(math.radians(20.0))
SIN_30, COS_30 = math.sin(math.radians(30.0)), math.cos(math.radians(30.0))
SIN_60, COS_60 = math.sin(math.radians(60.0)), math.cos(math.radians(60.0))


class TestRefractionRatio:
    """Tests for refraction_ratio and will_reflect."""

    def test_refraction_ratio(self):
        from spheretrace.materials.dielectric import refraction_ratio

        results = ti.field(dtype=ti.f32, shape=2)

        @ti.kernel
        def test_kernel():
            results[0] = refraction_ratio(1.5, 1)
            results[1] = refraction_ratio(1.5, 0)

        test_kernel()
        assert abs(results[0] - 1.0 / 1.5) < 1e-6
        assert abs(results[1] - 1.5) < 1e-6

    def test_will_reflect_past_critical_angle(self):
        """Leaving glass at 60 degrees exceeds the critical angle (41.8 deg)."""
        from spheretrace.materials.dielectric import vec3, will_reflect

        results = ti.field(dtype=ti.i32, shape=3)

        @ti.kernel
        def test_kernel():
            normal = vec3(0.0, 1.0, 0.0)
            steep = vec3(SIN_60, -COS_60, 0.0)
            shallow = vec3(SIN_20, -COS_20, 0.0)
            results[0] = will_reflect(1.5, steep, normal, 0)
            results[1] = will_reflect(1.5, shallow, normal, 0)
            # Entering the material never reflects totally
            results[2] = will_reflect(1.5, steep, normal, 1)

        test_kernel()
        assert results[0] == 1
        assert results[1] == 0
        assert results[2] == 0


class TestDielectricScatter:
    """Tests for scatter_dielectric."""

    def test_index_one_passes_straight_through(self):
        from spheretrace.materials.dielectric import scatter_dielectric, vec3

        direction = ti.Vector.field(3, dtype=ti.f32, shape=2)

        @ti.kernel
        def test_kernel():
            incident = vec3(0.6, -0.8, 0.0)
            d_front, tint_front = scatter_dielectric(
                1.0, vec3(1.0, 1.0, 1.0), incident, vec3(0.0, 1.0, 0.0), 1
            )
            d_back, tint_back = scatter_dielectric(
                1.0, vec3(1.0, 1.0, 1.0), incident, vec3(0.0, 1.0, 0.0), 0
            )
            direction[0] = d_front
            direction[1] = d_back

        test_kernel()
        for k in range(2):
            d = direction[k]
            assert abs(d[0] - 0.6) < 1e-5
            assert abs(d[1] + 0.8) < 1e-5
            assert abs(d[2]) < 1e-5

    def test_refraction_obeys_snell(self):
        from spheretrace.materials.dielectric import scatter_dielectric, vec3

        direction = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            incident = vec3(SIN_30, -COS_30, 0.0)
            d, tint = scatter_dielectric(1.5, vec3(1.0, 1.0, 1.0), incident, vec3(0.0, 1.0, 0.0), 1)
            direction[None] = d

        test_kernel()
        d = direction[None]
        # sin(theta_t) = sin(30 deg) / 1.5
        assert abs(d[0] - 0.5 / 1.5) < 1e-5
        assert d[1] < 0.0

    def test_total_internal_reflection_mirrors(self):
        from spheretrace.materials.dielectric import scatter_dielectric, vec3

        direction = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            incident = vec3(SIN_60, -COS_60, 0.0)
            d, tint = scatter_dielectric(1.5, vec3(1.0, 1.0, 1.0), incident, vec3(0.0, 1.0, 0.0), 0)
            direction[None] = d

        test_kernel()
        d = direction[None]
        assert abs(d[0] - SIN_60) < 1e-5
        assert abs(d[1] - COS_60) < 1e-5

    def test_tint_is_attenuation(self):
        from spheretrace.materials.dielectric import scatter_dielectric, vec3

        attenuation = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            d, tint = scatter_dielectric(
                1.5, vec3(0.9, 0.8, 0.7), vec3(0.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0), 1
            )
            attenuation[None] = tint

        test_kernel()
        a = attenuation[None]
        assert abs(a[0] - 0.9) < 1e-6
        assert abs(a[1] - 0.8) < 1e-6
        assert abs(a[2] - 0.7) < 1e-6


class TestDielectricValidation:
    """Tests for the factory and validation."""

    def test_defaults(self):
        from spheretrace.materials import MaterialType, make_dielectric

        glass = make_dielectric()
        assert glass.material_type == MaterialType.DIELECTRIC
        assert glass.ior == 1.5
        assert glass.albedo == (1.0, 1.0, 1.0)

    def test_bubble_index_allowed(self):
        from spheretrace.materials import make_dielectric

        bubble = make_dielectric(1.0 / 1.33)
        assert bubble.ior < 1.0

    def test_invalid_index(self):
        from spheretrace.materials import make_dielectric

        with pytest.raises(ValueError, match="Index of refraction"):
            make_dielectric(0.0)
        with pytest.raises(ValueError, match="Index of refraction"):
            make_dielectric(-1.5)

    def test_invalid_tint(self):
        from spheretrace.materials import make_dielectric

        with pytest.raises(ValueError):
            make_dielectric(1.5, tint=(1.2, 1.0, 1.0))

    def test_to_dict(self):
        from spheretrace.materials import make_dielectric

        assert make_dielectric(1.33, (0.9, 1.0, 1.0)).to_dict() == {
            "type": "dielectric",
            "ior": 1.33,
            "tint": [0.9, 1.0, 1.0],
        }
