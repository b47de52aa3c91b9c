"""Dielectric (glass/water) material implementation.

This module implements the dielectric material, which models transparent
materials like glass and water.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Total internal reflection when the refraction ratio * sin(theta) > 1

The choice between reflection and refraction is deterministic: rays reflect
only under total internal reflection. There is no Fresnel (Schlick)
reflectance term, so glass never shows partial reflections at grazing
angles.

Example:
    >>> # Use within a Taichi kernel:
    >>> # direction, attenuation = scatter_dielectric(
    >>> #     ior, tint, incident_dir, normal, front_face
    >>> # )
"""

import taichi as ti
import taichi.math as tm

from spheretrace.core.ray import reflect, refract

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def refraction_ratio(ior: ti.f32, front_face: ti.i32) -> ti.f32:
    """Ratio of refractive indices seen by a ray crossing the surface.

    Entering the material (front face) the ratio is 1 / ior; leaving it
    (back face) the ratio is ior.
    """
    ratio = 1.0 / ior
    if front_face == 0:
        ratio = ior
    return ratio


@ti.func
def will_reflect(
    ior: ti.f32,
    incident_direction: vec3,
    normal: vec3,
    front_face: ti.i32,
) -> ti.i32:
    """Determine if total internal reflection will occur.

    Args:
        ior: Index of refraction of the material.
        incident_direction: The incoming ray direction (any length).
        normal: The unit surface normal facing the incoming ray.
        front_face: 1 if the ray hits the outside of the surface,
            0 if it hits from within the material.

    Returns:
        1 if total internal reflection will occur, 0 otherwise.
    """
    ratio = refraction_ratio(ior, front_face)
    unit_direction = tm.normalize(incident_direction)
    cos_theta = tm.min(tm.dot(-unit_direction, normal), 1.0)
    sin_theta = ti.sqrt(1.0 - cos_theta * cos_theta)
    return 1 if ratio * sin_theta > 1.0 else 0


@ti.func
def scatter_dielectric(
    ior: ti.f32,
    tint: vec3,
    incident_direction: vec3,
    normal: vec3,
    front_face: ti.i32,
):
    """Compute the scattered ray direction for a dielectric surface.

    Dielectrics always scatter: the ray is mirrored under total internal
    reflection and refracted otherwise.

    Args:
        ior: Index of refraction of the material.
        tint: Transmission color (white for clear glass).
        incident_direction: The incoming ray direction (any length).
        normal: The unit surface normal facing the incoming ray.
        front_face: 1 if the ray hits the outside of the surface,
            0 if it hits from within the material.

    Returns:
        A tuple of (scattered_direction, attenuation).
    """
    unit_direction = tm.normalize(incident_direction)

    scattered_direction = vec3(0.0, 0.0, 0.0)
    if will_reflect(ior, unit_direction, normal, front_face) == 1:
        scattered_direction = reflect(unit_direction, normal)
    else:
        scattered_direction = refract(unit_direction, normal, refraction_ratio(ior, front_face))

    return scattered_direction, tint


def validate_ior(ior: float) -> None:
    """Check that an index of refraction is usable.

    Values below 1.0 are accepted so that a sphere can model, for example, an
    air bubble inside water (ior = 1.0 / 1.33).

    Raises:
        ValueError: If ior is not strictly positive.
    """
    if ior <= 0.0:
        raise ValueError(f"Index of refraction = {ior} must be positive.")
