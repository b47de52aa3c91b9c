"""Metal (specular reflective) material implementation.

This module implements the metal material, which models specular reflection
with optional fuzziness. Perfect metals (fuzz=0) produce mirror-like
reflections, while fuzzier metals scatter reflected rays within a sphere of
radius ``fuzz`` around the unit mirror direction.

The reflection formula is:
    R = I - 2(I . N)N

where I is the incident direction and N is the surface normal.

Fuzzed rays that end up pointing into the surface are absorbed rather than
re-sampled, so rough metals lose a little energy at grazing angles.

Example:
    >>> # Use within a Taichi kernel:
    >>> # direction, attenuation, did_scatter, rng = scatter_metal(
    >>> #     albedo, fuzz, incident_dir, normal, rng
    >>> # )
"""

import taichi as ti
import taichi.math as tm

from spheretrace.core.ray import random_unit_vector, reflect

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def scatter_metal(
    albedo: vec3,
    fuzz: ti.f32,
    incident_direction: vec3,
    normal: vec3,
    rng: ti.u32,
):
    """Compute the scattered ray direction for a metal surface.

    Reflects the incident direction about the normal, normalizes the
    reflection, and adds fuzz * random_unit_vector(). The ray scatters only
    if the result still leaves the surface (positive dot with the normal).

    Args:
        albedo: The reflective color (RGB, each component in [0, 1]).
        fuzz: The fuzziness in [0, 1]. 0 = perfect mirror.
        incident_direction: The incoming ray direction (any length).
        normal: The unit surface normal facing the incoming ray.
        rng: The current generator state.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter, new_state)
        where did_scatter is 1 if the ray left the surface and 0 if it was
        absorbed.
    """
    reflected = tm.normalize(reflect(incident_direction, normal))
    offset, state = random_unit_vector(rng)
    scattered_direction = reflected + fuzz * offset

    did_scatter = 0
    if tm.dot(scattered_direction, normal) > 0.0:
        did_scatter = 1

    return scattered_direction, albedo, did_scatter, state


def validate_fuzz(fuzz: float) -> None:
    """Check that a metal fuzz value lies in [0, 1].

    Raises:
        ValueError: If fuzz is outside [0, 1].
    """
    if fuzz < 0.0 or fuzz > 1.0:
        raise ValueError(
            f"Fuzz = {fuzz} is outside [0, 1]. "
            "Fuzz must be between 0 (perfect mirror) and 1 (maximum fuzz)."
        )
