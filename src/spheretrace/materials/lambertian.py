"""Lambertian (ideal diffuse) material implementation.

A Lambertian surface scatters incoming light in a cosine-weighted
distribution around the surface normal. The scattered direction is formed by
adding a random unit vector to the normal, which yields exactly that
distribution without any explicit pdf bookkeeping: the attenuation is simply
the albedo.

Example:
    >>> # Use within a Taichi kernel:
    >>> # direction, attenuation, rng = scatter_lambertian(albedo, normal, rng)
"""

import taichi as ti
import taichi.math as tm

from spheretrace.core.ray import near_zero, random_unit_vector

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def scatter_lambertian(albedo: vec3, normal: vec3, rng: ti.u32):
    """Sample a scattered direction for a Lambertian surface.

    The direction is normal + random_unit_vector(). When the random vector
    almost cancels the normal the sum is degenerate, and the normal itself
    is used instead.

    Args:
        albedo: The diffuse reflectance color (RGB, each component in [0, 1]).
        normal: The unit surface normal facing the incoming ray.
        rng: The current generator state.

    Returns:
        A tuple of (scattered_direction, attenuation, new_state). The
        direction is not normalized; the attenuation equals the albedo.
    """
    offset, state = random_unit_vector(rng)
    scattered_direction = normal + offset

    if near_zero(scattered_direction):
        scattered_direction = normal

    return scattered_direction, albedo, state


def validate_albedo(albedo: tuple[float, float, float], name: str = "Albedo") -> None:
    """Check that a reflectance color conserves energy.

    Args:
        albedo: The color as (R, G, B).
        name: Label used in the error message.

    Raises:
        ValueError: If the color does not have three components or any
            component is outside [0, 1].
    """
    if len(albedo) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(albedo)}")

    for i, component in enumerate(albedo):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"{name} component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )
