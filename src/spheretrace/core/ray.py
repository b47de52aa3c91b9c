"""Ray data structure and vector utilities for GPU-accelerated ray tracing.

This module provides the fundamental Ray dataclass, the vector helpers used
by intersection and scattering, and the random direction samplers. All
operations are designed to work within Taichi kernels.

Samplers take an explicit generator state (see ``spheretrace.core.rng``)
and return the advanced state together with the sample.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti
import taichi.math as tm

from spheretrace.core.rng import random_f32

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Squared length below which a scatter direction is treated as degenerate
NEAR_ZERO_EPSILON = 1e-8


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Not required to be
            normalized, but must not be zero-length.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Compute the squared length of a vector."""
    return tm.dot(v, v)


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length."""
    return tm.normalize(v)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product of two vectors."""
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product of two vectors."""
    return tm.cross(a, b)


@ti.func
def near_zero(v: vec3) -> ti.i32:
    """Check whether a vector is too short to be used as a ray direction.

    Args:
        v: The vector to check.

    Returns:
        1 if the squared length is below NEAR_ZERO_EPSILON, 0 otherwise.
    """
    return length_squared(v) < NEAR_ZERO_EPSILON


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Computes incident - 2 * dot(incident, normal) * normal. The normal must
    be unit length; the incident vector keeps its magnitude.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (unit length).

    Returns:
        The reflected direction vector.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def refract(unit_incident: vec3, normal: vec3, eta_ratio: ti.f32) -> vec3:
    """Refract a unit incident vector through a surface using Snell's law.

    The refracted direction is split into the component perpendicular to the
    normal, eta_ratio * (d + cos_theta * n), and the parallel component,
    -sqrt(|1 - |perp|^2|) * n. Callers must rule out total internal
    reflection beforehand.

    Args:
        unit_incident: The incoming direction (unit length).
        normal: The surface normal facing the incoming ray (unit length).
        eta_ratio: The ratio of refractive indices (n_incident / n_transmitted).

    Returns:
        The refracted direction vector (unit length up to rounding).
    """
    cos_theta = tm.min(tm.dot(-unit_incident, normal), 1.0)
    perp = eta_ratio * (unit_incident + cos_theta * normal)
    parallel = -ti.sqrt(ti.abs(1.0 - length_squared(perp))) * normal
    return perp + parallel


# =============================================================================
# Random Sampling Utilities for Monte Carlo
# =============================================================================


@ti.func
def random_unit_vector(rng: ti.u32):
    """Generate a random unit vector uniformly distributed on the sphere.

    Samples z uniformly in [-1, 1) and an azimuth uniformly in [0, 2*pi),
    which is uniform over the sphere surface without rejection.

    Args:
        rng: The current generator state.

    Returns:
        A tuple of (unit_vector, new_state).
    """
    r1, state = random_f32(rng)
    r2, state = random_f32(state)
    z = 2.0 * r1 - 1.0
    phi = 2.0 * tm.pi * r2
    ring = ti.sqrt(tm.max(1.0 - z * z, 0.0))
    return vec3(ring * ti.cos(phi), ring * ti.sin(phi), z), state


@ti.func
def random_in_unit_disk(rng: ti.u32):
    """Generate a random point uniformly distributed in the unit disk.

    Used for sampling the camera lens (defocus disk).

    Args:
        rng: The current generator state.

    Returns:
        A tuple of (point, new_state) where point is (x, y, 0) with
        x^2 + y^2 <= 1.
    """
    r1, state = random_f32(rng)
    r2, state = random_f32(state)
    theta = 2.0 * tm.pi * r1
    radius = ti.sqrt(r2)
    return vec3(radius * ti.cos(theta), radius * ti.sin(theta), 0.0), state
