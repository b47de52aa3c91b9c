"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    ray: Ray data structure, vector helpers and direction samplers
    rng: Explicit, seedable per-worker random number generation
    interval: Numeric ranges for hit bounds and color clamping
    integrator: Radiance evaluation and the parallel render loop

All compute-intensive operations use Taichi kernels; randomness is threaded
through every call as an explicit generator state so renders are
reproducible for a given seed.
"""

from .interval import (
    Interval,
    interval_clamp,
    interval_contains,
    interval_size,
    interval_surrounds,
    make_interval,
)
from .ray import (
    Ray,
    cross,
    dot,
    length_squared,
    make_ray,
    near_zero,
    normalize,
    random_in_unit_disk,
    random_unit_vector,
    ray_at,
    reflect,
    refract,
    vec3,
)
from .rng import pcg_hash, random_f32, seed_state

# Note: integrator is NOT imported here to avoid circular imports.
# Import directly from spheretrace.core.integrator when needed.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    "reflect",
    "refract",
    "near_zero",
    "random_unit_vector",
    "random_in_unit_disk",
    "Interval",
    "make_interval",
    "interval_size",
    "interval_contains",
    "interval_surrounds",
    "interval_clamp",
    "pcg_hash",
    "seed_state",
    "random_f32",
]
