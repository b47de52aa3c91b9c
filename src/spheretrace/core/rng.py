"""Explicit, seedable random number generation for Taichi kernels.

Every function that needs randomness takes a ``u32`` generator state and
returns the advanced state along with its sample. Kernels keep one state per
pixel, so parallel workers never share a generator and a render is
reproducible for a given seed.

The generator is the PCG hash (Jarzynski & Olano, "Hash Functions for GPU
Rendering", JCGT 2020): each draw rehashes the state, and the top 24 bits of
the new state form the float sample.

Example:
    >>> @ti.kernel
    ... def draw() -> ti.f32:
    ...     rng = seed_state(42, 0)
    ...     value, rng = random_f32(rng)
    ...     return value
"""

import taichi as ti

# 2^-24: converts a 24-bit integer into a float in [0, 1)
_INV_2_POW_24 = 1.0 / 16777216.0


@ti.func
def pcg_hash(value: ti.u32) -> ti.u32:
    """Hash a 32-bit value with the PCG output permutation.

    Args:
        value: The input value.

    Returns:
        A well-mixed 32-bit hash of the input.
    """
    state = value * ti.u32(747796405) + ti.u32(2891336453)
    word = ((state >> ((state >> ti.u32(28)) + ti.u32(4))) ^ state) * ti.u32(277803737)
    return (word >> ti.u32(22)) ^ word


@ti.func
def seed_state(seed: ti.i32, stream: ti.i32) -> ti.u32:
    """Derive the initial generator state for one independent stream.

    Args:
        seed: The render seed chosen by the caller.
        stream: A per-worker identifier, e.g. the linear pixel index.

    Returns:
        The initial generator state for that stream.
    """
    return pcg_hash(ti.cast(seed, ti.u32) ^ pcg_hash(ti.cast(stream, ti.u32)))


@ti.func
def random_f32(state: ti.u32):
    """Draw a uniform float in [0, 1).

    Args:
        state: The current generator state.

    Returns:
        A tuple of (value, new_state).
    """
    new_state = pcg_hash(state)
    value = ti.cast(new_state >> ti.u32(8), ti.f32) * _INV_2_POW_24
    return value, new_state

