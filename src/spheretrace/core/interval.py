"""Numeric intervals for intersection bounds and color clamping.

An Interval bounds the ray parameter values that count as valid hits and
clamps color channels before quantization. Both open (``surrounds``) and
closed (``contains``) membership tests are provided.
"""

import taichi as ti
import taichi.math as tm


@ti.dataclass
class Interval:
    """A numeric range [min, max].

    Attributes:
        min: Lower bound.
        max: Upper bound. An interval with max < min is empty.
    """

    min: ti.f32
    max: ti.f32


@ti.func
def make_interval(lower: ti.f32, upper: ti.f32) -> Interval:
    """Create an interval from its bounds."""
    return Interval(min=lower, max=upper)


@ti.func
def interval_size(interval: Interval) -> ti.f32:
    """Return max - min (negative for an empty interval)."""
    return interval.max - interval.min


@ti.func
def interval_contains(interval: Interval, x: ti.f32) -> ti.i32:
    """Closed membership test: min <= x <= max."""
    return interval.min <= x and x <= interval.max


@ti.func
def interval_surrounds(interval: Interval, x: ti.f32) -> ti.i32:
    """Open membership test: min < x < max.

    Intersection roots are accepted only when they lie strictly inside the
    search interval, so a hit exactly at the current closest t is rejected.
    """
    return interval.min < x and x < interval.max


@ti.func
def interval_clamp(interval: Interval, x: ti.f32) -> ti.f32:
    """Project x into [min, max]."""
    return tm.clamp(x, interval.min, interval.max)
