"""Sphere primitive with ray-sphere intersection.

This module provides the Sphere dataclass, the HitRecord produced by
intersection queries, and the intersection function itself.

The ray-sphere intersection is found by solving:
    |origin + t * direction - center|^2 = radius^2

With oc = center - origin this is the quadratic
    a*t^2 - 2*h*t + c = 0

where:
    a = dot(direction, direction)
    h = dot(direction, oc)
    c = dot(oc, oc) - radius^2

whose roots are (h -+ sqrt(h^2 - a*c)) / a.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretrace.geometry.sphere import Sphere, HitRecord, hit_sphere
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from spheretrace.core.interval import Interval, interval_surrounds
from spheretrace.core.ray import Ray, ray_at
from spheretrace.materials.base import Material

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point, radius and material.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
        material: The material of the sphere's surface.
    """

    center: vec3
    radius: ti.f32
    material: Material


@ti.dataclass
class HitRecord:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: Whether the ray intersected the primitive (1 if hit, 0 if miss).
        t: The parameter value along the ray where intersection occurred.
            Only valid if hit == 1.
        point: The 3D point where the ray intersected the surface.
            Only valid if hit == 1.
        normal: The unit surface normal at the intersection point, always
            facing against the incoming ray (flipped for back-face hits).
            Only valid if hit == 1.
        front_face: Whether the ray hit the front face (1) or back face (0).
            Front face means the ray arrived from outside the primitive.
            Only valid if hit == 1.
        material: A copy of the struck primitive's material.
            Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    front_face: ti.i32
    material: Material


@ti.func
def make_miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
        material=Material(kind=-1, albedo=vec3(0.0, 0.0, 0.0), fuzz=0.0, ior=1.0),
    )


@ti.func
def hit_sphere(ray: Ray, sphere: Sphere, t_range: Interval) -> HitRecord:
    """Test for ray-sphere intersection within an open parameter range.

    The near root is preferred; the far root is used only when the near one
    falls outside t_range, which is the case for rays starting inside the
    sphere.

    The ray direction must not be zero-length (a == 0 is not checked).

    Args:
        ray: The ray to test.
        sphere: The sphere to test intersection against.
        t_range: Valid t values; roots must lie strictly inside it.

    Returns:
        A HitRecord containing intersection information. Check the hit
        field to determine if intersection occurred.
    """
    oc = sphere.center - ray.origin
    a = tm.dot(ray.direction, ray.direction)
    h = tm.dot(ray.direction, oc)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = h * h - a * c

    result = make_miss_record()

    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)

        root = (h - sqrt_d) / a
        valid = interval_surrounds(t_range, root)
        if not valid:
            root = (h + sqrt_d) / a
            valid = interval_surrounds(t_range, root)

        if valid:
            point = ray_at(ray, root)
            outward_normal = (point - sphere.center) / sphere.radius

            # Front face: ray direction and outward normal point in opposite directions
            front_face = 1
            normal = outward_normal
            if tm.dot(ray.direction, outward_normal) >= 0.0:
                front_face = 0
                normal = -outward_normal

            result = HitRecord(
                hit=1,
                t=root,
                point=point,
                normal=normal,
                front_face=front_face,
                material=sphere.material,
            )

    return result

