"""Scene-level sphere storage and nearest-hit queries.

The scene stores spheres in Taichi fields (Structure of Arrays layout) so
kernels can iterate them directly. Each sphere carries its material inline:
the material kind and parameters live in parallel fields and are copied into
the hit record of any ray that strikes the sphere.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretrace.materials import make_lambertian
    >>> from spheretrace.scene.intersection import add_sphere, clear_scene, nearest_hit
    >>> clear_scene()
    >>> add_sphere((0.0, 0.0, -1.0), 0.5, make_lambertian((0.5, 0.5, 0.5)))
    >>> # Use nearest_hit within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from spheretrace.core.interval import Interval, make_interval
from spheretrace.core.ray import Ray
from spheretrace.geometry.sphere import HitRecord, Sphere, hit_sphere, make_miss_record
from spheretrace.materials.base import Material, MaterialInfo

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout for GPU efficiency
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Per-sphere material storage
sphere_material_kinds = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
sphere_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_fuzz = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_iors = ti.field(dtype=ti.f32, shape=MAX_SPHERES)


def clear_scene() -> None:
    """Clear all spheres from the scene.

    Resets the sphere count to zero. The actual field data is not
    cleared but will be overwritten when new spheres are added.
    """
    num_spheres[None] = 0


def add_sphere(
    center: tuple[float, float, float],
    radius: float,
    material: MaterialInfo,
) -> int:
    """Add a sphere to the scene storage.

    Args:
        center: The center point of the sphere as (x, y, z).
        radius: The radius of the sphere (must be positive).
        material: The sphere's material.

    Returns:
        The index of the added sphere.

    Raises:
        ValueError: If the radius is not positive.
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    if radius <= 0.0:
        raise ValueError(f"Sphere radius must be positive, got {radius}")

    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")

    sphere_centers[idx] = [center[0], center[1], center[2]]
    sphere_radii[idx] = radius
    sphere_material_kinds[idx] = int(material.material_type)
    sphere_albedos[idx] = [material.albedo[0], material.albedo[1], material.albedo[2]]
    sphere_fuzz[idx] = material.fuzz
    sphere_iors[idx] = material.ior
    num_spheres[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


@ti.func
def load_sphere(index: ti.i32) -> Sphere:
    """Assemble the Sphere struct stored at the given index."""
    material = Material(
        kind=sphere_material_kinds[index],
        albedo=sphere_albedos[index],
        fuzz=sphere_fuzz[index],
        ior=sphere_iors[index],
    )
    return Sphere(center=sphere_centers[index], radius=sphere_radii[index], material=material)


@ti.func
def nearest_hit(ray: Ray, t_range: Interval) -> HitRecord:
    """Find the closest intersection of a ray with any sphere in the scene.

    Spheres are tested in insertion order. After each hit the upper bound
    of the search range shrinks to that hit's t, so later spheres only
    register strictly closer intersections.

    Args:
        ray: The ray to test.
        t_range: Valid t values (open interval).

    Returns:
        A HitRecord for the closest intersection, or a miss record if no
        sphere is hit within t_range.
    """
    closest_t = t_range.max
    result = make_miss_record()

    n_spheres = num_spheres[None]
    for i in range(n_spheres):
        sphere = load_sphere(i)
        rec = hit_sphere(ray, sphere, make_interval(t_range.min, closest_t))
        if rec.hit == 1:
            closest_t = rec.t
            result = rec

    return result
