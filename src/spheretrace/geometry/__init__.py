"""Geometry module for the sphere primitive.

Components:
    sphere: Sphere primitive, hit records and ray-sphere intersection

Intersection routines are Taichi functions (@ti.func) called from the
scene's nearest-hit query. Spheres are the only primitive; there is no
acceleration structure, every sphere is tested against every ray.
"""

from .sphere import HitRecord, Sphere, hit_sphere, make_miss_record

__all__ = [
    "Sphere",
    "HitRecord",
    "hit_sphere",
    "make_miss_record",
]
