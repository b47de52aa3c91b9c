"""Scene module for scene description and ray-scene queries.

Components:
    intersection: Taichi sphere storage and the nearest-hit query
    manager: Host-side Scene builder with dictionary serialization
    random_spheres: The procedurally generated "many spheres" showcase scene

Scene data is organized for GPU access:
    - Structure-of-Arrays layout for sphere geometry
    - Material parameters stored inline with each sphere
"""

from .intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere_count,
    load_sphere,
    nearest_hit,
)
from .manager import Scene, SceneConfig, SphereInfo
from .random_spheres import create_random_spheres_scene, random_color

__all__ = [
    # Intersection module
    "MAX_SPHERES",
    "add_sphere",
    "clear_scene",
    "get_sphere_count",
    "load_sphere",
    "nearest_hit",
    # Manager module
    "Scene",
    "SceneConfig",
    "SphereInfo",
    # Random spheres module
    "create_random_spheres_scene",
    "random_color",
]
