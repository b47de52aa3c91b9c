"""Taichi-based stochastic ray tracer for scenes made of spheres.

This package renders a static image of a sphere scene by tracing randomly
jittered camera rays and scattering them off three material models, with
every pixel evaluated in parallel by Taichi kernels.

Subpackages:
    core: Ray, interval and random-state utilities, radiance integrator
    geometry: Sphere primitive and ray-sphere intersection
    materials: Lambertian, metal and dielectric scattering
    scene: Scene builder, GPU storage and nearest-hit queries
    camera: Thin-lens camera with depth of field
    preview: Image export
"""

__version__ = "0.1.0"
