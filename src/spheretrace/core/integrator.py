"""Path tracing integrator.

This module evaluates the radiance carried by camera rays and drives the
parallel per-pixel render loop.

The radiance evaluator follows a ray through the scene, bouncing off
surfaces according to their material, and multiplies the attenuation of
every bounce into a running throughput. A path ends when it:
    - escapes the scene (it picks up the sky gradient),
    - is absorbed by a material (it contributes black),
    - runs out of bounces (it contributes black).

Every pixel owns a random generator state seeded from (seed, pixel index),
so a render is reproducible for a given seed.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretrace.camera import make_camera
    >>> from spheretrace.core.integrator import render_image
    >>> from spheretrace.scene import create_random_spheres_scene
    >>>
    >>> scene = create_random_spheres_scene(seed=7)
    >>> camera = make_camera((400, 225), look_from=(13, 2, 3), look_at=(0, 0, 0),
    ...                      vertical_fov=20.0, samples_per_pixel=10)
    >>> image = render_image(scene, camera, seed=1)
    >>> image.shape
    (225, 400, 3)
"""

from collections.abc import Callable
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from spheretrace.camera.thin_lens import (
    MAX_IMAGE_HEIGHT,
    MAX_IMAGE_WIDTH,
    get_ray,
    setup_camera,
)
from spheretrace.core.interval import make_interval
from spheretrace.core.ray import Ray, make_ray
from spheretrace.core.rng import seed_state
from spheretrace.geometry.sphere import HitRecord
from spheretrace.materials.base import MaterialType, Scattered
from spheretrace.materials.dielectric import scatter_dielectric
from spheretrace.materials.lambertian import scatter_lambertian
from spheretrace.materials.metal import scatter_metal
from spheretrace.scene.intersection import nearest_hit

if TYPE_CHECKING:
    from spheretrace.camera.thin_lens import Camera
    from spheretrace.scene.manager import Scene

# Type alias for 3D vectors
vec3 = tm.vec3

# Type alias for progress callback: (samples_done, samples_total)
ProgressCallback = Callable[[int, int], None]

# =============================================================================
# Rendering Constants
# =============================================================================

# t range for scene queries; the lower bound skips self-intersection acne
T_MIN = 0.001
T_MAX = tm.inf

# Scattered rays start this far off the surface, on the side they travel
# toward
RAY_EPSILON = 1e-3

# Sky gradient: white toward the ground, blue toward the zenith
BACKGROUND_BOTTOM = vec3(1.0, 1.0, 1.0)
BACKGROUND_TOP = vec3(0.5, 0.7, 1.0)

# Display gamma and the largest value kept before 8-bit quantization
GAMMA = 2.2
MAX_INTENSITY = 0.999

# Seeds are passed to kernels as 32-bit signed integers
MAX_SEED = 2**31 - 1

# =============================================================================
# Render Target
# =============================================================================

# Sum of radiance samples per pixel, indexed (x, y) with y = 0 at the top
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Random generator state per pixel
_rng_state = ti.field(dtype=ti.u32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))


# =============================================================================
# Radiance Evaluation
# =============================================================================


@ti.func
def background_color(direction: vec3) -> vec3:
    """Sky color seen along a direction that escapes the scene.

    Blends linearly from white (straight down) to light blue (straight up)
    based on the height of the normalized direction.
    """
    unit_direction = tm.normalize(direction)
    a = 0.5 * (unit_direction.y + 1.0)
    return (1.0 - a) * BACKGROUND_BOTTOM + a * BACKGROUND_TOP


@ti.func
def _offset_ray_origin(point: vec3, normal: vec3, direction: vec3) -> vec3:
    """Offset a scattered ray origin to avoid self-intersection.

    Pushes the point along the facing normal when the ray leaves the
    surface (reflection), and against it when the ray enters (refraction).
    """
    offset_dir = normal
    if tm.dot(direction, normal) < 0.0:
        offset_dir = -normal
    return point + RAY_EPSILON * offset_dir


@ti.func
def scatter_material(ray: Ray, rec: HitRecord, rng: ti.u32):
    """Dispatch to the scattering function of the struck material.

    Args:
        ray: The incoming ray.
        rec: The hit record for the intersection (hit == 1).
        rng: The current generator state.

    Returns:
        A tuple of (scattered, new_state) where scattered is a Scattered
        struct whose ray starts RAY_EPSILON off the hit point.
    """
    state = rng
    material = rec.material

    direction = vec3(0.0, 0.0, 0.0)
    attenuation = vec3(0.0, 0.0, 0.0)
    did_scatter = 0

    if material.kind == int(MaterialType.LAMBERTIAN):
        direction, attenuation, state = scatter_lambertian(material.albedo, rec.normal, state)
        did_scatter = 1

    elif material.kind == int(MaterialType.METAL):
        direction, attenuation, did_scatter, state = scatter_metal(
            material.albedo, material.fuzz, ray.direction, rec.normal, state
        )

    elif material.kind == int(MaterialType.DIELECTRIC):
        direction, attenuation = scatter_dielectric(
            material.ior, material.albedo, ray.direction, rec.normal, rec.front_face
        )
        did_scatter = 1

    scattered = Scattered(
        did_scatter=did_scatter,
        attenuation=attenuation,
        scatter_ray=make_ray(_offset_ray_origin(rec.point, rec.normal, direction), direction),
    )
    return scattered, state


@ti.func
def ray_color(ray: Ray, max_depth: ti.i32, rng: ti.u32):
    """Estimate the radiance arriving along a ray.

    Args:
        ray: The ray to follow.
        max_depth: Maximum number of scene intersections. 0 yields black.
        rng: The current generator state.

    Returns:
        A tuple of (color, new_state).
    """
    state = rng
    color = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)
    origin = ray.origin
    direction = ray.direction

    # Taichi has no break in ti.func loops; paths end by clearing the flag
    active = 1

    for _bounce in range(max_depth):
        if active == 1:
            current = make_ray(origin, direction)
            rec = nearest_hit(current, make_interval(T_MIN, T_MAX))

            if rec.hit == 0:
                color = throughput * background_color(direction)
                active = 0
            else:
                scattered, state = scatter_material(current, rec, state)
                if scattered.did_scatter == 0:
                    active = 0
                else:
                    throughput *= scattered.attenuation
                    origin = scattered.scatter_ray.origin
                    direction = scattered.scatter_ray.direction

    return color, state


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _seed_pixels(seed: ti.i32, width: ti.i32, height: ti.i32):
    """Reset the accumulation buffer and seed one generator per pixel."""
    for i, j in ti.ndrange(width, height):
        _color_buffer[i, j] = vec3(0.0, 0.0, 0.0)
        _rng_state[i, j] = seed_state(seed, j * width + i)


@ti.kernel
def _render_batch(width: ti.i32, height: ti.i32, num_samples: ti.i32, max_depth: ti.i32):
    """Trace num_samples jittered paths through every pixel and accumulate."""
    for i, j in ti.ndrange(width, height):
        state = _rng_state[i, j]
        total = _color_buffer[i, j]
        for _sample in range(num_samples):
            ray, state = get_ray(i, j, state)
            color, state = ray_color(ray, max_depth, state)
            total += color
        _color_buffer[i, j] = total
        _rng_state[i, j] = state


# =============================================================================
# Host-side Rendering
# =============================================================================


def tone_map_rgb8(linear: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Convert averaged linear radiance to 8-bit display values.

    Applies gamma 1/2.2, clamps into [0, 0.999] and scales by 256 before
    truncating, so every channel maps into [0, 255].

    Args:
        linear: Array of linear RGB values with any leading shape.

    Returns:
        Array of the same shape with dtype uint8.
    """
    values = np.asarray(linear, dtype=np.float64)
    values = np.nan_to_num(values, nan=0.0, posinf=MAX_INTENSITY, neginf=0.0)
    values = np.power(np.maximum(values, 0.0), 1.0 / GAMMA)
    values = np.clip(values, 0.0, MAX_INTENSITY)
    return (256.0 * values).astype(np.uint8)


def render_image(
    scene: "Scene",
    camera: "Camera",
    *,
    seed: int = 0,
    batch_size: int | None = None,
    callback: "ProgressCallback | None" = None,
) -> npt.NDArray[np.uint8]:
    """Render a scene through a camera.

    The scene is uploaded to the Taichi scene storage and the camera to the
    camera fields, then every pixel traces camera.samples_per_pixel paths.
    Samples are launched in batches; the callback is invoked after each
    batch. The output is the same whatever the batch size.

    Args:
        scene: The scene to render. An empty scene renders the sky.
        camera: The camera built by make_camera().
        seed: Seed for the per-pixel generators, in [0, 2**31).
        batch_size: Samples per pixel launched per kernel call. Defaults to
            all samples at once.
        callback: Optional function called as callback(done, total) after
            each batch.

    Returns:
        An 8-bit RGB image of shape (height, width, 3), row 0 at the top.

    Raises:
        ValueError: If the seed or batch size is out of range.
    """
    if not 0 <= seed <= MAX_SEED:
        raise ValueError(f"seed = {seed} must be in [0, {MAX_SEED}]")

    width, height = camera.image_size
    total_samples = camera.samples_per_pixel
    if batch_size is None:
        batch_size = total_samples
    if batch_size < 1:
        raise ValueError(f"batch_size = {batch_size} must be at least 1")

    scene.upload()
    setup_camera(camera)
    _seed_pixels(seed, width, height)

    done = 0
    while done < total_samples:
        count = min(batch_size, total_samples - done)
        _render_batch(width, height, count, camera.max_depth)
        done += count
        if callback is not None:
            callback(done, total_samples)

    summed = _color_buffer.to_numpy()[:width, :height]
    averaged = summed / float(total_samples)
    # (width, height, 3) -> (height, width, 3)
    return tone_map_rgb8(np.transpose(averaged, (1, 0, 2)))
