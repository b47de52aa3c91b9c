"""Thin-lens camera model with depth of field.

This module implements the camera that generates primary rays. It supports:
- Look-at positioning (look_from, look_at, up_vector)
- Vertical field of view in degrees
- Aspect ratio derived from the image size
- Jittered sampling for anti-aliasing (box filter)
- Depth of field through a defocus disk around look_from

The camera builds an orthonormal basis (u, v, w) from the view parameters:
- w: points from look_at toward look_from (opposite view direction)
- u: points right in the image plane
- v: points up in the image plane

The viewport lies on the focal plane, focus_dist in front of the camera.
Pixel (0, 0) is the top-left pixel; rows advance downward.

Geometry is derived once, on the host, by ``make_camera``. The resulting
Camera is frozen; ``setup_camera`` copies it into Taichi fields that the
render kernel reads.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretrace.camera.thin_lens import make_camera, setup_camera
    >>>
    >>> camera = make_camera(
    ...     (400, 225),
    ...     look_from=(13.0, 2.0, 3.0),
    ...     look_at=(0.0, 0.0, 0.0),
    ...     vertical_fov=20.0,
    ...     defocus_angle=0.6,
    ... )
    >>> setup_camera(camera)
"""

import math
import numbers
from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Any

import numpy as np
import numpy.typing as npt
import taichi as ti

from spheretrace.core.ray import make_ray, random_in_unit_disk
from spheretrace.core.rng import random_f32

if TYPE_CHECKING:
    from spheretrace.core.integrator import ProgressCallback
    from spheretrace.scene.manager import Scene

Vec3 = tuple[float, float, float]


def _is_integer(value: Any) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _is_finite(value: Any) -> bool:
    return (
        isinstance(value, numbers.Real)
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


# Maximum supported image dimensions (render buffers are preallocated)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048


class CameraConfigError(ValueError):
    """Raised when a camera configuration cannot produce a valid image."""


# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass(frozen=True)
class CameraConfig:
    """User-facing camera configuration.

    Attributes:
        image_size: Output size as (width, height) in pixels.
        vertical_fov: Vertical field of view in degrees.
        look_from: Camera position in world space.
        look_at: Point the camera is looking at.
        up_vector: Up direction used to orient the camera.
        focus_dist: Distance from look_from to the plane of perfect focus.
        defocus_angle: Cone angle in degrees subtended by the lens at the
            focal plane. 0 disables depth of field.
        samples_per_pixel: Number of jittered samples averaged per pixel.
        max_depth: Maximum number of scene intersections per path.
    """

    image_size: tuple[int, int]
    vertical_fov: float = 60.0
    look_from: Vec3 = (0.0, 0.0, 0.0)
    look_at: Vec3 = (0.0, 0.0, -1.0)
    up_vector: Vec3 = (0.0, 1.0, 0.0)
    focus_dist: float = 10.0
    defocus_angle: float = 0.0
    samples_per_pixel: int = 100
    max_depth: int = 10

    def __post_init__(self) -> None:
        self.validate()
        # Store plain ints so they can be passed straight to kernels
        width, height = self.image_size
        object.__setattr__(self, "image_size", (int(width), int(height)))
        object.__setattr__(self, "samples_per_pixel", int(self.samples_per_pixel))
        object.__setattr__(self, "max_depth", int(self.max_depth))

    @property
    def width(self) -> int:
        return self.image_size[0]

    @property
    def height(self) -> int:
        return self.image_size[1]

    def validate(self) -> None:
        """Check the configuration.

        Raises:
            CameraConfigError: If any parameter would lead to a degenerate
                view (division by zero, NaN rays) or exceed the render
                buffers.
        """
        if len(self.image_size) != 2:
            raise CameraConfigError(f"image_size must be (width, height), got {self.image_size}")
        width, height = self.image_size
        if not _is_integer(width) or not _is_integer(height):
            raise CameraConfigError(f"Image dimensions must be integers, got {self.image_size}")
        if width <= 0 or height <= 0:
            raise CameraConfigError(f"Image dimensions must be positive, got {width}x{height}")
        if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
            raise CameraConfigError(
                f"Image dimensions ({width}x{height}) exceed maximum supported "
                f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
            )

        for name in ("vertical_fov", "focus_dist", "defocus_angle"):
            value = getattr(self, name)
            if not _is_finite(value):
                raise CameraConfigError(f"{name} = {value} must be a finite number")
        for name in ("look_from", "look_at", "up_vector"):
            point = getattr(self, name)
            if len(point) != 3 or not all(_is_finite(c) for c in point):
                raise CameraConfigError(f"{name} = {point} must be three finite numbers")
        for name in ("samples_per_pixel", "max_depth"):
            value = getattr(self, name)
            if not _is_integer(value):
                raise CameraConfigError(f"{name} = {value} must be an integer")

        if not 0.0 < self.vertical_fov < 180.0:
            raise CameraConfigError(
                f"vertical_fov = {self.vertical_fov} must be in (0, 180) degrees"
            )
        if self.focus_dist <= 0.0:
            raise CameraConfigError(f"focus_dist = {self.focus_dist} must be positive")
        if not 0.0 <= self.defocus_angle < 180.0:
            raise CameraConfigError(
                f"defocus_angle = {self.defocus_angle} must be in [0, 180) degrees"
            )
        if self.samples_per_pixel < 1:
            raise CameraConfigError(
                f"samples_per_pixel = {self.samples_per_pixel} must be at least 1"
            )
        if self.max_depth < 1:
            raise CameraConfigError(f"max_depth = {self.max_depth} must be at least 1")

        view = np.asarray(self.look_from, dtype=np.float64) - np.asarray(
            self.look_at, dtype=np.float64
        )
        if np.linalg.norm(view) == 0.0:
            raise CameraConfigError("look_from and look_at must be different points")

        up = np.asarray(self.up_vector, dtype=np.float64)
        if np.linalg.norm(np.cross(up, view)) == 0.0:
            raise CameraConfigError(
                "up_vector must be non-zero and not parallel to the view direction"
            )


@dataclass(frozen=True)
class Camera:
    """Camera configuration plus the geometry derived from it.

    Instances are created by make_camera() and never mutated, so a single
    camera can be shared by every render worker.

    Attributes:
        config: The validated configuration.
        u: Unit vector pointing right in the image plane.
        v: Unit vector pointing up in the image plane.
        w: Unit vector pointing backward (opposite the view direction).
        viewport_width: Width of the viewport on the focal plane.
        viewport_height: Height of the viewport on the focal plane.
        pixel_delta_u: Offset between horizontally adjacent pixel centers.
        pixel_delta_v: Offset between vertically adjacent pixel centers
            (points down the image).
        pixel00_loc: World position of the center of pixel (0, 0).
        defocus_disk_u: Horizontal radius vector of the defocus disk.
        defocus_disk_v: Vertical radius vector of the defocus disk.
    """

    config: CameraConfig
    u: Vec3
    v: Vec3
    w: Vec3
    viewport_width: float
    viewport_height: float
    pixel_delta_u: Vec3
    pixel_delta_v: Vec3
    pixel00_loc: Vec3
    defocus_disk_u: Vec3
    defocus_disk_v: Vec3

    @property
    def image_size(self) -> tuple[int, int]:
        return self.config.image_size

    @property
    def samples_per_pixel(self) -> int:
        return self.config.samples_per_pixel

    @property
    def max_depth(self) -> int:
        return self.config.max_depth

    def render(
        self,
        scene: "Scene",
        *,
        seed: int = 0,
        batch_size: int | None = None,
        callback: "ProgressCallback | None" = None,
    ) -> npt.NDArray[np.uint8]:
        """Render a scene through this camera.

        See spheretrace.core.integrator.render_image for the arguments.

        Returns:
            An 8-bit RGB image of shape (height, width, 3).
        """
        # Deferred import: the integrator imports this module
        from spheretrace.core.integrator import render_image

        return render_image(scene, self, seed=seed, batch_size=batch_size, callback=callback)


def _to_vec3(array: npt.NDArray[np.float64]) -> Vec3:
    return (float(array[0]), float(array[1]), float(array[2]))


def _normalized(array: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    return array / np.linalg.norm(array)


def build_camera(config: CameraConfig) -> Camera:
    """Derive the camera geometry from a validated configuration.

    Args:
        config: The camera configuration.

    Returns:
        The immutable Camera.
    """
    width, height = config.image_size
    look_from = np.asarray(config.look_from, dtype=np.float64)
    look_at = np.asarray(config.look_at, dtype=np.float64)
    up = np.asarray(config.up_vector, dtype=np.float64)

    # Orthonormal basis; w points from look_at toward look_from (backward)
    w = _normalized(look_from - look_at)
    u = _normalized(np.cross(up, w))
    v = np.cross(w, u)

    # Viewport dimensions on the focal plane
    theta = math.radians(config.vertical_fov)
    viewport_height = 2.0 * math.tan(theta / 2.0) * config.focus_dist
    viewport_width = viewport_height * (width / height)

    # Vectors across the horizontal and down the vertical viewport edges
    viewport_u = viewport_width * u
    viewport_v = viewport_height * -v

    pixel_delta_u = viewport_u / width
    pixel_delta_v = viewport_v / height

    viewport_upper_left = look_from - config.focus_dist * w - viewport_u / 2.0 - viewport_v / 2.0
    pixel00_loc = viewport_upper_left + 0.5 * (pixel_delta_u + pixel_delta_v)

    defocus_radius = config.focus_dist * math.tan(math.radians(config.defocus_angle / 2.0))

    return Camera(
        config=config,
        u=_to_vec3(u),
        v=_to_vec3(v),
        w=_to_vec3(w),
        viewport_width=viewport_width,
        viewport_height=viewport_height,
        pixel_delta_u=_to_vec3(pixel_delta_u),
        pixel_delta_v=_to_vec3(pixel_delta_v),
        pixel00_loc=_to_vec3(pixel00_loc),
        defocus_disk_u=_to_vec3(defocus_radius * u),
        defocus_disk_v=_to_vec3(defocus_radius * v),
    )


def make_camera(image_size: tuple[int, int], **options: Any) -> Camera:
    """Create a camera, filling unspecified options with their defaults.

    Args:
        image_size: Output size as (width, height) in pixels.
        **options: Any other CameraConfig field (vertical_fov, look_from,
            look_at, up_vector, focus_dist, defocus_angle,
            samples_per_pixel, max_depth).

    Returns:
        The immutable Camera.

    Raises:
        CameraConfigError: If an option is unknown or the configuration is
            invalid.
    """
    known = {f.name for f in fields(CameraConfig)}
    unknown = sorted(set(options) - known)
    if unknown:
        raise CameraConfigError(f"Unknown camera options: {', '.join(unknown)}")

    config = CameraConfig(image_size=tuple(image_size), **options)
    return build_camera(config)


# =============================================================================
# Taichi Fields for Camera State (GPU-accessible)
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_pixel00_loc = ti.Vector.field(3, dtype=ti.f32, shape=())
_pixel_delta_u = ti.Vector.field(3, dtype=ti.f32, shape=())
_pixel_delta_v = ti.Vector.field(3, dtype=ti.f32, shape=())
_defocus_disk_u = ti.Vector.field(3, dtype=ti.f32, shape=())
_defocus_disk_v = ti.Vector.field(3, dtype=ti.f32, shape=())
_defocus_angle = ti.field(dtype=ti.f32, shape=())


def setup_camera(camera: Camera) -> None:
    """Copy a camera's geometry into the Taichi fields used by get_ray().

    Note:
        This function writes to Taichi fields and should be called from
        Python (not from within a Taichi kernel).
    """
    _camera_origin[None] = list(camera.config.look_from)
    _pixel00_loc[None] = list(camera.pixel00_loc)
    _pixel_delta_u[None] = list(camera.pixel_delta_u)
    _pixel_delta_v[None] = list(camera.pixel_delta_v)
    _defocus_disk_u[None] = list(camera.defocus_disk_u)
    _defocus_disk_v[None] = list(camera.defocus_disk_v)
    _defocus_angle[None] = camera.config.defocus_angle


# =============================================================================
# Ray Generation (Taichi-compatible)
# =============================================================================


@ti.func
def defocus_disk_sample(rng: ti.u32):
    """Sample a ray origin uniformly from the camera's defocus disk.

    Returns:
        A tuple of (origin, new_state).
    """
    p, state = random_in_unit_disk(rng)
    origin = _camera_origin[None] + p.x * _defocus_disk_u[None] + p.y * _defocus_disk_v[None]
    return origin, state


@ti.func
def get_ray(x: ti.i32, y: ti.i32, rng: ti.u32):
    """Generate a jittered camera ray for pixel (x, y).

    The pixel center is offset by a uniform amount in [-0.5, 0.5) on both
    axes. The ray starts at the camera position, or at a random point on the
    defocus disk when depth of field is enabled, and points at the jittered
    sample on the focal plane.

    Args:
        x: Pixel column (0 = left).
        y: Pixel row (0 = top).
        rng: The current generator state.

    Returns:
        A tuple of (ray, new_state).
    """
    offset_x, state = random_f32(rng)
    offset_y, state = random_f32(state)

    pixel_sample = (
        _pixel00_loc[None]
        + (ti.cast(x, ti.f32) + offset_x - 0.5) * _pixel_delta_u[None]
        + (ti.cast(y, ti.f32) + offset_y - 0.5) * _pixel_delta_v[None]
    )

    origin = _camera_origin[None]
    if _defocus_angle[None] > 0.0:
        origin, state = defocus_disk_sample(state)

    return make_ray(origin, pixel_sample - origin), state

