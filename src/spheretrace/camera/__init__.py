"""Camera module for view and ray generation.

Components:
    thin_lens: Look-at camera with field of view and depth of field

Camera responsibilities:
    - Validate the user configuration and apply defaults
    - Derive the viewport geometry once on the host
    - Generate jittered primary rays (optionally from a defocus disk)

Pixel coordinates:
    x in [0, width): left to right across the image
    y in [0, height): top to bottom across the image
"""

from .thin_lens import (
    MAX_IMAGE_HEIGHT,
    MAX_IMAGE_WIDTH,
    Camera,
    CameraConfig,
    CameraConfigError,
    build_camera,
    defocus_disk_sample,
    get_ray,
    make_camera,
    setup_camera,
)

__all__ = [
    "Camera",
    "CameraConfig",
    "CameraConfigError",
    "MAX_IMAGE_WIDTH",
    "MAX_IMAGE_HEIGHT",
    "make_camera",
    "build_camera",
    "setup_camera",
    "get_ray",
    "defocus_disk_sample",
]
