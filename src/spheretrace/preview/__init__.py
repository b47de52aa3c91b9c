"""Preview module for image output.

Components:
    export: PNG export and import via Pillow

Example:
    >>> from spheretrace.preview import save_png
    >>> image = camera.render(scene, seed=3)
    >>> save_png(image, "spheres.png")
"""

from spheretrace.preview.export import load_png, save_png

__all__ = [
    "save_png",
    "load_png",
]
