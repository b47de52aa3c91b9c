"""Image export utilities for rendered images.

Rendered images are already tone mapped to 8-bit RGB by the integrator, so
exporting is a direct write through Pillow.

Supported formats:
    - PNG (8-bit RGB via Pillow)

Example:
    >>> from spheretrace.preview.export import save_png
    >>> image = camera.render(scene)
    >>> save_png(image, "output.png")
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage


def save_png(image: npt.NDArray[np.uint8], filepath: str | Path) -> None:
    """Save an 8-bit RGB image as a PNG file.

    Parent directories are created if needed.

    Args:
        image: Image array of shape (H, W, 3) with dtype uint8, row 0 at
            the top.
        filepath: Output file path (should end in .png).

    Raises:
        ValueError: If the array does not have shape (H, W, 3) or is not uint8.
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Image must have shape (H, W, 3), got {image.shape}")
    if image.dtype != np.uint8:
        raise ValueError(f"Image must have dtype uint8, got {image.dtype}")

    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)

    pil_image = PILImage.fromarray(np.ascontiguousarray(image))
    pil_image.save(path)


def load_png(filepath: str | Path) -> npt.NDArray[np.uint8]:
    """Load a PNG file as an (H, W, 3) uint8 array."""
    with PILImage.open(filepath) as pil_image:
        return np.asarray(pil_image.convert("RGB"), dtype=np.uint8)
