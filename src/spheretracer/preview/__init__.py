"""Preview module for image output.

Components:
    export: Backbuffer conversion and PNG export utilities

Features:
    - Flip of the bottom-up backbuffer into a top-down RGB image
    - Gamma-encoded 8-bit PNG export (Pillow)
    - RMSE comparison of two renders

Example:
    >>> from src.spheretracer.preview import save_png
    >>> save_png(result.image, "output.png", gamma=2.2)
"""

from src.spheretracer.preview.export import (
    backbuffer_to_rgb,
    compute_rmse,
    image_to_uint8,
    save_png,
)

__all__ = [
    "backbuffer_to_rgb",
    "image_to_uint8",
    "save_png",
    "compute_rmse",
]
