"""Image export utilities for rendered backbuffers.

The backbuffer stores linear radiance with row 0 at the bottom of the image
and a reserved fourth channel. These helpers turn it into a conventional
top-row-first RGB image and write it out.

Supported formats:
    - PNG (8-bit, gamma-encoded, via Pillow)

Example:
    >>> from src.spheretracer.core.progressive import render
    >>> from src.spheretracer.preview.export import save_png
    >>>
    >>> result = render(scene, camera, settings)
    >>> save_png(result.image, "output.png", gamma=2.2)
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

logger = logging.getLogger(__name__)


def backbuffer_to_rgb(backbuffer: npt.NDArray[np.float32]) -> npt.NDArray[np.float32]:
    """Drop the reserved channel and flip so the first row is the top.

    Args:
        backbuffer: Array of shape (H, W, 4) or (H, W, 3), row 0 at the bottom.

    Returns:
        Linear float32 array of shape (H, W, 3), row 0 at the top.

    Raises:
        ValueError: If the array is not an (H, W, 3|4) image.
    """
    if backbuffer.ndim != 3 or backbuffer.shape[2] not in (3, 4):
        raise ValueError(f"Expected an (H, W, 3) or (H, W, 4) image, got shape {backbuffer.shape}")
    return np.ascontiguousarray(np.flipud(backbuffer[:, :, :3]), dtype=np.float32)


def image_to_uint8(
    image: npt.NDArray[np.float32],
    *,
    gamma: float = 2.2,
) -> npt.NDArray[np.uint8]:
    """Convert a linear float32 image to uint8 for display/export.

    Values are clamped to [0, 1] and gamma-encoded; no tone mapping is
    applied, so radiance above 1 saturates.

    Args:
        image: Linear image array of shape (H, W, 3).
        gamma: Gamma value (default 2.2). 1.0 keeps the values linear.

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.
    """
    if gamma <= 0.0:
        raise ValueError(f"Gamma must be positive, got {gamma}")

    clamped = np.clip(np.nan_to_num(image, nan=0.0), 0.0, 1.0)
    if gamma != 1.0:
        clamped = np.power(clamped, 1.0 / gamma)

    # Round to nearest so that 0.5 maps to 128
    return (clamped * 255.0 + 0.5).astype(np.uint8)


def save_png(
    backbuffer: npt.NDArray[np.float32],
    filepath: str | Path,
    *,
    gamma: float = 2.2,
) -> None:
    """Save a rendered backbuffer as a PNG file.

    Args:
        backbuffer: Backbuffer of shape (H, W, 4), row 0 at the bottom.
        filepath: Output file path (should end in .png).
        gamma: Gamma value (default 2.2).
    """
    image_uint8 = image_to_uint8(backbuffer_to_rgb(backbuffer), gamma=gamma)

    pil_image = PILImage.fromarray(image_uint8)
    pil_image.save(filepath)
    logger.info("Saved %dx%d image to %s", image_uint8.shape[1], image_uint8.shape[0], filepath)


def compute_rmse(
    image_a: npt.NDArray[np.floating[npt.NBitBase]],
    image_b: npt.NDArray[np.floating[npt.NBitBase]],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(
            f"Image shapes must match: {image_a.shape} vs {image_b.shape}"
        )

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
