"""Render parameters and renderer-wide constants.

Example:
    >>> from src.spheretracer.core.settings import RenderSettings
    >>> settings = RenderSettings(width=320, height=180, samples_per_pixel=4)
    >>> settings.num_rays
    230400
"""

from __future__ import annotations

from dataclasses import dataclass

# =============================================================================
# Rendering Constants
# =============================================================================

# Accepted hit interval (t_min avoids self-intersection at the scatter origin)
T_MIN = 0.001
T_MAX = 1.0e7

# Default path length and anti-aliasing samples
MAX_DEPTH = 10
SAMPLES_PER_PIXEL = 4

# Sky gradient: white at the horizon, light blue at the zenith, dimmed
SKY_HORIZON = (1.0, 1.0, 1.0)
SKY_ZENITH = (0.5, 0.7, 1.0)
SKY_INTENSITY = 0.3


@dataclass(frozen=True)
class RenderSettings:
    """Parameters of one render invocation.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        samples_per_pixel: Primary rays per pixel and frame.
        max_depth: Maximum bounce depth; the bounce loop runs depth 0..max_depth.
        frame_count: Number of frames rendered by ``render``.
        progressive: Blend frames together; when False each frame overwrites.
        t_min: Exclusive lower bound of the accepted hit interval.
        t_max: Exclusive upper bound of the accepted hit interval.
    """

    width: int
    height: int
    samples_per_pixel: int = SAMPLES_PER_PIXEL
    max_depth: int = MAX_DEPTH
    frame_count: int = 1
    progressive: bool = True
    t_min: float = T_MIN
    t_max: float = T_MAX

    def __post_init__(self) -> None:
        for name in ("width", "height", "samples_per_pixel", "frame_count"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")
        if not 0.0 <= self.t_min < self.t_max:
            raise ValueError(
                f"Hit interval must satisfy 0 <= t_min < t_max, got ({self.t_min}, {self.t_max})"
            )

    @property
    def num_rays(self) -> int:
        """Primary rays per frame (width * height * samples_per_pixel)."""
        return self.width * self.height * self.samples_per_pixel

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height
