"""Camera module for view and ray generation.

Components:
    thin_lens: Thin-lens camera with depth of field (pinhole when aperture is 0)

Camera responsibilities:
    - Derive an orthonormal basis from look-at parameters
    - Map normalized image coordinates (s, t) to world-space rays
    - Sample the lens disk for depth of field

Ray generation uses normalized image coordinates:
    s in [0, 1]: left to right across image
    t in [0, 1]: bottom to top across image
"""

from .thin_lens import (
    CameraFields,
    CameraFrame,
    ThinLensCamera,
    get_ray_numpy,
    lens_ray,
)

__all__ = [
    "ThinLensCamera",
    "CameraFrame",
    "CameraFields",
    "lens_ray",
    "get_ray_numpy",
]
