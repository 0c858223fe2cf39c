"""Thin-lens camera model with depth of field.

The camera builds an orthonormal basis (u, v, w) from the view parameters:
- w: points from lookat toward lookfrom (opposite view direction)
- u: points right in the image plane
- v: points up in the image plane

The image plane sits at the focus distance in front of the camera. Each
primary ray starts at a random point on a lens disk of radius aperture / 2
and passes through the point (s, t) of the image plane, so geometry at the
focus distance is sharp and everything else blurs. With aperture 0 this is
a pinhole camera.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.spheretracer.camera.thin_lens import CameraFields, ThinLensCamera
    >>>
    >>> camera = ThinLensCamera(
    ...     lookfrom=(0.0, 2.0, 3.0),
    ...     lookat=(0.0, 0.0, 0.0),
    ...     vup=(0.0, 1.0, 0.0),
    ...     vfov=60.0,
    ...     aperture=0.1,
    ...     focus_dist=3.0,
    ... )
    >>> fields = CameraFields(camera.frame(aspect_ratio=16.0 / 9.0))
    >>> # Inside a kernel:
    >>> # state, ray = fields.get_ray(0.5, 0.5, state)  # Ray through image center
"""

import math
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.spheretracer.core.ray import Ray, make_ray, normalize, vec3
from src.spheretracer.core.rng import random_in_unit_disk

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass(frozen=True)
class ThinLensCamera:
    """Configuration for a thin-lens (depth of field) camera.

    Attributes:
        lookfrom: Camera position in world space (x, y, z).
        lookat: Point the camera is looking at in world space (x, y, z).
        vup: Up direction vector for camera orientation (typically (0, 1, 0)).
        vfov: Vertical field of view in degrees, top to bottom.
        aperture: Lens diameter. 0 gives a pinhole camera.
        focus_dist: Distance from the camera to the plane in perfect focus.
    """

    lookfrom: tuple[float, float, float]
    lookat: tuple[float, float, float]
    vup: tuple[float, float, float] = (0.0, 1.0, 0.0)
    vfov: float = 60.0
    aperture: float = 0.0
    focus_dist: float = 1.0

    def __post_init__(self) -> None:
        if not 0.0 < self.vfov < 180.0:
            raise ValueError(f"Vertical field of view must be in (0, 180) degrees, got {self.vfov}")
        if self.aperture < 0.0:
            raise ValueError(f"Aperture must be non-negative, got {self.aperture}")
        if self.focus_dist <= 0.0:
            raise ValueError(f"Focus distance must be positive, got {self.focus_dist}")

        view = np.subtract(self.lookfrom, self.lookat)
        if np.linalg.norm(view) == 0.0:
            raise ValueError("lookfrom and lookat must be different points")
        if np.linalg.norm(np.cross(self.vup, view)) == 0.0:
            raise ValueError(f"vup {self.vup!r} is parallel to the view direction")

    def frame(self, aspect_ratio: float) -> "CameraFrame":
        """Derive the camera basis and image-plane geometry.

        Args:
            aspect_ratio: Image width divided by height.

        Returns:
            The immutable CameraFrame for this camera and aspect ratio.
        """
        if aspect_ratio <= 0.0:
            raise ValueError(f"Aspect ratio must be positive, got {aspect_ratio}")

        theta = math.radians(self.vfov)
        half_height = math.tan(theta / 2.0)
        half_width = aspect_ratio * half_height

        origin = np.array(self.lookfrom, dtype=np.float64)
        lookat = np.array(self.lookat, dtype=np.float64)
        vup = np.array(self.vup, dtype=np.float64)

        # w points from lookat toward lookfrom (backward)
        w = origin - lookat
        w = w / np.linalg.norm(w)

        # u points right (perpendicular to w and vup)
        u = np.cross(vup, w)
        u = u / np.linalg.norm(u)

        # v points up in the camera's frame
        v = np.cross(w, u)

        d = self.focus_dist
        lower_left = origin - half_width * d * u - half_height * d * v - d * w

        return CameraFrame(
            origin=origin,
            lower_left=lower_left,
            horizontal=2.0 * half_width * d * u,
            vertical=2.0 * half_height * d * v,
            u=u,
            v=v,
            w=w,
            lens_radius=self.aperture / 2.0,
        )


@dataclass(frozen=True)
class CameraFrame:
    """Derived camera geometry (world space).

    Attributes:
        origin: Center of the lens.
        lower_left: Lower-left corner of the image plane.
        horizontal: Full width of the image plane.
        vertical: Full height of the image plane.
        u: Right direction.
        v: Up direction.
        w: Backward direction (opposite view direction).
        lens_radius: Radius of the lens disk.
    """

    origin: npt.NDArray[np.float64]
    lower_left: npt.NDArray[np.float64]
    horizontal: npt.NDArray[np.float64]
    vertical: npt.NDArray[np.float64]
    u: npt.NDArray[np.float64]
    v: npt.NDArray[np.float64]
    w: npt.NDArray[np.float64]
    lens_radius: float

    def as_dict(self) -> dict[str, tuple[float, ...]]:
        """Camera vectors as plain tuples, for debugging and tests."""
        return {
            "origin": tuple(float(c) for c in self.origin),
            "lower_left": tuple(float(c) for c in self.lower_left),
            "horizontal": tuple(float(c) for c in self.horizontal),
            "vertical": tuple(float(c) for c in self.vertical),
            "u": tuple(float(c) for c in self.u),
            "v": tuple(float(c) for c in self.v),
            "w": tuple(float(c) for c in self.w),
            "lens_radius": (float(self.lens_radius),),
        }


# =============================================================================
# Ray Generation (Taichi-compatible)
# =============================================================================


@ti.func
def lens_ray(
    origin: vec3,
    lower_left: vec3,
    horizontal: vec3,
    vertical: vec3,
    u: vec3,
    v: vec3,
    lens_radius: ti.f32,
    s: ti.f32,
    t: ti.f32,
    state: ti.u32,
):
    """Generate a ray through normalized image coordinates (s, t).

    Args:
        origin: Lens center.
        lower_left: Lower-left corner of the image plane.
        horizontal: Image plane width vector.
        vertical: Image plane height vector.
        u: Camera right vector.
        v: Camera up vector.
        lens_radius: Radius of the lens disk.
        s: Horizontal coordinate in [0, 1] (left to right).
        t: Vertical coordinate in [0, 1] (bottom to top).
        state: The RNG state used for the lens sample.

    Returns:
        A tuple (new_state, ray) where the ray starts at the sampled lens
        point and has a unit direction.
    """
    new_state, disk = random_in_unit_disk(state)
    rd = lens_radius * disk
    offset = u * rd.x + v * rd.y
    target = lower_left + s * horizontal + t * vertical
    direction = normalize(target - origin - offset)
    return new_state, make_ray(origin + offset, direction)


@ti.data_oriented
class CameraFields:
    """Device copy of a CameraFrame, read-only while rays are in flight."""

    def __init__(self, frame: CameraFrame) -> None:
        self.frame = frame

        self._origin = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._lower_left = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._horizontal = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._vertical = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._u = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._v = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._lens_radius = ti.field(dtype=ti.f32, shape=())

        self._origin[None] = frame.origin.tolist()
        self._lower_left[None] = frame.lower_left.tolist()
        self._horizontal[None] = frame.horizontal.tolist()
        self._vertical[None] = frame.vertical.tolist()
        self._u[None] = frame.u.tolist()
        self._v[None] = frame.v.tolist()
        self._lens_radius[None] = frame.lens_radius

    @ti.func
    def get_ray(self, s: ti.f32, t: ti.f32, state: ti.u32):
        """Generate the primary ray for image coordinates (s, t).

        Returns:
            A tuple (new_state, ray).
        """
        return lens_ray(
            self._origin[None],
            self._lower_left[None],
            self._horizontal[None],
            self._vertical[None],
            self._u[None],
            self._v[None],
            self._lens_radius[None],
            s,
            t,
            state,
        )


def get_ray_numpy(
    frame: CameraFrame, s: float, t: float
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """Pinhole ray through (s, t) computed on the host, ignoring the lens.

    Useful for checking rendered pixels against an analytic expectation.

    Returns:
        Tuple of (origin, unit direction).
    """
    target = frame.lower_left + s * frame.horizontal + t * frame.vertical
    direction = target - frame.origin
    return frame.origin.copy(), direction / np.linalg.norm(direction)
