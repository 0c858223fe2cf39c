"""Per-ray working buffers for one render.

The arena is sized once, to the number of primary rays per frame, and reused
for every frame of the render. The primary-ray pass of each frame overwrites
every Ray, Hit and Sample slot before any of them is read, so no clearing is
needed between frames.
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.spheretracer.core.ray import Ray
from src.spheretracer.scene.intersection import Hit

vec3 = tm.vec3


@ti.dataclass
class Sample:
    """Running radiance estimate of one primary ray.

    Attributes:
        color: Radiance accumulated so far.
        attenuation: Throughput of the path so far.
    """

    color: vec3
    attenuation: vec3


@ti.data_oriented
class RenderArena:
    """Owned Ray, Hit and Sample buffers indexed by logical ray index.

    Attributes:
        num_rays: Number of slots in each buffer.
        rays: Ray struct field.
        hits: Hit struct field.
        samples: Sample struct field.
    """

    def __init__(self, num_rays: int) -> None:
        if num_rays <= 0:
            raise ValueError(f"Arena needs at least one ray slot, got {num_rays}")
        self.num_rays = num_rays
        self.rays = Ray.field(shape=num_rays)
        self.hits = Hit.field(shape=num_rays)
        self.samples = Sample.field(shape=num_rays)

    def ray_states(self) -> npt.NDArray[np.int32]:
        """RayState of every slot, copied to the host."""
        return self.rays.state.to_numpy()

    def sample_colors(self) -> npt.NDArray[np.float32]:
        """Accumulated color of every slot, shape (num_rays, 3)."""
        return self.samples.color.to_numpy()

    def ray_directions(self) -> npt.NDArray[np.float32]:
        """Current direction of every ray, shape (num_rays, 3)."""
        return self.rays.direction.to_numpy()
