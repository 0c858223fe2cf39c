"""Path tracing integrator for Monte Carlo light transport.

This module drives the depth-limited bounce loop over a whole frame of rays.
Instead of recursing per pixel, every primary ray of the frame lives in the
RenderArena and the loop advances all of them one bounce at a time:

    generate primary rays        (camera, all rays ACTIVE)
    for depth in 0 .. max_depth:
        hit_world                (nearest sphere for every ACTIVE ray)
        scatter                  (emission, sky, material bounce, DONE)

A ray that escapes, is absorbed, or reaches max_depth becomes DONE and is
skipped by every later pass of the frame. Each ACTIVE ray processed by the
scatter pass counts as one (ray, bounce) work unit.

All random decisions are seeded from the logical ray index, the frame and
the depth, so a frame renders identically however the loops are scheduled.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.spheretracer.core.integrator import PathTracer
    >>> # tracer = PathTracer(scene_buffers, camera_fields, arena, settings)
    >>> # rays = tracer.trace_frame(0)
"""

import logging

import taichi as ti
import taichi.math as tm

from src.spheretracer.camera.thin_lens import CameraFields
from src.spheretracer.core.arena import RenderArena, Sample
from src.spheretracer.core.ray import RayState, make_ray
from src.spheretracer.core.rng import bounce_seed, camera_seed, random_float01
from src.spheretracer.core.settings import (
    SKY_HORIZON,
    SKY_INTENSITY,
    SKY_ZENITH,
    RenderSettings,
)
from src.spheretracer.materials.dispatch import scatter_material
from src.spheretracer.scene.buffers import SceneBuffers
from src.spheretracer.scene.intersection import NO_HIT, hit_world, make_miss

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# Sky gradient end points as Taichi vectors
SKY_HORIZON_COLOR = vec3(*SKY_HORIZON)
SKY_ZENITH_COLOR = vec3(*SKY_ZENITH)


# =============================================================================
# Background
# =============================================================================


@ti.func
def sky_color(direction: vec3) -> vec3:
    """Radiance arriving along a ray that misses every sphere.

    Blends linearly from white at the horizon (y = -1) to light blue at the
    zenith (y = 1), then dims the result.

    Args:
        direction: The ray direction (unit length).

    Returns:
        The sky radiance (RGB).
    """
    t = 0.5 * (direction.y + 1.0)
    return ((1.0 - t) * SKY_HORIZON_COLOR + t * SKY_ZENITH_COLOR) * SKY_INTENSITY


# =============================================================================
# Path Tracer
# =============================================================================


@ti.data_oriented
class PathTracer:
    """Bounce loop over the rays of one render.

    The scene and camera buffers are read-only while a frame is in flight;
    only the arena is written.

    Attributes:
        scene: Device copy of the scene.
        camera: Device copy of the camera frame.
        arena: Per-ray Ray / Hit / Sample buffers.
        settings: Resolution, sampling and depth parameters.
    """

    def __init__(
        self,
        scene: SceneBuffers,
        camera: CameraFields,
        arena: RenderArena,
        settings: RenderSettings,
    ) -> None:
        if arena.num_rays != settings.num_rays:
            raise ValueError(
                f"Arena holds {arena.num_rays} rays but the settings need {settings.num_rays}"
            )
        self.scene = scene
        self.camera = camera
        self.arena = arena
        self.settings = settings

    # =========================================================================
    # Kernels
    # =========================================================================

    @ti.kernel
    def _generate_primary_rays(
        self,
        frame: ti.i32,
        width: ti.i32,
        height: ti.i32,
        spp: ti.i32,
        max_depth: ti.i32,
    ):
        """Emit one jittered camera ray per (pixel, sample) and reset its Sample."""
        for y, x, s in ti.ndrange(height, width, spp):
            index = (y * width + x) * spp + s
            state = camera_seed(index, frame, max_depth)
            state, r1 = random_float01(state)
            state, r2 = random_float01(state)
            u = (ti.cast(x, ti.f32) + r1) / ti.cast(width, ti.f32)
            v = (ti.cast(y, ti.f32) + r2) / ti.cast(height, ti.f32)
            state, ray = self.camera.get_ray(u, v, state)

            self.arena.rays[index] = ray
            self.arena.hits[index] = make_miss()
            self.arena.samples[index] = Sample(
                color=vec3(0.0, 0.0, 0.0),
                attenuation=vec3(1.0, 1.0, 1.0),
            )

    @ti.kernel
    def _scatter(self, frame: ti.i32, depth: ti.i32, max_depth: ti.i32) -> ti.i32:
        """Shade the current hit of every ACTIVE ray and advance or retire it.

        Returns:
            The number of rays processed at this depth.
        """
        processed = 0
        for i in range(self.arena.rays.shape[0]):
            if self.arena.rays[i].state == int(RayState.ACTIVE):
                processed += 1
                ray = self.arena.rays[i]
                hit = self.arena.hits[i]
                sample = self.arena.samples[i]

                if hit.sphere_id != NO_HIT:
                    sphere_id = hit.sphere_id
                    sample.color += self.scene.material_emissives[sphere_id] * sample.attenuation

                    did_scatter = 0
                    if depth < max_depth:
                        state = bounce_seed(i, frame, depth, max_depth)
                        _, scattered_direction, attenuation, did_scatter = scatter_material(
                            self.scene.material_kinds[sphere_id],
                            self.scene.material_albedos[sphere_id],
                            self.scene.material_parameters[sphere_id],
                            ray.direction,
                            hit.normal,
                            state,
                        )
                        if did_scatter == 1:
                            sample.attenuation *= attenuation
                            ray = make_ray(hit.position, scattered_direction)

                    if did_scatter == 0:
                        ray.state = int(RayState.DONE)
                else:
                    sample.color += sample.attenuation * sky_color(ray.direction)
                    ray.state = int(RayState.DONE)

                self.arena.rays[i] = ray
                self.arena.samples[i] = sample
        return processed

    @ti.kernel
    def _count_active(self) -> ti.i32:
        active = 0
        for i in range(self.arena.rays.shape[0]):
            if self.arena.rays[i].state == int(RayState.ACTIVE):
                active += 1
        return active

    # =========================================================================
    # Public API
    # =========================================================================

    def generate_primary_rays(self, frame: int) -> None:
        """Start a frame: every arena slot gets a fresh ACTIVE camera ray."""
        s = self.settings
        self._generate_primary_rays(
            frame, s.width, s.height, s.samples_per_pixel, s.max_depth
        )

    def bounce(self, frame: int, depth: int) -> int:
        """Run one intersect + scatter step for all ACTIVE rays.

        Returns:
            The number of rays that were ACTIVE at the start of the step.
        """
        s = self.settings
        hit_world(self.arena.rays, self.scene, self.arena.hits, s.t_min, s.t_max)
        return int(self._scatter(frame, depth, s.max_depth))

    def trace_frame(self, frame: int) -> int:
        """Trace every primary ray of a frame to completion.

        On return every ray in the arena is DONE and the Sample buffer holds
        the frame's radiance estimates.

        Args:
            frame: Frame number, starting at 0; part of every RNG seed.

        Returns:
            The number of (ray, bounce) work units processed.
        """
        if frame < 0:
            raise ValueError(f"Frame number must be non-negative, got {frame}")

        self.generate_primary_rays(frame)
        rays = 0
        for depth in range(self.settings.max_depth + 1):
            processed = self.bounce(frame, depth)
            rays += processed
            if processed == 0:
                break

        logger.debug("Frame %d traced %d ray bounces", frame, rays)
        return rays

    def active_ray_count(self) -> int:
        """Number of arena rays that are still ACTIVE."""
        return int(self._count_active())
