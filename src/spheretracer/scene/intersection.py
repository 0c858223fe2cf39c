"""Scene-level ray intersection testing.

This module finds the nearest sphere hit for a single ray and, batched, for
every in-flight ray of a frame.

The scan visits spheres in index order and narrows the accepted interval to
(t_min, closest) after every hit, so of two equally near roots the first
sphere found keeps the hit. Rays that are already DONE are skipped entirely;
their hit records are left as they were and must not be read.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.spheretracer.scene.intersection import hit_world
    >>> # hit_world(arena.rays, scene_buffers, arena.hits, T_MIN, T_MAX)
"""

import taichi as ti
import taichi.math as tm

from src.spheretracer.core.ray import RayState
from src.spheretracer.geometry.sphere import hit_sphere, sphere_normal

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Sphere id recorded when a ray misses every sphere
NO_HIT = -1


@ti.dataclass
class Hit:
    """Record of a ray-scene intersection.

    Attributes:
        position: The 3D point where the ray intersected the surface.
        normal: The outward surface normal at the hit point (unit length).
            Not flipped toward the ray; scatter functions read the side from
            the sign of dot(direction, normal).
        t: The ray parameter of the intersection.
        sphere_id: Index of the hit sphere, or NO_HIT (-1) on a miss.
    """

    position: vec3
    normal: vec3
    t: ti.f32
    sphere_id: ti.i32


@ti.func
def make_miss() -> Hit:
    """Create a Hit indicating no intersection."""
    return Hit(
        position=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        t=0.0,
        sphere_id=NO_HIT,
    )


@ti.func
def intersect_scene(
    scene: ti.template(),
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f32,
    t_max: ti.f32,
) -> Hit:
    """Find the nearest sphere hit along a ray.

    Args:
        scene: SceneBuffers holding the spheres.
        ray_origin: The starting point of the ray.
        ray_direction: The direction of the ray (unit length).
        t_min: Exclusive lower bound on accepted hits.
        t_max: Exclusive upper bound on accepted hits.

    Returns:
        The closest Hit, or a miss record with sphere_id == NO_HIT.
    """
    closest_t = t_max
    hit_id = NO_HIT

    for i in range(scene.count[None]):
        did_hit, t = hit_sphere(ray_origin, ray_direction, scene.spheres[i], t_min, closest_t)
        if did_hit == 1:
            closest_t = t
            hit_id = i

    result = make_miss()
    if hit_id != NO_HIT:
        position = ray_origin + closest_t * ray_direction
        result = Hit(
            position=position,
            normal=sphere_normal(scene.spheres[hit_id], position),
            t=closest_t,
            sphere_id=hit_id,
        )
    return result


@ti.kernel
def hit_world(
    rays: ti.template(),
    scene: ti.template(),
    hits: ti.template(),
    t_min: ti.f32,
    t_max: ti.f32,
):
    """Intersect every ACTIVE ray with the scene.

    Args:
        rays: Ray field of the render arena.
        scene: SceneBuffers holding the spheres.
        hits: Hit field of the render arena, written for ACTIVE rays only.
        t_min: Exclusive lower bound on accepted hits.
        t_max: Exclusive upper bound on accepted hits.
    """
    for i in range(rays.shape[0]):
        if rays[i].state == int(RayState.ACTIVE):
            hits[i] = intersect_scene(scene, rays[i].origin, rays[i].direction, t_min, t_max)
