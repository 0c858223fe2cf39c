"""Ray data structure and vector utilities for the sphere path tracer.

This module provides the Ray dataclass with its two-state lifecycle and the
vector helpers used by intersection and scattering (reflect, refract,
Schlick's Fresnel approximation). All operations are Taichi functions so
they can run inside kernels on any backend.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> # Inside a kernel:
    >>> # ray = make_ray(origin, direction)
    >>> # point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


class RayState(IntEnum):
    """Lifecycle of an in-flight ray.

    A ray starts ACTIVE when the camera emits it and moves to DONE once it
    escapes to the sky, is absorbed, or runs out of bounces. The transition
    is one-way for the rest of the frame.
    """

    ACTIVE = 0
    DONE = 1


@ti.dataclass
class Ray:
    """A ray with an origin point, a unit direction and a lifecycle state.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction of the ray (vec3). Always unit length;
            producers (camera, scatter functions) normalize it.
        state: RayState.ACTIVE or RayState.DONE.
    """

    origin: vec3
    direction: vec3
    state: ti.i32


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create an ACTIVE ray from origin and direction.

    Args:
        origin: The starting point of the ray.
        direction: The direction vector (must be normalized).

    Returns:
        A new Ray in the ACTIVE state.
    """
    return Ray(origin=origin, direction=direction, state=int(RayState.ACTIVE))


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t."""
    return ray.origin + t * ray.direction


@ti.func
def is_done(ray: Ray) -> ti.i32:
    """Return 1 if the ray has terminated, 0 otherwise."""
    return ray.state == int(RayState.DONE)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Compute the squared length of a vector."""
    return tm.dot(v, v)


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    Callers guarantee v is non-zero; no guard is applied.
    """
    return v * (1.0 / tm.sqrt(tm.dot(v, v)))


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (unit length).

    Returns:
        The reflected direction, I - 2(I . N)N. Unit length when both inputs
        are unit length.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def refract(incident: vec3, normal: vec3, eta: ti.f32):
    """Refract an incident vector through a surface using Snell's law.

    The normal must face against the incident direction (dot < 0) and both
    vectors must be unit length.

    Args:
        incident: The incoming direction (unit length).
        normal: The surface normal on the incident side (unit length).
        eta: Ratio of refractive indices, n_incident / n_transmitted.

    Returns:
        A tuple (did_refract, refracted) where did_refract is 0 on total
        internal reflection, i.e. when 1 - eta^2 (1 - cos^2) <= 0. The
        refracted vector is zero in that case.
    """
    dt = tm.dot(incident, normal)
    discriminant = 1.0 - eta * eta * (1.0 - dt * dt)
    did_refract = 0
    refracted = vec3(0.0, 0.0, 0.0)
    if discriminant > 0.0:
        did_refract = 1
        refracted = eta * (incident - normal * dt) - normal * tm.sqrt(discriminant)
    return did_refract, refracted


@ti.func
def schlick_fresnel(cosine: ti.f32, ref_idx: ti.f32) -> ti.f32:
    """Compute Fresnel reflectance using Schlick's approximation.

    Args:
        cosine: Cosine of the angle between incident direction and normal.
        ref_idx: Index of refraction of the material.

    Returns:
        The approximate reflection probability.
    """
    r0 = (1.0 - ref_idx) / (1.0 + ref_idx)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * ((1.0 - cosine) ** 5)
