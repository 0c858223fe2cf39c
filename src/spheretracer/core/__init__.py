"""Core rendering module.

This module contains the fundamental building blocks of the path tracer:

Components:
    ray: Ray data structure, ray lifecycle and vector utilities
    rng: Deterministic hash-based random numbers
    settings: Render parameters and renderer-wide constants
    arena: Per-ray Ray / Hit / Sample buffers
    integrator: Depth-limited bounce loop over a frame of rays
    accumulator: Blending of frames into the backbuffer
    progressive: Progressive renderer and the render() entry point

All compute-intensive operations use Taichi kernels.
"""

from .ray import (
    Ray,
    RayState,
    is_done,
    length_squared,
    make_ray,
    normalize,
    ray_at,
    reflect,
    refract,
    schlick_fresnel,
    vec3,
)
from .rng import (
    bounce_seed,
    camera_seed,
    random_float01,
    random_in_unit_disk,
    random_in_unit_sphere,
    random_unit_vector,
    wang_hash,
)
from .settings import MAX_DEPTH, SAMPLES_PER_PIXEL, T_MAX, T_MIN, RenderSettings

# Note: arena, integrator, accumulator and progressive are NOT imported here to
# avoid circular imports (they depend on the scene and camera packages).
# Import them directly, e.g.:
#   from src.spheretracer.core.progressive import ProgressiveRenderer, render

__all__ = [
    "Ray",
    "RayState",
    "make_ray",
    "ray_at",
    "is_done",
    "vec3",
    "length_squared",
    "normalize",
    "reflect",
    "refract",
    "schlick_fresnel",
    "wang_hash",
    "bounce_seed",
    "camera_seed",
    "random_float01",
    "random_in_unit_disk",
    "random_in_unit_sphere",
    "random_unit_vector",
    "RenderSettings",
    "T_MIN",
    "T_MAX",
    "MAX_DEPTH",
    "SAMPLES_PER_PIXEL",
]
