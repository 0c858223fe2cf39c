"""Lambertian (ideal diffuse) material implementation.

The scattered direction is the surface normal plus a uniformly distributed
unit vector, normalized. The sum lands in the hemisphere around the normal
with a cosine-weighted density, so the attenuation is simply the albedo and
no explicit PDF is needed.

Example:
    >>> from src.spheretracer.materials.lambertian import Lambertian
    >>> ground = Lambertian(albedo=(0.8, 0.8, 0.8))
    >>> lamp = Lambertian(albedo=(0.8, 0.6, 0.2), emissive=(30.0, 25.0, 15.0))
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from src.spheretracer.core.ray import normalize
from src.spheretracer.core.rng import random_unit_vector
from src.spheretracer.materials.base import Material, MaterialKind, register_material

# Type alias for 3D vectors
vec3 = tm.vec3


@register_material
@dataclass(frozen=True)
class Lambertian(Material):
    """Diffuse material. Uses only the shared albedo and emissive fields."""

    kind = int(MaterialKind.LAMBERTIAN)
    type_name = "lambertian"


@ti.func
def scatter_lambertian(albedo: vec3, normal: vec3, state: ti.u32):
    """Compute a diffuse bounce.

    Args:
        albedo: The diffuse reflectance color (RGB).
        normal: The outward surface normal at the hit point (unit length).
        state: The RNG state for this ray and bounce.

    Returns:
        A tuple (new_state, scattered_direction, attenuation, did_scatter).
        Diffuse surfaces always scatter.
    """
    s, offset = random_unit_vector(state)
    scattered_direction = normalize(normal + offset)
    return s, scattered_direction, albedo, 1
