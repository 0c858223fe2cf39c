"""Metal (specular reflective) material implementation.

This module implements the metal BSDF, which models specular reflection with
optional roughness (fuzziness). Perfect metals (roughness=0) produce mirror-like
reflections, while rougher metals scatter reflected rays within a cone.

The reflection formula is:
    R = I - 2(I . N)N

where I is the incident direction and N is the surface normal.

For rough metals, the reflected direction is perturbed by a random point in
the unit sphere scaled by the roughness. A perturbed direction that ends up
below the surface is absorbed, which darkens rough metals at grazing angles
the way self-shadowing microfacets would.

Example:
    >>> from src.spheretracer.materials.metal import Metal
    >>> mirror = Metal(albedo=(0.4, 0.4, 0.8))
    >>> brushed = Metal(albedo=(0.4, 0.8, 0.4), roughness=0.6)
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from src.spheretracer.core.ray import normalize, reflect
from src.spheretracer.core.rng import random_in_unit_sphere
from src.spheretracer.materials.base import Material, MaterialKind, register_material

# Type alias for 3D vectors
vec3 = tm.vec3


@register_material
@dataclass(frozen=True)
class Metal(Material):
    """Metal (specular reflective) material properties.

    Attributes:
        roughness: The surface fuzziness in [0, 1].
            0 = perfect mirror, 1 = maximum fuzziness.
    """

    roughness: float = 0.0

    kind = int(MaterialKind.METAL)
    type_name = "metal"

    def __post_init__(self) -> None:
        super().__post_init__()
        if not 0.0 <= self.roughness <= 1.0:
            raise ValueError(
                f"Roughness = {self.roughness} is outside [0, 1]. "
                "Roughness must be between 0 (perfect mirror) and 1 (maximum fuzz)."
            )

    @property
    def parameter(self) -> float:
        return self.roughness


@ti.func
def scatter_metal(
    albedo: vec3,
    roughness: ti.f32,
    incident_direction: vec3,
    normal: vec3,
    state: ti.u32,
):
    """Compute scattered ray direction for metal material.

    Args:
        albedo: The reflective color (RGB).
        roughness: The surface roughness in [0, 1]. 0 = perfect mirror.
        incident_direction: The incoming ray direction (unit length).
        normal: The outward surface normal (unit length).
        state: The RNG state for this ray and bounce.

    Returns:
        A tuple (new_state, scattered_direction, attenuation, did_scatter)
        where did_scatter is 0 when the fuzzed reflection points into the
        surface (dot with the normal is not positive).
    """
    reflected = reflect(incident_direction, normal)

    s, fuzz = random_in_unit_sphere(state)
    scattered_direction = normalize(reflected + roughness * fuzz)

    did_scatter = 0
    if tm.dot(scattered_direction, normal) > 0.0:
        did_scatter = 1

    return s, scattered_direction, albedo, did_scatter
