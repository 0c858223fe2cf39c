"""Dielectric (glass/water) material implementation.

This module implements the dielectric BSDF, which models transparent materials
like glass and water with refraction and Fresnel reflectance.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Schlick's approximation for Fresnel reflectance
    - Total internal reflection when 1 - eta^2 (1 - cos^2 theta) <= 0

Hit normals always point out of the sphere, so the side of the surface the
ray arrives from is read off the sign of dot(direction, normal): positive
means the ray is inside and leaving. The material randomly chooses between
reflection and refraction based on the Fresnel reflectance probability, and
always reflects under total internal reflection.

Example:
    >>> from src.spheretracer.materials.dielectric import Dielectric
    >>> glass = Dielectric(ior=1.5)
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from src.spheretracer.core.ray import (
    normalize,
    reflect,
    refract,
    schlick_fresnel,
)
from src.spheretracer.core.rng import random_float01
from src.spheretracer.materials.base import Material, MaterialKind, register_material

# Type alias for 3D vectors
vec3 = tm.vec3


@register_material
@dataclass(frozen=True)
class Dielectric(Material):
    """Dielectric (glass/water) material properties.

    The albedo is kept for symmetry with the other variants but does not
    tint light: a dielectric's attenuation is always white.

    Attributes:
        ior: Index of refraction. Common values:
            - Air: 1.0
            - Water: 1.33
            - Glass: 1.5
            - Diamond: 2.4
    """

    ior: float = 1.5

    kind = int(MaterialKind.DIELECTRIC)
    type_name = "dielectric"

    def __post_init__(self) -> None:
        super().__post_init__()
        if not self.ior >= 1.0:
            raise ValueError(
                f"Index of refraction = {self.ior} is less than 1.0. "
                "IOR must be >= 1.0 for physically meaningful materials."
            )

    @property
    def parameter(self) -> float:
        return self.ior


@ti.func
def dielectric_interface(ior: ti.f32, incident_direction: vec3, normal: vec3):
    """Resolve which side of the surface the ray is on.

    Args:
        ior: Index of refraction of the material.
        incident_direction: The incoming ray direction (unit length).
        normal: The outward surface normal (unit length).

    Returns:
        A tuple (facing_normal, eta, cosine) where facing_normal points back
        toward the incoming ray, eta is the ratio of refractive indices
        across the interface, and cosine is the value fed to Schlick.
    """
    d = tm.dot(incident_direction, normal)
    facing_normal = normal
    eta = 1.0 / ior
    cosine = -d
    if d > 0.0:
        # Leaving the material
        facing_normal = -normal
        eta = ior
        cosine = ior * d
    return facing_normal, eta, cosine


@ti.func
def reflection_probability(ior: ti.f32, incident_direction: vec3, normal: vec3) -> ti.f32:
    """Probability of choosing reflection over refraction.

    Returns:
        1.0 under total internal reflection, otherwise Schlick's Fresnel
        reflectance for the incident angle.
    """
    facing_normal, eta, cosine = dielectric_interface(ior, incident_direction, normal)
    did_refract, _ = refract(incident_direction, facing_normal, eta)
    probability = 1.0
    if did_refract == 1:
        probability = schlick_fresnel(cosine, ior)
    return probability


@ti.func
def scatter_dielectric(
    ior: ti.f32,
    incident_direction: vec3,
    normal: vec3,
    state: ti.u32,
):
    """Compute scattered ray direction for dielectric material.

    Args:
        ior: Index of refraction of the material.
        incident_direction: The incoming ray direction (unit length).
        normal: The outward surface normal (unit length).
        state: The RNG state for this ray and bounce.

    Returns:
        A tuple (new_state, scattered_direction, attenuation, did_scatter).
        The attenuation is white (no absorption) and did_scatter is always 1.
    """
    attenuation = vec3(1.0, 1.0, 1.0)

    reflected = reflect(incident_direction, normal)
    facing_normal, eta, _ = dielectric_interface(ior, incident_direction, normal)
    did_refract, refracted = refract(incident_direction, facing_normal, eta)
    reflect_prob = reflection_probability(ior, incident_direction, normal)

    s, u = random_float01(state)
    scattered_direction = vec3(0.0, 0.0, 0.0)
    if u < reflect_prob:
        scattered_direction = normalize(reflected)
    else:
        scattered_direction = normalize(refracted)

    return s, scattered_direction, attenuation, 1
