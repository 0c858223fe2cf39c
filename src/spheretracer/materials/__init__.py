"""Materials module for the light-scattering models.

Components:
    base: Shared material fields, the MaterialKind tag and dict loading
    lambertian: Ideal diffuse reflection
    metal: Specular reflection with optional roughness
    dielectric: Glass-like materials with refraction (Schlick Fresnel)
    dispatch: Kernel-side routing from a material kind to its scatter function

Every material carries an albedo and an emissive color. Any material can
emit; emission is added by the integrator before scattering.

Scatter functions are Taichi functions that take the RNG state and return
(new_state, scattered_direction, attenuation, did_scatter).
"""

from .base import (
    INVALID_MATERIAL_COLOR,
    Material,
    MaterialKind,
    material_from_dict,
)
from .dielectric import Dielectric, scatter_dielectric
from .dispatch import scatter_material
from .lambertian import Lambertian, scatter_lambertian
from .metal import Metal, scatter_metal

__all__ = [
    # Shared
    "Material",
    "MaterialKind",
    "INVALID_MATERIAL_COLOR",
    "material_from_dict",
    "scatter_material",
    # Lambertian
    "Lambertian",
    "scatter_lambertian",
    # Metal
    "Metal",
    "scatter_metal",
    # Dielectric
    "Dielectric",
    "scatter_dielectric",
]
