"""Material dispatch for the scatter pass.

Routes a hit to the scatter function of its material kind. A kind outside
MaterialKind is a scene defect: the bounce fails and reports the diagnostic
magenta attenuation so the condition is visible in tests.
"""

import taichi as ti
import taichi.math as tm

from src.spheretracer.materials.base import INVALID_MATERIAL_COLOR, MaterialKind
from src.spheretracer.materials.dielectric import scatter_dielectric
from src.spheretracer.materials.lambertian import scatter_lambertian
from src.spheretracer.materials.metal import scatter_metal

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def scatter_material(
    kind: ti.i32,
    albedo: vec3,
    parameter: ti.f32,
    incident_direction: vec3,
    normal: vec3,
    state: ti.u32,
):
    """Dispatch to the appropriate material scattering function.

    Args:
        kind: The MaterialKind of the hit material.
        albedo: The material's albedo.
        parameter: Roughness for metals, index of refraction for dielectrics.
        incident_direction: The incoming ray direction (unit length).
        normal: The outward surface normal at the hit point (unit length).
        state: The RNG state for this ray and bounce.

    Returns:
        A tuple (new_state, scattered_direction, attenuation, did_scatter).
    """
    s = state
    scattered_direction = vec3(0.0, 0.0, 0.0)
    attenuation = INVALID_MATERIAL_COLOR
    did_scatter = 0

    if kind == int(MaterialKind.LAMBERTIAN):
        s, scattered_direction, attenuation, did_scatter = scatter_lambertian(
            albedo, normal, state
        )
    elif kind == int(MaterialKind.METAL):
        s, scattered_direction, attenuation, did_scatter = scatter_metal(
            albedo, parameter, incident_direction, normal, state
        )
    elif kind == int(MaterialKind.DIELECTRIC):
        s, scattered_direction, attenuation, did_scatter = scatter_dielectric(
            parameter, incident_direction, normal, state
        )

    return s, scattered_direction, attenuation, did_scatter
