"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive with ray-sphere intersection

Spheres are the only primitive. Intersection routines are Taichi functions
(@ti.func) so they can be called from the batch intersector kernel.

Ray-object intersection follows the pattern:
    did_hit, t = hit_sphere(ray_origin, ray_direction, sphere, t_min, t_max)
"""

from .sphere import Sphere, hit_sphere, make_sphere, sphere_normal

__all__ = [
    "Sphere",
    "hit_sphere",
    "make_sphere",
    "sphere_normal",
]
