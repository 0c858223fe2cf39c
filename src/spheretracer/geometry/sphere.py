"""Sphere primitive and ray-sphere intersection.

Intersection solves |O + tD - C|^2 = r^2 for a unit-length direction D using
the half-b form of the quadratic:

    b = dot(O - C, D)
    c = |O - C|^2 - r^2
    t = -b -/+ sqrt(b^2 - c)

Only a strictly positive discriminant counts as a hit, so a ray that exactly
grazes the sphere (double root) is rejected. The near root is tried first and
the far root second; each must lie strictly inside (t_min, t_max).

The outward normal is (P - C) * inv_radius. It is not re-normalized, which is
why a sphere's radius must be strictly positive; the scene model enforces
that when the scene is built.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.spheretracer.geometry.sphere import make_sphere, hit_sphere
    >>> # Inside a kernel:
    >>> # sphere = make_sphere(vec3(0, 0, -1), 0.5)
    >>> # did_hit, t = hit_sphere(origin, direction, sphere, 0.001, 1.0e7)
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (strictly positive).
        inv_radius: Cached 1 / radius, used for normal computation.
    """

    center: vec3
    radius: ti.f32
    inv_radius: ti.f32


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere with its derived inverse radius filled in."""
    return Sphere(center=center, radius=radius, inv_radius=1.0 / radius)


@ti.func
def hit_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    sphere: Sphere,
    t_min: ti.f32,
    t_max: ti.f32,
):
    """Test a ray against one sphere.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction of the ray (unit length).
        sphere: The sphere to test.
        t_min: Exclusive lower bound on the accepted root.
        t_max: Exclusive upper bound on the accepted root.

    Returns:
        A tuple (did_hit, t): did_hit is 1 when a root lies strictly inside
        (t_min, t_max), and t is that root (nearest first). t is 0 on a miss.
    """
    oc = ray_origin - sphere.center
    b = tm.dot(oc, ray_direction)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = b * b - c

    did_hit = 0
    hit_t = 0.0

    if discriminant > 0.0:
        sqrt_d = tm.sqrt(discriminant)

        t = -b - sqrt_d
        if t < t_max and t > t_min:
            did_hit = 1
            hit_t = t
        else:
            t = -b + sqrt_d
            if t < t_max and t > t_min:
                did_hit = 1
                hit_t = t

    return did_hit, hit_t


@ti.func
def sphere_normal(sphere: Sphere, point: vec3) -> vec3:
    """Outward unit normal at a point on the sphere's surface."""
    return (point - sphere.center) * sphere.inv_radius
