"""Deterministic hash-based random numbers for Monte Carlo sampling.

Every random decision in the renderer draws from a small 32-bit state that is
seeded from the logical work item only: the sample (ray) index, the frame
number and the bounce depth. Nothing depends on the physical thread or on
execution order, so a frame renders bit-identically no matter how the ray
loop is split across workers or backends.

The seed is built from a Wang integer hash of the index, mixed with the frame
and depth through two fixed odd multipliers. Each draw advances the state
with a linear congruential step and turns the top 23 bits into the mantissa
of a float in [1, 2), then subtracts one.

All samplers are functional: they take the current state and return the
advanced state together with the sample, e.g.::

    state, x = random_float01(state)
    state, p = random_in_unit_sphere(state)
"""

import taichi as ti
import taichi.math as tm

from src.spheretracer.core.ray import vec3

# Seed mixing multipliers (odd, so the mix is a bijection mod 2^32)
FRAME_DEPTH_MULTIPLIER = 101141101
SEED_MULTIPLIER = 336343633

# Numerical Recipes LCG constants
LCG_MULTIPLIER = 1664525
LCG_INCREMENT = 1013904223

# IEEE-754 bit pattern of 1.0f; OR-ing in 23 random mantissa bits gives [1, 2)
FLOAT_ONE_BITS = 0x3F800000


@ti.func
def wang_hash(seed: ti.u32) -> ti.u32:
    """Scramble a 32-bit integer with Thomas Wang's hash."""
    h = (seed ^ ti.cast(61, ti.u32)) ^ (seed >> 16)
    h *= ti.cast(9, ti.u32)
    h = h ^ (h >> 4)
    h *= ti.cast(0x27D4EB2D, ti.u32)
    h = h ^ (h >> 15)
    return h


@ti.func
def bounce_seed(index: ti.i32, frame: ti.i32, depth: ti.i32, max_depth: ti.i32) -> ti.u32:
    """Seed for the scatter decision of one ray at one bounce.

    Args:
        index: Logical ray (sample) index within the frame.
        frame: Frame number, starting at 0.
        depth: Bounce depth, starting at 0.
        max_depth: The render's maximum bounce depth.

    Returns:
        The initial RNG state.
    """
    mix = ti.cast(frame, ti.u32) * ti.cast(max_depth, ti.u32) + ti.cast(depth, ti.u32)
    hashed = wang_hash(ti.cast(index, ti.u32))
    return (hashed + mix * ti.cast(FRAME_DEPTH_MULTIPLIER, ti.u32)) * ti.cast(
        SEED_MULTIPLIER, ti.u32
    )


@ti.func
def camera_seed(index: ti.i32, frame: ti.i32, max_depth: ti.i32) -> ti.u32:
    """Seed for primary ray generation (pixel jitter and lens sample)."""
    return bounce_seed(index, frame, 0, max_depth) | ti.cast(1, ti.u32)


@ti.func
def random_float01(state: ti.u32):
    """Draw a uniform float in [0, 1).

    Returns:
        A tuple (new_state, value).
    """
    s = state * ti.cast(LCG_MULTIPLIER, ti.u32) + ti.cast(LCG_INCREMENT, ti.u32)
    bits = (s >> 9) | ti.cast(FLOAT_ONE_BITS, ti.u32)
    return s, ti.bit_cast(bits, ti.f32) - 1.0


@ti.func
def random_in_unit_disk(state: ti.u32):
    """Uniform point inside the unit disk in the xy-plane, by rejection.

    Returns:
        A tuple (new_state, point) with point.z == 0 and x^2 + y^2 < 1.
    """
    s = state
    p = vec3(1.0, 1.0, 0.0)
    while p.x * p.x + p.y * p.y >= 1.0:
        s, a = random_float01(s)
        s, b = random_float01(s)
        p = vec3(2.0 * a - 1.0, 2.0 * b - 1.0, 0.0)
    return s, p


@ti.func
def random_in_unit_sphere(state: ti.u32):
    """Uniform point inside the unit sphere, by rejection.

    Returns:
        A tuple (new_state, point) with |point| < 1.
    """
    s = state
    p = vec3(1.0, 1.0, 1.0)
    while tm.dot(p, p) >= 1.0:
        s, a = random_float01(s)
        s, b = random_float01(s)
        s, c = random_float01(s)
        p = vec3(2.0 * a - 1.0, 2.0 * b - 1.0, 2.0 * c - 1.0)
    return s, p


@ti.func
def random_unit_vector(state: ti.u32):
    """Uniform direction on the unit sphere.

    Picks z uniformly in [-1, 1) and an azimuth uniformly in [0, 2*pi),
    which is area-uniform on the sphere (Archimedes' hat-box theorem).

    Returns:
        A tuple (new_state, direction) with |direction| == 1.
    """
    s, rz = random_float01(state)
    s, ra = random_float01(s)
    z = rz * 2.0 - 1.0
    a = ra * 2.0 * tm.pi
    r = tm.sqrt(tm.max(1.0 - z * z, 0.0))
    return s, vec3(r * tm.cos(a), r * tm.sin(a), z)
