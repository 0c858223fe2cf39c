"""Unit tests for the Ray structure and vector utilities.

Tests cover:
- Ray creation and lifecycle state
- Point along a ray
- normalize / reflect / refract keep unit length
- Total internal reflection detection
- Schlick's Fresnel approximation at the end points
"""

import math

import numpy as np
import pytest
import taichi as ti


class TestRayBasics:
    """Tests for make_ray, ray_at and is_done."""

    def test_make_ray_is_active(self):
        from src.spheretracer.core.ray import RayState, is_done, make_ray, vec3

        state = ti.field(dtype=ti.i32, shape=())
        done = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0))
            state[None] = ray.state
            done[None] = is_done(ray)

        test_kernel()
        assert state[None] == RayState.ACTIVE
        assert done[None] == 0

    def test_is_done_after_transition(self):
        from src.spheretracer.core.ray import RayState, is_done, make_ray, vec3

        done = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0))
            ray.state = int(RayState.DONE)
            done[None] = is_done(ray)

        test_kernel()
        assert done[None] == 1

    def test_ray_at(self):
        from src.spheretracer.core.ray import make_ray, ray_at, vec3

        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(1.0, 2.0, 3.0), vec3(0.0, 0.0, -1.0))
            result[None] = ray_at(ray, 5.0)

        test_kernel()
        p = result[None]
        assert p[0] == pytest.approx(1.0)
        assert p[1] == pytest.approx(2.0)
        assert p[2] == pytest.approx(-2.0)


class TestVectorUtilities:
    """Tests for normalize, reflect, refract and schlick_fresnel."""

    def test_normalize(self):
        from src.spheretracer.core.ray import length_squared, normalize, vec3

        result = ti.Vector.field(3, dtype=ti.f32, shape=())
        len_sq = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            n = normalize(vec3(3.0, 0.0, 4.0))
            result[None] = n
            len_sq[None] = length_squared(n)

        test_kernel()
        n = result[None]
        assert n[0] == pytest.approx(0.6, abs=1e-6)
        assert n[2] == pytest.approx(0.8, abs=1e-6)
        assert len_sq[None] == pytest.approx(1.0, abs=1e-5)

    def test_reflect_flips_normal_component(self):
        from src.spheretracer.core.ray import reflect, vec3

        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            s = 1.0 / ti.sqrt(2.0)
            result[None] = reflect(vec3(s, -s, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        r = result[None]
        s = 1.0 / math.sqrt(2.0)
        assert r[0] == pytest.approx(s, abs=1e-6)
        assert r[1] == pytest.approx(s, abs=1e-6)
        assert r[2] == pytest.approx(0.0, abs=1e-6)

    def test_reflect_and_refract_keep_unit_length(self):
        """Unit inputs give unit outputs across a sweep of incident angles."""
        from src.spheretracer.core.ray import reflect, refract, vec3

        n = 32
        reflected_len = ti.field(dtype=ti.f32, shape=n)
        refracted_len = ti.field(dtype=ti.f32, shape=n)
        did = ti.field(dtype=ti.i32, shape=n)

        @ti.kernel
        def test_kernel():
            normal = vec3(0.0, 1.0, 0.0)
            for i in range(n):
                angle = (ti.cast(i, ti.f32) + 0.5) / n * (0.5 * math.pi)
                incident = vec3(ti.sin(angle), -ti.cos(angle), 0.0)
                reflected_len[i] = reflect(incident, normal).norm()
                ok, refracted = refract(incident, normal, 1.0 / 1.5)
                did[i] = ok
                refracted_len[i] = refracted.norm()

        test_kernel()
        for i in range(n):
            assert reflected_len[i] == pytest.approx(1.0, abs=1e-4)
            # Entering a denser medium never totally reflects
            assert did[i] == 1
            assert refracted_len[i] == pytest.approx(1.0, abs=1e-4)

    def test_refract_total_internal_reflection(self):
        from src.spheretracer.core.ray import refract, vec3

        did = ti.field(dtype=ti.i32, shape=())
        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            # 60 degrees from the normal, leaving glass (eta = 1.5)
            incident = vec3(ti.sin(math.pi / 3.0), -ti.cos(math.pi / 3.0), 0.0)
            ok, refracted = refract(incident, vec3(0.0, 1.0, 0.0), 1.5)
            did[None] = ok
            result[None] = refracted

        test_kernel()
        assert did[None] == 0
        assert np.linalg.norm(result[None].to_numpy()) == 0.0

    def test_refract_with_unit_eta_is_identity(self):
        from src.spheretracer.core.ray import normalize, refract, vec3

        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            incident = normalize(vec3(0.3, -0.8, 0.2))
            _, refracted = refract(incident, vec3(0.0, 1.0, 0.0), 1.0)
            result[None] = refracted - incident

        test_kernel()
        assert np.linalg.norm(result[None].to_numpy()) < 1e-5

    def test_schlick_end_points(self):
        from src.spheretracer.core.ray import schlick_fresnel

        at_normal = ti.field(dtype=ti.f32, shape=())
        at_grazing = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            at_normal[None] = schlick_fresnel(1.0, 1.5)
            at_grazing[None] = schlick_fresnel(0.0, 1.5)

        test_kernel()
        assert at_normal[None] == pytest.approx(0.04, abs=1e-6)
        assert at_grazing[None] == pytest.approx(1.0, abs=1e-6)
