"""Unit tests for the scene model, device buffers, presets and settings.

Tests cover:
- Scene validation (empty, mismatched lengths, bad radius, wrong types)
- describe(), to_dict() and from_dict()
- SceneBuffers upload of spheres and flattened materials
- The default scene and camera
- RenderSettings validation and derived values
"""

import json

import numpy as np
import pytest


class TestSphereInfo:
    def test_center_converted_to_floats(self):
        from src.spheretracer.scene.model import SphereInfo

        sphere = SphereInfo((1, 2, 3), 2.0)
        assert sphere.center == (1.0, 2.0, 3.0)
        assert sphere.inv_radius == 0.5

    @pytest.mark.parametrize("radius", [0.0, -1.0, float("nan"), float("inf")])
    def test_non_positive_radius_rejected(self, radius):
        from src.spheretracer.scene.model import SphereInfo

        with pytest.raises(ValueError, match="radius"):
            SphereInfo((0.0, 0.0, 0.0), radius)

    def test_bad_center_rejected(self):
        from src.spheretracer.scene.model import SphereInfo

        with pytest.raises(ValueError, match="3 components"):
            SphereInfo((0.0, 0.0), 1.0)
        with pytest.raises(ValueError, match="not finite"):
            SphereInfo((0.0, float("nan"), 0.0), 1.0)


class TestScene:
    def test_empty_scene_rejected(self):
        from src.spheretracer.scene.model import Scene

        with pytest.raises(ValueError, match="at least one sphere"):
            Scene(spheres=(), materials=())

    def test_length_mismatch_rejected(self):
        from src.spheretracer.materials import Lambertian
        from src.spheretracer.scene.model import Scene, SphereInfo

        with pytest.raises(ValueError, match="exactly one material"):
            Scene(
                spheres=(SphereInfo((0, 0, 0), 1.0), SphereInfo((0, 0, 3), 1.0)),
                materials=(Lambertian(),),
            )

    def test_wrong_types_rejected(self):
        from src.spheretracer.materials import Lambertian
        from src.spheretracer.scene.model import Scene, SphereInfo

        with pytest.raises(ValueError, match="not a SphereInfo"):
            Scene(spheres=(((0, 0, 0), 1.0),), materials=(Lambertian(),))
        with pytest.raises(ValueError, match="not a Material"):
            Scene(spheres=(SphereInfo((0, 0, 0), 1.0),), materials=({"type": "metal"},))

    def test_lists_stored_as_tuples(self):
        from src.spheretracer.materials import Lambertian
        from src.spheretracer.scene.model import Scene, SphereInfo

        scene = Scene(spheres=[SphereInfo((0, 0, 0), 1.0)], materials=[Lambertian()])
        assert isinstance(scene.spheres, tuple)
        assert isinstance(scene.materials, tuple)
        assert len(scene) == 1

    def test_describe(self):
        from src.spheretracer.scene.presets import create_default_scene

        summary = create_default_scene().describe()
        assert summary["object_count"] == 9
        assert summary["material_counts"] == {"lambertian": 4, "metal": 4, "dielectric": 1}
        assert summary["emitter_count"] == 1

    def test_dict_round_trip_through_json(self):
        from src.spheretracer.scene.model import Scene
        from src.spheretracer.scene.presets import create_default_scene

        scene = create_default_scene()
        loaded = Scene.from_dict(json.loads(json.dumps(scene.to_dict())))
        assert loaded == scene

    def test_from_dict_malformed(self):
        from src.spheretracer.scene.model import Scene

        with pytest.raises(ValueError, match="Sphere entry 0"):
            Scene.from_dict({"spheres": [{"center": [0, 0, 0]}]})
        with pytest.raises(ValueError, match="Unknown material type"):
            Scene.from_dict(
                {"spheres": [{"center": [0, 0, 0], "radius": 1, "material": {"type": "x"}}]}
            )


class TestSceneBuffers:
    def test_upload(self):
        from src.spheretracer.materials import MaterialKind
        from src.spheretracer.scene.buffers import SceneBuffers
        from src.spheretracer.scene.presets import create_default_scene

        scene = create_default_scene()
        buffers = SceneBuffers(scene)

        assert buffers.sphere_count == 9
        assert buffers.scene is scene
        np.testing.assert_allclose(buffers.spheres.center.to_numpy()[0], [0.0, -100.5, -1.0])
        np.testing.assert_allclose(buffers.spheres.inv_radius.to_numpy()[0], 0.01, rtol=1e-6)

        kinds = buffers.material_kinds.to_numpy()
        assert kinds[0] == MaterialKind.LAMBERTIAN
        assert kinds[3] == MaterialKind.METAL
        assert kinds[7] == MaterialKind.DIELECTRIC

        params = buffers.material_parameters.to_numpy()
        np.testing.assert_allclose(params[[0, 5, 6, 7]], [0.0, 0.2, 0.6, 1.5], rtol=1e-6)
        np.testing.assert_allclose(buffers.material_emissives.to_numpy()[8], [30.0, 25.0, 15.0])


class TestPresets:
    def test_default_scene_layout(self):
        from src.spheretracer.materials import Dielectric, Lambertian, Metal
        from src.spheretracer.scene.presets import create_default_scene

        scene = create_default_scene()
        assert scene.spheres[0].radius == 100.0
        assert [type(m) for m in scene.materials] == [
            Lambertian, Lambertian, Lambertian, Metal, Metal, Metal, Metal, Dielectric, Lambertian
        ]
        assert [m.parameter for m in scene.materials[4:7]] == [0.0, 0.2, 0.6]
        assert scene.materials[8].emissive == (30.0, 25.0, 15.0)
        assert scene.spheres[8].radius == 0.3

    def test_default_camera(self):
        from src.spheretracer.scene.presets import create_default_camera

        camera = create_default_camera()
        assert camera.lookfrom == (0.0, 2.0, 3.0)
        assert camera.lookat == (0.0, 0.0, 0.0)
        assert camera.vfov == 60.0
        assert camera.aperture == 0.1
        assert camera.focus_dist == 3.0


class TestRenderSettings:
    def test_defaults_and_derived(self):
        from src.spheretracer.core.settings import RenderSettings

        settings = RenderSettings(width=320, height=180)
        assert settings.samples_per_pixel == 4
        assert settings.max_depth == 10
        assert settings.frame_count == 1
        assert settings.progressive is True
        assert settings.t_min == 0.001
        assert settings.t_max == 1.0e7
        assert settings.num_rays == 320 * 180 * 4
        assert settings.aspect_ratio == pytest.approx(16 / 9)

    def test_zero_depth_allowed(self):
        from src.spheretracer.core.settings import RenderSettings

        assert RenderSettings(width=1, height=1, max_depth=0).max_depth == 0

    @pytest.mark.parametrize(
        "kwargs, match",
        [
            ({"width": 0}, "width"),
            ({"height": -1}, "height"),
            ({"samples_per_pixel": 0}, "samples_per_pixel"),
            ({"frame_count": 0}, "frame_count"),
            ({"max_depth": -1}, "max_depth"),
            ({"t_min": 1.0, "t_max": 0.5}, "t_min < t_max"),
            ({"t_min": -0.1}, "t_min < t_max"),
        ],
    )
    def test_invalid(self, kwargs, match):
        from src.spheretracer.core.settings import RenderSettings

        params = {"width": 4, "height": 4}
        params.update(kwargs)
        with pytest.raises(ValueError, match=match):
            RenderSettings(**params)
