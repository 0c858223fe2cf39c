"""Device-side copy of a Scene.

SceneBuffers uploads an immutable Scene into Taichi fields once, when a
render is set up, and is read-only afterwards. Spheres and materials use a
Structure of Arrays layout indexed by sphere id.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.spheretracer.scene.buffers import SceneBuffers
    >>> from src.spheretracer.scene.presets import create_default_scene
    >>> buffers = SceneBuffers(create_default_scene())
    >>> buffers.sphere_count
    9
"""

from __future__ import annotations

import numpy as np
import taichi as ti

from src.spheretracer.geometry.sphere import Sphere
from src.spheretracer.scene.model import Scene


@ti.data_oriented
class SceneBuffers:
    """Taichi fields holding the spheres and materials of one scene.

    Attributes:
        spheres: Sphere struct field (center, radius, inv_radius).
        material_kinds: MaterialKind tag per sphere id.
        material_albedos: Albedo per sphere id.
        material_emissives: Emissive color per sphere id.
        material_parameters: Roughness / ior / 0 per sphere id.
        count: 0-d field with the number of spheres.
    """

    def __init__(self, scene: Scene) -> None:
        n = len(scene)
        self._scene = scene

        self.spheres = Sphere.field(shape=n)
        self.material_kinds = ti.field(dtype=ti.i32, shape=n)
        self.material_albedos = ti.Vector.field(3, dtype=ti.f32, shape=n)
        self.material_emissives = ti.Vector.field(3, dtype=ti.f32, shape=n)
        self.material_parameters = ti.field(dtype=ti.f32, shape=n)
        self.count = ti.field(dtype=ti.i32, shape=())

        self._upload(scene)

    def _upload(self, scene: Scene) -> None:
        centers = np.array([s.center for s in scene.spheres], dtype=np.float32)
        radii = np.array([s.radius for s in scene.spheres], dtype=np.float32)

        self.spheres.center.from_numpy(centers)
        self.spheres.radius.from_numpy(radii)
        self.spheres.inv_radius.from_numpy((1.0 / radii).astype(np.float32))

        self.material_kinds.from_numpy(
            np.array([m.kind for m in scene.materials], dtype=np.int32)
        )
        self.material_albedos.from_numpy(
            np.array([m.albedo for m in scene.materials], dtype=np.float32)
        )
        self.material_emissives.from_numpy(
            np.array([m.emissive for m in scene.materials], dtype=np.float32)
        )
        self.material_parameters.from_numpy(
            np.array([m.parameter for m in scene.materials], dtype=np.float32)
        )
        self.count[None] = len(scene)

    @property
    def scene(self) -> Scene:
        """The scene these buffers were built from."""
        return self._scene

    @property
    def sphere_count(self) -> int:
        return int(self.count[None])
