"""Immutable scene description.

A Scene is a fixed, ordered list of spheres with a parallel list of
materials: sphere ``i`` is shaded by material ``i``. The order matters, since
the intersector scans spheres in index order and the first of two equally
near hits wins.

Scenes are validated once, at construction, so that nothing has to be
checked while rays are in flight. In particular every radius must be
strictly positive because hit normals are computed with the cached inverse
radius.

Example:
    >>> from src.spheretracer.materials import Lambertian, Metal
    >>> from src.spheretracer.scene.model import Scene, SphereInfo
    >>> scene = Scene(
    ...     spheres=(SphereInfo((0, -100.5, -1), 100), SphereInfo((0, 0, -1), 0.5)),
    ...     materials=(Lambertian(albedo=(0.8, 0.8, 0.8)), Metal(albedo=(0.4, 0.4, 0.8))),
    ... )
    >>> scene.describe()["object_count"]
    2
"""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from src.spheretracer.materials.base import Material, material_from_dict

Point = tuple[float, float, float]


@dataclass(frozen=True)
class SphereInfo:
    """Geometry of one sphere.

    Attributes:
        center: The center of the sphere as (x, y, z).
        radius: The radius of the sphere (strictly positive).
    """

    center: Point
    radius: float

    def __post_init__(self) -> None:
        if len(self.center) != 3:
            raise ValueError(f"Sphere center must have 3 components, got {self.center!r}")
        if not all(math.isfinite(c) for c in self.center):
            raise ValueError(f"Sphere center {self.center!r} is not finite")
        object.__setattr__(self, "center", tuple(float(c) for c in self.center))
        if not (math.isfinite(self.radius) and self.radius > 0.0):
            raise ValueError(f"Sphere radius must be positive, got {self.radius}")

    @property
    def inv_radius(self) -> float:
        return 1.0 / self.radius


@dataclass(frozen=True)
class Scene:
    """A static scene of spheres and their materials.

    Attributes:
        spheres: The sphere primitives, in intersection order.
        materials: One material per sphere, indexed by sphere id.
    """

    spheres: tuple[SphereInfo, ...]
    materials: tuple[Material, ...]

    def __post_init__(self) -> None:
        # Accept any sequence but store tuples so the scene stays immutable
        object.__setattr__(self, "spheres", tuple(self.spheres))
        object.__setattr__(self, "materials", tuple(self.materials))

        if not self.spheres:
            raise ValueError("Scene must contain at least one sphere")
        if len(self.spheres) != len(self.materials):
            raise ValueError(
                f"Scene has {len(self.spheres)} spheres but {len(self.materials)} materials; "
                "every sphere needs exactly one material"
            )
        for i, sphere in enumerate(self.spheres):
            if not isinstance(sphere, SphereInfo):
                raise ValueError(f"Sphere {i} is not a SphereInfo: {sphere!r}")
        for i, material in enumerate(self.materials):
            if not isinstance(material, Material):
                raise ValueError(f"Material {i} is not a Material: {material!r}")

    def __len__(self) -> int:
        return len(self.spheres)

    @classmethod
    def from_objects(cls, objects: Iterable[tuple[SphereInfo, Material]]) -> Scene:
        """Build a scene from (sphere, material) pairs."""
        pairs = list(objects)
        return cls(
            spheres=tuple(sphere for sphere, _ in pairs),
            materials=tuple(material for _, material in pairs),
        )

    def describe(self) -> dict[str, Any]:
        """Summarize the scene for a driver (object and material counts).

        Returns:
            Dictionary with ``object_count``, ``material_counts`` keyed by
            material type name, and ``emitter_count``.
        """
        counts = Counter(material.type_name for material in self.materials)
        return {
            "object_count": len(self.spheres),
            "material_counts": dict(counts),
            "emitter_count": sum(1 for material in self.materials if material.is_emissive),
        }

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        return {
            "spheres": [
                {
                    "center": list(sphere.center),
                    "radius": sphere.radius,
                    "material": material.to_dict(),
                }
                for sphere, material in zip(self.spheres, self.materials)
            ]
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Scene:
        """Load a scene from a dictionary.

        Args:
            data: Dictionary with a ``spheres`` list; each entry has
                ``center``, ``radius`` and a ``material`` dictionary.

        Returns:
            The validated scene.

        Raises:
            ValueError: If the description is malformed.
        """
        entries: Sequence[dict[str, Any]] = data.get("spheres", [])
        objects = []
        for i, entry in enumerate(entries):
            try:
                center_list = entry["center"]
                radius = float(entry["radius"])
                material_data = entry["material"]
            except (KeyError, TypeError) as e:
                raise ValueError(f"Sphere entry {i} is malformed: {e}") from e
            center: Point = (
                float(center_list[0]),
                float(center_list[1]),
                float(center_list[2]),
            )
            objects.append((SphereInfo(center, radius), material_from_dict(material_data)))
        return cls.from_objects(objects)
