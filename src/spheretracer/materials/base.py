"""Material variants shared definitions.

A material is one of three frozen dataclasses (Lambertian, Metal,
Dielectric). They share an albedo and an emissive color; each variant adds
only the field it needs. On the device a material is flattened to four
values (kind, albedo, emissive, parameter) so a kernel can dispatch on the
kind; the ``kind`` class attribute and the ``parameter`` property are the
hooks each variant provides for that upload.

Any material may emit: the integrator adds the emissive color of every hit
before it tries to scatter, so an emitter can also reflect.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from enum import IntEnum
from typing import Any, ClassVar

import taichi.math as tm

Color = tuple[float, float, float]

# Attenuation reported for a material kind the kernel does not recognize
INVALID_MATERIAL_COLOR = tm.vec3(1.0, 0.0, 1.0)


class MaterialKind(IntEnum):
    """Device-side tag for each material variant."""

    LAMBERTIAN = 0
    METAL = 1
    DIELECTRIC = 2


_MATERIAL_REGISTRY: dict[str, type[Material]] = {}


def register_material(cls: type[Material]) -> type[Material]:
    """Class decorator adding a variant to the ``material_from_dict`` registry."""
    _MATERIAL_REGISTRY[cls.type_name] = cls
    return cls


def _check_color(name: str, color: Color, *, upper: float | None) -> None:
    if len(color) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(color)}")
    for i, component in enumerate(color):
        if not math.isfinite(component) or component < 0.0:
            raise ValueError(f"{name} component {i} = {component} must be finite and >= 0")
        if upper is not None and component > upper:
            raise ValueError(
                f"{name} component {i} = {component} is outside [0, {upper}]. "
                "This would violate energy conservation."
            )


@dataclass(frozen=True)
class Material:
    """Properties common to every material variant.

    Attributes:
        albedo: Reflectance color (RGB, each component in [0, 1]).
        emissive: Emitted radiance (RGB, each component >= 0, may exceed 1).
    """

    albedo: Color = (0.5, 0.5, 0.5)
    emissive: Color = (0.0, 0.0, 0.0)

    kind: ClassVar[int]
    type_name: ClassVar[str]

    def __post_init__(self) -> None:
        _check_color("Albedo", self.albedo, upper=1.0)
        _check_color("Emissive", self.emissive, upper=None)

    @property
    def parameter(self) -> float:
        """The variant-specific scalar uploaded alongside the colors."""
        return 0.0

    @property
    def is_emissive(self) -> bool:
        return any(component > 0.0 for component in self.emissive)

    def to_dict(self) -> dict[str, Any]:
        """Export the material as a plain dictionary with a ``type`` key."""
        data = {key: list(value) if isinstance(value, tuple) else value
                for key, value in asdict(self).items()}
        return {"type": self.type_name, **data}


def material_from_dict(data: dict[str, Any]) -> Material:
    """Build a material from a dictionary produced by ``Material.to_dict``.

    Args:
        data: Mapping with a ``type`` key ("lambertian", "metal" or
            "dielectric") and the variant's fields.

    Returns:
        The material instance.

    Raises:
        ValueError: If the type is unknown or a field is invalid.
    """
    params = dict(data)
    type_name = str(params.pop("type", "")).lower()
    cls = _MATERIAL_REGISTRY.get(type_name)
    if cls is None:
        raise ValueError(f"Unknown material type: {type_name!r}")

    for key in ("albedo", "emissive"):
        if key in params:
            params[key] = tuple(float(c) for c in params[key])
    try:
        return cls(**params)
    except TypeError as e:
        raise ValueError(f"Invalid fields for {type_name} material: {e}") from e
