"""Diffuse + emissive material description.

A material reflects light diffusely according to its albedo and emits light
according to its emissive term. The shading model is purely Lambertian; the
roughness attribute is carried for forward compatibility but no code path
reads it when shading.

Example:
    >>> from src.softpt.core.vector import Vector3
    >>> light = Material(albedo=Vector3(1.0, 1.0, 0.5), emissive=Vector3(10.0, 5.0, 5.0))
    >>> light.is_emissive
    True
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from src.softpt.core.vector import ZERO, Vector3


@dataclass(frozen=True)
class Material:
    """Diffuse reflectance plus emitted radiance.

    Attributes:
        albedo: Fraction of incident light reflected per channel, each in [0, 1].
            Values outside that range raise ValueError; they are never clamped.
        emissive: Radiance emitted by the surface. Values above 1 model lights.
        roughness: Reserved; not used by the Lambertian shading model.
    """

    albedo: Vector3
    emissive: Vector3 = field(default=ZERO)
    roughness: float = 1.0

    def __post_init__(self) -> None:
        for i, component in enumerate(self.albedo):
            if component < 0.0 or component > 1.0:
                raise ValueError(
                    f"Albedo component {i} = {component} is outside [0, 1]. "
                    "This would violate energy conservation."
                )
        for i, component in enumerate(self.emissive):
            if component < 0.0:
                raise ValueError(f"Emissive component {i} = {component} is negative.")

    @property
    def is_emissive(self) -> bool:
        return any(c > 0.0 for c in self.emissive)

    @classmethod
    def create(
        cls,
        albedo: Sequence[float],
        emissive: Sequence[float] = (0.0, 0.0, 0.0),
        roughness: float = 1.0,
    ) -> Material:
        """Build a material from plain RGB tuples."""
        return cls(
            albedo=Vector3.from_iterable(albedo),
            emissive=Vector3.from_iterable(emissive),
            roughness=float(roughness),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "albedo": list(self.albedo),
            "emissive": list(self.emissive),
            "roughness": self.roughness,
        }
