"""Scene container holding the material table and the sphere list.

The scene owns its materials. Spheres refer to them by index (material_id),
so a sphere never holds a reference to a Material object and the table can be
mirrored into Taichi fields in the same order.

Sphere order is the traversal order of the linear nearest-hit scan. It does
not affect which sphere is hit, since ties are resolved by distance.

Example:
    >>> from src.softpt.scene.scene import Scene
    >>> scene = Scene()
    >>> white = scene.add_material(albedo=(1.0, 1.0, 1.0))
    >>> scene.add_sphere(center=(0.0, -100.0, 0.0), radius=100.0, material_id=white)
    0
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from src.softpt.core.vector import Vector3
from src.softpt.geometry.sphere import Sphere
from src.softpt.materials.material import Material


@dataclass
class Scene:
    """Ordered material table and sphere list.

    Attributes:
        materials: Materials in insertion order; the index is the material id.
        spheres: Spheres in traversal order.
    """

    materials: list[Material] = field(default_factory=list)
    spheres: list[Sphere] = field(default_factory=list)

    # =========================================================================
    # Material Management
    # =========================================================================

    def add_material(
        self,
        albedo: Sequence[float],
        emissive: Sequence[float] = (0.0, 0.0, 0.0),
        roughness: float = 1.0,
    ) -> int:
        """Add a material to the table.

        Args:
            albedo: Diffuse reflectance as (R, G, B), each in [0, 1].
            emissive: Emitted radiance as (R, G, B). May exceed 1.
            roughness: Reserved; has no effect on shading.

        Returns:
            The material id.

        Albedo is checked strictly: a component above 1 is rejected rather
        than clamped, so a scene file with such a material fails to load.

        Raises:
            ValueError: If albedo is outside [0, 1] or emissive is negative.
        """
        self.materials.append(Material.create(albedo, emissive, roughness))
        return len(self.materials) - 1

    def material_of(self, sphere: Sphere) -> Material:
        return self.materials[sphere.material_id]

    # =========================================================================
    # Sphere Management
    # =========================================================================

    def add_sphere(
        self,
        center: Sequence[float] | Vector3,
        radius: float,
        material_id: int,
    ) -> int:
        """Add a sphere to the scene.

        Returns:
            The index of the added sphere.

        Raises:
            InvalidGeometry: If radius is not positive.
            ValueError: If material_id is not in the material table.
        """
        return self.append_sphere(
            Sphere(center=Vector3.from_iterable(center), radius=float(radius), material_id=material_id)
        )

    def append_sphere(self, sphere: Sphere) -> int:
        """Add an already constructed sphere, validating its material id."""
        if not 0 <= sphere.material_id < len(self.materials):
            raise ValueError(f"Invalid material_id: {sphere.material_id}")
        self.spheres.append(sphere)
        return len(self.spheres) - 1

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        return {
            "materials": [m.to_dict() for m in self.materials],
            "spheres": [s.to_dict() for s in self.spheres],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Scene:
        """Build a scene from a dictionary with 'materials' and 'spheres' keys.

        Raises:
            ValueError: If the data contains invalid values.
        """
        scene = cls()
        for mat_config in data.get("materials", []):
            scene.add_material(
                albedo=mat_config.get("albedo", [0.5, 0.5, 0.5]),
                emissive=mat_config.get("emissive", [0.0, 0.0, 0.0]),
                roughness=mat_config.get("roughness", 1.0),
            )
        for sphere_config in data.get("spheres", []):
            scene.add_sphere(
                center=sphere_config.get("center", [0.0, 0.0, 0.0]),
                radius=sphere_config.get("radius", 1.0),
                material_id=sphere_config.get("material_id", 0),
            )
        return scene
