"""Materials module for the diffuse + emissive shading model.

Components:
    material: Material dataclass (albedo, emissive, reserved roughness)
    diffuse: Taichi field storage and lookups for the parallel backend

Only perfectly diffuse (Lambertian) reflection is implemented. Emission is a
constant per-material radiance added wherever a path hits the surface.

Note: diffuse is NOT imported here because it allocates Taichi fields.
Import it directly from src.softpt.materials.diffuse after ti.init().
"""

from .material import Material

__all__ = [
    "Material",
]
