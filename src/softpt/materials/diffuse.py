"""Taichi-side storage for diffuse + emissive materials.

The parallel integrator cannot reach Python objects from inside a kernel, so
the scene's material table is mirrored into Taichi fields. Material ids are
the indices of the scene's material list; the mirror keeps the same order.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.softpt.materials.diffuse import add_diffuse_material
    >>> from src.softpt.materials.material import Material
    >>> add_diffuse_material(Material.create((0.5, 0.5, 0.5)))
    0
"""

import taichi as ti
import taichi.math as tm

from src.softpt.materials.material import Material

# Type alias for 3D vectors
vec3 = tm.vec3

# Maximum number of materials in the scene
MAX_MATERIALS = 256

# Storage for material properties
diffuse_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
diffuse_emissives = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
num_diffuse_materials = ti.field(dtype=ti.i32, shape=())


def clear_diffuse_materials() -> None:
    """Clear all materials.

    Resets the material count to zero. Existing data in the fields will be
    overwritten when new materials are added.
    """
    num_diffuse_materials[None] = 0


def add_diffuse_material(material: Material) -> int:
    """Add a material to the Taichi material table.

    Args:
        material: The material to mirror. Its roughness is not uploaded.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    idx = num_diffuse_materials[None]
    if idx >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    diffuse_albedos[idx] = list(material.albedo)
    diffuse_emissives[idx] = list(material.emissive)
    num_diffuse_materials[None] = idx + 1
    return idx


def get_diffuse_material_count() -> int:
    """Get the number of materials in the Taichi table."""
    return int(num_diffuse_materials[None])


@ti.func
def get_albedo(material_idx: ti.i32) -> vec3:
    return diffuse_albedos[material_idx]


@ti.func
def get_emissive(material_idx: ti.i32) -> vec3:
    return diffuse_emissives[material_idx]
