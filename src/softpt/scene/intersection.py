"""GPU-side scene storage and nearest-hit search.

The scene's spheres are mirrored into Taichi fields (Structure of Arrays
layout) so kernels can scan them. The scan is linear: every sphere is tested
and the one whose first reported hit point is closest to the ray origin wins.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.softpt.scene.builder import build_default_scene
    >>> from src.softpt.scene.intersection import upload_scene, get_sphere_count
    >>> upload_scene(build_default_scene())
    >>> get_sphere_count()
    8
"""

import logging
from typing import TYPE_CHECKING

import taichi as ti
import taichi.math as tm

from src.softpt.geometry.sphere import hit_sphere
from src.softpt.materials.diffuse import MAX_MATERIALS, add_diffuse_material, clear_diffuse_materials

if TYPE_CHECKING:
    from src.softpt.scene.scene import Scene

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# Distance reported for rays that miss everything
FAR_DISTANCE = 1e30

# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout for GPU efficiency
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all spheres and materials from GPU storage."""
    num_spheres[None] = 0
    clear_diffuse_materials()


def upload_scene(scene: "Scene") -> None:
    """Replace the GPU scene with the contents of scene.

    Materials are uploaded in table order so material ids stay valid.

    Raises:
        RuntimeError: If the scene exceeds sphere or material capacity.
    """
    if len(scene.spheres) > MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    if len(scene.materials) > MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    clear_scene()
    for material in scene.materials:
        add_diffuse_material(material)

    for idx, sphere in enumerate(scene.spheres):
        sphere_centers[idx] = list(sphere.center)
        sphere_radii[idx] = sphere.radius
        sphere_material_ids[idx] = sphere.material_id
    num_spheres[None] = len(scene.spheres)

    logger.info(
        "Uploaded scene with %d materials and %d spheres.",
        len(scene.materials),
        len(scene.spheres),
    )


def get_sphere_count() -> int:
    """Get the number of spheres in GPU storage."""
    return int(num_spheres[None])


@ti.func
def intersect_scene(ray_origin: vec3, ray_direction: vec3):
    """Find the nearest sphere along a ray.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.

    Returns:
        A tuple (sphere_index, point). sphere_index is -1 on a miss, in which
        case point is meaningless.
    """
    nearest_index = -1
    nearest_distance = FAR_DISTANCE
    nearest_point = vec3(0.0, 0.0, 0.0)

    for i in range(num_spheres[None]):
        count, t_near, _ = hit_sphere(ray_origin, ray_direction, sphere_centers[i], sphere_radii[i])
        if count > 0:
            point = ray_origin + ray_direction * t_near
            distance = tm.length(point - ray_origin)
            if distance < nearest_distance:
                nearest_index = i
                nearest_distance = distance
                nearest_point = point

    return nearest_index, nearest_point
