"""Scene authoring helpers and the default sphere scene.

Small spheres are authored as resting on a large reference sphere: given a
desired center, the radius is chosen so the sphere touches the reference.

    tangent_sphere: radius = |center - ref.center| - ref.radius
    offset_sphere:  radius = |center - ref.center| - ref.radius - offset

A positive offset leaves a gap between the spheres; a negative one sinks the
sphere into the reference.

The default scene is a white ground sphere of radius 100 with seven spheres
resting on it, three of them emissive, viewed from slightly above.

Example:
    >>> scene = build_default_scene()
    >>> len(scene.materials), len(scene.spheres)
    (8, 8)
"""

from __future__ import annotations

from collections.abc import Sequence

from src.softpt.config import CameraConfig
from src.softpt.core.vector import Vector3
from src.softpt.geometry.sphere import Sphere
from src.softpt.scene.scene import Scene

# =============================================================================
# Default Scene Constants
# =============================================================================

GROUND_RADIUS = 100.0
GROUND_CENTER = (0.0, -GROUND_RADIUS, 0.0)

# (albedo, emissive) per material, roughness is left at its default
DEFAULT_MATERIALS = [
    ((1.0, 1.0, 1.0), (0.0, 0.0, 0.0)),
    ((0.5, 1.0, 0.5), (10.0, 10.0, 10.0)),
    ((1.0, 0.5, 0.5), (0.0, 0.0, 0.0)),
    ((0.5, 0.5, 1.0), (0.0, 0.0, 0.0)),
    ((0.5, 1.0, 0.75), (0.0, 0.0, 0.0)),
    ((1.0, 1.0, 0.5), (10.0, 5.0, 5.0)),
    ((1.0, 1.0, 1.0), (0.0, 0.0, 0.0)),
    ((0.5, 1.0, 1.0), (5.0, 5.0, 10.0)),
]

# Centers of the spheres resting on the ground, using materials 1..7 in order
DEFAULT_SPHERE_CENTERS = [
    (0.0, 0.125, 0.0),
    (-0.5, 0.125, 0.0),
    (0.5, 0.25, 0.5),
    (0.25, 0.05, -0.25),
    (-0.25, 0.5, 1.5),
    (0.25, 0.1, 0.25),
    (-0.65, 0.05, -0.25),
]


def tangent_sphere(
    reference: Sphere,
    center: Sequence[float] | Vector3,
    material_id: int,
) -> Sphere:
    """Create a sphere at center that is externally tangent to reference.

    Raises:
        InvalidGeometry: If center lies on or inside the reference sphere.
    """
    center = Vector3.from_iterable(center)
    radius = center.distance(reference.center) - reference.radius
    return Sphere(center=center, radius=radius, material_id=material_id)


def offset_sphere(
    reference: Sphere,
    center: Sequence[float] | Vector3,
    offset: float,
    material_id: int,
) -> Sphere:
    """Create a sphere at center, shrunk by offset from tangency with reference.

    Raises:
        InvalidGeometry: If the resulting radius is not positive.
    """
    center = Vector3.from_iterable(center)
    radius = center.distance(reference.center) - reference.radius - offset
    return Sphere(center=center, radius=radius, material_id=material_id)


def build_default_scene() -> Scene:
    """Create the default scene of seven spheres resting on a ground sphere."""
    scene = Scene()
    for albedo, emissive in DEFAULT_MATERIALS:
        scene.add_material(albedo=albedo, emissive=emissive)

    ground = Sphere(center=Vector3(*GROUND_CENTER), radius=GROUND_RADIUS, material_id=0)
    scene.append_sphere(ground)
    for material_id, center in enumerate(DEFAULT_SPHERE_CENTERS, start=1):
        scene.append_sphere(tangent_sphere(ground, center, material_id))

    return scene


def default_camera() -> CameraConfig:
    """Camera looking at the origin from (0, 0.5, -1)."""
    return CameraConfig(
        position=Vector3(0.0, 0.5, -1.0),
        target=Vector3(0.0, 0.0, 0.0),
        up=Vector3(0.0, 1.0, 0.0),
    )
