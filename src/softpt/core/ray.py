"""Ray data structure for the reference renderer.

A ray is an origin and a direction. The direction does not have to be unit
length for intersection, but the hemisphere sampler and the camera always
produce normalized directions.

Example:
    >>> from src.softpt.core.vector import Vector3
    >>> ray = Ray(origin=Vector3(0.0, 0.0, -5.0), direction=Vector3(0.0, 0.0, 1.0))
    >>> ray_at(ray, 4.0)
    Vector3(x=0.0, y=0.0, z=-1.0)
"""

from dataclasses import dataclass

import taichi.math as tm

from src.softpt.core.vector import Vector3

# Type alias for 3D vectors inside Taichi functions
vec3 = tm.vec3


@dataclass(frozen=True)
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction vector of the ray.
    """

    origin: Vector3
    direction: Vector3


def ray_at(ray: Ray, t: float) -> Vector3:
    """Compute the point ray.origin + t * ray.direction."""
    return ray.origin + ray.direction * t
