"""Sphere primitive with analytic ray-sphere intersection.

The intersection solves |o + t*d - c|^2 = r^2 as the quadratic

    a*t^2 + b*t + c = 0

where:
    a = dot(d, d)
    b = 2 * dot(d, o - c)
    c = dot(o - c, o - c) - r^2

The larger root t0 = (-b + sqrt(disc)) / 2a is always considered. The smaller
root is only computed when the discriminant exceeds EPSILON, so rays within
EPSILON of tangency report a single hit. Only roots with t >= 0 are reported,
nearest first.

Two versions are provided: intersect() for the reference renderer, returning
hit points, and hit_sphere() as a Taichi function for the parallel backend,
returning the root parameters.

Example:
    >>> from src.softpt.core.ray import Ray
    >>> from src.softpt.core.vector import Vector3
    >>> sphere = Sphere(center=Vector3(0.0, 0.0, 0.0), radius=1.0, material_id=0)
    >>> ray = Ray(Vector3(0.0, 0.0, -5.0), Vector3(0.0, 0.0, 1.0))
    >>> [p.z for p in intersect(ray, sphere)]
    [-1.0, 1.0]
"""

import math
from dataclasses import dataclass
from typing import Any

import taichi as ti
import taichi.math as tm

from src.softpt.core.ray import Ray, ray_at, vec3
from src.softpt.core.vector import EPSILON, Vector3
from src.softpt.errors import InvalidGeometry


@dataclass(frozen=True)
class Sphere:
    """A sphere defined by center point, radius and material index.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere (strictly positive).
        material_id: Index into the owning scene's material table.
    """

    center: Vector3
    radius: float
    material_id: int = 0

    def __post_init__(self) -> None:
        if not math.isfinite(self.radius) or self.radius <= 0.0:
            raise InvalidGeometry(
                f"Sphere at {self.center.to_tuple()} has invalid radius {self.radius}"
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "center": list(self.center),
            "radius": self.radius,
            "material_id": self.material_id,
        }


def intersect(ray: Ray, sphere: Sphere) -> tuple[Vector3, ...]:
    """Intersect a ray with a sphere.

    Args:
        ray: The ray to test. Its direction need not be normalized.
        sphere: The sphere to test against.

    Returns:
        Zero, one or two hit points ordered by ascending ray parameter, so the
        first entry is the point callers treat as the surface entry.
    """
    oc = ray.origin - sphere.center
    a = ray.direction.dot(ray.direction)
    b = 2.0 * ray.direction.dot(oc)
    c = oc.dot(oc) - sphere.radius * sphere.radius
    discriminant = b * b - 4.0 * a * c

    if discriminant < 0.0:
        return ()

    sqrt_d = math.sqrt(discriminant)
    roots = []

    t0 = (-b + sqrt_d) / (2.0 * a)
    if t0 >= 0.0:
        roots.append(t0)

    # Near-tangent rays collapse to the single root above
    if discriminant > EPSILON:
        t1 = (-b - sqrt_d) / (2.0 * a)
        if t1 >= 0.0:
            roots.append(t1)

    roots.sort()
    return tuple(ray_at(ray, t) for t in roots)


@ti.func
def hit_sphere(ray_origin: vec3, ray_direction: vec3, center: vec3, radius: ti.f32):
    """Taichi twin of intersect() that returns root parameters.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        center: The sphere center.
        radius: The sphere radius.

    Returns:
        A tuple (count, t_near, t_far). count is 0, 1 or 2; t_near is only
        valid when count >= 1 and t_far only when count == 2.
    """
    oc = ray_origin - center
    a = tm.dot(ray_direction, ray_direction)
    b = 2.0 * tm.dot(ray_direction, oc)
    c = tm.dot(oc, oc) - radius * radius
    discriminant = b * b - 4.0 * a * c

    # Taichi requires outer-scope declaration
    count = 0
    t_near = 0.0
    t_far = 0.0

    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)

        t0 = (-b + sqrt_d) / (2.0 * a)
        if t0 >= 0.0:
            count = 1
            t_near = t0

        if discriminant > EPSILON:
            t1 = (-b - sqrt_d) / (2.0 * a)
            if t1 >= 0.0:
                if count == 1:
                    # t1 <= t0 whenever a > 0
                    t_far = t_near
                    t_near = t1
                    count = 2
                else:
                    t_near = t1
                    count = 1

    return count, t_near, t_far
