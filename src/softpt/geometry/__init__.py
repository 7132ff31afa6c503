"""Geometry module for the sphere primitive.

Components:
    sphere: Sphere dataclass, reference intersect() and Taichi hit_sphere()

Scenes are scanned linearly; there is no spatial acceleration structure.
Intersection follows the pattern:
    points = intersect(ray, sphere)                       # reference renderer
    count, t_near, t_far = hit_sphere(o, d, center, r)    # Taichi kernels
"""

from .sphere import Sphere, hit_sphere, intersect

__all__ = [
    "Sphere",
    "intersect",
    "hit_sphere",
]
