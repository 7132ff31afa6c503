"""Recursive path tracing integrator (reference implementation).

This module estimates the rendering equation for diffuse + emissive spheres
with a one-sample uniform hemisphere bounce per hit:

    L(x) = Le + albedo * L(bounce) * dot(n, w)

where w is drawn uniformly over the hemisphere around the surface normal n.
There is no next-event estimation: light is only found when a bounce chain
happens to strike an emissive sphere, so many samples per pixel are needed to
converge.

Key features:
    - Linear nearest-hit scan over every sphere, repeated per bounce
    - Hard recursion bound (no Russian roulette)
    - Black or sky-gradient background for escaped rays
    - Bounce origin offset along the normal to avoid self-intersection

Example:
    >>> from src.softpt.config import RenderSettings
    >>> from src.softpt.core.sampling import make_random_source
    >>> from src.softpt.scene.builder import build_default_scene
    >>> scene = build_default_scene()
    >>> ray = Ray(Vector3(0.0, 0.5, -1.0), Vector3(0.0, -0.447, 0.894))
    >>> radiance = trace_path(ray, scene, make_random_source(7), RenderSettings())
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from src.softpt.config import BackgroundMode, RenderSettings
from src.softpt.core.ray import Ray
from src.softpt.core.sampling import RandomSource, sample_hemisphere
from src.softpt.core.vector import EPSILON, ZERO, Vector3, lerp
from src.softpt.geometry.sphere import Sphere, intersect

if TYPE_CHECKING:
    from src.softpt.scene.scene import Scene


def find_nearest_hit(ray: Ray, scene: Scene) -> tuple[Sphere, Vector3] | None:
    """Scan every sphere and return the nearest (sphere, hit point).

    Each sphere contributes its first reported hit point; the one closest to
    the ray origin wins. Returns None if no sphere is hit.
    """
    nearest = None
    nearest_distance = float("inf")

    for sphere in scene.spheres:
        hits = intersect(ray, sphere)
        if hits:
            distance = hits[0].distance(ray.origin)
            if distance < nearest_distance:
                nearest = (sphere, hits[0])
                nearest_distance = distance

    return nearest


def background_radiance(ray: Ray, settings: RenderSettings) -> Vector3:
    """Radiance carried by a ray that escapes the scene.

    The sky gradient interpolates from black to the sky color by the ray's y
    direction without clamping, so downward rays give negative values.
    """
    if settings.background_mode == BackgroundMode.SKY_GRADIENT:
        return lerp(ZERO, settings.sky_color, ray.direction.y)
    return ZERO


def trace_path(
    ray: Ray,
    scene: Scene,
    random_source: RandomSource,
    settings: RenderSettings,
    depth: int = 0,
) -> Vector3:
    """Estimate the radiance arriving along ray.

    Args:
        ray: The ray to trace.
        scene: The scene to trace against (read-only).
        random_source: Source of uniform numbers in [0, 1). Two numbers are
            drawn per surface hit.
        settings: Estimator settings (bounce bound and background).
        depth: Current recursion depth, 0 for primary rays.

    Returns:
        The estimated radiance (RGB).
    """
    if depth == settings.max_bounces:
        return ZERO

    nearest = find_nearest_hit(ray, scene)
    if nearest is None:
        return background_radiance(ray, settings)

    sphere, hit_point = nearest
    material = scene.material_of(sphere)
    normal = (hit_point - sphere.center).normalize()

    u0 = random_source.random()
    u1 = random_source.random()
    direction = sample_hemisphere(normal, u0, u1)

    bounce = Ray(origin=hit_point + normal * EPSILON, direction=direction)
    incoming = trace_path(bounce, scene, random_source, settings, depth + 1)
    return material.emissive + material.albedo * incoming * normal.dot(direction)
