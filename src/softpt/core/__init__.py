"""Core rendering module.

Components:
    vector: Vector3 value type and scalar helpers
    ray: Ray data structure
    sampling: Tangent frames, uniform hemisphere sampling, random sources
    integrator: Recursive path tracing estimator (reference)
    renderer: Single-threaded image sampler driving the reference integrator
    taichi_integrator: The same estimator as parallel Taichi kernels
    progressive: Progressive renderer wrapping the Taichi integrator

The estimator uses emission plus one uniform hemisphere bounce per hit, with
a hard bounce bound and no next event estimation.
"""

from .ray import Ray, ray_at
from .sampling import (
    RandomSource,
    build_tangent_frame,
    make_random_source,
    pixel_random_source,
    sample_hemisphere,
)
from .vector import EPSILON, ZERO, Vector3, lerp, saturate

# Note: integrator and renderer are NOT imported here because they depend on
# config, camera and preview, which import this package in turn.
# taichi_integrator and progressive also allocate Taichi fields, which must
# happen after ti.init().
#
# Import them directly:
#   from src.softpt.core.renderer import render
#   from src.softpt.core.progressive import ProgressiveRenderer

__all__ = [
    "Vector3",
    "ZERO",
    "EPSILON",
    "lerp",
    "saturate",
    "Ray",
    "ray_at",
    "RandomSource",
    "make_random_source",
    "pixel_random_source",
    "build_tangent_frame",
    "sample_hemisphere",
]
