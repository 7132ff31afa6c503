"""Tangent frames, hemisphere sampling and random sources.

The hemisphere sampler draws directions uniformly by solid angle over the
hemisphere around a surface normal (it is not cosine weighted). With two
uniform numbers u0, u1 in [0, 1):

    local = (sqrt(1 - u0^2) * cos(2*pi*u1), u0, sqrt(1 - u0^2) * sin(2*pi*u1))

The local y axis is the pole, so u0 is directly the cosine of the polar angle.
The local direction is mapped to world space through the tangent frame built
around the normal:

    world = tangent * local.x + normal * local.y + bitangent * local.z

Random numbers come from an explicit RandomSource passed in by the caller;
there is no process-wide generator. numpy Generators satisfy the protocol.

Example:
    >>> from src.softpt.core.vector import Vector3
    >>> normal = Vector3(0.0, 0.0, 1.0)
    >>> direction = sample_hemisphere(normal, 0.5, 0.25)
    >>> direction.dot(normal) >= 0.0
    True
"""

import math
from typing import Protocol

import numpy as np
import taichi as ti
import taichi.math as tm

from src.softpt.core.ray import vec3
from src.softpt.core.vector import EPSILON, Vector3


class RandomSource(Protocol):
    """Anything producing uniform floats in [0, 1) from random().

    numpy.random.Generator and random.Random both qualify.
    """

    def random(self) -> float: ...


def make_random_source(seed: int | None = None) -> np.random.Generator:
    """Create a random source, seeded for reproducibility when seed is given."""
    return np.random.default_rng(seed)


def pixel_random_source(seed: int | None, i: int, j: int) -> np.random.Generator:
    """Create an independent random source for pixel (i, j).

    With a seed, the stream depends only on (seed, i, j), so pixels can be
    rendered in any order or concurrently and still reproduce the same image.
    Without a seed, fresh OS entropy is used.
    """
    if seed is None:
        return np.random.default_rng()
    return np.random.default_rng([seed, i, j])


# =============================================================================
# Reference implementation
# =============================================================================

# Reference axes for the tangent frame seed
_RIGHT = Vector3(-1.0, 0.0, 0.0)
_UP = Vector3(0.0, 1.0, 0.0)


def build_tangent_frame(normal: Vector3) -> tuple[Vector3, Vector3]:
    """Build an orthonormal basis {tangent, normal, bitangent} around normal.

    The seed axis is (-1, 0, 0), replaced by (0, 1, 0) when the normal lies
    along the x axis. The tangent is re-derived from the bitangent so the
    result is orthogonal even though the seed is not.

    Args:
        normal: Unit surface normal.

    Returns:
        A tuple (tangent, bitangent) of unit vectors, both orthogonal to normal.
    """
    seed = _RIGHT
    if normal.is_equivalent(_RIGHT) or normal.is_equivalent(-_RIGHT):
        seed = _UP
    bitangent = normal.cross(seed).normalize()
    tangent = bitangent.cross(normal).normalize()
    return tangent, bitangent


def sample_hemisphere(normal: Vector3, u0: float, u1: float) -> Vector3:
    """Map two uniform numbers to a direction on the hemisphere around normal.

    Args:
        normal: Unit surface normal defining the hemisphere pole.
        u0: Uniform number in [0, 1), used as the cosine of the polar angle.
        u1: Uniform number in [0, 1), the azimuthal fraction of a full turn.

    Returns:
        A unit direction with dot(direction, normal) >= -EPSILON.
    """
    sin_theta = math.sqrt(1.0 - u0 * u0)
    phi = 2.0 * math.pi * u1
    local_x = sin_theta * math.cos(phi)
    local_z = sin_theta * math.sin(phi)

    tangent, bitangent = build_tangent_frame(normal)
    direction = tangent * local_x + normal * u0 + bitangent * local_z

    assert direction.dot(normal) >= -EPSILON, (
        f"Sampled direction {direction} points below the surface for normal {normal}"
    )
    return direction


# =============================================================================
# Taichi implementation
# =============================================================================


@ti.func
def tangent_frame(normal: vec3):
    """Taichi twin of build_tangent_frame().

    Returns:
        A tuple (tangent, bitangent).
    """
    seed = vec3(-1.0, 0.0, 0.0)
    if tm.length(normal - seed) < EPSILON or tm.length(normal + seed) < EPSILON:
        seed = vec3(0.0, 1.0, 0.0)
    bitangent = tm.normalize(tm.cross(normal, seed))
    tangent = tm.normalize(tm.cross(bitangent, normal))
    return tangent, bitangent


@ti.func
def sample_hemisphere_uniform(normal: vec3, u0: ti.f32, u1: ti.f32) -> vec3:
    """Taichi twin of sample_hemisphere()."""
    sin_theta = ti.sqrt(ti.max(0.0, 1.0 - u0 * u0))
    phi = 2.0 * tm.pi * u1
    tangent, bitangent = tangent_frame(normal)
    return tangent * (sin_theta * ti.cos(phi)) + normal * u0 + bitangent * (sin_theta * ti.sin(phi))
