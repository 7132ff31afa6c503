"""Camera basis construction and primary ray generation.

The camera basis is built from the position, look-at target and up hint:

    right = normalize(cross(up_hint, normalize(target - position)))
    up    = cross(right, normalize(position))

The up vector is derived from the camera position rather than the view
direction and is left unnormalized, so its magnitude (together with that of
right) sets the effective field of view. This is not a general look-at
orthogonalization.

For pixel (i, j) of a width x height image, with dx = 2 / width and
dy = 2 / height, the near-plane point and the primary ray are:

    near      = right * (-1 + dx * i) + up * (1 - dy * j)
    origin    = position
    direction = normalize(near - position)

Row j = 0 is the top of the image.

Example:
    >>> from src.softpt.config import CameraConfig
    >>> basis = build_camera_basis(CameraConfig())
    >>> ray = primary_ray(basis, 32, 32, 64, 64)
"""

from __future__ import annotations

from dataclasses import dataclass

from src.softpt.config import CameraConfig
from src.softpt.core.ray import Ray
from src.softpt.core.vector import EPSILON, Vector3
from src.softpt.errors import DegenerateCameraBasis


@dataclass(frozen=True)
class CameraBasis:
    """Derived camera vectors used for primary ray generation.

    Attributes:
        position: Origin of every primary ray.
        right: Unit right vector.
        up: Up vector derived from the position (not normalized).
    """

    position: Vector3
    right: Vector3
    up: Vector3


def build_camera_basis(camera: CameraConfig) -> CameraBasis:
    """Compute the camera basis.

    Raises:
        DegenerateCameraBasis: If the target coincides with the position, the
            up hint is parallel to the view direction, the camera sits at the
            world origin, or the derived up vector vanishes.
    """
    view = camera.target - camera.position
    if view.length() < EPSILON:
        raise DegenerateCameraBasis(
            f"Camera position {camera.position.to_tuple()} coincides with its target"
        )
    if camera.position.length() < EPSILON:
        raise DegenerateCameraBasis("Camera position at the world origin has no direction")

    right = camera.up.cross(view.normalize())
    if right.length() < EPSILON:
        raise DegenerateCameraBasis(
            f"Up hint {camera.up.to_tuple()} is parallel to the view direction"
        )
    right = right.normalize()

    up = right.cross(camera.position.normalize())
    if up.length() < EPSILON:
        raise DegenerateCameraBasis(
            f"Camera position {camera.position.to_tuple()} is parallel to its right vector"
        )

    return CameraBasis(position=camera.position, right=right, up=up)


def near_plane_point(basis: CameraBasis, i: int, j: int, width: int, height: int) -> Vector3:
    dx = 2.0 / width
    dy = 2.0 / height
    return basis.right * (-1.0 + dx * i) + basis.up * (1.0 - dy * j)


def primary_ray(basis: CameraBasis, i: int, j: int, width: int, height: int) -> Ray:
    """Generate the primary ray through pixel (i, j).

    Raises:
        DegenerateVector: If the near-plane point coincides with the position.
    """
    near = near_plane_point(basis, i, j, width, height)
    return Ray(origin=basis.position, direction=(near - basis.position).normalize())
