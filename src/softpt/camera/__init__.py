"""Camera module for view and ray generation.

Components:
    camera: Camera basis construction and per-pixel primary rays

Camera responsibilities:
    - Derive the right/up vectors from position, target and up hint
    - Fail fast on configurations that cannot produce a basis
    - Map pixel (i, j) to a primary ray, with j = 0 at the top row

The Taichi backend uploads the same basis into fields; see
src.softpt.core.taichi_integrator.setup_camera.
"""

from .camera import CameraBasis, build_camera_basis, near_plane_point, primary_ray

__all__ = [
    "CameraBasis",
    "build_camera_basis",
    "near_plane_point",
    "primary_ray",
]
