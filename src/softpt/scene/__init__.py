"""Scene module for scene construction and storage.

Components:
    scene: Scene container owning the material table and sphere list
    builder: Tangent/offset sphere helpers and the default scene
    intersection: Taichi field storage and nearest-hit search for kernels

A Scene is built once before rendering and is read-only afterwards. The
Taichi backend copies it into fields with upload_scene().

Note: intersection is NOT imported here because it allocates Taichi fields.
Import it directly from src.softpt.scene.intersection after ti.init().
"""

from .builder import build_default_scene, default_camera, offset_sphere, tangent_sphere
from .scene import Scene

__all__ = [
    "Scene",
    "build_default_scene",
    "default_camera",
    "tangent_sphere",
    "offset_sphere",
]
