"""Pytest configuration for path tracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_gpu_scene():
    """Clear uploaded spheres and materials before and after each test."""
    # Import here so fields are allocated after ti.init()
    from src.softpt.scene.intersection import clear_scene

    clear_scene()
    yield
    clear_scene()


@pytest.fixture
def unit_sphere_scene():
    """A scene holding one white, non-emissive unit sphere at the origin."""
    from src.softpt.core.vector import Vector3
    from src.softpt.scene.scene import Scene

    scene = Scene()
    material_id = scene.add_material(Vector3.splat(1.0))
    scene.add_sphere(Vector3(0.0, 0.0, 0.0), 1.0, material_id)
    return scene


@pytest.fixture
def emissive_enclosure():
    """A camera-enclosing sphere that emits (0.25, 0.5, 0.75) and reflects nothing."""
    from src.softpt.core.vector import Vector3
    from src.softpt.scene.scene import Scene

    scene = Scene()
    material_id = scene.add_material(Vector3.splat(0.0), Vector3(0.25, 0.5, 0.75))
    scene.add_sphere(Vector3(0.0, 0.0, 0.0), 50.0, material_id)
    return scene
