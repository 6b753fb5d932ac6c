"""Pytest configuration for path tracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls, which would
    invalidate every field allocated by the modules under test.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene, material and film state around each test."""
    # Import here so Taichi is initialized first
    from src.pathtracer.core.film import clear_film, reset_film
    from src.pathtracer.materials.diffuse import clear_diffuse_materials
    from src.pathtracer.materials.emissive import clear_emissive_materials
    from src.pathtracer.materials.reflective import clear_reflective_materials
    from src.pathtracer.materials.transparent import clear_transparent_materials
    from src.pathtracer.scene.intersection import clear_scene
    from src.pathtracer.scene.manager import _clear_material_tracking

    def _clear_all():
        clear_scene()
        clear_diffuse_materials()
        clear_reflective_materials()
        clear_transparent_materials()
        clear_emissive_materials()
        _clear_material_tracking()
        clear_film()
        reset_film()

    _clear_all()
    yield
    _clear_all()
