"""Scene module for scene storage, traversal and management.

Components:
    intersection: Shape and entity storage in Taichi fields, the sky and
        nearest-hit traversal (trace_scene)
    manager: SceneManager with the unified material ID space, material
        dispatch and scene serialization
    cornell_box: The Cornell box demo scene

Scene data is organized for kernel access:
    - Structure-of-Arrays layout for shapes
    - Entities refer to shapes and materials by index
"""

from .cornell_box import (
    CornellBoxParams,
    create_cornell_box_camera,
    create_cornell_box_scene,
)
from .intersection import (
    MAX_ENTITIES,
    MAX_PLANES,
    MAX_SPHERES,
    NO_MATERIAL,
    EntityIntersection,
    ShapeType,
    add_entity,
    add_plane,
    add_sphere,
    clear_scene,
    get_entity_count,
    get_plane_count,
    get_sky,
    get_sky_radiance,
    get_sphere_count,
    set_sky,
    trace_scene,
)
from .manager import (
    MAX_MATERIALS,
    EntityInfo,
    MaterialInfo,
    MaterialType,
    SceneConfig,
    SceneManager,
    get_emission,
    get_material_type,
    get_material_type_index,
    sample_material,
)

__all__ = [
    # Intersection module
    "EntityIntersection",
    "ShapeType",
    "NO_MATERIAL",
    "MAX_SPHERES",
    "MAX_PLANES",
    "MAX_ENTITIES",
    "add_sphere",
    "add_plane",
    "add_entity",
    "clear_scene",
    "get_sphere_count",
    "get_plane_count",
    "get_entity_count",
    "set_sky",
    "get_sky",
    "get_sky_radiance",
    "trace_scene",
    # Manager module
    "SceneManager",
    "MaterialType",
    "MaterialInfo",
    "EntityInfo",
    "SceneConfig",
    "MAX_MATERIALS",
    "get_material_type",
    "get_material_type_index",
    "sample_material",
    "get_emission",
    # Cornell box module
    "CornellBoxParams",
    "create_cornell_box_scene",
    "create_cornell_box_camera",
]
