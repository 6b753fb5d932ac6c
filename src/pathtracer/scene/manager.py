"""Unified scene manager coordinating entities, materials and the sky.

This module provides the high-level scene building API. It keeps a unified
material_id space across the per-type material registries (diffuse,
reflective, transparent, emissive) and records which type each ID belongs
to, so the integrator can dispatch to the right sampling function.

The SceneManager maintains:
- A unified material_id space across all material types
- Mapping from material_id to (material_type, type_local_index)
- The ordered entity list (shape + material), which fixes traversal order
- The sky radiance
- Scene serialization to and from plain dictionaries

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.pathtracer.scene.manager import SceneManager
    >>> scene = SceneManager(sky=(0.05, 0.05, 0.1))
    >>> white = scene.add_diffuse_material(color=(0.8, 0.8, 0.8))
    >>> scene.add_sphere(position=(0, 0, 5), radius=1.0, material_id=white)
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

import taichi as ti
import taichi.math as tm

from src.pathtracer.materials.diffuse import (
    add_diffuse_material,
    clear_diffuse_materials,
    sample_diffuse_by_id,
)
from src.pathtracer.materials.emissive import (
    add_emissive_material,
    clear_emissive_materials,
    get_emissive_emission,
    sample_emissive,
)
from src.pathtracer.materials.reflective import (
    add_reflective_material,
    clear_reflective_materials,
    sample_reflective_by_id,
)
from src.pathtracer.materials.sample import MaterialSample, invalid_sample
from src.pathtracer.materials.transparent import (
    add_transparent_material,
    clear_transparent_materials,
    sample_transparent_by_id,
)
from src.pathtracer.scene.intersection import (
    MAX_ENTITIES,
    MAX_PLANES,
    MAX_SPHERES,
    NO_MATERIAL,
    ShapeType,
    add_entity,
    add_plane,
    add_sphere,
    clear_scene,
    get_entity_count,
    get_plane_count,
    get_sky,
    get_sphere_count,
    set_sky,
)


class MaterialType(IntEnum):
    """Enumeration of supported material types.

    Used for material dispatch in the path tracer. NONE is the null material
    reported for rays that hit nothing.
    """

    NONE = -1
    DIFFUSE = 0
    REFLECTIVE = 1
    TRANSPARENT = 2
    EMISSIVE = 3


# Maximum number of materials across all types
MAX_MATERIALS = 1024  # 256 per type * 4 types

# material_types[i] stores the MaterialType for material_id i
material_types = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
# material_type_indices[i] stores the type-local index for material_id i
material_type_indices = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def _clear_material_tracking() -> None:
    """Clear the material tracking fields."""
    num_materials[None] = 0


@ti.func
def get_material_type(material_id: ti.i32) -> ti.i32:
    """Get the material type for a given material ID.

    Returns:
        The material type as an integer (see MaterialType).
        Returns MaterialType.NONE for invalid IDs, including NO_MATERIAL.
    """
    result = int(MaterialType.NONE)
    if 0 <= material_id < num_materials[None]:
        result = material_types[material_id]
    return result


@ti.func
def get_material_type_index(material_id: ti.i32) -> ti.i32:
    """Get the type-local index for a given material ID.

    Returns:
        The index into the type-specific registry, or -1 for invalid IDs.
    """
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_type_indices[material_id]
    return result


@ti.func
def sample_material(material_id: ti.i32, wo: tm.vec3, normal: tm.vec3) -> MaterialSample:
    """Dispatch material sampling by unified material ID.

    Args:
        material_id: The unified material ID (NO_MATERIAL for misses).
        wo: Direction pointing away from the surface (normalized).
        normal: The surface normal at the hit point.

    Returns:
        The MaterialSample of the material, or the invalid sample for the
        null material and for emitters.
    """
    mat_type = get_material_type(material_id)
    type_idx = get_material_type_index(material_id)
    result = invalid_sample()

    if mat_type == int(MaterialType.DIFFUSE):
        result = sample_diffuse_by_id(type_idx, wo, normal)
    elif mat_type == int(MaterialType.REFLECTIVE):
        result = sample_reflective_by_id(type_idx, wo, normal)
    elif mat_type == int(MaterialType.TRANSPARENT):
        result = sample_transparent_by_id(type_idx, wo, normal)
    elif mat_type == int(MaterialType.EMISSIVE):
        result = sample_emissive()

    return result


@ti.func
def get_emission(material_id: ti.i32) -> tm.vec3:
    """Emitted radiance of a material; zero for everything but emitters."""
    result = tm.vec3(0.0, 0.0, 0.0)
    if get_material_type(material_id) == int(MaterialType.EMISSIVE):
        result = get_emissive_emission(get_material_type_index(material_id))
    return result


@dataclass
class MaterialInfo:
    """Information about a registered material.

    Attributes:
        material_id: The unified material ID.
        material_type: The type of material.
        type_index: The index within the type-specific registry.
        params: The material parameters as provided during creation.
    """

    material_id: int
    material_type: MaterialType
    type_index: int
    params: dict[str, Any]


@dataclass
class EntityInfo:
    """Information about an entity in the scene.

    Attributes:
        entity_index: Position of the entity in traversal order.
        shape_type: The type of the entity's shape.
        shape_index: Index into the per-type shape storage.
        params: The shape parameters as provided during creation.
        material_id: The material ID attached to the entity.
    """

    entity_index: int
    shape_type: ShapeType
    shape_index: int
    params: dict[str, Any]
    material_id: int


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        sky: Sky radiance as [R, G, B].
        materials: Material configurations, indexed by material ID.
        entities: Entity configurations, in traversal order.
    """

    sky: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    materials: list[dict[str, Any]] = field(default_factory=list)
    entities: list[dict[str, Any]] = field(default_factory=list)


def _as_vec3(values: Any, default: tuple[float, float, float]) -> tuple[float, float, float]:
    if values is None:
        return default
    if len(values) != 3:
        raise ValueError(f"Expected 3 components, got {values!r}")
    return (float(values[0]), float(values[1]), float(values[2]))


class SceneManager:
    """Unified scene manager coordinating entities and materials.

    The SceneManager owns the scene for the duration of a render: entities
    are appended while building and are read-only once rendering starts.

    Attributes:
        materials: MaterialInfo for all registered materials.
        entities: EntityInfo for all entities, in traversal order.

    Example:
        >>> scene = SceneManager()
        >>> red = scene.add_diffuse_material(color=(0.8, 0.1, 0.1))
        >>> mirror = scene.add_reflective_material(color=(1.0, 1.0, 1.0))
        >>> glass = scene.add_transparent_material(ior=1.75)
        >>> scene.add_sphere((-1.75, -2.5, 2.0), 1.35, mirror)
        >>> scene.add_sphere((2.0, -2.25, 0.5), 1.5, glass)
        >>> scene.add_plane((-4, 0, 0), (1, 0, 0), (0, 1, 0), 8.0, 10.0, red)
    """

    def __init__(self, sky: tuple[float, float, float] = (0.0, 0.0, 0.0)) -> None:
        """Initialize an empty scene with the given sky radiance."""
        self.materials: list[MaterialInfo] = []
        self.entities: list[EntityInfo] = []
        self._clear_all()
        self.set_sky(sky)

    def _clear_all(self) -> None:
        """Clear all scene data including Taichi fields."""
        clear_scene()
        clear_diffuse_materials()
        clear_reflective_materials()
        clear_transparent_materials()
        clear_emissive_materials()
        _clear_material_tracking()
        self.materials.clear()
        self.entities.clear()

    def clear(self) -> None:
        """Clear the entire scene (entities, materials and sky)."""
        self._clear_all()

    # =========================================================================
    # Sky
    # =========================================================================

    def set_sky(self, sky: tuple[float, float, float]) -> None:
        """Set the radiance returned for rays that escape the scene.

        Raises:
            ValueError: If any component is negative.
        """
        set_sky(sky)

    @property
    def sky(self) -> tuple[float, float, float]:
        """The current sky radiance."""
        return get_sky()

    # =========================================================================
    # Material Management
    # =========================================================================

    def _register_material(
        self,
        material_type: MaterialType,
        type_index: int,
        params: dict[str, Any],
    ) -> int:
        """Assign a unified material ID to a type-local registry entry."""
        material_id = num_materials[None]
        if material_id >= MAX_MATERIALS:
            raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

        material_types[material_id] = int(material_type)
        material_type_indices[material_id] = type_index
        num_materials[None] = material_id + 1

        self.materials.append(
            MaterialInfo(
                material_id=material_id,
                material_type=material_type,
                type_index=type_index,
                params=params,
            )
        )
        return material_id

    def add_diffuse_material(self, color: tuple[float, float, float]) -> int:
        """Add a diffuse material to the scene.

        Args:
            color: The diffuse reflectance as (R, G, B), components in [0, 1].

        Returns:
            The unified material ID for this material.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If any color component is outside [0, 1].
        """
        type_index = add_diffuse_material(color)
        return self._register_material(MaterialType.DIFFUSE, type_index, {"color": color})

    def add_reflective_material(self, color: tuple[float, float, float]) -> int:
        """Add a reflective (mirror) material to the scene.

        Args:
            color: Reflectance at normal incidence as (R, G, B).

        Returns:
            The unified material ID for this material.
        """
        type_index = add_reflective_material(color)
        return self._register_material(MaterialType.REFLECTIVE, type_index, {"color": color})

    def add_transparent_material(
        self,
        color: tuple[float, float, float] = (1.0, 1.0, 1.0),
        ior: float = 1.5,
    ) -> int:
        """Add a transparent (dielectric) material to the scene.

        Args:
            color: Tint as (R, G, B). Default is clear.
            ior: Index of refraction. Default is 1.5 (typical glass).

        Returns:
            The unified material ID for this material.

        Raises:
            ValueError: If IOR is less than 1.0.
        """
        type_index = add_transparent_material(color, ior)
        return self._register_material(
            MaterialType.TRANSPARENT, type_index, {"color": color, "ior": ior}
        )

    def add_emissive_material(
        self,
        color: tuple[float, float, float],
        intensity: float = 1.0,
    ) -> int:
        """Add an emissive (light source) material to the scene.

        Args:
            color: Emission color as (R, G, B).
            intensity: Scale applied to the color.

        Returns:
            The unified material ID for this material.

        Raises:
            ValueError: If the color or intensity is negative.
        """
        type_index = add_emissive_material(color, intensity)
        return self._register_material(
            MaterialType.EMISSIVE, type_index, {"color": color, "intensity": intensity}
        )

    def get_material_count(self) -> int:
        """Get the total number of materials in the scene."""
        return int(num_materials[None])

    def get_material_info(self, material_id: int) -> MaterialInfo | None:
        """Get information about a material by ID, or None if not found."""
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id]
        return None

    def get_material_type_python(self, material_id: int) -> MaterialType:
        """Get the material type for a given material ID (Python side).

        Returns:
            The MaterialType, or MaterialType.NONE for invalid IDs.
        """
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id].material_type
        return MaterialType.NONE

    def _check_material_id(self, material_id: int) -> None:
        if material_id < 0 or material_id >= num_materials[None]:
            raise ValueError(f"Invalid material_id: {material_id}")

    # =========================================================================
    # Entity Management
    # =========================================================================

    def add_sphere(
        self,
        position: tuple[float, float, float],
        radius: float,
        material_id: int,
    ) -> int:
        """Add a sphere entity to the scene.

        Args:
            position: The center of the sphere as (x, y, z).
            radius: The radius of the sphere (positive).
            material_id: The unified material ID to assign.

        Returns:
            The entity index (traversal order).

        Raises:
            RuntimeError: If the maximum number of spheres is exceeded.
            ValueError: If material_id is invalid or the radius not positive.
        """
        self._check_material_id(material_id)
        sphere_index = add_sphere(position, radius)
        entity_index = add_entity(ShapeType.SPHERE, sphere_index, material_id)

        self.entities.append(
            EntityInfo(
                entity_index=entity_index,
                shape_type=ShapeType.SPHERE,
                shape_index=sphere_index,
                params={"position": position, "radius": radius},
                material_id=material_id,
            )
        )
        return entity_index

    def add_plane(
        self,
        position: tuple[float, float, float],
        normal: tuple[float, float, float],
        up: tuple[float, float, float],
        width: float,
        height: float,
        material_id: int,
    ) -> int:
        """Add a bounded plane entity to the scene.

        Args:
            position: Center of the patch as (x, y, z).
            normal: Unit facing direction.
            up: Unit vertical axis, orthogonal to normal.
            width: Full extent along up x normal.
            height: Full extent along up.
            material_id: The unified material ID to assign.

        Returns:
            The entity index (traversal order).

        Raises:
            RuntimeError: If the maximum number of planes is exceeded.
            ValueError: If material_id is invalid or the basis is not
                orthonormal.
        """
        self._check_material_id(material_id)
        plane_index = add_plane(position, normal, up, width, height)
        entity_index = add_entity(ShapeType.PLANE, plane_index, material_id)

        self.entities.append(
            EntityInfo(
                entity_index=entity_index,
                shape_type=ShapeType.PLANE,
                shape_index=plane_index,
                params={
                    "position": position,
                    "normal": normal,
                    "up": up,
                    "width": width,
                    "height": height,
                },
                material_id=material_id,
            )
        )
        return entity_index

    # =========================================================================
    # Convenience Methods (add entity with a new material in one call)
    # =========================================================================

    def add_diffuse_sphere(
        self,
        position: tuple[float, float, float],
        radius: float,
        color: tuple[float, float, float],
    ) -> tuple[int, int]:
        """Add a sphere with a new diffuse material.

        Returns:
            Tuple of (entity_index, material_id).
        """
        material_id = self.add_diffuse_material(color)
        return self.add_sphere(position, radius, material_id), material_id

    def add_reflective_sphere(
        self,
        position: tuple[float, float, float],
        radius: float,
        color: tuple[float, float, float] = (1.0, 1.0, 1.0),
    ) -> tuple[int, int]:
        """Add a sphere with a new reflective material.

        Returns:
            Tuple of (entity_index, material_id).
        """
        material_id = self.add_reflective_material(color)
        return self.add_sphere(position, radius, material_id), material_id

    def add_transparent_sphere(
        self,
        position: tuple[float, float, float],
        radius: float,
        ior: float = 1.5,
        color: tuple[float, float, float] = (1.0, 1.0, 1.0),
    ) -> tuple[int, int]:
        """Add a sphere with a new transparent material.

        Returns:
            Tuple of (entity_index, material_id).
        """
        material_id = self.add_transparent_material(color, ior)
        return self.add_sphere(position, radius, material_id), material_id

    def add_emissive_plane(
        self,
        position: tuple[float, float, float],
        normal: tuple[float, float, float],
        up: tuple[float, float, float],
        width: float,
        height: float,
        color: tuple[float, float, float],
        intensity: float = 1.0,
    ) -> tuple[int, int]:
        """Add a plane with a new emissive material (an area light).

        Returns:
            Tuple of (entity_index, material_id).
        """
        material_id = self.add_emissive_material(color, intensity)
        return self.add_plane(position, normal, up, width, height, material_id), material_id

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return get_sphere_count()

    def get_plane_count(self) -> int:
        """Get the number of planes in the scene."""
        return get_plane_count()

    def get_entity_count(self) -> int:
        """Get the total number of entities in the scene."""
        return get_entity_count()

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object."""
        config = SceneConfig(sky=list(self.sky))

        for mat in self.materials:
            mat_config: dict[str, Any] = {"type": mat.material_type.name.lower()}
            for key, value in mat.params.items():
                mat_config[key] = list(value) if isinstance(value, tuple) else value
            config.materials.append(mat_config)

        for entity in self.entities:
            entity_config: dict[str, Any] = {"shape": entity.shape_type.name.lower()}
            for key, value in entity.params.items():
                entity_config[key] = list(value) if isinstance(value, tuple) else value
            entity_config["material_id"] = entity.material_id
            config.entities.append(entity_config)

        return config

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Clears the current scene first. Materials are loaded before
        entities so that material IDs resolve.

        Raises:
            ValueError: If the configuration contains an unknown material or
                shape type, or invalid data.
        """
        self.clear()
        self.set_sky(_as_vec3(config.sky, (0.0, 0.0, 0.0)))

        for mat_config in config.materials:
            mat_type = mat_config.get("type", "").lower()
            if mat_type == "diffuse":
                self.add_diffuse_material(_as_vec3(mat_config.get("color"), (0.5, 0.5, 0.5)))
            elif mat_type == "reflective":
                self.add_reflective_material(_as_vec3(mat_config.get("color"), (1.0, 1.0, 1.0)))
            elif mat_type == "transparent":
                self.add_transparent_material(
                    _as_vec3(mat_config.get("color"), (1.0, 1.0, 1.0)),
                    float(mat_config.get("ior", 1.5)),
                )
            elif mat_type == "emissive":
                self.add_emissive_material(
                    _as_vec3(mat_config.get("color"), (1.0, 1.0, 1.0)),
                    float(mat_config.get("intensity", 1.0)),
                )
            else:
                raise ValueError(f"Unknown material type: {mat_type}")

        for entity_config in config.entities:
            shape = entity_config.get("shape", "").lower()
            material_id = int(entity_config.get("material_id", 0))
            if shape == "sphere":
                self.add_sphere(
                    _as_vec3(entity_config.get("position"), (0.0, 0.0, 0.0)),
                    float(entity_config.get("radius", 1.0)),
                    material_id,
                )
            elif shape == "plane":
                self.add_plane(
                    _as_vec3(entity_config.get("position"), (0.0, 0.0, 0.0)),
                    _as_vec3(entity_config.get("normal"), (0.0, 0.0, 1.0)),
                    _as_vec3(entity_config.get("up"), (0.0, 1.0, 0.0)),
                    float(entity_config.get("width", 1.0)),
                    float(entity_config.get("height", 1.0)),
                    material_id,
                )
            else:
                raise ValueError(f"Unknown shape type: {shape}")

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        config = self.to_config()
        return {
            "sky": config.sky,
            "materials": config.materials,
            "entities": config.entities,
        }

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary with 'sky', 'materials', 'entities'."""
        config = SceneConfig(
            sky=data.get("sky", [0.0, 0.0, 0.0]),
            materials=data.get("materials", []),
            entities=data.get("entities", []),
        )
        self.from_config(config)

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_spheres() -> int:
        """Get the maximum number of spheres supported."""
        return MAX_SPHERES

    @staticmethod
    def get_max_planes() -> int:
        """Get the maximum number of planes supported."""
        return MAX_PLANES

    @staticmethod
    def get_max_entities() -> int:
        """Get the maximum number of entities supported."""
        return MAX_ENTITIES

    @staticmethod
    def get_max_materials() -> int:
        """Get the maximum number of materials supported."""
        return MAX_MATERIALS


__all__ = [
    "MAX_MATERIALS",
    "NO_MATERIAL",
    "EntityInfo",
    "MaterialInfo",
    "MaterialType",
    "SceneConfig",
    "SceneManager",
    "get_emission",
    "get_material_type",
    "get_material_type_index",
    "material_type_indices",
    "material_types",
    "num_materials",
    "sample_material",
]
