"""Cornell box demo scene.

A closed box of bounded planes lit by a small square area light under the
ceiling, holding a mirror sphere and a glass sphere:

- Back wall, floor and ceiling: white diffuse
- Left wall: red diffuse
- Right wall: green diffuse
- Light: emissive square just below the ceiling
- Mirror sphere on the left, glass sphere on the right

The box spans x in [-4, 4] and y in [-5, 5] with the back wall at z = 3;
the camera sits at z = -7 looking down +z through the open front.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.pathtracer.scene.cornell_box import create_cornell_box_scene
    >>> from src.pathtracer.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_cornell_box_scene()
    >>> setup_camera(camera)
"""

import math
from dataclasses import dataclass

from src.pathtracer.camera.pinhole import PinholeCamera
from src.pathtracer.scene.manager import SceneManager

# =============================================================================
# Cornell Box Constants
# =============================================================================

IMAGE_WIDTH = 800
IMAGE_HEIGHT = 600

SKY_RADIANCE = (0.05, 0.05, 0.1)

WHITE_ALBEDO = (0.8, 0.8, 0.8)
RED_ALBEDO = (0.8, 0.1, 0.1)
GREEN_ALBEDO = (0.1, 0.8, 0.1)

LIGHT_COLOR = (1.0, 1.0, 1.0)
LIGHT_INTENSITY = 27.777

MIRROR_COLOR = (1.0, 1.0, 1.0)
GLASS_COLOR = (1.0, 1.0, 1.0)
GLASS_IOR = 1.75


@dataclass
class CornellBoxParams:
    """Parameters for customizing the Cornell box.

    Attributes:
        light_intensity: Scale applied to the light color.
        light_color: RGB color of the area light.
        left_wall_color: Albedo of the left wall.
        right_wall_color: Albedo of the right wall.
        white_color: Albedo of the back wall, floor and ceiling.
        glass_ior: Index of refraction of the glass sphere.
        sky: Radiance of rays leaving the box.
    """

    light_intensity: float = LIGHT_INTENSITY
    light_color: tuple[float, float, float] = LIGHT_COLOR
    left_wall_color: tuple[float, float, float] = RED_ALBEDO
    right_wall_color: tuple[float, float, float] = GREEN_ALBEDO
    white_color: tuple[float, float, float] = WHITE_ALBEDO
    glass_ior: float = GLASS_IOR
    sky: tuple[float, float, float] = SKY_RADIANCE


def create_cornell_box_camera(
    width: int = IMAGE_WIDTH,
    height: int = IMAGE_HEIGHT,
) -> PinholeCamera:
    """Create the Cornell box camera for a given image size."""
    return PinholeCamera(
        position=(0.0, 0.0, -7.0),
        look_dir=(0.0, 0.0, 1.0),
        up=(0.0, 1.0, 0.0),
        fov=math.pi / 2.0,
        aspect_ratio=width / height,
    )


def create_cornell_box_scene(
    params: CornellBoxParams | None = None,
    width: int = IMAGE_WIDTH,
    height: int = IMAGE_HEIGHT,
) -> tuple[SceneManager, PinholeCamera]:
    """Build the Cornell box into a fresh SceneManager.

    Entities are added in the order back wall, floor, left wall, right wall,
    light, ceiling, mirror sphere, glass sphere.

    Args:
        params: Optional scene customization.
        width: Image width used for the camera aspect ratio.
        height: Image height used for the camera aspect ratio.

    Returns:
        Tuple of (scene, camera).
    """
    if params is None:
        params = CornellBoxParams()

    scene = SceneManager(sky=params.sky)

    light = scene.add_emissive_material(params.light_color, params.light_intensity)
    white = scene.add_diffuse_material(params.white_color)
    right_color = scene.add_diffuse_material(params.right_wall_color)
    left_color = scene.add_diffuse_material(params.left_wall_color)
    mirror = scene.add_reflective_material(MIRROR_COLOR)
    glass = scene.add_transparent_material(GLASS_COLOR, params.glass_ior)

    # Back wall
    scene.add_plane((0.0, 0.0, 3.0), (0.0, 0.0, -1.0), (0.0, 1.0, 0.0), 8.0, 10.0, white)
    # Floor
    scene.add_plane((0.0, -5.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0), 8.0, 6.0, white)
    # Left wall
    scene.add_plane((-4.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0), 8.0, 10.0, left_color)
    # Right wall
    scene.add_plane((4.0, 0.0, 0.0), (-1.0, 0.0, 0.0), (0.0, 1.0, 0.0), 8.0, 10.0, right_color)
    # Light, just below the ceiling
    scene.add_plane((0.0, 4.95, 0.0), (0.0, -1.0, 0.0), (0.0, 0.0, 1.0), 1.3, 1.3, light)
    # Ceiling
    scene.add_plane((0.0, 5.0, 0.0), (0.0, -1.0, 0.0), (0.0, 0.0, 1.0), 8.0, 6.0, white)

    scene.add_sphere((-1.75, -2.5, 2.0), 1.35, mirror)
    scene.add_sphere((2.0, -2.25, 0.5), 1.5, glass)

    return scene, create_cornell_box_camera(width, height)
