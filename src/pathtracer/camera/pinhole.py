"""Camera models for primary ray generation.

Two cameras are provided:
- PinholeCamera: perspective projection through a single point
- OrthographicCamera: parallel rays from a rectangular film

Both map normalized film coordinates to a world-space ray:
- film_x = 0: left edge, film_x = 1: right edge
- film_y = 0: bottom edge, film_y = 1: top edge

The camera basis is built from the look direction and up vector:
- right = up x look
- up: vertical axis of the film
- look: viewing direction

Only one camera is active at a time; setup_camera() writes the active
camera into Taichi fields and generate_ray() reads them inside kernels.

Example:
    >>> import math
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.pathtracer.camera.pinhole import PinholeCamera, setup_camera, generate_ray
    >>>
    >>> camera = PinholeCamera(
    ...     position=(0.0, 0.0, -7.0),
    ...     look_dir=(0.0, 0.0, 1.0),
    ...     up=(0.0, 1.0, 0.0),
    ...     fov=math.pi / 2.0,
    ...     aspect_ratio=800.0 / 600.0,
    ... )
    >>> setup_camera(camera)
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = generate_ray(0.5, 0.5)  # Ray through image center
"""

import math
from dataclasses import dataclass
from enum import IntEnum

import numpy as np
import taichi as ti
import taichi.math as tm

from src.pathtracer.core.ray import Ray, make_ray

vec3 = tm.vec3

# =============================================================================
# Camera Data Structures
# =============================================================================


class CameraType(IntEnum):
    """Enumeration of supported camera models."""

    PINHOLE = 0
    ORTHOGRAPHIC = 1


@dataclass
class PinholeCamera:
    """Configuration for a pinhole (perspective) camera.

    Attributes:
        position: Camera position in world space (x, y, z).
        look_dir: Viewing direction (normalized during setup).
        up: Up direction, orthogonal to look_dir.
        fov: Horizontal field of view in radians, in (0, pi).
        aspect_ratio: Width divided by height of the output image.
    """

    position: tuple[float, float, float]
    look_dir: tuple[float, float, float]
    up: tuple[float, float, float]
    fov: float
    aspect_ratio: float


@dataclass
class OrthographicCamera:
    """Configuration for an orthographic (parallel projection) camera.

    Attributes:
        scale: Width of the film in world units.
        aspect_ratio: Width divided by height of the output image.
        position: Center of the film in world space.
        look_dir: Direction shared by every ray.
        up: Up direction, orthogonal to look_dir.
    """

    scale: float
    aspect_ratio: float
    position: tuple[float, float, float]
    look_dir: tuple[float, float, float]
    up: tuple[float, float, float]


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_type = ti.field(dtype=ti.i32, shape=())
_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())

# Orthonormal basis
_camera_right = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_up = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_look = ti.Vector.field(3, dtype=ti.f32, shape=())

# Pinhole film parameters
_film_width = ti.field(dtype=ti.f32, shape=())
_aspect_ratio = ti.field(dtype=ti.f32, shape=())

# Orthographic film rectangle
_film_horizontal = ti.Vector.field(3, dtype=ti.f32, shape=())
_film_vertical = ti.Vector.field(3, dtype=ti.f32, shape=())
_film_corner = ti.Vector.field(3, dtype=ti.f32, shape=())


# =============================================================================
# Camera Setup (Python-side)
# =============================================================================


def _build_basis(
    look_dir: tuple[float, float, float],
    up: tuple[float, float, float],
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Build (right, up, look) from a look direction and up vector.

    Raises:
        ValueError: If either vector is zero or they are parallel.
    """
    look = np.array(look_dir, dtype=np.float64)
    vup = np.array(up, dtype=np.float64)

    look_len = np.linalg.norm(look)
    up_len = np.linalg.norm(vup)
    if look_len == 0.0 or up_len == 0.0:
        raise ValueError("Camera look and up directions must be non-zero")
    look = look / look_len
    vup = vup / up_len

    right = np.cross(vup, look)
    right_len = np.linalg.norm(right)
    if right_len < 1e-6:
        raise ValueError("Camera look and up directions must not be parallel")
    right = right / right_len

    # Re-orthogonalize up against look
    vup = np.cross(look, right)
    return right, vup, look


def _validate_aspect_ratio(aspect_ratio: float) -> None:
    if aspect_ratio <= 0.0:
        raise ValueError(f"Aspect ratio must be positive, got {aspect_ratio}")


def setup_camera(camera: PinholeCamera | OrthographicCamera) -> None:
    """Make a camera the active camera for ray generation.

    Args:
        camera: A PinholeCamera or OrthographicCamera configuration.

    Raises:
        ValueError: If the field of view is outside (0, pi), the scale or
            aspect ratio is not positive, or the basis is degenerate.
        TypeError: If the camera type is not supported.
    """
    if isinstance(camera, PinholeCamera):
        if not 0.0 < camera.fov < math.pi:
            raise ValueError(f"Field of view must be in (0, pi) radians, got {camera.fov}")
        _validate_aspect_ratio(camera.aspect_ratio)
        right, up, look = _build_basis(camera.look_dir, camera.up)

        _camera_type[None] = int(CameraType.PINHOLE)
        _film_width[None] = 2.0 * math.tan(camera.fov / 2.0)
        _aspect_ratio[None] = camera.aspect_ratio

    elif isinstance(camera, OrthographicCamera):
        if camera.scale <= 0.0:
            raise ValueError(f"Orthographic scale must be positive, got {camera.scale}")
        _validate_aspect_ratio(camera.aspect_ratio)
        right, up, look = _build_basis(camera.look_dir, camera.up)

        horizontal = right * camera.scale
        vertical = up * (camera.scale / camera.aspect_ratio)
        corner = np.array(camera.position, dtype=np.float64) - horizontal / 2.0 - vertical / 2.0

        _camera_type[None] = int(CameraType.ORTHOGRAPHIC)
        _film_horizontal[None] = horizontal.tolist()
        _film_vertical[None] = vertical.tolist()
        _film_corner[None] = corner.tolist()

    else:
        raise TypeError(f"Unsupported camera type: {type(camera).__name__}")

    _camera_origin[None] = [float(c) for c in camera.position]
    _camera_right[None] = right.tolist()
    _camera_up[None] = up.tolist()
    _camera_look[None] = look.tolist()


# =============================================================================
# Ray Generation (Taichi-compatible)
# =============================================================================


@ti.func
def _generate_pinhole_ray(film_x: ti.f32, film_y: ti.f32) -> Ray:
    width = _film_width[None]
    local_x = width * (film_x - 0.5)
    local_y = width * (film_y - 0.5) / _aspect_ratio[None]
    direction = local_x * _camera_right[None] + local_y * _camera_up[None] + _camera_look[None]
    return make_ray(_camera_origin[None], tm.normalize(direction))


@ti.func
def _generate_orthographic_ray(film_x: ti.f32, film_y: ti.f32) -> Ray:
    origin = _film_corner[None] + film_x * _film_horizontal[None] + film_y * _film_vertical[None]
    return make_ray(origin, _camera_look[None])


@ti.func
def generate_ray(film_x: ti.f32, film_y: ti.f32) -> Ray:
    """Generate the primary ray through normalized film coordinates.

    Args:
        film_x: Horizontal coordinate in [0, 1] (left to right).
        film_y: Vertical coordinate in [0, 1] (bottom to top).

    Returns:
        A Ray with unit direction from the active camera.
    """
    ray = _generate_pinhole_ray(film_x, film_y)
    if _camera_type[None] == int(CameraType.ORTHOGRAPHIC):
        ray = _generate_orthographic_ray(film_x, film_y)
    return ray


@ti.kernel
def _generate_ray_kernel(film_x: ti.f32, film_y: ti.f32) -> ti.types.vector(6, ti.f32):
    ray = generate_ray(film_x, film_y)
    return ti.Vector(
        [
            ray.origin.x,
            ray.origin.y,
            ray.origin.z,
            ray.direction.x,
            ray.direction.y,
            ray.direction.z,
        ]
    )


def generate_ray_python(
    film_x: float, film_y: float
) -> tuple[tuple[float, float, float], tuple[float, float, float]]:
    """Generate a primary ray from Python scope.

    Returns:
        Tuple of (origin, direction).
    """
    values = _generate_ray_kernel(film_x, film_y)
    origin = (float(values[0]), float(values[1]), float(values[2]))
    direction = (float(values[3]), float(values[4]), float(values[5]))
    return origin, direction


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, object]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with the camera type, origin and basis vectors.
    """

    def _as_tuple(field) -> tuple[float, float, float]:
        value = field[None]
        return (float(value[0]), float(value[1]), float(value[2]))

    return {
        "type": CameraType(int(_camera_type[None])),
        "origin": _as_tuple(_camera_origin),
        "right": _as_tuple(_camera_right),
        "up": _as_tuple(_camera_up),
        "look": _as_tuple(_camera_look),
    }
