"""Camera module for primary ray generation.

Components:
    pinhole: PinholeCamera (perspective) and OrthographicCamera models

Ray generation uses normalized film coordinates:
    film_x in [0, 1]: left to right across the image
    film_y in [0, 1]: bottom to top across the image
"""

from .pinhole import (
    CameraType,
    OrthographicCamera,
    PinholeCamera,
    generate_ray,
    generate_ray_python,
    get_camera_info,
    setup_camera,
)

__all__ = [
    "CameraType",
    "PinholeCamera",
    "OrthographicCamera",
    "setup_camera",
    "generate_ray",
    "generate_ray_python",
    "get_camera_info",
]
