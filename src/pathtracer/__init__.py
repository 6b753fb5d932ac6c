"""Taichi-based Monte Carlo path tracer.

This package renders scenes of spheres and bounded planes with a
unidirectional path tracer running in Taichi kernels, with support for:
- Diffuse, reflective, transparent (dielectric) and emissive materials
- Nearest-hit traversal over an ordered entity list
- Pinhole and orthographic cameras
- Film accumulation with sRGB PNG output and progressive rendering

Subpackages:
    core: Ray math, sampling, the path integrator, film and render loop
    geometry: Sphere and plane primitives with ray intersection
    materials: Material sampling models and their registries
    scene: Entity storage, scene traversal and the scene manager
    camera: Camera models with primary ray generation
    preview: Display and export utilities
"""

__version__ = "0.1.0"
