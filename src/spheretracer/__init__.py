"""Taichi-based Monte Carlo path tracer for scenes of spheres.

This package renders a static list of spheres with progressive accumulation:
- Thin-lens camera with depth of field
- Lambertian, metal and dielectric materials, any of which may emit
- Deterministic hash-based sampling, reproducible across backends
- Frame-by-frame blending into a persistent float backbuffer

Subpackages:
    core: Ray math, RNG, settings, integrator and rendering loop
    geometry: Sphere primitive and ray-sphere intersection
    materials: Scattering models
    scene: Immutable scene model, device upload, intersector and presets
    camera: Thin-lens camera
    preview: Image export utilities
"""

__version__ = "0.1.0"
