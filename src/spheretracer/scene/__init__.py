"""Scene module for the scene model and ray-scene queries.

This module handles scene representation and intersection:

Components:
    model: Immutable Scene of spheres with a parallel list of materials
    buffers: Device (Taichi field) copy of a Scene
    intersection: Hit records and the nearest-hit search
    presets: The default showcase scene and camera

Scene data is organized for efficient kernel access:
    - Structure-of-Arrays layout for sphere and material data
    - Sphere id doubles as material index
    - Uploaded once per render and read-only while rays are in flight
"""

from .buffers import SceneBuffers
from .intersection import NO_HIT, Hit, hit_world, intersect_scene, make_miss
from .model import Scene, SphereInfo
from .presets import create_default_camera, create_default_scene

__all__ = [
    # Model
    "Scene",
    "SphereInfo",
    # Device buffers
    "SceneBuffers",
    # Intersection
    "Hit",
    "NO_HIT",
    "make_miss",
    "intersect_scene",
    "hit_world",
    # Presets
    "create_default_scene",
    "create_default_camera",
]
