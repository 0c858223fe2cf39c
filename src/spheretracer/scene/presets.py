"""Default sphere scene and camera.

The default scene is a small showcase of every material:
- A huge Lambertian sphere acting as the ground
- A front row of two diffuse spheres and a mirror
- A back row of green metals with increasing roughness (0, 0.2, 0.6)
- A glass sphere floating above the rows
- A small, bright emissive sphere that lights the scene

Example:
    >>> from src.spheretracer.scene.presets import (
    ...     create_default_camera, create_default_scene
    ... )
    >>> scene = create_default_scene()
    >>> scene.describe()["object_count"]
    9
    >>> camera = create_default_camera()
    >>> camera.vfov
    60.0
"""

from src.spheretracer.camera.thin_lens import ThinLensCamera
from src.spheretracer.materials import Dielectric, Lambertian, Metal
from src.spheretracer.scene.model import Scene, SphereInfo

# =============================================================================
# Scene Parameters
# =============================================================================

# Ground sphere, big enough to look flat around the origin
GROUND_CENTER = (0.0, -100.5, -1.0)
GROUND_RADIUS = 100.0
GROUND_ALBEDO = (0.8, 0.8, 0.8)

# Radius of the showcase spheres
SPHERE_RADIUS = 0.5

# Glass index of refraction
GLASS_IOR = 1.5

# Light sphere (warm white, much brighter than 1 so it lights the scene)
LIGHT_CENTER = (-1.5, 1.5, 0.0)
LIGHT_RADIUS = 0.3
LIGHT_EMISSIVE = (30.0, 25.0, 15.0)

# Default camera
CAMERA_LOOKFROM = (0.0, 2.0, 3.0)
CAMERA_LOOKAT = (0.0, 0.0, 0.0)
CAMERA_VFOV = 60.0
CAMERA_APERTURE = 0.1
CAMERA_FOCUS_DIST = 3.0


# =============================================================================
# Scene Factory
# =============================================================================


def create_default_scene() -> Scene:
    """Create the nine-sphere showcase scene.

    Returns:
        The immutable Scene, spheres in intersection order.
    """
    r = SPHERE_RADIUS
    return Scene.from_objects(
        [
            # Ground
            (SphereInfo(GROUND_CENTER, GROUND_RADIUS), Lambertian(albedo=GROUND_ALBEDO)),
            # Front row: two diffuse spheres and a blue mirror
            (SphereInfo((2.0, 0.0, -1.0), r), Lambertian(albedo=(0.8, 0.4, 0.4))),
            (SphereInfo((0.0, 0.0, -1.0), r), Lambertian(albedo=(0.4, 0.8, 0.4))),
            (SphereInfo((-2.0, 0.0, -1.0), r), Metal(albedo=(0.4, 0.4, 0.8), roughness=0.0)),
            # Back row: green metals from polished to rough
            (SphereInfo((2.0, 0.0, 1.0), r), Metal(albedo=(0.4, 0.8, 0.4), roughness=0.0)),
            (SphereInfo((0.0, 0.0, 1.0), r), Metal(albedo=(0.4, 0.8, 0.4), roughness=0.2)),
            (SphereInfo((-2.0, 0.0, 1.0), r), Metal(albedo=(0.4, 0.8, 0.4), roughness=0.6)),
            # Glass
            (SphereInfo((0.5, 1.0, 0.5), r), Dielectric(albedo=(0.4, 0.4, 0.4), ior=GLASS_IOR)),
            # Light
            (
                SphereInfo(LIGHT_CENTER, LIGHT_RADIUS),
                Lambertian(albedo=(0.8, 0.6, 0.2), emissive=LIGHT_EMISSIVE),
            ),
        ]
    )


def create_default_camera() -> ThinLensCamera:
    """Create the camera that frames the default scene from above and in front.

    Returns:
        A ThinLensCamera focused on the origin with a slight depth of field.
    """
    return ThinLensCamera(
        lookfrom=CAMERA_LOOKFROM,
        lookat=CAMERA_LOOKAT,
        vup=(0.0, 1.0, 0.0),
        vfov=CAMERA_VFOV,
        aperture=CAMERA_APERTURE,
        focus_dist=CAMERA_FOCUS_DIST,
    )
