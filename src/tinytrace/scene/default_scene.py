"""Default demo scene.

Four spheres in front of the camera, above a bounded checkerboard floor and
lit by three point lights:

- ivory sphere at (-3, 0, -16), radius 2 (the orbiting sphere, index 0)
- glass sphere at (-1, -1.5, -12), radius 2
- red rubber sphere at (1.5, -0.5, -18), radius 3
- mirror sphere at (7, 5, -18), radius 4

The camera sits at the origin looking down -Z with a 1 radian field of view.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.tinytrace.scene.default_scene import create_default_scene
    >>> from src.tinytrace.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_default_scene()
    >>> setup_camera(camera)
"""

import math

from src.tinytrace.camera.pinhole import PinholeCamera
from src.tinytrace.materials.phong import GLASS, IVORY, MIRROR, RED_RUBBER
from src.tinytrace.scene.manager import Scene

# Index of the sphere that circles around the scene
ORBITING_SPHERE = 0

# Orbit parameters: circle of radius 8 in the y = 0 plane centred on z = -16
ORBIT_RADIUS = 8.0
ORBIT_CENTER_Z = -16.0
ORBIT_STEP_DEGREES = 4


def create_default_scene() -> tuple[Scene, PinholeCamera]:
    """Create the default four-sphere scene.

    Returns:
        A tuple of (Scene, PinholeCamera). The scene is not uploaded yet;
        the renderer uploads it at the start of every frame.
    """
    scene = Scene()

    scene.add_sphere((-3.0, 0.0, -16.0), 2.0, IVORY)
    scene.add_sphere((-1.0, -1.5, -12.0), 2.0, GLASS)
    scene.add_sphere((1.5, -0.5, -18.0), 3.0, RED_RUBBER)
    scene.add_sphere((7.0, 5.0, -18.0), 4.0, MIRROR)

    scene.add_light((-20.0, 20.0, 20.0), 1.5)
    scene.add_light((30.0, 50.0, -25.0), 1.8)
    scene.add_light((30.0, 20.0, 30.0), 1.7)

    camera = PinholeCamera()

    return scene, camera


def orbit_position(angle: int, y: float = 0.0) -> tuple[float, float, float]:
    """Center of the orbiting sphere at a given angle.

    Args:
        angle: Orbit angle in degrees.
        y: Height of the sphere, which the orbit leaves unchanged.

    Returns:
        (cos(angle) * 8, y, sin(angle) * 8 - 16)
    """
    radians = math.radians(angle)
    return (
        math.cos(radians) * ORBIT_RADIUS,
        y,
        math.sin(radians) * ORBIT_RADIUS + ORBIT_CENTER_Z,
    )
