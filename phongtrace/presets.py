"""
Built-in demo scenes.

All presets share a camera at the origin looking down -Z and a white
point light at (5, 5, 5) whose brightness falls off with distance.
"""

from __future__ import annotations
from typing import Callable, Dict

from .vec3 import Vec3, Point3, Color
from .camera import Camera
from .shapes import Sphere, Cube, Plane, Cylinder
from .materials import Material
from .lights import PointLight
from .scene import Scene

# Attenuation used by the demo lights: 1 / (1 + 0.1 d + 0.01 d²)
DEMO_FALLOFF = (1.0, 0.1, 0.01)

DEFAULT_PRESET = 'scene1'


def _base_scene(aspect_ratio: float) -> Scene:
    scene = Scene()
    scene.set_camera(Camera(
        position=Point3(0, 0, 0),
        look_at=Point3(0, 0, -1),
        up=Vec3(0, 1, 0),
        fov=45.0,
        aspect_ratio=aspect_ratio
    ))
    scene.add_light(PointLight(Point3(5, 5, 5), Color(1, 1, 1), 1.0, DEMO_FALLOFF))
    return scene


def create_sphere_scene(aspect_ratio: float = 4 / 3) -> Scene:
    """A single large red sphere."""
    scene = _base_scene(aspect_ratio)
    red = Material(Color(0.8, 0.2, 0.2), 0.2, 0.8, 0.3, 100.0)
    scene.add_object(Sphere(Point3(0, 0, -5), 2.0, red))
    return scene


def create_plane_cube_scene(aspect_ratio: float = 4 / 3) -> Scene:
    """A cube resting above a ground plane, under a dim light."""
    scene = _base_scene(aspect_ratio)
    scene.clear_lights()
    scene.add_light(PointLight(Point3(5, 5, 5), Color(0.3, 0.3, 0.3), 0.3, DEMO_FALLOFF))

    lavender = Material(Color(0.9, 0.8, 0.95), 0.3, 0.8, 0.3, 200.0)
    light_blue = Material(Color(0.7, 0.9, 1.0), 0.3, 0.8, 0.4, 200.0)

    scene.add_object(Plane(Point3(0, -2, 0), Vec3(0, 1, 0), lavender))
    scene.add_object(Cube(Point3(0, 0, -5), 1.0, light_blue))
    return scene


def _add_all_objects(scene: Scene) -> None:
    gray = Material(Color(0.5, 0.5, 0.5), 0.1, 0.7, 0.2, 200.0)
    red = Material(Color(0.8, 0.2, 0.2), 0.1, 0.7, 0.2, 200.0)
    green = Material(Color(0.2, 0.8, 0.2), 0.1, 0.7, 0.2, 200.0)
    blue = Material(Color(0.2, 0.2, 0.8), 0.1, 0.7, 0.2, 200.0)

    scene.add_object(Plane(Point3(0, -2, 0), Vec3(0, 1, 0), gray))
    scene.add_object(Sphere(Point3(-2, 0, -5), 1.0, red))
    scene.add_object(Cube(Point3(2, 0, -5), 1.0, green))
    scene.add_object(Cylinder(Point3(0, 0, -7), 0.5, 2.0, blue))


def create_all_objects_scene(aspect_ratio: float = 4 / 3) -> Scene:
    """Plane, sphere, cube and cylinder seen head-on."""
    scene = _base_scene(aspect_ratio)
    _add_all_objects(scene)
    return scene


def create_different_perspective_scene(aspect_ratio: float = 4 / 3) -> Scene:
    """The same objects as scene3 from an elevated position to the left."""
    scene = _base_scene(aspect_ratio)
    scene.set_camera(Camera(
        position=Point3(-3, 3, 2),
        look_at=Point3(0, 0, -5),
        up=Vec3(0, 1, 0),
        fov=45.0,
        aspect_ratio=aspect_ratio
    ))
    _add_all_objects(scene)
    return scene


PRESETS: Dict[str, Callable[[float], Scene]] = {
    'scene1': create_sphere_scene,
    'scene2': create_plane_cube_scene,
    'scene3': create_all_objects_scene,
    'scene4': create_different_perspective_scene,
}


def build_preset(name: str, aspect_ratio: float = 4 / 3) -> Scene:
    """Build a preset scene by name; unknown names give scene1."""
    factory = PRESETS.get(name, PRESETS[DEFAULT_PRESET])
    return factory(aspect_ratio)
