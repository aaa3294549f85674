"""
PhongTrace - A Python Phong Ray Tracer

A small classic (Whitted-style) ray tracer with support for:
- Spheres, axis-aligned cubes, infinite planes and finite cylinders
- Phong shading (ambient, diffuse, specular) from point lights
- Hard shadows
- Bounded recursive mirror reflection
- Multi-threaded tile rendering with deterministic output
- YAML/JSON scene descriptions
- PPM and Pillow image output
"""

__version__ = "0.1.0"
__author__ = "PhongTrace Team"

from .vec3 import Vec3, Point3, Color
from .ray import Ray
from .errors import PhongTraceError, SceneError, SceneParseError
from .materials import Material
from .shapes import Shape, HitRecord, Sphere, Cube, Plane, Cylinder, HIT_EPSILON
from .lights import PointLight
from .camera import Camera
from .scene import Scene
from .shading import Shader
from .renderer import Renderer, RenderSettings, render, to_ldr, write_ppm, save_image
from .scene_parser import SceneParser, load_scene, parse_scene
from .presets import PRESETS, build_preset
