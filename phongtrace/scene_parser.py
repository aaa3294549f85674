"""
Scene description language parser.

Supports a YAML-based scene description format (JSON also accepted) with:
- Camera configuration
- Render settings
- Materials library
- Objects (sphere, cube, plane, cylinder)
- Point lights

Example scene file:
```yaml
camera:
  position: [0, 0, 5]
  look_at: [0, 0, 0]
  up: [0, 1, 0]
  fov: 45

background: [0.7, 0.8, 1.0]

render:
  width: 320
  height: 240
  max_depth: 5
  reflection: true

materials:
  red:
    color: [0.8, 0.2, 0.2]
    diffuse: 0.7
  mirror:
    preset: reflective
    color: [0.9, 0.9, 0.9]
    reflectivity: 0.8

objects:
  - type: sphere
    center: [0, 0, 0]
    radius: 1
    material: red

  - type: plane
    point: [0, -1, 0]
    normal: [0, 1, 0]
    material: mirror

lights:
  - position: [5, 5, 5]
    color: [1, 1, 1]
    intensity: 1
```
"""

from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional, Tuple

import yaml

from .vec3 import Vec3, Point3, Color
from .camera import Camera
from .shapes import Sphere, Cube, Plane, Cylinder
from .materials import Material
from .lights import PointLight, NO_FALLOFF
from .scene import Scene
from .renderer import RenderSettings
from .errors import SceneParseError

logger = logging.getLogger(__name__)

MATERIAL_FIELDS = (
    'ambient', 'diffuse', 'specular', 'shininess',
    'reflectivity', 'transparency', 'refractive_index'
)


class SceneParser:
    """Parser for scene description files."""

    def __init__(self):
        self.materials: Dict[str, Material] = {}
        self.scene = Scene()
        self.settings: Optional[RenderSettings] = None

    def parse_file(self, filepath: str) -> Tuple[Scene, RenderSettings]:
        """Parse a scene file.

        Args:
            filepath: Path to the scene file (YAML or JSON)

        Returns:
            Tuple of (scene, settings)
        """
        path = Path(filepath)
        if not path.exists():
            raise SceneParseError(f"Scene file not found: {filepath}")

        content = path.read_text()

        try:
            if path.suffix == '.json':
                data = json.loads(content)
            else:
                # YAML is a superset of JSON, so it covers unknown suffixes too
                data = yaml.safe_load(content)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise SceneParseError(f"Cannot parse scene file {filepath}: {e}") from e

        if not isinstance(data, dict):
            raise SceneParseError(f"Scene file {filepath} must contain a mapping")

        logger.debug("Loaded scene description from %s", path)
        return self.parse_dict(data)

    def parse_dict(self, data: Dict[str, Any]) -> Tuple[Scene, RenderSettings]:
        """Parse a scene from a dictionary.

        Args:
            data: Scene description dictionary

        Returns:
            Tuple of (scene, settings)
        """
        if not isinstance(data, dict):
            raise SceneParseError(f"Scene description must be a mapping, got {type(data).__name__}")

        # Parse materials first (objects reference them)
        if 'materials' in data:
            self._parse_materials(data['materials'])

        if 'objects' in data:
            self._parse_objects(data['objects'])

        if 'lights' in data:
            self._parse_lights(data['lights'])

        if 'background' in data:
            self.scene.background = self._parse_color(data['background'])

        if 'render' in data:
            self._parse_settings(data['render'])
        else:
            self.settings = RenderSettings()

        if 'camera' in data:
            self._parse_camera(data['camera'])
        else:
            # Default camera
            self.scene.set_camera(Camera(
                position=Point3(0, 0, 5),
                look_at=Point3(0, 0, 0),
                fov=45
            ))

        logger.info(
            "Parsed scene: %d objects, %d lights, %d materials",
            len(self.scene.objects), len(self.scene.lights), len(self.materials)
        )
        return self.scene, self.settings

    def _parse_vec3(self, data: Any) -> Vec3:
        """Parse a Vec3 from various formats."""
        try:
            if isinstance(data, (list, tuple)):
                if len(data) != 3:
                    raise SceneParseError(f"Vec3 must have 3 components, got {len(data)}")
                return Vec3(float(data[0]), float(data[1]), float(data[2]))
            elif isinstance(data, dict):
                return Vec3(
                    float(data.get('x', 0)),
                    float(data.get('y', 0)),
                    float(data.get('z', 0))
                )
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Cannot parse Vec3 from: {data}") from e
        raise SceneParseError(f"Cannot parse Vec3 from: {data}")

    def _parse_color(self, data: Any) -> Color:
        """Parse a Color from a list, an {r, g, b} map or a #rrggbb string."""
        if isinstance(data, dict):
            try:
                return Color(
                    float(data.get('r', 0)),
                    float(data.get('g', 0)),
                    float(data.get('b', 0))
                )
            except (TypeError, ValueError) as e:
                raise SceneParseError(f"Cannot parse Color from: {data}") from e
        elif isinstance(data, str):
            hex_color = data[1:] if data.startswith('#') else ''
            if len(hex_color) == 6:
                try:
                    r = int(hex_color[0:2], 16) / 255.0
                    g = int(hex_color[2:4], 16) / 255.0
                    b = int(hex_color[4:6], 16) / 255.0
                except ValueError as e:
                    raise SceneParseError(f"Cannot parse color from string: {data}") from e
                return Color(r, g, b)
            raise SceneParseError(f"Cannot parse color from string: {data}")
        return self._parse_vec3(data)

    def _parse_bool(self, data: Dict[str, Any], key: str, default: bool) -> bool:
        value = data.get(key, default)
        if not isinstance(value, bool):
            raise SceneParseError(f"'{key}' must be true or false, got {value!r}")
        return value

    def _parse_float(self, data: Dict[str, Any], key: str, default: float) -> float:
        value = data.get(key, default)
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"'{key}' must be a number, got {value!r}") from e

    def _parse_material(self, mat_data: Dict[str, Any]) -> Material:
        """Build one material, starting from an optional preset."""
        if not isinstance(mat_data, dict):
            raise SceneParseError(f"Material must be a mapping, got {mat_data!r}")

        preset = str(mat_data.get('preset', 'default')).lower()
        color = self._parse_color(mat_data.get('color', [0.5, 0.5, 0.5]))

        if preset == 'default':
            base = Material(color=color)
        elif preset == 'reflective':
            base = Material.reflective(color, self._parse_float(mat_data, 'reflectivity', 0.5))
        elif preset == 'transparent':
            base = Material.transparent(
                color,
                self._parse_float(mat_data, 'transparency', 0.9),
                self._parse_float(mat_data, 'refractive_index', 1.5)
            )
        else:
            raise SceneParseError(f"Unknown material preset: {preset}")

        overrides = {
            name: self._parse_float(mat_data, name, getattr(base, name))
            for name in MATERIAL_FIELDS
        }
        return Material(color=color, **overrides)

    def _parse_materials(self, materials_data: Dict[str, Any]) -> None:
        """Parse materials section."""
        if not isinstance(materials_data, dict):
            raise SceneParseError("'materials' must be a mapping of name to material")
        for name, mat_data in materials_data.items():
            self.materials[name] = self._parse_material(mat_data)

    def _get_material(self, mat_ref: Any) -> Material:
        """Get a material by name or inline definition."""
        if mat_ref is None:
            return Material.default()
        if isinstance(mat_ref, str):
            if mat_ref not in self.materials:
                raise SceneParseError(f"Unknown material: {mat_ref}")
            return self.materials[mat_ref]
        elif isinstance(mat_ref, dict):
            return self._parse_material(mat_ref)
        else:
            raise SceneParseError(f"Invalid material reference: {mat_ref}")

    def _parse_objects(self, objects_data: list) -> None:
        """Parse objects section."""
        if not isinstance(objects_data, list):
            raise SceneParseError("'objects' must be a list of objects")
        for obj_data in objects_data:
            if not isinstance(obj_data, dict):
                raise SceneParseError(f"Object must be a mapping, got {obj_data!r}")
            obj_type = str(obj_data.get('type', 'sphere')).lower()
            material = self._get_material(obj_data.get('material'))

            if obj_type == 'sphere':
                center = self._parse_vec3(obj_data.get('center', [0, 0, 0]))
                radius = self._parse_float(obj_data, 'radius', 1.0)
                self.scene.add_object(Sphere(center, radius, material))

            elif obj_type == 'cube':
                center = self._parse_vec3(obj_data.get('center', [0, 0, 0]))
                size = self._parse_float(obj_data, 'size', 1.0)
                self.scene.add_object(Cube(center, size, material))

            elif obj_type == 'plane':
                point = self._parse_vec3(obj_data.get('point', [0, 0, 0]))
                normal = self._parse_vec3(obj_data.get('normal', [0, 1, 0]))
                self.scene.add_object(Plane(point, normal, material))

            elif obj_type == 'cylinder':
                center = self._parse_vec3(obj_data.get('center', [0, 0, 0]))
                radius = self._parse_float(obj_data, 'radius', 0.5)
                height = self._parse_float(obj_data, 'height', 1.0)
                capped = self._parse_bool(obj_data, 'capped', True)
                self.scene.add_object(Cylinder(center, radius, height, material, capped))

            else:
                raise SceneParseError(f"Unknown object type: {obj_type}")

    def _parse_lights(self, lights_data: list) -> None:
        """Parse lights section."""
        if not isinstance(lights_data, list):
            raise SceneParseError("'lights' must be a list of lights")
        for light_data in lights_data:
            if not isinstance(light_data, dict):
                raise SceneParseError(f"Light must be a mapping, got {light_data!r}")
            light_type = str(light_data.get('type', 'point')).lower()
            if light_type != 'point':
                raise SceneParseError(f"Unknown light type: {light_type}")

            position = self._parse_vec3(light_data.get('position', [5, 5, 5]))
            color = self._parse_color(light_data.get('color', [1, 1, 1]))
            intensity = self._parse_float(light_data, 'intensity', 1.0)
            falloff = light_data.get('falloff', NO_FALLOFF)
            if not isinstance(falloff, (list, tuple)) or len(falloff) != 3:
                raise SceneParseError(f"Light falloff must have 3 terms, got {falloff!r}")
            try:
                falloff = tuple(float(k) for k in falloff)
            except (TypeError, ValueError) as e:
                raise SceneParseError(f"Light falloff terms must be numbers, got {falloff!r}") from e
            self.scene.add_light(PointLight(position, color, intensity, falloff))

    def _parse_camera(self, camera_data: Dict[str, Any]) -> None:
        """Parse camera section."""
        if not isinstance(camera_data, dict):
            raise SceneParseError("'camera' must be a mapping")
        position = self._parse_vec3(camera_data.get('position', [0, 0, 5]))
        look_at = self._parse_vec3(camera_data.get('look_at', [0, 0, 0]))
        up = self._parse_vec3(camera_data.get('up', [0, 1, 0]))
        fov = self._parse_float(camera_data, 'fov', 45.0)
        aspect_ratio = None
        if 'aspect_ratio' in camera_data:
            aspect_ratio = self._parse_float(camera_data, 'aspect_ratio', 1.0)

        self.scene.set_camera(Camera(
            position=position,
            look_at=look_at,
            up=up,
            fov=fov,
            aspect_ratio=aspect_ratio
        ))

    def _parse_settings(self, settings_data: Dict[str, Any]) -> None:
        """Parse render settings section."""
        if not isinstance(settings_data, dict):
            raise SceneParseError("'render' must be a mapping")
        try:
            self.settings = RenderSettings(
                width=int(settings_data.get('width', 800)),
                height=int(settings_data.get('height', 600)),
                max_depth=int(settings_data.get('max_depth', 5)),
                reflection=self._parse_bool(settings_data, 'reflection', False),
                textures=self._parse_bool(settings_data, 'textures', False),
                tile_size=int(settings_data.get('tile_size', 16)),
                num_threads=int(settings_data.get('threads', 0)),
                use_sky_gradient=self._parse_bool(settings_data, 'sky_gradient', False),
                gamma=float(settings_data.get('gamma', 1.0)),
                checker_scale=float(settings_data.get('checker_scale', 1.0))
            )
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Invalid render settings: {e}") from e


def load_scene(filepath: str) -> Tuple[Scene, RenderSettings]:
    """Convenience function to load a scene file.

    Args:
        filepath: Path to the scene file

    Returns:
        Tuple of (scene, settings)
    """
    parser = SceneParser()
    return parser.parse_file(filepath)


def parse_scene(data: Dict[str, Any]) -> Tuple[Scene, RenderSettings]:
    """Convenience function to parse a scene from a dictionary.

    Args:
        data: Scene description dictionary

    Returns:
        Tuple of (scene, settings)
    """
    parser = SceneParser()
    return parser.parse_dict(data)
