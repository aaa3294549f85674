"""Tests for the scene description parser."""

import json
from pathlib import Path

import pytest
import yaml

from phongtrace.vec3 import Vec3, Point3, Color
from phongtrace.shapes import Sphere, Cube, Plane, Cylinder
from phongtrace.materials import Material
from phongtrace.lights import NO_FALLOFF
from phongtrace.scene_parser import SceneParser, load_scene, parse_scene
from phongtrace.scene import DEFAULT_BACKGROUND
from phongtrace.errors import SceneError, SceneParseError

SCENES_DIR = Path(__file__).resolve().parent.parent / "scenes"

EXAMPLE = {
    "camera": {"position": [0, 1, 6], "look_at": [0, 0, 0], "fov": 50},
    "background": [0.1, 0.1, 0.1],
    "render": {"width": 64, "height": 48, "max_depth": 3, "reflection": True, "threads": 2},
    "materials": {
        "red": {"color": [0.8, 0.2, 0.2], "diffuse": 0.9},
        "mirror": {"preset": "reflective", "color": [0.9, 0.9, 0.9], "reflectivity": 0.8},
    },
    "objects": [
        {"type": "sphere", "center": [0, 0, 0], "radius": 1, "material": "red"},
        {"type": "cube", "center": [2, 0, 0], "size": 1.5, "material": "mirror"},
        {"type": "plane", "point": [0, -1, 0], "normal": [0, 2, 0]},
        {"type": "cylinder", "center": [-2, 0, 0], "radius": 0.5, "height": 2, "capped": False},
    ],
    "lights": [
        {"position": [5, 5, 5], "color": [1, 1, 1], "intensity": 0.8, "falloff": [1, 0.1, 0.01]},
    ],
}


class TestParseDict:
    """Test parsing scenes from dictionaries."""

    def test_full_scene(self):
        scene, settings = parse_scene(EXAMPLE)

        assert len(scene.objects) == 4
        assert len(scene.lights) == 1
        assert scene.background == Color(0.1, 0.1, 0.1)
        assert scene.camera.position == Point3(0, 1, 6)
        assert scene.camera.fov == 50

        assert settings.width == 64
        assert settings.height == 48
        assert settings.max_depth == 3
        assert settings.reflection
        assert settings.num_threads == 2

    def test_object_types_and_order(self):
        scene, _ = parse_scene(EXAMPLE)
        assert [type(o) for o in scene.objects] == [Sphere, Cube, Plane, Cylinder]

    def test_object_fields(self):
        scene, _ = parse_scene(EXAMPLE)
        sphere, cube, plane, cylinder = scene.objects
        assert sphere.radius == 1.0
        assert cube.size == 1.5
        assert plane.normal == Vec3(0, 1, 0)
        assert cylinder.height == 2.0
        assert not cylinder.capped

    def test_named_materials(self):
        scene, _ = parse_scene(EXAMPLE)
        sphere, cube = scene.objects[:2]
        assert sphere.material.color == Color(0.8, 0.2, 0.2)
        assert sphere.material.diffuse == 0.9
        assert sphere.material.ambient == Material().ambient
        assert cube.material.reflectivity == 0.8
        assert cube.material.specular == Material.reflective(Color(1, 1, 1)).specular

    def test_missing_material_uses_default(self):
        scene, _ = parse_scene(EXAMPLE)
        assert scene.objects[2].material == Material.default()

    def test_inline_material(self):
        scene, _ = parse_scene({
            "objects": [{"type": "sphere", "material": {"color": "#ff0000", "shininess": 10}}]
        })
        material = scene.objects[0].material
        assert material.color == Color(1, 0, 0)
        assert material.shininess == 10.0

    def test_light_fields(self):
        scene, _ = parse_scene(EXAMPLE)
        light = scene.lights[0]
        assert light.position == Point3(5, 5, 5)
        assert light.intensity == 0.8
        assert light.falloff == (1.0, 0.1, 0.01)

    def test_light_defaults(self):
        scene, _ = parse_scene({"lights": [{}]})
        assert scene.lights[0].falloff == NO_FALLOFF
        assert scene.lights[0].color == Color(1, 1, 1)

    def test_defaults_for_empty_description(self):
        scene, settings = parse_scene({})
        assert len(scene.objects) == 0
        assert scene.camera.position == Point3(0, 0, 5)
        assert scene.background == DEFAULT_BACKGROUND
        assert settings.width == 800

    def test_vec3_as_mapping(self):
        scene, _ = parse_scene({"objects": [{"type": "sphere", "center": {"x": 1, "z": -2}}]})
        assert scene.objects[0].center == Point3(1, 0, -2)

    def test_color_as_mapping(self):
        scene, _ = parse_scene({"background": {"r": 0.5, "g": 0.25}})
        assert scene.background == Color(0.5, 0.25, 0)

    def test_render_extras(self):
        _, settings = parse_scene({
            "render": {"tile_size": 8, "sky_gradient": True, "gamma": 2.2, "checker_scale": 0.5}
        })
        assert settings.tile_size == 8
        assert settings.use_sky_gradient
        assert settings.gamma == 2.2
        assert settings.checker_scale == 0.5

    def test_camera_aspect_ratio(self):
        scene, _ = parse_scene({"camera": {"aspect_ratio": 2.0}})
        assert scene.camera.aspect_ratio == 2.0


class TestParseErrors:
    """Test that malformed descriptions are rejected."""

    @pytest.mark.parametrize("data", [
        {"objects": [{"type": "torus"}]},
        {"objects": [{"type": "sphere", "material": "missing"}]},
        {"objects": [{"type": "sphere", "material": 42}]},
        {"objects": [{"type": "sphere", "center": [0, 0]}]},
        {"objects": [{"type": "sphere", "radius": "big"}]},
        {"objects": ["sphere"]},
        {"materials": {"odd": {"preset": "glowing"}}},
        {"materials": ["red"]},
        {"lights": [{"type": "spot"}]},
        {"lights": [{"falloff": [1, 0]}]},
        {"lights": [{"falloff": [1, "x", 0]}]},
        {"background": "blue"},
        {"background": "#12345z"},
        {"render": {"width": "wide"}},
        {"render": {"width": -5}},
        {"objects": None},
        {"objects": {"type": "sphere"}},
        {"lights": 5},
        {"camera": [0, 0, 5]},
        {"render": None},
        {"objects": [{"type": "cylinder", "capped": "false"}]},
        {"render": {"reflection": "false"}},
        {"render": {"textures": 1}},
        {"render": {"sky_gradient": "yes"}},
    ])
    def test_invalid_description(self, data):
        with pytest.raises(SceneParseError):
            parse_scene(data)

    def test_parse_error_is_scene_error(self):
        assert issubclass(SceneParseError, SceneError)

    def test_degenerate_camera(self):
        with pytest.raises(SceneError):
            parse_scene({"camera": {"position": [1, 1, 1], "look_at": [1, 1, 1]}})


class TestSceneFiles:
    """Test loading scene files from disk."""

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "scene.yaml"
        path.write_text(yaml.safe_dump(EXAMPLE))
        scene, settings = load_scene(str(path))
        assert len(scene.objects) == 4
        assert settings.width == 64

    def test_json_file(self, tmp_path):
        path = tmp_path / "scene.json"
        path.write_text(json.dumps(EXAMPLE))
        scene, settings = load_scene(str(path))
        assert len(scene.lights) == 1
        assert settings.reflection

    def test_missing_file(self, tmp_path):
        with pytest.raises(SceneParseError):
            load_scene(str(tmp_path / "nope.yaml"))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("objects: [unclosed\n")
        with pytest.raises(SceneParseError):
            load_scene(str(path))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{\"objects\": ")
        with pytest.raises(SceneParseError):
            load_scene(str(path))

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(SceneParseError):
            load_scene(str(path))

    def test_parser_instance_reusable_state(self, tmp_path):
        path = tmp_path / "scene.yaml"
        path.write_text(yaml.safe_dump(EXAMPLE))
        parser = SceneParser()
        parser.parse_file(str(path))
        assert set(parser.materials) == {"red", "mirror"}

    def test_bundled_mirror_box(self):
        scene, settings = load_scene(str(SCENES_DIR / "mirror_box.yaml"))
        assert [type(o) for o in scene.objects] == [Cube, Sphere, Cylinder, Plane]
        assert scene.background == Color(0, 0, 0)
        assert settings.reflection
        assert settings.max_depth == 5
        assert scene.objects[3].material.color == Color(0xb3 / 255, 0xb3 / 255, 0xb3 / 255)
