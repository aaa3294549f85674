"""Tests for the Scene container and its intersection queries."""

import pytest
from phongtrace.vec3 import Vec3, Point3, Color
from phongtrace.ray import Ray
from phongtrace.camera import Camera
from phongtrace.materials import Material
from phongtrace.lights import PointLight
from phongtrace.shapes import Sphere, Cube, Plane
from phongtrace.scene import Scene, DEFAULT_BACKGROUND
from phongtrace.errors import SceneError


class TestSceneContainer:
    """Test building a scene."""

    def test_empty(self):
        scene = Scene()
        assert len(scene) == 0
        assert scene.lights == []
        assert scene.camera is None
        assert scene.background == DEFAULT_BACKGROUND

    def test_add_object_keeps_order(self):
        scene = Scene()
        a = Sphere(Point3(0, 0, 0), 1.0)
        b = Cube(Point3(3, 0, 0), 1.0)
        scene.add_object(a)
        scene.add_object(b)
        assert list(scene) == [a, b]

    def test_lights(self):
        scene = Scene()
        scene.add_light(PointLight(Point3(0, 5, 0), Color(1, 1, 1)))
        assert len(scene.lights) == 1
        scene.clear_lights()
        assert scene.lights == []

    def test_constructor_copies_iterables(self):
        objects = [Sphere(Point3(0, 0, 0), 1.0)]
        scene = Scene(objects=objects)
        objects.append(Sphere(Point3(5, 0, 0), 1.0))
        assert len(scene) == 1

    def test_validate_requires_camera(self):
        with pytest.raises(SceneError):
            Scene().validate()

    def test_validate_with_camera(self):
        scene = Scene(camera=Camera(Point3(0, 0, 5), Point3(0, 0, 0)))
        scene.validate()


class TestNearestHit:
    """Test Scene.nearest_hit()."""

    def test_no_objects(self):
        scene = Scene()
        assert scene.nearest_hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1))) is None

    def test_miss(self):
        scene = Scene(objects=[Sphere(Point3(0, 0, -5), 1.0)])
        assert scene.nearest_hit(Ray(Point3(0, 0, 0), Vec3(0, 0, 1))) is None

    def test_nearest_wins_regardless_of_order(self):
        near = Sphere(Point3(0, 0, -3), 1.0)
        far = Sphere(Point3(0, 0, -10), 1.0)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))

        for objects in ([near, far], [far, near]):
            hit = Scene(objects=objects).nearest_hit(ray)
            assert hit is not None
            assert hit.obj is near
            assert abs(hit.t - 2.0) < 1e-9

    def test_tie_resolves_to_first_added(self):
        red = Material(Color(1, 0, 0))
        blue = Material(Color(0, 0, 1))
        first = Sphere(Point3(0, 0, -5), 1.0, red)
        second = Sphere(Point3(0, 0, -5), 1.0, blue)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))

        hit = Scene(objects=[first, second]).nearest_hit(ray)
        assert hit.obj is first
        assert hit.material is red

        hit = Scene(objects=[second, first]).nearest_hit(ray)
        assert hit.obj is second

    def test_max_distance(self):
        scene = Scene(objects=[Sphere(Point3(0, 0, -5), 1.0)])
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        assert scene.nearest_hit(ray, max_distance=3.0) is None
        assert scene.nearest_hit(ray, max_distance=5.0) is not None

    def test_hit_record_fields(self):
        material = Material(Color(0.2, 0.4, 0.6))
        plane = Plane(Point3(0, -1, 0), Vec3(0, 1, 0), material)
        ray = Ray(Point3(0, 1, 0), Vec3(0, -1, 0))
        hit = Scene(objects=[plane]).nearest_hit(ray)

        assert hit is not None
        assert abs(hit.t - 2.0) < 1e-9
        assert hit.point == Point3(0, -1, 0)
        assert hit.normal == Vec3(0, 1, 0)
        assert hit.material is material
        assert hit.direction == Vec3(0, -1, 0)


class TestOcclusion:
    """Test Scene.occluded()."""

    def test_blocked(self):
        scene = Scene(objects=[Sphere(Point3(0, 2.5, 0), 0.5)])
        assert scene.occluded(Point3(0, 0, 0), Point3(0, 5, 0))

    def test_clear(self):
        scene = Scene(objects=[Sphere(Point3(3, 2.5, 0), 0.5)])
        assert not scene.occluded(Point3(0, 0, 0), Point3(0, 5, 0))

    def test_object_beyond_light_does_not_occlude(self):
        scene = Scene(objects=[Sphere(Point3(0, 10, 0), 1.0)])
        assert not scene.occluded(Point3(0, 0, 0), Point3(0, 5, 0))

    def test_same_point(self):
        scene = Scene(objects=[Sphere(Point3(0, 0, 0), 1.0)])
        assert not scene.occluded(Point3(0, 3, 0), Point3(0, 3, 0))
