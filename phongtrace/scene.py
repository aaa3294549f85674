"""
Scene container: camera, objects and lights.

A scene is assembled once, then only read while rendering. Intersection
is a brute-force linear scan over every object.
"""

from __future__ import annotations
import math
from typing import Iterable, Optional

from .vec3 import Point3, Color
from .ray import Ray
from .camera import Camera
from .lights import PointLight
from .shapes import Shape, HitRecord
from .errors import SceneError

# Hits closer together than this count as simultaneous
TIE_EPSILON = 1e-9

DEFAULT_BACKGROUND = Color(0.7, 0.8, 1.0)


class Scene:
    """A camera plus the objects and point lights it sees."""

    def __init__(
        self,
        camera: Optional[Camera] = None,
        objects: Optional[Iterable[Shape]] = None,
        lights: Optional[Iterable[PointLight]] = None,
        background: Optional[Color] = None
    ):
        self.camera = camera
        self.objects: list[Shape] = list(objects) if objects is not None else []
        self.lights: list[PointLight] = list(lights) if lights is not None else []
        self.background = background if background is not None else DEFAULT_BACKGROUND

    def add_object(self, obj: Shape) -> None:
        """Add an object. Earlier objects win distance ties."""
        self.objects.append(obj)

    def add_light(self, light: PointLight) -> None:
        self.lights.append(light)

    def clear_lights(self) -> None:
        self.lights.clear()

    def set_camera(self, camera: Camera) -> None:
        self.camera = camera

    def validate(self) -> None:
        """Check the scene can be rendered.

        Raises:
            SceneError: If the scene has no camera
        """
        if self.camera is None:
            raise SceneError("Scene has no camera")

    def nearest_hit(self, ray: Ray, max_distance: float = math.inf) -> Optional[HitRecord]:
        """Find the closest intersection among all objects.

        Objects hit at the same distance (within TIE_EPSILON) resolve to the
        one added first. This ordering is a convention, not a physical rule.

        Args:
            ray: The ray to trace
            max_distance: Hits at or beyond this distance are ignored

        Returns:
            HitRecord of the nearest hit, or None
        """
        closest_obj: Optional[Shape] = None
        closest_t = max_distance

        for obj in self.objects:
            t = obj.intersect(ray)
            if t is None:
                continue
            if closest_obj is None:
                if t < closest_t:
                    closest_obj = obj
                    closest_t = t
            elif t < closest_t - TIE_EPSILON:
                closest_obj = obj
                closest_t = t

        if closest_obj is None:
            return None
        return closest_obj.hit_at(ray, closest_t)

    def occluded(self, point: Point3, target: Point3) -> bool:
        """Check whether any object blocks the segment from point to target."""
        to_target = target - point
        distance = to_target.length()
        if distance <= 0:
            return False
        shadow_ray = Ray(point, to_target)
        for obj in self.objects:
            t = obj.intersect(shadow_ray)
            if t is not None and t < distance:
                return True
        return False

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self):
        return iter(self.objects)

    def __repr__(self) -> str:
        return f"Scene(objects={len(self.objects)}, lights={len(self.lights)}, camera={self.camera})"
