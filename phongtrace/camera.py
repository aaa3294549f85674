"""
Camera module for generating primary rays.

A pinhole camera positioned with look-at / up vectors and a vertical
field of view. Pixel coordinates use a top-left origin: (0, 0) is the
top-left pixel and rows grow downward.
"""

from __future__ import annotations
import math
from typing import Optional

from .vec3 import Vec3, Point3
from .ray import Ray
from .errors import SceneError


class Camera:
    """A perspective camera with a fixed orthonormal basis."""

    def __init__(
        self,
        position: Point3,
        look_at: Point3,
        up: Vec3 = Vec3(0, 1, 0),
        fov: float = 45.0,
        aspect_ratio: Optional[float] = None
    ):
        """Create a camera.

        Args:
            position: Camera position in world space
            look_at: Point the camera is looking at
            up: World up vector (usually (0, 1, 0))
            fov: Vertical field of view in degrees, in (0, 180)
            aspect_ratio: Width / height ratio; None uses the ratio of the
                image being rendered

        Raises:
            SceneError: If the basis is degenerate (look_at equals position,
                or up is parallel to the view direction) or fov is out of range
        """
        if not 0.0 < fov < 180.0:
            raise SceneError(f"Camera fov must be in (0, 180) degrees, got {fov}")
        if aspect_ratio is not None and aspect_ratio <= 0:
            raise SceneError(f"Camera aspect ratio must be positive, got {aspect_ratio}")

        self.position = position
        self.look_at = look_at
        self.up = up
        self.fov = float(fov)
        self.aspect_ratio = aspect_ratio

        # Compute orthonormal camera basis
        self.w = (position - look_at).normalize()  # Points backward from camera
        if self.w.near_zero():
            raise SceneError("Camera look_at must differ from camera position")
        self.u = up.cross(self.w).normalize()       # Points right
        if self.u.near_zero():
            raise SceneError("Camera up vector must not be parallel to the view direction")
        self.v = self.w.cross(self.u)               # Points up

        self.half_height = math.tan(math.radians(self.fov) / 2.0)

    @property
    def forward(self) -> Vec3:
        return -self.w

    def viewport(self, aspect_ratio: float) -> tuple[Vec3, Vec3, Point3]:
        """Viewport spans for a given aspect ratio.

        Returns:
            (horizontal, vertical, lower_left_corner) on the image plane
            one unit in front of the camera
        """
        half_width = aspect_ratio * self.half_height
        horizontal = self.u * (2.0 * half_width)
        vertical = self.v * (2.0 * self.half_height)
        lower_left_corner = self.position - horizontal / 2 - vertical / 2 - self.w
        return horizontal, vertical, lower_left_corner

    def get_ray(self, s: float, t: float, aspect_ratio: Optional[float] = None) -> Ray:
        """Generate a ray for the given coordinates on the image plane.

        Args:
            s: Horizontal coordinate [0, 1] (0 = left, 1 = right)
            t: Vertical coordinate [0, 1] (0 = bottom, 1 = top)
            aspect_ratio: Overrides the camera's ratio when it has none

        Returns:
            A normalized ray from the camera through the specified point
        """
        ratio = self.aspect_ratio or aspect_ratio or 1.0
        horizontal, vertical, lower_left_corner = self.viewport(ratio)
        target = lower_left_corner + horizontal * s + vertical * t
        return Ray(self.position, target - self.position)

    def ray_for_pixel(self, px: int, py: int, image_width: int, image_height: int) -> Ray:
        """Generate the primary ray through the center of a pixel.

        Args:
            px: Column, 0 = left
            py: Row, 0 = top
            image_width: Image width in pixels
            image_height: Image height in pixels

        Returns:
            The ray through the pixel center
        """
        s = (px + 0.5) / image_width
        t = 1.0 - (py + 0.5) / image_height
        return self.get_ray(s, t, image_width / image_height)

    def __repr__(self) -> str:
        return f"Camera(position={self.position}, look_at={self.look_at}, fov={self.fov})"
