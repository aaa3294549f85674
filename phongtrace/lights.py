"""
Point light sources.

A point light emits equally in all directions from a single position
and produces hard shadows. An optional polynomial falloff
1 / (constant + linear*d + quadratic*d²) dims it with distance; the
default (1, 0, 0) disables falloff.
"""

from __future__ import annotations
from typing import Tuple

from .vec3 import Vec3, Point3, Color

NO_FALLOFF = (1.0, 0.0, 0.0)


class PointLight:
    """A point light source."""

    __slots__ = ('position', 'color', 'intensity', 'falloff')

    def __init__(
        self,
        position: Point3,
        color: Color,
        intensity: float = 1.0,
        falloff: Tuple[float, float, float] = NO_FALLOFF
    ):
        """Create a point light.

        Args:
            position: Position of the light
            color: Color of the light
            intensity: Brightness multiplier
            falloff: (constant, linear, quadratic) distance attenuation terms
        """
        self.position = position
        self.color = color
        self.intensity = float(intensity)
        self.falloff = tuple(float(k) for k in falloff)

    def direction_from(self, point: Point3) -> Vec3:
        """Unit vector from a point toward the light."""
        return (self.position - point).normalize()

    def distance_from(self, point: Point3) -> float:
        return (self.position - point).length()

    def attenuation(self, distance: float) -> float:
        """Falloff factor at the given distance (1.0 without falloff)."""
        constant, linear, quadratic = self.falloff
        denom = constant + linear * distance + quadratic * distance * distance
        if denom <= 0:
            return 1.0
        return 1.0 / denom

    def radiance(self, distance: float) -> Color:
        """Light color times intensity, attenuated for the given distance."""
        return self.color * (self.intensity * self.attenuation(distance))

    def __repr__(self) -> str:
        return f"PointLight(position={self.position}, color={self.color}, intensity={self.intensity})"
