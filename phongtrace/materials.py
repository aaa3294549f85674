"""
Surface materials for Phong shading.

A material is plain data: a base color plus the coefficients of the
Phong model and a mirror reflectivity. `transparency` and
`refractive_index` are carried for scene descriptions that set them but
do not affect shading.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .vec3 import Color


@dataclass(frozen=True)
class Material:
    """Phong material coefficients.

    Attributes:
        color: Base surface color, each channel nominally in [0, 1]
        ambient: Fraction of the base color always visible
        diffuse: Lambertian diffuse weight
        specular: Phong highlight weight
        shininess: Phong exponent (larger = tighter highlight)
        reflectivity: Mirror blend factor in [0, 1]
        transparency: Stored only
        refractive_index: Stored only
    """
    color: Color = field(default_factory=lambda: Color(0.5, 0.5, 0.5))
    ambient: float = 0.1
    diffuse: float = 0.7
    specular: float = 0.2
    shininess: float = 200.0
    reflectivity: float = 0.0
    transparency: float = 0.0
    refractive_index: float = 1.0

    @classmethod
    def default(cls) -> Material:
        """Matte grey."""
        return cls()

    @classmethod
    def reflective(cls, color: Color, reflectivity: float) -> Material:
        """A shiny, mostly specular surface that mirrors its surroundings."""
        return cls(
            color=color,
            ambient=0.1,
            diffuse=0.3,
            specular=0.6,
            shininess=200.0,
            reflectivity=reflectivity,
        )

    @classmethod
    def transparent(cls, color: Color, transparency: float, refractive_index: float) -> Material:
        return cls(
            color=color,
            ambient=0.1,
            diffuse=0.1,
            specular=0.8,
            shininess=200.0,
            reflectivity=0.1,
            transparency=transparency,
            refractive_index=refractive_index,
        )

    @property
    def is_reflective(self) -> bool:
        return self.reflectivity > 0.0
