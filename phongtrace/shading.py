"""
Phong shading with hard shadows and bounded mirror reflection.

For a hit point the local color is

    ambient + sum over unshadowed lights of (diffuse + specular)

clamped to [0, 1]. Reflective materials then blend in the color seen
along the mirrored ray, recursing at most `max_depth` times.
"""

from __future__ import annotations
import math

from .vec3 import Vec3, Color
from .ray import Ray
from .scene import Scene
from .lights import PointLight
from .shapes import HitRecord

# Secondary rays start this far off the surface along the normal
SHADOW_BIAS = 1e-3

# Keeps checker squares stable on axis-aligned faces at integer coordinates
CHECKER_BIAS = 1e-6

CHECKER_DARKEN = 0.5


class Shader:
    """Resolves the color seen along a ray."""

    def __init__(
        self,
        max_depth: int = 5,
        reflection: bool = False,
        textures: bool = False,
        checker_scale: float = 1.0,
        use_sky_gradient: bool = False
    ):
        """Create a shader.

        Args:
            max_depth: Maximum number of reflection bounces
            reflection: Whether reflective materials mirror the scene
            textures: Flat checker pattern on every surface
            checker_scale: Checker squares per world unit
            use_sky_gradient: Replace the scene background with a sky gradient
        """
        self.max_depth = max(0, int(max_depth))
        self.reflection = reflection
        self.textures = textures
        self.checker_scale = checker_scale
        self.use_sky_gradient = use_sky_gradient

    def trace(self, ray: Ray, scene: Scene, depth: int = 0) -> Color:
        """Color seen along a ray: background on a miss, shaded hit otherwise."""
        hit = scene.nearest_hit(ray)
        if hit is None:
            return self.background(ray, scene)
        return self.shade(hit, scene, depth)

    def shade(self, hit: HitRecord, scene: Scene, depth: int = 0) -> Color:
        """Shade a hit point.

        Args:
            hit: The intersection to shade
            scene: Scene providing lights and occluders
            depth: Number of reflections already followed

        Returns:
            Color with every channel in [0, 1]
        """
        material = hit.material
        base_color = self.surface_color(hit)
        view_dir = -hit.direction
        biased_point = hit.point + hit.normal * SHADOW_BIAS

        color = base_color * material.ambient
        for light in scene.lights:
            if scene.occluded(biased_point, light.position):
                continue
            color = color + self.light_contribution(hit, light, base_color, view_dir)
        color = color.clamp(0.0, 1.0)

        # Past max_depth reflection is dropped, which bounds the recursion
        if self.reflection and material.reflectivity > 0 and depth < self.max_depth:
            reflectivity = min(material.reflectivity, 1.0)
            reflected_ray = Ray(biased_point, hit.direction.reflect(hit.normal))
            reflected = self.trace(reflected_ray, scene, depth + 1)
            color = color.lerp(reflected, reflectivity).clamp(0.0, 1.0)

        return color

    def light_contribution(
        self,
        hit: HitRecord,
        light: PointLight,
        base_color: Color,
        view_dir: Vec3
    ) -> Color:
        """Diffuse plus specular contribution of one unoccluded light.

        Only the diffuse term is clamped by max(0, n·l); the specular lobe
        is evaluated on its own.
        """
        material = hit.material
        light_dir = light.direction_from(hit.point)
        n_dot_l = max(0.0, hit.normal.dot(light_dir))

        radiance = light.radiance(light.distance_from(hit.point))

        diffuse = base_color * radiance * (material.diffuse * n_dot_l)

        reflect_dir = (-light_dir).reflect(hit.normal)
        spec_angle = max(0.0, reflect_dir.dot(view_dir))
        specular = radiance * (material.specular * math.pow(spec_angle, material.shininess))

        return diffuse + specular

    def surface_color(self, hit: HitRecord) -> Color:
        """Material color, checkered when texture mode is on.

        The checker is a flat 3D pattern over world coordinates, in the
        parity of floor(x) + floor(y) + floor(z).
        """
        color = hit.material.color
        if not self.textures:
            return color

        scale = self.checker_scale
        parity = sum(
            int(math.floor(c * scale + CHECKER_BIAS)) for c in hit.point
        )
        if parity % 2 == 0:
            return color
        return color * CHECKER_DARKEN

    def background(self, ray: Ray, scene: Scene) -> Color:
        if self.use_sky_gradient:
            return self._sky_color(ray)
        return scene.background

    def _sky_color(self, ray: Ray) -> Color:
        """Generate a sky gradient background.

        Args:
            ray: The ray direction to use for gradient

        Returns:
            Sky color at this direction
        """
        t = 0.5 * (ray.direction.y + 1.0)
        return Color(1.0, 1.0, 1.0) * (1.0 - t) + Color(0.5, 0.7, 1.0) * t
