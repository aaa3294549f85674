"""
Geometric shapes for the ray tracer.

Every shape implements the `Shape` protocol:

- `intersect(ray)` returns the distance to the nearest hit in front of the
  ray origin, or None
- `normal_at(point)` returns the unit outward normal at a surface point
- `hit(ray)` combines both into a HitRecord

Degenerate geometry (zero radius, zero size, zero normal) never raises;
it simply never intersects anything.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional
import math

from .vec3 import Vec3, Point3
from .ray import Ray
from .materials import Material

# Hits at or below this distance are ignored (prevents self-intersection)
HIT_EPSILON = 1e-4

# Below this a ray direction component counts as parallel
PARALLEL_EPSILON = 1e-8


@dataclass
class HitRecord:
    """Stores information about a ray-object intersection.

    Attributes:
        t: Distance along the ray
        point: The intersection point in world space
        normal: Unit surface normal, always pointing against the ray
        front_face: True if the ray hit the outside of the surface
        material: The material of the object that was hit
        direction: Direction of the incoming ray
        obj: The shape that was hit
    """
    t: float
    point: Point3
    normal: Vec3
    front_face: bool = True
    material: Material = field(default_factory=Material)
    direction: Vec3 = field(default_factory=Vec3.zero)
    obj: Optional[Shape] = None

    def set_face_normal(self, ray: Ray, outward_normal: Vec3) -> None:
        """Set the normal to always point against the ray direction.

        Args:
            ray: The incoming ray
            outward_normal: The geometric normal pointing outward from surface
        """
        self.front_face = ray.direction.dot(outward_normal) < 0
        self.normal = outward_normal if self.front_face else -outward_normal


class Shape(ABC):
    """Abstract base class for all objects that can be hit by rays."""

    material: Material

    @abstractmethod
    def intersect(self, ray: Ray) -> Optional[float]:
        """Distance to the nearest hit beyond HIT_EPSILON, or None."""
        pass

    @abstractmethod
    def normal_at(self, point: Point3) -> Vec3:
        """Unit outward surface normal at a point on the surface."""
        pass

    def hit(self, ray: Ray) -> Optional[HitRecord]:
        """Intersect the ray and build a HitRecord for the nearest hit."""
        t = self.intersect(ray)
        if t is None:
            return None
        return self.hit_at(ray, t)

    def hit_at(self, ray: Ray, t: float) -> HitRecord:
        """Build the HitRecord for a known hit distance."""
        point = ray.at(t)
        outward_normal = self.normal_at(point)
        hit_record = HitRecord(
            t=t,
            point=point,
            normal=outward_normal,
            material=self.material,
            direction=ray.direction,
            obj=self
        )
        hit_record.set_face_normal(ray, outward_normal)
        return hit_record


class Sphere(Shape):
    """A sphere defined by center and radius."""

    def __init__(self, center: Point3, radius: float, material: Optional[Material] = None):
        """Create a sphere.

        Args:
            center: Center point of the sphere
            radius: Radius of the sphere (non-positive radii never hit)
            material: Material for shading
        """
        self.center = center
        self.radius = float(radius)
        self.material = material if material is not None else Material.default()

    def intersect(self, ray: Ray) -> Optional[float]:
        """Test ray-sphere intersection using the quadratic formula.

        The equation (P-C)·(P-C) = r² where P = ray.at(t)
        expands to: t²(d·d) + 2t(d·(O-C)) + (O-C)·(O-C) - r² = 0
        which is the quadratic at² + bt + c = 0 (solved with b = 2·half_b).
        """
        if self.radius <= 0:
            return None

        oc = ray.origin - self.center
        a = ray.direction.length_squared()
        if a < PARALLEL_EPSILON:
            return None
        half_b = oc.dot(ray.direction)
        c = oc.length_squared() - self.radius * self.radius

        # Tangent rays (zero discriminant) graze the surface and count as misses
        discriminant = half_b * half_b - a * c
        if discriminant <= 0:
            return None

        sqrtd = math.sqrt(discriminant)

        # Nearest root in front of the origin; the far root covers rays starting inside
        root = (-half_b - sqrtd) / a
        if root <= HIT_EPSILON:
            root = (-half_b + sqrtd) / a
            if root <= HIT_EPSILON:
                return None
        return root

    def normal_at(self, point: Point3) -> Vec3:
        return (point - self.center).normalize()

    def __repr__(self) -> str:
        return f"Sphere(center={self.center}, radius={self.radius})"


class Cube(Shape):
    """An axis-aligned cube defined by its center and edge length."""

    def __init__(self, center: Point3, size: float, material: Optional[Material] = None):
        """Create a cube.

        Args:
            center: Center of the cube
            size: Edge length (non-positive sizes never hit)
            material: Material for shading
        """
        self.center = center
        self.size = float(size)
        self.material = material if material is not None else Material.default()

    @property
    def half_size(self) -> float:
        return self.size / 2.0

    @property
    def minimum(self) -> Point3:
        return self.center - self.half_size

    @property
    def maximum(self) -> Point3:
        return self.center + self.half_size

    def intersect(self, ray: Ray) -> Optional[float]:
        """Test ray-cube intersection using the slab method.

        The entry/exit interval along each axis is intersected with the
        running interval; an empty result is a miss. A ray starting inside
        the cube hits at its exit point.
        """
        if self.size <= 0 or ray.direction.near_zero():
            return None

        lo = self.minimum
        hi = self.maximum
        t_near = -math.inf
        t_far = math.inf

        for i in range(3):
            origin = ray.origin[i]
            direction = ray.direction[i]

            if abs(direction) < PARALLEL_EPSILON:
                # Parallel to this slab: must already lie between its faces
                if origin < lo[i] or origin > hi[i]:
                    return None
                continue

            t0 = (lo[i] - origin) / direction
            t1 = (hi[i] - origin) / direction
            if t0 > t1:
                t0, t1 = t1, t0

            t_near = max(t_near, t0)
            t_far = min(t_far, t1)

            if t_near > t_far:
                return None

        if t_near > HIT_EPSILON:
            return t_near
        if t_far > HIT_EPSILON:
            return t_far
        return None

    def normal_at(self, point: Point3) -> Vec3:
        """Normal of the face nearest to the point.

        The face is the axis with the largest absolute offset from the
        center; all half-extents are equal so offsets compare directly.
        """
        offset = point - self.center
        axis = max(range(3), key=lambda i: abs(offset[i]))
        sign = 1.0 if offset[axis] >= 0 else -1.0

        components = [0.0, 0.0, 0.0]
        components[axis] = sign
        return Vec3(*components)

    def __repr__(self) -> str:
        return f"Cube(center={self.center}, size={self.size})"


class Plane(Shape):
    """An infinite plane defined by a point and normal."""

    def __init__(self, point: Point3, normal: Vec3, material: Optional[Material] = None):
        """Create a plane.

        Args:
            point: Any point on the plane
            normal: The plane's normal vector (will be normalized)
            material: Material for shading
        """
        self.point = point
        self.normal = normal.normalize()
        self.material = material if material is not None else Material.default()

    def intersect(self, ray: Ray) -> Optional[float]:
        """Solve (O + tD - P0)·N = 0 for t."""
        if self.normal.near_zero():
            return None

        denom = self.normal.dot(ray.direction)

        # Ray is parallel to plane
        if abs(denom) < PARALLEL_EPSILON:
            return None

        t = (self.point - ray.origin).dot(self.normal) / denom
        if t <= HIT_EPSILON:
            return None
        return t

    def normal_at(self, point: Point3) -> Vec3:
        return self.normal

    def __repr__(self) -> str:
        return f"Plane(point={self.point}, normal={self.normal})"


class Cylinder(Shape):
    """A finite cylinder aligned along the Y axis.

    The cylinder is centered on `center` and extends height/2 above and
    below it.
    """

    def __init__(
        self,
        center: Point3,
        radius: float,
        height: float,
        material: Optional[Material] = None,
        capped: bool = True
    ):
        """Create a cylinder.

        Args:
            center: Center of the cylinder (midway between the caps)
            radius: Radius of the cylinder
            height: Height of the cylinder
            material: Material for shading
            capped: Whether to include top and bottom caps
        """
        self.center = center
        self.radius = float(radius)
        self.height = float(height)
        self.material = material if material is not None else Material.default()
        self.capped = capped
        self.y_min = center.y - self.height / 2.0
        self.y_max = center.y + self.height / 2.0

    def intersect(self, ray: Ray) -> Optional[float]:
        """Test ray-cylinder intersection.

        Candidates are the lateral surface hits within the height range
        and, when capped, the two cap disks; the nearest one wins.
        """
        if self.radius <= 0 or self.height <= 0:
            return None

        dx, dy, dz = ray.direction.x, ray.direction.y, ray.direction.z
        ox = ray.origin.x - self.center.x
        oz = ray.origin.z - self.center.z
        radius_sq = self.radius * self.radius

        best_t: Optional[float] = None

        # Lateral surface: infinite cylinder in the XZ plane, clipped in Y
        a = dx * dx + dz * dz
        if a > PARALLEL_EPSILON:
            b = 2 * (ox * dx + oz * dz)
            c = ox * ox + oz * oz - radius_sq
            discriminant = b * b - 4 * a * c
            if discriminant >= 0:
                sqrt_d = math.sqrt(discriminant)
                for t in ((-b - sqrt_d) / (2 * a), (-b + sqrt_d) / (2 * a)):
                    if t <= HIT_EPSILON or (best_t is not None and t >= best_t):
                        continue
                    y = ray.origin.y + t * dy
                    if self.y_min <= y <= self.y_max:
                        best_t = t

        # Caps
        if self.capped and abs(dy) > PARALLEL_EPSILON:
            for cap_y in (self.y_min, self.y_max):
                t = (cap_y - ray.origin.y) / dy
                if t <= HIT_EPSILON or (best_t is not None and t >= best_t):
                    continue
                px = ox + t * dx
                pz = oz + t * dz
                if px * px + pz * pz <= radius_sq:
                    best_t = t

        return best_t

    def normal_at(self, point: Point3) -> Vec3:
        """Radial normal on the side, +/-Y on the caps.

        A point is on a cap when it is closer to a cap plane than to the
        lateral surface.
        """
        lx = point.x - self.center.x
        ly = point.y - self.center.y
        lz = point.z - self.center.z
        axial_sign = 1.0 if ly >= 0 else -1.0

        radial_dist = math.sqrt(lx * lx + lz * lz)
        if self.capped:
            cap_dist = abs(abs(ly) - self.height / 2.0)
            if cap_dist < abs(radial_dist - self.radius):
                return Vec3(0, axial_sign, 0)

        radial = Vec3(lx, 0, lz).normalize()
        if radial.near_zero():
            # On the axis itself; only reachable through a cap
            return Vec3(0, axial_sign, 0)
        return radial

    def __repr__(self) -> str:
        return (f"Cylinder(center={self.center}, radius={self.radius}, "
                f"height={self.height}, capped={self.capped})")
