"""
Rays, materials and the two kinds of scene object: spheres and triangle meshes.
"""
import math
from typing import NamedTuple, Optional, Sequence, Tuple, Union

from errors import DegenerateVectorError, GeometryError
from vectors import (
    Color, Vec3, BLACK, add, sub, mul, dot, cross, normsq, norm, is_finite
)

# |dir . normal| below this counts as a ray parallel to a face
PARALLEL_EPSILON = 1e-12


class Ray(NamedTuple):
    """
    Half-line used for visibility queries. The direction is unit length.

    The plain constructor stores the direction as given and is meant for
    callers that already hold a unit vector; use towards() for any other
    direction.
    """
    origin: Vec3
    direction: Vec3

    @classmethod
    def towards(cls, origin: Vec3, direction: Vec3) -> "Ray":
        """Build a ray, normalizing the direction (raises DegenerateVectorError)."""
        return cls(origin, norm(direction))

    def at(self, distance: float) -> Vec3:
        return add(self.origin, mul(self.direction, distance))


class Material(NamedTuple):
    """
    Surface response.

    reflectivity is the share of energy moved from the diffuse term to the
    reflection and specular terms; roughness widens both the highlight and
    the reflection cone.
    """
    diffuse: Color = BLACK
    specular: Color = BLACK
    reflectivity: float = 0.0
    roughness: float = 0.5

    def validate(self) -> "Material":
        if not 0.0 <= self.reflectivity <= 1.0:
            raise GeometryError(f"reflectivity must be in [0, 1], got {self.reflectivity}")
        if not self.roughness > 0.0 or not math.isfinite(self.roughness):
            raise GeometryError(f"roughness must be positive, got {self.roughness}")
        return self


class Intersect(NamedTuple):
    """Where a ray met a surface."""
    position: Vec3
    distance: float
    normal: Vec3
    material: Material


def solve_quadratic(a: float, b: float, c: float) -> Optional[float]:
    """
    Solve a*x^2 + b*x + c = 0 and return the smallest non-negative root,
    or None when no root is real and non-negative.
    """
    delta = b * b - 4.0 * a * c
    if delta < 0.0:
        return None

    sdelta = math.sqrt(delta)
    # for a < 0 the "+" branch is the smaller root
    if a > 0.0:
        s1, s2 = (-b - sdelta) / (2.0 * a), (-b + sdelta) / (2.0 * a)
    else:
        s1, s2 = (-b + sdelta) / (2.0 * a), (-b - sdelta) / (2.0 * a)

    if s1 >= 0.0:
        return s1
    if s2 >= 0.0:
        return s2
    return None


class Sphere:
    def __init__(self, center: Vec3, radius: float, material: Material = Material()):
        if not is_finite(center):
            raise GeometryError(f"sphere center must be finite, got {center}")
        if not math.isfinite(radius) or radius <= 0.0:
            raise GeometryError(f"sphere radius must be positive, got {radius}")
        self.center = tuple(float(c) for c in center)
        self.radius = float(radius)
        self.material = material

    def intersect(self, ray: Ray) -> Optional[Intersect]:
        # |o + k*d - center|^2 = r^2, expanded in k
        oc = sub(ray.origin, self.center)
        a = normsq(ray.direction)
        b = 2.0 * dot(oc, ray.direction)
        c = normsq(oc) - self.radius * self.radius

        dist = solve_quadratic(a, b, c)
        if dist is None or dist <= 0.0:
            return None

        pos = ray.at(dist)
        normal = norm(sub(pos, self.center))
        return Intersect(pos, dist, normal, self.material)

    def __repr__(self):
        return f"Sphere(center={self.center}, radius={self.radius})"


class Face:
    """
    Triangle visible from its front side only.

    The three inside vectors (edge x normal) point from each edge toward the
    triangle interior, so a point on the plane is inside when its offset from
    every edge has a non-negative dot product with the matching vector.
    """

    def __init__(self, a: Vec3, b: Vec3, c: Vec3):
        for vertex in (a, b, c):
            if not is_finite(vertex):
                raise GeometryError(f"face vertex must be finite, got {vertex}")
        self.vertices: Tuple[Vec3, Vec3, Vec3] = (tuple(a), tuple(b), tuple(c))
        self.normal = self.compute_normal(a, b, c)
        n = self.normal
        self.inside_vecs = (
            cross(sub(b, a), n),
            cross(sub(c, b), n),
            cross(sub(a, c), n),
        )

    @staticmethod
    def compute_normal(a: Vec3, b: Vec3, c: Vec3) -> Vec3:
        try:
            return norm(cross(sub(b, a), sub(b, c)))
        except DegenerateVectorError:
            raise GeometryError(f"face vertices are collinear: {a}, {b}, {c}") from None

    def intersect(self, ray: Ray) -> Optional[Intersect]:
        n = self.normal
        facing = dot(ray.direction, n)
        # parallel rays and rays reaching the back side both miss
        if facing > -PARALLEL_EPSILON:
            return None

        a, b, c = self.vertices
        dist = dot(n, sub(a, ray.origin)) / facing
        if dist <= 0.0:
            return None

        point = ray.at(dist)
        ab_side = dot(self.inside_vecs[0], sub(point, a))
        bc_side = dot(self.inside_vecs[1], sub(point, b))
        ca_side = dot(self.inside_vecs[2], sub(point, c))
        if ab_side < 0.0 or bc_side < 0.0 or ca_side < 0.0:
            return None

        return Intersect(point, dist, n, Material())

    def __repr__(self):
        return f"Face{self.vertices}"


class Mesh:
    """Triangle faces sharing a single material."""

    def __init__(self, faces: Sequence[Face], material: Material = Material()):
        if not faces:
            raise GeometryError("mesh needs at least one face")
        self.faces = tuple(faces)
        self.material = material

    def intersect(self, ray: Ray) -> Optional[Intersect]:
        nearest = None
        for face in self.faces:
            hit = face.intersect(ray)
            if hit is None:
                continue
            if nearest is None or hit.distance < nearest.distance:
                nearest = hit

        if nearest is None:
            return None
        return nearest._replace(material=self.material)

    def __repr__(self):
        return f"Mesh({len(self.faces)} faces)"


SceneObject = Union[Sphere, Mesh]
