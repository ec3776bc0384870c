"""Tests for rays, spheres, faces and meshes."""

import math

import pytest

from errors import DegenerateVectorError, GeometryError
from geometry import Face, Material, Mesh, Ray, Sphere, solve_quadratic
from vectors import norm

ORIGIN = (0.0, 0.0, 0.0)
PLUS_X = (1.0, 0.0, 0.0)


class TestRay:
    def test_towards_normalizes(self):
        ray = Ray.towards(ORIGIN, (0.0, 3.0, 4.0))
        assert ray.direction == pytest.approx((0.0, 0.6, 0.8))

    def test_towards_zero_direction(self):
        with pytest.raises(DegenerateVectorError):
            Ray.towards(ORIGIN, (0.0, 0.0, 0.0))

    def test_at(self):
        assert Ray(ORIGIN, PLUS_X).at(2.5) == (2.5, 0.0, 0.0)


class TestSolveQuadratic:
    def test_no_solution(self):
        assert solve_quadratic(1.0, 0.0, 1.0) is None

    def test_both_positive_negative_a(self):
        assert solve_quadratic(-4.0, 5.0, -1.0) == 0.25

    def test_one_negative(self):
        assert solve_quadratic(4.0, -5.0, -12.0) == pytest.approx(2.4663649828320295)

    def test_both_negative(self):
        assert solve_quadratic(4.0, 5.0, 1.0) is None


class TestSphere:
    def test_in_front(self):
        sphere = Sphere((2.0, 0.0, 0.0), 1.0)
        hit = sphere.intersect(Ray(ORIGIN, PLUS_X))
        assert hit.distance == 1.0
        assert hit.position == (1.0, 0.0, 0.0)
        assert hit.normal == pytest.approx((-1.0, 0.0, 0.0))

    def test_inside(self):
        sphere = Sphere(ORIGIN, 1.0)
        hit = sphere.intersect(Ray(ORIGIN, PLUS_X))
        assert hit.distance == 1.0
        assert hit.position == (1.0, 0.0, 0.0)

    def test_above_misses(self):
        sphere = Sphere((2.0, 0.0, 2.0), 1.0)
        assert sphere.intersect(Ray(ORIGIN, PLUS_X)) is None

    def test_behind_misses(self):
        sphere = Sphere((-2.0, 0.0, 0.0), 1.0)
        assert sphere.intersect(Ray(ORIGIN, PLUS_X)) is None

    def test_general_sphere(self):
        sphere = Sphere((8.0, 4.0, 2.0), 3.0)
        ray = Ray((2.0, 3.0, 4.0), norm((1.0, 0.2, -0.3)))
        hit = sphere.intersect(ray)
        assert hit.distance == pytest.approx(3.410205739962394, abs=1e-12)
        assert hit.position == pytest.approx(
            (5.208051705064151, 3.6416103410128304, 3.037584488480755), abs=1e-12)

    def test_hit_carries_material(self):
        material = Material((1.0, 0.0, 0.0), (1.0, 1.0, 1.0), 0.5, 0.1)
        hit = Sphere((2.0, 0.0, 0.0), 1.0, material).intersect(Ray(ORIGIN, PLUS_X))
        assert hit.material == material

    @pytest.mark.parametrize("radius", [0.0, -1.0, math.nan, math.inf])
    def test_invalid_radius(self, radius):
        with pytest.raises(GeometryError):
            Sphere(ORIGIN, radius)

    def test_nan_center(self):
        with pytest.raises(GeometryError):
            Sphere((0.0, math.nan, 0.0), 1.0)


@pytest.fixture
def face():
    return Face((1.0, 1.0, -1.0), (1.0, 0.0, 1.0), (1.0, -1.0, -1.0))


class TestFace:
    def test_normal(self, face):
        assert face.normal == (-1.0, 0.0, 0.0)

    def test_in_front(self, face):
        hit = face.intersect(Ray(ORIGIN, PLUS_X))
        assert hit.distance == 1.0
        assert hit.position == (1.0, 0.0, 0.0)
        assert hit.normal == face.normal

    def test_behind(self, face):
        assert face.intersect(Ray((2.0, 0.0, 0.0), PLUS_X)) is None

    def test_parallel(self, face):
        assert face.intersect(Ray(ORIGIN, (0.0, 0.0, 1.0))) is None

    def test_outside(self, face):
        assert face.intersect(Ray((0.0, 0.75, 0.0), PLUS_X)) is None

    def test_back_face_is_culled(self, face):
        # the ray crosses the triangle, but from behind
        assert face.intersect(Ray((2.0, 0.0, 0.0), (-1.0, 0.0, 0.0))) is None

    def test_edge_counts_as_inside(self, face):
        hit = face.intersect(Ray((0.0, 0.5, 0.0), PLUS_X))
        assert hit is not None
        assert hit.position == (1.0, 0.5, 0.0)

    def test_collinear_vertices(self):
        with pytest.raises(GeometryError):
            Face((0.0, 0.0, 0.0), (1.0, 1.0, 1.0), (2.0, 2.0, 2.0))

    def test_nan_vertex(self):
        with pytest.raises(GeometryError):
            Face((0.0, 0.0, math.nan), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0))


def shifted_face(dx):
    return Face((1.0 + dx, 1.0, -1.0), (1.0 + dx, 0.0, 1.0), (1.0 + dx, -1.0, -1.0))


class TestMesh:
    def test_nearest_face(self):
        material = Material((0.0, 1.0, 0.0))
        mesh = Mesh([shifted_face(2.0), shifted_face(0.0), shifted_face(4.0)], material)
        hit = mesh.intersect(Ray(ORIGIN, PLUS_X))
        assert hit.distance == 1.0
        assert hit.material == material

    def test_miss(self):
        mesh = Mesh([shifted_face(0.0)])
        assert mesh.intersect(Ray(ORIGIN, (-1.0, 0.0, 0.0))) is None

    def test_empty(self):
        with pytest.raises(GeometryError):
            Mesh([])


class TestMaterial:
    def test_defaults(self):
        material = Material()
        assert material.diffuse == (0.0, 0.0, 0.0)
        assert material.specular == (0.0, 0.0, 0.0)
        assert material.reflectivity == 0.0
        assert material.roughness > 0.0

    @pytest.mark.parametrize("kwargs", [
        {"reflectivity": 1.5},
        {"reflectivity": -0.1},
        {"roughness": 0.0},
        {"roughness": -1.0},
    ])
    def test_validate(self, kwargs):
        with pytest.raises(GeometryError):
            Material(**kwargs).validate()
