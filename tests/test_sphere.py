import numpy as np
import pytest

from lumenpath.bvh import BVH
from lumenpath.ray import IntersectionInfo, Ray
from lumenpath.sphere import Sphere


@pytest.fixture
def sphere():
    return Sphere((0, 0, -5), 1.0)


def test_hit_point_on_surface(sphere):
    ray = Ray((0, 0, 0), (0, 0, -1))
    info = sphere.intersect(ray)
    assert info is not None
    assert info.object is sphere
    hit = ray.origin + ray.direction * info.t
    assert np.linalg.norm(hit - sphere.center) == pytest.approx(1.0)
    assert info.t > 0


def test_front_normal_faces_ray(sphere):
    ray = Ray((0, 0, 0), (0, 0, -1))
    info = sphere.intersect(ray)
    info.hit = ray.origin + ray.direction * info.t
    assert np.allclose(sphere.normal(info), -ray.direction)


def test_miss(sphere):
    assert sphere.intersect(Ray((0, 0, 0), (0, 1, 0))) is None


def test_origin_at_center_gives_negative_root(sphere):
    info = sphere.intersect(Ray((0, 0, -5), (1, 0, 0)))
    assert info.t == pytest.approx(-1.0)


def test_normal_is_unit(sphere):
    info = IntersectionInfo(t=0.0, object=sphere, hit=np.array([0.6, 0.8, -5.0]))
    n = sphere.normal(info)
    assert np.linalg.norm(n) == pytest.approx(1.0)
    assert np.allclose(n, (0.6, 0.8, 0.0))


def test_bbox_and_centroid(sphere):
    box = sphere.bbox()
    assert np.allclose(box.lower, sphere.center - 1.0)
    assert np.allclose(box.upper, sphere.center + 1.0)
    assert np.allclose(sphere.centroid(), sphere.center)


def test_radius_update_changes_bbox(sphere):
    sphere.radius = 2.0
    assert np.allclose(sphere.bbox().extent, (4.0, 4.0, 4.0))


def test_in_bvh_closest_sphere_wins():
    spheres = [Sphere((0, 0, -z), 0.5) for z in (3, 6, 9, 12, 15, 18)]
    hit = BVH(spheres).intersect(Ray((0, 0, 0), (0, 0, -1)))
    assert hit.object is spheres[0]
    assert np.linalg.norm(hit.hit - spheres[0].center) == pytest.approx(0.5)