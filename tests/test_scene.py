import numpy as np
import pytest

from lumenpath.camera import BasicCamera
from lumenpath.mesh import Mesh
from lumenpath.ray import Ray
from lumenpath.scene import Scene
from lumenpath.triangle import Material

LIGHT = Material(name="light", emission=(1.0, 1.0, 1.0))
WALL = Material(name="wall", diffuse=(0.5, 0.5, 0.5))


def _mesh():
    vertices = [
        (-1, -1, 0), (1, -1, 0), (0, 1, 0),
        (9, -1, -2), (11, -1, -2), (10, 1, -2),
    ]
    faces = [(0, 1, 2), (3, 4, 5)]
    return Mesh(vertices, faces, material_ids=[0, 1], materials=[LIGHT, WALL])


def _scene(**kwargs):
    return Scene(BasicCamera(), [_mesh()], **kwargs)


def test_empty_scene_rejected():
    with pytest.raises(ValueError):
        Scene(BasicCamera(), [])


def test_emissives_are_emitting_triangles():
    scene = _scene()
    emissives = scene.emissives()
    assert len(emissives) == 1
    assert emissives[0].material == LIGHT
    assert emissives[0].index == 0


def test_no_emissives_without_emission():
    mesh = Mesh([(0, 0, 0), (1, 0, 0), (0, 1, 0)], [(0, 1, 2)], material_ids=[0], materials=[WALL])
    assert Scene(BasicCamera(), [mesh]).emissives() == ()


def test_intersect_hits_triangle_through_mesh():
    scene = _scene()
    info = scene.intersect(Ray((0, 0, 5), (0, 0, -1)))
    assert info is not None
    assert info.t == pytest.approx(5.0)
    assert np.allclose(info.hit, [0, 0, 0])
    assert info.object is scene.objects[0]
    assert info.data.material == LIGHT


def test_intersect_second_face():
    scene = _scene()
    info = scene.intersect(Ray((10, 0, 5), (0, 0, -1)))
    assert info is not None
    assert info.t == pytest.approx(7.0)
    assert info.data.index == 1
    assert np.allclose(info.object.normal(info) @ np.array([0, 0, 1.0]), 1.0)


def test_intersect_miss():
    scene = _scene()
    assert scene.intersect(Ray((0, 0, 5), (0, 0, 1))) is None


def test_lights_and_global_data_kept():
    scene = _scene(lights=["a"], global_data={"ka": 0.5})
    scene.add_light("b")
    assert scene.lights == ["a", "b"]
    assert scene.global_data == {"ka": 0.5}