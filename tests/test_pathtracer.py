import math
import random

import numpy as np
import pytest

from lumenpath.camera import BasicCamera
from lumenpath.mesh import Mesh
from lumenpath.pathtracer import (
    PathTracer,
    Settings,
    brdf,
    reflect,
    refract,
    sample_hemisphere,
    spherical_to_cartesian,
    tone_map,
)
from lumenpath.ray import Ray
from lumenpath.scene import Scene
from lumenpath.triangle import Material

LIGHT_EMISSION = (5.0, 5.0, 5.0)


def _scene():
    floor = Mesh(
        [(-1, 0, -1), (-1, 0, 1), (1, 0, 1), (1, 0, -1)],
        [(0, 1, 2), (0, 2, 3)],
        material_ids=[0, 0],
        materials=[Material(diffuse=(0.8, 0.8, 0.8))],
    )
    light = Mesh(
        [(-0.2, 1, -0.2), (0.2, 1, -0.2), (0.0, 1, 0.2)],
        [(0, 1, 2)],
        material_ids=[0],
        materials=[Material(emission=LIGHT_EMISSION)],
    )
    camera = BasicCamera(position=(0, 0.5, 0), direction=(0, -1, 0), up=(0, 0, 1))
    return Scene(camera, [floor, light])


def _light_area(scene):
    return sum(t.area() for t in scene.emissives())


def test_tone_map_pinned_value():
    assert tone_map(np.array([1.0, 1.0, 1.0])).tolist() == [186, 186, 186]


def test_tone_map_is_monotonic_and_keeps_shape():
    values = np.array([[0.0, 0.1, 0.5], [1.0, 4.0, 50.0]])
    out = tone_map(values)
    assert out.shape == values.shape
    flat = out.ravel().tolist()
    assert flat == sorted(flat)
    assert out.dtype == np.uint8


def test_spherical_to_cartesian_pole_and_unit_length():
    assert np.allclose(spherical_to_cartesian(0.0, 1.3), [0.0, 0.0, 1.0])
    for theta, phi in [(0.3, 2.0), (1.2, -0.7), (math.pi / 2, math.pi)]:
        assert np.linalg.norm(spherical_to_cartesian(theta, phi)) == pytest.approx(1.0)


def test_reflect_flips_normal_component_only():
    normal = np.array([0.0, 1.0, 0.0])
    incoming = np.array([0.6, -0.8, 0.0])
    out = reflect(normal, incoming)
    assert out @ normal == pytest.approx(-(incoming @ normal))
    assert out[0] == pytest.approx(incoming[0])
    assert np.linalg.norm(out) == pytest.approx(1.0)


def test_refract_same_index_is_unchanged():
    normal = np.array([0.0, 1.0, 0.0])
    incoming = np.array([0.6, -0.8, 0.0])
    assert np.allclose(refract(normal, incoming, 1.5, 1.5), incoming)


def test_refract_bends_toward_normal_and_stays_unit():
    normal = np.array([0.0, 1.0, 0.0])
    incoming = np.array([0.6, -0.8, 0.0])
    out = refract(normal, incoming, 1.0, 1.5)
    assert np.linalg.norm(out) == pytest.approx(1.0)
    assert abs(out[0]) < abs(incoming[0])
    assert out[1] < 0.0


def test_refract_past_critical_angle_reflects():
    normal = np.array([0.0, 1.0, 0.0])
    incoming = np.array([0.95, -math.sqrt(1 - 0.95 ** 2), 0.0])
    assert np.allclose(refract(normal, incoming, 1.5, 1.0), reflect(normal, incoming))


def test_diffuse_brdf_pinned_and_direction_independent():
    diffuse = (math.pi, math.pi, math.pi)
    a = brdf(diffuse, (0, 0, 0), (0, 1, 0), (0, 1, 0), 10.0)
    b = brdf(diffuse, (0, 0, 0), (0, 1, 0), (1, 0, 0), 10.0)
    assert np.allclose(a, [1.0, 1.0, 1.0])
    assert np.allclose(a, b)


def test_specular_brdf_peaks_at_mirror_direction():
    reflected = np.array([0.0, 1.0, 0.0])
    off = np.array([0.6, 0.8, 0.0])
    peak = brdf((0.2, 0.2, 0.2), (1, 1, 1), reflected, reflected, 20.0)
    side = brdf((0.2, 0.2, 0.2), (1, 1, 1), reflected, off, 20.0)
    assert (peak > side).all()
    half = brdf((0.2, 0.2, 0.2), (0.6, 0.3, 0.6), reflected, reflected, 20.0)
    assert half[1] == pytest.approx(peak[1] * 0.3)


@pytest.mark.parametrize(
    "normal", [(0, 0, 1), (0, 0, -1), (0, 1, 0), (1, 1, 1), (-0.3, 0.2, -0.9)]
)
def test_sample_hemisphere_is_unit_and_on_normal_side(normal):
    rng = random.Random(7)
    n = np.array(normal, dtype=float)
    n /= np.linalg.norm(n)
    for _ in range(50):
        d = sample_hemisphere(normal, rng)
        assert np.linalg.norm(d) == pytest.approx(1.0)
        assert d @ n >= -1e-9


def test_settings_rejects_zero_samples():
    with pytest.raises(ValueError):
        Settings(samples_per_pixel=0)


def test_tracer_rejects_empty_image():
    with pytest.raises(ValueError):
        PathTracer(0, 4)


def test_trace_ray_miss_is_black():
    scene = _scene()
    tracer = PathTracer(2, 2, Settings(direct_lighting_only=True), random.Random(1))
    out = tracer.trace_ray(Ray((0, 5, 0), (0, 1, 0)), scene, _light_area(scene), True)
    assert np.allclose(out, 0.0)


def test_trace_ray_on_light_returns_emission_when_counted():
    scene = _scene()
    settings = Settings(direct_lighting_only=True, num_direct_lighting_samples=2)
    tracer = PathTracer(2, 2, settings, random.Random(2))
    ray = Ray((0, 0.5, 0), (0, 1, 0))
    area = _light_area(scene)
    assert np.allclose(tracer.trace_ray(ray, scene, area, True), LIGHT_EMISSION)
    assert np.allclose(tracer.trace_ray(ray, scene, area, False), 0.0)


def test_trace_ray_lit_floor_is_positive():
    scene = _scene()
    settings = Settings(direct_lighting_only=True, num_direct_lighting_samples=4)
    tracer = PathTracer(2, 2, settings, random.Random(3))
    out = tracer.trace_ray(Ray((0, 0.5, 0), (0, -1, 0)), scene, _light_area(scene), True)
    assert (out > 0.0).all()


def test_trace_ray_with_indirect_light_is_finite_and_nonnegative():
    scene = _scene()
    settings = Settings(num_direct_lighting_samples=2, path_continuation_prob=0.5)
    tracer = PathTracer(2, 2, settings, random.Random(4))
    for _ in range(10):
        out = tracer.trace_ray(Ray((0, 0.5, 0), (0, -1, 0)), scene, _light_area(scene), True)
        assert np.isfinite(out).all()
        assert (out >= 0.0).all()


def test_trace_scene_image_shape_and_lit_pixels():
    scene = _scene()
    settings = Settings(samples_per_pixel=2, direct_lighting_only=True, num_direct_lighting_samples=2)
    image = PathTracer(4, 3, settings, random.Random(5)).trace_scene(scene)
    assert image.shape == (3, 4, 3)
    assert (image > 0).all()


def test_trace_scene_is_deterministic_for_a_seed():
    scene = _scene()
    settings = Settings(samples_per_pixel=1, direct_lighting_only=True, num_direct_lighting_samples=2)
    first = PathTracer(3, 3, settings, random.Random(11)).trace_scene(scene)
    second = PathTracer(3, 3, settings, random.Random(11)).trace_scene(scene)
    assert np.array_equal(first, second)


def test_trace_pixel_averages_to_nonnegative_color():
    scene = _scene()
    settings = Settings(samples_per_pixel=3, direct_lighting_only=True, num_direct_lighting_samples=2)
    tracer = PathTracer(4, 4, settings, random.Random(6))
    camera = scene.camera
    inv_view = np.linalg.inv(camera.scale_matrix() @ camera.view_matrix())
    color = tracer.trace_pixel(1, 2, scene, inv_view, _light_area(scene))
    assert color.shape == (3,)
    assert (color > 0.0).all()