"""Monte Carlo path tracing over a scene of triangle meshes."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import Any, Optional

import numpy as np

from .ray import IntersectionInfo, Ray
from .scene import Scene
from .triangle import Material

_log = logging.getLogger(__name__)

_DEFAULT_MATERIAL = Material()
_GAMMA = 1.0 / 2.2
_Z_AXIS = np.array([0.0, 0.0, 1.0])


@dataclass
class Settings:
    """Sampling parameters for a render."""

    samples_per_pixel: int = 1
    direct_lighting_only: bool = False  # if set, indirect lighting is ignored
    num_direct_lighting_samples: int = 1  # shadow rays traced from each hit
    path_continuation_prob: float = 0.5  # chance of spawning a secondary ray

    def __post_init__(self) -> None:
        if self.samples_per_pixel < 1:
            raise ValueError("samples_per_pixel must be at least 1")


def _normalized(v: np.ndarray) -> np.ndarray:
    length = float(np.linalg.norm(v))
    return v / length if length > 0.0 else v


def _vector3(values) -> np.ndarray:
    return np.array(values, dtype=float).reshape(3)


def tone_map(intensities) -> np.ndarray:
    """Map radiance to 8-bit channels with Reinhard's operator and a 2.2 gamma.

    Negative values map to zero.
    """
    values = np.clip(np.asarray(intensities, dtype=float), 0.0, None)
    mapped = np.power(values / (1.0 + values), _GAMMA)
    return (mapped * 255.0).astype(np.uint8)


def spherical_to_cartesian(theta: float, phi: float) -> np.ndarray:
    """Unit vector at polar angle ``theta`` from +z and azimuth ``phi``."""
    return np.array(
        [
            math.sin(theta) * math.cos(phi),
            math.sin(theta) * math.sin(phi),
            math.cos(theta),
        ]
    )


def brdf(diffuse, specular, reflected, outgoing, shine: float) -> np.ndarray:
    """Glossy Phong lobe when any specular channel exceeds 0.5, else Lambertian."""
    specular = _vector3(specular)
    if (specular > 0.5).any():
        cos_lobe = float(_vector3(outgoing) @ _vector3(reflected))
        with np.errstate(invalid="ignore"):
            lobe = float(np.power(cos_lobe, float(shine)))
        factor = (shine + 2.0) / (2.0 * math.pi) * lobe
        return factor * specular
    return _vector3(diffuse) / math.pi


def reflect(normal, incoming) -> np.ndarray:
    """Mirror ``incoming`` about ``normal``."""
    n = _vector3(normal)
    d = _vector3(incoming)
    proj_on_normal = float(-d @ n) * n
    return d + 2.0 * proj_on_normal


def refract(normal, incoming, n1: float, n2: float) -> np.ndarray:
    """Bend ``incoming`` through a surface from index ``n1`` into ``n2``.

    Past the critical angle the ray is reflected instead.
    """
    n = _vector3(normal)
    d = _vector3(incoming)
    proj_on_normal = float(-d @ n) * n
    tangential = -d - proj_on_normal
    horizontal = -(n1 / n2) * tangential
    h_len = float(np.linalg.norm(horizontal))
    if h_len <= 1.0:
        vertical = -math.sqrt(1.0 - h_len * h_len) * n
        return vertical + horizontal
    return d + 2.0 * proj_on_normal


def _rotation_from_z(target: np.ndarray) -> np.ndarray:
    b = _normalized(target)
    c = float(_Z_AXIS @ b)
    if c < -1.0 + 1e-9:
        # Half turn about the x axis takes +z to -z.
        return np.diag([1.0, -1.0, -1.0])
    v = np.cross(_Z_AXIS, b)
    skew = np.array(
        [
            [0.0, -v[2], v[1]],
            [v[2], 0.0, -v[0]],
            [-v[1], v[0], 0.0],
        ]
    )
    return np.eye(3) + skew + (skew @ skew) / (1.0 + c)


def sample_hemisphere(normal, rng) -> np.ndarray:
    """Uniformly sample a unit direction in the hemisphere around ``normal``."""
    phi = 2.0 * math.pi * rng.random()
    theta = math.acos(rng.random())
    direction = _normalized(spherical_to_cartesian(theta, phi))
    return _rotation_from_z(_vector3(normal)) @ direction


def _surface_of(info: IntersectionInfo) -> Any:
    return info.data if info.data is not None else info.object


class PathTracer:
    """Renders a scene into a ``(height, width, 3)`` array of 8-bit colours."""

    def __init__(
        self,
        width: int,
        height: int,
        settings: Optional[Settings] = None,
        rng: Any = None,
    ) -> None:
        if width < 1 or height < 1:
            raise ValueError("image dimensions must be positive")
        self.width = width
        self.height = height
        self.settings = settings if settings is not None else Settings()
        self.rng = rng if rng is not None else random.Random()

    def trace_scene(self, scene: Scene) -> np.ndarray:
        total_light_area = sum(tri.area() for tri in scene.emissives())
        camera = scene.camera
        inv_view = np.linalg.inv(camera.scale_matrix() @ camera.view_matrix())
        intensities = np.zeros((self.height, self.width, 3))
        for y in range(self.height):
            for x in range(self.width):
                _log.debug("tracing pixel %d", x + y * self.width)
                intensities[y, x] = self.trace_pixel(x, y, scene, inv_view, total_light_area)
        return tone_map(intensities)

    def trace_pixel(self, x: int, y: int, scene: Scene, inv_view, light_area: float) -> np.ndarray:
        """Average radiance over jittered camera rays through pixel ``(x, y)``."""
        origin = np.zeros(3)
        color = np.zeros(3)
        samples = self.settings.samples_per_pixel
        for _ in range(samples):
            direction = np.array(
                [
                    2.0 * (x + self.rng.random()) / self.width - 1.0,
                    1.0 - 2.0 * (y + self.rng.random()) / self.height,
                    -1.0,
                ]
            )
            ray = Ray(origin, direction).transform(inv_view)
            color += self.trace_ray(ray, scene, light_area, True)
        return color / samples

    def trace_ray(self, ray: Ray, scene: Scene, light_area: float, count_emitted: bool) -> np.ndarray:
        """Radiance arriving back along ``ray``."""
        radiance = np.zeros(3)
        info = scene.intersect(ray)
        if info is None:
            return radiance

        settings = self.settings
        material = getattr(_surface_of(info), "material", _DEFAULT_MATERIAL)
        emission = _vector3(material.emission)
        diffuse = _vector3(material.diffuse)
        specular = _vector3(material.specular)
        shine = float(material.shininess)
        hit = info.hit
        surf_normal = _vector3(info.object.normal(info))

        reflected = np.zeros(3)
        if material.illum == 5 or (specular > 0.5).any():
            reflected = reflect(surf_normal, ray.direction)

        if settings.direct_lighting_only or material.illum not in (5, 7):
            radiance += self._direct_light(
                scene, hit, surf_normal, diffuse, specular, reflected, shine, light_area
            )

        if count_emitted:
            radiance += emission

        if settings.direct_lighting_only:
            return radiance

        p_continue = settings.path_continuation_prob
        if self.rng.random() >= p_continue:
            return radiance

        if material.illum == 7:
            direction = self._refraction_direction(surf_normal, ray.direction, material.ior)
            radiance += self.trace_ray(Ray(hit, direction), scene, light_area, True) / p_continue
        elif material.illum == 5:
            radiance += self.trace_ray(Ray(hit, reflected), scene, light_area, True) / p_continue
        else:
            outgoing = sample_hemisphere(surf_normal, self.rng)
            pdf = 1.0 / (2.0 * math.pi)
            weight = brdf(diffuse, specular, reflected, outgoing, shine)
            incoming = self.trace_ray(Ray(hit, outgoing), scene, light_area, False)
            radiance += incoming * weight * float(outgoing @ surf_normal) / (pdf * p_continue)
        return radiance

    def _refraction_direction(self, normal: np.ndarray, incoming: np.ndarray, ior: float) -> np.ndarray:
        if float(normal @ incoming) > 0.0:
            # Leaving the object.
            p_zero = ((ior - 1.0) / (ior + 1.0)) ** 2
            p_reflect = p_zero + (1.0 - p_zero) * (1.0 - float(-normal @ -incoming))
            if self.rng.random() <= p_reflect:
                return reflect(-normal, incoming)
            return refract(-normal, incoming, ior, 1.0)
        p_zero = ((1.0 - ior) / (ior + 1.0)) ** 2
        p_reflect = p_zero + (1.0 - p_zero) * (1.0 - float(normal @ -incoming))
        if self.rng.random() <= p_reflect:
            return reflect(-normal, incoming)
        return refract(normal, incoming, 1.0, ior)

    def _direct_light(
        self,
        scene: Scene,
        hit: np.ndarray,
        surf_normal: np.ndarray,
        diffuse: np.ndarray,
        specular: np.ndarray,
        reflected: np.ndarray,
        shine: float,
        light_area: float,
    ) -> np.ndarray:
        total = np.zeros(3)
        emissives = scene.emissives()
        n_samples = self.settings.num_direct_lighting_samples
        if not emissives or light_area <= 0.0 or n_samples <= 0:
            return total
        sample_prob = 1.0 / light_area
        rounds = math.ceil(n_samples / 2.0)
        for _ in range(rounds):
            for light in emissives:
                alpha = self.rng.random()
                beta = self.rng.random() * (1.0 - alpha)
                gamma = 1.0 - (alpha + beta)
                v0, v1, v2 = light.vertices
                point = alpha * v0 + beta * v1 + gamma * v2

                to_light = point - hit
                distance = float(np.linalg.norm(to_light))
                if distance == 0.0:
                    continue
                to_light = to_light / distance

                shadow = scene.intersect(Ray(hit, to_light))
                if shadow is None:
                    continue
                if getattr(_surface_of(shadow), "index", None) != light.index:
                    continue

                light_emission = _vector3(light.material.emission)
                light_normal = light.normal(shadow)
                weight = brdf(diffuse, specular, reflected, to_light, shine)
                light_cos = max(0.0, float(-to_light @ light_normal))
                contribution = (
                    light_emission * weight * float(to_light @ surf_normal) * light_cos
                    / (distance ** 2)
                )
                total += contribution / (sample_prob * n_samples)
        return total