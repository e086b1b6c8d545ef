"""Triangles and the surface material they carry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .bbox import BBox
from .ray import IntersectionInfo, Ray
from .shape import Shape

_EPSILON = 1e-4

Color = Tuple[float, float, float]


def _vector3(values) -> np.ndarray:
    return np.array(values, dtype=float).reshape(3)


def _normalized(v: np.ndarray) -> np.ndarray:
    length = float(np.linalg.norm(v))
    return v / length if length > 0.0 else v


def _eps_zero(value: float) -> bool:
    return abs(value) < _EPSILON


@dataclass(frozen=True)
class Material:
    """Surface properties as read from a material library."""

    name: str = ""
    ambient: Color = (0.0, 0.0, 0.0)
    diffuse: Color = (0.0, 0.0, 0.0)
    specular: Color = (0.0, 0.0, 0.0)
    transmittance: Color = (0.0, 0.0, 0.0)
    emission: Color = (0.0, 0.0, 0.0)
    shininess: float = 1.0
    ior: float = 1.0
    dissolve: float = 1.0
    illum: int = 0
    diffuse_texname: str = ""

    @property
    def is_emissive(self) -> bool:
        return any(channel > 0.0 for channel in self.emission)


class Triangle(Shape):
    """A triangle with optional per-vertex normals and an index within its mesh."""

    def __init__(
        self,
        v1,
        v2,
        v3,
        n1=None,
        n2=None,
        n3=None,
        index: int = 0,
        material: Optional[Material] = None,
    ) -> None:
        super().__init__()
        self.vertices: Tuple[np.ndarray, np.ndarray, np.ndarray] = (
            _vector3(v1), _vector3(v2), _vector3(v3),
        )
        self.normals: Tuple[np.ndarray, np.ndarray, np.ndarray] = tuple(
            np.zeros(3) if n is None else _vector3(n) for n in (n1, n2, n3)
        )
        self.index = index
        self.material = material if material is not None else Material()
        box = BBox.from_point(self.vertices[0])
        box.include_point(self.vertices[1])
        box.include_point(self.vertices[2])
        self._bbox = box

    def intersect(self, ray: Ray) -> Optional[IntersectionInfo]:
        """Möller–Trumbore test; hits closer than a small epsilon are ignored."""
        a_vert, b_vert, c_vert = self.vertices
        edge1 = b_vert - a_vert
        edge2 = c_vert - a_vert
        h = np.cross(ray.direction, edge2)
        a = float(edge1 @ h)
        if _eps_zero(a):
            return None
        f = 1.0 / a
        s = ray.origin - a_vert
        u = f * float(s @ h)
        if u < 0.0 or u > 1.0:
            return None
        q = np.cross(s, edge1)
        v = f * float(ray.direction @ q)
        if v < 0.0 or u + v > 1.0:
            return None
        t = f * float(edge2 @ q)
        if t > _EPSILON:
            return IntersectionInfo(t=t, object=self)
        return None

    def normal(self, info: IntersectionInfo) -> np.ndarray:
        return self.normal_at(info.hit)

    def normal_at(self, point) -> np.ndarray:
        """Interpolate the vertex normals at ``point`` by barycentric weights.

        A vertex without a normal uses the face normal instead.
        """
        p = _vector3(point)
        a_vert, b_vert, c_vert = self.vertices
        e0 = b_vert - a_vert
        e1 = c_vert - a_vert
        e2 = p - a_vert
        d00 = float(e0 @ e0)
        d01 = float(e0 @ e1)
        d11 = float(e1 @ e1)
        d20 = float(e2 @ e0)
        d21 = float(e2 @ e1)
        denom = d00 * d11 - d01 * d01
        v = (d11 * d20 - d01 * d21) / denom
        w = (d00 * d21 - d01 * d20) / denom
        u = 1.0 - v - w

        face = np.cross(e0, e1)
        n1, n2, n3 = (
            face if _eps_zero(float(n @ n)) else n for n in self.normals
        )
        return _normalized(u * n1 + v * n2 + w * n3)

    def bbox(self) -> BBox:
        return BBox.from_min_max(self._bbox.lower, self._bbox.upper)

    def centroid(self) -> np.ndarray:
        a_vert, b_vert, c_vert = self.vertices
        return (a_vert + b_vert + c_vert) / 3.0

    def area(self) -> float:
        a_vert, b_vert, c_vert = self.vertices
        return float(np.linalg.norm(np.cross(b_vert - a_vert, c_vert - a_vert))) / 2.0

    def __repr__(self) -> str:
        points = ", ".join(str(v.tolist()) for v in self.vertices)
        return f"Triangle({points}, index={self.index})"