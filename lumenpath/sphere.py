"""A simple sphere shape."""

from __future__ import annotations

import math
from typing import Optional

import numpy as np

from .bbox import BBox
from .ray import IntersectionInfo, Ray
from .shape import Shape


class Sphere(Shape):
    """A sphere given by its centre and radius."""

    def __init__(self, center, radius: float) -> None:
        super().__init__()
        self.center = np.array(center, dtype=float).reshape(3)
        self.radius = radius

    @property
    def radius(self) -> float:
        return self._radius

    @radius.setter
    def radius(self, value: float) -> None:
        self._radius = float(value)
        self._radius_sq = self._radius * self._radius

    def intersect(self, ray: Ray) -> Optional[IntersectionInfo]:
        """Return the nearer root of the ray-sphere equation.

        The origin is assumed to lie outside the sphere.
        """
        s = self.center - ray.origin
        sd = float(s @ ray.direction)
        ss = float(s @ s)
        disc = sd * sd - ss + self._radius_sq
        if disc < 0.0:
            return None
        return IntersectionInfo(t=sd - math.sqrt(disc), object=self)

    def normal(self, info: IntersectionInfo) -> np.ndarray:
        v = np.asarray(info.hit, dtype=float) - self.center
        length = float(np.linalg.norm(v))
        return v / length if length > 0.0 else v

    def bbox(self) -> BBox:
        r = np.full(3, self._radius)
        return BBox.from_min_max(self.center - r, self.center + r)

    def centroid(self) -> np.ndarray:
        return self.center.copy()

    def __repr__(self) -> str:
        return f"Sphere(center={self.center.tolist()}, radius={self._radius})"