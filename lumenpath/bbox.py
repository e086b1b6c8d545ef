"""Axis-aligned bounding boxes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .ray import Ray


def _vector3(values) -> np.ndarray:
    return np.array(values, dtype=float).reshape(3)


@dataclass(eq=False)
class BBox:
    """An axis-aligned box given by its lower and upper corners."""

    lower: np.ndarray
    upper: np.ndarray

    def __post_init__(self) -> None:
        self.lower = _vector3(self.lower)
        self.upper = _vector3(self.upper)

    @classmethod
    def from_point(cls, point) -> "BBox":
        p = _vector3(point)
        return cls(p, p.copy())

    @classmethod
    def from_min_max(cls, lower, upper) -> "BBox":
        return cls(lower, upper)

    @property
    def extent(self) -> np.ndarray:
        return self.upper - self.lower

    def include_point(self, point) -> None:
        p = _vector3(point)
        self.lower = np.minimum(self.lower, p)
        self.upper = np.maximum(self.upper, p)

    def include_box(self, other: "BBox") -> None:
        self.lower = np.minimum(self.lower, other.lower)
        self.upper = np.maximum(self.upper, other.upper)

    def max_dimension(self) -> int:
        """Index of the axis chosen for splitting.

        Axis 2 wins whenever its extent exceeds axis 1's, even if axis 0 is larger.
        """
        e = self.extent
        result = 0
        if e[1] > e[0]:
            result = 1
        if e[2] > e[1]:
            result = 2
        return result

    def surface_area(self) -> float:
        x, y, z = self.extent
        return float(2.0 * (x * z + x * y + y * z))

    def intersect(self, ray: Ray) -> Optional[Tuple[float, float]]:
        """Slab test. Return ``(tnear, tfar)`` when the ray hits the box, else None.

        Products of zero and infinity on an axis leave that axis unconstrained.
        """
        with np.errstate(invalid="ignore", over="ignore"):
            l1 = (self.lower - ray.origin) * ray.inv_direction
            l2 = (self.upper - ray.origin) * ray.inv_direction
        nan1 = np.isnan(l1)
        nan2 = np.isnan(l2)
        far = np.maximum(np.where(nan1, np.inf, l1), np.where(nan2, np.inf, l2))
        near = np.minimum(np.where(nan1, -np.inf, l1), np.where(nan2, -np.inf, l2))
        tfar = float(far.min())
        tnear = float(near.max())
        if tfar >= 0.0 and tfar >= tnear:
            return tnear, tfar
        return None