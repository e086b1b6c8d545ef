"""Rays and the record of a ray hitting something."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional

import numpy as np


def _vector3(values) -> np.ndarray:
    return np.array(values, dtype=float).reshape(3)


def _matrix4(matrix) -> np.ndarray:
    m = np.array(matrix, dtype=float)
    if m.shape != (4, 4):
        raise ValueError(f"expected a 4x4 matrix, got shape {m.shape}")
    return m


class Ray:
    """A ray with an origin and a unit direction.

    ``inv_direction`` holds the component-wise reciprocal of the direction,
    with infinities where a component is zero.
    """

    __slots__ = ("origin", "direction", "inv_direction")

    def __init__(self, origin, direction) -> None:
        self.origin = _vector3(origin)
        d = _vector3(direction)
        length = float(np.linalg.norm(d))
        if length > 0.0:
            d = d / length
        self.direction = d
        with np.errstate(divide="ignore"):
            self.inv_direction = 1.0 / d

    def transform(self, matrix) -> "Ray":
        """Apply a 4x4 matrix: the origin as a point, the direction as a vector."""
        m = _matrix4(matrix)
        origin = m @ np.append(self.origin, 1.0)
        direction = m @ np.append(self.direction, 0.0)
        return Ray(origin[:3], direction[:3])

    def transform_affine(self, matrix) -> "Ray":
        """Apply an affine 4x4 transform; the direction goes through the inverse transpose."""
        m = _matrix4(matrix)
        linear = m[:3, :3]
        origin = linear @ self.origin + m[:3, 3]
        direction = np.linalg.inv(linear).T @ self.direction
        return Ray(origin, direction)

    def __repr__(self) -> str:
        return f"Ray(origin={self.origin.tolist()}, direction={self.direction.tolist()})"


@dataclass
class IntersectionInfo:
    """Where a ray hit an object: distance along the ray, the object, the point."""

    t: float = math.inf
    object: Any = None
    hit: Optional[np.ndarray] = None
    data: Any = None