"""The interface every ray-intersectable object implements."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from .bbox import BBox
from .ray import IntersectionInfo, Ray


def _affine_from_linear(linear: np.ndarray) -> np.ndarray:
    m = np.eye(4)
    m[:3, :3] = linear
    return m


class Shape(ABC):
    """An object that rays can hit, with a bounding box and a centroid.

    Transforms are stored as 4x4 affine matrices.
    """

    def __init__(self) -> None:
        self.transform = np.eye(4)
        self.inverse_transform = np.eye(4)
        self.normal_transform = np.eye(4)
        self.inverse_normal_transform = np.eye(4)

    @abstractmethod
    def intersect(self, ray: Ray) -> Optional[IntersectionInfo]:
        """Return the hit of ``ray`` on this object, or None."""

    @abstractmethod
    def normal(self, info: IntersectionInfo) -> np.ndarray:
        """Return the surface normal at a hit."""

    @abstractmethod
    def bbox(self) -> BBox:
        """Return a bounding box for this object."""

    @abstractmethod
    def centroid(self) -> np.ndarray:
        """Return the point used to sort this object in a hierarchy."""

    def set_transform(self, transform) -> None:
        m = np.array(transform, dtype=float)
        if m.shape != (4, 4):
            raise ValueError(f"expected a 4x4 matrix, got shape {m.shape}")
        linear = m[:3, :3]
        self.transform = m
        self.inverse_transform = np.linalg.inv(m)
        self.normal_transform = _affine_from_linear(linear)
        self.inverse_normal_transform = _affine_from_linear(np.linalg.inv(linear).T)