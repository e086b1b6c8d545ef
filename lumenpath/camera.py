"""Cameras that give the view and scale matrices used to cast primary rays."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod

import numpy as np


def _vector3(values) -> np.ndarray:
    return np.array(values, dtype=float).reshape(3)


def _normalized(v: np.ndarray) -> np.ndarray:
    length = float(np.linalg.norm(v))
    return v / length if length > 0.0 else v


class Camera(ABC):
    """A camera that maps world space to view space and scales by its field of view."""

    @abstractmethod
    def view_matrix(self) -> np.ndarray:
        """Return the 4x4 world-to-view matrix."""

    @abstractmethod
    def scale_matrix(self) -> np.ndarray:
        """Return the 4x4 matrix that scales view space by the field of view."""


class BasicCamera(Camera):
    """A camera given by a position, a look direction, an up vector and a field of view.

    ``height_angle`` is the full vertical field of view in degrees and
    ``aspect`` is width divided by height.
    """

    def __init__(
        self,
        position=(0.0, 0.0, 0.0),
        direction=(0.0, 0.0, -1.0),
        up=(0.0, 1.0, 0.0),
        height_angle: float = 90.0,
        aspect: float = 1.0,
    ) -> None:
        self.position = _vector3(position)
        self.direction = _vector3(direction)
        self.up = _vector3(up)
        self.height_angle = float(height_angle)
        self.aspect = float(aspect)

    def view_matrix(self) -> np.ndarray:
        f = _normalized(self.direction)
        u = _normalized(self.up)
        s = np.cross(f, u)
        u = np.cross(s, f)
        p = self.position
        return np.array(
            [
                [s[0], s[1], s[2], -float(s @ p)],
                [u[0], u[1], u[2], -float(u @ p)],
                [-f[0], -f[1], -f[2], float(f @ p)],
                [0.0, 0.0, 0.0, 1.0],
            ]
        )

    def scale_matrix(self) -> np.ndarray:
        half_angle = math.pi * self.height_angle / 360.0
        tan_h = math.tan(half_angle)
        tan_w = self.aspect * tan_h
        scale = np.eye(4)
        scale[0, 0] = 1.0 / tan_w
        scale[1, 1] = 1.0 / tan_h
        return scale

    def __repr__(self) -> str:
        return (
            f"BasicCamera(position={self.position.tolist()}, "
            f"direction={self.direction.tolist()}, up={self.up.tolist()}, "
            f"height_angle={self.height_angle}, aspect={self.aspect})"
        )