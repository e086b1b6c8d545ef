"""A scene: a camera, the objects to render and the lights among them."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from .bvh import BVH
from .camera import BasicCamera
from .ray import IntersectionInfo, Ray
from .shape import Shape
from .triangle import Triangle

_log = logging.getLogger(__name__)


class Scene:
    """Objects under a hierarchy, with the emissive triangles gathered from meshes.

    ``lights`` and ``global_data`` are kept as given for callers that need them.
    """

    def __init__(
        self,
        camera: BasicCamera,
        objects: Iterable[Shape],
        *,
        lights: Iterable[Any] = (),
        global_data: Any = None,
    ) -> None:
        self.camera = camera
        self._objects: Tuple[Shape, ...] = tuple(objects)
        if not self._objects:
            raise ValueError("a scene needs at least one object")
        self.lights: List[Any] = list(lights)
        self.global_data = global_data

        self._emissives: Tuple[Triangle, ...] = tuple(
            triangle
            for obj in self._objects
            for triangle in getattr(obj, "triangles", ())
            if triangle.material.is_emissive
        )
        _log.info("Parsed tree, creating BVH")
        self._bvh = BVH(self._objects)

    @property
    def objects(self) -> Sequence[Shape]:
        return self._objects

    @property
    def bvh(self) -> BVH:
        return self._bvh

    def add_light(self, light: Any) -> None:
        self.lights.append(light)

    def intersect(self, ray: Ray) -> Optional[IntersectionInfo]:
        """Return the closest hit of ``ray`` in the scene, or None."""
        return self._bvh.intersect(ray, False)

    def emissives(self) -> Tuple[Triangle, ...]:
        """Every triangle whose material has a positive emission channel."""
        return self._emissives

    def __repr__(self) -> str:
        return f"Scene({len(self._objects)} objects, {len(self._emissives)} emissive triangles)"