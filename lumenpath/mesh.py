"""Triangle meshes with their own hierarchy over their faces."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence, Tuple

import numpy as np

from .bbox import BBox
from .bvh import BVH
from .ray import IntersectionInfo, Ray
from .shape import Shape
from .triangle import Material, Triangle

_DEFAULT_MATERIAL = Material()


def _frozen(array: np.ndarray) -> np.ndarray:
    array.flags.writeable = False
    return array


class Mesh(Shape):
    """A set of triangles sharing vertices, with per-face materials.

    A material id below zero means the face has no material and gets the default.
    """

    def __init__(
        self,
        vertices,
        faces,
        *,
        normals=None,
        uvs=None,
        colors=None,
        material_ids: Optional[Iterable[int]] = None,
        materials: Sequence[Material] = (),
    ) -> None:
        super().__init__()
        verts = np.array(vertices, dtype=float).reshape(-1, 3)
        if len(verts) == 0:
            raise ValueError("a mesh needs at least one vertex")
        face_array = np.array(faces, dtype=int).reshape(-1, 3)
        if len(face_array) == 0:
            raise ValueError("a mesh needs at least one face")
        if face_array.min() < 0 or face_array.max() >= len(verts):
            raise ValueError("face refers to a vertex that does not exist")

        count = len(verts)
        self._vertices = _frozen(verts)
        self._normals = _frozen(
            np.zeros((count, 3)) if normals is None
            else np.array(normals, dtype=float).reshape(-1, 3)
        )
        self._uvs = _frozen(
            np.zeros((count, 2)) if uvs is None
            else np.array(uvs, dtype=float).reshape(-1, 2)
        )
        self._colors = _frozen(
            np.zeros((count, 3)) if colors is None
            else np.array(colors, dtype=float).reshape(-1, 3)
        )
        for name, arr in (("normals", self._normals), ("uvs", self._uvs), ("colors", self._colors)):
            if len(arr) != count:
                raise ValueError(f"expected {count} {name}, got {len(arr)}")
        self._faces = _frozen(face_array)

        ids = [-1] * len(face_array) if material_ids is None else [int(m) for m in material_ids]
        if len(ids) != len(face_array):
            raise ValueError(f"expected {len(face_array)} material ids, got {len(ids)}")
        self._material_ids: Tuple[int, ...] = tuple(ids)
        self._materials: Tuple[Material, ...] = tuple(materials)

        self._bbox = BBox.from_min_max(verts.min(axis=0), verts.max(axis=0))
        self.transformed_bbox = BBox.from_min_max(self._bbox.lower, self._bbox.upper)
        self._centroid = verts.mean(axis=0)

        self._triangles: Tuple[Triangle, ...] = tuple(
            Triangle(*verts[face], *self._normals[face], index=i, material=self.material(i))
            for i, face in enumerate(face_array)
        )
        self._bvh = BVH(self._triangles)

    @property
    def vertices(self) -> np.ndarray:
        return self._vertices

    @property
    def normals(self) -> np.ndarray:
        return self._normals

    @property
    def uvs(self) -> np.ndarray:
        return self._uvs

    @property
    def colors(self) -> np.ndarray:
        return self._colors

    @property
    def faces(self) -> np.ndarray:
        return self._faces

    @property
    def triangles(self) -> Tuple[Triangle, ...]:
        return self._triangles

    def material(self, face_index: int) -> Material:
        material_id = self._material_ids[face_index]
        if material_id < 0:
            return _DEFAULT_MATERIAL
        return self._materials[material_id]

    def intersect(self, ray: Ray) -> Optional[IntersectionInfo]:
        """Return a hit naming this mesh, with the triangle hit as ``data``."""
        inner = self._bvh.intersect(ray, False)
        if inner is None:
            return None
        return IntersectionInfo(t=inner.t, object=self, hit=inner.hit, data=inner.object)

    def normal(self, info: IntersectionInfo) -> np.ndarray:
        return info.data.normal(info)

    def bbox(self) -> BBox:
        return BBox.from_min_max(self._bbox.lower, self._bbox.upper)

    def centroid(self) -> np.ndarray:
        return self._centroid.copy()

    def set_transform(self, transform) -> None:
        super().set_transform(transform)
        linear = self.transform[:3, :3]
        offset = self.transform[:3, 3]
        box = BBox.from_point(linear @ self._bbox.lower + offset)
        box.include_point(linear @ self._bbox.upper + offset)
        self.transformed_bbox = box

    def __repr__(self) -> str:
        return f"Mesh({len(self._vertices)} vertices, {len(self._faces)} faces)"