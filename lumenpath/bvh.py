"""A bounding volume hierarchy for fast ray-object intersection."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from .bbox import BBox
from .ray import IntersectionInfo, Ray
from .shape import Shape

_log = logging.getLogger(__name__)

_ROOT_NEAR = -9999999.0
_FARTHEST_HIT = 999999999.0


@dataclass
class _FlatNode:
    bbox: BBox
    start: int
    count: int
    right_offset: int = 0  # zero marks a leaf; the left child is always the next node


class BVH:
    """A flattened hierarchy over a set of shapes, split at the centroid midpoint."""

    def __init__(self, objects: Iterable[Shape], leaf_size: int = 4) -> None:
        self._prims: List[Shape] = list(objects)
        if not self._prims:
            raise ValueError("cannot build a BVH over no objects")
        if leaf_size < 1:
            raise ValueError("leaf_size must be at least 1")
        self.leaf_size = leaf_size
        self.leaf_count = 0
        self._nodes: List[_FlatNode] = []

        started = time.perf_counter()
        self._build()
        elapsed_ms = int(1000 * (time.perf_counter() - started))
        _log.info(
            "Built BVH (%d nodes, with %d leafs) in %d ms",
            self.node_count, self.leaf_count, elapsed_ms,
        )

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def objects(self) -> Sequence[Shape]:
        """The shapes, in the order the hierarchy stores them."""
        return tuple(self._prims)

    def _build(self) -> None:
        stack: List[Tuple[int, int, Optional[int], bool]] = [
            (0, len(self._prims), None, False)
        ]
        while stack:
            start, end, parent, is_right = stack.pop()
            segment = self._prims[start:end]
            centroids = [shape.centroid() for shape in segment]

            first = segment[0].bbox()
            box = BBox.from_min_max(first.lower, first.upper)
            centroid_box = BBox.from_point(centroids[0])
            for shape, centroid in zip(segment[1:], centroids[1:]):
                box.include_box(shape.bbox())
                centroid_box.include_point(centroid)

            index = len(self._nodes)
            self._nodes.append(_FlatNode(box, start, end - start))
            if parent is not None and is_right:
                self._nodes[parent].right_offset = index - parent

            if end - start <= self.leaf_size:
                self.leaf_count += 1
                continue

            dim = centroid_box.max_dimension()
            split = 0.5 * (centroid_box.lower[dim] + centroid_box.upper[dim])
            left = [s for s, c in zip(segment, centroids) if c[dim] < split]
            right = [s for s, c in zip(segment, centroids) if not c[dim] < split]
            mid = start + len(left)
            if mid in (start, end):
                mid = start + (end - start) // 2
            else:
                self._prims[start:end] = left + right

            stack.append((mid, end, index, True))
            stack.append((start, mid, index, False))

    def intersect(self, ray: Ray, occlusion: bool = False) -> Optional[IntersectionInfo]:
        """Return the closest hit along ``ray``, or None.

        With ``occlusion`` set, the first hit found is returned instead.
        """
        best: Optional[IntersectionInfo] = None
        best_t = _FARTHEST_HIT
        stack: List[Tuple[int, float]] = [(0, _ROOT_NEAR)]

        while stack:
            index, near = stack.pop()
            if near > best_t:
                continue
            node = self._nodes[index]

            if node.right_offset == 0:
                for shape in self._prims[node.start:node.start + node.count]:
                    current = shape.intersect(ray)
                    if current is None:
                        continue
                    if occlusion:
                        current.hit = ray.origin + ray.direction * current.t
                        return current
                    if current.t < best_t:
                        best, best_t = current, current.t
                continue

            left_index = index + 1
            right_index = index + node.right_offset
            left_hit = self._nodes[left_index].bbox.intersect(ray)
            right_hit = self._nodes[right_index].bbox.intersect(ray)

            if left_hit and right_hit:
                closer, other = (left_index, left_hit[0]), (right_index, right_hit[0])
                if right_hit[0] < left_hit[0]:
                    closer, other = other, closer
                stack.append(other)
                stack.append(closer)
            elif left_hit:
                stack.append((left_index, left_hit[0]))
            elif right_hit:
                stack.append((right_index, right_hit[0]))

        if best is None:
            return None
        best.hit = ray.origin + ray.direction * best.t
        return best