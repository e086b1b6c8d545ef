"""Monte Carlo path tracing of triangle-mesh scenes accelerated by a BVH."""

__version__ = "0.1.0"

__all__ = [
    "bbox",
    "bvh",
    "camera",
    "mesh",
    "pathtracer",
    "ray",
    "scene",
    "shape",
    "sphere",
    "triangle",
]