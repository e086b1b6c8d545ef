# lumenpath

lumenpath renders scenes made of triangle meshes with Monte Carlo path
tracing. It handles diffuse and glossy surfaces, perfect mirrors
(illumination model 5) and refractive dielectrics (illumination model 7).
Emissive triangles act as area lights and are sampled directly with
shadow rays. Russian roulette ends light paths. A bounding volume
hierarchy speeds up ray queries.

The only runtime dependency is NumPy.

## Example

```python
import random

from lumenpath.camera import BasicCamera
from lumenpath.mesh import Mesh
from lumenpath.pathtracer import PathTracer, Settings
from lumenpath.scene import Scene
from lumenpath.triangle import Material

floor = Mesh(
    vertices=[(-2, -1, -1), (2, -1, -1), (2, -1, -5), (-2, -1, -5)],
    faces=[(0, 1, 2), (0, 2, 3)],
    material_ids=[0, 0],
    materials=[Material(diffuse=(0.8, 0.8, 0.8))],
)
lamp = Mesh(
    vertices=[(-0.5, 1, -2.5), (0.5, 1, -2.5), (0, 1, -3.5)],
    faces=[(0, 1, 2)],
    material_ids=[0],
    materials=[Material(emission=(5.0, 5.0, 5.0))],
)
scene = Scene(BasicCamera(height_angle=60.0, aspect=1.0), [floor, lamp])

tracer = PathTracer(32, 32, Settings(samples_per_pixel=4), rng=random.Random(1))
pixels = tracer.trace_scene(scene)   # numpy uint8 array, shape (32, 32, 3)
```

## Building blocks

- `lumenpath.ray`: `Ray` is an origin with a normalised direction and the
  component-wise reciprocal of that direction. `Ray.transform(matrix)`
  applies a 4×4 matrix to the origin as a point and to the direction as a
  vector. `Ray.transform_affine(matrix)` moves the direction by the inverse
  transpose of the linear part. `IntersectionInfo` records a hit: `t`,
  `object`, `hit` (the point) and `data` (for a mesh, the triangle struck).
- `lumenpath.bbox`: `BBox` is an axis-aligned box with `lower`, `upper` and
  `extent`. It is built with `BBox.from_point` or `BBox.from_min_max` and
  grown with `include_point` and `include_box`. `max_dimension` gives the
  split axis and `surface_area` the box's area. `intersect(ray)` is a slab
  test that returns `(tnear, tfar)` or `None`.
- `lumenpath.shape`: `Shape` is the abstract interface: `intersect`,
  `normal`, `bbox`, `centroid` and `set_transform`. `set_transform` takes a
  4×4 affine matrix and stores it with its inverse and normal transforms.
- `lumenpath.bvh`: `BVH(objects, leaf_size=4)` builds a flattened
  hierarchy. Each node is split at the midpoint of its centroids' widest
  axis. `BVH.intersect(ray, occlusion=False)` returns the nearest hit, or
  `None`. With `occlusion` set, it returns the first hit found. The build
  statistics are logged at INFO level through `logging`. An empty object
  list raises `ValueError`.
- `lumenpath.triangle`: `Triangle` does Möller–Trumbore intersection and
  ignores hits closer than 1e-4. `normal_at` interpolates the vertex
  normals from barycentric coordinates and falls back to the face normal
  where a vertex has none. `area()` gives the triangle's area. `Material`
  is a frozen record of ambient, diffuse, specular, transmittance,
  emission, shininess, ior, dissolve, illum and a diffuse texture name.
  `is_emissive` is true when any emission channel is positive.
- `lumenpath.sphere`: `Sphere(center, radius)` is a simple analytic shape.
  Its intersection assumes the ray starts outside the sphere.
- `lumenpath.mesh`: `Mesh(vertices, faces, *, normals, uvs, colors,
  material_ids, materials)` builds one `Triangle` per face, with its own
  internal BVH. `Mesh.material(face_index)` gives a face's material; a
  negative material id gives the default `Material()`. `set_transform`
  also updates `transformed_bbox`.
- `lumenpath.camera`: `Camera` is abstract. `BasicCamera(position,
  direction, up, height_angle, aspect)` gives a `view_matrix()` and a
  `scale_matrix()`. `height_angle` is the full vertical field of view in
  degrees.
- `lumenpath.scene`: `Scene(camera, objects, *, lights, global_data)` puts
  the objects under a BVH. `Scene.intersect(ray)` returns the closest hit.
  `Scene.emissives()` returns every emissive triangle of the meshes in the
  scene. `lights` and `global_data` are only stored, and the renderer does
  not use them.

## Rendering

`Settings` holds the renderer's parameters:

- `samples_per_pixel` (default 1; it must be at least 1)
- `direct_lighting_only` (default `False`)
- `num_direct_lighting_samples` (default 1)
- `path_continuation_prob` (default 0.5)

`PathTracer(width, height, settings=None, rng=None)` takes an optional
`rng`, which is any object with a `random()` method; by default it is a
fresh `random.Random()`. `trace_scene(scene)` traces every pixel and
returns a `(height, width, 3)` `uint8` array.

- `trace_pixel(x, y, scene, inv_view, light_area)` averages jittered
  camera rays through one pixel.
- `trace_ray(ray, scene, light_area, count_emitted)` returns the radiance
  carried back along one ray.

## Shading helpers

The functions in `lumenpath.pathtracer` can be used on their own:

- `reflect(normal, incoming)`: mirror reflection about a normal.
- `refract(normal, incoming, n1, n2)`: refraction from index `n1` into
  `n2`. Past the critical angle it reflects instead.
- `brdf(diffuse, specular, reflected, outgoing, shine)`: a Phong lobe
  `(shine + 2) / (2π) · cos^shine · specular` when any specular channel
  exceeds 0.5. Otherwise it is Lambertian, `diffuse / π`.
- `spherical_to_cartesian(theta, phi)`: the unit vector at polar angle
  `theta` from +z and azimuth `phi`.
- `sample_hemisphere(normal, rng)`: a uniform direction on the hemisphere
  around `normal`.
- `tone_map(intensities)`: the Reinhard operator `x / (1 + x)` followed by
  gamma 1/2.2, scaled to 0–255 as `uint8`. Negative values map to 0.

```python
import numpy as np
from lumenpath.pathtracer import reflect

normal = np.array([0.0, 1.0, 0.0])
incoming = np.array([1.0, -1.0, 0.0]) / np.sqrt(2.0)
print(reflect(normal, incoming))   # [0.7071..., 0.7071..., 0.0]
```

## What it does not do

lumenpath has no command-line program. It does not read scene description
files, configuration files or `.obj`/`.mtl` model files; scenes are built
in Python from `Mesh`, `Material` and `BasicCamera` objects. It does not
write image files either: `trace_scene` returns a NumPy array, and saving
it is left to the caller. Textures, vertex colours and UV coordinates are
stored on meshes, but the renderer does not use them.