# vcxengine

Data structures for small 3D rendering projects. The package stores textures
in fixed pixel formats and provides triangle meshes, cameras, lights,
materials and scenes. It can also load images, Wavefront OBJ meshes with
their MTL materials, and YAML scene descriptions.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

### `vcxengine.formats`

Pixel formats.

- `NormalizedFormat` stores each channel as an unsigned integer. The
  predefined instances are `R8`, `RGB8`, `RGBA8`, `R16` and `D32`.
  `encode` clamps each value to `[0, 1]`, scales it and rounds it.
  `decode` divides by the format's maximum value.
- `DepthStencilFormat`, with the instance `D24S8`, packs a 24-bit depth
  value and an 8-bit stencil value into one integer. Encoding truncates the
  depth instead of rounding it.
- `cast_rgba_to_rgb(value)` drops the alpha channel of an encoded RGBA8
  pixel.

### `vcxengine.textures`

`Texture(format, *sizes)` is a 1D, 2D or 3D grid of encoded pixels backed by
a numpy array.

- Reading `tex[x]`, `tex[x, y]` or `tex[x, y, z]` decodes the pixel, and
  assigning to it encodes the value.
- A coordinate outside the grid raises `IndexError`. The wrong number of
  coordinates raises `TypeError`.
- `fill(value)` sets every pixel to the same value.
- `to_bytes()` returns the raw storage, with x varying fastest.
- `encoded` returns a copy of that storage as an array.
- `size` gives the extent along each axis, x first.
- `Texture.from_encoded(format, data)` builds a texture from encoded data
  laid out as `[z][y][x][channel]`.
- `cast(RGB8)` turns an RGBA8 texture into RGB8. Any other cast raises
  `TypeError`.

### `vcxengine.async_value`

`AsyncValue(func)` runs `func` on a background thread.

- `value()` raises `ResultNotReady` until the result exists.
- `value_or(alt)` returns `alt` until then.
- `wait()` blocks and returns the result.
- `emplace(func)` waits for any running job and then starts a new one.
- `reset()` waits for any running job and marks the value as not ready.
- `has_value()` tells whether the computation has finished.
- If `func` raised an exception, `value()` and `wait()` raise it again.

### `vcxengine.spherical`

`Spherical(radius, phi, theta)` describes a point in spherical coordinates.
The polar angle `phi` is measured from +y. The azimuth `theta` is measured
from +z toward +x.

- `Spherical.from_vector(v)` converts from Cartesian coordinates.
- `to_vector()` converts back to Cartesian coordinates.
- `make_safe()` keeps `phi` away from the poles.

### `vcxengine.camera`

- `perspective(fovy, aspect, znear, zfar)` builds a right-handed projection
  matrix. Here `fovy` is in radians and depth ranges over `[-1, 1]`.
- `look_at(eye, target, up)` builds a right-handed view matrix.
- `Camera` holds `fovy` (in degrees), `znear`, `zfar`, `eye`, `target` and
  `up`. It provides `projection_matrix(aspect)`, `view_matrix()` and
  `transformation_matrix(aspect)`. The last one is projection times view.
- `CameraManager` is an abstract base class whose `update(camera)` adjusts a
  camera in place.

### `vcxengine.mesh`

`SurfaceMesh` holds `positions`, `normals`, `texcoords` and triangle
`indices` as numpy arrays.

- `compute_normals()` returns area-weighted vertex normals.
- `compute_tangents()` returns vertex tangents. They are all zero when there
  is not one texture coordinate per vertex.
- `empty_texcoords()` gives every vertex the coordinate (0.5, 0.5).
- `bounding_box()` returns the `(min, max)` corners.
- `normalize_positions(min_aabb, max_aabb)` scales the mesh uniformly and
  moves it to fit the given box. The default box is `[-0.5, 0.5]` on each
  axis.
- `swap(other)` exchanges all data with another mesh.
- The properties `vertex_count`, `is_normal_available` and
  `is_texcoord_available` describe the mesh.

### `vcxengine.scene`

`Scene` contains:

- `reflection`, a `ReflectionType`;
- `ambient_intensity`;
- lists of `Skybox`, `Camera`, `Light`, `Material` and `Model`.

`Scene.bounding_box()` encloses every model's mesh.

`LightType`, `BlendMode` and `ReflectionType` are enums. Their values are the
names used in scene files, such as `"Point"`, `"Transparent"` and
`"PhysicalMetallic"`.

### `vcxengine.assets`

- `load_bytes(path)` returns a file's contents. A missing file raises
  `FileNotFoundError`.
- `load_image_gray`, `load_image_rgb` and `load_image_rgba` load an image
  with Pillow into an R8, RGB8 or RGBA8 texture. Pass `flipped=True` to flip
  it vertically. Data that cannot be decoded raises `ValueError`.
- `parse_obj(text, directory)` parses an OBJ document into `ObjData`.
  Polygons are triangulated as fans. Material libraries are read from
  `directory` when one is given.
- `parse_mtl(text)` parses the materials of an MTL document into a list of
  `ObjMaterial`.
- `build_mesh(data, indices, simplified)` turns OBJ corners into a
  `SurfaceMesh`. Corners that share indices share a vertex, and the texture
  v coordinate is flipped.
- `load_surface_mesh(path, simplified)` loads an `.obj` file. Any other
  extension raises `ValueError`.

### `vcxengine.scene_loader`

- `load_scene(path)` reads a YAML scene file. Relative asset paths are
  resolved next to that file.
- `parse_scene(document, directory)` does the same for a document that has
  already been parsed.
- `load_complex_models(path)` loads an OBJ file with its own materials. It
  returns one model per material that is used, together with the list of
  materials.

The scene file understands these top-level keys:

- `Reflection`
- `AmbientIntensity`
- `Skyboxes`: six image names each
- `Cameras`
- `Lights`
- `Materials`:
  - colour factors: `Diffuse`/`Albedo`/`BaseColor`, `Specular`/`Metallic`
  - alpha value: `Shininess`/`Glossiness`/`Smoothness`
  - texture maps: `...Map` keys and `HeightMap`
- `Models`: `Mesh`, `Material` by name, `Translation`, `Rotation` as a
  3x3 matrix of rows, `Scale`
- `ComplexModels`: `Mesh`

Malformed values raise `ValueError`. A missing file raises
`FileNotFoundError`. A model that names an unknown material gets material
index 0.

Progress is reported through the standard `logging` module, under the module
names.

## Example

```python
from vcxengine.formats import RGBA8
from vcxengine.scene_loader import load_scene
from vcxengine.textures import Texture

tex = Texture(RGBA8, 4, 4)
tex.fill((1.0, 0.5, 0.0, 1.0))
print(tex[2, 3])

scene = load_scene("scenes/demo/scene.yaml")
low, high = scene.bounding_box()
matrix = scene.cameras[0].transformation_matrix(16 / 9)
```

## What this package does not do

It does not draw anything. It has no window, no GPU or shader handling and no
render loop. The package describes and loads what is to be rendered, and
leaves the rendering to the caller. It has no command-line program. Mesh
loading supports only the OBJ format.