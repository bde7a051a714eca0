"""Loading raw files, images and Wavefront OBJ meshes."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from vcxengine.formats import R8, RGB8, RGBA8
from vcxengine.mesh import SurfaceMesh
from vcxengine.textures import Texture

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
Corner = Tuple[int, int, int]

# Number of arguments taken by each texture-map option; None means "one to three numbers".
_TEXTURE_OPTIONS: Dict[str, Optional[int]] = {
    "-blendu": 1,
    "-blendv": 1,
    "-clamp": 1,
    "-boost": 1,
    "-bm": 1,
    "-mm": 2,
    "-texres": 1,
    "-imfchan": 1,
    "-type": 1,
    "-colorspace": 1,
    "-o": None,
    "-s": None,
    "-t": None,
}


@dataclass
class ObjMaterial:
    """The parts of an MTL material that the engine uses."""

    name: str = ""
    diffuse: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    specular: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    shininess: float = 1.0
    dissolve: float = 1.0
    diffuse_texname: str = ""
    specular_texname: str = ""
    bump_texname: str = ""


@dataclass
class ObjData:
    """Parsed OBJ contents.

    Each shape is a list of triangle corners, three per triangle, given as
    zero-based ``(vertex, texcoord, normal)`` indices with -1 for a missing
    one. ``material_ids`` holds one material index per triangle of each
    shape, -1 where no known material applies.
    """

    vertices: List[Tuple[float, float, float]] = field(default_factory=list)
    texcoords: List[Tuple[float, float]] = field(default_factory=list)
    normals: List[Tuple[float, float, float]] = field(default_factory=list)
    materials: List[ObjMaterial] = field(default_factory=list)
    shapes: List[List[Corner]] = field(default_factory=list)
    material_ids: List[List[int]] = field(default_factory=list)
    shape_names: List[str] = field(default_factory=list)


def load_bytes(path: PathLike) -> bytes:
    """All bytes of a file; raises FileNotFoundError if it does not exist."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"{path.name}: not found.")
    data = path.read_bytes()
    logger.debug("load_bytes(%r)", path.name)
    return data


def _open_image(path: PathLike, flipped: bool) -> Image.Image:
    data = load_bytes(path)
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError) as exc:
        raise ValueError(f"{Path(path).name}: cannot decode image") from exc
    if flipped:
        image = image.transpose(Image.FLIP_TOP_BOTTOM)
    return image


def load_image_gray(path: PathLike, flipped: bool = False) -> Texture:
    """Load an image as a single-channel R8 texture."""
    image = _open_image(path, flipped)
    if image.mode in ("1", "L", "LA"):
        gray = np.asarray(image.convert("L"), dtype=np.uint8)
    else:
        rgb = np.asarray(image.convert("RGB"), dtype=np.uint32)
        gray = ((rgb[..., 0] * 77 + rgb[..., 1] * 150 + rgb[..., 2] * 29) >> 8).astype(np.uint8)
    return Texture.from_encoded(R8, gray)


def load_image_rgb(path: PathLike, flipped: bool = False) -> Texture:
    """Load an image as an RGB8 texture."""
    image = _open_image(path, flipped)
    return Texture.from_encoded(RGB8, np.asarray(image.convert("RGB"), dtype=np.uint8))


def load_image_rgba(path: PathLike, flipped: bool = False) -> Texture:
    """Load an image as an RGBA8 texture."""
    image = _open_image(path, flipped)
    return Texture.from_encoded(RGBA8, np.asarray(image.convert("RGBA"), dtype=np.uint8))


def _floats(tokens: Sequence[str], count: int, line_no: int) -> Tuple[float, ...]:
    try:
        values = [float(t) for t in tokens[:count]]
    except ValueError as exc:
        raise ValueError(f"line {line_no}: invalid number") from exc
    values.extend([0.0] * (count - len(values)))
    return tuple(values)


def _is_number(token: str) -> bool:
    try:
        float(token)
    except ValueError:
        return False
    return True


def _texture_name(tokens: Sequence[str]) -> str:
    """The file name of a texture statement, with its options stripped."""
    rest = list(tokens)
    while rest and rest[0] in _TEXTURE_OPTIONS:
        arity = _TEXTURE_OPTIONS[rest.pop(0)]
        if arity is None:
            taken = 0
            while rest and taken < 3 and _is_number(rest[0]):
                rest.pop(0)
                taken += 1
        else:
            del rest[:arity]
    return " ".join(rest)


def parse_mtl(text: str) -> List[ObjMaterial]:
    """Parse the materials of an MTL document, in file order."""
    materials: List[ObjMaterial] = []
    current: Optional[ObjMaterial] = None
    has_d = False
    for line_no, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        keyword, *args = line.split()
        if keyword == "newmtl":
            current = ObjMaterial(name=" ".join(args))
            materials.append(current)
            has_d = False
            continue
        if current is None:
            continue
        if keyword == "Kd":
            current.diffuse = _floats(args, 3, line_no)
        elif keyword == "Ks":
            current.specular = _floats(args, 3, line_no)
        elif keyword == "Ns":
            current.shininess = _floats(args, 1, line_no)[0]
        elif keyword == "d":
            current.dissolve = _floats(args, 1, line_no)[0]
            has_d = True
        elif keyword == "Tr":
            if has_d:
                logger.warning("line %d: both 'd' and 'Tr' given; 'Tr' ignored", line_no)
            else:
                current.dissolve = 1.0 - _floats(args, 1, line_no)[0]
        elif keyword == "map_Kd":
            current.diffuse_texname = _texture_name(args)
        elif keyword == "map_Ks":
            current.specular_texname = _texture_name(args)
        elif keyword in ("map_bump", "map_Bump", "bump"):
            current.bump_texname = _texture_name(args)
    return materials


def _resolve(token: str, count: int, line_no: int, kind: str) -> int:
    try:
        index = int(token)
    except ValueError as exc:
        raise ValueError(f"line {line_no}: invalid {kind} index {token!r}") from exc
    if index == 0:
        raise ValueError(f"line {line_no}: {kind} index 0 is invalid")
    resolved = index - 1 if index > 0 else count + index
    if not 0 <= resolved < count:
        raise ValueError(f"line {line_no}: {kind} index {index} is out of range")
    return resolved


def _parse_corner(token: str, data: ObjData, line_no: int) -> Corner:
    parts = token.split("/")
    if len(parts) > 3 or not parts[0]:
        raise ValueError(f"line {line_no}: invalid face corner {token!r}")
    vertex = _resolve(parts[0], len(data.vertices), line_no, "vertex")
    texcoord = -1
    normal = -1
    if len(parts) > 1 and parts[1]:
        texcoord = _resolve(parts[1], len(data.texcoords), line_no, "texcoord")
    if len(parts) > 2 and parts[2]:
        normal = _resolve(parts[2], len(data.normals), line_no, "normal")
    return vertex, texcoord, normal


def parse_obj(text: str, directory: Optional[PathLike] = None) -> ObjData:
    """Parse an OBJ document, triangulating polygons as fans.

    Material libraries are read from ``directory``; without one, ``mtllib``
    statements are ignored.
    """
    data = ObjData()
    material_map: Dict[str, int] = {}
    corners: List[Corner] = []
    face_materials: List[int] = []
    name = ""
    material = -1

    def flush() -> None:
        if corners:
            data.shapes.append(list(corners))
            data.material_ids.append(list(face_materials))
            data.shape_names.append(name)
        corners.clear()
        face_materials.clear()

    for line_no, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        keyword, *args = line.split()
        if keyword == "v":
            data.vertices.append(_floats(args, 3, line_no))
        elif keyword == "vn":
            data.normals.append(_floats(args, 3, line_no))
        elif keyword == "vt":
            data.texcoords.append(_floats(args, 2, line_no))
        elif keyword == "f":
            polygon = [_parse_corner(token, data, line_no) for token in args]
            if len(polygon) < 3:
                logger.warning("line %d: degenerate face skipped", line_no)
                continue
            for second, third in zip(polygon[1:], polygon[2:]):
                corners.extend((polygon[0], second, third))
                face_materials.append(material)
        elif keyword in ("g", "o"):
            flush()
            name = " ".join(args)
        elif keyword == "usemtl":
            wanted = " ".join(args)
            if wanted in material_map:
                material = material_map[wanted]
            else:
                logger.warning("line %d: material %r not found", line_no, wanted)
                material = -1
        elif keyword == "mtllib" and directory is not None:
            for filename in args:
                mtl_path = Path(directory) / filename
                if not mtl_path.is_file():
                    logger.warning("material library %r not found", filename)
                    continue
                for parsed in parse_mtl(mtl_path.read_text()):
                    material_map[parsed.name] = len(data.materials)
                    data.materials.append(parsed)
                break
    flush()
    return data


class _MeshBuilder:
    def __init__(self) -> None:
        self.positions: List[Tuple[float, ...]] = []
        self.normals: List[Tuple[float, ...]] = []
        self.texcoords: List[Tuple[float, float]] = []
        self.indices: List[int] = []

    def add(self, data: ObjData, corners: Iterable[Corner], simplified: bool) -> None:
        seen: Dict[Corner, int] = {}
        for vertex, texcoord, normal in corners:
            key = (vertex, -1, -1) if simplified else (vertex, normal, texcoord)
            index = seen.get(key)
            if index is None:
                index = seen[key] = len(self.positions)
                self.positions.append(data.vertices[vertex])
                if normal >= 0:
                    self.normals.append(data.normals[normal])
                if texcoord >= 0:
                    u, v = data.texcoords[texcoord]
                    self.texcoords.append((u, 1.0 - v))
            self.indices.append(index)

    def mesh(self) -> SurfaceMesh:
        return SurfaceMesh(
            positions=self.positions,
            normals=self.normals,
            texcoords=self.texcoords,
            indices=self.indices,
        )


def build_mesh(data: ObjData, indices: Iterable[Corner], simplified: bool = False) -> SurfaceMesh:
    """Build a mesh from OBJ corners, sharing vertices whose indices agree.

    With ``simplified`` only the position index decides whether two corners
    share a vertex. Texture v coordinates are flipped.
    """
    builder = _MeshBuilder()
    builder.add(data, indices, simplified)
    return builder.mesh()


def load_surface_mesh(path: PathLike, simplified: bool = False) -> SurfaceMesh:
    """Load a mesh file; each OBJ shape shares vertices only within itself."""
    path = Path(path)
    if path.suffix != ".obj":
        raise ValueError(f"{path.name}: undetermined file format.")
    if not path.is_file():
        raise FileNotFoundError(f"{path.name}: not found.")
    data = parse_obj(path.read_text())
    logger.debug("load_surface_mesh(%r)", path.name)
    builder = _MeshBuilder()
    for shape in data.shapes:
        builder.add(data, shape, simplified)
    return builder.mesh()