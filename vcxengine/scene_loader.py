"""Loading scene descriptions written in YAML, together with their assets."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence, Tuple, Union

import numpy as np
import yaml

from vcxengine.assets import (
    ObjData,
    build_mesh,
    load_image_gray,
    load_image_rgb,
    load_image_rgba,
    load_surface_mesh,
    parse_obj,
)
from vcxengine.camera import Camera
from vcxengine.scene import (
    BlendMode,
    Light,
    LightType,
    Material,
    Model,
    ReflectionType,
    Scene,
    Skybox,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _string(value: Any, what: str) -> str:
    if value is None or isinstance(value, (list, tuple, dict)):
        raise ValueError(f"{what}: expected a scalar, got {value!r}")
    return str(value)


def _float(value: Any, what: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValueError(f"{what}: expected a number, got {value!r}")
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"{what}: expected a number, got {value!r}") from exc


def _vector(value: Any, size: int, what: str) -> np.ndarray:
    """A vector of ``size`` floats; components not given default to 1."""
    if not isinstance(value, (list, tuple)) or len(value) > size:
        raise ValueError(f"{what}: expected a list of at most {size} numbers")
    result = np.ones(size)
    for i, component in enumerate(value):
        result[i] = _float(component, what)
    return result


def _matrix3(value: Any, what: str) -> np.ndarray:
    """A 3x3 matrix given as rows; entries not given come from the identity."""
    if not isinstance(value, (list, tuple)) or len(value) > 3:
        raise ValueError(f"{what}: expected a list of at most 3 rows")
    if any(not isinstance(row, (list, tuple)) or len(row) > 3 for row in value):
        raise ValueError(f"{what}: each row must be a list of at most 3 numbers")
    result = np.identity(3)
    for i, row in enumerate(value):
        for j, entry in enumerate(row):
            result[i, j] = _float(entry, what)
    return result


def _enum(enum_type: Any, value: Any, what: str) -> Any:
    text = _string(value, what)
    try:
        return enum_type(text)
    except ValueError as exc:
        raise ValueError(f"{what}: unknown value {text!r}") from exc


def _mapping(node: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(node, dict):
        raise ValueError(f"{what}: expected a mapping")
    return node


def _sequence(root: Mapping[str, Any], key: str) -> List[Any]:
    if key not in root:
        return []
    items = root[key]
    if items is None:
        return []
    if not isinstance(items, list):
        raise ValueError(f"{key}: expected a list")
    return items


def _normalize_rows(vectors: np.ndarray) -> np.ndarray:
    with np.errstate(divide="ignore", invalid="ignore"):
        return vectors / np.linalg.norm(vectors, axis=1, keepdims=True)


def _complex_models_from_obj(data: ObjData, directory: Path) -> Tuple[List[Material], List[Model]]:
    per_material: List[List[Tuple[int, int, int]]] = [[] for _ in data.materials]
    for corners, material_ids in zip(data.shapes, data.material_ids):
        for face, material in enumerate(material_ids):
            if material >= 0:
                per_material[material].extend(corners[face * 3 : face * 3 + 3])

    materials: List[Material] = []
    models: List[Model] = []
    for source, corners in zip(data.materials, per_material):
        if not corners:
            continue
        material = Material(blend=BlendMode.OPAQUE)
        material.albedo.fill((*source.diffuse, source.dissolve))
        if source.diffuse_texname:
            material.albedo = load_image_rgba(directory / source.diffuse_texname)
        material.meta_spec.fill((*source.specular, source.shininess / 256.0))
        if source.specular_texname:
            material.meta_spec = load_image_rgba(directory / source.specular_texname)
        material.height.fill(0.0)
        if source.bump_texname:
            material.height = load_image_gray(directory / source.bump_texname)

        models.append(Model(mesh=build_mesh(data, corners), material_index=len(materials)))
        materials.append(material)
    return materials, models


def load_complex_models(path: PathLike) -> Tuple[List[Material], List[Model]]:
    """Load a model file with its own materials, one model per used material.

    Each model's ``material_index`` refers to the returned material list.
    """
    path = Path(path)
    if path.suffix != ".obj":
        raise ValueError(f"{path.name}: undetermined file format.")
    if not path.is_file():
        raise FileNotFoundError(f"{path.name}: not found.")
    data = parse_obj(path.read_text(), path.parent)
    logger.debug("load_complex_models(%r)", path.name)
    return _complex_models_from_obj(data, path.parent)


def _parse_camera(node: Mapping[str, Any]) -> Camera:
    camera = Camera()
    if "Fovy" in node:
        camera.fovy = _float(node["Fovy"], "Fovy")
    if "ZNear" in node:
        camera.znear = _float(node["ZNear"], "ZNear")
    if "ZFar" in node:
        camera.zfar = _float(node["ZFar"], "ZFar")
    if "Eye" in node:
        camera.eye = _vector(node["Eye"], 3, "Eye")
    if "Target" in node:
        camera.target = _vector(node["Target"], 3, "Target")
    if "Up" in node:
        camera.up = _vector(node["Up"], 3, "Up")
    return camera


def _parse_light(node: Mapping[str, Any]) -> Light:
    light = Light()
    if "Type" in node:
        light.type = _enum(LightType, node["Type"], "Type")
    if "Intensity" in node:
        light.intensity = _vector(node["Intensity"], 3, "Intensity")
    if "Direction" in node:
        light.direction = _vector(node["Direction"], 3, "Direction")
    with np.errstate(divide="ignore", invalid="ignore"):
        light.direction = light.direction / np.linalg.norm(light.direction)
    if "Position" in node:
        light.position = _vector(node["Position"], 3, "Position")
    if "CutOff" in node:
        light.cut_off = _float(node["CutOff"], "CutOff")
    if "OuterCutOff" in node:
        light.outer_cut_off = _float(node["OuterCutOff"], "OuterCutOff")
    return light


def _parse_material(node: Mapping[str, Any], directory: Path) -> Material:
    material = Material()
    if "Blend" in node:
        material.blend = _enum(BlendMode, node["Blend"], "Blend")

    albedo = np.ones(4)
    for key in ("Diffuse", "Albedo", "BaseColor"):
        if key in node:
            albedo = _vector(node[key], 4, key)
    material.albedo.fill(tuple(albedo))
    for key in ("DiffuseMap", "AlbedoMap", "BaseColorMap"):
        if key in node:
            material.albedo = load_image_rgba(directory / _string(node[key], key))

    meta_spec = np.zeros(4)
    for key in ("Specular", "Metallic"):
        if key in node:
            meta_spec = _vector(node[key], 4, key)
    for key in ("Shininess", "Glossiness", "Smoothness"):
        if key in node:
            meta_spec[3] = _float(node[key], key)
    meta_spec[3] /= 256.0
    material.meta_spec.fill(tuple(meta_spec))
    for key in ("SpecularMap", "MetallicMap"):
        if key in node:
            material.meta_spec = load_image_rgba(directory / _string(node[key], key))

    material.height.fill(0.0)
    if "HeightMap" in node:
        material.height = load_image_gray(directory / _string(node["HeightMap"], "HeightMap"))
    return material


def _parse_model(node: Mapping[str, Any], directory: Path, names: Dict[str, int]) -> Model:
    model = Model(mesh=load_surface_mesh(directory / _string(node["Mesh"], "Mesh")))
    if "Material" in node:
        model.material_index = names.get(_string(node["Material"], "Material"), 0)
    translation = np.zeros(3)
    rotation = np.identity(3)
    scale = np.ones(3)
    if "Translation" in node:
        translation = _vector(node["Translation"], 3, "Translation")
    if "Rotation" in node:
        rotation = _matrix3(node["Rotation"], "Rotation")
    if "Scale" in node:
        scale = _vector(node["Scale"], 3, "Scale")

    mesh = model.mesh
    # The rotated scale vector multiplies each position component-wise.
    mesh.positions = translation + (rotation @ scale) * mesh.positions
    if len(mesh.normals):
        mesh.normals = _normalize_rows((mesh.normals / scale) @ rotation.T)
    return model


def parse_scene(document: Any, directory: PathLike = ".") -> Scene:
    """Build a scene from a parsed YAML document; assets resolve against ``directory``."""
    directory = Path(directory)
    root = _mapping({} if document is None else document, "scene")

    scene = Scene()
    if "Reflection" in root:
        scene.reflection = _enum(ReflectionType, root["Reflection"], "Reflection")
    if "AmbientIntensity" in root:
        scene.ambient_intensity = _vector(root["AmbientIntensity"], 3, "AmbientIntensity")

    scene.skyboxes = []
    for node in _sequence(root, "Skyboxes"):
        if not isinstance(node, list) or len(node) < 6:
            raise ValueError("Skyboxes: each skybox needs 6 image names")
        images = [load_image_rgb(directory / _string(name, "Skyboxes")) for name in node[:6]]
        scene.skyboxes.append(Skybox(images=images))

    scene.cameras = [_parse_camera(_mapping(node, "Cameras")) for node in _sequence(root, "Cameras")]
    scene.lights = [_parse_light(_mapping(node, "Lights")) for node in _sequence(root, "Lights")]

    names: Dict[str, int] = {}
    scene.materials = []
    for node in _sequence(root, "Materials"):
        node = _mapping(node, "Materials")
        if "Name" in node:
            names[_string(node["Name"], "Name")] = len(scene.materials)
        scene.materials.append(_parse_material(node, directory))

    scene.models = []
    for node in _sequence(root, "Models"):
        node = _mapping(node, "Models")
        if "Mesh" not in node:
            continue
        scene.models.append(_parse_model(node, directory, names))

    for node in _sequence(root, "ComplexModels"):
        node = _mapping(node, "ComplexModels")
        if "Mesh" not in node:
            continue
        materials, models = load_complex_models(directory / _string(node["Mesh"], "Mesh"))
        offset = len(scene.materials)
        for model in models:
            model.material_index += offset
        scene.materials.extend(materials)
        scene.models.extend(models)

    return scene


def load_scene(path: PathLike) -> Scene:
    """Load a YAML scene file; relative asset paths resolve next to it."""
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"{path.name}: not found.")
    document = yaml.safe_load(path.read_text())
    logger.debug("load_scene(%r)", path.name)
    return parse_scene(document, path.parent)