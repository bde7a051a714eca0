"""Scene description: lights, materials, models, cameras and skyboxes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple

import numpy as np

from vcxengine.camera import Camera
from vcxengine.formats import R8, RGB8, RGBA8
from vcxengine.mesh import FLOAT_MAX, FLOAT_MIN, SurfaceMesh
from vcxengine.textures import Texture


def _vec(*values: float):
    return field(default_factory=lambda: np.array(values, dtype=float))


class LightType(Enum):
    POINT = "Point"
    SPOT = "Spot"
    DIRECTIONAL = "Directional"
    AREA = "Area"


class BlendMode(Enum):
    OPAQUE = "Opaque"
    TRANSPARENT = "Transparent"


class ReflectionType(Enum):
    EMPIRICAL = "Empirical"
    PHYSICAL_METALLIC = "PhysicalMetallic"
    PHYSICAL_SPECULAR = "PhysicalSpecular"


_SKYBOX_POSITIONS = np.array(
    [
        [-1, 1, -1], [-1, -1, -1], [1, -1, -1],
        [1, -1, -1], [1, 1, -1], [-1, 1, -1],
        [-1, -1, 1], [-1, -1, -1], [-1, 1, -1],
        [-1, 1, -1], [-1, 1, 1], [-1, -1, 1],
        [1, -1, -1], [1, -1, 1], [1, 1, 1],
        [1, 1, 1], [1, 1, -1], [1, -1, -1],
        [-1, -1, 1], [-1, 1, 1], [1, 1, 1],
        [1, 1, 1], [1, -1, 1], [-1, -1, 1],
        [-1, 1, -1], [1, 1, -1], [1, 1, 1],
        [1, 1, 1], [-1, 1, 1], [-1, 1, -1],
        [-1, -1, -1], [-1, -1, 1], [1, -1, -1],
        [1, -1, -1], [-1, -1, 1], [1, -1, 1],
    ],
    dtype=float,
)
_SKYBOX_POSITIONS.setflags(write=False)


@dataclass(eq=False)
class Skybox:
    """Six RGB faces of a cube map, drawn with the unit cube in POSITION_DATA."""

    POSITION_DATA = _SKYBOX_POSITIONS

    images: List[Texture] = field(default_factory=lambda: [Texture(RGB8, 0, 0) for _ in range(6)])


@dataclass(eq=False)
class Light:
    type: LightType = LightType.POINT
    intensity: np.ndarray = _vec(1.0, 1.0, 1.0)
    direction: np.ndarray = _vec(1.0, 0.0, 0.0)
    position: np.ndarray = _vec(0.0, 0.0, 0.0)
    cut_off: float = 0.0
    outer_cut_off: float = 0.0


@dataclass(eq=False)
class Material:
    """Surface textures.

    ``meta_spec`` holds specular RGB and shininess for empirical shading,
    metallic and smoothness for the metallic workflow, or specular RGB and
    glossiness for the specular workflow.
    """

    blend: BlendMode = BlendMode.OPAQUE
    albedo: Texture = field(default_factory=lambda: Texture(RGBA8, 1, 1))
    meta_spec: Texture = field(default_factory=lambda: Texture(RGBA8, 1, 1))
    height: Texture = field(default_factory=lambda: Texture(R8, 1, 1))


@dataclass(eq=False)
class Model:
    mesh: SurfaceMesh = field(default_factory=SurfaceMesh)
    material_index: int = 0


@dataclass(eq=False)
class Scene:
    reflection: ReflectionType = ReflectionType.EMPIRICAL
    ambient_intensity: np.ndarray = _vec(0.1, 0.1, 0.1)
    skyboxes: List[Skybox] = field(default_factory=list)
    cameras: List[Camera] = field(default_factory=lambda: [Camera()])
    lights: List[Light] = field(default_factory=list)
    materials: List[Material] = field(default_factory=list)
    models: List[Model] = field(default_factory=list)

    def bounding_box(self) -> Tuple[np.ndarray, np.ndarray]:
        """(min, max) corners enclosing every model's mesh."""
        min_aabb = np.full(3, FLOAT_MAX)
        max_aabb = np.full(3, FLOAT_MIN)
        for model in self.models:
            lo, hi = model.mesh.bounding_box()
            max_aabb = np.maximum(max_aabb, hi)
            min_aabb = np.minimum(min_aabb, lo)
        return min_aabb, max_aabb