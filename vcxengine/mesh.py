"""Indexed triangle meshes and the vertex attributes derived from them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence, Tuple

import numpy as np

FLOAT_MAX = float(np.finfo(np.float32).max)
FLOAT_MIN = float(np.finfo(np.float32).tiny)


def _rows(data, width: int) -> np.ndarray:
    return np.asarray(data, dtype=float).reshape(-1, width)


def _normalize_rows(vectors: np.ndarray) -> np.ndarray:
    # A zero-length vector normalises to NaN, as in the vector library.
    with np.errstate(divide="ignore", invalid="ignore"):
        return vectors / np.linalg.norm(vectors, axis=1, keepdims=True)


@dataclass(eq=False)
class SurfaceMesh:
    """Per-vertex positions, normals and texture coordinates plus triangle indices."""

    positions: np.ndarray = field(default_factory=lambda: np.zeros((0, 3)))
    normals: np.ndarray = field(default_factory=lambda: np.zeros((0, 3)))
    texcoords: np.ndarray = field(default_factory=lambda: np.zeros((0, 2)))
    indices: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.uint32))

    def __post_init__(self) -> None:
        self.positions = _rows(self.positions, 3)
        self.normals = _rows(self.normals, 3)
        self.texcoords = _rows(self.texcoords, 2)
        self.indices = np.asarray(self.indices, dtype=np.uint32).reshape(-1)

    @property
    def vertex_count(self) -> int:
        return len(self.positions)

    @property
    def is_normal_available(self) -> bool:
        return len(self.normals) == len(self.positions)

    @property
    def is_texcoord_available(self) -> bool:
        return len(self.texcoords) == len(self.positions)

    def _faces(self) -> np.ndarray:
        whole = len(self.indices) // 3 * 3
        return self.indices[:whole].reshape(-1, 3).astype(np.intp)

    def compute_normals(self) -> np.ndarray:
        """Area-weighted vertex normals accumulated from every triangle."""
        normals = np.zeros_like(self.positions)
        faces = self._faces()
        if len(faces):
            p = self.positions[faces]
            face_normals = np.cross(p[:, 1] - p[:, 0], p[:, 2] - p[:, 0])
            for corner in range(3):
                np.add.at(normals, faces[:, corner], face_normals)
        return _normalize_rows(normals)

    def empty_texcoords(self) -> np.ndarray:
        """Texture coordinates of (0.5, 0.5) for every vertex."""
        return np.full((len(self.positions), 2), 0.5)

    def compute_tangents(self) -> np.ndarray:
        """Vertex tangents along the u direction; all zero without texcoords."""
        tangents = np.zeros_like(self.positions)
        if not self.is_texcoord_available:
            return tangents
        faces = self._faces()
        if len(faces):
            p = self.positions[faces]
            uv = self.texcoords[faces]
            edge1 = p[:, 1] - p[:, 0]
            edge2 = p[:, 2] - p[:, 0]
            duv1 = uv[:, 1] - uv[:, 0]
            duv2 = uv[:, 2] - uv[:, 0]
            with np.errstate(divide="ignore", invalid="ignore"):
                f = 1.0 / (duv1[:, 0] * duv2[:, 1] - duv2[:, 0] * duv1[:, 1])
                face_tangents = f[:, None] * (duv2[:, 1, None] * edge1 - duv1[:, 1, None] * edge2)
            for corner in range(3):
                np.add.at(tangents, faces[:, corner], face_tangents)
        return _normalize_rows(tangents)

    def bounding_box(self) -> Tuple[np.ndarray, np.ndarray]:
        """(min, max) corners; the max corner starts at the smallest positive float."""
        min_aabb = np.full(3, FLOAT_MAX)
        max_aabb = np.full(3, FLOAT_MIN)
        if len(self.positions):
            min_aabb = np.minimum(min_aabb, self.positions.min(axis=0))
            max_aabb = np.maximum(max_aabb, self.positions.max(axis=0))
        return min_aabb, max_aabb

    def normalize_positions(
        self,
        min_aabb: Sequence[float] = (-0.5, -0.5, -0.5),
        max_aabb: Sequence[float] = (0.5, 0.5, 0.5),
    ) -> None:
        """Uniformly scale and move the positions to fit inside the given box."""
        min_aabb = np.asarray(min_aabb, dtype=float)
        max_aabb = np.asarray(max_aabb, dtype=float)
        curr_min, curr_max = self.bounding_box()
        curr_center = (curr_max + curr_min) * 0.5
        target_center = (max_aabb + min_aabb) * 0.5
        curr_scale = curr_max - curr_min
        target_scale = max_aabb - min_aabb

        relative_scale = np.ones(3)
        if len(self.positions) > 1 and np.all(target_scale > 0):
            with np.errstate(divide="ignore", invalid="ignore"):
                relative_scale = target_scale / curr_scale
        uniform_scale = float(np.min(relative_scale))
        self.positions = (self.positions - curr_center) * uniform_scale + target_center

    def swap(self, other: "SurfaceMesh") -> None:
        """Exchange all vertex and index data with ``other``."""
        self.positions, other.positions = other.positions, self.positions
        self.normals, other.normals = other.normals, self.normals
        self.texcoords, other.texcoords = other.texcoords, self.texcoords
        self.indices, other.indices = other.indices, self.indices