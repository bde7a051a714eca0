"""Perspective cameras and the matrices that go with them."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np


def perspective(fovy: float, aspect: float, znear: float, zfar: float) -> np.ndarray:
    """Right-handed projection to clip space with depth in [-1, 1]; ``fovy`` in radians."""
    tan_half = math.tan(fovy / 2.0)
    m = np.zeros((4, 4))
    m[0, 0] = 1.0 / (aspect * tan_half)
    m[1, 1] = 1.0 / tan_half
    m[2, 2] = -(zfar + znear) / (zfar - znear)
    m[2, 3] = -(2.0 * zfar * znear) / (zfar - znear)
    m[3, 2] = -1.0
    return m


def _normalize(v: np.ndarray) -> np.ndarray:
    return v / np.linalg.norm(v)


def look_at(eye: Sequence[float], target: Sequence[float], up: Sequence[float]) -> np.ndarray:
    """Right-handed view matrix looking from ``eye`` toward ``target``."""
    eye = np.asarray(eye, dtype=float)
    f = _normalize(np.asarray(target, dtype=float) - eye)
    s = _normalize(np.cross(f, np.asarray(up, dtype=float)))
    u = np.cross(s, f)
    m = np.identity(4)
    m[0, :3] = s
    m[1, :3] = u
    m[2, :3] = -f
    m[0, 3] = -np.dot(s, eye)
    m[1, 3] = -np.dot(u, eye)
    m[2, 3] = np.dot(f, eye)
    return m


def _vec(*values: float):
    return field(default_factory=lambda: np.array(values, dtype=float))


@dataclass(eq=False)
class Camera:
    """A perspective camera; ``fovy`` is in degrees."""

    fovy: float = 60.0
    znear: float = 0.01
    zfar: float = 100.0
    eye: np.ndarray = _vec(0.0, 0.0, 1.0)
    target: np.ndarray = _vec(0.0, 0.0, 0.0)
    up: np.ndarray = _vec(0.0, 1.0, 0.0)

    def projection_matrix(self, aspect: float) -> np.ndarray:
        return perspective(math.radians(self.fovy), aspect, self.znear, self.zfar)

    def view_matrix(self) -> np.ndarray:
        return look_at(self.eye, self.target, self.up)

    def transformation_matrix(self, aspect: float) -> np.ndarray:
        return self.projection_matrix(aspect) @ self.view_matrix()


class CameraManager(ABC):
    """Something that moves a camera each frame."""

    @abstractmethod
    def update(self, camera: Camera) -> None:
        """Adjust ``camera`` in place."""