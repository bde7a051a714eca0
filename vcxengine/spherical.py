"""Spherical coordinates with the polar axis along +y."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

EPSILON = float(np.finfo(np.float32).eps)


@dataclass
class Spherical:
    """Radius, polar angle ``phi`` from +y and azimuth ``theta`` from +z toward +x."""

    radius: float = 1.0
    phi: float = 0.0
    theta: float = 0.0

    @classmethod
    def from_vector(cls, v: Sequence[float]) -> "Spherical":
        x, y, z = (float(c) for c in v)
        radius = math.sqrt(x * x + y * y + z * z)
        if radius == 0.0:
            return cls(0.0, 0.0, 0.0)
        phi = math.acos(min(max(y / radius, -1.0), 1.0))
        theta = math.atan2(x, z)
        return cls(radius, phi, theta)

    def make_safe(self) -> None:
        """Keep ``phi`` strictly away from the poles."""
        self.phi = max(EPSILON, min(math.pi - EPSILON, self.phi))

    def to_vector(self) -> np.ndarray:
        sin_phi_radius = math.sin(self.phi) * self.radius
        return np.array(
            [
                sin_phi_radius * math.sin(self.theta),
                math.cos(self.phi) * self.radius,
                sin_phi_radius * math.cos(self.theta),
            ]
        )