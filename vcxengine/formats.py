"""Texel formats: how decoded channel values map to stored integers."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Tuple, Union

Decoded = Union[float, Tuple[float, ...]]
Encoded = Union[int, Tuple[int, ...]]


def _clamp01(x: float) -> float:
    return min(max(float(x), 0.0), 1.0)


def _round_half_away(x: float) -> int:
    # Inputs are already clamped to be non-negative.
    return int(math.floor(x + 0.5))


@dataclass(frozen=True)
class NormalizedFormat:
    """A format storing each channel as an unsigned integer scaled to [0, 1]."""

    name: str
    channels: int
    max_value: int
    dtype: str

    def decode(self, value: Union[int, Sequence[int]]) -> Decoded:
        """Turn a stored texel into floats in [0, 1]."""
        if self.channels == 1:
            return float(value) / self.max_value
        components = tuple(value)
        if len(components) != self.channels:
            raise ValueError(f"{self.name} expects {self.channels} channels, got {len(components)}")
        return tuple(float(c) / self.max_value for c in components)

    def encode(self, value: Union[float, Sequence[float]]) -> Encoded:
        """Clamp to [0, 1], scale and round to the stored integer form."""
        if self.channels == 1:
            return _round_half_away(_clamp01(value) * self.max_value)
        components = tuple(value)
        if len(components) != self.channels:
            raise ValueError(f"{self.name} expects {self.channels} channels, got {len(components)}")
        return tuple(_round_half_away(_clamp01(c) * self.max_value) for c in components)


@dataclass(frozen=True)
class DepthStencilFormat:
    """24-bit normalised depth packed with an 8-bit stencil value."""

    name: str = "D24S8"
    channels: int = 1
    dtype: str = "<u4"
    depth_max: int = 16777215

    def decode(self, value: int) -> Tuple[float, int]:
        """Split a packed texel into (depth, stencil)."""
        value = int(value)
        return (value & 0x00FFFFFF) / self.depth_max, (value >> 24) & 0xFF

    def encode(self, value: Tuple[float, int]) -> int:
        """Pack (depth, stencil); depth is truncated, not rounded."""
        depth, stencil = value
        return int(_clamp01(depth) * self.depth_max) | ((int(stencil) & 0xFF) << 24)


R8 = NormalizedFormat("R8", 1, 255, "<u1")
RGB8 = NormalizedFormat("RGB8", 3, 255, "<u1")
RGBA8 = NormalizedFormat("RGBA8", 4, 255, "<u1")
R16 = NormalizedFormat("R16", 1, 65535, "<u2")
D32 = NormalizedFormat("D32", 1, 4294967295, "<u4")
D24S8 = DepthStencilFormat()


def cast_rgba_to_rgb(value: Sequence[int]) -> Tuple[int, int, int]:
    """Drop the alpha channel of an encoded RGBA8 texel."""
    components = tuple(value)
    if len(components) != 4:
        raise ValueError("an RGBA texel has 4 channels")
    return components[0], components[1], components[2]