"""Dense 1D/2D/3D textures that store encoded texels and read decoded ones."""

from __future__ import annotations

from typing import Any, Tuple, Union

import numpy as np

from vcxengine.formats import RGB8, RGBA8

_AXES = ("x", "y", "z")


class Texture:
    """A texture of 1 to 3 dimensions in a given texel format.

    Texels are addressed as ``tex[x]``, ``tex[x, y]`` or ``tex[x, y, z]``;
    reading decodes, writing encodes.
    """

    def __init__(self, format: Any, *args: Union[int, Tuple[int, ...]]) -> None:
        if len(args) == 1 and isinstance(args[0], (tuple, list)):
            sizes = tuple(args[0])
        else:
            sizes = args
        if not 1 <= len(sizes) <= 3:
            raise ValueError("a texture has 1, 2 or 3 dimensions")
        if any(int(s) < 0 for s in sizes):
            raise ValueError("texture sizes must be non-negative")
        self.format = format
        self._size = tuple(int(s) for s in sizes)
        shape = tuple(reversed(self._size))
        if format.channels > 1:
            shape += (format.channels,)
        self._data = np.zeros(shape, dtype=np.dtype(format.dtype))

    @classmethod
    def from_encoded(cls, format: Any, data: Any) -> "Texture":
        """Build a texture from encoded texels laid out as [z][y][x][channel]."""
        array = np.asarray(data)
        spatial = array.shape
        if format.channels > 1:
            if array.ndim == 0 or array.shape[-1] != format.channels:
                raise ValueError(f"{format.name} data must end in an axis of {format.channels} channels")
            spatial = array.shape[:-1]
        texture = cls(format, *reversed(spatial))
        texture._data[...] = array
        return texture

    @property
    def size(self) -> Tuple[int, ...]:
        """Extent along each axis, x first."""
        return self._size

    @property
    def encoded(self) -> np.ndarray:
        """A copy of the stored texels laid out as [z][y][x][channel]."""
        return self._data.copy()

    def _index(self, coords: Union[int, Tuple[int, ...]]) -> Tuple[int, ...]:
        if not isinstance(coords, tuple):
            coords = (coords,)
        if len(coords) != len(self._size):
            raise TypeError(f"expected {len(self._size)} coordinates, got {len(coords)}")
        for axis, coord, extent in zip(_AXES, coords, self._size):
            if not 0 <= int(coord) < extent:
                raise IndexError(f"{axis} is out of range.")
        return tuple(int(c) for c in reversed(coords))

    def __getitem__(self, coords: Union[int, Tuple[int, ...]]) -> Any:
        texel = self._data[self._index(coords)]
        if self.format.channels > 1:
            return self.format.decode(tuple(int(c) for c in texel))
        return self.format.decode(int(texel))

    def __setitem__(self, coords: Union[int, Tuple[int, ...]], value: Any) -> None:
        self._data[self._index(coords)] = self.format.encode(value)

    def fill(self, value: Any) -> None:
        """Set every texel to the same decoded value."""
        self._data[...] = self.format.encode(value)

    def to_bytes(self) -> bytes:
        """The raw texel storage, x varying fastest."""
        return self._data.tobytes()

    def cast(self, format: Any) -> "Texture":
        """Convert an RGBA8 texture to RGB8 by dropping alpha."""
        if self.format != RGBA8 or format != RGB8:
            raise TypeError(f"cannot cast {self.format.name} to {format.name}")
        return Texture.from_encoded(RGB8, self._data[..., :3])