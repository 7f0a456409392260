from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence, Tuple, runtime_checkable
import numpy as np


CHUNK_SIZE = 16
CHUNK_HEIGHT = 256
CHUNK_DATA_SIZE = 3 * CHUNK_SIZE * CHUNK_SIZE * CHUNK_HEIGHT  # 196608

Color = Tuple[int, int, int]


@runtime_checkable
class ChunkData(Protocol):
    """
    Read-only voxel source for one chunk.

    Attributes:
        chunk_x, chunk_z: global chunk coordinates (may be negative).
        color_at(x, y, z): (r, g, b) for x,z in [0,16), y in [0,256).
    """

    @property
    def chunk_x(self) -> int: ...

    @property
    def chunk_z(self) -> int: ...

    def color_at(self, x: int, y: int, z: int) -> Sequence[int]: ...


@dataclass(slots=True)
class ArrayChunk:
    """
    Chunk backed by a numpy array.

    Attributes:
        chunk_x, chunk_z: global chunk coordinates.
        colors: np.ndarray of shape (16, 16, 256, 3), dtype uint8, indexed
            [x, z, y, channel]. This is the wire layout, so serialization is a
            straight byte copy.
    """
    chunk_x: int
    chunk_z: int
    colors: np.ndarray

    def __post_init__(self) -> None:
        if not isinstance(self.colors, np.ndarray):
            raise TypeError("colors must be a numpy ndarray")
        expected = (CHUNK_SIZE, CHUNK_SIZE, CHUNK_HEIGHT, 3)
        if self.colors.shape != expected:
            raise ValueError(f"colors must have shape {expected}, got {self.colors.shape}")
        if self.colors.dtype != np.uint8:
            # Same unsigned-byte narrowing as the serializer applies per channel
            self.colors = (self.colors.astype(np.int64) & 0xFF).astype(np.uint8)
        self.chunk_x = int(self.chunk_x)
        self.chunk_z = int(self.chunk_z)

    @classmethod
    def filled(cls, chunk_x: int, chunk_z: int, color: Sequence[int]) -> "ArrayChunk":
        """Chunk with every voxel set to `color`."""
        if len(color) != 3:
            raise ValueError("color must be (r, g, b)")
        rgb = np.array([int(c) & 0xFF for c in color], dtype=np.uint8)
        colors = np.broadcast_to(rgb, (CHUNK_SIZE, CHUNK_SIZE, CHUNK_HEIGHT, 3)).copy()
        return cls(chunk_x=chunk_x, chunk_z=chunk_z, colors=colors)

    def color_at(self, x: int, y: int, z: int) -> Color:
        r, g, b = self.colors[x, z, y]
        return (int(r), int(g), int(b))
