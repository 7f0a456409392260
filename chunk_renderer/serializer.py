from __future__ import annotations

"""
Chunk wire format.

Body layout (no header, length prefix or checksum):

    for x in 0..16:            # outer
      for z in 0..16:          # middle
        for y in 0..256:       # inner
          R, G, B              # one unsigned byte each

so voxel (x, y, z) starts at ((x * 16 + z) * 256 + y) * 3. Receivers decode
with the same formula; changing the loop order breaks them.
"""

import numpy as np

from common.types import CHUNK_DATA_SIZE, CHUNK_HEIGHT, CHUNK_SIZE, ArrayChunk, ChunkData
from chunk_renderer.errors import ChunkSizeMismatchError


def chunk_offset(x: int, y: int, z: int) -> int:
    """Byte offset of the red channel of voxel (x, y, z)."""
    return ((x * CHUNK_SIZE + z) * CHUNK_HEIGHT + y) * 3


def serialize_chunk(chunk: ChunkData) -> bytes:
    """
    Walk the chunk (X outer, Z middle, Y inner) and return its 196608-byte body.

    Channel values are narrowed to 8 bits (value & 0xFF). Any exception raised by
    `chunk.color_at` propagates; no partial buffer is ever returned.

    Raises:
        ChunkSizeMismatchError: the walk did not produce exactly CHUNK_DATA_SIZE bytes.
    """
    # Subclasses overriding color_at go through the walk
    if getattr(type(chunk), "color_at", None) is ArrayChunk.color_at:
        return _serialize_array(chunk.colors)

    data = bytearray(CHUNK_DATA_SIZE)
    i = 0
    for x in range(CHUNK_SIZE):
        for z in range(CHUNK_SIZE):
            for y in range(CHUNK_HEIGHT):
                r, g, b = chunk.color_at(x, y, z)
                data[i] = r & 0xFF
                data[i + 1] = g & 0xFF
                data[i + 2] = b & 0xFF
                i += 3

    if i != CHUNK_DATA_SIZE:
        raise ChunkSizeMismatchError(i, CHUNK_DATA_SIZE)
    return bytes(data)


def _serialize_array(colors: np.ndarray) -> bytes:
    # [x, z, y, channel] in C order is already the wire layout
    out = np.ascontiguousarray(colors, dtype=np.uint8).tobytes()
    if len(out) != CHUNK_DATA_SIZE:
        raise ChunkSizeMismatchError(len(out), CHUNK_DATA_SIZE)
    return out


def deserialize_chunk(data: bytes, chunk_x: int, chunk_z: int) -> ArrayChunk:
    """
    Rebuild a chunk from a wire body, the way a receiver reads it.

    Raises:
        ChunkSizeMismatchError: `data` is not exactly CHUNK_DATA_SIZE bytes.
    """
    if len(data) != CHUNK_DATA_SIZE:
        raise ChunkSizeMismatchError(len(data), CHUNK_DATA_SIZE)
    colors = np.frombuffer(bytes(data), dtype=np.uint8).reshape(
        (CHUNK_SIZE, CHUNK_SIZE, CHUNK_HEIGHT, 3)
    )
    return ArrayChunk(chunk_x=chunk_x, chunk_z=chunk_z, colors=colors.copy())
