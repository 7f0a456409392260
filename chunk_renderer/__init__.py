"""
Chunk Renderer client

- serializer.py: 16x16x256 RGB chunk -> 196608-byte wire body (and back)
- uploader.py: chunked-encoding POST of one body to /api/set-chunk?x&z
- renderer.py: ChunkRenderer.send_chunk_data(chunk) -> Future[None]
- service.py: CLI to send a solid-color or .npy chunk

Usage:
    from chunk_renderer import ChunkRenderer
    from common.types import ArrayChunk

    with ChunkRenderer("localhost", 8081) as renderer:
        renderer.send_chunk_data(ArrayChunk.filled(3, -5, (255, 0, 0))).result()
"""

from chunk_renderer.errors import (
    ChunkRendererError,
    ChunkSizeMismatchError,
    TransportUnavailableError,
    UploadFailedError,
    UploadRejectedError,
)
from chunk_renderer.renderer import ChunkRenderer
from chunk_renderer.serializer import chunk_offset, deserialize_chunk, serialize_chunk
from chunk_renderer.uploader import ChunkUploader, UploadTarget

__all__ = [
    "ChunkRenderer",
    "ChunkUploader",
    "UploadTarget",
    "serialize_chunk",
    "deserialize_chunk",
    "chunk_offset",
    "ChunkRendererError",
    "ChunkSizeMismatchError",
    "TransportUnavailableError",
    "UploadFailedError",
    "UploadRejectedError",
]
