from __future__ import annotations

from typing import Optional


class ChunkRendererError(Exception):
    """Base class for every failure reported by the chunk renderer."""


class ChunkSizeMismatchError(ChunkRendererError):
    """Serialized chunk is not exactly CHUNK_DATA_SIZE bytes (a data-source or logic defect)."""

    def __init__(self, actual: int, expected: int):
        super().__init__(
            f"internal serialization size mismatch: {actual} bytes, expected {expected}"
        )
        self.actual = actual
        self.expected = expected


class TransportUnavailableError(ChunkRendererError):
    """Connection to the receiver could not be set up; no bytes were sent."""


class UploadFailedError(ChunkRendererError):
    """Streaming started but the upload did not complete."""

    def __init__(self, message: str, bytes_sent: int = 0):
        super().__init__(message)
        self.bytes_sent = bytes_sent


class UploadRejectedError(UploadFailedError):
    """Receiver answered with a non-success HTTP status."""

    def __init__(self, status_code: int, body: Optional[str] = None, bytes_sent: int = 0):
        detail = f": {body}" if body else ""
        super().__init__(f"receiver rejected chunk with HTTP {status_code}{detail}", bytes_sent)
        self.status_code = status_code
        self.body = body
