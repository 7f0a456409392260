from __future__ import annotations

"""
Streaming chunk upload over HTTP.

Usage:
    uploader = ChunkUploader(UploadTarget("localhost", 8081))
    uploader.upload(3, -5, serialize_chunk(chunk))
    # -> POST http://localhost:8081/api/set-chunk?x=3&z=-5
    #    Content-Type: application/octet-stream
    #    Transfer-Encoding: chunked

The body is handed to `requests` as a generator, which makes it send chunked
transfer encoding with no Content-Length; each block becomes one frame.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterator, Optional
from urllib.parse import urlencode

import requests

from common.types import CHUNK_DATA_SIZE
from chunk_renderer.errors import (
    ChunkRendererError,
    ChunkSizeMismatchError,
    TransportUnavailableError,
    UploadFailedError,
    UploadRejectedError,
)


log = logging.getLogger(__name__)

DEFAULT_BLOCK_SIZE = 2048
SET_CHUNK_PATH = "/api/set-chunk"


@dataclass(frozen=True)
class UploadTarget:
    """Receiver address; the chunk coordinates go in the query string."""
    host: str
    port: int = 80
    path: str = SET_CHUNK_PATH
    scheme: str = "http"

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host}:{int(self.port)}"

    def url_for(self, chunk_x: int, chunk_z: int) -> str:
        """Fully-qualified upload URL, e.g. http://host:80/api/set-chunk?x=3&z=-5"""
        query = urlencode({"x": int(chunk_x), "z": int(chunk_z)})
        return f"{self.base_url}{self.path}?{query}"


class _BlockStream:
    """Yields fixed-size blocks of a buffer in order and counts what was handed out."""

    def __init__(self, data: bytes, block_size: int):
        self._view = memoryview(data)
        self.block_size = block_size
        self.started = False
        self.bytes_sent = 0

    def blocks(self) -> Iterator[bytes]:
        self.started = True
        for start in range(0, len(self._view), self.block_size):
            block = self._view[start:start + self.block_size].tobytes()
            yield block
            self.bytes_sent += len(block)


class ChunkUploader:
    def __init__(
        self,
        target: UploadTarget,
        *,
        block_size: int = DEFAULT_BLOCK_SIZE,
        timeout: Optional[float] = None,
        check_status: bool = True,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ):
        """
        Params:
            target: receiver address
            block_size: bytes per streamed block (one chunked-encoding frame each)
            timeout: requests timeout in seconds; None leaves it to the transport
            check_status: treat HTTP status >= 400 as a failed upload
            session_factory: builds one requests.Session per upload
        """
        if int(block_size) <= 0:
            raise ValueError("block_size must be > 0")
        self.target = target
        self.block_size = int(block_size)
        self.timeout = timeout
        self.check_status = bool(check_status)
        self._session_factory = session_factory

    def upload(self, chunk_x: int, chunk_z: int, data: bytes) -> None:
        """
        Stream one serialized chunk to the receiver.

        The session opened for this call is closed exactly once, whatever happens.

        Raises:
            ChunkSizeMismatchError: `data` is not CHUNK_DATA_SIZE bytes (nothing is sent).
            TransportUnavailableError: the connection could not be set up.
            UploadFailedError: the connection broke while streaming.
            UploadRejectedError: the receiver answered with HTTP >= 400.
        """
        if len(data) != CHUNK_DATA_SIZE:
            raise ChunkSizeMismatchError(len(data), CHUNK_DATA_SIZE)

        url = self.target.url_for(chunk_x, chunk_z)
        stream = _BlockStream(data, self.block_size)
        ctx = {"x": int(chunk_x), "z": int(chunk_z), "url": url}
        log.debug("Uploading chunk", extra={"extra": ctx})

        t0 = time.perf_counter()
        session = self._session_factory()
        try:
            with session.post(
                url,
                data=stream.blocks(),
                headers={"Content-Type": "application/octet-stream"},
                timeout=self.timeout,
            ) as resp:
                if self.check_status and resp.status_code >= 400:
                    raise UploadRejectedError(resp.status_code, (resp.text or "")[:200], stream.bytes_sent)
                status = resp.status_code
        except ChunkRendererError:
            raise
        except (requests.RequestException, OSError) as e:
            if not stream.started:
                raise TransportUnavailableError(f"cannot connect to {self.target.base_url}: {e}") from e
            raise UploadFailedError(
                f"upload to {url} failed after {stream.bytes_sent} bytes: {e}", stream.bytes_sent
            ) from e
        finally:
            session.close()

        ctx.update(
            {
                "status": status,
                "bytes": stream.bytes_sent,
                "ms": round((time.perf_counter() - t0) * 1e3, 1),
            }
        )
        log.info("Chunk uploaded", extra={"extra": ctx})
