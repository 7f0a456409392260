from __future__ import annotations

import logging
import time
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Dict, Optional

from common.types import ChunkData
from chunk_renderer.serializer import serialize_chunk
from chunk_renderer.uploader import ChunkUploader, UploadTarget


log = logging.getLogger(__name__)


class ChunkRenderer:
    """
    Sends chunks to a remote renderer in the background.

    Each `send_chunk_data` call is one task on a thread pool: serialize the whole
    chunk, then stream it to the receiver. The returned Future resolves to None on
    success or carries the failure (a ChunkRendererError, or whatever the chunk's
    `color_at` raised). Tasks share nothing; uploads to the same coordinates are
    not deduplicated or ordered.
    """

    def __init__(
        self,
        host: str,
        port: int = 80,
        *,
        max_workers: Optional[int] = None,
        uploader: Optional[ChunkUploader] = None,
        executor: Optional[Executor] = None,
    ):
        self.uploader = uploader or ChunkUploader(UploadTarget(host=host, port=port))
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="chunk-upload"
        )

    @classmethod
    def from_config(cls, cfg: Dict, executor: Optional[Executor] = None) -> "ChunkRenderer":
        server = cfg.get("server", {})
        upload = cfg.get("upload", {})
        target = UploadTarget(host=str(server.get("host", "localhost")), port=int(server.get("port", 80)))
        uploader = ChunkUploader(
            target,
            block_size=int(upload.get("block_size", 2048)),
            timeout=upload.get("timeout_s"),
            check_status=bool(upload.get("check_status", True)),
        )
        return cls(
            target.host,
            target.port,
            max_workers=cfg.get("executor", {}).get("max_workers"),
            uploader=uploader,
            executor=executor,
        )

    @property
    def target(self) -> UploadTarget:
        return self.uploader.target

    def send_chunk_data(self, chunk: ChunkData) -> "Future[None]":
        """Serialize and upload `chunk` in the background; coordinates are read now."""
        chunk_x = int(chunk.chunk_x)
        chunk_z = int(chunk.chunk_z)
        return self._executor.submit(self._send, chunk, chunk_x, chunk_z)

    def _send(self, chunk: ChunkData, chunk_x: int, chunk_z: int) -> None:
        t0 = time.perf_counter()
        try:
            data = serialize_chunk(chunk)
            self.uploader.upload(chunk_x, chunk_z, data)
        except Exception:
            log.exception(
                "Chunk task failed",
                extra={"extra": {"x": chunk_x, "z": chunk_z, "target": self.target.base_url}},
            )
            raise
        log.debug(
            "Chunk task done",
            extra={"extra": {"x": chunk_x, "z": chunk_z, "ms": round((time.perf_counter() - t0) * 1e3, 1)}},
        )

    def shutdown(self, wait: bool = True) -> None:
        """Stop the worker pool (only if this renderer created it)."""
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    def __enter__(self) -> "ChunkRenderer":
        return self

    def __exit__(self, *exc) -> None:
        self.shutdown(wait=True)
