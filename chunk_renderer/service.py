from __future__ import annotations

"""
Send one chunk to a running receiver.

Examples:
  # Solid red chunk at (3, -5) to the local dev receiver
  python -m chunk_renderer.service --host localhost --port 8081 --x 3 --z -5 --color 255,0,0

  # Chunk colors from a numpy array of shape (16, 16, 256, 3), indexed [x, z, y, rgb]
  python -m chunk_renderer.service --config config/renderer.yaml --x 0 --z 0 --npy data/chunk.npy
"""

import argparse
import logging
import os
from typing import List, Optional, Tuple

import numpy as np

from common.logging_setup import setup_logging
from common.types import ArrayChunk
from chunk_renderer.config import load_config
from chunk_renderer.errors import ChunkRendererError
from chunk_renderer.renderer import ChunkRenderer


log = logging.getLogger(__name__)


def parse_color(s: str) -> Tuple[int, int, int]:
    parts = s.split(",")
    if len(parts) != 3:
        raise argparse.ArgumentTypeError("Color must be R,G,B")
    try:
        r, g, b = (int(p) for p in parts)
    except ValueError:
        raise argparse.ArgumentTypeError("Color channels must be integers") from None
    return (r, g, b)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Upload one voxel chunk to a chunk renderer")
    ap.add_argument("--config", default=None, help="YAML config (default: config/renderer.yaml if present)")
    ap.add_argument("--host", default=None, help="Receiver host (overrides config)")
    ap.add_argument("--port", type=int, default=None, help="Receiver port (overrides config)")
    ap.add_argument("--x", type=int, required=True, help="Chunk X coordinate")
    ap.add_argument("--z", type=int, required=True, help="Chunk Z coordinate")

    gsrc = ap.add_mutually_exclusive_group()
    gsrc.add_argument("--color", type=parse_color, default=(255, 0, 0), help="Solid chunk color R,G,B")
    gsrc.add_argument("--npy", help="Path to .npy array of shape (16,16,256,3)")

    ap.add_argument("--log-level", default=None, help="DEBUG/INFO/WARNING/ERROR")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    cfg = load_config(args.config)
    setup_logging(args.log_level or os.environ.get("LOG_LEVEL") or cfg["logging"].get("level"))
    if args.host:
        cfg["server"]["host"] = args.host
    if args.port is not None:
        cfg["server"]["port"] = args.port

    try:
        if args.npy:
            chunk = ArrayChunk(chunk_x=args.x, chunk_z=args.z, colors=np.load(args.npy))
        else:
            chunk = ArrayChunk.filled(args.x, args.z, args.color)
    except (ValueError, OSError) as e:
        log.error("Cannot load chunk: %s", e)
        return 1

    with ChunkRenderer.from_config(cfg) as renderer:
        future = renderer.send_chunk_data(chunk)
        try:
            future.result()
        except (ChunkRendererError, ValueError, OSError) as e:
            log.error("Upload failed: %s", e)
            return 1

    log.info("Sent chunk (%d, %d) to %s", args.x, args.z, renderer.target.base_url)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
