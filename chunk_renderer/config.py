from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


DEFAULT_CONFIG_PATH = "config/renderer.yaml"

DEFAULTS: Dict[str, Any] = {
    "server": {"host": "localhost", "port": 80},
    "upload": {"block_size": 2048, "timeout_s": None, "check_status": True},
    "executor": {"max_workers": None},
    "logging": {"level": "INFO"},
}


def _merge(base: Dict, override: Dict) -> Dict:
    out = dict(base)
    for k, v in (override or {}).items():
        if v is None and isinstance(out.get(k), dict):
            # empty YAML section keeps its defaults
            continue
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out


def load_config(path: Optional[str] = None) -> Dict:
    """
    Load renderer settings.

    Path precedence: `path` arg, env CHUNK_RENDERER_CONFIG, config/renderer.yaml.
    A missing file means built-in defaults; keys absent from the file fall back
    to defaults. CHUNK_RENDERER_HOST / CHUNK_RENDERER_PORT override the server.
    """
    path = path or os.environ.get("CHUNK_RENDERER_CONFIG") or DEFAULT_CONFIG_PATH
    cfg = copy.deepcopy(DEFAULTS)
    if Path(path).exists():
        with open(path, "r") as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"{path}: top level must be a mapping")
        cfg = _merge(cfg, loaded)

    if os.environ.get("CHUNK_RENDERER_HOST"):
        cfg["server"]["host"] = os.environ["CHUNK_RENDERER_HOST"]
    if os.environ.get("CHUNK_RENDERER_PORT"):
        cfg["server"]["port"] = int(os.environ["CHUNK_RENDERER_PORT"])
    return cfg
