"""
Unit tests for JSON logging
"""

import io
import json
import logging
import os
import sys
import threading
from unittest.mock import patch

import pytest

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.append(project_root)

from common.logging_setup import JsonFormatter, get_logger, setup_logging


def make_record(msg="Chunk uploaded", **attrs):
    record = logging.LogRecord(
        name="chunk_renderer.uploader", level=logging.INFO, pathname=__file__,
        lineno=1, msg=msg, args=(), exc_info=None,
    )
    for k, v in attrs.items():
        setattr(record, k, v)
    return record


class TestJsonFormatter:
    def test_basic_fields(self):
        out = json.loads(JsonFormatter().format(make_record()))
        assert out["lvl"] == "INFO"
        assert out["name"] == "chunk_renderer.uploader"
        assert out["msg"] == "Chunk uploaded"
        assert isinstance(out["t"], int)
        assert "extra" not in out

    def test_extra_context(self):
        record = make_record(extra={"x": 3, "z": -5, "bytes": 196608})
        out = json.loads(JsonFormatter().format(record))
        assert out["extra"] == {"x": 3, "z": -5, "bytes": 196608}

    def test_exception_info(self):
        try:
            raise ConnectionError("refused")
        except ConnectionError:
            record = make_record(exc_info=sys.exc_info())
        out = json.loads(JsonFormatter().format(record))
        assert "ConnectionError: refused" in out["exc_info"]

    def test_logger_extra_round_trip(self):
        stream = io.StringIO()
        handler = logging.StreamHandler(stream)
        handler.setFormatter(JsonFormatter())
        logger = logging.getLogger("tests.logging_setup")
        logger.propagate = False
        logger.addHandler(handler)
        try:
            logger.warning("upload %s", "slow", extra={"extra": {"ms": 12.5}})
        finally:
            logger.removeHandler(handler)

        out = json.loads(stream.getvalue())
        assert out["msg"] == "upload slow"
        assert out["extra"] == {"ms": 12.5}


@pytest.fixture
def fresh_root():
    """Unconfigured root logger for the test; previous state restored afterwards."""
    root = logging.getLogger()
    saved = (list(root.handlers), root.level, getattr(root, "_chunk_renderer_configured", False))
    root.handlers.clear()
    root._chunk_renderer_configured = False
    try:
        yield root
    finally:
        root.handlers[:] = saved[0]
        root.setLevel(saved[1])
        root._chunk_renderer_configured = saved[2]


class TestSetupLogging:
    """Test cases for setup_logging / get_logger"""

    def test_default_level_info(self, fresh_root):
        with patch.dict(os.environ, {}, clear=True):
            setup_logging()
        assert fresh_root.level == logging.INFO
        assert len(fresh_root.handlers) == 1
        assert isinstance(fresh_root.handlers[0].formatter, JsonFormatter)

    def test_level_from_env(self, fresh_root):
        with patch.dict(os.environ, {"LOG_LEVEL": "debug"}, clear=True):
            setup_logging()
        assert fresh_root.level == logging.DEBUG

    def test_argument_beats_env(self, fresh_root):
        with patch.dict(os.environ, {"LOG_LEVEL": "DEBUG"}, clear=True):
            setup_logging("ERROR")
        assert fresh_root.level == logging.ERROR

    def test_unknown_level_falls_back_to_info(self, fresh_root):
        with patch.dict(os.environ, {}, clear=True):
            setup_logging("CHATTY")
        assert fresh_root.level == logging.INFO

    def test_configures_once(self, fresh_root):
        with patch.dict(os.environ, {}, clear=True):
            setup_logging()
            handler = fresh_root.handlers[0]
            setup_logging()
            get_logger("chunk_renderer.uploader")
        assert fresh_root.handlers == [handler]
        assert fresh_root.level == logging.INFO

    def test_later_level_only_adjusts_level(self, fresh_root):
        with patch.dict(os.environ, {}, clear=True):
            setup_logging("INFO")
            handler = fresh_root.handlers[0]
            setup_logging("WARNING")
        assert fresh_root.handlers == [handler]
        assert fresh_root.level == logging.WARNING

    def test_stream_argument(self, fresh_root):
        stream = io.StringIO()
        setup_logging("INFO", stream=stream)

        logging.getLogger("chunk_renderer.renderer").info("Chunk task done", extra={"extra": {"x": 1}})

        out = json.loads(stream.getvalue().strip())
        assert out["name"] == "chunk_renderer.renderer"
        assert out["extra"] == {"x": 1}
        assert "thread" not in out

    def test_worker_thread_name(self, fresh_root):
        stream = io.StringIO()
        setup_logging("INFO", stream=stream)

        t = threading.Thread(
            target=lambda: logging.getLogger("chunk_renderer.uploader").info("Chunk uploaded"),
            name="chunk-upload_0",
        )
        t.start()
        t.join()

        out = json.loads(stream.getvalue().strip())
        assert out["thread"] == "chunk-upload_0"
