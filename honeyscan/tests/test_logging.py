"""Tests for honeyscan.core.logging formatters."""

from __future__ import annotations

import io
import json
import logging

import pytest

from honeyscan.core.logging import DevFormatter, JSONFormatter, setup_logging


def _record(msg: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="honeyscan.test", level=logging.INFO, pathname=__file__, lineno=1,
        msg=msg, args=(), exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_basic_fields(self):
        entry = json.loads(JSONFormatter().format(_record()))
        assert entry["level"] == "INFO"
        assert entry["logger"] == "honeyscan.test"
        assert entry["message"] == "hello"

    def test_context_fields(self):
        entry = json.loads(JSONFormatter().format(
            _record(address="0xabc", check="HP-LIQUIDITY", rpc_url="https://rpc.test")
        ))
        assert entry["address"] == "0xabc"
        assert entry["check"] == "HP-LIQUIDITY"
        assert entry["rpc_url"] == "https://rpc.test"

    def test_exception_info(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            import sys

            record = _record()
            record.exc_info = sys.exc_info()
        entry = json.loads(JSONFormatter().format(record))
        assert entry["exception"]["type"] == "RuntimeError"
        assert entry["exception"]["message"] == "boom"


class TestDevFormatter:
    def test_prefixes_check_and_request(self):
        line = DevFormatter().format(_record(check="HP-OWNER", request_id="abcdef123456"))
        assert "[abcdef12] [HP-OWNER] hello" in line


class TestSetupLogging:
    @pytest.fixture(autouse=True)
    def restore_root(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_production_uses_json(self):
        stream = io.StringIO()
        setup_logging(env="production", log_level="INFO", stream=stream)
        logging.getLogger("honeyscan.test").info("ready", extra={"address": "0xabc"})
        entry = json.loads(stream.getvalue().strip())
        assert entry["message"] == "ready"
        assert entry["address"] == "0xabc"

    def test_level_and_noisy_loggers(self):
        setup_logging(env="development", log_level="warning", stream=io.StringIO())
        assert logging.getLogger().level == logging.WARNING
        assert logging.getLogger("httpx").level == logging.WARNING
        assert isinstance(logging.getLogger().handlers[0].formatter, DevFormatter)
