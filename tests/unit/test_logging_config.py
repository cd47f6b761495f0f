"""
Unit tests for logging setup.
"""
import json
import logging
import sys

import pytest

from deviceregistry.config import Settings
from deviceregistry.logging_config import JsonFormatter, configure_logging


def _record(msg="Device %s deleted", args=("abc",), exc_info=None) -> logging.LogRecord:
    return logging.LogRecord(
        name="deviceregistry.api.devices",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=args,
        exc_info=exc_info,
    )


class TestJsonFormatter:

    def test_formats_single_json_line(self):
        output = JsonFormatter().format(_record())

        assert "\n" not in output
        payload = json.loads(output)
        assert payload["level"] == "INFO"
        assert payload["logger"] == "deviceregistry.api.devices"
        assert payload["msg"] == "Device abc deleted"
        assert payload["time"]

    def test_includes_exception(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = _record(msg="failed", args=(), exc_info=sys.exc_info())

        payload = json.loads(JsonFormatter().format(record))

        assert "RuntimeError: boom" in payload["exc_info"]


class TestConfigureLogging:

    @pytest.fixture(autouse=True)
    def restore_handlers(self):
        root = logging.getLogger("deviceregistry")
        handlers = list(root.handlers)
        formatters = [h.formatter for h in handlers]
        level = root.level

        yield

        root.handlers = handlers
        for handler, formatter in zip(handlers, formatters):
            handler.setFormatter(formatter)
        root.setLevel(level)

    def _our_handlers(self):
        return [
            h
            for h in logging.getLogger("deviceregistry").handlers
            if getattr(h, "_deviceregistry", False)
        ]

    def test_structured_switch(self):
        configure_logging(Settings(log_structured=True))

        handlers = self._our_handlers()
        assert len(handlers) == 1
        assert isinstance(handlers[0].formatter, JsonFormatter)

    def test_plain_format_by_default(self):
        configure_logging(Settings(log_structured=False))

        formatter = self._our_handlers()[0].formatter
        assert not isinstance(formatter, JsonFormatter)

    def test_repeated_calls_do_not_stack_handlers(self):
        configure_logging(Settings())
        configure_logging(Settings(log_level="DEBUG"))

        assert len(self._our_handlers()) == 1
        assert logging.getLogger("deviceregistry").level == logging.DEBUG
