from __future__ import annotations

import json
import logging
import sys

from areacodes.logging_config import JsonFormatter, configure_logging


def test_json_formatter_includes_extra_fields() -> None:
    record = logging.LogRecord("areacodes.cache", logging.INFO, __file__, 1, "Loaded %s", ("CA",), None)
    record.country_code = "CA"
    payload = json.loads(JsonFormatter().format(record))
    assert payload["msg"] == "Loaded CA"
    assert payload["level"] == "INFO"
    assert payload["country_code"] == "CA"
    assert "lineno" not in payload


def test_configure_logging_replaces_handlers() -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        configure_logging(level="debug", json_logging=True)
        configure_logging(level="warning", json_logging=True)
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
        assert root.level == logging.WARNING
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)


def test_configure_logging_writes_to_stderr() -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        configure_logging(level="info")
        (handler,) = root.handlers
        assert isinstance(handler, logging.StreamHandler)
        assert handler.stream is sys.stderr
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
