"""Tests for transport-aware logging."""

import logging

from mem0_mcp.server.logging_config import DualStreamHandler, configure_logging


def make_record(level):
    return logging.LogRecord("mem0_mcp.test", level, __file__, 1, "message", None, None)


def test_stdio_routes_everything_to_stderr(capsys):
    handler = DualStreamHandler(transport="stdio")

    handler.emit(make_record(logging.INFO))
    handler.emit(make_record(logging.ERROR))

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.count("message") == 2


def test_http_splits_by_level(capsys):
    handler = DualStreamHandler(transport="http")

    handler.emit(make_record(logging.INFO))
    handler.emit(make_record(logging.WARNING))

    captured = capsys.readouterr()
    assert "INFO:mem0_mcp.test:message" in captured.out
    assert "WARNING:mem0_mcp.test:message" in captured.err


def test_configure_logging_sets_level_and_single_handler(monkeypatch):
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        monkeypatch.setenv("LOG_LEVEL", "info")
        configure_logging(transport="stdio")
        configure_logging(transport="stdio")

        assert root.level == logging.INFO
        assert len([h for h in root.handlers if isinstance(h, DualStreamHandler)]) == 1

        configure_logging(transport="http", level="debug")
        assert root.level == logging.DEBUG
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
