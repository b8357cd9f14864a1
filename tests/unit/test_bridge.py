"""
Tests for the stdlib logging and Loguru bridges.
"""

import inspect
import logging
import os

import pytest
from loguru import logger as loguru_logger

from prettylog.core.bridge import (
    StdlibBridgeHandler,
    capture_loguru,
    capture_stdlib_logging,
    level_from_number,
    loguru_sink,
)
from prettylog.core.handler import HandlerOptions, new_handler
from prettylog.core.logger import setup_logger_with
from prettylog.core.record import Level

THIS_FILE = os.path.abspath(__file__)


@pytest.mark.parametrize(
    "levelno, expected",
    [
        (logging.DEBUG, Level.DEBUG),
        (5, Level.DEBUG),
        (logging.INFO, Level.INFO),
        (25, Level.INFO),
        (logging.WARNING, Level.WARN),
        (logging.ERROR, Level.ERROR),
        (logging.CRITICAL, Level.ERROR),
    ],
)
def test_level_from_number(levelno, expected):
    assert level_from_number(levelno) is expected


@pytest.fixture
def stdlib_logger():
    logger = logging.getLogger("tests.bridge")
    logger.propagate = False
    logger.setLevel(logging.DEBUG)
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True


class TestStdlibBridge:
    def test_forwards_message_extra_and_source(self, stdlib_logger, read_lines):
        stdlib_logger.addHandler(StdlibBridgeHandler(new_handler()))

        line = inspect.currentframe().f_lineno + 1
        stdlib_logger.error("failed %s", "job", extra={"job_id": 7})

        (parsed,) = read_lines()
        assert parsed.level == "ERROR"
        assert parsed.message == "failed job"
        assert parsed.attrs == {
            "logger": "tests.bridge",
            "job_id": 7,
            "file": THIS_FILE,
            "line": line,
        }

    def test_includes_exception_text(self, stdlib_logger, read_lines):
        stdlib_logger.addHandler(StdlibBridgeHandler(new_handler()))

        try:
            raise ValueError("bad value")
        except ValueError:
            stdlib_logger.exception("crashed")

        (parsed,) = read_lines()
        assert "ValueError: bad value" in parsed.attrs["exc_info"]

    def test_respects_handler_level(self, stdlib_logger, read_lines):
        stdlib_logger.addHandler(StdlibBridgeHandler(new_handler(HandlerOptions(level=Level.WARN))))

        stdlib_logger.info("quiet")
        stdlib_logger.warning("loud")

        assert [p.message for p in read_lines()] == ["loud"]

    def test_uses_default_logger_when_no_handler_given(self, stdlib_logger, read_lines):
        stdlib_logger.addHandler(StdlibBridgeHandler())
        setup_logger_with(HandlerOptions(level=Level.DEBUG))

        stdlib_logger.debug("via default")

        (parsed,) = read_lines()
        assert parsed.level == "DEBUG"

    def test_capture_stdlib_logging_replaces_root_handlers(self, read_lines):
        root = logging.getLogger()
        saved_handlers, saved_level = list(root.handlers), root.level
        try:
            bridge = capture_stdlib_logging(logging.INFO, handler=new_handler())

            assert root.handlers == [bridge]
            logging.getLogger("tests.root").info("through root")

            (parsed,) = read_lines()
            assert parsed.message == "through root"
            assert parsed.attrs["logger"] == "tests.root"
        finally:
            root.handlers = saved_handlers
            root.setLevel(saved_level)


class TestLoguruBridge:
    def test_sink_forwards_extra_and_level(self, read_lines):
        sink_id = loguru_logger.add(loguru_sink(new_handler()), format="{message}", level="DEBUG")
        try:
            loguru_logger.bind(user="u-1").warning("careful {}", "now")
        finally:
            loguru_logger.remove(sink_id)

        lines = read_lines()
        assert len(lines) == 1
        assert lines[0].level == "WARN"
        assert lines[0].message == "careful now"
        assert lines[0].attrs["user"] == "u-1"
        assert "logger" in lines[0].attrs

    def test_sink_adds_source_and_exception_for_errors(self, read_lines):
        sink_id = loguru_logger.add(loguru_sink(new_handler()), format="{message}")
        try:
            try:
                raise RuntimeError("kaput")
            except RuntimeError:
                line = inspect.currentframe().f_lineno + 1
                loguru_logger.exception("failed")
        finally:
            loguru_logger.remove(sink_id)

        (parsed,) = read_lines()
        assert parsed.level == "ERROR"
        assert parsed.attrs["file"] == THIS_FILE
        assert parsed.attrs["line"] == line
        assert "RuntimeError: kaput" in parsed.attrs["exc_info"]

    def test_capture_loguru(self, read_lines):
        sink_id = capture_loguru("INFO", handler=new_handler())
        try:
            loguru_logger.debug("dropped")
            loguru_logger.info("kept")
        finally:
            loguru_logger.remove(sink_id)

        assert [p.message for p in read_lines()] == ["kept"]
