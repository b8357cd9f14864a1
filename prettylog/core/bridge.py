"""Route stdlib ``logging`` and Loguru output through a pretty handler.

Libraries such as uvicorn log through ``logging.getLogger(...)`` and a lot of
application code logs through Loguru. Installing the bridges below makes both
render exactly like records emitted through :class:`~prettylog.core.logger.Logger`.
"""

from __future__ import annotations

import logging
import os
import traceback
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Union

from loguru import logger as loguru_logger

from .handler import Handler
from .logger import default
from .record import Attr, Level, Record, Source

# Attributes every LogRecord has; anything else came in through ``extra=``.
_RESERVED_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}


def level_from_number(levelno: int) -> Level:
    """Map a stdlib/Loguru numeric level onto the four record levels."""
    if levelno >= logging.ERROR:
        return Level.ERROR
    if levelno >= logging.WARNING:
        return Level.WARN
    if levelno >= logging.INFO:
        return Level.INFO
    return Level.DEBUG


class StdlibBridgeHandler(logging.Handler):
    """``logging.Handler`` forwarding records to a prettylog handler.

    When no handler is given, the default logger's handler is resolved at
    emit time so a later ``setup_logger_with`` call is picked up.
    """

    def __init__(self, handler: Optional[Handler] = None, level: Union[int, str] = logging.NOTSET):
        super().__init__(level)
        self._target = handler
        self._formatter = logging.Formatter()

    def emit(self, record: logging.LogRecord) -> None:
        target = self._target or default().handler
        level = level_from_number(record.levelno)
        if not target.enabled(level):
            return
        try:
            attrs: List[Attr] = [Attr("logger", record.name)]
            for key, value in record.__dict__.items():
                if key in _RESERVED_RECORD_ATTRS or key.startswith("_"):
                    continue
                attrs.append(Attr(key, value))
            if record.exc_info:
                attrs.append(Attr("exc_info", self._formatter.formatException(record.exc_info)))

            target.handle(Record(
                time=datetime.fromtimestamp(record.created).astimezone(),
                level=level,
                message=record.getMessage(),
                attrs=tuple(attrs),
                source=Source(
                    function=record.funcName,
                    file=os.path.abspath(record.pathname),
                    line=record.lineno,
                ),
            ))
        except Exception:
            self.handleError(record)


def capture_stdlib_logging(level: Union[int, str] = logging.INFO, handler: Optional[Handler] = None) -> StdlibBridgeHandler:
    """Make the bridge the root logger's only handler."""
    bridge = StdlibBridgeHandler(handler)
    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(bridge)
    root.setLevel(level)
    return bridge


def loguru_sink(handler: Optional[Handler] = None) -> Callable[[Any], None]:
    """Build a Loguru sink that forwards each message's record."""

    def sink(message: Any) -> None:
        record: Dict[str, Any] = message.record
        target = handler or default().handler
        level = level_from_number(record["level"].no)
        if not target.enabled(level):
            return

        attrs = [Attr("logger", record["name"])]
        attrs.extend(Attr(key, value) for key, value in record["extra"].items())
        exception = record["exception"]
        if exception is not None and exception.type is not None:
            text = "".join(traceback.format_exception(exception.type, exception.value, exception.traceback))
            attrs.append(Attr("exc_info", text.rstrip("\n")))

        target.handle(Record(
            time=record["time"],
            level=level,
            message=record["message"],
            attrs=tuple(attrs),
            source=Source(
                function=record["function"],
                file=os.path.abspath(record["file"].path),
                line=record["line"],
            ),
        ))

    return sink


def capture_loguru(level: Union[int, str] = "INFO", handler: Optional[Handler] = None) -> int:
    """Replace Loguru's sinks with the bridge; returns the new sink id."""
    loguru_logger.remove()
    return loguru_logger.add(
        loguru_sink(handler),
        level=level,
        format="{message}",
        backtrace=False,
        diagnose=False,
    )
