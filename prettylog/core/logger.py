"""Front-end logger and the process-wide default logger.

Other modules can do::

    from prettylog import setup_logger_with, HandlerOptions, Level

    log = setup_logger_with(HandlerOptions(level=Level.DEBUG, colorize=True))
    log.bind(component="worker").info("job finished", job_id=42)

Call sites are recorded when the record is built, so handlers never have to
walk the stack themselves.
"""

from __future__ import annotations

import os
import sys
import threading
from datetime import datetime
from typing import Any, Optional

from .handler import Handler, HandlerOptions, new_handler
from .record import Attr, Level, Record, Source, to_attrs


def _caller_source(depth: int) -> Optional[Source]:
    """Return the source of the frame *depth* levels above this function.

    ``None`` when the stack is not that deep or frames are unavailable.
    """
    try:
        frame = sys._getframe(depth)
    except (AttributeError, ValueError):
        return None
    code = frame.f_code
    return Source(
        function=code.co_name,
        file=os.path.abspath(code.co_filename),
        line=frame.f_lineno,
    )


class Logger:
    """Builds records at call sites and hands them to a :class:`Handler`."""

    def __init__(self, handler: Handler) -> None:
        self._handler = handler

    @property
    def handler(self) -> Handler:
        return self._handler

    def bind(self, *attrs: Attr, **kwargs: Any) -> "Logger":
        """Return a logger whose records always carry the given attrs."""
        bound = to_attrs(attrs, kwargs)
        if not bound:
            return self
        return Logger(self._handler.with_attrs(bound))

    def with_group(self, name: str) -> "Logger":
        """Return a logger that nests subsequent attrs under *name*."""
        if not name:
            return self
        return Logger(self._handler.with_group(name))

    def enabled(self, level: Level) -> bool:
        return self._handler.enabled(level)

    def debug(self, msg: str, *attrs: Attr, **kwargs: Any) -> None:
        self._log(Level.DEBUG, msg, attrs, kwargs, 1)

    def info(self, msg: str, *attrs: Attr, **kwargs: Any) -> None:
        self._log(Level.INFO, msg, attrs, kwargs, 1)

    def warn(self, msg: str, *attrs: Attr, **kwargs: Any) -> None:
        self._log(Level.WARN, msg, attrs, kwargs, 1)

    warning = warn

    def error(self, msg: str, *attrs: Attr, **kwargs: Any) -> None:
        self._log(Level.ERROR, msg, attrs, kwargs, 1)

    def log(self, level: Level, msg: str, *attrs: Attr, stacklevel: int = 1, **kwargs: Any) -> None:
        """Log at *level*; *stacklevel* > 1 attributes the call to an outer frame."""
        self._log(Level.parse(level), msg, attrs, kwargs, stacklevel)

    def _log(self, level: Level, msg: str, attrs, kwargs, stacklevel: int) -> None:
        if not self._handler.enabled(level):
            return
        # _caller_source -> _log -> public method -> caller
        source = _caller_source(2 + stacklevel)
        record = Record(
            time=datetime.now().astimezone(),
            level=level,
            message=msg,
            attrs=to_attrs(attrs, kwargs),
            source=source,
        )
        self._handler.handle(record)


_default_lock = threading.Lock()
_default_logger: Optional[Logger] = None


def default() -> Logger:
    """Return the process-wide default logger, creating a plain one on first use."""
    global _default_logger
    with _default_lock:
        if _default_logger is None:
            _default_logger = Logger(new_handler())
        return _default_logger


def set_default(logger: Logger) -> None:
    """Install *logger* as the process-wide default."""
    global _default_logger
    with _default_lock:
        _default_logger = logger


def setup_logger_with(opts: Optional[HandlerOptions] = None) -> Logger:
    """Create a pretty handler from *opts* and install it as the default logger."""
    logger = Logger(new_handler(opts))
    set_default(logger)
    return logger


def debug(msg: str, *attrs: Attr, **kwargs: Any) -> None:
    default().log(Level.DEBUG, msg, *attrs, stacklevel=2, **kwargs)


def info(msg: str, *attrs: Attr, **kwargs: Any) -> None:
    default().log(Level.INFO, msg, *attrs, stacklevel=2, **kwargs)


def warn(msg: str, *attrs: Attr, **kwargs: Any) -> None:
    default().log(Level.WARN, msg, *attrs, stacklevel=2, **kwargs)


def error(msg: str, *attrs: Attr, **kwargs: Any) -> None:
    default().log(Level.ERROR, msg, *attrs, stacklevel=2, **kwargs)
