"""Human-readable structured logging.

Records are encoded by a JSON handler, decoded back and rendered as::

    [2024-05-01 12:00:00.123] INFO: Application started {"port":8080}
"""

__version__ = "0.1.0"

from .core.exceptions import DecodingError, EncodingError, MarshalError, PrettyLogException
from .core.handler import Handler, HandlerOptions, PrettyHandler, new_handler, suppress_defaults
from .core.json_handler import JSONHandler, JSONHandlerOptions
from .core.logger import (
    Logger,
    debug,
    default,
    error,
    info,
    set_default,
    setup_logger_with,
    warn,
)
from .core.record import Attr, Group, Level, Record, Source, group

__all__ = [
    "Attr",
    "DecodingError",
    "EncodingError",
    "Group",
    "Handler",
    "HandlerOptions",
    "JSONHandler",
    "JSONHandlerOptions",
    "Level",
    "Logger",
    "MarshalError",
    "PrettyHandler",
    "PrettyLogException",
    "Record",
    "Source",
    "debug",
    "default",
    "error",
    "group",
    "info",
    "new_handler",
    "set_default",
    "setup_logger_with",
    "suppress_defaults",
    "warn",
]
