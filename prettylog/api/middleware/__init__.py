"""
ASGI middleware for request logging.
"""

from .request_id import RequestIDMiddleware, get_request_id
from .request_logger import RequestLoggerMiddleware

__all__ = ["RequestIDMiddleware", "RequestLoggerMiddleware", "get_request_id"]
