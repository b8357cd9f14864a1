"""
Request logging middleware.

Logs one "request completed" entry per HTTP request with the method, path,
client address, user agent, request ID, status, response size and duration.

Install it inside :class:`RequestIDMiddleware` so the request ID is already
assigned. With Starlette the middleware added last runs first::

    app.add_middleware(RequestLoggerMiddleware, logger=log)
    app.add_middleware(RequestIDMiddleware)
"""

import time
from datetime import timedelta
from typing import Optional

from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from prettylog.core.logger import Logger, default

from .request_id import get_request_id


class _ResponseRecorder:
    """``send`` wrapper that notes the status code and body bytes sent."""

    def __init__(self, send: Send) -> None:
        self._send = send
        self.status = 0
        self.bytes_written = 0

    async def __call__(self, message: Message) -> None:
        if message["type"] == "http.response.start":
            self.status = message["status"]
        elif message["type"] == "http.response.body":
            self.bytes_written += len(message.get("body", b""))
        await self._send(message)


def _remote_addr(scope: Scope) -> str:
    client = scope.get("client")
    if not client:
        return ""
    host, port = client
    return f"{host}:{port}"


class RequestLoggerMiddleware:
    """Log a completed-request summary through a prettylog :class:`Logger`."""

    def __init__(self, app: ASGIApp, logger: Optional[Logger] = None) -> None:
        self.app = app
        self.logger = (logger or default()).bind(component="middleware/logger")

        self.logger.info("logger middleware enabled")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        entry = self.logger.bind(
            method=scope["method"],
            path=scope["path"],
            remote_addr=_remote_addr(scope),
            user_agent=Headers(scope=scope).get("user-agent", ""),
            request_id=get_request_id(scope),
        )
        recorder = _ResponseRecorder(send)

        start = time.perf_counter()
        try:
            await self.app(scope, receive, recorder)
        finally:
            entry.info(
                "request completed",
                status=recorder.status,
                size=recorder.bytes_written,
                duration=timedelta(seconds=time.perf_counter() - start),
            )
