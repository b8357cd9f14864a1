"""
Request ID middleware.

Reuses the caller's ``X-Request-ID`` header when present, otherwise generates
one, stores it in the ASGI scope state and echoes it on the response.
"""

import uuid
from typing import Any, MutableMapping

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

REQUEST_ID_HEADER = "X-Request-ID"


def get_request_id(scope: MutableMapping[str, Any]) -> str:
    """Return the request ID stored in *scope*, or an empty string."""
    state = scope.get("state") or {}
    return state.get("request_id", "")


class RequestIDMiddleware:
    """Assign every HTTP request an ID readable through :func:`get_request_id`."""

    def __init__(self, app: ASGIApp, header_name: str = REQUEST_ID_HEADER) -> None:
        self.app = app
        self.header_name = header_name

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = Headers(scope=scope).get(self.header_name) or uuid.uuid4().hex
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                headers = MutableHeaders(scope=message)
                headers[self.header_name] = request_id
            await send(message)

        await self.app(scope, receive, send_with_request_id)
