# contact_relay/core/middleware.py
from typing import Iterable

from fastapi import HTTPException
from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from contact_relay.core.log_config import log


class PayloadTooLarge(HTTPException):
    def __init__(self):
        super().__init__(status_code=413, detail="Payload too large")


def payload_too_large_response() -> JSONResponse:
    return JSONResponse(status_code=413, content={"message": "Payload too large"})


class OriginGuardMiddleware:
    """Reject browser requests whose Origin is not on the allow-list.

    Requests without an Origin header (curl, server-to-server) pass through.
    CORS preflights are answered by CORSMiddleware, which sits outside this one.
    """

    def __init__(self, app: ASGIApp, allowed_origins: Iterable[str]):
        self.app = app
        self.allowed_origins = set(allowed_origins)

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        origin = Headers(scope=scope).get("origin")
        if origin is not None and origin not in self.allowed_origins:
            log.warning(f"[origin] blocked {scope.get('method')} {scope.get('path')} from {origin}")
            response = JSONResponse(status_code=403, content={"message": "Origin not allowed"})
            await response(scope, receive, send)
            return

        await self.app(scope, receive, send)


class BodySizeLimitMiddleware:
    """Cap request bodies at max_bytes before anything parses them.

    A declared Content-Length over the cap is answered here. Chunked bodies are
    counted as they are read and raise PayloadTooLarge, which the app turns
    into the same 413 response.
    """

    def __init__(self, app: ASGIApp, max_bytes: int):
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        content_length = Headers(scope=scope).get("content-length")
        if content_length is not None:
            try:
                declared = int(content_length)
            except ValueError:
                declared = 0
            if declared > self.max_bytes:
                log.warning(f"[body] rejected {declared} byte body on {scope.get('path')} (limit {self.max_bytes})")
                await payload_too_large_response()(scope, receive, send)
                return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_bytes:
                    log.warning(f"[body] body on {scope.get('path')} grew past {self.max_bytes} bytes")
                    raise PayloadTooLarge()
            return message

        await self.app(scope, limited_receive, send)
