# contact_relay/core/errors.py
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from contact_relay.core.log_config import log
from contact_relay.core.middleware import PayloadTooLarge, payload_too_large_response


class MailDeliveryError(Exception):
    """A single delivery attempt to the SMTP relay failed."""


def error_body(message: str, exc: Optional[BaseException], settings) -> Dict[str, Any]:
    body: Dict[str, Any] = {"message": message}
    if exc is not None and settings.expose_errors:
        body["error"] = str(exc)
    return body


async def invalid_body_handler(request: Request, exc: RequestValidationError):
    log.debug(f"[errors] rejected unparseable body on {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"message": "Invalid JSON body"})


async def payload_too_large_handler(request: Request, exc: PayloadTooLarge):
    return payload_too_large_response()


class UnhandledErrorMiddleware:
    """Turn any exception escaping the app or inner middlewares into a JSON 500.

    Installed inside CORSMiddleware so the 500 still carries CORS headers.
    """

    def __init__(self, app: ASGIApp, settings):
        self.app = app
        self.settings = settings

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def tracking_send(message: Message):
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, tracking_send)
        except Exception as exc:
            log.error(f"[errors] unhandled error on {scope.get('method')} {scope.get('path')}: {exc}", exc_info=exc)
            if response_started:
                raise
            response = JSONResponse(
                status_code=500,
                content=error_body("Internal server error", exc, self.settings),
            )
            await response(scope, receive, send)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, invalid_body_handler)
    app.add_exception_handler(PayloadTooLarge, payload_too_large_handler)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
