# contact_relay/routers/contact.py
from typing import Any

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter

from contact_relay.core.errors import error_body
from contact_relay.core.log_config import log
from contact_relay.core.mailer import MailDispatcher, get_dispatcher
from contact_relay.lib.validation import to_submission, validate_contact


async def contact(
    request: Request,
    payload: Any = Body(default=None),
    dispatcher: MailDispatcher = Depends(get_dispatcher),
):
    result = validate_contact(payload)
    if not result.is_valid:
        log.debug(f"[contact] rejected submission: {result.code.value}")
        return JSONResponse(status_code=400, content={"message": result.error})

    submission = to_submission(payload)
    try:
        await dispatcher.send(submission)
    except Exception as exc:
        log.error(f"[contact] error sending email: {exc}", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content=error_body("Failed to send email", exc, request.app.state.settings),
        )

    return {"message": "Email sent successfully"}


def build_contact_router(limiter: Limiter, rate_limit: str) -> APIRouter:
    """The contact route, rate limited per client address by the app's own limiter."""
    router = APIRouter(prefix="/api", tags=["contact"])
    router.add_api_route("/contact", limiter.limit(rate_limit)(contact), methods=["POST"])
    return router
