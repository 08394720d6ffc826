# contact_relay/main.py
# run it with uvicorn contact_relay.main:app --reload
import asyncio
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from contact_relay.core.errors import UnhandledErrorMiddleware, register_error_handlers
from contact_relay.core.log_config import configure_logging, log, log_startup_config
from contact_relay.core.mailer import MailDispatcher
from contact_relay.core.middleware import BodySizeLimitMiddleware, OriginGuardMiddleware
from contact_relay.core.rate_limit import build_limiter
from contact_relay.core.settings import Settings, settings as default_settings
from contact_relay.routers.contact import build_contact_router
from contact_relay.routers.health import router as health_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    s = app.state.settings
    log_startup_config(s)

    verify_task: Optional[asyncio.Task] = None
    if s.smtp_verify_on_startup:
        # result is only logged; requests are served whatever it says
        verify_task = asyncio.create_task(app.state.dispatcher.verify())
    app.state.verify_task = verify_task
    yield
    if verify_task is not None and not verify_task.done():
        verify_task.cancel()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.log_level)

    app = FastAPI(title=settings.api_title, lifespan=lifespan)
    app.state.settings = settings
    app.state.dispatcher = MailDispatcher(settings)
    app.state.limiter = build_limiter()
    app.state.verify_task = None

    register_error_handlers(app)

    # last added runs first: CORS answers preflights, then the 500 guard,
    # then origin check, then size cap
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.max_body_bytes)
    app.add_middleware(OriginGuardMiddleware, allowed_origins=settings.allowed_origins)
    app.add_middleware(UnhandledErrorMiddleware, settings=settings)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    app.include_router(build_contact_router(app.state.limiter, settings.contact_rate_limit))
    app.include_router(health_router)

    log.info(f"[main] allowed origins = {settings.allowed_origins}")
    return app


app = create_app()
