# contact_relay/core/log_config.py
import logging

log = logging.getLogger("uvicorn.error")


def configure_logging(level: str = "INFO") -> None:
    """Give the app logger a handler when running outside uvicorn."""
    root = logging.getLogger()
    if not root.handlers and not log.handlers:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
    log.setLevel(level.upper())


def log_startup_config(settings) -> None:
    # never log the SMTP password
    log.info(
        "[main] config loaded: EMAIL_HOST=%s EMAIL_PORT=%s EMAIL_USER=%s APP_ENV=%s",
        settings.smtp_host,
        settings.smtp_port,
        settings.smtp_user,
        settings.app_env,
    )
