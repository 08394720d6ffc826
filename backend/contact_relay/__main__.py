# contact_relay/__main__.py
import uvicorn

from contact_relay.core.settings import settings


def main():
    uvicorn.run(
        "contact_relay.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
