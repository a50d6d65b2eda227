"""Entry point for the API server."""

import contextlib
import sys

import structlog
import uvicorn

from forms_api.app import create_app
from forms_api.config import Settings
from forms_api.logging import configure_logging

logger = structlog.get_logger()


def main() -> None:
    """Entry point for python -m forms_api.

    Uvicorn handles SIGTERM/SIGINT itself and waits up to
    ``shutdown_timeout`` seconds for in-flight requests before exiting.
    """
    settings = Settings()
    configure_logging(settings)

    app = create_app(settings)
    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_level="warning",
        access_log=False,
        timeout_graceful_shutdown=int(settings.shutdown_timeout),
    )

    with contextlib.suppress(KeyboardInterrupt):
        uvicorn.Server(config).run()

    logger.info("server_stopped")
    sys.exit(0)


if __name__ == "__main__":
    main()
