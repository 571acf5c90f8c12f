"""Entry point for the User Groups API.

Serves the FastAPI application with uvicorn.  Host, port and log level
come from the same environment variables as the rest of the settings
(``HOST``, ``PORT``, ``LOG_LEVEL``).

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from user_groups_api.app.core.config import settings
from user_groups_api.app.main import app


async def run_api() -> None:
    """Start the API server and block until it shuts down."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
        log_config=None,
    )
    server = Server(config)
    await server.serve()
    # uvicorn returns normally when a startup hook fails.
    if not server.started:
        raise SystemExit(1)


def main() -> None:
    logging.getLogger(__name__).info("Starting %s on %s:%s", settings.project_name, settings.host, settings.port)
    try:
        asyncio.run(run_api())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
