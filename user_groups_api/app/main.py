"""
Main entrypoint for the User Groups API.

``create_app`` configures logging, registers the error handlers and
routers, and hooks schema creation into application startup.  The
module-level ``app`` lets an ASGI server import it directly::

    uvicorn user_groups_api.app.main:app --port 8080
"""

import logging

from fastapi import FastAPI

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.db import init_db
from .core.errors import register_error_handlers
from .core.logging_config import setup_logging

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured application.  The database schema is created when
        the application starts, not here.
    """
    setup_logging(settings.log_level, settings.log_file)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)

    register_error_handlers(app)
    app.include_router(v1_router)

    @app.on_event("startup")
    async def startup_event() -> None:
        # A store that cannot be initialised is fatal: let the error
        # propagate so the server refuses to start.
        try:
            init_db()
        except Exception:
            logger.exception("Failed to initialize database")
            raise

    return app


app = create_app()
