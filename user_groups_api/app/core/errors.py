"""
Error taxonomy shared by the service layer and the HTTP boundary.

Services raise one of the ``ServiceError`` subclasses below; each
carries a ``kind`` tag and the HTTP status the boundary should answer
with.  Messages are written by the services themselves and are safe to
return to clients.  The underlying ``sqlite3`` error, when there is
one, is chained as ``__cause__`` and only ever reaches the logs.

``register_error_handlers`` installs the FastAPI handlers that render
every failure as a JSON object with an ``error`` field.
"""

import logging
from typing import Any, Dict, List

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base class for errors raised by the service layer."""

    kind = "service_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """Input rejected before any statement reached the store."""

    kind = "validation_error"
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(ServiceError):
    """The row an operation targets does not exist."""

    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class ConstraintViolation(ServiceError):
    """A unique, check or foreign-key constraint rejected the write."""

    kind = "constraint_violation"
    status_code = status.HTTP_409_CONFLICT


class TransactionFailed(ServiceError):
    """A multi-statement operation failed and was rolled back."""

    kind = "transaction_failed"


class StoreUnavailable(ServiceError):
    """The database could not be opened or a statement failed."""

    kind = "store_unavailable"


def http_error(exc: ServiceError, fallback: str) -> HTTPException:
    """Translate a service error into an ``HTTPException``.

    Client errors keep the service's message.  Server errors are
    reported with ``fallback`` so that nothing about the store leaks
    into the response.
    """
    if exc.status_code >= 500:
        logger.error("%s: %s", fallback, exc.message, exc_info=exc)
        return HTTPException(status_code=exc.status_code, detail=fallback)
    return HTTPException(status_code=exc.status_code, detail=exc.message)


def _validation_details(exc: RequestValidationError) -> List[Dict[str, Any]]:
    return [
        {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg", "")}
        for error in exc.errors()
    ]


def register_error_handlers(app: FastAPI) -> None:
    """Render HTTP and validation errors as ``{"error": ...}`` bodies."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    # FastAPI answers malformed input with 422; this API uses 400.
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request parameters", "details": _validation_details(exc)},
        )

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        error = http_error(exc, "Internal server error")
        return JSONResponse(status_code=error.status_code, content={"error": error.detail})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )
