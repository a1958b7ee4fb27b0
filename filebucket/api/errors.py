"""
Exception handlers mapping failures to HTTP responses.

Every error response has the same body shape:
    {"error": <kind>, "message": <text>, "detail": <object>}

- InvalidPayloadError and request validation errors -> 400
- StorageError -> 502 (the object store failed, not us or the caller)
- anything else -> 500

A failing request never takes the server down with it.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..core.files.errors import InvalidPayloadError
from ..infrastructure.storage.client import StorageError

logger = logging.getLogger(__name__)


def _error_response(status_code: int, error: str, message: str, detail) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "message": message, "detail": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers. Call once from create_app."""

    @app.exception_handler(InvalidPayloadError)
    async def invalid_payload_handler(request: Request, exc: InvalidPayloadError):
        logger.warning(
            "Invalid payload",
            extra={"path": request.url.path, "error": exc.message}
        )
        return _error_response(
            status.HTTP_400_BAD_REQUEST,
            "InvalidPayloadError",
            exc.message,
            exc.detail,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Bad JSON or wrong body shape is a client error, not a 422."""
        errors = [
            {
                "loc": list(error.get("loc", [])),
                "msg": error.get("msg", ""),
                "type": error.get("type", ""),
            }
            for error in exc.errors()
        ]
        logger.warning(
            "Request validation error",
            extra={"path": request.url.path, "errors": errors}
        )
        return _error_response(
            status.HTTP_400_BAD_REQUEST,
            "ValidationError",
            "Invalid request body.",
            errors,
        )

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error(
            "Storage operation failed",
            extra={
                "path": request.url.path,
                "error": exc.message,
                "detail": exc.detail,
            }
        )
        return _error_response(
            status.HTTP_502_BAD_GATEWAY,
            "StorageError",
            "Object storage operation failed.",
            exc.detail,
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all exception handler.

        Logs the full error server-side but returns a generic message.
        """
        logger.error(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "InternalServerError",
            "Internal server error.",
            {},
        )
