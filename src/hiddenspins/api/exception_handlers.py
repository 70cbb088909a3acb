"""Custom exception handlers for FastAPI application.

Converts domain exceptions and request validation errors into JSON responses:

    ValidationError      -> 422  {"detail", "kind", "platform"}
    EntityNotFoundError  -> 404
    RemoteError          -> 502
    ConfigurationError   -> 503
    PartialFailureError  -> 200  (only if a route lets it escape; publish handles it itself)
    other DomainException-> 400
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from hiddenspins.domain.exceptions import (
    ConfigurationError,
    DomainException,
    EntityNotFoundError,
    PartialFailureError,
    RemoteError,
    ValidationError,
)

logger = logging.getLogger(__name__)


# Hey future me - exc.errors() can carry the raw request body as bytes in "input",
# which JSONResponse can't serialize. Walk the structure and decode bytes first.
def _sanitize_validation_errors(errors: list[Any]) -> list[Any]:
    def _sanitize(value: Any) -> Any:
        if isinstance(value, bytes):
            return value.decode("utf-8", errors="replace")
        if isinstance(value, dict):
            return {k: _sanitize(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [_sanitize(item) for item in value]
        return value

    return [_sanitize(error) for error in errors]


def register_exception_handlers(app: FastAPI) -> None:
    """Register handlers for the domain taxonomy. Call during app setup."""

    @app.exception_handler(ValidationError)
    async def validation_error_handler(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        """Bad artist submission or blank ids -> 422."""
        logger.warning(
            "Validation error at %s: %s",
            request.url.path,
            exc.message,
            extra={"path": request.url.path, "kind": exc.kind.value, "error": exc.message},
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": exc.message, "kind": exc.kind.value, "platform": exc.platform},
        )

    @app.exception_handler(EntityNotFoundError)
    async def entity_not_found_handler(
        request: Request, exc: EntityNotFoundError
    ) -> JSONResponse:
        logger.info(
            "Entity not found at %s: %s %s",
            request.url.path,
            exc.entity_type,
            exc.entity_id,
            extra={
                "path": request.url.path,
                "entity_type": exc.entity_type,
                "entity_id": str(exc.entity_id),
            },
        )
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": exc.message},
        )

    @app.exception_handler(RemoteError)
    async def remote_error_handler(request: Request, exc: RemoteError) -> JSONResponse:
        """Store/image host failures -> 502. The cause chain goes to the log only."""
        logger.error(
            "Remote failure at %s: %s",
            request.url.path,
            exc.message,
            exc_info=exc,
            extra={"path": request.url.path, "error": exc.message},
        )
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"detail": exc.message},
        )

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(
        request: Request, exc: ConfigurationError
    ) -> JSONResponse:
        logger.error(
            "Configuration error at %s: %s",
            request.url.path,
            exc.message,
            extra={"path": request.url.path, "error": exc.message},
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": exc.message},
        )

    @app.exception_handler(PartialFailureError)
    async def partial_failure_handler(
        request: Request, exc: PartialFailureError
    ) -> JSONResponse:
        """Non-fatal: the main work is done, report it as success with a warning."""
        logger.warning(
            "Partial failure at %s: %s",
            request.url.path,
            exc.message,
            extra={"path": request.url.path, "orphan_id": exc.orphan_id},
        )
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content={"warning": exc.message, "orphanId": exc.orphan_id},
        )

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request, exc: DomainException
    ) -> JSONResponse:
        logger.warning(
            "Domain error at %s: %s",
            request.url.path,
            exc.message,
            extra={"path": request.url.path, "error": exc.message},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": exc.message},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Malformed request body/query -> 422 with pydantic's error list."""
        errors = _sanitize_validation_errors(list(exc.errors()))
        logger.warning(
            "Request validation error at %s: %s",
            request.url.path,
            errors,
            extra={"path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": jsonable_encoder(errors)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        level = logging.ERROR if exc.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "HTTP error %d at %s: %s",
            exc.status_code,
            request.url.path,
            exc.detail,
            extra={"path": request.url.path, "status_code": exc.status_code},
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
        )
