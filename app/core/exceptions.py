"""
Error taxonomy for the loan management API and the handlers that render
every error as a JSON ``{"error": message}`` body.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError, TimeoutError as PoolTimeoutError

logger = logging.getLogger(__name__)


class MicrofinanceError(Exception):
    """Base exception for all application errors."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class ValidationError(MicrofinanceError):
    """Raised for missing or malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(MicrofinanceError):
    """Raised when a record would duplicate an existing one."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(MicrofinanceError):
    """Raised when an entity is absent or in the wrong state for the operation."""

    status_code = status.HTTP_404_NOT_FOUND


class AuthenticationError(MicrofinanceError):
    """Raised when admin credentials or tokens are rejected."""

    status_code = status.HTTP_401_UNAUTHORIZED


class StoreError(MicrofinanceError):
    """Raised when the database fails; retryable failures map to 503."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, retryable: bool = False):
        super().__init__(message, details)
        self.retryable = retryable
        if retryable:
            self.status_code = status.HTTP_503_SERVICE_UNAVAILABLE


def store_error_from(exc: SQLAlchemyError) -> StoreError:
    """Wrap a SQLAlchemy failure; pool checkout timeouts are retryable."""
    if isinstance(exc, PoolTimeoutError):
        return StoreError("Database connection pool exhausted, retry later", retryable=True)
    return StoreError(f"Database error: {exc.__class__.__name__}")


def _error_response(exc: MicrofinanceError) -> JSONResponse:
    headers = None
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message}, headers=headers)


async def microfinance_error_handler(request: Request, exc: MicrofinanceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return _error_response(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        if location:
            fields.append(".".join(location))
    message = "All fields are required"
    if fields:
        message = f"Missing or invalid field(s): {', '.join(fields)}"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception(f"{request.method} {request.url.path} database failure")
    return _error_response(store_error_from(exc))


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the JSON error handlers to the application"""
    app.add_exception_handler(MicrofinanceError, microfinance_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_error_handler)
