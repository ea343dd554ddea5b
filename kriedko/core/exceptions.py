"""
Custom exceptions and handlers for consistent API error responses.

Every error body carries an ``error`` message; API errors also carry an
``error_code`` so the dashboard can tell failures apart without parsing
text.
"""

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class APIError(HTTPException):
    """Base API error with consistent structure"""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code


class ValidationError(APIError):
    """Malformed ingestion or import payload"""

    def __init__(
        self, detail: str = "Invalid payload", error_code: str = "VALIDATION_ERROR"
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code=error_code,
        )


class AuthorizationError(APIError):
    """Missing, invalid or expired admin credential"""

    def __init__(
        self, detail: str = "Unauthorized", error_code: str = "UNAUTHORIZED"
    ):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code=error_code,
        )


class StorageError(Exception):
    """Backend unavailable or write failure, raised at the store boundary"""

    def __init__(self, message: str, backend: Optional[str] = None):
        super().__init__(message)
        self.backend = backend


async def handle_api_error(request: Request, exc: APIError) -> JSONResponse:
    """Handle custom API errors"""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.detail,
            "error_code": exc.error_code,
        },
        headers=exc.headers,
    )


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report bad query parameters in the same shape as other 400s"""
    logger.warning(f"Request validation failed at {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Invalid payload",
            "error_code": "VALIDATION_ERROR",
        },
    )


async def handle_storage_error(request: Request, exc: StorageError) -> JSONResponse:
    """Surface storage failures as a generic 503"""
    logger.error(
        f"StorageError at {request.url.path} (backend={exc.backend}): {exc}"
    )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "error": "Storage unavailable",
            "error_code": "STORAGE_ERROR",
        },
    )


def register_exception_handlers(app):
    """Register all exception handlers with the FastAPI app"""
    app.add_exception_handler(APIError, handle_api_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(StorageError, handle_storage_error)
