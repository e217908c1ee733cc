"""
Storefront error taxonomy

Shared by all services. Each error carries the HTTP status it maps to;
register_error_handlers() installs the FastAPI handlers that render them.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class StorefrontError(Exception):
    """Base exception for storefront errors"""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "INTERNAL_ERROR"

    def __init__(self, message: str = "", details=None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(StorefrontError):
    """Malformed or missing input"""
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "VALIDATION_ERROR"


class NotFoundError(StorefrontError):
    """Referenced entity does not exist"""
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"


class ConflictError(StorefrontError):
    """Duplicate entity or conflicting state transition"""
    status_code = status.HTTP_409_CONFLICT
    error_code = "CONFLICT"


class ForbiddenError(StorefrontError):
    """Account is blocked"""
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "FORBIDDEN"


class ExpiredError(StorefrontError):
    """No live verification code (never requested or expired)"""
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "CODE_EXPIRED"


class InvalidCodeError(StorefrontError):
    """Verification code does not match"""
    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "INVALID_CODE"


class DeliveryError(StorefrontError):
    """Verification code could not be dispatched"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "DELIVERY_FAILED"


class GatewayError(StorefrontError):
    """Failure envelope returned by an external gateway"""
    status_code = status.HTTP_502_BAD_GATEWAY
    error_code = "GATEWAY_ERROR"

    def __init__(self, message: str = "", details=None, rejected: bool = False):
        super().__init__(message, details)
        # Provider answered and refused the request (4xx) vs. unreachable/5xx
        if rejected:
            self.status_code = status.HTTP_400_BAD_REQUEST


def register_error_handlers(app: FastAPI) -> None:
    """Install JSON error handlers for the storefront taxonomy"""

    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(request: Request, exc: StorefrontError):
        if exc.status_code >= 500:
            logger.error(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")
        content = {"detail": exc.message, "error_code": exc.error_code}
        if isinstance(exc, GatewayError) and exc.details is not None:
            content["error"] = exc.details
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error", "error_code": "INTERNAL_ERROR"},
        )


__all__ = [
    "StorefrontError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "ForbiddenError",
    "ExpiredError",
    "InvalidCodeError",
    "DeliveryError",
    "GatewayError",
    "register_error_handlers",
]
