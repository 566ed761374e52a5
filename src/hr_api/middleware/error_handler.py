"""Global error handling to map domain errors and prevent information disclosure."""

import logging
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from hr_api.exceptions import (
    ConfigurationError,
    ConflictError,
    ForbiddenError,
    HRAPIError,
    NotFoundError,
    UnauthenticatedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Domain error kinds, most specific first
DOMAIN_ERROR_STATUS: list[tuple[type[HRAPIError], int, str]] = [
    (UnauthenticatedError, status.HTTP_401_UNAUTHORIZED, "UNAUTHENTICATED"),
    (ForbiddenError, status.HTTP_403_FORBIDDEN, "FORBIDDEN"),
    (NotFoundError, status.HTTP_404_NOT_FOUND, "NOT_FOUND"),
    (ConflictError, status.HTTP_409_CONFLICT, "CONFLICT"),
    (ValidationError, status.HTTP_400_BAD_REQUEST, "BAD_REQUEST"),
    (ConfigurationError, status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL"),
]

# Safe error messages that can be shown to users
SAFE_ERROR_MESSAGES = {
    400: "Invalid request",
    401: "Authentication required",
    403: "Access denied",
    404: "Resource not found",
    405: "Method not allowed",
    409: "Conflict with existing resource",
    422: "Invalid input data",
    500: "Internal server error",
    503: "Service temporarily unavailable",
}


def _is_debug(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return bool(settings and settings.debug)


def _get_cors_headers(request: Request) -> dict[str, str]:
    """Get CORS headers for error responses.

    Exception handlers run outside the CORS middleware, so allowed
    origins need the headers added here.

    Args:
        request: The incoming request

    Returns:
        Dict of CORS headers to add to the response
    """
    origin = request.headers.get("origin")
    settings = getattr(request.app.state, "settings", None)
    if not origin or settings is None:
        return {}

    if origin in settings.cors_origins_list:
        return {
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Credentials": "true",
        }

    return {}


def classify_domain_error(exc: HRAPIError) -> tuple[int, str]:
    """Get the HTTP status and error kind for a domain exception.

    Args:
        exc: Domain exception

    Returns:
        Tuple of (status_code, kind)
    """
    for error_type, status_code, kind in DOMAIN_ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code, kind
    return status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL"


def sanitize_error_detail(detail: Any, status_code: int) -> str:
    """Sanitize error detail to prevent information disclosure.

    Args:
        detail: Original error detail
        status_code: HTTP status code

    Returns:
        Safe error message
    """
    if isinstance(detail, list):
        # Validation errors - extract safe field information
        safe_errors = []
        for error in detail:
            if isinstance(error, dict):
                loc = error.get("loc", [])
                msg = error.get("msg", "Invalid value")
                # Only include field name, not detailed type information
                field = loc[-1] if loc else "field"
                if isinstance(field, str) and not field.startswith("_"):
                    safe_errors.append(f"{field}: {msg}")
        if safe_errors:
            return "; ".join(safe_errors[:3])  # Limit to 3 errors

    return SAFE_ERROR_MESSAGES.get(status_code, "Request failed")


async def domain_exception_handler(request: Request, exc: HRAPIError) -> JSONResponse:
    """Map domain exceptions to their HTTP status.

    Domain messages never carry internals and are returned as-is.

    Args:
        request: FastAPI request
        exc: Domain exception

    Returns:
        JSONResponse with the error kind, message and details
    """
    status_code, kind = classify_domain_error(exc)

    if status_code >= 500:
        logger.error(f"{type(exc).__name__} for {request.url.path}: {exc.message}")
    else:
        logger.info(f"{kind} for {request.method} {request.url.path}: {exc.message}")

    content: dict[str, Any] = {"detail": exc.message, "code": kind}
    if exc.details:
        content["details"] = exc.details

    headers = _get_cors_headers(request)
    if isinstance(exc, UnauthenticatedError):
        headers["WWW-Authenticate"] = "Bearer"

    return JSONResponse(status_code=status_code, content=content, headers=headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions with sanitized messages.

    Args:
        request: FastAPI request
        exc: HTTP exception

    Returns:
        JSONResponse with sanitized error
    """
    cors_headers = _get_cors_headers(request)

    # In debug mode, return original detail
    if _is_debug(request):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=cors_headers,
        )

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": sanitize_error_detail(exc.detail, exc.status_code)},
        headers=cors_headers,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle validation exceptions with sanitized messages.

    Args:
        request: FastAPI request
        exc: Validation exception

    Returns:
        JSONResponse with sanitized error
    """
    cors_headers = _get_cors_headers(request)

    logger.warning(f"Validation error for {request.url.path}: {len(exc.errors())} error(s)")

    if _is_debug(request):
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": exc.errors()},
            headers=cors_headers,
        )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": sanitize_error_detail(exc.errors(), status.HTTP_422_UNPROCESSABLE_ENTITY)},
        headers=cors_headers,
    )


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Handle SQLAlchemy exceptions without leaking database details.

    Args:
        request: FastAPI request
        exc: SQLAlchemy exception

    Returns:
        JSONResponse with safe error
    """
    cors_headers = _get_cors_headers(request)

    logger.error(f"Database error for {request.url.path}: {type(exc).__name__}", exc_info=True)

    # Integrity errors lost a race against a concurrent write
    if isinstance(exc, IntegrityError):
        message = str(exc.orig).lower() if exc.orig else ""
        if "unique" in message or "duplicate" in message:
            return JSONResponse(
                status_code=status.HTTP_409_CONFLICT,
                content={"detail": "Resource already exists", "code": "CONFLICT"},
                headers=cors_headers,
            )
        if "foreign key" in message:
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={"detail": "Referenced resource not found", "code": "BAD_REQUEST"},
                headers=cors_headers,
            )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error occurred", "code": "INTERNAL"},
        headers=cors_headers,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions without leaking information.

    Args:
        request: FastAPI request
        exc: Unexpected exception

    Returns:
        JSONResponse with generic error
    """
    cors_headers = _get_cors_headers(request)

    logger.error(f"Unhandled exception for {request.url.path}: {exc}", exc_info=True)

    if _is_debug(request):
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": str(exc), "type": type(exc).__name__},
            headers=cors_headers,
        )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": SAFE_ERROR_MESSAGES[500]},
        headers=cors_headers,
    )
