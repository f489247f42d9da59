"""Error handling and exception handlers for draftboard.

Provides structured JSON error responses with correlation IDs and proper HTTP
status codes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import structlog
from litestar import Response
from litestar.status_codes import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_422_UNPROCESSABLE_ENTITY,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

if TYPE_CHECKING:
    from litestar import Request
    from litestar.exceptions import HTTPException, ValidationException

logger = structlog.get_logger(__name__)

# Map status codes to error codes
STATUS_CODES: dict[int, str] = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    422: "validation_error",
    429: "rate_limited",
    500: "internal_error",
    502: "bad_gateway",
    503: "service_unavailable",
}


@dataclass
class ErrorDetail:
    """Details about a specific error."""

    field: str | None = None
    message: str = ""
    code: str = "error"


@dataclass
class ErrorResponse:
    """Structured error response format."""

    status: str = "error"
    message: str = ""
    code: str = "internal_error"
    correlation_id: str | None = None
    details: list[ErrorDetail] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON response."""
        result: dict[str, Any] = {
            "status": self.status,
            "message": self.message,
            "code": self.code,
        }
        if self.correlation_id:
            result["correlation_id"] = self.correlation_id
        if self.details:
            result["details"] = [{"field": d.field, "message": d.message, "code": d.code} for d in self.details]
        return result


def get_correlation_id(request: Request) -> str | None:
    """Extract correlation ID from request state or headers."""
    # Try request state first (set by middleware)
    correlation_id = request.state.get("correlation_id")
    if correlation_id:
        return correlation_id
    # Fall back to header
    return request.headers.get("X-Correlation-ID") or request.headers.get("X-Request-ID")


def _json(error_response: ErrorResponse, status_code: int) -> Response[dict[str, Any]]:
    return Response(
        content=error_response.to_dict(),
        status_code=status_code,
        media_type="application/json",
    )


def validation_exception_handler(request: Request, exc: ValidationException) -> Response[dict[str, Any]]:
    """Handle msgspec validation errors with detailed field information.

    Returns a structured response with per-field error details.
    """
    correlation_id = get_correlation_id(request)

    details: list[ErrorDetail] = []

    # Parse validation errors from the exception
    if exc.extra:
        errors = exc.extra if isinstance(exc.extra, list) else [exc.extra]
        for error in errors:
            if isinstance(error, dict):
                # Litestar reports msgspec errors as {"message", "key", "source"}
                loc = error.get("loc")
                field_path = ".".join(str(p) for p in loc) if loc else error.get("key")
                msg = error.get("msg", error.get("message", str(error)))
                error_type = error.get("type", "validation_error")
                details.append(ErrorDetail(field=field_path, message=str(msg), code=error_type))
            else:
                details.append(ErrorDetail(message=str(error), code="validation_error"))

    # If no structured errors, use the exception message
    if not details:
        details.append(ErrorDetail(message=str(exc.detail), code="validation_error"))

    logger.warning(
        "Validation error",
        correlation_id=correlation_id,
        path=request.url.path,
        method=request.method,
        error_count=len(details),
    )

    return _json(
        ErrorResponse(
            message="Validation failed",
            code="validation_error",
            correlation_id=correlation_id,
            details=details,
        ),
        HTTP_422_UNPROCESSABLE_ENTITY,
    )


def http_exception_handler(request: Request, exc: HTTPException) -> Response[dict[str, Any]]:
    """Handle HTTP exceptions with structured responses."""
    correlation_id = get_correlation_id(request)

    error_code = STATUS_CODES.get(exc.status_code, "error")
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)

    log_level = "warning" if exc.status_code < 500 else "error"
    getattr(logger, log_level)(
        "HTTP exception",
        correlation_id=correlation_id,
        path=request.url.path,
        method=request.method,
        status_code=exc.status_code,
        error_code=error_code,
    )

    return _json(
        ErrorResponse(message=message, code=error_code, correlation_id=correlation_id),
        exc.status_code,
    )


def canvas_not_found_handler(request: Request, exc: Exception) -> Response[dict[str, Any]]:
    """Handle CanvasNotFoundError exceptions."""
    correlation_id = get_correlation_id(request)

    canvas_id = getattr(exc, "canvas_id", "unknown")

    logger.warning(
        "Canvas not found",
        correlation_id=correlation_id,
        canvas_id=str(canvas_id),
        path=request.url.path,
    )

    return _json(
        ErrorResponse(
            message=str(exc),
            code="canvas_not_found",
            correlation_id=correlation_id,
            details=[ErrorDetail(field="canvas_id", message=str(exc), code="not_found")],
        ),
        HTTP_404_NOT_FOUND,
    )


def element_not_found_handler(request: Request, exc: Exception) -> Response[dict[str, Any]]:
    """Handle ElementNotFoundError exceptions."""
    correlation_id = get_correlation_id(request)

    element_id = getattr(exc, "element_id", "unknown")

    logger.warning(
        "Element not found",
        correlation_id=correlation_id,
        element_id=str(element_id),
        path=request.url.path,
    )

    return _json(
        ErrorResponse(
            message=str(exc),
            code="element_not_found",
            correlation_id=correlation_id,
            details=[ErrorDetail(field="element_id", message=str(exc), code="not_found")],
        ),
        HTTP_404_NOT_FOUND,
    )


def invalid_input_handler(request: Request, exc: Exception) -> Response[dict[str, Any]]:
    """Handle domain validation errors for elements, canvases and messages."""
    correlation_id = get_correlation_id(request)

    logger.warning(
        "Invalid input",
        correlation_id=correlation_id,
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
    )

    return _json(
        ErrorResponse(
            message=str(exc),
            code="invalid_input",
            correlation_id=correlation_id,
        ),
        HTTP_400_BAD_REQUEST,
    )


def generic_exception_handler(request: Request, exc: Exception) -> Response[dict[str, Any]]:
    """Handle unexpected exceptions with a generic error response.

    Logs the full exception but returns a safe message to the client.
    """
    correlation_id = get_correlation_id(request)

    logger.exception(
        "Unhandled exception",
        correlation_id=correlation_id,
        path=request.url.path,
        method=request.method,
        exc_info=exc,
    )

    return _json(
        ErrorResponse(
            message="An unexpected error occurred. Please try again later.",
            code="internal_error",
            correlation_id=correlation_id,
        ),
        HTTP_500_INTERNAL_SERVER_ERROR,
    )


def get_exception_handlers() -> dict:
    """Get all exception handlers for the application.

    Returns:
        Dictionary mapping exception types to handler functions.

    Note:
        Uses deferred imports to avoid circular dependencies.
    """
    from litestar.exceptions import HTTPException, ValidationException

    from draftboard.exceptions import (
        CanvasNotFoundError,
        ElementNotFoundError,
        InvalidCanvasError,
        InvalidElementError,
        InvalidMessageError,
    )

    return {
        ValidationException: validation_exception_handler,
        HTTPException: http_exception_handler,
        CanvasNotFoundError: canvas_not_found_handler,
        ElementNotFoundError: element_not_found_handler,
        InvalidElementError: invalid_input_handler,
        InvalidCanvasError: invalid_input_handler,
        InvalidMessageError: invalid_input_handler,
        Exception: generic_exception_handler,
    }
