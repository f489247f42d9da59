"""Structured logging configuration with correlation IDs for draftboard.

Provides request/response logging middleware and structured logging setup.
"""

from __future__ import annotations

import logging
import time
import uuid
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from litestar.types import ASGIApp, Message, Receive, Scope, Send

# Incoming IDs longer than this are replaced with a fresh one.
MAX_CORRELATION_ID_LENGTH = 128

DEFAULT_EXCLUDE_PATHS = frozenset({"/health", "/ready", "/favicon.ico"})
DEFAULT_EXCLUDE_PREFIXES = ("/schema",)


def configure_logging(*, debug: bool = False, json_logs: bool = False) -> None:
    """Configure structured logging for the application.

    Args:
        debug: Enable debug level logging.
        json_logs: Output logs as JSON (for production).
    """
    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_logs:
        processors.extend(
            [
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ]
        )
    else:
        processors.extend(
            [
                structlog.processors.ExceptionPrettyPrinter(),
                structlog.dev.ConsoleRenderer(colors=True),
            ]
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG if debug else logging.INFO),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def _header(headers: dict[bytes, bytes], name: bytes) -> str:
    return headers.get(name, b"").decode("latin-1").strip()


def resolve_correlation_id(headers: dict[bytes, bytes]) -> str:
    """Pick the correlation ID for a request.

    Uses X-Correlation-ID, then X-Request-ID, and falls back to a new UUID
    when neither is present or the supplied value is oversized.
    """
    candidate = _header(headers, b"x-correlation-id") or _header(headers, b"x-request-id")
    if candidate and len(candidate) <= MAX_CORRELATION_ID_LENGTH:
        return candidate
    return str(uuid.uuid4())


class CorrelationIdMiddleware:
    """Middleware that adds correlation IDs to all requests.

    The ID is stored in the request state, bound to the structlog context for
    the duration of the request and echoed in the ``X-Correlation-ID``
    response header.
    """

    def __init__(self, app: ASGIApp) -> None:
        """Initialize the middleware.

        Args:
            app: The ASGI application.
        """
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Process the request and add correlation ID."""
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        correlation_id = resolve_correlation_id(dict(scope.get("headers", [])))

        if "state" not in scope:
            scope["state"] = {}
        scope["state"]["correlation_id"] = correlation_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            correlation_id=correlation_id,
            path=scope.get("path", ""),
            method=scope.get("method", ""),
        )

        async def send_wrapper(message: Message) -> None:
            """Add correlation ID to response headers."""
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                headers.append((b"x-correlation-id", correlation_id.encode("latin-1")))
                message["headers"] = headers
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            structlog.contextvars.clear_contextvars()


class RequestLoggingMiddleware:
    """Middleware that logs one line per completed request.

    The log level follows the response status: errors for 5xx, warnings for
    4xx and info otherwise. Probe and docs paths are skipped.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        exclude_paths: frozenset[str] | set[str] | None = None,
        exclude_prefixes: tuple[str, ...] = DEFAULT_EXCLUDE_PREFIXES,
    ) -> None:
        """Initialize the middleware.

        Args:
            app: The ASGI application.
            exclude_paths: Exact paths to exclude from logging.
            exclude_prefixes: Path prefixes to exclude from logging.
        """
        self.app = app
        self.exclude_paths = exclude_paths if exclude_paths is not None else DEFAULT_EXCLUDE_PATHS
        self.exclude_prefixes = exclude_prefixes

    def is_excluded(self, path: str) -> bool:
        """Return True if requests to ``path`` should not be logged."""
        return path in self.exclude_paths or path.startswith(self.exclude_prefixes)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Process the request and log information."""
        if scope["type"] != "http" or self.is_excluded(scope.get("path", "")):
            await self.app(scope, receive, send)
            return

        logger = structlog.get_logger(__name__)
        start_time = time.perf_counter()
        status_code = 500

        client = scope.get("client")
        client_ip = client[0] if client else "unknown"

        async def send_wrapper(message: Message) -> None:
            """Capture response status code."""
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status", 500)
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception:
            logger.exception("Request failed with exception", client_ip=client_ip)
            raise
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000

            if status_code >= 500:
                log_method = logger.error
            elif status_code >= 400:
                log_method = logger.warning
            else:
                log_method = logger.info

            log_method(
                "Request completed",
                status_code=status_code,
                duration_ms=round(duration_ms, 2),
                client_ip=client_ip,
            )


def get_middleware() -> list:
    """Get the logging middleware stack.

    Returns:
        List of middleware classes in the order they should be applied.
    """
    return [
        CorrelationIdMiddleware,
        RequestLoggingMiddleware,
    ]
