"""Health check endpoints for draftboard.

Provides /health and /ready endpoints for container orchestration
and load balancer health checks.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Any, ClassVar

from litestar import Controller, Response, get
from litestar.status_codes import HTTP_200_OK, HTTP_503_SERVICE_UNAVAILABLE
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from draftboard import __version__
from draftboard.core.rate_limit import RATE_LIMIT_EXEMPT

if TYPE_CHECKING:
    from litestar import Request

    from draftboard.storage.db.setup import DatabaseManager


class HealthStatus(StrEnum):
    """Health check status values."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass
class ComponentHealth:
    """Health status of an individual component."""

    name: str
    status: HealthStatus
    message: str | None = None
    latency_ms: float | None = None


@dataclass
class HealthResponse:
    """Health check response."""

    status: HealthStatus
    version: str = __version__
    timestamp: str = field(default_factory=lambda: datetime.now(UTC).isoformat())
    components: list[ComponentHealth] = field(default_factory=list)


def _db_manager(request: Request) -> DatabaseManager | None:
    return request.app.state.get("db_manager")


async def _ping(db_manager: DatabaseManager) -> float:
    """Run a trivial query and return its latency in milliseconds."""
    start = time.perf_counter()
    async with db_manager.session() as session:
        await session.execute(text("SELECT 1"))
    return round((time.perf_counter() - start) * 1000, 2)


class HealthController(Controller):
    """Health check controller.

    Provides endpoints for liveness and readiness probes used by
    container orchestration systems like Kubernetes.
    """

    path = ""
    tags: ClassVar[list[str]] = ["Health"]

    @get("/health", opt={RATE_LIMIT_EXEMPT: True})
    async def health(self, request: Request) -> HealthResponse:
        """Liveness probe endpoint.

        Returns the overall health status of the application together with
        the storage backend in use.
        """
        storage = request.app.state.get("storage")
        components = [
            ComponentHealth(name="application", status=HealthStatus.HEALTHY, message="Application is running"),
            ComponentHealth(
                name="storage",
                status=HealthStatus.HEALTHY,
                message=type(storage).__name__ if storage is not None else None,
            ),
        ]

        db_manager = _db_manager(request)
        if db_manager is not None:
            try:
                latency = await _ping(db_manager)
            except (SQLAlchemyError, OSError, RuntimeError) as e:
                components.append(
                    ComponentHealth(name="database", status=HealthStatus.UNHEALTHY, message=f"Database error: {e!s}")
                )
            else:
                components.append(
                    ComponentHealth(
                        name="database",
                        status=HealthStatus.HEALTHY,
                        message="Database connection successful",
                        latency_ms=latency,
                    )
                )

        statuses = {c.status for c in components}
        if HealthStatus.UNHEALTHY in statuses:
            overall = HealthStatus.UNHEALTHY
        elif HealthStatus.DEGRADED in statuses:
            overall = HealthStatus.DEGRADED
        else:
            overall = HealthStatus.HEALTHY
        return HealthResponse(status=overall, components=components)

    @get("/ready", opt={RATE_LIMIT_EXEMPT: True})
    async def ready(self, request: Request) -> Response[dict[str, Any]]:
        """Readiness probe endpoint.

        Responds with 503 while a configured database cannot be reached.
        """
        checks: dict[str, bool] = {"application": True}

        db_manager = _db_manager(request)
        if db_manager is not None:
            try:
                await _ping(db_manager)
                checks["database"] = True
            except (SQLAlchemyError, OSError, RuntimeError):
                checks["database"] = False

        ready = all(checks.values())
        return Response(
            content={
                "ready": ready,
                "timestamp": datetime.now(UTC).isoformat(),
                "checks": checks,
            },
            status_code=HTTP_200_OK if ready else HTTP_503_SERVICE_UNAVAILABLE,
        )
