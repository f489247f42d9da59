"""Main Litestar application for draftboard.

This module provides the application factory and a configured app instance
for running draftboard as a standalone service.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import structlog
from litestar import Litestar
from litestar.openapi import OpenAPIConfig

from draftboard import __version__
from draftboard.cli import DraftboardCLIPlugin
from draftboard.core.error_handling import get_exception_handlers
from draftboard.core.logging import configure_logging, get_middleware
from draftboard.core.openapi import get_openapi_plugins
from draftboard.core.rate_limit import get_rate_limit_middleware
from draftboard.core.settings import AppSettings
from draftboard.plugin import DraftboardConfig, DraftboardPlugin
from draftboard.web.health import HealthController

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable
    from contextlib import AbstractAsyncContextManager

    from draftboard.storage.base import StorageProtocol
    from draftboard.storage.db.setup import DatabaseManager

logger = structlog.get_logger(__name__)


def database_lifespan(
    db_manager: DatabaseManager,
) -> Callable[[Litestar], AbstractAsyncContextManager[None]]:
    """Build a lifespan handler that owns ``db_manager``.

    Tables are created on startup and the engine is disposed on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: Litestar) -> AsyncGenerator[None, None]:
        await db_manager.init()
        app.state.db_manager = db_manager
        logger.info("Database initialized", url=db_manager.engine.url.render_as_string(hide_password=True))
        try:
            yield
        finally:
            await db_manager.close()
            app.state.db_manager = None

    return lifespan


def create_app(
    *,
    settings: AppSettings | None = None,
    storage: StorageProtocol | None = None,
) -> Litestar:
    """Create and configure the Litestar application.

    Args:
        settings: Application settings. If None, loads from environment.
        storage: Storage backend to use. When given it takes precedence over
            ``settings.storage``.

    Returns:
        Configured Litestar application instance.
    """
    settings = settings or AppSettings.from_env()
    configure_logging(debug=settings.debug, json_logs=settings.json_logs)

    lifespan = []
    if storage is None and settings.storage == "database":
        from draftboard.storage.db import DatabaseManager, DatabaseStorage

        db_manager = DatabaseManager(settings.database_url, echo=settings.database_echo)
        storage = DatabaseStorage(db_manager.session)
        lifespan.append(database_lifespan(db_manager))

    middleware: list = get_middleware()
    rate_limit_config = get_rate_limit_middleware(settings.rate_limit)
    if rate_limit_config:
        middleware.append(rate_limit_config.middleware)

    return Litestar(
        route_handlers=[HealthController],
        plugins=[
            DraftboardCLIPlugin(),
            DraftboardPlugin(DraftboardConfig(storage=storage, api_path="/api", dependency_key="service")),
        ],
        debug=settings.debug,
        lifespan=lifespan,
        middleware=middleware,
        exception_handlers=get_exception_handlers(),
        openapi_config=OpenAPIConfig(
            title="draftboard API",
            version=__version__,
            description="Canvas and element API with prompt-driven element generation",
            path="/schema",
            render_plugins=get_openapi_plugins(),
            use_handler_docstrings=True,
        ),
    )


# Default application instance for uvicorn and the litestar CLI
app = create_app()
