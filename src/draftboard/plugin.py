"""Litestar plugin for draftboard integration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from litestar.di import Provide
from litestar.plugins import InitPluginProtocol

from draftboard.services.canvas import CanvasService
from draftboard.storage.memory import InMemoryStorage
from draftboard.web.router import create_router

if TYPE_CHECKING:
    from litestar.config.app import AppConfig

    from draftboard.storage.base import StorageProtocol


@dataclass
class DraftboardConfig:
    """Configuration for the draftboard plugin.

    Attributes:
        storage: Storage backend to use for canvas persistence. If None,
            InMemoryStorage will be used by default.
        enable_api: Whether to mount the REST API routes. Defaults to True.
        api_path: Base path for mounting API routes. Defaults to "/api".
        dependency_key: Dependency injection key for CanvasService. This key
            is used to access the service in route handlers via DI.
            Defaults to "service".

    Example:
        >>> from draftboard.storage.memory import InMemoryStorage
        >>> config = DraftboardConfig(storage=InMemoryStorage(), api_path="/api/v1")
    """

    storage: StorageProtocol | None = None
    enable_api: bool = True
    api_path: str = "/api"
    dependency_key: str = "service"


class DraftboardPlugin(InitPluginProtocol):
    """Litestar plugin for draftboard integration.

    Configures dependency injection for the CanvasService, publishes the
    storage backend on the application state and optionally mounts the
    REST API routes.

    Example:
        >>> from litestar import Litestar
        >>> from draftboard import DraftboardPlugin, DraftboardConfig
        >>>
        >>> app = Litestar(plugins=[DraftboardPlugin(DraftboardConfig())])

        Accessing the service in route handlers:

        >>> from litestar import get
        >>> from draftboard.services.canvas import CanvasService
        >>>
        >>> @get("/count")
        ... async def count_canvases(service: CanvasService) -> dict:
        ...     canvases = await service.list_canvases()
        ...     return {"count": len(canvases)}
    """

    def __init__(self, config: DraftboardConfig | None = None) -> None:
        """Initialize the plugin with optional configuration.

        Args:
            config: Plugin configuration. If None, DraftboardConfig with
                default values will be used.
        """
        self._config = config or DraftboardConfig()
        self._storage: StorageProtocol | None = None
        self._service: CanvasService | None = None

    def on_app_init(self, app_config: AppConfig) -> AppConfig:
        """Register the service provider and mount the API router.

        Args:
            app_config: The Litestar application configuration object.

        Returns:
            The modified application configuration.
        """
        self._storage = self._config.storage or InMemoryStorage()
        self._service = CanvasService(self._storage)

        def provide_service() -> CanvasService:
            """Dependency provider for CanvasService."""
            if self._service is None:
                msg = "Service not initialized"
                raise RuntimeError(msg)
            return self._service

        app_config.dependencies[self._config.dependency_key] = Provide(
            provide_service,
            sync_to_thread=False,
        )
        app_config.state["storage"] = self._storage

        if self._config.enable_api:
            app_config.route_handlers.append(create_router(path=self._config.api_path))

        return app_config

    @property
    def storage(self) -> StorageProtocol:
        """Get the initialized storage backend.

        Raises:
            RuntimeError: If on_app_init has not run yet.
        """
        if self._storage is None:
            msg = "Plugin not initialized. Call on_app_init first."
            raise RuntimeError(msg)
        return self._storage

    @property
    def service(self) -> CanvasService:
        """Get the initialized canvas service.

        Raises:
            RuntimeError: If on_app_init has not run yet.
        """
        if self._service is None:
            msg = "Plugin not initialized. Call on_app_init first."
            raise RuntimeError(msg)
        return self._service
