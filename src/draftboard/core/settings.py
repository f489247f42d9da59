"""Application settings for draftboard, read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Literal

from draftboard.core.rate_limit import RateLimitSettings

StorageBackend = Literal["memory", "database"]

_TRUTHY = ("true", "1", "yes")


def _env_flag(name: str, default: str = "") -> bool:
    return os.environ.get(name, default).lower() in _TRUTHY


@dataclass
class AppSettings:
    """Top-level settings for the standalone application.

    Attributes:
        debug: Enable Litestar debug mode and debug level logging.
        json_logs: Render logs as JSON instead of colored console output.
        storage: Which storage backend the app should use.
        database_url: Async SQLAlchemy URL, used when ``storage`` is "database".
        database_echo: Echo SQL statements.
        rate_limit: Rate limiting settings.
    """

    debug: bool = False
    json_logs: bool = False
    storage: StorageBackend = "memory"
    database_url: str | None = None
    database_echo: bool = False
    rate_limit: RateLimitSettings = field(default_factory=RateLimitSettings)

    @classmethod
    def from_env(cls) -> AppSettings:
        """Create settings from environment variables.

        Environment variables:
            DRAFTBOARD_DEBUG: "true" enables debug mode.
            DRAFTBOARD_JSON_LOGS: "true" switches to JSON log output.
            DRAFTBOARD_STORAGE: "memory" (default) or "database".
            DATABASE_URL: Database connection URL.
            DATABASE_ECHO: "true" echoes SQL statements.

        Returns:
            AppSettings configured from environment.

        Raises:
            ValueError: If DRAFTBOARD_STORAGE names an unknown backend.
        """
        storage = os.environ.get("DRAFTBOARD_STORAGE", "memory").lower()
        if storage not in ("memory", "database"):
            msg = f"DRAFTBOARD_STORAGE must be 'memory' or 'database', got {storage!r}"
            raise ValueError(msg)
        return cls(
            debug=_env_flag("DRAFTBOARD_DEBUG"),
            json_logs=_env_flag("DRAFTBOARD_JSON_LOGS"),
            storage=storage,  # type: ignore[arg-type]
            database_url=os.environ.get("DATABASE_URL") or None,
            database_echo=_env_flag("DATABASE_ECHO"),
            rate_limit=RateLimitSettings.from_env(),
        )
