"""Per-client request throttling for the draftboard API.

Built on Litestar's ``RateLimitMiddleware``. Handlers opt out by setting
``RATE_LIMIT_EXEMPT`` in their ``opt`` mapping; the OpenAPI pages are exempt by
path because they are registered by Litestar itself.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from litestar.middleware.rate_limit import RateLimitConfig

RATE_LIMIT_EXEMPT = "exclude_from_rate_limit"


@dataclass
class RateLimitSettings:
    """Throttling settings.

    Attributes:
        enabled: Whether requests are throttled at all.
        requests_per_minute: Requests allowed per client per minute.
        exclude_paths: Path patterns never throttled.
    """

    enabled: bool = True
    requests_per_minute: int = 100
    exclude_paths: list[str] = field(default_factory=lambda: ["/schema"])

    @classmethod
    def from_env(cls) -> RateLimitSettings:
        """Read ``RATE_LIMIT_ENABLED`` and ``RATE_LIMIT_PER_MINUTE``."""
        return cls(
            enabled=os.environ.get("RATE_LIMIT_ENABLED", "true").lower() != "false",
            requests_per_minute=int(os.environ.get("RATE_LIMIT_PER_MINUTE", "100")),
        )


def create_rate_limit_config(settings: RateLimitSettings) -> RateLimitConfig:
    """Build the middleware config for a per-minute limit.

    Args:
        settings: Throttling settings.

    Returns:
        Config throttling every handler not marked with ``RATE_LIMIT_EXEMPT``.
    """
    return RateLimitConfig(
        rate_limit=("minute", settings.requests_per_minute),
        exclude=settings.exclude_paths,
        exclude_opt_key=RATE_LIMIT_EXEMPT,
    )


def get_rate_limit_middleware(settings: RateLimitSettings | None = None) -> RateLimitConfig | None:
    """Return the middleware config, or None when throttling is disabled.

    Args:
        settings: Throttling settings. Read from the environment when omitted.
    """
    settings = settings or RateLimitSettings.from_env()
    if not settings.enabled:
        return None
    return create_rate_limit_config(settings)
