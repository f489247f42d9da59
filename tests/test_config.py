"""Tests for settings, rate limiting and logging helpers."""

from __future__ import annotations

import pytest
from litestar import Litestar
from litestar.testing import TestClient

from draftboard.app import create_app
from draftboard.core.logging import MAX_CORRELATION_ID_LENGTH, RequestLoggingMiddleware, resolve_correlation_id
from draftboard.core.rate_limit import RATE_LIMIT_EXEMPT, RateLimitSettings, get_rate_limit_middleware
from draftboard.core.settings import AppSettings
from draftboard.storage.memory import InMemoryStorage


class TestAppSettings:
    """Tests for AppSettings.from_env."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the settings with a clean environment."""
        for name in ("DRAFTBOARD_DEBUG", "DRAFTBOARD_JSON_LOGS", "DRAFTBOARD_STORAGE", "DATABASE_URL", "DATABASE_ECHO"):
            monkeypatch.delenv(name, raising=False)
        settings = AppSettings.from_env()
        assert settings.debug is False
        assert settings.json_logs is False
        assert settings.storage == "memory"
        assert settings.database_url is None

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test reading every variable."""
        monkeypatch.setenv("DRAFTBOARD_DEBUG", "true")
        monkeypatch.setenv("DRAFTBOARD_JSON_LOGS", "1")
        monkeypatch.setenv("DRAFTBOARD_STORAGE", "Database")
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
        monkeypatch.setenv("DATABASE_ECHO", "yes")
        monkeypatch.setenv("RATE_LIMIT_ENABLED", "false")
        settings = AppSettings.from_env()
        assert settings.debug is True
        assert settings.json_logs is True
        assert settings.storage == "database"
        assert settings.database_url == "sqlite+aiosqlite:///:memory:"
        assert settings.database_echo is True
        assert settings.rate_limit.enabled is False

    def test_unknown_storage(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that an unknown backend name is rejected."""
        monkeypatch.setenv("DRAFTBOARD_STORAGE", "redis")
        with pytest.raises(ValueError, match="DRAFTBOARD_STORAGE"):
            AppSettings.from_env()


class TestRateLimit:
    """Tests for the rate limit configuration."""

    def test_disabled(self) -> None:
        """Test that disabled settings produce no middleware."""
        assert get_rate_limit_middleware(RateLimitSettings(enabled=False)) is None

    def test_enabled(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the configured limit."""
        monkeypatch.setenv("RATE_LIMIT_PER_MINUTE", "5")
        config = get_rate_limit_middleware()
        assert config is not None
        assert config.rate_limit == ("minute", 5)
        assert config.exclude_opt_key == RATE_LIMIT_EXEMPT

    def test_limit_applies_to_api(self) -> None:
        """Test that the API answers 429 once the limit is exhausted."""
        settings = AppSettings(rate_limit=RateLimitSettings(requests_per_minute=2))
        app = create_app(settings=settings, storage=InMemoryStorage())
        with TestClient(app=app) as client:
            statuses = [client.get("/api/canvases").status_code for _ in range(3)]
            assert statuses == [200, 200, 429]
            assert client.get("/health").status_code == 200

    def test_health_handlers_are_exempt_by_opt(self) -> None:
        """Test that probes keep answering once the limit is spent, without a path list."""
        settings = AppSettings(rate_limit=RateLimitSettings(requests_per_minute=1, exclude_paths=[]))
        app = create_app(settings=settings, storage=InMemoryStorage())
        with TestClient(app=app) as client:
            assert client.get("/api/canvases").status_code == 200
            assert client.get("/api/canvases").status_code == 429
            for _ in range(3):
                assert client.get("/health").status_code == 200
                assert client.get("/ready").status_code == 200


class TestCorrelationId:
    """Tests for correlation ID resolution."""

    def test_prefers_correlation_header(self) -> None:
        """Test header precedence."""
        headers = {b"x-correlation-id": b"corr", b"x-request-id": b"req"}
        assert resolve_correlation_id(headers) == "corr"

    def test_falls_back_to_request_id(self) -> None:
        """Test the X-Request-ID fallback."""
        assert resolve_correlation_id({b"x-request-id": b"req"}) == "req"

    def test_oversized_id_is_replaced(self) -> None:
        """Test that oversized IDs are not trusted."""
        value = "x" * (MAX_CORRELATION_ID_LENGTH + 1)
        resolved = resolve_correlation_id({b"x-correlation-id": value.encode()})
        assert resolved != value
        assert len(resolved) == 36


class TestRequestLogging:
    """Tests for the request logging middleware."""

    @pytest.mark.parametrize(
        ("path", "excluded"),
        [("/health", True), ("/schema/swagger", True), ("/api/canvases", False)],
    )
    def test_exclusions(self, path: str, excluded: bool) -> None:
        """Test the default exclusion rules."""
        middleware = RequestLoggingMiddleware(Litestar())
        assert middleware.is_excluded(path) is excluded
