"""Pytest configuration and fixtures for draftboard tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from litestar import Litestar
from litestar.testing import TestClient

from draftboard.app import create_app
from draftboard.core.models import Canvas, ElementDraft, LineProps, Point, RectangleProps, Size, TextProps
from draftboard.core.rate_limit import RateLimitSettings
from draftboard.core.settings import AppSettings
from draftboard.core.style import FillStyle, StrokeStyle, TextStyle
from draftboard.core.types import ElementType
from draftboard.services.canvas import CanvasService
from draftboard.storage.memory import InMemoryStorage

# Storage and service fixtures


@pytest.fixture
def storage() -> InMemoryStorage:
    """Create a fresh InMemoryStorage instance for each test."""
    return InMemoryStorage()


@pytest.fixture
def service(storage: InMemoryStorage) -> CanvasService:
    """Create a CanvasService on top of the in-memory storage."""
    return CanvasService(storage)


# Model fixtures


@pytest.fixture
def sample_canvas() -> Canvas:
    """Create a sample canvas for testing."""
    return Canvas(name="Test Canvas", width=800, height=600)


@pytest.fixture
def rectangle_draft() -> ElementDraft:
    """Create a filled rectangle draft."""
    return ElementDraft(
        element_type=ElementType.RECTANGLE,
        position=Point(x=50, y=50),
        size=Size(width=100, height=75),
        fill=FillStyle(color="#10B981", opacity=0.5),
        stroke=StrokeStyle(color="#000000", width=2.0),
        rectangle_props=RectangleProps(border_radius=4.0),
    )


@pytest.fixture
def line_draft() -> ElementDraft:
    """Create a line draft."""
    return ElementDraft(
        element_type=ElementType.LINE,
        position=Point(x=10, y=20),
        stroke=StrokeStyle(color="#1E40AF", width=2.0),
        line_props=LineProps(x1=10, y1=20, x2=110, y2=20),
    )


@pytest.fixture
def text_draft() -> ElementDraft:
    """Create a text draft."""
    return ElementDraft(
        element_type=ElementType.TEXT,
        position=Point(x=100, y=100),
        size=Size(width=200, height=24),
        fill=FillStyle(color="#000000"),
        text_style=TextStyle(font_size=16, font_weight=700),
        text_props=TextProps(content="Hello"),
    )


# App and client fixtures


@pytest.fixture
def app_settings() -> AppSettings:
    """Settings for an in-memory app without rate limiting."""
    return AppSettings(storage="memory", rate_limit=RateLimitSettings(enabled=False))


@pytest.fixture
def app(app_settings: AppSettings) -> Litestar:
    """Create the draftboard application backed by in-memory storage."""
    return create_app(settings=app_settings, storage=InMemoryStorage())


@pytest.fixture
def client(app: Litestar) -> Iterator[TestClient[Litestar]]:
    """Create a test client for the app."""
    with TestClient(app=app) as client:
        yield client
