"""draftboard: a Litestar API for canvases, styled elements and prompt-driven drafting.

This package provides domain models for canvases and their elements, a
deterministic prompt interpreter that turns free text into element drafts,
in-memory and SQLAlchemy storage backends, a service layer, REST API
controllers and a Litestar plugin for integration.

Key Components:
    - Core Models: Canvas, Element, ElementDraft, ChatMessage, styles and props
    - Interpreter: generate() turns a prompt into element drafts
    - Storage: InMemoryStorage, DatabaseStorage, StorageProtocol
    - Services: CanvasService (business logic layer)
    - Web: REST API controllers and routers
    - Plugin: DraftboardPlugin for Litestar integration

Quick Start:
    >>> from litestar import Litestar
    >>> from draftboard import DraftboardPlugin, DraftboardConfig
    >>>
    >>> app = Litestar(plugins=[DraftboardPlugin(DraftboardConfig())])
"""

from __future__ import annotations

__version__ = "0.1.0"

from draftboard.core import (
    Canvas,
    ChatMessage,
    ChatRole,
    ContextElement,
    Element,
    ElementDraft,
    ElementType,
    FillStyle,
    LineProps,
    Point,
    RectangleProps,
    Size,
    StrokeCap,
    StrokeJoin,
    StrokeStyle,
    TextAlign,
    TextProps,
    TextStyle,
    generate,
)
from draftboard.exceptions import (
    CanvasNotFoundError,
    DraftboardError,
    ElementNotFoundError,
    InvalidCanvasError,
    InvalidElementError,
    InvalidMessageError,
    StorageError,
)
from draftboard.plugin import DraftboardConfig, DraftboardPlugin
from draftboard.services import CanvasService
from draftboard.storage import InMemoryStorage, StorageProtocol
from draftboard.web import CanvasController, ChatController, ElementController, GenerationController, create_router

__all__ = [
    "Canvas",
    "CanvasController",
    "CanvasNotFoundError",
    "CanvasService",
    "ChatController",
    "ChatMessage",
    "ChatRole",
    "ContextElement",
    "DraftboardConfig",
    "DraftboardError",
    "DraftboardPlugin",
    "Element",
    "ElementController",
    "ElementDraft",
    "ElementNotFoundError",
    "ElementType",
    "FillStyle",
    "GenerationController",
    "InMemoryStorage",
    "InvalidCanvasError",
    "InvalidElementError",
    "InvalidMessageError",
    "LineProps",
    "Point",
    "RectangleProps",
    "Size",
    "StorageError",
    "StorageProtocol",
    "StrokeCap",
    "StrokeJoin",
    "StrokeStyle",
    "TextAlign",
    "TextProps",
    "TextStyle",
    "__version__",
    "create_router",
    "generate",
]
