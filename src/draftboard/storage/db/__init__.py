"""Database storage backend for draftboard.

This module provides SQLAlchemy-based persistent storage. Components are
imported lazily so that importing the package does not pull in SQLAlchemy.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from draftboard.storage.db.models import CanvasModel, ChatMessageModel, ElementModel
    from draftboard.storage.db.setup import DatabaseManager
    from draftboard.storage.db.storage import DatabaseStorage

__all__ = [
    "CanvasModel",
    "ChatMessageModel",
    "DatabaseManager",
    "DatabaseStorage",
    "ElementModel",
]


def __getattr__(name: str) -> object:
    """Lazy import database components."""
    if name == "DatabaseStorage":
        from draftboard.storage.db.storage import DatabaseStorage

        return DatabaseStorage
    if name == "DatabaseManager":
        from draftboard.storage.db.setup import DatabaseManager

        return DatabaseManager
    if name in {"CanvasModel", "ChatMessageModel", "ElementModel"}:
        from draftboard.storage.db import models

        return getattr(models, name)
    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
