"""Storage backends for draftboard."""

from __future__ import annotations

from typing import TYPE_CHECKING

from draftboard.storage.base import StorageProtocol
from draftboard.storage.memory import InMemoryStorage

if TYPE_CHECKING:
    from draftboard.storage.db import DatabaseStorage

__all__ = ["DatabaseStorage", "InMemoryStorage", "StorageProtocol"]


def __getattr__(name: str) -> object:
    """Lazy import DatabaseStorage so SQLAlchemy is only loaded when used."""
    if name == "DatabaseStorage":
        from draftboard.storage.db import DatabaseStorage

        return DatabaseStorage
    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
