"""Exception classes for draftboard."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


class DraftboardError(Exception):
    """Base exception for all draftboard errors."""


class CanvasNotFoundError(DraftboardError):
    """Raised when a canvas is not found in storage.

    Attributes:
        canvas_id: The ID of the canvas that was not found.
    """

    def __init__(self, canvas_id: UUID | str) -> None:
        """Initialize the exception.

        Args:
            canvas_id: The ID of the canvas that was not found.
        """
        super().__init__(f"Canvas with ID {canvas_id} not found")
        self.canvas_id = canvas_id


class ElementNotFoundError(DraftboardError):
    """Raised when an element is not found on a canvas.

    Attributes:
        element_id: The ID of the element that was not found.
        canvas_id: The ID of the canvas that was searched, if known.
    """

    def __init__(self, element_id: UUID | str, canvas_id: UUID | str | None = None) -> None:
        """Initialize the exception.

        Args:
            element_id: The ID of the element that was not found.
            canvas_id: The ID of the canvas.
        """
        message = f"Element with ID {element_id} not found"
        if canvas_id is not None:
            message = f"{message} on canvas {canvas_id}"
        super().__init__(message)
        self.element_id = element_id
        self.canvas_id = canvas_id


class InvalidElementError(DraftboardError):
    """Raised when an element, draft or style value is malformed."""

    def __init__(self, message: str) -> None:
        """Initialize the exception with a custom message.

        Args:
            message: Description of why the element is invalid.
        """
        super().__init__(message)


class InvalidCanvasError(DraftboardError):
    """Raised when canvas properties are out of range."""


class InvalidMessageError(DraftboardError):
    """Raised when a chat message is empty or malformed."""


class StorageError(DraftboardError):
    """Raised when a storage operation fails."""
