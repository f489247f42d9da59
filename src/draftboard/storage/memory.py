"""In-memory storage implementation for draftboard."""

from __future__ import annotations

import asyncio
from copy import deepcopy
from dataclasses import replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from draftboard.core.models import Element
from draftboard.exceptions import CanvasNotFoundError, ElementNotFoundError

if TYPE_CHECKING:
    from uuid import UUID

    from draftboard.core.models import Canvas, ChatMessage, ElementDraft


class InMemoryStorage:
    """Coroutine-safe in-memory storage implementation.

    This storage backend keeps canvases, elements and chat messages in
    dictionaries. Access is serialized through an asyncio lock and callers only
    ever see copies, so mutating a returned object never changes stored data.

    Note:
        All data is lost when the application stops. This storage is suitable for
        development, testing, or ephemeral sessions.

    Attributes:
        _canvases: Canvas ID to Canvas.
        _elements: Canvas ID to its elements, keyed by element ID.
        _messages: Canvas ID to its chat messages in insertion order.
        _lock: Asyncio lock for coroutine-safe operations.
    """

    def __init__(self) -> None:
        """Initialize the in-memory storage with empty collections."""
        self._canvases: dict[UUID, Canvas] = {}
        self._elements: dict[UUID, dict[UUID, Element]] = {}
        self._messages: dict[UUID, list[ChatMessage]] = {}
        self._lock = asyncio.Lock()

    def _require_canvas(self, canvas_id: UUID) -> Canvas:
        canvas = self._canvases.get(canvas_id)
        if canvas is None:
            raise CanvasNotFoundError(canvas_id)
        return canvas

    def _touch_canvas(self, canvas_id: UUID) -> None:
        canvas = self._canvases[canvas_id]
        self._canvases[canvas_id] = replace(canvas, updated_at=datetime.now(UTC))

    async def create_canvas(self, canvas: Canvas) -> Canvas:
        """Create a new canvas in storage.

        Args:
            canvas: The canvas to create.

        Returns:
            A copy of the created canvas.
        """
        async with self._lock:
            # Store a copy to prevent external modification
            self._canvases[canvas.id] = replace(canvas)
            self._elements[canvas.id] = {}
            self._messages[canvas.id] = []
            return replace(canvas)

    async def get_canvas(self, canvas_id: UUID) -> Canvas | None:
        """Retrieve a canvas by its ID.

        Args:
            canvas_id: The unique identifier of the canvas.

        Returns:
            A copy of the canvas if found, None otherwise.
        """
        async with self._lock:
            canvas = self._canvases.get(canvas_id)
            return replace(canvas) if canvas else None

    async def list_canvases(self) -> list[Canvas]:
        """List all canvases in storage.

        Returns:
            A list of canvas copies, ordered by creation date (newest first).
        """
        async with self._lock:
            canvases = [replace(canvas) for canvas in self._canvases.values()]
            return sorted(canvases, key=lambda c: c.created_at, reverse=True)

    async def update_canvas(self, canvas: Canvas) -> Canvas:
        """Update an existing canvas in storage.

        Args:
            canvas: The canvas with updated data.

        Returns:
            A copy of the updated canvas.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
        """
        async with self._lock:
            self._require_canvas(canvas.id)
            updated_canvas = replace(canvas, updated_at=datetime.now(UTC))
            self._canvases[canvas.id] = updated_canvas
            return replace(updated_canvas)

    async def delete_canvas(self, canvas_id: UUID) -> bool:
        """Delete a canvas with its elements and chat messages.

        Args:
            canvas_id: The unique identifier of the canvas to delete.

        Returns:
            True if the canvas was deleted, False if it did not exist.
        """
        async with self._lock:
            if canvas_id not in self._canvases:
                return False
            del self._canvases[canvas_id]
            self._elements.pop(canvas_id, None)
            self._messages.pop(canvas_id, None)
            return True

    async def add_element(
        self,
        canvas_id: UUID,
        draft: ElementDraft,
        *,
        z_index: int = 0,
        visible: bool = True,
        locked: bool = False,
    ) -> Element:
        """Store a draft as a new element on a canvas.

        Args:
            canvas_id: The unique identifier of the canvas.
            draft: The element specification to store.
            z_index: Layer ordering for the new element.
            visible: Whether the element is rendered.
            locked: Whether the element is protected from editing.

        Returns:
            A copy of the persisted element.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
        """
        async with self._lock:
            self._require_canvas(canvas_id)
            element = Element.from_draft(
                deepcopy(draft),
                canvas_id=canvas_id,
                z_index=z_index,
                visible=visible,
                locked=locked,
            )
            self._elements[canvas_id][element.id] = element
            self._touch_canvas(canvas_id)
            return deepcopy(element)

    async def get_element(self, canvas_id: UUID, element_id: UUID) -> Element | None:
        """Retrieve an element from a canvas.

        Args:
            canvas_id: The unique identifier of the canvas.
            element_id: The unique identifier of the element.

        Returns:
            A copy of the element if found, None otherwise.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
        """
        async with self._lock:
            self._require_canvas(canvas_id)
            element = self._elements[canvas_id].get(element_id)
            return deepcopy(element) if element else None

    async def update_element(self, canvas_id: UUID, element: Element) -> Element:
        """Update an element on a canvas.

        Args:
            canvas_id: The unique identifier of the canvas.
            element: The element with updated data.

        Returns:
            A copy of the updated element.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
            ElementNotFoundError: If the element does not exist.
        """
        async with self._lock:
            self._require_canvas(canvas_id)
            elements = self._elements[canvas_id]
            existing = elements.get(element.id)
            if existing is None:
                raise ElementNotFoundError(element.id, canvas_id)

            # Identity and creation time never change on update
            updated = replace(
                deepcopy(element),
                canvas_id=canvas_id,
                created_at=existing.created_at,
                updated_at=datetime.now(UTC),
            )
            elements[element.id] = updated
            self._touch_canvas(canvas_id)
            return deepcopy(updated)

    async def delete_element(self, canvas_id: UUID, element_id: UUID) -> bool:
        """Delete an element from a canvas.

        Args:
            canvas_id: The unique identifier of the canvas.
            element_id: The unique identifier of the element to delete.

        Returns:
            True if the element was deleted, False if it did not exist.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
        """
        async with self._lock:
            self._require_canvas(canvas_id)
            if self._elements[canvas_id].pop(element_id, None) is None:
                return False
            self._touch_canvas(canvas_id)
            return True

    async def list_elements(self, canvas_id: UUID) -> list[Element]:
        """List all elements on a canvas.

        Args:
            canvas_id: The unique identifier of the canvas.

        Returns:
            Element copies ordered by z-index, then creation date.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
        """
        async with self._lock:
            self._require_canvas(canvas_id)
            elements = [deepcopy(e) for e in self._elements[canvas_id].values()]
            return sorted(elements, key=lambda e: (e.z_index, e.created_at))

    async def add_chat_message(self, message: ChatMessage) -> ChatMessage:
        """Append a message to a canvas chat log.

        Args:
            message: The message to store.

        Returns:
            A copy of the stored message.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
        """
        async with self._lock:
            self._require_canvas(message.canvas_id)
            self._messages[message.canvas_id].append(deepcopy(message))
            return deepcopy(message)

    async def list_chat_messages(self, canvas_id: UUID) -> list[ChatMessage]:
        """List the chat log of a canvas.

        Args:
            canvas_id: The unique identifier of the canvas.

        Returns:
            Message copies, newest first.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
        """
        async with self._lock:
            self._require_canvas(canvas_id)
            # Reversed first so that equal timestamps still come out newest first
            messages = [deepcopy(m) for m in reversed(self._messages[canvas_id])]
            return sorted(messages, key=lambda m: m.timestamp, reverse=True)
