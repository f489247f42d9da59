"""Storage protocol definition for draftboard."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from uuid import UUID

    from draftboard.core.models import Canvas, ChatMessage, Element, ElementDraft


@runtime_checkable
class StorageProtocol(Protocol):
    """Protocol defining the storage interface for draftboard.

    This protocol defines the contract that all storage backends must implement
    to provide persistence for canvases, elements and chat messages. Backends
    are the only place where element identity and timestamps are assigned.
    """

    async def create_canvas(self, canvas: Canvas) -> Canvas:
        """Create a new canvas in storage.

        Args:
            canvas: The canvas to create.

        Returns:
            The created canvas.

        Raises:
            StorageError: If the canvas cannot be created.
        """
        ...

    async def get_canvas(self, canvas_id: UUID) -> Canvas | None:
        """Retrieve a canvas by its ID.

        Args:
            canvas_id: The unique identifier of the canvas.

        Returns:
            The canvas if found, None otherwise.
        """
        ...

    async def list_canvases(self) -> list[Canvas]:
        """List all canvases in storage.

        Returns:
            A list of all canvases, ordered by creation date (newest first).
        """
        ...

    async def update_canvas(self, canvas: Canvas) -> Canvas:
        """Update an existing canvas in storage.

        Args:
            canvas: The canvas with updated data.

        Returns:
            The updated canvas with a refreshed ``updated_at``.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
        """
        ...

    async def delete_canvas(self, canvas_id: UUID) -> bool:
        """Delete a canvas together with its elements and chat messages.

        Args:
            canvas_id: The unique identifier of the canvas to delete.

        Returns:
            True if the canvas was deleted, False if it did not exist.
        """
        ...

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

        The backend assigns the element ID, the owning canvas and the
        creation/update timestamps.

        Args:
            canvas_id: The unique identifier of the canvas.
            draft: The element specification to store.
            z_index: Layer ordering for the new element.
            visible: Whether the element is rendered.
            locked: Whether the element is protected from editing.

        Returns:
            The persisted element.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
        """
        ...

    async def get_element(self, canvas_id: UUID, element_id: UUID) -> Element | None:
        """Retrieve an element from a canvas.

        Args:
            canvas_id: The unique identifier of the canvas.
            element_id: The unique identifier of the element.

        Returns:
            The element if found, None otherwise.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
        """
        ...

    async def update_element(self, canvas_id: UUID, element: Element) -> Element:
        """Update an element on a canvas.

        Args:
            canvas_id: The unique identifier of the canvas.
            element: The element with updated data.

        Returns:
            The updated element with a refreshed ``updated_at``.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
            ElementNotFoundError: If the element does not exist.
        """
        ...

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
        ...

    async def list_elements(self, canvas_id: UUID) -> list[Element]:
        """List all elements on a canvas.

        Args:
            canvas_id: The unique identifier of the canvas.

        Returns:
            The elements ordered by z-index, then creation date.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
        """
        ...

    async def add_chat_message(self, message: ChatMessage) -> ChatMessage:
        """Append a message to a canvas chat log.

        Args:
            message: The message to store; its ``canvas_id`` selects the canvas.

        Returns:
            The stored message.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
        """
        ...

    async def list_chat_messages(self, canvas_id: UUID) -> list[ChatMessage]:
        """List the chat log of a canvas.

        Args:
            canvas_id: The unique identifier of the canvas.

        Returns:
            The messages, newest first.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
        """
        ...
