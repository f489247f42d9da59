"""Canvas service providing business logic for canvas operations."""

from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import structlog
from msgspec import UNSET, UnsetType

from draftboard.core.interpreter import generate
from draftboard.core.models import Canvas, ChatMessage, ContextElement, check_geometry
from draftboard.core.types import ChatRole
from draftboard.exceptions import CanvasNotFoundError, ElementNotFoundError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from draftboard.core.models import Element, ElementDraft, LineProps, Point, RectangleProps, Size, TextProps
    from draftboard.core.style import FillStyle, StrokeStyle, TextStyle
    from draftboard.storage.base import StorageProtocol

logger = structlog.get_logger(__name__)


def _set_fields(**fields: Any) -> dict[str, Any]:
    """Drop fields that were left unset, keeping explicit ``None`` values."""
    return {name: value for name, value in fields.items() if value is not UNSET}


def _summarize(elements: Sequence[Element]) -> str:
    if not elements:
        return "No elements were created."
    kinds = ", ".join(element.element_type.value for element in elements)
    noun = "element" if len(elements) == 1 else "elements"
    return f"Created {len(elements)} {noun}: {kinds}."


class CanvasService:
    """Service for managing canvases, their elements and chat logs.

    This service provides business logic for canvas operations, wrapping the
    storage layer with validation and convenience methods. It also owns the
    prompt-driven generation workflow.

    Update methods take tri-state keyword arguments: ``UNSET`` (the default)
    leaves a field unchanged, ``None`` clears a nullable field and any other
    value replaces it.
    """

    def __init__(self, storage: StorageProtocol) -> None:
        """Initialize the canvas service.

        Args:
            storage: Storage backend implementing StorageProtocol.
        """
        self._storage = storage

    # Canvas operations
    async def create_canvas(
        self,
        name: str = "Untitled Canvas",
        *,
        description: str | None = None,
        width: float = 1920.0,
        height: float = 1080.0,
        background_color: str = "#FFFFFF",
    ) -> Canvas:
        """Create a new canvas.

        Args:
            name: Display name for the canvas.
            description: Optional free-form description.
            width: Canvas width.
            height: Canvas height.
            background_color: Background color in hex format.

        Returns:
            The newly created canvas.

        Raises:
            InvalidCanvasError: If a property is out of range.
            StorageError: If the canvas cannot be created.
        """
        canvas = Canvas(
            name=name,
            description=description,
            width=width,
            height=height,
            background_color=background_color,
        )
        created = await self._storage.create_canvas(canvas)
        logger.info("Canvas created", canvas_id=str(created.id), name=created.name)
        return created

    async def get_canvas(self, canvas_id: UUID) -> Canvas:
        """Get a canvas by ID.

        Args:
            canvas_id: The unique identifier of the canvas.

        Returns:
            The requested canvas.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
        """
        canvas = await self._storage.get_canvas(canvas_id)
        if canvas is None:
            raise CanvasNotFoundError(canvas_id)
        return canvas

    async def list_canvases(self) -> list[Canvas]:
        """List all canvases, newest first."""
        return await self._storage.list_canvases()

    async def update_canvas(
        self,
        canvas_id: UUID,
        *,
        name: str | UnsetType = UNSET,
        description: str | None | UnsetType = UNSET,
        width: float | UnsetType = UNSET,
        height: float | UnsetType = UNSET,
        background_color: str | UnsetType = UNSET,
        zoom: float | UnsetType = UNSET,
        pan_x: float | UnsetType = UNSET,
        pan_y: float | UnsetType = UNSET,
    ) -> Canvas:
        """Update canvas properties.

        Only fields that are set are updated. ``description`` may be set to
        ``None`` to clear it.

        Args:
            canvas_id: The unique identifier of the canvas.
            name: New display name.
            description: New description, or None to clear it.
            width: New canvas width.
            height: New canvas height.
            background_color: New background color in hex format.
            zoom: New viewport zoom factor.
            pan_x: New horizontal viewport offset.
            pan_y: New vertical viewport offset.

        Returns:
            The updated canvas, or the unchanged canvas when nothing was set.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
            InvalidCanvasError: If an updated property is out of range.
        """
        canvas = await self.get_canvas(canvas_id)
        updates = _set_fields(
            name=name,
            description=description,
            width=width,
            height=height,
            background_color=background_color,
            zoom=zoom,
            pan_x=pan_x,
            pan_y=pan_y,
        )
        if not updates:
            return canvas
        # replace() runs __post_init__, so the new values are validated here
        return await self._storage.update_canvas(replace(canvas, **updates))

    async def delete_canvas(self, canvas_id: UUID) -> bool:
        """Delete a canvas together with its elements and chat log.

        Args:
            canvas_id: The unique identifier of the canvas to delete.

        Returns:
            True if the canvas was deleted, False if it did not exist.
        """
        deleted = await self._storage.delete_canvas(canvas_id)
        if deleted:
            logger.info("Canvas deleted", canvas_id=str(canvas_id))
        return deleted

    # Element operations
    async def _next_z_index(self, canvas_id: UUID) -> int:
        elements = await self._storage.list_elements(canvas_id)
        return max((e.z_index for e in elements), default=-1) + 1

    async def create_element(
        self,
        canvas_id: UUID,
        draft: ElementDraft,
        *,
        z_index: int | None = None,
        visible: bool = True,
        locked: bool = False,
    ) -> Element:
        """Store a draft as a new element.

        Args:
            canvas_id: The unique identifier of the canvas.
            draft: The element specification.
            z_index: Layer ordering. Defaults to one above the current top element.
            visible: Whether the element is rendered.
            locked: Whether the element is protected from editing.

        Returns:
            The created element.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
        """
        if z_index is None:
            z_index = await self._next_z_index(canvas_id)
        return await self._storage.add_element(
            canvas_id,
            draft,
            z_index=z_index,
            visible=visible,
            locked=locked,
        )

    async def get_element(self, canvas_id: UUID, element_id: UUID) -> Element:
        """Get an element from a canvas.

        Args:
            canvas_id: The unique identifier of the canvas.
            element_id: The unique identifier of the element.

        Returns:
            The requested element.

        Raises:
            ElementNotFoundError: If the element does not exist.
            CanvasNotFoundError: If the canvas does not exist.
        """
        element = await self._storage.get_element(canvas_id, element_id)
        if element is None:
            raise ElementNotFoundError(element_id, canvas_id)
        return element

    async def list_elements(self, canvas_id: UUID) -> list[Element]:
        """List all elements on a canvas, ordered by z-index then creation date.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
        """
        return await self._storage.list_elements(canvas_id)

    async def update_element(
        self,
        canvas_id: UUID,
        element_id: UUID,
        *,
        position: Point | UnsetType = UNSET,
        size: Size | None | UnsetType = UNSET,
        z_index: int | UnsetType = UNSET,
        visible: bool | UnsetType = UNSET,
        locked: bool | UnsetType = UNSET,
        fill: FillStyle | None | UnsetType = UNSET,
        stroke: StrokeStyle | None | UnsetType = UNSET,
        text_style: TextStyle | None | UnsetType = UNSET,
        rectangle_props: RectangleProps | None | UnsetType = UNSET,
        line_props: LineProps | None | UnsetType = UNSET,
        text_props: TextProps | None | UnsetType = UNSET,
    ) -> Element:
        """Update element properties.

        Nullable properties may be set to ``None`` to clear them. The element
        type cannot change. The resulting size/fill combination is checked
        against the same rules as drafts.

        Returns:
            The updated element, or the unchanged element when nothing was set.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
            ElementNotFoundError: If the element does not exist.
            InvalidElementError: If the update breaks the geometry rules.
        """
        element = await self.get_element(canvas_id, element_id)
        updates = _set_fields(
            position=position,
            size=size,
            z_index=z_index,
            visible=visible,
            locked=locked,
            fill=fill,
            stroke=stroke,
            text_style=text_style,
            rectangle_props=rectangle_props,
            line_props=line_props,
            text_props=text_props,
        )
        if not updates:
            return element

        updated = replace(element, **updates)
        check_geometry(updated.element_type, updated.size, updated.fill)
        return await self._storage.update_element(canvas_id, updated)

    async def delete_element(self, canvas_id: UUID, element_id: UUID) -> None:
        """Delete an element from a canvas.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
            ElementNotFoundError: If the element does not exist.
        """
        if not await self._storage.delete_element(canvas_id, element_id):
            raise ElementNotFoundError(element_id, canvas_id)

    # Chat operations
    async def add_chat_message(
        self,
        canvas_id: UUID,
        role: ChatRole | str,
        content: str,
        *,
        elements_created: list[UUID] | None = None,
        elements_modified: list[UUID] | None = None,
    ) -> ChatMessage:
        """Append a message to a canvas chat log.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
            InvalidMessageError: If the content is empty.
        """
        message = ChatMessage(
            canvas_id=canvas_id,
            role=role,
            content=content,
            elements_created=elements_created,
            elements_modified=elements_modified,
        )
        return await self._storage.add_chat_message(message)

    async def list_chat_messages(self, canvas_id: UUID) -> list[ChatMessage]:
        """List the chat log of a canvas, newest first.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
        """
        return await self._storage.list_chat_messages(canvas_id)

    # Generation
    async def generate_elements(
        self,
        canvas_id: UUID,
        prompt: str,
        *,
        context_element_ids: Sequence[UUID] | None = None,
        record_chat: bool = False,
    ) -> list[Element]:
        """Turn a prompt into persisted elements on a canvas.

        The canvas dimensions drive the interpreter. Context element IDs are
        resolved on the same canvas only; IDs that do not resolve are dropped.
        New elements are stacked above the current top element in generation
        order.

        Args:
            canvas_id: The unique identifier of the canvas.
            prompt: Free-text instruction.
            context_element_ids: Existing elements the new ones should avoid.
            record_chat: Store the prompt and a summary reply in the chat log.

        Returns:
            The created elements in generation order.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
        """
        canvas = await self.get_canvas(canvas_id)
        # Built up front so an unusable prompt fails before anything is stored
        request = ChatMessage(canvas_id=canvas_id, role=ChatRole.USER, content=prompt) if record_chat else None
        existing = await self._storage.list_elements(canvas_id)

        context: list[ContextElement] = []
        if context_element_ids:
            by_id = {element.id: element for element in existing}
            missing = [str(i) for i in context_element_ids if i not in by_id]
            context = [ContextElement.from_element(by_id[i]) for i in context_element_ids if i in by_id]
            if missing:
                logger.debug("Dropped unknown context elements", canvas_id=str(canvas_id), element_ids=missing)

        drafts = generate(prompt, canvas.width, canvas.height, context)

        z_index = max((e.z_index for e in existing), default=-1) + 1
        created: list[Element] = []
        for offset, draft in enumerate(drafts):
            created.append(await self._storage.add_element(canvas_id, draft, z_index=z_index + offset))

        logger.info(
            "Elements generated",
            canvas_id=str(canvas_id),
            count=len(created),
            element_types=[e.element_type.value for e in created],
            context_count=len(context),
        )

        if request is not None:
            await self._record_exchange(request, created)
        return created

    async def _record_exchange(self, request: ChatMessage, created: Sequence[Element]) -> None:
        await self._storage.add_chat_message(request)

        # The reply must sort strictly after the request
        timestamp = max(datetime.now(UTC), request.timestamp + timedelta(microseconds=1))
        reply = ChatMessage(
            canvas_id=request.canvas_id,
            role=ChatRole.ASSISTANT,
            content=_summarize(created),
            timestamp=timestamp,
            elements_created=[e.id for e in created],
        )
        await self._storage.add_chat_message(reply)
