"""Litestar controllers for draftboard API endpoints."""

from __future__ import annotations

from typing import ClassVar
from uuid import UUID

from litestar import Controller, delete, get, patch, post
from litestar.status_codes import HTTP_204_NO_CONTENT

from draftboard.exceptions import CanvasNotFoundError
from draftboard.services.canvas import CanvasService
from draftboard.web.dto import (
    CanvasDetailDTO,
    CanvasResponseDTO,
    ChatMessageResponseDTO,
    CreateCanvasDTO,
    CreateChatMessageDTO,
    CreateElementDTO,
    ElementResponseDTO,
    GenerateElementsDTO,
    UpdateCanvasDTO,
    UpdateElementDTO,
    canvas_to_detail,
    canvas_to_response,
    canvas_updates_from_dto,
    draft_from_dto,
    element_to_response,
    element_updates_from_dto,
    message_to_response,
)


class CanvasController(Controller):
    """Controller for canvas-related operations.

    This controller handles HTTP endpoints for managing canvases,
    including creation, retrieval, updating, and deletion.
    """

    path = "/canvases"
    tags: ClassVar[list[str]] = ["Canvases"]

    @post("/")
    async def create_canvas(self, data: CreateCanvasDTO, service: CanvasService) -> CanvasResponseDTO:
        """Create a new canvas.

        Args:
            data: The canvas creation data.
            service: The canvas service instance (injected).

        Returns:
            The created canvas.
        """
        canvas = await service.create_canvas(
            name=data.name,
            description=data.description,
            width=data.width,
            height=data.height,
            background_color=data.background_color,
        )
        return canvas_to_response(canvas)

    @get("/")
    async def list_canvases(self, service: CanvasService) -> list[CanvasResponseDTO]:
        """List all canvases, newest first.

        Args:
            service: The canvas service instance (injected).

        Returns:
            A list of all canvases.
        """
        canvases = await service.list_canvases()
        return [canvas_to_response(c) for c in canvases]

    @get("/{canvas_id:uuid}")
    async def get_canvas(self, canvas_id: UUID, service: CanvasService) -> CanvasDetailDTO:
        """Get a canvas with all its elements.

        Args:
            canvas_id: The unique identifier of the canvas.
            service: The canvas service instance (injected).

        Returns:
            The canvas with all its elements.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
        """
        canvas = await service.get_canvas(canvas_id)
        elements = await service.list_elements(canvas_id)
        return canvas_to_detail(canvas, elements)

    @patch("/{canvas_id:uuid}")
    async def update_canvas(self, canvas_id: UUID, data: UpdateCanvasDTO, service: CanvasService) -> CanvasResponseDTO:
        """Update canvas properties.

        Only fields present in the body are updated; ``description: null`` clears it.

        Args:
            canvas_id: The unique identifier of the canvas.
            data: The canvas update data.
            service: The canvas service instance (injected).

        Returns:
            The updated canvas.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
        """
        canvas = await service.update_canvas(canvas_id, **canvas_updates_from_dto(data))
        return canvas_to_response(canvas)

    @delete("/{canvas_id:uuid}", status_code=HTTP_204_NO_CONTENT)
    async def delete_canvas(self, canvas_id: UUID, service: CanvasService) -> None:
        """Delete a canvas with its elements and chat log.

        Args:
            canvas_id: The unique identifier of the canvas to delete.
            service: The canvas service instance (injected).

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
        """
        deleted = await service.delete_canvas(canvas_id)
        if not deleted:
            raise CanvasNotFoundError(canvas_id)


class ElementController(Controller):
    """Controller for element-related operations.

    This controller handles HTTP endpoints for managing the elements of a
    canvas. Elements are always addressed through their owning canvas.
    """

    path = "/canvases/{canvas_id:uuid}/elements"
    tags: ClassVar[list[str]] = ["Elements"]

    @get("/")
    async def list_elements(self, canvas_id: UUID, service: CanvasService) -> list[ElementResponseDTO]:
        """List all elements on a canvas, ordered by z-index then creation date.

        Args:
            canvas_id: The unique identifier of the canvas.
            service: The canvas service instance (injected).

        Returns:
            A list of all elements on the canvas.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
        """
        elements = await service.list_elements(canvas_id)
        return [element_to_response(e) for e in elements]

    @post("/")
    async def create_element(
        self,
        canvas_id: UUID,
        data: CreateElementDTO,
        service: CanvasService,
    ) -> ElementResponseDTO:
        """Create an element from a draft.

        Args:
            canvas_id: The unique identifier of the canvas.
            data: The element draft.
            service: The canvas service instance (injected).

        Returns:
            The created element.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
            InvalidElementError: If the draft breaks the geometry rules.
        """
        element = await service.create_element(
            canvas_id,
            draft_from_dto(data),
            z_index=data.z_index,
            visible=data.visible,
            locked=data.locked,
        )
        return element_to_response(element)

    @get("/{element_id:uuid}")
    async def get_element(self, canvas_id: UUID, element_id: UUID, service: CanvasService) -> ElementResponseDTO:
        """Get a single element.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
            ElementNotFoundError: If the element does not exist.
        """
        element = await service.get_element(canvas_id, element_id)
        return element_to_response(element)

    @patch("/{element_id:uuid}")
    async def update_element(
        self,
        canvas_id: UUID,
        element_id: UUID,
        data: UpdateElementDTO,
        service: CanvasService,
    ) -> ElementResponseDTO:
        """Update element properties.

        Only fields present in the body are updated; ``null`` clears a style or
        property block.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
            ElementNotFoundError: If the element does not exist.
            InvalidElementError: If the update breaks the geometry rules.
        """
        element = await service.update_element(canvas_id, element_id, **element_updates_from_dto(data))
        return element_to_response(element)

    @delete("/{element_id:uuid}", status_code=HTTP_204_NO_CONTENT)
    async def delete_element(self, canvas_id: UUID, element_id: UUID, service: CanvasService) -> None:
        """Delete an element from the canvas.

        Args:
            canvas_id: The unique identifier of the canvas.
            element_id: The unique identifier of the element to delete.
            service: The canvas service instance (injected).

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
            ElementNotFoundError: If the element does not exist.
        """
        await service.delete_element(canvas_id, element_id)


class ChatController(Controller):
    """Controller for the per-canvas chat log."""

    path = "/canvases/{canvas_id:uuid}/messages"
    tags: ClassVar[list[str]] = ["Chat"]

    @get("/")
    async def list_messages(self, canvas_id: UUID, service: CanvasService) -> list[ChatMessageResponseDTO]:
        """List the chat log of a canvas, newest first."""
        messages = await service.list_chat_messages(canvas_id)
        return [message_to_response(m) for m in messages]

    @post("/")
    async def add_message(
        self,
        canvas_id: UUID,
        data: CreateChatMessageDTO,
        service: CanvasService,
    ) -> ChatMessageResponseDTO:
        """Append a message to the chat log.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
        """
        message = await service.add_chat_message(
            canvas_id,
            data.role,
            data.content,
            elements_created=data.elements_created,
            elements_modified=data.elements_modified,
        )
        return message_to_response(message)


class GenerationController(Controller):
    """Controller for prompt-driven element generation."""

    path = "/canvases/{canvas_id:uuid}/generate"
    tags: ClassVar[list[str]] = ["Generation"]

    @post("/")
    async def generate(
        self,
        canvas_id: UUID,
        data: GenerateElementsDTO,
        service: CanvasService,
    ) -> list[ElementResponseDTO]:
        """Interpret a prompt and add the resulting elements to the canvas.

        Context element IDs that do not belong to the canvas are ignored.

        Args:
            canvas_id: The unique identifier of the canvas.
            data: The prompt and generation options.
            service: The canvas service instance (injected).

        Returns:
            The created elements in generation order.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
        """
        elements = await service.generate_elements(
            canvas_id,
            data.prompt,
            context_element_ids=data.context_element_ids,
            record_chat=data.record_chat,
        )
        return [element_to_response(e) for e in elements]
