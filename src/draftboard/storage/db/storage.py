"""Database storage implementation for draftboard."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import delete, select

from draftboard.core.models import Element
from draftboard.exceptions import CanvasNotFoundError, ElementNotFoundError
from draftboard.storage.db.models import (
    CanvasModel,
    ChatMessageModel,
    ElementModel,
    apply_canvas,
    apply_element,
    canvas_from_model,
    canvas_to_model,
    element_from_model,
    element_to_model,
    message_from_model,
    message_to_model,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from contextlib import AbstractAsyncContextManager
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession

    from draftboard.core.models import Canvas, ChatMessage, ElementDraft

    SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


async def _require_canvas(session: AsyncSession, canvas_id: UUID) -> CanvasModel:
    stmt = select(CanvasModel).where(CanvasModel.id == canvas_id)
    result = await session.execute(stmt)
    model = result.scalar_one_or_none()
    if model is None:
        raise CanvasNotFoundError(canvas_id)
    return model


class DatabaseStorage:
    """Async database storage implementation using SQLAlchemy.

    This storage backend persists canvases, elements and chat messages to a
    relational database. Every operation runs in its own session obtained from
    the factory and is committed before returning.

    Example:
        >>> manager = DatabaseManager("sqlite+aiosqlite:///./data/draftboard.db")
        >>> await manager.init()
        >>> storage = DatabaseStorage(manager.session)

    Attributes:
        _session_factory: Callable returning an async session context manager.
    """

    def __init__(self, session_factory: SessionFactory) -> None:
        """Initialize the database storage with a session factory.

        Args:
            session_factory: Callable returning an async context manager that
                yields an ``AsyncSession``, such as ``DatabaseManager.session``
                or an ``async_sessionmaker``.
        """
        self._session_factory = session_factory

    async def create_canvas(self, canvas: Canvas) -> Canvas:
        """Create a new canvas in the database.

        Args:
            canvas: The canvas to create.

        Returns:
            The created canvas as stored.
        """
        async with self._session_factory() as session:
            model = canvas_to_model(canvas)
            session.add(model)
            await session.flush()
            await session.refresh(model)
            created = canvas_from_model(model)
            await session.commit()
        return created

    async def get_canvas(self, canvas_id: UUID) -> Canvas | None:
        """Retrieve a canvas by its ID.

        Args:
            canvas_id: The unique identifier of the canvas.

        Returns:
            The canvas if found, None otherwise.
        """
        async with self._session_factory() as session:
            model = await session.get(CanvasModel, canvas_id)
            return canvas_from_model(model) if model is not None else None

    async def list_canvases(self) -> list[Canvas]:
        """List all canvases in the database.

        Returns:
            A list of all canvases, ordered by creation date (newest first).
        """
        async with self._session_factory() as session:
            stmt = select(CanvasModel).order_by(CanvasModel.created_at.desc())
            result = await session.execute(stmt)
            return [canvas_from_model(m) for m in result.scalars().all()]

    async def update_canvas(self, canvas: Canvas) -> Canvas:
        """Update an existing canvas in the database.

        Args:
            canvas: The canvas with updated data.

        Returns:
            The updated canvas.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
        """
        async with self._session_factory() as session:
            model = await _require_canvas(session, canvas.id)
            apply_canvas(model, canvas)
            model.updated_at = datetime.now(UTC)

            await session.flush()
            await session.refresh(model)
            updated = canvas_from_model(model)
            await session.commit()
        return updated

    async def delete_canvas(self, canvas_id: UUID) -> bool:
        """Delete a canvas together with its elements and chat messages.

        Args:
            canvas_id: The unique identifier of the canvas to delete.

        Returns:
            True if the canvas was deleted, False if it did not exist.
        """
        async with self._session_factory() as session:
            model = await session.get(CanvasModel, canvas_id)
            if model is None:
                return False

            # Explicit so the cascade does not depend on SQLite foreign key enforcement
            await session.execute(delete(ElementModel).where(ElementModel.canvas_id == canvas_id))
            await session.execute(delete(ChatMessageModel).where(ChatMessageModel.canvas_id == canvas_id))
            await session.delete(model)
            await session.commit()
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
            The persisted element.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
        """
        async with self._session_factory() as session:
            canvas_model = await _require_canvas(session, canvas_id)

            element = Element.from_draft(
                draft,
                canvas_id=canvas_id,
                z_index=z_index,
                visible=visible,
                locked=locked,
            )
            model = element_to_model(element)
            session.add(model)
            canvas_model.updated_at = datetime.now(UTC)

            await session.flush()
            await session.refresh(model)
            created = element_from_model(model)
            await session.commit()
        return created

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
        async with self._session_factory() as session:
            await _require_canvas(session, canvas_id)
            stmt = select(ElementModel).where(
                ElementModel.canvas_id == canvas_id,
                ElementModel.id == element_id,
            )
            result = await session.execute(stmt)
            model = result.scalar_one_or_none()
            return element_from_model(model) if model is not None else None

    async def update_element(self, canvas_id: UUID, element: Element) -> Element:
        """Update an element on a canvas.

        Args:
            canvas_id: The unique identifier of the canvas.
            element: The element with updated data.

        Returns:
            The updated element.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
            ElementNotFoundError: If the element does not exist.
        """
        async with self._session_factory() as session:
            canvas_model = await _require_canvas(session, canvas_id)

            stmt = select(ElementModel).where(
                ElementModel.canvas_id == canvas_id,
                ElementModel.id == element.id,
            )
            result = await session.execute(stmt)
            model = result.scalar_one_or_none()
            if model is None:
                raise ElementNotFoundError(element.id, canvas_id)

            now = datetime.now(UTC)
            apply_element(model, element)
            model.updated_at = now
            canvas_model.updated_at = now

            await session.flush()
            await session.refresh(model)
            updated = element_from_model(model)
            await session.commit()
        return updated

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
        async with self._session_factory() as session:
            canvas_model = await _require_canvas(session, canvas_id)

            stmt = select(ElementModel).where(
                ElementModel.canvas_id == canvas_id,
                ElementModel.id == element_id,
            )
            result = await session.execute(stmt)
            model = result.scalar_one_or_none()
            if model is None:
                return False

            await session.delete(model)
            canvas_model.updated_at = datetime.now(UTC)
            await session.commit()
        return True

    async def list_elements(self, canvas_id: UUID) -> list[Element]:
        """List all elements on a canvas.

        Args:
            canvas_id: The unique identifier of the canvas.

        Returns:
            The elements ordered by z-index, then creation date.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
        """
        async with self._session_factory() as session:
            await _require_canvas(session, canvas_id)
            stmt = (
                select(ElementModel)
                .where(ElementModel.canvas_id == canvas_id)
                .order_by(ElementModel.z_index, ElementModel.created_at)
            )
            result = await session.execute(stmt)
            return [element_from_model(m) for m in result.scalars().all()]

    async def add_chat_message(self, message: ChatMessage) -> ChatMessage:
        """Append a message to a canvas chat log.

        Args:
            message: The message to store.

        Returns:
            The stored message.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
        """
        async with self._session_factory() as session:
            await _require_canvas(session, message.canvas_id)
            model = message_to_model(message)
            session.add(model)
            await session.flush()
            await session.refresh(model)
            stored = message_from_model(model)
            await session.commit()
        return stored

    async def list_chat_messages(self, canvas_id: UUID) -> list[ChatMessage]:
        """List the chat log of a canvas.

        Args:
            canvas_id: The unique identifier of the canvas.

        Returns:
            The messages, newest first.

        Raises:
            CanvasNotFoundError: If the canvas does not exist.
        """
        async with self._session_factory() as session:
            await _require_canvas(session, canvas_id)
            stmt = (
                select(ChatMessageModel)
                .where(ChatMessageModel.canvas_id == canvas_id)
                .order_by(ChatMessageModel.created_at.desc())
            )
            result = await session.execute(stmt)
            return [message_from_model(m) for m in result.scalars().all()]
