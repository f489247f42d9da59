"""Tests for the database storage layer.

These tests use an in-memory SQLite database for fast test execution.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
from litestar.testing import TestClient

from draftboard.app import create_app
from draftboard.core.models import Canvas, ChatMessage, ElementDraft, Point, Size
from draftboard.core.rate_limit import RateLimitSettings
from draftboard.core.settings import AppSettings
from draftboard.core.style import StrokeStyle
from draftboard.core.types import ChatRole, ElementType, StrokeCap
from draftboard.exceptions import CanvasNotFoundError, ElementNotFoundError, InvalidCanvasError, InvalidElementError
from draftboard.services.canvas import CanvasService
from draftboard.storage.memory import InMemoryStorage

# Skip all tests in this module if db dependencies are not installed
pytest.importorskip("advanced_alchemy")
pytest.importorskip("aiosqlite")

from draftboard.storage.db.models import to_decimal
from draftboard.storage.db.setup import DatabaseManager
from draftboard.storage.db.storage import DatabaseStorage

pytestmark = pytest.mark.db


@pytest.fixture
async def db_manager() -> AsyncIterator[DatabaseManager]:
    """Create an initialized manager on an in-memory SQLite database."""
    manager = DatabaseManager("sqlite+aiosqlite:///:memory:", echo=False)
    await manager.init()
    yield manager
    await manager.close()


@pytest.fixture
def db_storage(db_manager: DatabaseManager) -> DatabaseStorage:
    """Create a DatabaseStorage instance bound to the test database."""
    return DatabaseStorage(db_manager.session)


class TestDecimalConversion:
    """Tests for the fixed-point helpers."""

    @pytest.mark.parametrize(("value", "expected"), [(1.005, "1.01"), (2.5, "2.50"), (-0.125, "-0.13"), (3, "3.00")])
    def test_to_decimal_rounds_half_up(self, value: float, expected: str) -> None:
        """Test quantization to two decimal places."""
        assert str(to_decimal(value)) == expected


class TestDatabaseStorageCanvas:
    """Tests for canvas operations in DatabaseStorage."""

    @pytest.mark.asyncio
    async def test_create_and_get_canvas(self, db_storage: DatabaseStorage) -> None:
        """Test creating and retrieving a canvas."""
        canvas = Canvas(name="DB Canvas", description="notes", width=800.5, height=600.25, background_color="#101010")
        created = await db_storage.create_canvas(canvas)
        assert created.id == canvas.id

        fetched = await db_storage.get_canvas(canvas.id)
        assert fetched is not None
        assert fetched.name == "DB Canvas"
        assert fetched.description == "notes"
        assert fetched.width == 800.5
        assert fetched.height == 600.25
        assert isinstance(fetched.width, float)
        assert fetched.background_color == "#101010"

    @pytest.mark.asyncio
    async def test_geometry_is_rounded_to_cents(self, db_storage: DatabaseStorage) -> None:
        """Test that real values come back with two decimal places."""
        canvas = Canvas(width=1000.456, height=500, zoom=1.255, pan_x=-3.333)
        await db_storage.create_canvas(canvas)

        fetched = await db_storage.get_canvas(canvas.id)
        assert fetched is not None
        assert fetched.width == 1000.46
        assert fetched.height == 500.0
        assert fetched.zoom == 1.26
        assert fetched.pan_x == -3.33

    @pytest.mark.asyncio
    async def test_get_missing_canvas(self, db_storage: DatabaseStorage) -> None:
        """Test retrieving a canvas that doesn't exist."""
        assert await db_storage.get_canvas(uuid4()) is None

    @pytest.mark.asyncio
    async def test_list_canvases_newest_first(self, db_storage: DatabaseStorage) -> None:
        """Test listing order."""
        now = datetime.now(UTC)
        await db_storage.create_canvas(Canvas(name="Older", created_at=now - timedelta(hours=1)))
        await db_storage.create_canvas(Canvas(name="Newer", created_at=now))

        canvases = await db_storage.list_canvases()
        assert [c.name for c in canvases] == ["Newer", "Older"]

    @pytest.mark.asyncio
    async def test_update_canvas_clears_description(self, db_storage: DatabaseStorage) -> None:
        """Test updating fields and clearing the description."""
        canvas = await db_storage.create_canvas(Canvas(name="Before", description="old"))
        updated = await db_storage.update_canvas(replace(canvas, name="After", description=None, zoom=2.0))
        assert updated.name == "After"
        assert updated.description is None
        assert updated.zoom == 2.0

    @pytest.mark.asyncio
    async def test_update_missing_canvas(self, db_storage: DatabaseStorage) -> None:
        """Test updating a canvas that doesn't exist."""
        with pytest.raises(CanvasNotFoundError):
            await db_storage.update_canvas(Canvas())

    @pytest.mark.asyncio
    async def test_delete_canvas_cascades(self, db_storage: DatabaseStorage, rectangle_draft: ElementDraft) -> None:
        """Test that deleting a canvas removes its elements and messages."""
        canvas = await db_storage.create_canvas(Canvas())
        element = await db_storage.add_element(canvas.id, rectangle_draft)
        await db_storage.add_chat_message(ChatMessage(canvas_id=canvas.id, role=ChatRole.USER, content="hi"))

        assert await db_storage.delete_canvas(canvas.id) is True
        assert await db_storage.get_canvas(canvas.id) is None
        with pytest.raises(CanvasNotFoundError):
            await db_storage.get_element(canvas.id, element.id)
        assert await db_storage.delete_canvas(canvas.id) is False


class TestDatabaseStorageElements:
    """Tests for element operations in DatabaseStorage."""

    @pytest.mark.asyncio
    async def test_element_round_trip(self, db_storage: DatabaseStorage, rectangle_draft: ElementDraft) -> None:
        """Test that styles and props survive storage."""
        canvas = await db_storage.create_canvas(Canvas())
        element = await db_storage.add_element(canvas.id, rectangle_draft, z_index=4, visible=False)

        fetched = await db_storage.get_element(canvas.id, element.id)
        assert fetched is not None
        assert fetched.element_type == ElementType.RECTANGLE
        assert fetched.position == Point(50, 50)
        assert fetched.size == Size(100, 75)
        assert fetched.fill == rectangle_draft.fill
        assert fetched.stroke == rectangle_draft.stroke
        assert fetched.rectangle_props == rectangle_draft.rectangle_props
        assert fetched.z_index == 4
        assert fetched.visible is False
        assert fetched.text_props is None

    @pytest.mark.asyncio
    async def test_line_and_text_round_trip(
        self,
        db_storage: DatabaseStorage,
        line_draft: ElementDraft,
        text_draft: ElementDraft,
    ) -> None:
        """Test line endpoints and text styling survive storage."""
        canvas = await db_storage.create_canvas(Canvas())
        line = await db_storage.add_element(canvas.id, line_draft)
        text = await db_storage.add_element(canvas.id, text_draft)

        fetched_line = await db_storage.get_element(canvas.id, line.id)
        assert fetched_line is not None
        assert fetched_line.size is None
        assert fetched_line.line_props == line_draft.line_props

        fetched_text = await db_storage.get_element(canvas.id, text.id)
        assert fetched_text is not None
        assert fetched_text.text_style == text_draft.text_style
        assert fetched_text.text_props == text_draft.text_props

    @pytest.mark.asyncio
    async def test_add_element_to_missing_canvas(
        self,
        db_storage: DatabaseStorage,
        rectangle_draft: ElementDraft,
    ) -> None:
        """Test adding an element to a canvas that doesn't exist."""
        with pytest.raises(CanvasNotFoundError):
            await db_storage.add_element(uuid4(), rectangle_draft)

    @pytest.mark.asyncio
    async def test_update_element_clears_styles(
        self,
        db_storage: DatabaseStorage,
        rectangle_draft: ElementDraft,
    ) -> None:
        """Test that a cleared style is stored as NULL and read back as None."""
        canvas = await db_storage.create_canvas(Canvas())
        element = await db_storage.add_element(canvas.id, rectangle_draft)

        changed = replace(
            element,
            stroke=None,
            position=Point(12.345, 0.004),
            locked=True,
        )
        updated = await db_storage.update_element(canvas.id, changed)
        assert updated.stroke is None
        assert updated.position == Point(12.35, 0.0)
        assert updated.locked is True
        assert updated.created_at == element.created_at

    @pytest.mark.asyncio
    async def test_update_element_keeps_enum_styles(
        self,
        db_storage: DatabaseStorage,
        line_draft: ElementDraft,
    ) -> None:
        """Test that enum-valued style fields survive a JSON round trip."""
        canvas = await db_storage.create_canvas(Canvas())
        element = await db_storage.add_element(canvas.id, line_draft)
        stroke = StrokeStyle(color="#FF0000", width=3.0, cap=StrokeCap.ROUND)

        await db_storage.update_element(canvas.id, replace(element, stroke=stroke))
        fetched = await db_storage.get_element(canvas.id, element.id)
        assert fetched is not None
        assert fetched.stroke == stroke

    @pytest.mark.asyncio
    async def test_update_missing_element(self, db_storage: DatabaseStorage, rectangle_draft: ElementDraft) -> None:
        """Test updating an element that doesn't exist."""
        canvas = await db_storage.create_canvas(Canvas())
        element = await db_storage.add_element(canvas.id, rectangle_draft)
        assert await db_storage.delete_element(canvas.id, element.id) is True
        with pytest.raises(ElementNotFoundError):
            await db_storage.update_element(canvas.id, element)
        assert await db_storage.delete_element(canvas.id, element.id) is False

    @pytest.mark.asyncio
    async def test_list_elements_ordering(
        self,
        db_storage: DatabaseStorage,
        rectangle_draft: ElementDraft,
        line_draft: ElementDraft,
    ) -> None:
        """Test ordering by z-index."""
        canvas = await db_storage.create_canvas(Canvas())
        top = await db_storage.add_element(canvas.id, rectangle_draft, z_index=2)
        bottom = await db_storage.add_element(canvas.id, line_draft, z_index=0)

        elements = await db_storage.list_elements(canvas.id)
        assert [e.id for e in elements] == [bottom.id, top.id]


class TestDatabaseStorageChat:
    """Tests for chat operations in DatabaseStorage."""

    @pytest.mark.asyncio
    async def test_chat_round_trip(self, db_storage: DatabaseStorage) -> None:
        """Test that messages keep their role, timestamp and element IDs."""
        canvas = await db_storage.create_canvas(Canvas())
        created_ids = [uuid4(), uuid4()]
        now = datetime.now(UTC)
        await db_storage.add_chat_message(
            ChatMessage(canvas_id=canvas.id, role=ChatRole.USER, content="draw", timestamp=now)
        )
        await db_storage.add_chat_message(
            ChatMessage(
                canvas_id=canvas.id,
                role=ChatRole.ASSISTANT,
                content="done",
                timestamp=now + timedelta(seconds=1),
                elements_created=created_ids,
            )
        )

        messages = await db_storage.list_chat_messages(canvas.id)
        assert [m.content for m in messages] == ["done", "draw"]
        assert messages[0].role is ChatRole.ASSISTANT
        assert messages[0].elements_created == created_ids
        assert messages[1].elements_created is None

    @pytest.mark.asyncio
    async def test_chat_missing_canvas(self, db_storage: DatabaseStorage) -> None:
        """Test listing chat for a canvas that doesn't exist."""
        with pytest.raises(CanvasNotFoundError):
            await db_storage.list_chat_messages(uuid4())


class TestDatabaseService:
    """Tests for the service workflow on top of the database backend."""

    @pytest.mark.asyncio
    async def test_generate_with_chat(self, db_storage: DatabaseStorage) -> None:
        """Test generation and the recorded chat exchange."""
        service = CanvasService(db_storage)
        canvas = await service.create_canvas("Generated", width=1000, height=500)

        created = await service.generate_elements(canvas.id, "Add a red circle", record_chat=True)
        assert len(created) == 1
        assert created[0].position == Point(450, 200)
        assert created[0].z_index == 0

        messages = await service.list_chat_messages(canvas.id)
        assert [m.role for m in messages] == [ChatRole.ASSISTANT, ChatRole.USER]
        assert messages[0].elements_created == [created[0].id]


class TestDatabaseApp:
    """Tests for the application wired to the database backend."""

    def test_api_and_health(self) -> None:
        """Test that the lifespan initializes the database and the API uses it."""
        settings = AppSettings(
            storage="database",
            database_url="sqlite+aiosqlite:///:memory:",
            rate_limit=RateLimitSettings(enabled=False),
        )
        with TestClient(app=create_app(settings=settings)) as client:
            response = client.post("/api/canvases", json={"name": "Persisted", "width": 640.125})
            assert response.status_code == 201
            assert response.json()["width"] == 640.13

            canvas_id = response.json()["id"]
            generated = client.post(f"/api/canvases/{canvas_id}/generate", json={"prompt": "a blue line"})
            assert generated.status_code == 201

            health = client.get("/health").json()
            components = {c["name"]: c for c in health["components"]}
            assert components["storage"]["message"] == "DatabaseStorage"
            assert components["database"]["status"] == "healthy"
            assert client.get("/ready").json()["checks"] == {"application": True, "database": True}


class TestBackendsAgreeOnExtents:
    """Tests that both backends accept the same smallest extents."""

    @pytest.mark.asyncio
    async def test_smallest_extent_survives_both_backends(
        self,
        storage: InMemoryStorage,
        db_storage: DatabaseStorage,
        rectangle_draft: ElementDraft,
    ) -> None:
        """Test that one-cent sizes round-trip through memory and the database."""
        draft = replace(rectangle_draft, size=Size(0.01, 0.014))
        for backend in (storage, db_storage):
            canvas = await backend.create_canvas(Canvas(width=0.01, height=0.014, zoom=0.01))
            element = await backend.add_element(canvas.id, draft)

            fetched_canvas = await backend.get_canvas(canvas.id)
            fetched = await backend.get_element(canvas.id, element.id)
            assert fetched_canvas is not None
            assert fetched is not None
            assert fetched_canvas.width == pytest.approx(0.01)
            assert fetched_canvas.zoom == pytest.approx(0.01)
            assert fetched.size is not None
            assert fetched.size.width == pytest.approx(0.01)

    def test_sub_cent_extent_is_rejected_before_storage(self, rectangle_draft: ElementDraft) -> None:
        """Test that extents that would round to zero never reach a backend."""
        with pytest.raises(InvalidElementError, match="at least 0.01"):
            replace(rectangle_draft, size=Size(0.004, 0.004))
        with pytest.raises(InvalidCanvasError, match="at least 0.01"):
            Canvas(width=0.004)
