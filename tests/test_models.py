"""Tests for core domain models and styles."""

from __future__ import annotations

from uuid import uuid4

import pytest

from draftboard.core.models import (
    MIN_EXTENT,
    Canvas,
    ChatMessage,
    ContextElement,
    Element,
    ElementDraft,
    LineProps,
    Point,
    RectangleProps,
    Size,
    TextProps,
)
from draftboard.core.style import FillStyle, StrokeStyle, TextStyle, is_hex_color
from draftboard.core.types import ChatRole, ElementType, StrokeCap
from draftboard.exceptions import InvalidCanvasError, InvalidElementError, InvalidMessageError


class TestCanvas:
    """Tests for the Canvas model."""

    def test_defaults(self) -> None:
        """Test default canvas values."""
        canvas = Canvas()
        assert canvas.name == "Untitled Canvas"
        assert canvas.width == 1920
        assert canvas.height == 1080
        assert canvas.background_color == "#FFFFFF"
        assert canvas.zoom == 1.0
        assert (canvas.pan_x, canvas.pan_y) == (0.0, 0.0)
        assert canvas.description is None

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"name": "   "},
            {"width": 0},
            {"height": -1},
            {"zoom": 0},
            {"width": 0.004},
            {"zoom": 0.009},
            {"background_color": "white"},
        ],
    )
    def test_rejects_invalid_values(self, kwargs: dict) -> None:
        """Test that out-of-range canvas properties are rejected."""
        with pytest.raises(InvalidCanvasError):
            Canvas(**kwargs)

    def test_unique_ids(self) -> None:
        """Test that every canvas gets its own ID."""
        assert Canvas().id != Canvas().id


class TestStyles:
    """Tests for fill, stroke and text styles."""

    @pytest.mark.parametrize(("value", "expected"), [("#A1b2C3", True), ("#abc", False), ("123456", False)])
    def test_hex_color(self, value: str, expected: bool) -> None:
        """Test the #RRGGBB check."""
        assert is_hex_color(value) is expected

    def test_fill_rejects_bad_opacity(self) -> None:
        """Test that opacity must lie in [0, 1]."""
        with pytest.raises(InvalidElementError):
            FillStyle(color="#000000", opacity=1.5)

    def test_stroke_normalizes_enums(self) -> None:
        """Test that plain strings are coerced to enum members."""
        stroke = StrokeStyle(color="#000000", cap="round")
        assert stroke.cap is StrokeCap.ROUND

    def test_stroke_rejects_negative_width(self) -> None:
        """Test that stroke widths cannot be negative."""
        with pytest.raises(InvalidElementError):
            StrokeStyle(color="#000000", width=-1)

    @pytest.mark.parametrize("kwargs", [{"font_size": 0}, {"font_weight": 950}, {"line_height": 0}])
    def test_text_style_ranges(self, kwargs: dict) -> None:
        """Test the numeric ranges of text styles."""
        with pytest.raises(InvalidElementError):
            TextStyle(**kwargs)


class TestDrafts:
    """Tests for element drafts and their geometry rules."""

    def test_line_cannot_have_size(self) -> None:
        """Test that lines never carry a bounding box."""
        with pytest.raises(InvalidElementError):
            ElementDraft(
                element_type=ElementType.LINE,
                position=Point(0, 0),
                size=Size(10, 10),
                line_props=LineProps(0, 0, 10, 0),
            )

    def test_filled_shape_needs_size(self) -> None:
        """Test that filled non-line elements require a size."""
        with pytest.raises(InvalidElementError):
            ElementDraft(element_type=ElementType.CIRCLE, position=Point(0, 0), fill=FillStyle(color="#FF0000"))

    def test_element_type_is_normalized(self) -> None:
        """Test that a string element type becomes an ElementType."""
        draft = ElementDraft(element_type="circle", position=Point(0, 0), size=Size(5, 5))
        assert draft.element_type is ElementType.CIRCLE

    @pytest.mark.parametrize(
        "factory",
        [
            lambda: Size(0, 10),
            lambda: Size(0.004, 10),
            lambda: RectangleProps(border_radius=-1),
            lambda: TextProps(content="x", max_width=0),
        ],
    )
    def test_props_validation(self, factory) -> None:
        """Test validation of sizes and element properties."""
        with pytest.raises(InvalidElementError):
            factory()


class TestElement:
    """Tests for persisted elements."""

    def test_from_draft_assigns_identity(self, rectangle_draft: ElementDraft) -> None:
        """Test that storing a draft assigns an ID, canvas and timestamps."""
        canvas_id = uuid4()
        element = Element.from_draft(rectangle_draft, canvas_id=canvas_id, z_index=3, locked=True)
        assert element.canvas_id == canvas_id
        assert element.z_index == 3
        assert element.locked is True
        assert element.visible is True
        assert element.created_at == element.updated_at
        assert element.fill == rectangle_draft.fill
        assert Element.from_draft(rectangle_draft, canvas_id=canvas_id).id != element.id

    def test_context_view(self, rectangle_draft: ElementDraft) -> None:
        """Test the read-only context view of an element."""
        element = Element.from_draft(rectangle_draft, canvas_id=uuid4())
        context = ContextElement.from_element(element)
        assert context.position == element.position
        assert context.size == element.size


class TestChatMessage:
    """Tests for chat messages."""

    def test_role_is_normalized(self) -> None:
        """Test that a string role becomes a ChatRole."""
        message = ChatMessage(canvas_id=uuid4(), role="assistant", content="Done")
        assert message.role is ChatRole.ASSISTANT
        assert message.elements_created is None

    def test_rejects_blank_content(self) -> None:
        """Test that chat messages need content."""
        with pytest.raises(InvalidMessageError):
            ChatMessage(canvas_id=uuid4(), role=ChatRole.USER, content="  ")


class TestMinimumExtent:
    """Tests for the smallest accepted extent."""

    def test_one_cent_is_accepted(self) -> None:
        """Test that the smallest storable extent passes validation."""
        assert Size(MIN_EXTENT, MIN_EXTENT).width == 0.01
        assert Canvas(width=MIN_EXTENT, height=MIN_EXTENT, zoom=MIN_EXTENT).zoom == 0.01

    def test_sub_cent_size_message(self) -> None:
        """Test that the error names the minimum rather than a rounded value."""
        with pytest.raises(InvalidElementError, match="at least 0.01"):
            Size(0.004, 0.004)
