"""SQLAlchemy models for draftboard database storage."""

from __future__ import annotations

from dataclasses import asdict
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Any
from uuid import UUID

from advanced_alchemy.base import UUIDAuditBase
from sqlalchemy import JSON, Boolean, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from draftboard.core.models import (
    Canvas,
    ChatMessage,
    Element,
    LineProps,
    Point,
    RectangleProps,
    Size,
    TextProps,
)
from draftboard.core.style import FillStyle, StrokeStyle, TextStyle
from draftboard.core.types import ElementType

if TYPE_CHECKING:
    from collections.abc import Mapping

_CENTS = Decimal("0.01")

# Real-valued geometry is stored as fixed-point with two decimal places
Coordinate = Numeric(10, 2, asdecimal=False)
ZoomFactor = Numeric(5, 2, asdecimal=False)
NullableJSON = JSON(none_as_null=True)


def to_decimal(value: float) -> Decimal:
    """Quantize a float to the two decimal places kept by the database."""
    return Decimal(str(value)).quantize(_CENTS, rounding=ROUND_HALF_UP)


def to_float(value: Any) -> float:
    """Read a numeric column value back as a float.

    SQLite may hand back integers for whole values and other backends may hand
    back ``Decimal``; both are normalized here.
    """
    return float(value)


class CanvasModel(UUIDAuditBase):
    """SQLAlchemy model for Canvas entities.

    Attributes:
        id: UUID primary key (from UUIDAuditBase).
        name: Display name for the canvas.
        description: Optional free-form description.
        width: Canvas width.
        height: Canvas height.
        background_color: Background color in hex format.
        zoom: Viewport zoom factor.
        pan_x: Horizontal viewport offset.
        pan_y: Vertical viewport offset.
        created_at: Creation timestamp (from UUIDAuditBase).
        updated_at: Last update timestamp (from UUIDAuditBase).
    """

    __tablename__ = "canvases"

    name: Mapped[str] = mapped_column(String(255), default="Untitled Canvas")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    width: Mapped[Decimal] = mapped_column(Coordinate, default=Decimal("1920.00"))
    height: Mapped[Decimal] = mapped_column(Coordinate, default=Decimal("1080.00"))
    background_color: Mapped[str] = mapped_column(String(7), default="#FFFFFF")
    zoom: Mapped[Decimal] = mapped_column(ZoomFactor, default=Decimal("1.00"))
    pan_x: Mapped[Decimal] = mapped_column(Coordinate, default=Decimal("0.00"))
    pan_y: Mapped[Decimal] = mapped_column(Coordinate, default=Decimal("0.00"))


class ElementModel(UUIDAuditBase):
    """SQLAlchemy model for Element entities.

    All element types share one table. Geometry lives in fixed-point columns,
    while styles and type-specific properties are nullable JSON columns where
    ``NULL`` means the property is not set.

    Attributes:
        id: UUID primary key (from UUIDAuditBase).
        canvas_id: Foreign key to parent canvas.
        element_type: Discriminator for element type (rectangle, circle, line, text).
        position_x: X-coordinate of the top-left corner.
        position_y: Y-coordinate of the top-left corner.
        width: Bounding box width, NULL for lines.
        height: Bounding box height, NULL for lines.
        z_index: Layer ordering (higher values rendered on top).
        visible: Whether the element is rendered.
        locked: Whether the element is protected from editing.
        fill: FillStyle fields.
        stroke: StrokeStyle fields.
        text_style: TextStyle fields.
        rectangle_props: RectangleProps fields.
        line_props: LineProps fields.
        text_props: TextProps fields.
        created_at: Creation timestamp (from UUIDAuditBase).
        updated_at: Last update timestamp (from UUIDAuditBase).
    """

    __tablename__ = "elements"

    canvas_id: Mapped[UUID] = mapped_column(ForeignKey("canvases.id", ondelete="CASCADE"), index=True)
    element_type: Mapped[str] = mapped_column(String(20), index=True)

    # Geometry
    position_x: Mapped[Decimal] = mapped_column(Coordinate, default=Decimal("0.00"))
    position_y: Mapped[Decimal] = mapped_column(Coordinate, default=Decimal("0.00"))
    width: Mapped[Decimal | None] = mapped_column(Coordinate, nullable=True)
    height: Mapped[Decimal | None] = mapped_column(Coordinate, nullable=True)

    # Layer ordering and state
    z_index: Mapped[int] = mapped_column(Integer, default=0, index=True)
    visible: Mapped[bool] = mapped_column(Boolean, default=True)
    locked: Mapped[bool] = mapped_column(Boolean, default=False)

    # Styles and type-specific properties
    fill: Mapped[dict[str, Any] | None] = mapped_column(NullableJSON, nullable=True)
    stroke: Mapped[dict[str, Any] | None] = mapped_column(NullableJSON, nullable=True)
    text_style: Mapped[dict[str, Any] | None] = mapped_column(NullableJSON, nullable=True)
    rectangle_props: Mapped[dict[str, Any] | None] = mapped_column(NullableJSON, nullable=True)
    line_props: Mapped[dict[str, Any] | None] = mapped_column(NullableJSON, nullable=True)
    text_props: Mapped[dict[str, Any] | None] = mapped_column(NullableJSON, nullable=True)


class ChatMessageModel(UUIDAuditBase):
    """SQLAlchemy model for chat messages.

    The message timestamp is the audit ``created_at`` column.

    Attributes:
        id: UUID primary key (from UUIDAuditBase).
        canvas_id: Foreign key to parent canvas.
        role: Author role (user or assistant).
        content: Message text.
        elements_created: Element IDs as strings, or NULL.
        elements_modified: Element IDs as strings, or NULL.
    """

    __tablename__ = "chat_messages"

    canvas_id: Mapped[UUID] = mapped_column(ForeignKey("canvases.id", ondelete="CASCADE"), index=True)
    role: Mapped[str] = mapped_column(String(20))
    content: Mapped[str] = mapped_column(Text)
    elements_created: Mapped[list[str] | None] = mapped_column(NullableJSON, nullable=True)
    elements_modified: Mapped[list[str] | None] = mapped_column(NullableJSON, nullable=True)


def canvas_to_model(canvas: Canvas) -> CanvasModel:
    """Convert a domain Canvas to a CanvasModel.

    Args:
        canvas: Domain Canvas dataclass instance.

    Returns:
        CanvasModel instance ready for database insertion.
    """
    return CanvasModel(
        id=canvas.id,
        name=canvas.name,
        description=canvas.description,
        width=to_decimal(canvas.width),
        height=to_decimal(canvas.height),
        background_color=canvas.background_color,
        zoom=to_decimal(canvas.zoom),
        pan_x=to_decimal(canvas.pan_x),
        pan_y=to_decimal(canvas.pan_y),
        created_at=canvas.created_at,
        updated_at=canvas.updated_at,
    )


def apply_canvas(model: CanvasModel, canvas: Canvas) -> None:
    """Copy the mutable fields of a domain Canvas onto an existing model."""
    model.name = canvas.name
    model.description = canvas.description
    model.width = to_decimal(canvas.width)
    model.height = to_decimal(canvas.height)
    model.background_color = canvas.background_color
    model.zoom = to_decimal(canvas.zoom)
    model.pan_x = to_decimal(canvas.pan_x)
    model.pan_y = to_decimal(canvas.pan_y)


def canvas_from_model(model: CanvasModel) -> Canvas:
    """Convert a CanvasModel to a domain Canvas.

    Args:
        model: SQLAlchemy CanvasModel instance.

    Returns:
        Domain Canvas dataclass instance.
    """
    return Canvas(
        id=model.id,
        name=model.name,
        description=model.description,
        width=to_float(model.width),
        height=to_float(model.height),
        background_color=model.background_color,
        zoom=to_float(model.zoom),
        pan_x=to_float(model.pan_x),
        pan_y=to_float(model.pan_y),
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def _dump(value: Any) -> dict[str, Any] | None:
    return asdict(value) if value is not None else None


def _load(cls: type, data: Mapping[str, Any] | None) -> Any:
    return cls(**data) if data is not None else None


def apply_element(model: ElementModel, element: Element) -> None:
    """Copy the mutable fields of a domain Element onto a model.

    Args:
        model: Target ElementModel.
        element: Domain Element with the values to store.
    """
    model.element_type = element.element_type.value
    model.position_x = to_decimal(element.position.x)
    model.position_y = to_decimal(element.position.y)
    model.width = to_decimal(element.size.width) if element.size else None
    model.height = to_decimal(element.size.height) if element.size else None
    model.z_index = element.z_index
    model.visible = element.visible
    model.locked = element.locked
    model.fill = _dump(element.fill)
    model.stroke = _dump(element.stroke)
    model.text_style = _dump(element.text_style)
    model.rectangle_props = _dump(element.rectangle_props)
    model.line_props = _dump(element.line_props)
    model.text_props = _dump(element.text_props)


def element_to_model(element: Element) -> ElementModel:
    """Convert a domain Element to an ElementModel.

    Args:
        element: Domain Element dataclass instance.

    Returns:
        ElementModel instance ready for database insertion.
    """
    model = ElementModel(
        id=element.id,
        canvas_id=element.canvas_id,
        created_at=element.created_at,
        updated_at=element.updated_at,
    )
    apply_element(model, element)
    return model


def element_from_model(model: ElementModel) -> Element:
    """Convert an ElementModel to a domain Element.

    Args:
        model: SQLAlchemy ElementModel instance.

    Returns:
        Domain Element dataclass instance.
    """
    size = None
    if model.width is not None and model.height is not None:
        size = Size(width=to_float(model.width), height=to_float(model.height))

    return Element(
        id=model.id,
        canvas_id=model.canvas_id,
        element_type=ElementType(model.element_type),
        position=Point(x=to_float(model.position_x), y=to_float(model.position_y)),
        size=size,
        z_index=model.z_index,
        visible=model.visible,
        locked=model.locked,
        fill=_load(FillStyle, model.fill),
        stroke=_load(StrokeStyle, model.stroke),
        text_style=_load(TextStyle, model.text_style),
        rectangle_props=_load(RectangleProps, model.rectangle_props),
        line_props=_load(LineProps, model.line_props),
        text_props=_load(TextProps, model.text_props),
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def _ids_to_json(ids: list[UUID] | None) -> list[str] | None:
    return [str(element_id) for element_id in ids] if ids is not None else None


def _ids_from_json(ids: list[str] | None) -> list[UUID] | None:
    return [UUID(element_id) for element_id in ids] if ids is not None else None


def message_to_model(message: ChatMessage) -> ChatMessageModel:
    """Convert a domain ChatMessage to a ChatMessageModel."""
    return ChatMessageModel(
        id=message.id,
        canvas_id=message.canvas_id,
        role=message.role.value,
        content=message.content,
        elements_created=_ids_to_json(message.elements_created),
        elements_modified=_ids_to_json(message.elements_modified),
        created_at=message.timestamp,
        updated_at=message.timestamp,
    )


def message_from_model(model: ChatMessageModel) -> ChatMessage:
    """Convert a ChatMessageModel to a domain ChatMessage."""
    return ChatMessage(
        id=model.id,
        canvas_id=model.canvas_id,
        role=model.role,
        content=model.content,
        timestamp=model.created_at,
        elements_created=_ids_from_json(model.elements_created),
        elements_modified=_ids_from_json(model.elements_modified),
    )
