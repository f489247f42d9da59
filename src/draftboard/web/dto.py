"""Data Transfer Objects (DTOs) for the draftboard API.

Request DTOs carry wire-level constraints through ``msgspec.Meta`` so that
malformed bodies are rejected by Litestar with a 422 before reaching the
service layer. Update DTOs are ``msgspec.Struct`` types whose fields default to
``UNSET``: an absent field leaves the value unchanged, an explicit ``null``
clears it.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Annotated, Any
from uuid import UUID

import msgspec
from msgspec import UNSET, Meta, UnsetType

from draftboard.core.models import MIN_EXTENT, ElementDraft, LineProps, Point, RectangleProps, Size, TextProps
from draftboard.core.style import HEX_COLOR_PATTERN, FillStyle, StrokeStyle, TextStyle
from draftboard.core.types import ChatRole, ElementType, StrokeCap, StrokeJoin, TextAlign

if TYPE_CHECKING:
    from draftboard.core.models import Canvas, ChatMessage, Element

HexColor = Annotated[str, Meta(pattern=HEX_COLOR_PATTERN, examples=["#3B82F6"])]
Opacity = Annotated[float, Meta(ge=0.0, le=1.0)]
Positive = Annotated[float, Meta(gt=0.0)]
Extent = Annotated[float, Meta(ge=MIN_EXTENT)]
NonNegative = Annotated[float, Meta(ge=0.0)]
FontWeight = Annotated[int, Meta(ge=100, le=900)]
NonEmptyStr = Annotated[str, Meta(min_length=1)]


# Value DTOs, shared by requests and responses


@dataclass
class PointDTO:
    """DTO for a point in canvas space.

    Attributes:
        x: X-coordinate position.
        y: Y-coordinate position.
    """

    x: float
    y: float


@dataclass
class SizeDTO:
    """DTO for an element bounding box.

    Attributes:
        width: Box width, at least 0.01.
        height: Box height, at least 0.01.
    """

    width: Extent
    height: Extent


@dataclass
class FillDTO:
    """DTO for a fill style.

    Attributes:
        color: Fill color in #RRGGBB format.
        opacity: Opacity from 0.0 to 1.0.
    """

    color: HexColor
    opacity: Opacity = 1.0


@dataclass
class StrokeDTO:
    """DTO for a stroke style.

    Attributes:
        color: Stroke color in #RRGGBB format.
        width: Stroke width.
        opacity: Opacity from 0.0 to 1.0.
        cap: Line cap style.
        join: Line join style.
    """

    color: HexColor
    width: NonNegative = 1.0
    opacity: Opacity = 1.0
    cap: StrokeCap = StrokeCap.BUTT
    join: StrokeJoin = StrokeJoin.MITER


@dataclass
class TextStyleDTO:
    """DTO for typography settings.

    Attributes:
        font_family: Font family name.
        font_size: Font size.
        font_weight: Font weight from 100 to 900.
        text_align: Horizontal alignment.
        line_height: Line height multiplier.
    """

    font_family: str = "Arial"
    font_size: Positive = 16.0
    font_weight: FontWeight = 400
    text_align: TextAlign = TextAlign.LEFT
    line_height: Positive = 1.2


@dataclass
class RectanglePropsDTO:
    """DTO for rectangle-specific properties."""

    border_radius: NonNegative = 0.0


@dataclass
class LinePropsDTO:
    """DTO for line endpoints."""

    x1: float
    y1: float
    x2: float
    y2: float


@dataclass
class TextPropsDTO:
    """DTO for text-specific properties.

    Attributes:
        content: The text to display.
        max_width: Optional wrapping width.
    """

    content: str
    max_width: Positive | None = None


# Canvas DTOs


@dataclass
class CreateCanvasDTO:
    """DTO for creating a new canvas.

    Attributes:
        name: Display name for the canvas.
        description: Optional free-form description.
        width: Canvas width.
        height: Canvas height.
        background_color: Background color in hex format.
    """

    name: NonEmptyStr = "Untitled Canvas"
    description: str | None = None
    width: Extent = 1920.0
    height: Extent = 1080.0
    background_color: HexColor = "#FFFFFF"


class UpdateCanvasDTO(msgspec.Struct, kw_only=True):
    """DTO for updating canvas properties.

    Absent fields are left unchanged. ``description`` may be ``null`` to clear it.
    """

    name: NonEmptyStr | UnsetType = UNSET
    description: str | None | UnsetType = UNSET
    width: Extent | UnsetType = UNSET
    height: Extent | UnsetType = UNSET
    background_color: HexColor | UnsetType = UNSET
    zoom: Extent | UnsetType = UNSET
    pan_x: float | UnsetType = UNSET
    pan_y: float | UnsetType = UNSET


@dataclass
class CanvasResponseDTO:
    """DTO for canvas list/summary responses.

    Attributes:
        id: Unique identifier for the canvas.
        name: Display name for the canvas.
        description: Optional free-form description.
        width: Canvas width.
        height: Canvas height.
        background_color: Background color in hex format.
        zoom: Viewport zoom factor.
        pan_x: Horizontal viewport offset.
        pan_y: Vertical viewport offset.
        created_at: Timestamp when the canvas was created.
        updated_at: Timestamp when the canvas was last updated.
    """

    id: UUID
    name: str
    description: str | None
    width: float
    height: float
    background_color: str
    zoom: float
    pan_x: float
    pan_y: float
    created_at: datetime
    updated_at: datetime


@dataclass
class CanvasDetailDTO(CanvasResponseDTO):
    """DTO for detailed canvas responses including elements.

    Attributes:
        elements: Elements on the canvas, ordered by z-index.
    """

    elements: list[ElementResponseDTO]


# Element DTOs


@dataclass
class CreateElementDTO:
    """DTO for creating an element from a draft.

    Attributes:
        element_type: Type of the element.
        position: Top-left corner of the element.
        size: Bounding box; must be omitted for lines.
        fill: Optional fill style.
        stroke: Optional stroke style.
        text_style: Typography, for text elements.
        rectangle_props: Rectangle-specific properties.
        line_props: Line endpoints.
        text_props: Text content.
        z_index: Layer ordering. Defaults to one above the current top element.
        visible: Whether the element is rendered.
        locked: Whether the element is protected from editing.
    """

    element_type: ElementType
    position: PointDTO
    size: SizeDTO | None = None
    fill: FillDTO | None = None
    stroke: StrokeDTO | None = None
    text_style: TextStyleDTO | None = None
    rectangle_props: RectanglePropsDTO | None = None
    line_props: LinePropsDTO | None = None
    text_props: TextPropsDTO | None = None
    z_index: int | None = None
    visible: bool = True
    locked: bool = False


class UpdateElementDTO(msgspec.Struct, kw_only=True):
    """DTO for updating element properties.

    Absent fields are left unchanged. Nullable fields may be ``null`` to clear them.
    """

    position: PointDTO | UnsetType = UNSET
    size: SizeDTO | None | UnsetType = UNSET
    z_index: int | UnsetType = UNSET
    visible: bool | UnsetType = UNSET
    locked: bool | UnsetType = UNSET
    fill: FillDTO | None | UnsetType = UNSET
    stroke: StrokeDTO | None | UnsetType = UNSET
    text_style: TextStyleDTO | None | UnsetType = UNSET
    rectangle_props: RectanglePropsDTO | None | UnsetType = UNSET
    line_props: LinePropsDTO | None | UnsetType = UNSET
    text_props: TextPropsDTO | None | UnsetType = UNSET


@dataclass
class ElementResponseDTO:
    """DTO for element responses."""

    id: UUID
    canvas_id: UUID
    element_type: ElementType
    position: PointDTO
    size: SizeDTO | None
    z_index: int
    visible: bool
    locked: bool
    fill: FillDTO | None
    stroke: StrokeDTO | None
    text_style: TextStyleDTO | None
    rectangle_props: RectanglePropsDTO | None
    line_props: LinePropsDTO | None
    text_props: TextPropsDTO | None
    created_at: datetime
    updated_at: datetime


# Chat and generation DTOs


@dataclass
class CreateChatMessageDTO:
    """DTO for appending a chat message.

    Attributes:
        content: Message text.
        role: Who wrote the message.
        elements_created: IDs of elements created in response.
        elements_modified: IDs of elements modified in response.
    """

    content: NonEmptyStr
    role: ChatRole = ChatRole.USER
    elements_created: list[UUID] | None = None
    elements_modified: list[UUID] | None = None


@dataclass
class ChatMessageResponseDTO:
    """DTO for chat message responses."""

    id: UUID
    canvas_id: UUID
    role: ChatRole
    content: str
    timestamp: datetime
    elements_created: list[UUID] | None
    elements_modified: list[UUID] | None


@dataclass
class GenerateElementsDTO:
    """DTO for prompt-driven element generation.

    Attributes:
        prompt: Free-text instruction, e.g. ``Add a red circle``.
        context_element_ids: Existing elements on the canvas to place around.
        record_chat: Store the prompt and a summary reply in the chat log.
    """

    prompt: NonEmptyStr
    context_element_ids: list[UUID] | None = None
    record_chat: bool = False


# Conversion helper functions


def _from_dto(cls: type, dto: Any) -> Any:
    """Build a domain value object from a DTO with the same field names."""
    return cls(**asdict(dto)) if dto is not None else None


def _to_dto(cls: type, value: Any) -> Any:
    """Build a DTO from a domain value object with the same field names."""
    return cls(**asdict(value)) if value is not None else None


def _maybe(cls: type, value: Any) -> Any:
    """Convert a tri-state DTO field, passing ``UNSET`` and ``None`` through."""
    if value is UNSET or value is None:
        return value
    return _from_dto(cls, value)


def draft_from_dto(dto: CreateElementDTO) -> ElementDraft:
    """Convert a CreateElementDTO to a domain ElementDraft.

    Args:
        dto: The DTO to convert.

    Returns:
        The corresponding draft.

    Raises:
        InvalidElementError: If the draft breaks the geometry rules.
    """
    return ElementDraft(
        element_type=dto.element_type,
        position=Point(x=dto.position.x, y=dto.position.y),
        size=_from_dto(Size, dto.size),
        fill=_from_dto(FillStyle, dto.fill),
        stroke=_from_dto(StrokeStyle, dto.stroke),
        text_style=_from_dto(TextStyle, dto.text_style),
        rectangle_props=_from_dto(RectangleProps, dto.rectangle_props),
        line_props=_from_dto(LineProps, dto.line_props),
        text_props=_from_dto(TextProps, dto.text_props),
    )


def element_updates_from_dto(dto: UpdateElementDTO) -> dict[str, Any]:
    """Convert an UpdateElementDTO to tri-state keyword arguments for the service.

    Args:
        dto: The DTO to convert.

    Returns:
        Keyword arguments for ``CanvasService.update_element``.
    """
    return {
        "position": _maybe(Point, dto.position),
        "size": _maybe(Size, dto.size),
        "z_index": dto.z_index,
        "visible": dto.visible,
        "locked": dto.locked,
        "fill": _maybe(FillStyle, dto.fill),
        "stroke": _maybe(StrokeStyle, dto.stroke),
        "text_style": _maybe(TextStyle, dto.text_style),
        "rectangle_props": _maybe(RectangleProps, dto.rectangle_props),
        "line_props": _maybe(LineProps, dto.line_props),
        "text_props": _maybe(TextProps, dto.text_props),
    }


def canvas_updates_from_dto(dto: UpdateCanvasDTO) -> dict[str, Any]:
    """Convert an UpdateCanvasDTO to tri-state keyword arguments for the service."""
    return {name: getattr(dto, name) for name in dto.__struct_fields__}


def canvas_to_response(canvas: Canvas) -> CanvasResponseDTO:
    """Convert a Canvas domain model to a CanvasResponseDTO.

    Args:
        canvas: The canvas to convert.

    Returns:
        The corresponding CanvasResponseDTO.
    """
    return CanvasResponseDTO(**asdict(canvas))


def canvas_to_detail(canvas: Canvas, elements: list[Element]) -> CanvasDetailDTO:
    """Convert a Canvas and its elements to a CanvasDetailDTO.

    Args:
        canvas: The canvas to convert.
        elements: The elements on the canvas.

    Returns:
        The corresponding CanvasDetailDTO.
    """
    return CanvasDetailDTO(
        **asdict(canvas),
        elements=[element_to_response(element) for element in elements],
    )


def element_to_response(element: Element) -> ElementResponseDTO:
    """Convert an Element domain model to an ElementResponseDTO.

    Args:
        element: The element to convert.

    Returns:
        The corresponding ElementResponseDTO.
    """
    return ElementResponseDTO(
        id=element.id,
        canvas_id=element.canvas_id,
        element_type=element.element_type,
        position=PointDTO(x=element.position.x, y=element.position.y),
        size=_to_dto(SizeDTO, element.size),
        z_index=element.z_index,
        visible=element.visible,
        locked=element.locked,
        fill=_to_dto(FillDTO, element.fill),
        stroke=_to_dto(StrokeDTO, element.stroke),
        text_style=_to_dto(TextStyleDTO, element.text_style),
        rectangle_props=_to_dto(RectanglePropsDTO, element.rectangle_props),
        line_props=_to_dto(LinePropsDTO, element.line_props),
        text_props=_to_dto(TextPropsDTO, element.text_props),
        created_at=element.created_at,
        updated_at=element.updated_at,
    )


def message_to_response(message: ChatMessage) -> ChatMessageResponseDTO:
    """Convert a ChatMessage domain model to a ChatMessageResponseDTO."""
    return ChatMessageResponseDTO(
        id=message.id,
        canvas_id=message.canvas_id,
        role=message.role,
        content=message.content,
        timestamp=message.timestamp,
        elements_created=message.elements_created,
        elements_modified=message.elements_modified,
    )
