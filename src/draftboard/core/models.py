"""Core domain models for the draftboard canvas system."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4

from draftboard.core.style import FillStyle, StrokeStyle, TextStyle, is_hex_color
from draftboard.core.types import ChatRole, ElementType
from draftboard.exceptions import InvalidCanvasError, InvalidElementError, InvalidMessageError

# Geometry is kept to two decimal places, so extents and zoom start at one cent
MIN_EXTENT = 0.01


@dataclass
class Point:
    """A point in canvas space.

    Attributes:
        x: X-coordinate position.
        y: Y-coordinate position.
    """

    x: float
    y: float


@dataclass
class Size:
    """Width and height of an element's bounding box.

    Attributes:
        width: Box width, at least ``MIN_EXTENT``.
        height: Box height, at least ``MIN_EXTENT``.
    """

    width: float
    height: float

    def __post_init__(self) -> None:
        """Reject boxes smaller than the stored precision."""
        if self.width < MIN_EXTENT or self.height < MIN_EXTENT:
            msg = f"Size must be at least {MIN_EXTENT} on each side, got {self.width}x{self.height}"
            raise InvalidElementError(msg)


@dataclass
class RectangleProps:
    """Rectangle-specific properties.

    Attributes:
        border_radius: Corner radius in canvas units.
    """

    border_radius: float = 0.0

    def __post_init__(self) -> None:
        """Reject negative radii."""
        if self.border_radius < 0:
            msg = f"Border radius must not be negative, got {self.border_radius}"
            raise InvalidElementError(msg)


@dataclass
class LineProps:
    """Endpoints of a line segment.

    Attributes:
        x1: X-coordinate of the first endpoint.
        y1: Y-coordinate of the first endpoint.
        x2: X-coordinate of the second endpoint.
        y2: Y-coordinate of the second endpoint.
    """

    x1: float
    y1: float
    x2: float
    y2: float


@dataclass
class TextProps:
    """Text-specific properties.

    Attributes:
        content: The text to display.
        max_width: Optional wrapping width.
    """

    content: str
    max_width: float | None = None

    def __post_init__(self) -> None:
        """Reject non-positive wrapping widths."""
        if self.max_width is not None and self.max_width <= 0:
            msg = f"Max width must be positive, got {self.max_width}"
            raise InvalidElementError(msg)


def check_geometry(element_type: ElementType, size: Size | None, fill: FillStyle | None) -> None:
    """Enforce the size rules shared by drafts and persisted elements.

    Lines never carry a size, and any other element that is filled needs one.

    Raises:
        InvalidElementError: If the combination is not allowed.
    """
    if element_type == ElementType.LINE and size is not None:
        msg = "Line elements cannot have a size"
        raise InvalidElementError(msg)
    if element_type != ElementType.LINE and fill is not None and size is None:
        msg = f"Filled {element_type} elements require a size"
        raise InvalidElementError(msg)


@dataclass
class ElementDraft:
    """An element specification that has not been persisted yet.

    Drafts carry no identity, canvas reference or timestamps. Those are assigned
    by the storage backend when the draft is stored.

    Attributes:
        element_type: Type of the element.
        position: Top-left corner of the element on the canvas.
        size: Bounding box; always None for lines.
        fill: Optional fill style.
        stroke: Optional stroke style.
        text_style: Typography, for text elements.
        rectangle_props: Rectangle-specific properties.
        line_props: Line endpoints.
        text_props: Text content.
    """

    element_type: ElementType
    position: Point
    size: Size | None = None
    fill: FillStyle | None = None
    stroke: StrokeStyle | None = None
    text_style: TextStyle | None = None
    rectangle_props: RectangleProps | None = None
    line_props: LineProps | None = None
    text_props: TextProps | None = None

    def __post_init__(self) -> None:
        """Normalize the element type and validate geometry."""
        self.element_type = ElementType(self.element_type)
        check_geometry(self.element_type, self.size, self.fill)


@dataclass
class Element:
    """A persisted canvas element.

    Attributes:
        id: Unique identifier assigned by storage.
        canvas_id: ID of the owning canvas.
        element_type: Type of the element.
        position: Top-left corner of the element on the canvas.
        size: Bounding box; always None for lines.
        z_index: Layer ordering (higher values are rendered on top).
        visible: Whether the element is rendered.
        locked: Whether the element is protected from editing.
        fill: Optional fill style.
        stroke: Optional stroke style.
        text_style: Typography, for text elements.
        rectangle_props: Rectangle-specific properties.
        line_props: Line endpoints.
        text_props: Text content.
        created_at: Timestamp when the element was stored.
        updated_at: Timestamp of the last modification.
    """

    id: UUID
    canvas_id: UUID
    element_type: ElementType
    position: Point
    size: Size | None = None
    z_index: int = 0
    visible: bool = True
    locked: bool = False
    fill: FillStyle | None = None
    stroke: StrokeStyle | None = None
    text_style: TextStyle | None = None
    rectangle_props: RectangleProps | None = None
    line_props: LineProps | None = None
    text_props: TextProps | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def from_draft(
        cls,
        draft: ElementDraft,
        *,
        canvas_id: UUID,
        z_index: int = 0,
        visible: bool = True,
        locked: bool = False,
    ) -> Element:
        """Build a new persisted element from a draft with a fresh identity.

        Args:
            draft: The draft to store.
            canvas_id: ID of the owning canvas.
            z_index: Layer ordering for the new element.
            visible: Whether the element is rendered.
            locked: Whether the element is protected from editing.

        Returns:
            The element with a new ID and matching created/updated timestamps.
        """
        now = datetime.now(UTC)
        return cls(
            id=uuid4(),
            canvas_id=canvas_id,
            element_type=draft.element_type,
            position=draft.position,
            size=draft.size,
            z_index=z_index,
            visible=visible,
            locked=locked,
            fill=draft.fill,
            stroke=draft.stroke,
            text_style=draft.text_style,
            rectangle_props=draft.rectangle_props,
            line_props=draft.line_props,
            text_props=draft.text_props,
            created_at=now,
            updated_at=now,
        )


@dataclass(frozen=True)
class ContextElement:
    """Read-only view of a persisted element used to bias placement.

    Attributes:
        position: Top-left corner of the existing element.
        size: Bounding box of the existing element, if any.
    """

    position: Point
    size: Size | None = None

    @classmethod
    def from_element(cls, element: Element) -> ContextElement:
        """Create a context view of a persisted element."""
        return cls(position=Point(element.position.x, element.position.y), size=element.size)


@dataclass
class Canvas:
    """A design surface owning elements and chat history.

    Attributes:
        id: Unique identifier for the canvas.
        name: Display name for the canvas.
        description: Optional free-form description.
        width: Canvas width in canvas units.
        height: Canvas height in canvas units.
        background_color: Background color in #RRGGBB format.
        zoom: Viewport zoom factor.
        pan_x: Horizontal viewport offset.
        pan_y: Vertical viewport offset.
        created_at: Timestamp when the canvas was created.
        updated_at: Timestamp when the canvas was last updated.
    """

    id: UUID = field(default_factory=uuid4)
    name: str = "Untitled Canvas"
    description: str | None = None
    width: float = 1920.0
    height: float = 1080.0
    background_color: str = "#FFFFFF"
    zoom: float = 1.0
    pan_x: float = 0.0
    pan_y: float = 0.0
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Validate name, dimensions, zoom and background color."""
        if not self.name.strip():
            msg = "Canvas name must not be empty"
            raise InvalidCanvasError(msg)
        if self.width < MIN_EXTENT or self.height < MIN_EXTENT:
            msg = f"Canvas dimensions must be at least {MIN_EXTENT}, got {self.width}x{self.height}"
            raise InvalidCanvasError(msg)
        if self.zoom < MIN_EXTENT:
            msg = f"Zoom must be at least {MIN_EXTENT}, got {self.zoom}"
            raise InvalidCanvasError(msg)
        if not is_hex_color(self.background_color):
            msg = f"Invalid background color {self.background_color!r}, expected #RRGGBB"
            raise InvalidCanvasError(msg)


@dataclass
class ChatMessage:
    """A message in a canvas chat log.

    Attributes:
        canvas_id: ID of the canvas the conversation belongs to.
        role: Who wrote the message.
        content: Message text.
        id: Unique identifier for the message.
        timestamp: When the message was written.
        elements_created: IDs of elements created in response to the message.
        elements_modified: IDs of elements modified in response to the message.
    """

    canvas_id: UUID
    role: ChatRole
    content: str
    id: UUID = field(default_factory=uuid4)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    elements_created: list[UUID] | None = None
    elements_modified: list[UUID] | None = None

    def __post_init__(self) -> None:
        """Normalize the role and reject empty content."""
        self.role = ChatRole(self.role)
        if not self.content.strip():
            msg = "Chat message content must not be empty"
            raise InvalidMessageError(msg)
