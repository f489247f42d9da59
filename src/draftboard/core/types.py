"""Core type definitions for draftboard."""

from __future__ import annotations

from enum import StrEnum


class ElementType(StrEnum):
    """Enumeration of element types in the canvas."""

    RECTANGLE = "rectangle"
    CIRCLE = "circle"
    LINE = "line"
    TEXT = "text"


class StrokeCap(StrEnum):
    """Shape drawn at the open ends of a stroke."""

    BUTT = "butt"
    ROUND = "round"
    SQUARE = "square"


class StrokeJoin(StrEnum):
    """Shape drawn where two stroke segments meet."""

    MITER = "miter"
    ROUND = "round"
    BEVEL = "bevel"


class TextAlign(StrEnum):
    """Horizontal alignment of text inside its box."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class ChatRole(StrEnum):
    """Author of a chat message."""

    USER = "user"
    ASSISTANT = "assistant"
