"""Core domain models for draftboard."""

from draftboard.core.interpreter import generate
from draftboard.core.models import (
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
from draftboard.core.style import FillStyle, StrokeStyle, TextStyle
from draftboard.core.types import ChatRole, ElementType, StrokeCap, StrokeJoin, TextAlign

__all__ = [
    "Canvas",
    "ChatMessage",
    "ChatRole",
    "ContextElement",
    "Element",
    "ElementDraft",
    "ElementType",
    "FillStyle",
    "LineProps",
    "Point",
    "RectangleProps",
    "Size",
    "StrokeCap",
    "StrokeJoin",
    "StrokeStyle",
    "TextAlign",
    "TextProps",
    "TextStyle",
    "generate",
]
