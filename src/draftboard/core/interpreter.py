"""Prompt interpreter turning free text into element drafts.

The interpreter is a deterministic keyword matcher. It looks for a fixed set of
shape keywords, resolves one color from a fixed palette, and builds a single
draft centered on the canvas. When context elements are supplied, drafts are
nudged away from the center by a fixed offset.

Type detection is an ordered rule table: the first rule whose keywords appear
anywhere in the prompt wins, regardless of where in the text the keyword sits.
A prompt mentioning both "rectangle" and "text" always yields a rectangle.

Example:
    >>> drafts = generate("Add a red circle", 1920, 1080, [])
    >>> drafts[0].element_type, drafts[0].position
    (<ElementType.CIRCLE: 'circle'>, Point(x=910.0, y=490.0))
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from draftboard.core.models import ElementDraft, LineProps, Point, RectangleProps, Size, TextProps
from draftboard.core.style import FillStyle, StrokeStyle, TextStyle
from draftboard.core.types import ElementType, StrokeCap, StrokeJoin, TextAlign

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from draftboard.core.models import ContextElement

# Iteration order decides which color wins when several are mentioned.
COLOR_PALETTE: dict[str, str] = {
    "red": "#EF4444",
    "blue": "#3B82F6",
    "green": "#10B981",
    "yellow": "#F59E0B",
    "purple": "#8B5CF6",
    "pink": "#EC4899",
    "orange": "#F97316",
    "gray": "#6B7280",
    "black": "#000000",
    "white": "#FFFFFF",
}
DEFAULT_COLOR = COLOR_PALETTE["blue"]
DEFAULT_STROKE_COLOR = "#1E40AF"
SHAPE_STROKE_COLOR = "#000000"
STROKE_WIDTH = 2.0

RECTANGLE_SIZE = (150.0, 100.0)
SQUARE_SIZE = (100.0, 100.0)
ROUNDED_RADIUS = 10.0
CIRCLE_RADIUS = 50.0
LINE_LENGTH = 150.0

TEXT_BOX_WIDTH = 200.0
TEXT_LINE_FACTOR = 1.5
TEXT_FONT_FAMILY = "Arial"
TEXT_LINE_HEIGHT = 1.2
DEFAULT_TEXT = "Sample Text"

CONTEXT_OFFSET = 50.0
CONTEXT_STAGGER = 20.0

_DOUBLE_QUOTED = re.compile(r"\"([^\"]+)\"")
# Apostrophes inside words do not open or close a single-quoted span
_SINGLE_QUOTED = re.compile(r"(?<!\w)'([^']+)'(?!\w)")


@dataclass(frozen=True)
class ParsedPrompt:
    """A prompt prepared for matching.

    Attributes:
        original: The prompt as written, used for literal content.
        lowered: Lower-cased prompt used for keyword matching.
        center: Canvas midpoint.
        color: Resolved palette color.
    """

    original: str
    lowered: str
    center: Point
    color: str

    def has(self, keyword: str) -> bool:
        """Check whether a keyword occurs anywhere in the prompt."""
        return keyword in self.lowered


@dataclass(frozen=True)
class TypeRule:
    """One entry of the ordered type-detection table.

    Attributes:
        element_type: Type produced when the rule matches.
        keywords: Any of these substrings triggers the rule.
        build: Builds the draft for a matching prompt.
    """

    element_type: ElementType
    keywords: tuple[str, ...]
    build: Callable[[ParsedPrompt], ElementDraft]

    def matches(self, prompt: ParsedPrompt) -> bool:
        """Check whether any keyword of this rule occurs in the prompt."""
        return any(prompt.has(keyword) for keyword in self.keywords)


def resolve_color(lowered_prompt: str) -> str:
    """Return the hex value of the first palette color named in the prompt.

    Args:
        lowered_prompt: The prompt in lower case.

    Returns:
        The matching palette color, or the default blue.
    """
    for name, value in COLOR_PALETTE.items():
        if name in lowered_prompt:
            return value
    return DEFAULT_COLOR


def extract_quoted_text(prompt: str) -> str | None:
    """Return the literal text a prompt asks for.

    A double-quoted span wins over a single-quoted one, so apostrophes such as
    in ``that's "Bob's Diner"`` never start a match. Single quotes only count
    when they sit on word boundaries.
    """
    for pattern in (_DOUBLE_QUOTED, _SINGLE_QUOTED):
        match = pattern.search(prompt)
        if match is not None:
            return match.group(1)
    return None


def _shape_stroke() -> StrokeStyle:
    return StrokeStyle(
        color=SHAPE_STROKE_COLOR,
        width=STROKE_WIDTH,
        opacity=1.0,
        cap=StrokeCap.BUTT,
        join=StrokeJoin.MITER,
    )


def _centered(center: Point, width: float, height: float) -> Point:
    return Point(x=center.x - width / 2, y=center.y - height / 2)


def _build_rectangle(prompt: ParsedPrompt) -> ElementDraft:
    width, height = SQUARE_SIZE if prompt.has("square") else RECTANGLE_SIZE
    return ElementDraft(
        element_type=ElementType.RECTANGLE,
        position=_centered(prompt.center, width, height),
        size=Size(width=width, height=height),
        fill=FillStyle(color=prompt.color, opacity=1.0),
        stroke=_shape_stroke(),
        rectangle_props=RectangleProps(border_radius=ROUNDED_RADIUS if prompt.has("rounded") else 0.0),
    )


def _build_circle(prompt: ParsedPrompt) -> ElementDraft:
    diameter = CIRCLE_RADIUS * 2
    return ElementDraft(
        element_type=ElementType.CIRCLE,
        position=Point(x=prompt.center.x - CIRCLE_RADIUS, y=prompt.center.y - CIRCLE_RADIUS),
        size=Size(width=diameter, height=diameter),
        fill=FillStyle(color=prompt.color, opacity=1.0),
        stroke=_shape_stroke(),
    )


def _build_line(prompt: ParsedPrompt) -> ElementDraft:
    half = LINE_LENGTH / 2
    endpoints = LineProps(
        x1=prompt.center.x - half,
        y1=prompt.center.y,
        x2=prompt.center.x + half,
        y2=prompt.center.y,
    )
    return ElementDraft(
        element_type=ElementType.LINE,
        position=Point(x=min(endpoints.x1, endpoints.x2), y=min(endpoints.y1, endpoints.y2)),
        stroke=StrokeStyle(
            color=prompt.color,
            width=STROKE_WIDTH,
            opacity=1.0,
            cap=StrokeCap.BUTT,
            join=StrokeJoin.MITER,
        ),
        line_props=endpoints,
    )


def _build_text(prompt: ParsedPrompt) -> ElementDraft:
    if prompt.has("title"):
        font_size = 24.0
    elif prompt.has("large"):
        font_size = 20.0
    else:
        font_size = 16.0
    height = font_size * TEXT_LINE_FACTOR
    return ElementDraft(
        element_type=ElementType.TEXT,
        position=_centered(prompt.center, TEXT_BOX_WIDTH, height),
        size=Size(width=TEXT_BOX_WIDTH, height=height),
        fill=FillStyle(color=prompt.color, opacity=1.0),
        text_style=TextStyle(
            font_family=TEXT_FONT_FAMILY,
            font_size=font_size,
            font_weight=700 if prompt.has("bold") else 400,
            text_align=TextAlign.LEFT,
            line_height=TEXT_LINE_HEIGHT,
        ),
        text_props=TextProps(content=extract_quoted_text(prompt.original) or DEFAULT_TEXT),
    )


def _build_default(prompt: ParsedPrompt) -> ElementDraft:
    width, height = RECTANGLE_SIZE
    return ElementDraft(
        element_type=ElementType.RECTANGLE,
        position=_centered(prompt.center, width, height),
        size=Size(width=width, height=height),
        fill=FillStyle(color=prompt.color, opacity=1.0),
        stroke=StrokeStyle(
            color=DEFAULT_STROKE_COLOR,
            width=STROKE_WIDTH,
            opacity=1.0,
            cap=StrokeCap.BUTT,
            join=StrokeJoin.MITER,
        ),
        rectangle_props=RectangleProps(border_radius=0.0),
    )


TYPE_RULES: tuple[TypeRule, ...] = (
    TypeRule(ElementType.RECTANGLE, ("rectangle", "box", "square"), _build_rectangle),
    TypeRule(ElementType.CIRCLE, ("circle", "round"), _build_circle),
    TypeRule(ElementType.LINE, ("line",), _build_line),
    TypeRule(ElementType.TEXT, ("text", "label", "title"), _build_text),
)
DEFAULT_RULE = TypeRule(ElementType.RECTANGLE, (), _build_default)


def parse_prompt(prompt: str, canvas_width: float, canvas_height: float) -> ParsedPrompt:
    """Prepare a prompt for keyword matching against a canvas of the given size."""
    lowered = prompt.lower()
    return ParsedPrompt(
        original=prompt,
        lowered=lowered,
        center=Point(x=canvas_width / 2, y=canvas_height / 2),
        color=resolve_color(lowered),
    )


def detect_rule(prompt: ParsedPrompt) -> TypeRule:
    """Return the first rule in ``TYPE_RULES`` matching the prompt, or the default rule."""
    return next((rule for rule in TYPE_RULES if rule.matches(prompt)), DEFAULT_RULE)


def _shift(draft: ElementDraft, offset: float) -> ElementDraft:
    position = Point(x=draft.position.x + offset, y=draft.position.y + offset)
    line_props = draft.line_props
    if line_props is not None:
        line_props = LineProps(
            x1=line_props.x1 + offset,
            y1=line_props.y1 + offset,
            x2=line_props.x2 + offset,
            y2=line_props.y2 + offset,
        )
    return replace(draft, position=position, line_props=line_props)


def apply_context_offset(
    drafts: Sequence[ElementDraft],
    context_elements: Sequence[ContextElement],
) -> list[ElementDraft]:
    """Nudge drafts away from existing elements.

    With any context present, draft ``i`` moves by ``CONTEXT_OFFSET + i * CONTEXT_STAGGER``
    on both axes. The context elements' own coordinates are not inspected.

    Args:
        drafts: Drafts in generation order.
        context_elements: Existing elements the new drafts should avoid.

    Returns:
        New drafts; the inputs are left untouched.
    """
    if not context_elements:
        return list(drafts)
    return [_shift(draft, CONTEXT_OFFSET + index * CONTEXT_STAGGER) for index, draft in enumerate(drafts)]


def generate(
    prompt: str,
    canvas_width: float,
    canvas_height: float,
    context_elements: Sequence[ContextElement] = (),
) -> list[ElementDraft]:
    """Derive element drafts from a free-text prompt.

    The function is pure and total: the same arguments always produce equal
    drafts, and prompts without a recognized keyword fall back to a default
    rectangle instead of raising.

    Args:
        prompt: Free-text instruction, e.g. ``'Add text that says "Hello"'``.
        canvas_width: Width of the target canvas.
        canvas_height: Height of the target canvas.
        context_elements: Existing elements used to bias placement.

    Returns:
        The drafts in generation order.
    """
    parsed = parse_prompt(prompt, canvas_width, canvas_height)
    drafts = [detect_rule(parsed).build(parsed)]
    return apply_context_offset(drafts, context_elements)
