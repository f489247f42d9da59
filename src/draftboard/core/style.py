"""Style definitions for canvas elements."""

from __future__ import annotations

import re
from dataclasses import dataclass

from draftboard.core.types import StrokeCap, StrokeJoin, TextAlign
from draftboard.exceptions import InvalidElementError

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"
_HEX_COLOR = re.compile(HEX_COLOR_PATTERN)


def is_hex_color(value: str) -> bool:
    """Check whether a value is a 6-digit hex RGB color such as ``#3B82F6``."""
    return bool(_HEX_COLOR.match(value))


def _check_color(value: str) -> None:
    if not is_hex_color(value):
        msg = f"Invalid color {value!r}, expected #RRGGBB"
        raise InvalidElementError(msg)


def _check_opacity(value: float) -> None:
    if not 0.0 <= value <= 1.0:
        msg = f"Opacity must be between 0 and 1, got {value}"
        raise InvalidElementError(msg)


@dataclass
class FillStyle:
    """Fill applied to the interior of an element.

    Attributes:
        color: Fill color in #RRGGBB format.
        opacity: Opacity level from 0.0 (transparent) to 1.0 (opaque).
    """

    color: str
    opacity: float = 1.0

    def __post_init__(self) -> None:
        """Validate color and opacity."""
        _check_color(self.color)
        _check_opacity(self.opacity)


@dataclass
class StrokeStyle:
    """Outline applied to an element.

    Attributes:
        color: Stroke color in #RRGGBB format.
        width: Stroke width in canvas units.
        opacity: Opacity level from 0.0 (transparent) to 1.0 (opaque).
        cap: Shape of open stroke ends.
        join: Shape of stroke corners.
    """

    color: str
    width: float = 1.0
    opacity: float = 1.0
    cap: StrokeCap = StrokeCap.BUTT
    join: StrokeJoin = StrokeJoin.MITER

    def __post_init__(self) -> None:
        """Validate color, width and opacity."""
        _check_color(self.color)
        _check_opacity(self.opacity)
        if self.width < 0:
            msg = f"Stroke width must not be negative, got {self.width}"
            raise InvalidElementError(msg)
        self.cap = StrokeCap(self.cap)
        self.join = StrokeJoin(self.join)


@dataclass
class TextStyle:
    """Typography settings for text elements.

    Attributes:
        font_family: Font family name.
        font_size: Font size in canvas units.
        font_weight: CSS-style weight between 100 and 900.
        text_align: Horizontal alignment.
        line_height: Line height as a multiple of the font size.
    """

    font_family: str = "Arial"
    font_size: float = 16.0
    font_weight: int = 400
    text_align: TextAlign = TextAlign.LEFT
    line_height: float = 1.2

    def __post_init__(self) -> None:
        """Validate numeric ranges."""
        if self.font_size <= 0:
            msg = f"Font size must be positive, got {self.font_size}"
            raise InvalidElementError(msg)
        if not 100 <= self.font_weight <= 900:
            msg = f"Font weight must be between 100 and 900, got {self.font_weight}"
            raise InvalidElementError(msg)
        if self.line_height <= 0:
            msg = f"Line height must be positive, got {self.line_height}"
            raise InvalidElementError(msg)
        self.text_align = TextAlign(self.text_align)
