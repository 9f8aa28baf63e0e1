"""
Layout-related schemas shared with callers and rendering backends.
"""
import math
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


def round_px(value: float) -> int:
    """Round half up to whole pixels (Python's round() is half-to-even)"""
    return int(math.floor(value + 0.5))


class ContentType(str, Enum):
    """Text roles a content item can play on a slide."""
    TITLE = "title"
    HEADING = "heading"
    SUBHEADING = "subheading"
    BODY = "body"
    CAPTION = "caption"
    FOOTNOTE = "footnote"


class Importance(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ViewingDistance(str, Enum):
    CLOSE = "close"
    MEDIUM = "medium"
    FAR = "far"


class TextAlignment(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class CanvasDimensions(BaseModel):
    """Slide canvas size in pixels.

    Positivity is enforced where a grid is built so that a bad canvas
    surfaces as a configuration error of the engine.
    """
    model_config = ConfigDict(frozen=True)

    width: float = Field(..., description="Canvas width in pixels")
    height: float = Field(..., description="Canvas height in pixels")

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height if self.height else 0.0

    @property
    def is_valid(self) -> bool:
        return self.width > 0 and self.height > 0


class Margins(BaseModel):
    """Insets between the canvas edge and the content area."""
    model_config = ConfigDict(frozen=True)

    top: float = Field(default=0, ge=0)
    right: float = Field(default=0, ge=0)
    bottom: float = Field(default=0, ge=0)
    left: float = Field(default=0, ge=0)

    @classmethod
    def uniform(cls, value: float) -> "Margins":
        return cls(top=value, right=value, bottom=value, left=value)

    def scaled(self, factor: float) -> "Margins":
        return Margins(
            top=round_px(self.top * factor),
            right=round_px(self.right * factor),
            bottom=round_px(self.bottom * factor),
            left=round_px(self.left * factor),
        )

    @property
    def horizontal(self) -> float:
        return self.left + self.right

    @property
    def vertical(self) -> float:
        return self.top + self.bottom


class ContentItem(BaseModel):
    """A piece of slide content waiting to be positioned."""
    model_config = ConfigDict(frozen=True)

    type: ContentType = Field(default=ContentType.BODY, description="Text role")
    text: str = Field(default="", description="Text payload, used for length heuristics")
    importance: Importance = Field(default=Importance.MEDIUM)
    area_name: Optional[str] = Field(
        default=None,
        description="Grid area this item should occupy; unset items are assigned in order",
    )
    truncated: bool = Field(default=False, description="Text was condensed for a small screen")


class Position(BaseModel):
    """Axis-aligned rectangle in canvas pixels."""
    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def overlaps(self, other: "Position") -> bool:
        return not (
            self.right <= other.x
            or other.right <= self.x
            or self.bottom <= other.y
            or other.bottom <= self.y
        )

    def fits_within(self, canvas: CanvasDimensions) -> bool:
        return (
            self.x >= 0
            and self.y >= 0
            and self.width > 0
            and self.height > 0
            and self.right <= canvas.width
            and self.bottom <= canvas.height
        )


class Typography(BaseModel):
    model_config = ConfigDict(frozen=True)

    font_family: str
    font_size: int = Field(..., ge=1)
    line_height: float
    bold: bool = False
    alignment: TextAlignment = TextAlignment.LEFT
    color: Optional[str] = None


class PositionedElement(BaseModel):
    """Output record: a content item with its final geometry and text styling."""
    model_config = ConfigDict(frozen=True)

    content_item: ContentItem
    position: Position
    typography: Typography
    area_name: Optional[str] = None
