"""
Domain schemas for SlideGrid.
"""

from .layout import *

__all__ = [
    "CanvasDimensions",
    "ContentItem",
    "ContentType",
    "Importance",
    "Margins",
    "Position",
    "PositionedElement",
    "TextAlignment",
    "Typography",
    "ViewingDistance",
]
