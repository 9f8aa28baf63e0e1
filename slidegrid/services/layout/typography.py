"""
Responsive typography.

Font size, line height, family, weight, alignment and color for a
content item placed on a canvas of a given size.
"""

from typing import List, Optional, Union

from slidegrid.domain.schemas.layout import (
    CanvasDimensions,
    ContentItem,
    Importance,
    PositionedElement,
    TextAlignment,
    Typography,
    ViewingDistance,
)

from .base import coerce_enum, round_px
from .config import LayoutEngineConfig, ThemeColors, TypographyConfig

# (max content length, factor); longer content falls through to the last factor
CONTENT_LENGTH_FACTORS = ((50, 1.0), (150, 0.95), (300, 0.85))
LONG_CONTENT_FACTOR = 0.75

DISTANCE_FACTORS = {
    ViewingDistance.CLOSE: 0.9,
    ViewingDistance.MEDIUM: 1.0,
    ViewingDistance.FAR: 1.3,
}

IMPORTANCE_FACTORS = {
    Importance.HIGH: 1.15,
    Importance.MEDIUM: 1.0,
    Importance.LOW: 0.9,
}

CENTERED_AREAS = ("header", "hero")
PRIMARY_COLOR_AREAS = ("header", "hero")
SECONDARY_COLOR_AREAS = ("sidebar", "footer")

# Line height below this multiple of the font size is flagged
ACCESSIBLE_LINE_HEIGHT_RATIO = 1.5


def _type_key(content_type: Union[str, object]) -> str:
    return getattr(content_type, "value", content_type)


def calculate_scale_ratio(canvas_width: float, canvas_height: float, config: Optional[TypographyConfig] = None) -> float:
    config = config or TypographyConfig()
    return min(canvas_width / config.reference_width, canvas_height / config.reference_height)


def content_length_factor(content_length: int) -> float:
    for limit, factor in CONTENT_LENGTH_FACTORS:
        if content_length <= limit:
            return factor
    return LONG_CONTENT_FACTOR


def calculate_responsive_font_size(
    base_size: float,
    canvas_width: float,
    canvas_height: float,
    content_length: int = 0,
    viewing_distance: Union[ViewingDistance, str] = ViewingDistance.MEDIUM,
    importance: Union[Importance, str] = Importance.MEDIUM,
    config: Optional[TypographyConfig] = None,
) -> int:
    """
    Scale a base font size to a canvas.

    Args:
        base_size: Font size designed for the 960x540 reference canvas
        canvas_width: Canvas width in pixels
        canvas_height: Canvas height in pixels
        content_length: Text length in characters
        viewing_distance: Expected audience distance
        importance: Content importance

    Returns:
        Integer font size within the configured bounds
    """
    config = config or TypographyConfig()
    distance = coerce_enum(ViewingDistance, viewing_distance, "viewing_distance")
    importance = coerce_enum(Importance, importance, "importance")

    size = (
        base_size
        * calculate_scale_ratio(canvas_width, canvas_height, config)
        * content_length_factor(content_length)
        * DISTANCE_FACTORS[distance]
        * IMPORTANCE_FACTORS[importance]
    )
    return max(config.min_font_size, min(config.max_font_size, round_px(size)))


def calculate_line_height(font_size: float, content_type: str, config: Optional[TypographyConfig] = None) -> float:
    config = config or TypographyConfig()
    ratio = config.line_height_ratios.get(_type_key(content_type), config.default_line_height_ratio)
    if font_size < config.small_text_threshold:
        ratio += config.small_text_ratio_bonus
    return round(font_size * ratio, 2)


def select_font_family(content_type: str, language: str = "en", config: Optional[TypographyConfig] = None) -> str:
    config = config or TypographyConfig()
    fonts = config.font_families.get(language) or config.font_families[config.default_language]
    return fonts.get(_type_key(content_type), fonts["default"])


def is_bold(content_type: str, config: Optional[TypographyConfig] = None) -> bool:
    config = config or TypographyConfig()
    return _type_key(content_type) in config.bold_types


def select_alignment(area_name: Optional[str], content_type: str) -> TextAlignment:
    if _type_key(content_type) == "title" or area_name in CENTERED_AREAS:
        return TextAlignment.CENTER
    return TextAlignment.LEFT


def select_color(area_name: Optional[str], theme: ThemeColors) -> str:
    if area_name in PRIMARY_COLOR_AREAS:
        return theme.primary
    if area_name in SECONDARY_COLOR_AREAS:
        return theme.text_secondary
    return theme.text


def build_typography(
    item: ContentItem,
    canvas: CanvasDimensions,
    engine_config: LayoutEngineConfig,
    area_name: Optional[str] = None,
    viewing_distance: Union[ViewingDistance, str] = ViewingDistance.MEDIUM,
    font_scale: float = 1.0,
    theme: Optional[str] = None,
    language: str = "en",
) -> Typography:
    """Full text styling for an item placed in ``area_name``"""
    config = engine_config.typography
    content_type = item.type.value
    font_size = calculate_responsive_font_size(
        config.base_size_for(content_type) * font_scale,
        canvas.width,
        canvas.height,
        content_length=len(item.text),
        viewing_distance=viewing_distance,
        importance=item.importance,
        config=config,
    )
    return Typography(
        font_family=select_font_family(content_type, language, config),
        font_size=font_size,
        line_height=calculate_line_height(font_size, content_type, config),
        bold=is_bold(content_type, config),
        alignment=select_alignment(area_name, content_type),
        color=select_color(area_name, engine_config.get_theme(theme)),
    )


def validate_accessibility(element: PositionedElement, config: Optional[TypographyConfig] = None) -> List[str]:
    """List readability problems with an element's text styling"""
    config = config or TypographyConfig()
    issues = []
    content_type = element.content_item.type.value
    font_size = element.typography.font_size

    minimum = config.accessibility_minimums.get(content_type)
    if minimum is not None and font_size < minimum:
        issues.append(f"Font size {font_size} is below the minimum {minimum} for {content_type}")

    if element.typography.line_height < font_size * ACCESSIBLE_LINE_HEIGHT_RATIO:
        issues.append("Line height should be at least 1.5 times the font size")

    return issues
