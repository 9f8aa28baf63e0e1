"""
Responsive Breakpoint Engine

Classifies a canvas into a named breakpoint and adapts grid
configurations, spacing and content to it.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from slidegrid.core.errors import ErrorCode, WarningCode
from slidegrid.core.exceptions import ConfigurationError
from slidegrid.core.logging import get_logger
from slidegrid.domain.schemas.layout import CanvasDimensions, ContentItem

from .base import AreaInput, GridArea, GridConfiguration, ValidationWarning, round_px
from .grid import parse_grid_areas

logger = get_logger(__name__)

# Reference canvas for scaling factors
REFERENCE_WIDTH = 1920
REFERENCE_HEIGHT = 1080

FALLBACK_BREAKPOINT = "md"

# Text longer than this is condensed on small screens
MOBILE_TEXT_LIMIT = 200
MOBILE_SUMMARY_LENGTH = 150

# Item counts above which rendering extras should be switched off
PERFORMANCE_REDUCE_THRESHOLD = 20
PERFORMANCE_VIRTUALIZE_THRESHOLD = 50


@dataclass(frozen=True)
class Breakpoint:
    """A named canvas width class"""
    key: str
    label: str
    columns: int
    font_scale: float
    spacing_scale: float
    max_width: Optional[float] = None
    min_width: Optional[float] = None
    margin_scale: float = 1.0
    description: str = ""

    def matches(self, width: float) -> bool:
        if self.max_width is not None and width <= self.max_width:
            return True
        if self.min_width is not None and width >= self.min_width:
            return True
        return False

    @property
    def media_condition(self) -> str:
        if self.max_width is not None:
            return f"max-width: {self.max_width:g}px"
        return f"min-width: {self.min_width:g}px"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Breakpoint":
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "label": self.label,
            "columns": self.columns,
            "font_scale": self.font_scale,
            "spacing_scale": self.spacing_scale,
            "max_width": self.max_width,
            "min_width": self.min_width,
            "margin_scale": self.margin_scale,
            "description": self.description,
        }


DEFAULT_BREAKPOINTS: Tuple[Breakpoint, ...] = (
    Breakpoint("xs", "Mobile", 1, 0.7, 0.8, max_width=480, margin_scale=0.6,
               description="Small phones and narrow embeds"),
    Breakpoint("sm", "Tablet", 1, 0.8, 0.9, max_width=768, margin_scale=0.8,
               description="Tablets in portrait orientation"),
    Breakpoint("md", "Desktop", 2, 0.9, 1.0, max_width=1024, margin_scale=1.0,
               description="Small laptops and tablets in landscape"),
    Breakpoint("lg", "Large", 3, 1.0, 1.0, max_width=1440, margin_scale=1.2,
               description="Standard desktop displays"),
    Breakpoint("xl", "Extra Large", 4, 1.1, 1.1, min_width=1441, margin_scale=1.4,
               description="Large monitors and projectors"),
)


class BreakpointTable(Mapping[str, Breakpoint]):
    """Ordered, read-only breakpoint table; first match wins"""

    def __init__(self, breakpoints: Iterable[Breakpoint] = DEFAULT_BREAKPOINTS, fallback: str = FALLBACK_BREAKPOINT):
        self._breakpoints: Tuple[Breakpoint, ...] = tuple(breakpoints)
        self._by_key = {bp.key: bp for bp in self._breakpoints}
        if not self._breakpoints:
            raise ConfigurationError.from_code(ErrorCode.CFG_INVALID_TABLE, reason="no breakpoints defined")
        if len(self._by_key) != len(self._breakpoints):
            raise ConfigurationError.from_code(ErrorCode.CFG_INVALID_TABLE, reason="duplicate breakpoint keys")
        if fallback not in self._by_key:
            raise ConfigurationError.from_code(
                ErrorCode.CFG_INVALID_TABLE, reason=f"fallback breakpoint {fallback!r} is not defined"
            )
        self.fallback = fallback

    @classmethod
    def from_dicts(cls, data: Sequence[Dict[str, Any]], fallback: str = FALLBACK_BREAKPOINT) -> "BreakpointTable":
        return cls((Breakpoint.from_dict(dict(item)) for item in data), fallback=fallback)

    def __getitem__(self, key: str) -> Breakpoint:
        return self._by_key[key]

    def __iter__(self) -> Iterator[str]:
        return (bp.key for bp in self._breakpoints)

    def __len__(self) -> int:
        return len(self._breakpoints)

    def ordered(self) -> Tuple[Breakpoint, ...]:
        return self._breakpoints

    def match(self, width: float) -> Breakpoint:
        for breakpoint in self._breakpoints:
            if breakpoint.matches(width):
                return breakpoint
        return self._by_key[self.fallback]

    def validate(self) -> List[ValidationWarning]:
        """Report width ranges no breakpoint covers"""
        warnings = []
        upper_bounds = sorted(bp.max_width for bp in self._breakpoints if bp.max_width is not None)
        lower_bounds = sorted(bp.min_width for bp in self._breakpoints if bp.min_width is not None)
        if upper_bounds and lower_bounds and lower_bounds[0] > upper_bounds[-1] + 1:
            warnings.append(ValidationWarning.create(
                WarningCode.BREAKPOINT_GAP, low=upper_bounds[-1], high=lower_bounds[0]
            ))
        return warnings

    def to_list(self) -> List[Dict[str, Any]]:
        return [bp.to_dict() for bp in self._breakpoints]


@dataclass(frozen=True)
class ScalingFactors:
    width: float
    height: float
    uniform: float
    font_size: float
    spacing: float
    density: float
    aspect: float

    @property
    def combined(self) -> float:
        return self.density * self.aspect


@dataclass(frozen=True)
class ResponsiveLayout:
    breakpoint: Breakpoint
    config: GridConfiguration
    scaling: ScalingFactors
    media_queries: Dict[str, Dict[str, Any]] = field(default_factory=dict)


def redistribute_grid_areas(
    areas: Mapping[str, AreaInput],
    target_columns: int,
    warnings: Optional[List[ValidationWarning]] = None,
) -> Dict[str, GridArea]:
    """
    Rearrange named areas for a narrower grid.

    One column stacks every area in its own row, in key order. Two
    columns alternate areas left and right, each side stacking top to
    bottom. Three or more columns leave the areas as they are.
    Malformed specs are skipped and reported in ``warnings``.
    """
    if target_columns < 1:
        raise ConfigurationError.from_code(ErrorCode.CFG_INVALID_COLUMNS, columns=target_columns)

    parsed = parse_grid_areas(areas, warnings)
    if target_columns >= 3:
        return parsed

    redistributed = {}
    for index, name in enumerate(parsed):
        if target_columns == 1:
            row = index + 1
            column = 1
        else:
            row = index // 2 + 1
            column = index % 2 + 1
        redistributed[name] = GridArea(row_start=row, col_start=column, row_end=row + 1, col_end=column + 1)
    return redistributed


def rescale_grid_areas(
    areas: Mapping[str, AreaInput],
    from_columns: int,
    to_columns: int,
    warnings: Optional[List[ValidationWarning]] = None,
) -> Dict[str, GridArea]:
    """Map column lines proportionally onto a grid with fewer columns"""
    parsed = parse_grid_areas(areas, warnings)
    if to_columns >= from_columns:
        return parsed

    ratio = to_columns / from_columns
    rescaled = {}
    for name, area in parsed.items():
        col_start = 1 + round_px((area.col_start - 1) * ratio)
        col_end = 1 + round_px((area.col_end - 1) * ratio)
        col_start = min(col_start, to_columns)
        col_end = min(max(col_end, col_start + 1), to_columns + 1)
        rescaled[name] = GridArea(
            row_start=area.row_start, col_start=col_start, row_end=area.row_end, col_end=col_end
        )
    return rescaled


def summarize_text(text: str, max_length: int) -> str:
    """Cut text to ``max_length`` characters, preferring a word boundary"""
    if len(text) <= max_length:
        return text

    truncated = text[:max_length]
    last_space = truncated.rfind(" ")
    if last_space > max_length * 0.8:
        return truncated[:last_space] + "..."
    return truncated + "..."


class ResponsiveEngine:
    """
    Breakpoint-driven adaptation of grid layouts

    Features:
    - Canvas classification into ordered breakpoints
    - Column clamping and area redistribution
    - Scaling factors relative to a 1920x1080 reference
    - Small-screen content condensing
    """

    def __init__(self, breakpoints: Optional[BreakpointTable] = None):
        self.breakpoints = breakpoints or BreakpointTable()

    def get_current_breakpoint(self, width: float, height: Optional[float] = None) -> Breakpoint:
        """First breakpoint in table order that matches the width"""
        breakpoint = self.breakpoints.match(width)
        logger.debug("breakpoint_matched", width=width, height=height, breakpoint=breakpoint.key)
        return breakpoint

    def get_breakpoint(self, key: str) -> Breakpoint:
        return self.breakpoints.get(key) or self.breakpoints[self.breakpoints.fallback]

    def adapt_config_to_breakpoint(
        self,
        config: GridConfiguration,
        breakpoint: Breakpoint,
        warnings: Optional[List[ValidationWarning]] = None,
    ) -> GridConfiguration:
        """
        Adapt a grid configuration to a breakpoint.

        Args:
            config: Base grid configuration
            breakpoint: Target breakpoint
            warnings: List collecting malformed or repaired area specs

        Returns:
            New configuration with parsed areas, scaled gap and margins;
            the input is not modified
        """
        columns = min(config.columns or 1, breakpoint.columns)
        areas = parse_grid_areas(config.areas, warnings)
        rows = config.rows

        if areas and columns < 3:
            areas = redistribute_grid_areas(areas, columns)
            if rows is not None:
                rows = max(rows, max(area.row_end for area in areas.values()) - 1)
        elif areas and columns < config.columns:
            areas = rescale_grid_areas(areas, config.columns, columns)

        return config.with_changes(
            columns=columns,
            rows=rows,
            areas=areas,
            gap=round_px(config.gap * breakpoint.spacing_scale),
            margins=config.margins.scaled(breakpoint.margin_scale),
        )

    def scale_spacing(self, spacing: Any, scale: float) -> Any:
        """Scale numeric spacing values, descending into nested mappings"""
        if isinstance(spacing, Mapping):
            return {key: self.scale_spacing(value, scale) for key, value in spacing.items()}
        if isinstance(spacing, (int, float)) and not isinstance(spacing, bool):
            return round_px(spacing * scale)
        return spacing

    def calculate_scaling_factors(self, dimensions: CanvasDimensions, breakpoint_key: str) -> ScalingFactors:
        breakpoint = self.get_breakpoint(breakpoint_key)
        width_scale = dimensions.width / REFERENCE_WIDTH
        height_scale = dimensions.height / REFERENCE_HEIGHT
        uniform = min(width_scale, height_scale)

        if breakpoint.key in ("xs", "sm"):
            density = 0.8
        elif breakpoint.key == "xl":
            density = 1.2
        else:
            density = 1.0

        aspect_ratio = dimensions.aspect_ratio
        if aspect_ratio > 2.0:
            aspect = 1.1
        elif aspect_ratio < 1.3:
            aspect = 0.9
        else:
            aspect = 1.0

        return ScalingFactors(
            width=width_scale,
            height=height_scale,
            uniform=uniform,
            font_size=breakpoint.font_scale * uniform,
            spacing=breakpoint.spacing_scale * uniform,
            density=density,
            aspect=aspect,
        )

    def create_responsive_layout(self, config: GridConfiguration, canvas: CanvasDimensions) -> ResponsiveLayout:
        breakpoint = self.get_current_breakpoint(canvas.width, canvas.height)
        return ResponsiveLayout(
            breakpoint=breakpoint,
            config=self.adapt_config_to_breakpoint(config, breakpoint),
            scaling=self.calculate_scaling_factors(canvas, breakpoint.key),
            media_queries=self.generate_media_queries(),
        )

    def optimize_content_for_mobile(self, items: Sequence[ContentItem]) -> List[ContentItem]:
        """Condense long text so it stays readable on small screens"""
        optimized = []
        for item in items:
            if len(item.text) > MOBILE_TEXT_LIMIT:
                item = item.model_copy(update={
                    "text": summarize_text(item.text, MOBILE_SUMMARY_LENGTH),
                    "truncated": True,
                })
            optimized.append(item)
        return optimized

    def get_optimal_layout_for_breakpoint(self, breakpoint_key: str, base_layout: Optional[str] = None) -> str:
        columns = self.get_breakpoint(breakpoint_key).columns
        if columns == 1:
            return "single-column"
        if columns == 2:
            return "double-column"
        return base_layout or "triple-column"

    def generate_media_queries(self, base_layout: Optional[str] = None) -> Dict[str, Dict[str, Any]]:
        queries = {}
        for breakpoint in self.breakpoints.ordered():
            queries[breakpoint.key] = {
                "condition": breakpoint.media_condition,
                "rules": {
                    "columns": breakpoint.columns,
                    "font_size": f"{breakpoint.font_scale:g}em",
                    "spacing": f"{breakpoint.spacing_scale:g}rem",
                    "layout": self.get_optimal_layout_for_breakpoint(breakpoint.key, base_layout),
                },
            }
        return queries

    def get_performance_hints(self, item_count: int) -> Dict[str, bool]:
        """Rendering extras a backend should disable for large slides"""
        hints = {
            "animations": True,
            "shadows": True,
            "gradients": True,
            "lazy_loading": False,
            "virtual_scrolling": False,
        }
        if item_count > PERFORMANCE_REDUCE_THRESHOLD:
            hints.update(animations=False, shadows=False, gradients=False)
        if item_count > PERFORMANCE_VIRTUALIZE_THRESHOLD:
            hints.update(lazy_loading=True, virtual_scrolling=True)
        return hints

    def columns_for_item_count(self, breakpoint: Breakpoint, item_count: int) -> int:
        """Column count for an auto grid at a breakpoint"""
        return max(1, min(breakpoint.columns, math.ceil(math.sqrt(max(item_count, 1)))))
