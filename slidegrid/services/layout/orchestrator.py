"""
Layout orchestration.

Turns a canvas, a list of content items and layout options into
positioned, styled elements plus the warnings collected on the way.
"""

import math
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from slidegrid.core.config import settings
from slidegrid.core.errors import ErrorCode, WarningCode
from slidegrid.core.exceptions import ConfigurationError, UnsupportedLayoutModeError
from slidegrid.core.logging import get_logger, log_error_details, log_performance_metrics
from slidegrid.domain.schemas.layout import (
    CanvasDimensions,
    ContentItem,
    Margins,
    Position,
    PositionedElement,
    ViewingDistance,
)

from .base import (
    AlignItems,
    AreaInput,
    FlexDirection,
    GridArea,
    GridConfiguration,
    JustifyContent,
    LayoutMode,
    ValidationWarning,
    coerce_enum,
    round_px,
)
from .config import LayoutEngineConfig, get_engine_config
from .grid import FlexConfig, GridSystem, ResolvedGrid, distribute_in_box
from .responsive import Breakpoint, ResponsiveEngine
from .templates import LayoutTemplates, assign_content_to_areas
from .typography import build_typography, validate_accessibility

logger = get_logger(__name__)

SMALL_SCREEN_BREAKPOINTS = ("xs", "sm")
MAX_AUTO_COLUMNS = 6

# Auto grid spacing at the 1920px reference width, scaled by at most 1.5x
AUTO_GAP = 16
AUTO_MARGIN = 48
AUTO_SPACING_MAX_SCALE = 1.5

Placement = Tuple[ContentItem, Position, Optional[str]]


@dataclass(frozen=True)
class LayoutOptions:
    """How a slide should be laid out.

    Without an explicit ``mode`` the strategy is inferred: a template when
    ``template_id`` is given, a custom grid when ``custom_areas`` are given,
    an automatic grid otherwise.
    """
    mode: Optional[Union[LayoutMode, str]] = None
    template_id: Optional[str] = None
    custom_areas: Optional[Mapping[str, AreaInput]] = None
    columns: Optional[int] = None
    gap: Optional[float] = None
    margins: Optional[Margins] = None
    breakpoint_aware: bool = False
    condense_text: bool = False
    viewing_distance: Union[ViewingDistance, str] = ViewingDistance.MEDIUM
    theme: Optional[str] = None
    language: str = "en"
    direction: Union[FlexDirection, str] = FlexDirection.ROW
    justify_content: Union[JustifyContent, str] = JustifyContent.FLEX_START
    align_items: Union[AlignItems, str] = AlignItems.STRETCH

    def __post_init__(self):
        object.__setattr__(
            self, "viewing_distance", coerce_enum(ViewingDistance, self.viewing_distance, "viewing_distance")
        )
        object.__setattr__(self, "direction", coerce_enum(FlexDirection, self.direction, "direction"))
        object.__setattr__(
            self, "justify_content", coerce_enum(JustifyContent, self.justify_content, "justify_content")
        )
        object.__setattr__(self, "align_items", coerce_enum(AlignItems, self.align_items, "align_items"))
        if self.columns is not None and self.columns < 1:
            raise ConfigurationError.from_code(ErrorCode.CFG_INVALID_COLUMNS, columns=self.columns)

    def resolve_mode(self) -> LayoutMode:
        if self.mode is None:
            if self.template_id:
                return LayoutMode.TEMPLATE
            if self.custom_areas:
                return LayoutMode.CUSTOM_GRID
            return LayoutMode.AUTO_GRID

        try:
            mode = LayoutMode(self.mode)
        except ValueError:
            raise UnsupportedLayoutModeError(self.mode) from None

        if mode == LayoutMode.TEMPLATE and not self.template_id:
            raise ConfigurationError.from_code(ErrorCode.CFG_MISSING_OPTION, mode=mode.value, option="template_id")
        if mode == LayoutMode.CUSTOM_GRID and not self.custom_areas:
            raise ConfigurationError.from_code(ErrorCode.CFG_MISSING_OPTION, mode=mode.value, option="custom_areas")
        return mode


@dataclass
class LayoutResult:
    elements: List[PositionedElement]
    mode: LayoutMode
    warnings: List[ValidationWarning] = field(default_factory=list)
    breakpoint: Optional[Breakpoint] = None
    grid: Optional[ResolvedGrid] = None
    template_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode.value,
            "template_id": self.template_id,
            "breakpoint": self.breakpoint.key if self.breakpoint else None,
            "elements": [element.model_dump(mode="json") for element in self.elements],
            "warnings": [warning.to_dict() for warning in self.warnings],
        }


def calculate_optimal_columns(item_count: int, canvas_width: float, requested: Optional[int] = None) -> int:
    """Column count for an automatic grid"""
    if requested is not None:
        return max(1, min(requested, item_count, MAX_AUTO_COLUMNS))
    if item_count <= 1:
        return 1
    if item_count <= 2 or canvas_width < 800:
        return 2
    if item_count <= 4 or canvas_width < 1200:
        return min(3, item_count)
    return min(4, item_count)


def generate_grid_areas(item_count: int, columns: int) -> Dict[str, GridArea]:
    """One single-cell area per item, filled row by row"""
    areas = {}
    for index in range(item_count):
        row = index // columns + 1
        column = index % columns + 1
        areas[f"content-{index}"] = GridArea(row_start=row, col_start=column, row_end=row + 1, col_end=column + 1)
    return areas


def _auto_spacing_scale(canvas_width: float) -> float:
    return min(canvas_width / 1920, AUTO_SPACING_MAX_SCALE)


def calculate_optimal_gap(canvas_width: float) -> int:
    return round_px(AUTO_GAP * _auto_spacing_scale(canvas_width))


def calculate_optimal_margins(canvas_width: float) -> Margins:
    return Margins.uniform(round_px(AUTO_MARGIN * _auto_spacing_scale(canvas_width)))


def clip_to_canvas(position: Position, canvas: CanvasDimensions) -> Optional[Position]:
    """Clamp a rectangle to the canvas; None when nothing is left"""
    x = max(position.x, 0)
    y = max(position.y, 0)
    right = min(position.right, canvas.width)
    bottom = min(position.bottom, canvas.height)
    if right - x <= 0 or bottom - y <= 0:
        return None
    return Position(x=x, y=y, width=right - x, height=bottom - y)


class LayoutOrchestrator:
    """
    Entry point of the layout engine

    Provides:
    - Template, custom grid, automatic grid and flex layouts
    - Optional breakpoint-aware adaptation
    - Responsive typography for every placed element
    - Template discovery, preview and recommendation queries
    """

    def __init__(
        self,
        engine_config: Optional[LayoutEngineConfig] = None,
        templates: Optional[LayoutTemplates] = None,
        responsive: Optional[ResponsiveEngine] = None,
        grid_system: Optional[GridSystem] = None,
    ):
        self.engine_config = engine_config or get_engine_config()
        self.templates = templates or LayoutTemplates()
        self.responsive = responsive or ResponsiveEngine(self.engine_config.breakpoints)
        self.grid_system = grid_system or GridSystem()

    def layout(
        self,
        canvas: CanvasDimensions,
        items: Iterable[ContentItem],
        options: Optional[LayoutOptions] = None,
    ) -> LayoutResult:
        """
        Lay out content items on a canvas.

        Args:
            canvas: Canvas dimensions
            items: Content items, in reading order
            options: Layout options; defaults to an automatic grid

        Returns:
            Positioned elements and collected warnings

        Raises:
            ConfigurationError: On an invalid canvas, grid, template or option.
                No partial result is produced.
        """
        options = options or LayoutOptions()
        started = time.perf_counter()
        try:
            result = self._layout(canvas, list(items), options)
        except ConfigurationError as e:
            logger.warning("layout_rejected", **log_error_details(e, template_id=options.template_id))
            raise

        duration_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "layout_computed",
            **log_performance_metrics(
                "layout",
                duration_ms,
                mode=result.mode.value,
                elements=len(result.elements),
                warnings=len(result.warnings),
                breakpoint=result.breakpoint.key if result.breakpoint else None,
            ),
        )
        return result

    def _layout(self, canvas: CanvasDimensions, items: List[ContentItem], options: LayoutOptions) -> LayoutResult:
        if not canvas.is_valid:
            raise ConfigurationError.from_code(ErrorCode.CFG_INVALID_CANVAS, width=canvas.width, height=canvas.height)

        mode = options.resolve_mode()
        warnings: List[ValidationWarning] = []

        if len(items) > settings.LAYOUT_LARGE_CONTENT_COUNT:
            warnings.append(ValidationWarning.create(WarningCode.LARGE_CONTENT_COUNT, count=len(items)))

        breakpoint = None
        if options.breakpoint_aware:
            breakpoint = self.responsive.get_current_breakpoint(canvas.width, canvas.height)
            if options.condense_text and breakpoint.key in SMALL_SCREEN_BREAKPOINTS:
                items = self.responsive.optimize_content_for_mobile(items)

        grid = None
        if mode == LayoutMode.FLEX:
            placements = self._flex_placements(canvas, items, options)
        else:
            config, assignments = self._plan_grid(mode, canvas, items, options, breakpoint, warnings)
            if breakpoint is not None:
                config = self.responsive.adapt_config_to_breakpoint(config, breakpoint, warnings)
            grid = self.grid_system.create_grid(config, canvas, warnings)
            placements = self._grid_placements(grid, assignments, warnings)

        font_scale = breakpoint.font_scale if breakpoint is not None else 1.0
        elements = []
        for item, position, area_name in placements:
            clipped = clip_to_canvas(position, canvas)
            if clipped is None:
                warnings.append(ValidationWarning.create(
                    WarningCode.ELEMENT_OUTSIDE_CANVAS, subject=area_name, area=area_name
                ))
                continue
            if clipped != position:
                warnings.append(ValidationWarning.create(WarningCode.ELEMENT_CLIPPED, subject=area_name, area=area_name))

            typography = build_typography(
                item,
                canvas,
                self.engine_config,
                area_name=area_name,
                viewing_distance=options.viewing_distance,
                font_scale=font_scale,
                theme=options.theme,
                language=options.language,
            )
            elements.append(PositionedElement(
                content_item=item,
                position=clipped,
                typography=typography,
                area_name=area_name,
            ))

        return LayoutResult(
            elements=elements,
            mode=mode,
            warnings=warnings,
            breakpoint=breakpoint,
            grid=grid,
            template_id=options.template_id if mode == LayoutMode.TEMPLATE else None,
        )

    def _plan_grid(
        self,
        mode: LayoutMode,
        canvas: CanvasDimensions,
        items: List[ContentItem],
        options: LayoutOptions,
        breakpoint: Optional[Breakpoint],
        warnings: List[ValidationWarning],
    ) -> Tuple[GridConfiguration, List[Tuple[str, List[ContentItem]]]]:
        gap = options.gap if options.gap is not None else settings.LAYOUT_DEFAULT_GAP
        margins = options.margins or Margins.uniform(settings.LAYOUT_DEFAULT_MARGIN)
        columns = options.columns or settings.LAYOUT_DEFAULT_COLUMNS

        if mode == LayoutMode.TEMPLATE:
            template_config = self.templates.create_layout_config(
                options.template_id,
                content=items,
                breakpoint=breakpoint.key if breakpoint is not None else None,
                custom_areas=options.custom_areas,
            )
            warnings.extend(template_config.warnings)
            config = GridConfiguration(columns=columns, areas=template_config.areas, gap=gap, margins=margins)
            assignments = [
                (assignment.area_name, list(assignment.items))
                for assignment in template_config.assignments
                if assignment.is_populated
            ]
            return config, assignments

        if mode == LayoutMode.CUSTOM_GRID:
            areas = dict(options.custom_areas)
            config = GridConfiguration(columns=columns, areas=areas, gap=gap, margins=margins)
        else:
            if breakpoint is not None:
                auto_columns = self.responsive.columns_for_item_count(breakpoint, len(items))
            else:
                auto_columns = calculate_optimal_columns(len(items), canvas.width, options.columns)
            areas = generate_grid_areas(len(items), auto_columns)
            config = GridConfiguration(
                columns=auto_columns,
                rows=max(1, math.ceil(len(items) / auto_columns)),
                areas=areas,
                gap=options.gap if options.gap is not None else calculate_optimal_gap(canvas.width),
                margins=options.margins or calculate_optimal_margins(canvas.width),
            )

        assigned, _ = assign_content_to_areas(items, list(areas), None, warnings)
        assignments = [(name, area_items) for name, area_items in assigned.items() if area_items]
        return config, assignments

    def _grid_placements(
        self,
        grid: ResolvedGrid,
        assignments: Sequence[Tuple[str, List[ContentItem]]],
        warnings: List[ValidationWarning],
    ) -> List[Placement]:
        placements: List[Placement] = []
        for area_name, area_items in assignments:
            if area_name not in grid.areas:
                # Area spec was malformed and already reported
                warnings.append(ValidationWarning.create(
                    WarningCode.CONTENT_DROPPED, subject=area_name, count=len(area_items)
                ))
                continue

            box = grid.position_of(area_name)
            if len(area_items) == 1:
                placements.append((area_items[0], box, area_name))
                continue

            for item, position in self._stack_in_area(area_name, area_items, box, grid.gap, warnings):
                placements.append((item, position, area_name))
        return placements

    def _stack_in_area(
        self,
        area_name: str,
        area_items: List[ContentItem],
        box: Position,
        gap: float,
        warnings: List[ValidationWarning],
    ) -> List[Tuple[ContentItem, Position]]:
        """Stack several items top to bottom inside one area.

        Each item keeps at least one line of the minimum font size. The
        gap collapses to zero when it would squeeze items below that, and
        items beyond the area's capacity are dropped with a warning.
        """
        min_height = self.engine_config.typography.min_font_size
        capacity = max(1, int(box.height // min_height))
        if len(area_items) > capacity:
            warnings.append(ValidationWarning.create(
                WarningCode.CONTENT_DROPPED, subject=area_name, count=len(area_items) - capacity
            ))
            area_items = area_items[:capacity]

        count = len(area_items)
        if (box.height - gap * (count - 1)) / count < min_height:
            gap = 0

        stack = FlexConfig(direction=FlexDirection.COLUMN, gap=gap, margins=Margins())
        return list(zip(area_items, distribute_in_box(count, box, stack)))

    def _flex_placements(
        self,
        canvas: CanvasDimensions,
        items: List[ContentItem],
        options: LayoutOptions,
    ) -> List[Placement]:
        config = FlexConfig(
            direction=options.direction,
            justify_content=options.justify_content,
            align_items=options.align_items,
            gap=options.gap if options.gap is not None else settings.LAYOUT_DEFAULT_GAP,
            margins=options.margins or Margins.uniform(settings.LAYOUT_DEFAULT_MARGIN),
        )
        return [
            (placement.item, placement.position, None)
            for placement in self.grid_system.distribute_flex_items(items, config, canvas)
        ]

    def get_available_templates(self) -> Dict[str, List[Dict[str, Any]]]:
        """Templates grouped by category"""
        grouped: Dict[str, List[Dict[str, Any]]] = {}
        for template in self.templates.list_templates():
            grouped.setdefault(template.category, []).append({
                "id": template.id,
                "name": template.name,
                "description": template.description,
                "responsive": template.is_responsive,
            })
        return grouped

    def get_layout_recommendations(
        self,
        items: Sequence[ContentItem],
        screen_size: Optional[str] = None,
        extra_types: Sequence[str] = (),
    ) -> List[str]:
        content_types = [item.type.value for item in items] + list(extra_types)
        return self.templates.get_recommendations(len(items), content_types, screen_size)

    def generate_layout_preview(self, template_id: str) -> Dict[str, Any]:
        return self.templates.generate_preview(template_id)

    def check_accessibility(self, result: LayoutResult) -> Dict[int, List[str]]:
        """Readability issues keyed by element index; clean elements are omitted"""
        report = {}
        for index, element in enumerate(result.elements):
            issues = validate_accessibility(element, self.engine_config.typography)
            if issues:
                report[index] = issues
        return report
