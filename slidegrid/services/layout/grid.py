"""
Grid System Implementation

Resolves CSS-Grid-like named areas against a canvas and computes
flexbox-style one-dimensional distributions.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence

from slidegrid.core.config import settings
from slidegrid.core.errors import ErrorCode, WarningCode
from slidegrid.core.exceptions import ConfigurationError
from slidegrid.core.logging import get_logger
from slidegrid.domain.schemas.layout import CanvasDimensions, Margins, Position

from .base import (
    AlignItems,
    AreaInput,
    FlexDirection,
    GridArea,
    GridConfiguration,
    JustifyContent,
    ValidationReport,
    ValidationWarning,
    coerce_enum,
    round_px,
)

logger = get_logger(__name__)

# Fallback line numbers for area spec tokens that are not positive integers.
# A token must be a whole integer: "2.5" and "3px" are rejected and take the
# fallback rather than being read up to the first non-digit.
DEFAULT_START_LINE = 1
DEFAULT_END_LINE = 2


def parse_int_or_default(token: Any, default: int) -> int:
    """
    Parse a grid line token.

    Tokens that are not integers, or are below 1, yield ``default``.
    """
    try:
        value = int(str(token).strip())
    except (TypeError, ValueError):
        return default
    return value if value >= 1 else default


def parse_area_spec(
    spec: str,
    name: Optional[str] = None,
    warnings: Optional[List[ValidationWarning]] = None,
) -> Optional[GridArea]:
    """
    Parse a 'rowStart / colStart / rowEnd / colEnd' string.

    Args:
        spec: Area spec string
        name: Area name, used in warnings
        warnings: List collecting problems found while parsing

    Returns:
        The parsed area, or None when the spec does not have four parts
    """
    parts = [part.strip() for part in str(spec).split("/")]
    if len(parts) != 4:
        if warnings is not None:
            warnings.append(ValidationWarning.create(
                WarningCode.MALFORMED_AREA_SPEC, subject=name, area=name, spec=spec
            ))
        return None

    row_start = parse_int_or_default(parts[0], DEFAULT_START_LINE)
    col_start = parse_int_or_default(parts[1], DEFAULT_START_LINE)
    row_end = parse_int_or_default(parts[2], DEFAULT_END_LINE)
    col_end = parse_int_or_default(parts[3], DEFAULT_END_LINE)

    if row_end <= row_start or col_end <= col_start:
        row_end = max(row_end, row_start + 1)
        col_end = max(col_end, col_start + 1)
        if warnings is not None:
            warnings.append(ValidationWarning.create(
                WarningCode.AREA_REPAIRED, subject=name, area=name
            ))

    return GridArea(row_start=row_start, col_start=col_start, row_end=row_end, col_end=col_end)


def format_area_spec(area: GridArea) -> str:
    return area.to_spec()


def parse_grid_areas(
    areas: Mapping[str, AreaInput],
    warnings: Optional[List[ValidationWarning]] = None,
) -> Dict[str, GridArea]:
    """Parse every area of a mapping, skipping malformed specs"""
    parsed: Dict[str, GridArea] = {}
    for name, spec in areas.items():
        if isinstance(spec, GridArea):
            parsed[name] = spec
            continue
        area = parse_area_spec(spec, name=name, warnings=warnings)
        if area is not None:
            parsed[name] = area
    return parsed


@dataclass(frozen=True)
class RowHeightPolicy:
    """Row sizing for grids without an explicit row count"""
    baseline_rows: int = 6
    min_height: float = 80.0
    max_height: float = 200.0
    span_damping: float = 0.8

    @classmethod
    def from_settings(cls) -> "RowHeightPolicy":
        return cls(**settings.get_row_height_policy())


@dataclass(frozen=True)
class ResolvedGrid:
    """A grid configuration resolved against a concrete canvas"""
    canvas: CanvasDimensions
    columns: int
    rows: Optional[int]
    gap: float
    margins: Margins
    content_width: float
    content_height: float
    column_width: float
    areas: Mapping[str, GridArea]
    row_policy: RowHeightPolicy = field(default_factory=RowHeightPolicy)

    def row_height(self, row_span: int = 1) -> float:
        """Height of a single row for an area spanning ``row_span`` rows"""
        if self.rows:
            return (self.content_height - self.gap * (self.rows - 1)) / self.rows

        height = self.content_height / self.row_policy.baseline_rows
        if row_span > 1:
            height *= self.row_policy.span_damping
        height = max(self.row_policy.min_height, min(height, self.row_policy.max_height))
        return round_px(height)

    def column_span_width(self, span: int) -> float:
        return span * self.column_width + (span - 1) * self.gap

    def row_span_height(self, span: int) -> float:
        return span * self.row_height(span) + (span - 1) * self.gap

    def position_of(self, area_name: str) -> Position:
        if area_name not in self.areas:
            raise ConfigurationError.from_code(ErrorCode.CFG_INVALID_GRID_AREA, area=area_name)
        return calculate_grid_position(self, self.areas[area_name])


def calculate_grid_position(grid: ResolvedGrid, area: GridArea) -> Position:
    """Convert a grid area to a pixel rectangle, rounded half up"""
    row_height = grid.row_height(area.row_span)

    x = grid.margins.left + (area.col_start - 1) * (grid.column_width + grid.gap)
    y = grid.margins.top + (area.row_start - 1) * (row_height + grid.gap)
    width = area.col_span * grid.column_width + (area.col_span - 1) * grid.gap
    height = area.row_span * row_height + (area.row_span - 1) * grid.gap

    return Position(x=round_px(x), y=round_px(y), width=round_px(width), height=round_px(height))


@dataclass(frozen=True)
class FlexConfig:
    """One-dimensional distribution settings"""
    direction: FlexDirection = FlexDirection.ROW
    justify_content: JustifyContent = JustifyContent.FLEX_START
    align_items: AlignItems = AlignItems.STRETCH
    gap: float = field(default_factory=lambda: settings.LAYOUT_DEFAULT_GAP)
    margins: Margins = field(default_factory=lambda: Margins.uniform(settings.LAYOUT_DEFAULT_MARGIN))
    item_main_size: Optional[float] = None
    item_cross_size: Optional[float] = None

    def __post_init__(self):
        object.__setattr__(self, "direction", coerce_enum(FlexDirection, self.direction, "direction"))
        object.__setattr__(
            self, "justify_content", coerce_enum(JustifyContent, self.justify_content, "justify_content")
        )
        object.__setattr__(self, "align_items", coerce_enum(AlignItems, self.align_items, "align_items"))
        if self.gap < 0:
            raise ConfigurationError.from_code(ErrorCode.CFG_INVALID_OPTION, option="gap", value=self.gap)
        for option in ("item_main_size", "item_cross_size"):
            value = getattr(self, option)
            if value is not None and value <= 0:
                raise ConfigurationError.from_code(ErrorCode.CFG_INVALID_OPTION, option=option, value=value)


@dataclass(frozen=True)
class FlexLayout:
    """Flex container resolved against a canvas"""
    canvas: CanvasDimensions
    config: FlexConfig
    content_box: Position

    @property
    def content_width(self) -> float:
        return self.content_box.width

    @property
    def content_height(self) -> float:
        return self.content_box.height


@dataclass(frozen=True)
class FlexPlacement:
    item: Any
    position: Position
    index: int


class GridSystem:
    """
    Grid and flex geometry for slide layouts

    Provides methods for:
    - Resolving grid configurations and named areas against a canvas
    - Converting areas to pixel positions
    - Distributing items along one axis with flexbox spacing rules
    - Validating grid configurations
    """

    def __init__(
        self,
        row_policy: Optional[RowHeightPolicy] = None,
        max_columns: Optional[int] = None,
        max_areas: Optional[int] = None,
    ):
        self.row_policy = row_policy or RowHeightPolicy.from_settings()
        self.max_columns = max_columns or settings.LAYOUT_MAX_COLUMNS
        self.max_areas = max_areas or settings.LAYOUT_MAX_AREAS

    def create_grid(
        self,
        config: GridConfiguration,
        canvas: CanvasDimensions,
        warnings: Optional[List[ValidationWarning]] = None,
    ) -> ResolvedGrid:
        """
        Resolve a grid configuration against a canvas.

        Args:
            config: Grid configuration
            canvas: Canvas dimensions
            warnings: List collecting non-fatal problems

        Returns:
            Resolved grid

        Raises:
            ConfigurationError: If the canvas, column count or margins leave
                no usable content area
        """
        warnings = warnings if warnings is not None else []
        _check_canvas(canvas)

        if config.columns < 1:
            raise ConfigurationError.from_code(ErrorCode.CFG_INVALID_COLUMNS, columns=config.columns)
        if config.columns > self.max_columns:
            warnings.append(ValidationWarning.create(
                WarningCode.COLUMN_COUNT_OUT_OF_RANGE, columns=config.columns, maximum=self.max_columns
            ))

        content_width = canvas.width - config.margins.horizontal
        content_height = canvas.height - config.margins.vertical
        column_width = (content_width - config.gap * (config.columns - 1)) / config.columns

        if content_height <= 0 or column_width <= 0:
            raise ConfigurationError.from_code(
                ErrorCode.CFG_INVALID_CONTENT_AREA,
            )

        areas = parse_grid_areas(config.areas, warnings)
        if len(areas) > self.max_areas:
            warnings.append(ValidationWarning.create(
                WarningCode.EXCESSIVE_AREAS, count=len(areas), maximum=self.max_areas
            ))
        for name, area in areas.items():
            past_columns = area.col_end > config.columns + 1
            past_rows = config.rows is not None and area.row_end > config.rows + 1
            if past_columns or past_rows:
                warnings.append(ValidationWarning.create(
                    WarningCode.AREA_OUT_OF_BOUNDS, subject=name, area=name
                ))

        grid = ResolvedGrid(
            canvas=canvas,
            columns=config.columns,
            rows=config.rows,
            gap=config.gap,
            margins=config.margins,
            content_width=content_width,
            content_height=content_height,
            column_width=column_width,
            areas=MappingProxyType(areas),
            row_policy=self.row_policy,
        )
        logger.debug(
            "grid_created",
            columns=grid.columns,
            rows=grid.rows,
            column_width=round(column_width, 2),
            areas=len(areas),
        )
        return grid

    def get_grid_position(self, grid: ResolvedGrid, area: AreaInput) -> Position:
        """Pixel rectangle of an area; strings are parsed with default fallbacks"""
        if not isinstance(area, GridArea):
            parsed = parse_area_spec(area)
            if parsed is None:
                raise ConfigurationError.from_code(ErrorCode.CFG_INVALID_GRID_AREA, area=area)
            area = parsed
        return calculate_grid_position(grid, area)

    def calculate_row_height(self, grid: ResolvedGrid, row_span: int = 1) -> float:
        return grid.row_height(row_span)

    def calculate_column_span(self, grid: ResolvedGrid, span: int) -> float:
        return grid.column_span_width(span)

    def calculate_row_span(self, grid: ResolvedGrid, span: int) -> float:
        return grid.row_span_height(span)

    def create_flex_layout(self, config: FlexConfig, canvas: CanvasDimensions) -> FlexLayout:
        _check_canvas(canvas)
        box = Position(
            x=config.margins.left,
            y=config.margins.top,
            width=canvas.width - config.margins.horizontal,
            height=canvas.height - config.margins.vertical,
        )
        if box.width <= 0 or box.height <= 0:
            raise ConfigurationError.from_code(ErrorCode.CFG_INVALID_CONTENT_AREA)
        return FlexLayout(canvas=canvas, config=config, content_box=box)

    def distribute_flex_items(
        self,
        items: Sequence[Any],
        config: FlexConfig,
        canvas: CanvasDimensions,
    ) -> List[FlexPlacement]:
        """
        Distribute items along the main axis of the canvas content box.

        Args:
            items: Items to place, in order
            config: Flex settings
            canvas: Canvas dimensions

        Returns:
            One placement per item, empty for no items
        """
        if not items:
            return []

        layout = self.create_flex_layout(config, canvas)
        positions = distribute_in_box(len(items), layout.content_box, config)
        return [
            FlexPlacement(item=item, position=position, index=index)
            for index, (item, position) in enumerate(zip(items, positions))
        ]

    def validate_grid_config(self, config: GridConfiguration) -> ValidationReport:
        """Check a configuration without resolving it against a canvas"""
        report = ValidationReport()

        if config.columns < 1:
            report.add_error(f"Grid needs at least one column, got {config.columns}")
        elif config.columns > self.max_columns:
            report.warnings.append(ValidationWarning.create(
                WarningCode.COLUMN_COUNT_OUT_OF_RANGE, columns=config.columns, maximum=self.max_columns
            ))

        for name, spec in config.areas.items():
            if isinstance(spec, GridArea):
                continue
            if len(str(spec).split("/")) != 4:
                report.add_error(f"Invalid grid area format for {name}: {spec}")

        if len(config.areas) > self.max_areas:
            report.warnings.append(ValidationWarning.create(
                WarningCode.EXCESSIVE_AREAS, count=len(config.areas), maximum=self.max_areas
            ))

        return report


def _check_canvas(canvas: CanvasDimensions) -> None:
    if not canvas.is_valid:
        raise ConfigurationError.from_code(
            ErrorCode.CFG_INVALID_CANVAS, width=canvas.width, height=canvas.height
        )


def _main_axis_offsets(
    count: int,
    size: float,
    free: float,
    gap: float,
    justify: JustifyContent,
) -> List[float]:
    step = size + gap

    if justify == JustifyContent.CENTER:
        return [free / 2 + i * step for i in range(count)]
    if justify == JustifyContent.FLEX_END:
        return [free + i * step for i in range(count)]
    if justify == JustifyContent.SPACE_BETWEEN:
        if count == 1:
            return [free / 2]
        return [i * (step + free / (count - 1)) for i in range(count)]
    if justify == JustifyContent.SPACE_AROUND:
        around = free / count
        return [around / 2 + i * (step + around) for i in range(count)]
    return [i * step for i in range(count)]


def _cross_axis_offset(cross: float, item_cross: float, align: AlignItems) -> float:
    if align == AlignItems.CENTER:
        return (cross - item_cross) / 2
    if align == AlignItems.FLEX_END:
        return cross - item_cross
    return 0.0


def distribute_in_box(count: int, box: Position, config: FlexConfig) -> List[Position]:
    """
    Flexbox spacing math for ``count`` uniform items inside ``box``.

    Items share the main axis evenly unless ``item_main_size`` asks for
    smaller items, which leaves free space for the justify rule.
    """
    if count <= 0:
        return []

    horizontal = config.direction == FlexDirection.ROW
    main = box.width if horizontal else box.height
    cross = box.height if horizontal else box.width

    total_gap = config.gap * (count - 1)
    fill = (main - total_gap) / count
    if fill <= 0:
        raise ConfigurationError.from_code(ErrorCode.CFG_INVALID_CONTENT_AREA)

    size = min(config.item_main_size, fill) if config.item_main_size else fill
    free = main - count * size - total_gap

    if config.align_items == AlignItems.STRETCH or config.item_cross_size is None:
        item_cross = cross
    else:
        item_cross = min(config.item_cross_size, cross)
    cross_offset = _cross_axis_offset(cross, item_cross, config.align_items)

    positions = []
    for offset in _main_axis_offsets(count, size, free, config.gap, config.justify_content):
        if horizontal:
            positions.append(Position(
                x=round_px(box.x + offset),
                y=round_px(box.y + cross_offset),
                width=round_px(size),
                height=round_px(item_cross),
            ))
        else:
            positions.append(Position(
                x=round_px(box.x + cross_offset),
                y=round_px(box.y + offset),
                width=round_px(item_cross),
                height=round_px(size),
            ))
    return positions
