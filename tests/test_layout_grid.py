"""Tests for grid and flex geometry."""

import pytest

from slidegrid.core.errors import WarningCode
from slidegrid.core.exceptions import ConfigurationError
from slidegrid.domain.schemas.layout import CanvasDimensions, Margins
from slidegrid.services.layout.base import GridArea, GridConfiguration
from slidegrid.services.layout.grid import (
    DEFAULT_END_LINE,
    DEFAULT_START_LINE,
    FlexConfig,
    GridSystem,
    RowHeightPolicy,
    format_area_spec,
    parse_area_spec,
    parse_int_or_default,
)


class TestAreaParsing:
    """Test suite for area spec parsing."""

    def test_parse_well_formed_spec(self):
        assert parse_area_spec("2 / 3 / 4 / 5") == GridArea(2, 3, 4, 5)

    def test_parse_without_spaces(self):
        assert parse_area_spec("1/1/6/13") == GridArea(1, 1, 6, 13)

    @pytest.mark.parametrize("area", [
        GridArea(1, 1, 2, 2),
        GridArea(1, 1, 6, 13),
        GridArea(3, 7, 5, 9),
    ])
    def test_format_then_parse_returns_same_area(self, area):
        assert parse_area_spec(format_area_spec(area)) == area

    def test_wrong_part_count_is_collected_not_raised(self):
        warnings = []
        assert parse_area_spec("1 / 2 / 3", name="broken", warnings=warnings) is None
        assert len(warnings) == 1
        assert warnings[0].code == WarningCode.MALFORMED_AREA_SPEC
        assert warnings[0].subject == "broken"

    def test_non_numeric_tokens_use_defaults(self):
        area = parse_area_spec("a / b / c / d")
        assert area == GridArea(DEFAULT_START_LINE, DEFAULT_START_LINE, DEFAULT_END_LINE, DEFAULT_END_LINE)

    def test_end_before_start_is_repaired(self):
        warnings = []
        area = parse_area_spec("3 / 1 / x / 2", name="late", warnings=warnings)
        assert area == GridArea(3, 1, 4, 2)
        assert [w.code for w in warnings] == [WarningCode.AREA_REPAIRED]

    @pytest.mark.parametrize("token,default,expected", [
        ("7", 1, 7),
        (" 4 ", 1, 4),
        ("0", 1, 1),
        ("-3", 2, 2),
        ("4.5", 2, 2),
        ("3px", 1, 1),
        ("", 1, 1),
        (None, 2, 2),
    ])
    def test_parse_int_or_default(self, token, default, expected):
        assert parse_int_or_default(token, default) == expected

    def test_grid_area_rejects_inverted_lines(self):
        with pytest.raises(ConfigurationError):
            GridArea(2, 1, 2, 3)


class TestGridCreation:
    """Test suite for grid resolution."""

    def test_default_grid_on_baseline_canvas(self, grid_system, canvas):
        grid = grid_system.create_grid(GridConfiguration(), canvas)

        assert grid.columns == 12
        assert grid.content_width == 896
        assert grid.content_height == 476
        assert grid.column_width == 60

    @pytest.mark.parametrize("columns", [1, 2, 3, 5, 7, 12, 16])
    def test_columns_and_gaps_fill_content_width(self, grid_system, columns):
        canvas = CanvasDimensions(width=1280, height=720)
        grid = grid_system.create_grid(GridConfiguration(columns=columns, gap=12), canvas)

        total = grid.column_width * columns + grid.gap * (columns - 1)
        assert abs(total - grid.content_width) < 1

    def test_zero_canvas_is_rejected(self, grid_system):
        with pytest.raises(ConfigurationError):
            grid_system.create_grid(GridConfiguration(), CanvasDimensions(width=0, height=540))

    def test_zero_columns_is_rejected(self, grid_system, canvas):
        with pytest.raises(ConfigurationError):
            grid_system.create_grid(GridConfiguration(columns=0), canvas)

    def test_margins_consuming_canvas_are_rejected(self, grid_system, canvas):
        config = GridConfiguration(margins=Margins.uniform(500))
        with pytest.raises(ConfigurationError):
            grid_system.create_grid(config, canvas)

    def test_gaps_leaving_no_column_width_are_rejected(self, grid_system, canvas):
        config = GridConfiguration(columns=12, gap=100)
        with pytest.raises(ConfigurationError):
            grid_system.create_grid(config, canvas)

    def test_many_columns_warn(self, grid_system, canvas):
        warnings = []
        grid_system.create_grid(GridConfiguration(columns=30), canvas, warnings)
        assert WarningCode.COLUMN_COUNT_OUT_OF_RANGE in [w.code for w in warnings]

    def test_malformed_area_is_skipped_with_warning(self, grid_system, canvas):
        warnings = []
        config = GridConfiguration(areas={"good": "1 / 1 / 2 / 13", "bad": "1 / 1"})
        grid = grid_system.create_grid(config, canvas, warnings)

        assert list(grid.areas) == ["good"]
        assert [w.code for w in warnings] == [WarningCode.MALFORMED_AREA_SPEC]

    def test_area_past_last_column_warns(self, grid_system, canvas):
        warnings = []
        config = GridConfiguration(areas={"wide": "1 / 1 / 2 / 20"})
        grid_system.create_grid(config, canvas, warnings)
        assert [w.code for w in warnings] == [WarningCode.AREA_OUT_OF_BOUNDS]

    def test_configuration_areas_are_read_only(self):
        config = GridConfiguration(areas={"a": "1 / 1 / 2 / 2"})
        with pytest.raises(TypeError):
            config.areas["b"] = "1 / 2 / 2 / 3"


class TestGridPositions:
    """Test suite for area to pixel conversion."""

    def test_full_width_area(self, grid_system, canvas):
        grid = grid_system.create_grid(GridConfiguration(areas={"content": "1 / 1 / 6 / 13"}), canvas)
        position = grid.position_of("content")

        assert (position.x, position.y) == (32, 32)
        assert position.width == 896
        # Five damped rows clamp to the 80px minimum
        assert position.height == 5 * 80 + 4 * 16

    def test_offset_area(self, grid_system, canvas):
        grid = grid_system.create_grid(GridConfiguration(), canvas)
        position = grid_system.get_grid_position(grid, "2 / 7 / 3 / 13")

        assert position.x == 32 + 6 * (60 + 16)
        assert position.y == 32 + 80 + 16
        assert position.width == 6 * 60 + 5 * 16
        assert position.height == 80

    def test_explicit_rows_divide_content_height(self, grid_system, canvas):
        grid = grid_system.create_grid(GridConfiguration(rows=4), canvas)

        assert grid.row_height() == (476 - 3 * 16) / 4
        position = grid_system.get_grid_position(grid, GridArea(2, 1, 3, 13))
        assert position.y == 155
        assert position.height == 107

    def test_row_height_is_clamped_low(self, grid_system):
        canvas = CanvasDimensions(width=400, height=300)
        grid = grid_system.create_grid(GridConfiguration(columns=4, margins=Margins()), canvas)
        assert grid_system.calculate_row_height(grid) == 80

    def test_row_height_is_clamped_high(self, grid_system):
        canvas = CanvasDimensions(width=1920, height=1440)
        grid = grid_system.create_grid(GridConfiguration(margins=Margins()), canvas)

        assert grid_system.calculate_row_height(grid, 1) == 200
        # Spanning areas are damped before clamping: 240 * 0.8
        assert grid_system.calculate_row_height(grid, 2) == 192

    def test_custom_row_policy(self, canvas):
        system = GridSystem(row_policy=RowHeightPolicy(baseline_rows=4, min_height=10, max_height=500))
        grid = system.create_grid(GridConfiguration(), canvas)
        assert grid.row_height() == 119

    def test_span_helpers(self, grid_system, canvas):
        grid = grid_system.create_grid(GridConfiguration(), canvas)

        assert grid_system.calculate_column_span(grid, 3) == 3 * 60 + 2 * 16
        assert grid_system.calculate_row_span(grid, 2) == 2 * 80 + 16

    def test_unknown_area_name(self, grid_system, canvas):
        grid = grid_system.create_grid(GridConfiguration(), canvas)
        with pytest.raises(ConfigurationError):
            grid.position_of("missing")


class TestFlexDistribution:
    """Test suite for flexbox-style distribution."""

    def test_no_items(self, grid_system, canvas):
        assert grid_system.distribute_flex_items([], FlexConfig(), canvas) == []

    def test_row_fill(self, grid_system, canvas):
        placements = grid_system.distribute_flex_items(["a", "b", "c"], FlexConfig(), canvas)

        assert [p.position.x for p in placements] == [32, 336, 640]
        assert all(p.position.width == 288 for p in placements)
        assert all(p.position.height == 476 for p in placements)
        assert [p.index for p in placements] == [0, 1, 2]
        assert [p.item for p in placements] == ["a", "b", "c"]

    def test_single_item_space_between_is_centered(self, grid_system, canvas):
        config = FlexConfig(justify_content="space-between", item_main_size=200)
        [placement] = grid_system.distribute_flex_items(["only"], config, canvas)

        assert placement.position.x == 380
        assert placement.position.x + placement.position.width / 2 == canvas.width / 2

    def test_single_item_fill_space_between_spans_content(self, grid_system, canvas):
        config = FlexConfig(justify_content="space-between")
        [placement] = grid_system.distribute_flex_items(["only"], config, canvas)
        assert (placement.position.x, placement.position.width) == (32, 896)

    def test_flex_end(self, grid_system, canvas):
        config = FlexConfig(justify_content="flex-end", item_main_size=200)
        placements = grid_system.distribute_flex_items(["a", "b"], config, canvas)

        assert [p.position.x for p in placements] == [512, 728]
        assert placements[-1].position.right == canvas.width - 32

    def test_space_around(self, grid_system, canvas):
        config = FlexConfig(justify_content="space-around", item_main_size=200)
        placements = grid_system.distribute_flex_items(["a", "b"], config, canvas)
        assert [p.position.x for p in placements] == [152, 608]

    def test_space_between_two_items_touch_edges(self, grid_system, canvas):
        config = FlexConfig(justify_content="space-between", item_main_size=200)
        placements = grid_system.distribute_flex_items(["a", "b"], config, canvas)

        assert placements[0].position.x == 32
        assert placements[1].position.right == 928

    def test_column_center(self, grid_system, canvas):
        config = FlexConfig(direction="column", justify_content="center", item_main_size=100)
        placements = grid_system.distribute_flex_items(["a", "b"], config, canvas)

        assert [p.position.y for p in placements] == [162, 278]
        assert all(p.position.width == 896 for p in placements)

    def test_cross_axis_center(self, grid_system, canvas):
        config = FlexConfig(align_items="center", item_cross_size=100)
        [placement] = grid_system.distribute_flex_items(["a"], config, canvas)
        assert (placement.position.y, placement.position.height) == (220, 100)

    def test_stretch_ignores_cross_size(self, grid_system, canvas):
        config = FlexConfig(align_items="stretch", item_cross_size=100)
        [placement] = grid_system.distribute_flex_items(["a"], config, canvas)
        assert placement.position.height == 476

    def test_unknown_justify_value(self):
        with pytest.raises(ConfigurationError):
            FlexConfig(justify_content="space-evenly")

    def test_flex_layout_content_box(self, grid_system, canvas):
        layout = grid_system.create_flex_layout(FlexConfig(), canvas)
        assert (layout.content_width, layout.content_height) == (896, 476)


class TestGridValidation:
    """Test suite for configuration validation."""

    def test_valid_configuration(self, grid_system):
        report = grid_system.validate_grid_config(GridConfiguration(areas={"a": "1 / 1 / 2 / 13"}))
        assert report.is_valid
        assert report.errors == []

    def test_malformed_area_is_an_error(self, grid_system):
        report = grid_system.validate_grid_config(GridConfiguration(areas={"a": "1 / 2"}))
        assert not report.is_valid
        assert "a" in report.errors[0]

    def test_column_range_warning(self, grid_system):
        report = grid_system.validate_grid_config(GridConfiguration(columns=30))
        assert report.is_valid
        assert report.warnings[0].code == WarningCode.COLUMN_COUNT_OUT_OF_RANGE
