"""Tests for layout orchestration, including end-to-end scenarios."""

import pytest

from slidegrid.core.errors import WarningCode
from slidegrid.core.exceptions import ConfigurationError, TemplateNotFoundError, UnsupportedLayoutModeError
from slidegrid.domain.schemas.layout import CanvasDimensions, ContentItem, ContentType, Margins
from slidegrid.services.layout.base import LayoutMode
from slidegrid.services.layout.orchestrator import (
    LayoutOptions,
    calculate_optimal_columns,
    calculate_optimal_gap,
    calculate_optimal_margins,
    clip_to_canvas,
    generate_grid_areas,
)
from slidegrid.domain.schemas.layout import Position
from slidegrid.services.layout.templates import TEMPLATE_DEFINITIONS


def _assert_inside(elements, canvas):
    for element in elements:
        assert element.position.fits_within(canvas), element.position


class TestEndToEnd:
    """Full layouts on realistic canvases."""

    def test_single_column_stacks_three_bodies(self, orchestrator, canvas, body_items):
        result = orchestrator.layout(canvas, body_items, LayoutOptions(template_id="single-column"))

        assert result.mode == LayoutMode.TEMPLATE
        assert len(result.elements) == 3
        assert all(e.position.width == canvas.width - 2 * 32 for e in result.elements)
        assert [e.position.y for e in result.elements] == [32, 192, 352]
        assert all(e.position.height == 144 for e in result.elements)
        for upper, lower in zip(result.elements, result.elements[1:]):
            assert not upper.position.overlaps(lower.position)
            assert upper.position.bottom <= lower.position.y
        _assert_inside(result.elements, canvas)

    def test_bigger_canvas_never_shrinks_text(self, orchestrator, canvas, hd_canvas, body_items):
        options = LayoutOptions(template_id="single-column")
        small = orchestrator.layout(canvas, body_items, options)
        large = orchestrator.layout(hd_canvas, body_items, options)

        for small_element, large_element in zip(small.elements, large.elements):
            assert large_element.typography.font_size >= small_element.typography.font_size

    def test_narrow_canvas_collapses_to_one_column(self, orchestrator, body_items):
        canvas = CanvasDimensions(width=400, height=300)
        result = orchestrator.layout(
            canvas, body_items, LayoutOptions(template_id="triple-column", breakpoint_aware=True)
        )

        assert result.breakpoint.key == "xs"
        assert result.grid.columns == 1
        areas = list(result.grid.areas.values())
        assert all(area.col_start == 1 and area.col_end == 2 for area in areas)
        assert len({area.row_start for area in areas}) == len(areas)
        _assert_inside(result.elements, canvas)

    def test_unknown_template_produces_no_result(self, orchestrator, canvas, body_items):
        with pytest.raises(TemplateNotFoundError):
            orchestrator.layout(canvas, body_items, LayoutOptions(template_id="missing-template"))

    @pytest.mark.parametrize("template_id", list(TEMPLATE_DEFINITIONS))
    @pytest.mark.parametrize("width,height", [(960, 540), (1920, 1080), (1024, 768), (400, 225)])
    def test_every_template_stays_on_canvas(self, orchestrator, template_id, width, height):
        canvas = CanvasDimensions(width=width, height=height)
        items = [ContentItem(text=f"item {i}") for i in range(len(TEMPLATE_DEFINITIONS[template_id]["areas"]))]

        for aware in (False, True):
            result = orchestrator.layout(canvas, items, LayoutOptions(template_id=template_id, breakpoint_aware=aware))
            _assert_inside(result.elements, canvas)


class TestModes:
    """Test suite for layout mode selection."""

    def test_mode_is_inferred(self):
        assert LayoutOptions(template_id="quad-grid").resolve_mode() == LayoutMode.TEMPLATE
        assert LayoutOptions(custom_areas={"a": "1 / 1 / 2 / 2"}).resolve_mode() == LayoutMode.CUSTOM_GRID
        assert LayoutOptions().resolve_mode() == LayoutMode.AUTO_GRID

    def test_unknown_mode(self, orchestrator, canvas, body_items):
        with pytest.raises(UnsupportedLayoutModeError):
            orchestrator.layout(canvas, body_items, LayoutOptions(mode="masonry"))

    def test_template_mode_needs_template(self, orchestrator, canvas, body_items):
        with pytest.raises(ConfigurationError):
            orchestrator.layout(canvas, body_items, LayoutOptions(mode="template"))

    def test_invalid_canvas(self, orchestrator, body_items):
        with pytest.raises(ConfigurationError):
            orchestrator.layout(CanvasDimensions(width=-960, height=540), body_items)

    def test_invalid_option_value(self):
        with pytest.raises(ConfigurationError):
            LayoutOptions(viewing_distance="nearby")

    def test_custom_grid(self, orchestrator, canvas):
        areas = {"left": "1 / 1 / 2 / 7", "right": "1 / 7 / 2 / 13"}
        items = [ContentItem(text="left"), ContentItem(text="right")]
        result = orchestrator.layout(canvas, items, LayoutOptions(custom_areas=areas))

        assert [e.area_name for e in result.elements] == ["left", "right"]
        assert result.elements[0].position.x == 32
        assert result.elements[1].position.x == 32 + 6 * (60 + 16)

    def test_auto_grid(self, orchestrator, hd_canvas):
        items = [ContentItem(text=str(i)) for i in range(4)]
        result = orchestrator.layout(hd_canvas, items)

        assert result.mode == LayoutMode.AUTO_GRID
        assert (result.grid.columns, result.grid.rows) == (3, 2)
        assert result.grid.gap == 16
        assert result.grid.margins == Margins.uniform(48)
        assert [e.area_name for e in result.elements] == ["content-0", "content-1", "content-2", "content-3"]
        _assert_inside(result.elements, hd_canvas)

    def test_auto_grid_without_items(self, orchestrator, canvas):
        result = orchestrator.layout(canvas, [])

        assert result.elements == []
        assert result.grid is not None

    def test_flex_mode(self, orchestrator, canvas, body_items):
        result = orchestrator.layout(canvas, body_items, LayoutOptions(mode="flex"))

        assert result.grid is None
        assert [e.position.x for e in result.elements] == [32, 336, 640]
        assert all(e.area_name is None for e in result.elements)

    def test_flex_mode_without_items(self, orchestrator, canvas):
        assert orchestrator.layout(canvas, [], LayoutOptions(mode="flex")).elements == []


class TestWarningsAndClipping:
    """Test suite for collected warnings and canvas clipping."""

    def test_large_content_count(self, orchestrator, canvas):
        items = [ContentItem(text=str(i)) for i in range(21)]
        result = orchestrator.layout(canvas, items)

        assert WarningCode.LARGE_CONTENT_COUNT in [w.code for w in result.warnings]
        assert len(result.elements) == 21
        _assert_inside(result.elements, canvas)

    def test_oversized_area_is_clipped(self, orchestrator, canvas):
        result = orchestrator.layout(
            canvas, [ContentItem(text="wide")], LayoutOptions(custom_areas={"wide": "1 / 1 / 2 / 20"})
        )
        codes = [w.code for w in result.warnings]

        assert WarningCode.AREA_OUT_OF_BOUNDS in codes
        assert WarningCode.ELEMENT_CLIPPED in codes
        assert result.elements[0].position.right == canvas.width

    def test_area_off_canvas_is_dropped(self, orchestrator, canvas):
        result = orchestrator.layout(
            canvas, [ContentItem(text="far")], LayoutOptions(custom_areas={"far": "1 / 30 / 2 / 31"})
        )

        assert result.elements == []
        assert WarningCode.ELEMENT_OUTSIDE_CANVAS in [w.code for w in result.warnings]

    def test_malformed_custom_area_drops_its_content(self, orchestrator, canvas):
        areas = {"ok": "1 / 1 / 2 / 13", "broken": "1 / 1 / 2"}
        items = [ContentItem(text="a"), ContentItem(text="b")]
        result = orchestrator.layout(canvas, items, LayoutOptions(custom_areas=areas))
        codes = [w.code for w in result.warnings]

        assert [e.area_name for e in result.elements] == ["ok"]
        assert WarningCode.MALFORMED_AREA_SPEC in codes
        assert WarningCode.CONTENT_DROPPED in codes

    @pytest.mark.parametrize("breakpoint_aware,canvas_size", [
        (False, (960, 540)),
        (True, (1280, 720)),
        (True, (400, 300)),
    ])
    def test_malformed_custom_area_is_reported_with_breakpoints(self, orchestrator, breakpoint_aware, canvas_size):
        canvas = CanvasDimensions(width=canvas_size[0], height=canvas_size[1])
        areas = {"good": "1 / 1 / 2 / 7", "bad": "1 / 7 / 2"}
        items = [ContentItem(text="a"), ContentItem(text="b")]
        result = orchestrator.layout(
            canvas, items, LayoutOptions(custom_areas=areas, breakpoint_aware=breakpoint_aware)
        )
        codes = [w.code for w in result.warnings]

        assert [e.area_name for e in result.elements] == ["good"]
        assert codes.count(WarningCode.MALFORMED_AREA_SPEC) == 1
        assert WarningCode.CONTENT_DROPPED in codes

    def test_many_items_in_flow_area(self, orchestrator, canvas):
        items = [ContentItem(text=f"Point {i}") for i in range(30)]
        result = orchestrator.layout(canvas, items, LayoutOptions(template_id="single-column"))
        codes = [w.code for w in result.warnings]

        assert len(result.elements) == 30
        assert WarningCode.LARGE_CONTENT_COUNT in codes
        assert WarningCode.CONTENT_DROPPED not in codes
        box = result.grid.position_of("content")
        for upper, lower in zip(result.elements, result.elements[1:]):
            assert upper.position.bottom <= lower.position.y
        assert result.elements[0].position.y == box.y
        assert result.elements[-1].position.bottom <= box.bottom

    def test_flow_area_drops_items_beyond_capacity(self, orchestrator, canvas):
        items = [ContentItem(type=ContentType.TITLE, text="Agenda")]
        items += [ContentItem(text=f"Point {i}") for i in range(40)]
        result = orchestrator.layout(canvas, items, LayoutOptions(template_id="title-content"))

        box = result.grid.position_of("content")
        capacity = int(box.height // 14)
        assert capacity < 40
        assert len(result.elements) == 1 + capacity
        assert all(e.position.height >= 14 for e in result.elements)

        [dropped] = [w for w in result.warnings if w.code == WarningCode.CONTENT_DROPPED]
        assert dropped.subject == "content"
        assert str(40 - capacity) in dropped.message
        _assert_inside(result.elements, canvas)

    def test_clip_helper(self):
        canvas = CanvasDimensions(width=100, height=100)

        assert clip_to_canvas(Position(x=10, y=10, width=50, height=50), canvas) == Position(x=10, y=10, width=50, height=50)
        assert clip_to_canvas(Position(x=80, y=90, width=50, height=50), canvas) == Position(x=80, y=90, width=20, height=10)
        assert clip_to_canvas(Position(x=100, y=0, width=10, height=10), canvas) is None


class TestResponsiveBehaviour:
    """Test suite for breakpoint-aware layouts."""

    def test_breakpoint_scales_fonts(self, orchestrator, body_items):
        canvas = CanvasDimensions(width=1280, height=720)
        plain = orchestrator.layout(canvas, body_items[:1], LayoutOptions(template_id="single-column"))
        aware = orchestrator.layout(
            canvas, body_items[:1], LayoutOptions(template_id="single-column", breakpoint_aware=True)
        )

        assert aware.breakpoint.key == "lg"
        assert aware.elements[0].typography.font_size == plain.elements[0].typography.font_size

        wide = CanvasDimensions(width=1920, height=1080)
        plain_wide = orchestrator.layout(wide, body_items[:1], LayoutOptions(template_id="single-column"))
        aware_wide = orchestrator.layout(
            wide, body_items[:1], LayoutOptions(template_id="single-column", breakpoint_aware=True)
        )
        assert aware_wide.elements[0].typography.font_size > plain_wide.elements[0].typography.font_size

    def test_condense_text_on_small_screens(self, orchestrator):
        canvas = CanvasDimensions(width=400, height=300)
        item = ContentItem(text="lorem ipsum " * 30)
        result = orchestrator.layout(
            canvas, [item], LayoutOptions(template_id="single-column", breakpoint_aware=True, condense_text=True)
        )

        assert result.elements[0].content_item.truncated is True

    def test_condense_text_ignored_without_breakpoints(self, orchestrator):
        canvas = CanvasDimensions(width=400, height=300)
        item = ContentItem(text="lorem ipsum " * 30)
        result = orchestrator.layout(canvas, [item], LayoutOptions(template_id="single-column", condense_text=True))

        assert result.elements[0].content_item.truncated is False

    def test_auto_grid_uses_breakpoint_columns(self, orchestrator):
        canvas = CanvasDimensions(width=800, height=600)
        items = [ContentItem(text=str(i)) for i in range(9)]
        result = orchestrator.layout(canvas, items, LayoutOptions(breakpoint_aware=True))

        assert result.breakpoint.key == "md"
        assert result.grid.columns == 2
        assert result.grid.rows == 5


class TestAutoGridHelpers:
    """Test suite for automatic grid sizing."""

    @pytest.mark.parametrize("count,width,expected", [
        (0, 1920, 1),
        (1, 1920, 1),
        (2, 1920, 2),
        (5, 700, 2),
        (4, 1920, 3),
        (6, 1000, 3),
        (6, 1920, 4),
        (2, 900, 2),
    ])
    def test_optimal_columns(self, count, width, expected):
        assert calculate_optimal_columns(count, width) == expected

    def test_requested_columns_are_capped(self):
        assert calculate_optimal_columns(10, 1920, requested=8) == 6
        assert calculate_optimal_columns(2, 1920, requested=8) == 2

    def test_generated_areas(self):
        areas = generate_grid_areas(5, 2)

        assert list(areas) == [f"content-{i}" for i in range(5)]
        assert areas["content-3"].to_spec() == "2 / 2 / 3 / 3"
        assert areas["content-4"].to_spec() == "3 / 1 / 4 / 2"

    def test_spacing_follows_width(self):
        assert calculate_optimal_gap(960) == 8
        assert calculate_optimal_gap(3840) == 24
        assert calculate_optimal_margins(1920) == Margins.uniform(48)


class TestQueries:
    """Test suite for template discovery helpers."""

    def test_available_templates(self, orchestrator):
        grouped = orchestrator.get_available_templates()

        assert len(grouped) == 7
        assert [t["id"] for t in grouped["basic"]] == ["single-column", "double-column", "triple-column"]

    def test_layout_recommendations(self, orchestrator):
        items = [ContentItem(type=ContentType.TITLE, text="Title"), ContentItem(text="Body")]
        assert orchestrator.get_layout_recommendations(items) == [
            "double-column", "comparison-layout", "title-content", "hero-content",
        ]

    def test_preview(self, orchestrator):
        assert orchestrator.generate_layout_preview("quad-grid")["name"] == "Four-Square Grid"

    def test_result_serialization(self, orchestrator, canvas, body_items):
        result = orchestrator.layout(canvas, body_items, LayoutOptions(template_id="single-column"))
        data = result.to_dict()

        assert data["mode"] == "template"
        assert data["template_id"] == "single-column"
        assert data["elements"][0]["position"] == {"x": 32, "y": 32, "width": 896, "height": 144}
        assert data["elements"][0]["content_item"]["type"] == "body"

    def test_accessibility_report(self, orchestrator, body_items):
        canvas = CanvasDimensions(width=480, height=270)
        result = orchestrator.layout(canvas, body_items[:1], LayoutOptions(template_id="single-column"))
        report = orchestrator.check_accessibility(result)

        assert 0 in report
