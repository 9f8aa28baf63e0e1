"""
Slide Layout Templates

Read-only registry of named grid templates, with lookup, search,
preview and recommendation helpers.
"""

import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from slidegrid.core.config import settings
from slidegrid.core.errors import ErrorCode, WarningCode
from slidegrid.core.exceptions import ConfigurationError, TemplateNotFoundError
from slidegrid.core.logging import get_logger
from slidegrid.domain.schemas.layout import ContentItem

from .base import ValidationReport, ValidationWarning

logger = get_logger(__name__)

MAX_RECOMMENDATIONS = 5

TEMPLATE_DEFINITIONS: Dict[str, Dict[str, Any]] = {
    # Basic layouts
    "single-column": {
        "name": "Single Column",
        "description": "Simple single column layout for focused content",
        "category": "basic",
        "areas": {"content": "1 / 1 / 6 / 13"},
        "default_content": ["body"],
        "flow_area": "content",
        "responsive": {
            "xs": {"content": "1 / 1 / 6 / 2"},
            "sm": {"content": "1 / 1 / 6 / 2"},
        },
    },
    "double-column": {
        "name": "Double Column",
        "description": "Two equal columns for balanced content",
        "category": "basic",
        "areas": {"left": "1 / 1 / 6 / 7", "right": "1 / 7 / 6 / 13"},
        "default_content": ["body", "body"],
        "responsive": {
            "xs": {"left": "1 / 1 / 3 / 2", "right": "3 / 1 / 6 / 2"},
            "sm": {"left": "1 / 1 / 3 / 2", "right": "3 / 1 / 6 / 2"},
        },
    },
    "triple-column": {
        "name": "Triple Column",
        "description": "Three equal columns for multi-faceted content",
        "category": "basic",
        "areas": {"left": "1 / 1 / 6 / 5", "center": "1 / 5 / 6 / 9", "right": "1 / 9 / 6 / 13"},
        "default_content": ["body", "body", "body"],
        "responsive": {
            "xs": {"left": "1 / 1 / 2 / 2", "center": "2 / 1 / 4 / 2", "right": "4 / 1 / 6 / 2"},
            "sm": {"left": "1 / 1 / 2 / 2", "center": "2 / 1 / 4 / 2", "right": "4 / 1 / 6 / 2"},
            "md": {"left": "1 / 1 / 3 / 7", "center": "3 / 1 / 6 / 7", "right": "1 / 7 / 6 / 13"},
        },
    },
    # Header-based layouts
    "title-content": {
        "name": "Title and Content",
        "description": "Large title with content section below",
        "category": "header",
        "areas": {"title": "1 / 1 / 2 / 13", "content": "2 / 1 / 6 / 13"},
        "default_content": ["title", "body"],
        "flow_area": "content",
        "responsive": {
            "xs": {"title": "1 / 1 / 2 / 2", "content": "2 / 1 / 6 / 2"},
        },
    },
    "hero-content": {
        "name": "Hero Section",
        "description": "Prominent hero area with supporting content",
        "category": "header",
        "areas": {"hero": "1 / 1 / 4 / 13", "content": "4 / 1 / 6 / 13"},
        "default_content": ["title", "body"],
        "styling": {
            "hero": {"background": "gradient", "font_size": 1.5},
            "content": {"font_size": 1.0},
        },
    },
    "header-two-column": {
        "name": "Header with Two Columns",
        "description": "Header spanning full width with two columns below",
        "category": "header",
        "areas": {"header": "1 / 1 / 2 / 13", "left": "2 / 1 / 6 / 7", "right": "2 / 7 / 6 / 13"},
        "default_content": ["heading", "body", "body"],
        "responsive": {
            "xs": {"header": "1 / 1 / 2 / 2", "left": "2 / 1 / 4 / 2", "right": "4 / 1 / 6 / 2"},
        },
    },
    # Sidebar layouts
    "sidebar-main": {
        "name": "Sidebar and Main",
        "description": "Navigation sidebar with main content area",
        "category": "sidebar",
        "areas": {"sidebar": "1 / 1 / 6 / 4", "main": "1 / 4 / 6 / 13"},
        "default_content": ["list", "body"],
        "styling": {
            "sidebar": {"background": "accent", "font_size": 0.9},
            "main": {"font_size": 1.0},
        },
        "responsive": {
            "xs": {"sidebar": "1 / 1 / 2 / 2", "main": "2 / 1 / 6 / 2"},
            "sm": {"sidebar": "1 / 1 / 2 / 2", "main": "2 / 1 / 6 / 2"},
        },
    },
    "right-sidebar": {
        "name": "Main with Right Sidebar",
        "description": "Main content with supplementary right sidebar",
        "category": "sidebar",
        "areas": {"main": "1 / 1 / 6 / 10", "sidebar": "1 / 10 / 6 / 13"},
        "default_content": ["body", "caption"],
        "responsive": {
            "xs": {"main": "1 / 1 / 4 / 2", "sidebar": "4 / 1 / 6 / 2"},
        },
    },
    # Grid layouts
    "quad-grid": {
        "name": "Four-Square Grid",
        "description": "Four equal quadrants in a 2x2 grid",
        "category": "grid",
        "areas": {
            "topLeft": "1 / 1 / 3 / 7",
            "topRight": "1 / 7 / 3 / 13",
            "bottomLeft": "3 / 1 / 6 / 7",
            "bottomRight": "3 / 7 / 6 / 13",
        },
        "default_content": ["body", "body", "body", "body"],
        "responsive": {
            "xs": {
                "topLeft": "1 / 1 / 2 / 2",
                "topRight": "2 / 1 / 3 / 2",
                "bottomLeft": "3 / 1 / 4 / 2",
                "bottomRight": "4 / 1 / 6 / 2",
            },
            "sm": {
                "topLeft": "1 / 1 / 2 / 2",
                "topRight": "2 / 1 / 3 / 2",
                "bottomLeft": "3 / 1 / 4 / 2",
                "bottomRight": "4 / 1 / 6 / 2",
            },
        },
    },
    "feature-showcase": {
        "name": "Feature Showcase",
        "description": "Title with three feature highlights below",
        "category": "grid",
        "areas": {
            "title": "1 / 1 / 2 / 13",
            "feature1": "2 / 1 / 5 / 5",
            "feature2": "2 / 5 / 5 / 9",
            "feature3": "2 / 9 / 5 / 13",
            "description": "5 / 1 / 6 / 13",
        },
        "default_content": ["title", "body", "body", "body", "caption"],
        "responsive": {
            "xs": {
                "title": "1 / 1 / 2 / 2",
                "feature1": "2 / 1 / 3 / 2",
                "feature2": "3 / 1 / 4 / 2",
                "feature3": "4 / 1 / 5 / 2",
                "description": "5 / 1 / 6 / 2",
            },
        },
    },
    # Dashboard layouts
    "dashboard-overview": {
        "name": "Dashboard Overview",
        "description": "Dashboard-style layout with metrics and charts",
        "category": "dashboard",
        "areas": {
            "header": "1 / 1 / 2 / 13",
            "kpi1": "2 / 1 / 4 / 4",
            "kpi2": "2 / 4 / 4 / 7",
            "kpi3": "2 / 7 / 4 / 10",
            "kpi4": "2 / 10 / 4 / 13",
            "chart": "4 / 1 / 6 / 8",
            "summary": "4 / 8 / 6 / 13",
        },
        "default_content": ["heading", "body", "body", "body", "body", "chart", "caption"],
        "styling": {
            "kpi1": {"background": "primary", "color": "white"},
            "kpi2": {"background": "secondary", "color": "white"},
            "kpi3": {"background": "success", "color": "white"},
            "kpi4": {"background": "warning", "color": "dark"},
        },
    },
    # Presentation layouts
    "comparison-layout": {
        "name": "Comparison Layout",
        "description": "Side-by-side comparison with central divider",
        "category": "presentation",
        "areas": {
            "title": "1 / 1 / 2 / 13",
            "leftTitle": "2 / 1 / 3 / 6",
            "rightTitle": "2 / 8 / 3 / 13",
            "leftContent": "3 / 1 / 6 / 6",
            "divider": "2 / 6 / 6 / 8",
            "rightContent": "3 / 8 / 6 / 13",
        },
        "default_content": ["title", "heading", "heading", "body", "divider", "body"],
        "styling": {"divider": {"background": "accent", "width": 2}},
    },
    "timeline-layout": {
        "name": "Timeline Layout",
        "description": "Vertical timeline with events and descriptions",
        "category": "presentation",
        "areas": {
            "title": "1 / 1 / 2 / 13",
            "timeline": "2 / 6 / 6 / 8",
            "event1": "2 / 1 / 3 / 6",
            "event2": "3 / 8 / 4 / 13",
            "event3": "4 / 1 / 5 / 6",
            "event4": "5 / 8 / 6 / 13",
        },
        "default_content": ["title", "divider", "body", "body", "body", "body"],
        "styling": {"timeline": {"background": "primary", "width": 4}},
    },
    # Content-focused layouts
    "article-layout": {
        "name": "Article Layout",
        "description": "Article-style layout with title, subtitle, and body",
        "category": "content",
        "areas": {"title": "1 / 2 / 2 / 12", "subtitle": "2 / 2 / 3 / 12", "body": "3 / 2 / 6 / 12"},
        "default_content": ["title", "heading", "body"],
        "styling": {
            "title": {"alignment": "center", "font_size": 1.5},
            "subtitle": {"alignment": "center", "font_size": 1.1},
            "body": {"font_size": 1.0, "line_height": 1.6},
        },
    },
    "magazine-layout": {
        "name": "Magazine Layout",
        "description": "Magazine-style asymmetric layout",
        "category": "content",
        "areas": {
            "headline": "1 / 1 / 3 / 8",
            "image": "1 / 8 / 4 / 13",
            "body1": "3 / 1 / 5 / 5",
            "body2": "3 / 5 / 5 / 8",
            "sidebar": "4 / 8 / 6 / 13",
            "footer": "5 / 1 / 6 / 8",
        },
        "default_content": ["title", "image", "body", "body", "caption", "footnote"],
    },
}

SAMPLE_TEXT = {
    "title": "Sample Presentation Title",
    "heading": "{area} Section",
    "body": (
        "This is sample body content that demonstrates how text will appear in this layout area. "
        "Content will wrap and flow naturally within the defined space."
    ),
    "caption": "Sample caption text with additional details",
    "footnote": "Footnote information and attribution",
    "list": "• First item\n• Second item\n• Third item",
}


def _freeze(mapping: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType({
        key: _freeze(value) if isinstance(value, Mapping) else value
        for key, value in mapping.items()
    })


def _thaw(mapping: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: _thaw(value) if isinstance(value, Mapping) else value for key, value in mapping.items()}


@dataclass(frozen=True)
class LayoutTemplate:
    """A named grid layout pattern"""
    id: str
    name: str
    description: str
    category: str
    areas: Mapping[str, str]
    default_content: Tuple[str, ...] = ()
    responsive: Mapping[str, Mapping[str, str]] = field(default_factory=dict)
    styling: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)
    flow_area: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "areas", _freeze(self.areas))
        object.__setattr__(self, "responsive", _freeze(self.responsive))
        object.__setattr__(self, "styling", _freeze(self.styling))
        object.__setattr__(self, "default_content", tuple(self.default_content))

    @classmethod
    def from_dict(cls, template_id: str, data: Mapping[str, Any]) -> "LayoutTemplate":
        return cls(
            id=template_id,
            name=data.get("name", ""),
            description=data.get("description", ""),
            category=data.get("category", "custom"),
            areas=data.get("areas", {}),
            default_content=data.get("default_content", ()),
            responsive=data.get("responsive", {}),
            styling=data.get("styling", {}),
            flow_area=data.get("flow_area"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "areas": dict(self.areas),
            "default_content": list(self.default_content),
            "responsive": _thaw(self.responsive),
            "styling": _thaw(self.styling),
            "flow_area": self.flow_area,
        }

    def override_for(self, breakpoint: Optional[str]) -> Mapping[str, str]:
        if not breakpoint:
            return {}
        return self.responsive.get(breakpoint, {})

    @property
    def is_responsive(self) -> bool:
        return bool(self.responsive)


class TemplateRegistry(Mapping[str, LayoutTemplate]):
    """Immutable id -> template mapping, built once at startup"""

    def __init__(self, templates: Sequence[LayoutTemplate]):
        self._templates = MappingProxyType({template.id: template for template in templates})

    @classmethod
    def from_definitions(cls, definitions: Mapping[str, Mapping[str, Any]]) -> "TemplateRegistry":
        return cls([LayoutTemplate.from_dict(template_id, data) for template_id, data in definitions.items()])

    @classmethod
    def from_file(cls, path: str) -> "TemplateRegistry":
        """Load template definitions from JSON file."""
        with open(path, "r") as f:
            data = json.load(f)
        registry = cls.from_definitions(data)
        validate_definitions(registry)
        return registry

    @classmethod
    def default(cls) -> "TemplateRegistry":
        if settings.LAYOUT_TEMPLATES_FILE:
            return cls.from_file(settings.LAYOUT_TEMPLATES_FILE)
        return cls.from_definitions(TEMPLATE_DEFINITIONS)

    def __getitem__(self, template_id: str) -> LayoutTemplate:
        return self._templates[template_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._templates)

    def __len__(self) -> int:
        return len(self._templates)


@dataclass(frozen=True)
class AreaAssignment:
    """Content items routed to one named area"""
    area_name: str
    area_spec: str
    items: Tuple[ContentItem, ...] = ()

    @property
    def is_populated(self) -> bool:
        return bool(self.items)


@dataclass(frozen=True)
class TemplateLayoutConfig:
    template_id: str
    template_name: str
    areas: Mapping[str, str]
    assignments: Tuple[AreaAssignment, ...]
    styling: Mapping[str, Mapping[str, Any]]
    flow_area: Optional[str] = None
    dropped: Tuple[ContentItem, ...] = ()
    warnings: Tuple[ValidationWarning, ...] = ()


def assign_content_to_areas(
    items: Sequence[ContentItem],
    area_names: Sequence[str],
    flow_area: Optional[str] = None,
    warnings: Optional[List[ValidationWarning]] = None,
) -> Tuple[Dict[str, List[ContentItem]], List[ContentItem]]:
    """
    Route content items to area names.

    Items naming an existing area go there. The rest fill the remaining
    areas in order. Items left over stack in ``flow_area`` when it is set,
    otherwise they are returned as dropped.
    """
    assigned: Dict[str, List[ContentItem]] = {name: [] for name in area_names}
    pending = []

    for item in items:
        requested = item.area_name
        if requested is not None:
            if requested in assigned:
                assigned[requested].append(item)
                continue
            if warnings is not None:
                warnings.append(ValidationWarning.create(
                    WarningCode.UNKNOWN_AREA_NAME, subject=requested, area=requested
                ))
        pending.append(item)

    free_areas = [name for name in area_names if not assigned[name]]
    for name, item in zip(free_areas, pending):
        assigned[name].append(item)
    leftovers = pending[len(free_areas):]

    if leftovers and flow_area in assigned:
        assigned[flow_area].extend(leftovers)
        leftovers = []

    if leftovers and warnings is not None:
        warnings.append(ValidationWarning.create(WarningCode.CONTENT_DROPPED, count=len(leftovers)))

    return assigned, leftovers


def format_category_name(category: str) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in category.split("-"))


class LayoutTemplates:
    """
    Template lookup and configuration

    Provides:
    - Lookup by id and category
    - Multi-criteria search
    - Layout configurations with content assigned to areas
    - Template validation, previews and recommendations
    """

    def __init__(self, registry: Optional[TemplateRegistry] = None):
        self.registry = registry if registry is not None else TemplateRegistry.default()

    def get_template(self, template_id: str) -> LayoutTemplate:
        try:
            return self.registry[template_id]
        except KeyError:
            raise TemplateNotFoundError(template_id) from None

    def list_templates(self) -> List[LayoutTemplate]:
        return list(self.registry.values())

    def get_templates_by_category(self, category: str) -> List[LayoutTemplate]:
        return [template for template in self.registry.values() if template.category == category]

    def get_categories(self) -> List[Dict[str, Any]]:
        categories: Dict[str, int] = {}
        for template in self.registry.values():
            categories[template.category] = categories.get(template.category, 0) + 1
        return [
            {"id": category, "name": format_category_name(category), "count": count}
            for category, count in categories.items()
        ]

    def search_templates(
        self,
        category: Optional[str] = None,
        content: Optional[str] = None,
        responsive: bool = False,
        keyword: Optional[str] = None,
    ) -> List[LayoutTemplate]:
        """
        Search templates; every given criterion must match.

        Args:
            category: Exact category
            content: Content type the template expects by default
            responsive: Only templates with breakpoint overrides
            keyword: Case-insensitive text in name or description
        """
        results = []
        for template in self.registry.values():
            if category and template.category != category:
                continue
            if content and content not in template.default_content:
                continue
            if responsive and not template.is_responsive:
                continue
            if keyword:
                search_text = f"{template.name} {template.description}".lower()
                if keyword.lower() not in search_text:
                    continue
            results.append(template)
        return results

    def create_layout_config(
        self,
        template_id: str,
        content: Optional[Sequence[ContentItem]] = None,
        breakpoint: Optional[str] = None,
        custom_areas: Optional[Mapping[str, str]] = None,
    ) -> TemplateLayoutConfig:
        """
        Build a grid layout configuration from a template.

        Areas are merged in order: template areas, ``custom_areas``, then
        the template's override for ``breakpoint``.

        Raises:
            TemplateNotFoundError: If the template id is not registered
        """
        template = self.get_template(template_id)

        areas = dict(template.areas)
        areas.update(custom_areas or {})
        areas.update(template.override_for(breakpoint))

        warnings: List[ValidationWarning] = []
        assigned, dropped = assign_content_to_areas(
            content or [], list(areas), template.flow_area, warnings
        )

        assignments = tuple(
            AreaAssignment(area_name=name, area_spec=areas[name], items=tuple(assigned[name]))
            for name in areas
        )
        logger.debug(
            "template_config_created",
            template_id=template_id,
            breakpoint=breakpoint,
            areas=len(areas),
            dropped=len(dropped),
        )
        return TemplateLayoutConfig(
            template_id=template.id,
            template_name=template.name,
            areas=MappingProxyType(areas),
            assignments=assignments,
            styling=template.styling,
            flow_area=template.flow_area,
            dropped=tuple(dropped),
            warnings=tuple(warnings),
        )

    def validate_template(self, template: LayoutTemplate) -> ValidationReport:
        report = ValidationReport()

        if not template.name:
            report.add_error("Template name is required")
        if not template.areas:
            report.add_error("Template must have at least one area")

        for name, spec in template.areas.items():
            if len(str(spec).split("/")) != 4:
                report.add_error(f"Invalid area definition for {name}: {spec}")

        for breakpoint, areas in template.responsive.items():
            for name in areas:
                if name not in template.areas:
                    report.warnings.append(ValidationWarning.create(
                        WarningCode.UNKNOWN_OVERRIDE_AREA, subject=name, breakpoint=breakpoint, area=name
                    ))

        if template.flow_area is not None and template.flow_area not in template.areas:
            report.add_error(f"Flow area {template.flow_area} is not a template area")

        return report

    def generate_preview(self, template_id: str) -> Dict[str, Any]:
        template = self.get_template(template_id)
        preview_content = []
        for index, area_name in enumerate(template.areas):
            content_type = template.default_content[index] if index < len(template.default_content) else "body"
            preview_content.append({
                "area": area_name,
                "type": content_type,
                "text": generate_sample_text(content_type, area_name),
                "preview": True,
            })

        return {
            "template_id": template.id,
            "name": template.name,
            "description": template.description,
            "areas": dict(template.areas),
            "content": preview_content,
            "styling": _thaw(template.styling),
        }

    def get_recommendations(
        self,
        content_count: int,
        content_types: Sequence[str] = (),
        screen_size: Optional[str] = None,
    ) -> List[str]:
        """
        Recommend template ids for a slide's content.

        Args:
            content_count: Number of content items
            content_types: Content types present on the slide
            screen_size: 'mobile' keeps only templates with a phone override

        Returns:
            Up to five distinct template ids, best first
        """
        recommendations = []

        if content_count == 1:
            recommendations += ["single-column", "article-layout"]
        elif content_count == 2:
            recommendations += ["double-column", "comparison-layout"]
        elif content_count <= 4:
            recommendations += ["quad-grid", "feature-showcase"]

        if "title" in content_types:
            recommendations += ["title-content", "hero-content"]
        if "chart" in content_types:
            recommendations += ["dashboard-overview", "sidebar-main"]

        recommendations = [template_id for template_id in recommendations if template_id in self.registry]

        if screen_size == "mobile":
            recommendations = [
                template_id for template_id in recommendations
                if "xs" in self.registry[template_id].responsive
            ]

        return list(dict.fromkeys(recommendations))[:MAX_RECOMMENDATIONS]


def generate_sample_text(content_type: str, area_name: str) -> str:
    if content_type == "heading":
        return SAMPLE_TEXT["heading"].format(area=area_name[:1].upper() + area_name[1:])
    return SAMPLE_TEXT.get(content_type, SAMPLE_TEXT["body"])


def validate_definitions(registry: TemplateRegistry) -> None:
    """Reject a registry containing templates with hard errors"""
    service = LayoutTemplates(registry)
    for template in registry.values():
        report = service.validate_template(template)
        if not report.is_valid:
            raise ConfigurationError.from_code(
                ErrorCode.TPL_INVALID_DEFINITION,
                template_id=template.id,
                reason="; ".join(report.errors),
            )
