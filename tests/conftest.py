"""Shared fixtures for layout engine tests."""

import pytest

from slidegrid.domain.schemas.layout import CanvasDimensions, ContentItem, ContentType
from slidegrid.services.layout.grid import GridSystem
from slidegrid.services.layout.orchestrator import LayoutOrchestrator
from slidegrid.services.layout.responsive import ResponsiveEngine
from slidegrid.services.layout.templates import LayoutTemplates, TemplateRegistry, TEMPLATE_DEFINITIONS


@pytest.fixture
def canvas():
    """Baseline 960x540 canvas."""
    return CanvasDimensions(width=960, height=540)


@pytest.fixture
def hd_canvas():
    return CanvasDimensions(width=1920, height=1080)


@pytest.fixture
def grid_system():
    return GridSystem()


@pytest.fixture
def responsive_engine():
    return ResponsiveEngine()


@pytest.fixture
def templates():
    return LayoutTemplates(TemplateRegistry.from_definitions(TEMPLATE_DEFINITIONS))


@pytest.fixture
def orchestrator(templates):
    return LayoutOrchestrator(templates=templates)


@pytest.fixture
def body_items():
    return [
        ContentItem(type=ContentType.BODY, text="First paragraph"),
        ContentItem(type=ContentType.BODY, text="Second paragraph"),
        ContentItem(type=ContentType.BODY, text="Third paragraph"),
    ]
