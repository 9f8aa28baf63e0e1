"""
Slide Layout Engine Package

This package provides grid and flex positioning, responsive breakpoints,
layout templates and responsive typography for slide content.
"""

from .base import (
    AlignItems,
    FlexDirection,
    GridArea,
    GridConfiguration,
    JustifyContent,
    LayoutMode,
    ValidationReport,
    ValidationWarning,
)
from .grid import (
    FlexConfig,
    FlexPlacement,
    GridSystem,
    ResolvedGrid,
    format_area_spec,
    parse_area_spec,
    parse_int_or_default,
)
from .responsive import Breakpoint, BreakpointTable, ResponsiveEngine, redistribute_grid_areas
from .templates import LayoutTemplate, LayoutTemplates, TemplateRegistry
from .typography import calculate_line_height, calculate_responsive_font_size
from .config import LayoutEngineConfig, get_engine_config
from .orchestrator import LayoutOptions, LayoutOrchestrator, LayoutResult

__all__ = [
    # Base types
    'AlignItems',
    'FlexDirection',
    'GridArea',
    'GridConfiguration',
    'JustifyContent',
    'LayoutMode',
    'ValidationReport',
    'ValidationWarning',

    # Grid system
    'FlexConfig',
    'FlexPlacement',
    'GridSystem',
    'ResolvedGrid',
    'format_area_spec',
    'parse_area_spec',
    'parse_int_or_default',

    # Responsive system
    'Breakpoint',
    'BreakpointTable',
    'ResponsiveEngine',
    'redistribute_grid_areas',

    # Layout templates
    'LayoutTemplate',
    'LayoutTemplates',
    'TemplateRegistry',

    # Typography
    'calculate_line_height',
    'calculate_responsive_font_size',

    # Configuration
    'LayoutEngineConfig',
    'get_engine_config',

    # Orchestration
    'LayoutOptions',
    'LayoutOrchestrator',
    'LayoutResult',
]
