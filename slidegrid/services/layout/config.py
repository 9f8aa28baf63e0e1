"""
Design system tables for the layout engine.

Loaded once at startup (defaults, a dict or a JSON file) and shared
read-only between layout calls.
"""

import json
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from slidegrid.core.config import settings
from slidegrid.core.errors import ErrorCode
from slidegrid.core.exceptions import ConfigurationError
from slidegrid.core.logging import setup_logging

from .responsive import DEFAULT_BREAKPOINTS, FALLBACK_BREAKPOINT, BreakpointTable


def _frozen(mapping: Mapping) -> Mapping:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class TypographyConfig:
    """Font size, line height and font family tables"""
    base_sizes: Mapping[str, int] = field(default_factory=lambda: _frozen({
        "title": 44,
        "heading": 32,
        "subheading": 28,
        "body": 24,
        "caption": 20,
        "footnote": 16,
    }))
    default_base_size: int = 24
    min_font_size: int = 14
    max_font_size: int = 72
    reference_width: float = 960
    reference_height: float = 540
    line_height_ratios: Mapping[str, float] = field(default_factory=lambda: _frozen({
        "title": 1.2,
        "heading": 1.3,
        "body": 1.4,
        "caption": 1.5,
        "list": 1.6,
    }))
    default_line_height_ratio: float = 1.4
    small_text_threshold: int = 20
    small_text_ratio_bonus: float = 0.1
    font_families: Mapping[str, Mapping[str, str]] = field(default_factory=lambda: _frozen({
        "en": _frozen({"title": "Arial", "body": "Calibri", "code": "Courier New", "default": "Arial"}),
        "ja": _frozen({"title": "Noto Sans JP", "body": "Hiragino Sans", "code": "MS Gothic", "default": "Noto Sans JP"}),
    }))
    default_language: str = "en"
    bold_types: Tuple[str, ...] = ("title", "heading")
    accessibility_minimums: Mapping[str, int] = field(default_factory=lambda: _frozen({
        "title": 28,
        "heading": 24,
        "body": 18,
        "caption": 16,
    }))

    def __post_init__(self):
        if self.min_font_size > self.max_font_size:
            raise ConfigurationError.from_code(
                ErrorCode.CFG_INVALID_TABLE, reason="min_font_size is above max_font_size"
            )
        object.__setattr__(self, "base_sizes", _frozen(self.base_sizes))
        object.__setattr__(self, "line_height_ratios", _frozen(self.line_height_ratios))
        object.__setattr__(
            self, "font_families",
            _frozen({lang: _frozen(fonts) for lang, fonts in self.font_families.items()}),
        )
        object.__setattr__(self, "bold_types", tuple(self.bold_types))
        object.__setattr__(self, "accessibility_minimums", _frozen(self.accessibility_minimums))

    def base_size_for(self, content_type: str) -> int:
        return self.base_sizes.get(content_type, self.default_base_size)


@dataclass(frozen=True)
class ThemeColors:
    name: str
    text: str
    primary: str
    text_secondary: str
    background: str
    surface: str


DEFAULT_THEMES: Dict[str, ThemeColors] = {
    "default": ThemeColors("Default", text="#212121", primary="#2196f3", text_secondary="#757575",
                           background="#fafafa", surface="#ffffff"),
    "corporate": ThemeColors("Corporate", text="#212121", primary="#1565c0", text_secondary="#757575",
                             background="#ffffff", surface="#f5f5f5"),
    "presentation": ThemeColors("Presentation", text="#ffffff", primary="#ffeb3b", text_secondary="#e0e0e0",
                                background="#1a237e", surface="#303f9f"),
}


@dataclass(frozen=True)
class LayoutEngineConfig:
    """Complete, immutable design system configuration."""
    typography: TypographyConfig = field(default_factory=TypographyConfig)
    themes: Mapping[str, ThemeColors] = field(default_factory=lambda: _frozen(DEFAULT_THEMES))
    default_theme: str = "default"
    breakpoints: BreakpointTable = field(default_factory=BreakpointTable)

    def __post_init__(self):
        object.__setattr__(self, "themes", _frozen(self.themes))
        if self.default_theme not in self.themes:
            raise ConfigurationError.from_code(
                ErrorCode.CFG_INVALID_TABLE, reason=f"default theme {self.default_theme!r} is not defined"
            )

    def get_theme(self, name: Optional[str] = None) -> ThemeColors:
        return self.themes.get(name or self.default_theme) or self.themes[self.default_theme]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LayoutEngineConfig":
        """Create configuration from dictionary; missing sections keep defaults."""
        typography = TypographyConfig(**data.get("typography", {}))

        themes = dict(DEFAULT_THEMES)
        for key, theme_data in data.get("themes", {}).items():
            themes[key] = ThemeColors(**theme_data)

        breakpoint_data = data.get("breakpoints")
        fallback = data.get("fallback_breakpoint", FALLBACK_BREAKPOINT)
        if breakpoint_data:
            breakpoints = BreakpointTable.from_dicts(breakpoint_data, fallback=fallback)
        else:
            breakpoints = BreakpointTable(DEFAULT_BREAKPOINTS, fallback=fallback)

        return cls(
            typography=typography,
            themes=themes,
            default_theme=data.get("default_theme", "default"),
            breakpoints=breakpoints,
        )

    @classmethod
    def from_file(cls, path: str) -> "LayoutEngineConfig":
        """Load configuration from JSON file."""
        with open(path, "r") as f:
            data = json.load(f)
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        typography = self.typography
        return {
            "typography": {
                "base_sizes": dict(typography.base_sizes),
                "default_base_size": typography.default_base_size,
                "min_font_size": typography.min_font_size,
                "max_font_size": typography.max_font_size,
                "reference_width": typography.reference_width,
                "reference_height": typography.reference_height,
                "line_height_ratios": dict(typography.line_height_ratios),
                "default_line_height_ratio": typography.default_line_height_ratio,
                "small_text_threshold": typography.small_text_threshold,
                "small_text_ratio_bonus": typography.small_text_ratio_bonus,
                "font_families": {lang: dict(fonts) for lang, fonts in typography.font_families.items()},
                "default_language": typography.default_language,
                "bold_types": list(typography.bold_types),
                "accessibility_minimums": dict(typography.accessibility_minimums),
            },
            "themes": {
                key: {
                    "name": theme.name,
                    "text": theme.text,
                    "primary": theme.primary,
                    "text_secondary": theme.text_secondary,
                    "background": theme.background,
                    "surface": theme.surface,
                }
                for key, theme in self.themes.items()
            },
            "default_theme": self.default_theme,
            "breakpoints": self.breakpoints.to_list(),
            "fallback_breakpoint": self.breakpoints.fallback,
        }

    def save(self, path: str) -> None:
        """Save configuration to JSON file."""
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)


@lru_cache()
def get_engine_config() -> LayoutEngineConfig:
    """Engine configuration for this process, from file when one is configured.

    First use also installs the engine's logging pipeline.
    """
    setup_logging()
    if settings.LAYOUT_ENGINE_CONFIG_FILE:
        return LayoutEngineConfig.from_file(settings.LAYOUT_ENGINE_CONFIG_FILE)
    return LayoutEngineConfig()
