"""
Error and warning code catalog for SlideGrid.

Centralizes messages so callers can match on stable codes instead of text.
"""
from enum import Enum
from typing import Dict


class ErrorCode(str, Enum):
    """Codes carried by raised exceptions."""

    # Configuration Errors (CFG_*)
    CFG_INVALID_CANVAS = "CFG_001"
    CFG_INVALID_COLUMNS = "CFG_002"
    CFG_INVALID_CONTENT_AREA = "CFG_003"
    CFG_INVALID_GRID_AREA = "CFG_004"
    CFG_UNSUPPORTED_MODE = "CFG_005"
    CFG_MISSING_OPTION = "CFG_006"
    CFG_INVALID_OPTION = "CFG_007"
    CFG_INVALID_TABLE = "CFG_008"

    # Template Errors (TPL_*)
    TPL_NOT_FOUND = "TPL_001"
    TPL_INVALID_DEFINITION = "TPL_002"

    # System Errors (SYS_*)
    SYS_INTERNAL_ERROR = "SYS_001"


class WarningCode(str, Enum):
    """Codes carried by collected, non-fatal validation warnings."""

    MALFORMED_AREA_SPEC = "WARN_001"
    AREA_REPAIRED = "WARN_002"
    COLUMN_COUNT_OUT_OF_RANGE = "WARN_003"
    EXCESSIVE_AREAS = "WARN_004"
    AREA_OUT_OF_BOUNDS = "WARN_005"
    LARGE_CONTENT_COUNT = "WARN_006"
    CONTENT_DROPPED = "WARN_007"
    ELEMENT_CLIPPED = "WARN_008"
    ELEMENT_OUTSIDE_CANVAS = "WARN_009"
    UNKNOWN_AREA_NAME = "WARN_010"
    UNKNOWN_OVERRIDE_AREA = "WARN_011"
    BREAKPOINT_GAP = "WARN_012"


class ErrorMessages:
    """Centralized message definitions."""

    _messages: Dict[Enum, str] = {
        ErrorCode.CFG_INVALID_CANVAS: "Canvas dimensions must be positive, got {width}x{height}",
        ErrorCode.CFG_INVALID_COLUMNS: "Grid needs at least one column, got {columns}",
        ErrorCode.CFG_INVALID_CONTENT_AREA: "Margins and gaps leave no room for content",
        ErrorCode.CFG_INVALID_GRID_AREA: "Invalid grid area {area}",
        ErrorCode.CFG_UNSUPPORTED_MODE: "Unsupported layout mode: {mode}",
        ErrorCode.CFG_MISSING_OPTION: "Layout mode {mode} requires option {option}",
        ErrorCode.CFG_INVALID_OPTION: "Invalid value {value!r} for {option}",
        ErrorCode.CFG_INVALID_TABLE: "Invalid configuration table: {reason}",
        ErrorCode.TPL_NOT_FOUND: "Template not found: {template_id}",
        ErrorCode.TPL_INVALID_DEFINITION: "Invalid template definition {template_id}: {reason}",
        ErrorCode.SYS_INTERNAL_ERROR: "An internal error occurred",

        WarningCode.MALFORMED_AREA_SPEC: "Area {area} spec {spec!r} must have 4 parts separated by '/'",
        WarningCode.AREA_REPAIRED: "Area {area} had an end line before its start line and was repaired",
        WarningCode.COLUMN_COUNT_OUT_OF_RANGE: "Column count {columns} is outside the recommended range 1-{maximum}",
        WarningCode.EXCESSIVE_AREAS: "Grid defines {count} areas, more than {maximum} may be hard to read",
        WarningCode.AREA_OUT_OF_BOUNDS: "Area {area} extends past the last grid line",
        WarningCode.LARGE_CONTENT_COUNT: "Large number of content items ({count}) may affect readability",
        WarningCode.CONTENT_DROPPED: "{count} content item(s) could not be placed and were dropped",
        WarningCode.ELEMENT_CLIPPED: "Element in area {area} was clipped to the canvas",
        WarningCode.ELEMENT_OUTSIDE_CANVAS: "Element in area {area} lies outside the canvas and was dropped",
        WarningCode.UNKNOWN_AREA_NAME: "Content item requested unknown area {area}",
        WarningCode.UNKNOWN_OVERRIDE_AREA: "Responsive override {breakpoint} references unknown area {area}",
        WarningCode.BREAKPOINT_GAP: "Breakpoint table leaves widths between {low} and {high} unmatched",
    }

    @classmethod
    def get(cls, code: Enum, **kwargs) -> str:
        """
        Get message for a given code.

        Args:
            code: Error or warning code
            **kwargs: Context for formatting

        Returns:
            Formatted message
        """
        base_message = cls._messages.get(code, "An error occurred")

        if kwargs:
            try:
                return base_message.format(**kwargs)
            except (KeyError, IndexError):
                return base_message

        return base_message
