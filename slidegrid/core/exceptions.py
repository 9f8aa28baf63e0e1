"""
Custom exceptions for the layout engine.
"""
from typing import Any, Dict, Optional

from slidegrid.core.errors import ErrorCode, ErrorMessages


class SlideGridException(Exception):
    """Base exception for all SlideGrid exceptions."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.SYS_INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(SlideGridException):
    """Invalid canvas, grid, template or option configuration.

    Aborts the whole layout call; no partial result is produced.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CFG_INVALID_OPTION,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, code=code, details=details)

    @classmethod
    def from_code(cls, code: ErrorCode, **context: Any) -> "ConfigurationError":
        return cls(ErrorMessages.get(code, **context), code=code, details=context)


class TemplateNotFoundError(ConfigurationError):
    """Requested template id is not registered."""

    def __init__(self, template_id: str):
        self.template_id = template_id
        super().__init__(
            ErrorMessages.get(ErrorCode.TPL_NOT_FOUND, template_id=template_id),
            code=ErrorCode.TPL_NOT_FOUND,
            details={"template_id": template_id},
        )


class UnsupportedLayoutModeError(ConfigurationError):
    """Layout mode outside the supported set."""

    def __init__(self, mode: Any):
        super().__init__(
            ErrorMessages.get(ErrorCode.CFG_UNSUPPORTED_MODE, mode=mode),
            code=ErrorCode.CFG_UNSUPPORTED_MODE,
            details={"mode": str(mode)},
        )
