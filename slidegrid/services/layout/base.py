"""
Base Layout Types

Value objects shared by the grid, flex, responsive and template
components: grid areas, grid configuration, layout enums and the
collected (never raised) validation warnings.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar, Union

from slidegrid.core.config import settings
from slidegrid.core.errors import ErrorCode, ErrorMessages, WarningCode
from slidegrid.core.exceptions import ConfigurationError
from slidegrid.domain.schemas.layout import Margins, round_px

E = TypeVar("E", bound=Enum)


class LayoutMode(str, Enum):
    """Closed set of layout strategies the orchestrator understands"""
    TEMPLATE = "template"
    CUSTOM_GRID = "custom-grid"
    AUTO_GRID = "auto-grid"
    FLEX = "flex"


class FlexDirection(str, Enum):
    ROW = "row"
    COLUMN = "column"


class JustifyContent(str, Enum):
    FLEX_START = "flex-start"
    CENTER = "center"
    FLEX_END = "flex-end"
    SPACE_BETWEEN = "space-between"
    SPACE_AROUND = "space-around"


class AlignItems(str, Enum):
    FLEX_START = "flex-start"
    CENTER = "center"
    FLEX_END = "flex-end"
    STRETCH = "stretch"


def coerce_enum(enum_cls: Type[E], value: Union[E, str], option: str) -> E:
    """Convert a raw option value to its enum, raising ConfigurationError"""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise ConfigurationError.from_code(
            ErrorCode.CFG_INVALID_OPTION, option=option, value=value
        ) from None


@dataclass(frozen=True)
class ValidationWarning:
    """A non-fatal problem found while building a layout"""
    code: WarningCode
    message: str
    subject: Optional[str] = None

    @classmethod
    def create(cls, code: WarningCode, subject: Optional[str] = None, **context: Any) -> "ValidationWarning":
        return cls(code=code, message=ErrorMessages.get(code, **context), subject=subject)

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code.value, "message": self.message, "subject": self.subject}


@dataclass(frozen=True)
class GridArea:
    """Rectangular region of a grid in 1-based, end-exclusive line numbers"""
    row_start: int
    col_start: int
    row_end: int
    col_end: int

    def __post_init__(self):
        if self.row_start < 1 or self.col_start < 1:
            raise ConfigurationError.from_code(ErrorCode.CFG_INVALID_GRID_AREA, area=self.to_spec())
        if self.row_end <= self.row_start or self.col_end <= self.col_start:
            raise ConfigurationError.from_code(ErrorCode.CFG_INVALID_GRID_AREA, area=self.to_spec())

    @property
    def row_span(self) -> int:
        return self.row_end - self.row_start

    @property
    def col_span(self) -> int:
        return self.col_end - self.col_start

    def to_spec(self) -> str:
        """Format as 'rowStart / colStart / rowEnd / colEnd'"""
        return f"{self.row_start} / {self.col_start} / {self.row_end} / {self.col_end}"


AreaInput = Union[GridArea, str]


def _default_margins() -> Margins:
    return Margins.uniform(settings.LAYOUT_DEFAULT_MARGIN)


@dataclass(frozen=True)
class GridConfiguration:
    """Grid definition before it is resolved against a canvas.

    ``rows`` is optional. When set the content height is divided evenly
    between rows; when unset the baseline row height policy applies.
    Areas may be given as ``GridArea`` values or as area spec strings.
    """
    columns: int = field(default_factory=lambda: settings.LAYOUT_DEFAULT_COLUMNS)
    rows: Optional[int] = None
    areas: Mapping[str, AreaInput] = field(default_factory=dict)
    gap: float = field(default_factory=lambda: settings.LAYOUT_DEFAULT_GAP)
    margins: Margins = field(default_factory=_default_margins)

    def __post_init__(self):
        # Freeze the area mapping so a configuration can be shared safely
        object.__setattr__(self, "areas", MappingProxyType(dict(self.areas)))
        if self.gap < 0:
            raise ConfigurationError.from_code(ErrorCode.CFG_INVALID_OPTION, option="gap", value=self.gap)
        if self.rows is not None and self.rows < 1:
            raise ConfigurationError.from_code(ErrorCode.CFG_INVALID_OPTION, option="rows", value=self.rows)

    def with_changes(self, **changes: Any) -> "GridConfiguration":
        return replace(self, **changes)

    @property
    def area_names(self) -> List[str]:
        return list(self.areas.keys())


@dataclass
class ValidationReport:
    """Outcome of validating a grid configuration or template"""
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[ValidationWarning] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        self.errors.append(message)
        self.is_valid = False
