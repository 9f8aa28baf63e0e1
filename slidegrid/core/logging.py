"""
Structured logging for the layout engine.

Modules log events through ``get_logger(__name__)``. The structlog
pipeline is installed by ``setup_logging()``, which runs when the engine
configuration is first loaded (``get_engine_config``). It leaves an
existing structlog configuration untouched, so a host application that
configures structlog before using the engine keeps its own pipeline.
"""
import logging
import sys
from typing import Any, Dict, List

import structlog

from slidegrid.core.config import settings


def _resolve_level() -> int:
    if settings.DEBUG:
        return logging.DEBUG
    return getattr(logging, settings.LOG_LEVEL, logging.INFO)


def _build_processors(json_output: bool) -> List[Any]:
    processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if json_output:
        processors += [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    return processors


def setup_logging(force: bool = False) -> bool:
    """
    Install the engine's structlog pipeline.

    Console output in development, JSON lines in staging and production.

    Args:
        force: Reconfigure even if structlog is already configured

    Returns:
        True when this call installed the configuration
    """
    if structlog.is_configured() and not force:
        return False

    level = _resolve_level()
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    structlog.configure(
        processors=_build_processors(json_output=not settings.is_development),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return True


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    return structlog.get_logger(name)


def log_error_details(error: Exception, **kwargs: Any) -> Dict[str, Any]:
    """
    Event context for a failed operation.

    Engine exceptions contribute their error code and details.
    """
    context = {
        "error_type": type(error).__name__,
        "error_message": str(error),
        **kwargs,
    }

    code = getattr(error, "code", None)
    if code is not None:
        context["error_code"] = getattr(code, "value", code)

    details = getattr(error, "details", None)
    if details:
        context["error_details"] = details

    return context


def log_performance_metrics(
    operation: str,
    duration_ms: float,
    success: bool = True,
    **kwargs: Any,
) -> Dict[str, Any]:
    """Event context for a timed operation, duration rounded to microseconds"""
    return {
        "operation": operation,
        "duration_ms": round(duration_ms, 3),
        "success": success,
        **kwargs,
    }
