"""Structured logging configuration using structlog."""

import logging
import sys
from typing import Any, Dict, List, Optional, TextIO

import structlog
from rich.logging import RichHandler

from signup_agent.config import Settings, settings as default_settings

# Transport libraries that log every request at INFO.
QUIET_LOGGERS = ("httpx", "httpcore", "openai", "asyncio")


def _processors(debug: bool) -> List[Any]:
    renderer = structlog.dev.ConsoleRenderer() if debug else structlog.processors.JSONRenderer()
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="ISO"),
        renderer,
    ]


def configure_logging(settings: Optional[Settings] = None, stream: Optional[TextIO] = None) -> None:
    """
    Route agent logs to ``stream`` (stderr by default) so CLI tables on
    stdout stay readable.

    Selectors such as ``[name="email"]`` are logged verbatim, so rich
    markup is disabled on the stdlib handler.
    """
    settings = settings or default_settings
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        level=level,
        handlers=[RichHandler(rich_tracebacks=True, markup=False, show_path=settings.debug)],
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    structlog.configure(
        processors=_processors(settings.debug),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def log_action(action: Any) -> Dict[str, Any]:
    """Create a log context for a planned form action."""
    context = {"action_type": getattr(action, "type", None), "selector": getattr(action, "selector", None)}
    field = getattr(action, "field", None)
    if field is not None:
        context["field"] = field
    return context
