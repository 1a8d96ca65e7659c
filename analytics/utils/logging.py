"""
Logging setup — structlog events rendered through the stdlib root logger.

Engine modules emit snake_case events with keyword context. Scripts call
``configure_logging`` once; the CLI points the stream at stderr so JSON
payloads on stdout stay parseable.
"""

import logging
import sys
from typing import Any, Optional, TextIO

import structlog
from structlog.types import EventDict, Processor

from analytics.config import Settings, get_settings


def add_severity(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Upper-case level name under ``severity`` for log collectors."""
    event_dict["severity"] = method_name.upper()
    return event_dict


def configure_logging(settings: Optional[Settings] = None, stream: TextIO = sys.stdout) -> None:
    """
    Route structlog events to ``stream`` at the configured level.

    JSON lines unless ``log_format`` is console or ``dev_mode`` is on.
    """
    settings = settings or get_settings()

    logging.basicConfig(
        format="%(message)s",
        stream=stream,
        force=True,
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
    )

    if settings.log_format == "json" and not settings.dev_mode:
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            add_severity,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
