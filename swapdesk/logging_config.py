"""
Structured logging configuration using structlog.

The swap core logs through stdlib ``logging``; the HTTP layer logs through
structlog. Both end up in one handler with one renderer: JSON lines by
default, colored console output when LOG_FORMAT=console or at DEBUG level
with LOG_FORMAT=auto.
"""

import logging
import sys
from typing import List, Optional

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from .config import settings

SERVICE_NAME = "swapdesk"

# Chatty below WARNING and not about swaps
QUIET_LOGGERS = ("uvicorn.access", "httpcore", "httpx")


def _add_service(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def _use_console(level: int, log_format: str) -> bool:
    if log_format == "console":
        return True
    if log_format == "json":
        return False
    return level == logging.DEBUG


def setup_logging(log_level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """Configure structlog and route stdlib logging through it.

    Args:
        log_level: Override log level (default: settings.log_level)
        log_format: "json", "console" or "auto" (default: settings.log_format)
    """
    level = getattr(logging, (log_level or settings.log_level).upper(), logging.INFO)
    console = _use_console(level, (log_format or settings.log_format).lower())

    shared_processors: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_service,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if console:
        renderer: Processor = structlog.dev.ConsoleRenderer()
    else:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
