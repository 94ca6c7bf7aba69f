"""Structured logging configuration.

Application code logs through ``structlog.get_logger(__name__)``; this
module routes those events through the standard library so the CLI and any
embedding web server share one handler on stderr.
"""

import logging
import sys

import structlog
from pythonjsonlogger.json import JsonFormatter

from foodshare.infrastructure.config import Settings


def setup_logging(settings: Settings) -> None:
    """Configure structured logging for the application."""
    log_level = getattr(logging, settings.log_level)

    handler = logging.StreamHandler(sys.stderr)
    if settings.log_format == "json":
        # JSON logging for production
        handler.setFormatter(
            JsonFormatter(
                fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
                rename_fields={"levelname": "level", "asctime": "timestamp"},
            )
        )
        renderer = structlog.stdlib.render_to_log_kwargs
    else:
        # Human-readable logging for development
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
