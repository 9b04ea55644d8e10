"""
Logging configuration for streamguide.

This module configures structlog for JSON logging across the application.
"""

import logging
import sys

import structlog

from .settings import Settings, settings


def configure_logging(config: Settings | None = None) -> None:
    """Configure structlog for JSON logging."""
    config = config or settings
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    # structlog hands records to stdlib logging; stderr keeps stdout clean for JSON output
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level, force=True)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

