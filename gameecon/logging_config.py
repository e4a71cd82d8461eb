"""
Structured logging setup.

Call `configure_logging()` once from the embedding application. Engines only
ever do `structlog.get_logger(__name__)`.
"""

import logging
import sys
from typing import Optional

import structlog

from gameecon.config import settings


def configure_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
) -> None:
    """Configure stdlib logging and structlog with JSON or console output."""
    level_name = (log_level or settings.log_level).upper()
    fmt = log_format or settings.log_format

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level_name, logging.INFO),
    )

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
            structlog.processors.JSONRenderer() if fmt == "json"
            else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
