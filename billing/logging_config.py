"""
Logging Configuration
=====================
Structured logging setup shared by the billing services.
"""

import logging
from typing import Optional

import structlog

from billing.config import Settings, get_settings


def configure_logging(config: Optional[Settings] = None) -> None:
    """Configure structlog on top of the stdlib logging module."""
    config = config or get_settings()

    logging.basicConfig(format="%(message)s", level=config.log_level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if config.log_format == "json"
            else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
