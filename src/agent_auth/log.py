"""
Structured logging setup for the agent auth state store.
"""

import logging
from typing import Any, Optional

import structlog


def configure_logging(debug: Optional[bool] = None, settings: Optional[Any] = None) -> None:
    """
    Configure structlog on top of the standard library logging module.

    Args:
        debug: Emit debug events when True; defaults to settings.debug
        settings: AuthStateSettings consulted when debug is not given
    """
    if debug is None:
        debug = bool(getattr(settings, "debug", False))

    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger().setLevel(level)

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
            structlog.dev.ConsoleRenderer() if debug else structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
