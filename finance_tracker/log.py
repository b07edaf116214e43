"""
Structured Logging

All components log through structlog so that every store operation leaves
a machine-readable line: which month, which entry kind, which id.

configure_logging() is called once by the application factory. Library
code only calls get_logger(); if nothing was configured, structlog's
defaults still print readable output.
"""

import logging
import sys

import structlog


def configure_logging(debug: bool = False) -> None:
    """
    Configure stdlib logging and structlog together.

    Args:
        debug: Log at DEBUG level instead of INFO
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if debug else logging.INFO,
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
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str):
    return structlog.get_logger(name)
