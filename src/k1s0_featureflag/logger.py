"""structlog setup for applications embedding the featureflag client."""

from __future__ import annotations

import logging
import sys

import structlog

from .config import LogSection


def configure_logging(
    level: str = "INFO",
    format: str = "json",
) -> structlog.stdlib.BoundLogger:
    """Configure structlog on top of stdlib logging and return a bound logger.

    Args:
        level: "DEBUG", "INFO", "WARNING", "ERROR" or "CRITICAL"
        format: "json" or "text"
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)

    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer()
        if format == "json"
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return structlog.stdlib.get_logger("k1s0_featureflag")


def configure_from_section(section: LogSection) -> structlog.stdlib.BoundLogger:
    """configure_logging driven by the ``log`` section of FeatureFlagConfig."""
    return configure_logging(level=section.level, format=section.format)
