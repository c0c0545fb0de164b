"""Structured logging setup.

Library modules call ``get_logger(__name__)`` and log events by name with
keyword context::

    logger.info("manifest_saved", path=str(path), items=3)

Only the CLI calls ``configure_logging``; until then structlog's defaults
apply, which keeps the library usable from tests and other programs.
"""

import logging
import sys

import structlog

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("console", "json")


def configure_logging(level: str = "INFO", log_format: str = "console") -> None:
    """Route structlog through stdlib logging on stderr.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: ``console`` for human-readable lines, ``json`` for one
            JSON object per line
    """
    level = level.upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"Unknown log level: {level}")
    if log_format not in LOG_FORMATS:
        raise ValueError(f"Unknown log format: {log_format}")

    renderer = (
        structlog.processors.JSONRenderer()
        if log_format == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level),
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str):
    """Return a structlog logger bound to ``name``."""
    return structlog.get_logger(name)
