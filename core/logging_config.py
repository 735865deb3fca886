"""
Structured logging setup.

All modules log through ``get_logger(__name__)`` and pass context as keyword
arguments, e.g. ``logger.info("Reminder sent", user_id=user_id)``.
"""

import logging
import sys

import structlog

from config.settings import settings

_configured = False


def configure_logging(level: str | None = None, json_logs: bool | None = None) -> None:
    """
    Configure stdlib logging and structlog once per process.

    Args:
        level: Log level name, defaults to settings.LOG_LEVEL
        json_logs: Render JSON lines instead of console output,
            defaults to settings.LOG_FORMAT == "json"
    """
    global _configured

    level = level or settings.LOG_LEVEL
    if json_logs is None:
        json_logs = settings.LOG_FORMAT == "json"

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level),
        force=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structured logger bound to ``name``."""
    if not _configured:
        configure_logging()
    return structlog.get_logger(name)


def mask_phone_number(phone_number: str | None) -> str:
    """Keep only the last four digits of a phone number for log output."""
    if not phone_number:
        return ""
    return f"***{phone_number[-4:]}"
