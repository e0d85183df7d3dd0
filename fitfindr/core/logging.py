"""Structured logging setup.

API code logs through structlog; the geocoding core and geopy log through
plain ``logging``. Both end up on one root handler with one renderer.
"""

import logging
from typing import cast

import structlog
from structlog import dev, stdlib
from structlog.processors import (
    JSONRenderer,
    KeyValueRenderer,
    TimeStamper,
    dict_tracebacks,
    format_exc_info,
)
from structlog.stdlib import BoundLogger
from structlog.types import Processor

LOG_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}

# Third-party loggers kept at WARNING unless running at DEBUG
NOISY_LOGGERS = ("geopy", "urllib3")


def _shared_processors() -> list[Processor]:
    return [
        stdlib.add_logger_name,
        stdlib.add_log_level,
        stdlib.PositionalArgumentsFormatter(),
        TimeStamper(fmt="%Y-%m-%d %H:%M:%S.%f"),
        dict_tracebacks,
    ]


def _build_handler(level: int, testing: bool) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(
        stdlib.ProcessorFormatter(
            processor=dev.ConsoleRenderer() if testing else JSONRenderer(),
            foreign_pre_chain=_shared_processors(),
        )
    )
    return handler


def configure_logging(testing: bool = False, level: str = "INFO") -> None:
    """Configure structured logging for the application.

    Args:
        testing: Human-readable output instead of JSON
        level: Log level name; unknown names fall back to INFO
    """
    log_level = LOG_LEVELS.get(level.lower(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            stdlib.filter_by_level,
            *_shared_processors(),
            format_exc_info,
            KeyValueRenderer() if testing else JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=stdlib.LoggerFactory(),
        wrapper_class=stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    # Exactly one handler, replaced on every call
    root_logger.handlers = [_build_handler(log_level, testing)]

    app_logger = logging.getLogger("fitfindr")
    app_logger.setLevel(log_level)
    app_logger.handlers = []

    quiet_level = (
        log_level if log_level == logging.DEBUG else max(log_level, logging.WARNING)
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)


def get_logger() -> BoundLogger:
    """Get a configured logger instance.

    Returns:
        A structured logger instance.
    """
    return cast(BoundLogger, structlog.get_logger())
