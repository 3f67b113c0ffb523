"""
Logging configuration and utilities.

Handlers are attached to the package logger only, so library callers keep
control of the root logger.
"""

import logging
import sys
from pathlib import Path

from symptom_journal.utils.parameters import LoggingConfig

PACKAGE_LOGGER = "symptom_journal"


def _make_handler(handler: logging.Handler, level: int, fmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def setup_logging(
    config: LoggingConfig, logger_name: str | None = PACKAGE_LOGGER
) -> logging.Logger:
    """
    Configure console and file logging.

    Calling this again replaces (and closes) the handlers installed by the
    previous call, so each CLI invocation starts from a clean logger.

    Args:
        config: Logging configuration.
        logger_name: Logger to configure. None configures the root logger.

    Returns:
        Configured logger instance.
    """
    logger = logging.getLogger(logger_name)
    level = getattr(logging, config.level.upper())
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if config.console:
        # stdout is reserved for exported data
        logger.addHandler(_make_handler(logging.StreamHandler(sys.stderr), level, config.format))

    if config.file:
        log_file = Path(config.file).expanduser()
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.addHandler(
            _make_handler(logging.FileHandler(log_file, encoding="utf-8"), level, config.format)
        )

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance by name (typically ``__name__``)."""
    return logging.getLogger(name)
