"""
Structured logging for PyCGGTTS.

Modules log through structlog bound loggers named after the module
(``pycggtts.header.parser``...). Records are routed to the standard
library logger of the package, so configuring PyCGGTTS never touches
the handlers of the host application.

Usage:
    from pycggtts.utils.logging import get_logger, setup_logging

    setup_logging(level="DEBUG", json_format=True)
    logger = get_logger(__name__)
    logger.info("Read CGGTTS file", path=str(path), tracks=len(cggtts))
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

import structlog


PACKAGE_LOGGER = "pycggtts"
DEFAULT_LEVEL = "INFO"
LOG_FILE_NAME = "pycggtts.log"


def _handlers(
    level: int,
    log_dir: Path | str | None,
    log_to_file: bool,
    log_to_console: bool,
) -> list[logging.Handler]:
    handlers: list[logging.Handler] = []
    if log_to_console:
        # stdout carries command output
        handlers.append(logging.StreamHandler(sys.stderr))
    if log_to_file and log_dir:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(directory / LOG_FILE_NAME, encoding="utf-8"))

    formatter = logging.Formatter("%(message)s")
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def _processors(json_format: bool) -> list[Any]:
    renderer = (
        structlog.processors.JSONRenderer()
        if json_format
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        renderer,
    ]


def setup_logging(
    level: str = DEFAULT_LEVEL,
    log_dir: Path | str | None = None,
    log_to_file: bool = True,
    log_to_console: bool = True,
    json_format: bool = False,
) -> None:
    """Configure the package logger.

    Calling it again replaces the previous handlers.

    Args:
        level: Level name; unknown names fall back to INFO
        log_dir: Directory of the pycggtts.log file
        log_to_file: Write to log_dir (ignored without log_dir)
        log_to_console: Write to stderr
        json_format: One JSON object per record instead of console lines
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    for handler in _handlers(numeric_level, log_dir, log_to_file, log_to_console):
        package_logger.addHandler(handler)
    package_logger.setLevel(numeric_level)
    package_logger.propagate = False

    structlog.configure(
        processors=_processors(json_format),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = PACKAGE_LOGGER) -> structlog.stdlib.BoundLogger:
    """Bound logger for a module of the package (pass ``__name__``)."""
    return structlog.get_logger(name)
