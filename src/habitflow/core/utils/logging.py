"""
loguru setup for the habitflow CLI.

Library code only ever does ``from loguru import logger``; sinks are chosen
once, by the entry point, from the ``logging`` config section.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from habitflow.core.config import Config

CONSOLE_FORMAT = "<level>{level: <8}</level> {message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """Replace loguru's sinks with stderr and, optionally, a rotating file."""
    level = level.upper()
    logger.remove()
    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT)
    if log_file:
        logger.add(log_file, level=level, format=FILE_FORMAT, rotation=rotation, retention=retention)


def configure_logging(config: Config) -> None:
    """Apply ``logging.level`` and ``logging.file`` from a Config."""
    setup_logging(
        level=str(config.get("logging.level") or "WARNING"),
        log_file=config.get("logging.file") or None,
    )
