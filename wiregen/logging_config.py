"""
Logging configuration for wiregen.

Modules obtain their logger through ``get_logger(__name__)``. Nothing is
printed until ``configure_logging`` installs a handler on the package logger.
"""

import logging
import os
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "wiregen"

_HANDLER_NAME = "wiregen-console"


def configure_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    console: Optional[Console] = None,
) -> logging.Logger:
    """
    Configure logging for the wiregen package.

    Calling it again replaces the handlers installed by an earlier call.

    Args:
        level: Logging level name; defaults to ``WIREGEN_LOG_LEVEL`` or WARNING
        log_file: Optional file path for log output
        console: Rich console to log to; defaults to stderr
    """
    if level is None:
        level = os.environ.get("WIREGEN_LOG_LEVEL", "WARNING")

    log_level = getattr(logging, str(level).upper(), logging.WARNING)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(log_level)

    for handler in logger.handlers[:]:
        if handler.get_name() and handler.get_name().startswith(_HANDLER_NAME):
            logger.removeHandler(handler)
            handler.close()

    console_handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    console_handler.set_name(_HANDLER_NAME)
    console_handler.setLevel(log_level)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.set_name(f"{_HANDLER_NAME}-file")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for the given module.

    Args:
        name: Logger name (typically __name__)
    """
    if name != PACKAGE_LOGGER and not name.startswith(f"{PACKAGE_LOGGER}."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
