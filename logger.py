"""Logging configuration for Runway.

Everything logs under the "runway" logger. The CLI writes its output through
the console handler, so console records carry no timestamp; the dated log
file gets the full detail.
"""

import logging
from datetime import date
from typing import Optional
from config import Config

LOGGER_NAME = "runway"


def setup_logging(config: Config, console: bool = True) -> logging.Logger:
    """Set up application logging with file and console handlers.

    Args:
        config: Application configuration containing log settings.
        console: Whether to also log to stderr/stdout.

    Returns:
        Configured logger instance.
    """
    config.log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(config.log_level)

    # setup_logging may run more than once per process (tests, reset script)
    logger.handlers.clear()

    file_handler = logging.FileHandler(
        config.log_dir / f"runway-{date.today().isoformat()}.log"
    )
    file_handler.setLevel(config.log_level)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(config.log_level)
        console_handler.setFormatter(_ConsoleFormatter())
        logger.addHandler(console_handler)

    return logger


class _ConsoleFormatter(logging.Formatter):
    """Plain messages for INFO, level-prefixed for everything else."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.levelno == logging.INFO:
            return message
        return f"{record.levelname} - {message}"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get the application logger, or one of its children.

    Args:
        name: Optional child name, e.g. "forecast".

    Returns:
        The runway logger instance.
    """
    logger = logging.getLogger(LOGGER_NAME)
    return logger.getChild(name) if name else logger
