"""
Console logging for workflow_model.

Usage:
    from workflow_model.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Message here")
"""

import logging
import sys

from workflow_model.config import config

# Global cache of loggers
_loggers = {}


class ColoredFormatter(logging.Formatter):
    """Formatter that adds colors to console output"""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
        'RESET': '\033[0m'       # Reset
    }

    def format(self, record):
        levelname = record.levelname
        if levelname in self.COLORS:
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.COLORS['RESET']}"
        return super().format(record)


def get_logger(name: str, level: int | str | None = None) -> logging.Logger:
    """
    Get a logger that writes colored lines to stdout.

    Args:
        name: Logger name (typically __name__)
        level: Logging level (defaults to config.log_level)

    Returns:
        Configured logger instance
    """
    if name in _loggers:
        return _loggers[name]

    resolved_level = level if level is not None else config.log_level

    logger = logging.getLogger(name)
    logger.setLevel(resolved_level)
    logger.propagate = config.log_propagate

    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(resolved_level)
    console_handler.setFormatter(
        ColoredFormatter(
            fmt='%(asctime)s | %(name)s | %(levelname)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
    )
    logger.addHandler(console_handler)

    _loggers[name] = logger
    return logger
