"""
Logging configuration for production use.

Provides categorized logging with file and console output. Every line is
tagged with the category it belongs to:

- PING: one line per probe result (``autoping.ping`` logger)
- OUTAGE: outage and latency lifecycle lines (``autoping.outage`` logger)
- ERROR: anything logged at ERROR or above
- TRACE: DEBUG records, i.e. every intermediate decision of the state machine
- INFO: everything else
"""

import logging
import logging.handlers
from typing import Optional

from .config import Config, config as default_config

PING_LOGGER = "autoping.ping"
OUTAGE_LOGGER = "autoping.outage"

_CATEGORY_BY_SUFFIX = {
    "ping": "PING",
    "outage": "OUTAGE",
}


class CategoryFormatter(logging.Formatter):
    """
    Formatter that injects a ``category`` attribute derived from the logger
    name and level before formatting.
    """

    def format(self, record: logging.LogRecord) -> str:
        record.category = self.category_for(record)
        return super().format(record)

    @staticmethod
    def category_for(record: logging.LogRecord) -> str:
        if record.levelno >= logging.ERROR:
            return "ERROR"
        suffix = record.name.rsplit(".", 1)[-1]
        if suffix in _CATEGORY_BY_SUFFIX:
            return _CATEGORY_BY_SUFFIX[suffix]
        if record.levelno <= logging.DEBUG:
            return "TRACE"
        return "INFO"


def setup_logging(
    logger_name: str = "autoping",
    cfg: Optional[Config] = None,
    console: bool = True,
) -> logging.Logger:
    """
    Configure and return the application logger.

    Args:
        logger_name: Name of the logger (children inherit its handlers)
        cfg: Configuration to read levels and paths from (defaults to global config)
        console: Also log to stderr

    Returns:
        Configured logger instance

    Raises:
        OSError: If the log file cannot be opened
    """
    cfg = cfg or default_config
    logger = logging.getLogger(logger_name)

    # Don't add handlers if logger already configured
    if logger.handlers:
        return logger

    level = logging.DEBUG if cfg.trace else cfg.log_level
    logger.setLevel(level)
    logger.propagate = False

    formatter = CategoryFormatter(
        fmt="%(asctime)s - %(category)s - %(message)s",
        datefmt="%Y/%m/%d %H:%M:%S",
    )

    cfg.logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = cfg.logs_dir / cfg.log_file
    file_handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger
