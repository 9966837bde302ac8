"""
Logging setup shared by every module.

``get_logger`` hands out module loggers that write to the console and, when
``SCHOOL_RESULTS_LOG_FILE`` is set, to a rotating log file.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from schoolresults.config.settings import settings

_FMT = "%(asctime)s | %(levelname)-8s | %(name)-30s | %(message)s"
_DATE_FMT = "%Y-%m-%d %H:%M:%S"
_MAX_BYTES = 5 * 1024 * 1024
_BACKUP_COUNT = 3

_formatter = logging.Formatter(_FMT, datefmt=_DATE_FMT)

_console_handler = logging.StreamHandler(sys.stderr)
_console_handler.setFormatter(_formatter)
_console_handler.setLevel(getattr(logging, settings.log_level, logging.INFO))

_handlers: list[logging.Handler] = [_console_handler]

if settings.log_file:
    Path(settings.log_file).parent.mkdir(parents=True, exist_ok=True)
    _file_handler = RotatingFileHandler(
        settings.log_file, maxBytes=_MAX_BYTES, backupCount=_BACKUP_COUNT, encoding="utf-8"
    )
    _file_handler.setFormatter(_formatter)
    _file_handler.setLevel(logging.DEBUG)
    _handlers.append(_file_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Return the logger for *name* (normally ``__name__``), attaching the shared
    handlers the first time it is requested.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.setLevel(logging.DEBUG)
        for handler in _handlers:
            logger.addHandler(handler)
        logger.propagate = False
    return logger
