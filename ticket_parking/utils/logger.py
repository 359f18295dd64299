# ticket_parking/utils/logger.py
"""
Centralised logging configuration for the ticket service.
Logs to console and, unless LOG_DIR is blank, to a rotating file.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from ticket_parking.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def _file_handler(level: str, formatter: logging.Formatter):
    os.makedirs(settings.LOG_DIR, exist_ok=True)
    # Keeps last 5 × 2MB log files
    handler = RotatingFileHandler(
        filename=os.path.join(settings.LOG_DIR, "tickets.log"),
        maxBytes=2 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _configure_root_logger():
    global _configured
    if _configured:
        return
    _configured = True

    level = settings.LOG_LEVEL.upper()
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(console)
    if settings.LOG_DIR:
        root.addHandler(_file_handler(level, formatter))

    # SQL echo stays off unless explicitly asked for
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a named logger. Call this at the top of every module."""
    _configure_root_logger()
    return logging.getLogger(name)
