# app/utils/logger.py
"""
Logging setup shared by the whole app.
Modules call ``get_logger(__name__)``; ``configure_logging`` is run once by
``create_app`` with the configured level.
"""

import logging
import sys

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_initialized = False


def configure_logging(level: str = "INFO") -> None:
    """Attach a stdout handler to the ``app`` logger (only once)."""
    global _initialized
    root = logging.getLogger("app")
    root.setLevel(level.upper())
    if _initialized:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
    root.addHandler(handler)
    _initialized = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
