"""
Logging setup (structlog on top of the standard logging module)
"""

import logging
import os
from pathlib import Path
from typing import Optional

import structlog


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configure structlog and the root logger.

    Console output belongs to the interactive menu, so log records go to a
    file when one is given and are otherwise discarded. Calling this again
    with the same file does not add a second handler.

    Args:
        level: log level name (DEBUG, INFO, WARNING, ...)
        log_file: path of the log file (None disables the file handler)
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")

    root = logging.getLogger()
    root.setLevel(numeric_level)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        if not any(
            isinstance(h, logging.FileHandler) and h.baseFilename == os.path.abspath(path)
            for h in root.handlers
        ):
            handler = logging.FileHandler(path, encoding="utf-8")
            handler.setFormatter(logging.Formatter("%(message)s"))
            root.addHandler(handler)
    elif not any(isinstance(h, logging.NullHandler) for h in root.handlers):
        # keeps the last-resort stderr handler out of the menu
        root.addHandler(logging.NullHandler())

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None):
    """Return a structlog logger bound to the given module name"""
    return structlog.get_logger(name)
