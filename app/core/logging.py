"""
Structured logging for the sales API.
Loggers accept keyword fields which the formatter renders as ``key=value``.
"""

import logging
import sys
from typing import Optional

from app.core.config import settings

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys()
) | {"message", "asctime", "timestamp"}


class StructuredLogger:
    """Thin wrapper that forwards keyword fields as ``extra``."""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def debug(self, message: str, **fields):
        self.logger.debug(message, extra=fields)

    def info(self, message: str, **fields):
        self.logger.info(message, extra=fields)

    def warning(self, message: str, **fields):
        self.logger.warning(message, extra=fields)

    def error(self, message: str, exc: Optional[BaseException] = None, **fields):
        """Log an error, attaching the traceback of ``exc`` when given."""
        self.logger.error(message, exc_info=exc, extra=fields)


class StructuredFormatter(logging.Formatter):
    """Render ``[time] LEVEL name: message | k=v | k=v``."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = self.formatTime(record, self.default_time_format)
        line = f"[{timestamp}] {record.levelname} {record.name}: {record.getMessage()}"

        extra_fields = [
            f"{key}={value}"
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS
        ]
        if extra_fields:
            line = f"{line} | {' | '.join(extra_fields)}"

        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def configure_logging(
    level: str = "INFO",
    format_type: str = "structured",
    enable_console: bool = True,
    enable_file: bool = False,
    log_file: Optional[str] = None,
) -> None:
    """
    Configure the root logger.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        format_type: 'structured' or 'simple'
        enable_console: log to stdout
        enable_file: also log to ``log_file``
        log_file: path used when enable_file=True
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root_logger.setLevel(numeric_level)

    if format_type == "structured":
        formatter: logging.Formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if enable_file and log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # noisy libraries
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)


def get_logger(name: str) -> StructuredLogger:
    return StructuredLogger(name)


app_logger = get_logger("app")
auth_logger = get_logger("auth")
db_logger = get_logger("db")
api_logger = get_logger("api")
import_logger = get_logger("importer")


def init_app_logging():
    """Initialize logging from settings."""
    log_config = {
        "level": settings.LOG_LEVEL,
        "format_type": settings.LOG_FORMAT,
        "enable_console": True,
        "enable_file": settings.LOG_TO_FILE,
        "log_file": settings.LOG_FILE_PATH,
    }

    configure_logging(**log_config)
    app_logger.info("Application logging initialized", level=settings.LOG_LEVEL)
