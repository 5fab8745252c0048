"""
Structured logging utilities for application and worker logging
"""

import json
import logging
import sys
from datetime import datetime
from typing import Any, Dict

ROOT_LOGGER_NAME = "medreminder"
TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class StructuredLogger:
    """
    Structured logger that attaches key/value fields to every record
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def log(self, level: int, message: str, **kwargs):
        """Log with structured data"""
        if kwargs:
            # Text handlers only see the message, so append the fields there as well
            rendered = " ".join(f"{k}={v}" for k, v in kwargs.items())
            message = f"{message} | {rendered}"
        self.logger.log(level, message, extra={"extra_data": kwargs})

    def info(self, message: str, **kwargs):
        """Log info level"""
        self.log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning level"""
        self.log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs):
        """Log error level"""
        self.log(logging.ERROR, message, **kwargs)

    def debug(self, message: str, **kwargs):
        """Log debug level"""
        self.log(logging.DEBUG, message, **kwargs)


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: Dict[str, Any] = {
            "timestamp": datetime.utcnow().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Add exception info if present
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        # Add extra fields if present
        if hasattr(record, "extra_data"):
            log_obj.update(record.extra_data)

        return json.dumps(log_obj, default=str)


def configure_logging(level: str = "INFO", fmt: str = "text") -> logging.Logger:
    """Install a single stdout handler on the application root logger."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stdout)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    logger.handlers = [handler]
    logger.propagate = False
    return logger


def get_logger(name: str) -> StructuredLogger:
    """Get or create a structured logger"""
    return StructuredLogger(name)
