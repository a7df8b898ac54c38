"""Logging configuration for the yaus URL shortener."""

import json
import logging
import sys
from typing import Optional, TextIO

# Attributes passed through ``extra=`` that the JSON formatter emits
EXTRA_FIELDS = ("locator", "long_url", "status", "method", "path", "status_code", "duration_ms")


class JsonFormatter(logging.Formatter):
    """One JSON object per line, with selected ``extra`` attributes."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in EXTRA_FIELDS:
            if hasattr(record, field):
                payload[field] = getattr(record, field)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Configure the ``yaus`` logger.

    Handlers installed by a previous call are replaced, so calling this again
    (the server at startup, the CLI per invocation) never duplicates output.

    Args:
        level: Logging level name; unknown names fall back to INFO
        log_file: Optional log file path, written in addition to the stream
        json_format: Emit JSON lines instead of plain text
        stream: Console stream (default stdout)

    Returns:
        Configured logger
    """
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logger = logging.getLogger("yaus")
    logger.setLevel(numeric_level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if json_format:
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handlers = [logging.StreamHandler(stream or sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(name: str = "yaus") -> logging.Logger:
    """Get a logger below the ``yaus`` hierarchy."""
    return logging.getLogger(name)
