"""Structured logging configuration for the support console."""

import json
import logging
import logging.config
import logging.handlers
import os
from datetime import datetime, timezone
from pathlib import Path

from .config import DEFAULT_LOG_PATH

# Record attributes copied into the JSON line when passed through `extra=`.
# "event" carries the push-channel event kind, "conversation_id" the room.
CONTEXT_KEYS = ("event", "conversation_id")

LOG_MAX_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5


class JSONFormatter(logging.Formatter):
    """One JSON object per line, with console context when present."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key in CONTEXT_KEYS:
            value = getattr(record, key, None)
            if value is not None:
                log_data[key] = value

        return json.dumps(log_data, default=str)


def build_logging_config(log_level: str, log_file: str, console: bool = True) -> dict:
    """dictConfig for a rotating JSON file, optionally mirrored to stdout."""
    handlers = {
        "file": {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": log_file,
            "maxBytes": LOG_MAX_BYTES,
            "backupCount": LOG_BACKUP_COUNT,
            "formatter": "json",
            "encoding": "utf-8",
        },
    }
    if console:
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "formatter": "json",
            "stream": "ext://sys.stdout",
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {"()": "support_console.logging_config.JSONFormatter"},
        },
        "handlers": handlers,
        "root": {
            "level": log_level.upper(),
            "handlers": list(handlers),
        },
    }


def setup_logging(
    log_level: str | None = None,
    log_file: str | None = None,
    console: bool | None = None,
) -> None:
    """
    Setup structured logging for the console.

    Args:
        log_level: Log level name. Defaults to LOG_LEVEL env var or INFO.
        log_file: Path to log file. Defaults to LOG_FILE env var or logs/console.log.
        console: Also log to stdout. Defaults to LOG_CONSOLE env var ("0" disables).
    """
    if log_level is None:
        log_level = os.getenv("LOG_LEVEL", "INFO")

    if log_file is None:
        log_file = os.getenv("LOG_FILE", str(DEFAULT_LOG_PATH))

    if console is None:
        console = os.getenv("LOG_CONSOLE", "1") != "0"

    Path(log_file).parent.mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(build_logging_config(log_level, log_file, console))


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
