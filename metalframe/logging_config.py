"""
MetalFrame logging.

Every logger writes one record per line to stderr, either as JSON (servers,
log shippers) or as short readable text (the admin CLI). Context is passed
as keyword arguments and lands as top-level keys in the JSON record.
"""
import json
import logging
import os
import sys
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional

LOG_LEVEL = os.environ.get("METALFRAME_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.environ.get("METALFRAME_LOG_FORMAT", "json")  # json or text


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(getattr(record, "context", {}))
        return json.dumps(entry, default=str, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """``HH:MM:SS LEVEL message (key=value ...)``, coloured on a terminal."""

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
    }
    RESET = "\033[0m"

    def __init__(self, color: bool = False):
        super().__init__()
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname
        if self.color and level in self.LEVEL_COLORS:
            level = f"{self.LEVEL_COLORS[level]}{level}{self.RESET}"

        line = f"{datetime.now(timezone.utc):%H:%M:%S} {level} {record.getMessage()}"
        context = getattr(record, "context", {})
        shown = " ".join(f"{k}={v}" for k, v in context.items() if k != "traceback")
        if shown:
            line = f"{line} ({shown})"
        return line


def _build_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    if LOG_FORMAT == "text":
        handler.setFormatter(TextFormatter(color=sys.stderr.isatty()))
    else:
        handler.setFormatter(StructuredFormatter())
    return handler


class StructuredLogger:
    """Thin wrapper over ``logging`` that takes context as keyword arguments.

    ``bind`` returns a logger sharing the same handler with extra context
    attached to every record, e.g. the API base URL a sync client talks to.
    """

    def __init__(self, name: str, context: Optional[Dict[str, Any]] = None):
        self.name = name
        self.context = dict(context or {})
        self.logger = logging.getLogger(name)
        if not self.logger.handlers:
            self.logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
            self.logger.addHandler(_build_handler())
            self.logger.propagate = False

    def bind(self, **context) -> "StructuredLogger":
        return StructuredLogger(self.name, {**self.context, **context})

    def _log(self, level: int, message: str, context: Dict[str, Any]):
        if self.logger.isEnabledFor(level):
            self.logger.log(level, message, extra={"context": {**self.context, **context}})

    def debug(self, message: str, **context):
        self._log(logging.DEBUG, message, context)

    def info(self, message: str, **context):
        self._log(logging.INFO, message, context)

    def warning(self, message: str, **context):
        self._log(logging.WARNING, message, context)

    def error(self, message: str, error: Optional[Exception] = None, **context):
        if error is not None:
            context["error_type"] = type(error).__name__
            context["error_message"] = str(error)
            if error.__traceback__ is not None:
                context["traceback"] = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        self._log(logging.ERROR, message, context)


api_logger = StructuredLogger("metalframe.api")
db_logger = StructuredLogger("metalframe.db")
media_logger = StructuredLogger("metalframe.media")
sync_logger = StructuredLogger("metalframe.sync")


def get_logger(name: str) -> StructuredLogger:
    return StructuredLogger(f"metalframe.{name}")
