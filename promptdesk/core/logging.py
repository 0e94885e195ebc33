"""
Logging setup for the PromptDesk API.

Every record goes to two rotating files under the log directory: one JSON
object per line (``promptdesk.jsonl``) for tooling, and an indented text
log (``promptdesk.log``) for reading. Request id and operation name are
carried in context variables so any record emitted while handling a
request can be tied back to it.
"""

import functools
import inspect
import json
import logging
import logging.handlers
import sys
import time
import traceback
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

_request_id: ContextVar[Optional[str]] = ContextVar("promptdesk_request_id", default=None)
_operation: ContextVar[Optional[str]] = ContextVar("promptdesk_operation", default=None)

JSON_LOG_NAME = "promptdesk.jsonl"
TEXT_LOG_NAME = "promptdesk.log"
LOG_RETENTION_DAYS = 14

# Handlers owned by setup_logging; replaced on every call
_handlers: List[logging.Handler] = []


def _record_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Fields shared by both formatters, empty ones left out."""
    fields: Dict[str, Any] = {
        "request_id": _request_id.get(),
        "operation": _operation.get(),
        "event": getattr(record, "event", None),
        "context": getattr(record, "context", None),
    }
    return {key: value for key, value in fields.items() if value}


class StructuredJSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "where": f"{getattr(record, 'origin_function', None) or record.funcName}:{record.lineno}",
            "message": record.getMessage(),
        }
        entry.update(_record_fields(record))

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, exc_tb = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": traceback.format_exception(exc_type, exc_value, exc_tb),
            }

        return json.dumps(entry, ensure_ascii=False, default=str)


class HumanReadableFormatter(logging.Formatter):
    """A header line, then one indented ``key: value`` line per extra field."""

    max_value_length = 500

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        lines = [f"{stamp} {record.levelname:<8} {record.name}: {record.getMessage()}"]

        for key, value in _record_fields(record).items():
            if key == "context" and isinstance(value, dict):
                lines.extend(self._context_lines(value))
            else:
                lines.append(f"    {key}: {value}")

        if record.exc_info and record.exc_info[0] is not None:
            formatted = "".join(traceback.format_exception(*record.exc_info)).rstrip()
            lines.extend(f"    | {line}" for line in formatted.splitlines())

        return "\n".join(lines)

    def _context_lines(self, context: Dict[str, Any]) -> List[str]:
        lines = []
        for key, value in context.items():
            text = json.dumps(value, ensure_ascii=False, default=str) if isinstance(value, (dict, list)) else str(value)
            if len(text) > self.max_value_length:
                text = text[:self.max_value_length] + "..."
            lines.append(f"    {key}: {text}")
        return lines


def _rotating_handler(path: Path, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.handlers.TimedRotatingFileHandler(
        filename=str(path),
        when="midnight",
        backupCount=LOG_RETENTION_DAYS,
        encoding="utf-8",
    )
    handler.setFormatter(formatter)
    return handler


def setup_logging(log_level: str = "INFO", log_dir: Optional[Path] = None, console: bool = False) -> None:
    """
    Install the PromptDesk handlers on the root logger.

    Calling this again (for example once per test app) swaps the previous
    handlers out instead of stacking new ones.

    Args:
        log_level: Level name applied to the root logger and the handlers
        log_dir: Where the log files go (``./logs`` if omitted)
        console: Also write the text format to stderr
    """
    log_dir = Path(log_dir or "logs")
    log_dir.mkdir(parents=True, exist_ok=True)
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)
    while _handlers:
        handler = _handlers.pop()
        root.removeHandler(handler)
        handler.close()

    handlers = [
        _rotating_handler(log_dir / JSON_LOG_NAME, StructuredJSONFormatter()),
        _rotating_handler(log_dir / TEXT_LOG_NAME, HumanReadableFormatter()),
    ]
    if console:
        stream = logging.StreamHandler(sys.stderr)
        stream.setFormatter(HumanReadableFormatter())
        handlers.append(stream)

    for handler in handlers:
        handler.setLevel(level)
        root.addHandler(handler)
        _handlers.append(handler)

    log_event(
        level="INFO",
        logger=__name__,
        function="setup_logging",
        event="logging_ready",
        message=f"Logging to {log_dir} at {log_level.upper()}",
        context={"console": console},
    )


def set_request_id(request_id: Optional[str]) -> None:
    _request_id.set(request_id)


def generate_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


def log_event(
    level: str,
    logger: str,
    function: str,
    operation: Optional[str] = None,
    event: Optional[str] = None,
    message: str = "",
    context: Optional[Dict[str, Any]] = None,
    exc_info: Optional[BaseException] = None,
) -> None:
    """
    Emit one structured record on ``logger``.

    ``operation`` applies to this record only; the surrounding operation (if
    any) is restored afterwards.
    """
    target = logging.getLogger(logger)
    emit = getattr(target, level.lower(), target.info)
    extra = {"event": event, "context": context or None, "origin_function": function}

    token = _operation.set(operation) if operation else None
    try:
        emit(message, extra=extra, exc_info=exc_info)
    finally:
        if token is not None:
            _operation.reset(token)


def operation_logger(operation_name: str):
    """
    Decorator that records how a service operation ended.

    Completion is logged at INFO with its duration. Errors carrying a status
    code below 500 (not found, conflict, bad input) are logged as a WARNING
    ``operation_rejected``; anything else as an ERROR ``operation_error`` with
    the traceback. The exception is always re-raised.

    Usage:
        @operation_logger("prompt_create")
        async def create(self, data):
            ...
    """
    def decorator(func):
        logger_name = func.__module__
        function_name = func.__qualname__

        def _finished(started: float, error: Optional[BaseException] = None) -> None:
            elapsed = round(time.perf_counter() - started, 4)
            if error is None:
                log_event("INFO", logger_name, function_name, operation_name, "operation_complete",
                          f"{operation_name} completed", {"duration_seconds": elapsed})
            elif getattr(error, "status_code", 500) < 500:
                log_event("WARNING", logger_name, function_name, operation_name, "operation_rejected",
                          f"{operation_name} rejected: {error}")
            else:
                log_event("ERROR", logger_name, function_name, operation_name, "operation_error",
                          f"{operation_name} failed: {error}",
                          {"duration_seconds": elapsed, "error_type": type(error).__name__},
                          exc_info=error)

        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                started = time.perf_counter()
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    _finished(started, e)
                    raise
                _finished(started)
                return result

            return async_wrapper

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                _finished(started, e)
                raise
            _finished(started)
            return result

        return wrapper
    return decorator
