"""
Logging for the report service.

Two outputs: a readable console line and a JSON file line. Every record is
stamped with the id of the HTTP request being served (bound by the request
middleware), so an upload's decode, normalize and insert steps can be
followed through the file log. Upload outcomes go to the "adreport.audit"
logger as `AuditEvent`s; read-path and ingestion timings go to
"adreport.performance".
"""
import enum
import json
import logging
import logging.config
import sys
import time
from contextlib import contextmanager
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

APP_LOGGER = "adreport"
_MANAGED_LOGGERS = (APP_LOGGER, "uvicorn", "sqlalchemy.engine")

_request_id: ContextVar[Optional[str]] = ContextVar("adreport_request_id", default=None)


class AuditEvent(str, enum.Enum):
    REPORT_UPLOADED = "report_uploaded"
    REPORT_UPLOAD_ROLLED_BACK = "report_upload_rolled_back"


def bind_request_id(request_id: Optional[str]) -> Token:
    return _request_id.set(request_id)


def reset_request_id(token: Token) -> None:
    _request_id.reset(token)


def current_request_id() -> Optional[str]:
    return _request_id.get()


class RequestIdFilter(logging.Filter):
    """Copies the bound request id onto each record ('-' outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "request_id", None):
            record.request_id = current_request_id() or "-"
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line; structured context is merged in at top level."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None) or current_request_id(),
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
        }
        context = getattr(record, "context", None)
        if context:
            entry.update(context)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        # dates, Decimals and enums in the context are rendered with str()
        return json.dumps(entry, ensure_ascii=False, default=str)


class StructuredLogger:
    """Keyword arguments become structured context; None values are dropped."""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def _log(self, level: int, message: str, exc_info: bool = False, **context: Any) -> None:
        if not self.logger.isEnabledFor(level):
            return
        kept = {k: v for k, v in context.items() if v is not None}
        self.logger.log(level, message, exc_info=exc_info, extra={"context": kept})

    def debug(self, message: str, **context: Any) -> None:
        self._log(logging.DEBUG, message, **context)

    def info(self, message: str, **context: Any) -> None:
        self._log(logging.INFO, message, **context)

    def warning(self, message: str, **context: Any) -> None:
        self._log(logging.WARNING, message, **context)

    def error(self, message: str, **context: Any) -> None:
        self._log(logging.ERROR, message, **context)


def _handler_config(
    log_level: str, log_file: Optional[str], enable_console: bool
) -> Dict[str, Dict[str, Any]]:
    handlers: Dict[str, Dict[str, Any]] = {}
    if enable_console:
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "stream": sys.stdout,
            "formatter": "console",
            "filters": ["request_id"],
            "level": log_level,
        }
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": log_file,
            "maxBytes": 10 * 1024 * 1024,
            "backupCount": 5,
            "encoding": "utf-8",
            "formatter": "json",
            "filters": ["request_id"],
            "level": log_level,
        }
    return handlers


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    enable_console: bool = True
) -> None:
    """
    Configure the console and file handlers.

    Args:
        log_level: Level for the application loggers and the root logger
        log_file: JSON log path; parent directories are created. None disables it
        enable_console: Whether to log human-readable lines to stdout
    """
    handlers = _handler_config(log_level, log_file, enable_console)
    names = list(handlers)
    levels = {APP_LOGGER: log_level, "uvicorn": "INFO", "sqlalchemy.engine": "WARNING"}

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {"request_id": {"()": RequestIdFilter}},
        "formatters": {
            "json": {"()": JSONFormatter},
            "console": {
                "format": "%(asctime)s %(levelname)-7s [%(request_id)s] %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": handlers,
        "loggers": {
            name: {"level": levels[name], "handlers": names, "propagate": False}
            for name in _MANAGED_LOGGERS
        },
        "root": {"level": log_level, "handlers": names},
    })


def get_logger(name: str) -> StructuredLogger:
    """Logger under the "adreport" namespace (`__name__` of app modules already is)."""
    if name == APP_LOGGER or name.startswith(APP_LOGGER + "."):
        return StructuredLogger(name)
    return StructuredLogger(f"{APP_LOGGER}.{name}")


def log_business_event(
    event: AuditEvent,
    details: Dict[str, Any],
    user_id: Optional[int] = None,
    request_id: Optional[str] = None
) -> None:
    """Audit line for an upload outcome; the request id defaults to the bound one."""
    event_type = AuditEvent(event).value
    get_logger("audit").info(
        f"Business event: {event_type}",
        event_type=event_type,
        user_id=user_id,
        request_id=request_id or current_request_id(),
        **details
    )


def log_performance(
    operation: str,
    duration_ms: float,
    additional_data: Optional[Dict[str, Any]] = None
) -> None:
    data = {"duration_ms": round(duration_ms, 2)}
    if additional_data:
        data.update(additional_data)
    get_logger("performance").info(f"Performance: {operation}", operation=operation, **data)


@contextmanager
def timed(operation: str, **context: Any) -> Iterator[Dict[str, Any]]:
    """
    Log the duration of the block via `log_performance`.

    The yielded dict is logged with the timing, so the block can add values it
    only learns while running (row counts, for example). Nothing is logged when
    the block raises.
    """
    data: Dict[str, Any] = dict(context)
    start = time.perf_counter()
    yield data
    log_performance(operation, (time.perf_counter() - start) * 1000, data)
