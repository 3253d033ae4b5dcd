"""Structured JSON logging: application diagnostics plus the per-request access log"""

import logging
import sys
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from credit_registry.config import settings

ACCESS_LOGGER_NAME = "credit_registry.access"


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.utcnow().isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


# Fields dropped from the serialized line when empty
_OPTIONAL_FIELDS = ("user_agent", "remote_addr", "request_id", "error", "request_body", "response_size")


@dataclass
class LogEntry:
    """One completed request/response cycle"""

    method: str
    path: str
    timestamp: datetime = field(default_factory=datetime.now)
    status_code: int = 0
    response_time_ms: int = 0
    user_agent: str = ""
    remote_addr: str = ""
    request_id: str = ""
    error: str = ""
    request_body: str = ""
    response_size: int = 0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        for name in _OPTIONAL_FIELDS:
            if not data[name]:
                del data[name]
        return data


class LogEntryJsonFormatter(jsonlogger.JsonFormatter):
    """Serialize the attached LogEntry and nothing else, one object per line"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        log_record.update(record.log_entry.to_dict())


class _Colors:
    """ANSI escape codes for terminal colors."""

    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    MAGENTA = "\033[35m"
    WHITE = "\033[37m"


def status_color(status_code: int) -> str:
    if 200 <= status_code < 300:
        return _Colors.GREEN
    if 300 <= status_code < 400:
        return _Colors.YELLOW
    if 400 <= status_code < 500:
        return _Colors.RED
    if status_code >= 500:
        return _Colors.MAGENTA
    return _Colors.WHITE


def format_summary(entry: LogEntry) -> str:
    """Human-readable one-liner: time, method, path, colored status, duration"""
    return (
        f"{entry.timestamp:%Y-%m-%d %H:%M:%S} [{entry.method}] {entry.path} "
        f"{status_color(entry.status_code)}{entry.status_code}{_Colors.RESET} "
        f"({entry.response_time_ms}ms)"
    )


class ColoredSummaryFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        return format_summary(record.log_entry)


class RequestLogger:
    """
    Append-only request log: one JSON line per entry in logs/api_YYYY-MM-DD.log,
    echoed to the console as a colored summary.

    Construct once at startup and scope it with ``with``; every call is a
    no-op until ``open()`` has run and after ``close()``.
    """

    def __init__(self, log_dir: str | Path = "logs", console: bool = True):
        self.log_dir = Path(log_dir)
        self.console = console
        self.path: Optional[Path] = None
        self._logger: Optional[logging.Logger] = None

    @property
    def is_open(self) -> bool:
        return self._logger is not None

    def open(self) -> "RequestLogger":
        if self.is_open:
            return self
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.path = self.log_dir / f"api_{datetime.now():%Y-%m-%d}.log"

        file_handler = logging.FileHandler(self.path, mode="a", encoding="utf-8")
        file_handler.setFormatter(LogEntryJsonFormatter())

        # Unregistered, so the logging manager never retains it after close
        access_logger = logging.Logger(ACCESS_LOGGER_NAME)
        access_logger.setLevel(logging.INFO)
        access_logger.propagate = False
        access_logger.addHandler(file_handler)
        if self.console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(ColoredSummaryFormatter())
            access_logger.addHandler(console_handler)

        self._logger = access_logger
        logging.getLogger(__name__).info("API logging initialized", extra={"log_file": str(self.path)})
        return self

    def close(self) -> None:
        if self._logger is None:
            return
        for handler in list(self._logger.handlers):
            self._logger.removeHandler(handler)
            handler.close()
        self._logger = None

    def __enter__(self) -> "RequestLogger":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def log_request(self, entry: LogEntry) -> None:
        if self._logger is None:
            return
        self._logger.info(entry.path, extra={"log_entry": entry})

    def log_error(self, method: str, path: str, message: str) -> None:
        """Record an in-handler error, separate from the middleware's per-request entry"""
        self.log_request(LogEntry(method=method, path=path, error=message))
