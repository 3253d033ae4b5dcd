"""Unit tests for the request log sink"""

import json
import logging
from datetime import datetime

import pytest
from credit_registry.infrastructure.observability.logging import (
    LogEntry,
    RequestLogger,
    format_summary,
    status_color,
)


def test_to_dict_omits_empty_optional_fields():
    entry = LogEntry(method="GET", path="/health", timestamp=datetime(2024, 5, 1, 9, 30), status_code=200)
    assert entry.to_dict() == {
        "method": "GET",
        "path": "/health",
        "timestamp": "2024-05-01T09:30:00",
        "status_code": 200,
        "response_time_ms": 0,
    }


@pytest.mark.parametrize(
    "status_code, color",
    [(200, "\033[32m"), (301, "\033[33m"), (404, "\033[31m"), (503, "\033[35m"), (0, "\033[37m"), (101, "\033[37m")],
)
def test_status_color(status_code, color):
    assert status_color(status_code) == color


def test_format_summary():
    entry = LogEntry(
        method="POST", path="/api/banks", timestamp=datetime(2024, 5, 1, 9, 30, 5), status_code=201, response_time_ms=7
    )
    assert format_summary(entry) == "2024-05-01 09:30:05 [POST] /api/banks \033[32m201\033[0m (7ms)"


def test_unopened_logger_is_noop(tmp_path):
    request_logger = RequestLogger(tmp_path / "logs")
    request_logger.log_request(LogEntry(method="GET", path="/"))
    request_logger.log_error("GET", "/", "ignored")
    assert not request_logger.is_open
    assert not (tmp_path / "logs").exists()


def test_writes_one_json_line_per_entry_to_daily_file(tmp_path):
    with RequestLogger(tmp_path, console=False) as request_logger:
        request_logger.log_request(LogEntry(method="GET", path="/a", status_code=200, response_size=12))
        request_logger.log_request(LogEntry(method="DELETE", path="/b", status_code=404))
        path = request_logger.path

    assert path.name == f"api_{datetime.now():%Y-%m-%d}.log"
    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    first, second = (json.loads(line) for line in lines)
    assert first["path"] == "/a"
    assert first["response_size"] == 12
    assert second["status_code"] == 404
    assert "response_size" not in second


def test_appends_across_reopen(tmp_path):
    with RequestLogger(tmp_path, console=False) as request_logger:
        request_logger.log_request(LogEntry(method="GET", path="/first"))
    with RequestLogger(tmp_path, console=False) as request_logger:
        request_logger.log_request(LogEntry(method="GET", path="/second"))

    assert len(request_logger.path.read_text(encoding="utf-8").splitlines()) == 2


def test_log_error_carries_only_error(tmp_path):
    with RequestLogger(tmp_path, console=False) as request_logger:
        request_logger.log_error("PUT", "/api/banks/1", "Failed to update bank: boom")
        line = json.loads(request_logger.path.read_text(encoding="utf-8"))

    assert line["error"] == "Failed to update bank: boom"
    assert line["method"] == "PUT"
    assert line["status_code"] == 0
    assert "request_body" not in line


def test_console_echo(tmp_path, capsys):
    with RequestLogger(tmp_path) as request_logger:
        request_logger.log_request(LogEntry(method="GET", path="/api/items", status_code=500))

    out = capsys.readouterr().out
    assert "[GET] /api/items" in out
    assert "\033[35m500" in out


def test_close_on_exception(tmp_path):
    request_logger = RequestLogger(tmp_path, console=False)
    with pytest.raises(RuntimeError):
        with request_logger:
            raise RuntimeError("schema bootstrap failed")
    assert not request_logger.is_open
    request_logger.log_request(LogEntry(method="GET", path="/"))  # no-op after close


def test_reopening_does_not_grow_logger_registry(tmp_path):
    known = set(logging.Logger.manager.loggerDict)
    for _ in range(5):
        with RequestLogger(tmp_path, console=False) as request_logger:
            request_logger.log_request(LogEntry(method="GET", path="/"))

    assert set(logging.Logger.manager.loggerDict) - known <= {"credit_registry.infrastructure.observability.logging"}
    assert len(request_logger.path.read_text(encoding="utf-8").splitlines()) == 5
