"""Request logging middleware: one structured entry per request"""

import json

from fastapi.testclient import TestClient

from credit_registry.api.main import create_app
from credit_registry.infrastructure.observability.logging import RequestLogger
from credit_registry.utils.log_reader import read_log_entries


def _request_entries(request_logger: RequestLogger):
    """Entries written by the middleware, leaving out in-handler error annotations"""
    return [e for e in read_log_entries(request_logger.path) if e.status_code]


def test_one_entry_per_request(logged_client: TestClient, request_logger: RequestLogger):
    logged_client.get("/health")
    logged_client.get("/api/items/abc")
    logged_client.get("/api/items/424242")

    entries = _request_entries(request_logger)
    assert [(e.method, e.path, e.status_code) for e in entries] == [
        ("GET", "/health", 200),
        ("GET", "/api/items/abc", 400),
        ("GET", "/api/items/424242", 404),
    ]


def test_entry_captures_request_metadata(logged_client: TestClient, request_logger: RequestLogger):
    body = {"name": "Test Bank", "type": "PRIVATE"}
    response = logged_client.post(
        "/api/banks",
        json=body,
        headers={"User-Agent": "pytest-agent", "X-Request-ID": "req-123"},
    )
    assert response.status_code == 201
    assert response.headers["X-Request-ID"] == "req-123"

    [entry] = _request_entries(request_logger)
    assert entry.status_code == 201
    assert entry.user_agent == "pytest-agent"
    assert entry.request_id == "req-123"
    assert entry.remote_addr.startswith("testclient")
    assert json.loads(entry.request_body) == body
    assert entry.response_size == len(response.content)
    assert entry.response_time_ms >= 0


def test_large_body_is_not_captured_but_still_handled(logged_client: TestClient, request_logger: RequestLogger):
    response = logged_client.post("/api/items", json={"name": "big", "description": "x" * 20000})
    assert response.status_code == 201
    assert len(response.json()["description"]) == 20000

    [entry] = _request_entries(request_logger)
    assert entry.request_body == ""


def test_get_without_body_has_no_request_body(logged_client: TestClient, request_logger: RequestLogger):
    logged_client.get("/api/banks")

    with open(request_logger.path, encoding="utf-8") as f:
        line = json.loads(f.readline())
    assert "request_body" not in line
    assert line["status_code"] == 200
    assert set(line) >= {"timestamp", "method", "path", "status_code", "response_time_ms"}


def test_store_failure_adds_error_annotation(logged_client: TestClient, request_logger: RequestLogger):
    payload = {"full_name": "A", "email": "a@example.com", "birth_date": "1980-01-01", "country": "ES"}
    logged_client.post("/api/clients", json=payload)
    response = logged_client.post("/api/clients", json=payload)
    assert response.status_code == 500
    assert "UNIQUE" not in response.text

    annotations = [e for e in read_log_entries(request_logger.path) if e.error]
    assert len(annotations) == 1
    assert annotations[0].path == "/api/clients"
    assert annotations[0].error.startswith("Failed to create client")


def test_unhandled_exception_is_logged(tmp_path):
    with RequestLogger(tmp_path, console=False) as request_logger:
        app = create_app(request_logger=request_logger)

        @app.get("/boom")
        def boom():
            raise RuntimeError("boom")

        response = TestClient(app, raise_server_exceptions=False).get("/boom")
        assert response.status_code == 500

        [entry] = read_log_entries(request_logger.path)
        assert entry.status_code == 500
        assert entry.error == "boom"


def test_closed_logger_writes_nothing(client: TestClient, tmp_path):
    assert client.get("/health").status_code == 200
    assert not (tmp_path / "unused").exists()
