"""FastAPI middleware for request tracing, metrics and the request log"""

import uuid
import time
from datetime import datetime
from typing import AsyncIterator
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp
from credit_registry.config import settings
from credit_registry.infrastructure.observability.logging import LogEntry, RequestLogger
from credit_registry.infrastructure.observability.metrics import request_duration_histogram

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a request ID to each request, reusing the caller's one when supplied"""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record HTTP request metrics"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        response = await call_next(request)

        duration = time.time() - start_time
        # Label by route template so /api/banks/1 and /api/banks/2 share a series
        route = request.scope.get("route")
        request_duration_histogram.labels(
            method=request.method,
            endpoint=getattr(route, "path", request.url.path),
            status=response.status_code,
        ).observe(duration)

        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Emit exactly one LogEntry per request once the handler has finished.

    Small bodies are captured into the entry; Starlette caches the body so the
    handler still reads it unchanged. The response is passed through untouched
    apart from counting the bytes streamed to the caller.
    """

    def __init__(self, app: ASGIApp, request_logger: RequestLogger, body_limit: int = settings.request_body_log_limit):
        super().__init__(app)
        self.request_logger = request_logger
        self.body_limit = body_limit

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        entry = LogEntry(
            method=request.method,
            path=request.url.path,
            timestamp=datetime.now(),
            user_agent=request.headers.get("user-agent", ""),
            remote_addr=_remote_addr(request),
            request_id=getattr(request.state, "request_id", ""),
        )
        entry.request_body = await self._capture_body(request)

        try:
            response = await call_next(request)
        except Exception as e:
            entry.status_code = 500
            entry.error = str(e)
            entry.response_time_ms = _elapsed_ms(start)
            self.request_logger.log_request(entry)
            raise

        entry.status_code = response.status_code or 200
        response.body_iterator = self._count_then_log(response.body_iterator, entry, start)
        return response

    async def _capture_body(self, request: Request) -> str:
        content_length = request.headers.get("content-length", "")
        if not content_length.isdigit() or not 0 < int(content_length) < self.body_limit:
            return ""
        body = await request.body()
        return body.decode("utf-8", errors="replace")

    async def _count_then_log(self, body_iterator: AsyncIterator[bytes], entry: LogEntry, start: float):
        size = 0
        try:
            async for chunk in body_iterator:
                size += len(chunk)
                yield chunk
        finally:
            entry.response_size = size
            entry.response_time_ms = _elapsed_ms(start)
            self.request_logger.log_request(entry)


def _remote_addr(request: Request) -> str:
    if request.client is None:
        return ""
    return f"{request.client.host}:{request.client.port}"


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)
