"""Dependency injection and shared helpers for FastAPI endpoints"""

import logging
import re
from fastapi import HTTPException, Request
from credit_registry.infrastructure.observability.logging import RequestLogger


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_request_logger(request: Request) -> RequestLogger:
    """Provide the request logger opened at startup"""
    return request.app.state.request_logger


_ID_PATTERN = re.compile(r"[+-]?[0-9]+")
MAX_ID = 2**63 - 1


def parse_id(raw: str, detail: str = "Invalid ID") -> int:
    """Parse a plain decimal path segment that fits a 64-bit id column, 400 on anything else"""
    if not _ID_PATTERN.fullmatch(raw):
        raise HTTPException(status_code=400, detail=detail)
    value = int(raw)
    if not -MAX_ID - 1 <= value <= MAX_ID:
        raise HTTPException(status_code=400, detail=detail)
    return value


def internal_error(request: Request, detail: str, error: Exception) -> HTTPException:
    """
    Build a 500 for a store failure.

    The underlying error goes to the logs only; the caller sees ``detail``.
    """
    message = f"{detail}: {error}"
    logging.error(message, extra={"request_id": get_request_id(request)})
    get_request_logger(request).log_error(request.method, request.url.path, message)
    return HTTPException(status_code=500, detail=detail)
