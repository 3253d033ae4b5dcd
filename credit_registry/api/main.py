"""FastAPI application factory"""

from contextlib import asynccontextmanager, nullcontext
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from credit_registry.api.dependencies import get_request_logger
from credit_registry.api.middleware import MetricsMiddleware, RequestIDMiddleware, RequestLoggingMiddleware
from credit_registry.api.routes import banks, clients, credits, items
from credit_registry.config import settings
from credit_registry.infrastructure.database.session import engine, init_schema
from credit_registry.infrastructure.observability.logging import RequestLogger, setup_logging

# Setup structured logging
setup_logging(settings.log_level)


def create_app(request_logger: Optional[RequestLogger] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Without an argument the app builds its own request logger, which the
    lifespan opens and closes on every exit path, including a failed schema
    bootstrap. A logger passed in stays owned by the caller: the lifespan
    neither opens nor closes it.
    """
    owns_logger = request_logger is None
    if owns_logger:
        request_logger = RequestLogger(settings.log_dir)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        with request_logger if owns_logger else nullcontext():
            init_schema(engine)
            yield

    app = FastAPI(
        title="Credit Registry",
        description="Clients, banks and the credits linking them",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.request_logger = request_logger

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(RequestLoggingMiddleware, request_logger=request_logger)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError):
        get_request_logger(request).log_error(
            request.method, request.url.path, f"Invalid request body: {exc.errors()}"
        )
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(items.router, prefix="/api", tags=["items"])
    app.include_router(clients.router, prefix="/api", tags=["clients"])
    app.include_router(banks.router, prefix="/api", tags=["banks"])
    app.include_router(credits.router, prefix="/api", tags=["credits"])

    return app


app = create_app()
