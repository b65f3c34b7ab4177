"""FastAPI server exposing the Vesture REST API."""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from logic.errors import ValidationFailed, VestureError
from logic.validation import validation_failure
from server.routes import closet_items, notifications, ootd_posts, products, users, wishlist_items
from vesture_app.app import VestureApp
from vesture_app.logging_config import correlation_context, get_logger, log_event

LOGGER = get_logger(__name__)
API_PREFIX = "/api"
REQUEST_ID_HEADER = "X-Request-ID"


def _error_body(exc: VestureError) -> dict:
    body: dict = {"message": exc.message}
    if isinstance(exc, ValidationFailed) and exc.errors:
        body["errors"] = exc.errors
    return body


def create_app(container: VestureApp | None = None) -> FastAPI:
    """Build the ASGI application around an application container."""

    container = container or VestureApp()
    app = FastAPI(title="Vesture", version="0.1.0")
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=container.config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        with correlation_context(request_id):
            start = time.perf_counter()
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            log_event(
                LOGGER,
                logging.INFO,
                "request_completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
        return response

    @app.exception_handler(VestureError)
    async def handle_vesture_error(request: Request, exc: VestureError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        failure = validation_failure("Invalid request", exc.errors())
        return JSONResponse(status_code=failure.status_code, content=_error_body(failure))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        log_event(
            LOGGER,
            logging.ERROR,
            "request_failed",
            method=request.method,
            path=request.url.path,
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content={"message": "Internal server error"})

    @app.get("/")
    async def welcome() -> dict:
        return {"message": "Welcome to the Vesture API"}

    @app.get("/healthz")
    def healthcheck() -> dict:
        """Lightweight readiness probe."""

        return {
            "status": "ok" if container.is_ready() else "degraded",
            "service": "vesture",
            "environment": container.config.environment or "local",
        }

    for module in (users, closet_items, ootd_posts, products, wishlist_items, notifications):
        app.include_router(module.router, prefix=API_PREFIX)

    return app

