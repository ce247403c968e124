"""FastAPI application factory and configuration."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.datastructures import Headers

from parcel_tracker import __version__
from parcel_tracker.api.routes import health_router, tracking_router
from parcel_tracker.api.routes.tracking import (
    INTERNAL_ERROR,
    VALIDATION_ERROR,
    error_response,
)
from parcel_tracker.exceptions import TrackerError
from parcel_tracker.services.tracker_service import TrackerService
from parcel_tracker.utils.config import get_settings
from parcel_tracker.utils.logging import get_logger, setup_logging


if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = get_logger(__name__)

BODY_TOO_LARGE_ERROR = "Request body too large"


class BodySizeLimitMiddleware:
    """
    Reject request bodies larger than max_body_bytes with 413.

    A declared Content-Length is checked up front. Bodies without one
    (chunked uploads) are read into memory up to the limit and replayed to
    the application.
    """

    def __init__(self, app: ASGIApp, max_body_bytes: int) -> None:
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        path = scope.get("path", "")
        content_length = Headers(scope=scope).get("content-length")
        if content_length is not None:
            try:
                too_large = int(content_length) > self.max_body_bytes
            except ValueError:
                response = error_response(
                    status.HTTP_400_BAD_REQUEST, "Invalid Content-Length"
                )
                await response(scope, receive, send)
                return
            if too_large:
                await self._reject(scope, receive, send, path, int(content_length))
                return
            await self.app(scope, receive, send)
            return

        messages: list[Message] = []
        received = 0
        while True:
            message = await receive()
            messages.append(message)
            if message["type"] != "http.request":
                break
            received += len(message.get("body", b""))
            if received > self.max_body_bytes:
                await self._reject(scope, receive, send, path, received)
                return
            if not message.get("more_body", False):
                break

        async def replay() -> Message:
            if messages:
                return messages.pop(0)
            return await receive()

        await self.app(scope, replay, send)

    async def _reject(
        self, scope: Scope, receive: Receive, send: Send, path: str, size: int
    ) -> None:
        logger.warning(
            "Request body too large",
            path=path,
            size=size,
            limit=self.max_body_bytes,
        )
        response = error_response(
            status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, BODY_TOO_LARGE_ERROR
        )
        await response(scope, receive, send)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan manager.

    The browser is launched before the server accepts connections. A launch
    failure propagates out of startup, so the server exits instead of
    serving traffic it cannot handle.
    """
    settings = get_settings()
    setup_logging(level=settings.log_level, json_format=settings.log_json)

    logger.info(
        "Starting Parcel Tracker API",
        version=__version__,
        env=settings.env,
        debug=settings.debug,
    )

    for warning in settings.get_security_warnings():
        logger.warning(f"[SECURITY] {warning}")

    if getattr(app.state, "tracker_service", None) is None:
        app.state.tracker_service = TrackerService.from_settings(settings)
    service: TrackerService = app.state.tracker_service

    try:
        await service.start()
    except Exception as e:
        logger.critical("Browser launch failed, aborting startup", error=str(e))
        raise

    yield

    # Shutdown
    logger.info("Shutting down Parcel Tracker API")
    await service.close()


def setup_cors(app: FastAPI) -> None:
    """Setup CORS middleware based on configuration."""
    cors_config = get_settings().cors

    if not cors_config.enabled:
        logger.info("CORS is DISABLED")
        return

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_config.get_origins_list(),
        allow_methods=cors_config.get_methods_list(),
        allow_headers=cors_config.get_headers_list(),
    )

    logger.info(
        "CORS ENABLED",
        origins=cors_config.allow_origins,
        methods=cors_config.allow_methods,
    )


def create_app(service: TrackerService | None = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        service: Pre-built tracker service; built from settings at startup if None

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()

    app = FastAPI(
        title="Parcel Tracker API",
        description="""
## Shipment tracking API

Scrapes courier, status and checkpoint history for a tracking number
from 17track using a shared headless Chrome session.

### Endpoints
- **POST /track**: Scrape a tracking number
- **GET /health**: Liveness check
- **GET /health/ready**: Browser readiness
        """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.tracker_service = service

    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.max_body_bytes)
    setup_cors(app)

    # Exception handlers
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Collapse request validation failures into a fixed 400 body."""
        logger.info("Rejected request", path=request.url.path, errors=len(exc.errors()))
        return error_response(status.HTTP_400_BAD_REQUEST, VALIDATION_ERROR)

    @app.exception_handler(TrackerError)
    async def tracker_exception_handler(
        request: Request,
        exc: TrackerError,
    ) -> JSONResponse:
        """Handle tracker errors raised outside route bodies."""
        logger.error(
            "Tracker error",
            path=request.url.path,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR)

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle uncaught exceptions."""
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            error=str(exc),
            exc_info=True,
        )
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR)

    app.include_router(tracking_router)
    app.include_router(health_router)

    return app


# Application instance
app = create_app()
