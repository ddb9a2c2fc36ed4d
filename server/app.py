"""
FastAPI application setup and configuration.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import Settings, load_settings
from core import ChatEvent, ConnectionRegistry, EventBus
from server.middleware import RequestLoggingMiddleware
from server.routes import register_routes

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

API_TITLE = "Chat Relay API"
API_VERSION = "1.0.0"


# =============================================================================
# Error Handling
# =============================================================================

async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed input as a client error (400) with pydantic diagnostics."""
    errors = jsonable_encoder(exc.errors())
    logger.warning(
        "Rejected %s %s: %d validation error(s)",
        request.method,
        request.url.path,
        len(errors),
    )
    return JSONResponse(status_code=400, content={"detail": errors})


# =============================================================================
# App Factory
# =============================================================================

def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the application with its own event bus and connection registry.

    Args:
        settings: Runtime settings, loaded from the environment if omitted

    Returns:
        Configured FastAPI application
    """
    settings = settings or load_settings()
    bus: EventBus[ChatEvent] = EventBus()
    registry = ConnectionRegistry(bus, max_pending_frames=settings.max_pending_frames)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Chat relay ready")
        yield
        closed = registry.close_all()
        bus.clear()
        logger.info("Chat relay stopped, closed %d stream(s)", closed)

    app = FastAPI(title=API_TITLE, version=API_VERSION, lifespan=lifespan)
    app.state.settings = settings
    app.state.bus = bus
    app.state.registry = registry

    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # SECURITY NOTE: the default "*" lets any origin call the API. Set
    # CORS_ORIGINS to a comma-separated list of origins in production.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request logging middleware (added after CORS so it runs first)
    app.add_middleware(RequestLoggingMiddleware)

    register_routes(app)
    return app
