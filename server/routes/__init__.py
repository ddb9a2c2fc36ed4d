"""
Route registration for the chat relay API.
"""

from fastapi import FastAPI

from . import health, message, presence, register, stream


def register_routes(app: FastAPI) -> None:
    """Register all routes with the FastAPI application."""
    app.include_router(health.router)
    app.include_router(presence.router)
    app.include_router(register.router)
    app.include_router(message.router)
    app.include_router(stream.router)
