"""
FastAPI dependencies.

The bus, registry and settings are owned by the application instance and
handed to routes through these accessors.
"""

from fastapi import Request

from config import Settings
from core import ChatEvent, ConnectionRegistry, EventBus


def get_event_bus(request: Request) -> EventBus[ChatEvent]:
    """Get the event bus owned by this application."""
    return request.app.state.bus


def get_registry(request: Request) -> ConnectionRegistry:
    """Get the stream connection registry owned by this application."""
    return request.app.state.registry


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
