"""
Chat relay API server.

HTTP bindings around the core event bus: one SSE stream endpoint and two
producer endpoints.
"""

from .app import create_app
from .dependencies import get_event_bus, get_registry, get_settings

__all__ = ["create_app", "get_event_bus", "get_registry", "get_settings"]
