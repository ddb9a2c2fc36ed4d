"""
Configuration module for the chat relay.

Exports the settings model and its loader.
"""

from .defaults import DEFAULT_HOST, DEFAULT_PORT
from .settings import Settings, load_settings

__all__ = [
    # Constants
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    # Settings
    "Settings",
    "load_settings",
]
