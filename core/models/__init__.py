"""
Domain models for the chat relay.

These are the core data structures used throughout the application.
"""

from .identity import Identity
from .utils import gen_id

__all__ = [
    # Utils
    "gen_id",
    # Participants
    "Identity",
]
