"""
Client for the chat relay.

Registers identities, posts messages and consumes the event stream.
"""

from .api import DEFAULT_BASE_URL, ChatClient, ChatClientError
from .display import SYSTEM_NAME, ChatLine, to_display
from .sse import Frame, FrameParser, parse_frames

__all__ = [
    "DEFAULT_BASE_URL",
    "ChatClient",
    "ChatClientError",
    "ChatLine",
    "SYSTEM_NAME",
    "to_display",
    "Frame",
    "FrameParser",
    "parse_frames",
]
