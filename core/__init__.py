"""
Core chat relay logic.

This package contains the transport-agnostic event bus, stream connection
lifecycle and event producers. The server package provides HTTP bindings
around these operations.
"""

from .bus import EventBus, Unsubscribe
from .connections import ConnectionRegistry, StreamConnection
from .events import (
    FRAME_EVENT,
    ChatEvent,
    IdentityJoined,
    IdentityLeft,
    IdentityPayload,
    MessagePayload,
    MessagePosted,
    decode_event,
    encode_event,
    identity_joined,
    identity_left,
    message_posted,
)
from .exceptions import ConnectionNotFoundError, CoreError, DeliveryError
from .models import Identity, gen_id
from .producers import post_message, register_identity

__all__ = [
    # Exceptions
    "CoreError",
    "DeliveryError",
    "ConnectionNotFoundError",
    # Bus
    "EventBus",
    "Unsubscribe",
    # Events
    "FRAME_EVENT",
    "ChatEvent",
    "IdentityJoined",
    "IdentityLeft",
    "MessagePosted",
    "IdentityPayload",
    "MessagePayload",
    "identity_joined",
    "identity_left",
    "message_posted",
    "encode_event",
    "decode_event",
    # Models
    "Identity",
    "gen_id",
    # Connections
    "ConnectionRegistry",
    "StreamConnection",
    # Producers
    "register_identity",
    "post_message",
]
