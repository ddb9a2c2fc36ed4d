"""
Event producers.

Transport-agnostic operations behind the register and post-message routes.
They hold no state of their own; all fan-out goes through the bus.
"""

import logging

from .bus import EventBus
from .events import ChatEvent, MessagePosted, identity_joined, message_posted
from .models import Identity, gen_id

logger = logging.getLogger(__name__)


def register_identity(bus: EventBus[ChatEvent], name: str) -> Identity:
    """
    Mint a new identity and announce it.

    Args:
        bus: Bus the IdentityJoined event is published on
        name: Display name, already validated by the caller

    Returns:
        The new identity
    """
    identity = Identity(id=gen_id("usr_"), name=name)
    logger.info("Registered %s (%s)", identity.name, identity.id)
    bus.publish(identity_joined(identity))
    return identity


def post_message(bus: EventBus[ChatEvent], user: Identity, message: str) -> MessagePosted:
    """
    Publish a message from an identity.

    The sender receives the message through its own stream like everyone else.
    """
    event = message_posted(gen_id("msg_"), user, message)
    logger.info("Message %s from %s (%s)", event.data.id, user.name, user.id)
    bus.publish(event)
    return event
