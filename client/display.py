"""
Display model for chat events.

Every event maps to one line of the chat transcript. Joins and departures are
rendered as lines from the System author.
"""

from dataclasses import dataclass
from typing import assert_never

from core import ChatEvent, IdentityJoined, IdentityLeft, MessagePosted, gen_id

SYSTEM_NAME = "System"


@dataclass(frozen=True)
class ChatLine:
    id: str
    name: str
    message: str


def to_display(event: ChatEvent) -> ChatLine:
    """Map an event to the transcript line shown for it."""
    match event:
        case IdentityJoined(data=payload):
            return ChatLine(
                id=gen_id("sys_"),
                name=SYSTEM_NAME,
                message=f"{payload.user.name} has joined the chat",
            )
        case MessagePosted(data=payload):
            return ChatLine(id=payload.id, name=payload.user.name, message=payload.message)
        case IdentityLeft(data=payload):
            return ChatLine(
                id=gen_id("sys_"),
                name=SYSTEM_NAME,
                message=f"{payload.user.name} has left the chat",
            )
        case _:
            assert_never(event)
