"""
Chat event types.

Events form a closed tagged union keyed by ``discriminant``. Each event carries
the full identity of the participant involved so it can be rendered without a
follow-up lookup.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from .models import Identity

# SSE event name used for every chat frame
FRAME_EVENT = "message"


class IdentityPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    user: Identity


class MessagePayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    user: Identity
    message: str


class IdentityJoined(BaseModel):
    """A participant registered."""

    model_config = ConfigDict(frozen=True)

    discriminant: Literal["IdentityJoined"] = "IdentityJoined"
    data: IdentityPayload


class MessagePosted(BaseModel):
    """A participant posted a message."""

    model_config = ConfigDict(frozen=True)

    discriminant: Literal["MessagePosted"] = "MessagePosted"
    data: MessagePayload


class IdentityLeft(BaseModel):
    """A participant's stream closed."""

    model_config = ConfigDict(frozen=True)

    discriminant: Literal["IdentityLeft"] = "IdentityLeft"
    data: IdentityPayload


ChatEvent = Annotated[
    Union[IdentityJoined, MessagePosted, IdentityLeft],
    Field(discriminator="discriminant"),
]

_event_adapter: TypeAdapter[ChatEvent] = TypeAdapter(ChatEvent)


def identity_joined(user: Identity) -> IdentityJoined:
    return IdentityJoined(data=IdentityPayload(user=user))


def identity_left(user: Identity) -> IdentityLeft:
    return IdentityLeft(data=IdentityPayload(user=user))


def message_posted(message_id: str, user: Identity, message: str) -> MessagePosted:
    return MessagePosted(data=MessagePayload(id=message_id, user=user, message=message))


def encode_event(event: ChatEvent) -> str:
    """Serialize an event to the JSON text carried in a frame's data field."""
    return event.model_dump_json()


def decode_event(data: str | bytes) -> ChatEvent:
    """
    Parse frame data back into an event.

    Raises:
        pydantic.ValidationError: If the payload is not a known event
    """
    return _event_adapter.validate_json(data)
