"""
Post message endpoint.
"""

from fastapi import APIRouter, Depends, Response

from core import ChatEvent, EventBus, post_message

from ..dependencies import get_event_bus
from ..requests import PostMessageRequest


router = APIRouter()


@router.post("/chat/message", status_code=204)
async def post_message_route(
    request: PostMessageRequest, bus: EventBus[ChatEvent] = Depends(get_event_bus)
) -> Response:
    """Broadcast a message. The sender receives it through its own stream."""
    post_message(bus, request.user, request.message)
    return Response(status_code=204)
