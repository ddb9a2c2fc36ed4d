"""
Register endpoint.
"""

from fastapi import APIRouter, Depends

from core import ChatEvent, EventBus, Identity, register_identity

from ..dependencies import get_event_bus
from ..requests import RegisterRequest


router = APIRouter()


@router.post("/chat/register")
async def register_route(
    request: RegisterRequest, bus: EventBus[ChatEvent] = Depends(get_event_bus)
) -> Identity:
    """Create an identity and announce it to every open stream."""
    return register_identity(bus, request.name)
