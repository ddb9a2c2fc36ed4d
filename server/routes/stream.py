"""
Chat event SSE endpoint.
"""

import logging
from typing import AsyncGenerator

from fastapi import APIRouter, Depends, Query
from sse_starlette.sse import EventSourceResponse
from starlette.background import BackgroundTask

from config import Settings
from core import ConnectionRegistry, Identity

from ..dependencies import get_registry, get_settings

logger = logging.getLogger(__name__)

STREAM_HEADERS = {
    "Cache-Control": "no-store",
    "Connection": "keep-alive",
    # Stops nginx from buffering the stream
    "X-Accel-Buffering": "no",
}


router = APIRouter()


@router.get("/chat/sse")
async def chat_stream(
    id: str = Query(min_length=1),
    name: str = Query(),
    registry: ConnectionRegistry = Depends(get_registry),
    settings: Settings = Depends(get_settings),
) -> EventSourceResponse:
    """Stream every chat event to the caller until it disconnects."""
    identity = Identity(id=id, name=name)
    connection = registry.open(identity)

    async def event_generator() -> AsyncGenerator[dict, None]:
        try:
            async for frame in connection.frames():
                yield frame
        finally:
            connection.close()

    async def release() -> None:
        connection.close()

    # Runs even if the body never started streaming
    return EventSourceResponse(
        event_generator(),
        headers=STREAM_HEADERS,
        ping=settings.sse_ping_seconds,
        background=BackgroundTask(release),
    )
