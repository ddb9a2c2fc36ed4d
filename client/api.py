"""
HTTP client for the chat relay.

Wraps the register and post-message endpoints and exposes the event stream
as decoded events.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx

from core import FRAME_EVENT, ChatEvent, Identity, decode_event

from .sse import parse_frames

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3333"
DEFAULT_TIMEOUT_SECONDS = 10.0

REGISTER_PATH = "/chat/register"
MESSAGE_PATH = "/chat/message"
STREAM_PATH = "/chat/sse"


class ChatClientError(Exception):
    """Raised when the server rejects a request."""

    def __init__(self, message: str, status_code: int, detail: object = None):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"{message} (HTTP {status_code})")


def _error_detail(response: httpx.Response) -> object:
    try:
        body = response.json()
    except ValueError:
        return response.text
    return body.get("detail", body) if isinstance(body, dict) else body


class ChatClient:
    """Async client for one chat relay server."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def __aenter__(self) -> "ChatClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def register(self, name: str) -> Identity:
        """
        Sign in under a display name.

        Raises:
            ChatClientError: If the server rejects the name
        """
        response = await self._client.post(REGISTER_PATH, json={"name": name})
        if response.is_error:
            raise ChatClientError("Failed to sign in", response.status_code, _error_detail(response))
        return Identity.model_validate(response.json())

    async def send_message(self, user: Identity, message: str) -> None:
        """
        Post a message. It comes back through the sender's own stream.

        Raises:
            ChatClientError: If the server rejects the message
        """
        response = await self._client.post(
            MESSAGE_PATH, json={"user": user.model_dump(), "message": message}
        )
        if response.is_error:
            raise ChatClientError(
                "Failed to send message", response.status_code, _error_detail(response)
            )

    @asynccontextmanager
    async def stream(self, user: Identity) -> AsyncIterator[AsyncIterator[ChatEvent]]:
        """
        Open the event stream for an identity.

        The server is subscribed once the context is entered; leaving the
        context closes the connection.

        Example:
            async with client.stream(user) as events:
                async for event in events:
                    ...

        Raises:
            ChatClientError: If the server rejects the identity
        """
        params = {"id": user.id, "name": user.name}
        # No read timeout: the stream is idle between events
        timeout = httpx.Timeout(self._client.timeout.connect, read=None)
        async with self._client.stream("GET", STREAM_PATH, params=params, timeout=timeout) as response:
            if response.is_error:
                await response.aread()
                raise ChatClientError(
                    "Failed to open stream", response.status_code, _error_detail(response)
                )
            logger.debug("Stream opened for %s (%s)", user.name, user.id)
            yield self._events(response)

    async def _events(self, response: httpx.Response) -> AsyncIterator[ChatEvent]:
        async for frame in parse_frames(response.aiter_lines()):
            if frame.event != FRAME_EVENT:
                logger.debug("Skipping %s frame", frame.event)
                continue
            yield decode_event(frame.data)
