"""
E2E tests for the chat stream: join, message and leave events over real SSE.
"""
import asyncio

import pytest

from client import to_display
from core import IdentityJoined, IdentityLeft, MessagePosted

from .conftest import E2E_TIMEOUT_SECONDS, next_event, wait_until


@pytest.mark.slow
class TestStreamLifecycle:
    """Open, use and close event streams against a live server."""

    @pytest.mark.asyncio
    async def test_stream_headers(self, chat_client, http_client, live_app):
        """The stream is an uncached, unbuffered, kept-alive event-stream."""
        alice = await chat_client.register("Alice")

        async with http_client.stream(
            "GET", "/chat/sse", params={"id": alice.id, "name": alice.name}
        ) as response:
            assert response.status_code == 200
            assert response.headers["content-type"].startswith("text/event-stream")
            assert "no-store" in response.headers["cache-control"]
            assert response.headers["x-accel-buffering"] == "no"
            assert "keep-alive" in response.headers["connection"].lower()
            await wait_until(lambda: len(live_app.state.registry) == 1)

    @pytest.mark.asyncio
    async def test_idle_stream_gets_keepalive_comment(self, chat_client, http_client):
        """An idle stream receives periodic ping comments."""
        alice = await chat_client.register("Alice")

        async def first_comment(response) -> str:
            async for line in response.aiter_lines():
                if line.startswith(":"):
                    return line
            raise AssertionError("stream ended without a comment")

        async with http_client.stream(
            "GET", "/chat/sse", params={"id": alice.id, "name": alice.name}
        ) as response:
            comment = await asyncio.wait_for(first_comment(response), E2E_TIMEOUT_SECONDS)

        assert comment.startswith(": ping")

    @pytest.mark.asyncio
    async def test_register_reaches_open_stream(self, chat_client):
        """Registering announces the new identity to every open stream."""
        alice = await chat_client.register("Alice")

        async with chat_client.stream(alice) as events:
            bob = await chat_client.register("Bob")
            event = await next_event(events)

        assert isinstance(event, IdentityJoined)
        assert event.data.user == bob

    @pytest.mark.asyncio
    async def test_sender_sees_own_message(self, chat_client):
        """A posted message comes back through the sender's own stream."""
        alice = await chat_client.register("Alice")

        async with chat_client.stream(alice) as events:
            await chat_client.send_message(alice, "hi")
            event = await next_event(events)

        assert isinstance(event, MessagePosted)
        assert event.data.id.startswith("msg_")
        assert event.data.user.name == "Alice"
        assert event.data.message == "hi"
        assert to_display(event).message == "hi"

    @pytest.mark.asyncio
    async def test_fan_out_to_every_stream(self, chat_client):
        """Each open stream receives the same message."""
        alice = await chat_client.register("Alice")
        bob = await chat_client.register("Bob")

        async with chat_client.stream(alice) as alice_events:
            async with chat_client.stream(bob) as bob_events:
                await chat_client.send_message(bob, "hello all")
                to_alice = await next_event(alice_events)
                to_bob = await next_event(bob_events)

        assert to_alice == to_bob
        assert to_alice.data.message == "hello all"

    @pytest.mark.asyncio
    async def test_disconnect_announces_identity_left(self, chat_client, live_app):
        """Closing a stream publishes one IdentityLeft seen by the others."""
        alice = await chat_client.register("Alice")
        bob = await chat_client.register("Bob")
        registry = live_app.state.registry

        async with chat_client.stream(alice) as alice_events:
            async with chat_client.stream(bob):
                await wait_until(lambda: len(registry) == 2)
            event = await next_event(alice_events)

            assert isinstance(event, IdentityLeft)
            assert event.data.user == bob
            assert registry.identities() == [alice]

    @pytest.mark.asyncio
    async def test_presence_lists_open_streams(self, chat_client, http_client, live_app):
        """Presence shows identities while their stream is open."""
        alice = await chat_client.register("Alice")

        async with chat_client.stream(alice):
            response = await http_client.get("/chat/presence")
            assert response.json() == [{"id": alice.id, "name": "Alice"}]

        await wait_until(lambda: len(live_app.state.registry) == 0)
        response = await http_client.get("/health")
        assert response.json()["connections"] == 0

    @pytest.mark.asyncio
    async def test_invalid_identity_rejected(self, http_client, live_app):
        """A stream request without a name gets 400 and no subscription."""
        response = await http_client.get("/chat/sse", params={"id": "u1"})

        assert response.status_code == 400
        assert live_app.state.bus.subscriber_count == 0
