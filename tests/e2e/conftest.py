"""
E2E test fixtures: a real uvicorn server and async HTTP clients.

Starlette's TestClient buffers whole responses, so open-ended SSE streams are
exercised against a live server instead.
"""
import asyncio
from typing import AsyncGenerator

import httpx
import pytest_asyncio
import uvicorn
from fastapi import FastAPI
from sse_starlette.sse import AppStatus

from client import ChatClient
from config import Settings
from server import create_app


# =============================================================================
# Constants
# =============================================================================

E2E_TIMEOUT_SECONDS = 5
TEST_SERVER_PORT = 18765
BASE_URL = f"http://127.0.0.1:{TEST_SERVER_PORT}"


# =============================================================================
# Live Server
# =============================================================================

@pytest_asyncio.fixture
async def live_app() -> AsyncGenerator[FastAPI, None]:
    """Run the application on a background uvicorn server."""
    # The shutdown event is bound to the loop that created it; each test has its own loop
    AppStatus.should_exit_event = None

    app = create_app(Settings(port=TEST_SERVER_PORT, sse_ping_seconds=1))
    config = uvicorn.Config(
        app,
        host="127.0.0.1",
        port=TEST_SERVER_PORT,
        log_level="warning",
        timeout_graceful_shutdown=1,
    )
    server = uvicorn.Server(config)

    # Start server in background task
    server_task = asyncio.create_task(server.serve())
    for _ in range(100):
        if server.started:
            break
        await asyncio.sleep(0.05)

    yield app

    # Shutdown server
    server.should_exit = True
    await server_task


@pytest_asyncio.fixture
async def chat_client(live_app: FastAPI) -> AsyncGenerator[ChatClient, None]:
    """Chat client pointed at the live server."""
    async with ChatClient(base_url=BASE_URL, timeout=E2E_TIMEOUT_SECONDS) as client:
        yield client


@pytest_asyncio.fixture
async def http_client(live_app: FastAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Plain HTTP client for endpoints the chat client does not wrap."""
    async with httpx.AsyncClient(base_url=BASE_URL, timeout=E2E_TIMEOUT_SECONDS) as client:
        yield client


# =============================================================================
# Helpers
# =============================================================================

async def next_event(events):
    """Wait for the next event on a stream, failing after the e2e timeout."""
    return await asyncio.wait_for(anext(events), E2E_TIMEOUT_SECONDS)


async def wait_until(predicate, timeout: float = E2E_TIMEOUT_SECONDS) -> None:
    """Poll until predicate() is true."""
    deadline = asyncio.get_running_loop().time() + timeout
    while not predicate():
        if asyncio.get_running_loop().time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.02)
