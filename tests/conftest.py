"""
Shared pytest fixtures for all tests.
"""
from typing import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from config import Settings
from core import ChatEvent, EventBus, Identity
from server import create_app


class EventRecorder:
    """Bus subscriber that keeps every event it receives."""

    def __init__(self) -> None:
        self.events: list[ChatEvent] = []

    def __call__(self, event: ChatEvent) -> None:
        self.events.append(event)

    @property
    def discriminants(self) -> list[str]:
        return [event.discriminant for event in self.events]


@pytest.fixture
def settings() -> Settings:
    """Settings with short keep-alive and a small backlog."""
    return Settings(sse_ping_seconds=1, max_pending_frames=16)


@pytest.fixture
def bus() -> EventBus[ChatEvent]:
    """Create a fresh event bus."""
    return EventBus()


@pytest.fixture
def recorder(bus: EventBus[ChatEvent]) -> Iterator[EventRecorder]:
    """Record everything published on the bus fixture."""
    recorder = EventRecorder()
    unsubscribe = bus.subscribe(recorder)
    yield recorder
    unsubscribe()


@pytest.fixture
def alice() -> Identity:
    return Identity(id="u1", name="Alice")


@pytest.fixture
def bob() -> Identity:
    return Identity(id="u2", name="Bob")


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    """Create an application with its own bus and registry."""
    return create_app(settings)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create a test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture
def app_recorder(app: FastAPI) -> Iterator[EventRecorder]:
    """Record everything published on the application's bus."""
    recorder = EventRecorder()
    unsubscribe = app.state.bus.subscribe(recorder)
    yield recorder
    unsubscribe()
