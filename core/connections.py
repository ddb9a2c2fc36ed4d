"""
Stream connections and their registry.

A StreamConnection bridges one long-lived outbound stream to the EventBus.
The registry opens connections, subscribes them to the bus, and publishes
IdentityLeft when one closes.
"""

import asyncio
import logging
import threading
from typing import AsyncIterator, Callable

from .bus import EventBus, Unsubscribe
from .events import FRAME_EVENT, ChatEvent, encode_event, identity_left
from .exceptions import ConnectionNotFoundError, DeliveryError
from .models import Identity, gen_id

logger = logging.getLogger(__name__)

# Frames a stream may buffer before it counts as stalled
DEFAULT_MAX_PENDING_FRAMES = 1000

Frame = dict[str, str]

# Queued after the last frame to stop the reader
_CLOSED = object()


class StreamConnection:
    """
    One open stream for one identity.

    Frames written by bus callbacks are buffered on an asyncio.Queue owned by
    the connection's event loop and consumed by ``frames()``. ``close()`` takes
    effect once; later calls return False.
    """

    def __init__(
        self,
        connection_id: str,
        identity: Identity,
        loop: asyncio.AbstractEventLoop,
        max_pending_frames: int,
        on_close: Callable[["StreamConnection"], None],
    ) -> None:
        self.id = connection_id
        self.identity = identity
        self._loop = loop
        self._queue: asyncio.Queue[object] = asyncio.Queue()
        self._max_pending_frames = max_pending_frames
        self._on_close = on_close
        self._unsubscribe: Unsubscribe | None = None
        self._lock = threading.Lock()
        self._closed = False
        # Frames written but not yet taken by the reader, from any thread
        self._pending = 0

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        """Frames written but not yet taken by the reader."""
        with self._lock:
            return self._pending

    def attach(self, unsubscribe: Unsubscribe) -> None:
        """Store the bus handle released on close."""
        self._unsubscribe = unsubscribe

    def write(self, frame: Frame) -> None:
        """
        Buffer one frame for the reader.

        Raises:
            DeliveryError: If the connection is closed or its backlog is full
        """
        with self._lock:
            if self._closed:
                raise DeliveryError(self.id, "connection closed")
            if self._pending >= self._max_pending_frames:
                raise DeliveryError(self.id, f"backlog exceeded {self._max_pending_frames} frames")
            self._pending += 1
        try:
            self._put(frame)
        except DeliveryError:
            with self._lock:
                self._pending -= 1
            raise

    def close(self) -> bool:
        """
        Unsubscribe from the bus and stop the reader.

        Returns:
            True if this call closed the connection, False if it was already closed
        """
        with self._lock:
            if self._closed:
                return False
            self._closed = True

        if self._unsubscribe is not None:
            self._unsubscribe()
        try:
            self._put(_CLOSED)
        except DeliveryError:
            logger.debug("Event loop gone while closing %s", self.id)
        self._on_close(self)
        return True

    async def frames(self) -> AsyncIterator[Frame]:
        """Yield buffered frames until the connection closes."""
        while True:
            item = await self._queue.get()
            if item is _CLOSED:
                return
            with self._lock:
                self._pending -= 1
            yield item  # type: ignore[misc]

    def _put(self, item: object) -> None:
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is self._loop:
            self._queue.put_nowait(item)
            return
        try:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, item)
        except RuntimeError as e:
            raise DeliveryError(self.id, "event loop closed") from e


class ConnectionRegistry:
    """Tracks open stream connections and couples them to the EventBus."""

    def __init__(
        self,
        bus: EventBus[ChatEvent],
        max_pending_frames: int = DEFAULT_MAX_PENDING_FRAMES,
    ) -> None:
        self._bus = bus
        self._max_pending_frames = max_pending_frames
        self._connections: dict[str, StreamConnection] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._connections)

    def open(
        self, identity: Identity, loop: asyncio.AbstractEventLoop | None = None
    ) -> StreamConnection:
        """
        Open a stream for an already validated identity.

        The connection receives every event published from now on until it
        closes. The identity is kept as-is and reused for IdentityLeft.

        Args:
            identity: Identity validated at connection open
            loop: Loop that consumes the stream, defaults to the running loop

        Returns:
            The subscribed connection
        """
        connection = StreamConnection(
            connection_id=gen_id("con_"),
            identity=identity,
            loop=loop or asyncio.get_running_loop(),
            max_pending_frames=self._max_pending_frames,
            on_close=self._handle_close,
        )
        with self._lock:
            self._connections[connection.id] = connection
        connection.attach(self._bus.subscribe(self._deliver_to(connection)))

        logger.info("Stream %s opened for %s (%s)", connection.id, identity.name, identity.id)
        return connection

    def get(self, connection_id: str) -> StreamConnection:
        """
        Look up an open connection.

        Raises:
            ConnectionNotFoundError: If no open connection has this id
        """
        with self._lock:
            connection = self._connections.get(connection_id)
        if connection is None:
            raise ConnectionNotFoundError(connection_id)
        return connection

    def identities(self) -> list[Identity]:
        """Identities with an open stream, in the order they connected."""
        with self._lock:
            return [connection.identity for connection in self._connections.values()]

    def close_all(self) -> int:
        """Close every open connection. Returns how many were closed."""
        with self._lock:
            connections = list(self._connections.values())
        return sum(1 for connection in connections if connection.close())

    def _deliver_to(self, connection: StreamConnection) -> Callable[[ChatEvent], None]:
        def deliver(event: ChatEvent) -> None:
            try:
                connection.write({"event": FRAME_EVENT, "data": encode_event(event)})
            except DeliveryError as e:
                logger.warning("Dropping stream %s: %s", connection.id, e.reason)
                connection.close()

        return deliver

    def _handle_close(self, connection: StreamConnection) -> None:
        with self._lock:
            self._connections.pop(connection.id, None)

        identity = connection.identity
        logger.info("Stream %s closed for %s (%s)", connection.id, identity.name, identity.id)
        self._bus.publish(identity_left(identity))
