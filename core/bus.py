"""
In-process EventBus.

Subscribers register a callback and receive every event published after
registration. Publishing is synchronous: ``publish`` returns once every
current subscriber has been called.
"""

import logging
import threading
from collections import deque
from typing import Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Callback = Callable[[T], object]
Unsubscribe = Callable[[], None]


class _Subscription(Generic[T]):
    __slots__ = ("callback", "active", "lock")

    def __init__(self, callback: Callback[T]) -> None:
        self.callback = callback
        self.active = True
        # Held while the callback runs; re-entrant so a callback can unsubscribe itself
        self.lock = threading.RLock()


class EventBus(Generic[T]):
    """
    Synchronous publish/subscribe registry.

    The subscriber list is guarded by a lock that is only held to append,
    remove or copy it, so ``subscribe`` never waits for a fan-out. Each publish
    iterates over a snapshot; every subscription has its own lock, taken to
    check ``active`` and run the callback, and taken by ``unsubscribe`` to
    clear ``active``. Once an unsubscribe handle returns, its callback is not
    called again.

    Publishes from different threads are serialized. A publish issued from
    inside a callback is queued and delivered after the current event reaches
    every subscriber.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscriptions: list[_Subscription[T]] = []
        self._dispatch_lock = threading.Lock()
        self._local = threading.local()

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def subscribe(self, callback: Callback[T]) -> Unsubscribe:
        """
        Register a callback for future events.

        Args:
            callback: Called once per event published after this call

        Returns:
            An idempotent handle that removes the subscription
        """
        subscription = _Subscription(callback)
        with self._lock:
            self._subscriptions.append(subscription)

        def unsubscribe() -> None:
            with subscription.lock:
                if not subscription.active:
                    return
                subscription.active = False
            with self._lock:
                # Already gone if the bus was cleared
                if subscription in self._subscriptions:
                    self._subscriptions.remove(subscription)

        return unsubscribe

    def publish(self, event: T) -> int:
        """
        Deliver an event to every current subscriber in registration order.

        A callback that raises is logged and skipped; the others still receive
        the event.

        Returns:
            Number of callbacks that handled the event without raising. A
            publish nested inside a callback is deferred and returns 0.
        """
        pending: deque[T] | None = getattr(self._local, "pending", None)
        if pending is not None:
            pending.append(event)
            return 0

        pending = deque([event])
        self._local.pending = pending
        delivered = 0
        try:
            with self._dispatch_lock:
                while pending:
                    current = pending.popleft()
                    count = self._dispatch(current)
                    if current is event:
                        delivered = count
        finally:
            self._local.pending = None
        return delivered

    def clear(self) -> None:
        """Drop every subscription. Outstanding handles become no-ops."""
        with self._lock:
            subscriptions = self._subscriptions
            self._subscriptions = []
        for subscription in subscriptions:
            with subscription.lock:
                subscription.active = False

    def _dispatch(self, event: T) -> int:
        with self._lock:
            snapshot = list(self._subscriptions)

        delivered = 0
        for subscription in snapshot:
            with subscription.lock:
                # Removed after the snapshot was taken
                if not subscription.active:
                    continue
                try:
                    subscription.callback(event)
                except Exception:
                    logger.exception("Subscriber %r failed handling event", subscription.callback)
                else:
                    delivered += 1
        return delivered
