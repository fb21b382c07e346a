"""In-process change notifier for committed summary writes.

Events are cues, not values: a subscriber that receives
``SummaryChanged(site_id, revision)`` re-reads the summary. Delivery may drop
or repeat events without harming correctness, so a full subscriber queue
simply loses the event.
"""

import queue
import threading
from collections.abc import Iterable, Iterator

from src.application.ports.notifier import ChangeNotifierPort, SubscriptionPort
from src.domain.models import SummaryChanged
from src.infrastructure.logging.logger import get_app_logger


class Subscription(SubscriptionPort):
    """Bounded event queue for one site."""

    def __init__(
        self,
        site_id: str,
        notifier: "InMemoryChangeNotifier",
        max_queue_size: int,
    ) -> None:
        self.site_id = site_id
        self._notifier = notifier
        self._queue: queue.Queue[SummaryChanged | None] = queue.Queue(
            maxsize=max_queue_size
        )
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def offer(self, event: SummaryChanged) -> bool:
        if self._closed:
            return False
        try:
            self._queue.put_nowait(event)
        except queue.Full:
            return False
        return True

    def get(self, timeout: float | None = None) -> SummaryChanged | None:
        """Return the next event, or None on timeout or after close.

        Args:
            timeout: Seconds to wait; None blocks until an event arrives.

        Returns:
            SummaryChanged | None: Next event for the site.
        """
        if self._closed and self._queue.empty():
            return None
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._notifier.unsubscribe(self)
        try:
            # Wake a consumer blocked in get().
            self._queue.put_nowait(None)
        except queue.Full:
            pass

    def __iter__(self) -> Iterator[SummaryChanged]:
        while True:
            event = self.get()
            if event is None:
                return
            yield event

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False


class InMemoryChangeNotifier(ChangeNotifierPort):
    """Fan out summary-change events to per-site subscriptions."""

    def __init__(self, max_queue_size: int = 100, logger=None) -> None:
        """Initialize the notifier.

        Args:
            max_queue_size: Capacity of each subscription queue.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._max_queue_size = max_queue_size
        self._logger = logger or get_app_logger()
        self._lock = threading.Lock()
        self._subscriptions: dict[str, list[Subscription]] = {}

    def subscribe(self, site_id: str) -> Subscription:
        subscription = Subscription(site_id, self, self._max_queue_size)
        with self._lock:
            self._subscriptions.setdefault(site_id, []).append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            subscribers = self._subscriptions.get(subscription.site_id, [])
            if subscription in subscribers:
                subscribers.remove(subscription)
            if not subscribers:
                self._subscriptions.pop(subscription.site_id, None)

    def subscriber_count(self, site_id: str) -> int:
        with self._lock:
            return len(self._subscriptions.get(site_id, []))

    def publish(self, event: SummaryChanged) -> None:
        with self._lock:
            subscribers = list(self._subscriptions.get(event.site_id, []))
        for subscription in subscribers:
            if subscription.closed:
                continue
            if not subscription.offer(event):
                self._logger.warning(
                    f"Dropped change event for site {event.site_id} "
                    f"(revision {event.revision}): subscriber queue full"
                )

    def publish_all(self, events: Iterable[SummaryChanged]) -> None:
        for event in events:
            self.publish(event)


__all__ = ["Subscription", "InMemoryChangeNotifier"]
