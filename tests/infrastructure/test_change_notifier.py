"""Tests for the in-memory change notifier."""

import threading
from unittest.mock import MagicMock

from src.domain.models import SummaryChanged
from src.infrastructure.change_notifier import InMemoryChangeNotifier


def test_publish_reaches_only_subscribers_of_the_site() -> None:
    """Events should be routed by site id."""
    notifier = InMemoryChangeNotifier(logger=MagicMock())
    site_a = notifier.subscribe("A")
    site_b = notifier.subscribe("B")

    notifier.publish(SummaryChanged("A", 3))

    assert site_a.get(timeout=0.1) == SummaryChanged("A", 3)
    assert site_b.get(timeout=0.01) is None


def test_full_queue_drops_event_with_warning() -> None:
    """A slow subscriber should lose events instead of blocking writers."""
    logger = MagicMock()
    notifier = InMemoryChangeNotifier(max_queue_size=1, logger=logger)
    subscription = notifier.subscribe("A")

    notifier.publish_all([SummaryChanged("A", 2), SummaryChanged("A", 3)])

    assert subscription.get(timeout=0.1) == SummaryChanged("A", 2)
    assert subscription.get(timeout=0.01) is None
    logger.warning.assert_called_once()


def test_close_unsubscribes_and_ends_iteration() -> None:
    """Closing should wake a blocked consumer and stop delivery."""
    notifier = InMemoryChangeNotifier(logger=MagicMock())
    subscription = notifier.subscribe("A")
    received = []

    def consume() -> None:
        for event in subscription:
            received.append(event)

    consumer = threading.Thread(target=consume)
    consumer.start()
    notifier.publish(SummaryChanged("A", 2))
    subscription.close()
    consumer.join(timeout=2)

    assert not consumer.is_alive()
    assert received in ([SummaryChanged("A", 2)], [])
    assert notifier.subscriber_count("A") == 0
    notifier.publish(SummaryChanged("A", 3))
    assert subscription.get(timeout=0.01) is None


def test_subscription_context_manager_closes() -> None:
    """Leaving the with-block should unsubscribe."""
    notifier = InMemoryChangeNotifier(logger=MagicMock())

    with notifier.subscribe("A") as subscription:
        assert notifier.subscriber_count("A") == 1

    assert subscription.closed is True
    assert notifier.subscriber_count("A") == 0
