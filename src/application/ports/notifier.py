"""Port for advisory summary-change notifications."""

from collections.abc import Iterable, Iterator
from typing import Protocol

from src.domain.models import SummaryChanged


class SubscriptionPort(Protocol):
    """Stream of change events for one site."""

    site_id: str

    def get(self, timeout: float | None = None) -> SummaryChanged | None:
        """Return the next event, or None when none arrived in time."""

    def close(self) -> None:
        """Stop receiving events."""

    def __iter__(self) -> Iterator[SummaryChanged]:
        """Yield events until the subscription is closed."""


class ChangeNotifierPort(Protocol):
    """Port publishing committed summary changes."""

    def publish(self, event: SummaryChanged) -> None:
        """Deliver an event to the subscribers of its site."""

    def publish_all(self, events: Iterable[SummaryChanged]) -> None:
        """Deliver several events in order."""

    def subscribe(self, site_id: str) -> SubscriptionPort:
        """Open a subscription to the given site."""


__all__ = ["SubscriptionPort", "ChangeNotifierPort"]
