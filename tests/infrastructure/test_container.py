"""Tests for the composition root."""

from unittest.mock import MagicMock

from src.application.site_ledger import SiteLedger
from src.infrastructure import container
from src.infrastructure.change_notifier import InMemoryChangeNotifier
from src.infrastructure.settings import LedgerSettings


def test_build_database_adapter_forwards_url(monkeypatch) -> None:
    """The adapter should receive the optional database URL."""
    captured = []
    monkeypatch.setattr(
        container,
        "SqlAlchemyDatabaseEngineAdapter",
        lambda url: captured.append(url) or "adapter",
    )

    assert container.build_database_adapter("sqlite:///x.db") == "adapter"
    assert captured == ["sqlite:///x.db"]


def test_build_change_notifier_uses_queue_size(monkeypatch) -> None:
    """Notifier queues should be sized from the settings."""
    monkeypatch.setattr(container, "get_app_logger", lambda: MagicMock())

    notifier = container.build_change_notifier(
        LedgerSettings(notifier_queue_size=3)
    )

    assert isinstance(notifier, InMemoryChangeNotifier)
    assert notifier._max_queue_size == 3


def test_build_site_ledger_wires_facade(db_port, monkeypatch) -> None:
    """The container should return a working ledger facade."""
    monkeypatch.setattr(container, "get_app_logger", lambda: MagicMock())
    monkeypatch.setattr(container, "get_usage_logger", lambda: MagicMock())
    notifier = InMemoryChangeNotifier(logger=MagicMock())

    ledger = container.build_site_ledger(
        db_port=db_port,
        settings=LedgerSettings(counted_statuses=frozenset({"approved"})),
        notifier=notifier,
    )
    site = ledger.create_site("Depot", site_id="D")
    ledger.create_transaction("expense", site.id, "9")

    assert isinstance(ledger, SiteLedger)
    assert ledger.get_summary("D").total_expenses == 0
    assert ledger.subscribe("D").site_id == "D"
