"""Failure injection tests for the dual-entry transfer handler."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from src.infrastructure.transaction_store import SqlAlchemyTransactionStore


class _FailingStore(SqlAlchemyTransactionStore):
    """Store whose reads fail for one site, as a crashed recompute would."""

    def __init__(self, failing_site_id: str, error: Exception) -> None:
        self._failing_site_id = failing_site_id
        self._error = error

    def list_active_transfers(self, conn, site_id):
        if site_id == self._failing_site_id:
            raise self._error
        return super().list_active_transfers(conn, site_id)


def test_failed_receiver_recompute_rolls_back_everything(
    ledger,
    db_port,
    notifier,
    ledger_factory,
) -> None:
    """Neither summary nor the transfer row should survive the failure."""
    ledger.create_site("Site A", site_id="A")
    ledger.create_site("Site B", site_id="B")
    ledger.create_transaction("funds_received", "A", "100")
    before_a = ledger.get_summary("A")
    before_b = ledger.get_summary("B")
    subscription = ledger.subscribe("A")
    failing = ledger_factory(
        db_port,
        notifier=notifier,
        store=_FailingStore("B", RuntimeError("recompute crashed")),
    )

    with pytest.raises(RuntimeError):
        failing.post_transfer("A", "B", "25", "advance_paid")

    assert ledger.get_summary("A") == before_a
    assert ledger.get_summary("B") == before_b
    assert ledger.list_transfers("A") == []
    assert subscription.get(timeout=0.01) is None


def test_database_error_is_logged_and_reraised(
    ledger,
    db_port,
    ledger_factory,
) -> None:
    """SQLAlchemy errors should be logged by the use case and propagate."""
    ledger.create_site("Site A", site_id="A")
    ledger.create_site("Site B", site_id="B")
    logger = MagicMock()
    failing = ledger_factory(
        db_port,
        store=_FailingStore(
            "A",
            OperationalError("SELECT", {}, Exception("disk I/O error")),
        ),
        logger=logger,
    )

    with pytest.raises(OperationalError):
        failing.post_transfer("A", "B", "25", "advance_paid")

    logger.error.assert_called_once()
    assert ledger.get_summary("B").balance == Decimal("0.00")
    assert ledger.list_transfers("B") == []
