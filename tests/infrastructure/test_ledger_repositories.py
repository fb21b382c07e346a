"""Tests for the SQLAlchemy ledger repositories on SQLite."""

from dataclasses import replace
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from src.domain.constants import TransactionKind, TransactionStatus, TransferKind
from src.domain.models import (
    Site,
    SiteFinancialSummary,
    SiteTransaction,
    SupervisorTransfer,
)
from src.infrastructure.site_repository import SqlAlchemySiteRepository
from src.infrastructure.summary_repository import SqlAlchemySummaryRepository
from src.infrastructure.transaction_store import SqlAlchemyTransactionStore

_NOW = datetime(2024, 6, 1, 8, 30, tzinfo=timezone.utc)


def _site(site_id: str) -> Site:
    return Site(
        id=site_id,
        name=f"Site {site_id}",
        location=None,
        supervisor_id=f"sup-{site_id}",
        is_completed=False,
        created_at=_NOW,
    )


def _transaction(tx_id: str, site_id: str = "A", amount: str = "10.50"):
    return SiteTransaction(
        id=tx_id,
        site_id=site_id,
        kind=TransactionKind.EXPENSE,
        amount=Decimal(amount),
        status=TransactionStatus.PENDING,
        created_by="u1",
        created_at=_NOW,
        occurred_on=date(2024, 6, 1),
        metadata={"description": "cement"},
    )


def _transfer(transfer_id: str, payer: str, receiver: str) -> SupervisorTransfer:
    return SupervisorTransfer(
        id=transfer_id,
        payer_supervisor_id=f"sup-{payer}",
        receiver_supervisor_id=f"sup-{receiver}",
        payer_site_id=payer,
        receiver_site_id=receiver,
        amount=Decimal("25.00"),
        transfer_kind=TransferKind.ADVANCE_PAID,
        occurred_on=date(2024, 6, 1),
        created_by="u1",
        created_at=_NOW,
    )


@pytest.fixture
def seeded_engine(db_port):
    engine = db_port.get_ledger_engine()
    sites = SqlAlchemySiteRepository()
    with engine.begin() as conn:
        sites.insert_site(conn, _site("A"))
        sites.insert_site(conn, _site("B"))
    return engine


def test_site_repository_round_trip(seeded_engine) -> None:
    """Sites should be readable, completable and deletable."""
    sites = SqlAlchemySiteRepository()

    with seeded_engine.begin() as conn:
        assert sites.fetch_site(conn, "A") == _site("A")
        assert sites.fetch_site_ids(conn) == ["A", "B"]
        assert sites.mark_completed(conn, "B") is True
        assert sites.fetch_site(conn, "B").is_completed is True
        assert sites.delete_site(conn, "A") is True
        assert sites.delete_site(conn, "A") is False
        assert sites.fetch_site(conn, "missing") is None


def test_soft_deleted_transactions_leave_the_active_set(seeded_engine) -> None:
    """Deleted rows should stay readable but not be listed as active."""
    store = SqlAlchemyTransactionStore()

    with seeded_engine.begin() as conn:
        store.insert_transaction(conn, _transaction("t1"))
        store.insert_transaction(conn, _transaction("t2", amount="3.00"))
        assert store.mark_transaction_deleted(conn, "t1", _NOW) is True
        assert store.mark_transaction_deleted(conn, "t1", _NOW) is False

        active = store.list_active_transactions(conn, "A")
        deleted = store.fetch_transaction(conn, "t1")

    assert [record.id for record in active] == ["t2"]
    assert active[0].amount == Decimal("3.00")
    assert active[0].metadata == {"description": "cement"}
    assert deleted.deleted_at == _NOW
    assert deleted.is_active is False


def test_status_update_only_touches_active_rows(seeded_engine) -> None:
    """Deleted transactions should not change status."""
    store = SqlAlchemyTransactionStore()

    with seeded_engine.begin() as conn:
        store.insert_transaction(conn, _transaction("t1"))
        assert store.update_transaction_status(
            conn, "t1", TransactionStatus.APPROVED
        )
        store.mark_transaction_deleted(conn, "t1", _NOW)
        assert not store.update_transaction_status(
            conn, "t1", TransactionStatus.REJECTED
        )
        assert store.fetch_transaction(conn, "t1").status is (
            TransactionStatus.APPROVED
        )


def test_update_transaction_rewrites_active_row(seeded_engine) -> None:
    """Edits should move the row between sites and skip deleted rows."""
    store = SqlAlchemyTransactionStore()
    edited = replace(
        _transaction("t1"),
        site_id="B",
        amount=Decimal("7.25"),
        occurred_on=date(2024, 6, 3),
        metadata={"description": "gravel"},
    )

    with seeded_engine.begin() as conn:
        store.insert_transaction(conn, _transaction("t1"))
        assert store.update_transaction(conn, edited) is True
        assert store.list_active_transactions(conn, "A") == []
        assert store.list_active_transactions(conn, "B") == [edited]
        store.mark_transaction_deleted(conn, "t1", _NOW)
        assert store.update_transaction(conn, _transaction("t1")) is False
        assert store.fetch_transaction(conn, "t1").site_id == "B"


def test_transfers_are_listed_for_both_sites_and_purged(seeded_engine) -> None:
    """Transfers should appear on payer and receiver until purged."""
    store = SqlAlchemyTransactionStore()

    with seeded_engine.begin() as conn:
        store.insert_transfer(conn, _transfer("x1", "A", "B"))
        store.insert_transaction(conn, _transaction("t1", site_id="A"))
        assert [t.id for t in store.list_active_transfers(conn, "B")] == ["x1"]

        store.purge_site_records(conn, "A")

        assert store.list_active_transfers(conn, "B") == []
        assert store.fetch_transaction(conn, "t1") is None


def test_schema_rejects_transfer_to_same_site(seeded_engine) -> None:
    """The database should refuse a transfer whose sites are equal."""
    store = SqlAlchemyTransactionStore()

    with pytest.raises(IntegrityError):
        with seeded_engine.begin() as conn:
            store.insert_transfer(conn, _transfer("x1", "A", "A"))


def test_summary_upsert_inserts_then_updates(seeded_engine) -> None:
    """Upserting twice should leave one row with the latest figures."""
    summaries = SqlAlchemySummaryRepository()
    first = SiteFinancialSummary(
        site_id="A",
        funds_received=Decimal("100.00"),
        balance=Decimal("100.00"),
        revision=1,
        updated_at=_NOW,
    )
    second = SiteFinancialSummary(
        site_id="A",
        funds_received=Decimal("100.00"),
        total_expenses=Decimal("0.10"),
        balance=Decimal("99.90"),
        revision=2,
        updated_at=_NOW,
    )

    with seeded_engine.begin() as conn:
        summaries.lock_summaries(conn, ["B", "A"])
        summaries.upsert_summary(conn, first)
        summaries.upsert_summary(conn, second)

        assert summaries.fetch_summary(conn, "A") == second
        assert summaries.fetch_summaries(conn) == [second]

        summaries.delete_summary(conn, "A")
        assert summaries.fetch_summary(conn, "A") is None
