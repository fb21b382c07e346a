"""SQLAlchemy transaction store for site transactions and transfers.

Rows are append-only: deleting a record stamps ``deleted_at`` and the
record stops being active. Only site deletion removes rows physically.
"""

from datetime import datetime

from sqlalchemy import text
from sqlalchemy.engine import Connection

from src.application.ports.ledger_store import TransactionStorePort
from src.domain.constants import TransactionKind, TransactionStatus, TransferKind
from src.domain.models import SiteTransaction, SupervisorTransfer
from src.infrastructure.sql_params import (
    bind_amount,
    bind_date,
    bind_timestamp,
    dump_metadata,
    load_metadata,
)
from src.utils.decimal_utils import to_money
from src.utils.utils import parse_date, parse_datetime

_TRANSACTION_COLUMNS = """
    id, site_id, kind, amount, status, occurred_on, metadata,
    created_by, created_at, deleted_at
"""

_TRANSFER_COLUMNS = """
    id, payer_supervisor_id, receiver_supervisor_id, payer_site_id,
    receiver_site_id, amount, transfer_kind, occurred_on, created_by,
    created_at, deleted_at
"""

INSERT_TRANSACTION_SQL = text(
    """
    INSERT INTO site_transactions (
        id,
        site_id,
        kind,
        amount,
        status,
        occurred_on,
        metadata,
        created_by,
        created_at
    )
    VALUES (
        :id,
        :site_id,
        :kind,
        :amount,
        :status,
        :occurred_on,
        :metadata,
        :created_by,
        :created_at
    )
    """
)

SELECT_TRANSACTION_SQL = text(
    f"SELECT {_TRANSACTION_COLUMNS} FROM site_transactions WHERE id = :id"
)

SELECT_ACTIVE_TRANSACTIONS_SQL = text(
    f"""
    SELECT {_TRANSACTION_COLUMNS}
    FROM site_transactions
    WHERE site_id = :site_id AND deleted_at IS NULL
    ORDER BY occurred_on, created_at, id
    """
)

SOFT_DELETE_TRANSACTION_SQL = text(
    """
    UPDATE site_transactions
    SET deleted_at = :deleted_at
    WHERE id = :id AND deleted_at IS NULL
    """
)

UPDATE_TRANSACTION_STATUS_SQL = text(
    """
    UPDATE site_transactions
    SET status = :status
    WHERE id = :id AND deleted_at IS NULL
    """
)

UPDATE_TRANSACTION_SQL = text(
    """
    UPDATE site_transactions
    SET site_id = :site_id,
        amount = :amount,
        occurred_on = :occurred_on,
        metadata = :metadata
    WHERE id = :id AND deleted_at IS NULL
    """
)

INSERT_TRANSFER_SQL = text(
    """
    INSERT INTO supervisor_transfers (
        id,
        payer_supervisor_id,
        receiver_supervisor_id,
        payer_site_id,
        receiver_site_id,
        amount,
        transfer_kind,
        occurred_on,
        created_by,
        created_at
    )
    VALUES (
        :id,
        :payer_supervisor_id,
        :receiver_supervisor_id,
        :payer_site_id,
        :receiver_site_id,
        :amount,
        :transfer_kind,
        :occurred_on,
        :created_by,
        :created_at
    )
    """
)

SELECT_TRANSFER_SQL = text(
    f"SELECT {_TRANSFER_COLUMNS} FROM supervisor_transfers WHERE id = :id"
)

SELECT_ACTIVE_TRANSFERS_SQL = text(
    f"""
    SELECT {_TRANSFER_COLUMNS}
    FROM supervisor_transfers
    WHERE (payer_site_id = :site_id OR receiver_site_id = :site_id)
      AND deleted_at IS NULL
    ORDER BY occurred_on, created_at, id
    """
)

SOFT_DELETE_TRANSFER_SQL = text(
    """
    UPDATE supervisor_transfers
    SET deleted_at = :deleted_at
    WHERE id = :id AND deleted_at IS NULL
    """
)

PURGE_SITE_TRANSACTIONS_SQL = text(
    "DELETE FROM site_transactions WHERE site_id = :site_id"
)

PURGE_SITE_TRANSFERS_SQL = text(
    """
    DELETE FROM supervisor_transfers
    WHERE payer_site_id = :site_id OR receiver_site_id = :site_id
    """
)


class SqlAlchemyTransactionStore(TransactionStorePort):
    """Transaction store backed by the ledger database."""

    def insert_transaction(
        self,
        conn: Connection,
        record: SiteTransaction,
    ) -> None:
        conn.execute(
            INSERT_TRANSACTION_SQL,
            {
                "id": record.id,
                "site_id": record.site_id,
                "kind": record.kind.value,
                "amount": bind_amount(conn, record.amount),
                "status": record.status.value,
                "occurred_on": bind_date(conn, record.occurred_on),
                "metadata": dump_metadata(record.metadata),
                "created_by": record.created_by,
                "created_at": bind_timestamp(conn, record.created_at),
            },
        )

    def fetch_transaction(
        self,
        conn: Connection,
        transaction_id: str,
    ) -> SiteTransaction | None:
        row = conn.execute(SELECT_TRANSACTION_SQL, {"id": transaction_id}).first()
        if row is None:
            return None
        return self._to_transaction(row)

    def mark_transaction_deleted(
        self,
        conn: Connection,
        transaction_id: str,
        deleted_at: datetime,
    ) -> bool:
        result = conn.execute(
            SOFT_DELETE_TRANSACTION_SQL,
            {
                "id": transaction_id,
                "deleted_at": bind_timestamp(conn, deleted_at),
            },
        )
        return result.rowcount > 0

    def update_transaction_status(
        self,
        conn: Connection,
        transaction_id: str,
        status: TransactionStatus,
    ) -> bool:
        result = conn.execute(
            UPDATE_TRANSACTION_STATUS_SQL,
            {"id": transaction_id, "status": status.value},
        )
        return result.rowcount > 0

    def update_transaction(
        self,
        conn: Connection,
        record: SiteTransaction,
    ) -> bool:
        result = conn.execute(
            UPDATE_TRANSACTION_SQL,
            {
                "id": record.id,
                "site_id": record.site_id,
                "amount": bind_amount(conn, record.amount),
                "occurred_on": bind_date(conn, record.occurred_on),
                "metadata": dump_metadata(record.metadata),
            },
        )
        return result.rowcount > 0

    def list_active_transactions(
        self,
        conn: Connection,
        site_id: str,
    ) -> list[SiteTransaction]:
        rows = conn.execute(
            SELECT_ACTIVE_TRANSACTIONS_SQL,
            {"site_id": site_id},
        ).all()
        return [self._to_transaction(row) for row in rows]

    def insert_transfer(
        self,
        conn: Connection,
        transfer: SupervisorTransfer,
    ) -> None:
        conn.execute(
            INSERT_TRANSFER_SQL,
            {
                "id": transfer.id,
                "payer_supervisor_id": transfer.payer_supervisor_id,
                "receiver_supervisor_id": transfer.receiver_supervisor_id,
                "payer_site_id": transfer.payer_site_id,
                "receiver_site_id": transfer.receiver_site_id,
                "amount": bind_amount(conn, transfer.amount),
                "transfer_kind": transfer.transfer_kind.value,
                "occurred_on": bind_date(conn, transfer.occurred_on),
                "created_by": transfer.created_by,
                "created_at": bind_timestamp(conn, transfer.created_at),
            },
        )

    def fetch_transfer(
        self,
        conn: Connection,
        transfer_id: str,
    ) -> SupervisorTransfer | None:
        row = conn.execute(SELECT_TRANSFER_SQL, {"id": transfer_id}).first()
        if row is None:
            return None
        return self._to_transfer(row)

    def mark_transfer_deleted(
        self,
        conn: Connection,
        transfer_id: str,
        deleted_at: datetime,
    ) -> bool:
        result = conn.execute(
            SOFT_DELETE_TRANSFER_SQL,
            {
                "id": transfer_id,
                "deleted_at": bind_timestamp(conn, deleted_at),
            },
        )
        return result.rowcount > 0

    def list_active_transfers(
        self,
        conn: Connection,
        site_id: str,
    ) -> list[SupervisorTransfer]:
        rows = conn.execute(
            SELECT_ACTIVE_TRANSFERS_SQL,
            {"site_id": site_id},
        ).all()
        return [self._to_transfer(row) for row in rows]

    def purge_site_records(self, conn: Connection, site_id: str) -> None:
        conn.execute(PURGE_SITE_TRANSFERS_SQL, {"site_id": site_id})
        conn.execute(PURGE_SITE_TRANSACTIONS_SQL, {"site_id": site_id})

    @staticmethod
    def _to_transaction(row) -> SiteTransaction:
        return SiteTransaction(
            id=row.id,
            site_id=row.site_id,
            kind=TransactionKind(row.kind),
            amount=to_money(row.amount),
            status=TransactionStatus(row.status),
            created_by=row.created_by,
            created_at=parse_datetime(row.created_at),
            occurred_on=parse_date(row.occurred_on),
            metadata=load_metadata(row._mapping["metadata"]),
            deleted_at=parse_datetime(row.deleted_at),
        )

    @staticmethod
    def _to_transfer(row) -> SupervisorTransfer:
        return SupervisorTransfer(
            id=row.id,
            payer_supervisor_id=row.payer_supervisor_id,
            receiver_supervisor_id=row.receiver_supervisor_id,
            payer_site_id=row.payer_site_id,
            receiver_site_id=row.receiver_site_id,
            amount=to_money(row.amount),
            transfer_kind=TransferKind(row.transfer_kind),
            occurred_on=parse_date(row.occurred_on),
            created_by=row.created_by,
            created_at=parse_datetime(row.created_at),
            deleted_at=parse_datetime(row.deleted_at),
        )


__all__ = [
    "SqlAlchemyTransactionStore",
    "INSERT_TRANSACTION_SQL",
    "INSERT_TRANSFER_SQL",
    "SOFT_DELETE_TRANSACTION_SQL",
    "UPDATE_TRANSACTION_SQL",
    "SOFT_DELETE_TRANSFER_SQL",
]
