"""SQLAlchemy repository for per-site financial summaries.

Only the ledger aggregator writes through ``upsert_summary``; every other
caller reads.
"""

from collections.abc import Iterable

from sqlalchemy import text
from sqlalchemy.engine import Connection

from src.application.ports.ledger_store import SummaryRepositoryPort
from src.domain.constants import SUMMARY_FIGURES
from src.domain.models import SiteFinancialSummary
from src.infrastructure.sql_params import bind_amount, bind_timestamp, is_sqlite
from src.utils.decimal_utils import to_money
from src.utils.utils import parse_datetime

_SUMMARY_COLUMNS = ", ".join(("site_id", *SUMMARY_FIGURES, "revision", "updated_at"))

SELECT_SUMMARY_SQL = text(
    f"SELECT {_SUMMARY_COLUMNS} FROM site_financial_summary "
    "WHERE site_id = :site_id"
)

SELECT_SUMMARIES_SQL = text(
    f"SELECT {_SUMMARY_COLUMNS} FROM site_financial_summary ORDER BY site_id"
)

LOCK_SUMMARY_SQL = text(
    "SELECT site_id FROM site_financial_summary "
    "WHERE site_id = :site_id FOR UPDATE"
)

UPDATE_SUMMARY_SQL = text(
    """
    UPDATE site_financial_summary
    SET funds_received = :funds_received,
        funds_received_from_supervisor = :funds_received_from_supervisor,
        total_expenses = :total_expenses,
        total_advances = :total_advances,
        total_invoices = :total_invoices,
        advance_paid_to_supervisor = :advance_paid_to_supervisor,
        debit_to_worker = :debit_to_worker,
        pending_invoices = :pending_invoices,
        balance = :balance,
        revision = :revision,
        updated_at = :updated_at
    WHERE site_id = :site_id
    """
)

INSERT_SUMMARY_SQL = text(
    f"""
    INSERT INTO site_financial_summary ({_SUMMARY_COLUMNS})
    VALUES (
        :site_id,
        :funds_received,
        :funds_received_from_supervisor,
        :total_expenses,
        :total_advances,
        :total_invoices,
        :advance_paid_to_supervisor,
        :debit_to_worker,
        :pending_invoices,
        :balance,
        :revision,
        :updated_at
    )
    """
)

DELETE_SUMMARY_SQL = text(
    "DELETE FROM site_financial_summary WHERE site_id = :site_id"
)


class SqlAlchemySummaryRepository(SummaryRepositoryPort):
    """Summary table backed by the ledger database."""

    def lock_summaries(
        self,
        conn: Connection,
        site_ids: Iterable[str],
    ) -> None:
        """Take row locks on the given summaries in ascending site order.

        SQLite has no row locks; its connections already hold the database
        writer lock from ``BEGIN IMMEDIATE``.

        Args:
            conn: Connection of the current unit of work.
            site_ids: Sites whose summary rows must be locked.
        """
        if is_sqlite(conn):
            return
        for site_id in sorted(set(site_ids)):
            conn.execute(LOCK_SUMMARY_SQL, {"site_id": site_id})

    def fetch_summary(
        self,
        conn: Connection,
        site_id: str,
    ) -> SiteFinancialSummary | None:
        row = conn.execute(SELECT_SUMMARY_SQL, {"site_id": site_id}).first()
        if row is None:
            return None
        return self._to_summary(row)

    def fetch_summaries(self, conn: Connection) -> list[SiteFinancialSummary]:
        rows = conn.execute(SELECT_SUMMARIES_SQL).all()
        return [self._to_summary(row) for row in rows]

    def upsert_summary(
        self,
        conn: Connection,
        summary: SiteFinancialSummary,
    ) -> None:
        params = {
            name: bind_amount(conn, value)
            for name, value in summary.figures().items()
        }
        params["site_id"] = summary.site_id
        params["revision"] = summary.revision
        params["updated_at"] = bind_timestamp(conn, summary.updated_at)
        result = conn.execute(UPDATE_SUMMARY_SQL, params)
        if result.rowcount == 0:
            conn.execute(INSERT_SUMMARY_SQL, params)

    def delete_summary(self, conn: Connection, site_id: str) -> None:
        conn.execute(DELETE_SUMMARY_SQL, {"site_id": site_id})

    @staticmethod
    def _to_summary(row) -> SiteFinancialSummary:
        mapping = row._mapping
        figures = {name: to_money(mapping[name]) for name in SUMMARY_FIGURES}
        return SiteFinancialSummary(
            site_id=mapping["site_id"],
            revision=int(mapping["revision"]),
            updated_at=parse_datetime(mapping["updated_at"]),
            **figures,
        )


__all__ = [
    "SqlAlchemySummaryRepository",
    "LOCK_SUMMARY_SQL",
    "UPDATE_SUMMARY_SQL",
    "INSERT_SUMMARY_SQL",
]
