"""DDL for the site ledger tables.

Statements stay portable between PostgreSQL and SQLite: amounts are
``NUMERIC(12, 2)``, timestamps are written as ISO strings by the
repositories, and metadata is stored as JSON text.
"""

from sqlalchemy.engine import Engine

CREATE_SITES_SQL = """
CREATE TABLE IF NOT EXISTS sites (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    location TEXT,
    supervisor_id TEXT,
    is_completed BOOLEAN NOT NULL DEFAULT FALSE,
    created_at TIMESTAMP NOT NULL
)
"""

CREATE_SITE_TRANSACTIONS_SQL = """
CREATE TABLE IF NOT EXISTS site_transactions (
    id TEXT PRIMARY KEY,
    site_id TEXT NOT NULL REFERENCES sites(id) ON DELETE CASCADE,
    kind TEXT NOT NULL
        CHECK (kind IN ('expense', 'advance', 'funds_received', 'invoice')),
    amount NUMERIC(12, 2) NOT NULL CHECK (amount > 0),
    status TEXT NOT NULL DEFAULT 'pending'
        CHECK (status IN ('pending', 'approved', 'rejected')),
    occurred_on DATE NOT NULL,
    metadata TEXT NOT NULL DEFAULT '{}',
    created_by TEXT,
    created_at TIMESTAMP NOT NULL,
    deleted_at TIMESTAMP
)
"""

CREATE_SUPERVISOR_TRANSFERS_SQL = """
CREATE TABLE IF NOT EXISTS supervisor_transfers (
    id TEXT PRIMARY KEY,
    payer_supervisor_id TEXT,
    receiver_supervisor_id TEXT,
    payer_site_id TEXT NOT NULL REFERENCES sites(id) ON DELETE CASCADE,
    receiver_site_id TEXT NOT NULL REFERENCES sites(id) ON DELETE CASCADE,
    amount NUMERIC(12, 2) NOT NULL CHECK (amount > 0),
    transfer_kind TEXT NOT NULL
        CHECK (transfer_kind IN ('advance_paid', 'funds_received')),
    occurred_on DATE NOT NULL,
    created_by TEXT,
    created_at TIMESTAMP NOT NULL,
    deleted_at TIMESTAMP,
    CHECK (payer_site_id <> receiver_site_id)
)
"""

CREATE_SITE_FINANCIAL_SUMMARY_SQL = """
CREATE TABLE IF NOT EXISTS site_financial_summary (
    site_id TEXT PRIMARY KEY REFERENCES sites(id) ON DELETE CASCADE,
    funds_received NUMERIC(12, 2) NOT NULL DEFAULT 0,
    funds_received_from_supervisor NUMERIC(12, 2) NOT NULL DEFAULT 0,
    total_expenses NUMERIC(12, 2) NOT NULL DEFAULT 0,
    total_advances NUMERIC(12, 2) NOT NULL DEFAULT 0,
    total_invoices NUMERIC(12, 2) NOT NULL DEFAULT 0,
    advance_paid_to_supervisor NUMERIC(12, 2) NOT NULL DEFAULT 0,
    debit_to_worker NUMERIC(12, 2) NOT NULL DEFAULT 0,
    pending_invoices NUMERIC(12, 2) NOT NULL DEFAULT 0,
    balance NUMERIC(12, 2) NOT NULL DEFAULT 0,
    revision INTEGER NOT NULL DEFAULT 0,
    updated_at TIMESTAMP
)
"""

CREATE_INDEXES_SQL = (
    "CREATE INDEX IF NOT EXISTS idx_site_transactions_site_id "
    "ON site_transactions(site_id)",
    "CREATE INDEX IF NOT EXISTS idx_supervisor_transfers_payer_site "
    "ON supervisor_transfers(payer_site_id)",
    "CREATE INDEX IF NOT EXISTS idx_supervisor_transfers_receiver_site "
    "ON supervisor_transfers(receiver_site_id)",
)

SCHEMA_STATEMENTS = (
    CREATE_SITES_SQL,
    CREATE_SITE_TRANSACTIONS_SQL,
    CREATE_SUPERVISOR_TRANSFERS_SQL,
    CREATE_SITE_FINANCIAL_SUMMARY_SQL,
    *CREATE_INDEXES_SQL,
)


def create_schema(engine: Engine) -> None:
    """Create the ledger tables and indexes when missing.

    Args:
        engine: SQLAlchemy engine connected to the ledger database.
    """
    with engine.begin() as conn:
        for statement in SCHEMA_STATEMENTS:
            conn.exec_driver_sql(statement)


__all__ = [
    "CREATE_SITES_SQL",
    "CREATE_SITE_TRANSACTIONS_SQL",
    "CREATE_SUPERVISOR_TRANSFERS_SQL",
    "CREATE_SITE_FINANCIAL_SUMMARY_SQL",
    "SCHEMA_STATEMENTS",
    "create_schema",
]
