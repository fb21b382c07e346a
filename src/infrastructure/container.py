"""Composition root for wiring infrastructure adapters."""

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.notifier import ChangeNotifierPort
from src.application.site_ledger import SiteLedger
from src.infrastructure.change_notifier import InMemoryChangeNotifier
from src.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from src.infrastructure.logging.logger import get_app_logger, get_usage_logger
from src.infrastructure.settings import LedgerSettings
from src.infrastructure.site_locks import ThreadingSiteLocks
from src.infrastructure.site_repository import SqlAlchemySiteRepository
from src.infrastructure.summary_repository import SqlAlchemySummaryRepository
from src.infrastructure.transaction_store import SqlAlchemyTransactionStore


def build_database_adapter(db_url: str | None = None) -> DatabaseEnginePort:
    """Return the database adapter instance."""
    return SqlAlchemyDatabaseEngineAdapter(db_url)


def build_change_notifier(
    settings: LedgerSettings | None = None,
) -> ChangeNotifierPort:
    """Return an in-process notifier sized from the settings."""
    resolved = settings or LedgerSettings.from_env()
    return InMemoryChangeNotifier(
        max_queue_size=resolved.notifier_queue_size,
        logger=get_app_logger(),
    )


def build_site_ledger(
    db_port: DatabaseEnginePort | None = None,
    settings: LedgerSettings | None = None,
    notifier: ChangeNotifierPort | None = None,
) -> SiteLedger:
    """Return a ledger facade wired to the SQLAlchemy adapters.

    Args:
        db_port: Optional database adapter; defaults to ``LEDGER_DB_URL``.
        settings: Optional settings; defaults to the environment.
        notifier: Optional notifier shared with other ledger instances.

    Returns:
        SiteLedger: Facade ready to serve requests.
    """
    resolved_db = db_port or build_database_adapter()
    resolved_settings = settings or LedgerSettings.from_env()
    return SiteLedger(
        resolved_db,
        SqlAlchemySiteRepository(),
        SqlAlchemyTransactionStore(),
        SqlAlchemySummaryRepository(),
        ThreadingSiteLocks(),
        notifier or build_change_notifier(resolved_settings),
        counted_statuses=resolved_settings.counted_statuses,
        logger=get_app_logger(),
        audit_logger=get_usage_logger(),
    )


__all__ = [
    "build_database_adapter",
    "build_change_notifier",
    "build_site_ledger",
]
