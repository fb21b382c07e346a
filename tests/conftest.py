"""Shared fixtures building a ledger on a temporary SQLite database."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from src.application.site_ledger import SiteLedger
from src.infrastructure.change_notifier import InMemoryChangeNotifier
from src.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from src.infrastructure.schema import create_schema
from src.infrastructure.site_locks import ThreadingSiteLocks
from src.infrastructure.site_repository import SqlAlchemySiteRepository
from src.infrastructure.summary_repository import SqlAlchemySummaryRepository
from src.infrastructure.transaction_store import SqlAlchemyTransactionStore


def make_ledger(
    db_port,
    notifier=None,
    store=None,
    logger=None,
    **kwargs,
) -> SiteLedger:
    """Build a SiteLedger over the SQLAlchemy adapters with quiet loggers."""
    return SiteLedger(
        db_port,
        SqlAlchemySiteRepository(),
        store or SqlAlchemyTransactionStore(),
        SqlAlchemySummaryRepository(),
        ThreadingSiteLocks(),
        notifier or InMemoryChangeNotifier(logger=MagicMock()),
        logger=logger or MagicMock(),
        audit_logger=MagicMock(),
        **kwargs,
    )


@pytest.fixture
def db_port(tmp_path: Path) -> SqlAlchemyDatabaseEngineAdapter:
    adapter = SqlAlchemyDatabaseEngineAdapter(f"sqlite:///{tmp_path / 'ledger.db'}")
    create_schema(adapter.get_ledger_engine())
    yield adapter
    adapter.get_ledger_engine().dispose()


@pytest.fixture
def notifier() -> InMemoryChangeNotifier:
    return InMemoryChangeNotifier(max_queue_size=10, logger=MagicMock())


@pytest.fixture
def ledger(db_port, notifier) -> SiteLedger:
    return make_ledger(db_port, notifier=notifier)


@pytest.fixture
def ledger_factory():
    return make_ledger


@pytest.fixture
def other_db_port(tmp_path: Path) -> SqlAlchemyDatabaseEngineAdapter:
    adapter = SqlAlchemyDatabaseEngineAdapter(f"sqlite:///{tmp_path / 'other.db'}")
    create_schema(adapter.get_ledger_engine())
    yield adapter
    adapter.get_ledger_engine().dispose()
