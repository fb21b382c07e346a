"""Tests for the init_schema_cli adapter."""

from unittest.mock import MagicMock

from sqlalchemy import inspect

from src.adapters import init_schema_cli
from src.infrastructure.db import SqlAlchemyDatabaseEngineAdapter


def test_main_creates_ledger_tables(monkeypatch, tmp_path) -> None:
    """Running the CLI twice should leave the four ledger tables."""
    adapter = SqlAlchemyDatabaseEngineAdapter(f"sqlite:///{tmp_path / 'new.db'}")
    monkeypatch.setattr(init_schema_cli, "build_database_adapter", lambda: adapter)
    monkeypatch.setattr(init_schema_cli, "get_app_logger", lambda: MagicMock())

    init_schema_cli.main()
    init_schema_cli.main()

    tables = set(inspect(adapter.get_ledger_engine()).get_table_names())
    assert {
        "sites",
        "site_transactions",
        "supervisor_transfers",
        "site_financial_summary",
    } <= tables
    adapter.get_ledger_engine().dispose()
