"""Tests for the infrastructure.db module."""

import pytest

from src.infrastructure import db as db_module


def test_get_env_var_reads_environment(monkeypatch):
    """_get_env_var should load .env and return the requested value."""
    monkeypatch.setattr(db_module.dotenv, "load_dotenv", lambda: None)
    monkeypatch.setenv("LEDGER_DB_URL", "postgresql://example")

    assert db_module._get_env_var("LEDGER_DB_URL") == "postgresql://example"


def test_get_env_var_raises_when_missing(monkeypatch):
    """Missing env vars should raise a RuntimeError."""
    monkeypatch.setattr(db_module.dotenv, "load_dotenv", lambda: None)
    monkeypatch.delenv("LEDGER_DB_URL", raising=False)

    with pytest.raises(RuntimeError):
        db_module._get_env_var("LEDGER_DB_URL")


def test_create_engine_passes_pool_configuration(monkeypatch):
    """_create_engine should configure QueuePool with health checks."""
    captured = {}

    def fake_create_engine(db_url, **kwargs):
        captured["db_url"] = db_url
        captured["kwargs"] = kwargs
        return "engine"

    monkeypatch.setattr(db_module, "create_engine", fake_create_engine)

    engine = db_module._create_engine("postgresql://ledger")

    assert engine == "engine"
    assert captured["db_url"] == "postgresql://ledger"
    assert captured["kwargs"]["poolclass"] is db_module.QueuePool
    assert captured["kwargs"]["pool_size"] == 5
    assert captured["kwargs"]["max_overflow"] == 5
    assert captured["kwargs"]["pool_pre_ping"] is True
    assert captured["kwargs"]["future"] is True


def test_sqlite_engine_enforces_foreign_keys(tmp_path):
    """SQLite connections should have foreign keys switched on."""
    engine = db_module._create_engine(f"sqlite:///{tmp_path / 'fk.db'}")

    with engine.connect() as conn:
        enabled = conn.exec_driver_sql("PRAGMA foreign_keys").scalar()

    assert enabled == 1
    engine.dispose()


def test_get_ledger_engine_caches_engine(monkeypatch):
    """get_ledger_engine should memoize the created engine."""
    monkeypatch.setattr(db_module, "_ledger_engine", None)
    created = []

    def fake_create_engine(url):
        created.append(url)
        return f"engine:{url}"

    monkeypatch.setattr(db_module, "_create_engine", fake_create_engine)
    monkeypatch.setattr(db_module.dotenv, "load_dotenv", lambda: None)
    monkeypatch.setenv("LEDGER_DB_URL", "postgresql://ledger")

    engine_one = db_module.get_ledger_engine()
    engine_two = db_module.get_ledger_engine()

    assert engine_one is engine_two
    assert engine_one == "engine:postgresql://ledger"
    assert created == ["postgresql://ledger"]


def test_adapter_returns_underlying_engine(monkeypatch):
    """SqlAlchemyDatabaseEngineAdapter should proxy the global helper."""
    monkeypatch.setattr(db_module, "get_ledger_engine", lambda: "ledger_engine")

    adapter = db_module.SqlAlchemyDatabaseEngineAdapter()

    assert adapter.get_ledger_engine() == "ledger_engine"


def test_adapter_with_url_builds_its_own_engine(monkeypatch):
    """An explicit URL should bypass the process-wide engine."""
    monkeypatch.setattr(
        db_module,
        "_create_engine",
        lambda url: f"engine:{url}",
    )
    monkeypatch.setattr(db_module, "get_ledger_engine", lambda: "global")

    adapter = db_module.SqlAlchemyDatabaseEngineAdapter("sqlite:///x.db")

    assert adapter.get_ledger_engine() == "engine:sqlite:///x.db"
