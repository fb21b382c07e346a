"""Tests for infrastructure settings."""

from unittest.mock import MagicMock

from src.domain.constants import DEFAULT_COUNTED_STATUSES
from src.infrastructure import settings as settings_module
from src.infrastructure.settings import LedgerSettings


def _quiet(monkeypatch) -> MagicMock:
    logger = MagicMock()
    monkeypatch.setattr(settings_module, "get_app_logger", lambda: logger)
    monkeypatch.setattr(settings_module.dotenv, "load_dotenv", lambda: None)
    return logger


def test_from_env_defaults(monkeypatch) -> None:
    """Without variables every status counts and queues hold 100 events."""
    _quiet(monkeypatch)
    monkeypatch.delenv("LEDGER_COUNTED_STATUSES", raising=False)
    monkeypatch.delenv("LEDGER_NOTIFIER_QUEUE_SIZE", raising=False)

    settings = LedgerSettings.from_env()

    assert settings.counted_statuses == DEFAULT_COUNTED_STATUSES
    assert settings.notifier_queue_size == 100


def test_from_env_parses_status_list(monkeypatch) -> None:
    """Status lists should be trimmed, lowercased and filtered."""
    logger = _quiet(monkeypatch)
    monkeypatch.setenv("LEDGER_COUNTED_STATUSES", " Approved, bogus ,pending")
    monkeypatch.setenv("LEDGER_NOTIFIER_QUEUE_SIZE", "5")

    settings = LedgerSettings.from_env()

    assert settings.counted_statuses == frozenset({"approved", "pending"})
    assert settings.notifier_queue_size == 5
    logger.warning.assert_called_once()


def test_from_env_falls_back_on_invalid_values(monkeypatch) -> None:
    """Unusable values should fall back to the defaults with warnings."""
    logger = _quiet(monkeypatch)
    monkeypatch.setenv("LEDGER_COUNTED_STATUSES", "bogus")
    monkeypatch.setenv("LEDGER_NOTIFIER_QUEUE_SIZE", "many")

    settings = LedgerSettings.from_env()

    assert settings.counted_statuses == DEFAULT_COUNTED_STATUSES
    assert settings.notifier_queue_size == 100
    assert logger.warning.call_count == 3


def test_from_env_loads_dotenv_before_reading(monkeypatch) -> None:
    """Values only provided through .env should reach the settings."""
    _quiet(monkeypatch)
    monkeypatch.delenv("LEDGER_COUNTED_STATUSES", raising=False)
    monkeypatch.delenv("LEDGER_NOTIFIER_QUEUE_SIZE", raising=False)

    def _fake_load_dotenv() -> None:
        monkeypatch.setenv("LEDGER_COUNTED_STATUSES", "approved")
        monkeypatch.setenv("LEDGER_NOTIFIER_QUEUE_SIZE", "7")

    monkeypatch.setattr(settings_module.dotenv, "load_dotenv", _fake_load_dotenv)

    settings = LedgerSettings.from_env()

    assert settings.counted_statuses == frozenset({"approved"})
    assert settings.notifier_queue_size == 7
