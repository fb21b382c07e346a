"""Tests for the verify_summaries_cli adapter."""

from decimal import Decimal
from unittest.mock import MagicMock

from src.adapters import verify_summaries_cli
from src.domain.models import SummaryDrift


def _patch(monkeypatch, drifts) -> MagicMock:
    ledger = MagicMock()
    ledger.verify_summaries.return_value = drifts
    logger = MagicMock()
    monkeypatch.setattr(verify_summaries_cli, "build_site_ledger", lambda: ledger)
    monkeypatch.setattr(verify_summaries_cli, "get_app_logger", lambda: logger)
    return logger


def test_main_reports_consistent_ledger(monkeypatch, capsys) -> None:
    """No drift should print a confirmation and exit with 0."""
    _patch(monkeypatch, [])

    assert verify_summaries_cli.main() == 0
    assert "All site summaries match" in capsys.readouterr().out


def test_main_prints_each_drift(monkeypatch, capsys) -> None:
    """Drifted and missing summaries should be listed."""
    logger = _patch(
        monkeypatch,
        [
            SummaryDrift("A", {"balance": Decimal("-5.00")}),
            SummaryDrift("B", {}, missing=True),
        ],
    )

    assert verify_summaries_cli.main() == 1

    out = capsys.readouterr().out
    assert "A: balance=-5.00" in out
    assert "B: summary missing" in out
    logger.warning.assert_called_once()
