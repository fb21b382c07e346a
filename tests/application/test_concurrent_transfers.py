"""Concurrency tests for transfers running on several threads."""

from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal


def test_concurrent_opposite_transfers_keep_summaries_consistent(ledger) -> None:
    """Interleaved transfers and expenses should lose no posting."""
    ledger.create_site("Site A", site_id="A")
    ledger.create_site("Site B", site_id="B")
    ledger.create_transaction("funds_received", "A", "1000")
    ledger.create_transaction("funds_received", "B", "1000")

    def work(index: int) -> None:
        if index % 3 == 0:
            ledger.create_transaction("expense", "A" if index % 2 else "B", "1")
        elif index % 2:
            ledger.post_transfer("A", "B", "10", "advance_paid")
        else:
            ledger.post_transfer("B", "A", "7", "funds_received")

    with ThreadPoolExecutor(max_workers=6) as executor:
        list(executor.map(work, range(30)))

    summary_a = ledger.get_summary("A")
    summary_b = ledger.get_summary("B")
    expenses = summary_a.total_expenses + summary_b.total_expenses

    assert ledger.verify_summaries() == []
    assert expenses == Decimal("10.00")
    assert summary_a.balance + summary_b.balance == Decimal("1990.00")
    assert (
        summary_a.advance_paid_to_supervisor
        == summary_b.funds_received_from_supervisor
    )
    assert len(ledger.list_transfers("A")) == 20
