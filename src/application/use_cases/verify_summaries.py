"""Audit stored summaries against a from-scratch derivation."""

from collections.abc import Iterable
from typing import List

from src.application.ports.ledger_store import (
    SiteRepositoryPort,
    SummaryRepositoryPort,
)
from src.application.use_cases.recompute_site import LedgerAggregator
from src.application.use_cases.unit_of_work import LedgerUnitOfWork
from src.domain.errors import NotFoundError
from src.domain.models import SiteFinancialSummary, SummaryDrift
from src.infrastructure.logging.logger import get_app_logger


def summary_drift(
    derived: SiteFinancialSummary,
    stored: SiteFinancialSummary | None,
) -> SummaryDrift | None:
    """Compare a derived summary with the stored row.

    Args:
        derived: Figures recomputed from the active records.
        stored: Row currently cached for the site, if any.

    Returns:
        SummaryDrift | None: Non-zero differences, or None when they match.
    """
    if stored is None:
        deltas = {
            name: value
            for name, value in derived.figures().items()
            if value != 0
        }
        return SummaryDrift(site_id=derived.site_id, deltas=deltas, missing=True)
    stored_figures = stored.figures()
    deltas = {}
    for name, value in derived.figures().items():
        delta = value - stored_figures[name]
        if delta != 0:
            deltas[name] = delta
    if not deltas:
        return None
    return SummaryDrift(site_id=derived.site_id, deltas=deltas)


class VerifySummariesUseCase:
    """Report every site whose cached summary disagrees with its records.

    Nothing is written; repairs go through ``RecomputeSiteUseCase``.
    """

    def __init__(
        self,
        unit_of_work: LedgerUnitOfWork,
        aggregator: LedgerAggregator,
        sites: SiteRepositoryPort,
        summaries: SummaryRepositoryPort,
        logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            unit_of_work: Factory of ledger connections.
            aggregator: Aggregator deriving fresh summaries.
            sites: Port listing site records.
            summaries: Port reading the summary rows.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._unit_of_work = unit_of_work
        self._aggregator = aggregator
        self._sites = sites
        self._summaries = summaries
        self._logger = logger or get_app_logger()

    def execute(self, site_ids: Iterable[str] | None = None) -> List[SummaryDrift]:
        """Compare stored and derived figures of the given or all sites.

        Args:
            site_ids: Optional subset of sites to audit.

        Returns:
            List[SummaryDrift]: One entry per disagreeing site.

        Raises:
            NotFoundError: If a requested site does not exist.
        """
        drifts = []
        with self._unit_of_work.read() as conn:
            targets = (
                self._sites.fetch_site_ids(conn)
                if site_ids is None
                else sorted(set(site_ids))
            )
            for site_id in targets:
                if site_ids is not None and (
                    self._sites.fetch_site(conn, site_id) is None
                ):
                    raise NotFoundError(f"Unknown site: {site_id}")
                derived = self._aggregator.derive(conn, site_id)
                stored = self._summaries.fetch_summary(conn, site_id)
                drift = summary_drift(derived, stored)
                if drift is None:
                    continue
                self._logger.warning(
                    f"Summary drift for site {site_id}: "
                    f"missing={drift.missing} deltas={drift.deltas}"
                )
                drifts.append(drift)
        self._logger.info(
            f"Verified {len(targets)} summaries, {len(drifts)} drifted"
        )
        return drifts


__all__ = ["summary_drift", "VerifySummariesUseCase"]
