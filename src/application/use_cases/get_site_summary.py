"""Use cases reading the cached site summaries."""

from typing import List

from src.application.ports.ledger_store import (
    SiteRepositoryPort,
    SummaryRepositoryPort,
)
from src.application.use_cases.unit_of_work import LedgerUnitOfWork
from src.domain.errors import NotFoundError
from src.domain.models import SiteFinancialSummary


class GetSiteSummaryUseCase:
    """Fetch the latest committed summary of one site."""

    def __init__(
        self,
        unit_of_work: LedgerUnitOfWork,
        sites: SiteRepositoryPort,
        summaries: SummaryRepositoryPort,
    ) -> None:
        """Initialize the use case with its required dependencies."""
        self._unit_of_work = unit_of_work
        self._sites = sites
        self._summaries = summaries

    def execute(self, site_id: str) -> SiteFinancialSummary:
        """Return the stored summary of the site.

        A site without a stored row (created before summaries existed and
        never backfilled) reads as zero figures at revision 0.

        Raises:
            NotFoundError: If the site does not exist.
        """
        with self._unit_of_work.read() as conn:
            summary = self._summaries.fetch_summary(conn, site_id)
            if summary is not None:
                return summary
            if self._sites.fetch_site(conn, site_id) is None:
                raise NotFoundError(f"Unknown site: {site_id}")
        return SiteFinancialSummary(site_id=site_id)


class ListSiteSummariesUseCase:
    """Fetch every stored summary ordered by site."""

    def __init__(
        self,
        unit_of_work: LedgerUnitOfWork,
        summaries: SummaryRepositoryPort,
    ) -> None:
        """Initialize the use case with its required dependencies."""
        self._unit_of_work = unit_of_work
        self._summaries = summaries

    def execute(self) -> List[SiteFinancialSummary]:
        with self._unit_of_work.read() as conn:
            return self._summaries.fetch_summaries(conn)


__all__ = ["GetSiteSummaryUseCase", "ListSiteSummariesUseCase"]
