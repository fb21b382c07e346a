"""Domain models for sites and their ledger records."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from src.domain.constants import TransactionKind, TransactionStatus, TransferKind


@dataclass(frozen=True)
class Site:
    """Construction site owning one financial summary.

    Attributes:
        id: Site identifier.
        name: Display name of the site.
        location: Free-form location label.
        supervisor_id: Identifier of the supervising user.
        is_completed: Whether the site has been closed.
        created_at: Creation timestamp (UTC).
    """

    id: str
    name: str
    location: str | None
    supervisor_id: str | None
    is_completed: bool
    created_at: datetime


@dataclass(frozen=True)
class SiteTransaction:
    """Funds-received, expense, advance or invoice record of one site."""

    id: str
    site_id: str
    kind: TransactionKind
    amount: Decimal
    status: TransactionStatus
    created_by: str | None
    created_at: datetime
    occurred_on: date
    metadata: dict[str, Any] = field(default_factory=dict)
    deleted_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.deleted_at is None


@dataclass(frozen=True)
class SupervisorTransfer:
    """Funds moved from one supervisor's site to another's.

    The payer site posts the amount as advance paid to supervisor and the
    receiver site posts it as funds received from supervisor.
    """

    id: str
    payer_supervisor_id: str | None
    receiver_supervisor_id: str | None
    payer_site_id: str
    receiver_site_id: str
    amount: Decimal
    transfer_kind: TransferKind
    occurred_on: date
    created_by: str | None
    created_at: datetime
    deleted_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.deleted_at is None

    @property
    def site_ids(self) -> tuple[str, str]:
        """Return both affected sites in ascending lock order."""
        return tuple(sorted((self.payer_site_id, self.receiver_site_id)))


__all__ = ["Site", "SiteTransaction", "SupervisorTransfer"]
