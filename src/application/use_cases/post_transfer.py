"""Dual-entry supervisor transfers.

A transfer is stored once and posted twice: the payer site counts it as an
advance paid to a supervisor, the receiver site as funds received from a
supervisor. Both recomputes share the transaction that stores the transfer.
"""

from collections.abc import Callable
from datetime import date, datetime
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from src.application.ports.ledger_store import (
    SiteRepositoryPort,
    TransactionStorePort,
)
from src.application.use_cases.record_transaction import new_record_id
from src.application.use_cases.unit_of_work import LedgerUnitOfWork
from src.domain.errors import NotFoundError, ValidationError
from src.domain.models import SupervisorTransfer
from src.domain.services.validation import parse_transfer_kind, validate_amount
from src.infrastructure.logging.logger import get_app_logger, get_usage_logger
from src.utils.utils import parse_date, utc_now


class PostTransferUseCase:
    """Move funds from one supervisor's site to another's."""

    def __init__(
        self,
        unit_of_work: LedgerUnitOfWork,
        sites: SiteRepositoryPort,
        store: TransactionStorePort,
        logger=None,
        audit_logger=None,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_record_id,
    ) -> None:
        """Initialize the use case.

        Args:
            unit_of_work: Factory of atomic ledger sessions.
            sites: Port reading site records.
            store: Port writing transfer records.
            logger: Optional logger compatible with logging.Logger-like API.
            audit_logger: Optional logger receiving the mutation audit trail.
            clock: Callable returning the creation timestamp.
            id_factory: Callable returning new record identifiers.
        """
        self._unit_of_work = unit_of_work
        self._sites = sites
        self._store = store
        self._logger = logger or get_app_logger()
        self._audit_logger = audit_logger or get_usage_logger()
        self._clock = clock
        self._id_factory = id_factory

    def execute(
        self,
        payer_site_id: str,
        receiver_site_id: str,
        amount: Any,
        transfer_kind: str,
        *,
        payer_supervisor_id: str | None = None,
        receiver_supervisor_id: str | None = None,
        created_by: str | None = None,
        occurred_on: date | str | None = None,
    ) -> str:
        """Store the transfer and recompute both sites atomically.

        Args:
            payer_site_id: Site paying the funds out.
            receiver_site_id: Site receiving the funds.
            amount: Positive amount with at most two decimals.
            transfer_kind: Which party entered the transfer
                (advance_paid or funds_received).
            payer_supervisor_id: Defaults to the payer site's supervisor.
            receiver_supervisor_id: Defaults to the receiver site's supervisor.
            created_by: Identifier of the user entering the transfer.
            occurred_on: Business date; defaults to today (UTC).

        Returns:
            str: Identifier of the new transfer.

        Raises:
            ValidationError: If the sites are equal or unknown, or the amount
                or kind is invalid. Nothing is written in that case.
        """
        if payer_site_id == receiver_site_id:
            raise ValidationError("Payer and receiver sites must differ")
        parsed_amount = validate_amount(amount)
        parsed_kind = parse_transfer_kind(transfer_kind)
        now = self._clock()
        try:
            business_date = parse_date(occurred_on) or now.date()
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc

        transfer_id = self._id_factory()
        site_ids = [payer_site_id, receiver_site_id]
        try:
            with self._unit_of_work.mutate(site_ids) as session:
                payer = self._sites.fetch_site(session.conn, payer_site_id)
                if payer is None:
                    raise ValidationError(f"Unknown payer site: {payer_site_id}")
                receiver = self._sites.fetch_site(session.conn, receiver_site_id)
                if receiver is None:
                    raise ValidationError(
                        f"Unknown receiver site: {receiver_site_id}"
                    )
                transfer = SupervisorTransfer(
                    id=transfer_id,
                    payer_supervisor_id=payer_supervisor_id or payer.supervisor_id,
                    receiver_supervisor_id=(
                        receiver_supervisor_id or receiver.supervisor_id
                    ),
                    payer_site_id=payer_site_id,
                    receiver_site_id=receiver_site_id,
                    amount=parsed_amount,
                    transfer_kind=parsed_kind,
                    occurred_on=business_date,
                    created_by=created_by,
                    created_at=now,
                )
                self._store.insert_transfer(session.conn, transfer)
                session.recompute(site_ids)
        except SQLAlchemyError as exc:
            self._logger.error(
                f"Failed to post transfer {payer_site_id}->{receiver_site_id}: "
                f"{exc}"
            )
            raise

        self._audit_logger.info(
            f"transfer {transfer_id} {payer_site_id}->{receiver_site_id} "
            f"amount={parsed_amount} kind={parsed_kind.value} by={created_by}"
        )
        return transfer_id


class DeleteTransferUseCase:
    """Reverse both postings of a transfer."""

    def __init__(
        self,
        unit_of_work: LedgerUnitOfWork,
        store: TransactionStorePort,
        logger=None,
        audit_logger=None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._unit_of_work = unit_of_work
        self._store = store
        self._logger = logger or get_app_logger()
        self._audit_logger = audit_logger or get_usage_logger()
        self._clock = clock

    def execute(self, transfer_id: str, *, deleted_by: str | None = None) -> None:
        """Soft-delete the transfer and recompute both sites.

        Raises:
            NotFoundError: If the transfer is unknown or already deleted.
        """
        with self._unit_of_work.read() as conn:
            existing = self._store.fetch_transfer(conn, transfer_id)
        if existing is None or not existing.is_active:
            raise NotFoundError(f"Unknown transfer: {transfer_id}")

        try:
            with self._unit_of_work.mutate(existing.site_ids) as session:
                deleted = self._store.mark_transfer_deleted(
                    session.conn,
                    transfer_id,
                    self._clock(),
                )
                if not deleted:
                    raise NotFoundError(f"Unknown transfer: {transfer_id}")
                session.recompute(existing.site_ids)
        except SQLAlchemyError as exc:
            self._logger.error(f"Failed to delete transfer {transfer_id}: {exc}")
            raise

        self._audit_logger.info(
            f"deleted transfer {transfer_id} "
            f"{existing.payer_site_id}->{existing.receiver_site_id} "
            f"amount={existing.amount} by={deleted_by}"
        )


__all__ = ["PostTransferUseCase", "DeleteTransferUseCase"]
