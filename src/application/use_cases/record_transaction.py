"""Use cases writing site transactions.

Each write and the recompute of the affected site run in the same unit of
work, so readers never see one without the other.
"""

import uuid
from collections.abc import Callable, Mapping
from dataclasses import replace
from datetime import date, datetime
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from src.application.ports.ledger_store import (
    SiteRepositoryPort,
    TransactionStorePort,
)
from src.application.use_cases.unit_of_work import LedgerUnitOfWork
from src.domain.constants import TransactionStatus
from src.domain.errors import LedgerError, NotFoundError, ValidationError
from src.domain.models import SiteTransaction
from src.domain.services.validation import (
    normalize_metadata,
    parse_transaction_kind,
    parse_transaction_status,
    validate_amount,
)
from src.infrastructure.logging.logger import get_app_logger, get_usage_logger
from src.utils.utils import parse_date, utc_now


def new_record_id() -> str:
    return str(uuid.uuid4())


class CreateTransactionUseCase:
    """Record a funds-received, expense, advance or invoice entry."""

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
            store: Port writing transaction records.
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
        kind: str,
        site_id: str,
        amount: Any,
        metadata: Mapping[str, Any] | None = None,
        *,
        status: str = "pending",
        created_by: str | None = None,
        occurred_on: date | str | None = None,
    ) -> str:
        """Validate and store a transaction, then recompute its site.

        Args:
            kind: One of expense, advance, funds_received, invoice.
            site_id: Site the transaction belongs to.
            amount: Positive amount with at most two decimals.
            metadata: Optional free-form details (description, purpose...).
            status: Approval status, pending by default.
            created_by: Identifier of the user entering the record.
            occurred_on: Business date; defaults to today (UTC).

        Returns:
            str: Identifier of the new transaction.

        Raises:
            ValidationError: If any input is invalid or the site is unknown.
        """
        parsed_kind = parse_transaction_kind(kind)
        parsed_amount = validate_amount(amount)
        parsed_status = parse_transaction_status(status)
        normalized = normalize_metadata(parsed_kind, metadata)
        now = self._clock()
        try:
            business_date = parse_date(occurred_on) or now.date()
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc

        record = SiteTransaction(
            id=self._id_factory(),
            site_id=site_id,
            kind=parsed_kind,
            amount=parsed_amount,
            status=parsed_status,
            created_by=created_by,
            created_at=now,
            occurred_on=business_date,
            metadata=normalized,
        )
        try:
            with self._unit_of_work.mutate([site_id]) as session:
                if self._sites.fetch_site(session.conn, site_id) is None:
                    raise ValidationError(f"Unknown site: {site_id}")
                self._store.insert_transaction(session.conn, record)
                session.recompute([site_id])
        except SQLAlchemyError as exc:
            self._logger.error(
                f"Failed to record {parsed_kind.value} for site {site_id}: {exc}"
            )
            raise

        self._audit_logger.info(
            f"created {parsed_kind.value} {record.id} site={site_id} "
            f"amount={parsed_amount} by={created_by}"
        )
        return record.id


class DeleteTransactionUseCase:
    """Remove a transaction from its site's active set."""

    def __init__(
        self,
        unit_of_work: LedgerUnitOfWork,
        store: TransactionStorePort,
        logger=None,
        audit_logger=None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the use case.

        Args:
            unit_of_work: Factory of atomic ledger sessions.
            store: Port writing transaction records.
            logger: Optional logger compatible with logging.Logger-like API.
            audit_logger: Optional logger receiving the mutation audit trail.
            clock: Callable returning the deletion timestamp.
        """
        self._unit_of_work = unit_of_work
        self._store = store
        self._logger = logger or get_app_logger()
        self._audit_logger = audit_logger or get_usage_logger()
        self._clock = clock

    def execute(self, transaction_id: str, *, deleted_by: str | None = None) -> None:
        """Soft-delete the transaction and recompute its site.

        Args:
            transaction_id: Transaction to delete.
            deleted_by: Identifier of the user deleting the record.

        Raises:
            NotFoundError: If the transaction is unknown or already deleted.
        """
        with self._unit_of_work.read() as conn:
            existing = self._store.fetch_transaction(conn, transaction_id)
        if existing is None or not existing.is_active:
            raise NotFoundError(f"Unknown transaction: {transaction_id}")

        try:
            with self._unit_of_work.mutate([existing.site_id]) as session:
                deleted = self._store.mark_transaction_deleted(
                    session.conn,
                    transaction_id,
                    self._clock(),
                )
                if not deleted:
                    raise NotFoundError(f"Unknown transaction: {transaction_id}")
                session.recompute([existing.site_id])
        except SQLAlchemyError as exc:
            self._logger.error(
                f"Failed to delete transaction {transaction_id}: {exc}"
            )
            raise

        self._audit_logger.info(
            f"deleted {existing.kind.value} {transaction_id} "
            f"site={existing.site_id} amount={existing.amount} by={deleted_by}"
        )


class UpdateTransactionStatusUseCase:
    """Approve or reject a transaction and refresh its site summary."""

    def __init__(
        self,
        unit_of_work: LedgerUnitOfWork,
        store: TransactionStorePort,
        logger=None,
        audit_logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            unit_of_work: Factory of atomic ledger sessions.
            store: Port writing transaction records.
            logger: Optional logger compatible with logging.Logger-like API.
            audit_logger: Optional logger receiving the mutation audit trail.
        """
        self._unit_of_work = unit_of_work
        self._store = store
        self._logger = logger or get_app_logger()
        self._audit_logger = audit_logger or get_usage_logger()

    def execute(
        self,
        transaction_id: str,
        status: str,
        *,
        changed_by: str | None = None,
    ) -> None:
        """Change the status of an active transaction.

        Args:
            transaction_id: Transaction to update.
            status: New status (pending, approved or rejected).
            changed_by: Identifier of the user changing the status.

        Raises:
            ValidationError: If the status is unknown.
            NotFoundError: If the transaction is unknown or deleted.
        """
        parsed_status = parse_transaction_status(status)
        with self._unit_of_work.read() as conn:
            existing = self._store.fetch_transaction(conn, transaction_id)
        if existing is None or not existing.is_active:
            raise NotFoundError(f"Unknown transaction: {transaction_id}")

        try:
            with self._unit_of_work.mutate([existing.site_id]) as session:
                updated = self._store.update_transaction_status(
                    session.conn,
                    transaction_id,
                    parsed_status,
                )
                if not updated:
                    raise NotFoundError(f"Unknown transaction: {transaction_id}")
                session.recompute([existing.site_id])
        except SQLAlchemyError as exc:
            self._logger.error(
                f"Failed to update status of transaction {transaction_id}: {exc}"
            )
            raise

        self._audit_logger.info(
            f"status {transaction_id} {existing.status.value}->"
            f"{parsed_status.value} by={changed_by}"
        )


class UpdateTransactionUseCase:
    """Edit the amount, date, metadata or site of a transaction.

    Moving a record to another site rebuilds both summaries in the same
    unit of work, with both site locks held in ascending order.
    """

    def __init__(
        self,
        unit_of_work: LedgerUnitOfWork,
        sites: SiteRepositoryPort,
        store: TransactionStorePort,
        logger=None,
        audit_logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            unit_of_work: Factory of atomic ledger sessions.
            sites: Port reading site records.
            store: Port writing transaction records.
            logger: Optional logger compatible with logging.Logger-like API.
            audit_logger: Optional logger receiving the mutation audit trail.
        """
        self._unit_of_work = unit_of_work
        self._sites = sites
        self._store = store
        self._logger = logger or get_app_logger()
        self._audit_logger = audit_logger or get_usage_logger()

    def execute(
        self,
        transaction_id: str,
        *,
        amount: Any = None,
        metadata: Mapping[str, Any] | None = None,
        site_id: str | None = None,
        occurred_on: date | str | None = None,
        changed_by: str | None = None,
    ) -> SiteTransaction:
        """Apply the given changes and recompute every affected site.

        Fields left as None keep their stored value. Metadata keys are
        merged over the stored metadata, so an invoice can move from
        ``payment_status=pending`` to ``paid`` without resending the rest.

        Args:
            transaction_id: Transaction to edit.
            amount: New positive amount with at most two decimals.
            metadata: Metadata keys to add or replace.
            site_id: Site the transaction should belong to.
            occurred_on: New business date.
            changed_by: Identifier of the user editing the record.

        Returns:
            SiteTransaction: The transaction as stored after the edit.

        Raises:
            NotFoundError: If the transaction is unknown or deleted.
            ValidationError: If an input is invalid, the target site is
                unknown, or the transaction is already approved.
        """
        parsed_amount = None if amount is None else validate_amount(amount)
        try:
            business_date = parse_date(occurred_on)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc

        with self._unit_of_work.read() as conn:
            existing = self._store.fetch_transaction(conn, transaction_id)
        if existing is None or not existing.is_active:
            raise NotFoundError(f"Unknown transaction: {transaction_id}")
        target_site = site_id or existing.site_id

        try:
            with self._unit_of_work.mutate(
                {existing.site_id, target_site}
            ) as session:
                current = self._store.fetch_transaction(
                    session.conn, transaction_id
                )
                if current is None or not current.is_active:
                    raise NotFoundError(f"Unknown transaction: {transaction_id}")
                if current.site_id != existing.site_id:
                    raise LedgerError(
                        f"Transaction {transaction_id} moved concurrently"
                    )
                if current.status is TransactionStatus.APPROVED:
                    raise ValidationError(
                        f"Approved transaction cannot be edited: {transaction_id}"
                    )
                if self._sites.fetch_site(session.conn, target_site) is None:
                    raise ValidationError(f"Unknown site: {target_site}")
                merged = dict(current.metadata)
                merged.update(metadata or {})
                updated = replace(
                    current,
                    site_id=target_site,
                    amount=parsed_amount or current.amount,
                    occurred_on=business_date or current.occurred_on,
                    metadata=normalize_metadata(current.kind, merged),
                )
                self._store.update_transaction(session.conn, updated)
                session.recompute({current.site_id, target_site})
        except SQLAlchemyError as exc:
            self._logger.error(
                f"Failed to update transaction {transaction_id}: {exc}"
            )
            raise

        self._audit_logger.info(
            f"updated {updated.kind.value} {transaction_id} "
            f"site={existing.site_id}->{target_site} "
            f"amount={existing.amount}->{updated.amount} by={changed_by}"
        )
        return updated


__all__ = [
    "new_record_id",
    "CreateTransactionUseCase",
    "DeleteTransactionUseCase",
    "UpdateTransactionStatusUseCase",
    "UpdateTransactionUseCase",
]
