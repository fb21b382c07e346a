"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass
import os

import dotenv

from src.domain.constants import DEFAULT_COUNTED_STATUSES, TransactionStatus
from src.infrastructure.logging.logger import get_app_logger


@dataclass(frozen=True)
class LedgerSettings:
    """Settings for ledger aggregation and notifications.

    Attributes:
        counted_statuses: Transaction statuses that count toward summaries.
        notifier_queue_size: Capacity of each change subscription queue.
    """

    counted_statuses: frozenset[str] = DEFAULT_COUNTED_STATUSES
    notifier_queue_size: int = 100

    @classmethod
    def from_env(cls) -> "LedgerSettings":
        """Build settings from environment variables.

        Variables from a local ``.env`` file are loaded first, as the
        database adapter does for ``LEDGER_DB_URL``.

        Returns:
            LedgerSettings: Settings sourced from environment variables.
        """
        dotenv.load_dotenv()
        logger = get_app_logger()
        counted_statuses = cls._parse_statuses(
            os.getenv("LEDGER_COUNTED_STATUSES"),
            logger=logger,
        )
        queue_size = cls._parse_queue_size(
            os.getenv("LEDGER_NOTIFIER_QUEUE_SIZE"),
            logger=logger,
        )
        return cls(
            counted_statuses=counted_statuses,
            notifier_queue_size=queue_size,
        )

    @staticmethod
    def _parse_statuses(raw: str | None, logger) -> frozenset[str]:
        """Parse a comma separated status list.

        Args:
            raw: Raw environment value, e.g. ``"approved,pending"``.
            logger: Logger used for warnings.

        Returns:
            frozenset[str]: Valid statuses, or the default set when the value
            is empty or holds no valid status.
        """
        if not raw or not raw.strip():
            return DEFAULT_COUNTED_STATUSES
        allowed = {status.value for status in TransactionStatus}
        statuses = set()
        for item in raw.split(","):
            value = item.strip().lower()
            if not value:
                continue
            if value not in allowed:
                logger.warning(f"Ignoring unknown transaction status '{value}'")
                continue
            statuses.add(value)
        if not statuses:
            logger.warning(
                "LEDGER_COUNTED_STATUSES has no valid status; using defaults"
            )
            return DEFAULT_COUNTED_STATUSES
        return frozenset(statuses)

    @staticmethod
    def _parse_queue_size(raw: str | None, logger) -> int:
        if not raw:
            return 100
        try:
            size = int(raw)
        except ValueError:
            logger.warning(f"Invalid LEDGER_NOTIFIER_QUEUE_SIZE '{raw}'")
            return 100
        return max(size, 1)


__all__ = ["LedgerSettings"]
