"""Application ports package."""

from .database import DatabaseEnginePort
from .ledger_store import (
    SiteRepositoryPort,
    SummaryRepositoryPort,
    TransactionStorePort,
)
from .locking import SiteLockPort
from .notifier import ChangeNotifierPort, SubscriptionPort

__all__ = [
    "DatabaseEnginePort",
    "SiteRepositoryPort",
    "SummaryRepositoryPort",
    "TransactionStorePort",
    "SiteLockPort",
    "ChangeNotifierPort",
    "SubscriptionPort",
]
