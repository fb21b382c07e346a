"""Typed errors raised by the site ledger."""


class LedgerError(Exception):
    """Base class for site ledger failures."""


class ValidationError(LedgerError):
    """A request was rejected before anything was written."""


class NotFoundError(LedgerError):
    """The referenced site, transaction or transfer does not exist."""


class RecomputeError(LedgerError):
    """Rebuilding a site summary failed on the repair path.

    Attributes:
        site_id: Site whose summary could not be rebuilt.
    """

    def __init__(self, site_id: str, message: str) -> None:
        super().__init__(message)
        self.site_id = site_id


__all__ = [
    "LedgerError",
    "ValidationError",
    "NotFoundError",
    "RecomputeError",
]
