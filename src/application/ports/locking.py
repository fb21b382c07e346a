"""Port for per-site mutual exclusion."""

from collections.abc import Iterable
from contextlib import AbstractContextManager
from typing import Protocol


class SiteLockPort(Protocol):
    """Port serializing operations that touch the same sites."""

    def hold(self, site_ids: Iterable[str]) -> AbstractContextManager[None]:
        """Acquire the locks of all given sites in ascending order."""


__all__ = ["SiteLockPort"]
