"""In-process site locks acquired in a fixed global order."""

import threading
from collections.abc import Iterable, Iterator
from contextlib import ExitStack, contextmanager

from src.application.ports.locking import SiteLockPort


class _SiteLock:
    """Re-entrant lock plus the number of callers holding or awaiting it."""

    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.users = 0


class ThreadingSiteLocks(SiteLockPort):
    """One re-entrant lock per site, always taken in ascending site order.

    Two operations touching the same pair of sites in opposite directions
    request the locks in the same order, so they cannot deadlock. An entry
    lives only while some caller holds or waits for it, so ids of deleted
    or unknown sites do not accumulate.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, _SiteLock] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    def _checkout(self, site_id: str) -> _SiteLock:
        with self._guard:
            entry = self._locks.get(site_id)
            if entry is None:
                entry = _SiteLock()
                self._locks[site_id] = entry
            entry.users += 1
            return entry

    def _checkin(self, site_id: str, entry: _SiteLock) -> None:
        with self._guard:
            entry.users -= 1
            if entry.users == 0:
                del self._locks[site_id]

    @contextmanager
    def hold(self, site_ids: Iterable[str]) -> Iterator[None]:
        ordered = sorted(set(site_ids))
        with ExitStack() as stack:
            for site_id in ordered:
                entry = self._checkout(site_id)
                stack.callback(self._checkin, site_id, entry)
                entry.lock.acquire()
                stack.callback(entry.lock.release)
            yield


__all__ = ["ThreadingSiteLocks"]
