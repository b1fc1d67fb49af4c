"""
Per-date locks for ledger read-modify-write cycles.

Every mutation of a date's ledger runs under that date's lock. Several dates
are always acquired in ascending order, so finalize (day N, then N+1) cannot
deadlock against another finalize or a plain mutation.
"""

import asyncio
import weakref
from collections.abc import AsyncIterator
from contextlib import AsyncExitStack, asynccontextmanager
from datetime import date


class DateLockRegistry:
    """Process-wide map of calendar date -> asyncio.Lock.

    Locks are held weakly and disappear once no coroutine references them.
    """

    def __init__(self) -> None:
        self._locks: weakref.WeakValueDictionary[date, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def lock_for(self, ledger_date: date) -> asyncio.Lock:
        lock = self._locks.get(ledger_date)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[ledger_date] = lock
        return lock

    @asynccontextmanager
    async def hold(self, *dates: date) -> AsyncIterator[None]:
        """Hold the locks of all given dates, acquired in ascending order."""
        async with AsyncExitStack() as stack:
            for ledger_date in sorted(set(dates)):
                await stack.enter_async_context(self.lock_for(ledger_date))
            yield

    def __len__(self) -> int:
        return len(self._locks)


_registry: DateLockRegistry | None = None


def get_lock_registry() -> DateLockRegistry:
    """Get the process-wide lock registry."""
    global _registry
    if _registry is None:
        _registry = DateLockRegistry()
    return _registry
