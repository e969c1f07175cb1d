"""Per-customer critical sections

One asyncio.Lock per customer id, created on demand and dropped once no
coroutine holds or waits for it. Different customers never share a lock.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict

from src.domain.errors import ConcurrencyConflict

logger = logging.getLogger(__name__)


class CustomerLockRegistry:
    """
    In-process single-writer guard keyed by customer id

    Constructed once by the process bootstrap and shared by every balance
    engine instance. Acquisition is bounded by ``timeout`` seconds.
    """

    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout
        self._locks: Dict[int, asyncio.Lock] = {}
        self._users: Dict[int, int] = {}

    @asynccontextmanager
    async def hold(self, customer_id: int) -> AsyncIterator[None]:
        lock = self._locks.get(customer_id)
        if lock is None:
            lock = self._locks[customer_id] = asyncio.Lock()
        self._users[customer_id] = self._users.get(customer_id, 0) + 1

        try:
            try:
                await asyncio.wait_for(lock.acquire(), timeout=self.timeout)
            except asyncio.TimeoutError:
                logger.warning(
                    f"Timed out after {self.timeout}s waiting for ledger lock of customer {customer_id}"
                )
                raise ConcurrencyConflict(
                    f"Customer {customer_id} is busy, try again",
                    reason=f"lock wait exceeded {self.timeout}s",
                )
            try:
                yield
            finally:
                lock.release()
        finally:
            self._users[customer_id] -= 1
            if self._users[customer_id] == 0:
                del self._users[customer_id]
                del self._locks[customer_id]

    def is_locked(self, customer_id: int) -> bool:
        lock = self._locks.get(customer_id)
        return lock is not None and lock.locked()
