"""Ledger Entry Repository Interface

Append-only store of ledger entries. The store never computes balances; it
persists whatever the balance engine hands it.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import AsyncIterator, List, Optional
from src.domain.ledger_entry import LedgerEntry


class LedgerEntryRepository(ABC):
    """
    Repository interface for LedgerEntry persistence

    Ordering is always (created_at, sequence); sequence breaks ties between
    entries created within the same clock tick.
    """

    @abstractmethod
    async def append(self, entry: LedgerEntry) -> LedgerEntry:
        """
        Append an entry, assigning the next per-customer sequence number

        Args:
            entry: LedgerEntry with balance already computed

        Returns:
            Stored LedgerEntry with id and sequence

        Raises:
            IntegrityError: if another writer took the same sequence number
        """
        pass

    @abstractmethod
    async def get_by_id(self, entry_id: int, for_update: bool = False) -> Optional[LedgerEntry]:
        pass

    @abstractmethod
    async def list_by_customer(
        self,
        customer_id: int,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        limit: Optional[int] = 50,
        offset: int = 0,
        newest_first: bool = True,
    ) -> List[LedgerEntry]:
        """
        List entries for a customer

        Args:
            customer_id: Customer ID
            since: Only entries created at or after this instant
            until: Only entries created at or before this instant
            limit: Page size (None = no limit)
            offset: Entries to skip
            newest_first: Sort direction (default newest first)

        Returns:
            Entries ordered by (created_at, sequence)
        """
        pass

    @abstractmethod
    def iter_by_customer(self, customer_id: int, page_size: int = 200) -> AsyncIterator[LedgerEntry]:
        """
        Lazily iterate every entry of a customer, oldest first

        Each call returns a fresh iterator that pages through the store.
        """
        pass

    @abstractmethod
    async def count_by_customer(self, customer_id: int) -> int:
        pass

    @abstractmethod
    async def latest_balance(self, customer_id: int) -> Decimal:
        """
        Balance snapshot of the customer's most recent entry

        Returns:
            Decimal balance, or 0 when the customer has no entries
        """
        pass

    @abstractmethod
    async def mark_voided(self, entry: LedgerEntry) -> LedgerEntry:
        pass
