"""SQLAlchemy implementation of LedgerEntryRepository

Append-only storage of ledger entries. Sequence numbers are allocated as
max(sequence) + 1 per customer; the (customer_id, sequence) unique
constraint turns a lost race into an IntegrityError the balance engine
retries.
"""

from datetime import datetime
from decimal import Decimal
from typing import AsyncIterator, List, Optional
from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.ledger_entry_repository import LedgerEntryRepository
from src.domain.ledger_entry import LedgerEntry


class SqlAlchemyLedgerEntryRepository(LedgerEntryRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def append(self, entry: LedgerEntry) -> LedgerEntry:
        """
        Append a new entry with the next sequence number

        Raises:
            IntegrityError: If the sequence number was taken concurrently
        """
        stmt = select(func.max(LedgerEntry.sequence)).where(LedgerEntry.customer_id == entry.customer_id)
        result = await self.session.execute(stmt)
        last_sequence = result.scalar_one_or_none()

        entry.sequence = (last_sequence or 0) + 1
        self.session.add(entry)
        await self.session.flush()
        await self.session.refresh(entry)
        return entry

    async def get_by_id(self, entry_id: int, for_update: bool = False) -> Optional[LedgerEntry]:
        stmt = select(LedgerEntry).where(LedgerEntry.id == entry_id)

        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_customer(
        self,
        customer_id: int,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        limit: Optional[int] = 50,
        offset: int = 0,
        newest_first: bool = True,
    ) -> List[LedgerEntry]:
        stmt = select(LedgerEntry).where(LedgerEntry.customer_id == customer_id)

        if since is not None:
            stmt = stmt.where(LedgerEntry.created_at >= since)
        if until is not None:
            stmt = stmt.where(LedgerEntry.created_at <= until)

        if newest_first:
            stmt = stmt.order_by(LedgerEntry.created_at.desc(), LedgerEntry.sequence.desc())
        else:
            stmt = stmt.order_by(LedgerEntry.created_at, LedgerEntry.sequence)

        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def iter_by_customer(self, customer_id: int, page_size: int = 200) -> AsyncIterator[LedgerEntry]:
        # Keyset paging on sequence keeps memory flat for long ledgers
        last_sequence = 0
        while True:
            stmt = (
                select(LedgerEntry)
                .where(LedgerEntry.customer_id == customer_id, LedgerEntry.sequence > last_sequence)
                .order_by(LedgerEntry.sequence)
                .limit(page_size)
            )
            result = await self.session.execute(stmt)
            page = list(result.scalars().all())

            for entry in page:
                yield entry

            if len(page) < page_size:
                return
            last_sequence = page[-1].sequence

    async def count_by_customer(self, customer_id: int) -> int:
        stmt = select(func.count()).select_from(LedgerEntry).where(LedgerEntry.customer_id == customer_id)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def latest_balance(self, customer_id: int) -> Decimal:
        stmt = (
            select(LedgerEntry.balance)
            .where(LedgerEntry.customer_id == customer_id)
            .order_by(LedgerEntry.sequence.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        balance = result.scalar_one_or_none()
        return balance if balance is not None else Decimal("0.00")

    async def mark_voided(self, entry: LedgerEntry) -> LedgerEntry:
        entry.voided = True
        self.session.add(entry)
        await self.session.flush()
        return entry
