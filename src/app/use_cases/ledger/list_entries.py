"""
List Ledger Entries Use Case

Retrieves a customer's ledger with pagination, newest first.
"""
from datetime import datetime
from typing import Optional

from src.libs.result import Result, Return, Error
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.ledger_entry_repository import LedgerEntryRepository
from .dtos import LedgerEntryResponseDTO, ListEntriesResponseDTO


class ListLedgerEntries:
    """
    Use case: View a customer's ledger

    Entries are ordered by (created_at, sequence) DESC. Repeated calls
    without intervening writes return identical pages.
    """

    def __init__(self, customer_repo: CustomerRepository, entry_repo: LedgerEntryRepository):
        self.customer_repo = customer_repo
        self.entry_repo = entry_repo

    async def execute(
        self,
        customer_id: int,
        limit: int = 50,
        offset: int = 0,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ) -> Result[ListEntriesResponseDTO]:
        customer = await self.customer_repo.get_by_id(customer_id)
        if not customer:
            return Return.err(
                Error(
                    code="CUSTOMER_NOT_FOUND",
                    message=f"Customer {customer_id} not found",
                )
            )

        entries = await self.entry_repo.list_by_customer(
            customer_id, since=since, until=until, limit=limit, offset=offset
        )
        total = await self.entry_repo.count_by_customer(customer_id)

        return Return.ok(
            ListEntriesResponseDTO(
                entries=[LedgerEntryResponseDTO.from_entry(entry) for entry in entries],
                total=total,
                limit=limit,
                offset=offset,
            )
        )
