"""ListDueCustomers Use Case

Every active customer who owes something, most overdue first.
"""

import logging
from datetime import date
from typing import Callable

from src.libs.result import Result, Return
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.ledger_entry_repository import LedgerEntryRepository
from src.app.services import due_aggregator
from .dtos import DueCustomerDTO, DueCustomersResponseDTO

logger = logging.getLogger(__name__)


class ListDueCustomers:
    def __init__(
        self,
        customer_repo: CustomerRepository,
        entry_repo: LedgerEntryRepository,
        clock: Callable[[], date] = date.today,
    ):
        self.customer_repo = customer_repo
        self.entry_repo = entry_repo
        self.clock = clock

    async def execute(self) -> Result[DueCustomersResponseDTO]:
        today = self.clock()
        rows = []

        for customer in await self.customer_repo.get_all(active_only=True):
            entries = [entry async for entry in self.entry_repo.iter_by_customer(customer.id)]
            summary = due_aggregator.due_summary(entries, today)
            if summary.total_due <= 0:
                continue
            rows.append(
                DueCustomerDTO(
                    customer_id=customer.id,
                    name=customer.name,
                    phone=customer.phone,
                    total_due=summary.total_due,
                    overdue_amount=summary.overdue_amount,
                    due_today=summary.due_today,
                )
            )

        rows.sort(key=lambda row: (row.overdue_amount, row.total_due), reverse=True)
        logger.info(f"{len(rows)} customers with outstanding dues")

        return Return.ok(
            DueCustomersResponseDTO(
                customers=rows,
                total_due=sum((row.total_due for row in rows), due_aggregator.ZERO),
                total_overdue=sum((row.overdue_amount for row in rows), due_aggregator.ZERO),
            )
        )
