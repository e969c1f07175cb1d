"""Due summary and aging use cases

Both read the customer's full ledger oldest-first and hand it to the
due aggregator; nothing is written.
"""

from datetime import date
from typing import Callable, List

from src.libs.result import Result, Return, Error
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.ledger_entry_repository import LedgerEntryRepository
from src.app.services import due_aggregator
from src.domain.ledger_entry import LedgerEntry
from .dtos import AgingBucketDTO, AgingResponseDTO, DueSummaryResponseDTO


class _DueReport:
    def __init__(
        self,
        customer_repo: CustomerRepository,
        entry_repo: LedgerEntryRepository,
        clock: Callable[[], date] = date.today,
    ):
        self.customer_repo = customer_repo
        self.entry_repo = entry_repo
        self.clock = clock

    async def _load_entries(self, customer_id: int) -> List[LedgerEntry]:
        return [entry async for entry in self.entry_repo.iter_by_customer(customer_id)]

    @staticmethod
    def _not_found(customer_id: int) -> Error:
        return Error(code="CUSTOMER_NOT_FOUND", message=f"Customer {customer_id} not found")


class GetDueSummary(_DueReport):
    """
    Use Case: Due summary for a customer

    total_due = max(current_balance, 0); overdue, due today and due this
    week come from oldest-debt-first allocation of credits.
    """

    async def execute(self, customer_id: int) -> Result[DueSummaryResponseDTO]:
        customer = await self.customer_repo.get_by_id(customer_id)
        if not customer:
            return Return.err(self._not_found(customer_id))

        summary = due_aggregator.due_summary(await self._load_entries(customer_id), self.clock())
        return Return.ok(to_summary_dto(customer_id, summary))


class GetAgingBuckets(_DueReport):
    """Use Case: Overdue amounts bucketed by days past due (0-30, 31-60, 61-90, 90+)"""

    async def execute(self, customer_id: int) -> Result[AgingResponseDTO]:
        customer = await self.customer_repo.get_by_id(customer_id)
        if not customer:
            return Return.err(self._not_found(customer_id))

        open_debits = due_aggregator.allocate_fifo(await self._load_entries(customer_id))
        buckets = due_aggregator.aging_buckets(open_debits, self.clock())
        return Return.ok(
            AgingResponseDTO(
                customer_id=customer_id,
                buckets=[AgingBucketDTO(range_label=b.range_label, amount=b.amount) for b in buckets],
                total_overdue=sum((b.amount for b in buckets), due_aggregator.ZERO),
            )
        )


def to_summary_dto(customer_id: int, summary: due_aggregator.DueSummary) -> DueSummaryResponseDTO:
    return DueSummaryResponseDTO(
        customer_id=customer_id,
        current_balance=summary.current_balance,
        total_due=summary.total_due,
        overdue_amount=summary.overdue_amount,
        due_today=summary.due_today,
        due_this_week=summary.due_this_week,
        aging=[AgingBucketDTO(range_label=b.range_label, amount=b.amount) for b in summary.aging],
        oldest_overdue_date=summary.oldest_overdue_date,
        next_due_date=summary.next_due_date,
        last_activity=summary.last_activity,
    )
