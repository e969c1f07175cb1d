"""ReconcileLedger Use Case

Checks every customer's stored balance against its ledger to detect
discrepancies.
"""

import logging
import time
from datetime import datetime
from decimal import Decimal
from typing import Optional
from src.libs.result import Result, Return, Error
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.ledger_entry_repository import LedgerEntryRepository
from .dtos import LedgerDiscrepancyDTO, ReconciliationResultDTO

logger = logging.getLogger(__name__)


class ReconcileLedger:
    """
    Use Case: Reconcile customer balances against ledger entries

    Business Rules:
    1. current_balance must equal the balance of the latest entry (0 if none)
    2. Every entry's balance must equal previous balance + debit - credit
    3. Does NOT modify any data (read-only reconciliation)

    Flow:
    1. Get all customers
    2. For each customer:
       a. Walk the entries oldest first, counting broken links
       b. Compare current_balance with the latest entry's balance
       c. If either check fails, record a discrepancy
    3. Return reconciliation result with all discrepancies
    """

    def __init__(
        self,
        customer_repo: CustomerRepository,
        entry_repo: LedgerEntryRepository,
    ):
        self.customer_repo = customer_repo
        self.entry_repo = entry_repo

    async def execute(self) -> Result[ReconciliationResultDTO]:
        """
        Execute ledger reconciliation

        Returns:
            Result[ReconciliationResultDTO]: Reconciliation result with any discrepancies
        """
        start_time = time.time()
        reconciliation_time = datetime.utcnow()

        try:
            logger.info("Starting ledger reconciliation")

            customers = await self.customer_repo.get_all()
            total_customers = len(customers)

            logger.info(f"Found {total_customers} customers to reconcile")

            discrepancies: list[LedgerDiscrepancyDTO] = []

            for customer in customers:
                ledger_balance, broken_links = await self._walk_chain(customer.id)

                if customer.current_balance != ledger_balance or broken_links:
                    discrepancy_amount = customer.current_balance - ledger_balance
                    discrepancies.append(
                        LedgerDiscrepancyDTO(
                            customer_id=customer.id,
                            customer_name=customer.name,
                            recorded_balance=customer.current_balance,
                            ledger_balance=ledger_balance,
                            discrepancy=discrepancy_amount,
                            broken_links=broken_links,
                        )
                    )

                    logger.warning(
                        f"Discrepancy found for customer {customer.id} ({customer.name}): "
                        f"recorded_balance={customer.current_balance}, "
                        f"ledger_balance={ledger_balance}, "
                        f"discrepancy={discrepancy_amount}, "
                        f"broken_links={broken_links}"
                    )

            execution_time_ms = int((time.time() - start_time) * 1000)

            response = ReconciliationResultDTO(
                total_customers_checked=total_customers,
                discrepancies_found=len(discrepancies),
                discrepancies=discrepancies,
                reconciliation_time=reconciliation_time,
                execution_time_ms=execution_time_ms,
            )

            if discrepancies:
                logger.warning(
                    f"Reconciliation complete. Found {len(discrepancies)} discrepancies "
                    f"out of {total_customers} customers in {execution_time_ms}ms"
                )
            else:
                logger.info(
                    f"Reconciliation complete. All {total_customers} customers balanced "
                    f"in {execution_time_ms}ms"
                )

            return Return.ok(response)

        except Exception as e:
            logger.error(f"Ledger reconciliation failed: {e}")
            return Return.err(
                Error(
                    code="RECONCILIATION_FAILED",
                    message="Failed to reconcile ledger",
                    reason=str(e),
                )
            )

    async def _walk_chain(self, customer_id: int) -> tuple[Decimal, int]:
        previous = Decimal("0")
        last: Optional[Decimal] = None
        broken = 0
        async for entry in self.entry_repo.iter_by_customer(customer_id):
            if entry.balance != previous + entry.debit - entry.credit:
                broken += 1
            previous = entry.balance
            last = entry.balance
        return (last if last is not None else Decimal("0")), broken
