"""DeactivateCustomer Use Case

Soft delete: the customer and its ledger stay, but the account is hidden
from due lists and reminders.
"""

import logging

from src.libs.result import Result, Return, Error
from src.app.repositories.customer_repository import CustomerRepository
from src.app.services.unit_of_work import UnitOfWork
from .dtos import CustomerResponseDTO

logger = logging.getLogger(__name__)


class DeactivateCustomer:
    def __init__(self, uow: UnitOfWork, customer_repo: CustomerRepository):
        self.uow = uow
        self.customer_repo = customer_repo

    async def execute(self, customer_id: int) -> Result[CustomerResponseDTO]:
        try:
            async with self.uow:
                customer = await self.customer_repo.get_by_id(customer_id, for_update=True)
                if not customer:
                    return Return.err(
                        Error(
                            code="CUSTOMER_NOT_FOUND",
                            message=f"Customer {customer_id} not found",
                        )
                    )
                if customer.is_active:
                    customer = await self.customer_repo.deactivate(customer_id)
                    await self.uow.commit()
                    logger.info(f"Deactivated customer {customer_id}, balance={customer.current_balance}")
        except Exception as e:
            return Return.err(
                Error(
                    code="DEACTIVATE_CUSTOMER_FAILED",
                    message="Failed to deactivate customer",
                    reason=str(e),
                )
            )

        return Return.ok(CustomerResponseDTO.from_customer(customer))
