"""Get Balance Use Case

Retrieves a customer's current balance and credit headroom.
"""

from src.libs.result import Result, Return, Error
from src.app.repositories.customer_repository import CustomerRepository
from .dtos import BalanceResponseDTO


class GetBalance:
    """
    Get Balance Use Case

    Read-only operation; the balance is the denormalized copy kept in step
    with the latest ledger entry by the balance engine.
    """

    def __init__(self, customer_repo: CustomerRepository):
        self.customer_repo = customer_repo

    async def execute(self, customer_id: int) -> Result[BalanceResponseDTO]:
        customer = await self.customer_repo.get_by_id(customer_id)

        if not customer:
            return Return.err(
                Error(
                    code="CUSTOMER_NOT_FOUND",
                    message=f"Customer {customer_id} not found",
                )
            )

        return Return.ok(
            BalanceResponseDTO(
                customer_id=customer.id,
                current_balance=customer.current_balance,
                credit_limit=customer.credit_limit,
                available_credit=customer.available_credit,
                last_activity=customer.last_activity,
            )
        )
