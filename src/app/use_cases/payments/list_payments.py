"""ListPayments Use Case"""

from src.libs.result import Result, Return, Error
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.payment_repository import PaymentRepository
from .dtos import ListPaymentsResponseDTO, PaymentResponseDTO

MAX_PAGE_SIZE = 200


class ListPayments:
    """Payments of one customer, newest first, paginated"""

    def __init__(self, customer_repo: CustomerRepository, payment_repo: PaymentRepository):
        self.customer_repo = customer_repo
        self.payment_repo = payment_repo

    async def execute(self, customer_id: int, limit: int = 50, offset: int = 0) -> Result[ListPaymentsResponseDTO]:
        if limit < 1 or limit > MAX_PAGE_SIZE or offset < 0:
            return Return.err(
                Error(
                    code="INVALID_PAGINATION",
                    message=f"limit must be 1-{MAX_PAGE_SIZE} and offset non-negative",
                    reason=f"limit={limit}, offset={offset}",
                )
            )

        try:
            customer = await self.customer_repo.get_by_id(customer_id)
            if not customer:
                return Return.err(
                    Error(
                        code="CUSTOMER_NOT_FOUND",
                        message=f"Customer {customer_id} not found",
                    )
                )

            payments, total = await self.payment_repo.get_by_customer_id(customer_id, limit=limit, offset=offset)
            return Return.ok(
                ListPaymentsResponseDTO(
                    payments=[PaymentResponseDTO.from_payment(p) for p in payments],
                    total=total,
                    limit=limit,
                    offset=offset,
                )
            )
        except Exception as e:
            return Return.err(
                Error(
                    code="LIST_PAYMENTS_FAILED",
                    message="Failed to list payments",
                    reason=str(e),
                )
            )
