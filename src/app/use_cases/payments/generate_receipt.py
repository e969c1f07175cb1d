"""GenerateReceipt Use Case"""

from src.libs.result import Result, Return, Error
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.payment_repository import PaymentRepository
from .dtos import ReceiptDTO


class GenerateReceipt:
    """Build the printable receipt of a payment, looked up by receipt number"""

    def __init__(self, customer_repo: CustomerRepository, payment_repo: PaymentRepository):
        self.customer_repo = customer_repo
        self.payment_repo = payment_repo

    async def execute(self, receipt_number: str) -> Result[ReceiptDTO]:
        try:
            payment = await self.payment_repo.get_by_receipt_number(receipt_number)
            if not payment:
                return Return.err(
                    Error(
                        code="PAYMENT_NOT_FOUND",
                        message=f"No payment with receipt number {receipt_number}",
                    )
                )

            customer = await self.customer_repo.get_by_id(payment.customer_id)
            if not customer:
                return Return.err(
                    Error(
                        code="CUSTOMER_NOT_FOUND",
                        message=f"Customer {payment.customer_id} not found",
                    )
                )

            return Return.ok(
                ReceiptDTO(
                    receipt_number=payment.receipt_number,
                    date=payment.received_date,
                    customer_name=customer.name,
                    customer_phone=customer.phone,
                    amount=payment.amount,
                    method=payment.method.value,
                    method_label=payment.method.label,
                    reference=payment.reference,
                    notes=payment.notes,
                    status=payment.status.value,
                )
            )
        except Exception as e:
            return Return.err(
                Error(
                    code="GENERATE_RECEIPT_FAILED",
                    message="Failed to generate receipt",
                    reason=str(e),
                )
            )
