"""Payment API Routes

FastAPI routes for recording, listing, voiding payments and fetching
receipts.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.schemas.ledger_request import RecordPaymentRequestSchema, VoidRequestSchema
from src.app.use_cases.payments import (
    GenerateReceipt,
    ListPayments,
    ListPaymentsResponseDTO,
    PaymentResponseDTO,
    ReceiptDTO,
    RecordPayment,
    RecordPaymentCommandDTO,
    VoidPayment,
    VoidPaymentCommandDTO,
)
from src.app.services.customer_locks import CustomerLockRegistry
from src.app.services.notification_service import NotificationDispatcher
from src.adapter.repositories.customer_repository import SqlAlchemyCustomerRepository
from src.adapter.repositories.payment_repository import SqlAlchemyPaymentRepository
from src.depends import build_balance_engine, get_customer_locks, get_notifier, get_session
from src.api.error import ClientError

router = APIRouter(tags=["Payments"])


@router.post(
    "/customers/{customer_id}/payments",
    response_model=PaymentResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {
            "description": "Invalid amount",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INVALID_AMOUNT",
                            "message": "Amount must be at least 0.01"
                        }
                    }
                }
            }
        },
        404: {"description": "Customer not found"},
        503: {"description": "Ledger store failed; outcome uncertain"},
    }
)
async def record_payment(
    customer_id: int,
    request: RecordPaymentRequestSchema,
    session: AsyncSession = Depends(get_session),
    locks: CustomerLockRegistry = Depends(get_customer_locks),
    notifier: NotificationDispatcher = Depends(get_notifier),
):
    """
    Record a payment received from a customer.

    Posts a credit entry and a completed payment with a fresh receipt
    number in one transaction. A confirmation message is scheduled when
    the customer has SMS enabled.

    **Example request:**
    ```json
    {
      "amount": "400.00",
      "method": "bank",
      "reference": "TXN-9981",
      "via": "whatsapp"
    }
    ```
    """
    use_case = RecordPayment(
        build_balance_engine(session, locks),
        SqlAlchemyCustomerRepository(session),
        SqlAlchemyPaymentRepository(session),
        notifier,
        receipt_max_attempts=ApplicationConfig.RECEIPT_MAX_ATTEMPTS,
    )
    command = RecordPaymentCommandDTO(customer_id=customer_id, **request.model_dump())
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/customers/{customer_id}/payments", response_model=ListPaymentsResponseDTO)
async def list_payments(
    customer_id: int,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_session),
):
    use_case = ListPayments(SqlAlchemyCustomerRepository(session), SqlAlchemyPaymentRepository(session))
    result = await use_case.execute(customer_id, limit=limit, offset=offset)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/payments/{payment_id}/void",
    response_model=PaymentResponseDTO,
    responses={
        409: {"description": "Payment already voided"},
        404: {"description": "Payment not found"},
    }
)
async def void_payment(
    payment_id: int,
    request: VoidRequestSchema,
    session: AsyncSession = Depends(get_session),
    locks: CustomerLockRegistry = Depends(get_customer_locks),
):
    """
    Void a payment (admin only).

    Appends a compensating debit and marks the payment refunded.
    """
    use_case = VoidPayment(build_balance_engine(session, locks), SqlAlchemyPaymentRepository(session))
    result = await use_case.execute(VoidPaymentCommandDTO(payment_id=payment_id, reason=request.reason))

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/receipts/{receipt_number}", response_model=ReceiptDTO)
async def get_receipt(receipt_number: str, session: AsyncSession = Depends(get_session)):
    use_case = GenerateReceipt(SqlAlchemyCustomerRepository(session), SqlAlchemyPaymentRepository(session))
    result = await use_case.execute(receipt_number)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
