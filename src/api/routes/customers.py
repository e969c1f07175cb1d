"""Customer API Routes

FastAPI routes for opening, reading and deactivating customer accounts.
"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.use_cases.customers import (
    CreateCustomer,
    CreateCustomerCommandDTO,
    CustomerResponseDTO,
    DeactivateCustomer,
    GetCustomer,
)
from src.app.use_cases.ledger import BalanceResponseDTO, GetBalance
from src.app.services.notification_service import NotificationDispatcher
from src.adapter.repositories.customer_repository import SqlAlchemyCustomerRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_notifier, get_session
from src.api.error import ClientError

router = APIRouter(prefix="/customers", tags=["Customers"])


@router.post(
    "",
    response_model=CustomerResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {
            "description": "Phone number already registered",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "DUPLICATE_PHONE",
                            "message": "A customer with phone +919812345678 already exists"
                        }
                    }
                }
            }
        },
        400: {"description": "Invalid phone number or credit limit"},
    }
)
async def create_customer(
    request: CreateCustomerCommandDTO,
    session: AsyncSession = Depends(get_session),
    notifier: NotificationDispatcher = Depends(get_notifier),
):
    """
    Open a credit account.

    The customer starts at a zero balance. When `sms_enabled` is true a
    welcome message is scheduled after the account is saved.
    """
    use_case = CreateCustomer(SqlAlchemyUnitOfWork(session), SqlAlchemyCustomerRepository(session), notifier)
    result = await use_case.execute(request)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/{customer_id}", response_model=CustomerResponseDTO)
async def get_customer(customer_id: int, session: AsyncSession = Depends(get_session)):
    result = await GetCustomer(SqlAlchemyCustomerRepository(session)).execute(customer_id)

    if result.is_err():
        raise ClientError(result.error, status_code=status.HTTP_404_NOT_FOUND)

    return result.value


@router.delete("/{customer_id}", response_model=CustomerResponseDTO)
async def deactivate_customer(customer_id: int, session: AsyncSession = Depends(get_session)):
    """
    Soft-delete a customer.

    The ledger is kept; the customer drops out of due lists and reminders.
    """
    use_case = DeactivateCustomer(SqlAlchemyUnitOfWork(session), SqlAlchemyCustomerRepository(session))
    result = await use_case.execute(customer_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/{customer_id}/balance", response_model=BalanceResponseDTO)
async def get_balance(customer_id: int, session: AsyncSession = Depends(get_session)):
    """
    Current balance, credit limit and available credit.

    **Returns:**
    - 200: Balance retrieved successfully
    - 404: Customer not found
    """
    result = await GetBalance(SqlAlchemyCustomerRepository(session)).execute(customer_id)

    if result.is_err():
        raise ClientError(result.error, status_code=status.HTTP_404_NOT_FOUND)

    return result.value
