"""Dues API Routes

Read-only reporting endpoints backed by the due/aging aggregator.
"""

from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.use_cases.ledger import (
    AgingResponseDTO,
    DueCustomersResponseDTO,
    DueSummaryResponseDTO,
    GetAgingBuckets,
    GetDueSummary,
    ListDueCustomers,
)
from src.adapter.repositories.customer_repository import SqlAlchemyCustomerRepository
from src.adapter.repositories.ledger_entry_repository import SqlAlchemyLedgerEntryRepository
from src.depends import get_session
from src.api.error import ClientError

router = APIRouter(tags=["Dues"])


@router.get("/customers/{customer_id}/dues", response_model=DueSummaryResponseDTO)
async def get_due_summary(customer_id: int, session: AsyncSession = Depends(get_session)):
    """
    Due figures for one customer.

    Credits pay down the oldest debits first; `overdue_amount` is what
    remains of debits whose due date has passed.
    """
    use_case = GetDueSummary(SqlAlchemyCustomerRepository(session), SqlAlchemyLedgerEntryRepository(session))
    result = await use_case.execute(customer_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/customers/{customer_id}/aging", response_model=AgingResponseDTO)
async def get_aging(customer_id: int, session: AsyncSession = Depends(get_session)):
    use_case = GetAgingBuckets(SqlAlchemyCustomerRepository(session), SqlAlchemyLedgerEntryRepository(session))
    result = await use_case.execute(customer_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/dues", response_model=DueCustomersResponseDTO)
async def list_due_customers(session: AsyncSession = Depends(get_session)):
    """Active customers that owe money, largest overdue first"""
    use_case = ListDueCustomers(SqlAlchemyCustomerRepository(session), SqlAlchemyLedgerEntryRepository(session))
    result = await use_case.execute()

    if result.is_err():
        raise ClientError(result.error)

    return result.value
