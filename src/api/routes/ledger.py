"""Ledger API Routes

FastAPI routes for posting, listing and voiding ledger entries.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.schemas.ledger_request import PostEntryRequestSchema, VoidRequestSchema
from src.app.use_cases.ledger import (
    LedgerEntryResponseDTO,
    ListEntriesResponseDTO,
    ListLedgerEntries,
    PostEntryCommandDTO,
    PostLedgerEntry,
    VoidEntryCommandDTO,
    VoidLedgerEntry,
)
from src.app.services.customer_locks import CustomerLockRegistry
from src.adapter.repositories.customer_repository import SqlAlchemyCustomerRepository
from src.adapter.repositories.ledger_entry_repository import SqlAlchemyLedgerEntryRepository
from src.adapter.repositories.payment_repository import SqlAlchemyPaymentRepository
from src.depends import build_balance_engine, get_customer_locks, get_session
from src.api.error import ClientError

router = APIRouter(tags=["Ledger"])


@router.post(
    "/customers/{customer_id}/entries",
    response_model=LedgerEntryResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {
            "description": "Invalid entry",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INVALID_ENTRY",
                            "message": "Cannot have both debit and credit in the same entry"
                        }
                    }
                }
            }
        },
        404: {"description": "Customer not found"},
        409: {"description": "Concurrent update, retry the request"},
        503: {"description": "Ledger store failed; outcome uncertain"},
    }
)
async def post_entry(
    customer_id: int,
    request: PostEntryRequestSchema,
    session: AsyncSession = Depends(get_session),
    locks: CustomerLockRegistry = Depends(get_customer_locks),
):
    """
    Append a debit (purchase) or credit entry to a customer's ledger.

    Exactly one of `debit` / `credit` must be positive. The entry's
    `balance` is the customer's balance after the posting.

    **Example request:**
    ```json
    {
      "description": "Groceries",
      "debit": "1000.00",
      "due_date": "2024-02-14"
    }
    ```
    """
    command = PostEntryCommandDTO(customer_id=customer_id, **request.model_dump())
    result = await PostLedgerEntry(build_balance_engine(session, locks)).execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/customers/{customer_id}/entries", response_model=ListEntriesResponseDTO)
async def list_entries(
    customer_id: int,
    limit: int = Query(50, ge=1, le=200, description="Page size"),
    offset: int = Query(0, ge=0),
    since: Optional[datetime] = Query(None, description="Only entries created at or after"),
    until: Optional[datetime] = Query(None, description="Only entries created at or before"),
    session: AsyncSession = Depends(get_session),
):
    """
    A customer's ledger, newest first.

    Repeated calls without writes in between return the same page.
    """
    use_case = ListLedgerEntries(SqlAlchemyCustomerRepository(session), SqlAlchemyLedgerEntryRepository(session))
    result = await use_case.execute(customer_id, limit=limit, offset=offset, since=since, until=until)

    if result.is_err():
        raise ClientError(result.error, status_code=status.HTTP_404_NOT_FOUND)

    return result.value


@router.post(
    "/entries/{entry_id}/void",
    response_model=LedgerEntryResponseDTO,
    responses={
        409: {
            "description": "Entry already voided",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "ALREADY_VOIDED",
                            "message": "Entry 12 is already voided"
                        }
                    }
                }
            }
        },
        404: {"description": "Entry not found"},
    }
)
async def void_entry(
    entry_id: int,
    request: VoidRequestSchema,
    session: AsyncSession = Depends(get_session),
    locks: CustomerLockRegistry = Depends(get_customer_locks),
):
    """
    Reverse an entry with a compensating entry (admin only).

    The original entry is flagged voided and keeps its balance snapshot;
    the returned reversal carries the new balance.
    """
    command = VoidEntryCommandDTO(entry_id=entry_id, reason=request.reason)
    use_case = VoidLedgerEntry(build_balance_engine(session, locks), SqlAlchemyPaymentRepository(session))
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
