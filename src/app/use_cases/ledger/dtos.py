"""Data Transfer Objects for Ledger Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional, Union
from pydantic import BaseModel, Field

from src.domain.ledger_entry import EntryType, LedgerEntry

MetadataValue = Union[str, int, float, bool, None]


class PostEntryCommandDTO(BaseModel):
    """
    Command DTO for posting a ledger entry

    Exactly one of debit/credit must be positive; the balance engine
    enforces it so both arrive here unchecked.
    """

    customer_id: int = Field(
        ...,
        description="Customer identifier"
    )

    description: str = Field(
        ...,
        description="What the entry is for (1-200 characters)"
    )

    debit: Decimal = Field(
        default=Decimal("0"),
        description="Amount added to what the customer owes"
    )

    credit: Decimal = Field(
        default=Decimal("0"),
        description="Amount taken off what the customer owes"
    )

    entry_type: EntryType = Field(
        default=EntryType.PURCHASE,
        description="purchase, payment, adjustment or return"
    )

    reference: Optional[str] = Field(
        default=None,
        description="External reference (bill number, etc.)"
    )

    due_date: Optional[date] = Field(
        default=None,
        description="When the debit falls due"
    )

    metadata: Optional[Dict[str, MetadataValue]] = Field(
        default=None,
        description="Optional structured metadata (primitive values only)"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": 42,
                "description": "Groceries - bill 1187",
                "debit": "1000.00",
                "credit": "0",
                "entry_type": "purchase",
                "reference": "BILL-1187",
                "due_date": "2024-02-15"
            }
        }


class VoidEntryCommandDTO(BaseModel):
    entry_id: int
    reason: Optional[str] = Field(default=None, max_length=200)


class LedgerEntryResponseDTO(BaseModel):
    """Response DTO for a stored ledger entry"""

    id: int
    customer_id: int
    sequence: int
    description: str
    debit: Decimal
    credit: Decimal
    balance: Decimal = Field(..., description="Running balance after this entry")
    entry_type: str
    payment_method: Optional[str] = None
    reference: Optional[str] = None
    due_date: Optional[date] = None
    voided: bool = False
    reverses_entry_id: Optional[int] = None
    metadata: Optional[Dict[str, MetadataValue]] = None
    created_at: datetime

    @classmethod
    def from_entry(cls, entry: LedgerEntry) -> "LedgerEntryResponseDTO":
        return cls(
            id=entry.id,
            customer_id=entry.customer_id,
            sequence=entry.sequence,
            description=entry.description,
            debit=entry.debit,
            credit=entry.credit,
            balance=entry.balance,
            entry_type=entry.entry_type.value if hasattr(entry.entry_type, "value") else entry.entry_type,
            payment_method=entry.payment_method.value if entry.payment_method else None,
            reference=entry.reference,
            due_date=entry.due_date,
            voided=entry.voided,
            reverses_entry_id=entry.reverses_entry_id,
            metadata=entry.entry_metadata,
            created_at=entry.created_at,
        )


class ListEntriesResponseDTO(BaseModel):
    entries: List[LedgerEntryResponseDTO]
    total: int
    limit: int
    offset: int


class BalanceResponseDTO(BaseModel):
    """
    Response DTO for get balance operation

    Returned by GetBalance use case.
    """

    customer_id: int = Field(
        ...,
        description="Customer identifier"
    )

    current_balance: Decimal = Field(
        ...,
        description="Amount owed after the latest entry (negative = in credit)"
    )

    credit_limit: Decimal = Field(
        ...,
        description="Advisory credit limit (0 = unlimited)"
    )

    available_credit: Decimal = Field(
        ...,
        description="credit_limit minus the amount owed"
    )

    last_activity: datetime = Field(
        ...,
        description="Timestamp of the latest balance movement"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": 42,
                "current_balance": "600.00",
                "credit_limit": "5000.00",
                "available_credit": "4400.00",
                "last_activity": "2024-01-01T00:00:00Z"
            }
        }


class AgingBucketDTO(BaseModel):
    range_label: str
    amount: Decimal


class DueSummaryResponseDTO(BaseModel):
    """Due figures for one customer"""

    customer_id: int
    current_balance: Decimal
    total_due: Decimal = Field(..., description="max(current_balance, 0)")
    overdue_amount: Decimal
    due_today: Decimal
    due_this_week: Decimal
    aging: List[AgingBucketDTO]
    oldest_overdue_date: Optional[date] = None
    next_due_date: Optional[date] = None
    last_activity: Optional[datetime] = None


class AgingResponseDTO(BaseModel):
    customer_id: int
    buckets: List[AgingBucketDTO]
    total_overdue: Decimal


class DueCustomerDTO(BaseModel):
    customer_id: int
    name: str
    phone: str
    total_due: Decimal
    overdue_amount: Decimal
    due_today: Decimal


class DueCustomersResponseDTO(BaseModel):
    customers: List[DueCustomerDTO]
    total_due: Decimal
    total_overdue: Decimal


class LedgerDiscrepancyDTO(BaseModel):
    """A customer whose stored balance disagrees with its ledger"""

    customer_id: int
    customer_name: str
    recorded_balance: Decimal = Field(..., description="customers.current_balance")
    ledger_balance: Decimal = Field(..., description="Balance of the latest entry")
    discrepancy: Decimal = Field(..., description="recorded_balance - ledger_balance")
    broken_links: int = Field(
        default=0,
        description="Entries whose balance does not follow from the previous one"
    )


class ReconciliationResultDTO(BaseModel):
    total_customers_checked: int
    discrepancies_found: int
    discrepancies: List[LedgerDiscrepancyDTO]
    reconciliation_time: datetime
    execution_time_ms: int


class DueReminderResultDTO(BaseModel):
    customers_checked: int
    due_reminders: int
    overdue_notices: int
    execution_time_ms: int
