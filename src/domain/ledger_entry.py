"""Ledger Entry Domain Entity

Append-only debit/credit postings per customer. Each entry stores the
running balance after it was applied:

    balance[i] = balance[i-1] + debit[i] - credit[i]

Entries are never deleted and never edited, except that ``voided`` may flip
from False to True once. A void appends a compensating entry that points
back at the original through ``reverses_entry_id``.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional, Union
from sqlmodel import Field, Column, Index
from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from src.domain.base import BaseModel, IdType
from src.domain.payment import PaymentMethod

# Structured metadata: string keys, primitive values only
MetadataValue = Union[str, int, float, bool, None]
EntryMetadata = Dict[str, MetadataValue]


class EntryType(str, Enum):
    PURCHASE = "purchase"
    PAYMENT = "payment"
    ADJUSTMENT = "adjustment"
    RETURN = "return"


class LedgerEntry(BaseModel, table=True):
    """
    Ledger Entry - one debit or credit posting against a customer

    Domain Rules:
    - Exactly one of debit/credit is positive, the other is zero
    - sequence is a per-customer insertion counter starting at 1
    - balance is computed by the balance engine, never by the store
    - voided entries keep their stored balance; the reversal carries the
      compensating effect
    """

    __tablename__ = "ledger_entries"
    __table_args__ = (
        CheckConstraint('debit >= 0', name='debit_non_negative'),
        CheckConstraint('credit >= 0', name='credit_non_negative'),
        UniqueConstraint('customer_id', 'sequence', name='uq_ledger_entries_customer_sequence'),
        Index('ix_ledger_entries_customer_created', 'customer_id', 'created_at', 'sequence'),
        Index('ix_ledger_entries_customer_due', 'customer_id', 'due_date'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
    )

    customer_id: int = Field(
        sa_column=Column(IdType, ForeignKey("customers.id"), nullable=False, index=True),
    )

    sequence: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False),
        description="Per-customer insertion order (1-based)"
    )

    description: str = Field(sa_column=Column(String(200), nullable=False))

    debit: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
    )

    credit: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
    )

    balance: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Running balance after this entry"
    )

    entry_type: EntryType = Field(default=EntryType.PURCHASE)

    payment_method: Optional[PaymentMethod] = Field(default=None)

    reference: Optional[str] = Field(default=None, sa_column=Column(String(50), nullable=True))

    due_date: Optional[date] = Field(default=None, sa_column=Column(Date, nullable=True))

    voided: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, default=False),
    )

    reverses_entry_id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, ForeignKey("ledger_entries.id"), nullable=True),
    )

    entry_metadata: Optional[EntryMetadata] = Field(
        default=None,
        sa_column=Column("metadata", JSON, nullable=True),
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def is_reversal(self) -> bool:
        return self.reverses_entry_id is not None

    @property
    def net_change(self) -> Decimal:
        """Effect of this entry on the amount owed"""
        return self.debit - self.credit
