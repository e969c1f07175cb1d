"""Payment Domain Entity

A payment received from a customer. Completing a payment posts exactly one
credit ledger entry; voiding it posts exactly one compensating debit entry.
Payments are never deleted.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, ForeignKey, Numeric, String
from src.domain.base import BaseModel, IdType


class PaymentMethod(str, Enum):
    CASH = "cash"
    BANK = "bank"
    ONLINE = "online"

    @property
    def label(self) -> str:
        return PAYMENT_METHOD_LABELS[self]


PAYMENT_METHOD_LABELS = {
    PaymentMethod.CASH: "Cash",
    PaymentMethod.BANK: "Bank Transfer",
    PaymentMethod.ONLINE: "Online Payment",
}


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"  # voided


VOIDED_STATUSES = frozenset({PaymentStatus.FAILED, PaymentStatus.REFUNDED})


class MessageChannel(str, Enum):
    SMS = "sms"
    WHATSAPP = "whatsapp"


class Payment(BaseModel, table=True):
    """
    Payment - money received against a customer's balance

    Domain Rules:
    - amount >= 0.01
    - receipt_number is globally unique
    - ledger_entry_id links the credit posting created on completion
    - void_entry_id links the compensating debit created on void
    - refunded/failed are terminal
    """

    __tablename__ = "payments"
    __table_args__ = (
        CheckConstraint('amount > 0', name='payment_amount_positive'),
        Index('ix_payments_customer_created', 'customer_id', 'created_at'),
        Index('ix_payments_method_status', 'method', 'status'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
    )

    customer_id: int = Field(
        sa_column=Column(IdType, ForeignKey("customers.id"), nullable=False, index=True),
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Amount received (precision: 18,2)"
    )

    method: PaymentMethod

    status: PaymentStatus = Field(default=PaymentStatus.COMPLETED, index=True)

    receipt_number: str = Field(
        sa_column=Column(String(32), nullable=False, unique=True, index=True),
        description="Unique receipt number, e.g. RCP-2401-000042"
    )

    reference: Optional[str] = Field(default=None, sa_column=Column(String(50), nullable=True))

    notes: Optional[str] = Field(default=None, sa_column=Column(String(500), nullable=True))

    via: Optional[MessageChannel] = Field(default=None)

    received_date: datetime = Field(default_factory=datetime.utcnow)

    ledger_entry_id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, ForeignKey("ledger_entries.id"), nullable=True),
    )

    void_entry_id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, ForeignKey("ledger_entries.id"), nullable=True),
    )

    void_reason: Optional[str] = Field(default=None, sa_column=Column(String(200), nullable=True))

    voided_at: Optional[datetime] = Field(default=None)

    created_at: datetime = Field(default_factory=datetime.utcnow)

    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def is_voided(self) -> bool:
        return self.status in VOIDED_STATUSES
