"""Customer Domain Entity

A customer on credit. ``current_balance`` is a denormalized copy of the
balance snapshot on the customer's latest ledger entry.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import Boolean, CheckConstraint, Integer, Numeric, String
from src.domain.base import BaseModel, IdType


class Customer(BaseModel, table=True):
    """
    Customer - account holder whose running balance the ledger tracks

    Domain Rules:
    - Phone is unique and stored in E.164 format
    - Credit limit is non-negative and advisory (0 = no limit)
    - current_balance, total_purchases, total_payments and version are
      written by the balance engine only
    - Customers are soft-deleted through is_active, never removed while
      ledger entries reference them
    """

    __tablename__ = "customers"
    __table_args__ = (
        CheckConstraint('credit_limit >= 0', name='credit_limit_non_negative'),
        CheckConstraint(
            'default_due_period >= 0 AND default_due_period <= 365',
            name='default_due_period_range',
        ),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique customer identifier (auto-increment)"
    )

    name: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="Customer display name"
    )

    phone: str = Field(
        sa_column=Column(String(16), nullable=False, unique=True, index=True),
        description="Phone number in E.164 format (unique)"
    )

    email: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True, unique=True),
    )

    address: Optional[str] = Field(
        default=None,
        sa_column=Column(String(200), nullable=True),
    )

    credit_limit: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
        description="Advisory credit limit (0 = unlimited)"
    )

    default_due_period: int = Field(
        default=30,
        sa_column=Column(Integer, nullable=False, default=30),
        description="Days until a purchase falls due"
    )

    sms_enabled: bool = Field(
        default=True,
        sa_column=Column(Boolean, nullable=False, default=True),
    )

    current_balance: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
        description="Amount owed after the latest ledger entry (negative = in credit)"
    )

    total_purchases: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
    )

    total_payments: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
    )

    version: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Optimistic concurrency counter, bumped on every balance move"
    )

    is_active: bool = Field(
        default=True,
        sa_column=Column(Boolean, nullable=False, default=True, index=True),
    )

    last_activity: datetime = Field(default_factory=datetime.utcnow)

    created_at: datetime = Field(default_factory=datetime.utcnow)

    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def available_credit(self) -> Decimal:
        """Remaining headroom under the credit limit (never below zero owed)"""
        return self.credit_limit - max(self.current_balance, Decimal("0.00"))
