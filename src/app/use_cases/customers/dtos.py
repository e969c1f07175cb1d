"""Data Transfer Objects for Customer Use Cases"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field

from src.domain.customer import Customer


class CreateCustomerCommandDTO(BaseModel):
    """
    Command DTO for creating a customer

    Phone numbers are normalized (spaces, dashes and brackets removed) and
    must then be E.164.
    """

    name: str = Field(..., min_length=1, max_length=100)

    phone: str = Field(
        ...,
        description="Phone number, E.164 after normalization"
    )

    email: Optional[str] = Field(default=None, max_length=255)

    address: Optional[str] = Field(default=None, max_length=200)

    credit_limit: Decimal = Field(
        default=Decimal("0.00"),
        description="Advisory credit limit (0 = unlimited)"
    )

    default_due_period: int = Field(
        default=30,
        ge=0,
        le=365,
        description="Days until a purchase falls due"
    )

    sms_enabled: bool = Field(default=True)

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Asha Traders",
                "phone": "+919812345678",
                "credit_limit": "5000.00",
                "default_due_period": 30
            }
        }


class CustomerResponseDTO(BaseModel):
    id: int
    name: str
    phone: str
    email: Optional[str] = None
    address: Optional[str] = None
    credit_limit: Decimal
    default_due_period: int
    sms_enabled: bool
    current_balance: Decimal
    total_purchases: Decimal
    total_payments: Decimal
    available_credit: Decimal
    is_active: bool
    last_activity: datetime
    created_at: datetime

    @classmethod
    def from_customer(cls, customer: Customer) -> "CustomerResponseDTO":
        return cls(
            id=customer.id,
            name=customer.name,
            phone=customer.phone,
            email=customer.email,
            address=customer.address,
            credit_limit=customer.credit_limit,
            default_due_period=customer.default_due_period,
            sms_enabled=customer.sms_enabled,
            current_balance=customer.current_balance,
            total_purchases=customer.total_purchases,
            total_payments=customer.total_payments,
            available_credit=customer.available_credit,
            is_active=customer.is_active,
            last_activity=customer.last_activity,
            created_at=customer.created_at,
        )
