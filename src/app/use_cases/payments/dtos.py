"""Data Transfer Objects for Payment Use Cases"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field

from src.domain.payment import MessageChannel, Payment, PaymentMethod


class RecordPaymentCommandDTO(BaseModel):
    """
    Command DTO for recording a payment

    Used as input to RecordPayment use case.
    """

    customer_id: int = Field(
        ...,
        description="Customer identifier"
    )

    amount: Decimal = Field(
        ...,
        description="Amount received (minimum 0.01)"
    )

    method: PaymentMethod = Field(
        ...,
        description="cash, bank or online"
    )

    reference: Optional[str] = Field(
        default=None,
        max_length=50,
        description="Bank/transaction reference"
    )

    notes: Optional[str] = Field(
        default=None,
        max_length=500,
    )

    via: Optional[MessageChannel] = Field(
        default=None,
        description="Channel for the payment confirmation (sms or whatsapp)"
    )

    received_date: Optional[datetime] = Field(
        default=None,
        description="When the money was received (defaults to now)"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": 42,
                "amount": "400.00",
                "method": "cash",
                "reference": "TXN-9981",
                "via": "sms"
            }
        }


class VoidPaymentCommandDTO(BaseModel):
    """
    Command DTO for voiding a payment

    The caller must already have checked that the requester is an admin.
    """

    payment_id: int = Field(..., description="Payment identifier")

    reason: Optional[str] = Field(
        default=None,
        max_length=200,
        description="Why the payment is voided"
    )


class PaymentResponseDTO(BaseModel):
    """Response DTO for payment operations"""

    id: int
    customer_id: int
    amount: Decimal
    method: str
    status: str
    receipt_number: str
    reference: Optional[str] = None
    notes: Optional[str] = None
    via: Optional[str] = None
    received_date: datetime
    ledger_entry_id: Optional[int] = None
    void_entry_id: Optional[int] = None
    void_reason: Optional[str] = None
    voided_at: Optional[datetime] = None
    balance_after: Optional[Decimal] = Field(
        default=None,
        description="Customer balance after the ledger posting of this operation"
    )
    created_at: datetime

    @classmethod
    def from_payment(cls, payment: Payment, balance_after: Optional[Decimal] = None) -> "PaymentResponseDTO":
        return cls(
            id=payment.id,
            customer_id=payment.customer_id,
            amount=payment.amount,
            method=payment.method.value,
            status=payment.status.value,
            receipt_number=payment.receipt_number,
            reference=payment.reference,
            notes=payment.notes,
            via=payment.via.value if payment.via else None,
            received_date=payment.received_date,
            ledger_entry_id=payment.ledger_entry_id,
            void_entry_id=payment.void_entry_id,
            void_reason=payment.void_reason,
            voided_at=payment.voided_at,
            balance_after=balance_after,
            created_at=payment.created_at,
        )


class ListPaymentsResponseDTO(BaseModel):
    payments: List[PaymentResponseDTO]
    total: int
    limit: int
    offset: int


class ReceiptDTO(BaseModel):
    """Printable receipt for a payment"""

    receipt_number: str
    date: datetime
    customer_name: str
    customer_phone: str
    amount: Decimal
    method: str
    method_label: str
    reference: Optional[str] = None
    notes: Optional[str] = None
    status: str
