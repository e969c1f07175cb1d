"""Request schemas for Ledger and Payment API

Pydantic models for validating incoming HTTP requests. The customer comes
from the URL path, so it is not part of the bodies.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Optional
from pydantic import BaseModel, Field

from src.domain.ledger_entry import EntryType, MetadataValue
from src.domain.payment import MessageChannel, PaymentMethod


class PostEntryRequestSchema(BaseModel):
    """
    Request schema for posting a ledger entry

    Used for POST /customers/{customer_id}/entries endpoint.
    """

    description: str = Field(..., min_length=1, max_length=200)
    debit: Decimal = Field(default=Decimal("0"), ge=0)
    credit: Decimal = Field(default=Decimal("0"), ge=0)
    entry_type: EntryType = Field(default=EntryType.PURCHASE)
    reference: Optional[str] = Field(default=None, max_length=50)
    due_date: Optional[date] = None
    metadata: Optional[Dict[str, MetadataValue]] = None


class VoidRequestSchema(BaseModel):
    reason: Optional[str] = Field(default=None, max_length=200)


class RecordPaymentRequestSchema(BaseModel):
    """
    Request schema for recording a payment

    Used for POST /customers/{customer_id}/payments endpoint.
    """

    amount: Decimal = Field(..., gt=0, description="Amount received (minimum 0.01)")
    method: PaymentMethod
    reference: Optional[str] = Field(default=None, max_length=50)
    notes: Optional[str] = Field(default=None, max_length=500)
    via: Optional[MessageChannel] = None
    received_date: Optional[datetime] = None
