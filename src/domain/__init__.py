from .base import BaseModel, IdType
from .customer import Customer
from .ledger_entry import LedgerEntry, EntryType, EntryMetadata
from .payment import Payment, PaymentMethod, PaymentStatus, MessageChannel

__all__ = [
    "BaseModel",
    "IdType",
    "Customer",
    "LedgerEntry",
    "EntryType",
    "EntryMetadata",
    "Payment",
    "PaymentMethod",
    "PaymentStatus",
    "MessageChannel",
]
