from .customer_repository import CustomerRepository
from .ledger_entry_repository import LedgerEntryRepository
from .payment_repository import PaymentRepository

__all__ = [
    "CustomerRepository",
    "LedgerEntryRepository",
    "PaymentRepository",
]
