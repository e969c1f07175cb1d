from .customer_repository import SqlAlchemyCustomerRepository
from .ledger_entry_repository import SqlAlchemyLedgerEntryRepository
from .payment_repository import SqlAlchemyPaymentRepository

__all__ = [
    "SqlAlchemyCustomerRepository",
    "SqlAlchemyLedgerEntryRepository",
    "SqlAlchemyPaymentRepository",
]
