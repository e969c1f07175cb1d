from .unit_of_work import UnitOfWork
from .notification_service import NotificationService, NotificationDispatcher, TemplateType
from .customer_locks import CustomerLockRegistry
from .balance_engine import BalanceEngine, EntryPosting

__all__ = [
    "UnitOfWork",
    "NotificationService",
    "NotificationDispatcher",
    "TemplateType",
    "CustomerLockRegistry",
    "BalanceEngine",
    "EntryPosting",
]
