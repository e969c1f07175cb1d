"""Background workers for the credit ledger service"""
from .ledger_reconciler import LedgerReconcilerWorker
from .due_reminder import DueReminderWorker

__all__ = ["LedgerReconcilerWorker", "DueReminderWorker"]
