"""Ledger domain use cases"""
from .post_entry import PostLedgerEntry
from .void_entry import VoidLedgerEntry
from .list_entries import ListLedgerEntries
from .get_balance import GetBalance
from .get_due_summary import GetDueSummary, GetAgingBuckets
from .list_due_customers import ListDueCustomers
from .reconcile_ledger import ReconcileLedger
from .send_due_reminders import SendDueReminders
from .dtos import (
    PostEntryCommandDTO,
    VoidEntryCommandDTO,
    LedgerEntryResponseDTO,
    ListEntriesResponseDTO,
    BalanceResponseDTO,
    AgingBucketDTO,
    DueSummaryResponseDTO,
    AgingResponseDTO,
    DueCustomerDTO,
    DueCustomersResponseDTO,
    LedgerDiscrepancyDTO,
    ReconciliationResultDTO,
    DueReminderResultDTO,
)

__all__ = [
    "PostLedgerEntry",
    "VoidLedgerEntry",
    "ListLedgerEntries",
    "GetBalance",
    "GetDueSummary",
    "GetAgingBuckets",
    "ListDueCustomers",
    "ReconcileLedger",
    "SendDueReminders",
    "PostEntryCommandDTO",
    "VoidEntryCommandDTO",
    "LedgerEntryResponseDTO",
    "ListEntriesResponseDTO",
    "BalanceResponseDTO",
    "AgingBucketDTO",
    "DueSummaryResponseDTO",
    "AgingResponseDTO",
    "DueCustomerDTO",
    "DueCustomersResponseDTO",
    "LedgerDiscrepancyDTO",
    "ReconciliationResultDTO",
    "DueReminderResultDTO",
]
