"""Due/Aging Aggregator

Read-only figures derived from a customer's ledger. Credits are allocated
to debits oldest-debt-first: the pool of unvoided credits pays down the
oldest unvoided debits in turn, and whatever remains of a debit is still
owed. Voided entries and the reversals that cancel them are left out of the
allocation entirely.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple

from src.domain import money
from src.domain.ledger_entry import LedgerEntry

ZERO = money.ZERO
DUE_SOON_DAYS = 7

# (label, first day past due, last day past due); None = open ended
AGING_RANGES: Tuple[Tuple[str, int, Optional[int]], ...] = (
    ("0-30", 0, 30),
    ("31-60", 31, 60),
    ("61-90", 61, 90),
    ("90+", 91, None),
)


@dataclass
class OpenDebit:
    """Part of a debit not yet absorbed by credits"""

    entry_id: Optional[int]
    amount: Decimal
    remaining: Decimal
    due_date: Optional[date]
    created_at: Optional[datetime] = None

    def days_past_due(self, today: date) -> Optional[int]:
        if self.due_date is None or self.due_date >= today:
            return None
        return (today - self.due_date).days


@dataclass
class AgingBucket:
    range_label: str
    amount: Decimal = ZERO


@dataclass
class DueSummary:
    current_balance: Decimal = ZERO
    total_due: Decimal = ZERO
    overdue_amount: Decimal = ZERO
    due_today: Decimal = ZERO
    due_this_week: Decimal = ZERO
    aging: List[AgingBucket] = field(default_factory=lambda: empty_aging())
    oldest_overdue_date: Optional[date] = None
    next_due_date: Optional[date] = None
    last_activity: Optional[datetime] = None


def empty_aging() -> List[AgingBucket]:
    return [AgingBucket(range_label=label) for label, _, _ in AGING_RANGES]


def bucket_label(days_past_due: int) -> str:
    for label, low, high in AGING_RANGES:
        if days_past_due >= low and (high is None or days_past_due <= high):
            return label
    return AGING_RANGES[-1][0]


def allocate_fifo(entries: Iterable[LedgerEntry]) -> List[OpenDebit]:
    """
    Allocate unvoided credits against unvoided debits, oldest debt first

    Args:
        entries: The customer's entries, oldest first

    Returns:
        Every unvoided debit with its unabsorbed remainder, oldest first
    """
    debits: List[OpenDebit] = []
    credit_pool = ZERO

    for entry in entries:
        if entry.voided or entry.is_reversal:
            continue
        if entry.debit > 0:
            debits.append(
                OpenDebit(
                    entry_id=entry.id,
                    amount=entry.debit,
                    remaining=entry.debit,
                    due_date=entry.due_date,
                    created_at=entry.created_at,
                )
            )
        elif entry.credit > 0:
            credit_pool += entry.credit

    for debit in debits:
        if credit_pool <= 0:
            break
        applied = min(credit_pool, debit.remaining)
        debit.remaining -= applied
        credit_pool -= applied

    return debits


def aging_buckets(open_debits: Iterable[OpenDebit], today: date) -> List[AgingBucket]:
    buckets = {bucket.range_label: bucket for bucket in empty_aging()}
    for debit in open_debits:
        days = debit.days_past_due(today)
        if debit.remaining <= 0 or days is None:
            continue
        buckets[bucket_label(days)].amount += debit.remaining
    return list(buckets.values())


def due_summary(entries: List[LedgerEntry], today: date) -> DueSummary:
    """
    Compute due figures from a customer's entries (oldest first)

    current_balance is the balance snapshot of the last entry; total_due
    clamps a credit balance to zero.
    """
    if not entries:
        return DueSummary()

    current_balance = entries[-1].balance
    open_debits = allocate_fifo(entries)
    week_end = today + timedelta(days=DUE_SOON_DAYS)

    summary = DueSummary(
        current_balance=current_balance,
        total_due=max(current_balance, ZERO),
        aging=aging_buckets(open_debits, today),
        last_activity=entries[-1].created_at,
    )

    for debit in open_debits:
        if debit.remaining <= 0 or debit.due_date is None:
            continue
        if debit.due_date < today:
            summary.overdue_amount += debit.remaining
            if summary.oldest_overdue_date is None or debit.due_date < summary.oldest_overdue_date:
                summary.oldest_overdue_date = debit.due_date
        else:
            if debit.due_date == today:
                summary.due_today += debit.remaining
            elif debit.due_date <= week_end:
                summary.due_this_week += debit.remaining
            if summary.next_due_date is None or debit.due_date < summary.next_due_date:
                summary.next_due_date = debit.due_date

    return summary
