"""Unit tests for ReconcileLedger, SendDueReminders and the due report use cases"""

import pytest
from datetime import date, timedelta
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.services.notification_service import TemplateType
from src.app.use_cases.ledger import (
    GetAgingBuckets,
    GetDueSummary,
    ListDueCustomers,
    ReconcileLedger,
    SendDueReminders,
)
from src.domain.customer import Customer
from src.domain.ledger_entry import LedgerEntry

TODAY = date(2024, 3, 15)


async def _aiter(items):
    for item in items:
        yield item


def entry(sequence, debit="0", credit="0", balance="0", due=None):
    return LedgerEntry(
        id=sequence,
        customer_id=1,
        sequence=sequence,
        description=f"entry {sequence}",
        debit=Decimal(debit),
        credit=Decimal(credit),
        balance=Decimal(balance),
        due_date=due,
    )


@pytest.fixture
def customer():
    return Customer(id=1, name="Asha", phone="+919812345678", current_balance=Decimal("600.00"))


@pytest.fixture
def mock_customer_repo(customer):
    repo = MagicMock()
    repo.get_all = AsyncMock(return_value=[customer])
    repo.get_by_id = AsyncMock(return_value=customer)
    return repo


@pytest.fixture
def mock_entry_repo():
    repo = MagicMock()
    repo.entries = []
    repo.iter_by_customer = MagicMock(side_effect=lambda customer_id, page_size=200: _aiter(repo.entries))
    return repo


@pytest.mark.asyncio
class TestReconcileLedger:
    async def test_balanced_ledger(self, mock_customer_repo, mock_entry_repo):
        mock_entry_repo.entries = [
            entry(1, debit="1000", balance="1000"),
            entry(2, credit="400", balance="600"),
        ]

        result = await ReconcileLedger(mock_customer_repo, mock_entry_repo).execute()

        assert result.is_ok()
        assert result.value.total_customers_checked == 1
        assert result.value.discrepancies_found == 0

    async def test_recorded_balance_differs(self, customer, mock_customer_repo, mock_entry_repo):
        customer.current_balance = Decimal("650.00")
        mock_entry_repo.entries = [
            entry(1, debit="1000", balance="1000"),
            entry(2, credit="400", balance="600"),
        ]

        result = await ReconcileLedger(mock_customer_repo, mock_entry_repo).execute()

        discrepancy = result.value.discrepancies[0]
        assert discrepancy.customer_id == 1
        assert discrepancy.recorded_balance == Decimal("650.00")
        assert discrepancy.ledger_balance == Decimal("600")
        assert discrepancy.discrepancy == Decimal("50.00")
        assert discrepancy.broken_links == 0

    async def test_broken_chain_detected(self, mock_customer_repo, mock_entry_repo):
        mock_entry_repo.entries = [
            entry(1, debit="1000", balance="1000"),
            entry(2, credit="300", balance="600"),
        ]

        result = await ReconcileLedger(mock_customer_repo, mock_entry_repo).execute()

        assert result.value.discrepancies_found == 1
        assert result.value.discrepancies[0].broken_links == 1

    async def test_repository_error(self, mock_customer_repo, mock_entry_repo):
        mock_customer_repo.get_all = AsyncMock(side_effect=RuntimeError("db down"))

        result = await ReconcileLedger(mock_customer_repo, mock_entry_repo).execute()

        assert result.error.code == "RECONCILIATION_FAILED"


@pytest.mark.asyncio
class TestSendDueReminders:
    async def test_overdue_notice(self, mock_customer_repo, mock_entry_repo, mock_notifier):
        mock_entry_repo.entries = [entry(1, debit="500", balance="500", due=TODAY - timedelta(days=3))]

        result = await SendDueReminders(
            mock_customer_repo, mock_entry_repo, mock_notifier, clock=lambda: TODAY
        ).execute()

        assert result.value.overdue_notices == 1
        assert result.value.due_reminders == 0
        customer_id, template_type, context = mock_notifier.dispatch.call_args.args
        assert template_type == TemplateType.OVERDUE_NOTICE
        assert context["due_amount"] == Decimal("500")
        assert context["due_date"] == (TODAY - timedelta(days=3)).isoformat()

    async def test_due_reminder_for_this_week(self, mock_customer_repo, mock_entry_repo, mock_notifier):
        mock_entry_repo.entries = [entry(1, debit="200", balance="200", due=TODAY + timedelta(days=2))]

        result = await SendDueReminders(
            mock_customer_repo, mock_entry_repo, mock_notifier, clock=lambda: TODAY
        ).execute()

        assert result.value.due_reminders == 1
        assert mock_notifier.dispatch.call_args.args[1] == TemplateType.DUE_REMINDER

    async def test_sms_disabled_skipped(self, customer, mock_customer_repo, mock_entry_repo, mock_notifier):
        customer.sms_enabled = False
        mock_entry_repo.entries = [entry(1, debit="500", balance="500", due=TODAY - timedelta(days=3))]

        result = await SendDueReminders(
            mock_customer_repo, mock_entry_repo, mock_notifier, clock=lambda: TODAY
        ).execute()

        assert result.value.customers_checked == 0
        mock_notifier.dispatch.assert_not_called()

    async def test_nothing_due(self, mock_customer_repo, mock_entry_repo, mock_notifier):
        mock_entry_repo.entries = [entry(1, debit="200", balance="200", due=TODAY + timedelta(days=20))]

        result = await SendDueReminders(
            mock_customer_repo, mock_entry_repo, mock_notifier, clock=lambda: TODAY
        ).execute()

        assert result.value.customers_checked == 1
        mock_notifier.dispatch.assert_not_called()


@pytest.mark.asyncio
class TestDueReports:
    async def test_due_summary(self, mock_customer_repo, mock_entry_repo):
        mock_entry_repo.entries = [entry(1, debit="500", balance="500", due=TODAY - timedelta(days=1))]

        result = await GetDueSummary(mock_customer_repo, mock_entry_repo, clock=lambda: TODAY).execute(1)

        assert result.value.overdue_amount == Decimal("500")
        assert result.value.due_today == Decimal("0")

    async def test_due_summary_unknown_customer(self, mock_customer_repo, mock_entry_repo):
        mock_customer_repo.get_by_id = AsyncMock(return_value=None)

        result = await GetDueSummary(mock_customer_repo, mock_entry_repo, clock=lambda: TODAY).execute(9)

        assert result.error.code == "CUSTOMER_NOT_FOUND"

    async def test_aging(self, mock_customer_repo, mock_entry_repo):
        mock_entry_repo.entries = [entry(1, debit="500", balance="500", due=TODAY - timedelta(days=45))]

        result = await GetAgingBuckets(mock_customer_repo, mock_entry_repo, clock=lambda: TODAY).execute(1)

        amounts = {bucket.range_label: bucket.amount for bucket in result.value.buckets}
        assert amounts["31-60"] == Decimal("500")

    async def test_due_customers(self, mock_customer_repo, mock_entry_repo):
        mock_entry_repo.entries = [entry(1, debit="500", balance="500", due=TODAY - timedelta(days=1))]

        result = await ListDueCustomers(mock_customer_repo, mock_entry_repo, clock=lambda: TODAY).execute()

        assert len(result.value.customers) == 1
        assert result.value.customers[0].overdue_amount == Decimal("500")
