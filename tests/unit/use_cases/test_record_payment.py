"""Unit tests for RecordPayment use case

Tests cover:
- Credit posting with payment entry type and method label
- Payment saved inside the posting transaction with a receipt number
- Receipt number collisions
- Confirmation notification only for SMS-enabled customers
- Error mapping
"""

import pytest
from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.services.notification_service import TemplateType
from src.app.use_cases.payments import RecordPayment, RecordPaymentCommandDTO
from src.domain.customer import Customer
from src.domain.errors import PersistenceFailure
from src.domain.ledger_entry import EntryType, LedgerEntry
from src.domain.payment import MessageChannel, PaymentMethod, PaymentStatus

NOW = datetime(2024, 1, 20, 10, 30)


@pytest.fixture
def customer():
    return Customer(id=1, name="Asha", phone="+919812345678", sms_enabled=True)


@pytest.fixture
def mock_customer_repo(customer):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=customer)
    return repo


@pytest.fixture
def mock_payment_repo():
    repo = MagicMock()
    repo.count = AsyncMock(return_value=41)
    repo.get_by_receipt_number = AsyncMock(return_value=None)

    async def create(payment):
        payment.id = 5
        payment.created_at = NOW
        return payment

    repo.create = AsyncMock(side_effect=create)
    return repo


@pytest.fixture
def mock_engine():
    """Engine double that runs the hook like the real one"""
    engine = MagicMock()

    async def post_entry(customer_id, posting, before_commit=None):
        entry = LedgerEntry(
            id=11,
            customer_id=customer_id,
            sequence=2,
            description=posting.description,
            credit=posting.credit,
            balance=Decimal("1000.00") - posting.credit,
            entry_type=posting.entry_type,
            payment_method=posting.payment_method,
            reference=posting.reference,
        )
        if before_commit:
            await before_commit(entry)
        return entry

    engine.post_entry = AsyncMock(side_effect=post_entry)
    return engine


@pytest.fixture
def use_case(mock_engine, mock_customer_repo, mock_payment_repo, mock_notifier):
    return RecordPayment(
        mock_engine, mock_customer_repo, mock_payment_repo, mock_notifier, receipt_max_attempts=3, clock=lambda: NOW
    )


@pytest.mark.asyncio
class TestRecordPayment:
    async def test_records_cash_payment(self, use_case, mock_engine, mock_payment_repo):
        """Balance 1000, pay 400 in cash -> credit entry with balance 600"""
        result = await use_case.execute(
            RecordPaymentCommandDTO(customer_id=1, amount=Decimal("400"), method=PaymentMethod.CASH)
        )

        assert result.is_ok()
        response = result.value
        assert response.amount == Decimal("400.00")
        assert response.status == "completed"
        assert response.receipt_number == "RCP-2401-000042"
        assert response.ledger_entry_id == 11
        assert response.balance_after == Decimal("600.00")

        posting = mock_engine.post_entry.await_args.args[1]
        assert posting.description == "Payment received (Cash)"
        assert posting.entry_type == EntryType.PAYMENT
        assert posting.payment_method == PaymentMethod.CASH

        payment = mock_payment_repo.create.await_args.args[0]
        assert payment.status == PaymentStatus.COMPLETED
        assert payment.received_date == NOW

    async def test_reference_added_to_description(self, use_case, mock_engine):
        await use_case.execute(
            RecordPaymentCommandDTO(
                customer_id=1, amount=Decimal("100"), method=PaymentMethod.BANK, reference="TXN-9981"
            )
        )

        posting = mock_engine.post_entry.await_args.args[1]
        assert posting.description == "Payment received (Bank Transfer) - Ref: TXN-9981"
        assert posting.reference == "TXN-9981"

    async def test_taken_receipt_number_gets_suffix(self, use_case, mock_payment_repo):
        mock_payment_repo.get_by_receipt_number = AsyncMock(side_effect=[MagicMock(), None])

        result = await use_case.execute(
            RecordPaymentCommandDTO(customer_id=1, amount=Decimal("10"), method=PaymentMethod.CASH)
        )

        assert result.is_ok()
        assert result.value.receipt_number.startswith("RCP-2401-000042-")
        assert len(result.value.receipt_number) == len("RCP-2401-000042-ABCD")

    async def test_receipt_numbers_exhausted(self, use_case, mock_payment_repo):
        mock_payment_repo.get_by_receipt_number = AsyncMock(return_value=MagicMock())

        result = await use_case.execute(
            RecordPaymentCommandDTO(customer_id=1, amount=Decimal("10"), method=PaymentMethod.CASH)
        )

        assert result.is_err()
        assert result.error.code == "CONCURRENCY_CONFLICT"

    async def test_confirmation_dispatched(self, use_case, mock_notifier):
        await use_case.execute(
            RecordPaymentCommandDTO(
                customer_id=1, amount=Decimal("400"), method=PaymentMethod.ONLINE, via=MessageChannel.WHATSAPP
            )
        )

        mock_notifier.dispatch.assert_called_once()
        customer_id, template_type, context = mock_notifier.dispatch.call_args.args
        assert customer_id == 1
        assert template_type == TemplateType.PAYMENT_RECEIVED
        assert context["via"] == "whatsapp"
        assert context["balance"] == Decimal("600.00")

    async def test_no_confirmation_when_sms_disabled(self, use_case, customer, mock_notifier):
        customer.sms_enabled = False

        result = await use_case.execute(
            RecordPaymentCommandDTO(customer_id=1, amount=Decimal("400"), method=PaymentMethod.CASH)
        )

        assert result.is_ok()
        mock_notifier.dispatch.assert_not_called()

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("0.004"), Decimal("-5")])
    async def test_amount_below_minimum(self, use_case, mock_engine, amount):
        result = await use_case.execute(
            RecordPaymentCommandDTO(customer_id=1, amount=amount, method=PaymentMethod.CASH)
        )

        assert result.is_err()
        assert result.error.code == "INVALID_AMOUNT"
        mock_engine.post_entry.assert_not_awaited()

    async def test_unknown_customer(self, use_case, mock_customer_repo):
        mock_customer_repo.get_by_id = AsyncMock(return_value=None)

        result = await use_case.execute(
            RecordPaymentCommandDTO(customer_id=9, amount=Decimal("10"), method=PaymentMethod.CASH)
        )

        assert result.error.code == "CUSTOMER_NOT_FOUND"

    async def test_persistence_failure_no_notification(self, use_case, mock_engine, mock_notifier):
        mock_engine.post_entry = AsyncMock(side_effect=PersistenceFailure("Ledger store failed"))

        result = await use_case.execute(
            RecordPaymentCommandDTO(customer_id=1, amount=Decimal("10"), method=PaymentMethod.CASH)
        )

        assert result.error.code == "PERSISTENCE_FAILURE"
        mock_notifier.dispatch.assert_not_called()
