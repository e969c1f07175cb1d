"""Unit tests for ledger domain entities"""

from decimal import Decimal

from src.domain.customer import Customer
from src.domain.errors import NotFound
from src.domain.ledger_entry import EntryType, LedgerEntry
from src.domain.payment import Payment, PaymentMethod, PaymentStatus


class TestCustomer:
    def test_new_customer_defaults(self):
        customer = Customer(name="Asha", phone="+919812345678")

        assert customer.current_balance == Decimal("0.00")
        assert customer.credit_limit == Decimal("0.00")
        assert customer.default_due_period == 30
        assert customer.version == 0
        assert customer.is_active is True

    def test_available_credit_ignores_credit_balance(self):
        customer = Customer(
            name="Asha",
            phone="+919812345678",
            credit_limit=Decimal("5000.00"),
            current_balance=Decimal("-200.00"),
        )

        assert customer.available_credit == Decimal("5000.00")

    def test_available_credit_reduced_by_amount_owed(self):
        customer = Customer(
            name="Asha",
            phone="+919812345678",
            credit_limit=Decimal("5000.00"),
            current_balance=Decimal("1200.00"),
        )

        assert customer.available_credit == Decimal("3800.00")


class TestLedgerEntry:
    def test_net_change_is_debit_minus_credit(self):
        entry = LedgerEntry(
            customer_id=1,
            description="Payment",
            credit=Decimal("400.00"),
            balance=Decimal("600.00"),
            entry_type=EntryType.PAYMENT,
        )

        assert entry.net_change == Decimal("-400.00")
        assert entry.is_reversal is False
        assert entry.voided is False

    def test_reversal_flag(self):
        entry = LedgerEntry(
            customer_id=1,
            description="Reversal",
            debit=Decimal("400.00"),
            balance=Decimal("1000.00"),
            entry_type=EntryType.ADJUSTMENT,
            reverses_entry_id=7,
        )

        assert entry.is_reversal is True


class TestPayment:
    def test_method_labels(self):
        assert PaymentMethod.CASH.label == "Cash"
        assert PaymentMethod.BANK.label == "Bank Transfer"
        assert PaymentMethod.ONLINE.label == "Online Payment"

    def test_refunded_and_failed_count_as_voided(self):
        payment = Payment(
            customer_id=1,
            amount=Decimal("10.00"),
            method=PaymentMethod.CASH,
            receipt_number="RCP-2401-000001",
        )
        assert payment.status == PaymentStatus.COMPLETED
        assert payment.is_voided is False

        payment.status = PaymentStatus.REFUNDED
        assert payment.is_voided is True

        payment.status = PaymentStatus.FAILED
        assert payment.is_voided is True


def test_not_found_codes_are_resource_specific():
    error = NotFound("Customer", 5)

    assert error.code == "CUSTOMER_NOT_FOUND"
    assert error.message == "Customer 5 not found"
    assert NotFound("Entry", 3).code == "ENTRY_NOT_FOUND"
