"""RecordPayment Use Case

Turns a payment into one credit ledger entry and a completed Payment
record, committed together, then schedules the payment confirmation.
"""

import logging
import secrets
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional

from src.libs.result import Result, Return, Error
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.payment_repository import PaymentRepository
from src.app.services.balance_engine import BalanceEngine, EntryPosting
from src.app.services.notification_service import NotificationDispatcher, TemplateType
from src.app.use_cases.errors import error_from
from src.domain import money
from src.domain.errors import ConcurrencyConflict, InvalidAmount, LedgerError, NotFound
from src.domain.ledger_entry import EntryType, LedgerEntry
from src.domain.payment import MessageChannel, Payment, PaymentStatus
from .dtos import PaymentResponseDTO, RecordPaymentCommandDTO

logger = logging.getLogger(__name__)

MINIMUM_PAYMENT = Decimal("0.01")


class RecordPayment:
    """
    Use Case: Record a payment against a customer's balance

    Business Rules:
    1. amount >= 0.01, method in {cash, bank, online}
    2. receipt_number is unique; collisions are retried with a random suffix
    3. The credit entry and the Payment record commit atomically
    4. The confirmation message never rolls back the payment

    Flow:
    1. Validate amount and load the customer
    2. Post a credit entry (entry_type=payment) through the balance engine
    3. Inside the same transaction, allocate a receipt number and save the
       Payment (status=completed) linked to the entry
    4. Schedule a payment_received notification
    """

    def __init__(
        self,
        engine: BalanceEngine,
        customer_repo: CustomerRepository,
        payment_repo: PaymentRepository,
        notifier: NotificationDispatcher,
        receipt_max_attempts: int = 5,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.engine = engine
        self.customer_repo = customer_repo
        self.payment_repo = payment_repo
        self.notifier = notifier
        self.receipt_max_attempts = receipt_max_attempts
        self.clock = clock

    async def execute(self, command: RecordPaymentCommandDTO) -> Result[PaymentResponseDTO]:
        saved: dict = {}

        try:
            amount = money.to_amount(command.amount)
            if amount < MINIMUM_PAYMENT:
                raise InvalidAmount(
                    f"Amount must be at least {MINIMUM_PAYMENT}",
                    reason=f"amount={command.amount}",
                )

            customer = await self.customer_repo.get_by_id(command.customer_id)
            if not customer:
                raise NotFound("Customer", command.customer_id)
            # Plain copies: a retry inside the engine expires ORM state
            customer_name, phone, sms_enabled = customer.name, customer.phone, customer.sms_enabled

            description = f"Payment received ({command.method.label})"
            if command.reference:
                description += f" - Ref: {command.reference}"

            async def save_payment(entry: LedgerEntry) -> None:
                payment = Payment(
                    customer_id=command.customer_id,
                    amount=amount,
                    method=command.method,
                    status=PaymentStatus.COMPLETED,
                    receipt_number=await self._allocate_receipt_number(),
                    reference=command.reference,
                    notes=command.notes,
                    via=command.via,
                    received_date=command.received_date or self.clock(),
                    ledger_entry_id=entry.id,
                )
                saved["payment"] = await self.payment_repo.create(payment)

            entry = await self.engine.post_entry(
                command.customer_id,
                EntryPosting(
                    description=description,
                    credit=amount,
                    entry_type=EntryType.PAYMENT,
                    payment_method=command.method,
                    reference=command.reference,
                ),
                before_commit=save_payment,
            )

        except LedgerError as e:
            return Return.err(error_from(e))
        except Exception as e:
            return Return.err(
                Error(
                    code="RECORD_PAYMENT_FAILED",
                    message="Failed to record payment",
                    reason=str(e),
                )
            )

        payment = saved["payment"]
        logger.info(
            f"Recorded payment {payment.receipt_number} of {amount} for customer "
            f"{command.customer_id}, balance={entry.balance}"
        )

        if sms_enabled:
            self.notifier.dispatch(
                command.customer_id,
                TemplateType.PAYMENT_RECEIVED,
                {
                    "customer_name": customer_name,
                    "phone": phone,
                    "via": (command.via or MessageChannel.SMS).value,
                    "amount": amount,
                    "balance": entry.balance,
                    "receipt_number": payment.receipt_number,
                },
            )

        return Return.ok(PaymentResponseDTO.from_payment(payment, balance_after=entry.balance))

    async def _allocate_receipt_number(self) -> str:
        now = self.clock()
        base = f"RCP-{now:%y%m}-{await self.payment_repo.count() + 1:06d}"
        candidate: Optional[str] = base
        for attempt in range(self.receipt_max_attempts):
            if attempt:
                candidate = f"{base}-{secrets.token_hex(2).upper()}"
            if await self.payment_repo.get_by_receipt_number(candidate) is None:
                return candidate
        raise ConcurrencyConflict(
            "Could not allocate a unique receipt number",
            reason=f"{self.receipt_max_attempts} candidates taken, last {candidate}",
        )
