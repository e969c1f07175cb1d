"""VoidPayment Use Case"""

import logging
from datetime import datetime
from typing import Callable

from src.libs.result import Result, Return, Error
from src.app.repositories.payment_repository import PaymentRepository
from src.app.services.balance_engine import BalanceEngine
from src.app.use_cases.errors import error_from
from src.domain.errors import AlreadyVoided, InvalidEntry, LedgerError, NotFound
from src.domain.ledger_entry import LedgerEntry
from src.domain.payment import PaymentStatus
from .dtos import PaymentResponseDTO, VoidPaymentCommandDTO

logger = logging.getLogger(__name__)

DEFAULT_VOID_REASON = "No reason provided"


class VoidPayment:
    """
    Use Case: Void (refund) a recorded payment

    Business Rules:
    1. Admin-only; the caller enforces authorization
    2. A payment can be voided once
    3. The payment's credit is reversed by a compensating debit entry,
       never by editing the original
    4. The reversal and the payment status change commit atomically
    """

    def __init__(
        self,
        engine: BalanceEngine,
        payment_repo: PaymentRepository,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.engine = engine
        self.payment_repo = payment_repo
        self.clock = clock

    async def execute(self, command: VoidPaymentCommandDTO) -> Result[PaymentResponseDTO]:
        saved: dict = {}

        try:
            payment = await self.payment_repo.get_by_id(command.payment_id)
            if not payment:
                raise NotFound("Payment", command.payment_id)
            if payment.is_voided:
                raise AlreadyVoided(f"Payment {payment.receipt_number} is already voided")
            if payment.ledger_entry_id is None:
                raise InvalidEntry(f"Payment {payment.receipt_number} has no ledger entry to reverse")

            payment_id = payment.id
            receipt_number = payment.receipt_number
            ledger_entry_id = payment.ledger_entry_id
            reason = (command.reason or "").strip() or DEFAULT_VOID_REASON

            async def mark_refunded(reversal: LedgerEntry) -> None:
                current = await self.payment_repo.get_by_id(payment_id, for_update=True)
                if current is None:
                    raise NotFound("Payment", payment_id)
                if current.is_voided:
                    raise AlreadyVoided(f"Payment {receipt_number} is already voided")

                now = self.clock()
                current.status = PaymentStatus.REFUNDED
                current.void_reason = reason
                current.voided_at = now
                current.void_entry_id = reversal.id
                current.notes = f"{current.notes}\nVoided: {reason}" if current.notes else f"Voided: {reason}"
                current.updated_at = now
                saved["payment"] = await self.payment_repo.update(current)

            reversal = await self.engine.void_entry(
                ledger_entry_id,
                reason=reason,
                description=f"Payment voided ({receipt_number}) - {reason}",
                reference=receipt_number,
                before_commit=mark_refunded,
            )

        except LedgerError as e:
            return Return.err(error_from(e))
        except Exception as e:
            return Return.err(
                Error(
                    code="VOID_PAYMENT_FAILED",
                    message="Failed to void payment",
                    reason=str(e),
                )
            )

        logger.info(f"Voided payment {receipt_number}: {reason}")
        return Return.ok(PaymentResponseDTO.from_payment(saved["payment"], balance_after=reversal.balance))
