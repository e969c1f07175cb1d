"""VoidLedgerEntry Use Case

Voids a manual ledger entry by appending its compensating posting.
"""

from src.libs.result import Result, Return, Error
from src.app.repositories.payment_repository import PaymentRepository
from src.app.services.balance_engine import BalanceEngine
from src.app.use_cases.errors import error_from
from src.domain.errors import InvalidEntry, LedgerError
from .dtos import LedgerEntryResponseDTO, VoidEntryCommandDTO


class VoidLedgerEntry:
    """
    Use Case: Void a ledger entry

    The original entry is kept (voided=True, balance untouched); the
    returned entry is the reversal. The credit behind a recorded payment
    is only reversed through VoidPayment, which also refunds the payment.
    """

    def __init__(self, engine: BalanceEngine, payment_repo: PaymentRepository):
        self.engine = engine
        self.payment_repo = payment_repo

    async def execute(self, command: VoidEntryCommandDTO) -> Result[LedgerEntryResponseDTO]:
        try:
            payment = await self.payment_repo.get_by_ledger_entry_id(command.entry_id)
            if payment is not None:
                raise InvalidEntry(
                    f"Entry {command.entry_id} belongs to payment {payment.receipt_number}",
                    reason=f"void it through POST /payments/{payment.id}/void",
                    code="ENTRY_BELONGS_TO_PAYMENT",
                )
            reversal = await self.engine.void_entry(command.entry_id, command.reason)
        except LedgerError as e:
            return Return.err(error_from(e))
        except Exception as e:
            return Return.err(
                Error(
                    code="VOID_ENTRY_FAILED",
                    message="Failed to void ledger entry",
                    reason=str(e),
                )
            )

        return Return.ok(LedgerEntryResponseDTO.from_entry(reversal))
