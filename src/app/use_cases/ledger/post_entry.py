"""PostLedgerEntry Use Case

Posts a manual debit or credit (purchase, return, adjustment) through the
balance engine.
"""

from src.libs.result import Result, Return, Error
from src.app.services.balance_engine import BalanceEngine, EntryPosting
from src.app.use_cases.errors import error_from
from src.domain.errors import LedgerError
from .dtos import LedgerEntryResponseDTO, PostEntryCommandDTO


class PostLedgerEntry:
    """
    Use Case: Post a ledger entry for a customer

    Business Rules:
    1. Exactly one of debit/credit is positive
    2. The running balance is computed by the balance engine under the
       customer's critical section
    3. Credit limit is advisory: over-limit purchases are posted and flagged
    """

    def __init__(self, engine: BalanceEngine):
        self.engine = engine

    async def execute(self, command: PostEntryCommandDTO) -> Result[LedgerEntryResponseDTO]:
        try:
            entry = await self.engine.post_entry(
                command.customer_id,
                EntryPosting(
                    description=command.description,
                    debit=command.debit,
                    credit=command.credit,
                    entry_type=command.entry_type,
                    reference=command.reference,
                    due_date=command.due_date,
                    metadata=command.metadata,
                ),
            )
        except LedgerError as e:
            return Return.err(error_from(e))
        except Exception as e:
            return Return.err(
                Error(
                    code="POST_ENTRY_FAILED",
                    message="Failed to post ledger entry",
                    reason=str(e),
                )
            )

        return Return.ok(LedgerEntryResponseDTO.from_entry(entry))
