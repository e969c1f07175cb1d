"""Balance Engine

The single authority for appending ledger entries and moving a customer's
running balance. Every posting runs as

    lock customer -> read latest balance -> compute -> append -> update customer -> commit

inside a per-customer critical section made of an in-process lock, a row
lock on the customer (SELECT FOR UPDATE) and an optimistic version check.
Version mismatches and sequence collisions are retried a bounded number of
times; store failures are surfaced as PersistenceFailure and never retried.
"""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Awaitable, Callable, Optional, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.ledger_entry_repository import LedgerEntryRepository
from src.app.services.customer_locks import CustomerLockRegistry
from src.app.services.unit_of_work import UnitOfWork
from src.domain import money
from src.domain.customer import Customer
from src.domain.errors import (
    AlreadyVoided,
    ConcurrencyConflict,
    InvalidEntry,
    LedgerError,
    NotFound,
    PersistenceFailure,
)
from src.domain.ledger_entry import EntryMetadata, EntryType, LedgerEntry
from src.domain.payment import PaymentMethod

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Runs inside the posting transaction, after the entry is appended and before commit
PostingHook = Callable[[LedgerEntry], Awaitable[None]]

MAX_DESCRIPTION_LENGTH = 200
MAX_REFERENCE_LENGTH = 50


@dataclass
class EntryPosting:
    """A debit or credit the caller wants applied to a customer"""

    description: str
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")
    entry_type: EntryType = EntryType.PURCHASE
    reference: Optional[str] = None
    due_date: Optional[date] = None
    payment_method: Optional[PaymentMethod] = None
    metadata: Optional[EntryMetadata] = None


class BalanceEngine:
    """
    Posts and voids ledger entries for one unit of work

    A new engine is built per request around the request's session; the
    lock registry is process-wide.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        customer_repo: CustomerRepository,
        entry_repo: LedgerEntryRepository,
        locks: CustomerLockRegistry,
        max_retries: int = 3,
        clock: Callable[[], date] = date.today,
    ):
        self.uow = uow
        self.customer_repo = customer_repo
        self.entry_repo = entry_repo
        self.locks = locks
        self.max_retries = max(1, max_retries)
        self.clock = clock

    async def post_entry(
        self,
        customer_id: int,
        posting: EntryPosting,
        before_commit: Optional[PostingHook] = None,
    ) -> LedgerEntry:
        """
        Validate and append a posting, moving the customer's balance

        A debit without a due date falls due after the customer's
        default_due_period.

        Raises:
            InvalidEntry / InvalidAmount: malformed posting (store untouched)
            NotFound: unknown customer
            ConcurrencyConflict: retries exhausted or lock wait timed out
            PersistenceFailure: the store failed; outcome uncertain
        """
        debit, credit, description, entry_type = self._validate(posting)

        async def apply() -> LedgerEntry:
            customer = await self._load_customer(customer_id)
            previous = await self.entry_repo.latest_balance(customer_id)
            new_balance = money.quantize(previous + debit - credit)

            due_date = posting.due_date
            if due_date is None and money.is_positive(debit):
                due_date = self.clock() + timedelta(days=customer.default_due_period)

            metadata = dict(posting.metadata) if posting.metadata else None
            if self._exceeds_credit_limit(entry_type, customer, new_balance):
                logger.warning(
                    f"Customer {customer_id} exceeds credit limit: "
                    f"balance={new_balance}, limit={customer.credit_limit}"
                )
                metadata = {**(metadata or {}), "credit_limit_exceeded": True}

            entry = LedgerEntry(
                customer_id=customer_id,
                description=description,
                debit=debit,
                credit=credit,
                balance=new_balance,
                entry_type=entry_type,
                payment_method=posting.payment_method,
                reference=posting.reference,
                due_date=due_date,
                entry_metadata=metadata,
            )
            created = await self.entry_repo.append(entry)
            await self._move_balance(customer, new_balance, debit, credit)

            if before_commit is not None:
                await before_commit(created)
            return created

        entry = await self._run_serialized(customer_id, apply)
        logger.info(
            f"Posted {entry.entry_type.value} entry {entry.id} for customer {customer_id}: "
            f"debit={entry.debit}, credit={entry.credit}, balance={entry.balance}"
        )
        return entry

    async def void_entry(
        self,
        entry_id: int,
        reason: Optional[str] = None,
        description: Optional[str] = None,
        reference: Optional[str] = None,
        before_commit: Optional[PostingHook] = None,
    ) -> LedgerEntry:
        """
        Append a compensating entry for ``entry_id`` and mark it voided

        The original keeps its stored balance; the reversal swaps debit and
        credit and is balanced against the current latest balance.

        Raises:
            NotFound: unknown entry
            AlreadyVoided: the entry was voided before
            InvalidEntry: the entry is itself a reversal
        """
        original = await self.entry_repo.get_by_id(entry_id)
        if original is None:
            raise NotFound("Entry", entry_id)
        customer_id = original.customer_id

        async def apply() -> LedgerEntry:
            target = await self.entry_repo.get_by_id(entry_id, for_update=True)
            if target is None:
                raise NotFound("Entry", entry_id)
            if target.voided:
                raise AlreadyVoided(f"Entry {entry_id} is already voided")
            if target.is_reversal:
                raise InvalidEntry(f"Entry {entry_id} is a reversal and cannot be voided")

            customer = await self._load_customer(customer_id)
            previous = await self.entry_repo.latest_balance(customer_id)
            debit, credit = target.credit, target.debit
            new_balance = money.quantize(previous + debit - credit)

            text = description or f"Reversal of entry #{target.sequence}: {target.description}"
            metadata: EntryMetadata = {"reversed_sequence": target.sequence}
            if reason:
                metadata["void_reason"] = reason

            reversal = LedgerEntry(
                customer_id=customer_id,
                description=text[:MAX_DESCRIPTION_LENGTH],
                debit=debit,
                credit=credit,
                balance=new_balance,
                entry_type=EntryType.ADJUSTMENT,
                reference=reference if reference is not None else target.reference,
                reverses_entry_id=target.id,
                entry_metadata=metadata,
            )
            created = await self.entry_repo.append(reversal)
            await self.entry_repo.mark_voided(target)
            await self._move_balance(customer, new_balance, debit, credit)

            if before_commit is not None:
                await before_commit(created)
            return created

        reversal = await self._run_serialized(customer_id, apply)
        logger.info(
            f"Voided entry {entry_id} of customer {customer_id} with reversal {reversal.id}, "
            f"balance={reversal.balance}"
        )
        return reversal

    async def _run_serialized(self, customer_id: int, apply: Callable[[], Awaitable[T]]) -> T:
        async with self.locks.hold(customer_id):
            attempt = 0
            while True:
                attempt += 1
                try:
                    result = await apply()
                    await self.uow.commit()
                    return result
                except ConcurrencyConflict as e:
                    await self.uow.rollback()
                    if attempt >= self.max_retries:
                        logger.warning(
                            f"Giving up on customer {customer_id} after {attempt} attempts: {e.message}"
                        )
                        raise
                    logger.info(f"Retrying posting for customer {customer_id} (attempt {attempt}): {e.message}")
                except LedgerError:
                    await self.uow.rollback()
                    raise
                except IntegrityError as e:
                    # Sequence or receipt number taken by a concurrent writer
                    await self.uow.rollback()
                    if attempt >= self.max_retries:
                        raise ConcurrencyConflict(
                            f"Could not post for customer {customer_id}",
                            reason=str(e.orig) if e.orig is not None else str(e),
                        ) from e
                    logger.info(f"Retrying posting for customer {customer_id} after integrity error: {e}")
                except (SQLAlchemyError, OSError) as e:
                    await self.uow.rollback()
                    logger.error(f"Ledger write failed for customer {customer_id}: {e}")
                    raise PersistenceFailure(
                        "Ledger store failed, outcome uncertain",
                        reason=str(e),
                    ) from e
                except Exception:
                    await self.uow.rollback()
                    raise

    async def _load_customer(self, customer_id: int) -> Customer:
        customer = await self.customer_repo.get_by_id(customer_id, for_update=True)
        if customer is None:
            raise NotFound("Customer", customer_id)
        return customer

    async def _move_balance(
        self, customer: Customer, new_balance: Decimal, debit: Decimal, credit: Decimal
    ) -> None:
        moved = await self.customer_repo.update_balance(
            customer.id, customer.version, new_balance, debit, credit
        )
        if not moved:
            raise ConcurrencyConflict(
                f"Customer {customer.id} was modified concurrently",
                reason=f"expected version {customer.version}",
            )

    @staticmethod
    def _exceeds_credit_limit(entry_type: EntryType, customer: Customer, new_balance: Decimal) -> bool:
        return (
            entry_type == EntryType.PURCHASE
            and customer.credit_limit > 0
            and new_balance > customer.credit_limit
        )

    @staticmethod
    def _validate(posting: EntryPosting):
        debit = money.require_non_negative(posting.debit, "debit")
        credit = money.require_non_negative(posting.credit, "credit")

        if money.is_positive(debit) and money.is_positive(credit):
            raise InvalidEntry(
                "Cannot have both debit and credit in the same entry",
                reason=f"debit={debit}, credit={credit}",
            )
        if money.is_zero(debit) and money.is_zero(credit):
            raise InvalidEntry("Either debit or credit amount must be greater than zero")

        description = (posting.description or "").strip()
        if not description:
            raise InvalidEntry("Description is required")
        if len(description) > MAX_DESCRIPTION_LENGTH:
            raise InvalidEntry(f"Description cannot exceed {MAX_DESCRIPTION_LENGTH} characters")
        if posting.reference is not None and len(posting.reference) > MAX_REFERENCE_LENGTH:
            raise InvalidEntry(f"Reference cannot exceed {MAX_REFERENCE_LENGTH} characters")
        if posting.due_date is not None and not isinstance(posting.due_date, date):
            raise InvalidEntry(f"Invalid due date: {posting.due_date!r}")

        try:
            entry_type = EntryType(posting.entry_type)
        except ValueError:
            raise InvalidEntry(f"Invalid entry type: {posting.entry_type!r}")
        return debit, credit, description, entry_type
