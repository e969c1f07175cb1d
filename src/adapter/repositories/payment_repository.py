"""SQLAlchemy implementation of PaymentRepository

Receipt numbers are unique at the database level; a duplicate surfaces as
IntegrityError on flush.
"""

from typing import List, Optional, Tuple
from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.payment_repository import PaymentRepository
from src.domain.payment import Payment


class SqlAlchemyPaymentRepository(PaymentRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, payment: Payment) -> Payment:
        """
        Create a new payment

        Raises:
            IntegrityError: If receipt_number already exists
        """
        self.session.add(payment)
        await self.session.flush()
        await self.session.refresh(payment)
        return payment

    async def update(self, payment: Payment) -> Payment:
        self.session.add(payment)
        await self.session.flush()
        await self.session.refresh(payment)
        return payment

    async def get_by_id(self, payment_id: int, for_update: bool = False) -> Optional[Payment]:
        stmt = select(Payment).where(Payment.id == payment_id)

        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_receipt_number(self, receipt_number: str) -> Optional[Payment]:
        stmt = select(Payment).where(Payment.receipt_number == receipt_number)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_ledger_entry_id(self, entry_id: int) -> Optional[Payment]:
        stmt = select(Payment).where(Payment.ledger_entry_id == entry_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_customer_id(
        self, customer_id: int, limit: int = 50, offset: int = 0
    ) -> Tuple[List[Payment], int]:
        """
        Get payments of a customer with pagination

        Returns:
            Tuple of (payments newest first, total count)
        """
        count_stmt = select(func.count()).select_from(Payment).where(Payment.customer_id == customer_id)
        count_result = await self.session.execute(count_stmt)
        total = count_result.scalar_one()

        stmt = (
            select(Payment)
            .where(Payment.customer_id == customer_id)
            .order_by(Payment.received_date.desc(), Payment.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def count(self) -> int:
        stmt = select(func.count()).select_from(Payment)
        result = await self.session.execute(stmt)
        return result.scalar_one()
