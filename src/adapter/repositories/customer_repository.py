"""SQLAlchemy implementation of CustomerRepository

Balance moves combine the row lock taken by get_by_id(for_update=True)
with an optimistic version check, so a writer that slipped past the lock
(another process, SQLite without row locks) is detected instead of
silently overwriting the balance.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.customer_repository import CustomerRepository
from src.domain.customer import Customer


class SqlAlchemyCustomerRepository(CustomerRepository):
    """
    SQLAlchemy implementation of CustomerRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE
    - Version-checked balance updates
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, customer_id: int, for_update: bool = False) -> Optional[Customer]:
        stmt = select(Customer).where(Customer.id == customer_id)

        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_phone(self, phone: str) -> Optional[Customer]:
        stmt = select(Customer).where(Customer.phone == phone)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_all(self, active_only: bool = False) -> List[Customer]:
        stmt = select(Customer).order_by(Customer.id)
        if active_only:
            stmt = stmt.where(Customer.is_active == True)  # noqa: E712

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, customer: Customer) -> Customer:
        self.session.add(customer)
        await self.session.flush()
        await self.session.refresh(customer)
        return customer

    async def update_balance(
        self,
        customer_id: int,
        expected_version: int,
        new_balance: Decimal,
        debit: Decimal,
        credit: Decimal,
    ) -> bool:
        """
        Move the balance with UPDATE ... WHERE version = expected_version

        Returns:
            True if exactly one row was updated

        Note:
            Should be called within a transaction with the customer already locked
        """
        now = datetime.utcnow()
        stmt = (
            update(Customer)
            .where(Customer.id == customer_id, Customer.version == expected_version)
            .values(
                current_balance=new_balance,
                total_purchases=Customer.total_purchases + debit,
                total_payments=Customer.total_payments + credit,
                version=Customer.version + 1,
                last_activity=now,
                updated_at=now,
            )
            .execution_options(synchronize_session="evaluate")
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def deactivate(self, customer_id: int) -> Optional[Customer]:
        customer = await self.get_by_id(customer_id)
        if customer:
            customer.is_active = False
            customer.updated_at = datetime.utcnow()
            self.session.add(customer)
            await self.session.flush()
        return customer
