from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.repositories import (
    SqlAlchemyCustomerRepository,
    SqlAlchemyLedgerEntryRepository,
)
from src.adapter.services.notification_service import create_notification_service
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.balance_engine import BalanceEngine
from src.app.services.customer_locks import CustomerLockRegistry
from src.app.services.notification_service import NotificationDispatcher

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

# Process-wide: every request for a customer must queue on the same lock
customer_locks = CustomerLockRegistry(timeout=ApplicationConfig.LEDGER_LOCK_TIMEOUT_SECONDS)

notifier = NotificationDispatcher(
    create_notification_service(
        ApplicationConfig.NOTIFICATION_WEBHOOK_URL,
        currency=ApplicationConfig.CURRENCY_SYMBOL,
    )
)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_customer_locks() -> CustomerLockRegistry:
    return customer_locks


def get_notifier() -> NotificationDispatcher:
    return notifier


def build_balance_engine(session: AsyncSession, locks: CustomerLockRegistry) -> BalanceEngine:
    return BalanceEngine(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyCustomerRepository(session),
        SqlAlchemyLedgerEntryRepository(session),
        locks,
        max_retries=ApplicationConfig.LEDGER_MAX_RETRIES,
    )
