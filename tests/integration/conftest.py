import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain  # noqa: F401  registers the tables on SQLModel.metadata
from src.adapter.repositories import (
    SqlAlchemyCustomerRepository,
    SqlAlchemyLedgerEntryRepository,
    SqlAlchemyPaymentRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.balance_engine import BalanceEngine
from src.app.services.customer_locks import CustomerLockRegistry
from src.depends import get_customer_locks, get_notifier, get_session
from src.domain.customer import Customer


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """Create a throwaway SQLite database file per test"""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}", echo=False, future=True)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create a new database session for each test"""
    async with session_factory() as session:
        yield session


@pytest.fixture
def locks():
    return CustomerLockRegistry(timeout=5.0)


@pytest_asyncio.fixture
async def customer(db_session):
    customer = Customer(name="Asha Traders", phone="+919812345678", credit_limit=0)
    db_session.add(customer)
    await db_session.commit()
    await db_session.refresh(customer)
    return customer


@pytest.fixture
def engine_for(locks):
    """Build a balance engine around a given session, sharing one lock registry"""
    def _build(session) -> BalanceEngine:
        return BalanceEngine(
            SqlAlchemyUnitOfWork(session),
            SqlAlchemyCustomerRepository(session),
            SqlAlchemyLedgerEntryRepository(session),
            locks,
        )
    return _build


@pytest.fixture
def balance_engine(db_session, engine_for):
    return engine_for(db_session)


@pytest.fixture
def repos(db_session):
    return (
        SqlAlchemyCustomerRepository(db_session),
        SqlAlchemyLedgerEntryRepository(db_session),
        SqlAlchemyPaymentRepository(db_session),
    )


@pytest_asyncio.fixture
async def client(session_factory, locks, mock_notifier):
    """Create test client; every request gets its own session like in production"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_customer_locks] = lambda: locks
    app.dependency_overrides[get_notifier] = lambda: mock_notifier

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
