"""
Pytest configuration and shared fixtures.

Tests run against an in-memory SQLite database (aiosqlite). The engine
is configured so SAVEPOINTs (``session.begin_nested()``) behave as on
PostgreSQL.
"""

import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import datetime
from decimal import Decimal
from typing import Any

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_FILE", "")

import dramatiq
import pytest
import pytest_asyncio
from dramatiq.brokers.stub import StubBroker
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Actors register against the stub broker instead of Redis
dramatiq.set_broker(StubBroker())

from commission_engine.models import (  # noqa: E402
    Affiliate,
    Base,
    Transaction,
    TransactionStatus,
    TransactionType,
    ValidationModel,
)
from commission_engine.services.audit_service import AuditService  # noqa: E402
from commission_engine.services.commission.transaction_validator import (  # noqa: E402
    CpaValidationInput,
)
from commission_engine.services.event_publisher import EventPublisher  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# ==================== PYTEST CONFIGURATION ====================


def pytest_configure(config: Any) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "critical: marks tests as critical")
    config.addinivalue_line("markers", "integration: marks integration tests")


# ==================== DATABASE FIXTURES ====================


@pytest_asyncio.fixture
async def test_db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite transaction handling breaks SAVEPOINT; emit BEGIN ourselves
    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(
    test_db_engine: AsyncEngine,  # pylint: disable=redefined-outer-name
) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    session_maker = async_sessionmaker(
        test_db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with session_maker() as session:
        yield session
        await session.rollback()


# ==================== FACTORIES ====================


@pytest_asyncio.fixture
async def create_affiliate(
    db_session: AsyncSession,  # pylint: disable=redefined-outer-name
) -> Callable[..., Awaitable[Affiliate]]:
    """Factory for persisted affiliates."""

    async def _create(
        affiliate_id: str,
        sponsor_id: str | None = None,
        category: str = "jogador",
        category_level: int = 1,
        **fields: Any,
    ) -> Affiliate:
        affiliate = Affiliate(
            id=affiliate_id,
            sponsor_id=sponsor_id,
            category=category,
            category_level=category_level,
            **fields,
        )
        db_session.add(affiliate)
        await db_session.commit()
        return affiliate

    return _create


@pytest_asyncio.fixture
async def create_transaction(
    db_session: AsyncSession,  # pylint: disable=redefined-outer-name
) -> Callable[..., Awaitable[Transaction]]:
    """Factory for persisted customer transactions."""

    async def _create(
        transaction_id: str,
        customer_id: str = "cust-1",
        amount: Decimal | str = "50.00",
        type: str = TransactionType.DEPOSIT.value,
        status: str = TransactionStatus.COMPLETED.value,
        affiliate_id: str | None = "aff-A",
        created_at: datetime | None = None,
    ) -> Transaction:
        transaction = Transaction(
            id=transaction_id,
            customer_id=customer_id,
            affiliate_id=affiliate_id,
            type=type,
            amount=Decimal(str(amount)),
            status=status,
        )
        if created_at is not None:
            transaction.created_at = created_at
        db_session.add(transaction)
        await db_session.commit()
        return transaction

    return _create


@pytest.fixture
def event_publisher(
    db_session: AsyncSession,  # pylint: disable=redefined-outer-name
) -> EventPublisher:
    """Outbox writer bound to the test session."""
    return EventPublisher(db_session)


@pytest.fixture
def audit_service(
    db_session: AsyncSession,  # pylint: disable=redefined-outer-name
) -> AuditService:
    """Audit writer bound to the test session."""
    return AuditService(db_session)


@pytest.fixture
def make_input() -> Callable[..., CpaValidationInput]:
    """Builder for validated-transaction events."""

    def _make(
        transaction_id: str = "tx-1",
        affiliate_id: str = "aff-A",
        customer_id: str = "cust-1",
        validation_model: str = ValidationModel.FIRST_DEPOSIT.value,
        transaction_type: str = TransactionType.DEPOSIT.value,
        transaction_amount: Decimal | str = "50.00",
    ) -> CpaValidationInput:
        return CpaValidationInput(
            affiliate_id=affiliate_id,
            customer_id=customer_id,
            transaction_id=transaction_id,
            validation_model=validation_model,
            transaction_type=transaction_type,
            transaction_amount=Decimal(str(transaction_amount)),
        )

    return _make
