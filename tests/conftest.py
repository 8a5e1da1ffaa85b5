"""
Global test fixtures and configuration.
"""

import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret")

from datetime import datetime, timedelta
from decimal import Decimal
from typing import AsyncGenerator, Dict, List

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from agrofinance.core.database import get_db
from agrofinance.core.security import create_access_token, get_password_hash
from agrofinance.main import app
from agrofinance.models import (
    Base,
    Delivery,
    DeliveryStatus,
    ItemType,
    Order,
    OrderItem,
    OrderStatus,
    User,
    UserRole,
)


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session on a fresh in-memory database."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()

    await engine.dispose()


@pytest.fixture
def override_db(db_session: AsyncSession):
    """Override the database dependency."""
    async def _get_test_db():
        yield db_session

    app.dependency_overrides[get_db] = _get_test_db
    yield
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def async_client(override_db) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


async def _create_user(session: AsyncSession, email: str, role: UserRole, full_name: str) -> User:
    user = User(
        email=email,
        full_name=full_name,
        hashed_password=get_password_hash("adminpassword123"),
        role=role,
        is_active=True,
    )
    session.add(user)
    await session.commit()
    return user


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "admin@agrolink.org", UserRole.ADMIN, "Admin User")


@pytest_asyncio.fixture
async def buyer_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "buyer@example.com", UserRole.BUYER, "Buyer User")


@pytest.fixture
def auth_headers(admin_user: User) -> Dict[str, str]:
    """Authentication headers for an administrator."""
    access_token = create_access_token(subject=admin_user.id)
    return {"Authorization": f"Bearer {access_token}"}


@pytest.fixture
def buyer_headers(buyer_user: User) -> Dict[str, str]:
    access_token = create_access_token(subject=buyer_user.id)
    return {"Authorization": f"Bearer {access_token}"}


@pytest_asyncio.fixture
async def marketplace(db_session: AsyncSession) -> Dict[str, object]:
    """
    A small marketplace history in the current month.

    - ORD-1: one inventory line (2 x 500) and one listing line (1 x 1150), delivery fee 300
    - ORD-2: a 3-day rental at 1000/day, delivery fee 200
    - ORD-3: cancelled, must never count
    Both live orders have a completed delivery by the same driver.
    """
    now = datetime.now().replace(microsecond=0)
    farmer = await _create_user(db_session, "farmer@example.com", UserRole.FARMER, "Farmer Fernando")
    driver = await _create_user(db_session, "driver@example.com", UserRole.DRIVER, "Driver Dias")

    first = Order(
        order_number="ORD-1",
        status=OrderStatus.READY,
        delivery_fee=Decimal("300.00"),
        created_at=now,
        items=[
            OrderItem(item_type=ItemType.INVENTORY, title="Fertilizer", quantity=2, price=Decimal("500.00")),
            OrderItem(
                item_type=ItemType.LISTING,
                title="Carrots",
                quantity=1,
                price=Decimal("1150.00"),
                supplier=farmer,
            ),
        ],
    )
    second = Order(
        order_number="ORD-2",
        status=OrderStatus.NOT_READY,
        delivery_fee=Decimal("200.00"),
        created_at=now - timedelta(seconds=30),
        items=[
            OrderItem(
                item_type=ItemType.RENTAL,
                title="Tractor",
                quantity=1,
                price=Decimal("1000.00"),
                rental_per_day=Decimal("1000.00"),
                rental_start_date=now,
                rental_end_date=now + timedelta(days=2),
            ),
        ],
    )
    cancelled = Order(
        order_number="ORD-3",
        status=OrderStatus.CANCELLED,
        delivery_fee=Decimal("999.00"),
        created_at=now,
        items=[OrderItem(item_type=ItemType.INVENTORY, title="Seeds", quantity=1, price=Decimal("999.00"))],
    )
    deliveries: List[Delivery] = [
        Delivery(order=first, driver=driver, status=DeliveryStatus.COMPLETED, created_at=now),
        Delivery(order=second, driver=driver, status=DeliveryStatus.COMPLETED, created_at=now),
        Delivery(order=cancelled, driver=driver, status=DeliveryStatus.CANCELLED, created_at=now),
    ]
    db_session.add_all([first, second, cancelled, *deliveries])
    await db_session.commit()

    return {"farmer": farmer, "driver": driver, "orders": [first, second, cancelled], "now": now}
