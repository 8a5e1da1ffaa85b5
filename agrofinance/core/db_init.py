"""
Database initialization module.
Create tables and the bootstrap administrator.
"""

import asyncio
from typing import Optional

from sqlalchemy import inspect, select

from agrofinance.core.database import AsyncSessionLocal, engine
from agrofinance.core.logging import get_logger, setup_logging
from agrofinance.core.security import get_password_hash
from agrofinance.models import Base, User, UserRole

logger = get_logger(__name__)


async def init_db() -> None:
    """Initialize database by creating all tables."""
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
            tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
        logger.info("database_tables_created", tables=sorted(tables))
    except Exception as e:
        logger.error("database_init_failed", error=str(e))
        raise


async def create_admin(email: str, password: str, full_name: Optional[str] = None) -> User:
    """Create an administrator, or promote and re-password an existing account."""
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(User).where(User.email == email.lower()))
        user = result.scalar_one_or_none()
        if user is None:
            user = User(email=email.lower(), full_name=full_name)
            session.add(user)
        user.role = UserRole.ADMIN
        user.is_active = True
        user.hashed_password = get_password_hash(password)
        await session.commit()
        await session.refresh(user)
    logger.info("admin_account_ready", user_id=user.id, email=user.email)
    return user


if __name__ == "__main__":
    setup_logging()
    asyncio.run(init_db())
