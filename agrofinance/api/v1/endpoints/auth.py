"""
Authentication endpoints.
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agrofinance.core.database import get_db
from agrofinance.core.logging import get_logger
from agrofinance.core.security import create_access_token, verify_password
from agrofinance.models.user import User
from agrofinance.schemas.auth import Token

router = APIRouter()
logger = get_logger(__name__)


@router.post("/login", response_model=Token)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    OAuth2 compatible token login. The username is the account email.
    """
    result = await db.execute(select(User).where(User.email == form_data.username.strip().lower()))
    user = result.scalar_one_or_none()

    if not user or not user.hashed_password or not verify_password(form_data.password, user.hashed_password):
        logger.info("login_failed", email=form_data.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user",
        )

    access_token = create_access_token(subject=user.id, additional_claims={"role": user.role.value})
    logger.info("login_succeeded", user_id=user.id, role=user.role.value)

    return {"access_token": access_token, "token_type": "bearer"}
