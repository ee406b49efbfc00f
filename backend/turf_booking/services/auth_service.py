"""
Authentication service handling user registration and login.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from turf_booking.models.turf import Turf
from turf_booking.models.user import User, Role
from turf_booking.schemas.user import UserCreate, UserLogin
from turf_booking.core.security import hash_password, verify_password, create_access_token
from turf_booking.core.logging import get_logger

logger = get_logger(__name__)


async def register_user(db: AsyncSession, user_data: UserCreate) -> User:
    """
    Register a new user with hashed password.
    An owner who supplies turf details gets that turf published in the
    same transaction. Raises 409 if the email already exists.
    """
    result = await db.execute(select(User).where(User.email == user_data.email))
    if result.scalar_one_or_none():
        logger.warning("registration_failed", reason="email_exists", email=user_data.email)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        )

    user = User(
        name=user_data.name,
        email=user_data.email,
        hashed_password=hash_password(user_data.password),
        role=user_data.role.value,
    )
    db.add(user)
    await db.flush()

    turf_details = (user_data.turf_name, user_data.location, user_data.image_url)
    if user_data.role is Role.OWNER and all(turf_details):
        turf = Turf(
            name=user_data.turf_name,
            location=user_data.location,
            image_url=user_data.image_url,
            owner_id=user.id,
        )
        db.add(turf)
        await db.flush()
        logger.info("turf_created", turf_id=turf.id, owner_id=user.id, name=turf.name)

    await db.refresh(user)

    logger.info("user_registered", user_id=user.id, email=user.email, role=user.role)
    return user


async def authenticate_user(db: AsyncSession, login_data: UserLogin) -> str:
    """
    Authenticate user and return JWT access token carrying id and role.
    Raises 401 if credentials are invalid.
    """
    result = await db.execute(select(User).where(User.email == login_data.email))
    user = result.scalar_one_or_none()

    if not user or not verify_password(login_data.password, user.hashed_password):
        logger.warning("login_failed", email=login_data.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = create_access_token(data={"sub": str(user.id), "role": user.role})
    logger.info("user_logged_in", user_id=user.id)
    return token
