"""
Authentication endpoints: register and login.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from turf_booking.db.session import get_db
from turf_booking.models.user import Role
from turf_booking.schemas.user import UserCreate, UserResponse, UserLogin, Token
from turf_booking.services.auth_service import register_user, authenticate_user
from turf_booking.services.cache_service import invalidate_turf_cache

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, db: AsyncSession = Depends(get_db)):
    """Register a user or an owner; owners may publish their first turf here."""
    user = await register_user(db, user_data)
    if user.role == Role.OWNER.value:
        await db.commit()
        await invalidate_turf_cache()
    return user


@router.post("/login", response_model=Token)
async def login(login_data: UserLogin, db: AsyncSession = Depends(get_db)):
    """Authenticate and receive a JWT access token."""
    token = await authenticate_user(db, login_data)
    return Token(access_token=token)
