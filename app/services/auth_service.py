import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import commit_or_fail
from app.core.exceptions import ValidationError
from app.models.user import Role, User

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
)


def get_password_hash(password: str) -> str:
    """Hash password using argon2."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password with argon2."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # malformed or unknown hash
        return False


async def get_user_by_username(session: AsyncSession, username: str) -> Optional[User]:
    q = await session.execute(select(User).where(User.username == username))
    return q.scalars().first()


async def create_user(session: AsyncSession, username: str, password: str, role: Role = Role.USER) -> User:
    if await get_user_by_username(session, username):
        raise ValidationError("User already exists")
    user = User(username=username, hashed_password=get_password_hash(password), role=role)
    session.add(user)
    await commit_or_fail(session)
    await session.refresh(user)
    logger.info("User created", extra={"username": username, "role": role.value})
    return user


async def authenticate_user(session: AsyncSession, username: str, password: str) -> Optional[User]:
    user = await get_user_by_username(session, username)
    if not user:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


async def ensure_initial_admin(session: AsyncSession) -> Optional[User]:
    """Create the bootstrap admin from settings when configured and missing."""
    username = settings.INITIAL_ADMIN_USERNAME
    password = settings.INITIAL_ADMIN_PASSWORD
    if not username or not password:
        return None
    existing = await get_user_by_username(session, username)
    if existing:
        return existing
    return await create_user(session, username, password, Role.ADMIN)


def create_access_token(subject: str, role: str, expires_delta: Optional[timedelta] = None) -> str:
    now = datetime.now(timezone.utc)
    exp = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    payload = {"sub": str(subject), "exp": int(exp.timestamp()), "role": role}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Decode and verify a token; raises jwt.PyJWTError when invalid or expired."""
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
