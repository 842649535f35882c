# app/services/auth.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from email_validator import EmailNotValidError, validate_email
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.settings import settings
from app.db.models import User
from app.domain import Actor, Role
from app.errors import AuthenticationError, ConflictError, ValidationError

log = logging.getLogger(__name__)

ALGORITHM = "HS256"
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 128

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass(frozen=True)
class IssuedToken:
    access_token: str
    user_id: int
    email: str
    role: Role
    expires_at: datetime
    token_type: str = "bearer"


# -------- Helpers --------
def _normalise_email(raw: str) -> str:
    email = (raw or "").strip().lower()
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValidationError(f"Invalid email: {e}")
    return email


def _check_password(password: str) -> None:
    if not password or not (PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH):
        raise ValidationError(
            f"Password must be between {PASSWORD_MIN_LENGTH} and {PASSWORD_MAX_LENGTH} characters"
        )


def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError):
        # malformed or unknown hash format
        return False


def create_access_token(user: User, *, minutes: Optional[int] = None) -> IssuedToken:
    now = datetime.now(timezone.utc)
    exp = now + timedelta(minutes=minutes if minutes is not None else settings.access_token_expire_minutes)
    role = user.role or Role.USER
    payload = {
        "sub": str(user.id),
        "email": user.email,
        "role": role.value,
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
        "type": "access",
    }
    token = jwt.encode(payload, settings.auth_secret, algorithm=ALGORITHM)
    return IssuedToken(
        access_token=token,
        user_id=user.id,
        email=user.email,
        role=role,
        expires_at=exp,
    )


def decode_access_token(token: str) -> Actor:
    """Verify signature and expiry; no database access."""
    try:
        data = jwt.decode(token, settings.auth_secret, algorithms=[ALGORITHM])
    except JWTError:
        raise AuthenticationError("Invalid or expired token")

    if data.get("type") != "access":
        raise AuthenticationError("Invalid token")
    sub = data.get("sub")
    if not sub:
        raise AuthenticationError("Invalid token")
    try:
        return Actor(id=int(sub), role=Role.parse(data.get("role")))
    except ValueError:
        raise AuthenticationError("Invalid token")


# -------- Lookups --------
async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    res = await session.execute(select(User).where(User.email == (email or "").strip().lower()))
    return res.scalar_one_or_none()


async def get_user_by_id(session: AsyncSession, user_id: int) -> Optional[User]:
    return await session.get(User, user_id)


async def validate_user(session: AsyncSession, email: str, password: str) -> bool:
    user = await get_user_by_email(session, email)
    return user is not None and verify_password(password, user.password_hash)


# -------- Operations --------
async def register(session: AsyncSession, email: str, password: str) -> IssuedToken:
    email = _normalise_email(email)
    _check_password(password)

    if await get_user_by_email(session, email):
        raise ConflictError("Email already registered")

    user = User(email=email, password_hash=hash_password(password), role=Role.USER)
    session.add(user)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise ConflictError("Email already registered")
    await session.refresh(user)

    log.info("registered user id=%s", user.id)
    return create_access_token(user)


async def login(session: AsyncSession, email: str, password: str) -> IssuedToken:
    user = await get_user_by_email(session, email)
    if user is None or not verify_password(password, user.password_hash):
        log.warning("failed login attempt")
        raise AuthenticationError("Invalid credentials")
    return create_access_token(user)


__all__ = [
    "IssuedToken",
    "pwd_context",
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_access_token",
    "get_user_by_email",
    "get_user_by_id",
    "validate_user",
    "register",
    "login",
]
