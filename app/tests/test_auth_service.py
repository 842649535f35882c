# app/tests/test_auth_service.py
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt
from sqlalchemy import select

from app.core.settings import settings
from app.db.models import User
from app.domain import Role
from app.errors import AuthenticationError, ConflictError, ValidationError
from app.services import auth


@pytest.mark.asyncio
async def test_register_then_login_returns_token_for_same_user(session):
    registered = await auth.register(session, "Alice@Example.com", "hunter22")
    assert registered.email == "alice@example.com"
    assert registered.role is Role.USER

    logged_in = await auth.login(session, "alice@example.com", "hunter22")
    actor = auth.decode_access_token(logged_in.access_token)
    assert actor.id == registered.user_id
    assert actor.role is Role.USER


@pytest.mark.asyncio
async def test_register_same_email_twice_conflicts(session):
    await auth.register(session, "bob@example.com", "password1")
    with pytest.raises(ConflictError):
        await auth.register(session, "BOB@example.com", "password2")


@pytest.mark.asyncio
async def test_unique_email_is_authoritative_when_precheck_misses(session, monkeypatch):
    await auth.register(session, "dave@example.com", "password1")

    async def _never_found(*_a, **_k):
        return None

    # a concurrent registration committed after the lookup
    monkeypatch.setattr(auth, "get_user_by_email", _never_found)
    with pytest.raises(ConflictError):
        await auth.register(session, "dave@example.com", "password2")

    rows = (await session.execute(select(User).where(User.email == "dave@example.com"))).scalars().all()
    assert len(rows) == 1


@pytest.mark.asyncio
async def test_register_stores_hash_not_password(session):
    issued = await auth.register(session, "carol@example.com", "plaintext!")
    user = await auth.get_user_by_id(session, issued.user_id)
    assert user.password_hash != "plaintext!"
    assert auth.verify_password("plaintext!", user.password_hash)


@pytest.mark.asyncio
@pytest.mark.parametrize("email,password", [
    ("not-an-email", "password1"),
    ("dave@example.com", "short"),
    ("dave@example.com", "x" * 129),
])
async def test_register_rejects_bad_input(session, email, password):
    with pytest.raises(ValidationError):
        await auth.register(session, email, password)


@pytest.mark.asyncio
async def test_login_wrong_password_and_unknown_email(session):
    await auth.register(session, "erin@example.com", "rightpass")
    with pytest.raises(AuthenticationError):
        await auth.login(session, "erin@example.com", "wrongpass")
    with pytest.raises(AuthenticationError):
        await auth.login(session, "nobody@example.com", "rightpass")


@pytest.mark.asyncio
async def test_validate_user(session):
    await auth.register(session, "frank@example.com", "letmein1")
    assert await auth.validate_user(session, "frank@example.com", "letmein1") is True
    assert await auth.validate_user(session, "frank@example.com", "nope1234") is False
    assert await auth.validate_user(session, "ghost@example.com", "letmein1") is False


@pytest.mark.asyncio
async def test_token_carries_role_and_expiry(make_user):
    admin = await make_user("root@example.com", role=Role.ADMIN)
    issued = auth.create_access_token(admin)
    claims = jwt.decode(issued.access_token, settings.auth_secret, algorithms=[auth.ALGORITHM])
    assert claims["sub"] == str(admin.id)
    assert claims["role"] == "Admin"
    assert claims["exp"] > claims["iat"]
    assert auth.decode_access_token(issued.access_token).role is Role.ADMIN


@pytest.mark.asyncio
async def test_expired_token_rejected(make_user):
    user = await make_user("late@example.com")
    issued = auth.create_access_token(user, minutes=-1)
    with pytest.raises(AuthenticationError):
        auth.decode_access_token(issued.access_token)


def test_foreign_signature_and_garbage_rejected():
    now = datetime.now(timezone.utc)
    claims = {
        "sub": "1",
        "role": "User",
        "type": "access",
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=5)).timestamp()),
    }
    forged = jwt.encode(claims, "some-other-secret", algorithm="HS256")
    with pytest.raises(AuthenticationError):
        auth.decode_access_token(forged)
    with pytest.raises(AuthenticationError):
        auth.decode_access_token("not.a.jwt")


def test_unknown_role_claim_rejected():
    now = datetime.now(timezone.utc)
    claims = {
        "sub": "1",
        "role": "admin",  # wrong case is not a role
        "type": "access",
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=5)).timestamp()),
    }
    token = jwt.encode(claims, settings.auth_secret, algorithm="HS256")
    with pytest.raises(AuthenticationError):
        auth.decode_access_token(token)
