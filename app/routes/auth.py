# app/routes/auth.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_async_session
from app.domain import Actor
from app.errors import AuthenticationError, ConflictError
from app.schemas import LoginIn, MeOut, MessageOut, RegisterIn, TokenOut
from app.services import auth as auth_service

router = APIRouter(prefix="/auth", tags=["auth"])

# IMPORTANT: auto_error=False so we can return a clean 401 instead of framework 403
bearer_scheme = HTTPBearer(auto_error=False)


# -------- Core auth dependency --------
async def get_current_actor(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Actor:
    """Identity from the bearer token alone; no database round trip."""
    if not creds or not creds.scheme or creds.scheme.lower() != "bearer":
        raise AuthenticationError("Missing bearer token")
    return auth_service.decode_access_token(creds.credentials)


# -------- Routes --------
@router.post("/register", response_model=TokenOut, summary="Register")
async def register(payload: RegisterIn, session: AsyncSession = Depends(get_async_session)) -> TokenOut:
    try:
        issued = await auth_service.register(session, str(payload.email), payload.password)
    except ConflictError as e:
        # duplicate email is answered with a plain 400
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    return TokenOut.model_validate(issued)


@router.post("/login", response_model=TokenOut, summary="Login")
async def login(payload: LoginIn, session: AsyncSession = Depends(get_async_session)) -> TokenOut:
    issued = await auth_service.login(session, str(payload.email), payload.password)
    return TokenOut.model_validate(issued)


@router.post("/logout", response_model=MessageOut, summary="Logout")
async def logout() -> MessageOut:
    # Tokens are stateless; the client just drops its copy.
    return MessageOut(message="Successfully logged out")


@router.get("/me", response_model=MeOut, summary="Me")
async def me(
    actor: Actor = Depends(get_current_actor),
    session: AsyncSession = Depends(get_async_session),
) -> MeOut:
    user = await auth_service.get_user_by_id(session, actor.id)
    if user is None:
        raise AuthenticationError("User not found")
    return MeOut.model_validate(user)
