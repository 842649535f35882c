# app/schemas.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.domain import Role


# ── Auth ─────────────────────────────────────────────────────────────────────

class RegisterIn(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)


class LoginIn(BaseModel):
    # Not EmailStr: a malformed address is a failed login, not a bad request.
    email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=128)


class TokenOut(BaseModel):
    access_token: str
    token_type: Literal["bearer"] = "bearer"
    user_id: int
    email: EmailStr
    role: Role
    expires_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MeOut(BaseModel):
    id: int
    email: EmailStr
    role: Role
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MessageOut(BaseModel):
    message: str


# ── Reviews ──────────────────────────────────────────────────────────────────

class ReviewCreate(BaseModel):
    """Exactly one of movie_id / series_id; checked by the review workflow."""
    movie_id: Optional[int] = None
    series_id: Optional[int] = None
    text: str
    rating: int


class ReviewUpdate(BaseModel):
    text: str
    rating: int


class ReviewOut(BaseModel):
    id: int
    text: str
    rating: int
    user_id: int
    user_email: str
    movie_id: Optional[int] = None
    series_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_review(cls, r) -> "ReviewOut":
        return cls(
            id=r.id,
            text=r.text,
            rating=r.rating,
            user_id=r.user_id,
            user_email=r.user.email,
            movie_id=r.movie_id,
            series_id=r.series_id,
            created_at=r.created_at,
            updated_at=r.updated_at,
        )


# ── Catalogue ────────────────────────────────────────────────────────────────

class PosterIn(BaseModel):
    movie_id: Optional[int] = None
    series_id: Optional[int] = None
    url: str = Field(min_length=1)
    mime_type: str = Field(min_length=1, max_length=100)


class PosterOut(BaseModel):
    id: int
    url: str
    mime_type: str
    movie_id: Optional[int] = None
    series_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class MovieOut(BaseModel):
    id: int
    title: str
    director: str
    genre: str
    release_year: Optional[int] = None
    box_office: Optional[Decimal] = None
    average_rating: float = 0.0

    model_config = ConfigDict(from_attributes=True)


class MovieDetailOut(MovieOut):
    posters: List[PosterOut] = []


class SeriesOut(BaseModel):
    id: int
    title: str
    genre: str
    seasons: Optional[int] = None
    average_rating: float = 0.0

    model_config = ConfigDict(from_attributes=True)


class SeriesDetailOut(SeriesOut):
    posters: List[PosterOut] = []
