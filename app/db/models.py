# app/db/models.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
    text as sql_text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from app.domain import REVIEW_TEXT_COLUMN_LENGTH, Role

# Shared by reviews and posters: exactly one of movie_id / series_id.
MOVIE_OR_SERIES_SQL = (
    "(movie_id IS NOT NULL AND series_id IS NULL) "
    "OR (movie_id IS NULL AND series_id IS NOT NULL)"
)


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[Role] = mapped_column(
        Enum(
            Role,
            name="user_role",
            native_enum=False,
            length=16,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=Role.USER,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    reviews: Mapped[list["Review"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )


class Movie(Base):
    __tablename__ = "movies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    director: Mapped[str] = mapped_column(String(100), nullable=False)
    genre: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    release_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    box_office: Mapped[Decimal | None] = mapped_column(Numeric(18, 2), nullable=True)
    # Recomputed by the review workflow on every review write.
    average_rating: Mapped[float] = mapped_column(
        Float, nullable=False, default=0.0, server_default=sql_text("0")
    )

    reviews: Mapped[list["Review"]] = relationship(
        back_populates="movie", cascade="all, delete-orphan", passive_deletes=True
    )
    posters: Mapped[list["Poster"]] = relationship(
        back_populates="movie", cascade="all, delete-orphan", passive_deletes=True
    )


class Series(Base):
    __tablename__ = "series"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    genre: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    seasons: Mapped[int | None] = mapped_column(Integer, nullable=True)
    average_rating: Mapped[float] = mapped_column(
        Float, nullable=False, default=0.0, server_default=sql_text("0")
    )

    reviews: Mapped[list["Review"]] = relationship(
        back_populates="series", cascade="all, delete-orphan", passive_deletes=True
    )
    posters: Mapped[list["Poster"]] = relationship(
        back_populates="series", cascade="all, delete-orphan", passive_deletes=True
    )


class Poster(Base):
    __tablename__ = "posters"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    mime_type: Mapped[str] = mapped_column(String(100), nullable=False)
    movie_id: Mapped[int | None] = mapped_column(
        ForeignKey("movies.id", ondelete="CASCADE"), nullable=True, index=True
    )
    series_id: Mapped[int | None] = mapped_column(
        ForeignKey("series.id", ondelete="CASCADE"), nullable=True, index=True
    )

    movie: Mapped[Optional["Movie"]] = relationship(back_populates="posters")
    series: Mapped[Optional["Series"]] = relationship(back_populates="posters")

    __table_args__ = (
        CheckConstraint(MOVIE_OR_SERIES_SQL, name="ck_posters_movie_or_series"),
    )


class Review(Base):
    __tablename__ = "reviews"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    movie_id: Mapped[int | None] = mapped_column(
        ForeignKey("movies.id", ondelete="CASCADE"), nullable=True, index=True
    )
    series_id: Mapped[int | None] = mapped_column(
        ForeignKey("series.id", ondelete="CASCADE"), nullable=True, index=True
    )
    text: Mapped[str] = mapped_column(String(REVIEW_TEXT_COLUMN_LENGTH), nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    user: Mapped["User"] = relationship(back_populates="reviews")
    movie: Mapped[Optional["Movie"]] = relationship(back_populates="reviews")
    series: Mapped[Optional["Series"]] = relationship(back_populates="reviews")

    # NULLs are distinct in a composite unique index, so one partial index per subject kind.
    __table_args__ = (
        CheckConstraint(MOVIE_OR_SERIES_SQL, name="ck_reviews_movie_or_series"),
        Index(
            "uq_reviews_user_movie",
            "user_id",
            "movie_id",
            unique=True,
            postgresql_where=sql_text("movie_id IS NOT NULL"),
            sqlite_where=sql_text("movie_id IS NOT NULL"),
        ),
        Index(
            "uq_reviews_user_series",
            "user_id",
            "series_id",
            unique=True,
            postgresql_where=sql_text("series_id IS NOT NULL"),
            sqlite_where=sql_text("series_id IS NOT NULL"),
        ),
    )


__all__ = [
    "Base",
    "User",
    "Movie",
    "Series",
    "Poster",
    "Review",
    "MOVIE_OR_SERIES_SQL",
]
