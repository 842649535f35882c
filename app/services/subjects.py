# app/services/subjects.py
"""
The thing a review or poster is attached to: a movie or a series, never both.

Inside the application a subject is a `MovieSubject` or `SeriesSubject`. The
(movie_id, series_id) nullable pair only exists at the storage boundary, see
`subject_columns` and `subject_of`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Movie, Series
from app.errors import NotFoundError, ValidationError


@dataclass(frozen=True)
class MovieSubject:
    id: int

    kind = "movie"
    model = Movie
    column = "movie_id"


@dataclass(frozen=True)
class SeriesSubject:
    id: int

    kind = "series"
    model = Series
    column = "series_id"


Subject = Union[MovieSubject, SeriesSubject]


def subject_from_ids(movie_id: Optional[int], series_id: Optional[int]) -> Subject:
    if movie_id is not None and series_id is not None:
        raise ValidationError("Specify either movie_id or series_id, not both")
    if movie_id is not None:
        return MovieSubject(movie_id)
    if series_id is not None:
        return SeriesSubject(series_id)
    raise ValidationError("Either movie_id or series_id must be provided")


def subject_columns(subject: Subject) -> Dict[str, Optional[int]]:
    if isinstance(subject, MovieSubject):
        return {"movie_id": subject.id, "series_id": None}
    if isinstance(subject, SeriesSubject):
        return {"movie_id": None, "series_id": subject.id}
    raise TypeError(f"not a subject: {subject!r}")


def subject_of(row: Any) -> Subject:
    """Read a Review/Poster row back into a Subject."""
    return subject_from_ids(row.movie_id, row.series_id)


async def load_subject(session: AsyncSession, subject: Subject) -> Union[Movie, Series]:
    obj = await session.get(subject.model, subject.id)
    if obj is None:
        raise NotFoundError(f"{subject.kind.capitalize()} not found")
    return obj


def subject_lock_statement(subject: Subject) -> Select:
    return (
        select(subject.model)
        .where(subject.model.id == subject.id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )


async def lock_subject(session: AsyncSession, subject: Subject) -> Union[Movie, Series]:
    """
    Load the subject with a row lock held until the transaction ends.
    Review writers take it first so their average-rating recompute sees
    every review committed before them. SQLite drops FOR UPDATE; its
    single writer gives the same ordering.
    """
    obj = (await session.execute(subject_lock_statement(subject))).scalar_one_or_none()
    if obj is None:
        raise NotFoundError(f"{subject.kind.capitalize()} not found")
    return obj


__all__ = [
    "MovieSubject",
    "SeriesSubject",
    "Subject",
    "subject_from_ids",
    "subject_columns",
    "subject_of",
    "load_subject",
    "lock_subject",
    "subject_lock_statement",
]
