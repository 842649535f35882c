# app/services/catalog.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.db.models import Movie, Series
from app.errors import NotFoundError, ValidationError

_MOVIE_SORTS: Dict[str, Any] = {
    "title": Movie.title.asc(),
    "-title": Movie.title.desc(),
    "rating": Movie.average_rating.asc(),
    "-rating": Movie.average_rating.desc(),
    "year": Movie.release_year.asc(),
    "-year": Movie.release_year.desc(),
}

_SERIES_SORTS: Dict[str, Any] = {
    "title": Series.title.asc(),
    "-title": Series.title.desc(),
    "rating": Series.average_rating.asc(),
    "-rating": Series.average_rating.desc(),
}


def _order_by(sorts: Dict[str, Any], sort: str):
    try:
        return sorts[sort]
    except KeyError:
        raise ValidationError(f"Unknown sort '{sort}'. Use one of: {', '.join(sorts)}")


async def list_movies(session: AsyncSession, genre: Optional[str] = None, sort: str = "title") -> List[Movie]:
    stmt = select(Movie).order_by(_order_by(_MOVIE_SORTS, sort), Movie.id.asc())
    if genre:
        stmt = stmt.where(func.lower(Movie.genre) == genre.strip().lower())
    return list((await session.execute(stmt)).scalars().all())


async def get_movie(session: AsyncSession, movie_id: int) -> Movie:
    res = await session.execute(
        select(Movie).options(selectinload(Movie.posters)).where(Movie.id == movie_id)
    )
    movie = res.scalar_one_or_none()
    if movie is None:
        raise NotFoundError("Movie not found")
    return movie


async def list_series(session: AsyncSession, genre: Optional[str] = None, sort: str = "title") -> List[Series]:
    stmt = select(Series).order_by(_order_by(_SERIES_SORTS, sort), Series.id.asc())
    if genre:
        stmt = stmt.where(func.lower(Series.genre) == genre.strip().lower())
    return list((await session.execute(stmt)).scalars().all())


async def get_series(session: AsyncSession, series_id: int) -> Series:
    res = await session.execute(
        select(Series).options(selectinload(Series.posters)).where(Series.id == series_id)
    )
    series = res.scalar_one_or_none()
    if series is None:
        raise NotFoundError("Series not found")
    return series
