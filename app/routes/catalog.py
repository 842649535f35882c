# app/routes/catalog.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_async_session
from app.domain import Actor
from app.schemas import (
    MovieDetailOut,
    MovieOut,
    PosterIn,
    PosterOut,
    SeriesDetailOut,
    SeriesOut,
)
from app.security import require_admin
from app.services import catalog, posters
from app.services.subjects import subject_from_ids

router = APIRouter(tags=["catalog"])


@router.get("/movies", response_model=List[MovieOut], summary="Browse movies")
async def list_movies(
    genre: Optional[str] = Query(None, max_length=100),
    sort: str = Query("title", description="title, -title, rating, -rating, year, -year"),
    session: AsyncSession = Depends(get_async_session),
):
    return await catalog.list_movies(session, genre=genre, sort=sort)


@router.get("/movies/{movie_id}", response_model=MovieDetailOut, summary="Movie details with posters")
async def get_movie(
    movie_id: int = Path(...),
    session: AsyncSession = Depends(get_async_session),
):
    return await catalog.get_movie(session, movie_id)


@router.get("/series", response_model=List[SeriesOut], summary="Browse series")
async def list_series(
    genre: Optional[str] = Query(None, max_length=100),
    sort: str = Query("title", description="title, -title, rating, -rating"),
    session: AsyncSession = Depends(get_async_session),
):
    return await catalog.list_series(session, genre=genre, sort=sort)


@router.get("/series/{series_id}", response_model=SeriesDetailOut, summary="Series details with posters")
async def get_series(
    series_id: int = Path(...),
    session: AsyncSession = Depends(get_async_session),
):
    return await catalog.get_series(session, series_id)


@router.post("/posters", response_model=PosterOut, status_code=status.HTTP_201_CREATED, summary="Attach a poster (admin)")
async def add_poster(
    payload: PosterIn,
    actor: Actor = Depends(require_admin),
    session: AsyncSession = Depends(get_async_session),
):
    subject = subject_from_ids(payload.movie_id, payload.series_id)
    return await posters.add_poster(session, actor, subject, payload.url, payload.mime_type)
