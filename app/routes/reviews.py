# app/routes/reviews.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_async_session
from app.domain import Actor
from app.schemas import ReviewCreate, ReviewOut, ReviewUpdate
from app.security import require_user
from app.services import reviews as review_service
from app.services.subjects import MovieSubject, SeriesSubject, subject_from_ids

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.get("/movies/{movie_id}", response_model=List[ReviewOut], summary="Reviews for a movie, newest first")
async def list_movie_reviews(
    movie_id: int = Path(...),
    session: AsyncSession = Depends(get_async_session),
) -> List[ReviewOut]:
    rows = await review_service.list_reviews_for_subject(session, MovieSubject(movie_id))
    return [ReviewOut.from_review(r) for r in rows]


@router.get("/series/{series_id}", response_model=List[ReviewOut], summary="Reviews for a series, newest first")
async def list_series_reviews(
    series_id: int = Path(...),
    session: AsyncSession = Depends(get_async_session),
) -> List[ReviewOut]:
    rows = await review_service.list_reviews_for_subject(session, SeriesSubject(series_id))
    return [ReviewOut.from_review(r) for r in rows]


@router.post("", response_model=ReviewOut, status_code=status.HTTP_201_CREATED, summary="Create a review")
async def create_review(
    payload: ReviewCreate,
    actor: Actor = Depends(require_user),
    session: AsyncSession = Depends(get_async_session),
) -> ReviewOut:
    subject = subject_from_ids(payload.movie_id, payload.series_id)
    review = await review_service.create_review(session, actor, subject, payload.text, payload.rating)
    return ReviewOut.from_review(review)


@router.put("/{review_id}", response_model=ReviewOut, summary="Edit your review")
async def update_review(
    payload: ReviewUpdate,
    review_id: int = Path(...),
    actor: Actor = Depends(require_user),
    session: AsyncSession = Depends(get_async_session),
) -> ReviewOut:
    review = await review_service.update_review(session, actor, review_id, payload.text, payload.rating)
    return ReviewOut.from_review(review)


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a review (owner or admin)")
async def delete_review(
    review_id: int = Path(...),
    actor: Actor = Depends(require_user),
    session: AsyncSession = Depends(get_async_session),
) -> Response:
    await review_service.delete_review(session, actor, review_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
