# app/services/reviews.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.settings import settings
from app.db.models import Review
from app.domain import Actor
from app.errors import ConflictError, NotFoundError, ValidationError, translate_integrity_error
from app.services.policy import ensure_can_delete, ensure_can_modify
from app.services.subjects import Subject, load_subject, lock_subject, subject_columns, subject_of

log = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _check_bounds(text: str, rating: int) -> str:
    body = (text or "").strip()
    if not body:
        raise ValidationError("Review text must not be empty")
    if len(body) > settings.review_text_max_length:
        raise ValidationError(
            f"Review text must be at most {settings.review_text_max_length} characters"
        )
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValidationError("Rating must be an integer")
    if not (settings.review_rating_min <= rating <= settings.review_rating_max):
        raise ValidationError(
            f"Rating must be between {settings.review_rating_min} and {settings.review_rating_max}"
        )
    return body


async def _load_review(session: AsyncSession, review_id: int) -> Optional[Review]:
    res = await session.execute(
        select(Review)
        .options(selectinload(Review.user))
        .where(Review.id == review_id)
        .execution_options(populate_existing=True)
    )
    return res.scalar_one_or_none()


async def _existing_review(session: AsyncSession, user_id: int, subject: Subject) -> Optional[Review]:
    column = getattr(Review, subject.column)
    res = await session.execute(
        select(Review).where(Review.user_id == user_id, column == subject.id)
    )
    return res.scalar_one_or_none()


async def refresh_average_rating(session: AsyncSession, subject: Subject) -> float:
    """
    Recompute the subject's average rating from its reviews.
    Runs inside the caller's transaction; the caller commits. The subject
    row is locked before the aggregate so concurrent writers queue up.
    """
    target = await lock_subject(session, subject)
    await session.flush()
    column = getattr(Review, subject.column)
    avg = (await session.execute(
        select(func.avg(Review.rating)).where(column == subject.id)
    )).scalar()
    value = round(float(avg), 2) if avg is not None else 0.0
    target.average_rating = value
    return value


async def _commit(session: AsyncSession, *, conflict_message: Optional[str] = None) -> None:
    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        raise translate_integrity_error(e, conflict_message=conflict_message)


# -------- Operations --------
async def list_reviews_for_subject(session: AsyncSession, subject: Subject) -> List[Review]:
    await load_subject(session, subject)

    column = getattr(Review, subject.column)
    rows = (await session.execute(
        select(Review)
        .options(selectinload(Review.user))
        .where(column == subject.id)
        .order_by(Review.created_at.desc(), Review.id.desc())
    )).scalars().all()
    return list(rows)


async def create_review(
    session: AsyncSession,
    actor: Actor,
    subject: Subject,
    text: str,
    rating: int,
) -> Review:
    body = _check_bounds(text, rating)
    await lock_subject(session, subject)

    already = f"You have already reviewed this {subject.kind}"
    if await _existing_review(session, actor.id, subject):
        raise ConflictError(already)

    now = _utcnow()
    review = Review(
        user_id=actor.id,
        text=body,
        rating=rating,
        created_at=now,
        updated_at=now,
        **subject_columns(subject),
    )
    session.add(review)
    try:
        await refresh_average_rating(session, subject)
    except IntegrityError as e:
        # the flush inside refresh_average_rating hit a constraint
        await session.rollback()
        raise translate_integrity_error(e, conflict_message=already)
    await _commit(session, conflict_message=already)

    log.info("review created id=%s user=%s %s=%s", review.id, actor.id, subject.kind, subject.id)
    created = await _load_review(session, review.id)
    assert created is not None
    return created


async def update_review(
    session: AsyncSession,
    actor: Actor,
    review_id: int,
    text: str,
    rating: int,
) -> Review:
    review = await _load_review(session, review_id)
    if review is None:
        raise NotFoundError("Review not found")
    ensure_can_modify(actor, review.user_id)
    body = _check_bounds(text, rating)

    subject = subject_of(review)
    await lock_subject(session, subject)
    review.text = body
    review.rating = rating
    review.updated_at = _utcnow()
    await refresh_average_rating(session, subject)
    await _commit(session)

    log.info("review updated id=%s user=%s", review.id, actor.id)
    updated = await _load_review(session, review_id)
    assert updated is not None
    return updated


async def delete_review(session: AsyncSession, actor: Actor, review_id: int) -> None:
    review = await session.get(Review, review_id)
    if review is None:
        raise NotFoundError("Review not found")
    ensure_can_delete(actor, review.user_id)

    subject = subject_of(review)
    await lock_subject(session, subject)
    await session.delete(review)
    await refresh_average_rating(session, subject)
    await _commit(session)

    log.info("review deleted id=%s by user=%s role=%s", review_id, actor.id, actor.role.value)


__all__ = [
    "list_reviews_for_subject",
    "create_review",
    "update_review",
    "delete_review",
    "refresh_average_rating",
]
