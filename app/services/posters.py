# app/services/posters.py
from __future__ import annotations

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Poster
from app.domain import Actor
from app.errors import ValidationError, translate_integrity_error
from app.services.policy import ensure_admin
from app.services.subjects import Subject, load_subject, subject_columns

log = logging.getLogger(__name__)


async def add_poster(
    session: AsyncSession,
    actor: Actor,
    subject: Subject,
    url: str,
    mime_type: str,
) -> Poster:
    """Attach a poster image to a movie or series. Admins only."""
    ensure_admin(actor)

    url = (url or "").strip()
    mime_type = (mime_type or "").strip().lower()
    if not url:
        raise ValidationError("Poster url must not be empty")
    if not mime_type.startswith("image/") or len(mime_type) > 100:
        raise ValidationError("Poster mime_type must be an image/* type")

    await load_subject(session, subject)

    poster = Poster(url=url, mime_type=mime_type, **subject_columns(subject))
    session.add(poster)
    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        raise translate_integrity_error(e)
    await session.refresh(poster)

    log.info("poster added id=%s %s=%s", poster.id, subject.kind, subject.id)
    return poster


async def list_posters(session: AsyncSession, subject: Subject) -> List[Poster]:
    await load_subject(session, subject)
    column = getattr(Poster, subject.column)
    rows = (await session.execute(
        select(Poster).where(column == subject.id).order_by(Poster.id.asc())
    )).scalars().all()
    return list(rows)
