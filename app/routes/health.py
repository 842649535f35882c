# app/routes/health.py
from __future__ import annotations

import logging

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.db.session import engine

log = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


# --- simple DB ping ---------------------------------------------------------
async def ping_db() -> bool:
    try:
        async with engine.connect() as conn:
            res = await conn.execute(text("SELECT 1"))
            return res.scalar() == 1
    except (SQLAlchemyError, OSError) as e:
        log.warning("db ping failed: %s", e)
        return False


@router.get("/health", summary="Liveness")
async def health():
    # super cheap liveness (no external deps)
    return {"ok": True}


@router.get("/ready", summary="Readiness")
async def ready():
    db_ok = await ping_db()
    return {"ok": db_ok, "db": db_ok}
