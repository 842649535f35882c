# app/security.py
from __future__ import annotations

from fastapi import Depends

from app.domain import Actor
from app.routes.auth import get_current_actor
from app.services.policy import ensure_admin


def require_user(
    current: Actor = Depends(get_current_actor),
) -> Actor:
    """
    Auth-only dependency.
    Ownership checks happen in the services, where the resource is loaded.
    """
    return current


def require_admin(
    current: Actor = Depends(get_current_actor),
) -> Actor:
    """Guard for admin-only routes (403 for authenticated non-admins)."""
    ensure_admin(current)
    return current
