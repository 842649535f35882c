# app/services/policy.py
from __future__ import annotations

from app.domain import Actor, Role
from app.errors import AuthorizationError


def can_modify(actor_id: int, actor_role: Role, owner_id: int) -> bool:
    """Only the owner may edit; admins get no override here."""
    return actor_id == owner_id


def can_delete(actor_id: int, actor_role: Role, owner_id: int) -> bool:
    if actor_id == owner_id:
        return True
    if actor_role is Role.ADMIN:
        return True
    if actor_role is Role.USER:
        return False
    raise ValueError(f"unhandled role: {actor_role!r}")


def ensure_can_modify(actor: Actor, owner_id: int) -> None:
    if not can_modify(actor.id, actor.role, owner_id):
        raise AuthorizationError("You can only edit your own reviews")


def ensure_can_delete(actor: Actor, owner_id: int) -> None:
    if not can_delete(actor.id, actor.role, owner_id):
        raise AuthorizationError("You can only delete your own reviews")


def ensure_admin(actor: Actor) -> None:
    if actor.role is not Role.ADMIN:
        raise AuthorizationError("Admin access required")
