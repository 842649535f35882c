# app/domain.py
from __future__ import annotations

import enum
from dataclasses import dataclass

# Width of reviews.text; the configurable limit may only tighten it.
REVIEW_TEXT_COLUMN_LENGTH = 2000


class Role(str, enum.Enum):
    """Closed set of account roles. Stored as its value ("User"/"Admin")."""

    USER = "User"
    ADMIN = "Admin"

    @classmethod
    def parse(cls, raw: object) -> "Role":
        """Strict lookup by value; raises ValueError for anything else."""
        for member in cls:
            if raw == member.value:
                return member
        raise ValueError(f"unknown role: {raw!r}")


@dataclass(frozen=True)
class Actor:
    """The authenticated requester, as carried by the access token."""

    id: int
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


__all__ = ["Role", "Actor"]
